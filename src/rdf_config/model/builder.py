"""
Model Builder

Turns the nested schema document of ``model.yaml`` into an explicit graph
of subjects and an ordered list of triples.

A schema document is a list of subject definitions. Each definition is a
single-key mapping from a subject key to a list of predicate/object
mappings:

    - Person ex:person1:
      - a: foaf:Person
      - foaf:name:
        - name: "Alice"
      - ex:address?:
        - []:
          - ex:city:
            - city: "Tokyo"

A string key is split on its first whitespace into the subject name and
an example value. A sequence key (a tuple once loaded) marks a blank node.
Triples are emitted depth first in declaration order; a triple reached
through blank nodes carries the whole predicate path from its named
ancestor.
"""

import logging
import re
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Set, Tuple

from .models import (
    URI,
    BlankNode,
    Cardinality,
    Literal,
    Predicate,
    Reference,
    Subject,
    Triple,
    Unknown,
)


logger = logging.getLogger(__name__)

RANGE_CARDINALITY = re.compile(r"\{\s*(\d*)\s*(?:(,)\s*(\d*)\s*)?\}\Z")
CHAR_CARDINALITY = {
    "?": Cardinality(min=0, max=1),
    "*": Cardinality(min=0, max=None),
    "+": Cardinality(min=1, max=None),
}
PREFIXED_NAME = re.compile(r"\A([\w.-]*):")


def parse_subject_key(key: Any) -> Tuple[Any, Optional[str]]:
    """Split a subject key into (name, example value)"""
    if isinstance(key, (tuple, list)):
        return tuple(key), None

    parts = str(key).split(None, 1)
    if len(parts) == 2:
        return parts[0], parts[1]
    return parts[0], None


def parse_predicate(label: str) -> Predicate:
    """
    Strip a trailing cardinality marker from a predicate label.

    Supports ``?``, ``*``, ``+``, ``{n}``, ``{min,max}`` and open ranges
    such as ``{1,}`` or ``{,3}``.
    """
    label = str(label).strip()
    last_char = label[-1:]

    if last_char in CHAR_CARDINALITY and len(label) > 1:
        return Predicate(uri=label[:-1], cardinality=CHAR_CARDINALITY[last_char])

    if last_char == "}":
        match = RANGE_CARDINALITY.search(label)
        if match is not None:
            low, comma, high = match.groups()
            uri = label[:match.start()]
            if comma is None:
                bound = int(low) if low else None
                return Predicate(uri=uri, cardinality=Cardinality(min=bound, max=bound))
            return Predicate(
                uri=uri,
                cardinality=Cardinality(
                    min=int(low) if low else None,
                    max=int(high) if high else None
                )
            )

    return Predicate(uri=label)


def is_uri_value(value: Any, prefixes: Dict[str, str]) -> bool:
    """Angle-bracket IRIs and names with a declared prefix are URIs"""
    if not isinstance(value, str):
        return False
    if value.startswith("<") and value.endswith(">") and len(value) > 2:
        return True
    match = PREFIXED_NAME.match(value)
    return match is not None and match.group(1) in prefixes


@dataclass
class _SubjectDraft:
    """Subject under construction"""
    name: Any
    value: Optional[str] = None
    predicates: List["_PredicateDraft"] = field(default_factory=list)
    referenced_by: List[Reference] = field(default_factory=list)


@dataclass
class _PredicateDraft:
    """Predicate under construction; objects may hold nested subject drafts"""
    predicate: Predicate
    objects: List[Any] = field(default_factory=list)

    @property
    def uri(self) -> str:
        return self.predicate.uri


@dataclass
class _TripleDraft:
    ancestor: _SubjectDraft
    path: Tuple[_PredicateDraft, ...]
    obj: Any
    reference: Optional[str] = None


class ModelBuilder:
    """
    Build the subject graph and triple list from a schema document.

    Construction collects into drafts; ``build`` then freezes them into
    immutable models shared by every triple.
    """

    def __init__(self, document: List[Dict[str, Any]], prefixes: Dict[str, str]):
        self.document = document or []
        self.prefixes = prefixes or {}

        self._drafts: Dict[str, _SubjectDraft] = {}
        self._frozen: Dict[int, Any] = {}

    def build(self) -> Tuple[List[Subject], List[Triple]]:
        """
        Run both construction passes.

        The first pass registers every named subject so that object values
        can refer to subjects declared later in the document.

        Returns:
            Named subjects in declaration order and triples in
            depth-first declaration order
        """
        for definition in self.document:
            name, value = parse_subject_key(self._definition_key(definition))
            if isinstance(name, str):
                self._drafts[name] = _SubjectDraft(name=name, value=value)

        order: List[_SubjectDraft] = []
        seen: Set[str] = set()
        drafts: List[_TripleDraft] = []
        for definition in self.document:
            key = self._definition_key(definition)
            name, _ = parse_subject_key(key)
            if not isinstance(name, str):
                logger.debug("Ignoring top-level blank node definition")
                continue

            # A repeated definition extends the subject declared first
            subject = self._drafts[name]
            if name not in seen:
                seen.add(name)
                order.append(subject)
            drafts.extend(self._add_predicates(subject, subject, definition[key], ()))

        subjects = [self._freeze_subject(draft) for draft in order]
        triples = [self._freeze_triple(draft) for draft in drafts]

        logger.debug(f"Built model: {len(subjects)} subjects, {len(triples)} triples")
        return subjects, triples

    @staticmethod
    def _definition_key(definition: Dict[str, Any]) -> Any:
        return next(iter(definition))

    def _add_predicates(
        self,
        subject: _SubjectDraft,
        ancestor: _SubjectDraft,
        predicate_objects: Any,
        path: Tuple[_PredicateDraft, ...]
    ) -> List[_TripleDraft]:
        """
        Attach predicates to ``subject`` and emit triples for ``ancestor``.

        Args:
            subject: Subject owning the predicates (a blank node when nested)
            ancestor: Nearest named subject, origin of every emitted triple
            predicate_objects: List of single-key predicate/object mappings
            path: Predicates traversed from ``ancestor`` to ``subject``

        Returns:
            Triples in declaration order
        """
        triples: List[_TripleDraft] = []
        if isinstance(predicate_objects, dict):
            predicate_objects = [{k: v} for k, v in predicate_objects.items()]

        for predicate_object in predicate_objects or []:
            for label, object_data in predicate_object.items():
                predicate = _PredicateDraft(parse_predicate(label))
                subject.predicates.append(predicate)

                predicate_path = path + (predicate,)
                for obj, nested in self._parse_objects(object_data, predicate_path):
                    predicate.objects.append(obj)
                    if isinstance(obj, _SubjectDraft):
                        triples.extend(
                            self._add_predicates(obj, ancestor, nested, predicate_path)
                        )
                    else:
                        triples.append(self._create_triple(ancestor, predicate_path, obj))

        return triples

    def _create_triple(
        self,
        ancestor: _SubjectDraft,
        path: Tuple[_PredicateDraft, ...],
        obj: Any
    ) -> _TripleDraft:
        if (
            not path[-1].predicate.is_rdf_type
            and isinstance(obj.value, str)
            and obj.value in self._drafts
        ):
            self._drafts[obj.value].referenced_by.append(
                Reference(
                    subject_name=ancestor.name,
                    property_path="/".join(p.uri for p in path)
                )
            )
            return _TripleDraft(ancestor, path, obj, reference=obj.value)

        return _TripleDraft(ancestor, path, obj)

    def _parse_objects(
        self,
        object_data: Any,
        path: Tuple[_PredicateDraft, ...]
    ) -> List[Tuple[Any, Any]]:
        """
        Fan object data out into one object per entry.

        Returns:
            (object, nested predicate/object list) pairs; the second item
            is only set for blank nodes
        """
        if object_data is None:
            return []
        if isinstance(object_data, list):
            objects = []
            for entry in object_data:
                if isinstance(entry, list):
                    objects.extend(self._object_instance(e, path) for e in entry)
                elif entry is not None:
                    objects.append(self._object_instance(entry, path))
            return objects
        return [self._object_instance(object_data, path)]

    def _object_instance(self, data: Any, path: Tuple[_PredicateDraft, ...]) -> Tuple[Any, Any]:
        if isinstance(data, dict):
            name = next(iter(data))
            value = data[name]
            if isinstance(name, (tuple, list)):
                return _SubjectDraft(name=tuple(p.uri for p in path)), value
            name = str(name)
        else:
            name = None
            value = data

        if value is None:
            return Unknown(name=name), None
        if is_uri_value(value, self.prefixes):
            return URI(name=name, value=value), None
        return Literal(name=name, value=value), None

    def _freeze_subject(self, draft: _SubjectDraft) -> Subject:
        if id(draft) not in self._frozen:
            self._frozen[id(draft)] = Subject(
                name=draft.name,
                value=draft.value,
                predicates=tuple(self._freeze_predicate(p) for p in draft.predicates),
                referenced_by=tuple(draft.referenced_by)
            )
        return self._frozen[id(draft)]

    def _freeze_predicate(self, draft: _PredicateDraft) -> Predicate:
        if id(draft) not in self._frozen:
            objects = tuple(
                BlankNode(value=self._freeze_subject(obj)) if isinstance(obj, _SubjectDraft) else obj
                for obj in draft.objects
            )
            self._frozen[id(draft)] = Predicate(
                uri=draft.predicate.uri,
                cardinality=draft.predicate.cardinality,
                objects=objects
            )
        return self._frozen[id(draft)]

    def _freeze_triple(self, draft: _TripleDraft) -> Triple:
        terminal = draft.obj
        if draft.reference is not None:
            terminal = self._freeze_subject(self._drafts[draft.reference])

        return Triple(
            subject=self._freeze_subject(draft.ancestor),
            predicates=tuple(self._freeze_predicate(p) for p in draft.path),
            object=terminal,
            object_name=draft.obj.name
        )
