import logging
from typing import Any, Dict, List, Optional

from .builder import ModelBuilder
from .models import Subject, Triple


logger = logging.getLogger(__name__)


class Model:
    """
    Immutable subject graph and triple list of one schema.

    Built eagerly at construction and shared read-only by the SPARQL
    builders and any other consumer.
    """

    def __init__(self, document: List[Dict[str, Any]], prefixes: Dict[str, str]):
        self.prefixes = dict(prefixes or {})
        self._subjects, self._triples = ModelBuilder(document, self.prefixes).build()
        self._subjects_by_name = {subject.name: subject for subject in self._subjects}

    @classmethod
    def from_config(cls, config) -> "Model":
        """Build the model from a loaded configuration directory"""
        return cls(config.model, config.prefix)

    @property
    def subjects(self) -> List[Subject]:
        return list(self._subjects)

    @property
    def triples(self) -> List[Triple]:
        return list(self._triples)

    @property
    def subject_names(self) -> List[str]:
        return [subject.name for subject in self._subjects]

    def is_subject(self, name: str) -> bool:
        return name in self._subjects_by_name

    def find_subject(self, name: str) -> Optional[Subject]:
        return self._subjects_by_name.get(name)

    def find_by_object_name(self, name: str) -> Optional[Triple]:
        """First triple whose terminal binds the variable ``name``"""
        for triple in self._triples:
            if triple.object_name == name:
                return triple
        return None

    def find_object(self, name: str) -> Optional[Any]:
        """Terminal of the triple binding ``name`` (an object or a reused subject)"""
        triple = self.find_by_object_name(name)
        return triple.object if triple is not None else None

    def bnode_rdf_types(self, triple: Triple) -> List[Optional[List[str]]]:
        """
        Types asserted at each blank-node boundary of a multi-hop triple.

        Boundary ``i`` is the blank node reached through the first
        ``i + 1`` predicates. Every blank node sharing that predicate path
        under the same subject contributes its types.

        Returns:
            One entry per boundary: the candidate types in first-seen
            order, or None when no triple types that boundary
        """
        labels = triple.labels
        boundary_types: List[Optional[List[str]]] = []

        for depth in range(1, len(labels)):
            prefix = labels[:depth]
            types: List[str] = []
            for other in self._triples:
                if other.subject is not triple.subject:
                    continue
                if len(other.predicates) != depth + 1 or not other.predicate.is_rdf_type:
                    continue
                if other.labels[:depth] != prefix:
                    continue
                value = other.object.value
                if value is not None and value not in types:
                    types.append(str(value))
            boundary_types.append(types or None)

        return boundary_types
