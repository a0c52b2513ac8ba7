"""
WHERE clause builder.

Compiles the triples binding the requested variables into graph patterns:

- a single-hop triple becomes ``?subject <predicate> ?variable``
- a multi-hop triple through untyped blank nodes collapses into one
  property path ``?subject p1/p2/p3 ?variable``
- a multi-hop triple with any typed blank-node boundary expands into one
  pattern per hop, each blank node bound to a ``?_b<n>`` variable with its
  own type pattern, or a ``FILTER(... IN (...))`` when the boundary has
  several candidate types. Inside an OPTIONAL chain the FILTER also
  accepts an unbound class variable.

Whether a pattern is OPTIONAL depends only on the cardinality of the last
predicate of its triple.
"""

import logging
from dataclasses import dataclass
from typing import Dict, List, Set, Tuple

from ..loader import QueryDefinition
from ..model.graph import Model
from ..model.models import Literal, Triple
from .base import QueryBuilder, use_property_path


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PatternTriple:
    """One emitted triple pattern"""
    subject: str
    predicate: str
    object: str

    @property
    def is_rdf_type(self) -> bool:
        return self.predicate in ("a", "rdf:type")

    def __str__(self) -> str:
        return f"{self.subject} {self.predicate} {self.object} ."


class WhereBuilder(QueryBuilder):
    """WHERE block of the query"""

    INDENT = "    "

    def __init__(self, model: Model, query: QueryDefinition, template: bool = False):
        super().__init__(model, query)
        self.template = template

        self._required: List[PatternTriple] = []
        self._optional: List[Tuple[PatternTriple, ...]] = []
        self._filters: List[str] = []

        self._typed_subjects: Set[str] = set()
        self._blank_nodes: Dict[Tuple[str, Tuple[str, ...]], str] = {}

        self._generate_triples()

    def build(self) -> List[str]:
        lines = ["WHERE {"]
        lines += self.values_lines()
        lines += self.required_lines()
        lines += self.optional_lines()
        lines += self.filter_lines()
        lines.append("}")

        return lines

    def values_lines(self) -> List[str]:
        lines = []
        for name, value in self.parameters.items():
            if self.template:
                value = "{{%s}}" % name
            if isinstance(self.model.find_object(name), Literal):
                value = f'"{value}"'
            lines.append(f"{self.INDENT}VALUES ?{name} {{ {value} }}")

        return lines

    def required_lines(self) -> List[str]:
        """Required patterns grouped per subject in first-seen order"""
        subjects: List[str] = []
        for triple in self._required:
            if triple.subject not in subjects:
                subjects.append(triple.subject)

        lines = []
        for subject in subjects:
            lines += self._lines_by_subject([t for t in self._required if t.subject == subject])

        return lines

    def optional_lines(self) -> List[str]:
        return [
            f"{self.INDENT}OPTIONAL {{ {' '.join(str(t) for t in pattern)} }}"
            for pattern in self._optional
        ]

    def filter_lines(self) -> List[str]:
        return list(self._filters)

    def _generate_triples(self) -> None:
        for _, triple in self.resolved_triples():
            self._add_subject_type(triple)
            if triple.is_multi_hop:
                self._generate_triples_with_bnode(triple)
            else:
                self._generate_triple_without_bnode(triple)

    def _add_subject_type(self, triple: Triple) -> None:
        subject_name = triple.subject.name
        if subject_name in self._typed_subjects:
            return

        self._typed_subjects.add(subject_name)
        self._add_pattern(
            (PatternTriple(f"?{subject_name}", "a", triple.subject.type),),
            is_optional=False
        )

    def _generate_triple_without_bnode(self, triple: Triple) -> None:
        pattern = (
            PatternTriple(f"?{triple.subject.name}", triple.predicate.uri, f"?{triple.object_name}"),
        )
        self._add_pattern(pattern, triple.predicate.is_optional)

    def _generate_triples_with_bnode(self, triple: Triple) -> None:
        boundary_types = self.model.bnode_rdf_types(triple)

        if use_property_path(boundary_types):
            pattern = (
                PatternTriple(f"?{triple.subject.name}", triple.property_path, f"?{triple.object_name}"),
            )
        else:
            pattern = self._triples_with_bnode_class(triple, boundary_types)

        self._add_pattern(pattern, triple.predicate.is_optional)

    def _triples_with_bnode_class(self, triple: Triple, boundary_types) -> Tuple[PatternTriple, ...]:
        """Expand the hop chain, binding each blank node to its own variable"""
        pattern: List[PatternTriple] = []
        labels = triple.labels
        node = f"?{triple.subject.name}"

        for depth, predicate in enumerate(triple.predicates[:-1], start=1):
            bnode = self._blank_node(triple.subject.name, labels[:depth])
            pattern.append(PatternTriple(node, predicate.uri, bnode))

            types = boundary_types[depth - 1]
            if types is not None:
                if len(types) == 1:
                    pattern.append(PatternTriple(bnode, "a", types[0]))
                else:
                    class_var = f"{bnode}_class"
                    pattern.append(PatternTriple(bnode, "a", class_var))
                    self._add_filter(class_var, types, triple.predicate.is_optional)
            node = bnode

        pattern.append(PatternTriple(node, triple.predicate.uri, f"?{triple.object_name}"))
        return tuple(pattern)

    def _blank_node(self, subject_name: str, labels: Tuple[str, ...]) -> str:
        key = (subject_name, labels)
        if key not in self._blank_nodes:
            self._blank_nodes[key] = f"?_b{len(self._blank_nodes) + 1}"
            logger.debug(f"Blank node {self._blank_nodes[key]} for {subject_name} {'/'.join(labels)}")
        return self._blank_nodes[key]

    def _add_pattern(self, pattern: Tuple[PatternTriple, ...], is_optional: bool) -> None:
        if is_optional:
            if pattern not in self._optional:
                self._optional.append(pattern)
            return

        for triple in pattern:
            if triple not in self._required:
                self._required.append(triple)

    def _add_filter(self, class_var: str, types: List[str], is_optional: bool) -> None:
        condition = f"{class_var} IN ({', '.join(types)})"
        # FILTER sits outside the OPTIONAL block; an unbound class must pass
        if is_optional:
            condition = f"!BOUND({class_var}) || {condition}"

        line = f"{self.INDENT}FILTER({condition})"
        if line not in self._filters:
            self._filters.append(line)

    def _lines_by_subject(self, triples: List[PatternTriple]) -> List[str]:
        """Chain the patterns of one subject with semicolons"""
        if len(triples) == 1:
            return [f"{self.INDENT}{triples[0]}"]

        lines = []
        last = len(triples) - 1
        for i, triple in enumerate(triples):
            head = f"{self.INDENT}{triple.subject} " if i == 0 else self.INDENT * 2
            tail = "." if i == last else ";"
            lines.append(f"{head}{triple.predicate} {triple.object} {tail}")

        return lines
