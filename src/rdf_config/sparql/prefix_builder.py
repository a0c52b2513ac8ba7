import re
from typing import List

from ..model.models import Literal
from .base import QueryBuilder, use_property_path


PREFIXED_NAME = re.compile(r"\A([\w.-]*):")


def format_iri(iri: str) -> str:
    iri = str(iri).strip()
    if iri.startswith("<") and iri.endswith(">"):
        return iri
    return f"<{iri}>"


class PrefixBuilder(QueryBuilder):
    """PREFIX declarations for exactly the prefixes the query uses"""

    def build(self) -> List[str]:
        used = set(self.used_prefixes())

        lines = [
            f"PREFIX {prefix}: {format_iri(iri)}"
            for prefix, iri in self.model.prefixes.items()
            if prefix in used
        ]
        lines.append("")

        return lines

    def used_prefixes(self) -> List[str]:
        """
        Prefixes referenced by the emitted pattern, in first-seen order.

        Covers subject types, predicate labels, blank-node types of chains
        that are not collapsed into a property path, and the values of
        parameters rendered as IRIs.
        """
        prefixes: List[str] = []

        for _, triple in self.resolved_triples():
            terms = list(triple.subject.types) + [p.uri for p in triple.predicates]
            if triple.is_multi_hop:
                boundary_types = self.model.bnode_rdf_types(triple)
                if not use_property_path(boundary_types):
                    terms += [t for types in boundary_types if types for t in types]

            for term in terms:
                self._add_prefix(prefixes, term)

        for name, value in self.parameters.items():
            if isinstance(self.model.find_object(name), Literal):
                continue
            self._add_prefix(prefixes, value)

        return prefixes

    @staticmethod
    def _add_prefix(prefixes: List[str], term) -> None:
        if not isinstance(term, str):
            return
        match = PREFIXED_NAME.match(term)
        if match and match.group(1) not in prefixes:
            prefixes.append(match.group(1))
