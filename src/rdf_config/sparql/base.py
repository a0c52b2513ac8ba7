import logging
from abc import ABC, abstractmethod
from typing import Iterator, List, Optional, Tuple

from ..loader import QueryDefinition
from ..model.graph import Model
from ..model.models import Triple


logger = logging.getLogger(__name__)


def use_property_path(boundary_types: List[Optional[List[str]]]) -> bool:
    """A multi-hop chain collapses when no blank-node boundary is typed"""
    return all(types is None for types in boundary_types)


class LineBuilder(ABC):
    """Producer of one section of the query text"""

    @abstractmethod
    def build(self) -> List[str]:
        """Return the lines of this section in order"""


class QueryBuilder(LineBuilder):
    """Line builder driven by a query definition over a model"""

    def __init__(self, model: Model, query: QueryDefinition):
        self.model = model
        self.query = query

    @property
    def variables(self) -> List[str]:
        return list(self.query.variables)

    @property
    def parameters(self) -> dict:
        return dict(self.query.parameters)

    @property
    def pattern_variables(self) -> List[str]:
        """Requested variables followed by parameters not among them"""
        names = list(self.query.variables)
        for name in self.query.parameters:
            if name not in names:
                names.append(name)
        return names

    def resolved_triples(self) -> Iterator[Tuple[str, Triple]]:
        """
        Triples binding each pattern variable.

        Subject names are bound by their own patterns and skipped, as are
        names no triple binds.
        """
        for name in self.pattern_variables:
            if self.model.is_subject(name):
                continue

            triple = self.model.find_by_object_name(name)
            if triple is None:
                logger.debug(f"Skipping unresolved variable '{name}' in query '{self.query.name}'")
                continue

            yield name, triple
