from typing import List

from .base import QueryBuilder


class SelectBuilder(QueryBuilder):
    """SELECT line listing the output variables in caller order"""

    def build(self) -> List[str]:
        if not self.variables:
            return ["SELECT *"]
        return ["SELECT " + " ".join(f"?{name}" for name in self.variables)]
