from typing import List, Optional

from .base import LineBuilder


DEFAULT_LIMIT = 100


class SPARQLBuilder:
    """Concatenate line builders and append the OFFSET/LIMIT trailer"""

    def __init__(self, offset: Optional[int] = None, limit: Optional[int] = DEFAULT_LIMIT):
        self.offset = offset
        self.limit = limit

        self._builders: List[LineBuilder] = []

    def add_builder(self, builder: LineBuilder) -> "SPARQLBuilder":
        self._builders.append(builder)
        return self

    def build(self) -> List[str]:
        lines: List[str] = []
        for builder in self._builders:
            lines += builder.build()

        if self.require_offset_limit:
            lines.append(self.offset_limit_line)

        return lines

    def generate(self) -> str:
        return "\n".join(self.build())

    @property
    def require_offset_limit(self) -> bool:
        return self.offset is not None or self.limit is not None

    @property
    def offset_limit_line(self) -> str:
        parts = []
        if self.offset is not None:
            parts.append(f"OFFSET {self.offset}")
        if self.limit is not None:
            parts.append(f"LIMIT {self.limit}")
        return " ".join(parts)
