from typing import List

from jinja2 import Template

from ..loader import QueryDefinition
from .base import LineBuilder


# Header comment template
COMMENT_TEMPLATE = Template("""
{% for endpoint in endpoints %}
# {{ "Endpoint:" if loop.first else "         " }} {{ endpoint }}
{% endfor %}
# Description: {{ description }}
{% for name, value in parameters.items() %}
# {{ "Parameter:" if loop.first else "          " }} {{ name }}: (example: {{ value }})
{% endfor %}
""".lstrip("\n"), trim_blocks=True, keep_trailing_newline=True)


class CommentBuilder(LineBuilder):
    """Comment header naming endpoints, description and parameters"""

    def __init__(self, query: QueryDefinition, endpoints: List[str] | None = None):
        self.query = query
        self.endpoints = list(endpoints or [])

    def build(self) -> List[str]:
        rendered = COMMENT_TEMPLATE.render(
            endpoints=self.endpoints,
            description=self.query.description,
            parameters=self.query.parameters
        )
        # Trailing newline leaves the blank separator line
        return rendered.split("\n")
