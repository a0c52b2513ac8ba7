"""
SPARQL Generator
================

Compiles one query definition of ``sparql.yaml`` against the model of a
configuration directory.

Pipeline:
ConfigLoader → Model → {Comment, Prefix, Select, Where} builders → SPARQLBuilder

Example
-------
>>> from rdf_config.loader import ConfigLoader
>>> from rdf_config.sparql.generator import SPARQLGenerator
>>> print(SPARQLGenerator(ConfigLoader("config/uniprot")).generate())
"""

import logging
from typing import Optional

from ..loader import ConfigLoader
from ..model.graph import Model
from .comment_builder import CommentBuilder
from .prefix_builder import PrefixBuilder
from .select_builder import SelectBuilder
from .sparql_builder import DEFAULT_LIMIT, SPARQLBuilder
from .where_builder import WhereBuilder


logger = logging.getLogger(__name__)


class SPARQLGenerator:
    """Query text for one named query definition"""

    def __init__(
        self,
        config: ConfigLoader,
        query_name: str = "sparql",
        template: bool = False,
        offset: Optional[int] = None,
        limit: Optional[int] = DEFAULT_LIMIT,
        model: Optional[Model] = None
    ):
        """
        Resolve the query definition and build the model.

        Args:
            config: Loaded configuration documents
            query_name: Entry of sparql.yaml to compile
            template: Emit ``{{name}}`` placeholders in VALUES lines
            offset: OFFSET of the query, omitted when None
            limit: LIMIT of the query, omitted when None
            model: Prebuilt model of ``config`` to share between queries

        Raises:
            ConfigNotFound: If ``query_name`` is not defined
        """
        self.config = config
        self.query = config.query(query_name)
        self.template = template
        self.offset = offset
        self.limit = limit
        self.model = model if model is not None else Model.from_config(config)

    def builder(self) -> SPARQLBuilder:
        """Assemble the line builders in output order"""
        sparql_builder = SPARQLBuilder(offset=self.offset, limit=self.limit)
        sparql_builder.add_builder(CommentBuilder(self.query, self.config.endpoints))
        sparql_builder.add_builder(PrefixBuilder(self.model, self.query))
        sparql_builder.add_builder(SelectBuilder(self.model, self.query))
        sparql_builder.add_builder(WhereBuilder(self.model, self.query, template=self.template))

        return sparql_builder

    def generate(self) -> str:
        logger.debug(f"Generating SPARQL query '{self.query.name}'")
        return self.builder().generate()
