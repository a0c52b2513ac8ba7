"""Configuration document loader.

Reads the YAML documents of an rdf-config directory:

    config/<name>/
    ├── model.yaml      # schema: subjects, predicates, objects
    ├── prefix.yaml     # prefix name -> namespace IRI
    ├── sparql.yaml     # query name -> variables, parameters, description
    └── endpoint.yaml   # optional: endpoint URL or list of URLs

Usage:
    from rdf_config.loader import ConfigLoader

    config = ConfigLoader("config/uniprot")
    query = config.query("sparql")
"""

import logging
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml
from pydantic import BaseModel, Field, ValidationError, field_validator


logger = logging.getLogger(__name__)


class ConfigNotFound(Exception):
    """Requested query definition is not declared"""

    def __init__(self, name: str, document: str = "sparql.yaml"):
        self.name = name
        self.document = document
        super().__init__(f"Error: No SPARQL query ({name}) exists in {document}.")


class InvalidQueryDefinition(Exception):
    """Query definition is declared but cannot be compiled"""

    def __init__(self, name: str, reason: str, document: str = "sparql.yaml"):
        self.name = name
        self.reason = reason
        super().__init__(f"Error: Invalid SPARQL query ({name}) in {document}: {reason}")


class QueryDefinition(BaseModel):
    """One entry of sparql.yaml"""
    name: str = Field(..., description="Query name")
    variables: List[str] = Field(default_factory=list, description="Output variables in order")
    parameters: Dict[str, Any] = Field(
        default_factory=dict,
        description="Pre-bound variables mapped to example values"
    )
    description: str = Field(default="", description="Human-readable description")

    @field_validator("parameters")
    @classmethod
    def parameters_have_examples(cls, parameters: Dict[str, Any]) -> Dict[str, Any]:
        """VALUES lines and the header need a concrete example per parameter"""
        missing = [name for name, value in parameters.items() if value is None]
        if missing:
            raise ValueError(f"No example value for parameter(s): {', '.join(missing)}")
        return parameters


class SchemaYamlLoader(yaml.SafeLoader):
    """
    Safe YAML loader accepting sequence mapping keys.

    ``model.yaml`` marks blank nodes with a ``[]:`` key. Sequences are not
    hashable, so such keys are constructed as tuples.
    """

    def construct_mapping(self, node, deep=False):
        if isinstance(node, yaml.MappingNode):
            self.flatten_mapping(node)

        mapping = {}
        for key_node, value_node in node.value:
            key = self.construct_object(key_node, deep=True)
            if isinstance(key, list):
                key = tuple(key)
            mapping[key] = self.construct_object(value_node, deep=deep)
        return mapping


def load_yaml(file_path: str | Path) -> Any:
    """Load one YAML document"""
    file_path = Path(file_path)

    if not file_path.exists():
        raise FileNotFoundError(f"Config file not found: {file_path}")

    logger.debug(f"Loading {file_path}")
    with open(file_path, 'r', encoding='utf-8') as f:
        return yaml.load(f, Loader=SchemaYamlLoader)


class ConfigLoader:
    """Load and cache the documents of one configuration directory"""

    def __init__(self, config_dir: str | Path | None = None):
        self.config_dir = Path(config_dir) if config_dir is not None else None
        self._documents: Dict[str, Any] = {}

    @classmethod
    def from_documents(
        cls,
        model: List[Dict[str, Any]],
        prefix: Dict[str, str],
        sparql: Optional[Dict[str, Any]] = None,
        endpoint: Optional[Dict[str, Any]] = None
    ) -> "ConfigLoader":
        """Build a loader over documents already in memory"""
        loader = cls()
        loader._documents = {
            "model": model,
            "prefix": prefix,
            "sparql": sparql or {},
            "endpoint": endpoint or {},
        }
        return loader

    def _load(self, name: str, required: bool = True) -> Any:
        if name not in self._documents:
            if self.config_dir is None:
                raise FileNotFoundError(f"No config directory for {name}.yaml")

            file_path = self.config_dir / f"{name}.yaml"
            if not required and not file_path.exists():
                self._documents[name] = {}
            else:
                self._documents[name] = load_yaml(file_path) or {}
        return self._documents[name]

    @property
    def model(self) -> List[Dict[str, Any]]:
        return self._load("model") or []

    @property
    def prefix(self) -> Dict[str, str]:
        return self._load("prefix")

    @property
    def sparql(self) -> Dict[str, Any]:
        return self._load("sparql")

    @property
    def endpoints(self) -> List[str]:
        """Endpoint URLs, first one being the default"""
        endpoint = self._load("endpoint", required=False).get("endpoint")
        if endpoint is None:
            return []
        if isinstance(endpoint, str):
            return [endpoint]
        return [str(url) for url in endpoint]

    @property
    def endpoint(self) -> Optional[str]:
        endpoints = self.endpoints
        return endpoints[0] if endpoints else None

    def query_names(self) -> List[str]:
        return list(self.sparql.keys())

    def query(self, name: str) -> QueryDefinition:
        """
        Get a query definition by name.

        Raises:
            ConfigNotFound: If sparql.yaml has no entry for ``name``
            InvalidQueryDefinition: If the entry fails validation
        """
        if name not in self.sparql:
            raise ConfigNotFound(name)

        data = self.sparql[name] or {}
        try:
            return QueryDefinition(
                name=name,
                variables=data.get("variables") or [],
                parameters=data.get("parameters") or {},
                description=str(data.get("description") or "")
            )
        except ValidationError as e:
            reason = "; ".join(error["msg"] for error in e.errors())
            raise InvalidQueryDefinition(name, reason) from e
