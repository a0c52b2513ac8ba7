"""
Test Suite for configuration loading

Tests:
1. YAML documents with `[]:` blank-node keys
2. Query definitions and ConfigNotFound
3. Endpoint document variants
4. Settings defaults
"""

from pathlib import Path

import pytest
from rdf_config.config import AppSettings, SPARQLSettings
from rdf_config.loader import ConfigLoader, ConfigNotFound, InvalidQueryDefinition, load_yaml

CONFIG_DIR = Path(__file__).parent / "fixtures" / "config"


def test_blank_node_keys_load_as_tuples():
    """Sequence keys become hashable tuples"""
    model = load_yaml(CONFIG_DIR / "model.yaml")

    person = model[0]["Person ex:person1"]
    address = next(entry for entry in person if "ex:address" in entry)
    blank = address["ex:address"][0]

    assert list(blank.keys()) == [()], f"Expected a tuple key, got {list(blank.keys())}"


def test_model_and_prefix_documents():
    config = ConfigLoader(CONFIG_DIR)

    assert [next(iter(d)) for d in config.model] == ["Person ex:person1", "Gene ex:gene1"]
    assert list(config.prefix) == ["rdf", "xsd", "foaf", "ex", "faldo", "dct"]
    assert config.prefix["dct"] == "http://purl.org/dc/terms/"


def test_query_definition():
    """Test parsing of sparql.yaml entries"""
    config = ConfigLoader(CONFIG_DIR)

    query = config.query("gene_position")
    assert query.name == "gene_position"
    assert query.variables == ["gene_id", "begin"]
    assert query.parameters == {"gene_id": 1234}
    assert query.description == "Gene begin position"

    typo = config.query("typo")
    assert typo.parameters == {}, "Missing parameters default to empty"
    assert typo.description == ""

    assert config.query_names() == ["sparql", "person_address", "gene_position", "typo"]


def test_missing_query_raises_config_not_found():
    config = ConfigLoader(CONFIG_DIR)

    with pytest.raises(ConfigNotFound) as excinfo:
        config.query("nope")

    assert excinfo.value.name == "nope"
    assert "nope" in str(excinfo.value)


def test_endpoints():
    """Endpoint may be a list, a string or absent"""
    config = ConfigLoader(CONFIG_DIR)
    assert config.endpoints == ["https://example.org/sparql", "https://mirror.example.org/sparql"]
    assert config.endpoint == "https://example.org/sparql"

    single = ConfigLoader.from_documents([], {}, endpoint={"endpoint": "https://one.example.org/"})
    assert single.endpoints == ["https://one.example.org/"]

    absent = ConfigLoader.from_documents([], {})
    assert absent.endpoints == []
    assert absent.endpoint is None


def test_optional_endpoint_file(tmp_path):
    """A directory without endpoint.yaml still loads"""
    (tmp_path / "model.yaml").write_text("- Thing:\n  - a: ex:Thing\n", encoding="utf-8")
    (tmp_path / "prefix.yaml").write_text("ex: <http://example.org/>\n", encoding="utf-8")

    config = ConfigLoader(tmp_path)
    assert config.endpoints == []
    assert config.model == [{"Thing": [{"a": "ex:Thing"}]}]


def test_missing_documents(tmp_path):
    """Missing required documents raise FileNotFoundError"""
    config = ConfigLoader(tmp_path)

    with pytest.raises(FileNotFoundError):
        config.model
    with pytest.raises(FileNotFoundError):
        config.sparql


def test_settings_defaults(monkeypatch):
    """Test defaults and environment overrides"""
    monkeypatch.delenv("SPARQL_LIMIT", raising=False)
    settings = SPARQLSettings(_env_file=None)
    assert settings.query_name == "sparql"
    assert settings.limit == 100
    assert settings.offset is None
    assert settings.template is False

    monkeypatch.setenv("SPARQL_LIMIT", "20")
    monkeypatch.setenv("RDF_CONFIG_CONFIG_DIR", "config/uniprot")
    assert SPARQLSettings(_env_file=None).limit == 20
    assert AppSettings(_env_file=None).config_dir == "config/uniprot"


def test_null_parameter_example_is_rejected(tmp_path):
    """A parameter declared without an example fails when the query loads"""
    (tmp_path / "sparql.yaml").write_text(
        "q:\n  variables: [n, mm]\n  parameters:\n    mm:\n",
        encoding="utf-8"
    )
    config = ConfigLoader(tmp_path)

    with pytest.raises(InvalidQueryDefinition) as excinfo:
        config.query("q")

    assert excinfo.value.name == "q"
    assert "mm" in excinfo.value.reason
    assert "None" not in str(excinfo.value)
