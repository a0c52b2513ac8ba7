"""
Test Suite for query assembly

Tests:
1. PREFIX block contains exactly the referenced prefixes
2. SELECT line order
3. Comment header
4. OFFSET / LIMIT trailer
5. Full queries compiled from a configuration directory
"""

from pathlib import Path

import pytest
from rdf_config.loader import ConfigLoader, ConfigNotFound, QueryDefinition
from rdf_config.model.graph import Model
from rdf_config.sparql.comment_builder import CommentBuilder
from rdf_config.sparql.generator import SPARQLGenerator
from rdf_config.sparql.prefix_builder import PrefixBuilder, format_iri
from rdf_config.sparql.select_builder import SelectBuilder
from rdf_config.sparql.sparql_builder import SPARQLBuilder

CONFIG_DIR = Path(__file__).parent / "fixtures" / "config"


class StaticBuilder:
    """Line builder returning fixed lines"""

    def __init__(self, lines):
        self.lines = lines

    def build(self):
        return list(self.lines)


@pytest.fixture
def config():
    return ConfigLoader(CONFIG_DIR)


@pytest.fixture
def model(config):
    return Model.from_config(config)


def test_prefixes_exactly_referenced(config, model):
    """Only prefixes used by types, predicates and blank-node types appear"""
    cases = {
        "sparql": ["foaf"],
        "person_address": ["foaf", "ex"],
        "gene_position": ["ex", "faldo", "dct"],
    }

    for name, expected in cases.items():
        builder = PrefixBuilder(model, config.query(name))
        used = sorted(builder.used_prefixes())
        lines = builder.build()
        print(name, lines)

        assert used == sorted(expected), f"Wrong prefixes for {name}"
        assert len(lines) == len(expected) + 1
        assert lines[-1] == ""


def test_prefixes_follow_table_order(config, model):
    """PREFIX lines keep prefix.yaml declaration order"""
    lines = PrefixBuilder(model, config.query("gene_position")).build()

    assert lines == [
        "PREFIX ex: <http://example.org/>",
        "PREFIX faldo: <http://biohackathon.org/resource/faldo#>",
        "PREFIX dct: <http://purl.org/dc/terms/>",
        "",
    ]


def test_iri_parameter_prefix(model):
    """IRI-valued parameters contribute their prefix"""
    query = QueryDefinition(name="q", variables=["name"], parameters={"homepage": "dct:alice"})
    assert sorted(PrefixBuilder(model, query).used_prefixes()) == ["dct", "ex", "foaf"]

    literal_query = QueryDefinition(name="q", variables=["name"], parameters={"name": "xsd:string"})
    assert PrefixBuilder(model, literal_query).used_prefixes() == ["foaf"]


def test_property_path_does_not_reference_blank_node_types():
    """Collapsed chains only reference predicate prefixes"""
    prefixes = {"ex": "<http://example.org/>", "geo": "<http://example.org/geo#>"}
    document = [
        {"Place": [
            {"a": "ex:Place"},
            {"ex:location": [{(): [{"ex:lat": [{"lat": 1.0}]}]}]},
            {"ex:area": [{(): [{"a": "geo:Polygon"}, {"ex:size": [{"size": 3}]}]}]},
        ]},
    ]
    model = Model(document, prefixes)

    collapsed = QueryDefinition(name="q", variables=["lat"])
    assert PrefixBuilder(model, collapsed).used_prefixes() == ["ex"]

    expanded = QueryDefinition(name="q", variables=["size"])
    assert PrefixBuilder(model, expanded).used_prefixes() == ["ex", "geo"]


def test_format_iri():
    assert format_iri("<http://example.org/>") == "<http://example.org/>"
    assert format_iri("http://example.org/") == "<http://example.org/>"


def test_select_keeps_caller_order(model):
    """Variables are emitted verbatim, duplicates and unknown names included"""
    query = QueryDefinition(name="q", variables=["city", "name", "city", "nme"])

    assert SelectBuilder(model, query).build() == ["SELECT ?city ?name ?city ?nme"]
    assert SelectBuilder(model, QueryDefinition(name="q")).build() == ["SELECT *"]


def test_comment_header(config):
    """Endpoints, description and parameters form the header"""
    lines = CommentBuilder(config.query("gene_position"), config.endpoints).build()

    assert lines == [
        "# Endpoint: https://example.org/sparql",
        "#           https://mirror.example.org/sparql",
        "# Description: Gene begin position",
        "# Parameter: gene_id: (example: 1234)",
        "",
    ]


def test_comment_header_aligns_parameters():
    query = QueryDefinition(
        name="q",
        description="Two parameters",
        parameters={"a": 1, "b": "x"}
    )
    lines = CommentBuilder(query).build()

    assert lines == [
        "# Description: Two parameters",
        "# Parameter: a: (example: 1)",
        "#            b: (example: x)",
        "",
    ]


def test_offset_limit_trailer():
    """Trailer appears only when OFFSET or LIMIT is set"""
    body = StaticBuilder(["SELECT ?x", "WHERE {", "}"])

    default = SPARQLBuilder().add_builder(body)
    assert default.build()[-1] == "LIMIT 100"

    both = SPARQLBuilder(offset=200, limit=50).add_builder(body)
    assert both.build()[-1] == "OFFSET 200 LIMIT 50"

    offset_only = SPARQLBuilder(offset=10, limit=None).add_builder(body)
    assert offset_only.build()[-1] == "OFFSET 10"

    neither = SPARQLBuilder(limit=None).add_builder(body)
    assert neither.build() == ["SELECT ?x", "WHERE {", "}"]
    assert neither.generate() == "SELECT ?x\nWHERE {\n}"


def test_builders_concatenate_in_order():
    builder = SPARQLBuilder(limit=None)
    builder.add_builder(StaticBuilder(["a"])).add_builder(StaticBuilder(["b", "c"]))

    assert builder.build() == ["a", "b", "c"]


def test_generate_person_query(config):
    """Full query for a required and an optional variable"""
    sparql = SPARQLGenerator(config, "sparql").generate()
    print(sparql)

    assert sparql == "\n".join([
        "# Endpoint: https://example.org/sparql",
        "#           https://mirror.example.org/sparql",
        "# Description: Person names",
        "",
        "PREFIX foaf: <http://xmlns.com/foaf/0.1/>",
        "",
        "SELECT ?name ?age",
        "WHERE {",
        "    ?Person a foaf:Person ;",
        "        foaf:name ?name .",
        "    OPTIONAL { ?Person foaf:age ?age . }",
        "}",
        "LIMIT 100",
    ])


def test_generate_gene_query(config):
    """Parameters, typed blank nodes and FILTER in one query"""
    sparql = SPARQLGenerator(config, "gene_position", offset=100, limit=10).generate()
    print(sparql)

    assert sparql == "\n".join([
        "# Endpoint: https://example.org/sparql",
        "#           https://mirror.example.org/sparql",
        "# Description: Gene begin position",
        "# Parameter: gene_id: (example: 1234)",
        "",
        "PREFIX ex: <http://example.org/>",
        "PREFIX faldo: <http://biohackathon.org/resource/faldo#>",
        "PREFIX dct: <http://purl.org/dc/terms/>",
        "",
        "SELECT ?gene_id ?begin",
        "WHERE {",
        '    VALUES ?gene_id { "1234" }',
        "    ?Gene a ex:Gene ;",
        "        dct:identifier ?gene_id ;",
        "        faldo:location ?_b1 .",
        "    ?_b1 a faldo:Region ;",
        "        faldo:begin ?_b2 .",
        "    ?_b2 a ?_b2_class ;",
        "        faldo:position ?begin .",
        "    FILTER(?_b2_class IN (faldo:ExactPosition, faldo:InRangePosition))",
        "}",
        "OFFSET 100 LIMIT 10",
    ])


def test_generate_is_deterministic(config, model):
    """Same definition, same model: byte-identical output"""
    first = SPARQLGenerator(config, "gene_position", model=model).generate()
    second = SPARQLGenerator(config, "gene_position", model=model).generate()
    third = SPARQLGenerator(ConfigLoader(CONFIG_DIR), "gene_position").generate()

    assert first == second == third


def test_unknown_query_name(config):
    """Missing query definitions fail at construction"""
    with pytest.raises(ConfigNotFound) as excinfo:
        SPARQLGenerator(config, "no_such_query")
    assert excinfo.value.name == "no_such_query"
