from rdf_config.loader import ConfigLoader
from rdf_config.model.graph import Model
from rdf_config.sparql.generator import SPARQLGenerator


PREFIXES = {
    "up": "<http://purl.uniprot.org/core/>",
    "taxon": "<http://purl.uniprot.org/taxonomy/>",
    "rdfs": "<http://www.w3.org/2000/01/rdf-schema#>",
}

# `()` is the in-memory form of a `[]:` blank-node key in model.yaml
MODEL = [
    {"Protein uniprot:P05067": [
        {"a": "up:Protein"},
        {"up:mnemonic": [{"mnemonic": "A4_HUMAN"}]},
        {"up:recommendedName": [
            {(): [
                {"up:fullName": [{"full_name": "Amyloid-beta precursor protein"}]},
                {"up:shortName*": [{"short_name": "APP"}]},
            ]},
        ]},
        {"up:organism": [{"organism": "Taxon"}]},
    ]},
    {"Taxon taxon:9606": [
        {"a": "up:Taxon"},
        {"up:scientificName": [{"scientific_name": "Homo sapiens"}]},
    ]},
]

QUERIES = {
    "sparql": {
        "description": "Protein names",
        "variables": ["mnemonic", "full_name", "short_name"],
        "parameters": {"mnemonic": "A4_HUMAN"},
    },
}


def main():
    """Compile a query from in-memory documents"""

    print("=" * 80)
    print("rdf-config Sample Usage")
    print("=" * 80)
    print()

    # 1. Load documents
    print("1. Loading configuration documents...")
    config = ConfigLoader.from_documents(
        MODEL,
        PREFIXES,
        sparql=QUERIES,
        endpoint={"endpoint": "https://rdfportal.org/sib/sparql"}
    )
    print(f"   ✓ {len(config.query_names())} query definition(s)")
    print()

    # 2. Build the model
    print("2. Building model...")
    model = Model.from_config(config)
    print(f"   ✓ {len(model.subjects)} subjects, {len(model.triples)} triples")
    for triple in model.triples:
        print(f"     - {triple.subject.name} {triple.property_path} {triple.object_name or ''}")
    print()

    # 3. Compile
    print("3. Generating SPARQL...")
    print()
    print(SPARQLGenerator(config, "sparql", model=model).generate())


if __name__ == "__main__":
    main()
