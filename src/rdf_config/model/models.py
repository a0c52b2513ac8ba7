import re
import typing
from typing import Annotated, Any, List, Optional, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field


RDF_TYPE_PREDICATES = ("a", "rdf:type")

DATATYPE_PATTERN = re.compile(r"\^\^(\w+):(.+)\Z")


class MissingTypeError(Exception):
    """Subject has no rdf:type predicate"""

    def __init__(self, subject_name: str):
        self.subject_name = subject_name
        super().__init__(f"Subject: {subject_name}: rdf:type not found.")


class Cardinality(BaseModel):
    """Occurrence bounds of a predicate, None meaning unbounded"""
    min: Optional[int] = Field(default=None, description="Minimum occurrences")
    max: Optional[int] = Field(default=None, description="Maximum occurrences")

    model_config = ConfigDict(frozen=True)


class RDFObject(BaseModel):
    """Common surface of every object variant"""
    name: Optional[str] = Field(default=None, description="Variable name bound by this object")

    model_config = ConfigDict(frozen=True)

    @property
    def is_uri(self) -> bool:
        return False

    @property
    def is_literal(self) -> bool:
        return False

    @property
    def is_blank_node(self) -> bool:
        return False


class URI(RDFObject):
    """IRI in angle brackets or a prefixed name"""
    kind: typing.Literal["uri"] = "uri"
    value: str

    @property
    def is_uri(self) -> bool:
        return True


class Literal(RDFObject):
    """Plain value with an inferred datatype"""
    kind: typing.Literal["literal"] = "literal"
    value: Any

    @property
    def is_literal(self) -> bool:
        return True

    @property
    def datatype(self) -> str:
        """
        Infer the datatype of the raw value.

        Python scalars map onto their XSD names; strings may carry an
        explicit ``^^prefix:type`` suffix. ``xsd`` types are reported by
        their local name, any other prefix is kept.
        """
        if isinstance(self.value, bool):
            return "boolean"
        if isinstance(self.value, int):
            return "integer"
        if isinstance(self.value, float):
            return "decimal"
        if isinstance(self.value, str):
            match = DATATYPE_PATTERN.search(self.value)
            if match is None:
                return "string"
            prefix, local_part = match.groups()
            if prefix == "xsd":
                return local_part
            return f"{prefix}:{local_part}"
        return type(self.value).__name__.lower()


class BlankNode(RDFObject):
    """Anonymous node owning a nested subject"""
    kind: typing.Literal["blank_node"] = "blank_node"
    value: "Subject"

    @property
    def is_blank_node(self) -> bool:
        return True


class Unknown(RDFObject):
    """Variable placeholder without an example value"""
    kind: typing.Literal["unknown"] = "unknown"
    value: None = None


ObjectValue = Annotated[
    Union[URI, Literal, BlankNode, Unknown],
    Field(discriminator="kind"),
]


class Predicate(BaseModel):
    """Edge label with its cardinality and target objects"""
    uri: str = Field(..., description="Predicate label without cardinality suffix")
    cardinality: Optional[Cardinality] = Field(None, description="Parsed cardinality suffix")
    objects: Tuple[ObjectValue, ...] = Field(default=())

    model_config = ConfigDict(frozen=True)

    @property
    def is_rdf_type(self) -> bool:
        return self.uri in RDF_TYPE_PREDICATES

    @property
    def is_optional(self) -> bool:
        """True when the cardinality allows the edge to be absent"""
        if self.cardinality is None:
            return False
        return self.cardinality.min is None or self.cardinality.min == 0


class Reference(BaseModel):
    """Where a subject is reused as the object of another subject's edge"""
    subject_name: str
    property_path: str

    model_config = ConfigDict(frozen=True)


class Subject(BaseModel):
    """Named or anonymous entity of the model graph"""
    name: Union[str, Tuple[str, ...]] = Field(
        ..., description="Subject name, or the predicate path for blank nodes"
    )
    value: Optional[str] = Field(None, description="Example IRI of the subject")
    predicates: Tuple[Predicate, ...] = Field(default=())
    referenced_by: Tuple[Reference, ...] = Field(default=())

    model_config = ConfigDict(frozen=True)

    @property
    def is_blank_node(self) -> bool:
        return isinstance(self.name, tuple)

    @property
    def types(self) -> List[str]:
        """
        Values of the subject's rdf:type predicates.

        Raises:
            MissingTypeError: If a named subject has no rdf:type predicate
        """
        type_predicates = [p for p in self.predicates if p.is_rdf_type]
        if not type_predicates:
            if self.is_blank_node:
                return []
            raise MissingTypeError(self.name)

        types = []
        for predicate in type_predicates:
            for obj in predicate.objects:
                if obj.value is None or obj.is_blank_node:
                    continue
                if str(obj.value) not in types:
                    types.append(str(obj.value))
        return types

    @property
    def type(self) -> str:
        return ", ".join(self.types)


class Triple(BaseModel):
    """Subject, predicate path and terminal of one model edge"""
    subject: Subject
    predicates: Tuple[Predicate, ...]
    object: Union[URI, Literal, Unknown, Subject]
    object_name: Optional[str] = Field(None, description="Variable bound by the terminal")

    model_config = ConfigDict(frozen=True)

    @property
    def predicate(self) -> Predicate:
        return self.predicates[-1]

    @property
    def property_path(self) -> str:
        return "/".join(p.uri for p in self.predicates)

    @property
    def labels(self) -> Tuple[str, ...]:
        return tuple(p.uri for p in self.predicates)

    @property
    def is_multi_hop(self) -> bool:
        return len(self.predicates) > 1


BlankNode.model_rebuild()
Predicate.model_rebuild()
Subject.model_rebuild()
Triple.model_rebuild()
