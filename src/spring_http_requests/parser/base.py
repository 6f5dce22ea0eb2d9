"""Data models shared by the classifier, the synthesizer and the adapters.

Resolver adapters (the endpoint catalog, or any editor integration) turn
method signatures into ``RawParameter`` values; everything downstream works
on these models only.
"""

from enum import Enum

from pydantic import BaseModel, ConfigDict, field_validator


class AnnotationKind(str, Enum):
    QUERY = "query"
    BODY = "body"
    NONE = "none"


class RawAnnotation(BaseModel):
    """An annotation on a method parameter."""

    qualified_name: str
    attributes: dict[str, str] = {}  # attribute name -> source text, quotes included

    @field_validator("attributes", mode="before")
    @classmethod
    def _attributes_as_text(cls, value):
        if not isinstance(value, dict):
            return value
        return {
            k: str(v).lower() if isinstance(v, bool) else str(v)
            for k, v in value.items()
        }


class RawParameter(BaseModel):
    """Parameter metadata as exposed by a symbol resolver."""

    name: str
    type_name: str | None = None  # None when the type could not be resolved
    annotations: list[RawAnnotation] = []


class ParameterDescriptor(BaseModel):
    """A classified endpoint parameter."""

    model_config = ConfigDict(frozen=True)

    name: str
    declared_type_name: str = ""
    is_file_type: bool = False
    annotation_kind: AnnotationKind = AnnotationKind.NONE
    override_name: str | None = None
    file_name_text: str | None = None  # verbatim `value` attribute text

    @property
    def request_name(self) -> str:
        return self.override_name or self.name


class FieldDescriptor(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str


class GenerationRequest(BaseModel):
    """Input of a single synthesis run."""

    model_config = ConfigDict(frozen=True)

    parameters: tuple[ParameterDescriptor, ...] = ()
    body_type_fields: tuple[FieldDescriptor, ...] | None = None

    @property
    def body_parameter(self) -> ParameterDescriptor | None:
        """First body-bound parameter; later ones are ignored."""
        return next(
            (p for p in self.parameters if p.annotation_kind == AnnotationKind.BODY),
            None,
        )

    @property
    def file_parameter(self) -> ParameterDescriptor | None:
        """First query-bound parameter of a file upload type."""
        return next(
            (
                p for p in self.parameters
                if p.annotation_kind == AnnotationKind.QUERY and p.is_file_type
            ),
            None,
        )

    @property
    def query_parameters(self) -> list[ParameterDescriptor]:
        file_param = self.file_parameter
        return [
            p for p in self.parameters
            if p.annotation_kind == AnnotationKind.QUERY and p is not file_param
        ]


class HeaderField(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    value: str

    @property
    def line(self) -> str:
        return f"{self.name}: {self.value}"


class SynthesisResult(BaseModel):
    """Text fragments produced for one request."""

    headers: list[HeaderField] = []
    body_text: str | None = None
    query_string: str | None = None
    form_text: str | None = None

    @property
    def header_lines(self) -> list[str]:
        return [h.line for h in self.headers]

    @property
    def is_empty(self) -> bool:
        return not (self.headers or self.body_text or self.query_string or self.form_text)


class TypeDefinition(BaseModel):
    """A body type known to the endpoint catalog."""

    name: str
    fields: list[FieldDescriptor] = []
    extends: str | None = None

    @field_validator("fields", mode="before")
    @classmethod
    def _fields_from_names(cls, value):
        if not isinstance(value, list):
            return value
        return [{"name": v} if isinstance(v, str) else v for v in value]


class EndpointSignature(BaseModel):
    """A handler method bound to a URL path."""

    path: str
    method: str | None = None  # None matches any HTTP method
    handler: str = ""
    parameters: list[RawParameter] = []
