"""Canonical data models for normalized API documents.

Both parsers (Postman, OpenAPI/Swagger) convert their input
into these models; the server only ever sees ``ApiSpecification``.
"""

from typing import Any, Literal

from pydantic import BaseModel

HTTP_METHODS = ("get", "post", "put", "patch", "delete", "head", "options")


class FormatError(ValueError):
    """The document is neither a Postman collection nor an OpenAPI spec."""


class Endpoint(BaseModel):
    """A single mock route with its recorded examples and response schema."""

    method: str  # GET / POST / PUT / PATCH / DELETE / HEAD / OPTIONS
    path: str  # /users/:id or /pets/{petId}
    examples: list[Any] | None = None
    response_schema: dict | None = None  # JSON-Schema-like fragment of the 200 response
    description: str
    operation_id: str | None = None  # OpenAPI only
    original_request: dict | None = None  # Postman only

    @property
    def label(self) -> str:
        return f"{self.method} {self.path}"


class ApiSpecification(BaseModel):
    """The normalized document: one ordered list of endpoints."""

    type: Literal["postman", "openapi"]
    name: str
    version: str | None = None
    endpoints: list[Endpoint]


def present(value: Any) -> bool:
    """Truthiness where empty JSON objects and arrays still count as present."""
    if isinstance(value, (dict, list)):
        return True
    return bool(value)
