"""Mock response synthesis.

``synthesize`` is total: any combination of examples, schema and request,
including all of them missing, produces a JSON-serializable value. Static
mode (``dynamic=False``) is fully deterministic; dynamic mode draws from a
``RandomSource``.
"""

import math
from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel

from postmock.generator.random_source import RandomSource
from postmock.generator.schema import (
    ArrayFragment,
    ObjectFragment,
    PrimitiveFragment,
    SchemaFragment,
    to_fragment,
)

STATIC_TIMESTAMP = "2024-01-01T00:00:00.000Z"
STATIC_DATE = "2024-01-01"
STATIC_EMAIL = "user@example.com"
STATIC_UUID = "123e4567-e89b-12d3-a456-426614174000"
STATIC_STRING = "Sample string"
STATIC_NUMBER = 42
STATIC_SCALAR = "sample_value"

DEFAULT_MIN_ITEMS = 1
DEFAULT_MAX_ITEMS = 5


class RequestContext(BaseModel):
    """The parts of an inbound request the generic fallback looks at."""

    method: str | None = None
    path: str | None = None

    @classmethod
    def coerce(cls, request: Any) -> "RequestContext":
        if request is None:
            return cls()
        if isinstance(request, RequestContext):
            return request
        if isinstance(request, Mapping):
            method, path = request.get("method"), request.get("path")
        else:
            method, path = getattr(request, "method", None), getattr(request, "path", None)
        return cls(
            method=method if isinstance(method, str) else None,
            path=path if isinstance(path, str) else None,
        )


def synthesize(
    examples: list | None,
    schema: dict | SchemaFragment | None,
    dynamic: bool,
    request: Any = None,
    source: RandomSource | None = None,
) -> Any:
    """Produce the mock body for one request.

    Resolution order: recorded examples (first one when static, a random one
    when dynamic), then the response schema, then a generic mock shaped by
    the request path and method.
    """
    source = source or RandomSource()

    if examples:
        if not dynamic:
            return examples[0]
        return source.pick(examples)

    if schema is not None:
        fragment = schema if isinstance(schema, BaseModel) else to_fragment(schema)
        return from_schema(fragment, dynamic, source)

    return generic_mock(RequestContext.coerce(request), dynamic, source)


# -- schema-driven ------------------------------------------------------------


def from_schema(fragment: SchemaFragment, dynamic: bool, source: RandomSource) -> Any:
    if isinstance(fragment, ObjectFragment):
        return {
            name: from_schema(prop, dynamic, source)
            for name, prop in fragment.properties.items()
        }
    if isinstance(fragment, ArrayFragment):
        return _array_from_schema(fragment, dynamic, source)
    if isinstance(fragment, PrimitiveFragment):
        return _primitive_from_schema(fragment, dynamic, source)
    return generic_value(dynamic, source)


def _array_from_schema(fragment: ArrayFragment, dynamic: bool, source: RandomSource) -> list:
    min_items = fragment.min_items or DEFAULT_MIN_ITEMS
    max_items = fragment.max_items or DEFAULT_MAX_ITEMS
    # maxItems < minItems is not validated; the count may come out zero or negative
    count = source.between(min_items, max_items) if dynamic else min_items

    items = []
    for _ in range(math.ceil(count)):
        if fragment.items is not None:
            items.append(from_schema(fragment.items, dynamic, source))
        else:
            items.append(generic_value(dynamic, source))
    return items


def _primitive_from_schema(fragment: PrimitiveFragment, dynamic: bool, source: RandomSource) -> Any:
    if fragment.type == "string":
        return _string_from_schema(fragment, dynamic, source)

    if fragment.type in ("number", "integer"):
        low, high = fragment.minimum, fragment.maximum
        if low is not None and high is not None:
            if not dynamic or low == high:
                return low
            return source.between(low, high)
        return source.integer(1, 1000) if dynamic else STATIC_NUMBER

    if fragment.type == "boolean":
        return source.boolean() if dynamic else True

    return generic_value(dynamic, source)


def _string_from_schema(fragment: PrimitiveFragment, dynamic: bool, source: RandomSource) -> Any:
    if fragment.enum is not None:
        # an empty enum yields None
        if not dynamic:
            return fragment.enum[0] if fragment.enum else None
        return source.pick(fragment.enum)

    fmt = fragment.format
    if fmt == "email":
        return source.email() if dynamic else STATIC_EMAIL
    if fmt == "date":
        return source.date() if dynamic else STATIC_DATE
    if fmt == "date-time":
        return source.timestamp() if dynamic else STATIC_TIMESTAMP
    if fmt == "uuid":
        return source.uuid() if dynamic else STATIC_UUID
    return source.sentence() if dynamic else STATIC_STRING


# -- generic fallback ---------------------------------------------------------


def generic_mock(request: RequestContext, dynamic: bool, source: RandomSource) -> Any:
    """Guess a response shape from the request path, then from its method."""
    path = request.path or ""
    method = (request.method or "GET").upper()

    if "/users" in path or "/user" in path:
        return user_mock(dynamic, source)
    if "/posts" in path or "/post" in path:
        return post_mock(dynamic, source)
    if "/products" in path or "/product" in path:
        return product_mock(dynamic, source)
    if "/auth" in path or "/login" in path:
        return auth_mock(dynamic, source)

    def ts():
        return source.timestamp() if dynamic else STATIC_TIMESTAMP

    def ident():
        return source.integer() if dynamic else 1

    if method == "GET":
        return {
            "id": ident(),
            "name": source.full_name() if dynamic else "Sample Name",
            "description": source.paragraph() if dynamic else "Sample description",
            "createdAt": ts(),
            "updatedAt": ts(),
        }
    if method == "POST":
        return {
            "id": ident(),
            "success": True,
            "message": "Resource created successfully",
            "timestamp": ts(),
        }
    if method in ("PUT", "PATCH"):
        return {
            "id": ident(),
            "success": True,
            "message": "Resource updated successfully",
            "timestamp": ts(),
        }
    if method == "DELETE":
        return {
            "success": True,
            "message": "Resource deleted successfully",
            "timestamp": ts(),
        }
    return generic_value(dynamic, source)


def user_mock(dynamic: bool, source: RandomSource) -> dict:
    if not dynamic:
        return {
            "id": 1,
            "username": "johndoe",
            "email": "john@example.com",
            "firstName": "John",
            "lastName": "Doe",
            "avatar": "https://example.com/avatar.jpg",
            "isActive": True,
            "createdAt": STATIC_TIMESTAMP,
        }
    return {
        "id": source.integer(),
        "username": source.user_name(),
        "email": source.email(),
        "firstName": source.first_name(),
        "lastName": source.last_name(),
        "avatar": source.image_url(),
        "isActive": source.boolean(),
        "createdAt": source.timestamp(),
    }


def post_mock(dynamic: bool, source: RandomSource) -> dict:
    if not dynamic:
        return {
            "id": 1,
            "title": "Sample Post Title",
            "content": "This is a sample post content...",
            "author": "John Doe",
            "authorId": 1,
            "tags": ["sample", "post"],
            "publishedAt": STATIC_TIMESTAMP,
            "readCount": 42,
        }
    return {
        "id": source.integer(),
        "title": source.sentence(),
        "content": source.paragraphs(3),
        "author": source.full_name(),
        "authorId": source.integer(),
        "tags": [source.word(), source.word()],
        "publishedAt": source.timestamp(),
        "readCount": source.integer(0, 10000),
    }


def product_mock(dynamic: bool, source: RandomSource) -> dict:
    if not dynamic:
        return {
            "id": 1,
            "name": "Sample Product",
            "description": "A sample product description",
            "price": 29.99,
            "category": "Electronics",
            "inStock": True,
            "rating": 4.5,
            "imageUrl": "https://example.com/product.jpg",
        }
    return {
        "id": source.integer(),
        "name": source.product_name(),
        "description": source.product_description(),
        "price": source.price(),
        "category": source.department(),
        "inStock": source.boolean(),
        "rating": round(source.random() * 5, 1),
        "imageUrl": source.image_url(),
    }


def auth_mock(dynamic: bool, source: RandomSource) -> dict:
    if not dynamic:
        return {
            "token": "sample-jwt-token-here",
            "refreshToken": "sample-refresh-token-here",
            "expiresIn": 3600,
            "user": user_mock(dynamic, source),
        }
    return {
        "token": source.alphanumeric(64),
        "refreshToken": source.alphanumeric(64),
        "expiresIn": source.integer(3600, 86400),
        "user": user_mock(dynamic, source),
    }


def generic_value(dynamic: bool, source: RandomSource) -> Any:
    """A single scalar (or tiny container) when nothing else is known."""
    if not dynamic:
        return STATIC_SCALAR

    kind = source.pick(("string", "number", "boolean", "object", "array"))
    if kind == "string":
        return source.word()
    if kind == "number":
        return source.integer()
    if kind == "boolean":
        return source.boolean()
    if kind == "object":
        return {"key": source.word()}
    return [source.word(), source.word()]
