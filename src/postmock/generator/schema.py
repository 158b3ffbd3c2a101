"""Typed view over the JSON-Schema subset used to synthesize responses.

``to_fragment`` never fails: anything it does not understand becomes a
``PrimitiveFragment`` with no type, which the synthesizer answers with a
generic scalar.
"""

from numbers import Number
from typing import Any, Union

from pydantic import BaseModel


class ObjectFragment(BaseModel):
    properties: dict[str, "SchemaFragment"] = {}


class ArrayFragment(BaseModel):
    items: "SchemaFragment | None" = None
    min_items: float | int | None = None
    max_items: float | int | None = None


class PrimitiveFragment(BaseModel):
    type: str | None = None  # string / number / integer / boolean, or unknown
    enum: list | None = None
    format: str | None = None
    minimum: float | int | None = None
    maximum: float | int | None = None


SchemaFragment = Union[ObjectFragment, ArrayFragment, PrimitiveFragment]

ObjectFragment.model_rebuild()
ArrayFragment.model_rebuild()


def to_fragment(raw: Any) -> SchemaFragment:
    """Classify a raw schema mapping as an object, array or primitive fragment."""
    if not isinstance(raw, dict):
        return PrimitiveFragment()

    kind = raw.get("type")
    if kind == "object":
        props = raw.get("properties")
        if not isinstance(props, dict):
            props = {}
        return ObjectFragment.model_construct(
            properties={str(name): to_fragment(sub) for name, sub in props.items()}
        )
    if kind == "array":
        return ArrayFragment.model_construct(
            items=to_fragment(raw["items"]) if isinstance(raw.get("items"), dict) else None,
            min_items=_bound(raw.get("minItems")),
            max_items=_bound(raw.get("maxItems")),
        )

    enum = raw.get("enum")
    return PrimitiveFragment.model_construct(
        type=kind if isinstance(kind, str) else None,
        enum=enum if isinstance(enum, list) else None,
        format=raw.get("format") if isinstance(raw.get("format"), str) else None,
        minimum=_bound(raw.get("minimum")),
        maximum=_bound(raw.get("maximum")),
    )


def _bound(value: Any) -> float | int | None:
    if isinstance(value, bool) or not isinstance(value, Number):
        return None
    return value
