from postmock.generator.schema import (
    ArrayFragment,
    ObjectFragment,
    PrimitiveFragment,
    to_fragment,
)


class TestToFragment:
    def test_object_with_nested_properties(self):
        frag = to_fragment({
            "type": "object",
            "properties": {"id": {"type": "integer"}, "tags": {"type": "array", "items": {"type": "string"}}},
        })
        assert isinstance(frag, ObjectFragment)
        assert list(frag.properties) == ["id", "tags"]
        assert isinstance(frag.properties["tags"], ArrayFragment)
        assert isinstance(frag.properties["tags"].items, PrimitiveFragment)

    def test_object_without_properties(self):
        frag = to_fragment({"type": "object"})
        assert isinstance(frag, ObjectFragment)
        assert frag.properties == {}

    def test_array_bounds(self):
        frag = to_fragment({"type": "array", "minItems": 2, "maxItems": 4})
        assert (frag.min_items, frag.max_items, frag.items) == (2, 4, None)

    def test_primitive_constraints(self):
        frag = to_fragment({"type": "string", "format": "email", "enum": ["a", "b"]})
        assert frag.type == "string"
        assert frag.format == "email"
        assert frag.enum == ["a", "b"]

    def test_non_numeric_bounds_are_dropped(self):
        frag = to_fragment({"type": "number", "minimum": "1", "maximum": True})
        assert frag.minimum is None
        assert frag.maximum is None

    def test_missing_type(self):
        frag = to_fragment({"properties": {"a": {"type": "string"}}})
        assert isinstance(frag, PrimitiveFragment)
        assert frag.type is None

    def test_garbage_input(self):
        assert isinstance(to_fragment("string"), PrimitiveFragment)
        assert isinstance(to_fragment(None), PrimitiveFragment)
        assert to_fragment({"type": ["string", "null"]}).type is None
