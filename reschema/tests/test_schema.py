"""
Tests for building and loading schema graphs.
"""

import asyncio

import pytest

from reschema import (
    AlternativesSchema,
    ArraySchema,
    ConfigurationError,
    PropertySchema,
    ResolutionError,
    Schema,
    SchemaKind,
    SchemaNotLoadedError,
    ShapeError,
    TypeSchema,
    ValueSchema,
)

REFERENCE_SCHEMA = {
    "extend": [
        "type1",
        {
            "properties": {
                "prop1": {"schema": {"validation": {"type": "string"}}},
                "prop2": {"schema": {"validation": {"type": "string"}}},
            }
        },
    ],
    "properties": {
        "prop1": {"meta": {"description": "prop1"}, "schema": {"validation": {"type": "integer"}}},
        "prop3": {
            "schema": [
                {"meta": {"description": "stringprop3"}, "schema": {"validation": {"type": "string"}}},
                {"meta": {"description": "intprop3"}, "schema": "type2"},
            ]
        },
        "prop5": "type3",
        "prop6": {"schema": {"items": "type2"}},
    },
}


class TestLoadSchema:
    """Loading of the reference schema exercising every node kind"""

    @pytest.mark.asyncio
    async def test_load_reference_schema(self, reference_loader):
        schema = await Schema.create(REFERENCE_SCHEMA, {"loader": reference_loader})

        assert schema.kind == SchemaKind.VALUE
        assert set(schema.properties) == {"prop1", "prop2", "prop3", "prop4", "prop5", "prop6"}

        prop1 = schema.properties["prop1"]
        assert prop1.kind == "property"
        assert dict(prop1.meta) == {"description": "prop1"}
        assert prop1.schema.validation == {"type": "integer"}

        prop3 = schema.properties["prop3"].schema
        assert prop3.kind == SchemaKind.ALTERNATIVES
        assert prop3.alternatives[0].meta["description"] == "stringprop3"
        assert prop3.alternatives[0].schema.validation == {"type": "string"}
        assert prop3.alternatives[1].schema.schema.validation == {"type": "integer"}

        prop5 = schema.properties["prop5"].schema
        assert prop5.kind == SchemaKind.TYPE
        assert prop5.name == "type2"

        prop6 = schema.properties["prop6"].schema
        assert prop6.kind == SchemaKind.ARRAY
        assert prop6.items.kind == SchemaKind.TYPE
        assert prop6.items.name == "type2"

    @pytest.mark.asyncio
    async def test_dispatch_on_shape(self, reference_loader):
        options = {"loader": reference_loader}
        assert isinstance(await Schema.create("type2", options), TypeSchema)
        assert isinstance(await Schema.create([{"validation": {"type": "string"}}], options), AlternativesSchema)
        assert isinstance(await Schema.create({"items": {"validation": {"type": "string"}}}, options), ArraySchema)
        assert isinstance(await Schema.create({"validation": {"type": "string"}}, options), ValueSchema)

    @pytest.mark.asyncio
    async def test_property_shorthand(self):
        prop = await PropertySchema.create({"validation": {"type": "string"}})
        assert prop.schema.kind == SchemaKind.VALUE
        assert dict(prop.meta) == {}

        prop = await PropertySchema.create([{"validation": {"type": "string"}}])
        assert prop.schema.kind == SchemaKind.ALTERNATIVES

    @pytest.mark.asyncio
    async def test_property_meta_falls_back_to_type(self, reference_loader):
        prop = await PropertySchema.create("type2", {"loader": reference_loader})
        assert prop.meta["description"] == "type2"

        prop = await PropertySchema.create({"meta": {}, "schema": "type2"}, {"loader": reference_loader})
        assert dict(prop.meta) == {}

    @pytest.mark.asyncio
    async def test_type_alias_resolves_target(self, reference_loader):
        schema = await TypeSchema.create("type3", {"loader": reference_loader})
        assert schema.name == "type2"
        assert reference_loader.calls == ["type3", "type2"]

    @pytest.mark.asyncio
    async def test_type_delegates_value_views(self, reference_loader):
        schema = await TypeSchema.create("type1", {"loader": reference_loader})
        assert list(schema.properties) == ["prop4"]
        assert schema.validation is None
        assert schema.extend == []

    @pytest.mark.asyncio
    async def test_async_loader(self):
        async def loader(name):
            await asyncio.sleep(0)
            return {"name": name, "schema": {"validation": {"type": "boolean"}}}

        schema = await Schema.create({"properties": {"flag": "flag"}}, {"loader": loader})
        assert schema.properties["flag"].schema.name == "flag"

    @pytest.mark.asyncio
    async def test_loader_object_with_resolve(self):
        class Registry:
            def resolve(self, name):
                return {"name": name, "schema": {"validation": {"type": "string"}}}

        schema = await Schema.create("registry/name", {"loader": Registry()})
        assert schema.name == "registry/name"

    @pytest.mark.asyncio
    async def test_siblings_load_concurrently(self):
        requested = set()
        both_requested = asyncio.Event()

        async def loader(name):
            requested.add(name)
            if len(requested) == 2:
                both_requested.set()
            # Deadlocks (and times out) unless both siblings are in flight
            await asyncio.wait_for(both_requested.wait(), timeout=2)
            return {"name": name, "schema": {"validation": {"type": "string"}}}

        schema = await Schema.create({"properties": {"a": "a", "b": "b"}}, {"loader": loader})
        assert set(schema.properties) == {"a", "b"}

    @pytest.mark.asyncio
    async def test_declaration_order_is_kept(self):
        schema = await Schema.create(
            {
                "properties": {
                    "zeta": {"validation": {"type": "string"}},
                    "alpha": {"validation": {"type": "string"}},
                    "mu": {"validation": {"type": "string"}},
                }
            }
        )
        assert list(schema.properties) == ["zeta", "alpha", "mu"]

    @pytest.mark.asyncio
    async def test_load_is_idempotent(self, reference_loader):
        schema = ValueSchema({"properties": {"a": "type2"}}, {"loader": reference_loader})
        first, second = await asyncio.gather(schema.load(), schema.load())
        third = await schema.load()

        assert first is second is third is schema
        assert reference_loader.calls == ["type2"]


class TestSchemaErrors:
    """Construction and resolution failures"""

    def test_reference_without_loader_fails_synchronously(self):
        with pytest.raises(ConfigurationError):
            Schema.create("type1")

    def test_loader_must_be_callable(self):
        with pytest.raises(ConfigurationError):
            Schema.create("type1", {"loader": "not a loader"})

    @pytest.mark.asyncio
    async def test_nested_reference_without_loader(self):
        with pytest.raises(ConfigurationError):
            await Schema.create({"properties": {"a": "type1"}})

    def test_array_without_items(self):
        with pytest.raises(ShapeError):
            ArraySchema({"validation": {"type": "string"}})

    def test_alternatives_must_be_a_list(self):
        with pytest.raises(ShapeError):
            AlternativesSchema({"alternatives": "string"})

    def test_property_without_schema(self):
        with pytest.raises(ShapeError):
            PropertySchema({"meta": {"description": "nothing"}})

    def test_invalid_value_shape(self):
        with pytest.raises(ShapeError):
            Schema.create({"properties": ["not", "a", "mapping"]})
        with pytest.raises(ShapeError):
            Schema.create({"extend": 42})
        with pytest.raises(ShapeError):
            Schema.create({"validation": "string"})

    def test_invalid_raw_schema(self):
        with pytest.raises(ShapeError):
            Schema.create(42)

    def test_invalid_type_name(self):
        with pytest.raises(ShapeError):
            TypeSchema.create("", {"loader": lambda name: None})

    @pytest.mark.asyncio
    async def test_loader_failure_rejects_whole_tree(self):
        def loader(name):
            raise KeyError(name)

        with pytest.raises(ResolutionError) as excinfo:
            await Schema.create({"properties": {"a": {"items": "missing"}}}, {"loader": loader})
        assert excinfo.value.type_name == "missing"
        assert isinstance(excinfo.value.__cause__, KeyError)

    @pytest.mark.asyncio
    async def test_circular_alias(self):
        aliases = {"a": "b", "b": "a"}

        def loader(name):
            return {"name": name, "schema": aliases[name]}

        with pytest.raises(ResolutionError, match="Circular"):
            await Schema.create("a", {"loader": loader})

    @pytest.mark.asyncio
    async def test_failure_cancels_sibling_loads(self):
        calls = []

        async def loader(name):
            calls.append(name)
            if name == "bad":
                raise KeyError(name)
            if name == "slow":
                await asyncio.sleep(0.05)
                return {"name": name, "schema": {"properties": {"later": "late"}}}
            return {"name": name, "schema": {"validation": {"type": "string"}}}

        with pytest.raises(ResolutionError):
            await Schema.create({"properties": {"a": "slow", "b": "bad"}}, {"loader": loader})
        assert calls == ["slow", "bad"]

        await asyncio.sleep(0.1)
        assert calls == ["slow", "bad"]

    def test_views_before_load(self):
        schema = ValueSchema({"properties": {"a": {"validation": {"type": "string"}}}})
        assert not schema.loaded
        with pytest.raises(SchemaNotLoadedError):
            schema.properties
        with pytest.raises(SchemaNotLoadedError):
            schema.to("jsonschema")


class TestLoadedViews:
    """Views of loaded nodes are read-only"""

    @pytest.mark.asyncio
    async def test_validation_and_meta_are_read_only(self, reference_loader):
        schema = await Schema.create(
            {"extend": ["type2"], "meta": {"description": "id"}, "validation": {"minimum": 0}},
            {"loader": reference_loader},
        )

        with pytest.raises(TypeError):
            schema.validation["type"] = "string"
        with pytest.raises(TypeError):
            schema.meta["description"] = "changed"
        assert schema.validation == {"type": "integer", "minimum": 0}

        parent = schema.extend[0]
        with pytest.raises(TypeError):
            parent.meta["description"] = "changed"
        with pytest.raises(TypeError):
            parent.validation["type"] = "string"

    @pytest.mark.asyncio
    async def test_array_and_property_views_are_read_only(self):
        array = await Schema.create({"items": {"validation": {"type": "string"}}, "validation": {"maxItems": 3}})
        with pytest.raises(TypeError):
            array.validation["maxItems"] = 4

        prop = await PropertySchema.create({"meta": {"description": "name"}, "schema": {"validation": {"type": "string"}}})
        with pytest.raises(TypeError):
            prop.meta["description"] = "changed"
