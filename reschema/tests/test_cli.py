"""
Tests for the reschema command line.
"""

import json

from click.testing import CliRunner

from reschema.cli import reschema


class TestCli:
    def _run(self, *args):
        return CliRunner().invoke(reschema, [str(arg) for arg in args])

    def test_jsonschema_with_definitions(self, test_data, types_dir):
        result = self._run(test_data / "place.schema.json", "--types", types_dir)
        assert result.exit_code == 0, result.output

        out = json.loads(result.output)
        assert out["type"] == "object"
        assert out["properties"]["location"] == {"$ref": "#/definitions/geo.point", "description": "A geographic point"}
        assert out["properties"]["entrances"] == {"type": "array", "items": {"$ref": "#/definitions/geo.point"}}
        assert out["properties"]["id"] == {"type": "integer", "description": "Identifier"}
        assert out["properties"]["name"] == {"type": "string", "description": "Display name"}
        assert out["properties"]["population"] == {"anyOf": [{"type": "integer"}, {"type": "string"}]}
        assert set(out["definitions"]) == {"geo.point", "common.kind"}
        assert out["definitions"]["geo.point"]["example"] == {"lat": 48.85, "lon": 2.35}
        assert [member["title"] for member in out["definitions"]["common.kind"]["anyOf"]] == ["City", "Village"]

    def test_deref(self, test_data, types_dir):
        result = self._run(test_data / "place.schema.json", "--types", types_dir, "--deref")
        assert result.exit_code == 0, result.output

        out = json.loads(result.output)
        assert "definitions" not in out
        assert out["properties"]["location"]["type"] == "object"

    def test_pydantic_target(self, test_data, types_dir):
        result = self._run(test_data / "place.schema.json", "-t", types_dir, "--target", "pydantic")
        assert result.exit_code == 0, result.output

        out = json.loads(result.output)
        assert set(out["properties"]) == {"id", "name", "kind", "location", "entrances", "population"}

    def test_writes_output_file(self, test_data, types_dir, tmp_path):
        output = tmp_path / "place.json"
        result = self._run(test_data / "place.schema.json", output, "--types", types_dir)
        assert result.exit_code == 0, result.output
        assert json.loads(output.read_text())["type"] == "object"

    def test_generation_comment(self, test_data, types_dir):
        result = self._run(test_data / "place.schema.json", "--types", types_dir, "--add-generation-comment")
        assert result.exit_code == 0, result.output

        comment = json.loads(result.output)["$comment"]
        assert comment.startswith("Generated by: reschema place.schema.json")
        assert "--add-generation-comment" in comment

    def test_missing_loader(self, test_data):
        result = self._run(test_data / "place.schema.json")
        assert result.exit_code != 0
        assert "Missing loader" in result.output

    def test_unknown_type(self, test_data, tmp_path):
        result = self._run(test_data / "place.schema.json", "--types", tmp_path)
        assert result.exit_code != 0
        assert "Unknown type" in result.output
