"""Shared fixtures for reschema tests."""

from pathlib import Path

import pytest

TEST_DATA = Path(__file__).parent / "test_data"


class RecordingLoader:
    """In-memory loader recording the names it was asked for."""

    def __init__(self, types):
        self.types = types
        self.calls = []

    def __call__(self, name):
        self.calls.append(name)
        return self.types[name]


@pytest.fixture
def test_data():
    return TEST_DATA


@pytest.fixture
def types_dir():
    return TEST_DATA / "types"


@pytest.fixture
def reference_loader():
    """Loader serving the types of the reference test schema."""
    return RecordingLoader(
        {
            "type1": {
                "name": "type1",
                "schema": {
                    "properties": {
                        "prop4": {
                            "meta": {"description": "prop4"},
                            "schema": {"validation": {"type": "string"}},
                        }
                    }
                },
            },
            "type2": {
                "name": "type2",
                "meta": {"description": "type2"},
                "schema": {"validation": {"type": "integer"}},
            },
            "type3": {"name": "type3", "schema": "type2"},
        }
    )
