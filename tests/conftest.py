"""Pytest configuration and fixtures."""

import pytest
import tempfile
import json
from pathlib import Path
from dataclasses import dataclass


@pytest.fixture
def temp_dir():
    """Create a temporary directory for tests."""
    with tempfile.TemporaryDirectory() as tmp_dir:
        yield Path(tmp_dir)


@pytest.fixture
def sample_form_data():
    """Nested form data expressible in the query string model."""
    return {
        "user": {
            "name": "Alice",
            "email": "alice@example.com",
            "roles": ["admin", "editor"],
            "profile": {
                "city": "New York",
                "tags": ["reading", "hiking"]
            }
        },
        "page": "2",
        "sort": "name"
    }


@pytest.fixture
def sample_json_file(temp_dir, sample_form_data):
    """Sample form data written to a JSON file."""
    path = temp_dir / "form.json"
    path.write_text(json.dumps(sample_form_data), encoding="utf-8")
    return path


@pytest.fixture
def cyclic_mapping():
    """Mapping that references itself through a child."""
    data = {"name": "root", "child": {}}
    data["child"]["parent"] = data
    return data


@dataclass
class Point:
    """Plain object whose instance attributes become keys."""
    x: int
    y: int


@pytest.fixture
def point():
    return Point(x=3, y=4)
