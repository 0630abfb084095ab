"""
Pytest configuration and fixtures for Column Encoder tests.
"""

import json

import pytest

from column_encoder.config import Config
from column_encoder.core.column_types import ColumnType
from column_encoder.core.registry import Registry


@pytest.fixture
def names_with_types():
    """A small dataset: two typed columns and one factor level."""
    return {
        "age": ColumnType.SCALE,
        "body mass": ColumnType.SCALE,
        "group": ColumnType.NOMINAL,
        "level 1": ColumnType.UNKNOWN,
    }


@pytest.fixture
def registry():
    """A fresh registry with default configuration."""
    return Registry(Config())


@pytest.fixture
def loaded_registry(registry, names_with_types):
    """A registry whose primary encoder holds the sample dataset."""
    registry.set_names(names_with_types)
    return registry


@pytest.fixture
def names_file(tmp_path, names_with_types):
    """A names file for the command line."""
    path = tmp_path / "names.json"
    path.write_text(json.dumps({name: t.value for name, t in names_with_types.items()}))
    return path


@pytest.fixture
def sample_script():
    """A script using the sample columns."""
    return 'fit <- lm(`body mass` ~ age, data = d)\nprint("age")\n'
