"""Shared pytest fixtures for recordflow tests."""
import copy
from pathlib import Path
from typing import Any, Dict, List

import pytest
import yaml

from recordflow.core.logging import set_global_logger
from recordflow.pipeline import DataProcessor, set_processor


@pytest.fixture
def people() -> List[Dict[str, Any]]:
    """Records with duplicate names for include/sort tests."""
    return [
        {"name": "John", "email": "john2@mail.com"},
        {"name": "John", "email": "john1@mail.com"},
        {"name": "Jane", "email": "jane@mail.com"},
    ]


@pytest.fixture
def users() -> List[Dict[str, Any]]:
    """Records with numeric and boolean fields."""
    return [
        {"user": "mike@mail.com", "rating": 20, "disabled": False},
        {"user": "greg@mail.com", "rating": 14, "disabled": False},
        {"user": "john@mail.com", "rating": 25, "disabled": True},
    ]


@pytest.fixture
def processor() -> DataProcessor:
    """Processor with a fresh default registry."""
    return DataProcessor()


@pytest.fixture
def request_file(tmp_path: Path, users: List[Dict[str, Any]]) -> Path:
    """YAML request document on disk."""
    path = tmp_path / "request.yaml"
    with open(path, "w") as f:
        yaml.safe_dump(
            {"data": users, "condition": {"exclude": [{"disabled": True}], "sort_by": ["rating"]}},
            f,
            sort_keys=False,
        )
    return path


@pytest.fixture
def frozen():
    """Deep-copy helper for checking inputs are left untouched."""
    return copy.deepcopy


@pytest.fixture(autouse=True)
def reset_singletons():
    """Reset module-level singletons between tests."""
    set_processor(None)
    set_global_logger(None)
    yield
    set_processor(None)
    set_global_logger(None)
