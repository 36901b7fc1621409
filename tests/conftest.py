"""Shared fixtures for twig tests."""

from pathlib import Path
from typing import Callable

import pytest

from twig.repository import Repository


@pytest.fixture
def repo(tmp_path: Path) -> Repository:
    """A freshly initialized repository in a temporary directory."""
    return Repository.init(tmp_path)


@pytest.fixture
def write(tmp_path: Path) -> Callable[[str, str], Path]:
    """Write a text file under the temporary root, creating parent directories."""

    def _write(name: str, content: str) -> Path:
        path = tmp_path / name
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(content.encode("utf-8"))
        return path

    return _write


@pytest.fixture
def read(tmp_path: Path) -> Callable[[str], str]:
    """Read a text file under the temporary root."""

    def _read(name: str) -> str:
        return (tmp_path / name).read_bytes().decode("utf-8")

    return _read
