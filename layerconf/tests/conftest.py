"""Shared test fixtures for the layerconf test suite."""

import tomllib
from pathlib import Path

import pytest

TESTDATA_DIR = Path(__file__).parent / "testdata"


@pytest.fixture()
def testdata_dir():
    """Path to the configuration fixtures."""
    return TESTDATA_DIR


@pytest.fixture()
def load_want():
    """Load an expected-result TOML fixture by name."""

    def _load(name: str) -> dict:
        with open(TESTDATA_DIR / name, "rb") as f:
            return tomllib.load(f)

    return _load


@pytest.fixture()
def in_tests_dir(monkeypatch):
    """Run the test with the tests directory as working directory.

    Lets search paths such as "testdata" resolve relative to this package.
    """
    monkeypatch.chdir(TESTDATA_DIR.parent)
    return TESTDATA_DIR.parent
