"""
Shared pytest fixtures for the cuesh test suite.

Usage in tests:
    def test_something(factory):
        session = factory.session()
        factory.feed("a: 1", ":print")

    def test_with_state(session):
        # empty freestyle session writing to factory.out
        session.add_statement("a: 1")
"""

import pytest
from tests.factories import SessionFactory


@pytest.fixture(autouse=True)
def isolated_env(monkeypatch, tmp_path):
    """Keep the real home directory and environment overrides out of tests."""
    monkeypatch.setenv("HOME", str(tmp_path / "home"))
    for name in ("CUESH_SYMBOLS", "CUESH_COLOR", "CUESH_HISTORY_FILE", "CUESH_DEBUG", "NO_COLOR"):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def factory(tmp_path):
    """
    Create an empty SessionFactory.

    Example:
        def test_project(factory):
            factory.make_project({"a.cue": "a: 1"})
            session = factory.session(discover=True)
    """
    return SessionFactory(tmp_path)


@pytest.fixture
def session(factory):
    """An empty freestyle session; output in factory.output()."""
    return factory.session()
