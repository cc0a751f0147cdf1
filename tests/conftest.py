"""Shared pytest fixtures for prereq tests."""

from __future__ import annotations

import logging
from pathlib import Path

import pytest

from prereq.relations import Requirements

S1_YML = """\
requires:
  Kyle: Jack
  Jack: [John]
  Joe: [John]
"""


@pytest.fixture(autouse=True)
def _restore_root_logger():
    """Undo handlers and levels installed by setup_logging."""
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)


@pytest.fixture
def req0() -> Requirements[str]:
    """Empty, non-reflexive requirements."""
    return Requirements(False)


@pytest.fixture
def req1() -> Requirements[str]:
    """Non-reflexive: Kyle requires Jack, Jack and Joe require John."""
    reqs: Requirements[str] = Requirements(False)
    reqs.add("Kyle", "Jack")
    reqs.add("Jack", "John")
    reqs.add("Joe", "John")
    return reqs


@pytest.fixture
def req2() -> Requirements[str]:
    """Reflexive: Harry and Joe require each other."""
    reqs: Requirements[str] = Requirements(True)
    reqs.add("Harry", "Joe")
    reqs.add("Joe", "Harry")
    return reqs


@pytest.fixture
def relations_file(tmp_path: Path) -> Path:
    """A prereq.yml with the same relations as req1."""
    path = tmp_path / "prereq.yml"
    path.write_text(S1_YML)
    return path
