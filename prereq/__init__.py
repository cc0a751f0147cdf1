"""Dependency relations between objects."""

from prereq.relations import PreconditionError, Requirements

__all__ = ["PreconditionError", "Requirements"]
