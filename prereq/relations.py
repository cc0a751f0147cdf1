"""Generic dependency relations between objects."""

from __future__ import annotations

import logging
import sys
from typing import (
    Any,
    Callable,
    Dict,
    Generic,
    Iterable,
    Iterator,
    List,
    Mapping,
    Optional,
    Set,
    TextIO,
    Tuple,
    TypeVar,
    Union,
    cast,
)

T = TypeVar("T")

Edges = Union[Mapping[T, Iterable[T]], Iterable[Tuple[T, T]]]


class PreconditionError(AssertionError):

    """Raised when a Requirements method is called in violation of its contract.

    The store is left exactly as it was before the failing call.
    """


class _Absent:
    """Type used for indicating an omitted object argument."""

    def __repr__(self) -> str:
        return "<absent>"


ABSENT: Any = _Absent()


class Requirements(Generic[T]):

    """A set of pairs of objects where the first depends on the second.

    Pairs are unique, and a pair is rejected if the requirement is already
    implied through a chain of other pairs. By default reflexivity is not
    allowed: two objects cannot depend on each other, directly or through a
    chain. Passing reflexive=True allows mutual dependencies. The reflexive
    status cannot change after construction.

    Objects of type T must be hashable. Example usage:

        reqs: Requirements[str] = Requirements()
        reqs.add("deploy", "build")
        reqs.add("build", "fetch")
        reqs.requires("deploy", "fetch")  # True
        reqs.all_requirements("deploy")  # [["deploy", "build", "fetch"]]
    """

    def __init__(self, reflexive: bool = False):
        self._reflexive = reflexive
        self._table: Dict[T, List[T]] = {}
        self._size = 0

    def __repr__(self) -> str:
        return f"Requirements(reflexive={self._reflexive}, size={self._size})"

    @property
    def reflexive(self) -> bool:
        """Whether objects are allowed to depend on each other."""
        return self._reflexive

    def empty(self) -> bool:
        return self._size == 0

    def size(self) -> int:
        """Return the number of (dependent, requirement) pairs."""
        return self._size

    def __len__(self) -> int:
        return self._size

    def __iter__(self) -> Iterator[Tuple[T, T]]:
        """Iterate over all (dependent, requirement) pairs."""
        for dependent, reqs in self._table.items():
            for requirement in reqs:
                yield dependent, requirement

    def __contains__(self, pair: object) -> bool:
        if not isinstance(pair, tuple) or len(pair) != 2:
            return False
        return self.exists(pair[0], pair[1])

    def clear(self):
        self._table.clear()
        self._size = 0

    def copy(self) -> Requirements[T]:
        """Return an independent store with the same status and pairs."""
        other: Requirements[T] = Requirements(self._reflexive)
        other._table = {dep: list(reqs) for dep, reqs in self._table.items()}
        other._size = self._size
        return other

    def dump(self, out: TextIO = sys.stdout):
        """Dump a textual representation of the requirements to out."""
        for dependent, reqs in self._table.items():
            print(dependent, file=out)
            for requirement in reqs:
                print(f"    {requirement}", file=out)

    def add(self, dependent: T, requirement: T):
        """Add a pair where dependent depends on requirement.

        Raises PreconditionError if dependent and requirement are the same
        object, if the requirement is already implied (directly or through a
        chain), or if the opposite requirement is implied while reflexivity is
        not allowed.
        """
        if dependent == requirement:
            raise PreconditionError(
                f"{dependent!r} cannot be a requirement of itself"
            )
        if self.requires(dependent, requirement):
            raise PreconditionError(
                f"requirement {dependent!r} -> {requirement!r} is already implied"
            )
        if not self._reflexive and self.requires(requirement, dependent):
            raise PreconditionError(
                f"opposite requirement {requirement!r} -> {dependent!r} exists"
                " and reflexivity is not allowed"
            )
        self._table.setdefault(dependent, []).append(requirement)
        self._size += 1
        logging.debug("added requirement %r -> %r", dependent, requirement)

    def remove(self, dependent: T, requirement: T):
        """Remove the pair where dependent directly depends on requirement.

        Raises PreconditionError if the pair does not exist. The opposite pair,
        if any, is left untouched.
        """
        reqs = self._table.get(dependent)
        if not reqs or requirement not in reqs:
            raise PreconditionError(
                f"requirement {dependent!r} -> {requirement!r} does not exist"
            )
        reqs.remove(requirement)
        if not reqs:
            del self._table[dependent]
        self._size -= 1
        logging.debug("removed requirement %r -> %r", dependent, requirement)

    def remove_dependent(self, dependent: T):
        """Remove all pairs where the object is the dependent.

        Raises PreconditionError if the object has no requirement. Pairs where
        it is the requirement are left.
        """
        reqs = self._table.pop(dependent, None)
        if not reqs:
            raise PreconditionError(f"{dependent!r} has no requirement")
        self._size -= len(reqs)
        logging.debug("removed %d requirements of %r", len(reqs), dependent)

    def remove_requirement(self, requirement: T):
        """Remove all pairs where the object is the requirement.

        Raises PreconditionError if the object has no dependent. Pairs where it
        is the dependent are left.
        """
        if not self.has_dependents(requirement):
            raise PreconditionError(f"{requirement!r} has no dependent")
        count = 0
        for dependent in list(self._table):
            reqs = self._table[dependent]
            if requirement in reqs:
                reqs.remove(requirement)
                count += 1
                if not reqs:
                    del self._table[dependent]
        self._size -= count
        logging.debug("removed %d dependents of %r", count, requirement)

    def remove_all(self, obj: T):
        """Remove all pairs involving the object on either side."""
        if self.has_requirements(obj):
            self.remove_dependent(obj)
        if self.has_dependents(obj):
            self.remove_requirement(obj)

    def exists(self, dependent: T, requirement: T, recurse: bool = False) -> bool:
        """Return true if dependent directly depends on requirement.

        With recurse=True, this is the same as requires().
        """
        if recurse:
            return self.requires(dependent, requirement)
        return requirement in self._table.get(dependent, ())

    def requires(self, dependent: T, requirement: T) -> bool:
        """Return true if dependent depends on requirement through any chain."""
        visited: Optional[Set[T]] = set() if self._reflexive else None
        return self._requires(dependent, requirement, ABSENT, visited)

    def _requires(
        self, dependent: T, requirement: T, prev: Any, visited: Optional[Set[T]]
    ) -> bool:
        # Only reflexive stores can contain cycles, so only they need visited.
        if visited is not None:
            if dependent in visited:
                return False
            visited.add(dependent)
        reqs = self._table.get(dependent, ())
        if requirement in reqs:
            return True
        for req in reqs:
            if prev is not ABSENT and req == prev:
                continue
            if self._requires(req, requirement, dependent, visited):
                return True
        return False

    def has_requirements(self, dependent: T) -> bool:
        return dependent in self._table

    def has_dependents(self, requirement: T) -> bool:
        return any(requirement in reqs for reqs in self._table.values())

    def requirements(self, dependent: T) -> List[T]:
        """Return the objects on which dependent directly depends."""
        return list(self._table.get(dependent, ()))

    def dependents(self, requirement: T) -> List[T]:
        """Return the objects that directly depend on requirement."""
        return [dep for dep, reqs in self._table.items() if requirement in reqs]

    def all_requirements(
        self, dependent: T = ABSENT, *, without_duplicates: bool = True
    ) -> List[List[T]]:
        """Return chains of requirements, from dependents to requirements.

        Given a dependent, returns every branch [dependent, r1, ..., rk] of
        objects on which it depends directly or indirectly, and raises
        PreconditionError if it has no direct requirement.

        Without a dependent, returns the branches of all objects. If
        without_duplicates is true, only objects that have no dependents start
        a branch, so that no branch is a tail of another.
        """
        if dependent is ABSENT:
            return self._all_chains(
                lambda dep, req: dep,
                self.has_dependents,
                self.all_requirements,
                without_duplicates,
            )
        if not self.has_requirements(dependent):
            raise PreconditionError(f"{dependent!r} has no requirement")
        return self._chains(dependent, self.requirements, ())

    def all_dependencies(
        self, requirement: T = ABSENT, *, without_duplicates: bool = True
    ) -> List[List[T]]:
        """Return chains of dependencies, from requirements to dependents.

        Given a requirement, returns every branch [requirement, d1, ..., dk] of
        objects that depend on it directly or indirectly, and raises
        PreconditionError if it has no direct dependent.

        Without a requirement, returns the branches of all objects. If
        without_duplicates is true, only objects that depend on nothing start a
        branch.
        """
        if requirement is ABSENT:
            return self._all_chains(
                lambda dep, req: req,
                self.has_requirements,
                self.all_dependencies,
                without_duplicates,
            )
        if not self.has_dependents(requirement):
            raise PreconditionError(f"{requirement!r} has no dependent")
        return self._chains(requirement, self.dependents, ())

    def _chains(
        self, start: T, step: Callable[[T], List[T]], path: Tuple[T, ...]
    ) -> List[List[T]]:
        """Walk from start along step, returning all maximal chains.

        A chain stops at an object with no successor, or whose successors are
        all on the chain already (only possible when reflexive).
        """
        result: List[List[T]] = []
        path = path + (start,)
        for nxt in step(start):
            if nxt in path:
                continue
            subs = self._chains(nxt, step, path)
            if subs:
                result.extend([start] + sub for sub in subs)
            else:
                result.append([start, nxt])
        return result

    def _all_chains(
        self,
        pick: Callable[[T, T], T],
        is_inner: Callable[[T], bool],
        expand: Callable[[T], List[List[T]]],
        without_duplicates: bool,
    ) -> List[List[T]]:
        result: List[List[T]] = []
        started: Set[T] = set()
        for pair in self:
            obj = pick(*pair)
            if obj in started:
                continue
            if without_duplicates and is_inner(obj):
                continue
            started.add(obj)
            result.extend(expand(obj))
        return result

    def get(self) -> Dict[T, List[T]]:
        """Return a copy of the table of requirements."""
        return {dep: list(reqs) for dep, reqs in self._table.items()}

    def set(self, edges: Edges[T]):
        """Replace all pairs with the given ones.

        Accepts the mapping returned by get() or an iterable of pairs. Each pair
        is checked as in add(). If any pair is rejected, PreconditionError is
        raised and the store is unchanged.
        """
        staged: Requirements[T] = Requirements(self._reflexive)
        staged.merge(edges)
        self._commit(staged)

    def merge(self, edges: Edges[T]):
        """Add the given pairs to the existing ones, in order.

        Same checks and failure behavior as set().
        """
        staged = self.copy()
        for dependent, requirement in _pairs(edges):
            staged.add(dependent, requirement)
        self._commit(staged)

    def _commit(self, staged: Requirements[T]):
        self._table = staged._table
        self._size = staged._size


def _pairs(edges: Edges[T]) -> Iterator[Tuple[T, T]]:
    """Iterate over (dependent, requirement) pairs in edges."""
    if isinstance(edges, Mapping):
        table = cast(Mapping[T, Iterable[T]], edges)
        for dependent, reqs in table.items():
            for requirement in reqs:
                yield dependent, requirement
    else:
        yield from cast(Iterable[Tuple[T, T]], edges)
