"""Request-driven record caches mutated only through a closed set of actions.

A store holds an immutable, ordered tuple of records. :func:`reduce` is the
only place state changes, and it handles every action variant or fails.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator, Mapping
from dataclasses import dataclass, field
from typing import Any, Generic, TypeVar, Union, assert_never

from pydantic import BaseModel

logger = logging.getLogger(__name__)

R = TypeVar("R", bound=BaseModel)


@dataclass(frozen=True)
class ReplaceAll(Generic[R]):
    """Replace the whole cache with freshly fetched records."""

    records: tuple[R, ...]


@dataclass(frozen=True)
class Append(Generic[R]):
    """Add one record at the end."""

    record: R


@dataclass(frozen=True)
class UpdateOne:
    """Apply field changes (by attribute name) to the record with ``record_id``."""

    record_id: str
    changes: Mapping[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class RemoveById:
    """Drop the record with ``record_id``."""

    record_id: str


@dataclass(frozen=True)
class Reset:
    """Empty the cache."""


Action = Union[ReplaceAll[R], Append[R], UpdateOne, RemoveById, Reset]


def reduce(state: tuple[R, ...], action: Action[R]) -> tuple[R, ...]:
    """Return the state that results from applying ``action``."""
    if isinstance(action, ReplaceAll):
        return tuple(action.records)
    if isinstance(action, Append):
        return (*state, action.record)
    if isinstance(action, UpdateOne):
        return tuple(
            record.model_copy(update=dict(action.changes))
            if record.id == action.record_id
            else record
            for record in state
        )
    if isinstance(action, RemoveById):
        return tuple(record for record in state if record.id != action.record_id)
    if isinstance(action, Reset):
        return ()
    assert_never(action)


class Store(Generic[R]):
    """Ordered cache of records of one kind."""

    def __init__(self, name: str) -> None:
        self.name = name
        self._records: tuple[R, ...] = ()

    @property
    def records(self) -> tuple[R, ...]:
        return self._records

    def dispatch(self, action: Action[R]) -> None:
        logger.debug("%s store: %s", self.name, type(action).__name__)
        self._records = reduce(self._records, action)

    def find(self, record_id: str) -> R | None:
        return next((record for record in self._records if record.id == record_id), None)

    def __iter__(self) -> Iterator[R]:
        return iter(self._records)

    def __len__(self) -> int:
        return len(self._records)
