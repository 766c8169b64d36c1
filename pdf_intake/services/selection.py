"""
Selection state and its transitions.

All changes go through reduce(state, event) -> state. SelectionStore just holds
the current state and logs transitions.
"""

import logging
from dataclasses import dataclass
from typing import Sequence, Union

from pdf_intake.schemas import SelectionEntry, SelectionState
from pdf_intake.services.pipeline import batch_error_message

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FilesAdded:
    entries: tuple[SelectionEntry, ...]


@dataclass(frozen=True)
class FileRemoved:
    index: int


@dataclass(frozen=True)
class SelectionCleared:
    pass


SelectionEvent = Union[FilesAdded, FileRemoved, SelectionCleared]


def reduce(state: SelectionState, event: SelectionEvent) -> SelectionState:
    if isinstance(event, FilesAdded):
        batch_has_error = any(e.invalid for e in event.entries)
        return SelectionState(
            entries=state.entries + tuple(event.entries),
            # Sticky: a rejected batch blocks submit until the rejects are removed.
            has_error=state.has_error or batch_has_error,
            error_message=batch_error_message(event.entries),
        )

    if isinstance(event, FileRemoved):
        if not 0 <= event.index < len(state.entries):
            raise IndexError(f"No selected file at index {event.index}")
        remaining = state.entries[: event.index] + state.entries[event.index + 1 :]
        return SelectionState(
            entries=remaining,
            has_error=any(e.invalid for e in remaining),
            error_message=None,
        )

    if isinstance(event, SelectionCleared):
        return SelectionState()

    raise TypeError(f"Unknown selection event: {event!r}")


class SelectionStore:
    def __init__(self) -> None:
        self._state = SelectionState()

    def current(self) -> SelectionState:
        return self._state

    def dispatch(self, event: SelectionEvent) -> SelectionState:
        self._state = reduce(self._state, event)
        logger.debug(
            "%s -> %d file(s), can_submit=%s",
            type(event).__name__,
            len(self._state.entries),
            self._state.can_submit,
        )
        return self._state

    def add(self, entries: Sequence[SelectionEntry]) -> SelectionState:
        return self.dispatch(FilesAdded(tuple(entries)))

    def remove_at(self, index: int) -> SelectionState:
        return self.dispatch(FileRemoved(index))

    def clear(self) -> SelectionState:
        return self.dispatch(SelectionCleared())
