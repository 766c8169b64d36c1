"""
The controller that owns one selection: add batches, remove files, submit.
Nothing else holds a reference to the store.
"""

import asyncio
import logging
from typing import Iterable

from pdf_intake.exceptions import EmptySelectionError, SelectionBlockedError, TransportError
from pdf_intake.schemas import CandidateFile, SelectionState, SubmissionReport
from pdf_intake.services.dispatcher import UploadDispatcher
from pdf_intake.services.pipeline import validate_batch
from pdf_intake.services.selection import SelectionStore

logger = logging.getLogger(__name__)


class SelectionSession:
    def __init__(self, dispatcher: UploadDispatcher) -> None:
        self._store = SelectionStore()
        self._dispatcher = dispatcher
        self._batch_lock = asyncio.Lock()

    @property
    def state(self) -> SelectionState:
        return self._store.current()

    async def add_files(self, files: Iterable[CandidateFile]) -> SelectionState:
        """Validate a batch and append it. Batches never interleave."""
        async with self._batch_lock:
            entries = await validate_batch(files)
            return self._store.add(entries)

    def remove_at(self, index: int) -> SelectionState:
        return self._store.remove_at(index)

    async def submit(self) -> SubmissionReport:
        """
        Upload the accepted files.

        On success the uploaded files leave the selection. A transport failure is logged and
        reported, and the selection is left as it was so the user can retry.

        Raises:
            EmptySelectionError: no accepted files.
            SelectionBlockedError: rejected files are still selected.
        """
        state = self._store.current()
        sent = [e for e in state.entries if not e.invalid]
        files = [e.file for e in sent]
        if not files:
            raise EmptySelectionError()
        if not state.can_submit:
            raise SelectionBlockedError()

        try:
            response = await self._dispatcher.submit(files)
        except TransportError as exc:
            logger.exception("Error uploading %d file(s)", len(files))
            return SubmissionReport(success=False, file_count=len(files), error=str(exc))

        # Only drop what was sent; files added during the upload stay selected.
        sent_ids = {id(e) for e in sent}
        current = self._store.current()
        for index in reversed(range(len(current.entries))):
            if id(current.entries[index]) in sent_ids:
                self._store.remove_at(index)
        return SubmissionReport(success=True, file_count=len(files), response=response)
