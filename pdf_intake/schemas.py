"""
Models for candidate files, per-file validation outcomes and the selection state.
This is the source of truth for the JSON shape returned by the API.
"""

import asyncio
import mimetypes
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, computed_field

from pdf_intake.validation import OutcomeKind, is_valid_charset, name_stem

PDF_CONTENT_TYPE = "application/pdf"


@dataclass(frozen=True)
class CandidateFile:
    """A file picked by the user. Bytes come from memory or from disk."""

    name: str
    size: int
    content_type: str = ""
    content: Optional[bytes] = field(default=None, repr=False)
    path: Optional[Path] = None

    @classmethod
    def from_bytes(cls, name: str, content: bytes, content_type: str = "") -> "CandidateFile":
        return cls(name=name, size=len(content), content_type=content_type, content=content)

    @classmethod
    def from_path(cls, path: str | Path) -> "CandidateFile":
        p = Path(path)
        guessed, _ = mimetypes.guess_type(p.name)
        return cls(name=p.name, size=p.stat().st_size, content_type=guessed or "", path=p)

    async def read_head(self, n: int) -> bytes:
        if self.content is not None:
            return self.content[:n]
        return await asyncio.to_thread(_read_path, self.path, n)

    async def read(self) -> bytes:
        if self.content is not None:
            return self.content
        return await asyncio.to_thread(_read_path, self.path, -1)


def _read_path(path: Optional[Path], n: int) -> bytes:
    if path is None:
        raise OSError("Candidate file has no content and no path")
    with open(path, "rb") as fh:
        return fh.read(n)


class ValidationOutcome(BaseModel):
    """Verdict for one file. Several rejections may coexist."""

    model_config = ConfigDict(frozen=True)

    rejections: tuple[OutcomeKind, ...] = ()
    message: str = ""

    @computed_field
    @property
    def accepted(self) -> bool:
        return not self.rejections

    @computed_field
    @property
    def kind(self) -> OutcomeKind:
        return self.rejections[0] if self.rejections else OutcomeKind.ACCEPTED


class FileInfo(BaseModel):
    name: str
    size: int
    content_type: str


class SelectionEntry(BaseModel):
    model_config = ConfigDict(frozen=True)

    file: CandidateFile
    outcome: ValidationOutcome

    @property
    def invalid(self) -> bool:
        return not self.outcome.accepted

    # Display cues are independent of each other and of the outcome.
    @property
    def content_type_mismatch(self) -> bool:
        return self.file.content_type != PDF_CONTENT_TYPE

    @property
    def name_flagged(self) -> bool:
        return not is_valid_charset(name_stem(self.file.name))


class SelectionState(BaseModel):
    model_config = ConfigDict(frozen=True)

    entries: tuple[SelectionEntry, ...] = ()
    has_error: bool = False
    error_message: Optional[str] = None

    @property
    def can_submit(self) -> bool:
        return bool(self.entries) and not self.has_error


# ===== API Schemas =====

class EntryView(BaseModel):
    index: int
    file: FileInfo
    outcome: ValidationOutcome
    invalid: bool
    content_type_mismatch: bool
    name_flagged: bool


class SelectionView(BaseModel):
    entries: list[EntryView]
    can_submit: bool
    error_message: Optional[str] = None

    @classmethod
    def from_state(cls, state: SelectionState) -> "SelectionView":
        return cls(
            entries=[
                EntryView(
                    index=i,
                    file=FileInfo(
                        name=e.file.name,
                        size=e.file.size,
                        content_type=e.file.content_type,
                    ),
                    outcome=e.outcome,
                    invalid=e.invalid,
                    content_type_mismatch=e.content_type_mismatch,
                    name_flagged=e.name_flagged,
                )
                for i, e in enumerate(state.entries)
            ],
            can_submit=state.can_submit,
            error_message=state.error_message,
        )


class UploadResponse(BaseModel):
    """What the upload endpoint answered."""
    status_code: int
    data: Optional[Any] = None


class SubmissionReport(BaseModel):
    success: bool
    file_count: int
    response: Optional[UploadResponse] = None
    error: Optional[str] = None
