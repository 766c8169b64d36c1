"""
Runs the per-file checks over a batch of newly picked files:
  sniff signature → size → name charset / name length

Every file is judged on its own. The only batch-level product is the
combined error report.
"""

import asyncio
import logging
from typing import Iterable, Optional

from pdf_intake.schemas import CandidateFile, SelectionEntry, ValidationOutcome
from pdf_intake.sniffer import SignatureMatch, sniff
from pdf_intake.validation import (
    REJECTION_MESSAGES,
    UNREADABLE_FILE_MESSAGE,
    OutcomeKind,
    check_name,
    check_size,
    name_stem,
)

logger = logging.getLogger(__name__)


async def validate_file(candidate: CandidateFile) -> SelectionEntry:
    """
    Validate one file and attach its outcome.

    Format, size and name failures are collected independently, so a file can
    carry several rejections. Their messages are joined with newlines in that
    order.
    """
    rejections: list[OutcomeKind] = []
    messages: list[str] = []

    try:
        match = await sniff(candidate)
    except OSError as exc:
        logger.warning("Could not read %s: %s", candidate.name, exc)
        rejections.append(OutcomeKind.REJECTED_FORMAT)
        messages.append(UNREADABLE_FILE_MESSAGE)
    else:
        if match is SignatureMatch.DOES_NOT_MATCH:
            rejections.append(OutcomeKind.REJECTED_FORMAT)
            messages.append(REJECTION_MESSAGES[OutcomeKind.REJECTED_FORMAT])

    for kind in (check_size(candidate.size), check_name(name_stem(candidate.name))):
        if kind is not OutcomeKind.ACCEPTED:
            rejections.append(kind)
            messages.append(REJECTION_MESSAGES[kind])

    outcome = ValidationOutcome(rejections=tuple(rejections), message="\n".join(messages))
    if rejections:
        logger.info(
            "Rejected %s: %s",
            candidate.name,
            ", ".join(k.value for k in rejections),
        )
    return SelectionEntry(file=candidate, outcome=outcome)


async def validate_batch(files: Iterable[CandidateFile]) -> list[SelectionEntry]:
    """
    Validate a batch of files.

    Signature reads run concurrently; gather() hands results back in input
    order, so the caller can apply them as one ordered update.
    """
    files = list(files)
    entries = await asyncio.gather(*(validate_file(f) for f in files))
    logger.debug(
        "Validated batch of %d file(s), %d rejected",
        len(entries),
        sum(1 for e in entries if e.invalid),
    )
    return list(entries)


def batch_error_message(entries: Iterable[SelectionEntry]) -> Optional[str]:
    """All rejection messages of a batch, one per line. None when nothing failed."""
    lines = [e.outcome.message for e in entries if e.invalid]
    return "\n".join(lines) if lines else None
