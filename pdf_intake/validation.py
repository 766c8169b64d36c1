"""
Filename and size rules for picked files.
Pure, synchronous checks. The content signature lives in sniffer.py.
"""

import re
from enum import Enum


MAX_FILE_SIZE_BYTES = 2 * 1024 * 1024
MIN_NAME_LENGTH = 1
MAX_NAME_LENGTH = 255

_NAME_PATTERN = re.compile(r"[a-z0-9_]+")


class OutcomeKind(str, Enum):
    ACCEPTED = "accepted"
    REJECTED_FORMAT = "rejected_format"
    REJECTED_NAME = "rejected_name"
    REJECTED_NAME_LENGTH = "rejected_name_length"
    REJECTED_SIZE = "rejected_size"


REJECTION_MESSAGES = {
    OutcomeKind.REJECTED_FORMAT: "Invalid file type. Please select a PDF document.",
    OutcomeKind.REJECTED_SIZE: "File size exceeds the limit of 2MB. Please select a smaller file.",
    OutcomeKind.REJECTED_NAME: (
        "Invalid file name. File names should only contain lowercase letters, "
        "numbers, and underscores."
    ),
    OutcomeKind.REJECTED_NAME_LENGTH: (
        f"File name length must be between {MIN_NAME_LENGTH} and {MAX_NAME_LENGTH} characters."
    ),
}

UNREADABLE_FILE_MESSAGE = "Could not read file. Please select a PDF document."


def name_stem(filename: str) -> str:
    """Name portion before the first '.' ("report.v2.pdf" -> "report")."""
    return filename.split(".", 1)[0]


def is_valid_charset(name: str) -> bool:
    return _NAME_PATTERN.fullmatch(name) is not None


def is_valid_length(name: str) -> bool:
    return MIN_NAME_LENGTH <= len(name) <= MAX_NAME_LENGTH


def check_name(name: str) -> OutcomeKind:
    """
    Charset first, then length. Only one name rejection is reported per file.
    """
    if not is_valid_charset(name):
        return OutcomeKind.REJECTED_NAME
    if not is_valid_length(name):
        return OutcomeKind.REJECTED_NAME_LENGTH
    return OutcomeKind.ACCEPTED


def check_size(byte_length: int) -> OutcomeKind:
    """Reject strictly above the ceiling; exactly 2 MiB is fine."""
    if byte_length > MAX_FILE_SIZE_BYTES:
        return OutcomeKind.REJECTED_SIZE
    return OutcomeKind.ACCEPTED
