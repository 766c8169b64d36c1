"""
Magic-byte check for PDF content. Format sniffing only, not proof of a valid PDF.
"""

from enum import Enum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from pdf_intake.schemas import CandidateFile

SIGNATURE_LENGTH = 5

# "%PDF" and the same prefixed by a UTF-8 byte order mark.
PDF_SIGNATURES = {"25504446", "efbbbf25"}


class SignatureMatch(str, Enum):
    MATCHES_PDF = "matches_pdf"
    DOES_NOT_MATCH = "does_not_match"


def classify(head: bytes) -> SignatureMatch:
    """Compare the first four bytes of a head read against the PDF signatures."""
    if len(head) < SIGNATURE_LENGTH:
        return SignatureMatch.DOES_NOT_MATCH
    if head[:4].hex() in PDF_SIGNATURES:
        return SignatureMatch.MATCHES_PDF
    return SignatureMatch.DOES_NOT_MATCH


async def sniff(candidate: "CandidateFile") -> SignatureMatch:
    """Read the head of a candidate file and classify it. OSError propagates."""
    head = await candidate.read_head(SIGNATURE_LENGTH)
    return classify(head)
