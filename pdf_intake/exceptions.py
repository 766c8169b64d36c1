"""
Errors raised by the upload side. Per-file validation failures are not
exceptions; they are recorded as outcomes on the selection.
"""

from typing import Optional


class PdfIntakeError(Exception):
    pass


class UploadError(PdfIntakeError):
    pass


class EmptySelectionError(UploadError):
    def __init__(self, message: str = "No files selected") -> None:
        super().__init__(message)


class SelectionBlockedError(UploadError):
    def __init__(self, message: str = "Selection contains invalid files") -> None:
        super().__init__(message)


class TransportError(UploadError):
    """The POST failed or the server answered with a non-2xx status."""

    def __init__(self, message: str, status_code: Optional[int] = None) -> None:
        super().__init__(message)
        self.status_code = status_code
