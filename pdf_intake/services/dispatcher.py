"""
Sends accepted files to the upload endpoint. The only file that talks HTTP.

Wire format: one multipart/form-data POST with fields file1..fileN, plus
Content-Type1..Content-TypeN headers echoing each file's declared type.
"""

import logging
from typing import Optional, Sequence

import httpx

from pdf_intake.exceptions import EmptySelectionError, TransportError
from pdf_intake.schemas import CandidateFile, UploadResponse

logger = logging.getLogger(__name__)


class UploadDispatcher:
    def __init__(
        self,
        upload_url: str,
        timeout: float = 30.0,
        client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        self.upload_url = upload_url
        self.timeout = timeout
        self._client = client

    async def submit(self, files: Sequence[CandidateFile]) -> UploadResponse:
        """
        POST the files once. No retry.

        Raises:
            EmptySelectionError: nothing to send; no request is made.
            TransportError: a file could not be read, the request failed or the
                status was not 2xx.
        """
        if not files:
            raise EmptySelectionError()

        multipart = []
        headers = {}
        for index, candidate in enumerate(files, start=1):
            try:
                content = await candidate.read()
            except OSError as exc:
                raise TransportError(f"Could not read {candidate.name}: {exc}") from exc
            multipart.append(
                (f"file{index}", (candidate.name, content, candidate.content_type or None))
            )
            headers[f"Content-Type{index}"] = candidate.content_type

        try:
            if self._client is not None:
                response = await self._client.post(self.upload_url, files=multipart, headers=headers)
            else:
                async with httpx.AsyncClient(timeout=self.timeout) as client:
                    response = await client.post(self.upload_url, files=multipart, headers=headers)
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            raise TransportError(
                f"Upload failed with status {exc.response.status_code}",
                status_code=exc.response.status_code,
            ) from exc
        except httpx.HTTPError as exc:
            raise TransportError(f"Upload failed: {exc}") from exc

        try:
            data = response.json()
        except ValueError as exc:
            logger.warning("Upload response from %s is not JSON: %s", self.upload_url, exc)
            data = None

        logger.info("Uploaded %d file(s) to %s (status %d)", len(files), self.upload_url, response.status_code)
        return UploadResponse(status_code=response.status_code, data=data)
