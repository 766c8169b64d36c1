"""
API endpoints for the file selection.

GET    /api/selection  : current selection with per-file outcomes
POST   /api/selection  : validate a batch of files and add it
DELETE /api/selection/{index}  : remove one file
POST   /api/selection/submit  : upload the accepted files
"""

import logging

from fastapi import APIRouter, File, HTTPException, Request, UploadFile

from pdf_intake.exceptions import EmptySelectionError, SelectionBlockedError
from pdf_intake.schemas import CandidateFile, SelectionView, SubmissionReport
from pdf_intake.services.session import SelectionSession
from pdf_intake.sniffer import SIGNATURE_LENGTH
from pdf_intake.validation import MAX_FILE_SIZE_BYTES

logger = logging.getLogger(__name__)

router = APIRouter()


def _session(request: Request) -> SelectionSession:
    return request.app.state.selection


def _read_limit(upload: UploadFile) -> int:
    # Oversized files are never sent, so only their signature is needed.
    if upload.size is not None and upload.size > MAX_FILE_SIZE_BYTES:
        return SIGNATURE_LENGTH
    return MAX_FILE_SIZE_BYTES + 1


@router.get("/selection", response_model=SelectionView)
def get_selection(request: Request) -> SelectionView:
    return SelectionView.from_state(_session(request).state)


@router.post("/selection", response_model=SelectionView)
async def add_files(
    request: Request,
    files: list[UploadFile] = File(..., description="Files picked by the user"),
) -> SelectionView:
    """
    Validate the uploaded files as one batch and append them to the selection.

    Rejected files are kept and flagged; the combined reasons are returned in
    error_message.
    """
    candidates = []
    for upload in files:
        try:
            content = await upload.read(_read_limit(upload))
        except Exception:
            logger.exception("Failed to read uploaded file %s", upload.filename)
            raise HTTPException(status_code=422, detail=f"Failed to read {upload.filename}.")
        finally:
            await upload.close()
        candidates.append(
            CandidateFile(
                name=upload.filename or "",
                size=upload.size if upload.size is not None else len(content),
                content_type=upload.content_type or "",
                content=content,
            )
        )

    state = await _session(request).add_files(candidates)
    return SelectionView.from_state(state)


@router.delete("/selection/{index}", response_model=SelectionView)
def remove_file(request: Request, index: int) -> SelectionView:
    try:
        state = _session(request).remove_at(index)
    except IndexError as exc:
        raise HTTPException(status_code=404, detail=str(exc))
    return SelectionView.from_state(state)


@router.post("/selection/submit", response_model=SubmissionReport)
async def submit_selection(request: Request) -> SubmissionReport:
    try:
        report = await _session(request).submit()
    except (EmptySelectionError, SelectionBlockedError) as exc:
        raise HTTPException(status_code=400, detail=str(exc))

    if not report.success:
        raise HTTPException(status_code=502, detail=report.error)
    return report
