"""
Command-line file picker.

Validates the given files as one batch, prints the selection and, with
--submit, uploads the accepted files when the selection allows it.

Usage:
    pdf-intake report.pdf annex_1.pdf --submit --url https://example.com/upload
"""

import argparse
import asyncio
import json
import logging
import sys

from pdf_intake.config import settings
from pdf_intake.exceptions import UploadError
from pdf_intake.schemas import CandidateFile, SelectionState, SelectionView
from pdf_intake.services.dispatcher import UploadDispatcher
from pdf_intake.services.session import SelectionSession

logger = logging.getLogger(__name__)


def print_report(state: SelectionState) -> None:
    print(f"\nSelected files ({len(state.entries)}):\n")
    for i, entry in enumerate(state.entries, 1):
        cues = []
        if entry.content_type_mismatch:
            cues.append(f"type={entry.file.content_type or 'unknown'}")
        if entry.name_flagged:
            cues.append("bad name")
        marker = "✗" if entry.invalid else "✓"
        suffix = f"  ({', '.join(cues)})" if cues else ""
        print(f"  {i}. {marker} {entry.file.name}{suffix}")

    if state.error_message:
        print("\nErrors:\n")
        for line in state.error_message.splitlines():
            print(f"  - {line}")

    print()
    print("Ready to submit." if state.can_submit else "Submission blocked.")
    print()


async def run(paths: list[str], submit: bool, url: str, as_json: bool) -> int:
    session = SelectionSession(UploadDispatcher(url, timeout=settings.UPLOAD_TIMEOUT_SECONDS))

    candidates = []
    for path in paths:
        try:
            candidates.append(CandidateFile.from_path(path))
        except OSError as exc:
            print(f"Cannot open {path}: {exc}", file=sys.stderr)
            return 2

    state = await session.add_files(candidates)
    if as_json:
        print(SelectionView.from_state(state).model_dump_json(indent=2))
    else:
        print_report(state)

    if not submit:
        return 0 if state.can_submit else 1

    try:
        report = await session.submit()
    except UploadError as exc:
        print(f"Not submitted: {exc}", file=sys.stderr)
        return 1

    if not report.success:
        print(f"Upload failed: {report.error}", file=sys.stderr)
        return 1
    print(f"Uploaded {report.file_count} file(s).")
    if report.response is not None and report.response.data is not None:
        print(json.dumps(report.response.data, indent=2))
    return 0


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Validate and upload PDF files")
    parser.add_argument("files", nargs="+", help="Files to select")
    parser.add_argument("--submit", action="store_true", help="Upload the accepted files")
    parser.add_argument("--url", default=settings.UPLOAD_URL, help="Upload endpoint")
    parser.add_argument("--json", action="store_true", help="Print the selection as JSON")
    args = parser.parse_args(argv)

    logging.basicConfig(level=settings.LOG_LEVEL)
    return asyncio.run(run(args.files, args.submit, args.url, args.json))


if __name__ == "__main__":
    sys.exit(main())
