"""
Tests for the selection controller: batches, removal and submission.
"""

import asyncio

import httpx
import pytest

from pdf_intake.exceptions import EmptySelectionError, SelectionBlockedError
from pdf_intake.schemas import CandidateFile
from pdf_intake.services.dispatcher import UploadDispatcher
from pdf_intake.services.session import SelectionSession

PDF = b"%PDF-1.7\n" + b"\x00" * 128
PNG = b"\x89PNG\r\n\x1a\n" + b"\x00" * 128


def _session(status: int = 200) -> tuple[SelectionSession, list[httpx.Request]]:
    seen: list[httpx.Request] = []

    def handler(request):
        seen.append(request)
        return httpx.Response(status, json={"received": True})

    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return SelectionSession(UploadDispatcher("https://uploads.test/upload", client=client)), seen


def test_scenario_single_report():
    session, _ = _session()
    state = asyncio.run(session.add_files([CandidateFile.from_bytes("report.pdf", PDF, "application/pdf")]))
    assert len(state.entries) == 1
    assert state.entries[0].outcome.accepted is True
    assert state.can_submit is True


def test_scenario_uppercase_name_blocks_submit():
    session, _ = _session()
    state = asyncio.run(session.add_files([CandidateFile.from_bytes("Report.pdf", PDF, "application/pdf")]))
    assert state.entries[0].outcome.kind.value == "rejected_name"
    assert state.can_submit is False


def test_submit_with_nothing_selected_makes_no_request():
    session, seen = _session()
    with pytest.raises(EmptySelectionError):
        asyncio.run(session.submit())
    assert seen == []


def test_submit_with_only_rejected_files_is_empty():
    session, seen = _session()
    asyncio.run(session.add_files([CandidateFile.from_bytes("image.pdf", PNG, "image/png")]))
    with pytest.raises(EmptySelectionError):
        asyncio.run(session.submit())
    assert seen == []


def test_submit_blocked_while_rejects_remain():
    session, seen = _session()
    asyncio.run(
        session.add_files(
            [
                CandidateFile.from_bytes("good.pdf", PDF, "application/pdf"),
                CandidateFile.from_bytes("image.pdf", PNG, "image/png"),
            ]
        )
    )
    with pytest.raises(SelectionBlockedError):
        asyncio.run(session.submit())
    assert seen == []

    session.remove_at(1)
    report = asyncio.run(session.submit())
    assert report.success is True
    assert report.file_count == 1


def test_successful_submit_empties_selection():
    session, seen = _session()
    asyncio.run(session.add_files([CandidateFile.from_bytes("report.pdf", PDF, "application/pdf")]))
    report = asyncio.run(session.submit())

    assert report.success is True
    assert report.response.data == {"received": True}
    assert len(seen) == 1
    assert session.state.entries == ()
    assert session.state.can_submit is False


def test_failed_submit_keeps_selection_for_retry(caplog):
    session, seen = _session(status=503)
    asyncio.run(session.add_files([CandidateFile.from_bytes("report.pdf", PDF, "application/pdf")]))

    with caplog.at_level("ERROR"):
        report = asyncio.run(session.submit())

    assert report.success is False
    assert "503" in report.error
    assert "Error uploading" in caplog.text
    assert len(session.state.entries) == 1
    assert session.state.can_submit is True


def test_batches_are_not_revalidated():
    session, _ = _session()
    asyncio.run(session.add_files([CandidateFile.from_bytes("Bad.pdf", PDF, "application/pdf")]))
    first = session.state.entries[0]
    asyncio.run(session.add_files([CandidateFile.from_bytes("good.pdf", PDF, "application/pdf")]))
    assert session.state.entries[0] is first


def test_file_gone_before_submit_is_reported(tmp_path, caplog):
    session, seen = _session()
    path = tmp_path / "report.pdf"
    path.write_bytes(PDF)
    asyncio.run(session.add_files([CandidateFile.from_path(path)]))
    path.unlink()

    with caplog.at_level("ERROR"):
        report = asyncio.run(session.submit())

    assert report.success is False
    assert "Could not read report.pdf" in report.error
    assert "Error uploading" in caplog.text
    assert seen == []
    assert [e.file.name for e in session.state.entries] == ["report.pdf"]
    assert session.state.can_submit is True


# ---------------------------------------------------------------------------
# Concurrency
# ---------------------------------------------------------------------------

class _SlowFile(CandidateFile):
    async def read_head(self, n: int) -> bytes:
        await asyncio.sleep(0.05)
        return await super().read_head(n)


def test_batches_and_upload_interleave_safely():
    async def scenario():
        upload_released = asyncio.Event()

        async def handler(request):
            await upload_released.wait()
            return httpx.Response(200, json={"received": True})

        client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
        session = SelectionSession(UploadDispatcher("https://uploads.test/upload", client=client))
        await session.add_files([CandidateFile.from_bytes("a.pdf", PDF, "application/pdf")])

        async def add_two_batches():
            slow = _SlowFile(name="b.pdf", size=len(PDF), content_type="application/pdf", content=PDF)
            fast = CandidateFile.from_bytes("c.pdf", PDF, "application/pdf")
            # b starts first but finishes its read last; batches must not interleave.
            await asyncio.gather(session.add_files([slow]), session.add_files([fast]))
            upload_released.set()

        report, _ = await asyncio.gather(session.submit(), add_two_batches())
        return report, session.state

    report, state = asyncio.run(scenario())

    assert report.success is True
    assert report.file_count == 1
    assert [e.file.name for e in state.entries] == ["b.pdf", "c.pdf"]
    assert state.can_submit is True
