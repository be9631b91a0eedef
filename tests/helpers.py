"""Shared test doubles: PDF bytes, fake capabilities, candidate builders."""

import io
from pathlib import Path

import httpx
from pypdf import PdfReader
from reportlab.lib.pagesizes import A4
from reportlab.pdfgen import canvas

from src.core.errors import ConversionError, MergeError, RenderError
from src.core.schemas import CandidateRecord
from src.pipeline.converter import DocumentConverter, converted_path
from src.pipeline.fetcher import ResourceFetcher
from src.pipeline.merger import DocumentMerger, PyPdfMerger
from src.pipeline.renderer import FactsheetRenderer, ReportLabFactsheetRenderer
from src.pipeline.toolkit import Toolkit

RESUME_PAGES = 2
CONVERTED_PAGES = 3


def pdf_bytes(pages: int, label: str = "resume") -> bytes:
    """A real PDF with ``pages`` pages."""
    buf = io.BytesIO()
    c = canvas.Canvas(buf, pagesize=A4)
    for i in range(pages):
        c.drawString(72, 720, f"{label} page {i + 1}")
        c.showPage()
    c.save()
    return buf.getvalue()


def page_count(pdf_path: Path) -> int:
    return len(PdfReader(str(pdf_path)).pages)


def resume_handler(request: httpx.Request) -> httpx.Response:
    """Serves a resume for any path, except ``missing``/``broken`` ones."""
    path = request.url.path
    if "missing" in path:
        return httpx.Response(404, text="not found")
    if "broken" in path:
        return httpx.Response(500, text="server error")
    return httpx.Response(200, content=pdf_bytes(RESUME_PAGES))


def mock_fetcher() -> ResourceFetcher:
    return ResourceFetcher(timeout_s=5, transport=httpx.MockTransport(resume_handler))


class FakeConverter(DocumentConverter):
    """Writes a fixed PDF instead of calling an office suite."""

    def __init__(self, *, fail: bool = False) -> None:
        self.fail = fail
        self.calls: list[Path] = []

    @property
    def converter_id(self) -> str:
        return "fake"

    async def convert(self, input_path: Path, output_dir: Path) -> Path:
        self.calls.append(input_path)
        if self.fail:
            msg = "soffice exited with status 1: source file could not be loaded"
            raise ConversionError(msg)
        output = converted_path(input_path, output_dir)
        output.write_bytes(pdf_bytes(CONVERTED_PAGES, "converted"))
        return output


class FailingMerger(DocumentMerger):
    @property
    def merger_id(self) -> str:
        return "failing"

    async def merge(self, primary: Path, secondary: Path, output: Path) -> None:
        msg = "pdfunite exited with status 1: Syntax Error"
        raise MergeError(msg)


class FailingRenderer(FactsheetRenderer):
    def render(self, candidate: CandidateRecord, output_path: Path) -> None:
        msg = "no space left on device"
        raise RenderError(msg)


def make_toolkit(**overrides: object) -> Toolkit:
    parts: dict[str, object] = {
        "fetcher": mock_fetcher(),
        "converter": FakeConverter(),
        "merger": PyPdfMerger(),
        "renderer": ReportLabFactsheetRenderer(),
    }
    parts.update(overrides)
    return Toolkit(**parts)  # type: ignore[arg-type]


def make_candidate(**overrides: object) -> CandidateRecord:
    defaults: dict[str, object] = {
        "name": "Alice Smith",
        "email": "alice@example.com",
        "mobile_no": "+1 555 0100",
        "skills": ["Python", "SQL", "Docker"],
        "experience": "5 years backend development",
        "qualification": "BSc Computer Science",
        "resume_url": "https://cdn.example.com/resumes/alice.pdf",
    }
    defaults.update(overrides)
    return CandidateRecord(**defaults)  # type: ignore[arg-type]
