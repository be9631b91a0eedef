"""PDF concatenation: factsheet pages first, resume pages after.

Two implementations:
  - PdfUniteMerger: shells out to poppler's ``pdfunite``
  - PyPdfMerger: in-process with pypdf, no external binary needed

Neither validates that its inputs are PDFs.
"""

import asyncio
import logging
import threading
from abc import ABC, abstractmethod
from pathlib import Path

from pypdf import PdfReader, PdfWriter
from pypdf.errors import PyPdfError

from src.core.errors import MergeError
from src.pipeline.process import ToolError, run_tool

logger = logging.getLogger(__name__)


class DocumentMerger(ABC):
    """Capability that concatenates two PDFs in argument order."""

    @property
    @abstractmethod
    def merger_id(self) -> str:
        """Unique identifier for this merger (e.g. 'pdfunite')."""

    @abstractmethod
    async def merge(self, primary: Path, secondary: Path, output: Path) -> None:
        """Write ``primary`` pages then ``secondary`` pages to ``output``.

        Raises:
            MergeError: If the merge fails.
        """


class PdfUniteMerger(DocumentMerger):
    def __init__(self, binary: str = "pdfunite", timeout_s: float = 120.0) -> None:
        self._binary = binary
        self._timeout_s = timeout_s

    @property
    def merger_id(self) -> str:
        return "pdfunite"

    async def merge(self, primary: Path, secondary: Path, output: Path) -> None:
        logger.info("Merging PDFs: %s + %s -> %s", primary, secondary, output)
        argv = [self._binary, str(primary), str(secondary), str(output)]
        try:
            await run_tool(argv, self._timeout_s)
        except ToolError as e:
            raise MergeError(str(e)) from e
        logger.info("PDFs merged successfully: %s", output)


class PyPdfMerger(DocumentMerger):
    """Merges in a worker thread so the event loop stays free.

    A worker thread cannot be killed, so on timeout the merge is told to
    stop and checks for that between pages. It never writes ``output``
    once stopped, which keeps it from racing workspace removal.
    """

    def __init__(self, timeout_s: float = 120.0) -> None:
        self._timeout_s = timeout_s

    @property
    def merger_id(self) -> str:
        return "pypdf"

    async def merge(self, primary: Path, secondary: Path, output: Path) -> None:
        logger.info("Merging PDFs: %s + %s -> %s", primary, secondary, output)
        stop = threading.Event()
        try:
            await asyncio.wait_for(
                asyncio.to_thread(_merge_files, primary, secondary, output, stop),
                timeout=self._timeout_s,
            )
        except asyncio.TimeoutError:
            stop.set()
            msg = f"merge timed out after {self._timeout_s:g}s"
            raise MergeError(msg) from None
        except asyncio.CancelledError:
            stop.set()
            raise
        except (OSError, ValueError, PyPdfError) as e:
            raise MergeError(str(e)) from e
        logger.info("PDFs merged successfully: %s", output)


def _merge_files(primary: Path, secondary: Path, output: Path, stop: threading.Event) -> None:
    writer = PdfWriter()
    for source in (primary, secondary):
        for page in PdfReader(str(source)).pages:
            if stop.is_set():
                return
            writer.add_page(page)
    if stop.is_set():
        return
    with output.open("wb") as fh:
        writer.write(fh)


_REGISTRY: dict[str, type[DocumentMerger]] = {
    "pdfunite": PdfUniteMerger,
    "pypdf": PyPdfMerger,
}


def get_merger(name: str, **kwargs: object) -> DocumentMerger:
    """Instantiate a merger by name.

    Raises:
        ValueError: If the merger name is unknown.
    """
    if name not in _REGISTRY:
        valid = ", ".join(sorted(_REGISTRY))
        msg = f"Unknown merger '{name}'. Available: {valid}"
        raise ValueError(msg)
    return _REGISTRY[name](**kwargs)  # type: ignore[arg-type]
