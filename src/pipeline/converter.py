"""Format normalization: bring a fetched resume into PDF.

Usage::

    converter = get_converter("libreoffice")
    pdf_path = await converter.convert(Path("scratch/resume"), Path("scratch"))
"""

import logging
from abc import ABC, abstractmethod
from pathlib import Path, PurePosixPath
from urllib.parse import urlparse

from src.core.errors import ConversionError
from src.pipeline.process import ToolError, run_tool

logger = logging.getLogger(__name__)

CANONICAL_SUFFIX = ".pdf"


def needs_conversion(url: str) -> bool:
    """Return False when the URL path already ends in ``.pdf`` (case-insensitive)."""
    suffix = PurePosixPath(urlparse(url).path).suffix.lower()
    return suffix != CANONICAL_SUFFIX


def converted_path(input_path: Path, output_dir: Path) -> Path:
    """Where the converter writes its output: input stem + ``.pdf`` in ``output_dir``."""
    return output_dir / f"{input_path.stem}{CANONICAL_SUFFIX}"


class DocumentConverter(ABC):
    """Capability that turns a document into a PDF."""

    @property
    @abstractmethod
    def converter_id(self) -> str:
        """Unique identifier for this converter (e.g. 'libreoffice')."""

    @abstractmethod
    async def convert(self, input_path: Path, output_dir: Path) -> Path:
        """Convert ``input_path`` and return the PDF path inside ``output_dir``.

        Raises:
            ConversionError: If the conversion fails.
        """


class LibreOfficeConverter(DocumentConverter):
    """Shells out to ``libreoffice --headless --convert-to pdf``."""

    def __init__(self, binary: str = "libreoffice", timeout_s: float = 120.0) -> None:
        self._binary = binary
        self._timeout_s = timeout_s

    @property
    def converter_id(self) -> str:
        return "libreoffice"

    async def convert(self, input_path: Path, output_dir: Path) -> Path:
        logger.info("Converting file to PDF: %s", input_path)
        argv = [
            self._binary, "--headless", "--convert-to", "pdf",
            "--outdir", str(output_dir), str(input_path),
        ]
        try:
            await run_tool(argv, self._timeout_s)
        except ToolError as e:
            raise ConversionError(str(e)) from e

        output_path = converted_path(input_path, output_dir)
        if not output_path.exists():
            msg = f"{self._binary} reported success but produced no file at {output_path}"
            raise ConversionError(msg)
        logger.info("File converted to PDF: %s", output_path)
        return output_path


_REGISTRY: dict[str, type[DocumentConverter]] = {
    "libreoffice": LibreOfficeConverter,
}


def get_converter(name: str, **kwargs: object) -> DocumentConverter:
    """Instantiate a converter by name.

    Raises:
        ValueError: If the converter name is unknown.
    """
    if name not in _REGISTRY:
        valid = ", ".join(sorted(_REGISTRY))
        msg = f"Unknown converter '{name}'. Available: {valid}"
        raise ValueError(msg)
    return _REGISTRY[name](**kwargs)  # type: ignore[arg-type]
