"""Bundle of the per-candidate capabilities, built from settings."""

from dataclasses import dataclass

from src.core.config import Settings
from src.pipeline.converter import DocumentConverter, get_converter
from src.pipeline.fetcher import ResourceFetcher
from src.pipeline.merger import DocumentMerger, get_merger
from src.pipeline.renderer import FactsheetRenderer, ReportLabFactsheetRenderer


@dataclass(frozen=True)
class Toolkit:
    fetcher: ResourceFetcher
    converter: DocumentConverter
    merger: DocumentMerger
    renderer: FactsheetRenderer

    @classmethod
    def from_settings(cls, settings: Settings) -> "Toolkit":
        tools = settings.tools
        if tools.merger == "pdfunite":
            merger = get_merger("pdfunite", binary=tools.merger_binary, timeout_s=tools.timeout_s)
        else:
            merger = get_merger(tools.merger, timeout_s=tools.timeout_s)
        return cls(
            fetcher=ResourceFetcher(
                timeout_s=settings.fetch.timeout_s,
                follow_redirects=settings.fetch.follow_redirects,
            ),
            converter=get_converter(
                tools.converter, binary=tools.converter_binary, timeout_s=tools.timeout_s,
            ),
            merger=merger,
            renderer=ReportLabFactsheetRenderer(),
        )
