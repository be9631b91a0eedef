"""Factsheet rendering with reportlab.

Layout: a shaded "CANDIDATE FACTSHEET" banner, a two-column field table
(label | value) with alternating row fills, and a grey generation-time
footer. Long values wrap inside their cell and may run onto further pages.
"""

import logging
from abc import ABC, abstractmethod
from collections.abc import Callable
from datetime import datetime
from pathlib import Path
from xml.sax.saxutils import escape

from reportlab.lib.colors import HexColor
from reportlab.lib.enums import TA_CENTER
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import ParagraphStyle
from reportlab.lib.units import mm
from reportlab.platypus import Paragraph, SimpleDocTemplate, Spacer, Table, TableStyle

from src.core.errors import RenderError
from src.core.schemas import CandidateRecord

logger = logging.getLogger(__name__)

TITLE = "CANDIDATE FACTSHEET"

# --- Page geometry ---
PAGE_W, PAGE_H = A4
MARGIN = 10 * mm
FRAME_PADDING = 6  # SimpleDocTemplate frame padding, points per side
CONTENT_W = PAGE_W - 2 * MARGIN - 2 * FRAME_PADDING
LABEL_COL_W = 50 * mm
VALUE_COL_W = CONTENT_W - LABEL_COL_W
ROW_MIN_H = 10 * mm

# --- Colors ---
BANNER_FILL = HexColor("#F0F0F0")
ROW_FILL_EVEN = HexColor("#FAFAFA")
ROW_FILL_ODD = HexColor("#F0F0F0")
BORDER = HexColor("#000000")
FOOTER_GRAY = HexColor("#808080")

_STYLES = {
    "title": ParagraphStyle(
        "title", fontName="Helvetica-Bold", fontSize=18, leading=22, alignment=TA_CENTER,
    ),
    "label": ParagraphStyle("label", fontName="Helvetica-Bold", fontSize=11, leading=14),
    "value": ParagraphStyle("value", fontName="Helvetica", fontSize=11, leading=14),
    "footer": ParagraphStyle(
        "footer", fontName="Helvetica-Oblique", fontSize=9, leading=11, textColor=FOOTER_GRAY,
    ),
}


def factsheet_rows(candidate: CandidateRecord) -> list[tuple[str, str]]:
    """Field rows in display order."""
    return [
        ("Name", candidate.name),
        ("Email", candidate.email),
        ("Mobile Number", candidate.mobile_no),
        ("Qualification", candidate.qualification),
        ("Experience", candidate.experience),
        ("Skills", ", ".join(candidate.skills)),
    ]


class FactsheetRenderer(ABC):
    """Capability that paints a candidate's fields into a PDF."""

    @abstractmethod
    def render(self, candidate: CandidateRecord, output_path: Path) -> None:
        """Write the factsheet PDF to ``output_path``.

        Raises:
            RenderError: If the document cannot be produced or saved.
        """


class ReportLabFactsheetRenderer(FactsheetRenderer):
    def __init__(self, clock: Callable[[], datetime] = datetime.now) -> None:
        self._clock = clock

    def render(self, candidate: CandidateRecord, output_path: Path) -> None:
        doc = SimpleDocTemplate(
            str(output_path),
            pagesize=(PAGE_W, PAGE_H),
            leftMargin=MARGIN,
            rightMargin=MARGIN,
            topMargin=MARGIN,
            bottomMargin=MARGIN,
            title=f"Factsheet - {candidate.name or candidate.email}",
        )
        story = [
            self._banner(),
            Spacer(1, 8 * mm),
            self._field_table(candidate),
            Spacer(1, 10 * mm),
            Paragraph(
                f"Generated on: {self._clock():%Y-%m-%d %H:%M:%S}", _STYLES["footer"],
            ),
        ]
        try:
            doc.build(story)
        except OSError as e:
            raise RenderError(f"cannot write {output_path}: {e}") from e
        except Exception as e:  # LayoutError and friends
            raise RenderError(f"{type(e).__name__}: {e}") from e
        logger.debug("Factsheet rendered: %s", output_path)

    @staticmethod
    def _banner() -> Table:
        banner = Table(
            [[Paragraph(TITLE, _STYLES["title"])]],
            colWidths=[LABEL_COL_W + VALUE_COL_W],
            rowHeights=[12 * mm],
        )
        banner.setStyle(TableStyle([
            ("BOX", (0, 0), (-1, -1), 0.75, BORDER),
            ("BACKGROUND", (0, 0), (-1, -1), BANNER_FILL),
            ("VALIGN", (0, 0), (-1, -1), "MIDDLE"),
        ]))
        return banner

    @staticmethod
    def _field_table(candidate: CandidateRecord) -> Table:
        data = [
            [Paragraph(escape(label), _STYLES["label"]), Paragraph(escape(value), _STYLES["value"])]
            for label, value in factsheet_rows(candidate)
        ]
        # splitInRow lets a value taller than a page continue on the next one.
        table = Table(
            data,
            colWidths=[LABEL_COL_W, VALUE_COL_W],
            minRowHeights=[ROW_MIN_H] * len(data),
            splitInRow=1,
        )
        commands: list[tuple] = [
            ("GRID", (0, 0), (-1, -1), 0.75, BORDER),
            ("VALIGN", (0, 0), (-1, -1), "TOP"),
        ]
        for i in range(len(data)):
            fill = ROW_FILL_EVEN if i % 2 == 0 else ROW_FILL_ODD
            commands.append(("BACKGROUND", (0, i), (-1, i), fill))
        table.setStyle(TableStyle(commands))
        return table
