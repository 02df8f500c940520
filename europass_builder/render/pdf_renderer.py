"""PDF generation for Europass résumés using reportlab.

Renders a ResumeDocument to an A4 document; platypus breaks the flow into
pages at the fixed page height. Output is returned as bytes so a failed
render never leaves a partial file behind.
"""

from io import BytesIO
from typing import List, Optional
from xml.sax.saxutils import escape

from PIL import Image as PILImage
from PIL import UnidentifiedImageError
from reportlab.lib import colors
from reportlab.lib.enums import TA_LEFT
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import ParagraphStyle, getSampleStyleSheet
from reportlab.lib.units import mm
from reportlab.platypus import (
    HRFlowable,
    Image,
    KeepTogether,
    ListFlowable,
    ListItem,
    Paragraph,
    SimpleDocTemplate,
    Spacer,
    Table,
    TableStyle,
)

from europass_builder.config import DEFAULT_PDF_FILENAME
from europass_builder.errors import RenderError
from europass_builder.render.sections import Section, build_sections, contact_items, full_name
from europass_builder.schemas import ResumeDocument
from europass_builder.utils.helpers import decode_data_uri, sanitize_filename_part
from europass_builder.utils.logger import get_logger

logger = get_logger(__name__)

PAGE_WIDTH, PAGE_HEIGHT = A4
MARGIN = 15 * mm
PHOTO_SIZE = 32 * mm
EUROPASS_BLUE = colors.HexColor("#1e3a8a")
FONT = "Helvetica"
FONT_BOLD = "Helvetica-Bold"
FONT_ITALIC = "Helvetica-Oblique"


def pdf_filename(document: ResumeDocument) -> str:
    """'<first>_<last>_Resume.pdf' with unsafe characters stripped; default when both names are empty."""
    info = document.personal_info
    first = sanitize_filename_part(info.first_name)
    last = sanitize_filename_part(info.last_name)
    if not first and not last:
        return DEFAULT_PDF_FILENAME
    return f"{first}_{last}_Resume.pdf"


def _text(value: str) -> str:
    return escape(value).replace("\n", "<br/>")


class EuropassPdfRenderer:
    """Builds the platypus story for one document and renders it to bytes."""

    def __init__(self) -> None:
        self.styles = self._create_styles()

    def _create_styles(self) -> dict:
        base = getSampleStyleSheet()["Normal"]
        return {
            "name": ParagraphStyle("Name", parent=base, fontName=FONT_BOLD, fontSize=20, leading=24, textColor=colors.white),
            "contact": ParagraphStyle("Contact", parent=base, fontName=FONT, fontSize=9, leading=12, textColor=colors.white),
            "brand": ParagraphStyle("Brand", parent=base, fontName=FONT_BOLD, fontSize=9, leading=11, textColor=colors.white),
            "section": ParagraphStyle(
                "Section", parent=base, fontName=FONT_BOLD, fontSize=12, leading=15,
                textColor=EUROPASS_BLUE, spaceBefore=10, spaceAfter=2,
            ),
            "body": ParagraphStyle("Body", parent=base, fontName=FONT, fontSize=10, leading=13, alignment=TA_LEFT),
            "period": ParagraphStyle(
                "Period", parent=base, fontName=FONT, fontSize=8.5, leading=11, textColor=colors.grey, spaceBefore=6,
            ),
            "heading": ParagraphStyle("EntryHeading", parent=base, fontName=FONT_BOLD, fontSize=10.5, leading=13),
            "detail": ParagraphStyle("EntryDetail", parent=base, fontName=FONT_ITALIC, fontSize=9.5, leading=12),
        }

    def _photo(self, data_uri: Optional[str]) -> Optional[Image]:
        decoded = decode_data_uri(data_uri or "")
        if decoded is None:
            if data_uri:
                logger.warning("Profile photo is not a base64 data URI; skipping it")
            return None
        try:
            with PILImage.open(BytesIO(decoded[1])) as img:
                img = img.convert("RGB")
                img.thumbnail((600, 600))
                out = BytesIO()
                img.save(out, format="PNG")
        except (UnidentifiedImageError, OSError) as e:
            logger.warning("Profile photo could not be decoded (%s); skipping it", e)
            return None
        out.seek(0)
        return Image(out, width=PHOTO_SIZE, height=PHOTO_SIZE, kind="proportional")

    def _header(self, document: ResumeDocument) -> Table:
        info = document.personal_info
        block: list = [
            Paragraph("EUROPASS", self.styles["brand"]),
            Spacer(1, 2 * mm),
            Paragraph(_text(full_name(info)) or "&nbsp;", self.styles["name"]),
            Spacer(1, 2 * mm),
        ]
        for label, value in contact_items(info):
            block.append(Paragraph(f"<b>{escape(label)}:</b> {_text(value)}", self.styles["contact"]))

        photo = self._photo(info.profile_photo)
        usable = PAGE_WIDTH - 2 * MARGIN
        if photo is not None:
            row, widths = [photo, block], [PHOTO_SIZE + 6 * mm, usable - PHOTO_SIZE - 6 * mm]
        else:
            row, widths = [block], [usable]
        table = Table([row], colWidths=widths)
        table.setStyle(
            TableStyle(
                [
                    ("BACKGROUND", (0, 0), (-1, -1), EUROPASS_BLUE),
                    ("VALIGN", (0, 0), (-1, -1), "MIDDLE"),
                    ("LEFTPADDING", (0, 0), (-1, -1), 4 * mm),
                    ("RIGHTPADDING", (0, 0), (-1, -1), 4 * mm),
                    ("TOPPADDING", (0, 0), (-1, -1), 4 * mm),
                    ("BOTTOMPADDING", (0, 0), (-1, -1), 4 * mm),
                ]
            )
        )
        return table

    def _section(self, section: Section) -> List:
        flow: List = [
            Paragraph(escape(section.title), self.styles["section"]),
            HRFlowable(width="100%", thickness=0.8, color=EUROPASS_BLUE, spaceAfter=4),
        ]
        if section.text:
            flow.append(Paragraph(_text(section.text), self.styles["body"]))
        for entry in section.entries:
            block: List = []
            if entry.period:
                block.append(Paragraph(escape(entry.period), self.styles["period"]))
            if entry.heading:
                block.append(Paragraph(_text(entry.heading), self.styles["heading"]))
            if entry.detail:
                block.append(Paragraph(_text(entry.detail), self.styles["detail"]))
            if entry.bullets:
                block.append(
                    ListFlowable(
                        [ListItem(Paragraph(_text(b), self.styles["body"]), leftIndent=10) for b in entry.bullets],
                        bulletType="bullet",
                        start="•",
                        leftIndent=10,
                    )
                )
            if block:
                flow.append(KeepTogether(block))
        if section.items:
            flow.append(Paragraph(" · ".join(_text(i) for i in section.items), self.styles["body"]))
        return flow

    @staticmethod
    def _page_footer(canvas, doc) -> None:
        canvas.saveState()
        canvas.setFont(FONT, 8)
        canvas.setFillColor(colors.grey)
        canvas.drawRightString(PAGE_WIDTH - MARGIN, MARGIN / 2, f"Page {doc.page}")
        canvas.restoreState()

    def build_story(self, document: ResumeDocument) -> List:
        story: List = [self._header(document), Spacer(1, 4 * mm)]
        for section in build_sections(document):
            story.extend(self._section(section))
        return story

    def render(self, document: ResumeDocument) -> bytes:
        buffer = BytesIO()
        try:
            doc = SimpleDocTemplate(
                buffer,
                pagesize=A4,
                leftMargin=MARGIN,
                rightMargin=MARGIN,
                topMargin=MARGIN,
                bottomMargin=MARGIN,
                title=full_name(document.personal_info) or "Europass Resume",
                author=full_name(document.personal_info),
            )
            doc.build(
                self.build_story(document),
                onFirstPage=self._page_footer,
                onLaterPages=self._page_footer,
            )
        except Exception as e:
            logger.exception("PDF generation failed: %s", e)
            raise RenderError("Failed to generate PDF. Please try again.") from e
        pdf = buffer.getvalue()
        logger.info("Rendered resume PDF (%s bytes)", len(pdf))
        return pdf


def render_pdf(document: ResumeDocument) -> bytes:
    """Render document to PDF bytes; raises RenderError on failure."""
    return EuropassPdfRenderer().render(document)
