"""PDF report rendering with ReportLab Platypus.

The report is laid out in two steps. ``ReportComposer.layout`` turns a
``ReportRequest`` into an ordered list of ``ReportBlock`` items (title,
headings, body text, bullets, footer). ``ReportComposer.compose`` then
styles those blocks into flowables and writes them through a scoped
``open_report_writer`` so that bytes are only read once the document has
been fully built.

Section order is fixed:
    title, timestamp, 梦境描述, 解读流派, 深度解析, [关键符号], footer
The 关键符号 section is left out entirely when there are no symbols.
"""
import re
from contextlib import contextmanager
from datetime import datetime
from io import BytesIO
from typing import NamedTuple
from xml.sax.saxutils import escape

from loguru import logger
from reportlab.lib import colors
from reportlab.lib.enums import TA_CENTER
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import ParagraphStyle, getSampleStyleSheet
from reportlab.pdfbase import pdfmetrics
from reportlab.pdfbase.cidfonts import UnicodeCIDFont
from reportlab.platypus import Paragraph, SimpleDocTemplate, Spacer

from errors import ReportFailure
from models import ReportRequest

# Built-in Adobe CID font; covers Simplified Chinese without shipping a TTF.
CJK_FONT = "STSong-Light"
pdfmetrics.registerFont(UnicodeCIDFont(CJK_FONT))

REPORT_TITLE = "AI梦境解析报告"
REPORT_AUTHOR = "AI梦境解析器"
REPORT_FILENAME = "dream-analysis-report.pdf"
FOOTER_TEXT = "—— 由 AI梦境解析器 生成 ——"

HEADING_DREAM = "梦境描述"
HEADING_SCHOOL = "解读流派"
HEADING_ANALYSIS = "深度解析"
HEADING_SYMBOLS = "关键符号"

# --- Palette ---
TITLE_COLOR = colors.HexColor("#1a1a2e")
HEADING_COLOR = colors.HexColor("#2d2d44")
BODY_COLOR = colors.HexColor("#444444")
SYMBOL_COLOR = colors.HexColor("#4a4a6a")
MUTED_COLOR = colors.HexColor("#666666")
FOOTER_COLOR = colors.HexColor("#888888")


class ReportBlock(NamedTuple):
    kind: str  # title | timestamp | heading | body | analysis | bullet | footer
    text: str


def format_timestamp(moment: datetime) -> str:
    """zh-CN style date/time, e.g. 2026/10/19 14:03:05."""
    return f"{moment.year}/{moment.month}/{moment.day} {moment:%H:%M:%S}"


def _build_styles() -> dict:
    base = getSampleStyleSheet()

    def style(name, parent, **kw):
        return ParagraphStyle(name, parent=base[parent], fontName=CJK_FONT, wordWrap="CJK", **kw)

    return {
        "title": style("DreamTitle", "Title", fontSize=28, leading=34, textColor=TITLE_COLOR, alignment=TA_CENTER),
        "timestamp": style("DreamTimestamp", "Normal", fontSize=12, leading=16, textColor=MUTED_COLOR,
                           alignment=TA_CENTER, spaceBefore=6, spaceAfter=24),
        "heading": style("DreamHeading", "Heading2", fontSize=18, leading=24, textColor=HEADING_COLOR,
                         spaceBefore=18, spaceAfter=8),
        "body": style("DreamBody", "Normal", fontSize=12, leading=18, textColor=BODY_COLOR),
        "analysis": style("DreamAnalysis", "Normal", fontSize=11, leading=17, textColor=BODY_COLOR),
        "bullet": style("DreamBullet", "Normal", fontSize=12, leading=18, textColor=SYMBOL_COLOR,
                        leftIndent=16, bulletIndent=4, bulletFontName="Helvetica", spaceAfter=4),
        "footer": style("DreamFooter", "Normal", fontSize=10, leading=14, textColor=FOOTER_COLOR,
                        alignment=TA_CENTER, spaceBefore=36),
    }


_SPACE_RUN = re.compile(r"^ +| {2,}", re.MULTILINE)


def _markup(text: str) -> str:
    """Escape for Paragraph markup, keeping line breaks and indentation.

    Paragraph collapses whitespace, so leading spaces and runs of spaces
    become non-breaking spaces; tabs are expanded first.
    """
    text = escape(text.replace("\r\n", "\n").expandtabs(4))
    text = _SPACE_RUN.sub(lambda m: "&nbsp;" * len(m.group()), text)
    return text.replace("\n", "<br/>")


class _ReportWriter:
    """Buffers flowables and turns them into PDF bytes on ``finish``."""

    def __init__(self, title: str, invariant: bool = False):
        self._buffer = BytesIO()
        self._doc = SimpleDocTemplate(
            self._buffer,
            pagesize=A4,
            topMargin=50,
            bottomMargin=50,
            leftMargin=50,
            rightMargin=50,
            title=title,
            author=REPORT_AUTHOR,
            invariant=1 if invariant else 0,
        )
        self._story = []
        self.finished = False

    def emit(self, *flowables) -> None:
        if self.finished:
            raise ReportFailure("cannot write to a finished report")
        self._story.extend(flowables)

    def finish(self) -> None:
        # build() only returns after the trailer and xref table are written.
        self._doc.build(self._story)
        self.finished = True

    def getvalue(self) -> bytes:
        if not self.finished:
            raise ReportFailure("report bytes requested before the document was finished")
        return self._buffer.getvalue()


@contextmanager
def open_report_writer(title: str = REPORT_TITLE, invariant: bool = False):
    """Yield a writer; the document is built when the block exits cleanly."""
    writer = _ReportWriter(title, invariant=invariant)
    yield writer
    writer.finish()


class ReportComposer:
    """Lays out a dream report and renders it to PDF.

    Usage:
        composer = ReportComposer()
        pdf_bytes = composer.compose(ReportRequest(dream=..., school=..., analysis=..., symbols=[...]))

    ``invariant=True`` pins ReportLab's internal creation date and document
    id so identical input with the same ``generated_at`` yields identical bytes.
    """

    def __init__(self, invariant: bool = False):
        self.invariant = invariant
        self.styles = _build_styles()

    def layout(self, request: ReportRequest, generated_at: datetime | None = None) -> list[ReportBlock]:
        generated_at = generated_at or datetime.now()

        blocks = [
            ReportBlock("title", REPORT_TITLE),
            ReportBlock("timestamp", f"生成时间：{format_timestamp(generated_at)}"),
            ReportBlock("heading", HEADING_DREAM),
            ReportBlock("body", request.dream),
            ReportBlock("heading", HEADING_SCHOOL),
            ReportBlock("body", request.school),
            ReportBlock("heading", HEADING_ANALYSIS),
            ReportBlock("analysis", request.analysis),
        ]

        if request.symbols:
            blocks.append(ReportBlock("heading", HEADING_SYMBOLS))
            blocks.extend(
                ReportBlock("bullet", f"{entry.symbol}: {entry.meaning}")
                for entry in request.symbols
            )

        blocks.append(ReportBlock("footer", FOOTER_TEXT))
        return blocks

    def compose(self, request: ReportRequest, generated_at: datetime | None = None) -> bytes:
        """Render ``request`` to a complete PDF, or raise ``ReportFailure``."""
        try:
            blocks = self.layout(request, generated_at)
            with open_report_writer(invariant=self.invariant) as writer:
                for block in blocks:
                    writer.emit(*self._render(block))
            pdf_bytes = writer.getvalue()
        except ReportFailure:
            raise
        except Exception as exc:
            logger.error(f"PDF generation failed: {exc!r}")
            raise ReportFailure(str(exc)) from exc

        logger.info(f"Report generated: {len(pdf_bytes)} bytes, {len(request.symbols)} symbols")
        return pdf_bytes

    def _render(self, block: ReportBlock) -> list:
        if block.kind == "bullet":
            return [Paragraph(_markup(block.text), self.styles["bullet"], bulletText="•")]
        if block.kind == "heading":
            return [Paragraph(f"<u>{_markup(block.text)}</u>", self.styles["heading"])]
        if block.kind in ("body", "analysis"):
            return [Paragraph(_markup(block.text), self.styles[block.kind]), Spacer(1, 6)]
        return [Paragraph(_markup(block.text), self.styles[block.kind])]
