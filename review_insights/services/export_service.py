from __future__ import annotations

from io import BytesIO
from typing import Any
from xml.sax.saxutils import escape

from reportlab.lib import colors
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import ParagraphStyle, getSampleStyleSheet
from reportlab.lib.units import cm
from reportlab.platypus import Paragraph, SimpleDocTemplate, Spacer, Table, TableStyle

from review_insights.models.report_model import Report
from review_insights.services.report_service import as_utc
from review_insights.utils.issue_keys import report_issues


HEADER_BG = colors.HexColor("#0A2A66")
ROW_BG = colors.HexColor("#F5F8FF")
GRID = colors.HexColor("#9BB4F0")
TEXT_DARK = colors.HexColor("#1A1A1A")
TEXT_MUTED = colors.HexColor("#4A5B72")

SEVERITY_COLORS = {
    "critical": colors.HexColor("#C62828"),
    "warning": colors.HexColor("#EF6C00"),
    "suggestion": colors.HexColor("#1565C0"),
}


def _safe_text(value: Any, fallback: str = "N/A") -> str:
    text = str(value).strip() if value is not None else ""
    return escape(text) if text else fallback


def _styles() -> dict[str, ParagraphStyle]:
    styles = getSampleStyleSheet()
    return {
        "title": ParagraphStyle(
            "ReportTitle",
            parent=styles["Heading1"],
            fontName="Helvetica-Bold",
            fontSize=18,
            textColor=HEADER_BG,
            spaceAfter=10,
        ),
        "section": ParagraphStyle(
            "SectionTitle",
            parent=styles["Heading2"],
            fontName="Helvetica-Bold",
            fontSize=12,
            textColor=colors.HexColor("#163A8A"),
            spaceBefore=10,
            spaceAfter=6,
        ),
        "body": ParagraphStyle(
            "BodyTextCustom",
            parent=styles["BodyText"],
            fontName="Helvetica",
            fontSize=10,
            leading=14,
            textColor=TEXT_DARK,
        ),
        "cell": ParagraphStyle(
            "TableCell",
            parent=styles["BodyText"],
            fontName="Helvetica",
            fontSize=8.5,
            leading=11,
            textColor=TEXT_DARK,
        ),
        "muted": ParagraphStyle(
            "Muted",
            parent=styles["BodyText"],
            fontName="Helvetica",
            fontSize=9,
            textColor=TEXT_MUTED,
        ),
    }


def _summary_table(report: Report, width: float) -> Table:
    created = as_utc(report.created_at)
    rows = [
        ["File", _safe_text(report.file_name)],
        ["Language", _safe_text(report.language)],
        ["Overall score", f"{report.overall_score:.1f} / 10"],
        ["Lines of code", str(report.lines_of_code or 0)],
        ["Model", _safe_text(report.model_name)],
        ["Reviewed at", created.strftime("%Y-%m-%d %H:%M UTC") if created else "N/A"],
    ]
    table = Table(rows, colWidths=[4.2 * cm, width - 4.2 * cm])
    table.setStyle(
        TableStyle(
            [
                ("BACKGROUND", (0, 0), (-1, -1), ROW_BG),
                ("TEXTCOLOR", (0, 0), (-1, -1), TEXT_DARK),
                ("FONTNAME", (0, 0), (-1, -1), "Helvetica"),
                ("FONTNAME", (0, 0), (0, -1), "Helvetica-Bold"),
                ("GRID", (0, 0), (-1, -1), 0.4, GRID),
                ("LEFTPADDING", (0, 0), (-1, -1), 8),
                ("RIGHTPADDING", (0, 0), (-1, -1), 8),
                ("TOPPADDING", (0, 0), (-1, -1), 5),
                ("BOTTOMPADDING", (0, 0), (-1, -1), 5),
            ]
        )
    )
    return table


def _issue_table(issues: list[dict[str, Any]], width: float, cell_style: ParagraphStyle) -> Table:
    rows: list[list[Any]] = [["Severity", "Category", "Line", "Issue", "Suggestion"]]
    commands: list[tuple] = [
        ("BACKGROUND", (0, 0), (-1, 0), HEADER_BG),
        ("TEXTCOLOR", (0, 0), (-1, 0), colors.white),
        ("FONTNAME", (0, 0), (-1, 0), "Helvetica-Bold"),
        ("FONTSIZE", (0, 0), (-1, -1), 8.5),
        ("VALIGN", (0, 0), (-1, -1), "TOP"),
        ("GRID", (0, 0), (-1, -1), 0.4, GRID),
        ("ROWBACKGROUNDS", (0, 1), (-1, -1), [colors.white, ROW_BG]),
    ]

    for row_index, issue in enumerate(issues, start=1):
        severity = str(issue.get("severity") or "suggestion")
        rows.append(
            [
                severity,
                _safe_text(issue.get("category")),
                str(issue.get("line") or "-"),
                Paragraph(_safe_text(issue.get("description")), cell_style),
                Paragraph(_safe_text(issue.get("suggestion")), cell_style),
            ]
        )
        commands.append(("TEXTCOLOR", (0, row_index), (0, row_index), SEVERITY_COLORS.get(severity, TEXT_DARK)))

    fixed = 2.0 * cm + 2.6 * cm + 1.2 * cm
    flexible = (width - fixed) / 2
    table = Table(rows, colWidths=[2.0 * cm, 2.6 * cm, 1.2 * cm, flexible, flexible], repeatRows=1)
    table.setStyle(TableStyle(commands))
    return table


def build_report_pdf(report: Report) -> bytes:
    """Render one stored review report as a PDF document."""
    buffer = BytesIO()
    document = SimpleDocTemplate(
        buffer,
        pagesize=A4,
        rightMargin=1.6 * cm,
        leftMargin=1.6 * cm,
        topMargin=1.8 * cm,
        bottomMargin=1.8 * cm,
    )
    styles = _styles()
    review = report.review if isinstance(report.review, dict) else {}
    content_width = document.width

    story: list[Any] = [
        Paragraph("Code Review Report", styles["title"]),
        _summary_table(report, content_width),
        Paragraph("Summary", styles["section"]),
        Paragraph(_safe_text(review.get("summary"), "No summary available."), styles["body"]),
    ]

    issues = report_issues(report)
    story.append(Paragraph(f"Issues ({len(issues)})", styles["section"]))
    if issues:
        story.append(_issue_table(issues, content_width, styles["cell"]))
    else:
        story.append(Paragraph("No issues were reported.", styles["muted"]))

    for title, key in (("Improvements", "improvements"), ("Positives", "positives")):
        items = review.get(key) if isinstance(review.get(key), list) else []
        story.append(Paragraph(title, styles["section"]))
        if not items:
            story.append(Paragraph("None listed.", styles["muted"]))
            continue
        for item in items:
            story.append(Paragraph(f"&bull; {_safe_text(item)}", styles["body"]))

    story.append(Spacer(1, 0.4 * cm))
    story.append(Paragraph(f"Report ID: {report.id}", styles["muted"]))

    document.build(story)
    pdf_bytes = buffer.getvalue()
    buffer.close()
    return pdf_bytes


def export_file_name(report: Report) -> str:
    stem = (report.file_name or "report").rsplit(".", 1)[0]
    safe_stem = "".join(char if char.isalnum() or char in "-_" else "_" for char in stem) or "report"
    return f"code_review_{safe_stem}_{str(report.id)[:8]}.pdf"
