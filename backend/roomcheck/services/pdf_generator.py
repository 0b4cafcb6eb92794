"""
PDF report for a tenant inspection.

Lists each inspected room with its reference images, the tenant's latest
upload and the AI comparison text, plus how many attempts the tenant made.
"""

import io
from datetime import datetime, timezone
from typing import Any, List
from xml.sax.saxutils import escape

from reportlab.lib import colors
from reportlab.lib.enums import TA_CENTER
from reportlab.lib.pagesizes import letter
from reportlab.lib.styles import ParagraphStyle, getSampleStyleSheet
from reportlab.lib.units import inch
from reportlab.platypus import HRFlowable, Paragraph, SimpleDocTemplate, Spacer, Table, TableStyle

from roomcheck.models.documents import RoomComparisonDocument
from roomcheck.services.inspection_links import InspectionDetail

RULE_COLOR = colors.HexColor('#e0e0e0')
MUTED_COLOR = colors.HexColor('#666666')


class InspectionReportGenerator:
    """Builds the owner's PDF for one inspection."""

    def __init__(self):
        self.styles = getSampleStyleSheet()
        self._setup_custom_styles()

    def _setup_custom_styles(self):
        self.styles.add(ParagraphStyle(
            name='ReportTitle',
            parent=self.styles['Heading1'],
            fontSize=22,
            spaceAfter=24,
            alignment=TA_CENTER,
            textColor=colors.HexColor('#1a1a2e'),
        ))
        self.styles.add(ParagraphStyle(
            name='ReportSubtitle',
            parent=self.styles['Normal'],
            fontSize=12,
            spaceAfter=18,
            alignment=TA_CENTER,
            textColor=MUTED_COLOR,
        ))
        self.styles.add(ParagraphStyle(
            name='RoomHeader',
            parent=self.styles['Heading2'],
            fontSize=14,
            spaceBefore=18,
            spaceAfter=8,
            textColor=colors.HexColor('#1a1a2e'),
        ))
        self.styles.add(ParagraphStyle(
            name='Finding',
            parent=self.styles['Normal'],
            fontSize=10,
            leading=14,
            spaceAfter=8,
        ))
        self.styles.add(ParagraphStyle(
            name='ImageLink',
            parent=self.styles['Normal'],
            fontSize=7,
            fontName='Courier',
            textColor=MUTED_COLOR,
        ))
        self.styles.add(ParagraphStyle(
            name='Footer',
            parent=self.styles['Normal'],
            fontSize=8,
            textColor=colors.HexColor('#888888'),
            alignment=TA_CENTER,
            spaceBefore=20,
        ))

    def generate(self, detail: InspectionDetail) -> bytes:
        buffer = io.BytesIO()
        doc = SimpleDocTemplate(
            buffer,
            pagesize=letter,
            rightMargin=0.75*inch,
            leftMargin=0.75*inch,
            topMargin=0.75*inch,
            bottomMargin=0.75*inch,
        )

        inspection = detail.inspection
        story = []

        story.append(Paragraph("RoomCheck Inspection Report", self.styles['ReportTitle']))
        story.append(Paragraph(escape(detail.home.name), self.styles['ReportSubtitle']))

        summary = [
            ["Address:", detail.home.address or "N/A"],
            ["Status:", str(inspection.status)],
            ["Tenant:", inspection.tenant_email or "N/A"],
            ["Created:", self._format_datetime(inspection.created_at)],
            ["Started:", self._format_datetime(inspection.started_by_tenant_at)],
            ["Completed:", self._format_datetime(inspection.completed_by_tenant_at)],
            ["Link:", detail.url],
        ]
        summary_table = Table(summary, colWidths=[1.5*inch, 5*inch])
        summary_table.setStyle(TableStyle([
            ('FONTNAME', (0, 0), (0, -1), 'Helvetica-Bold'),
            ('FONTSIZE', (0, 0), (-1, -1), 10),
            ('TEXTCOLOR', (0, 0), (0, -1), MUTED_COLOR),
            ('VALIGN', (0, 0), (-1, -1), 'TOP'),
            ('BOTTOMPADDING', (0, 0), (-1, -1), 6),
        ]))
        story.append(summary_table)
        story.append(Spacer(1, 0.25*inch))

        if detail.comparisons:
            for comparison in detail.comparisons:
                story.extend(self._room_section(comparison))
        else:
            story.append(Paragraph("No rooms have been inspected yet.", self.styles['Normal']))

        story.append(Spacer(1, 0.5*inch))
        story.append(HRFlowable(width="100%", thickness=1, color=RULE_COLOR))
        story.append(Paragraph(
            "Findings are generated by an AI model from the submitted photos and should be "
            "verified in person before any deposit decision.",
            self.styles['Footer'],
        ))
        story.append(Paragraph(
            f"Generated by RoomCheck on {datetime.now(timezone.utc).strftime('%Y-%m-%d %H:%M UTC')}",
            self.styles['Footer'],
        ))

        doc.build(story)
        buffer.seek(0)
        return buffer.read()

    def _room_section(self, comparison: RoomComparisonDocument) -> List[Any]:
        section = [
            Paragraph(escape(comparison.room_name), self.styles['RoomHeader']),
            HRFlowable(width="100%", thickness=1, color=RULE_COLOR),
        ]

        latest = comparison.latest_event
        if latest is None:
            section.append(Paragraph("No photos submitted.", self.styles['Normal']))
            return section

        section.append(Paragraph(
            f"Attempts: {len(comparison.comparison_events)} &nbsp; "
            f"Latest: {self._format_datetime(latest.timestamp)}",
            self.styles['Finding'],
        ))
        section.append(Paragraph(self._as_markup(latest.ai_comparison_result), self.styles['Finding']))

        for label, urls in (
            ("Reference", comparison.reference_image_urls),
            ("Tenant", latest.uploaded_image_urls),
        ):
            for url in urls:
                section.append(Paragraph(f"{label}: {escape(url)}", self.styles['ImageLink']))
        return section

    def _as_markup(self, text: str) -> str:
        """Plain model output to reportlab paragraph markup."""
        return escape(text).replace("\n", "<br/>")

    def _format_datetime(self, dt: Any) -> str:
        if dt is None:
            return "N/A"
        if isinstance(dt, str):
            return dt[:19].replace("T", " ")
        if hasattr(dt, 'strftime'):
            return dt.strftime("%Y-%m-%d %H:%M")
        return str(dt)


def get_report_generator() -> InspectionReportGenerator:
    return InspectionReportGenerator()
