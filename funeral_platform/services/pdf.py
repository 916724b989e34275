"""
Funeral arrangement PDF generator

Renders a one-page summary from the admin intake form using reportlab.
"""

import re
import secrets
from pathlib import Path
from typing import Any, Dict, Optional

from reportlab.lib.colors import HexColor
from reportlab.lib.enums import TA_LEFT
from reportlab.lib.pagesizes import letter
from reportlab.lib.styles import ParagraphStyle
from reportlab.lib.units import inch
from reportlab.platypus import HRFlowable, Paragraph, SimpleDocTemplate, Spacer
from xml.sax.saxutils import escape
import structlog

from funeral_platform.utils.clock import now_ms

logger = structlog.get_logger(__name__)

DARK_BROWN = HexColor("#3E2723")
LIGHT_TAUPE = HexColor("#D4C5B9")

# Fields printed first, in this order, with these labels
STANDARD_FIELDS = (
    ("deceasedName", "Deceased Name"),
    ("refNumber", "Reference Number"),
    ("serviceDate", "Service Date"),
    ("serviceTime", "Service Time"),
    ("serviceLocation", "Location"),
)


def _humanize(key: str) -> str:
    """camelCase / snake_case form key -> 'Title Case' label"""
    words = re.sub(r"(?<=[a-z0-9])(?=[A-Z])", " ", key).replace("_", " ")
    return words.strip().title() or key


def _build_styles():
    return {
        "title": ParagraphStyle(
            "FormTitle",
            fontName="Times-Bold",
            fontSize=20,
            leading=26,
            textColor=DARK_BROWN,
            alignment=TA_LEFT,
            spaceAfter=6,
        ),
        "subtitle": ParagraphStyle(
            "FormSubtitle",
            fontName="Times-Italic",
            fontSize=11,
            leading=14,
            textColor=DARK_BROWN,
        ),
        "field": ParagraphStyle(
            "FormField",
            fontName="Helvetica",
            fontSize=12,
            leading=18,
        ),
    }


def render_arrangement_pdf(
    output_path: Path,
    fields: Dict[str, Any],
    funeral_home_name: Optional[str] = None,
) -> Path:
    """Write the arrangement summary for `fields` to `output_path`"""
    styles = _build_styles()
    story = [Paragraph("Funeral Arrangement Summary", styles["title"])]
    if funeral_home_name:
        story.append(Paragraph(escape(funeral_home_name), styles["subtitle"]))
    story.append(HRFlowable(width="100%", thickness=1, color=LIGHT_TAUPE, spaceBefore=6, spaceAfter=12))

    def line(label: str, value: Any) -> Paragraph:
        text = "" if value is None else str(value)
        return Paragraph(f"<b>{escape(label)}:</b> {escape(text)}", styles["field"])

    for key, label in STANDARD_FIELDS:
        story.append(line(label, fields.get(key)))

    extras = [k for k in fields if k not in dict(STANDARD_FIELDS)]
    if extras:
        story.append(Spacer(1, 0.2 * inch))
        for key in extras:
            story.append(line(_humanize(key), fields[key]))

    output_path.parent.mkdir(parents=True, exist_ok=True)
    doc = SimpleDocTemplate(
        str(output_path),
        pagesize=letter,
        leftMargin=inch,
        rightMargin=inch,
        topMargin=inch,
        bottomMargin=inch,
        title="Funeral Arrangement Summary",
    )
    doc.build(story)
    return output_path


class PdfService:
    """Stores generated forms under <uploads>/pdf/<tenant slug>/"""

    def __init__(self, uploads_dir: Path):
        self.uploads_dir = uploads_dir

    def generate_from_form(
        self,
        tenant_slug: str,
        fields: Dict[str, Any],
        funeral_home_name: Optional[str] = None,
    ) -> str:
        """Render the form and return its public URL"""
        filename = f"funeral-form-{now_ms()}-{secrets.token_hex(3)}.pdf"
        output_path = self.uploads_dir / "pdf" / tenant_slug / filename
        render_arrangement_pdf(output_path, fields, funeral_home_name)
        logger.info(f"PDF generated: {filename}", tenant=tenant_slug)
        return f"/uploads/pdf/{tenant_slug}/{filename}"
