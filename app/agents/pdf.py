import io
from reportlab.lib import colors
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import ParagraphStyle, getSampleStyleSheet
from reportlab.lib.units import mm
from reportlab.platypus import Paragraph, SimpleDocTemplate, Spacer, Table, TableStyle

class PdfAgent:
    MARGIN = 20 * mm

    def __init__(self):
        self.styles = getSampleStyleSheet()
        self.summary_style = ParagraphStyle(
            "Summary",
            parent=self.styles["Normal"],
            alignment=2,
            fontSize=11,
            spaceAfter=4,
        )

    def render(self, title: str, metadata_lines: list[str], table_header: list[str], table_rows: list[list[str]], summary_lines: list[str]) -> bytes:
        buffer = io.BytesIO()
        doc = SimpleDocTemplate(
            buffer,
            pagesize=A4,
            title=title,
            leftMargin=self.MARGIN,
            rightMargin=self.MARGIN,
            topMargin=self.MARGIN,
            bottomMargin=self.MARGIN,
        )

        elements = [Paragraph(title, self.styles["Heading1"])]
        for line in metadata_lines:
            elements.append(Paragraph(line, self.styles["Normal"]))
        elements.append(Spacer(1, 12))

        table = Table([table_header, *table_rows], repeatRows=1)
        table.setStyle(
            TableStyle(
                [
                    ("BACKGROUND", (0, 0), (-1, 0), colors.HexColor("#2980ba")),
                    ("TEXTCOLOR", (0, 0), (-1, 0), colors.whitesmoke),
                    ("FONTNAME", (0, 0), (-1, 0), "Helvetica-Bold"),
                    ("FONTNAME", (0, 1), (-1, -1), "Helvetica"),
                    ("FONTSIZE", (0, 0), (-1, -1), 9),
                    ("ALIGN", (2, 1), (-1, -1), "RIGHT"),
                    ("GRID", (0, 0), (-1, -1), 0.5, colors.grey),
                    ("VALIGN", (0, 0), (-1, -1), "MIDDLE"),
                ]
            )
        )
        elements.append(table)
        elements.append(Spacer(1, 12))

        for line in summary_lines:
            elements.append(Paragraph(line, self.summary_style))

        doc.build(elements)
        return buffer.getvalue()
