from io import StringIO, BytesIO
from datetime import date
from flask import Response, current_app
from markupsafe import escape
import csv

from .items import display_identifier
from .resguardo_formatter import boilerplate_for, responsible_name
from .resguardo_html import HEADERS, asset_rows, accessory_checklist, title_label
from .time_helpers import long_date

XLSX_MIMETYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"

def _download(data, mimetype, filename):
    return Response(data, mimetype=mimetype,
                    headers={"Content-Disposition": f"attachment; filename={filename}"})

def _cells(row):
    return ["" if c is None else c for c in row]

def stream_csv(filename, headers, rows):
    # BOM para que Excel abra bien los acentos
    buf = StringIO()
    w = csv.writer(buf)
    if headers:
        w.writerow(headers)
    w.writerows(_cells(r) for r in rows)
    return _download(buf.getvalue().encode("utf-8-sig"), "text/csv", filename)

def stream_xlsx(filename, headers, rows, sheet_title="Inventario"):
    try:
        from openpyxl import Workbook
        from openpyxl.styles import Font
        wb = Workbook()
        ws = wb.active
        ws.title = sheet_title
        if headers:
            ws.append(headers)
            for c in ws[1]:
                c.font = Font(bold=True)
            ws.freeze_panes = "A2"
        for r in rows:
            ws.append(_cells(r))
        bio = BytesIO()
        wb.save(bio)
        return _download(bio.getvalue(), XLSX_MIMETYPE, filename)
    except Exception:
        current_app.logger.exception("XLSX no disponible, se entrega CSV")
        return stream_csv(filename.replace(".xlsx", ".csv"), headers, rows)

def stream_pdf(filename, title, headers, rows):
    """Listado tabular apaisado; si ReportLab falla se entrega el CSV."""
    try:
        from reportlab.lib.pagesizes import A4, landscape
        from reportlab.pdfgen import canvas
        from reportlab.lib.units import cm

        buf = BytesIO()
        width, height = landscape(A4)
        c = canvas.Canvas(buf, pagesize=(width, height))
        col_width = (width - 4*cm) / max(len(headers or []), 1)
        max_chars = max(int(col_width / 5), 8)

        def page_header():
            c.setFont("Helvetica-Bold", 14)
            c.drawString(2*cm, height - 2*cm, title)
            c.setFont("Helvetica", 8)
            c.drawRightString(width - 2*cm, height - 2*cm, long_date(date.today()))
            y = height - 2.8*cm
            if headers:
                c.setFont("Helvetica-Bold", 9)
                for i, h in enumerate(headers):
                    c.drawString(2*cm + i * col_width, y, str(h)[:max_chars])
                y -= 0.6*cm
            c.setFont("Helvetica", 8)
            return y

        y = page_header()
        for row in rows:
            if y < 2*cm:
                c.showPage()
                y = page_header()
            for i, cell in enumerate(_cells(row)):
                c.drawString(2*cm + i * col_width, y, str(cell)[:max_chars])
            y -= 0.5*cm

        c.showPage()
        c.save()
        return _download(buf.getvalue(), "application/pdf", filename)
    except Exception:
        current_app.logger.exception("PDF no disponible, se entrega CSV")
        return stream_csv(filename.replace(".pdf", ".csv"), headers, rows)

# ---- Hoja de resguardo en PDF (ReportLab) ----

def resguardo_pdf(item, resguardo_type, institution, today=None):
    """Misma hoja que la vista HTML, armada con platypus. Devuelve BytesIO."""
    from reportlab.lib import colors
    from reportlab.lib.pagesizes import A4, landscape
    from reportlab.platypus import SimpleDocTemplate, Table, TableStyle, Paragraph, Spacer
    from reportlab.lib.styles import getSampleStyleSheet, ParagraphStyle
    from reportlab.lib.enums import TA_CENTER, TA_RIGHT

    buf = BytesIO()
    doc = SimpleDocTemplate(
        buf, pagesize=landscape(A4), title=f"Hoja de Resguardo - {display_identifier(item)}",
        leftMargin=28, rightMargin=28, topMargin=28, bottomMargin=28
    )
    styles = getSampleStyleSheet()
    base = ParagraphStyle("base", parent=styles["Normal"], fontSize=9, leading=12)
    center = ParagraphStyle("center", parent=base, alignment=TA_CENTER)
    right = ParagraphStyle("right", parent=base, alignment=TA_RIGHT)
    title = ParagraphStyle("title", parent=styles["Heading2"], alignment=TA_CENTER)
    cell = ParagraphStyle("cell", parent=base, fontSize=7, leading=9)

    def P(x, style=base):
        return Paragraph(str(escape("" if x is None else str(x))).replace("\n", "<br/>"), style)

    # Helvetica no trae el glifo ☒
    checklist = "    ".join(f"[X] {name}" for name in accessory_checklist(item, institution))
    heading, lines = boilerplate_for(resguardo_type)

    data = [[P(h, cell) for h in HEADERS]]
    for r in asset_rows(item, institution):
        data.append([P(c, cell) for c in r])
    tbl = Table(data, repeatRows=1)
    tbl.setStyle(TableStyle([
        ("BACKGROUND", (0, 0), (-1, 0), colors.HexColor("#f2f2f2")),
        ("GRID", (0, 0), (-1, -1), 0.25, colors.grey),
        ("VALIGN", (0, 0), (-1, -1), "TOP"),
    ]))

    signatures = Table([
        ["_________________________________", "_________________________________"],
        [P("ENTREGA", center), P("RECIBE", center)],
        [P(institution.delivering_signatory, center), P(responsible_name(item), center)],
    ], colWidths=[doc.width / 2] * 2)

    elems = [
        P(institution.address, center),
        P(f"Tel: {institution.phone}", center),
        Spacer(1, 10),
        P(f"HOJA DE RESGUARDO {title_label(item)}", title),
        P(f"{institution.city_line}, a {long_date(today or date.today())}.", right),
        Spacer(1, 8),
        P("Responsable: ________________________________________________"),
        P("Por medio de la presente entrega el resguardo de los bienes referenciados que a continuación se describen:"),
        P(checklist),
        Spacer(1, 6),
        P(heading),
    ] + [P(line) for line in lines] + [
        Spacer(1, 8),
        tbl,
        Spacer(1, 40),
        signatures,
    ]
    doc.build(elems)
    buf.seek(0)
    return buf
