# inventario/resguardo_html.py
"""Hoja de resguardo en HTML autocontenido (vista de impresión / PDF del navegador)."""
from datetime import date
from markupsafe import escape

from .institution import Institution
from .items import NA, STATION, item_kind, item_service, location_parts, location_text, display_identifier
from .resguardo_formatter import STATION_LABEL, boilerplate_for, responsible_name
from .time_helpers import long_date

HEADERS = ["Equipo", "Marca", "Modelo", "No. Serie", "Dirección", "Ubicación",
           "Edificio", "Piso", "Servicio", "Ubicación interna"]

CHECK_GLYPH = "&#9746;"

CSS = """
            body { font-family: Arial, sans-serif; margin: 40px; color: #333; line-height: 1.6; }
            .header { text-align: center; margin-bottom: 30px; }
            .header p { margin: 0; font-size: 14px; }
            .title { text-align: center; font-size: 20px; font-weight: bold; margin-bottom: 20px;
                     border-bottom: 2px solid #333; padding-bottom: 10px; }
            .date { text-align: right; margin-bottom: 20px; font-size: 14px; }
            .section { margin-bottom: 20px; }
            .section-title { font-weight: bold; margin-bottom: 10px; }
            .checklist span { margin-right: 15px; }
            .signature-area { display: flex; justify-content: space-around; margin-top: 50px; text-align: center; }
            table { width: 100%; border-collapse: collapse; margin-top: 15px; }
            th, td { border: 1px solid #ddd; padding: 8px; text-align: left; font-size: 13px; }
            th { background-color: #f2f2f2; }
"""


def title_label(item):
    if item_kind(item) == STATION:
        return STATION_LABEL
    return f"EQUIPO DE CÓMPUTO {(item.type or '').upper()}"


def _shared_cells(item, institution):
    parts = location_parts(item.location)
    return [
        institution.address,
        location_text(item.location),
        parts["building"],
        parts["floor"],
        item_service(item),
        parts["internal_location"],
    ]


def asset_rows(item, institution=None):
    """Filas de la tabla de bienes (10 celdas cada una).

    Estación: CPU y luego Monitor; las columnas compartidas (dirección,
    ubicación, edificio, piso, servicio, ubicación interna) sólo van en la
    primera fila, la segunda las deja vacías.
    """
    institution = institution or Institution()
    shared = _shared_cells(item, institution)

    if item_kind(item) == STATION:
        cpu, monitor = item.cpu, item.monitor
        return [
            [f"CPU: {display_identifier(cpu)}", cpu.brand, cpu.model, cpu.serial_number or NA] + shared,
            [f"Monitor: {display_identifier(monitor)}", monitor.brand, monitor.model, monitor.serial_number or NA]
            + [""] * len(shared),
        ]

    return [[(item.type or "").upper(), item.brand, item.model, item.serial_number or NA] + shared]


def accessory_checklist(item, institution=None):
    institution = institution or Institution()
    if item_kind(item) == STATION:
        return list(item.accessories or [])
    if item.is_laptop:
        return list(institution.laptop_checklist)
    return []


def _td(value):
    return f'<td style="padding: 8px; border: 1px solid #ddd;">{escape(value or "")}</td>'


def render_resguardo_html(item, resguardo_type, institution=None, today=None):
    institution = institution or Institution()
    current_date = long_date(today or date.today())

    rows_html = "\n".join(
        "                    <tr>" + "".join(_td(c) for c in row) + "</tr>"
        for row in asset_rows(item, institution)
    )
    headers_html = "".join(f"<th>{escape(h)}</th>" for h in HEADERS)
    checklist_html = "".join(
        f"<span>{CHECK_GLYPH} {escape(name)}</span>"
        for name in accessory_checklist(item, institution)
    )
    heading, lines = boilerplate_for(resguardo_type)
    boilerplate_html = "".join(f"<p>{escape(line)}</p>" for line in lines)

    return f"""<!DOCTYPE html>
<html lang="es">
<head>
    <meta charset="UTF-8">
    <meta name="viewport" content="width=device-width, initial-scale=1.0">
    <title>Hoja de Resguardo - {escape(display_identifier(item))} - {escape(resguardo_type or "")}</title>
    <style>{CSS}    </style>
</head>
<body>
    <div class="header">
        <p>{escape(institution.address)}</p>
        <p>Tel: {escape(institution.phone)}</p>
    </div>

    <div class="title">
        HOJA DE RESGUARDO {escape(title_label(item))}
    </div>

    <div class="date">
        {escape(institution.city_line)}, a {escape(current_date)}.
    </div>

    <div class="section">
        <p><strong>Responsable:</strong> ________________________________________________</p>
        <p>Por medio de la presente entrega el resguardo de los bienes referenciados que a continuación se describen:</p>
        <p class="checklist">{checklist_html}</p>
    </div>

    <div class="section">
        <div class="section-title">{escape(heading)}</div>
        {boilerplate_html}
    </div>

    <div class="section">
        <table>
            <thead>
                <tr>{headers_html}</tr>
            </thead>
            <tbody>
{rows_html}
            </tbody>
        </table>
    </div>

    <div class="signature-area">
        <div>
            <p>_________________________________________</p>
            <p><strong>ENTREGA</strong></p>
            <p>{escape(institution.delivering_signatory)}</p>
        </div>
        <div>
            <p>_________________________________________</p>
            <p><strong>RECIBE</strong></p>
            <p>{escape(responsible_name(item))}</p>
        </div>
    </div>
</body>
</html>
"""
