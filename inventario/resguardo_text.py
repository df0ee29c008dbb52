# inventario/resguardo_text.py
from datetime import datetime

from .items import STATION, item_kind, item_service, location_text, display_identifier
from .resguardo_formatter import boilerplate_for, responsible_name
from .time_helpers import long_date, short_time

SEPARATOR = "-" * 68


def _equipment_block(title, eq):
    return [
        f"{title}:",
        f"  ID: {display_identifier(eq)}",
        f"  Marca: {eq.brand}",
        f"  Modelo: {eq.model}",
    ]


def generate_resguardo_text(item, resguardo_type, today=None):
    """Resguardo en texto plano (descarga .txt)."""
    now = today if isinstance(today, datetime) else datetime.now()
    if today is not None and not isinstance(today, datetime):
        now = datetime.combine(today, now.time())

    is_station = item_kind(item) == STATION
    kind_label = "Estación" if is_station else "Equipo"

    lines = [
        "RESGUARDO DE EQUIPO DE TI - HOSPITAL",
        f"Fecha de Generación: {long_date(now)} {short_time(now)}",
        SEPARATOR,
        "",
        f"Tipo de Resguardo: {resguardo_type}",
        f"ID de {kind_label}: {display_identifier(item)}",
        f"Estado {'de la Estación' if is_station else 'del Equipo'}: {item.status}",
        "",
        SEPARATOR,
        "INFORMACIÓN DEL RESPONSABLE",
        f"Nombre Completo: {responsible_name(item)}",
        f"Servicio Asignado: {item_service(item)}",
        f"Ubicación: {location_text(item.location)}",
        "",
        SEPARATOR,
    ]

    if is_station:
        lines.append("EQUIPOS ASIGNADOS A LA ESTACIÓN")
        lines.append("")
        lines += _equipment_block("CPU Principal", item.cpu)
        lines.append("")
        lines += _equipment_block("Monitor Secundario", item.monitor)
        lines.append("")
        if item.accessories:
            lines.append("Accesorios Incluidos:")
            lines += [f"  - {acc}" for acc in item.accessories]
        else:
            lines.append("Accesorios Incluidos: Ninguno")
    else:
        lines.append("EQUIPO ASIGNADO")
        lines.append("")
        lines += _equipment_block(f"Equipo ({item.type or 'N/A'})", item)
        lines.append(f"  No. Serie: {item.serial_number}")
        if item.is_printer and (item.printer_profile or item.printer_type):
            lines.append(f"  Perfil: {item.printer_profile or ''}")
            lines.append(f"  Tecnología: {item.printer_type or ''}")

    heading, paragraph = boilerplate_for(resguardo_type)
    lines += ["", SEPARATOR, heading] + paragraph
    lines += [
        "",
        SEPARATOR,
        "FIRMAS:",
        "",
        "Responsable: _________________________",
        "",
        "Técnico de TI: _________________________",
    ]
    return "\n".join(lines).strip()
