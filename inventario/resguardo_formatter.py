# inventario/resguardo_formatter.py
"""Datos planos de un resguardo, listos para inyectar en una plantilla."""
from datetime import date

from .institution import Institution
from .items import NA, STATION, item_kind, item_service, location_parts, location_text, display_identifier
from .time_helpers import long_date

STATION_LABEL = "ESTACIÓN DE CÓMPUTO"
CHECKED = "☒"

RESGUARDO_TYPES = (
    "Asignación Inicial",
    "Mantenimiento Preventivo",
    "Cambio de Responsable",
    "Creación Inicial",
    "Cancelación",
)

# tipo -> (encabezado, líneas)
BOILERPLATE = {
    "Asignación Inicial": (
        "DETALLES DE ASIGNACIÓN INICIAL",
        ["Este documento certifica la asignación inicial de la estación de trabajo y sus componentes al responsable indicado.",
         "El responsable se compromete a hacer uso adecuado del equipo y reportar cualquier anomalía."],
    ),
    "Mantenimiento Preventivo": (
        "DETALLES DE MANTENIMIENTO PREVENTIVO",
        ["Este resguardo documenta la realización de mantenimiento preventivo en la estación.",
         "Se verificó el funcionamiento de hardware y software, y se realizaron las limpiezas y actualizaciones pertinentes."],
    ),
    "Cambio de Responsable": (
        "DETALLES DE CAMBIO DE RESPONSABLE",
        ["Este documento registra el cambio de responsable de la estación de trabajo.",
         "El nuevo responsable asume la custodia y el uso adecuado del equipo a partir de la fecha de este resguardo."],
    ),
    "Creación Inicial": (
        "DETALLES DE CREACIÓN INICIAL",
        ["Este resguardo documenta la creación y configuración inicial de la estación de trabajo en el sistema de inventario."],
    ),
    "Cancelación": (
        "DETALLES DE CANCELACIÓN",
        ["Este resguardo documenta la baja o cancelación de la estación de trabajo del inventario."],
    ),
}


def boilerplate_for(resguardo_type):
    """Encabezado y párrafo según el tipo exacto; genérico para cualquier otro."""
    if resguardo_type in BOILERPLATE:
        return BOILERPLATE[resguardo_type]
    return "DETALLES ADICIONALES", [f"Este es un resguardo de tipo '{resguardo_type}'."]


def responsible_name(item):
    resp = getattr(item, "responsible", None)
    if resp is not None and resp.full_name:
        return resp.full_name
    return NA


def format_resguardo_data(item, resguardo_type, institution=None, today=None):
    institution = institution or Institution()
    parts = location_parts(item.location)

    if item_kind(item) == STATION:
        cpu, monitor = item.cpu, item.monitor
        item_type_label = STATION_LABEL
        if institution.combine_station_brands:
            brand = f"{cpu.brand} / {monitor.brand}"
        else:
            brand = cpu.brand
        model = f"{cpu.model} / {monitor.model}"
        serial = f"{display_identifier(cpu)} / {display_identifier(monitor)}"
    else:
        item_type_label = (item.type or "").upper()
        brand = item.brand
        model = item.model
        serial = item.serial_number

    return {
        "date": long_date(today or date.today()),
        "resguardo_type": resguardo_type or "",
        "responsible_name": responsible_name(item),
        "item_type_label": item_type_label,
        "brand": brand or "",
        "model": model or "",
        "serial": serial or "",
        "hospital_address": institution.address,
        "location": location_text(item.location),
        "building": parts["building"],
        "floor": parts["floor"],
        "service": item_service(item),
        "internal_location": parts["internal_location"],
        "hospital_phone": institution.phone,
        "city_line": institution.city_line,
        "delivering_signatory": institution.delivering_signatory,
        "checkbox_laptop": CHECKED,
        "checkbox_cable": CHECKED,
        "checkbox_eliminador": CHECKED,
    }
