from flask import Blueprint, request, jsonify, abort
from flask_login import login_required
from . import db
from .models import Equipment, PrinterDetails
from .queries import (
    populated_equipment, available_equipment, stations_using, next_display_id,
    get_type, get_status, location_or_none, responsable_or_none, record_movement,
)
from .utils import payload, json_error, require_admin, clean, parse_date
from .utils_export import stream_csv, stream_xlsx, stream_pdf

bp = Blueprint("equipos", __name__)

FIELDS = ("brand", "model", "serial_number", "notes")

def _apply_printer_details(eq, data):
    if not eq.equipment_type or eq.equipment_type.name.lower() not in ("impresora", "printer"):
        return
    profile = clean(data.get("printer_profile"))
    printer_type = clean(data.get("printer_type"))
    if profile is None and printer_type is None:
        return
    if eq.printer_details is None:
        eq.printer_details = PrinterDetails()
    eq.printer_details.profile = profile
    eq.printer_details.printer_type = printer_type

def _apply(eq, data):
    """Copia al modelo los campos presentes en data. Devuelve mensaje de error o None."""
    if "type" in data or "equipment_type" in data:
        et = get_type(data.get("type") or data.get("equipment_type"))
        if et is None:
            return "Tipo de equipo desconocido."
        eq.equipment_type = et
    if "status" in data:
        st = get_status(data.get("status"))
        if st is None:
            return "Estado desconocido."
        eq.current_status = st
    for fld in FIELDS:
        if fld in data:
            setattr(eq, fld, clean(data.get(fld)))
    if "location_id" in data:
        eq.current_location = location_or_none(data.get("location_id"))
    if "responsible_id" in data:
        eq.current_responsible = responsable_or_none(data.get("responsible_id"))
    for fld in ("purchase_date", "warranty_end_date"):
        if fld in data:
            setattr(eq, fld, parse_date(data.get(fld)))
    return None

@bp.route("", strict_slashes=False)
@login_required
def list_items():
    q = (request.args.get("q") or "").strip()
    type_name = (request.args.get("type") or "").strip()
    return jsonify([e.to_dict() for e in populated_equipment(q=q or None, type_name=type_name or None)])

@bp.route("/disponibles")
@login_required
def available():
    type_name = request.args.get("type") or "CPU"
    return jsonify([e.to_dict() for e in available_equipment(type_name)])

@bp.route("/<int:item_id>")
@login_required
def view_item(item_id):
    return jsonify(Equipment.query.get_or_404(item_id).to_dict())

@bp.route("", methods=["POST"], strict_slashes=False)
@login_required
def new_item():
    data = payload()
    if not (data.get("type") or data.get("equipment_type")):
        return json_error("El tipo de equipo es obligatorio.")
    eq = Equipment()
    if "status" not in data:
        data["status"] = "Disponible"
    err = _apply(eq, data)
    if err:
        return json_error(err)
    eq.display_id = clean(data.get("display_id")) or next_display_id(Equipment, "EQ")
    if Equipment.query.filter_by(display_id=eq.display_id).first():
        return json_error("Ya existe un equipo con ese ID.", 409)
    db.session.add(eq)
    _apply_printer_details(eq, data)
    db.session.flush()
    record_movement("Alta", f"Alta de equipo {eq.display_id} ({eq.type_name} {eq.brand or ''} {eq.model or ''})".strip(),
                    commit=False, equipment_id=eq.id,
                    responsible_id=eq.current_responsible_id, location_id=eq.current_location_id)
    db.session.commit()
    return jsonify(eq.to_dict()), 201

@bp.route("/<int:item_id>", methods=["PUT", "PATCH"])
@login_required
def edit_item(item_id):
    eq = Equipment.query.get_or_404(item_id)
    data = payload()
    prev_responsible = eq.current_responsible_id
    prev_location = eq.current_location_id
    new_type = data.get("type") or data.get("equipment_type")
    if new_type is not None:
        et = get_type(new_type)
        used = stations_using(eq.id)
        if used and et is not None and et.id != eq.equipment_type_id:
            # una estación exige CPU + Monitor
            return json_error(f"El equipo pertenece a la estación {used[0].display_id}; no se puede cambiar su tipo.", 409)
    err = _apply(eq, data)
    if err:
        db.session.rollback()
        return json_error(err)
    _apply_printer_details(eq, data)
    db.session.flush()

    if eq.current_responsible_id != prev_responsible:
        kind, desc = "Cambio de Responsable", f"Equipo {eq.display_id}: nuevo responsable {eq.current_responsible.full_name if eq.current_responsible else 'ninguno'}"
    elif eq.current_location_id != prev_location:
        kind, desc = "Cambio de Ubicación", f"Equipo {eq.display_id}: nueva ubicación {eq.current_location.to_domain() if eq.current_location else 'ninguna'}"
    else:
        kind, desc = "Edición", f"Equipo {eq.display_id} actualizado"
    record_movement(kind, desc, commit=False, equipment_id=eq.id,
                    responsible_id=eq.current_responsible_id, location_id=eq.current_location_id)
    db.session.commit()
    return jsonify(eq.to_dict())

@bp.route("/<int:item_id>", methods=["DELETE"])
@login_required
def delete_item(item_id):
    if not require_admin():
        abort(403)
    eq = Equipment.query.get_or_404(item_id)
    used = stations_using(eq.id)
    if used:
        return json_error(f"El equipo pertenece a la estación {used[0].display_id}.", 409)
    display_id = eq.display_id
    db.session.delete(eq)
    record_movement("Baja", f"Equipo {display_id} eliminado", commit=False, equipment_id=item_id)
    db.session.commit()
    return jsonify({"ok": True})

# ---- Exportaciones ----

HEADERS = ["ID", "Tipo", "Marca", "Modelo", "Serie", "Estado", "Responsable", "Edificio", "Piso", "Servicio",
           "Ubicación interna", "Compra", "Fin garantía"]

def _rows():
    rows = []
    for e in populated_equipment():
        loc = e.current_location
        rows.append([
            e.display_id, e.type_name, e.brand or "", e.model or "", e.serial_number or "",
            e.current_status.name if e.current_status else "",
            e.current_responsible.full_name if e.current_responsible else "",
            loc.building if loc else "", loc.floor if loc else "", loc.service_area if loc else "",
            loc.internal_location if loc else "",
            e.purchase_date.isoformat() if e.purchase_date else "",
            e.warranty_end_date.isoformat() if e.warranty_end_date else "",
        ])
    return rows

@bp.route("/export.csv")
@login_required
def export_csv():
    return stream_csv("equipos.csv", HEADERS, _rows())

@bp.route("/export.xlsx")
@login_required
def export_xlsx():
    return stream_xlsx("equipos.xlsx", HEADERS, _rows())

@bp.route("/export.pdf")
@login_required
def export_pdf():
    return stream_pdf("equipos.pdf", "Inventario de equipos", HEADERS[:10], [r[:10] for r in _rows()])
