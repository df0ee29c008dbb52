"""Catálogos simples: responsables, ubicaciones, direcciones administrativas, tipos y estados."""
from flask import Blueprint, request, jsonify, abort
from flask_login import login_required
from sqlalchemy import or_
from . import db
from .models import (
    Responsable, Location, AdministrativeDepartment, EquipmentType, EquipmentStatus,
    Equipment, Station, DEPARTMENT_STATUSES,
)
from .queries import record_movement
from .utils import payload, json_error, require_admin, clean

bp = Blueprint("catalogos", __name__)

def _search(query, q, *cols):
    if q:
        like = f"%{q}%"
        query = query.filter(or_(*[c.ilike(like) for c in cols]))
    return query

# ---- Responsables ----

@bp.route("/responsables")
@login_required
def responsables_list():
    q = (request.args.get("q") or "").strip()
    rows = _search(Responsable.query, q, Responsable.full_name, Responsable.email, Responsable.phone)
    return jsonify([r.to_dict() for r in rows.order_by(Responsable.full_name.asc()).all()])

@bp.route("/responsables/<int:rid>")
@login_required
def responsables_view(rid):
    return jsonify(Responsable.query.get_or_404(rid).to_dict())

@bp.route("/responsables", methods=["POST"])
@login_required
def responsables_new():
    data = payload()
    full_name = clean(data.get("full_name"))
    if not full_name:
        return json_error("El nombre completo es obligatorio.")
    r = Responsable(full_name=full_name, phone=clean(data.get("phone")), email=clean(data.get("email")),
                    user_id=data.get("user_id") or None)
    db.session.add(r); db.session.flush()
    record_movement("Alta", f"Alta de responsable {r.full_name}", commit=False, responsible_id=r.id)
    db.session.commit()
    return jsonify(r.to_dict()), 201

@bp.route("/responsables/<int:rid>", methods=["PUT", "PATCH"])
@login_required
def responsables_edit(rid):
    r = Responsable.query.get_or_404(rid)
    data = payload()
    if "full_name" in data:
        full_name = clean(data.get("full_name"))
        if not full_name:
            return json_error("El nombre completo es obligatorio.")
        r.full_name = full_name
    for fld in ("phone", "email"):
        if fld in data:
            setattr(r, fld, clean(data.get(fld)))
    if "user_id" in data:
        r.user_id = data.get("user_id") or None
    db.session.commit()
    return jsonify(r.to_dict())

@bp.route("/responsables/<int:rid>", methods=["DELETE"])
@login_required
def responsables_delete(rid):
    if not require_admin():
        abort(403)
    r = Responsable.query.get_or_404(rid)
    if Station.query.filter_by(current_responsible_id=r.id).first():
        return json_error("El responsable tiene estaciones a su cargo.", 409)
    Equipment.query.filter_by(current_responsible_id=r.id).update({"current_responsible_id": None})
    name = r.full_name
    db.session.delete(r)
    record_movement("Baja", f"Responsable {name} eliminado", commit=False, responsible_id=rid)
    db.session.commit()
    return jsonify({"ok": True})

# ---- Ubicaciones ----

LOCATION_FIELDS = ("building", "floor", "service_area", "internal_location")

@bp.route("/ubicaciones")
@login_required
def ubicaciones_list():
    q = (request.args.get("q") or "").strip()
    rows = _search(Location.query, q, Location.building, Location.floor, Location.service_area,
                   Location.internal_location, Location.description)
    return jsonify([l.to_dict() for l in rows.order_by(Location.building.asc(), Location.floor.asc()).all()])

@bp.route("/ubicaciones/<int:lid>")
@login_required
def ubicaciones_view(lid):
    return jsonify(Location.query.get_or_404(lid).to_dict())

@bp.route("/ubicaciones", methods=["POST"])
@login_required
def ubicaciones_new():
    data = payload()
    values = {f: clean(data.get(f)) for f in LOCATION_FIELDS}
    missing = [f for f, v in values.items() if not v]
    if missing:
        return json_error(f"Campos obligatorios: {', '.join(missing)}.")
    loc = Location(description=clean(data.get("description")), **values)
    db.session.add(loc); db.session.flush()
    record_movement("Alta", f"Alta de ubicación {loc.to_domain()}", commit=False, location_id=loc.id)
    db.session.commit()
    return jsonify(loc.to_dict()), 201

@bp.route("/ubicaciones/<int:lid>", methods=["PUT", "PATCH"])
@login_required
def ubicaciones_edit(lid):
    loc = Location.query.get_or_404(lid)
    data = payload()
    for f in LOCATION_FIELDS:
        if f in data:
            v = clean(data.get(f))
            if not v:
                return json_error(f"El campo {f} no puede quedar vacío.")
            setattr(loc, f, v)
    if "description" in data:
        loc.description = clean(data.get("description"))
    db.session.commit()
    return jsonify(loc.to_dict())

@bp.route("/ubicaciones/<int:lid>", methods=["DELETE"])
@login_required
def ubicaciones_delete(lid):
    if not require_admin():
        abort(403)
    loc = Location.query.get_or_404(lid)
    if Station.query.filter_by(current_location_id=loc.id).first() or \
            Equipment.query.filter_by(current_location_id=loc.id).first():
        return json_error("La ubicación está en uso.", 409)
    db.session.delete(loc)
    record_movement("Baja", f"Ubicación {lid} eliminada", commit=False, location_id=lid)
    db.session.commit()
    return jsonify({"ok": True})

# ---- Direcciones administrativas ----

@bp.route("/direcciones")
@login_required
def direcciones_list():
    q = (request.args.get("q") or "").strip()
    status = request.args.get("status") or ""
    rows = _search(AdministrativeDepartment.query, q, AdministrativeDepartment.name,
                   AdministrativeDepartment.description)
    if status in DEPARTMENT_STATUSES:
        rows = rows.filter(AdministrativeDepartment.status == status)
    return jsonify([d.to_dict() for d in rows.order_by(AdministrativeDepartment.name.asc()).all()])

@bp.route("/direcciones", methods=["POST"])
@login_required
def direcciones_new():
    data = payload()
    name = clean(data.get("name"))
    if not name:
        return json_error("El nombre es obligatorio.")
    status = data.get("status") or "Activa"
    if status not in DEPARTMENT_STATUSES:
        return json_error("Estado inválido (Activa / Inactiva).")
    d = AdministrativeDepartment(name=name, description=clean(data.get("description")), status=status)
    db.session.add(d); db.session.commit()
    return jsonify(d.to_dict()), 201

@bp.route("/direcciones/<int:did>", methods=["PUT", "PATCH"])
@login_required
def direcciones_edit(did):
    d = AdministrativeDepartment.query.get_or_404(did)
    data = payload()
    if "name" in data:
        name = clean(data.get("name"))
        if not name:
            return json_error("El nombre es obligatorio.")
        d.name = name
    if "description" in data:
        d.description = clean(data.get("description"))
    if "status" in data:
        if data.get("status") not in DEPARTMENT_STATUSES:
            return json_error("Estado inválido (Activa / Inactiva).")
        d.status = data.get("status")
    db.session.commit()
    return jsonify(d.to_dict())

@bp.route("/direcciones/<int:did>", methods=["DELETE"])
@login_required
def direcciones_delete(did):
    if not require_admin():
        abort(403)
    d = AdministrativeDepartment.query.get_or_404(did)
    db.session.delete(d); db.session.commit()
    return jsonify({"ok": True})

# ---- Tipos y estados ----

@bp.route("/catalogos/tipos")
@login_required
def tipos():
    return jsonify([t.to_dict() for t in EquipmentType.query.order_by(EquipmentType.name.asc()).all()])

@bp.route("/catalogos/estados")
@login_required
def estados():
    return jsonify([s.to_dict() for s in EquipmentStatus.query.order_by(EquipmentStatus.name.asc()).all()])
