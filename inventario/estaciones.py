from flask import Blueprint, request, jsonify, abort
from flask_login import login_required
from . import db
from .models import Equipment, Station, StationAccessory
from .queries import (
    populated_stations, stations_using, next_display_id, get_status,
    location_or_none, responsable_or_none, record_movement,
)
from .utils import payload, json_error, require_admin, clean, to_int

bp = Blueprint("estaciones", __name__)

def _accessory_list(value):
    if value is None:
        return []
    if isinstance(value, str):
        value = value.split(",")
    return [a.strip() for a in value if a and str(a).strip()]

def _check_component(equipment_id, expected, station_id=None):
    """Devuelve (equipo, error). El equipo debe ser del tipo esperado y no estar en otra estación."""
    eq_id = to_int(equipment_id)
    eq = db.session.get(Equipment, eq_id) if eq_id is not None else None
    if eq is None:
        return None, f"{expected} inexistente."
    if eq.type_name.lower() != expected.lower():
        return None, f"El equipo {eq.display_id} no es un {expected} ({eq.type_name})."
    others = [s for s in stations_using(eq.id) if s.id != station_id]
    if others:
        return None, f"El {expected} {eq.display_id} ya está asignado a {others[0].display_id}."
    return eq, None

def _set_accessories(st, names):
    st.accessory_rows = [StationAccessory(name=n) for n in names]

def _set_component_status(components, status_name):
    status = get_status(status_name)
    if status is None:
        return
    for eq in components:
        if eq is not None:
            eq.current_status = status

@bp.route("", strict_slashes=False)
@login_required
def list_stations():
    q = (request.args.get("q") or "").strip()
    return jsonify([s.to_dict() for s in populated_stations(q=q or None)])

@bp.route("/<int:station_id>")
@login_required
def view_station(station_id):
    return jsonify(Station.query.get_or_404(station_id).to_dict())

@bp.route("", methods=["POST"], strict_slashes=False)
@login_required
def new_station():
    data = payload()
    name = clean(data.get("name"))
    if not name:
        return json_error("El nombre de la estación es obligatorio.")
    cpu, err = _check_component(data.get("cpu_id"), "CPU")
    if err:
        return json_error(err)
    monitor, err = _check_component(data.get("monitor_id"), "Monitor")
    if err:
        return json_error(err)
    responsible = responsable_or_none(data.get("responsible_id"))
    location = location_or_none(data.get("location_id"))
    if responsible is None or location is None:
        return json_error("Responsable y ubicación son obligatorios.")
    status = get_status(data.get("status") or "Activo")
    if status is None:
        return json_error("Estado desconocido.")

    st = Station(
        display_id=clean(data.get("display_id")) or next_display_id(Station, "EST"),
        name=name, cpu=cpu, monitor=monitor,
        current_responsible=responsible, current_location=location, station_status=status,
    )
    _set_accessories(st, _accessory_list(data.get("accessories")))
    # los componentes pasan a estar asignados
    _set_component_status([cpu, monitor], "Asignado")
    db.session.add(st)
    db.session.flush()
    record_movement("Alta", f"Alta de estación {st.display_id} ({cpu.display_id} + {monitor.display_id})",
                    commit=False, station_id=st.id, responsible_id=responsible.id, location_id=location.id)
    db.session.commit()
    return jsonify(st.to_dict()), 201

@bp.route("/<int:station_id>", methods=["PUT", "PATCH"])
@login_required
def edit_station(station_id):
    st = Station.query.get_or_404(station_id)
    data = payload()
    prev_responsible = st.current_responsible_id

    if "name" in data:
        name = clean(data.get("name"))
        if not name:
            return json_error("El nombre de la estación es obligatorio.")
        st.name = name
    released, taken = [], []
    if "cpu_id" in data:
        cpu, err = _check_component(data.get("cpu_id"), "CPU", station_id=st.id)
        if err:
            return json_error(err)
        if st.cpu is not cpu:
            released.append(st.cpu)
            taken.append(cpu)
        st.cpu = cpu
    if "monitor_id" in data:
        monitor, err = _check_component(data.get("monitor_id"), "Monitor", station_id=st.id)
        if err:
            return json_error(err)
        if st.monitor is not monitor:
            released.append(st.monitor)
            taken.append(monitor)
        st.monitor = monitor
    if "responsible_id" in data:
        responsible = responsable_or_none(data.get("responsible_id"))
        if responsible is None:
            return json_error("Responsable inexistente.")
        st.current_responsible = responsible
    if "location_id" in data:
        location = location_or_none(data.get("location_id"))
        if location is None:
            return json_error("Ubicación inexistente.")
        st.current_location = location
    if "status" in data:
        status = get_status(data.get("status"))
        if status is None:
            return json_error("Estado desconocido.")
        st.station_status = status
    if "accessories" in data:
        _set_accessories(st, _accessory_list(data.get("accessories")))
    _set_component_status(released, "Disponible")
    _set_component_status(taken, "Asignado")
    db.session.flush()

    if st.current_responsible_id != prev_responsible:
        kind, desc = "Cambio de Responsable", f"Estación {st.display_id}: nuevo responsable {st.current_responsible.full_name}"
    else:
        kind, desc = "Edición", f"Estación {st.display_id} actualizada"
    record_movement(kind, desc, commit=False, station_id=st.id,
                    responsible_id=st.current_responsible_id, location_id=st.current_location_id)
    db.session.commit()
    return jsonify(st.to_dict())

@bp.route("/<int:station_id>", methods=["DELETE"])
@login_required
def delete_station(station_id):
    if not require_admin():
        abort(403)
    st = Station.query.get_or_404(station_id)
    display_id = st.display_id
    # los componentes quedan disponibles
    _set_component_status([st.cpu, st.monitor], "Disponible")
    db.session.delete(st)
    record_movement("Baja", f"Estación {display_id} eliminada", commit=False, station_id=station_id)
    db.session.commit()
    return jsonify({"ok": True})
