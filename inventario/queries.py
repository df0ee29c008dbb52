# inventario/queries.py
"""Acceso a datos compartido por los blueprints."""
from sqlalchemy import func, or_, select
from flask import abort
from flask_login import current_user

from . import db
from .items import STATION, EQUIPMENT
from .models import (
    Equipment, EquipmentType, EquipmentStatus, Location, Responsable, Station,
    Resguardo, Movement,
)
from .utils import to_int

DEFAULT_TYPES = ("CPU", "Monitor", "Laptop", "Impresora")
DEFAULT_STATUSES = ("Activo", "Disponible", "Asignado", "En Reparación", "En Mantenimiento", "De Baja")
AVAILABLE_STATUS = "Disponible"


def seed_catalogs():
    """Tipos y estados mínimos para una base nueva."""
    for name in DEFAULT_TYPES:
        if not EquipmentType.query.filter_by(name=name).first():
            db.session.add(EquipmentType(name=name))
    for name in DEFAULT_STATUSES:
        if not EquipmentStatus.query.filter_by(name=name).first():
            db.session.add(EquipmentStatus(name=name))
    db.session.commit()


def record_movement(movement_type, description, commit=True, **ids):
    """Registra un movimiento con el usuario actual (o ninguno fuera de sesión)."""
    user_id = current_user.id if getattr(current_user, "is_authenticated", False) else None
    mv = Movement(user_id=user_id, movement_type=movement_type, description=description, **ids)
    db.session.add(mv)
    if commit:
        db.session.commit()
    return mv


def next_display_id(model, prefix):
    """EQ001, EQ002... según el último display_id con ese prefijo."""
    last = 0
    for (did,) in db.session.query(model.display_id).filter(model.display_id.like(f"{prefix}%")).all():
        try:
            last = max(last, int(did[len(prefix):]))
        except (TypeError, ValueError):
            continue
    return f"{prefix}{last + 1:03d}"


def get_type(name):
    if not name:
        return None
    return EquipmentType.query.filter(func.lower(EquipmentType.name) == str(name).strip().lower()).first()


def get_status(name):
    if not name:
        return None
    return EquipmentStatus.query.filter(func.lower(EquipmentStatus.name) == str(name).strip().lower()).first()


def populated_equipment(q=None, type_name=None):
    query = Equipment.query.outerjoin(Equipment.equipment_type).outerjoin(Equipment.current_responsible)
    if type_name:
        query = query.filter(func.lower(EquipmentType.name) == type_name.lower())
    if q:
        like = f"%{q}%"
        query = query.filter(or_(Equipment.display_id.ilike(like), Equipment.brand.ilike(like),
                                 Equipment.model.ilike(like), Equipment.serial_number.ilike(like),
                                 EquipmentType.name.ilike(like), Responsable.full_name.ilike(like)))
    return query.order_by(Equipment.display_id.asc()).all()


def populated_stations(q=None):
    query = Station.query.outerjoin(Station.current_responsible)
    if q:
        like = f"%{q}%"
        query = query.filter(or_(Station.display_id.ilike(like), Station.name.ilike(like),
                                 Responsable.full_name.ilike(like)))
    return query.order_by(Station.display_id.asc()).all()


def stations_using(equipment_id):
    return Station.query.filter(or_(Station.cpu_id == equipment_id, Station.monitor_id == equipment_id)).all()


def available_equipment(type_name):
    """CPUs o monitores en estado Disponible que no pertenecen a ninguna estación."""
    return (Equipment.query.join(Equipment.equipment_type).join(Equipment.current_status)
            .filter(func.lower(EquipmentType.name) == type_name.lower())
            .filter(EquipmentStatus.name == AVAILABLE_STATUS)
            .filter(Equipment.id.notin_(select(Station.cpu_id)))
            .filter(Equipment.id.notin_(select(Station.monitor_id)))
            .order_by(Equipment.display_id.asc()).all())


def equipment_stats():
    total = db.session.query(func.count(Equipment.id)).scalar() or 0
    by_type = (db.session.query(EquipmentType.name, func.count(Equipment.id))
               .join(Equipment, Equipment.equipment_type_id == EquipmentType.id)
               .group_by(EquipmentType.name).order_by(EquipmentType.name).all())
    by_status = (db.session.query(EquipmentStatus.name, func.count(Equipment.id))
                 .join(Equipment, Equipment.current_status_id == EquipmentStatus.id)
                 .group_by(EquipmentStatus.name).order_by(EquipmentStatus.name).all())
    return {
        "total": total,
        "stations": db.session.query(func.count(Station.id)).scalar() or 0,
        "by_type": [{"type": n, "count": c} for n, c in by_type],
        "by_status": [{"status": n, "count": c} for n, c in by_status],
    }


def get_item_or_404(kind, item_id):
    if kind == STATION:
        return Station.query.get_or_404(item_id)
    if kind == EQUIPMENT:
        return Equipment.query.get_or_404(item_id)
    abort(404)


def resguardos_for(kind, item_id):
    col = Resguardo.station_id if kind == STATION else Resguardo.equipment_id
    return Resguardo.query.filter(col == item_id).order_by(Resguardo.created_at.desc(), Resguardo.id.desc()).all()


def location_or_none(location_id):
    location_id = to_int(location_id)
    if location_id is None:
        return None
    return db.session.get(Location, location_id)


def responsable_or_none(responsable_id):
    responsable_id = to_int(responsable_id)
    if responsable_id is None:
        return None
    return db.session.get(Responsable, responsable_id)
