from datetime import datetime
from werkzeug.security import generate_password_hash, check_password_hash
from flask_login import UserMixin
from . import db, login_manager
from . import items


def _iso(dt):
    return dt.isoformat() if dt else None


class User(UserMixin, db.Model):
    __tablename__ = "users"
    id = db.Column(db.Integer, primary_key=True)
    username = db.Column(db.String(80), unique=True, nullable=False)
    password_hash = db.Column(db.String(255), nullable=False)
    role = db.Column(db.String(20), default="user")
    full_name = db.Column(db.String(160))
    email = db.Column(db.String(160))

    @classmethod
    def create_user(cls, username, password, role="user", full_name=None, email=None):
        u = cls(username=username, password_hash=generate_password_hash(password), role=role,
                full_name=full_name, email=email)
        db.session.add(u); db.session.commit(); return u

    def check_password(self, password):
        return check_password_hash(self.password_hash, password)

    def to_dict(self):
        return {"id": self.id, "username": self.username, "role": self.role,
                "full_name": self.full_name, "email": self.email}

@login_manager.user_loader
def load_user(user_id):
    return db.session.get(User, int(user_id))


class Responsable(db.Model):
    __tablename__ = "responsables"
    id = db.Column(db.Integer, primary_key=True)
    full_name = db.Column(db.String(160), nullable=False)
    phone = db.Column(db.String(40))
    email = db.Column(db.String(160))
    user_id = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=True)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    def to_domain(self):
        return items.Responsible(full_name=self.full_name, phone=self.phone, email=self.email)

    def to_dict(self):
        return {"id": self.id, "full_name": self.full_name, "phone": self.phone, "email": self.email,
                "user_id": self.user_id, "created_at": _iso(self.created_at), "updated_at": _iso(self.updated_at)}


class Location(db.Model):
    __tablename__ = "locations"
    id = db.Column(db.Integer, primary_key=True)
    building = db.Column(db.String(120), nullable=False)
    floor = db.Column(db.String(60), nullable=False)
    service_area = db.Column(db.String(120), nullable=False)
    internal_location = db.Column(db.String(160), nullable=False)
    description = db.Column(db.Text)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    def to_domain(self):
        return items.Location(building=self.building, floor=self.floor, service_area=self.service_area,
                              internal_location=self.internal_location, description=self.description)

    def to_dict(self):
        return {"id": self.id, "building": self.building, "floor": self.floor,
                "service_area": self.service_area, "internal_location": self.internal_location,
                "description": self.description,
                "created_at": _iso(self.created_at), "updated_at": _iso(self.updated_at)}


class EquipmentType(db.Model):
    __tablename__ = "equipment_types"
    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(60), unique=True, nullable=False)  # CPU, Monitor, Laptop, Impresora
    description = db.Column(db.Text)

    def to_dict(self):
        return {"id": self.id, "name": self.name, "description": self.description}


class EquipmentStatus(db.Model):
    __tablename__ = "equipment_status"
    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(60), unique=True, nullable=False)  # Activo, Disponible, En Reparación, De Baja...
    description = db.Column(db.Text)

    def to_dict(self):
        return {"id": self.id, "name": self.name, "description": self.description}


DEPARTMENT_STATUSES = ("Activa", "Inactiva")

class AdministrativeDepartment(db.Model):
    __tablename__ = "administrative_departments"
    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(160), nullable=False)
    description = db.Column(db.Text)
    status = db.Column(db.String(20), default="Activa")
    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    def to_dict(self):
        return {"id": self.id, "name": self.name, "description": self.description, "status": self.status,
                "created_at": _iso(self.created_at), "updated_at": _iso(self.updated_at)}


class Equipment(db.Model):
    __tablename__ = "equipment"
    id = db.Column(db.Integer, primary_key=True)
    display_id = db.Column(db.String(20), unique=True, index=True)  # EQ001
    equipment_type_id = db.Column(db.Integer, db.ForeignKey("equipment_types.id"), nullable=False)
    brand = db.Column(db.String(120))
    model = db.Column(db.String(120))
    serial_number = db.Column(db.String(120), index=True)
    current_status_id = db.Column(db.Integer, db.ForeignKey("equipment_status.id"), nullable=False)
    current_location_id = db.Column(db.Integer, db.ForeignKey("locations.id"), nullable=True)
    current_responsible_id = db.Column(db.Integer, db.ForeignKey("responsables.id"), nullable=True)
    purchase_date = db.Column(db.Date)
    warranty_end_date = db.Column(db.Date)
    notes = db.Column(db.Text)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    equipment_type = db.relationship("EquipmentType")
    current_status = db.relationship("EquipmentStatus")
    current_location = db.relationship("Location")
    current_responsible = db.relationship("Responsable")
    printer_details = db.relationship("PrinterDetails", uselist=False, backref="equipment",
                                      cascade="all, delete-orphan")

    @property
    def type_name(self):
        return self.equipment_type.name if self.equipment_type else ""

    def assigned_station(self):
        return Station.query.filter((Station.cpu_id == self.id) | (Station.monitor_id == self.id)).first()

    def to_item(self):
        loc = self.current_location
        pd = self.printer_details
        return items.Equipment(
            id=str(self.id),
            display_id=self.display_id or "",
            type=self.type_name,
            brand=self.brand or "",
            model=self.model or "",
            serial_number=self.serial_number or "",
            status=self.current_status.name if self.current_status else "",
            responsible=self.current_responsible.to_domain() if self.current_responsible else None,
            location=loc.to_domain() if loc else None,
            service=loc.service_area if loc else "",
            printer_profile=pd.profile if pd else None,
            printer_type=pd.printer_type if pd else None,
        )

    def to_dict(self):
        st = self.assigned_station()
        return {
            "id": self.id,
            "kind": items.EQUIPMENT,
            "display_id": self.display_id,
            "equipment_type": self.equipment_type.to_dict() if self.equipment_type else None,
            "brand": self.brand, "model": self.model, "serial_number": self.serial_number,
            "current_status": self.current_status.to_dict() if self.current_status else None,
            "current_location": self.current_location.to_dict() if self.current_location else None,
            "current_responsible": self.current_responsible.to_dict() if self.current_responsible else None,
            "assigned_station": {"id": st.id, "display_id": st.display_id, "name": st.name} if st else None,
            "printer_details": self.printer_details.to_dict() if self.printer_details else None,
            "purchase_date": _iso(self.purchase_date),
            "warranty_end_date": _iso(self.warranty_end_date),
            "notes": self.notes,
            "created_at": _iso(self.created_at), "updated_at": _iso(self.updated_at),
        }

    def __repr__(self):
        return f"<Equipment {self.display_id}>"


class PrinterDetails(db.Model):
    __tablename__ = "printer_details"
    equipment_id = db.Column(db.Integer, db.ForeignKey("equipment.id"), primary_key=True)
    profile = db.Column(db.String(60))        # Color, Monocromática, Red, WiFi, USB
    printer_type = db.Column(db.String(60))   # Láser, Inyección de Tinta, Térmica
    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    def to_dict(self):
        return {"equipment_id": self.equipment_id, "profile": self.profile, "printer_type": self.printer_type}


class Station(db.Model):
    __tablename__ = "stations"
    id = db.Column(db.Integer, primary_key=True)
    display_id = db.Column(db.String(20), unique=True, index=True)  # EST001
    name = db.Column(db.String(120), nullable=False)
    cpu_id = db.Column(db.Integer, db.ForeignKey("equipment.id"), nullable=False)
    monitor_id = db.Column(db.Integer, db.ForeignKey("equipment.id"), nullable=False)
    current_responsible_id = db.Column(db.Integer, db.ForeignKey("responsables.id"), nullable=False)
    current_location_id = db.Column(db.Integer, db.ForeignKey("locations.id"), nullable=False)
    station_status_id = db.Column(db.Integer, db.ForeignKey("equipment_status.id"), nullable=False)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    cpu = db.relationship("Equipment", foreign_keys=[cpu_id])
    monitor = db.relationship("Equipment", foreign_keys=[monitor_id])
    current_responsible = db.relationship("Responsable")
    current_location = db.relationship("Location")
    station_status = db.relationship("EquipmentStatus")
    accessory_rows = db.relationship("StationAccessory", backref="station", cascade="all, delete-orphan",
                                     order_by="StationAccessory.id")

    @property
    def accessories(self):
        return [a.name for a in self.accessory_rows]

    def to_item(self):
        loc = self.current_location
        return items.Station(
            id=str(self.id),
            display_id=self.display_id or "",
            name=self.name or "",
            cpu=self.cpu.to_item(),
            monitor=self.monitor.to_item(),
            responsible=self.current_responsible.to_domain() if self.current_responsible else None,
            location=loc.to_domain() if loc else None,
            service=loc.service_area if loc else "",
            status=self.station_status.name if self.station_status else "",
            accessories=self.accessories,
        )

    def to_dict(self):
        return {
            "id": self.id,
            "kind": items.STATION,
            "display_id": self.display_id,
            "name": self.name,
            "cpu": self.cpu.to_dict() if self.cpu else None,
            "monitor": self.monitor.to_dict() if self.monitor else None,
            "current_responsible": self.current_responsible.to_dict() if self.current_responsible else None,
            "current_location": self.current_location.to_dict() if self.current_location else None,
            "station_status": self.station_status.to_dict() if self.station_status else None,
            "accessories": self.accessories,
            "created_at": _iso(self.created_at), "updated_at": _iso(self.updated_at),
        }

    def __repr__(self):
        return f"<Station {self.display_id}>"


class StationAccessory(db.Model):
    __tablename__ = "station_accessories"
    id = db.Column(db.Integer, primary_key=True)
    station_id = db.Column(db.Integer, db.ForeignKey("stations.id"), nullable=False)
    name = db.Column(db.String(120), nullable=False)


class Resguardo(db.Model):
    __tablename__ = "resguardos"
    id = db.Column(db.Integer, primary_key=True)
    resguardo_type = db.Column(db.String(80), nullable=False)
    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)
    is_signed = db.Column(db.Boolean, default=False)
    document_url = db.Column(db.String(255))
    # uno de los dos; sin FK para que el historial sobreviva a la baja del ítem
    equipment_id = db.Column(db.Integer, index=True)
    station_id = db.Column(db.Integer, index=True)

    def to_dict(self):
        return {"id": self.id, "resguardo_type": self.resguardo_type, "created_at": _iso(self.created_at),
                "is_signed": bool(self.is_signed), "document_url": self.document_url,
                "equipment_id": self.equipment_id, "station_id": self.station_id}


class Movement(db.Model):
    __tablename__ = "movements"
    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=True)
    timestamp = db.Column(db.DateTime, default=datetime.utcnow, nullable=False, index=True)
    movement_type = db.Column(db.String(60), nullable=False)
    description = db.Column(db.Text, nullable=False)
    equipment_id = db.Column(db.Integer)
    station_id = db.Column(db.Integer)
    responsible_id = db.Column(db.Integer)
    location_id = db.Column(db.Integer)
    resguardo_id = db.Column(db.Integer)

    user = db.relationship("User")

    def to_dict(self):
        return {"id": self.id, "user_id": self.user_id,
                "username": self.user.username if self.user else None,
                "timestamp": _iso(self.timestamp), "movement_type": self.movement_type,
                "description": self.description, "equipment_id": self.equipment_id,
                "station_id": self.station_id, "responsible_id": self.responsible_id,
                "location_id": self.location_id, "resguardo_id": self.resguardo_id}


class Config(db.Model):
    __tablename__ = "config"
    id = db.Column(db.Integer, primary_key=True)
    # Membrete del resguardo; None = usar entorno / valor por defecto
    hospital_address = db.Column(db.String(300))
    hospital_phone = db.Column(db.String(60))
    city_line = db.Column(db.String(160))
    delivering_signatory = db.Column(db.String(160))
    combine_station_brands = db.Column(db.Boolean, nullable=True)

    def to_dict(self):
        return {"hospital_address": self.hospital_address, "hospital_phone": self.hospital_phone,
                "city_line": self.city_line, "delivering_signatory": self.delivering_signatory,
                "combine_station_brands": self.combine_station_brands}
