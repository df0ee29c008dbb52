# inventario/items.py
"""Ítems resguardables: estaciones de cómputo y equipos individuales.

Los objetos de este módulo son los que consumen el formateador y los
generadores de resguardo. Se construyen desde la base (``to_item()`` de los
modelos) o desde el JSON que envía el front (``item_from_dict``); en ambos
casos el discriminante ``kind`` queda fijado al construir.
"""
from dataclasses import dataclass, field
from typing import Optional, Union

NA = "N/A"

STATION = "station"
EQUIPMENT = "equipment"

CPU_TYPES = ("cpu",)
MONITOR_TYPES = ("monitor",)
LAPTOP_TYPES = ("laptop",)
PRINTER_TYPES = ("impresora", "printer")


@dataclass
class Responsible:
    full_name: str
    phone: Optional[str] = None
    email: Optional[str] = None


@dataclass
class Location:
    building: str = ""
    floor: str = ""
    service_area: str = ""
    internal_location: str = ""
    description: Optional[str] = None

    def __str__(self):
        # Mismo orden que la cadena legacy "edificio, piso, ubicación interna"
        # un hueco intermedio se conserva para no correr las posiciones
        parts = [self.building or "", self.floor or "", self.internal_location or ""]
        while parts and not parts[-1]:
            parts.pop()
        return ", ".join(parts)


@dataclass
class Equipment:
    id: str
    type: str = ""
    brand: str = ""
    model: str = ""
    serial_number: str = ""
    status: str = ""
    responsible: Optional[Responsible] = None
    location: Union[Location, str, None] = None
    service: str = ""
    display_id: str = ""
    printer_profile: Optional[str] = None
    printer_type: Optional[str] = None
    kind: str = field(default=EQUIPMENT, init=False)

    def is_a(self, names):
        return (self.type or "").strip().lower() in names

    @property
    def is_laptop(self):
        return self.is_a(LAPTOP_TYPES)

    @property
    def is_printer(self):
        return self.is_a(PRINTER_TYPES)


@dataclass
class Station:
    id: str
    cpu: Equipment
    monitor: Equipment
    responsible: Optional[Responsible] = None
    location: Union[Location, str, None] = None
    service: str = ""
    status: str = ""
    accessories: list = field(default_factory=list)
    display_id: str = ""
    name: str = ""
    kind: str = field(default=STATION, init=False)

    def __post_init__(self):
        if not isinstance(self.cpu, Equipment) or not self.cpu.is_a(CPU_TYPES):
            raise ValueError(f"La estación {self.id} requiere un CPU (recibido: {getattr(self.cpu, 'type', None)!r})")
        if not isinstance(self.monitor, Equipment) or not self.monitor.is_a(MONITOR_TYPES):
            raise ValueError(f"La estación {self.id} requiere un Monitor (recibido: {getattr(self.monitor, 'type', None)!r})")


# ---- Ubicación ----

def parse_location(text):
    """Divide "edificio, piso, ubicación interna..." en sus partes.

    La posición manda: un segmento vacío queda como "N/A" en su lugar, no
    desplaza a los siguientes. Los segmentos a partir del tercero se vuelven
    a unir con ", ". Nunca falla.
    """
    parts = [p.strip() for p in str(text or "").split(",")]
    if not any(parts):
        parts = []
    building = parts[0] if len(parts) >= 1 and parts[0] else NA
    floor = parts[1] if len(parts) >= 2 and parts[1] else NA
    rest = [p for p in parts[2:] if p]
    internal = ", ".join(rest) if rest else NA
    return {"building": building, "floor": floor, "internal_location": internal}


def location_parts(location):
    """Edificio/piso/ubicación interna de un Location estructurado o de una cadena legacy."""
    if isinstance(location, Location):
        return {
            "building": location.building or NA,
            "floor": location.floor or NA,
            "internal_location": location.internal_location or NA,
        }
    return parse_location(location)


def location_text(location):
    if location is None:
        return ""
    return str(location)


def item_service(item):
    if item.service:
        return item.service
    if isinstance(item.location, Location):
        return item.location.service_area or ""
    return ""


# ---- Discriminación ----

def _is_mapping(x):
    return isinstance(x, dict)


def item_kind(obj):
    """Devuelve "station" o "equipment".

    Objetos de dominio: su discriminante explícito. Diccionarios: la clave
    "kind" si viene; si no, es estación sólo si trae "cpu" y "monitor" como
    objetos anidados. La etiqueta de tipo no se mira nunca.
    """
    kind = getattr(obj, "kind", None)
    if kind in (STATION, EQUIPMENT):
        return kind
    if _is_mapping(obj):
        declared = obj.get("kind")
        if declared in (STATION, EQUIPMENT):
            return declared
        if _is_mapping(obj.get("cpu")) and _is_mapping(obj.get("monitor")):
            return STATION
    return EQUIPMENT


def display_identifier(item):
    return getattr(item, "display_id", "") or getattr(item, "id", "") or ""


# ---- Construcción desde JSON ----

def _s(value):
    if value is None:
        return ""
    return str(value)


def _pick(data, *keys):
    for k in keys:
        v = data.get(k)
        if v not in (None, ""):
            return v
    return None


def _name_of(value, *keys):
    """Acepta tanto un string como un objeto poblado {"name": ...}."""
    if _is_mapping(value):
        return _s(_pick(value, *keys))
    return _s(value)


def responsible_from(value):
    if value in (None, ""):
        return None
    if _is_mapping(value):
        name = _s(_pick(value, "full_name", "nombre", "name"))
        if not name:
            return None
        return Responsible(full_name=name, phone=value.get("phone"), email=value.get("email"))
    return Responsible(full_name=_s(value))


def location_from(value):
    if value in (None, ""):
        return None
    if _is_mapping(value):
        return Location(
            building=_s(value.get("building")),
            floor=_s(value.get("floor")),
            service_area=_s(value.get("service_area")),
            internal_location=_s(value.get("internal_location")),
            description=value.get("description"),
        )
    return _s(value)


def _equipment_from(data, default_type=""):
    printer = data.get("printer_details") if _is_mapping(data.get("printer_details")) else {}
    location = location_from(_pick(data, "current_location", "location", "ubicacion"))
    service = _s(_pick(data, "servicio", "service"))
    return Equipment(
        id=_s(data.get("id")),
        display_id=_s(data.get("display_id")),
        type=_name_of(_pick(data, "equipment_type", "type", "tipo"), "name") or default_type,
        brand=_s(_pick(data, "brand", "marca")),
        model=_s(_pick(data, "model", "modelo")),
        serial_number=_s(_pick(data, "serial_number", "noSerie", "serial")),
        status=_name_of(_pick(data, "current_status", "status", "estado"), "name"),
        responsible=responsible_from(_pick(data, "current_responsible", "responsible", "responsable")),
        location=location,
        service=service,
        printer_profile=printer.get("profile") or data.get("printer_profile"),
        printer_type=printer.get("printer_type") or data.get("printer_type"),
    )


def item_from_dict(data):
    """Construye Station o Equipment desde el cuerpo JSON de una petición.

    Acepta la forma de la base (display_id, brand, current_location...) y la
    forma legacy en castellano (marca, modelo, noSerie, ubicacion...).
    """
    data = data if _is_mapping(data) else {}
    if item_kind(data) == EQUIPMENT:
        return _equipment_from(data)

    cpu = data.get("cpu") if _is_mapping(data.get("cpu")) else {}
    monitor = data.get("monitor") if _is_mapping(data.get("monitor")) else {}
    accessories = _pick(data, "accessories", "accesorios") or []
    return Station(
        id=_s(data.get("id")),
        display_id=_s(data.get("display_id")),
        name=_s(data.get("name")),
        cpu=_equipment_from(cpu, default_type="CPU"),
        monitor=_equipment_from(monitor, default_type="Monitor"),
        responsible=responsible_from(_pick(data, "current_responsible", "responsible", "responsable")),
        location=location_from(_pick(data, "current_location", "location", "ubicacion")),
        service=_s(_pick(data, "servicio", "service")),
        status=_name_of(_pick(data, "station_status", "status", "estado"), "name"),
        accessories=[_s(a) for a in accessories if a not in (None, "")],
    )
