# inventario/institution.py
"""Membrete y políticas de la institución para las hojas de resguardo."""
import os
from dataclasses import dataclass, field

DEFAULT_ADDRESS = ("Carretera Federal México-Puebla Km. 34.5, Pueblo de Zoquiapan, 56530, "
                   "Municipio de Ixtapaluca, Estado de México.")
DEFAULT_PHONE = "(55) 5972 9800"
DEFAULT_CITY_LINE = "Ixtapaluca, Edo de México"
DEFAULT_SIGNATORY = "Ing. Edelberto Arceta Armenta"
DEFAULT_LAPTOP_CHECKLIST = ("Laptop", "Cable de corriente", "Eliminador")
DEFAULT_TEMPLATE = os.path.join(os.path.dirname(__file__), "plantillas", "resguardo-laptop-template.docx")


@dataclass(frozen=True)
class Institution:
    address: str = DEFAULT_ADDRESS
    phone: str = DEFAULT_PHONE
    city_line: str = DEFAULT_CITY_LINE
    delivering_signatory: str = DEFAULT_SIGNATORY
    laptop_checklist: tuple = field(default=DEFAULT_LAPTOP_CHECKLIST)
    # False: la marca de una estación es la del CPU (convención del formato impreso)
    combine_station_brands: bool = False
    word_template: str = DEFAULT_TEMPLATE


def _env_bool(val, default=False):
    if val is None or val == "":
        return default
    return str(val).strip().lower() in ("1", "true", "yes", "on", "si", "sí")


def config_from_env():
    """Valores de entorno que create_app vuelca en app.config."""
    checklist = os.environ.get("LAPTOP_CHECKLIST")
    return {
        "HOSPITAL_ADDRESS": os.environ.get("HOSPITAL_ADDRESS", DEFAULT_ADDRESS),
        "HOSPITAL_PHONE": os.environ.get("HOSPITAL_PHONE", DEFAULT_PHONE),
        "CITY_LINE": os.environ.get("CITY_LINE", DEFAULT_CITY_LINE),
        "DELIVERING_SIGNATORY": os.environ.get("DELIVERING_SIGNATORY", DEFAULT_SIGNATORY),
        "LAPTOP_CHECKLIST": tuple(x.strip() for x in checklist.split(",") if x.strip()) if checklist else DEFAULT_LAPTOP_CHECKLIST,
        "COMBINE_STATION_BRANDS": _env_bool(os.environ.get("COMBINE_STATION_BRANDS")),
        "RESGUARDO_TEMPLATE": os.environ.get("RESGUARDO_TEMPLATE", DEFAULT_TEMPLATE),
    }


def get_institution():
    """Fila Config(id=1) > app.config (entorno) > valores por defecto."""
    from flask import current_app
    from . import db
    from .models import Config

    cfg = db.session.get(Config, 1)
    c = current_app.config

    def pick(attr, key, default):
        val = getattr(cfg, attr, None) if cfg is not None else None
        if val not in (None, ""):
            return val
        return c.get(key, default)

    combine = cfg.combine_station_brands if cfg is not None and cfg.combine_station_brands is not None \
        else bool(c.get("COMBINE_STATION_BRANDS", False))

    return Institution(
        address=pick("hospital_address", "HOSPITAL_ADDRESS", DEFAULT_ADDRESS),
        phone=pick("hospital_phone", "HOSPITAL_PHONE", DEFAULT_PHONE),
        city_line=pick("city_line", "CITY_LINE", DEFAULT_CITY_LINE),
        delivering_signatory=pick("delivering_signatory", "DELIVERING_SIGNATORY", DEFAULT_SIGNATORY),
        laptop_checklist=tuple(c.get("LAPTOP_CHECKLIST", DEFAULT_LAPTOP_CHECKLIST)),
        combine_station_brands=combine,
        word_template=c.get("RESGUARDO_TEMPLATE", DEFAULT_TEMPLATE),
    )
