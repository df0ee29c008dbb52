# inventario/time_helpers.py
from datetime import datetime, date
from zoneinfo import ZoneInfo
from flask import current_app

DEFAULT_TZ = "America/Mexico_City"

MESES = ["enero", "febrero", "marzo", "abril", "mayo", "junio", "julio", "agosto",
         "septiembre", "octubre", "noviembre", "diciembre"]

def app_tz():
    return current_app.config.get("APP_TZ", ZoneInfo(DEFAULT_TZ))

def now_local():
    return datetime.now(app_tz())

def today_local():
    return now_local().date()

def to_local(dt):
    if dt is None:
        return None
    tz = app_tz()
    if dt.tzinfo is None:
        # las fechas de la base se guardan en UTC sin tz
        dt = dt.replace(tzinfo=ZoneInfo("UTC"))
    return dt.astimezone(tz)

def long_date(d):
    """15 de enero de 2024"""
    if d is None:
        return ""
    if isinstance(d, datetime):
        d = d.date()
    if not isinstance(d, date):
        return str(d)
    return f"{d.day} de {MESES[d.month - 1]} de {d.year}"

def short_time(dt):
    if not isinstance(dt, datetime):
        return ""
    return dt.strftime("%H:%M")

def fmt_dt(dt, fmt="%Y-%m-%d %H:%M"):
    if not dt:
        return ""
    return to_local(dt).strftime(fmt)
