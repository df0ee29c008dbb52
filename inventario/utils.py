## utils.py: helpers de request/respuesta para los blueprints JSON

import re
from datetime import datetime
from flask import request, jsonify
from flask_login import current_user


def payload():
    """Cuerpo JSON o, si no viene JSON, el formulario."""
    data = request.get_json(silent=True)
    if isinstance(data, dict):
        return data
    return request.form.to_dict()

def json_error(message, status=400):
    return jsonify({"error": message}), status

def require_admin():
    return current_user.is_authenticated and getattr(current_user, "role", "") == "admin"

def clean(val):
    if val is None:
        return None
    val = str(val).strip()
    return val or None

def parse_date(s):
    try:
        return datetime.strptime(s, "%Y-%m-%d").date() if s else None
    except Exception:
        return None

def safe_filename_part(s):
    """Espacios -> "_" (mismo criterio del nombre de archivo del .docx)."""
    return re.sub(r"\s", "_", str(s or ""))

def to_int(val):
    """Id numérico del cuerpo de la petición; None si falta o no es un entero."""
    if val in (None, ""):
        return None
    try:
        return int(val)
    except (TypeError, ValueError):
        return None
