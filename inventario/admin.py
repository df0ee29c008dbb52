from flask import Blueprint, jsonify, abort
from flask_login import login_required
from werkzeug.security import generate_password_hash
from .models import User, Config
from .institution import get_institution
from .utils import payload, json_error, require_admin, clean
from .word import template_tags
from . import db

bp = Blueprint("admin", __name__)

ROLES = ("admin", "user")

@bp.route("/users")
@login_required
def users_list():
    if not require_admin():
        abort(403)
    users = User.query.order_by(User.username.asc()).all()
    return jsonify([u.to_dict() for u in users])

@bp.route("/users", methods=["POST"])
@login_required
def users_new():
    if not require_admin():
        abort(403)
    data = payload()
    username = (data.get("username") or "").strip()
    password = (data.get("password") or "").strip()
    role = data.get("role") or "user"
    if not username or not password:
        return json_error("Usuario y contraseña son obligatorios.")
    if role not in ROLES:
        return json_error("Rol inválido.")
    if User.query.filter_by(username=username).first():
        return json_error("Ya existe un usuario con ese nombre.", 409)
    u = User.create_user(username, password, role=role,
                         full_name=clean(data.get("full_name")), email=clean(data.get("email")))
    return jsonify(u.to_dict()), 201

@bp.route("/users/<int:uid>", methods=["PUT", "PATCH"])
@login_required
def users_edit(uid):
    if not require_admin():
        abort(403)
    u = User.query.get_or_404(uid)
    data = payload()
    if "role" in data:
        if data.get("role") not in ROLES:
            return json_error("Rol inválido.")
        u.role = data.get("role")
    for fld in ("full_name", "email"):
        if fld in data:
            setattr(u, fld, clean(data.get(fld)))
    newpass = (data.get("password") or "").strip()
    if newpass:
        u.password_hash = generate_password_hash(newpass)
    db.session.commit()
    return jsonify(u.to_dict())

@bp.route("/users/<int:uid>", methods=["DELETE"])
@login_required
def users_delete(uid):
    if not require_admin():
        abort(403)
    u = User.query.get_or_404(uid)
    if u.username == "admin":
        return json_error("No se puede borrar el usuario admin por defecto.", 409)
    db.session.delete(u); db.session.commit()
    return jsonify({"ok": True})

# ---- Membrete de resguardos ----

SETTINGS_FIELDS = ("hospital_address", "hospital_phone", "city_line", "delivering_signatory")

def _effective():
    inst = get_institution()
    return {
        "hospital_address": inst.address,
        "hospital_phone": inst.phone,
        "city_line": inst.city_line,
        "delivering_signatory": inst.delivering_signatory,
        "laptop_checklist": list(inst.laptop_checklist),
        "combine_station_brands": inst.combine_station_brands,
        "word_template": inst.word_template,
    }

@bp.route("/settings")
@login_required
def settings():
    if not require_admin():
        abort(403)
    cfg = db.session.get(Config, 1)
    return jsonify({"stored": cfg.to_dict() if cfg else None, "effective": _effective()})

@bp.route("/settings", methods=["POST", "PUT"])
@login_required
def settings_save():
    if not require_admin():
        abort(403)
    cfg = db.session.get(Config, 1)
    if not cfg:
        cfg = Config(id=1); db.session.add(cfg)
    data = payload()
    for fld in SETTINGS_FIELDS:
        if fld in data:
            # vacío = volver al valor de entorno
            setattr(cfg, fld, clean(data.get(fld)))
    if "combine_station_brands" in data:
        val = data.get("combine_station_brands")
        if val in (None, ""):
            cfg.combine_station_brands = None
        else:
            cfg.combine_station_brands = str(val).strip().lower() in ("1", "true", "yes", "on", "si", "sí")
    db.session.commit()
    return jsonify({"stored": cfg.to_dict(), "effective": _effective()})

@bp.route("/template-check")
@login_required
def template_check():
    """Marcadores {tag} presentes en la plantilla Word configurada."""
    if not require_admin():
        abort(403)
    path = get_institution().word_template
    try:
        tags = template_tags(path)
    except Exception as e:
        return json_error(f"No se pudo leer la plantilla: {e}", 500)
    return jsonify({"template": path, "tags": sorted(tags)})
