from flask import Blueprint, jsonify
from flask_login import login_user, logout_user, login_required, current_user
from .models import User
from .utils import payload, json_error

bp = Blueprint("auth", __name__)

@bp.route("/login", methods=["POST"])
def login():
    data = payload()
    username = (data.get("username") or "").strip()
    password = (data.get("password") or "").strip()
    user = User.query.filter_by(username=username).first()
    if user and user.check_password(password):
        login_user(user)
        return jsonify(user.to_dict())
    return json_error("Credenciales inválidas.", 401)

@bp.route("/logout", methods=["POST"])
@login_required
def logout():
    logout_user()
    return jsonify({"ok": True})

@bp.route("/me")
@login_required
def me():
    return jsonify(current_user.to_dict())
