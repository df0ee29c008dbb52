import os
import logging
from zoneinfo import ZoneInfo
from flask import Flask, jsonify
from flask_sqlalchemy import SQLAlchemy
from flask_migrate import Migrate
from flask_login import LoginManager

# Extensiones globales
db = SQLAlchemy()
migrate = Migrate()
login_manager = LoginManager()


def create_app(test_config=None):
    app = Flask(__name__)

    # --- Config básica ---
    app.config["SECRET_KEY"] = os.environ.get("SECRET_KEY", "devkey-change-me")
    app.config["SQLALCHEMY_DATABASE_URI"] = os.environ.get("DATABASE_URL", "sqlite:///inventario_ti.db")
    app.config["SQLALCHEMY_TRACK_MODIFICATIONS"] = False
    app.config["ADMIN_PASSWORD"] = os.environ.get("ADMIN_PASSWORD", "admin")

    # --- TZ / UTF-8 ---
    app.config["TZ_NAME"] = os.environ.get("TZ_NAME", "America/Mexico_City")
    app.config["JSON_AS_ASCII"] = False
    app.json.ensure_ascii = False

    # --- Membrete de resguardos (entorno; la fila Config id=1 tiene prioridad) ---
    from .institution import config_from_env
    app.config.update(config_from_env())

    if test_config:
        app.config.update(test_config)
    app.config["APP_TZ"] = ZoneInfo(app.config["TZ_NAME"])

    # --- Logging ---
    level = os.environ.get("LOG_LEVEL", "INFO").upper()
    app.logger.setLevel(getattr(logging, level, logging.INFO))

    # --- Inicializar extensiones ---
    db.init_app(app)
    migrate.init_app(app, db)
    login_manager.init_app(app)

    @login_manager.unauthorized_handler
    def _unauthorized():
        return jsonify({"error": "Autenticación requerida"}), 401

    # --- Importar modelos y blueprints ---
    from .models import User  # noqa

    from .auth import bp as auth_bp
    from .admin import bp as admin_bp
    from .equipos import bp as equipos_bp
    from .estaciones import bp as estaciones_bp
    from .catalogos import bp as catalogos_bp
    from .movimientos import bp as movimientos_bp
    from .resguardos import bp as resguardos_bp, api_bp as resguardos_api_bp

    # --- Registrar blueprints ---
    app.register_blueprint(auth_bp, url_prefix="/auth")
    app.register_blueprint(admin_bp, url_prefix="/admin")
    app.register_blueprint(equipos_bp, url_prefix="/equipos")
    app.register_blueprint(estaciones_bp, url_prefix="/estaciones")
    app.register_blueprint(catalogos_bp)  # /responsables, /ubicaciones, /direcciones, /catalogos
    app.register_blueprint(movimientos_bp)  # /movimientos, /inicio
    app.register_blueprint(resguardos_bp, url_prefix="/resguardos")
    app.register_blueprint(resguardos_api_bp, url_prefix="/api")

    app.logger.debug("Rutas: %s", sorted(r.rule for r in app.url_map.iter_rules()))

    # --- DB mínima: admin y catálogos por defecto ---
    from .queries import seed_catalogs
    with app.app_context():
        db.create_all()
        if not User.query.filter_by(username="admin").first():
            User.create_user("admin", app.config["ADMIN_PASSWORD"], role="admin")
        seed_catalogs()

    # --- Forzar header UTF-8 en HTML ---
    @app.after_request
    def _force_utf8(resp):
        if resp.mimetype in ("text/html", "application/xhtml+xml"):
            resp.headers["Content-Type"] = "text/html; charset=utf-8"
        return resp

    return app
