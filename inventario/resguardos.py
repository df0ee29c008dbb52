# inventario/resguardos.py
from io import BytesIO
from flask import Blueprint, Response, current_app, jsonify, request, send_file
from flask_login import login_required

from . import db
from .institution import get_institution
from .items import display_identifier, item_from_dict
from .models import Resguardo, Equipment, Station
from .queries import get_item_or_404, record_movement, resguardos_for
from .resguardo_formatter import RESGUARDO_TYPES, format_resguardo_data
from .resguardo_html import render_resguardo_html
from .resguardo_text import generate_resguardo_text
from .time_helpers import now_local, today_local, fmt_dt
from .utils import payload, json_error, clean, safe_filename_part, to_int
from .utils_export import resguardo_pdf
from .word import DOCX_MIMETYPE, fill_template

bp = Blueprint("resguardos", __name__)
api_bp = Blueprint("resguardos_api", __name__)


def _download_name(ident, resguardo_type, ext):
    return f"resguardo_{ident}_{safe_filename_part(resguardo_type)}.{ext}"

def _attachment(text, filename, mimetype="text/plain"):
    return send_file(BytesIO(text.encode("utf-8")), mimetype=f"{mimetype}; charset=utf-8",
                     as_attachment=True, download_name=filename)

def _yes(val):
    return str(val).strip().lower() in ("1", "true", "si", "sí", "yes", "on")


# =========================
#   Word (.docx) desde JSON
# =========================

@api_bp.route("/generate-resguardo-word", methods=["POST"])
@login_required
def generate_resguardo_word():
    body = request.get_json(silent=True)
    if not isinstance(body, dict):
        body = {}
    item_data = body.get("itemData")
    if not item_data:
        return json_error("No item data provided", 400)
    resguardo_type = str(body.get("resguardoType") or "")

    try:
        item = item_from_dict(item_data)
        institution = get_institution()
        data = format_resguardo_data(item, resguardo_type, institution, today=today_local())
        bio = fill_template(institution.word_template, data)
        ident = item_data.get("id") or display_identifier(item)
    except Exception:
        current_app.logger.exception("Error generando documento Word")
        return json_error("Failed to generate Word document", 500)

    return send_file(bio, mimetype=DOCX_MIMETYPE, as_attachment=True,
                     download_name=_download_name(ident, resguardo_type, "docx"))


# =========================
#   Registros de resguardo
# =========================

@bp.route("", methods=["GET"], strict_slashes=False)
@login_required
def list_resguardos():
    q = (request.args.get("q") or "").strip().lower()
    tipo = request.args.get("type") or ""
    signed = request.args.get("signed") or ""
    rows = Resguardo.query.order_by(Resguardo.created_at.desc(), Resguardo.id.desc()).all()
    if tipo and tipo != "Todos":
        rows = [r for r in rows if r.resguardo_type == tipo]
    if signed in ("Si", "Sí", "No"):
        want = signed != "No"
        rows = [r for r in rows if bool(r.is_signed) == want]
    out = [r.to_dict() for r in rows]
    if q:
        out = [d for d in out if any(q in str(v).lower() for v in d.values() if v is not None)]
    return jsonify(out)

@bp.route("/types")
@login_required
def resguardo_types():
    return jsonify(list(RESGUARDO_TYPES))

@bp.route("/item/<kind>/<int:item_id>")
@login_required
def item_resguardos(kind, item_id):
    get_item_or_404(kind, item_id)
    return jsonify([r.to_dict() for r in resguardos_for(kind, item_id)])

@bp.route("", methods=["POST"], strict_slashes=False)
@login_required
def create_resguardo():
    data = payload()
    resguardo_type = clean(data.get("resguardo_type"))
    equipment_id = data.get("equipment_id") or None
    station_id = data.get("station_id") or None
    if not resguardo_type:
        return json_error("El tipo de resguardo es obligatorio.")
    if bool(equipment_id) == bool(station_id):
        return json_error("Indique equipment_id o station_id (uno solo).")
    equipment_id, station_id = to_int(equipment_id), to_int(station_id)
    if equipment_id is None and station_id is None:
        return json_error("El id del ítem debe ser numérico.")

    if station_id:
        target = db.session.get(Station, station_id)
    else:
        target = db.session.get(Equipment, equipment_id)
    if target is None:
        return json_error("El ítem indicado no existe.", 404)

    r = Resguardo(
        resguardo_type=resguardo_type,
        equipment_id=equipment_id,
        station_id=station_id,
        document_url=clean(data.get("document_url")),
        is_signed=_yes(data.get("is_signed", False)),
    )
    db.session.add(r)
    db.session.flush()
    record_movement("Resguardo", f"Resguardo '{resguardo_type}' generado para {target.display_id}",
                    commit=False, resguardo_id=r.id, equipment_id=r.equipment_id, station_id=r.station_id)
    db.session.commit()
    return jsonify(r.to_dict()), 201

@bp.route("/<int:rid>/sign", methods=["POST"])
@login_required
def sign_resguardo(rid):
    r = Resguardo.query.get_or_404(rid)
    data = payload()
    r.is_signed = _yes(data["is_signed"]) if "is_signed" in data else not r.is_signed
    db.session.flush()
    record_movement("Resguardo", f"Resguardo {r.id} marcado como {'firmado' if r.is_signed else 'no firmado'}",
                    commit=False, resguardo_id=r.id, equipment_id=r.equipment_id, station_id=r.station_id)
    db.session.commit()
    return jsonify(r.to_dict())

@bp.route("/<int:rid>.txt")
@login_required
def resguardo_detail_txt(rid):
    r = Resguardo.query.get_or_404(rid)
    item_id = r.station_id or r.equipment_id
    text = "\n".join([
        f"Detalles del Resguardo ID: {r.id}",
        "",
        f"Tipo de Resguardo: {r.resguardo_type}",
        f"Fecha de Creación: {fmt_dt(r.created_at, '%Y-%m-%d')}",
        f"Firmado: {'Sí' if r.is_signed else 'No'}",
        f"ID del Item Asociado: {item_id if item_id is not None else 'N/A'}",
        f"URL (si aplica): {r.document_url or 'N/A'}",
        "",
        "---",
        "Generado por el Sistema de Inventario de TI del Hospital.",
        f"Fecha de descarga: {now_local().strftime('%Y-%m-%d %H:%M:%S')}",
    ])
    return _attachment(text, f"resguardo_{r.id}.txt")


# =========================
#   Documento de un ítem guardado
# =========================

@bp.route("/<kind>/<int:item_id>/document")
@login_required
def item_document(kind, item_id):
    row = get_item_or_404(kind, item_id)
    resguardo_type = request.args.get("type") or RESGUARDO_TYPES[0]
    fmt = (request.args.get("format") or "html").lower()
    try:
        item = row.to_item()
    except ValueError:
        current_app.logger.exception("Ítem inconsistente para resguardo: %s %s", kind, item_id)
        return json_error("El ítem tiene datos inconsistentes; revise sus componentes.", 409)
    institution = get_institution()
    ident = display_identifier(item)

    if fmt == "html":
        html = render_resguardo_html(item, resguardo_type, institution, today=today_local())
        # descarga directa cuando el navegador bloquea la ventana de impresión
        if _yes(request.args.get("download", "")):
            return _attachment(html, _download_name(ident, resguardo_type, "html"), mimetype="text/html")
        return Response(html, mimetype="text/html")

    if fmt == "txt":
        now = now_local().replace(tzinfo=None)
        return _attachment(generate_resguardo_text(item, resguardo_type, today=now),
                           _download_name(ident, resguardo_type, "txt"))

    if fmt == "pdf":
        try:
            bio = resguardo_pdf(item, resguardo_type, institution, today=today_local())
        except Exception:
            current_app.logger.exception("Error generando PDF de resguardo")
            return json_error("No se pudo generar el PDF.", 500)
        return send_file(bio, mimetype="application/pdf", as_attachment=True,
                         download_name=_download_name(ident, resguardo_type, "pdf"))

    if fmt == "docx":
        try:
            data = format_resguardo_data(item, resguardo_type, institution, today=today_local())
            bio = fill_template(institution.word_template, data)
        except Exception:
            current_app.logger.exception("Error generando documento Word")
            return json_error("Failed to generate Word document", 500)
        return send_file(bio, mimetype=DOCX_MIMETYPE, as_attachment=True,
                         download_name=_download_name(ident, resguardo_type, "docx"))

    return json_error(f"Formato no soportado: {fmt}")
