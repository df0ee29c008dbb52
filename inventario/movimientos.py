from flask import Blueprint, request, jsonify, send_file
from io import BytesIO
from flask_login import login_required
from .models import Movement, Equipment, Station
from . import db
from .queries import equipment_stats
from .time_helpers import fmt_dt, now_local

bp = Blueprint("movimientos", __name__)

def _affected(m):
    """Etiqueta del equipo/estación afectada (EQ001 / EST001)."""
    if m.station_id:
        st = db.session.get(Station, m.station_id)
        return st.display_id if st else f"Estación {m.station_id}"
    if m.equipment_id:
        eq = db.session.get(Equipment, m.equipment_id)
        return eq.display_id if eq else f"Equipo {m.equipment_id}"
    return "N/A"

@bp.route("/movimientos")
@login_required
def movimientos_list():
    q = (request.args.get("q") or "").strip().lower()
    limit = request.args.get("limit", type=int) or 500
    rows = Movement.query.order_by(Movement.timestamp.desc(), Movement.id.desc()).limit(limit).all()
    out = []
    for m in rows:
        d = m.to_dict()
        d["affected"] = _affected(m)
        out.append(d)
    if q:
        out = [d for d in out if any(q in str(v).lower() for v in d.values() if v is not None)]
    return jsonify(out)

@bp.route("/movimientos/<int:mid>.txt")
@login_required
def movimiento_txt(mid):
    m = Movement.query.get_or_404(mid)
    text = "\n".join([
        f"Detalles del Movimiento ID: {m.id}",
        "",
        f"Usuario: {m.user.username if m.user else 'sistema'}",
        f"Equipo/Estación Afectada: {_affected(m)}",
        f"Fecha y Hora: {fmt_dt(m.timestamp)}",
        f"Tipo de Movimiento: {m.movement_type}",
        "",
        "Descripción:",
        m.description or "",
        "",
        "---",
        "Generado por el Sistema de Inventario de TI del Hospital.",
        f"Fecha de descarga: {now_local().strftime('%Y-%m-%d %H:%M:%S')}",
    ])
    return send_file(BytesIO(text.encode("utf-8")), mimetype="text/plain; charset=utf-8",
                     as_attachment=True, download_name=f"movimiento_{m.id}.txt")

@bp.route("/inicio/stats")
@login_required
def stats():
    return jsonify(equipment_stats())
