import pytest
from docx import Document

from inventario import create_app, db as _db
from inventario.models import User


@pytest.fixture
def template_path(tmp_path):
    """Plantilla mínima con los mismos marcadores que la del hospital."""
    doc = Document()
    doc.add_paragraph("{hospital_address}")
    doc.add_paragraph("Tel: {hospital_phone}")
    doc.add_paragraph("HOJA DE RESGUARDO {item_type_label}")
    doc.add_paragraph("{city_line}, a { date }.")
    doc.add_paragraph("Responsable: {responsible_name}")
    doc.add_paragraph("{checkbox_laptop} Laptop {checkbox_cable} Cable {checkbox_eliminador} Eliminador")
    table = doc.add_table(rows=1, cols=8)
    tags = ["{brand}", "{model}", "{serial}", "{location}", "{building}", "{floor}", "{service}",
            "{internal_location}"]
    for cell, tag in zip(table.rows[0].cells, tags):
        cell.text = tag
    doc.add_paragraph("Tipo: {resguardo_type}")
    doc.add_paragraph("Entrega: {delivering_signatory}")
    path = tmp_path / "plantilla.docx"
    doc.save(str(path))
    return str(path)


@pytest.fixture
def app(template_path):
    app = create_app({
        "TESTING": True,
        "SECRET_KEY": "test",
        "SQLALCHEMY_DATABASE_URI": "sqlite://",
        "ADMIN_PASSWORD": "secreta",
        "RESGUARDO_TEMPLATE": template_path,
    })
    yield app
    with app.app_context():
        _db.session.remove()
        _db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def admin_client(app):
    c = app.test_client()
    resp = c.post("/auth/login", json={"username": "admin", "password": "secreta"})
    assert resp.status_code == 200
    return c


@pytest.fixture
def user_client(app):
    with app.app_context():
        User.create_user("tecnico", "clave", role="user")
    c = app.test_client()
    resp = c.post("/auth/login", json={"username": "tecnico", "password": "clave"})
    assert resp.status_code == 200
    return c


@pytest.fixture
def inventory(admin_client):
    """Responsable, ubicación, CPU + Monitor y la estación EST001 que los agrupa."""
    resp = admin_client.post("/responsables", json={"full_name": "Juan Pérez", "phone": "5551234"})
    responsable = resp.get_json()
    resp = admin_client.post("/ubicaciones", json={
        "building": "Torre Médica", "floor": "Piso 2", "service_area": "Urgencias",
        "internal_location": "Consultorio 5",
    })
    location = resp.get_json()
    common = {"responsible_id": responsable["id"], "location_id": location["id"]}
    cpu = admin_client.post("/equipos", json={
        "type": "CPU", "brand": "Dell", "model": "OptiPlex 7090", "serial_number": "SN-CPU-1", **common,
    }).get_json()
    monitor = admin_client.post("/equipos", json={
        "type": "Monitor", "brand": "Dell", "model": "E2422H", "serial_number": "SN-MON-1", **common,
    }).get_json()
    resp = admin_client.post("/estaciones", json={
        "name": "Recepción urgencias", "cpu_id": cpu["id"], "monitor_id": monitor["id"],
        "accessories": ["Mouse", "Teclado"], **common,
    })
    assert resp.status_code == 201, resp.get_json()
    return {
        "responsable": responsable, "location": location,
        "cpu": cpu, "monitor": monitor, "station": resp.get_json(),
    }
