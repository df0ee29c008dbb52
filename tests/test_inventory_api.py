def test_equipment_crud(admin_client, inventory):
    resp = admin_client.post("/equipos", json={"brand": "Dell"})
    assert resp.status_code == 400

    resp = admin_client.post("/equipos", json={
        "type": "impresora", "brand": "HP", "model": "LaserJet M404", "serial_number": "CNB1",
        "printer_profile": "Red", "printer_type": "Láser", "purchase_date": "2023-05-10",
    })
    assert resp.status_code == 201
    printer = resp.get_json()
    assert printer["display_id"] == "EQ003"
    assert printer["equipment_type"]["name"] == "Impresora"
    assert printer["current_status"]["name"] == "Disponible"
    assert printer["printer_details"]["printer_type"] == "Láser"
    assert printer["purchase_date"] == "2023-05-10"

    resp = admin_client.patch(f"/equipos/{printer['id']}", json={"responsible_id": inventory["responsable"]["id"]})
    assert resp.get_json()["current_responsible"]["full_name"] == "Juan Pérez"
    movs = admin_client.get("/movimientos", query_string={"q": "Cambio de Responsable"}).get_json()
    assert any(m["equipment_id"] == printer["id"] for m in movs)

    assert admin_client.patch(f"/equipos/{printer['id']}", json={"status": "Perdido"}).status_code == 400

    found = admin_client.get("/equipos", query_string={"q": "laserjet"}).get_json()
    assert [e["id"] for e in found] == [printer["id"]]
    cpus = admin_client.get("/equipos", query_string={"type": "CPU"}).get_json()
    assert [e["display_id"] for e in cpus] == ["EQ001"]
    assert cpus[0]["assigned_station"]["display_id"] == "EST001"

    assert admin_client.delete(f"/equipos/{printer['id']}").get_json() == {"ok": True}
    assert admin_client.get(f"/equipos/{printer['id']}").status_code == 404


def test_cannot_delete_equipment_in_station(admin_client, inventory):
    resp = admin_client.delete(f"/equipos/{inventory['cpu']['id']}")
    assert resp.status_code == 409


def test_non_admin_cannot_delete(user_client, inventory):
    assert user_client.delete(f"/equipos/{inventory['cpu']['id']}").status_code == 403
    assert user_client.delete(f"/estaciones/{inventory['station']['id']}").status_code == 403


def test_available_components(admin_client, inventory):
    assert admin_client.get("/equipos/disponibles?type=CPU").get_json() == []
    spare = admin_client.post("/equipos", json={"type": "CPU", "brand": "HP", "model": "ProDesk"}).get_json()
    ids = [e["id"] for e in admin_client.get("/equipos/disponibles?type=CPU").get_json()]
    assert ids == [spare["id"]]


def test_station_created_with_components_assigned(admin_client, inventory):
    st = inventory["station"]
    assert st["display_id"] == "EST001"
    assert st["kind"] == "station"
    assert st["accessories"] == ["Mouse", "Teclado"]
    cpu = admin_client.get(f"/equipos/{inventory['cpu']['id']}").get_json()
    assert cpu["current_status"]["name"] == "Asignado"


def test_station_validation(admin_client, inventory):
    common = {"name": "Otra", "responsible_id": inventory["responsable"]["id"],
              "location_id": inventory["location"]["id"]}
    # monitor en el lugar del CPU
    resp = admin_client.post("/estaciones", json={**common, "cpu_id": inventory["monitor"]["id"],
                                                  "monitor_id": inventory["monitor"]["id"]})
    assert resp.status_code == 400

    cpu2 = admin_client.post("/equipos", json={"type": "CPU", "brand": "HP"}).get_json()
    resp = admin_client.post("/estaciones", json={**common, "cpu_id": cpu2["id"],
                                                  "monitor_id": inventory["monitor"]["id"]})
    assert resp.status_code == 400
    assert "EST001" in resp.get_json()["error"]

    resp = admin_client.post("/estaciones", json={"cpu_id": cpu2["id"]})
    assert resp.status_code == 400


def test_station_edit_and_delete(admin_client, inventory):
    sid = inventory["station"]["id"]
    resp = admin_client.patch(f"/estaciones/{sid}", json={"accessories": "Mouse, Teclado, Bocinas"})
    assert resp.get_json()["accessories"] == ["Mouse", "Teclado", "Bocinas"]
    assert admin_client.get("/estaciones", query_string={"q": "recepción"}).status_code == 200

    assert admin_client.delete(f"/estaciones/{sid}").get_json() == {"ok": True}
    cpu = admin_client.get(f"/equipos/{inventory['cpu']['id']}").get_json()
    assert cpu["current_status"]["name"] == "Disponible"
    assert cpu["assigned_station"] is None
    # ahora sí se puede borrar el CPU
    assert admin_client.delete(f"/equipos/{inventory['cpu']['id']}").status_code == 200


def test_catalogs(admin_client):
    tipos = [t["name"] for t in admin_client.get("/catalogos/tipos").get_json()]
    assert {"CPU", "Monitor", "Laptop", "Impresora"} <= set(tipos)
    estados = [s["name"] for s in admin_client.get("/catalogos/estados").get_json()]
    assert "Disponible" in estados

    assert admin_client.post("/responsables", json={"phone": "1"}).status_code == 400
    assert admin_client.post("/ubicaciones", json={"building": "Torre A"}).status_code == 400

    resp = admin_client.post("/direcciones", json={"name": "Dirección Médica"})
    assert resp.status_code == 201
    assert resp.get_json()["status"] == "Activa"
    assert admin_client.post("/direcciones", json={"name": "X", "status": "Pausada"}).status_code == 400
    assert len(admin_client.get("/direcciones", query_string={"q": "médica"}).get_json()) == 1


def test_location_in_use_cannot_be_deleted(admin_client, inventory):
    assert admin_client.delete(f"/ubicaciones/{inventory['location']['id']}").status_code == 409
    assert admin_client.delete(f"/responsables/{inventory['responsable']['id']}").status_code == 409


def test_movements_and_stats(admin_client, inventory):
    movs = admin_client.get("/movimientos").get_json()
    assert movs
    assert movs[0]["username"] == "admin"
    alta = [m for m in movs if m["station_id"] == inventory["station"]["id"]][0]
    assert alta["affected"] == "EST001"

    resp = admin_client.get(f"/movimientos/{alta['id']}.txt")
    text = resp.data.decode("utf-8")
    assert text.startswith(f"Detalles del Movimiento ID: {alta['id']}")
    assert "Tipo de Movimiento: Alta" in text
    assert "Generado por el Sistema de Inventario de TI del Hospital." in text

    stats = admin_client.get("/inicio/stats").get_json()
    assert stats["total"] == 2
    assert stats["stations"] == 1
    assert {"type": "CPU", "count": 1} in stats["by_type"]


def test_exports(admin_client, inventory):
    resp = admin_client.get("/equipos/export.csv")
    assert resp.mimetype == "text/csv"
    assert "EQ001" in resp.data.decode("utf-8-sig")
    resp = admin_client.get("/equipos/export.xlsx")
    assert resp.data[:2] == b"PK"
    resp = admin_client.get("/equipos/export.pdf")
    assert resp.data.startswith(b"%PDF")


def test_station_component_type_is_locked(admin_client, inventory):
    cpu_id = inventory["cpu"]["id"]
    resp = admin_client.put(f"/equipos/{cpu_id}", json={"type": "Laptop"})
    assert resp.status_code == 409
    assert admin_client.get(f"/equipos/{cpu_id}").get_json()["equipment_type"]["name"] == "CPU"
    # mismo tipo u otros campos siguen permitidos
    resp = admin_client.put(f"/equipos/{cpu_id}", json={"type": "cpu", "notes": "Revisado"})
    assert resp.status_code == 200
    sid = inventory["station"]["id"]
    assert admin_client.get(f"/resguardos/station/{sid}/document").status_code == 200


def test_free_equipment_can_change_type(admin_client):
    eq = admin_client.post("/equipos", json={"type": "CPU", "brand": "HP"}).get_json()
    resp = admin_client.put(f"/equipos/{eq['id']}", json={"type": "Laptop"})
    assert resp.status_code == 200
    assert resp.get_json()["equipment_type"]["name"] == "Laptop"


def test_swapping_station_components_updates_statuses(admin_client, inventory):
    sid = inventory["station"]["id"]
    old_cpu = inventory["cpu"]["id"]
    new_cpu = admin_client.post("/equipos", json={"type": "CPU", "brand": "HP", "model": "ProDesk"}).get_json()
    resp = admin_client.patch(f"/estaciones/{sid}", json={"cpu_id": new_cpu["id"]})
    assert resp.status_code == 200
    assert resp.get_json()["cpu"]["id"] == new_cpu["id"]

    assert admin_client.get(f"/equipos/{old_cpu}").get_json()["current_status"]["name"] == "Disponible"
    assert admin_client.get(f"/equipos/{new_cpu['id']}").get_json()["current_status"]["name"] == "Asignado"
    ids = [e["id"] for e in admin_client.get("/equipos/disponibles?type=CPU").get_json()]
    assert ids == [old_cpu]

    # reasignar el mismo monitor no lo libera
    resp = admin_client.patch(f"/estaciones/{sid}", json={"monitor_id": inventory["monitor"]["id"]})
    assert resp.status_code == 200
    mon = admin_client.get(f"/equipos/{inventory['monitor']['id']}").get_json()
    assert mon["current_status"]["name"] == "Asignado"


def test_non_numeric_ids_are_rejected(admin_client, inventory):
    common = {"name": "Otra", "responsible_id": inventory["responsable"]["id"],
              "location_id": inventory["location"]["id"]}
    resp = admin_client.post("/estaciones", json={**common, "cpu_id": "abc", "monitor_id": "x"})
    assert resp.status_code == 400
    assert "error" in resp.get_json()
    resp = admin_client.patch(f"/estaciones/{inventory['station']['id']}", json={"responsible_id": "nadie"})
    assert resp.status_code == 400
