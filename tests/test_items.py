import pytest

from inventario.items import (
    Equipment, Location, Station, STATION, EQUIPMENT,
    item_from_dict, item_kind, location_parts, parse_location,
)


@pytest.mark.parametrize("text,expected", [
    ("", ("N/A", "N/A", "N/A")),
    (None, ("N/A", "N/A", "N/A")),
    ("Torre A", ("Torre A", "N/A", "N/A")),
    ("Torre A, Piso 1", ("Torre A", "Piso 1", "N/A")),
    ("Torre A, Piso 2, Consultorio 5", ("Torre A", "Piso 2", "Consultorio 5")),
    ("Torre A, Piso 2, Consultorio 5, Cama 3", ("Torre A", "Piso 2", "Consultorio 5, Cama 3")),
    ("Torre A,, Piso 1 ,", ("Torre A", "N/A", "Piso 1")),
    ("Torre Médica, , Consultorio 5", ("Torre Médica", "N/A", "Consultorio 5")),
    (", Piso 3", ("N/A", "Piso 3", "N/A")),
    (" , , ", ("N/A", "N/A", "N/A")),
])
def test_parse_location(text, expected):
    parts = parse_location(text)
    assert (parts["building"], parts["floor"], parts["internal_location"]) == expected


def test_location_parts_uses_structured_fields_without_parsing():
    loc = Location(building="Torre, Norte", floor="PB", service_area="Rayos X", internal_location="")
    parts = location_parts(loc)
    assert parts == {"building": "Torre, Norte", "floor": "PB", "internal_location": "N/A"}


def test_location_str_matches_legacy_order():
    loc = Location(building="Torre A", floor="Piso 2", service_area="Urgencias", internal_location="Cubículo 4")
    assert str(loc) == "Torre A, Piso 2, Cubículo 4"
    assert parse_location(str(loc))["internal_location"] == "Cubículo 4"


def test_item_kind_structural_rule_for_dicts():
    assert item_kind({"cpu": {"marca": "Dell"}, "monitor": {"marca": "LG"}}) == STATION
    assert item_kind({"cpu": "EQ001", "monitor": "EQ002"}) == EQUIPMENT
    assert item_kind({"tipo": "Estación", "marca": "Dell"}) == EQUIPMENT
    assert item_kind({"kind": "station"}) == STATION
    assert item_kind({"kind": "equipment", "cpu": {}, "monitor": {}}) == EQUIPMENT


def test_item_kind_uses_explicit_discriminant():
    eq = Equipment(id="1", type="Estación")
    assert item_kind(eq) == EQUIPMENT
    st = Station(id="2", cpu=Equipment(id="3", type="CPU"), monitor=Equipment(id="4", type="monitor"))
    assert item_kind(st) == STATION


def test_station_requires_cpu_and_monitor():
    with pytest.raises(ValueError):
        Station(id="1", cpu=Equipment(id="a", type="Monitor"), monitor=Equipment(id="b", type="Monitor"))
    with pytest.raises(ValueError):
        Station(id="1", cpu=Equipment(id="a", type="CPU"), monitor=Equipment(id="b", type="Laptop"))


def test_item_from_dict_legacy_station():
    item = item_from_dict({
        "id": "EST001",
        "cpu": {"id": "EQ001", "marca": "Dell", "modelo": "OptiPlex 7090"},
        "monitor": {"id": "EQ002", "marca": "Dell", "modelo": "E2422H"},
        "responsable": "Juan Pérez",
        "ubicacion": "Torre Médica, Piso 2, Consultorio 5",
        "servicio": "Urgencias",
        "accesorios": ["Mouse", "", "Teclado"],
    })
    assert item.kind == STATION
    assert item.cpu.type == "CPU" and item.monitor.type == "Monitor"
    assert item.cpu.brand == "Dell"
    assert item.responsible.full_name == "Juan Pérez"
    assert item.accessories == ["Mouse", "Teclado"]
    assert item.service == "Urgencias"


def test_item_from_dict_backend_equipment():
    item = item_from_dict({
        "id": 7, "display_id": "EQ007", "equipment_type": {"name": "Impresora"},
        "brand": "HP", "model": "LaserJet", "serial_number": "XYZ",
        "current_status": {"name": "Activo"},
        "current_responsible": {"full_name": "Ana López"},
        "current_location": {"building": "Torre A", "floor": "PB", "service_area": "Archivo",
                             "internal_location": "Mostrador"},
        "printer_details": {"profile": "Red", "printer_type": "Láser"},
    })
    assert item.kind == EQUIPMENT
    assert item.id == "7" and item.display_id == "EQ007"
    assert item.is_printer
    assert item.printer_type == "Láser"
    assert item.location.service_area == "Archivo"


def test_item_from_dict_rejects_wrong_component_type():
    with pytest.raises(ValueError):
        item_from_dict({"cpu": {"tipo": "Laptop"}, "monitor": {}})


def test_item_from_dict_sparse_input():
    item = item_from_dict({"id": "X1"})
    assert item.kind == EQUIPMENT
    assert item.brand == "" and item.responsible is None and item.location is None


def test_location_str_keeps_blank_floor_in_place():
    loc = Location(building="Torre A", floor="", service_area="Urgencias", internal_location="Cubículo 4")
    assert str(loc) == "Torre A, , Cubículo 4"
    parts = parse_location(str(loc))
    assert (parts["floor"], parts["internal_location"]) == ("N/A", "Cubículo 4")
