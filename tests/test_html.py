from datetime import date

from inventario.institution import Institution
from inventario.items import Equipment, Responsible, Station
from inventario.resguardo_html import CHECK_GLYPH, accessory_checklist, asset_rows, render_resguardo_html

TODAY = date(2024, 1, 15)


def station(accessories=("Mouse", "Teclado"), monitor_serial="SN-MON"):
    return Station(
        id="10", display_id="EST001",
        cpu=Equipment(id="1", display_id="EQ001", type="CPU", brand="Dell", model="OptiPlex 7090",
                      serial_number="SN-CPU"),
        monitor=Equipment(id="2", display_id="EQ002", type="Monitor", brand="Dell", model="E2422H",
                          serial_number=monitor_serial),
        responsible=Responsible(full_name="Juan Pérez"),
        location="Torre Médica, Piso 2, Consultorio 5",
        service="Urgencias",
        accessories=list(accessories),
    )


def test_station_rows_share_columns_only_on_first_row():
    inst = Institution(address="Av. Siempre Viva 742")
    rows = asset_rows(station(), inst)
    assert len(rows) == 2
    assert all(len(r) == 10 for r in rows)
    assert rows[0][:4] == ["CPU: EQ001", "Dell", "OptiPlex 7090", "SN-CPU"]
    assert rows[0][4:] == ["Av. Siempre Viva 742", "Torre Médica, Piso 2, Consultorio 5",
                           "Torre Médica", "Piso 2", "Urgencias", "Consultorio 5"]
    assert rows[1][0] == "Monitor: EQ002"
    assert rows[1][4:] == [""] * 6


def test_missing_serial_shows_na():
    rows = asset_rows(station(monitor_serial=""))
    assert rows[1][3] == "N/A"


def test_equipment_single_row():
    printer = Equipment(id="3", type="Impresora", brand="HP", model="LaserJet", location="Torre A")
    rows = asset_rows(printer)
    assert len(rows) == 1
    assert rows[0][0] == "IMPRESORA"
    assert rows[0][3] == "N/A"
    assert rows[0][6:8] == ["Torre A", "N/A"]


def test_checklist_station_uses_accessories():
    html = render_resguardo_html(station(), "Asignación Inicial", today=TODAY)
    assert html.count(CHECK_GLYPH) == 2
    assert "Mouse" in html and "Teclado" in html


def test_checklist_laptop_uses_configured_items():
    laptop = Equipment(id="4", type="laptop", brand="Lenovo")
    assert accessory_checklist(laptop) == ["Laptop", "Cable de corriente", "Eliminador"]
    html = render_resguardo_html(laptop, "Creación Inicial", today=TODAY)
    assert html.count(CHECK_GLYPH) == 3
    inst = Institution(laptop_checklist=("Laptop", "Mochila"))
    assert render_resguardo_html(laptop, "Creación Inicial", inst, today=TODAY).count(CHECK_GLYPH) == 2


def test_checklist_empty_for_other_equipment():
    printer = Equipment(id="3", type="Impresora")
    html = render_resguardo_html(printer, "Cancelación", today=TODAY)
    assert html.count(CHECK_GLYPH) == 0


def test_document_header_title_and_signatures():
    inst = Institution(address="Calle 1", phone="(55) 1111 2222", city_line="Ixtapaluca, Edo de México",
                       delivering_signatory="Ing. Responsable TI")
    html = render_resguardo_html(station(), "Mantenimiento Preventivo", inst, today=TODAY)
    assert html.startswith("<!DOCTYPE html>")
    assert "<p>Calle 1</p>" in html
    assert "Tel: (55) 1111 2222" in html
    assert "HOJA DE RESGUARDO ESTACIÓN DE CÓMPUTO" in html
    assert "Ixtapaluca, Edo de México, a 15 de enero de 2024." in html
    assert "<title>Hoja de Resguardo - EST001 - Mantenimiento Preventivo</title>" in html
    assert "DETALLES DE MANTENIMIENTO PREVENTIVO" in html
    assert "ENTREGA" in html and "RECIBE" in html
    assert "Ing. Responsable TI" in html
    assert "Juan Pérez" in html


def test_equipment_title():
    laptop = Equipment(id="4", type="Laptop")
    html = render_resguardo_html(laptop, "Creación Inicial", today=TODAY)
    assert "HOJA DE RESGUARDO EQUIPO DE CÓMPUTO LAPTOP" in html


def test_values_are_escaped():
    eq = Equipment(id="9", type="Monitor", brand="<script>alert(1)</script>",
                   responsible=Responsible(full_name="O'Brien & Cía"))
    html = render_resguardo_html(eq, "Cancelación", today=TODAY)
    assert "<script>" not in html
    assert "&lt;script&gt;" in html
    assert "O&#39;Brien &amp; Cía" in html
