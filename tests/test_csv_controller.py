import logging

import openpyxl
import pytest

from controllers.csv_controller import CSVController
from services.csv_service import CSVServiceError

CITIES = '"cppsv"\nCity,Population\nLima,"9,750,000"\nQuito,2800000\n'


def test_load_text_registers_context():
    controller = CSVController()
    view = controller.load_text(CITIES, "ciudades")
    assert view.rows() == 3
    assert controller.get_contexts() == ["ciudades"]
    assert controller.get_view("ciudades") is view
    assert controller.last_warning is None
    assert view.get_field(1, "Population").text == "9,750,000"
    assert view.get_field(2, "Population").as_integer() == 2800000


def test_load_csv_from_file(tmp_path):
    path = tmp_path / "ciudades.csv"
    path.write_text(CITIES, encoding="utf-8")
    controller = CSVController()
    view = controller.load_csv(str(path))
    assert controller.get_view(CSVController.DEFAULT_CONTEXT) is view
    assert view.columns() == 2


def test_load_without_header_sets_warning(caplog):
    controller = CSVController()
    with caplog.at_level(logging.WARNING):
        view = controller.load_text("City,Population\nLima,1\n", "malo")
    assert view.rows() == 0
    assert controller.last_warning is not None
    assert "malo" in controller.get_contexts()
    # La siguiente carga válida limpia el aviso
    controller.load_text(CITIES, "bueno")
    assert controller.last_warning is None


def test_load_csv_missing_file_raises(tmp_path):
    controller = CSVController()
    with pytest.raises(CSVServiceError):
        controller.load_csv(str(tmp_path / "no_existe.csv"))
    assert controller.get_contexts() == []


def test_get_view_unknown_context():
    with pytest.raises(CSVServiceError):
        CSVController().get_view("nada")


def test_unload():
    controller = CSVController()
    controller.load_text(CITIES, "a")
    controller.unload("a")
    assert controller.get_contexts() == []
    with pytest.raises(CSVServiceError):
        controller.unload("a")


def test_export_report(tmp_path):
    controller = CSVController()
    controller.load_text(CITIES, "ciudades")
    controller.load_text('"cppsv"\nx,y\n1,2\n', "puntos")
    filename = tmp_path / "reporte.xlsx"
    controller.export_report(str(filename))

    wb = openpyxl.load_workbook(filename)
    assert wb.sheetnames == ["ciudades", "puntos"]
    ws = wb["ciudades"]
    assert [c.value for c in ws[1]] == ["City", "Population"]
    assert [c.value for c in ws[2]] == ["Lima", "9,750,000"]
    assert ws["A1"].font.bold
    assert wb["puntos"]["B2"].value == "2"


def test_export_report_selected_contexts(tmp_path):
    controller = CSVController()
    controller.load_text(CITIES, "ciudades")
    controller.load_text('"cppsv"\nx,y\n1,2\n', "puntos")
    filename = tmp_path / "solo_puntos.xlsx"
    controller.export_report(str(filename), ["puntos"])
    assert openpyxl.load_workbook(filename).sheetnames == ["puntos"]


def test_export_report_without_contexts(tmp_path):
    with pytest.raises(CSVServiceError):
        CSVController().export_report(str(tmp_path / "vacio.xlsx"))


def test_load_resource(tmp_path, monkeypatch):
    # CSV incluido como dato de un paquete
    package = tmp_path / "datos_csv"
    package.mkdir()
    (package / "__init__.py").write_text("")
    (package / "ciudades.csv").write_text(CITIES, encoding="utf-8")
    monkeypatch.syspath_prepend(str(tmp_path))

    controller = CSVController()
    view = controller.load_resource("datos_csv", "ciudades.csv", "ciudades")
    assert view.rows() == 3
    assert controller.get_view("ciudades").get_field(2, "City") == "Quito"


def test_export_report_long_keys_get_distinct_sheets(tmp_path):
    # Claves iguales en los primeros 31 caracteres no comparten hoja
    controller = CSVController()
    controller.load_text('"cppsv"\nx,y\n1,2\n', "a" * 31 + "1")
    controller.load_text('"cppsv"\nz\n9\n', "a" * 31 + "2")
    filename = tmp_path / "largos.xlsx"
    controller.export_report(str(filename))

    wb = openpyxl.load_workbook(filename)
    assert wb.sheetnames == ["a" * 31, "a" * 29 + "_2"]
    assert all(len(name) <= 31 for name in wb.sheetnames)
    first, second = (wb[name] for name in wb.sheetnames)
    assert [[c.value for c in row] for row in first.iter_rows()] == [["x", "y"], ["1", "2"]]
    assert [[c.value for c in row] for row in second.iter_rows()] == [["z"], ["9"]]


def test_export_report_replaces_forbidden_characters(tmp_path):
    controller = CSVController()
    controller.load_text(CITIES, "a/b")
    controller.load_text('"cppsv"\nx\n1\n', "c[1]:d")
    filename = tmp_path / "nombres.xlsx"
    controller.export_report(str(filename))
    assert openpyxl.load_workbook(filename).sheetnames == ["a_b", "c_1__d"]


def test_export_report_bad_target_raises_service_error(tmp_path):
    controller = CSVController()
    controller.load_text(CITIES, "ciudades")
    with pytest.raises(CSVServiceError):
        controller.export_report(str(tmp_path / "no_existe" / "reporte.xlsx"))
