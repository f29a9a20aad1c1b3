"""
test_batch.py
Tests the directory inventory in cutpath/utils/batch.py and the script that wraps it.
"""
import csv
import importlib.util
import math
import os

import pytest

from cutpath.utils.batch import ENTITY_TYPES, FIELDNAMES, inventory_directory

SCRIPT = os.path.join(os.path.dirname(os.path.dirname(__file__)), "scripts", "inventory_dxf_entities.py")


@pytest.fixture
def dxf_dir(make_dxf, tmp_path):
    make_dxf(lambda msp: msp.add_circle((0, 0), radius=1), name="b_ring.dxf")
    make_dxf(lambda msp: (msp.add_line((0, 0), (3, 4)), msp.add_text("NOTE")), name="a_line.DXF")
    (tmp_path / "broken.dxf").write_text("nonsense\n")
    (tmp_path / "readme.txt").write_text("ignored\n")
    return tmp_path


def read_csv(path):
    with open(path, newline="", encoding="utf-8") as f:
        return list(csv.DictReader(f))


def test_inventory_rows_and_csv(dxf_dir, tmp_path):
    output = tmp_path / "inventory.csv"
    rows = inventory_directory(str(dxf_dir), str(output))

    assert [row["filename"] for row in rows] == ["a_line.DXF", "b_ring.dxf", "broken.dxf"]
    line, ring, broken = rows
    assert line["total_length"] == pytest.approx(5.0)
    assert (line["LINE"], line["OTHER"], line["skipped"]) == (1, 1, 1)
    assert ring["total_length"] == pytest.approx(2 * math.pi, abs=1e-6)
    assert ring["pierce_count"] == 1
    assert broken["success"] is False
    assert all(broken[etype] == 0 for etype in ENTITY_TYPES)

    written = read_csv(output)
    assert list(written[0].keys()) == FIELDNAMES
    assert [row["success"] for row in written] == ["True", "True", "False"]


def test_inventory_of_empty_directory(tmp_path):
    source = tmp_path / "empty"
    source.mkdir()
    output = tmp_path / "out.csv"
    assert inventory_directory(str(source), str(output)) == []
    assert read_csv(output) == []


def load_script():
    spec = importlib.util.spec_from_file_location("inventory_dxf_entities", SCRIPT)
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


def test_script_main(dxf_dir, tmp_path, capsys):
    script = load_script()
    output = tmp_path / "script.csv"
    assert script.main([str(dxf_dir), str(output)]) == 0
    assert output.exists()
    assert "Inventory complete" in capsys.readouterr().out


def test_script_missing_directory(tmp_path, capsys):
    script = load_script()
    assert script.main([str(tmp_path / "nowhere")]) == 1
    assert "not found" in capsys.readouterr().out


def test_script_reads_settings_from_environment(make_dxf, tmp_path, monkeypatch):
    make_dxf(lambda msp: msp.add_lwpolyline([(0, 0, 1.0), (2, 0, 0.0)], format="xyb"), name="arc.dxf")
    output = tmp_path / "aware.csv"
    monkeypatch.setenv("CUTPATH_BULGE_AWARE_LENGTH", "1")
    assert load_script().main([str(tmp_path), str(output)]) == 0
    (row,) = read_csv(output)
    assert float(row["total_length"]) == pytest.approx(math.pi, abs=1e-5)
