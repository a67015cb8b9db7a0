import uuid

import pytest

from klub.scripts import create_table_qr


def test_save_qr_code_writes_png(tmp_path):
    path = create_table_qr.save_qr_code("klub://restaurant/R/table/1", "nested/table_1.png", output_dir=str(tmp_path))
    assert path == tmp_path / "table_1.png"
    assert path.read_bytes().startswith(b"\x89PNG")


def test_main_registers_and_saves(tmp_path, monkeypatch):
    restaurant_id = str(uuid.uuid4())
    calls = []

    def fake_create(base_url, rid, table_number, token):
        calls.append((base_url, rid, table_number, token))
        return {
            "id": str(uuid.uuid4()),
            "qr_url": f"http://localhost:3000/scan?restaurant={rid}&table={table_number}",
            "deep_link": f"klub://restaurant/{rid}/table/{table_number}",
        }

    monkeypatch.setattr(create_table_qr, "create_qr_code", fake_create)
    monkeypatch.chdir(tmp_path)

    create_table_qr.main(["--restaurant-id", restaurant_id, "--table", "3", "--token", "t", "--deep-link"])

    assert calls == [("http://localhost:8000", restaurant_id, 3, "t")]
    assert (tmp_path / "qr_codes" / "table_3_qr.png").exists()


@pytest.mark.parametrize(
    "argv",
    [
        ["--restaurant-id", "nope", "--table", "1", "--token", "t"],
        ["--restaurant-id", str(uuid.uuid4()), "--table", "0", "--token", "t"],
    ],
)
def test_main_rejects_bad_arguments(argv):
    with pytest.raises(SystemExit):
        create_table_qr.main(argv)
