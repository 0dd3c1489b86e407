import json
import pytest
from engine.resources.database import Database


@pytest.fixture
def data_root(tmp_path):
    schemas = tmp_path / "schemas"
    schemas.mkdir()
    (tmp_path / "database" / "types").mkdir(parents=True)

    type_schema = {
        "type": "object",
        "required": ["id", "name"],
        "properties": {
            "id": {"type": "string"},
            "name": {"type": "string"},
            "effectiveness": {
                "type": "object",
                "additionalProperties": {"type": "number", "minimum": 0},
            },
        },
    }
    with open(schemas / "type.schema.json", "w") as f:
        json.dump(type_schema, f)

    return tmp_path


def write_types(root, filename, payload):
    with open(root / "database" / "types" / filename, "w") as f:
        json.dump(payload, f)


def test_load_list_and_single_object(data_root):
    write_types(data_root, "a.json", [{"id": "fire", "name": "Fire"}, {"id": "water", "name": "Water"}])
    write_types(data_root, "b.json", {"id": "air", "name": "Air"})

    db = Database(data_root)
    db.load_all()

    assert set(db.types) == {"fire", "water", "air"}
    assert db.get_type("air")["name"] == "Air"
    assert db.get_type("ice") is None


def test_invalid_record_skipped_but_rest_of_file_kept(data_root, caplog):
    write_types(data_root, "mixed.json", [
        {"id": "fire", "name": "Fire"},
        {"id": "broken"},
        {"id": "metal", "name": "Metal", "effectiveness": {"fire": -1}},
    ])

    db = Database(data_root)
    db.load_all()

    assert "fire" in db.types
    assert "broken" not in db.types
    assert "metal" not in db.types
    assert "Validation error" in caplog.text


def test_unparseable_file_does_not_stop_loading(data_root):
    (data_root / "database" / "types" / "bad.json").write_text("{not json")
    write_types(data_root, "good.json", [{"id": "dark", "name": "Dark"}])

    db = Database(data_root)
    db.load_all()

    assert list(db.types) == ["dark"]


def test_missing_schema_skips_category(data_root):
    write_types(data_root, "a.json", [{"id": "fire", "name": "Fire"}])
    (data_root / "schemas" / "type.schema.json").unlink()

    db = Database(data_root)
    db.load_all()

    assert db.types == {}


def test_missing_directories(tmp_path):
    db = Database(tmp_path / "nowhere")
    db.load_all()

    assert db.types == {}
