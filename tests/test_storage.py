import json

import pytest

from controllers.editor import Editor
from controllers.events import Pointer_Event
from controllers.interaction import Interaction_Controller
from disk.storage import IO, Parse_Error, dict_to_settings, document_to_dict, parse_document
from models.document import DEFAULT_NAME, SCHEMA_VERSION
from models.settings import SETTINGS_VERSION, Settings
from models.styling import Connection_Type
from models.world import Point, Time_Layer

LEGACY = {
    "name": "Old session",
    "members": [
        {"id": 1, "name": "Ana", "x": 100, "y": 120, "generation": 2, "color": "#3B82F6", "rotation": 90},
        {"id": 2, "name": "Ben", "x": 250, "y": 120, "generation": 3, "emotion": "😊"},
    ],
    "connections": [{"id": 1700000000000, "from": 1, "to": 2, "type": "conflict"}],
    "sessionNotes": "first meeting",
    "pan": {"x": 12, "y": -4},
    "zoom": 1.5,
}


def test_legacy_document_lifts_into_present():
    doc = parse_document(json.dumps(LEGACY))
    assert doc.name == "Old session"
    assert doc.active_layer is Time_Layer.present
    present = doc.layers.present
    assert [m.name for m in present.members] == ["Ana", "Ben"]
    assert present.connections[0].type is Connection_Type.conflict
    assert present.notes == "first meeting"
    assert doc.layers.past.is_empty() and doc.layers.future.is_empty()
    assert doc.pan == Point(x=12, y=-4)
    assert doc.zoom == 1.5


def test_legacy_notes_key_and_missing_fields():
    doc = parse_document({"members": [], "notes": "plain"})
    assert doc.name == DEFAULT_NAME
    assert doc.layers.present.notes == "plain"
    assert doc.zoom == 1.0
    assert doc.pan == Point()


def test_layered_document_with_camel_case_keys():
    raw = {
        "name": "Layered",
        "timeLayers": {
            "past": {"members": [{"id": 1, "name": "Gran"}], "connections": [], "notes": ""},
            "someday": {"members": [{"id": 9, "name": "Nobody"}]},
        },
        "currentLayer": "past",
    }
    doc = parse_document(raw)
    assert doc.active_layer is Time_Layer.past
    assert [m.name for m in doc.active().members] == ["Gran"]
    assert doc.layers.present.is_empty()


def test_unknown_active_layer_falls_back_to_present():
    doc = parse_document({"layers": {}, "activeLayer": "tomorrow"})
    assert doc.active_layer is Time_Layer.present


def test_zoom_out_of_range_is_clamped():
    assert parse_document({"layers": {}, "zoom": 9}).zoom == 2.5
    assert parse_document({"layers": {}, "zoom": 0.01}).zoom == 0.5
    assert parse_document({"layers": {}, "zoom": "big"}).zoom == 1.0


def test_non_finite_view_values_count_as_missing(make_dialogs):
    raw = (
        '{"layers":{"present":{"members":[{"id":1,"name":"A","x":100,"y":100}]}},'
        '"activeLayer":"present","zoom": NaN,"pan":{"x": NaN,"y": Infinity}}'
    )
    doc = parse_document(raw)
    assert doc.zoom == 1.0
    assert doc.pan == Point()

    editor = Editor(doc)
    Interaction_Controller(editor, make_dialogs()).on_press(Pointer_Event(x=100, y=100))
    assert editor.selected_id == 1


@pytest.mark.parametrize(
    "raw",
    [
        '{"members":[{"id":1,"name":"A","x":NaN}]}',
        '{"members":[{"id":1,"name":"A","rotation":Infinity}]}',
    ],
)
def test_non_finite_member_fields_are_rejected(raw):
    with pytest.raises(Parse_Error):
        parse_document(raw)


def test_positions_are_kept_as_stored():
    doc = parse_document({"members": [{"id": 1, "name": "Edge", "x": -5, "y": 3000}]})
    m = doc.layers.present.members[0]
    assert (m.x, m.y) == (-5, 3000)


@pytest.mark.parametrize(
    "raw",
    [
        "not json",
        "[1, 2]",
        b"\xff\xfe",
        {"members": [{"id": 1}]},
        {"members": [{"id": 1, "name": "Bad", "color": "nope"}]},
        {"layers": []},
        {"layers": {"present": {"connections": [{"id": 1, "from": 1}]}}},
    ],
)
def test_invalid_input_raises_parse_error(raw):
    with pytest.raises(Parse_Error):
        parse_document(raw)


def test_writes_only_the_current_schema():
    editor = Editor()
    a = editor.add_member("Ana")
    b = editor.add_member("Ben", at=Point(x=600, y=300))
    editor.add_connection(a.id, b.id)
    payload = document_to_dict(editor.serialize())

    assert set(payload) == {"name", "layers", "activeLayer", "pan", "zoom", "version", "appVersion"}
    assert payload["version"] == SCHEMA_VERSION
    assert payload["appVersion"] == "test"
    assert set(payload["layers"]) == {"past", "present", "future"}
    conn = payload["layers"]["present"]["connections"][0]
    assert conn["from"] == a.id and "from_" not in conn


def test_serialized_document_parses_back_identically():
    editor = Editor()
    editor.add_member("Ana")
    editor.switch_layer(Time_Layer.future)
    editor.add_member("Kid", 4)
    editor.set_notes("hopes")
    editor.adjust_zoom(0.3)

    doc = parse_document(editor.serialize_json())
    assert doc.model_dump() == editor.serialize().model_dump()


def test_io_document_round_trip(tmp_path):
    editor = Editor()
    editor.add_member("Ana")
    path = tmp_path / "family.json"
    IO.save_document(editor.serialize(), path)
    loaded = IO.load_document(path)
    assert [m.name for m in loaded.active().members] == ["Ana"]


def test_io_load_document_reports_bad_content(tmp_path):
    path = tmp_path / "broken.json"
    path.write_text("{", encoding="utf-8")
    with pytest.raises(Parse_Error):
        IO.load_document(path)


def test_settings_round_trip_and_defaults(tmp_path):
    path = tmp_path / "constellation.settings"
    assert IO.load_settings(path) == Settings()

    IO.save_settings(Settings(autosave_ms=900, theme="dark"), path)
    loaded = IO.load_settings(path)
    assert loaded.autosave_ms == 900
    assert loaded.theme == "dark"


def test_settings_without_version_are_migrated():
    s = dict_to_settings({"canvas_width": 1024})
    assert s.canvas_width == 1024
    assert s.version == SETTINGS_VERSION
