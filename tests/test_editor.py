"""Editor entry points: history, layers, template and document replacement."""

import pytest

from controllers.editor import Editor
from controllers.gestures import Connecting, Idle
from controllers.layers import Layer_Manager
from disk.storage import Parse_Error
from models.catalogue import FAMILY_TEMPLATE
from models.document import DEFAULT_NAME
from models.styling import Connection_Type
from models.world import Layer_Data, Member, Point, Time_Layer


def dump(editor: Editor) -> dict:
    return editor.document().model_dump()


def test_successful_mutation_pushes_one_entry(editor):
    editor.add_member("Ana")
    assert len(editor.history) == 1
    assert editor.add_member("  ") is None
    assert len(editor.history) == 1


def test_add_member_spawns_at_viewport_centre(editor):
    editor.view.set_pan(100, 50)
    m = editor.add_member("Ana")
    assert (m.x, m.y) == (300, 250)


def test_undo_redo_are_inverse(pair):
    editor, a, b = pair
    before = dump(editor)
    editor.add_connection(a.id, b.id, Connection_Type.weak)
    after = dump(editor)

    assert editor.undo() is True
    assert dump(editor) == before
    assert editor.redo() is True
    assert dump(editor) == after
    assert editor.redo() is False


def test_new_mutation_drops_redo(pair):
    editor, a, _b = pair
    editor.update_member(a.id, role="Mother")
    editor.undo()
    assert editor.history.can_redo
    editor.update_member(a.id, notes="x")
    assert not editor.history.can_redo


def test_undo_with_empty_history_is_noop(editor):
    assert editor.undo() is False


def test_update_connection_type_unchanged_is_not_recorded(pair):
    editor, a, b = pair
    conn = editor.add_connection(a.id, b.id)
    depth = len(editor.history)
    assert editor.update_connection_type(conn.id, "strong") is None
    assert len(editor.history) == depth
    assert editor.update_connection_type(conn.id, "conflict").type is Connection_Type.conflict
    assert len(editor.history) == depth + 1


def test_delete_member_clears_selection_and_connect_gesture(pair):
    editor, a, b = pair
    editor.add_connection(a.id, b.id)
    editor.select(a.id)
    editor.set_gesture(Connecting(a.id))
    assert editor.delete_member(a.id) is True
    assert editor.selected is None
    assert editor.gesture == Idle()
    assert editor.world.connections == []


def test_rotate_without_record_skips_history(pair):
    editor, a, _b = pair
    editor.rotate_member(a.id, 45, record=False)
    assert editor.world.member(a.id).rotation == 45
    assert len(editor.history) == 0
    editor.rotate_member(a.id, 90)
    assert len(editor.history) == 1


def test_layers_are_isolated(editor):
    editor.add_member("Present person")
    editor.switch_layer(Time_Layer.past)
    assert editor.world.members == []
    editor.add_member("Past person")
    editor.set_notes("long ago")
    editor.switch_layer("present")

    assert [m.name for m in editor.world.members] == ["Present person"]
    doc = editor.document()
    assert [m.name for m in doc.layers.past.members] == ["Past person"]
    assert doc.layers.past.notes == "long ago"
    assert doc.layers.future.is_empty()


def test_switch_layer_clears_selection(pair):
    editor, a, _b = pair
    editor.select(a.id)
    editor.switch_layer(Time_Layer.future)
    assert editor.selected_id is None


def test_undo_across_layer_switch_restores_whole_document(editor):
    editor.add_member("Ana")
    editor.switch_layer(Time_Layer.past)
    editor.add_member("Ben")
    editor.undo()
    assert editor.active_layer is Time_Layer.past
    assert editor.world.members == []
    assert [m.name for m in editor.document().layers.present.members] == ["Ana"]


def test_layer_manager_switch_returns_copy():
    mgr = Layer_Manager()
    live = Layer_Data(members=[Member(id=1, name="Ana")])
    got = mgr.switch(Time_Layer.future, live)
    assert got.is_empty()
    live.members[0].name = "Mutated"
    assert mgr.layers.present.members[0].name == "Ana"


def test_apply_template_replaces_live_layer(pair):
    editor, _a, _b = pair
    editor.view.set_zoom(2)
    editor.apply_template()
    w, h = editor.viewport
    first = FAMILY_TEMPLATE[0]
    m = editor.world.member(first.id)
    assert [m.name for m in editor.world.members] == [t.name for t in FAMILY_TEMPLATE]
    assert (m.x, m.y) == (w / 2 + first.dx, h / 2 + first.dy)
    assert len(editor.world.connections) == 4
    assert editor.view.zoom == 1.0
    assert len(editor.history) == 1


def test_clear_empties_layer_and_is_undoable(pair):
    editor, _a, _b = pair
    editor.set_notes("n")
    editor.clear()
    assert editor.world.members == [] and editor.world.notes == ""
    editor.undo()
    assert len(editor.world.members) == 2


def test_set_name_falls_back_to_default(editor):
    editor.set_name("  ")
    assert editor.name == DEFAULT_NAME
    editor.set_name(" Smith family ")
    assert editor.name == "Smith family"


def test_deserialize_is_atomic_on_parse_error(pair):
    editor, a, _b = pair
    editor.update_member(a.id, role="Mother")
    before = dump(editor)
    with pytest.raises(Parse_Error):
        editor.deserialize('{"members": [{"id": 1}]}')
    assert dump(editor) == before
    assert len(editor.history) == 1


def test_load_clears_history_and_selection(pair):
    editor, a, _b = pair
    editor.update_member(a.id, role="Mother")
    editor.select(a.id)
    editor.deserialize({"name": "Other", "members": [{"id": 9, "name": "Zed"}]})
    assert editor.name == "Other"
    assert not editor.history.can_undo
    assert editor.selected_id is None
    assert [m.id for m in editor.world.members] == [9]


def test_listeners_get_dirty_flag(editor):
    seen = []
    unsubscribe = editor.subscribe(seen.append)
    m = editor.add_member("Ana")
    editor.select(m.id)
    unsubscribe()
    editor.add_member("Ben")
    assert seen == [True, False]


def test_scene_reflects_state(pair):
    editor, a, _b = pair
    editor.select(a.id)
    editor.pointer = Point(x=1, y=2)
    scene = editor.scene()
    assert scene.selected_id == a.id
    assert len(scene.members) == 2
    assert scene.connecting_from is None
