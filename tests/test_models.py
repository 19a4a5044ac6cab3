import pytest
from pydantic import ValidationError

from canvas.scene import Scene, heading, initials
from models.catalogue import EMOTIONS, Generation, emotion_for, generation_colour
from models.colour import Colour, normalise_hex
from models.document import Document, Snapshot
from models.styling import Connection_Type, style_for
from models.world import Connection, Layer_Data, Member, Point


def test_member_colour_defaults_to_generation():
    m = Member(id=1, name="Ana", generation=1)
    assert m.color == Generation.grandparents.col.hex


def test_member_rejects_blank_name_and_bad_colour():
    with pytest.raises(ValidationError):
        Member(id=1, name="   ")
    with pytest.raises(ValidationError):
        Member(id=1, name="Ana", color="blue-ish")


def test_member_tolerates_null_text_fields():
    m = Member.model_validate({"id": 3, "name": "Ana", "role": None, "notes": None, "emotion": ""})
    assert (m.role, m.notes, m.emotion) == ("", "", None)


def test_member_rotation_is_normalised():
    assert Member(id=1, name="Ana", rotation=-90).rotation == 270


def test_connection_uses_from_alias_both_ways():
    conn = Connection.model_validate({"id": 5, "from": 1, "to": 2, "type": "weak"})
    assert conn.from_ == 1
    assert conn.type is Connection_Type.weak
    assert conn.model_dump(by_alias=True)["from"] == 1


def test_unknown_generation_colour_falls_back():
    assert generation_colour(99) == Generation.parents.col.hex


def test_style_for_unknown_kind_draws_strong():
    assert style_for("mystery") == style_for(Connection_Type.strong)


def test_emotion_lookup():
    assert emotion_for(EMOTIONS[0].glyph) is EMOTIONS[0]
    assert emotion_for(None) is None
    assert emotion_for("?") is None


def test_colour_hex_forms():
    assert Colour.from_hex("#abc").hex == "#AABBCC"
    assert normalise_hex("10b981") == "#10B981"
    with pytest.raises(ValueError):
        Colour.from_hex("#12345")


def test_snapshot_is_frozen_and_independent():
    doc = Document()
    doc.layers.present.members.append(Member(id=1, name="Ana"))
    snap = Snapshot.capture(doc)
    doc.layers.present.members[0].name = "Changed"
    assert snap.layers.present.members[0].name == "Ana"
    with pytest.raises(ValidationError):
        snap.name = "nope"
    restored = snap.restore()
    assert type(restored) is Document
    assert restored.layers.present.members[0].name == "Ana"


def test_layer_data_is_empty():
    assert Layer_Data().is_empty()
    assert not Layer_Data(notes="x").is_empty()


# ---- scene helpers ----
def _scene(members, connections, **kw):
    return Scene(
        members=tuple(members),
        connections=tuple(connections),
        selected_id=kw.get("selected_id"),
        connecting_from=kw.get("connecting_from"),
        pan=kw.get("pan", Point()),
        zoom=kw.get("zoom", 1.0),
        pointer=kw.get("pointer"),
    )


def test_scene_skips_dangling_connections():
    a = Member(id=1, name="A")
    b = Member(id=2, name="B")
    ok = Connection(id=10, from_=1, to=2)
    dangling = Connection(id=11, from_=1, to=99)
    scene = _scene([a, b], [ok, dangling])
    assert [c.id for c, _, _ in scene.drawable_connections()] == [10]
    assert scene.endpoints(dangling) is None


def test_rubber_band_runs_from_origin_to_pointer_in_screen_space():
    a = Member(id=1, name="A", x=100, y=50)
    scene = _scene([a], [], connecting_from=1, pointer=Point(x=7, y=8), pan=Point(x=10, y=0), zoom=2.0)
    start, end = scene.rubber_band()
    assert (start.x, start.y) == (210.0, 100.0)
    assert (end.x, end.y) == (7, 8)
    assert _scene([a], []).rubber_band() is None


def test_heading_and_initials():
    m = Member(id=1, name="mary ann lee", x=100, y=100, rotation=90)
    tip = heading(m)
    assert tip.x == pytest.approx(100)
    assert tip.y == pytest.approx(140)
    assert initials(m) == "MA"
