from datetime import datetime

import pytest
from PIL import Image

from disk.export import Exporter, dash_seq, default_export_name, iter_dash_spans, summary_markdown
from disk.formats import Formats
from disk.storage import parse_document
from models.catalogue import PATTERNS, Generation
from models.colour import Colour
from models.world import Point, Time_Layer

WHEN = datetime(2024, 3, 9, 14, 5)


@pytest.fixture
def doc(pair):
    editor, a, b = pair
    editor.set_name("Smith family")
    editor.update_member(a.id, role="Mother", emotion="😊", rotation=90, notes="calm")
    editor.add_connection(a.id, b.id)
    editor.set_notes("first session")
    editor.switch_layer(Time_Layer.future)
    editor.add_member("Kid", 4, at=Point(x=500, y=500))
    editor.switch_layer(Time_Layer.present)
    return editor.serialize()


def test_summary_lists_non_empty_layers(doc):
    text = summary_markdown(doc, when=WHEN)
    lines = text.splitlines()
    assert lines[0] == "# Smith family"
    assert lines[1] == "Date: 2024-03-09 14:05"
    assert "## PRESENT" in lines and "## FUTURE" in lines
    assert "## PAST" not in lines
    assert lines.index("## PRESENT") < lines.index("## FUTURE")


def test_summary_member_and_connection_details(doc):
    text = summary_markdown(doc, when=WHEN)
    assert "### Members (2)" in text
    assert "**Alice**" in text
    assert "- Role: Mother" in text
    assert f"- Generation: {Generation.parents.label}" in text
    assert "- Emotion: 😊 Joy" in text
    assert "- Heading: 90°" in text
    assert "- Notes: calm" in text
    assert "### Connections (1)" in text
    assert "- Alice -> Bob: Strong bond" in text
    assert "### Notes\n\nfirst session" in text


def test_summary_ends_with_patterns(doc):
    text = summary_markdown(doc, when=WHEN)
    tail = text[text.index("## Patterns to consider"):]
    for pattern in PATTERNS:
        assert f"### {pattern.name}" in tail


def test_png_renders_active_layer_at_world_size(doc, tmp_path):
    path = Exporter.output(doc, tmp_path / "out.png")
    member = doc.active().members[0]
    with Image.open(path) as img:
        assert img.size == (2000, 2000)
        pixel = img.getpixel((int(member.x) - 20, int(member.y) + 15))
    assert pixel[:3] == Colour.from_hex(member.color).rgba[:3]


def test_markdown_and_json_outputs(doc, tmp_path):
    md = Exporter.output(doc, tmp_path / "summary.MD")
    assert md.read_text(encoding="utf-8").startswith("# Smith family")

    js = Exporter.output(doc, tmp_path / "copy.json")
    assert parse_document(js.read_text(encoding="utf-8")).model_dump() == doc.model_dump()


def test_unsupported_suffix_is_rejected(doc, tmp_path):
    with pytest.raises(ValueError):
        Exporter.output(doc, tmp_path / "out.svg")


@pytest.mark.parametrize(
    "fmt, expected",
    [
        (Formats.png, "Smith-family-present.png"),
        (Formats.md, "summary-Smith-family.md"),
        (Formats.json, "Smith-family.json"),
    ],
)
def test_default_export_name(doc, fmt, expected):
    assert default_export_name(doc, fmt) == expected


def test_formats_lookup_and_filetypes(tmp_path):
    assert Formats.check(tmp_path / "a.PNG") is Formats.png
    assert Formats.check(tmp_path / "a.txt") is None
    assert Formats.filetypes(Formats.json) == [("Constellation document", "*.json")]


def test_dash_helpers():
    assert dash_seq(None) == []
    assert dash_seq([6]) == [6, 6]
    assert list(iter_dash_spans(10, None)) == [(0.0, 10, True)]
    spans = list(iter_dash_spans(20, [6, 4]))
    assert spans[0] == (0.0, 6.0, True)
    assert spans[-1][1] == pytest.approx(20)
