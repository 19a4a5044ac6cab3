"""Debounced draft writes and draft restore."""

import pytest

from controllers.autosave import DRAFT_KEY, Autosaver
from disk.drafts import File_Draft_Store, Memory_Draft_Store


class Broken_Store(Memory_Draft_Store):
    def set(self, key, raw):
        raise OSError("quota exceeded")


@pytest.fixture
def store():
    return Memory_Draft_Store()


def make(scheduler, store, editor, **kw):
    return Autosaver(scheduler, store, editor.serialize_json, delay_ms=250, **kw)


def test_burst_of_changes_writes_once(scheduler, store, editor):
    saver = make(scheduler, store, editor)
    writes = []
    store.set = lambda key, raw: writes.append((key, raw))
    for _ in range(5):
        saver.on_change(True)
    assert len(scheduler.jobs) == 1
    assert saver.pending
    scheduler.run_all()
    assert len(writes) == 1
    assert writes[0][0] == DRAFT_KEY
    assert not saver.pending


def test_view_only_changes_do_not_schedule(scheduler, store, editor):
    saver = make(scheduler, store, editor)
    saver.on_change(False)
    assert scheduler.jobs == {}


def test_disabled_autosave_never_schedules(scheduler, store, editor):
    saver = make(scheduler, store, editor, enabled=False)
    saver.on_change(True)
    assert scheduler.jobs == {}


def test_write_failure_is_reported_not_raised(scheduler, editor):
    saver = make(scheduler, Broken_Store(), editor)
    assert saver.flush() is False
    assert saver.available is False


def test_close_cancels_pending_write(scheduler, store, editor):
    saver = make(scheduler, store, editor)
    saver.on_change(True)
    saver.close()
    assert scheduler.jobs == {}
    assert store.get(DRAFT_KEY) is None


def test_restore_round_trips_the_editor(scheduler, store, editor):
    editor.add_member("Ana")
    saver = make(scheduler, store, editor)
    saver.on_change(True)
    scheduler.run_all()
    doc = saver.restore()
    assert [m.name for m in doc.active().members] == ["Ana"]


def test_restore_ignores_missing_and_corrupt_drafts(scheduler, store, editor):
    saver = make(scheduler, store, editor)
    assert saver.restore() is None
    store.set(DRAFT_KEY, "{not json")
    assert saver.restore() is None


def test_discard_removes_draft(scheduler, store, editor):
    saver = make(scheduler, store, editor)
    saver.flush()
    saver.discard()
    assert store.get(DRAFT_KEY) is None


# ---- stores ----
def test_file_store_round_trip(tmp_path):
    fs = File_Draft_Store(tmp_path / "drafts")
    assert fs.get("constellationDraft") is None
    fs.set("constellationDraft", '{"a": 1}')
    fs.set("constellationDraft", '{"a": 2}')
    assert fs.get("constellationDraft") == '{"a": 2}'
    assert [p.name for p in (tmp_path / "drafts").iterdir()] == ["constellationDraft.json"]
    fs.remove("constellationDraft")
    fs.remove("constellationDraft")
    assert fs.get("constellationDraft") is None


@pytest.mark.parametrize("key", ["", "../escape", "a/b", "with space"])
def test_file_store_rejects_bad_keys(tmp_path, key):
    with pytest.raises(ValueError):
        File_Draft_Store(tmp_path).get(key)


def test_file_store_failure_keeps_autosave_alive(tmp_path, scheduler, editor):
    blocker = tmp_path / "drafts"
    blocker.write_text("a file, not a directory", encoding="utf-8")
    saver = make(scheduler, File_Draft_Store(blocker), editor)
    assert saver.flush() is False
    assert saver.restore() is None
