"""Shared fixtures: a fresh editor, recording dialog/scheduler fakes."""

import pytest

from controllers.editor import Editor
from controllers.interaction import Interaction_Controller
from models.version import reset_cache
from models.world import Member, Point


class Fake_Dialogs:
    """Records every request; `confirm` answers with `answer`."""

    def __init__(self, answer: bool = True):
        self.answer = answer
        self.calls: list[tuple] = []

    def confirm(self, message):
        self.calls.append(("confirm", message))
        return self.answer

    def error(self, message):
        self.calls.append(("error", message))

    def edit_member(self, member: Member):
        self.calls.append(("edit_member", member.id))

    def rotate_member(self, member: Member):
        self.calls.append(("rotate_member", member.id))

    def pick_colour(self, member: Member):
        self.calls.append(("pick_colour", member.id))

    def pick_emotion(self, member: Member):
        self.calls.append(("pick_emotion", member.id))

    def quick_add(self, at: Point):
        self.calls.append(("quick_add", at))

    def edit_connections(self, member: Member):
        self.calls.append(("edit_connections", member.id))

    def context_menu(self, member: Member, screen: Point):
        self.calls.append(("context_menu", member.id))

    def names(self) -> list[str]:
        return [c[0] for c in self.calls]


class Fake_Scheduler:
    """Stands in for Tk's after/after_cancel; run pending jobs with `run_all`."""

    def __init__(self):
        self.jobs: dict[int, tuple[int, object]] = {}
        self._next = 0

    def after(self, ms, func):
        self._next += 1
        self.jobs[self._next] = (ms, func)
        return self._next

    def after_cancel(self, id):
        self.jobs.pop(id, None)

    def run_all(self):
        jobs = list(self.jobs.values())
        self.jobs.clear()
        for _ms, func in jobs:
            func()


@pytest.fixture(autouse=True)
def fixed_version(monkeypatch):
    """Keep appVersion lookups off git."""
    monkeypatch.setenv("CONSTELLATION_VERSION", "test")
    reset_cache()
    yield
    reset_cache()


@pytest.fixture
def editor():
    return Editor()


@pytest.fixture
def pair(editor):
    """Editor holding A at (100, 100) and B at (300, 100), with an empty history."""
    a = editor.add_member("Alice", 2, at=Point(x=100, y=100))
    b = editor.add_member("Bob", 3, at=Point(x=300, y=100))
    editor.history.clear()
    return editor, a, b


@pytest.fixture
def dialogs():
    return Fake_Dialogs()


@pytest.fixture
def controller(pair, dialogs):
    editor, _a, _b = pair
    return Interaction_Controller(editor, dialogs)


@pytest.fixture
def scheduler():
    return Fake_Scheduler()


@pytest.fixture
def make_dialogs():
    return Fake_Dialogs
