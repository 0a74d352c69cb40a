import pytest

from integration.reminders_store import (
    AppleRemindersStore,
    InMemoryReminderStore,
    ReminderStoreError,
    applescript_date,
    build_create_script,
    escape_applescript,
    format_notes,
)
from reminder_ai.models import Task


class FakeRunner:
    """Stands in for osascript: answers per script keyword and records scripts."""

    def __init__(self, lists="To Do, Work", fail_on=None):
        self.lists = lists
        self.fail_on = fail_on
        self.scripts = []
        self._created = 0

    async def __call__(self, script: str) -> str:
        self.scripts.append(script)
        if "name of every list" in script:
            return self.lists
        if "make new reminder" in script:
            if self.fail_on and self.fail_on in script:
                raise ReminderStoreError("execution error: Can't get list (-1728)")
            self._created += 1
            return f"x-apple-reminder://{self._created}"
        return ""


def test_format_notes():
    t = Task(title="Rent", amount=-1250, notes="Payable - Landlord", is_bill=True, repeat_interval="monthly")
    assert format_notes(t) == "[BILL]\nAmount: $-1250.00\n\nPayable - Landlord\nRecurs: monthly"
    assert format_notes(Task(title="Plain")) == ""


def test_applescript_date():
    assert applescript_date("2026-01-09") == "January 9, 2026"
    assert applescript_date("2026-01-09", "14:30") == "January 9, 2026 2:30 PM"
    assert applescript_date("2026-12-31", "00:05") == "December 31, 2026 12:05 AM"
    assert applescript_date("2026-06-01", "12:00") == "June 1, 2026 12:00 PM"


def test_build_create_script_escapes_text():
    assert escape_applescript('Say "hi" \\o/') == 'Say \\"hi\\" \\\\o/'
    script = build_create_script(Task(title='Pay "ACME"', due_date="2026-01-09"), "Bills")
    assert 'name:"Pay \\"ACME\\""' in script
    assert 'due date:date "January 9, 2026"' in script
    assert 'tell list "Bills"' in script


async def test_sync_creates_in_order_and_reveals():
    runner = FakeRunner()
    store = AppleRemindersStore(runner=runner)
    ids = await store.sync([Task(title="A"), Task(title="B")], "To Do")

    assert ids == ["x-apple-reminder://1", "x-apple-reminder://2"]
    assert not any("make new list" in s for s in runner.scripts)
    assert "show list" in runner.scripts[-1]


async def test_missing_list_is_created():
    runner = FakeRunner(lists="Work")
    await AppleRemindersStore(runner=runner).sync([Task(title="A")], "Bills")
    assert any('make new list with properties {name:"Bills"}' in s for s in runner.scripts)


async def test_partial_failure_keeps_created_reminders():
    runner = FakeRunner(fail_on='name:"B"')
    store = AppleRemindersStore(runner=runner)

    with pytest.raises(ReminderStoreError) as exc:
        await store.sync([Task(title="A"), Task(title="B"), Task(title="C")], "To Do")

    assert exc.value.created_ids == ["x-apple-reminder://1"]
    assert 'Make sure the "To Do" list exists' in str(exc.value)
    assert not any('name:"C"' in s for s in runner.scripts)


async def test_in_memory_store():
    store = InMemoryReminderStore()
    ids = await store.sync([Task(title="A")], "To Do")
    assert store.lists["To Do"][ids[0]].title == "A"
