"""
Reminders store integration.

Writes extracted tasks into the macOS Reminders app through AppleScript
(`osascript`). Batches are created one reminder at a time with no rollback:
if a reminder fails, the ones already created stay in place.
"""

import asyncio
import logging
import os
import uuid
from abc import ABC, abstractmethod
from typing import Awaitable, Callable, Dict, List, Optional, Sequence

from reminder_ai.models import Task

logger = logging.getLogger(__name__)

OSASCRIPT_TIMEOUT_S = float(os.getenv("OSASCRIPT_TIMEOUT_S", "30"))

MONTH_NAMES = [
    "January", "February", "March", "April", "May", "June",
    "July", "August", "September", "October", "November", "December",
]


class ReminderStoreError(RuntimeError):
    def __init__(self, message: str, created_ids: Optional[List[str]] = None):
        super().__init__(message)
        self.created_ids = created_ids or []


def escape_applescript(value: str) -> str:
    return value.replace("\\", "\\\\").replace('"', '\\"')


def format_notes(task: Task) -> str:
    """Notes shown on the reminder: amount line and invoice/bill tags on top."""
    notes = task.notes or ""
    if task.amount:
        amount_text = f"Amount: ${task.amount:.2f}"
        notes = f"{amount_text}\n\n{notes}" if notes else amount_text
    if task.is_invoice:
        notes = f"[INVOICE]\n{notes}" if notes else "[INVOICE]"
    if task.is_bill:
        notes = f"[BILL]\n{notes}" if notes else "[BILL]"
    if task.repeat_interval:
        recurs = f"Recurs: {task.repeat_interval}"
        notes = f"{notes}\n{recurs}" if notes else recurs
    return notes


def applescript_date(due_date: str, due_time: Optional[str] = None) -> str:
    """`2026-01-09` + `14:30` -> `January 9, 2026 2:30 PM`."""
    year, month, day = due_date.split("-")
    text = f"{MONTH_NAMES[int(month) - 1]} {int(day)}, {year}"
    if not due_time:
        return text

    hours, _, minutes = due_time.partition(":")
    hour = int(hours)
    period = "PM" if hour >= 12 else "AM"
    hour12 = 12 if hour == 0 else hour - 12 if hour > 12 else hour
    return f"{text} {hour12}:{(minutes or '0').zfill(2)} {period}"


def build_create_script(task: Task, list_name: str) -> str:
    properties = [f'name:"{escape_applescript(task.title)}"']

    notes = format_notes(task)
    if notes:
        properties.append(f'body:"{escape_applescript(notes)}"')

    if task.due_date:
        try:
            properties.append(f'due date:date "{applescript_date(task.due_date, task.due_time)}"')
        except (ValueError, IndexError):
            logger.warning(f"Could not format due date {task.due_date} {task.due_time}, skipping")

    props = ", ".join(properties)
    return f"""
    tell application "Reminders"
      tell list "{escape_applescript(list_name)}"
        set newReminder to make new reminder with properties {{{props}}}
        return id of newReminder
      end tell
    end tell
    """


class ReminderStore(ABC):
    @abstractmethod
    async def list_exists(self, name: str) -> bool:
        raise NotImplementedError

    @abstractmethod
    async def create_list(self, name: str) -> None:
        raise NotImplementedError

    @abstractmethod
    async def create_reminder(self, task: Task, list_name: str) -> str:
        raise NotImplementedError

    @abstractmethod
    async def reveal_list(self, reminder_ids: Sequence[str], list_name: str) -> None:
        raise NotImplementedError

    async def ensure_list(self, name: str) -> None:
        if not await self.list_exists(name):
            logger.info(f"Reminder list '{name}' missing, creating it")
            await self.create_list(name)

    async def sync(self, tasks: Sequence[Task], list_name: str) -> List[str]:
        """Create every task as a reminder in `list_name` and show the list."""
        await self.ensure_list(list_name)

        created: List[str] = []
        for task in tasks:
            try:
                created.append(await self.create_reminder(task, list_name))
            except ReminderStoreError as e:
                logger.error(f"Stopped after {len(created)}/{len(tasks)} reminders: {e}")
                raise ReminderStoreError(str(e), created_ids=created) from e

        await self.reveal_list(created, list_name)
        return created


Runner = Callable[[str], Awaitable[str]]


async def run_osascript(script: str, timeout_s: float = OSASCRIPT_TIMEOUT_S) -> str:
    proc = await asyncio.create_subprocess_exec(
        "osascript", "-e", script,
        stdout=asyncio.subprocess.PIPE,
        stderr=asyncio.subprocess.PIPE,
    )
    try:
        stdout, stderr = await asyncio.wait_for(proc.communicate(), timeout=timeout_s)
    except asyncio.TimeoutError:
        proc.kill()
        await proc.wait()
        raise ReminderStoreError(f"osascript timed out after {timeout_s:.0f}s")

    if proc.returncode != 0:
        raise ReminderStoreError(stderr.decode(errors="replace").strip() or "osascript failed")
    return stdout.decode(errors="replace").strip()


class AppleRemindersStore(ReminderStore):
    def __init__(self, runner: Optional[Runner] = None):
        self._run = runner or run_osascript

    async def list_exists(self, name: str) -> bool:
        script = """
    tell application "Reminders"
      return name of every list
    end tell
    """
        try:
            out = await self._run(script)
        except (ReminderStoreError, OSError) as e:
            logger.warning(f"Could not read reminder lists: {e}")
            return False
        return name in out.split(", ")

    async def create_list(self, name: str) -> None:
        script = f"""
    tell application "Reminders"
      make new list with properties {{name:"{escape_applescript(name)}"}}
    end tell
    """
        try:
            await self._run(script)
        except (ReminderStoreError, OSError) as e:
            raise ReminderStoreError(f"Failed to create reminder list: {e}") from e

    async def create_reminder(self, task: Task, list_name: str) -> str:
        try:
            return await self._run(build_create_script(task, list_name))
        except OSError as e:
            raise ReminderStoreError(f"AppleScript error: {e}") from e
        except ReminderStoreError as e:
            if "execution error" in str(e):
                raise ReminderStoreError(
                    f'Failed to create reminder. Make sure the "{list_name}" list exists in Apple Reminders.'
                ) from e
            raise ReminderStoreError(f"AppleScript error: {e}") from e

    async def reveal_list(self, reminder_ids: Sequence[str], list_name: str) -> None:
        if not reminder_ids:
            return
        script = f"""
    tell application "Reminders"
      activate
      show list "{escape_applescript(list_name)}"
    end tell
    """
        try:
            await self._run(script)
        except (ReminderStoreError, OSError) as e:
            # Showing the list is a convenience only.
            logger.error(f"Could not show reminders: {e}")


class InMemoryReminderStore(ReminderStore):
    """Keeps reminders in a dict; for development off macOS."""

    def __init__(self):
        self.lists: Dict[str, Dict[str, Task]] = {}

    async def list_exists(self, name: str) -> bool:
        return name in self.lists

    async def create_list(self, name: str) -> None:
        self.lists.setdefault(name, {})

    async def create_reminder(self, task: Task, list_name: str) -> str:
        if list_name not in self.lists:
            raise ReminderStoreError(f'List "{list_name}" does not exist')
        reminder_id = f"x-memory-reminder://{uuid.uuid4()}"
        self.lists[list_name][reminder_id] = task
        return reminder_id

    async def reveal_list(self, reminder_ids: Sequence[str], list_name: str) -> None:
        logger.info(f"{len(reminder_ids)} reminder(s) in '{list_name}'")


def get_reminder_store() -> ReminderStore:
    backend = os.getenv("REMINDER_STORE", "apple").strip().lower()
    if backend == "memory":
        return InMemoryReminderStore()
    return AppleRemindersStore()
