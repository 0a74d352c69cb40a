import logging
from typing import List, Optional, Sequence

from extraction.errors import ExtractionError
from extraction.task_extractor import DocumentResult, TaskExtractor
from integration.reminders_store import ReminderStore, get_reminder_store
from reminder_ai.files import normalize_path
from reminder_ai.models import Preferences, Task
from text_actions.quick_actions import truncate

logger = logging.getLogger(__name__)


class NoTasksExtracted(ExtractionError):
    def __init__(self, failures: List[dict]):
        self.failures = failures
        super().__init__("Could not extract any tasks from the document(s)")


def summarize_tasks(tasks: Sequence[Task]) -> str:
    """Short human-readable line(s) describing what was created."""
    if len(tasks) == 1:
        task = tasks[0]
        parts = [f'"{task.title}"']
        if task.due_date:
            parts.append(f"due {task.due_date}")
        if task.amount:
            parts.append(f"(${task.amount:.2f})")
        return " ".join(parts)

    lines = []
    for t in tasks:
        parts = [t.title]
        if t.amount:
            parts.append(f"${t.amount:.2f}")
        if t.due_date:
            parts.append(t.due_date)
        lines.append(" - ".join(parts))
    return truncate("\n".join(lines), 100)


class BackendAPI:
    """Central orchestration: extraction first, then the reminders store."""

    def __init__(
        self,
        extractor: Optional[TaskExtractor] = None,
        store: Optional[ReminderStore] = None,
        preferences: Optional[Preferences] = None,
    ):
        self.preferences = preferences or Preferences()
        self.extractor = extractor or TaskExtractor()
        self.store = store or get_reminder_store()

    async def _create(self, tasks: List[Task], list_name: Optional[str], create: bool) -> dict:
        list_name = list_name or self.preferences.reminder_list
        reminder_ids: List[str] = []
        if create:
            logger.info(f"Creating {len(tasks)} reminder(s) in '{list_name}'")
            reminder_ids = await self.store.sync(tasks, list_name)

        return {
            "tasks": [t.to_json() for t in tasks],
            "tasks_processed": len(tasks),
            "reminder_ids": reminder_ids,
            "list_name": list_name,
            "summary": summarize_tasks(tasks),
        }

    async def submit_text(
        self, text: str, list_name: Optional[str] = None, create: bool = True
    ) -> dict:
        """Accepts a natural-language reminder and creates the extracted tasks."""
        if not text or not text.strip():
            raise ValueError("Please provide text to create a reminder")

        tasks = await self.extractor.extract(text)
        return await self._create(tasks, list_name, create)

    async def submit_documents(
        self, paths: Sequence[str], list_name: Optional[str] = None, create: bool = True
    ) -> dict:
        """Extract from each document in turn; failed documents are reported, not fatal."""
        paths = [normalize_path(p) for p in paths if p and p.strip()]
        if not paths:
            raise ValueError("Please select at least one document")

        results: List[DocumentResult] = await self.extractor.extract_documents(paths)

        tasks = [t for r in results if r.ok for t in r.tasks]
        failures = [{"path": r.path, "error": r.error} for r in results if not r.ok]
        if not tasks:
            raise NoTasksExtracted(failures)

        out = await self._create(tasks, list_name, create)
        out["failures"] = failures
        return out
