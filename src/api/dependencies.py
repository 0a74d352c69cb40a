from api.backend import BackendAPI
from api.metrics import LLM_FALLBACK_TOTAL
from extraction.document_text import DocumentTextExtractor
from extraction.task_extractor import TaskExtractor
from llm.llm_client import LLMClient
from reminder_ai.models import Preferences
from storage.preferences_store import PreferencesStore


def get_preferences() -> Preferences:
    # Re-read on every request so edits to the preferences file apply immediately.
    return PreferencesStore().load()


def get_llm_client() -> LLMClient:
    return LLMClient(preferences=get_preferences())


def get_text_extractor() -> DocumentTextExtractor:
    return DocumentTextExtractor()


def get_backend() -> BackendAPI:
    prefs = get_preferences()
    extractor = TaskExtractor(
        llm_client=LLMClient(preferences=prefs),
        on_fallback=lambda _path: LLM_FALLBACK_TOTAL.inc(),
    )
    return BackendAPI(extractor=extractor, preferences=prefs)
