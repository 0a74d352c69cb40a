from prometheus_client import Counter, Histogram, REGISTRY


# we check if they are already registered to avoid errors during hot reloads or test runs
def get_or_create_metric(name, documentation, metric_type, **kwargs):
    try:
        return metric_type(name, documentation, **kwargs)
    except ValueError:
        # Counters register under their base name, without the _total suffix
        base = name[: -len("_total")] if name.endswith("_total") else name
        return REGISTRY._names_to_collectors.get(name) or REGISTRY._names_to_collectors[base]


REQUESTS_TOTAL = get_or_create_metric(
    "reminder_requests_total",
    "Total requests",
    Counter,
    labelnames=["endpoint", "status"],
)

REQUEST_LATENCY_SECONDS = get_or_create_metric(
    "reminder_request_latency_seconds",
    "Request latency",
    Histogram,
    labelnames=["endpoint"],
)

TASKS_EXTRACTED_TOTAL = get_or_create_metric(
    "reminder_tasks_extracted_total", "Total tasks extracted from text and documents", Counter
)

REMINDERS_CREATED_TOTAL = get_or_create_metric(
    "reminder_reminders_created_total", "Total reminders created in the reminders store", Counter
)

LLM_FALLBACK_TOTAL = get_or_create_metric(
    "reminder_llm_fallback_total",
    "Documents re-sent as extracted text after the model rejected document input",
    Counter,
)
