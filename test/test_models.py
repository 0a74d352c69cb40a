from reminder_ai.models import Message, Preferences, Task


def test_task_accepts_model_field_names():
    t = Task.model_validate(
        {"title": "Pay rent", "dueDate": "2026-02-01", "dueTime": "09:00", "amount": "$1,250.50"}
    )
    assert t.title == "Pay rent"
    assert t.due_date == "2026-02-01"
    assert t.due_time == "09:00"
    assert t.amount == 1250.5


def test_bad_due_date_is_cleared_not_fatal():
    assert Task.model_validate({"title": "X", "dueDate": "tomorrow"}).due_date is None
    assert Task.model_validate({"title": "X", "dueDate": "1999-01-01"}).due_date is None
    assert Task.model_validate({"title": "X", "dueDate": "2101-01-01"}).due_date is None
    assert Task.model_validate({"title": "X", "dueDate": "2019-12-31"}).due_date is None
    assert Task.model_validate({"title": "X", "dueDate": "2020-01-01"}).due_date == "2020-01-01"
    assert Task.model_validate({"title": "X", "dueDate": "2100-12-31"}).due_date == "2100-12-31"


def test_negative_amount_and_unknown_interval():
    t = Task.model_validate({"title": "Bill", "amount": -15187.59, "repeatInterval": "Fortnightly"})
    assert t.amount == -15187.59
    assert t.repeat_interval is None
    assert Task.model_validate({"title": "Gym", "repeatInterval": "Weekly"}).repeat_interval == "weekly"


def test_to_json_uses_aliases_and_skips_empty_fields():
    t = Task(title="Call dentist", due_date="2026-01-02", notes="")
    assert t.to_json() == {"title": "Call dentist", "dueDate": "2026-01-02"}


def test_message_helpers():
    assert Message.system("s").model_dump() == {"role": "system", "content": "s"}
    assert Message.user("u").role == "user"


def test_preferences_defaults_and_blank_values():
    p = Preferences(api_url="  ", reminder_list="", temperature="abc", max_tokens="")
    assert p.api_url == "http://localhost:1337/v1/chat/completions"
    assert p.reminder_list == "To Do"
    assert p.temperature == 0.7
    assert p.max_tokens == 2000
    assert p.models_url == "http://localhost:1337/v1/models"


def test_title_kept_as_returned():
    assert Task.model_validate({"title": " Call mom "}).title == " Call mom "


def test_flags_parsed_or_cleared():
    t = Task.model_validate({"title": "X", "isInvoice": "TRUE", "isBill": "n/a"})
    assert t.is_invoice is True
    assert t.is_bill is None


def test_preferences_out_of_range_values_default_per_field():
    p = Preferences(api_url="http://gpu-box:1337/v1/chat/completions", temperature="1.5", max_tokens="0")
    assert p.api_url == "http://gpu-box:1337/v1/chat/completions"
    assert p.temperature == 0.7
    assert p.max_tokens == 2000
