import pytest

from extraction.errors import NoValidTasksError, ResponseParseError
from extraction.response_parser import (
    extract_json_candidate,
    find_json_object,
    parse_task_response,
)

ARRAY = '[{"title":"Pay invoice","dueDate":"2026-01-09","amount":-120.5}]'


def test_fenced_and_bare_responses_parse_the_same():
    fenced = parse_task_response("Here you go:\n```json\n" + ARRAY + "\n```\nDone.")
    bare = parse_task_response(ARRAY)
    assert fenced == bare
    assert fenced[0].amount == -120.5


def test_array_inside_prose():
    tasks = parse_task_response("Sure! " + ARRAY + " Let me know if you need more [help].")
    assert [t.title for t in tasks] == ["Pay invoice"]


def test_single_object_is_wrapped():
    assert extract_json_candidate('Result: {"title":"A {b}"} end') == '[{"title":"A {b}"}]'
    assert parse_task_response('{"title":"A"}') == parse_task_response('[{"title":"A"}]')


def test_find_json_object_ignores_braces_in_strings():
    assert find_json_object('x {"a":"}"} y') == '{"a":"}"}'
    assert find_json_object("no json") is None


def test_unparseable_response():
    with pytest.raises(ResponseParseError):
        parse_task_response("I could not find any tasks.")


def test_invalid_date_cleared_and_untitled_dropped():
    tasks = parse_task_response(
        '[{"title":"Keep","dueDate":"01/09/2026"},{"title":"  "},{"notes":"no title"},"junk"]'
    )
    assert len(tasks) == 1
    assert tasks[0].title == "Keep"
    assert tasks[0].due_date is None


def test_no_valid_tasks():
    with pytest.raises(NoValidTasksError):
        parse_task_response('[{"notes":"missing title"}]')


def test_unusable_flags_do_not_drop_titled_task():
    tasks = parse_task_response(
        '[{"title":"Pay ACME","dueDate":"2026-02-01","isInvoice":"n/a","isBill":"yes"}]'
    )
    assert len(tasks) == 1
    assert tasks[0].is_invoice is None
    assert tasks[0].is_bill is True
    assert tasks[0].due_date == "2026-02-01"
