from __future__ import annotations

from datetime import datetime, timezone
from uuid import uuid4

from sqlalchemy.dialects import postgresql

from taskboard_api.filters import build_task_conditions


def _compile(clause):
    return clause.compile(dialect=postgresql.dialect())


def _only(predicate):
    conditions = build_task_conditions(predicate)
    assert len(conditions) == 1
    return _compile(conditions[0])


def test_text_contains_is_case_insensitive() -> None:
    compiled = _only({"name": {"contains": "838", "mode": "insensitive"}})
    sql = str(compiled)
    assert "tasks.name" in sql
    assert "ILIKE" in sql or "lower(tasks.name) LIKE" in sql
    assert "838" in compiled.params.values()


def test_text_contains_escapes_wildcards() -> None:
    compiled = _only({"text2": {"contains": "50%_off", "mode": "insensitive"}})
    assert "ESCAPE '/'" in str(compiled)
    assert "50/%/_off" in compiled.params.values()


def test_text_contains_ignores_non_string_values() -> None:
    assert build_task_conditions({"name": {"contains": 5, "mode": "insensitive"}}) == []


def test_choice_membership_on_scalar_column() -> None:
    compiled = _only({"priority": {"in": ["HIGH", "MEDIUM"]}})
    assert "tasks.priority IN" in str(compiled)
    assert ["HIGH", "MEDIUM"] in compiled.params.values()


def test_choice_values_are_bound_as_text() -> None:
    compiled = _only({"select1": {"equals": 3}})
    assert "tasks.select1 =" in str(compiled)
    assert list(compiled.params.values()) == ["3"]


def test_array_membership_uses_overlap() -> None:
    compiled = _only({"links": {"in": ["https://a.test"]}})
    assert "tasks.links &&" in str(compiled)


def test_array_equality_uses_containment() -> None:
    compiled = _only({"links": {"equals": "https://a.test"}})
    assert "tasks.links @>" in str(compiled)
    assert ["https://a.test"] in compiled.params.values()


def test_due_dates_overlap() -> None:
    due = datetime(2024, 1, 15, tzinfo=timezone.utc)
    compiled = _only({"duedate2": {"in": [due]}})
    assert "tasks.duedate2 &&" in str(compiled)


def test_number_and_boolean_equality() -> None:
    conditions = build_task_conditions({"price": {"equals": 10}, "checkbox2": {"equals": True}})
    sql = [str(_compile(c)) for c in conditions]
    assert any("tasks.price =" in s for s in sql)
    assert any("tasks.checkbox2 =" in s for s in sql)


def test_members_filter_uses_assignment_table() -> None:
    member_id = uuid4()
    compiled = _only({"members": {"in": [str(member_id), "not-a-uuid"]}})
    sql = str(compiled)
    assert "tasks.id IN (SELECT task_members.task_id" in sql
    assert [member_id] in compiled.params.values()


def test_members_filter_without_valid_ids_matches_nothing() -> None:
    compiled = _only({"members": {"in": ["uuid1", "uuid2"]}})
    assert str(compiled) == "false"


def test_unknown_and_unusable_keys_are_skipped() -> None:
    conditions = build_task_conditions(
        {
            "owner": "someone",
            "text9": {"contains": "x", "mode": "insensitive"},
            "status": {"between": [1, 2]},
        }
    )
    assert conditions == []


def test_scalar_descriptor_is_treated_as_equality() -> None:
    compiled = _only({"status": "Done"})
    assert "tasks.status =" in str(compiled)
    assert list(compiled.params.values()) == ["Done"]
