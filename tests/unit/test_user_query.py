from __future__ import annotations

from golf_course_admin.repositories.course_user_repository import build_user_query


def test_empty_query() -> None:
    assert build_user_query() == {}


def test_course_filter() -> None:
    assert build_user_query(golf_course_id=4) == {"golf_course_id": 4}


def test_search_is_case_insensitive_and_escaped() -> None:
    q = build_user_query(golf_course_id=4, search="a.b")
    assert q["golf_course_id"] == 4
    fields = [next(iter(clause)) for clause in q["$or"]]
    assert fields == ["username", "email", "first_name", "last_name"]
    assert q["$or"][0]["username"] == {"$regex": r"a\.b", "$options": "i"}
