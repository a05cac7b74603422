from __future__ import annotations

import pytest

from dataplug_csv.naming import entity_file_name, escape_entity_name


def test_empty_entity_uses_collection_name():
    assert entity_file_name("users", "") == "users.csv"


def test_first_separator_becomes_safe_separator():
    assert escape_entity_name("a/b/c") == "a---b_c"
    assert entity_file_name("users", "a/b/c") == "users---a---b_c.csv"


@pytest.mark.parametrize(
    "entity, expected",
    [
        ("plain", "plain"),
        ("back\\slash", "back_slash"),
        ("a/b\\c/d", "a---b_c_d"),
        ("/leading", "---leading"),
    ],
)
def test_escape_entity_name(entity, expected):
    assert escape_entity_name(entity) == expected


def test_custom_separators():
    assert escape_entity_name("a.b.c/d", ".", "__") == "a__b.c_d"
    assert entity_file_name("db", "a.b/c", ".", "__") == "db__a__b_c.csv"


def test_escaping_is_deterministic():
    assert escape_entity_name("x/y/z") == escape_entity_name("x/y/z")
