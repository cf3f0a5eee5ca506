import pytest

from spanops.core.naming import (
    DEFAULT_PREFIX,
    MAX_DATABASE_NAME_LENGTH,
    generate_database_name,
    validate_database_name,
)


def test_generate_database_name_respects_spanner_limits():
    names = {generate_database_name() for _ in range(200)}

    assert len(names) == 200
    for name in names:
        assert name.startswith(DEFAULT_PREFIX)
        assert len(name) <= MAX_DATABASE_NAME_LENGTH
        assert not name.endswith("-")


def test_generate_database_name_default_length():
    assert len(generate_database_name()) == len(DEFAULT_PREFIX) + 23


def test_generate_database_name_custom_prefix():
    assert generate_database_name("crud-").startswith("crud-")


def test_generate_database_name_rejects_prefix_that_overflows():
    with pytest.raises(ValueError, match="longer than"):
        generate_database_name("way-too-long-")


@pytest.mark.parametrize(
    "value",
    ["a" * 31, "db-", "db_", "Upper-case", "1starts-with-digit", "x", "has space"],
)
def test_validate_database_name_rejects_invalid_names(value: str):
    with pytest.raises(ValueError):
        validate_database_name(value)


def test_validate_database_name_accepts_valid_name():
    assert validate_database_name("r2dbc-0a1b2c3d") == "r2dbc-0a1b2c3d"
