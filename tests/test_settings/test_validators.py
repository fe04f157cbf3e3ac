"""Проверки валидаторов настроек."""

from __future__ import annotations

from dockpanel.settings.validators import (
    CompositeValidator,
    EnumValidator,
    ItemsValidator,
    NonBlankValidator,
    RangeValidator,
    TypeValidator,
)


def test_type_validator_success() -> None:
    validator = TypeValidator(int)
    assert validator.validate(5) == (True, "")


def test_type_validator_failure() -> None:
    validator = TypeValidator(str)
    is_valid, error = validator.validate(123)
    assert not is_valid
    assert "str" in error


def test_type_validator_bool_is_not_int() -> None:
    assert not TypeValidator(int).validate(True)[0]
    assert TypeValidator(bool).validate(False) == (True, "")


def test_range_validator_within_bounds() -> None:
    validator = RangeValidator(1, 10)
    assert validator.validate(5) == (True, "")
    assert validator.validate(10) == (True, "")


def test_range_validator_out_of_bounds() -> None:
    validator = RangeValidator(1, 10)
    is_valid, error = validator.validate(11)
    assert not is_valid
    assert "out of range" in error


def test_range_validator_rejects_non_numbers() -> None:
    assert not RangeValidator(0, 5).validate("3")[0]
    assert not RangeValidator(0, 5).validate(True)[0]


def test_enum_validator() -> None:
    validator = EnumValidator(["image", "status"])
    assert validator.validate("image") == (True, "")
    assert not validator.validate("size")[0]


def test_non_blank_validator() -> None:
    validator = NonBlankValidator()
    assert validator.validate("/bin/bash") == (True, "")
    assert not validator.validate("   ")[0]
    assert not validator.validate(None)[0]


def test_items_validator_reports_position() -> None:
    validator = ItemsValidator(NonBlankValidator())
    assert validator.validate(["status=exited"]) == (True, "")
    is_valid, error = validator.validate(["status=exited", ""])
    assert not is_valid
    assert error.startswith("Item 1")
    assert not validator.validate("status=exited")[0]


def test_composite_validator_returns_first_error() -> None:
    validator = CompositeValidator([TypeValidator(int), RangeValidator(0, 10)])
    assert validator.validate(3) == (True, "")
    is_valid, error = validator.validate("x")
    assert not is_valid
    assert "int" in error
