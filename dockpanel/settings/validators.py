"""Переиспользуемые валидаторы значений настроек."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Iterable, List, Optional, Tuple


class Validator(ABC):
    """Абстрактный валидатор значения."""

    @abstractmethod
    def validate(self, value: Any) -> Tuple[bool, str]:
        """Возвращает (True, "") при успехе либо (False, описание ошибки)."""


class TypeValidator(Validator):
    """Проверяет тип значения; bool не считается числом, если его не ждут явно."""

    def __init__(self, expected_type: type | Tuple[type, ...]) -> None:
        self.expected_types: Tuple[type, ...] = (
            expected_type if isinstance(expected_type, tuple) else (expected_type,)
        )

    def validate(self, value: Any) -> Tuple[bool, str]:
        if isinstance(value, bool) and bool not in self.expected_types:
            return False, f"Expected value of type {self._expected_name()}, got bool"
        if isinstance(value, self.expected_types):
            return True, ""
        return (
            False,
            f"Expected value of type {self._expected_name()}, got {type(value).__name__}",
        )

    def _expected_name(self) -> str:
        return ", ".join(t.__name__ for t in self.expected_types)


class RangeValidator(Validator):
    """Контролирует принадлежность числа диапазону (границы включены)."""

    def __init__(self, min_value: Optional[int] = None, max_value: Optional[int] = None) -> None:
        self.min_value = min_value
        self.max_value = max_value

    def validate(self, value: Any) -> Tuple[bool, str]:
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            return False, f"Expected a number, got {type(value).__name__}"
        if (self.min_value is not None and value < self.min_value) or (
            self.max_value is not None and value > self.max_value
        ):
            return False, f"Value {value} is out of range [{self.min_value}, {self.max_value}]"
        return True, ""


class EnumValidator(Validator):
    """Проверяет, что значение принадлежит конечному набору."""

    def __init__(self, allowed_values: Iterable[Any]) -> None:
        self.allowed_values = list(allowed_values)

    def validate(self, value: Any) -> Tuple[bool, str]:
        if value in self.allowed_values:
            return True, ""
        return False, f"Value {value!r} not in allowed values: {self.allowed_values}"


class NonBlankValidator(Validator):
    """Строка, в которой есть хотя бы один непробельный символ."""

    def validate(self, value: Any) -> Tuple[bool, str]:
        if isinstance(value, str) and value.strip():
            return True, ""
        return False, "Value must be a non-empty string"


class ItemsValidator(Validator):
    """Список, каждый элемент которого проходит вложенный валидатор."""

    def __init__(self, item_validator: Validator) -> None:
        self.item_validator = item_validator

    def validate(self, value: Any) -> Tuple[bool, str]:
        if not isinstance(value, list):
            return False, f"Expected a list, got {type(value).__name__}"
        for position, item in enumerate(value):
            is_valid, error = self.item_validator.validate(item)
            if not is_valid:
                return False, f"Item {position}: {error}"
        return True, ""


class CompositeValidator(Validator):
    """Комбинирует несколько валидаторов и возвращает первую ошибку."""

    def __init__(self, validators: Iterable[Validator]) -> None:
        self.validators: List[Validator] = list(validators)

    def validate(self, value: Any) -> Tuple[bool, str]:
        for validator in self.validators:
            is_valid, error = validator.validate(value)
            if not is_valid:
                return False, error
        return True, ""
