"""
Validation utilities
"""
import re
from decimal import Decimal, InvalidOperation

from lifeboard.domain.errors import ValidationError


def require_text(value, message: str, max_length: int | None = None, label: str = "Value") -> str:
    """
    Обязательная строка: обрезать пробелы, проверить непустоту и длину

    Example:
        >>> require_text("  Math ", "Branch name is required", 100)
        "Math"
    """
    if not isinstance(value, str) or not value.strip():
        raise ValidationError(message)
    value = value.strip()
    if max_length is not None and len(value) > max_length:
        raise ValidationError(f"{label} cannot be more than {max_length} characters")
    return value


def optional_text(value, max_length: int | None = None, label: str = "Value") -> str:
    """Необязательная строка (None → "")"""
    if value is None:
        return ""
    if not isinstance(value, str):
        raise ValidationError(f"{label} must be a string")
    value = value.strip()
    if max_length is not None and len(value) > max_length:
        raise ValidationError(f"{label} cannot be more than {max_length} characters")
    return value


def require_choice(value, choices, label: str) -> str:
    if value not in choices:
        raise ValidationError(f"Invalid {label}. Must be one of: {', '.join(choices)}")
    return value


def require_percent(value, label: str = "Progress") -> int:
    """Целое 0..100"""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValidationError(f"{label} must be a number")
    if value < 0 or value > 100:
        raise ValidationError(f"{label} must be between 0 and 100")
    return value


def normalize_decimal_input(value: str) -> str:
    """
    Нормализовать ввод суммы: заменить запятую на точку

    Example:
        >>> normalize_decimal_input("100,50")
        "100.50"
    """
    return value.replace(",", ".")


def validate_decimal_amount(value: str, max_decimal_places: int = 2) -> tuple[bool, str | None]:
    """
    Валидация денежной суммы

    Returns:
        (is_valid, error_message)

    Example:
        >>> validate_decimal_amount("100.50")
        (True, None)
        >>> validate_decimal_amount("100.505")
        (False, "Maximum 2 decimal places")
    """
    normalized = normalize_decimal_input(value)

    try:
        Decimal(normalized)
    except (InvalidOperation, ValueError):
        return False, "Invalid amount"

    pattern = rf"^-?\d+(\.\d{{1,{max_decimal_places}}})?$"
    if not re.match(pattern, normalized):
        return False, f"Maximum {max_decimal_places} decimal places"

    return True, None


def validate_and_normalize_amount(value, max_decimal_places: int = 2) -> Decimal:
    """
    Валидировать сумму и вернуть Decimal (ValidationError при ошибке)

    Accepts int/float/Decimal/str. Negative amounts are rejected.

    Example:
        >>> validate_and_normalize_amount("100,50")
        Decimal("100.50")
    """
    if isinstance(value, bool) or value is None:
        raise ValidationError("Invalid amount")
    raw = format(value, "f") if isinstance(value, Decimal) else str(value)
    is_valid, error = validate_decimal_amount(raw, max_decimal_places)
    if not is_valid:
        raise ValidationError(error)

    amount = Decimal(normalize_decimal_input(raw))
    if amount < 0:
        raise ValidationError("Amount cannot be negative")
    return amount
