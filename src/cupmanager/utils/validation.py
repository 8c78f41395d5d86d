"""Validation utilities for Cup Manager.

This module provides reusable validation functions with consistent error handling.
"""

# Cup Manager
# Copyright (C) 2025  Cup Manager developers
#
# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.
#
# This program is distributed in the hope that it will be useful,
# but WITHOUT ANY WARRANTY; without even the implied warranty of
# MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the
# GNU General Public License for more details.
#
# You should have received a copy of the GNU General Public License
# along with this program.  If not, see <http://www.gnu.org/licenses/>.

from typing import Any, Iterable, Optional

from cupmanager.exceptions import InvalidResultException, NameValidationException


class ValidationResult:
    """Result of a validation operation.

    Attributes:
        is_valid: Whether the validation passed
        error_message: Human-readable error message if invalid
        sanitized_value: Cleaned/normalized value if valid
    """

    def __init__(
        self,
        is_valid: bool,
        error_message: Optional[str] = None,
        sanitized_value: Any = None,
    ):
        self.is_valid = is_valid
        self.error_message = error_message
        self.sanitized_value = sanitized_value

    def __bool__(self) -> bool:
        """Allow using result in boolean context: if result: ..."""
        return self.is_valid

    def __repr__(self) -> str:
        if self.is_valid:
            return f"ValidationResult(VALID, {self.sanitized_value!r})"
        return f"ValidationResult(INVALID, {self.error_message!r})"


# ========== Name Validation ==========


def validate_name(
    name: Optional[str],
    existing_names: Iterable[str] = (),
    kind: str = "name",
) -> ValidationResult:
    """Validate a display name against a set of names already in use.

    Names are trimmed, must not be empty and must be unique ignoring case.

    Args:
        name: Name to validate
        existing_names: Names already taken (compared case-insensitively)
        kind: What is being named, used in error messages

    Returns:
        ValidationResult with the trimmed name as sanitized value

    Example:
        >>> validate_name("  Spring Cup ", ["Winter Cup"], "tournament").sanitized_value
        'Spring Cup'
    """
    trimmed = (name or "").strip()
    if not trimmed:
        return ValidationResult(
            is_valid=False,
            error_message=f"{kind.capitalize()} name cannot be empty",
        )

    folded = trimmed.casefold()
    if any(existing.casefold() == folded for existing in existing_names):
        return ValidationResult(
            is_valid=False,
            error_message=f"A {kind} with the name '{trimmed}' already exists",
        )

    return ValidationResult(is_valid=True, sanitized_value=trimmed)


def validate_name_strict(
    name: Optional[str],
    existing_names: Iterable[str] = (),
    kind: str = "name",
) -> str:
    """Validate a name and return it trimmed or raise exception.

    Raises:
        NameValidationException: If the name is empty or taken
    """
    result = validate_name(name, existing_names, kind)
    if not result.is_valid:
        raise NameValidationException(result.error_message)
    return result.sanitized_value


# ========== Score Validation ==========


def validate_score(score: Any) -> ValidationResult:
    """Validate a single match score.

    Scores are goal counts: non-negative integers. Booleans are rejected
    even though they are ``int`` subclasses.

    Args:
        score: Value to validate

    Returns:
        ValidationResult with the integer score as sanitized value
    """
    if isinstance(score, bool) or not isinstance(score, int):
        return ValidationResult(
            is_valid=False,
            error_message=f"Invalid score: {score!r} (must be a whole number)",
        )

    if score < 0:
        return ValidationResult(
            is_valid=False,
            error_message=f"Invalid score: {score} (must not be negative)",
        )

    return ValidationResult(is_valid=True, sanitized_value=score)


def validate_score_strict(score: Any) -> int:
    """Validate score and return it or raise exception.

    Raises:
        InvalidResultException: If score is invalid
    """
    result = validate_score(score)
    if not result.is_valid:
        raise InvalidResultException(result.error_message)
    return result.sanitized_value
