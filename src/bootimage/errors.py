"""Typed error model with stable, machine-readable error codes."""

from __future__ import annotations

from collections.abc import Mapping
from enum import StrEnum


class ErrorCode(StrEnum):
    """Stable error identifiers used across API surfaces."""

    VALIDATION = "E_VALIDATION"
    CONFIG_INVARIANT = "E_CONFIG_INVARIANT"


class BootImageError(Exception):
    """Base error class that carries code, optional hint, and context."""

    code: str
    hint: str | None
    context: Mapping[str, str]

    def __init__(
        self,
        message: str,
        *,
        code: ErrorCode,
        hint: str | None = None,
        context: Mapping[str, str] | None = None,
    ) -> None:
        super().__init__(message)
        self.code = code.value
        self.hint = hint
        self.context = dict(context or {})

    def __str__(self) -> str:
        parts = [super().__str__()]
        if self.hint:
            parts.append(f"Hint: {self.hint}")
        if self.context:
            for k, v in self.context.items():
                if v:
                    parts.append(f"  {k}: {v}")
        return "\n".join(parts)

    def to_dict(self) -> dict[str, object]:
        payload: dict[str, object] = {
            "code": self.code,
            "message": str(self),
            "context": dict(self.context),
        }
        if self.hint is not None:
            payload["hint"] = self.hint
        return payload


class ValidationError(BootImageError):
    def __init__(
        self,
        message: str,
        *,
        hint: str | None = None,
        context: Mapping[str, str] | None = None,
    ) -> None:
        super().__init__(message, code=ErrorCode.VALIDATION, hint=hint, context=context)


class ConfigInvariantError(BootImageError):
    """A derived module count disagrees with the globally configured total.

    There is no usable partial result: a classpath of the wrong length would
    silently corrupt every compilation step that consumes it.
    """

    expected: int
    actual: int

    def __init__(
        self,
        message: str,
        *,
        expected: int,
        actual: int,
        hint: str | None = None,
        context: Mapping[str, str] | None = None,
    ) -> None:
        merged = {"expected": str(expected), "actual": str(actual)}
        merged.update(context or {})
        super().__init__(
            f"{message}, got {actual}, expected {expected}",
            code=ErrorCode.CONFIG_INVARIANT,
            hint=hint,
            context=merged,
        )
        self.expected = expected
        self.actual = actual


__all__ = [
    "BootImageError",
    "ConfigInvariantError",
    "ErrorCode",
    "ValidationError",
]
