"""ServiceResult and ServiceError — what every service entry point returns.

Per-document problems never fail an operation; they travel inside
``data``. A result is ``ok=False`` only when the run as a whole could not
happen, and then ``error.code`` is one of the run-level codes below.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field

# Run-level error codes (ServiceError.code).
CONTENT_ROOT_MISSING = "CONTENT_ROOT_MISSING"
CANCELLED = "CANCELLED"


class ServiceError(BaseModel):
    """Why an operation failed as a whole."""

    model_config = {"frozen": True}

    code: str
    message: str
    detail: dict[str, Any] = Field(default_factory=dict)


class ServiceResult(BaseModel):
    """Outcome of one service operation.

    Attributes:
        ok: False only for run-level failures.
        op: Operation name, ``"generate"`` or ``"parsers"``.
        data: Operation payload; plain JSON-able values only.
        warnings: Human-readable, non-fatal messages (``"path: message"``).
        error: Set when ``ok`` is False.
        meta: Extras such as the telemetry span tree under ``--verbose``.
    """

    model_config = {"frozen": True}

    ok: bool
    op: str
    data: dict[str, Any] = Field(default_factory=dict)
    warnings: list[str] = Field(default_factory=list)
    error: ServiceError | None = None
    meta: dict[str, Any] | None = None

    @classmethod
    def success(
        cls,
        op: str,
        data: dict[str, Any],
        *,
        warnings: list[str] | None = None,
    ) -> ServiceResult:
        return cls(ok=True, op=op, data=data, warnings=warnings or [])

    @classmethod
    def failure(
        cls,
        op: str,
        code: str,
        message: str,
        *,
        warnings: list[str] | None = None,
        **detail: Any,
    ) -> ServiceResult:
        error = ServiceError(code=code, message=message, detail=detail)
        return cls(ok=False, op=op, error=error, warnings=warnings or [])
