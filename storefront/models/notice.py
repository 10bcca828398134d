"""
User-facing notices.

Notices are the only side channel the engine has besides its held state.
`notice_from_error()` is the single place where a failure becomes a notice,
so wording and severity stay consistent across operations.
"""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

from storefront.models.failure import (
    FailureKind,
    KnownError,
    RefusalError,
)


class NoticeSeverity(str, Enum):
    """How the display layer should style a notice."""

    SUCCESS = "success"
    WARNING = "warning"
    ERROR = "error"


class Notice(BaseModel):
    """A message for the visitor describing the outcome of an operation."""

    model_config = ConfigDict(frozen=True)

    severity: NoticeSeverity = Field(
        ...,
        description="Display severity",
    )
    message: str = Field(
        ...,
        description="User-appropriate explanation of what happened",
    )
    kind: FailureKind | None = Field(
        default=None,
        description="Failure classification (absent on success)",
    )
    detail: str | None = Field(
        default=None,
        description="Additional technical detail (optional)",
    )

    @classmethod
    def success(cls, message: str) -> "Notice":
        """Create a success notice."""
        return cls(severity=NoticeSeverity.SUCCESS, message=message)


# Kinds whose notice is a warning rather than an error. Refusals are always
# warnings regardless of kind.
_WARNING_KINDS = frozenset(
    {
        FailureKind.EMPTY_RESULT,
        FailureKind.TRANSIENT_FAULT,
    }
)


def notice_from_error(error: KnownError | RefusalError) -> Notice:
    """
    Convert a classified failure into a notice.

    Args:
        error: The failure raised by a client call or a local guard

    Returns:
        Notice with severity derived from the failure kind
    """
    if isinstance(error, RefusalError) or error.kind in _WARNING_KINDS:
        severity = NoticeSeverity.WARNING
    else:
        severity = NoticeSeverity.ERROR

    return Notice(
        severity=severity,
        message=error.message,
        kind=error.kind,
        detail=error.detail,
    )
