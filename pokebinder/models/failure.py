"""
Failure envelope and error classification.

Every error the binder service reports to a client is classified by a
FailureKind and wrapped in an ApiResponse envelope.

Outcome types:
- KnownFailure: System knows why it failed (bad grid, missing card, ...)
- UnknownFailure: System does not know why it failed

Domain errors subclass KnownError and carry the HTTP status code the API
layer should answer with. The app turns any KnownError into a known-failure
envelope and any other exception into an unknown-failure envelope (500).
"""

from enum import Enum

from pydantic import BaseModel, Field


class FailureKind(str, Enum):
    """Classification of failure types."""

    # Input validation failures
    INVALID_INPUT = "invalid_input"
    CONFIGURATION = "configuration"
    MALFORMED_SNAPSHOT = "malformed_snapshot"

    # Resource failures
    NOT_FOUND = "not_found"
    CONFLICT = "conflict"

    # Constraint violations
    LIMIT_EXCEEDED = "limit_exceeded"
    RATE_LIMITED = "rate_limited"

    # Service failures
    SERVICE_UNAVAILABLE = "service_unavailable"

    # Unknown
    UNKNOWN = "unknown"


class OutcomeType(str, Enum):
    """High-level outcome classification."""

    KNOWN_FAILURE = "known_failure"
    UNKNOWN_FAILURE = "unknown_failure"


class FailureDetail(BaseModel):
    """Detailed information about a failure."""

    kind: FailureKind = Field(
        ...,
        description="Classification of the failure",
    )
    message: str = Field(
        ...,
        description="User-appropriate explanation of what went wrong",
    )
    detail: str | None = Field(
        default=None,
        description="Additional technical detail (optional)",
    )
    suggestion: str | None = Field(
        default=None,
        description="Suggested action for the user",
    )


class ApiResponse(BaseModel):
    """
    Response envelope for failures.

    Every error response carries an outcome type and a FailureDetail so the
    frontend never has to interpret a bare status code.
    """

    outcome: OutcomeType = Field(
        ...,
        description="High-level classification of the result",
    )
    failure: FailureDetail = Field(
        ...,
        description="What went wrong",
    )

    @classmethod
    def known_failure(
        cls,
        kind: FailureKind,
        message: str,
        detail: str | None = None,
        suggestion: str | None = None,
    ) -> "ApiResponse":
        """
        Create a known failure response.

        Use when the system knows exactly why the operation failed.
        Example: Binder not found, unsupported grid size.
        """
        return cls(
            outcome=OutcomeType.KNOWN_FAILURE,
            failure=FailureDetail(
                kind=kind,
                message=message,
                detail=detail,
                suggestion=suggestion,
            ),
        )

    @classmethod
    def unknown_failure(
        cls,
        detail: str | None = None,
    ) -> "ApiResponse":
        """Create an unknown failure response for unexpected exceptions."""
        return cls(
            outcome=OutcomeType.UNKNOWN_FAILURE,
            failure=FailureDetail(
                kind=FailureKind.UNKNOWN,
                message="Something went wrong and the cause is unknown. Please retry.",
                detail=detail,
                suggestion="If this persists, please report the issue.",
            ),
        )


class KnownError(Exception):
    """
    Base class for exceptions that represent known, explainable failures.

    Subclass this for errors where the system knows exactly what went wrong.
    """

    def __init__(
        self,
        kind: FailureKind,
        message: str,
        detail: str | None = None,
        suggestion: str | None = None,
        status_code: int = 400,
    ):
        self.kind = kind
        self.message = message
        self.detail = detail
        self.suggestion = suggestion
        self.status_code = status_code
        super().__init__(message)

    def to_response(self) -> ApiResponse:
        """Convert to an ApiResponse."""
        return ApiResponse.known_failure(
            kind=self.kind,
            message=self.message,
            detail=self.detail,
            suggestion=self.suggestion,
        )


class ConfigurationError(KnownError):
    """Raised when a binder setting (e.g. grid size) is not supported."""

    def __init__(self, message: str, detail: str | None = None):
        super().__init__(
            kind=FailureKind.CONFIGURATION,
            message=message,
            detail=detail,
            suggestion="Choose one of the supported grid sizes.",
            status_code=400,
        )


class MalformedSnapshotError(KnownError):
    """Raised when a binder snapshot is missing its settings or cards."""

    def __init__(self, message: str, detail: str | None = None):
        super().__init__(
            kind=FailureKind.MALFORMED_SNAPSHOT,
            message=message,
            detail=detail,
            status_code=422,
        )


class BinderNotFoundError(KnownError):
    """Raised when a binder id does not exist."""

    def __init__(self, binder_id: str):
        self.binder_id = binder_id
        super().__init__(
            kind=FailureKind.NOT_FOUND,
            message="Binder not found.",
            detail=f"binder_id={binder_id}",
            status_code=404,
        )
