from pokebinder.models.failure import (
    ApiResponse,
    BinderNotFoundError,
    ConfigurationError,
    FailureDetail,
    FailureKind,
    KnownError,
    MalformedSnapshotError,
    OutcomeType,
)

__all__ = [
    "ApiResponse",
    "BinderNotFoundError",
    "ConfigurationError",
    "FailureDetail",
    "FailureKind",
    "KnownError",
    "MalformedSnapshotError",
    "OutcomeType",
]
