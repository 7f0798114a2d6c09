from pokebinder.services.binder_editor import (
    CardLimitError,
    CardNotFoundError,
    InvalidMoveError,
    InvalidPositionError,
    SlotOccupiedError,
    add_card,
    find_next_empty_position,
    move_card,
    remove_card,
    update_card,
    validate_position,
)
from pokebinder.services.rate_limits import (
    InMemoryRateLimitStore,
    RateLimiter,
    RateLimitExceededError,
    RateLimitRule,
    get_rate_limiter,
)
from pokebinder.services.static_binders import (
    StaticBinder,
    StaticBinderClient,
    StaticBinderNotFoundError,
    build_static_binder,
    parse_static_binder,
    save_static_binders,
    slugify,
)

__all__ = [
    "CardLimitError",
    "CardNotFoundError",
    "InMemoryRateLimitStore",
    "InvalidMoveError",
    "InvalidPositionError",
    "RateLimitExceededError",
    "RateLimitRule",
    "RateLimiter",
    "SlotOccupiedError",
    "StaticBinder",
    "StaticBinderClient",
    "StaticBinderNotFoundError",
    "add_card",
    "build_static_binder",
    "find_next_empty_position",
    "get_rate_limiter",
    "move_card",
    "parse_static_binder",
    "remove_card",
    "save_static_binders",
    "slugify",
    "update_card",
    "validate_position",
]
