from pokebinder.db.database import get_session, init_db
from pokebinder.db.operations import (
    binder_to_snapshot,
    create_binder,
    delete_binder,
    get_binder,
    get_binder_or_fail,
    list_binders,
    list_public_binders,
    save_snapshot,
)

__all__ = [
    "binder_to_snapshot",
    "create_binder",
    "delete_binder",
    "get_binder",
    "get_binder_or_fail",
    "get_session",
    "init_db",
    "list_binders",
    "list_public_binders",
    "save_snapshot",
]
