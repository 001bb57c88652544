"""Session-based auth helpers.

We store `user_id` into the Flask session on login/registration; the
decorators below guard API views and raise `ApiError` so the JSON error
handler formats the response.
"""

from functools import wraps
from typing import Callable, TypeVar, Any

from flask import g, session

from storefront.app.extensions import db
from storefront.app.models import User
from storefront.app.common.errors import abort_json

F = TypeVar("F", bound=Callable[..., Any])


def current_user() -> User | None:
    if "current_user" in g:
        return g.current_user
    uid = session.get("user_id")
    user = db.session.get(User, uid) if uid else None
    g.current_user = user
    return user


def login_user(user: User) -> None:
    session.clear()
    session["user_id"] = user.id
    g.current_user = user


def logout_user() -> None:
    session.pop("user_id", None)
    g.pop("current_user", None)


def login_required(fn: F) -> F:
    @wraps(fn)
    def wrapper(*args, **kwargs):
        if current_user() is None:
            abort_json(401, "unauthorized", "Authentication required")
        return fn(*args, **kwargs)

    return wrapper  # type: ignore


def admin_required(fn: F) -> F:
    @wraps(fn)
    def wrapper(*args, **kwargs):
        user = current_user()
        if user is None:
            abort_json(401, "unauthorized", "Authentication required")
        if not user.is_admin:
            abort_json(403, "forbidden", "Admin role required")
        return fn(*args, **kwargs)

    return wrapper  # type: ignore
