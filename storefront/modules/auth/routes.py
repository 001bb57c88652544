from __future__ import annotations

from flask import Blueprint

from storefront.app.common.auth import current_user, login_required, login_user, logout_user
from storefront.app.common.validation import parse_body
from storefront.modules.auth import service
from storefront.modules.auth.schemas import LoginForm, ProfileForm, RegisterForm

bp = Blueprint("auth", __name__)


@bp.post("/users")
def create_user():
    """POST /api/users - Create a new account and start a session."""
    user = service.register(parse_body(RegisterForm))
    login_user(user)
    return service.user_to_dict(user), 201


@bp.post("/auth/login")
def login():
    """POST /api/auth/login - Authenticate and start a session."""
    user = service.authenticate(parse_body(LoginForm))
    login_user(user)
    return service.user_to_dict(user), 200


@bp.post("/auth/logout")
def logout():
    """POST /api/auth/logout - Terminate session."""
    logout_user()
    return {"message": "logged_out"}, 200


@bp.get("/users/me")
@login_required
def me():
    """GET /api/users/me - Current authenticated user."""
    return service.user_to_dict(current_user()), 200


@bp.patch("/users/me")
@login_required
def update_me():
    user = service.update_profile(current_user(), parse_body(ProfileForm))
    return service.user_to_dict(user), 200
