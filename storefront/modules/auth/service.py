from __future__ import annotations

from typing import Any, Dict

from flask import current_app
from werkzeug.security import check_password_hash, generate_password_hash

from storefront.app.extensions import db
from storefront.app.models import User
from storefront.app.common.errors import abort_json
from storefront.modules.auth.schemas import LoginForm, ProfileForm, RegisterForm


def user_to_dict(user: User) -> Dict[str, Any]:
    return {
        "id": user.id,
        "email": user.email,
        "first_name": user.first_name,
        "last_name": user.last_name,
        "phone_number": user.phone_number,
        "role": user.role,
    }


def register(form: RegisterForm) -> User:
    email = form.email.strip().lower()
    if User.query.filter_by(email=email).first():
        abort_json(409, "conflict", "Email already registered")

    user = User(
        email=email,
        password_hash=generate_password_hash(form.password),
        first_name=form.first_name,
        last_name=form.last_name,
        role=form.role,
    )
    db.session.add(user)
    db.session.commit()
    current_app.logger.info("registered user %s (%s)", user.id, user.role)
    return user


def authenticate(form: LoginForm) -> User:
    email = form.email.strip().lower()
    user = User.query.filter_by(email=email).first()
    if not user or not check_password_hash(user.password_hash, form.password):
        current_app.logger.warning("failed login for %s", email)
        abort_json(401, "unauthorized", "Invalid email or password")
    return user


def update_profile(user: User, form: ProfileForm) -> User:
    for key, value in form.model_dump(exclude_unset=True).items():
        if key == "phone_number":
            value = value or None
        elif value is None:
            continue
        setattr(user, key, value)
    db.session.commit()
    return user
