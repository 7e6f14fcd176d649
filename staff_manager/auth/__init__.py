# -*- coding: utf-8 -*-
from __future__ import annotations

from flask import Blueprint, jsonify
from flask_login import current_user, login_required, login_user, logout_user

from ..acl import ROLE_MANAGER, ROLES
from ..errors import AccessDenied, ConflictError, NotAuthenticated, NotFound, ValidationError
from ..extensions import db, login_manager
from ..logger import get_logger
from ..models.user import AppUser
from ..persistence import commit
from ..security import roles_required
from ..web import listing, ok, payload

logger = get_logger("auth")

auth_bp = Blueprint("auth", __name__, url_prefix="/auth")


@login_manager.unauthorized_handler
def _unauthorized():
    return jsonify(NotAuthenticated("login required").to_dict()), 401


def _role(value) -> str:
    role = (value or "").strip()
    if role not in ROLES:
        raise ValidationError(f"role must be one of: {', '.join(ROLES)}", code="bad_role")
    return role


@auth_bp.post("/login")
def login():
    data = payload()
    username = (data.get("username") or "").strip()
    password = (data.get("password") or "").strip()
    u = AppUser.query.filter_by(username=username).first()
    if not u or not u.check_password(password):
        logger.warning(f"failed login for {username!r}")
        raise NotAuthenticated("wrong username or password", code="bad_credentials")
    if not u.is_active:
        raise AccessDenied("account is disabled", code="inactive_user")
    login_user(u, remember=True)
    logger.info(f"user #{u.id} {u.username!r} logged in")
    return ok(user=u.to_dict())


@auth_bp.post("/logout")
@login_required
def logout():
    logger.info(f"user #{current_user.id} logged out")
    logout_user()
    return ok()


@auth_bp.get("/me")
@login_required
def me():
    return ok(user=current_user.to_dict())


# ---------- user management (manager only) ----------
@auth_bp.get("/users")
@login_required
@roles_required(ROLE_MANAGER)
def users():
    rows = AppUser.query.order_by(AppUser.username.asc()).all()
    return listing("users", [u.to_dict() for u in rows])


@auth_bp.post("/users")
@login_required
@roles_required(ROLE_MANAGER)
def create_user():
    data = payload()
    username = (data.get("username") or "").strip()
    password = (data.get("password") or "").strip()
    if not username or not password:
        raise ValidationError("username and password are required", code="no_credentials")
    if AppUser.query.filter_by(username=username).first():
        raise ConflictError(f"user {username!r} already exists", code="username_taken")

    u = AppUser(
        username=username,
        full_name=(data.get("full_name") or "").strip(),
        role=_role(data.get("role") or ROLE_MANAGER),
        category=(data.get("category") or "").strip() or None,
        is_active=True,
    )
    u.set_password(password)
    db.session.add(u)
    commit("create user", logger)
    logger.info(f"user #{u.id} {u.username!r} ({u.role}) created by user #{current_user.id}")
    return ok(user=u.to_dict()), 201


@auth_bp.post("/users/<int:user_id>/update")
@login_required
@roles_required(ROLE_MANAGER)
def update_user(user_id: int):
    u = db.session.get(AppUser, user_id)
    if not u:
        raise NotFound(f"user #{user_id} not found")
    data = payload()
    if "role" in data:
        u.role = _role(data.get("role"))
    if "category" in data:
        u.category = (data.get("category") or "").strip() or None
    if "full_name" in data:
        u.full_name = (data.get("full_name") or "").strip()
    if data.get("password"):
        u.set_password(str(data.get("password")).strip())
    if "is_active" in data:
        active = str(data.get("is_active")).strip().lower() in ("1", "true", "yes", "on")
        if not active and u.id == current_user.id:
            raise ValidationError("you cannot disable yourself", code="self_disable")
        u.is_active = active
    commit("update user", logger)
    logger.info(f"user #{u.id} updated by user #{current_user.id}")
    return ok(user=u.to_dict())
