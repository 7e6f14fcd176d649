# -*- coding: utf-8 -*-
from functools import wraps
from flask_login import current_user

from .acl import AuthContext
from .errors import AccessDenied, NotAuthenticated
from .extensions import login_manager


def current_auth() -> AuthContext:
    """AuthContext for the logged-in user."""
    if not current_user.is_authenticated:
        raise NotAuthenticated("login required")
    return AuthContext.from_user(current_user)


def roles_required(*roles):
    """
    Not logged in -> 401 JSON (via login_manager).
    Role not in the list -> 403 JSON.
    """
    def decorator(f):
        @wraps(f)
        def wrapper(*args, **kwargs):
            if not current_user.is_authenticated:
                return login_manager.unauthorized()
            if current_user.role not in roles:
                raise AccessDenied("insufficient permissions")
            return f(*args, **kwargs)
        return wrapper
    return decorator
