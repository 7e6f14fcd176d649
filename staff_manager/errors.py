# -*- coding: utf-8 -*-
from __future__ import annotations

from flask import jsonify
from werkzeug.exceptions import HTTPException

from .extensions import db


class StaffManagerError(Exception):
    """Base error; `code` goes to the client, `status` is the HTTP status."""

    code = "error"
    status = 500

    def __init__(self, message: str = "", code: str | None = None):
        super().__init__(message or self.code)
        self.message = message or self.code
        if code:
            self.code = code

    def to_dict(self) -> dict:
        return {"ok": False, "error": self.code, "message": self.message}


class ValidationError(StaffManagerError):
    code = "bad_request"
    status = 400


class NotAuthenticated(StaffManagerError):
    code = "unauthorized"
    status = 401


class AccessDenied(StaffManagerError):
    code = "forbidden"
    status = 403


class NotFound(StaffManagerError):
    code = "not_found"
    status = 404


class ConflictError(StaffManagerError):
    code = "conflict"
    status = 409


class PersistenceError(StaffManagerError):
    code = "persistence_failed"
    status = 500


def register_error_handlers(app) -> None:
    @app.errorhandler(StaffManagerError)
    def _app_error(e: StaffManagerError):
        # drop half-applied changes left by a failed request
        db.session.rollback()
        return jsonify(e.to_dict()), e.status

    @app.errorhandler(HTTPException)
    def _http_error(e: HTTPException):
        code = (e.name or "error").lower().replace(" ", "_")
        return jsonify({"ok": False, "error": code, "message": e.description or ""}), e.code or 500
