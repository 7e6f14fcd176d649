# -*- coding: utf-8 -*-
from __future__ import annotations

from typing import Any

from flask import jsonify, request

from .errors import ValidationError


def payload() -> dict[str, Any]:
    """JSON body, falling back to form fields."""
    data = request.get_json(silent=True)
    if isinstance(data, dict):
        return data
    return request.form.to_dict()


def require_confirm(data: dict[str, Any]) -> None:
    # financial and destructive actions are never fired without an explicit confirmation
    if str(data.get("confirm", "")).strip().lower() not in ("1", "true", "yes", "on"):
        raise ValidationError("this action needs confirm=true", code="confirm_required")


def int_arg(value, field: str) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{field} must be an integer", code=f"bad_{field}") from None


def flag_arg(name: str) -> bool:
    return (request.args.get(name) or "").strip().lower() in ("1", "true", "yes", "on")


def ok(**kwargs):
    return jsonify({"ok": True, **kwargs})


def listing(key: str, items: list, **kwargs):
    """List response; an empty result says so explicitly."""
    body = {"ok": True, key: items, **kwargs}
    if not items:
        body["message"] = "no records"
    return jsonify(body)


def id_list(data: dict[str, Any]) -> list[int]:
    """`ids` as a JSON list or a comma separated string -> sorted unique ints."""
    raw = data.get("ids")
    if not isinstance(raw, list):
        raw = [x for x in str(raw or "").split(",") if x.strip()]
    ids = sorted({int_arg(x, "ids") for x in raw})
    if not ids:
        raise ValidationError("ids are required", code="no_ids")
    return ids


def apply_text(obj, data: dict[str, Any], fields, required=(), creating: bool = False) -> None:
    """Copy stripped text fields onto `obj`; on update only the fields sent are touched."""
    for field in fields:
        if field not in data and not creating:
            continue
        value = (data.get(field) or "").strip()
        if field in required and not value:
            raise ValidationError(f"{field} is required", code=f"no_{field}")
        setattr(obj, field, value)
