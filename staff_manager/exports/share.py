# -*- coding: utf-8 -*-
from __future__ import annotations

from urllib.parse import quote

WHATSAPP_URL = "https://wa.me/?text="


def share_link(message: str) -> str:
    return WHATSAPP_URL + quote(message, safe="")


def share_payload(message: str) -> dict:
    return {"text": message, "url": share_link(message)}
