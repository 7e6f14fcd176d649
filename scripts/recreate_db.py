# -*- coding: utf-8 -*-
"""
Full reset of the SQLite database plus a seeded manager account.

Run from the project root:
  python scripts/recreate_db.py

The manager login comes from SEED_USERNAME / SEED_PASSWORD
(default: manager / manager).
"""

from __future__ import annotations

import os
import sys
import traceback
from pathlib import Path
from typing import Optional

from sqlalchemy import func, select

# --- project path ---
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

print(f"[recreate] ROOT={ROOT}")
if not (ROOT / "staff_manager" / "__init__.py").exists():
    raise SystemExit("[recreate] error: staff_manager/ not found next to scripts/")

print("[recreate] importing app...")
from staff_manager import create_app  # noqa: E402
from staff_manager.acl import ROLE_MANAGER  # noqa: E402
from staff_manager.extensions import db  # noqa: E402
from staff_manager.models.user import AppUser  # noqa: E402


def _db_path_from_uri(uri: str) -> Optional[Path]:
    if uri.startswith("sqlite:///") and ":memory:" not in uri:
        return Path(uri.replace("sqlite:///", "")).resolve()
    return None


def _cnt(model) -> int:
    return int(db.session.execute(select(func.count()).select_from(model)).scalar() or 0)


def main() -> int:
    app = create_app()
    with app.app_context():
        uri = app.config.get("SQLALCHEMY_DATABASE_URI", "")
        print(f"[recreate] SQLALCHEMY_DATABASE_URI = {uri}")

        db_path = _db_path_from_uri(uri)
        if db_path:
            db_path.parent.mkdir(parents=True, exist_ok=True)
            if db_path.exists():
                print(f"[recreate] removing db file: {db_path}")
                db_path.unlink()
            else:
                print(f"[recreate] db file does not exist yet: {db_path}")
        else:
            print("[recreate] not a sqlite file, dropping tables instead")
            db.drop_all()

        print("[recreate] creating tables...")
        db.create_all()

        username = os.getenv("SEED_USERNAME", "manager")
        password = os.getenv("SEED_PASSWORD", "manager")
        manager = AppUser(username=username, full_name="Manager", role=ROLE_MANAGER, is_active=True)
        manager.set_password(password)
        db.session.add(manager)
        db.session.commit()
        print(f"[recreate] app_user rows={_cnt(AppUser)} -> {username} id={manager.id}")

        print("\n[recreate] done.")
        print(f"Login: {username} / {'*' * len(password)}")
        if db_path:
            print(f"DB file: {db_path}")
        return 0


if __name__ == "__main__":
    try:
        sys.exit(main())
    except Exception:
        print("\n[recreate] ERROR:")
        traceback.print_exc()
        sys.exit(1)
