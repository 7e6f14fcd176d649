"""
Bring the database schema up to date without touching data.

Creates any table declared in the models that is missing from the
configured database (DATABASE_URL or instance/staff_manager.db).

Run:
  python scripts/ensure_schema.py
"""

from __future__ import annotations

import sys
from pathlib import Path

from sqlalchemy import inspect

# project root on sys.path
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

print("[ensure] loading app...")
from staff_manager import create_app  # noqa: E402
from staff_manager.extensions import db  # noqa: E402


def _tables() -> set[str]:
    return set(inspect(db.engine).get_table_names())


def main() -> int:
    app = create_app()
    with app.app_context():
        uri = app.config.get("SQLALCHEMY_DATABASE_URI", "")
        print(f"[ensure] SQLALCHEMY_DATABASE_URI = {uri}")

        before = _tables()
        print(f"[ensure] tables before: {len(before)}")

        # register every model in the metadata
        from staff_manager import models  # noqa: F401

        db.create_all()

        after = _tables()
        created = sorted(after - before)
        if created:
            print(f"[ensure] created: {', '.join(created)}")
        else:
            print("[ensure] nothing to create.")

        core = ["staff", "attendance", "advance", "salary_record", "app_user"]
        missing = [t for t in core if t not in after]
        if missing:
            print(f"[ensure] WARNING: still missing {', '.join(missing)}")
            return 1
        print("[ensure] done.")
        return 0


if __name__ == "__main__":
    sys.exit(main())
