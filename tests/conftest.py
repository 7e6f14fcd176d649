"""
Shared fixtures: a fresh app + in-memory database per test, logged-in
clients per role, and small factories for staff and ledger rows.

Client tests never hold an app context open around requests, so every
request gets its own context (and its own Flask-Login user).
"""

from datetime import date
from decimal import Decimal

import pytest

from staff_manager import create_app
from staff_manager.acl import ROLE_MANAGER
from staff_manager.config import TestConfig
from staff_manager.extensions import db
from staff_manager.models import Advance, AppUser, AttendanceRecord, SalaryRecord, Staff

PASSWORD = "secret-pw"


@pytest.fixture
def app():
    app = create_app(TestConfig)
    with app.app_context():
        db.create_all()
    yield app
    with app.app_context():
        db.session.remove()
        db.drop_all()


@pytest.fixture
def ctx(app):
    """App context for service-level tests."""
    with app.app_context():
        yield app


@pytest.fixture
def make_user(app):
    def _make(username: str, role: str = ROLE_MANAGER, active: bool = True) -> int:
        with app.app_context():
            u = AppUser(username=username, role=role, full_name=username.title(), is_active=active)
            u.set_password(PASSWORD)
            db.session.add(u)
            db.session.commit()
            return u.id
    return _make


@pytest.fixture
def login(app, make_user):
    """login(role) -> test client with a session for a fresh user of that role."""
    counter = {"n": 0}

    def _login(role: str = ROLE_MANAGER):
        counter["n"] += 1
        username = f"{role}{counter['n']}"
        make_user(username, role)
        client = app.test_client()
        r = client.post("/auth/login", json={"username": username, "password": PASSWORD})
        assert r.status_code == 200, r.get_json()
        return client
    return _login


@pytest.fixture
def add_staff(app):
    def _add(name: str = "Ramesh", category: str = "petroleum", roster: str = "staff",
             shift_rate=500, active: bool = True) -> int:
        with app.app_context():
            s = Staff(name=name, roster=roster, category=category,
                      shift_rate=Decimal(str(shift_rate)), base_salary=0, is_active=active)
            db.session.add(s)
            db.session.commit()
            return s.id
    return _add


@pytest.fixture
def add_shifts(app):
    """add_shifts(staff_id, year, month, count): `count` single-shift present days from the 1st."""
    def _add(staff_id: int, year: int, month: int, count: int, shift_count: int = 1) -> None:
        with app.app_context():
            for d in range(1, count + 1):
                db.session.add(AttendanceRecord(
                    staff_id=staff_id, day=date(year, month, d), status="present", shift_count=shift_count,
                ))
            db.session.commit()
    return _add


@pytest.fixture
def add_advance(app):
    def _add(staff_id: int, amount, day: date, deducted: bool = False) -> int:
        with app.app_context():
            a = Advance(staff_id=staff_id, amount=Decimal(str(amount)), day=day, is_deducted=deducted)
            db.session.add(a)
            db.session.commit()
            return a.id
    return _add


@pytest.fixture
def salary_record(app):
    def _get(staff_id: int, year: int, month: int):
        with app.app_context():
            rec = SalaryRecord.query.filter_by(staff_id=staff_id, year=year, month=month).first()
            return rec.to_dict() if rec else None
    return _get
