"""
unit_of_work: commit on success, roll back on any error, and map database
errors onto the client-facing error types.
"""

import logging

import pytest
from sqlalchemy.exc import OperationalError
from sqlalchemy.orm.exc import StaleDataError

from staff_manager.errors import ConflictError, NotFound, PersistenceError
from staff_manager.extensions import db
from staff_manager.models import SalaryRecord, Staff
from staff_manager.persistence import unit_of_work

logger = logging.getLogger("test.persistence")


@pytest.fixture
def sid(ctx, add_staff):
    return add_staff("Ramesh", "petroleum")


def test_commits_on_success(sid):
    with unit_of_work("add record", logger):
        db.session.add(SalaryRecord(staff_id=sid, year=2025, month=3))
    db.session.remove()
    assert SalaryRecord.query.count() == 1


def test_duplicate_period_is_a_conflict(sid):
    with unit_of_work("add record", logger):
        db.session.add(SalaryRecord(staff_id=sid, year=2025, month=3))

    with pytest.raises(ConflictError) as exc:
        with unit_of_work("add record", logger):
            db.session.add(SalaryRecord(staff_id=sid, year=2025, month=3))
    assert exc.value.code == "conflict"
    assert SalaryRecord.query.count() == 1


def test_stale_data_is_a_conflict(sid):
    with pytest.raises(ConflictError) as exc:
        with unit_of_work("update record", logger):
            db.session.get(Staff, sid).name = "Renamed"
            raise StaleDataError("UPDATE statement on table 'salary_record' expected to update 1 row(s); 0 were matched.")
    assert exc.value.status == 409
    assert db.session.get(Staff, sid).name == "Ramesh"


def test_database_error_is_persistence_failed(sid, caplog):
    with caplog.at_level(logging.ERROR, logger="test.persistence"):
        with pytest.raises(PersistenceError) as exc:
            with unit_of_work("update staff", logger):
                db.session.get(Staff, sid).name = "Renamed"
                raise OperationalError("UPDATE staff", {}, Exception("disk I/O error"))
    assert exc.value.code == "persistence_failed"
    assert exc.value.status == 500
    assert "update staff failed" in caplog.text
    assert db.session.get(Staff, sid).name == "Ramesh"


def test_domain_error_propagates_unchanged(sid):
    with pytest.raises(NotFound):
        with unit_of_work("update staff", logger):
            db.session.get(Staff, sid).name = "Renamed"
            raise NotFound("gone")
    assert db.session.get(Staff, sid).name == "Ramesh"
