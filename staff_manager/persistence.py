# -*- coding: utf-8 -*-
from __future__ import annotations

from contextlib import contextmanager
from logging import Logger
from typing import Iterator

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm.exc import StaleDataError

from .errors import ConflictError, NotFound, PersistenceError, StaffManagerError
from .extensions import db


@contextmanager
def unit_of_work(action: str, logger: Logger) -> Iterator[None]:
    """
    Everything inside commits together or not at all.

    Domain errors roll back and propagate unchanged; database errors roll
    back, get logged and come out as ConflictError / PersistenceError.
    """
    try:
        yield
        db.session.commit()
    except StaffManagerError:
        db.session.rollback()
        raise
    except StaleDataError as e:
        db.session.rollback()
        logger.warning(f"{action}: concurrent update detected ({e})")
        raise ConflictError(f"{action}: the record was changed by someone else, reload and retry") from e
    except IntegrityError as e:
        db.session.rollback()
        logger.warning(f"{action}: integrity error ({e.orig})")
        raise ConflictError(f"{action}: conflicting data, reload and retry") from e
    except SQLAlchemyError as e:
        db.session.rollback()
        logger.error(f"{action} failed: {e}")
        raise PersistenceError(f"{action} failed") from e


def commit(action: str, logger: Logger) -> None:
    with unit_of_work(action, logger):
        pass


def load_row(model, row_id: int):
    row = db.session.get(model, row_id)
    if not row:
        raise NotFound(f"{model.__tablename__.replace('_', ' ')} #{row_id} not found")
    return row


def delete_rows(model, ids: list[int], action: str, logger: Logger) -> None:
    """All or nothing: every id must exist before anything is removed."""
    with unit_of_work(action, logger):
        for row in [load_row(model, i) for i in ids]:
            db.session.delete(row)
