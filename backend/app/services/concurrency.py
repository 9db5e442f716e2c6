"""Unit of work and optimistic version checks for read-modify-write flows."""

from __future__ import annotations

import logging
from collections.abc import Iterator
from contextlib import contextmanager

from sqlalchemy import update
from sqlalchemy.orm.attributes import set_committed_value
from sqlmodel import Session

from app.services.errors import Conflict

logger = logging.getLogger(__name__)


@contextmanager
def unit_of_work(session: Session) -> Iterator[Session]:
    """Commit everything done inside the block, or roll all of it back."""
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise


def claim_version(session: Session, instance) -> None:
    """
    Bump ``instance.version`` only if nobody else has since the row was read.

    The conditional UPDATE runs in the caller's transaction, so a competing
    writer that committed first leaves zero matching rows and the whole unit
    of work is abandoned with ``Conflict``.
    """
    model = type(instance)
    expected = instance.version
    result = session.exec(
        update(model)
        .where(model.id == instance.id, model.version == expected)
        .values(version=expected + 1)
        .execution_options(synchronize_session=False)
    )
    if result.rowcount != 1:
        logger.info(
            f"Optimistic lock lost on {model.__name__} {instance.id} at version {expected}"
        )
        raise Conflict(
            f"{model.__name__} was modified by another request, please retry"
        )
    set_committed_value(instance, "version", expected + 1)
