from flask import current_app
from sqlalchemy.exc import SQLAlchemyError

from ..errors import PersistenceError
from ..extensions import db


def commit_or_raise(message):
    """Commit the session; on failure roll back and raise PersistenceError."""
    try:
        db.session.commit()
    except SQLAlchemyError as e:
        db.session.rollback()
        current_app.logger.exception(message)
        raise PersistenceError(message) from e
