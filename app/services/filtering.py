"""Admin filtering decisions on submissions.

Setting a decision only changes the row; messages go out when a stage is
closed.
"""
from sqlalchemy.exc import SQLAlchemyError

from ..extensions import db
from ..errors import NotFoundError, PersistenceError, ValidationError
from ..models.submission import Submission, FILTERING_DECISIONS


def _check_decision(decision):
    if decision not in FILTERING_DECISIONS:
        raise ValidationError(f"Invalid filtering decision: {decision!r}")


def set_decision(submission_id, decision):
    _check_decision(decision)
    sub = db.session.get(Submission, submission_id)
    if sub is None:
        raise NotFoundError("Submission not found")
    sub.filtering_decision = decision
    try:
        db.session.commit()
    except SQLAlchemyError as e:
        db.session.rollback()
        raise PersistenceError(f"Failed to update filtering decision: {e}") from e
    return sub


def bulk_set_decision(submission_ids, decision):
    """Set one decision on many submissions. Returns the number of rows updated."""
    _check_decision(decision)
    try:
        ids = [int(i) for i in submission_ids or []]
    except (TypeError, ValueError):
        raise ValidationError("Submission ids must be integers")
    if not ids:
        raise ValidationError("No submissions selected")
    try:
        count = (Submission.query
                 .filter(Submission.id.in_(ids))
                 .update({Submission.filtering_decision: decision}, synchronize_session=False))
        db.session.commit()
    except SQLAlchemyError as e:
        db.session.rollback()
        raise PersistenceError(f"Failed to update filtering decisions: {e}") from e
    return count
