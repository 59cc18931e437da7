from datetime import datetime

from flask import current_app, has_app_context
from sqlalchemy.exc import SQLAlchemyError

from ..extensions import db
from ..errors import PersistenceError
from ..models.form_field import FormField
from ..models.submission import Submission
from ..services.openai_wrap import evaluate_answer, error_evaluation


def evaluate_fields(fields, answers):
    """Evaluate every AI-calculated field that has an answer.

    Returns a map keyed by question_title.
    """
    evaluations = {}
    for field in fields:
        if not field.ai_prompt or not field.question_title:
            continue
        answer = answers.get(field.field_name)
        if not answer:
            continue
        try:
            evaluation = evaluate_answer(field.ai_prompt, answer)
        except Exception as e:
            # malformed prompt specs end up here; keep going with the other fields
            current_app.logger.exception('Error evaluating field %s', field.question_title)
            evaluation = error_evaluation(f'Evaluation error: {e}')
        evaluations[field.question_title] = {
            'field_name': field.field_name,
            'user_answer': answer,
            'evaluation': evaluation,
            'evaluated_at': datetime.utcnow().isoformat(),
        }
    return evaluations


def _run_evaluate_submission(submission_id: int, stage: int = 1, form_data=None):
    sub = db.session.get(Submission, submission_id)
    if not sub:
        current_app.logger.warning('evaluate_submission: submission %s not found', submission_id)
        return None

    fields = (FormField.query
              .filter_by(stage=stage, is_ai_calculated=True)
              .order_by(FormField.display_order.asc())
              .all())
    if not fields:
        return {}

    answers = form_data if form_data is not None else sub.answers_for(stage)
    evaluations = evaluate_fields(fields, answers or {})

    sub.set_evaluations(stage, evaluations)
    try:
        db.session.commit()
    except SQLAlchemyError as e:
        db.session.rollback()
        current_app.logger.exception('Failed to save evaluations for submission %s', submission_id)
        raise PersistenceError('Failed to save evaluations') from e
    current_app.logger.info('Stored %d AI evaluations for submission %s (stage %s)',
                            len(evaluations), submission_id, stage)
    return evaluations


def evaluate_submission(submission_id: int, stage: int = 1, form_data=None):
    """Entrypoint that ensures execution inside a Flask app context for workers."""
    if has_app_context():
        return _run_evaluate_submission(submission_id, stage, form_data)
    from app import create_app
    app = create_app()
    with app.app_context():
        return _run_evaluate_submission(submission_id, stage, form_data)
