"""Close a stage: notify nominated/excluded applicants and promote the nominated.

The workflow is not transactional. Messages that went out stay sent even
when promotion fails, and re-running it for the same stage sends again to
whoever still carries the same stage and decision.
"""
from flask import current_app
from sqlalchemy.exc import SQLAlchemyError

from ..extensions import db
from ..errors import NotFoundError
from ..models.submission import Submission
from ..services.messaging import send_to_group

LAST_PROMOTABLE_STAGE = 3


def load_recipients(stage, channels=None):
    query = Submission.query.filter(Submission.stage == stage)
    if channels:
        query = query.filter(Submission.channel.in_(list(channels)))
    return [s.contact() for s in query.order_by(Submission.id.asc()).all()]


def promote(stage, emails, errors):
    """Move nominated submissions still on ``stage`` to the next stage.

    Returns the number of rows moved; failures are recorded in ``errors``.
    """
    next_stage = stage + 1
    try:
        moved = (Submission.query
                 .filter(Submission.stage == stage,
                         Submission.filtering_decision == 'nominated',
                         Submission.user_email.in_(emails))
                 .update({Submission.stage: next_stage}, synchronize_session=False))
        db.session.commit()
        return moved
    except SQLAlchemyError as e:
        db.session.rollback()
        current_app.logger.exception('Error moving users to stage %s', next_stage)
        errors.append(f"Failed to move users to stage {next_stage}: {e}")
        return 0


def close_stage(stage, settings, test_mode=False, test_recipients=None, channels=None):
    settings = settings or {}
    if test_mode and test_recipients:
        recipients = list(test_recipients)
    else:
        recipients = load_recipients(stage, channels)
        if not recipients:
            raise NotFoundError("No submissions found for this stage")

    nominated = [r for r in recipients if r.get('filtering_decision') == 'nominated']
    excluded = [r for r in recipients if r.get('filtering_decision') == 'exclude']
    # "auto" submissions get no message and are not promoted
    auto_count = sum(1 for r in recipients if (r.get('filtering_decision') or 'auto') == 'auto')

    errors = []
    emails_sent = 0
    whatsapps_sent = 0

    if nominated:
        e, w = send_to_group(nominated,
                             settings.get('passedEmailSubject'),
                             settings.get('passedEmailContent'),
                             settings.get('passedWhatsappTemplate'),
                             settings.get('passedWhatsappImage'),
                             errors, group_name='Passed')
        emails_sent += e
        whatsapps_sent += w

    if excluded:
        e, w = send_to_group(excluded,
                             settings.get('failedEmailSubject'),
                             settings.get('failedEmailContent'),
                             settings.get('failedWhatsappTemplate'),
                             settings.get('failedWhatsappImage'),
                             errors, group_name='Failed')
        emails_sent += e
        whatsapps_sent += w

    # persist the notification log before touching stages
    try:
        db.session.commit()
    except SQLAlchemyError:
        db.session.rollback()
        current_app.logger.exception('Failed to store notification log for stage %s', stage)

    moved = 0
    if not test_mode and nominated and stage < LAST_PROMOTABLE_STAGE:
        moved = promote(stage, [r['user_email'] for r in nominated], errors)

    current_app.logger.info(
        'Stage %s closed: nominated=%d excluded=%d auto=%d emails=%d whatsapps=%d moved=%d errors=%d',
        stage, len(nominated), len(excluded), auto_count, emails_sent, whatsapps_sent, moved, len(errors))

    return {
        'emailsSent': emails_sent,
        'whatsappsSent': whatsapps_sent,
        'nominatedCount': len(nominated),
        'excludedCount': len(excluded),
        'autoCount': auto_count,
        'errors': errors,
        'movedToNextStage': moved,
    }
