from datetime import datetime

from flask import current_app
from sqlalchemy.exc import SQLAlchemyError

from ..extensions import db
from ..models.invitee import Invitee
from ..models.invitation_setting import InvitationSetting
from ..services.messaging import send_email_to, send_whatsapp_to


def send_invitations(invitee_ids, settings=None):
    """Invite each invitee by email and WhatsApp and record what went out.

    ``settings`` overrides the stored invitation settings (same keys as
    InvitationSetting columns).
    """
    stored = InvitationSetting.current().to_dict()
    cfg = dict(stored, **{k: v for k, v in (settings or {}).items() if v is not None})

    invitees = Invitee.query.filter(Invitee.id.in_(list(invitee_ids))).order_by(Invitee.id.asc()).all()
    errors = []
    emails_sent = 0
    whatsapps_sent = 0

    for inv in invitees:
        recipient = {'user_name': inv.name, 'user_email': inv.email,
                     'user_phone': inv.phone, 'user_gender': inv.gender}
        email_ok = False
        whatsapp_ok = False
        if inv.email and cfg.get('email_subject') and cfg.get('email_content'):
            email_ok = send_email_to(recipient, cfg['email_subject'], cfg['email_content'],
                                     'Invitation', errors)
        if inv.phone and cfg.get('whatsapp_template'):
            whatsapp_ok = send_whatsapp_to(recipient, cfg['whatsapp_template'], cfg.get('whatsapp_image'),
                                           'Invitation', errors,
                                           param_2=cfg.get('whatsapp_param_2'),
                                           url_button=cfg.get('whatsapp_url_button'))
        emails_sent += int(email_ok)
        whatsapps_sent += int(whatsapp_ok)

        inv.email_sent = email_ok
        inv.whatsapp_sent = whatsapp_ok
        inv.invited_at = datetime.utcnow()
        try:
            db.session.commit()
        except SQLAlchemyError:
            db.session.rollback()
            current_app.logger.exception('Failed to update invitee %s', inv.id)

    return {
        'emailsSent': emails_sent,
        'whatsappsSent': whatsapps_sent,
        'totalProcessed': len(invitees),
        'errors': errors,
    }
