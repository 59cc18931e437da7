import os
import sys

sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

import pytest
from flask import g

from app import create_app
from app.errors import ExternalServiceError
from app.extensions import db
from app.models import Admin, Submission, User
from config import Config


class TestConfig(Config):
    TESTING = True
    SECRET_KEY = 'test'
    SQLALCHEMY_DATABASE_URI = 'sqlite:///:memory:'
    RQ_SYNC = True
    OTP_STORE = 'memory'
    OTP_TTL_SEC = 600
    OPENAI_API_KEY = 'test-openai-key'
    AI_MAX_ATTEMPTS = 3
    AI_RETRY_DELAY_SEC = 0
    SENDGRID_API_KEY = 'test-sendgrid-key'
    WHATSAPP_API = 'https://wa.example.test/send'
    WHATSAPP_API_TOKEN = 'wa-token'
    WHATSAPP_SENDER_ID = 'wa-sender'
    SITE_URL = 'https://apply.example.test'
    STAGE_BATCH_SIZE = 50
    STAGE_BATCH_DELAY_SEC = 0


@pytest.fixture
def app():
    app = create_app(TestConfig)
    with app.app_context():
        db.create_all()
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


class Outbox:
    """Records provider calls made through the mail and WhatsApp modules."""

    def __init__(self):
        self.emails = []
        self.whatsapps = []
        self.fail_emails = set()
        self.fail_phones = set()

    def send_email(self, to, subject, content):
        if to in self.fail_emails:
            raise ExternalServiceError('SendGrid returned 500')
        self.emails.append({'to': to, 'subject': subject, 'content': content})
        return 202, {}

    def send_template(self, phone, template, param_1=None, param_2=None, image=None,
                      url_button=None, button_text=None):
        if phone in self.fail_phones:
            raise ExternalServiceError('Invalid number')
        self.whatsapps.append({'phone': phone, 'template': template, 'param_1': param_1,
                               'param_2': param_2, 'image': image, 'url_button': url_button})
        return {'status': 'sent'}


@pytest.fixture
def outbox(monkeypatch):
    box = Outbox()
    monkeypatch.setattr('app.services.mail.send_email', box.send_email)
    monkeypatch.setattr('app.services.whatsapp.send_template', box.send_template)
    return box


def make_submission(email, stage=1, decision='auto', name=None, phone=None, gender=None, **columns):
    data = columns.pop('data', None) or {}
    if name:
        data['fullName'] = name
    if phone:
        data['phoneNumber'] = phone
    if gender:
        data['gender'] = gender
    sub = Submission(user_email=email, stage=stage, filtering_decision=decision, data=data, **columns)
    db.session.add(sub)
    db.session.commit()
    return sub


def login(client, user):
    with client.session_transaction() as sess:
        sess['_user_id'] = str(user.id)
        sess['_fresh'] = True
    # The app fixture keeps one app context open, so drop any user Flask-Login cached on g.
    g.pop('_login_user', None)


@pytest.fixture
def admin_user(app):
    user = User(email='admin@registration.org', role='admin')
    user.set_password('correct-horse')
    db.session.add(user)
    db.session.add(Admin(email='admin@registration.org'))
    db.session.commit()
    return user


@pytest.fixture
def admin_client(client, admin_user):
    login(client, admin_user)
    return client


@pytest.fixture
def applicant(app):
    user = User(email='applicant@example.com', role='applicant')
    db.session.add(user)
    db.session.commit()
    return user


@pytest.fixture
def applicant_client(client, applicant):
    login(client, applicant)
    return client
