import os
import re
import sys

sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from app.models import Invitee, User
from app.extensions import db
from app.services.otp_store import MemoryOTPStore, MISSING, MISMATCH, OK
from conftest import make_submission


def sent_code(outbox):
    return re.search(r"\d{6}", outbox.emails[-1]['content']).group(0)


def test_memory_store_expiry_and_single_use():
    now = [1000.0]
    store = MemoryOTPStore(clock=lambda: now[0])
    store.put('a@example.com', '123456', 600)
    assert store.take_if_valid('a@example.com', '000000') == MISMATCH
    assert store.take_if_valid('a@example.com', '123456') == OK
    assert store.take_if_valid('a@example.com', '123456') == MISSING

    store.put('a@example.com', '123456', 600)
    now[0] += 601
    assert store.take_if_valid('a@example.com', '123456') == MISSING


def test_send_otp_requires_known_email(client, outbox):
    assert client.post('/api/send-otp', json={}).status_code == 400
    resp = client.post('/api/send-otp', json={'email': 'nobody@example.com'})
    assert resp.status_code == 404
    assert outbox.emails == []


def test_login_with_otp(client, outbox):
    db.session.add(Invitee(name='Sara', email='Sara@Example.com'))
    db.session.commit()

    resp = client.post('/api/send-otp', json={'email': '  SARA@example.com '})
    assert resp.status_code == 200
    assert outbox.emails[0]['to'] == 'sara@example.com'
    code = sent_code(outbox)

    wrong = '000000' if code != '000000' else '111111'
    resp = client.post('/api/verify-otp', json={'email': 'sara@example.com', 'otp': wrong})
    assert resp.status_code == 400
    assert resp.get_json()['error'] == 'Invalid OTP'

    resp = client.post('/api/verify-otp', json={'email': 'sara@example.com', 'otp': code})
    assert resp.status_code == 200
    assert resp.get_json()['redirect_to'] == 'https://apply.example.test'
    assert User.query.filter_by(email='sara@example.com').one().role == 'applicant'

    me = client.get('/auth/me')
    assert me.status_code == 200
    assert me.get_json()['is_admin'] is False

    resp = client.post('/api/verify-otp', json={'email': 'sara@example.com', 'otp': code})
    assert resp.status_code == 400
    assert resp.get_json()['error'] == 'OTP expired or not found'


def test_existing_submission_can_request_code(client, outbox):
    make_submission('old@example.com')
    assert client.post('/api/send-otp', json={'email': 'old@example.com'}).status_code == 200
    assert client.post('/api/verify-otp', json={'email': 'old@example.com'}).status_code == 400


def test_mail_failure_surfaces_as_502(client, outbox):
    make_submission('old@example.com')
    outbox.fail_emails.add('old@example.com')
    resp = client.post('/api/send-otp', json={'email': 'old@example.com'})
    assert resp.status_code == 502
