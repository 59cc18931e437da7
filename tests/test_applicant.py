import os
import sys

sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from app.extensions import db
from app.models import FormField, Invitee, StageSetting, Submission
from conftest import make_submission


def add_fields():
    db.session.add_all([
        FormField(field_name='fullName', label='الاسم', field_type='text', stage=1,
                  is_required=True, display_order=0, validation_rules={'minLength': 3}),
        FormField(field_name='phoneNumber', label='الجوال', field_type='tel', stage=1,
                  is_required=True, display_order=1, validation_rules={'pattern': '^05'}),
        FormField(field_name='email', label='البريد', field_type='email', stage=1, display_order=2),
        FormField(field_name='essay', label='Essay', field_type='textarea', stage=1, display_order=3,
                  is_ai_calculated=True, question_title='Motivation', ai_prompt={'instruction': 'Rate'}),
        FormField(field_name='q2', label='Q2', field_type='radio', stage=2, is_required=True,
                  options=[{'value': 'a', 'label': 'A', 'weight': 1}], has_weight=True),
    ])
    db.session.commit()


VALID = {'fullName': 'Sara Ali', 'phoneNumber': '+966 50 123 4567', 'email': 'sara@registration.org',
         'essay': 'I want to lead.'}


def test_state_and_fields_for_new_applicant(applicant_client):
    add_fields()
    state = applicant_client.get('/apply/state').get_json()
    assert state == {'stage': 1, 'submitted': False, 'is_open': True, 'settings': None}
    fields = applicant_client.get('/apply/fields').get_json()['fields']
    assert [f['field_name'] for f in fields] == ['fullName', 'phoneNumber', 'email', 'essay']


def test_wizard_requires_login(client):
    assert client.get('/apply/state').status_code == 401


def test_first_submit_creates_submission_and_runs_evaluation(applicant_client, monkeypatch):
    add_fields()
    db.session.add(Invitee(name='Sara', email='applicant@example.com', channel='university', note='referral'))
    db.session.commit()
    calls = []

    def fake_evaluate(prompt_spec, answer):
        calls.append(answer)
        return {'Vision': {'score': 8}}

    monkeypatch.setattr('app.jobs.evaluate.evaluate_answer', fake_evaluate)
    resp = applicant_client.post('/apply/submit', json={'data': VALID})
    assert resp.status_code == 200

    sub = Submission.query.filter_by(user_email='applicant@example.com').one()
    assert sub.stage == 1
    assert sub.channel == 'university'
    assert sub.note == 'referral'
    assert sub.data['fullName'] == 'Sara Ali'
    assert calls == ['I want to lead.']
    assert sub.ai_evaluations['Motivation']['evaluation'] == {'Vision': {'score': 8}}

    again = applicant_client.post('/apply/submit', json={'data': VALID})
    assert again.status_code == 400
    assert applicant_client.get('/apply/state').get_json()['submitted'] is True


def test_evaluation_failure_does_not_fail_submit(applicant_client, monkeypatch):
    add_fields()

    def broken(submission_id, stage=1, form_data=None):
        raise RuntimeError('redis down')

    monkeypatch.setattr('app.blueprints.applicant.routes.evaluate_submission', broken)
    resp = applicant_client.post('/apply/submit', json={'data': VALID})
    assert resp.status_code == 200
    assert Submission.query.count() == 1


def test_validation_messages(applicant_client):
    add_fields()
    bad = {'fullName': 'Sa', 'phoneNumber': '05123', 'email': 'not-an-email'}
    resp = applicant_client.post('/apply/submit', json={'data': bad})
    assert resp.status_code == 400
    fields = resp.get_json()['fields']
    assert set(fields) == {'fullName', 'phoneNumber', 'email'}
    assert 'الاسم' in fields['fullName']
    assert fields['phoneNumber'] == 'رقم الجوال يجب أن يحتوي على 10 أرقام على الأقل'
    assert Submission.query.count() == 0


def test_numeric_answers_to_text_fields_are_rejected(applicant_client):
    add_fields()
    resp = applicant_client.post('/apply/submit', json={'data': dict(VALID, phoneNumber=501234567)})
    assert resp.status_code == 400
    assert resp.get_json()['fields'] == {'phoneNumber': 'الجوال غير صحيح'}
    assert Submission.query.count() == 0


def test_later_stage_is_written_once(applicant_client):
    add_fields()
    make_submission('applicant@example.com', stage=2, data={'fullName': 'Sara'})
    assert applicant_client.post('/apply/submit', json={'data': {'q2': 'a'}}).status_code == 200
    sub = Submission.query.filter_by(user_email='applicant@example.com').one()
    assert sub.data_stage_2 == {'q2': 'a'}
    assert sub.data == {'fullName': 'Sara'}
    assert applicant_client.post('/apply/submit', json={'data': {'q2': 'a'}}).status_code == 400


def test_closed_stage_rejects_submissions(applicant_client):
    add_fields()
    db.session.add(StageSetting(stage=1, status='closed'))
    db.session.commit()
    resp = applicant_client.post('/apply/submit', json={'data': VALID})
    assert resp.status_code == 400
    assert resp.get_json()['error'] == 'This stage is closed'


def test_confirmation(applicant_client):
    sub = make_submission('applicant@example.com', stage=3)
    assert applicant_client.post('/apply/confirm').status_code == 400
    sub.stage = 4
    db.session.commit()
    resp = applicant_client.post('/apply/confirm')
    assert resp.get_json() == {'success': True, 'stage': 5}
    assert applicant_client.post('/apply/submit', json={'data': {'x': 'y'}}).status_code == 400
