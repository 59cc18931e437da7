import json
import os
import sys

sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from app.services import openai_wrap

PROMPT = {
    'instruction': 'Evaluate the motivation letter.',
    'context': 'Leadership programme',
    'rubric': {
        'headers': ['Criterion', 'Description', 'Weight'],
        'rows': [
            {'cells': [{'value': 'Clarity'}, {'value': 'Clear writing'}, {'value': '50%'}]},
            {'cells': [{'value': 'Depth'}, {'value': 'Concrete examples'}, {'value': '50%'}]},
            {'cells': [{'value': ''}, {'value': ' '}, {'value': ''}]},
        ],
    },
}


def test_prompt_text_includes_rubric_rows():
    text = openai_wrap.build_prompt_text(PROMPT)
    assert text.startswith('Evaluate the motivation letter.')
    assert 'Context: Leadership programme' in text
    assert 'Criterion | Description | Weight' in text
    assert 'Clarity | Clear writing | 50%' in text
    assert len(openai_wrap.rubric_rows(PROMPT)) == 2


def test_system_instruction_lists_criteria_or_flat_format():
    system = openai_wrap.build_system_instruction(PROMPT)
    assert '- Clarity' in system and '- Depth' in system
    flat = openai_wrap.build_system_instruction({'instruction': 'x'})
    assert "'score'" in flat and "'explanation'" in flat


def test_returns_model_json_unmodified(app, monkeypatch):
    payload = {'Clarity': {'score': 4, 'scale': 5, 'weight': 0.5, 'result': 20}}
    monkeypatch.setattr('app.services.openai_wrap._chat_completion', lambda messages: json.dumps(payload))
    assert openai_wrap.evaluate_answer(PROMPT, 'my answer') == payload


def test_retries_then_succeeds(app, monkeypatch):
    attempts = []

    def flaky(messages):
        attempts.append(messages)
        if len(attempts) < 3:
            raise ValueError('Empty response from OpenAI')
        return '{"score": 700, "explanation": "ok"}'

    monkeypatch.setattr('app.services.openai_wrap._chat_completion', flaky)
    out = openai_wrap.evaluate_answer(PROMPT, 'answer')
    assert out == {'score': 700, 'explanation': 'ok'}
    assert len(attempts) == 3
    assert "User's Answer: answer" in attempts[0][1]['content']


def test_gives_up_after_max_attempts_with_linear_backoff(app, monkeypatch):
    sleeps = []
    app.config['AI_RETRY_DELAY_SEC'] = 1.0
    monkeypatch.setattr('app.services.openai_wrap.time.sleep', sleeps.append)
    monkeypatch.setattr('app.services.openai_wrap._chat_completion', lambda m: 'not json')

    out = openai_wrap.evaluate_answer(PROMPT, 'answer')
    assert out['score'] == 0
    assert out['error'] is True
    assert out['explanation'].startswith('Evaluation failed after 3 attempts')
    assert sleeps == [1.0, 2.0]


def test_missing_api_key_skips_the_call(app, monkeypatch):
    app.config['OPENAI_API_KEY'] = None

    def must_not_call(messages):
        raise AssertionError('called')

    monkeypatch.setattr('app.services.openai_wrap._chat_completion', must_not_call)
    out = openai_wrap.evaluate_answer(PROMPT, 'answer')
    assert out['error'] is True
