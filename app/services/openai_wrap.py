"""Lightweight wrapper around the OpenAI Chat Completions API for answer evaluation.

We call the HTTP API directly with `requests` instead of depending on the
`openai` SDK. Every failure is converted into an error evaluation so the
submission flow never breaks because of the evaluator.
"""

from flask import current_app
import requests
import json
import time
from typing import Dict, Any, List


def build_prompt_text(prompt_spec: Dict[str, Any]) -> str:
    """Flatten an admin-authored prompt (instruction, context, rubric, examples) into text."""
    text = prompt_spec.get('instruction') or ''

    if prompt_spec.get('context'):
        text += f"\n\nContext: {prompt_spec['context']}"

    rows = rubric_rows(prompt_spec)
    if rows:
        headers = ' | '.join((prompt_spec.get('rubric') or {}).get('headers') or [])
        text += "\n\nEvaluation Rubric:"
        text += f"\n{headers}"
        text += "\n" + "-" * len(headers)
        for cells in rows:
            row_text = ' | '.join(cells)
            if row_text.strip():
                text += f"\n{row_text}"

    if prompt_spec.get('examples'):
        text += f"\n\nExamples: {prompt_spec['examples']}"

    return text


def rubric_rows(prompt_spec: Dict[str, Any]) -> List[List[str]]:
    rubric = prompt_spec.get('rubric') or {}
    out = []
    for row in rubric.get('rows') or []:
        cells = [str(c.get('value', '')) for c in (row.get('cells') or []) if isinstance(c, dict)]
        if any(v.strip() for v in cells):
            out.append(cells)
    return out


def build_system_instruction(prompt_spec: Dict[str, Any]) -> str:
    rows = rubric_rows(prompt_spec)
    if not rows:
        return ("You are an expert evaluator. Respond with valid JSON containing "
                "'score' (number from 0 to 1000) and 'explanation' (string) fields.")

    criteria = [cells[0].strip() for cells in rows if cells and cells[0].strip()]
    lines = [
        "You are an expert evaluator. Respond with a single valid JSON object.",
        "Evaluate the answer against each rubric criterion separately and return one key per criterion:",
    ]
    lines += [f"- {c}" for c in criteria]
    lines += [
        "Each criterion value must be an object with these fields:",
        "- score: number on the criterion's own scale as described in its rubric row",
        "- scale: the maximum value of that scale (number)",
        "- explanation: a short explanation in Arabic, fewer than 20 words",
        "- weight: the criterion weight from the rubric row as a fraction (e.g. 0.25)",
        "- result: score * weight * 10",
        "Do not add any other top-level keys.",
    ]
    return "\n".join(lines)


def _chat_completion(messages: List[Dict[str, str]]) -> str:
    """Single Chat Completions call in JSON mode; returns the message content."""
    cfg = current_app.config
    url = cfg.get('OPENAI_API_BASE', 'https://api.openai.com/v1').rstrip('/') + '/chat/completions'
    headers = {'Authorization': f"Bearer {cfg.get('OPENAI_API_KEY')}", 'Content-Type': 'application/json'}
    body = {
        'model': cfg.get('OPENAI_MODEL', 'gpt-4o-mini'),
        'temperature': 0.15,
        'response_format': {'type': 'json_object'},
        'messages': messages,
    }
    r = requests.post(url, headers=headers, json=body, timeout=60)
    r.raise_for_status()
    jr = r.json()
    choices = jr.get('choices') or []
    content = (choices[0].get('message') or {}).get('content') if choices else None
    if not content:
        raise ValueError('Empty response from OpenAI')
    return content


def error_evaluation(message: str) -> Dict[str, Any]:
    return {'score': 0, 'explanation': message, 'error': True}


def evaluate_answer(prompt_spec: Dict[str, Any], user_answer: str) -> Dict[str, Any]:
    """Evaluate one free-text answer against an AI prompt spec.

    Returns the parsed JSON from the model unmodified, or an error
    evaluation ``{score: 0, explanation, error: True}`` after the last
    failed attempt. Provider and parse failures never raise.
    """
    cfg = current_app.config
    if not cfg.get('OPENAI_API_KEY'):
        current_app.logger.warning('OPENAI_API_KEY not configured; skipping AI evaluation')
        return error_evaluation('Evaluation skipped: OPENAI_API_KEY is not configured')

    messages = [
        {'role': 'system', 'content': build_system_instruction(prompt_spec)},
        {'role': 'user', 'content': f"{build_prompt_text(prompt_spec)}\n\nUser's Answer: {user_answer}\n\nProvide your evaluation as JSON."},
    ]

    retries = int(cfg.get('AI_MAX_ATTEMPTS', 3))
    delay = float(cfg.get('AI_RETRY_DELAY_SEC', 1.0))
    last_error = None
    for attempt in range(1, retries + 1):
        try:
            content = _chat_completion(messages)
            return json.loads(content)
        except Exception as e:
            last_error = e
            current_app.logger.warning(f'Evaluation attempt {attempt}/{retries} failed: {e}')
            if attempt < retries:
                # linear backoff
                time.sleep(delay * attempt)

    return error_evaluation(f'Evaluation failed after {retries} attempts: {last_error}')
