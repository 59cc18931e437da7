"""Per-stage scoring of submissions.

Scores are computed on every read from the current field weights and the
stored AI evaluations; nothing here touches the database.

Stage-specific rules:
- stage 2 option answers are binary: 1000 when the chosen option has a
  positive weight, otherwise 0.
- stage 3 rubric breakdowns sum each criterion's weighted ``result``;
  stages 1 and 2 sum the raw criterion ``score``.
"""
from numbers import Number
from typing import Any, Dict, Iterable

SCORED_STAGES = (1, 2, 3)
STAGE_2_CORRECT = 1000
RESERVED_EVAL_KEYS = ("error", "total")


def _is_number(v) -> bool:
    return isinstance(v, Number) and not isinstance(v, bool)


def resolve_field_weight(field, value, stage: int):
    """Numeric contribution of one option answer."""
    if getattr(field, 'is_ai_calculated', False):
        return 0
    if not getattr(field, 'has_weight', False) or value is None:
        return 0

    option = None
    for opt in field.option_list():
        # strict match on the stored value; admin-entered options are not trimmed
        if isinstance(opt, dict) and opt.get('value') == value:
            option = opt
            break
    if option is None:
        return 0

    weight = option.get('weight')
    if not _is_number(weight):
        return 0
    if stage == 2:
        return STAGE_2_CORRECT if weight > 0 else 0
    return weight


def is_flat_evaluation(evaluation) -> bool:
    return isinstance(evaluation, dict) and 'score' in evaluation and 'explanation' in evaluation


def breakdown_entries(evaluation) -> Dict[str, Any]:
    """Criterion entries of a rubric evaluation, or {} for flat/invalid ones."""
    if not isinstance(evaluation, dict) or is_flat_evaluation(evaluation):
        return {}
    return {k: v for k, v in evaluation.items() if k not in RESERVED_EVAL_KEYS}


def criterion_contribution(entry, stage: int):
    if not isinstance(entry, dict):
        return 0
    if stage == 3 and _is_number(entry.get('result')):
        return entry['result']
    score = entry.get('score')
    return score if _is_number(score) else 0


def ai_stage_score(evaluations: Dict[str, Any], stage: int):
    total = 0
    for record in (evaluations or {}).values():
        if not isinstance(record, dict):
            continue
        # flat {score, explanation} evaluations are displayed but not summed
        for entry in breakdown_entries(record.get('evaluation')).values():
            total += criterion_contribution(entry, stage)
    return total


def stage_score(submission, stage: int, fields: Iterable):
    if stage not in SCORED_STAGES:
        return 0
    answers = submission.answers_for(stage)
    total = 0
    for field in fields:
        if getattr(field, 'stage', None) != stage or getattr(field, 'is_ai_calculated', False):
            continue
        total += resolve_field_weight(field, answers.get(field.field_name), stage)
    total += ai_stage_score(submission.evaluations_for(stage), stage)
    return total


def total_score(submission, fields: Iterable):
    fields = list(fields)
    return sum(stage_score(submission, s, fields) for s in SCORED_STAGES)


def score_breakdown(submission, fields: Iterable) -> Dict[str, Any]:
    fields = list(fields)
    out = {f'stage_{s}': stage_score(submission, s, fields) for s in SCORED_STAGES}
    out['total'] = sum(out[f'stage_{s}'] for s in SCORED_STAGES)
    return out
