import os
import sys

sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from app.models.form_field import FormField
from app.models.submission import Submission
from app.services.scoring import (
    resolve_field_weight, ai_stage_score, stage_score, score_breakdown,
)

OPTIONS = [
    {'value': 'a', 'label': 'A', 'weight': 10},
    {'value': 'b', 'label': 'B', 'weight': 0},
    {'value': 'c', 'label': 'C', 'weight': -5},
]


def weighted(name, stage, options=OPTIONS, **kw):
    return FormField(field_name=name, label=name, field_type='radio', stage=stage,
                     options=options, has_weight=True, is_ai_calculated=False, **kw)


def ai_record(evaluation):
    return {'field_name': 'essay', 'user_answer': '...', 'evaluation': evaluation}


def test_stage_1_weight_is_the_option_weight():
    field = weighted('q1', 1)
    assert resolve_field_weight(field, 'a', 1) == 10
    assert resolve_field_weight(field, 'c', 1) == -5


def test_stage_2_weight_is_binary():
    field = weighted('q1', 2)
    assert resolve_field_weight(field, 'a', 2) == 1000
    assert resolve_field_weight(field, 'b', 2) == 0
    assert resolve_field_weight(field, 'c', 2) == 0


def test_unmatched_or_missing_answer_scores_zero():
    field = weighted('q1', 1)
    assert resolve_field_weight(field, 'zzz', 1) == 0
    assert resolve_field_weight(field, None, 1) == 0
    # option values are matched exactly
    assert resolve_field_weight(field, ' a', 1) == 0


def test_unweighted_and_ai_fields_score_zero():
    plain = FormField(field_name='q', stage=1, options=OPTIONS, has_weight=False)
    assert resolve_field_weight(plain, 'a', 1) == 0
    ai_field = FormField(field_name='q', stage=1, options=OPTIONS, has_weight=True, is_ai_calculated=True)
    assert resolve_field_weight(ai_field, 'a', 1) == 0


def test_options_wrapped_in_object_and_non_numeric_weights():
    field = weighted('q1', 1, options={'options': [{'value': 'a', 'weight': 7},
                                                   {'value': 'b', 'weight': '7'},
                                                   {'value': 'c', 'weight': True}]})
    assert resolve_field_weight(field, 'a', 1) == 7
    assert resolve_field_weight(field, 'b', 1) == 0
    assert resolve_field_weight(field, 'c', 1) == 0


def test_breakdown_sums_scores_on_stage_1_and_results_on_stage_3():
    evaluation = {
        'clarity': {'score': 4, 'scale': 5, 'weight': 0.5, 'result': 20},
        'depth': {'score': 3, 'scale': 5, 'weight': 0.5, 'result': 15},
    }
    evaluations = {'Essay': ai_record(evaluation)}
    assert ai_stage_score(evaluations, 1) == 7
    assert ai_stage_score(evaluations, 2) == 7
    assert ai_stage_score(evaluations, 3) == 35


def test_stage_3_falls_back_to_score_without_result():
    evaluations = {'Essay': ai_record({'clarity': {'score': 4}, 'depth': {'score': 2, 'result': 9}})}
    assert ai_stage_score(evaluations, 3) == 13


def test_flat_and_failed_evaluations_do_not_count():
    evaluations = {
        'Flat': ai_record({'score': 800, 'explanation': 'good'}),
        'Failed': ai_record({'score': 0, 'explanation': 'Evaluation failed', 'error': True}),
        'Junk': 'not a record',
        'Reserved': ai_record({'total': {'score': 99}, 'error': {'score': 1}, 'x': {'score': 2}}),
    }
    assert ai_stage_score(evaluations, 1) == 2


def test_score_breakdown_adds_up_every_stage():
    fields = [weighted('q1', 1), weighted('q2', 2), weighted('q3', 3)]
    sub = Submission(
        user_email='a@example.com', stage=3,
        data={'q1': 'a'},
        data_stage_2={'q2': 'a'},
        data_stage_3={'q3': 'c'},
        ai_evaluations={'Essay': ai_record({'clarity': {'score': 5}})},
        ai_evaluations_stage_3={'Essay': ai_record({'clarity': {'score': 5, 'result': 40}})},
    )
    out = score_breakdown(sub, fields)
    assert out == {'stage_1': 15, 'stage_2': 1000, 'stage_3': 35, 'total': 1050}


def test_fields_of_other_stages_are_ignored():
    fields = [weighted('q1', 2)]
    sub = Submission(user_email='a@example.com', data={'q1': 'a'})
    assert stage_score(sub, 1, fields) == 0
    assert stage_score(sub, 4, fields) == 0


def test_criterion_named_score_still_counts():
    evaluations = {'Essay': ai_record({'score': {'score': 4}, 'clarity': {'score': 3}})}
    assert ai_stage_score(evaluations, 1) == 7


def test_stage_score_is_stable_across_reads():
    fields = [weighted('q1', 1)]
    sub = Submission(user_email='a@example.com', data={'q1': 'a'},
                     ai_evaluations={'Essay': ai_record({'clarity': {'score': 5}})})
    first = stage_score(sub, 1, fields)
    assert first == 15
    assert stage_score(sub, 1, fields) == first
    assert sub.data == {'q1': 'a'}
