from datetime import date

import pytest

from finsync.goals import (
    STATUS_COMPLETED,
    STATUS_IN_PROGRESS,
    STATUS_OVERDUE,
    evaluate_goal,
    goal_progress_frame,
)
from finsync.models import Goal

TODAY = date(2024, 6, 1)


def test_partial_progress():
    result = evaluate_goal(Goal(title='Reserva', target_amount=10000, current_amount=8500, deadline=date(2024, 12, 31)), TODAY)
    assert result.progress == pytest.approx(85.0)
    assert not result.completed
    assert result.bar_width == pytest.approx(85.0)
    assert result.remaining == pytest.approx(1500.0)
    assert result.status == STATUS_IN_PROGRESS


def test_overshoot_is_completed_and_bar_capped():
    result = evaluate_goal(Goal(title='Viagem', target_amount=5000, current_amount=5200, deadline=date(2024, 12, 31)), TODAY)
    assert result.progress == pytest.approx(104.0)
    assert result.completed
    assert result.bar_width == 100.0
    assert result.remaining == 0.0


def test_zero_target_counts_as_completed():
    result = evaluate_goal(Goal(title='Nada', target_amount=0, current_amount=0, deadline=date(2024, 12, 31)), TODAY)
    assert result.completed
    assert result.progress == 100.0


def test_deadline_today_is_overdue():
    result = evaluate_goal(Goal(title='Curso', target_amount=1000, current_amount=100, deadline=TODAY), TODAY)
    assert result.days_left == 0
    assert result.overdue
    assert result.status == STATUS_OVERDUE


def test_completed_goal_is_never_overdue():
    result = evaluate_goal(Goal(title='Curso', target_amount=1000, current_amount=1000, deadline=date(2024, 1, 1)), TODAY)
    assert not result.overdue
    assert result.status == STATUS_COMPLETED


def test_goal_progress_frame():
    frame = goal_progress_frame([
        Goal(title='Reserva', target_amount=10000, current_amount=8500, deadline=date(2024, 12, 31), id='g1'),
        Goal(title='Curso', target_amount=1000, current_amount=100, deadline=date(2024, 5, 1), id='g2'),
    ], TODAY)
    assert list(frame['Goal']) == ['Reserva', 'Curso']
    assert list(frame['Status']) == [STATUS_IN_PROGRESS, STATUS_OVERDUE]
    assert frame.loc[1, 'Days Left'] == -31
    assert goal_progress_frame([], TODAY).empty
