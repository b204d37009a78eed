"""Goal progress evaluation."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Iterable, Optional

import pandas as pd

from .models import Goal

STATUS_COMPLETED = 'Completed'
STATUS_IN_PROGRESS = 'In Progress'
STATUS_OVERDUE = 'Overdue'


@dataclass(frozen=True)
class GoalProgress:
    goal: Goal
    progress: float  # percent, not capped
    completed: bool
    bar_width: float  # percent, capped at 100 for rendering
    remaining: float
    days_left: int
    overdue: bool

    @property
    def status(self) -> str:
        if self.completed:
            return STATUS_COMPLETED
        if self.overdue:
            return STATUS_OVERDUE
        return STATUS_IN_PROGRESS


def evaluate_goal(goal: Goal, today: Optional[date] = None) -> GoalProgress:
    """Compute progress, completion and time left for ``goal``.

    A goal with a zero target cannot be created through the forms; if one is
    loaded anyway it counts as completed rather than dividing by zero.
    """
    today = today or date.today()
    target = float(goal.target_amount or 0.0)
    current = float(goal.current_amount or 0.0)
    if target <= 0:
        progress = 100.0
    else:
        progress = current / target * 100.0
    completed = progress >= 100.0
    days_left = (goal.deadline - today).days
    return GoalProgress(
        goal=goal,
        progress=progress,
        completed=completed,
        bar_width=min(progress, 100.0),
        remaining=max(target - current, 0.0),
        days_left=days_left,
        overdue=not completed and days_left <= 0,
    )


def goal_progress_frame(goals: Iterable[Goal], today: Optional[date] = None) -> pd.DataFrame:
    """Tabulate :func:`evaluate_goal` for display."""
    rows = []
    for goal in goals:
        result = evaluate_goal(goal, today)
        rows.append({
            'id': goal.id,
            'Goal': goal.title,
            'Kind': goal.kind,
            'Target': goal.target_amount,
            'Current': goal.current_amount,
            'Remaining': result.remaining,
            'Progress': result.progress,
            'Deadline': goal.deadline,
            'Days Left': result.days_left,
            'Status': result.status,
        })
    return pd.DataFrame(rows, columns=[
        'id', 'Goal', 'Kind', 'Target', 'Current', 'Remaining',
        'Progress', 'Deadline', 'Days Left', 'Status',
    ])
