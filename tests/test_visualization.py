from datetime import date

import pandas as pd

from finsync import visualization as viz
from finsync.goals import goal_progress_frame
from finsync.models import Goal


def test_goal_chart_caps_bar_width():
    progress = goal_progress_frame([
        Goal(title='Reserva', target_amount=10000, current_amount=8500, deadline=date(2030, 1, 1)),
        Goal(title='Viagem', target_amount=5000, current_amount=5200, deadline=date(2030, 1, 1)),
    ], date(2024, 1, 1))
    fig = viz.create_goal_progress_chart(progress)
    assert list(fig.data[0].x) == [85.0, 100.0]
    assert list(fig.data[0].text) == ["85.0%", "104.0%"]


def test_empty_inputs_give_placeholder_figure():
    fig = viz.create_category_spending_chart(pd.DataFrame())
    assert fig.layout.title.text == "No data to display"
    assert len(viz.create_monthly_chart(pd.DataFrame()).data) == 0
