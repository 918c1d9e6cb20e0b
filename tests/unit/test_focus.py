"""Tests for next-focus recommendations."""

import pytest

from tests.unit.fakes import NOW, ago, make_thread
from threads_tree.core.focus import TEMPERATURE_SCORES, explain_score, recommend, score_thread
from threads_tree.core.temperature import TEMPERATURE_ORDER
from threads_tree.models.entity import ProgressEntry


def test_temperature_scores_follow_temperature_order() -> None:
    assert [TEMPERATURE_SCORES[t] for t in TEMPERATURE_ORDER] == [5, 4, 3, 2, 1, 0]


def test_fresh_important_thread_scores_highest_possible() -> None:
    scored = score_thread(make_thread("t", importance=5, updated_at=ago(0)), NOW)
    assert scored.total == pytest.approx(30)
    assert (scored.importance, scored.temperature) == (5, 5)


def test_week_old_thread() -> None:
    scored = score_thread(make_thread("t", importance=3, updated_at=ago(7)), NOW)
    assert scored.recency == pytest.approx(2.5)
    assert scored.total == pytest.approx(9 + 6 + 2.5)


def test_recent_progress_counts_as_activity() -> None:
    thread = make_thread(
        "t",
        updated_at=ago(14),
        progress=(ProgressEntry(id="p", timestamp=ago(0), note="back on it"),),
    )
    scored = score_thread(thread, NOW)
    assert scored.temperature == 2
    assert scored.recency == pytest.approx(5)


def test_recommend_keeps_active_threads_best_first() -> None:
    threads = [
        make_thread("low", importance=1, updated_at=ago(20)),
        make_thread("paused", importance=5, status="paused"),
        make_thread("high", importance=5),
        make_thread("mid", importance=3),
    ]
    assert [s.thread.id for s in recommend(threads, now=NOW)] == ["high", "mid", "low"]
    assert [s.thread.id for s in recommend(threads, count=1, now=NOW)] == ["high"]


def test_explain_score() -> None:
    scored = score_thread(make_thread("t", importance=3, updated_at=ago(7)), NOW)
    assert explain_score(scored) == "importance=3*3 + temp=3*2 + recency=2.50*1"
