"""Tests for the aggregate reports built from the completion ledger."""

from types import SimpleNamespace

from habittrack import reports
from habittrack.schemas import CategoryCompletion

from conftest import TODAY, days_ago, entry


def habit(habit_id, category):
    return SimpleNamespace(id=habit_id, category=category)


class TestRollingStreak:

    def test_empty_ledger(self):
        assert reports.rolling_streak([], TODAY) == 0

    def test_counts_from_yesterday_and_ignores_today(self):
        ledger = [entry(TODAY, False), entry(days_ago(1), True), entry(days_ago(2), True)]
        assert reports.rolling_streak(ledger, TODAY) == 2

    def test_day_with_any_incomplete_record_stops(self):
        ledger = [
            entry(days_ago(1), True, habit_id=1),
            entry(days_ago(1), True, habit_id=2),
            entry(days_ago(2), True, habit_id=1),
            entry(days_ago(2), False, habit_id=2),
            entry(days_ago(3), True, habit_id=1),
        ]
        assert reports.rolling_streak(ledger, TODAY) == 1

    def test_day_without_records_stops(self):
        ledger = [entry(days_ago(1), True), entry(days_ago(3), True)]
        assert reports.rolling_streak(ledger, TODAY) == 1

    def test_capped_at_window(self):
        ledger = [entry(days_ago(n), True) for n in range(1, 60)]
        assert reports.rolling_streak(ledger, TODAY) == 30
        assert reports.rolling_streak(ledger, TODAY, window=7) == 7


class TestCompletionRate:

    def test_empty_ledger(self):
        assert reports.completion_rate([], TODAY) == 0
        assert reports.overall_rate([]) == 0

    def test_three_of_four(self):
        ledger = [entry(days_ago(n), n != 2) for n in range(4)]
        assert reports.completion_rate(ledger, TODAY) == 75

    def test_window_is_inclusive_on_both_ends(self):
        ledger = [
            entry(TODAY, True),
            entry(days_ago(30), False),
            entry(days_ago(31), False),
        ]
        assert reports.completion_rate(ledger, TODAY) == 50

    def test_future_records_are_outside_the_window(self):
        ledger = [entry(days_ago(-1), False), entry(TODAY, True)]
        assert reports.completion_rate(ledger, TODAY) == 100

    def test_overall_rate_uses_every_record(self):
        ledger = [entry(days_ago(100), True), entry(days_ago(1), False), entry(TODAY, True)]
        assert reports.overall_rate(ledger) == 67


class TestCategoryCompletions:

    def test_two_health_habits(self):
        habits = [habit(1, "health"), habit(2, "health")]
        ledger = [
            entry(days_ago(1), True, habit_id=1),
            entry(days_ago(2), False, habit_id=1),
            entry(days_ago(1), True, habit_id=2),
            entry(days_ago(2), False, habit_id=2),
        ]
        result = reports.category_completions(habits, ledger)
        assert result == [CategoryCompletion(category="health", completion_rate=50, count=2)]

    def test_categories_without_habits_are_omitted(self):
        habits = [habit(1, "work"), habit(2, "fitness"), habit(3, "work")]
        ledger = [entry(TODAY, True, habit_id=2, category="fitness")]
        result = reports.category_completions(habits, ledger)
        assert [(c.category, c.completion_rate, c.count) for c in result] == [
            ("work", 0, 2),
            ("fitness", 100, 1),
        ]

    def test_no_habits(self):
        assert reports.category_completions([], []) == []


class TestDailySeries:

    def test_trailing_series_has_one_point_per_day(self):
        ledger = [entry(TODAY, True), entry(TODAY, False, habit_id=2), entry(days_ago(29), True)]
        series = reports.trailing_rates(ledger, TODAY)
        assert len(series) == 30
        assert series[0].date == "2024-04-16"
        assert series[0].rate == 100
        assert series[-1].date == "2024-05-15"
        assert series[-1].rate == 50
        assert all(point.rate == 0 for point in series[1:-1])

    def test_month_series_covers_whole_month(self):
        ledger = [entry(days_ago(n), True) for n in range(5)]
        series = reports.month_rates(ledger, 2024, 2)
        assert len(series) == 29
        assert all(point.rate == 0 for point in series)

        may = reports.month_rates(ledger, 2024, 5)
        assert len(may) == 31
        assert [p.rate for p in may[10:15]] == [100] * 5

    def test_empty_ledger_series(self):
        series = reports.trailing_rates([], TODAY, window=7)
        assert [p.rate for p in series] == [0] * 7


class TestBundles:

    def ledger(self):
        return [
            entry(days_ago(1), True, habit_id=1),
            entry(days_ago(1), True, habit_id=2, category="work"),
            entry(days_ago(2), True, habit_id=1),
            entry(days_ago(3), False, habit_id=2, category="work"),
        ]

    def test_stats_best_streak_equals_current(self):
        habits = [habit(1, "health"), habit(2, "work")]
        stats = reports.build_stats(habits, self.ledger(), TODAY)
        assert stats.current_streak == 2
        assert stats.best_streak == 2
        assert stats.completion_rate == 75
        assert stats.total_habits == 2

    def test_empty_stats(self):
        stats = reports.build_stats([], [], TODAY)
        assert stats.model_dump() == {
            "current_streak": 0,
            "completion_rate": 0,
            "total_habits": 0,
            "best_streak": 0,
        }

    def test_charts(self):
        habits = [habit(1, "health"), habit(2, "work")]
        charts = reports.build_charts(habits, self.ledger(), TODAY)
        assert charts.overall_completion_rate == 75
        assert len(charts.monthly_progress) == 30
        assert charts.monthly_progress[-2].completion_rate == 100
        assert [c.category for c in charts.category_completions] == ["health", "work"]

    def test_streak_history(self):
        history = reports.streak_history(self.ledger(), TODAY)
        assert len(history) == 30
        assert history[-1].streak == 2   # today: yesterday and the day before
        assert history[-2].streak == 1   # yesterday: only the day before
        assert history[-3].streak == 0   # two days ago: the day before was incomplete

    def test_reports_are_idempotent(self):
        habits = [habit(1, "health"), habit(2, "work")]
        ledger = self.ledger()
        first = reports.build_charts(habits, ledger, TODAY)
        second = reports.build_charts(habits, ledger, TODAY)
        assert first == second
        assert reports.build_stats(habits, ledger, TODAY) == reports.build_stats(habits, ledger, TODAY)

    def test_calendar(self):
        report = reports.build_calendar(self.ledger(), 2024, 5)
        assert report.month == "2024-05"
        assert len(report.days) == 31
