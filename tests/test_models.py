"""
Entity model tests: ids, ISO week helpers, total package.
"""

from datetime import date

import pytest

from kpi_tracker.models import compute_total_package, iso_week, new_id, week_start
from tests.conftest import make_weekly_entry


class TestWeekHelpers:
    """Tests for ISO week strings."""

    def test_iso_week_is_zero_padded(self):
        """Test single-digit weeks are padded."""
        assert iso_week(date(2024, 3, 1)) == "2024-W09"

    def test_iso_week_uses_iso_year(self):
        """Test dates early in January can belong to the previous ISO year."""
        assert iso_week(date(2021, 1, 3)) == "2020-W53"

    def test_week_start_is_monday(self):
        """Test week_start returns the Monday of the week."""
        monday = week_start("2024-W10")
        assert monday == date(2024, 3, 4)
        assert monday.weekday() == 0

    def test_week_start_round_trips(self):
        """Test iso_week(week_start(w)) == w."""
        assert iso_week(week_start("2026-W01")) == "2026-W01"

    @pytest.mark.parametrize("bad", ["2024-10", "W10", "2024-W1", ""])
    def test_week_start_rejects_malformed(self, bad):
        """Test malformed week strings raise ValueError."""
        with pytest.raises(ValueError):
            week_start(bad)


class TestEntityHelpers:
    """Tests for id generation and derived values."""

    def test_new_ids_are_unique(self):
        """Test generated ids do not repeat."""
        assert len({new_id() for _ in range(100)}) == 100

    def test_total_package(self):
        """Test salary plus superannuation."""
        assert compute_total_package(100_000, 11.5) == pytest.approx(111_500)
        assert compute_total_package(80_000, 0) == 80_000

    def test_weekly_entry_value_for(self):
        """Test lookup of a bundled KPI value."""
        entry = make_weekly_entry()
        assert entry.value_for("kpi-1") == 42.0
        assert entry.value_for("missing") is None
