"""Tests for delivery date eligibility."""
from __future__ import annotations

from datetime import date, datetime, timedelta
from types import SimpleNamespace
from uuid import uuid4

import pytest

from beverage_portal.services.delivery_eligibility import (
    DEFAULT_ALLOWED_WEEKDAYS,
    MAX_LEAD_DAYS,
    DeliveryScheduleConfig,
    InvalidScheduleConfig,
    compute_eligible_dates,
    default_schedule,
    is_eligible_delivery_date,
    weekday_code,
)

MONDAY = date(2024, 6, 3)
SATURDAY = date(2024, 6, 8)
WEEKDAYS = {1, 2, 3, 4, 5}


def make_schedule(**overrides) -> DeliveryScheduleConfig:
    values = dict(
        restaurant_id=uuid4(),
        allowed_weekdays=WEEKDAYS,
        min_lead_days=1,
        max_lead_days=7,
        blocked_dates=[],
    )
    values.update(overrides)
    return DeliveryScheduleConfig(**values)


class TestWeekdayCode:
    """Weekday codes run 0=Sunday .. 6=Saturday."""

    def test_sunday_is_zero(self):
        assert weekday_code(date(2024, 6, 2)) == 0

    def test_monday_is_one(self):
        assert weekday_code(MONDAY) == 1

    def test_saturday_is_six(self):
        assert weekday_code(SATURDAY) == 6


class TestComputeEligibleDates:
    """Tests for compute_eligible_dates."""

    def test_weekdays_in_inclusive_window(self):
        """Monday reference, Mon-Fri, 1-7 days: Tue-Fri plus the following Monday."""
        dates = compute_eligible_dates(make_schedule(), MONDAY)

        assert dates == [
            "2024-06-04",
            "2024-06-05",
            "2024-06-06",
            "2024-06-07",
            "2024-06-10",
        ]

    def test_weekend_excluded(self):
        """A 1-6 day window from Monday yields exactly Tue-Fri."""
        dates = compute_eligible_dates(make_schedule(max_lead_days=6), MONDAY)

        assert dates == ["2024-06-04", "2024-06-05", "2024-06-06", "2024-06-07"]

    def test_blocked_date_removed(self):
        schedule = make_schedule(max_lead_days=6, blocked_dates=["2024-06-05"])

        dates = compute_eligible_dates(schedule, MONDAY)

        assert dates == ["2024-06-04", "2024-06-06", "2024-06-07"]

    def test_no_allowed_weekdays_gives_empty(self):
        schedule = make_schedule(allowed_weekdays=set(), max_lead_days=60)

        assert compute_eligible_dates(schedule, MONDAY) == []

    def test_same_day_on_saturday_with_weekdays_only(self):
        schedule = make_schedule(min_lead_days=0, max_lead_days=0)

        assert compute_eligible_dates(schedule, SATURDAY) == []

    def test_same_day_allowed(self):
        """min_lead_days=0 permits delivery today when today is allowed."""
        schedule = make_schedule(min_lead_days=0, max_lead_days=0)

        assert compute_eligible_dates(schedule, MONDAY) == ["2024-06-03"]

    def test_single_day_window(self):
        schedule = make_schedule(min_lead_days=3, max_lead_days=3)

        assert compute_eligible_dates(schedule, MONDAY) == ["2024-06-06"]

    def test_every_match_blocked_gives_empty(self):
        schedule = make_schedule(
            allowed_weekdays={2},
            max_lead_days=6,
            blocked_dates=["2024-06-04"],
        )

        assert compute_eligible_dates(schedule, MONDAY) == []

    def test_blocked_date_outside_window_has_no_effect(self):
        plain = make_schedule()
        blocked_elsewhere = make_schedule(blocked_dates=["2023-12-25", "2025-01-01"])

        assert compute_eligible_dates(blocked_elsewhere, MONDAY) == compute_eligible_dates(
            plain, MONDAY
        )

    def test_datetime_reference_drops_time_of_day(self):
        late_evening = datetime(2024, 6, 3, 23, 59)

        assert compute_eligible_dates(make_schedule(), late_evening) == compute_eligible_dates(
            make_schedule(), MONDAY
        )

    def test_result_properties(self):
        """Every result is in the window, on an allowed day, unblocked and ascending."""
        schedule = make_schedule(
            allowed_weekdays={0, 3, 6},
            min_lead_days=2,
            max_lead_days=40,
            blocked_dates=["2024-06-12", "2024-06-16"],
        )

        dates = compute_eligible_dates(schedule, MONDAY)
        parsed = [date.fromisoformat(d) for d in dates]

        assert dates == sorted(set(dates))
        for day in parsed:
            assert MONDAY + timedelta(days=2) <= day <= MONDAY + timedelta(days=40)
            assert weekday_code(day) in {0, 3, 6}
            assert day not in schedule.blocked_dates
        assert "2024-06-12" not in dates
        assert "2024-06-16" not in dates

    def test_repeated_calls_are_identical(self):
        schedule = make_schedule()

        assert compute_eligible_dates(schedule, MONDAY) == compute_eligible_dates(schedule, MONDAY)

    def test_maximum_window(self):
        schedule = make_schedule(
            allowed_weekdays=set(range(7)), min_lead_days=0, max_lead_days=MAX_LEAD_DAYS
        )

        dates = compute_eligible_dates(schedule, MONDAY)

        assert len(dates) == MAX_LEAD_DAYS + 1
        assert dates[0] == "2024-06-03"


class TestIsEligibleDeliveryDate:
    """Tests for is_eligible_delivery_date."""

    def test_accepts_eligible_date(self):
        assert is_eligible_delivery_date(make_schedule(), MONDAY, date(2024, 6, 4))

    def test_accepts_iso_string(self):
        assert is_eligible_delivery_date(make_schedule(), MONDAY, "2024-06-07")

    def test_rejects_weekend(self):
        assert not is_eligible_delivery_date(make_schedule(), MONDAY, date(2024, 6, 8))

    def test_rejects_date_before_lead_time(self):
        assert not is_eligible_delivery_date(make_schedule(), MONDAY, MONDAY)

    def test_accepts_datetime(self):
        assert is_eligible_delivery_date(make_schedule(), MONDAY, datetime(2024, 6, 4, 9))

    def test_malformed_delivery_date_names_its_field(self):
        with pytest.raises(InvalidScheduleConfig) as exc_info:
            is_eligible_delivery_date(make_schedule(), MONDAY, "2024-13-01")

        assert exc_info.value.field == "delivery_date"


class TestDeliveryScheduleConfig:
    """Validation when building a schedule."""

    def test_normalises_containers(self):
        schedule = make_schedule(allowed_weekdays=[5, 1, 1], blocked_dates=["2024-06-05"])

        assert schedule.allowed_weekdays == frozenset({1, 5})
        assert schedule.blocked_dates == frozenset({date(2024, 6, 5)})
        assert schedule.sorted_weekdays() == [1, 5]
        assert schedule.blocked_date_strings() == ["2024-06-05"]

    def test_min_greater_than_max_rejected(self):
        with pytest.raises(InvalidScheduleConfig) as exc_info:
            make_schedule(min_lead_days=5, max_lead_days=2)

        assert exc_info.value.field == "min_lead_days"

    def test_negative_lead_rejected(self):
        with pytest.raises(InvalidScheduleConfig) as exc_info:
            make_schedule(min_lead_days=-1)

        assert exc_info.value.field == "min_lead_days"

    def test_window_longer_than_limit_rejected(self):
        with pytest.raises(InvalidScheduleConfig) as exc_info:
            make_schedule(max_lead_days=MAX_LEAD_DAYS + 1)

        assert exc_info.value.field == "max_lead_days"

    def test_non_integer_lead_rejected(self):
        with pytest.raises(InvalidScheduleConfig):
            make_schedule(max_lead_days=7.5)

    def test_weekday_out_of_range_rejected(self):
        with pytest.raises(InvalidScheduleConfig) as exc_info:
            make_schedule(allowed_weekdays={1, 7})

        assert exc_info.value.field == "allowed_weekdays"

    def test_malformed_blocked_date_rejected(self):
        with pytest.raises(InvalidScheduleConfig) as exc_info:
            make_schedule(blocked_dates=["2024-02-30"])

        assert exc_info.value.field == "blocked_dates"

    def test_is_a_value_error(self):
        with pytest.raises(ValueError):
            make_schedule(min_lead_days=3, max_lead_days=1)

    def test_with_restaurant_rebinds_only_the_id(self):
        schedule = make_schedule(notes="Ring twice", is_active=False)
        other = uuid4()

        copy = schedule.with_restaurant(other)

        assert copy.restaurant_id == other
        assert copy.allowed_weekdays == schedule.allowed_weekdays
        assert copy.blocked_dates == schedule.blocked_dates
        assert copy.notes == "Ring twice"
        assert copy.is_active is False


class TestFromRecord:
    """Building a schedule from stored records."""

    def test_from_mapping(self):
        restaurant_id = uuid4()
        record = {
            "restaurant_id": str(restaurant_id),
            "allowed_weekdays": ["2", "4"],
            "min_lead_days": "2",
            "max_lead_days": 10,
            "blocked_dates": ["2024-06-06"],
            "is_active": True,
            "notes": None,
        }

        schedule = DeliveryScheduleConfig.from_record(record)

        assert schedule.restaurant_id == restaurant_id
        assert schedule.allowed_weekdays == frozenset({2, 4})
        assert schedule.min_lead_days == 2
        assert schedule.max_lead_days == 10
        assert schedule.blocked_dates == frozenset({date(2024, 6, 6)})
        assert schedule.notes == ""

    def test_legacy_field_names(self):
        record = {"allowed_days": [1, 3], "min_days_ahead": 1, "max_days_ahead": 5}

        schedule = DeliveryScheduleConfig.from_record(record)

        assert schedule.allowed_weekdays == frozenset({1, 3})
        assert (schedule.min_lead_days, schedule.max_lead_days) == (1, 5)

    def test_from_object(self):
        row = SimpleNamespace(
            restaurant_id=uuid4(),
            allowed_weekdays=[0, 6],
            min_lead_days=0,
            max_lead_days=3,
            blocked_dates=[],
            notes="weekends only",
            is_active=False,
        )

        schedule = DeliveryScheduleConfig.from_record(row)

        assert schedule.allowed_weekdays == frozenset({0, 6})
        assert schedule.is_active is False
        assert schedule.notes == "weekends only"

    def test_non_numeric_values_rejected(self):
        with pytest.raises(InvalidScheduleConfig):
            DeliveryScheduleConfig.from_record({"allowed_weekdays": ["monday"]})

    def test_bad_restaurant_id_rejected(self):
        with pytest.raises(InvalidScheduleConfig) as exc_info:
            DeliveryScheduleConfig.from_record({"restaurant_id": "not-a-uuid"})

        assert exc_info.value.field == "restaurant_id"


class TestDefaultSchedule:
    def test_weekdays_one_to_fourteen_days(self):
        restaurant_id = uuid4()

        schedule = default_schedule(restaurant_id)

        assert schedule.restaurant_id == restaurant_id
        assert schedule.allowed_weekdays == DEFAULT_ALLOWED_WEEKDAYS
        assert (schedule.min_lead_days, schedule.max_lead_days) == (1, 14)
        assert schedule.blocked_dates == frozenset()
        assert schedule.is_active is True
