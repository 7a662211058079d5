"""
Delivery date eligibility for restaurant orders.

Given a restaurant's delivery rules and a reference "today", produce the
ordered list of calendar dates on which that restaurant may request a
delivery:

1. Window = [today + min_lead_days, today + max_lead_days], inclusive.
2. Walk every date in the window in ascending order.
3. Keep a date when its weekday is allowed and it is not blocked.

Weekday codes follow the ordering UI: 0=Sunday, 1=Monday ... 6=Saturday.
An empty result is a normal outcome ("no delivery currently possible").
"""
from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import date, datetime, timedelta
from typing import Any, FrozenSet, Iterable, List, Mapping, Optional, Union
from uuid import UUID

# Upper bound on the lead window; keeps the date walk bounded.
MAX_LEAD_DAYS = 366

DEFAULT_ALLOWED_WEEKDAYS = frozenset({1, 2, 3, 4, 5})  # Mon-Fri
DEFAULT_MIN_LEAD_DAYS = 1
DEFAULT_MAX_LEAD_DAYS = 14


class InvalidScheduleConfig(ValueError):
    """Raised when delivery rules violate their invariants."""

    def __init__(self, message: str, field: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.field = field


@dataclass(frozen=True)
class DeliveryScheduleConfig:
    """
    Validated delivery rules for one restaurant.

    Built once at the store boundary; the calculator only ever sees
    instances that already satisfy 0 <= min_lead_days <= max_lead_days,
    weekday codes in [0, 6] and parsed blocked dates.
    """

    restaurant_id: Optional[UUID]
    allowed_weekdays: FrozenSet[int]
    min_lead_days: int
    max_lead_days: int
    blocked_dates: FrozenSet[date] = field(default_factory=frozenset)
    is_active: bool = True
    notes: str = ""

    def __post_init__(self) -> None:
        # Normalise containers so callers may pass lists or sets
        object.__setattr__(self, "allowed_weekdays", frozenset(self.allowed_weekdays))
        object.__setattr__(
            self, "blocked_dates", frozenset(_parse_dates(self.blocked_dates))
        )
        object.__setattr__(self, "notes", self.notes or "")
        self._validate()

    def _validate(self) -> None:
        for name in ("min_lead_days", "max_lead_days"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int):
                raise InvalidScheduleConfig(f"{name} must be an integer", field=name)
            if value < 0:
                raise InvalidScheduleConfig(f"{name} must not be negative", field=name)

        if self.min_lead_days > self.max_lead_days:
            raise InvalidScheduleConfig(
                f"min_lead_days ({self.min_lead_days}) is greater than "
                f"max_lead_days ({self.max_lead_days})",
                field="min_lead_days",
            )
        if self.max_lead_days > MAX_LEAD_DAYS:
            raise InvalidScheduleConfig(
                f"max_lead_days must be at most {MAX_LEAD_DAYS}", field="max_lead_days"
            )

        for day in self.allowed_weekdays:
            if isinstance(day, bool) or not isinstance(day, int) or not 0 <= day <= 6:
                raise InvalidScheduleConfig(
                    f"weekday code {day!r} is outside 0-6", field="allowed_weekdays"
                )

    @classmethod
    def from_record(cls, record: Union[Mapping[str, Any], Any]) -> "DeliveryScheduleConfig":
        """
        Build from a loosely typed stored record (dict or ORM row).

        Accepts both the current column names and the legacy ones
        (allowed_days, min_days_ahead, max_days_ahead).
        """
        get = record.get if isinstance(record, Mapping) else (
            lambda key, default=None: getattr(record, key, default)
        )

        def pick(*keys: str, default: Any = None) -> Any:
            for key in keys:
                value = get(key)
                if value is not None:
                    return value
            return default

        weekdays = pick("allowed_weekdays", "allowed_days", default=[])
        try:
            weekdays = [int(day) for day in weekdays]
            min_lead = int(pick("min_lead_days", "min_days_ahead", default=DEFAULT_MIN_LEAD_DAYS))
            max_lead = int(pick("max_lead_days", "max_days_ahead", default=DEFAULT_MAX_LEAD_DAYS))
        except (TypeError, ValueError) as e:
            raise InvalidScheduleConfig(f"malformed schedule record: {e}") from e

        restaurant_id = pick("restaurant_id")
        if isinstance(restaurant_id, str):
            try:
                restaurant_id = UUID(restaurant_id)
            except ValueError as e:
                raise InvalidScheduleConfig(
                    f"restaurant_id {restaurant_id!r} is not a UUID", field="restaurant_id"
                ) from e

        return cls(
            restaurant_id=restaurant_id,
            allowed_weekdays=frozenset(weekdays),
            min_lead_days=min_lead,
            max_lead_days=max_lead,
            blocked_dates=frozenset(_parse_dates(pick("blocked_dates", default=[]))),
            is_active=bool(pick("is_active", default=True)),
            notes=pick("notes", default=""),
        )

    def with_restaurant(self, restaurant_id: UUID) -> "DeliveryScheduleConfig":
        """Same rules, bound to another restaurant."""
        return replace(self, restaurant_id=restaurant_id)

    def blocked_date_strings(self) -> List[str]:
        return sorted(d.isoformat() for d in self.blocked_dates)

    def sorted_weekdays(self) -> List[int]:
        return sorted(self.allowed_weekdays)


def default_schedule(restaurant_id: Optional[UUID] = None) -> DeliveryScheduleConfig:
    """Rules used when a restaurant has no active schedule: Mon-Fri, 1-14 days ahead."""
    return DeliveryScheduleConfig(
        restaurant_id=restaurant_id,
        allowed_weekdays=DEFAULT_ALLOWED_WEEKDAYS,
        min_lead_days=DEFAULT_MIN_LEAD_DAYS,
        max_lead_days=DEFAULT_MAX_LEAD_DAYS,
    )


def weekday_code(day: date) -> int:
    """Weekday as 0=Sunday .. 6=Saturday."""
    return day.isoweekday() % 7


def compute_eligible_dates(
    schedule: DeliveryScheduleConfig,
    reference_date: Union[date, datetime],
) -> List[str]:
    """
    Return eligible delivery dates as ascending ISO strings.

    The caller supplies reference_date and is responsible for substituting
    default_schedule() when the stored schedule is inactive.
    """
    today = _as_date(reference_date)
    window_start = today + timedelta(days=schedule.min_lead_days)
    span = schedule.max_lead_days - schedule.min_lead_days

    eligible = []
    for offset in range(span + 1):
        day = window_start + timedelta(days=offset)
        if weekday_code(day) not in schedule.allowed_weekdays:
            continue
        if day in schedule.blocked_dates:
            continue
        eligible.append(day.isoformat())
    return eligible


def is_eligible_delivery_date(
    schedule: DeliveryScheduleConfig,
    reference_date: Union[date, datetime],
    delivery_date: Union[date, str],
) -> bool:
    """Check a requested delivery date against the eligible set."""
    requested = _parse_date(delivery_date, field="delivery_date")
    return requested.isoformat() in compute_eligible_dates(schedule, reference_date)


def _as_date(value: Union[date, datetime]) -> date:
    # datetime is a date subclass; drop the time-of-day
    if isinstance(value, datetime):
        return value.date()
    return value


def _parse_date(value: Union[date, str], field: str = "blocked_dates") -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    try:
        return date.fromisoformat(str(value))
    except ValueError as e:
        raise InvalidScheduleConfig(
            f"{field} value {value!r} is not a valid YYYY-MM-DD date", field=field
        ) from e


def _parse_dates(values: Iterable[Union[date, str]]) -> List[date]:
    return [_parse_date(value) for value in values or ()]
