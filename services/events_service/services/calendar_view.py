"""Month grid and date grouping for the calendar view."""

import calendar
import datetime as dt
from collections import defaultdict
from typing import Iterable, Optional

from libs.common.supabase import Order, SupabaseGateway
from services.events_service.models import Event, category_color, category_label
from services.events_service.schemas import CalendarResponse, EventResponse

TABLE = "events"


def month_grid(year: int, month: int) -> list[Optional[int]]:
    """Day numbers preceded by one ``None`` per weekday before the 1st (Sunday first)."""
    weekday = dt.date(year, month, 1).weekday()  # Monday == 0
    leading = (weekday + 1) % 7
    total = calendar.monthrange(year, month)[1]
    return [None] * leading + list(range(1, total + 1))


def group_by_date(events: Iterable[Event]) -> dict[str, list[Event]]:
    grouped: dict[str, list[Event]] = defaultdict(list)
    for event in events:
        grouped[event.event_date.isoformat()].append(event)
    return dict(grouped)


def events_in_month(events: Iterable[Event], year: int, month: int) -> list[Event]:
    return sorted(
        (e for e in events if e.event_date.year == year and e.event_date.month == month),
        key=lambda e: e.event_date,
    )


def event_response(event: Event) -> EventResponse:
    return EventResponse(
        **event.model_dump(),
        category_label=category_label(event.category),
        category_color=category_color(event.category),
    )


async def fetch_events(gateway: SupabaseGateway) -> list[Event]:
    rows = await gateway.select(TABLE, order=[Order("event_date")])
    return [Event(**row) for row in rows]


async def load_calendar(
    gateway: SupabaseGateway, year: int, month: int, can_manage: bool
) -> CalendarResponse:
    events = await fetch_events(gateway)
    return CalendarResponse(
        year=year,
        month=month,
        days=month_grid(year, month),
        events_by_date={
            day: [event_response(e) for e in items]
            for day, items in group_by_date(events).items()
        },
        month_events=[event_response(e) for e in events_in_month(events, year, month)],
        can_manage=can_manage,
    )
