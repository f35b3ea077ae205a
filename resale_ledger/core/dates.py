from datetime import date, datetime, timedelta, timezone


def normalize_date(value):
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        value_text = value.strip()
        if not value_text:
            return None
        try:
            return date.fromisoformat(value_text)
        except ValueError:
            return None
    return None


def parse_range_bound(value):
    """Reduce a query-string date or timestamp to a calendar date.

    Plain ``YYYY-MM-DD`` values are taken as-is. Timestamps with an offset
    are shifted to UTC first, so ``2026-01-04T23:30:00-05:00`` lands on
    2026-01-05. Naive timestamps keep their own date part.
    """
    if value is None:
        return None
    value_text = str(value).strip()
    if not value_text:
        return None
    parsed = normalize_date(value_text)
    if parsed is not None:
        return parsed
    if value_text.endswith(("Z", "z")):
        value_text = value_text[:-1] + "+00:00"
    try:
        moment = datetime.fromisoformat(value_text)
    except ValueError:
        return None
    if moment.tzinfo is not None:
        moment = moment.astimezone(timezone.utc)
    return moment.date()


def week_bounds(today: date) -> tuple[date, date]:
    # Weeks run Sunday through Saturday.
    start = today - timedelta(days=(today.weekday() + 1) % 7)
    return start, start + timedelta(days=6)


def year_bounds(today: date) -> tuple[date, date]:
    return date(today.year, 1, 1), date(today.year, 12, 31)
