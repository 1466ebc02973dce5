import calendar
import re
from datetime import datetime, date, time, timezone
from user.exceptions import ValidationException

MONTHS_RANGE = re.compile(r"^(\d+)months?$")


def months_ago(now, months):
    """Same day-of-month `months` earlier, clamped to the end of shorter months."""
    month_index = now.year * 12 + (now.month - 1) - months
    year, month = divmod(month_index, 12)
    day = min(now.day, calendar.monthrange(year, month + 1)[1])
    return now.replace(year=year, month=month + 1, day=day)


def parse_date(value, end_of_day=False):
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value
    if isinstance(value, date):
        return datetime.combine(value, time.max if end_of_day else time.min)
    text = str(value).strip()
    try:
        if "T" in text or " " in text:
            parsed = datetime.fromisoformat(text.replace("Z", "+00:00"))
            if parsed.tzinfo is not None:
                # Stored dates are naive UTC
                parsed = parsed.astimezone(timezone.utc).replace(tzinfo=None)
            return parsed
        parsed = datetime.strptime(text, "%Y-%m-%d")
    except ValueError:
        raise ValidationException(f"Invalid date {text!r}, expected YYYY-MM-DD or ISO format")
    return datetime.combine(parsed.date(), time.max) if end_of_day else parsed


def filter_by_date_range(records, range_key="all", start=None, end=None, now=None):
    """Keep records whose `date` falls in the requested range.

    range_key: "all", "<N>months" (e.g. "3months") or "custom". A custom range
    missing either bound keeps everything. Date-only custom bounds cover whole days.
    """
    range_key = (range_key or "all").strip().lower()
    if range_key == "all":
        return list(records)

    if range_key == "custom":
        start = parse_date(start)
        end = parse_date(end, end_of_day=True)
        if start is None or end is None:
            return list(records)
        return [r for r in records if start <= r.date <= end]

    match = MONTHS_RANGE.match(range_key)
    if not match:
        raise ValidationException(f"Unknown date range: {range_key}")
    cutoff = months_ago(now or datetime.utcnow(), int(match.group(1)))
    return [r for r in records if r.date >= cutoff]
