from datetime import date, datetime, time, timezone
from typing import Any, Mapping, Optional


def first_present(data: Mapping[str, Any], *keys: str, default: Any = None, skip_empty: bool = False) -> Any:
    """Value of the first key holding something, in the order given."""
    for key in keys:
        value = data.get(key)
        if value is None:
            continue
        if skip_empty and value == "":
            continue
        return value
    return default


def as_text(value: Any) -> str:
    if value is None:
        return ""
    return str(value)


def as_int(value: Any) -> Optional[int]:
    if value is None or value == "" or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    try:
        return int(float(str(value).strip().replace(",", ".")))
    except ValueError:
        return None


def as_float(value: Any) -> Optional[float]:
    if value is None or value == "" or isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return float(value)
    try:
        return float(str(value).strip().replace(",", "."))
    except ValueError:
        return None


def as_bool(value: Any, default: bool = True) -> bool:
    return value if isinstance(value, bool) else default


def as_datetime(value: Any) -> Optional[datetime]:
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value
    if isinstance(value, date):
        return datetime.combine(value, time(), tzinfo=timezone.utc)
    if isinstance(value, (int, float)):
        # epoch millis, as written by the mobile client
        return datetime.fromtimestamp(value / 1000, tz=timezone.utc)
    to_datetime = getattr(value, "to_datetime", None)
    if callable(to_datetime):
        return to_datetime()
    try:
        return datetime.fromisoformat(str(value))
    except ValueError:
        return None


def as_date_text(value: Any) -> Optional[str]:
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value.date().isoformat()
    if isinstance(value, date):
        return value.isoformat()
    return str(value)


def coordinate_pair(latitude: Any, longitude: Any) -> tuple[Optional[float], Optional[float]]:
    lat = as_float(latitude)
    lng = as_float(longitude)
    if lat is None or lng is None:
        return None, None
    return lat, lng
