import math
import re

_SCHEME_RE = re.compile(r"^https?://")
_WWW_RE = re.compile(r"^www\.")


def normalize_domain(raw):
    """
    Chuẩn hoá domain/URL để so khớp:
    https://www.Example.com/ -> example.com
    Lặp tới khi ổn định nên normalize(normalize(x)) == normalize(x).
    """
    value = (raw or "").strip().lower()
    previous = None
    while value != previous:
        previous = value
        value = _SCHEME_RE.sub("", value)
        value = _WWW_RE.sub("", value)
        value = value.rstrip("/").strip()
    return value


def base_domain(normalized):
    """Lấy 2 label cuối (shop.example.com -> example.com)."""
    labels = [label for label in normalized.split(".") if label]
    if len(labels) >= 2:
        return ".".join(labels[-2:])
    return normalized


def isoformat(value):
    return value.isoformat() if value else None


def parse_bool(value):
    """Query string "1"/"true" -> True, "0"/"false" -> False, thiếu -> None."""
    if value is None or value == "":
        return None
    return value.strip().lower() in ("1", "true")


def split_lines(text):
    if not text:
        return []
    return [line.strip() for line in text.splitlines() if line.strip()]


def build_pagination(page, limit, total):
    total_pages = math.ceil(total / limit) if limit else 0
    return {
        "page": page,
        "limit": limit,
        "total": total,
        "totalPages": total_pages,
        "hasNext": page < total_pages,
        "hasPrev": page > 1,
    }


def paginate_list(items, page, limit):
    offset = (page - 1) * limit
    return items[offset : offset + limit]
