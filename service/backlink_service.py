# service/backlink_service.py
import logging

from models.textlink import Textlink
from models.website import Website
from util.constant import BACKLINK_PAGE_SIZE, MAX_PAGE_SIZE
from util.db_session import run_query
from util.exceptions import ValidationError
from util.until import base_domain, build_pagination, normalize_domain, paginate_list

logger = logging.getLogger("backlink_logger")


def _match_custom_domain(pattern):
    return (
        Textlink.query.filter(Textlink.custom_domain.icontains(pattern, autoescape=True))
        .order_by(Textlink.id)
        .all()
    )


def _match_website_url(pattern):
    return (
        Textlink.query.join(Website, Textlink.website_id == Website.id)
        .filter(Website.url.icontains(pattern, autoescape=True))
        .order_by(Textlink.id)
        .all()
    )


def _match_link(pattern):
    return (
        Textlink.query.filter(Textlink.link.icontains(pattern, autoescape=True))
        .order_by(Textlink.id)
        .all()
    )


def dedupe_textlinks(rows):
    """Giữ lần xuất hiện đầu tiên theo id (fallback: link|anchor_text), giữ nguyên thứ tự."""
    seen = set()
    unique = []
    for row in rows:
        key = row.id if row.id is not None else f"{row.link}|{row.anchor_text}"
        if key in seen:
            continue
        seen.add(key)
        unique.append(row)
    return unique


def resolve_backlinks(domain, page=1, limit=BACKLINK_PAGE_SIZE):
    """
    Tìm textlink hiển thị cho 1 domain theo 3 cách khớp:
    A. custom_domain chứa base domain
    B. url của website liên kết chứa domain đã chuẩn hoá
    C. chính link chứa domain đã chuẩn hoá
    Gộp A -> B -> C, bỏ trùng, phân trang trên list đã gộp.
    """
    if not domain or not domain.strip():
        raise ValidationError("Invalid query parameters", details={"domain": ["Domain is required"]})

    page = max(int(page or 1), 1)
    limit = min(max(int(limit or BACKLINK_PAGE_SIZE), 1), MAX_PAGE_SIZE)

    normalized = normalize_domain(domain)
    # "https://" hay "/" chuẩn hoá ra rỗng sẽ khớp mọi textlink
    if not normalized:
        raise ValidationError("Invalid query parameters", details={"domain": ["Domain is required"]})
    base = base_domain(normalized)

    def _query_all():
        return (
            _match_custom_domain(base)
            + _match_website_url(normalized)
            + _match_link(normalized)
        )

    merged = run_query(_query_all, failure_message="Failed to fetch backlinks")
    unique = dedupe_textlinks(merged)
    logger.info(
        f"Backlinks for {normalized} (base {base}): {len(merged)} matched, {len(unique)} unique"
    )

    paged = paginate_list(unique, page, limit)
    return {
        "data": [row.to_backlink() for row in paged],
        "pagination": build_pagination(page, limit, len(unique)),
    }
