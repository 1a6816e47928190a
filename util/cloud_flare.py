import logging
import re
from urllib.parse import urlparse

import requests
from flask import current_app

from util.constant import PURGE_MODE, TAG_MAX_LENGTH
from util.exceptions import TransportError, UpstreamError, ValidationError

logger = logging.getLogger("cloudflare_api")

DEFAULT_BASE_URL = "https://api.cloudflare.com/client/v4"
DEFAULT_TIMEOUT = 30

HOSTNAME_RE = re.compile(r"^[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$")

# ========== CONFIG & UTILS ==========


def _base_url():
    return current_app.config.get("CLOUDFLARE_API_BASE", DEFAULT_BASE_URL).rstrip("/")


def _timeout():
    return current_app.config.get("CLOUDFLARE_TIMEOUT", DEFAULT_TIMEOUT)


def build_cf_headers(cf_account):
    """Sinh headers cho Cloudflare API của 1 tài khoản."""
    return {
        "Authorization": f"Bearer {cf_account.api_token}",
        "Content-Type": "application/json",
    }


def parse_cf_body(resp):
    """Body JSON của Cloudflare; body không phải JSON thì bọc lại dạng {"raw": text}."""
    try:
        body = resp.json()
    except ValueError:
        return {"success": False, "raw": resp.text}
    if not isinstance(body, dict):
        return {"success": False, "raw": body}
    return body


def _is_absolute_url(value):
    try:
        parsed = urlparse(value)
    except ValueError:
        return False
    return bool(parsed.scheme and parsed.netloc)


# ========== PURGE PAYLOAD ==========


def validate_purge_payload(mode, payload):
    """
    Kiểm tra từng phần tử theo mode, gom toàn bộ lỗi (không dừng ở lỗi đầu).
    Trả về list message, rỗng nghĩa là hợp lệ.
    """
    errors = []
    if not payload:
        errors.append("Payload cannot be empty")
        return errors

    if mode not in PURGE_MODE.choices():
        errors.append(f"Unsupported purge mode: {mode}")
        return errors

    for index, item in enumerate(payload, start=1):
        if mode == PURGE_MODE.url.name and not _is_absolute_url(item):
            errors.append(f"Invalid URL at position {index}: {item}")
        elif mode == PURGE_MODE.hostname.name and not HOSTNAME_RE.match(item or ""):
            errors.append(f"Invalid hostname at position {index}: {item}")
        elif mode == PURGE_MODE.tag.name and (not (item or "").strip() or len(item) > TAG_MAX_LENGTH):
            errors.append(
                f"Invalid tag at position {index}: {item} (must be 1-{TAG_MAX_LENGTH} characters)"
            )
        elif mode == PURGE_MODE.prefix.name and not _is_absolute_url(item):
            errors.append(f"Invalid URL prefix at position {index}: {item}")
    return errors


def build_purge_body(mode, payload, exclusions=None):
    """Dựng body cho /purge_cache theo mode; exclusions chỉ áp dụng cho mode url."""
    errors = validate_purge_payload(mode, payload)
    if errors:
        raise ValidationError("Invalid purge payload", details=errors)

    purge_mode = PURGE_MODE[mode]
    items = list(payload)
    if purge_mode is PURGE_MODE.url and exclusions:
        excluded = set(exclusions)
        items = [item for item in items if item not in excluded]
        if not items:
            raise ValidationError(
                "Invalid purge payload",
                details=["No files to purge after applying exclusions"],
            )
    return {purge_mode.body_key: items}


# ========== CLOUDFLARE API ==========


def purge_zone_cache(cf_account, zone_id, body):
    """
    POST /zones/{zone_id}/purge_cache.
    Trả về requests.Response; lỗi mạng/timeout để requests.RequestException bay lên.
    """
    url = f"{_base_url()}/zones/{zone_id}/purge_cache"
    logger.info(f"Purge zone {zone_id} via account #{cf_account.id}: {list(body.keys())}")
    return requests.post(
        url, json=body, headers=build_cf_headers(cf_account), timeout=_timeout()
    )


def _get(cf_account, path, params=None):
    try:
        resp = requests.get(
            f"{_base_url()}{path}",
            headers=build_cf_headers(cf_account),
            params=params,
            timeout=_timeout(),
        )
    except requests.RequestException as e:
        logger.error(f"Cloudflare request {path} failed: {e}")
        raise TransportError("Failed to connect to Cloudflare API", details=str(e)) from e

    data = parse_cf_body(resp)
    if not resp.ok or not data.get("success"):
        raise UpstreamError(
            "Cloudflare API request failed",
            resp.status_code,
            details=data.get("errors") or data.get("messages") or "Unknown error",
        )
    return data


def list_zones(cf_account):
    """Danh sách zone thuộc account Cloudflare."""
    params = {"account.id": cf_account.account_id} if cf_account.account_id else None
    data = _get(cf_account, "/zones", params=params)
    return [
        {
            "id": zone.get("id"),
            "name": zone.get("name"),
            "status": zone.get("status"),
        }
        for zone in data.get("result") or []
    ]


def verify_token(cf_account):
    """Kiểm tra API token còn hiệu lực."""
    data = _get(cf_account, "/user/tokens/verify")
    return data.get("result") or {}
