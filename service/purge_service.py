# service/purge_service.py
import logging

import requests
from sqlalchemy.exc import SQLAlchemyError

from database_init import db
from models.cloudflare_acc import CloudflareAccount
from models.cloudflare_purge_log import CloudflarePurgeLog
from util.cloud_flare import build_purge_body, parse_cf_body, purge_zone_cache
from util.constant import NETWORK_ERROR_STATUS
from util.exceptions import NotFoundError, TransportError, UpstreamError

logger = logging.getLogger("purge_logger")


def _record_purge_log(account, mode, payload, exclusions, status_code, result, actor_id):
    """Ghi 1 dòng log; lỗi ghi log không làm thay đổi kết quả purge."""
    log = CloudflarePurgeLog(
        cloudflare_account_id=account.id,
        mode=mode,
        payload=list(payload),
        exclusions=list(exclusions) if exclusions is not None else None,
        status_code=status_code,
        result=result,
        created_by=actor_id,
    )
    try:
        db.session.add(log)
        db.session.commit()
    except SQLAlchemyError:
        db.session.rollback()
        logger.exception(f"Failed to log purge request for account #{account.id}")
        return None
    return log


def purge_cache(account_id, zone_id, mode, payload, exclusions=None, actor_id=None):
    """
    Purge cache Cloudflare cho 1 zone bằng token của account tương ứng.
    - Account không tồn tại -> NotFoundError (không ghi log)
    - Payload sai -> ValidationError (không ghi log)
    - Đã gọi tới mạng -> luôn ghi đúng 1 CloudflarePurgeLog
    """
    account = db.session.get(CloudflareAccount, account_id)
    if not account:
        raise NotFoundError("Cloudflare account not found")

    body = build_purge_body(mode, payload, exclusions)

    try:
        resp = purge_zone_cache(account, zone_id, body)
    except requests.RequestException as e:
        result = {"success": False, "error": str(e) or "Network error", "type": "network_error"}
        _record_purge_log(account, mode, payload, exclusions, NETWORK_ERROR_STATUS, result, actor_id)
        logger.error(f"❌ Purge {mode} zone {zone_id} (account #{account.id}) network error: {e}")
        raise TransportError("Failed to connect to Cloudflare API", details=result["error"]) from e

    status_code = resp.status_code
    result = parse_cf_body(resp)
    _record_purge_log(account, mode, payload, exclusions, status_code, result, actor_id)

    if 200 <= status_code < 300 and result.get("success") is True:
        logger.info(f"✅ Purge {mode} zone {zone_id} (account #{account.id}) OK")
        purge_result = result.get("result")
        return {
            "cloudflare_response": result,
            "purge_id": purge_result.get("id") if isinstance(purge_result, dict) else None,
            "mode": mode,
            "payload": payload,
            "exclusions": exclusions,
        }

    logger.warning(f"⚠️ Purge {mode} zone {zone_id} (account #{account.id}) failed: HTTP {status_code}")
    raise UpstreamError(
        "Cloudflare purge failed",
        status_code,
        details=result.get("errors") or result.get("messages") or "Unknown error",
        extra={"cloudflare_response": result},
    )
