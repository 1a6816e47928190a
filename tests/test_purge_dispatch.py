import pytest
import requests
from sqlalchemy.exc import SQLAlchemyError

from database_init import db
from models.cloudflare_purge_log import CloudflarePurgeLog
from service.purge_service import purge_cache
from util.exceptions import NotFoundError, TransportError, UpstreamError, ValidationError

from conftest import FakeResponse


def _logs():
    return CloudflarePurgeLog.query.order_by(CloudflarePurgeLog.id).all()


def test_successful_purge_writes_one_log(cf_account, fake_cf, users):
    result = purge_cache(
        cf_account.id, "zone-1", "url", ["https://a.com/x"], actor_id=users["editor"].id
    )

    assert result["purge_id"] == "purge-1"
    assert result["mode"] == "url"
    call = fake_cf.calls[0]
    assert call["url"] == "https://cf.test/client/v4/zones/zone-1/purge_cache"
    assert call["json"] == {"files": ["https://a.com/x"]}
    assert call["headers"]["Authorization"] == "Bearer real-secret-token"
    assert call["timeout"] == 30

    logs = _logs()
    assert len(logs) == 1
    assert logs[0].status_code == 200
    assert logs[0].created_by == users["editor"].id
    assert logs[0].payload == ["https://a.com/x"]


def test_network_failure_logs_status_zero(cf_account, fake_cf):
    fake_cf.error = requests.ConnectionError("connection refused")

    with pytest.raises(TransportError) as exc:
        purge_cache(cf_account.id, "zone-1", "hostname", ["example.com"])

    assert exc.value.status_code == 500
    logs = _logs()
    assert len(logs) == 1
    assert logs[0].status_code == 0
    assert logs[0].result["type"] == "network_error"
    assert logs[0].result["success"] is False


def test_http_200_with_success_false_is_failure(cf_account, fake_cf):
    fake_cf.response = FakeResponse(
        200, {"success": False, "errors": [{"code": 1012, "message": "Request must contain one of files"}]}
    )

    with pytest.raises(UpstreamError) as exc:
        purge_cache(cf_account.id, "zone-1", "tag", ["home"])

    assert exc.value.status_code == 400
    assert exc.value.details[0]["code"] == 1012
    logs = _logs()
    assert len(logs) == 1
    assert logs[0].status_code == 200
    assert logs[0].is_success  # HTTP 2xx dù Cloudflare báo lỗi


def test_upstream_error_status_is_forwarded(cf_account, fake_cf):
    fake_cf.response = FakeResponse(403, {"success": False, "errors": [{"message": "Forbidden"}]})

    with pytest.raises(UpstreamError) as exc:
        purge_cache(cf_account.id, "zone-1", "tag", ["home"])

    assert exc.value.status_code == 403
    assert exc.value.extra["cloudflare_response"]["success"] is False


def test_non_json_body_is_kept_raw(cf_account, fake_cf):
    fake_cf.response = FakeResponse(502, None, text="<html>Bad gateway</html>")

    with pytest.raises(UpstreamError):
        purge_cache(cf_account.id, "zone-1", "tag", ["home"])

    assert _logs()[0].result == {"success": False, "raw": "<html>Bad gateway</html>"}


def test_unknown_account_and_invalid_payload_write_no_log(cf_account, fake_cf):
    with pytest.raises(NotFoundError):
        purge_cache(9999, "zone-1", "tag", ["home"])
    with pytest.raises(ValidationError):
        purge_cache(cf_account.id, "zone-1", "tag", ["x" * 51])

    assert fake_cf.calls == []
    assert _logs() == []


def test_failed_log_write_does_not_change_outcome(cf_account, fake_cf, monkeypatch):
    def fail_commit():
        raise SQLAlchemyError("disk full")

    monkeypatch.setattr(db.session, "commit", fail_commit)

    result = purge_cache(cf_account.id, "zone-1", "tag", ["home"])

    assert result["purge_id"] == "purge-1"


def test_purge_endpoint(client, login, cf_account, fake_cf):
    login("editor")

    resp = client.post(
        "/api/admin/cloudflare/purge",
        json={
            "cloudflare_account_id": cf_account.id,
            "zone_id": "zone-1",
            "mode": "url",
            "payload": ["https://a.com/x", "https://a.com/y"],
            "exclusions": ["https://a.com/y"],
        },
    )

    assert resp.status_code == 200
    body = resp.get_json()
    assert body["status"] == "success"
    assert body["data"]["purge_id"] == "purge-1"
    assert fake_cf.calls[0]["json"] == {"files": ["https://a.com/x"]}


def test_purge_endpoint_reports_upstream_failure(client, login, cf_account, fake_cf):
    login("editor")
    fake_cf.response = FakeResponse(200, {"success": False, "errors": [{"message": "nope"}]})

    resp = client.post(
        "/api/admin/cloudflare/purge",
        json={"cloudflare_account_id": cf_account.id, "zone_id": "z", "mode": "tag", "payload": ["a"]},
    )

    assert resp.status_code == 400
    body = resp.get_json()
    assert body["status"] == "error"
    assert body["error"] == "Cloudflare purge failed"
    assert body["cloudflare_response"]["success"] is False


def test_purge_endpoint_validates_payload(client, login, cf_account, fake_cf):
    login("editor")

    resp = client.post(
        "/api/admin/cloudflare/purge",
        json={"cloudflare_account_id": cf_account.id, "zone_id": "z", "mode": "tag", "payload": ["x" * 51]},
    )

    assert resp.status_code == 400
    assert resp.get_json()["details"] == [
        f"Invalid tag at position 1: {'x' * 51} (must be 1-50 characters)"
    ]


def test_viewer_cannot_purge(client, login, cf_account, fake_cf):
    login("viewer")

    resp = client.post(
        "/api/admin/cloudflare/purge",
        json={"cloudflare_account_id": cf_account.id, "zone_id": "z", "mode": "tag", "payload": ["a"]},
    )

    assert resp.status_code == 401
    assert fake_cf.calls == []
