import logging

from flask import Blueprint, request
from sqlalchemy import Text, cast, or_

from database_init import db
from Form.cloudflare_form import (
    AccountQueryForm,
    CloudflareAccountForm,
    CloudflareAccountUpdateForm,
    PurgeForm,
    PurgeLogQueryForm,
)
from models.cloudflare_acc import CloudflareAccount
from models.cloudflare_purge_log import CloudflarePurgeLog
from service.purge_service import purge_cache
from util.auth import current_actor_id, role_required
from util.cloud_flare import list_zones, verify_token
from util.db_session import commit_or_raise, ordered, paginate_query
from util.exceptions import ConflictError, NotFoundError
from util.response import success

cloudflare_bp = Blueprint("cloudflare", __name__, url_prefix="/api/admin/cloudflare")
logger = logging.getLogger("api_logger")

DUPLICATE_ACCOUNT = "A Cloudflare account with this email or account ID already exists"


def _get_account(account_id):
    account = db.session.get(CloudflareAccount, account_id)
    if not account:
        raise NotFoundError("Cloudflare account not found")
    return account


# ========== ACCOUNTS ==========


@cloudflare_bp.route("/accounts", methods=["GET"])
@role_required("read")
def list_accounts():
    form = AccountQueryForm.from_args(request.args)
    query = CloudflareAccount.query
    if form.search_value:
        term = form.search_value
        query = query.filter(
            or_(
                CloudflareAccount.account_name.icontains(term, autoescape=True),
                CloudflareAccount.email.icontains(term, autoescape=True),
            )
        )
    query = ordered(query, CloudflareAccount.created_at, form.order.data)
    items, pagination = paginate_query(
        query, form.page_value, form.limit_value, failure_message="Failed to fetch Cloudflare accounts"
    )
    return success([acc.to_public_dict() for acc in items], pagination=pagination)


@cloudflare_bp.route("/accounts/<int:account_id>", methods=["GET"])
@role_required("read")
def get_account(account_id):
    return success(_get_account(account_id).to_public_dict())


@cloudflare_bp.route("/accounts", methods=["POST"])
@role_required("write")
def create_account():
    form = CloudflareAccountForm.from_json(request.get_json(silent=True)).validate_or_raise()

    actor = current_actor_id()
    account = CloudflareAccount(
        account_name=form.account_name.data.strip(),
        email=form.email.data.strip(),
        api_token=form.api_token.data.strip(),
        account_id=form.account_id.data.strip(),
        created_by=actor,
        updated_by=actor,
    )
    db.session.add(account)
    commit_or_raise(DUPLICATE_ACCOUNT, "Failed to create Cloudflare account")

    logger.info(f"Cloudflare account #{account.id} {account.account_name} created by user #{actor}")
    return success(account.to_public_dict(), message="Cloudflare account created", status=201)


@cloudflare_bp.route("/accounts/<int:account_id>", methods=["PUT"])
@role_required("write")
def update_account(account_id):
    account = _get_account(account_id)
    form = CloudflareAccountUpdateForm.from_json(request.get_json(silent=True)).validate_or_raise()

    for name, value in form.submitted_data().items():
        value = value.strip() if isinstance(value, str) else value
        # Token rỗng -> giữ token cũ
        if name == "api_token" and not value:
            continue
        setattr(account, name, value)
    account.updated_by = current_actor_id()
    commit_or_raise(DUPLICATE_ACCOUNT, "Failed to update Cloudflare account")
    return success(account.to_public_dict(), message="Cloudflare account updated")


@cloudflare_bp.route("/accounts/<int:account_id>", methods=["DELETE"])
@role_required("delete")
def delete_account(account_id):
    account = _get_account(account_id)
    if account.purge_logs.count():
        raise ConflictError("Cannot delete Cloudflare account with existing purge logs")
    db.session.delete(account)
    commit_or_raise(failure_message="Failed to delete Cloudflare account")

    logger.info(f"Cloudflare account #{account_id} deleted by user #{current_actor_id()}")
    return success(message="Cloudflare account deleted")


@cloudflare_bp.route("/accounts/<int:account_id>/zones", methods=["GET"])
@role_required("read")
def account_zones(account_id):
    return success(list_zones(_get_account(account_id)))


@cloudflare_bp.route("/accounts/<int:account_id>/verify", methods=["POST"])
@role_required("write")
def verify_account(account_id):
    account = _get_account(account_id)
    result = verify_token(account)
    logger.info(f"Cloudflare account #{account.id} token status: {result.get('status')}")
    return success(result, message="Token is valid")


# ========== PURGE ==========


@cloudflare_bp.route("/purge", methods=["POST"])
@role_required("write")
def purge():
    form = PurgeForm.from_json(request.get_json(silent=True)).validate_or_raise()
    exclusions = form.exclusions.data if form.is_submitted_field("exclusions") else None

    result = purge_cache(
        form.cloudflare_account_id.data,
        form.zone_id.data.strip(),
        form.mode.data,
        form.payload.data,
        exclusions=exclusions or None,
        actor_id=current_actor_id(),
    )
    return success(result, message="Cache purged successfully")


@cloudflare_bp.route("/purge-logs", methods=["GET"])
@role_required("read")
def list_purge_logs():
    form = PurgeLogQueryForm.from_args(request.args)
    query = CloudflarePurgeLog.query
    if form.cloudflare_account_id.data is not None:
        query = query.filter(CloudflarePurgeLog.cloudflare_account_id == form.cloudflare_account_id.data)
    if form.mode.data:
        query = query.filter(CloudflarePurgeLog.mode == form.mode.data)
    if form.status_filter.data == "success":
        query = query.filter(CloudflarePurgeLog.is_success)
    elif form.status_filter.data == "error":
        query = query.filter(~CloudflarePurgeLog.is_success)
    if form.search_value:
        term = form.search_value
        query = query.filter(
            or_(
                CloudflarePurgeLog.mode.icontains(term, autoescape=True),
                cast(CloudflarePurgeLog.payload, Text).icontains(term, autoescape=True),
                cast(CloudflarePurgeLog.created_by, Text).icontains(term, autoescape=True),
            )
        )

    query = ordered(query, getattr(CloudflarePurgeLog, form.sort.data), form.order.data)
    items, pagination = paginate_query(
        query, form.page_value, form.limit_value, failure_message="Failed to fetch purge logs"
    )
    return success([log.to_dict() for log in items], pagination=pagination)
