import logging

from flask import Blueprint, request
from sqlalchemy import or_

from database_init import db
from Form.textlink_form import TextlinkForm, TextlinkQueryForm, TextlinkUpdateForm
from models.textlink import ManagedWebsite, Textlink, resolve_placement
from models.website import Website
from util.auth import current_actor_id, role_required
from util.db_session import commit_or_raise, ordered, paginate_query
from util.exceptions import NotFoundError
from util.response import success
from util.until import parse_bool

textlink_bp = Blueprint("textlink", __name__, url_prefix="/api/admin/textlinks")
logger = logging.getLogger("api_logger")

PLACEMENT_FIELDS = ("website_id", "custom_domain")
PAGE_RULE_FIELDS = ("show_on_all_pages", "include_paths", "exclude_paths")


def _get_textlink(textlink_id):
    textlink = db.session.get(Textlink, textlink_id)
    if not textlink:
        raise NotFoundError("Textlink not found")
    return textlink


def _checked_placement(website_id, custom_domain):
    """Đúng 1 trong 2 field, website phải tồn tại."""
    placement = resolve_placement(website_id, custom_domain)
    if isinstance(placement, ManagedWebsite) and not db.session.get(Website, placement.website_id):
        raise NotFoundError("Website not found")
    return placement


def _clean(value):
    return value.strip() if isinstance(value, str) else value


@textlink_bp.route("", methods=["GET"])
@role_required("read")
def list_textlinks():
    form = TextlinkQueryForm.from_args(request.args)
    query = Textlink.query
    if form.website_id.data is not None:
        query = query.filter(Textlink.website_id == form.website_id.data)
    if form.custom_domain.data:
        query = query.filter(Textlink.custom_domain.icontains(form.custom_domain.data, autoescape=True))
    show_all = parse_bool(form.show_on_all_pages.data)
    if show_all is not None:
        query = query.filter(Textlink.show_on_all_pages == show_all)
    if form.search_value:
        term = form.search_value
        query = query.filter(
            or_(
                Textlink.anchor_text.icontains(term, autoescape=True),
                Textlink.link.icontains(term, autoescape=True),
                Textlink.title.icontains(term, autoescape=True),
                Textlink.custom_domain.icontains(term, autoescape=True),
            )
        )

    query = ordered(query, getattr(Textlink, form.sort.data), form.order.data)
    items, pagination = paginate_query(
        query, form.page_value, form.limit_value, failure_message="Failed to fetch textlinks"
    )
    return success([t.to_dict() for t in items], pagination=pagination)


@textlink_bp.route("/<int:textlink_id>", methods=["GET"])
@role_required("read")
def get_textlink(textlink_id):
    return success(_get_textlink(textlink_id).to_dict())


@textlink_bp.route("", methods=["POST"])
@role_required("write")
def create_textlink():
    form = TextlinkForm.from_json(request.get_json(silent=True)).validate_or_raise()
    data = form.submitted_data()
    placement = _checked_placement(data.get("website_id"), data.get("custom_domain"))

    actor = current_actor_id()
    textlink = Textlink(
        link=_clean(data["link"]),
        anchor_text=_clean(data["anchor_text"]),
        target=_clean(data.get("target")) or "_blank",
        rel=_clean(data.get("rel")) or "",
        title=_clean(data.get("title")) or None,
        created_by=actor,
        updated_by=actor,
    )
    textlink.placement = placement
    textlink.set_page_rules(
        data.get("show_on_all_pages", True),
        data.get("include_paths"),
        data.get("exclude_paths"),
    )
    db.session.add(textlink)
    commit_or_raise(failure_message="Failed to create textlink")

    logger.info(f"Textlink #{textlink.id} '{textlink.anchor_text}' created by user #{actor}")
    return success(textlink.to_dict(), message="Textlink created", status=201)


@textlink_bp.route("/<int:textlink_id>", methods=["PUT"])
@role_required("write")
def update_textlink(textlink_id):
    textlink = _get_textlink(textlink_id)
    form = TextlinkUpdateForm.from_json(request.get_json(silent=True)).validate_or_raise()
    data = form.submitted_data()

    for name in ("link", "anchor_text", "target", "rel", "title"):
        if name in data:
            setattr(textlink, name, _clean(data[name]))

    # Gửi 1 trong 2 field placement -> xác định lại placement từ chính các field đã gửi
    if any(name in data for name in PLACEMENT_FIELDS):
        textlink.placement = _checked_placement(data.get("website_id"), data.get("custom_domain"))

    if any(name in data for name in PAGE_RULE_FIELDS):
        textlink.set_page_rules(
            data.get("show_on_all_pages", textlink.show_on_all_pages),
            data.get("include_paths", textlink.include_paths),
            data.get("exclude_paths", textlink.exclude_paths),
        )

    textlink.updated_by = current_actor_id()
    commit_or_raise(failure_message="Failed to update textlink")
    return success(textlink.to_dict(), message="Textlink updated")


@textlink_bp.route("/<int:textlink_id>", methods=["DELETE"])
@role_required("delete")
def delete_textlink(textlink_id):
    textlink = _get_textlink(textlink_id)
    db.session.delete(textlink)
    commit_or_raise(failure_message="Failed to delete textlink")

    logger.info(f"Textlink #{textlink_id} deleted by user #{current_actor_id()}")
    return success(message="Textlink deleted")
