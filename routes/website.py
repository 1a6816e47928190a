import logging

from flask import Blueprint, request
from sqlalchemy import or_

from database_init import db
from Form.website_form import WebsiteForm, WebsiteQueryForm, WebsiteUpdateForm
from models.textlink import Textlink
from models.website import Website
from util.auth import current_actor_id, role_required
from util.db_session import commit_or_raise, ordered, paginate_query, run_query
from util.exceptions import ConflictError, NotFoundError
from util.response import success
from util.until import parse_bool

website_bp = Blueprint("website", __name__, url_prefix="/api/admin/websites")
logger = logging.getLogger("api_logger")


def _get_website(website_id):
    website = db.session.get(Website, website_id)
    if not website:
        raise NotFoundError("Website not found")
    return website


def _distinct_categories():
    rows = run_query(
        lambda: db.session.query(Website.category)
        .filter(Website.category.isnot(None), Website.category != "")
        .distinct()
        .order_by(Website.category)
        .all(),
        failure_message="Failed to fetch categories",
    )
    return ["all"] + [row[0] for row in rows]


@website_bp.route("", methods=["GET"])
@role_required("read")
def list_websites():
    """Danh sách website; ?distinct=category trả về list category."""
    if request.args.get("distinct") == "category":
        return success(_distinct_categories())

    form = WebsiteQueryForm.from_args(request.args)
    query = Website.query
    if form.category.data and form.category.data != "all":
        query = query.filter(Website.category == form.category.data)
    for arg, column in (
        (form.isFeatured, Website.is_featured),
        (form.isIndex, Website.is_index),
        (form.isGSA, Website.is_gsa),
        (form.isWP, Website.is_wp),
    ):
        flag = parse_bool(arg.data)
        if flag is not None:
            query = query.filter(column == flag)
    if form.minTraffic.data is not None:
        query = query.filter(Website.traffic >= form.minTraffic.data)
    if form.minDR.data is not None:
        query = query.filter(Website.domain_rating >= form.minDR.data)
    if form.search_value:
        term = form.search_value
        query = query.filter(
            or_(
                Website.title.icontains(term, autoescape=True),
                Website.url.icontains(term, autoescape=True),
                Website.desc.icontains(term, autoescape=True),
            )
        )

    query = ordered(query, getattr(Website, form.sort.data), form.order.data)
    items, pagination = paginate_query(
        query, form.page_value, form.limit_value, failure_message="Failed to fetch websites"
    )
    return success([w.to_dict() for w in items], pagination=pagination)


@website_bp.route("/<int:website_id>", methods=["GET"])
@role_required("read")
def get_website(website_id):
    return success(_get_website(website_id).to_dict())


@website_bp.route("", methods=["POST"])
@role_required("write")
def create_website():
    form = WebsiteForm.from_json(request.get_json(silent=True)).validate_or_raise()

    actor = current_actor_id()
    website = Website(created_by=actor, updated_by=actor)
    for name, value in form.submitted_data().items():
        setattr(website, name, value.strip() if isinstance(value, str) else value)
    db.session.add(website)
    commit_or_raise("A website with this URL already exists", "Failed to create website")

    logger.info(f"Website #{website.id} {website.url} created by user #{actor}")
    return success(website.to_dict(), message="Website created", status=201)


@website_bp.route("/<int:website_id>", methods=["PUT"])
@role_required("write")
def update_website(website_id):
    website = _get_website(website_id)
    form = WebsiteUpdateForm.from_json(request.get_json(silent=True)).validate_or_raise()

    for name, value in form.submitted_data().items():
        setattr(website, name, value.strip() if isinstance(value, str) else value)
    website.updated_by = current_actor_id()
    commit_or_raise("A website with this URL already exists", "Failed to update website")
    return success(website.to_dict(), message="Website updated")


@website_bp.route("/<int:website_id>", methods=["DELETE"])
@role_required("delete")
def delete_website(website_id):
    website = _get_website(website_id)
    # Không xoá website còn textlink trỏ tới
    if Textlink.query.filter_by(website_id=website.id).count():
        raise ConflictError("Cannot delete website with existing textlinks")
    db.session.delete(website)
    commit_or_raise(failure_message="Failed to delete website")

    logger.info(f"Website #{website_id} deleted by user #{current_actor_id()}")
    return success(message="Website deleted")
