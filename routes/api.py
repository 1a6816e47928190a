from functools import wraps

from flask import Blueprint, current_app, jsonify, request

from models.game import Game
from service.backlink_service import resolve_backlinks
from Form.game_form import PublicGameQueryForm
from util.constant import BACKLINK_CACHE_SECONDS, BACKLINK_PAGE_SIZE
from util.db_session import paginate_query
from util.exceptions import ValidationError
from util.rate_limit import client_ip
from util.response import success
from util.until import parse_bool

api_bp = Blueprint("api_public", __name__, url_prefix="/api")


def _int_arg(name, default, errors):
    raw = request.args.get(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        errors[name] = ["Must be an integer"]
        return default


def rate_limited(view):
    """Áp rate limit theo IP cho API public, gắn header X-RateLimit-* vào response."""

    @wraps(view)
    def wrapped(*args, **kwargs):
        limiter = current_app.extensions["rate_limiter"]
        result = limiter.check(client_ip(request))
        headers = limiter.headers(result)
        if not result.allowed:
            resp = jsonify(
                {"status": "error", "error": "Rate limit exceeded. Please try again later."}
            )
            resp.status_code = 429
            resp.headers.update(headers)
            return resp
        resp = view(*args, **kwargs)
        resp.headers.update(headers)
        return resp

    return wrapped


@api_bp.route("/public/backlinks", methods=["GET"])
@rate_limited
def public_backlinks():
    """Danh sách textlink hiển thị cho 1 domain."""
    errors = {}
    if not (request.args.get("domain") or "").strip():
        errors["domain"] = ["Domain is required"]
    page = _int_arg("page", 1, errors)
    limit = _int_arg("limit", BACKLINK_PAGE_SIZE, errors)
    if errors:
        raise ValidationError("Invalid query parameters", details=errors)

    result = resolve_backlinks(request.args["domain"], page=page, limit=limit)
    return success(
        result["data"],
        pagination=result["pagination"],
        headers={"Cache-Control": f"public, max-age={BACKLINK_CACHE_SECONDS}"},
    )


@api_bp.route("/games", methods=["GET"])
@rate_limited
def public_games():
    """Danh sách game public có lọc và phân trang."""
    form = PublicGameQueryForm.from_args(request.args)
    page, limit = form.page_value, form.limit_value

    query = Game.query
    if form.category.data:
        query = query.filter(Game.category == form.category.data)
    featured = parse_bool(form.isFeatured.data)
    if featured is not None:
        query = query.filter(Game.is_featured == featured)
    if form.developer.data:
        query = query.filter(Game.game_developer.icontains(form.developer.data, autoescape=True))
    if form.year.data is not None:
        query = query.filter(Game.game_publish_year == form.year.data)

    # publish_year là alias; created_at mới nhất trước, còn lại tăng dần
    sort = "game_publish_year" if form.sort.data == "publish_year" else form.sort.data
    column = getattr(Game, sort)
    query = query.order_by(column.desc() if sort == "created_at" else column.asc(), Game.id)

    items, pagination = paginate_query(query, page, limit, failure_message="Failed to fetch games")
    return success([game.to_dict() for game in items], pagination=pagination)
