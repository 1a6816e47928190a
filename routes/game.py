import logging

from flask import Blueprint, request
from sqlalchemy import or_

from database_init import db
from Form.game_form import GameForm, GameQueryForm, GameUpdateForm
from models.game import DEFAULT_GAME_CONTROLS, Game
from util.auth import current_actor_id, role_required
from util.db_session import commit_or_raise, ordered, paginate_query, run_query
from util.exceptions import NotFoundError
from util.response import success
from util.until import parse_bool

game_bp = Blueprint("game", __name__, url_prefix="/api/admin/games")
logger = logging.getLogger("api_logger")


def _get_game(game_id):
    game = db.session.get(Game, game_id)
    if not game:
        raise NotFoundError("Game not found")
    return game


def _apply(game, data):
    for name, value in data.items():
        if name == "game_controls":
            value = {**DEFAULT_GAME_CONTROLS, **(game.game_controls or {}), **(value or {})}
        elif isinstance(value, str):
            value = value.strip()
        setattr(game, name, value)


def _distinct(column):
    rows = (
        db.session.query(column)
        .filter(column.isnot(None))
        .distinct()
        .all()
    )
    return [row[0] for row in rows if row[0] not in (None, "")]


@game_bp.route("/filters", methods=["GET"])
@role_required("read")
def game_filters():
    """Giá trị distinct cho bộ lọc: category, developer, năm (giảm dần)."""
    categories, developers, years = run_query(
        lambda: (
            _distinct(Game.category),
            _distinct(Game.game_developer),
            _distinct(Game.game_publish_year),
        ),
        failure_message="Failed to fetch game filters",
    )
    return success(
        {
            "categories": sorted(categories),
            "developers": sorted(developers),
            "years": sorted(years, reverse=True),
        }
    )


@game_bp.route("", methods=["GET"])
@role_required("read")
def list_games():
    form = GameQueryForm.from_args(request.args)
    query = Game.query
    if form.category.data and form.category.data != "all":
        query = query.filter(Game.category == form.category.data)
    featured = parse_bool(form.isFeatured.data)
    if featured is not None:
        query = query.filter(Game.is_featured == featured)
    if form.developer.data:
        query = query.filter(Game.game_developer.icontains(form.developer.data, autoescape=True))
    if form.year.data is not None:
        query = query.filter(Game.game_publish_year == form.year.data)
    if form.search_value:
        term = form.search_value
        query = query.filter(
            or_(
                Game.title.icontains(term, autoescape=True),
                Game.game_developer.icontains(term, autoescape=True),
            )
        )

    sort = "game_publish_year" if form.sort.data == "publish_year" else form.sort.data
    query = ordered(query, getattr(Game, sort), form.order.data)
    items, pagination = paginate_query(
        query, form.page_value, form.limit_value, failure_message="Failed to fetch games"
    )
    return success([g.to_dict() for g in items], pagination=pagination)


@game_bp.route("/<int:game_id>", methods=["GET"])
@role_required("read")
def get_game(game_id):
    return success(_get_game(game_id).to_dict())


@game_bp.route("", methods=["POST"])
@role_required("write")
def create_game():
    form = GameForm.from_json(request.get_json(silent=True)).validate_or_raise()

    actor = current_actor_id()
    game = Game(created_by=actor, updated_by=actor)
    _apply(game, form.submitted_data())
    db.session.add(game)
    commit_or_raise("A game with this URL already exists", "Failed to create game")

    logger.info(f"Game #{game.id} {game.url} created by user #{actor}")
    return success(game.to_dict(), message="Game created", status=201)


@game_bp.route("/<int:game_id>", methods=["PUT"])
@role_required("write")
def update_game(game_id):
    game = _get_game(game_id)
    form = GameUpdateForm.from_json(request.get_json(silent=True)).validate_or_raise()

    _apply(game, form.submitted_data())
    game.updated_by = current_actor_id()
    commit_or_raise("A game with this URL already exists", "Failed to update game")
    return success(game.to_dict(), message="Game updated")


@game_bp.route("/<int:game_id>", methods=["DELETE"])
@role_required("delete")
def delete_game(game_id):
    game = _get_game(game_id)
    db.session.delete(game)
    commit_or_raise(failure_message="Failed to delete game")

    logger.info(f"Game #{game_id} deleted by user #{current_actor_id()}")
    return success(message="Game deleted")
