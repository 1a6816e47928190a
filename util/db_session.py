import logging

from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from database_init import db
from util.exceptions import ConflictError, InternalError
from util.until import build_pagination

logger = logging.getLogger("api_logger")


def commit_or_raise(conflict_message="Record already exists", failure_message="Database error"):
    """
    Commit session hiện tại.
    - Vi phạm unique/foreign key -> ConflictError (409)
    - Lỗi DB khác -> log đầy đủ, trả InternalError không lộ chi tiết
    """
    try:
        db.session.commit()
    except IntegrityError as e:
        db.session.rollback()
        logger.warning(f"Integrity error: {e.orig}")
        raise ConflictError(conflict_message) from e
    except SQLAlchemyError as e:
        db.session.rollback()
        logger.exception("Database error")
        raise InternalError(failure_message) from e


def run_query(query_fn, failure_message="Database error"):
    """Chạy một truy vấn đọc, lỗi DB -> InternalError."""
    try:
        return query_fn()
    except SQLAlchemyError as e:
        db.session.rollback()
        logger.exception("Database error")
        raise InternalError(failure_message) from e


def paginate_query(query, page, limit, failure_message="Database error"):
    """Phân trang 1 query, trả về (items, pagination) theo format envelope."""
    result = run_query(
        lambda: query.paginate(page=page, per_page=limit, error_out=False),
        failure_message=failure_message,
    )
    return result.items, build_pagination(page, limit, result.total or 0)


def ordered(query, column, order="desc"):
    """Sắp xếp theo column, id làm khoá phụ để thứ tự ổn định."""
    if order == "asc":
        return query.order_by(column.asc(), column.class_.id.asc())
    return query.order_by(column.desc(), column.class_.id.desc())
