import logging

from flask import Blueprint, request
from flask_login import current_user, login_required, login_user, logout_user
from flask_wtf.csrf import generate_csrf
from werkzeug.security import check_password_hash

from Form.forms import LoginForm
from models.user import User
from util.exceptions import UnauthorizedError
from util.response import success

auth_bp = Blueprint("auth", __name__, url_prefix="/api/auth")
logger = logging.getLogger("api_logger")


# SPA lấy token rồi gửi lại qua header X-CSRFToken
@auth_bp.route("/csrf-token", methods=["GET"])
def csrf_token():
    return success({"csrf_token": generate_csrf()})


# Đăng nhập
@auth_bp.route("/login", methods=["POST"])
def login():
    form = LoginForm.from_json(request.get_json(silent=True)).validate_or_raise()

    user = User.query.filter_by(username=form.username.data.strip()).first()
    if not user or not check_password_hash(user.password, form.password.data):
        logger.warning(f"Login failed for {form.username.data!r}")
        raise UnauthorizedError("Invalid username or password")
    # Tài khoản chưa được duyệt
    if not user.is_active:
        raise UnauthorizedError("Account is not active")

    login_user(user)
    logger.info(f"User {user.username} logged in")
    return success(user.to_dict(), message="Logged in")


# Đăng xuất
@auth_bp.route("/logout", methods=["POST"])
@login_required
def logout():
    logout_user()
    return success(message="Logged out")


@auth_bp.route("/me", methods=["GET"])
@login_required
def me():
    return success(current_user.to_dict())
