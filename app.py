import os
import time
from datetime import timedelta

from dotenv import load_dotenv
from flask import Flask, current_app

from database_init import db
from extensions import cors, csrf, login_manager, migrate
from log import setup_logging
from util.exceptions import UnauthorizedError, register_error_handlers
from util.rate_limit import RateLimiter

from models.user import User
from models.website import Website
from models.textlink import Textlink
from models.game import Game
from models.cloudflare_acc import CloudflareAccount
from models.cloudflare_purge_log import CloudflarePurgeLog

load_dotenv()


def _database_uri():
    if os.getenv("DATABASE_URL"):
        return os.getenv("DATABASE_URL")
    return (
        f"mysql+pymysql://{os.getenv('USER_DB')}:{os.getenv('PASSWORD_DB')}"
        f"@{os.getenv('ADDRESS_DB')}/{os.getenv('NAME_DB')}"
    )


def create_app(test_config=None):
    app = Flask(__name__)
    app.json.sort_keys = False

    app.config["SECRET_KEY"] = os.getenv("SECRET_KEY")
    app.config["PERMANENT_SESSION_LIFETIME"] = timedelta(minutes=60)
    app.config["SESSION_COOKIE_HTTPONLY"] = True
    app.config["SESSION_COOKIE_SECURE"] = True
    app.config["SESSION_COOKIE_SAMESITE"] = "Lax"
    app.config["SQLALCHEMY_DATABASE_URI"] = _database_uri()
    app.config["SQLALCHEMY_TRACK_MODIFICATIONS"] = False
    app.config["LOG_DIR"] = os.getenv("LOG_DIR")
    app.config["CLOUDFLARE_API_BASE"] = os.getenv(
        "CLOUDFLARE_API_BASE", "https://api.cloudflare.com/client/v4"
    )
    app.config["CLOUDFLARE_TIMEOUT"] = float(os.getenv("CLOUDFLARE_TIMEOUT", "30"))
    app.config["RATE_LIMIT_MAX_REQUESTS"] = int(os.getenv("RATE_LIMIT_MAX_REQUESTS", "60"))
    app.config["RATE_LIMIT_WINDOW_SECONDS"] = int(os.getenv("RATE_LIMIT_WINDOW_SECONDS", "60"))
    app.config["RATE_LIMIT_SWEEP_INTERVAL"] = int(os.getenv("RATE_LIMIT_SWEEP_INTERVAL", "300"))

    if test_config:
        app.config.update(test_config)

    # Cấu hình logging
    setup_logging(app.config.get("LOG_DIR"))

    db.init_app(app)
    migrate.init_app(app, db)
    csrf.init_app(app)
    login_manager.init_app(app)
    cors.init_app(
        app,
        resources={
            r"/api/public/*": {"origins": "*", "methods": ["GET", "OPTIONS"]},
            r"/api/games": {"origins": "*", "methods": ["GET", "OPTIONS"]},
        },
        allow_headers=["Content-Type"],
    )

    # Mỗi app giữ 1 rate limiter riêng cho các API public
    app.extensions["rate_limiter"] = RateLimiter(
        max_requests=app.config["RATE_LIMIT_MAX_REQUESTS"],
        window_seconds=app.config["RATE_LIMIT_WINDOW_SECONDS"],
    )
    app.extensions["rate_limiter_last_sweep"] = time.time()

    @login_manager.user_loader
    def load_user(user_id):
        return db.session.get(User, int(user_id))

    @login_manager.unauthorized_handler
    def unauthorized():
        raise UnauthorizedError()

    register_error_handlers(app)

    from routes.api import api_bp
    from routes.auth import auth_bp
    from routes.website import website_bp
    from routes.textlink import textlink_bp
    from routes.game import game_bp
    from routes.cloudflare_account import cloudflare_bp

    app.register_blueprint(api_bp)
    app.register_blueprint(auth_bp)
    app.register_blueprint(website_bp)
    app.register_blueprint(textlink_bp)
    app.register_blueprint(game_bp)
    app.register_blueprint(cloudflare_bp)

    @app.before_request
    def sweep_rate_limiter():
        """Dọn entry rate limit hết hạn theo chu kỳ, không dọn khi đọc."""
        now = time.time()
        last = current_app.extensions["rate_limiter_last_sweep"]
        if now - last >= current_app.config["RATE_LIMIT_SWEEP_INTERVAL"]:
            current_app.extensions["rate_limiter_last_sweep"] = now
            current_app.extensions["rate_limiter"].sweep()

    return app


if __name__ == "__main__":
    from seeder.seed_user import seed_admin_user
    from seeder.seed_cloudflare_account import seed_cloudflare_account

    app = create_app()
    with app.app_context():
        db.create_all()
        seed_admin_user(app)
        seed_cloudflare_account(app)
    app.run(host="0.0.0.0", port=4000, debug=True)
