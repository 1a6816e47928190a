# seeder/seed_user.py
import logging
import os

from dotenv import load_dotenv
from werkzeug.security import generate_password_hash

from database_init import db
from models.user import User
from util.constant import ROLE

load_dotenv()
logger = logging.getLogger(__name__)


def seed_admin_user(app):
    with app.app_context():
        username = os.getenv("ADMIN_USERNAME")
        email = os.getenv("ADMIN_EMAIL")
        raw_password = os.getenv("ADMIN_PASSWORD")

        if not username or not email or not raw_password:
            logger.warning("❌ Thiếu ADMIN_USERNAME, ADMIN_EMAIL hoặc ADMIN_PASSWORD trong .env")
            return None

        user = User.query.filter_by(username=username).first()
        if user:
            logger.info("⚠️ User admin đã tồn tại, bỏ qua.")
            return user

        user = User(
            username=username,
            email=email,
            password=generate_password_hash(raw_password),
            is_active=True,
            role=ROLE.admin.value,
        )
        db.session.add(user)
        db.session.commit()
        logger.info(f"✅ Đã tạo user admin: {username}")
        return user
