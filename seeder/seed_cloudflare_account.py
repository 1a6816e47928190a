# seeder/seed_cloudflare_account.py
import logging
import os

from dotenv import load_dotenv

from database_init import db
from models.cloudflare_acc import CloudflareAccount

load_dotenv()
logger = logging.getLogger(__name__)


def seed_cloudflare_account(app):
    with app.app_context():
        api_token = os.getenv("CLOUD_FLARE_TOKEN")
        account_id = os.getenv("CLOUDFLARE_ACCOUNT_ID")
        email = os.getenv("CLOUDFLARE_ACCOUNT_EMAIL")
        name = os.getenv("CLOUDFLARE_ACCOUNT_NAME", "Account 1")

        if not api_token or not account_id or not email:
            logger.warning(
                "❌ Thiếu CLOUD_FLARE_TOKEN, CLOUDFLARE_ACCOUNT_ID hoặc CLOUDFLARE_ACCOUNT_EMAIL trong .env"
            )
            return None

        # Kiểm tra tồn tại theo account_id (ưu tiên)
        cf_account = CloudflareAccount.query.filter_by(account_id=account_id).first()
        if cf_account:
            logger.info("⚠️ CloudflareAccount đã tồn tại, bỏ qua.")
            return cf_account

        cf_account = CloudflareAccount(
            account_name=name,
            email=email,
            api_token=api_token,
            account_id=account_id,
        )
        db.session.add(cf_account)
        db.session.commit()
        logger.info(f"✅ Đã tạo CloudflareAccount: {name} ({account_id})")
        return cf_account
