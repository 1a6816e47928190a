from datetime import datetime

from database_init import db
from util.constant import MASKED_TOKEN
from util.until import isoformat


class CloudflareAccount(db.Model):
    __tablename__ = "cloudflare_accounts"

    id = db.Column(db.Integer, primary_key=True)
    account_name = db.Column(db.String(100), nullable=False)
    email = db.Column(db.String(255), nullable=False, unique=True)
    api_token = db.Column(db.String(255), nullable=False)  # CLOUD_FLARE_TOKEN, không bao giờ trả ra ngoài
    account_id = db.Column(db.String(64), nullable=False, unique=True)  # CLOUDFLARE_ACCOUNT_ID

    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)
    created_by = db.Column(db.Integer, db.ForeignKey("user.id"), nullable=True)
    updated_by = db.Column(db.Integer, db.ForeignKey("user.id"), nullable=True)

    purge_logs = db.relationship("CloudflarePurgeLog", back_populates="cloudflare_account", lazy="dynamic")

    def to_public_dict(self):
        """Dạng duy nhất được phép trả ra API: token luôn bị che."""
        return {
            "id": self.id,
            "account_name": self.account_name,
            "email": self.email,
            "api_token": MASKED_TOKEN,
            "account_id": self.account_id,
            "created_at": isoformat(self.created_at),
            "updated_at": isoformat(self.updated_at),
            "created_by": self.created_by,
            "updated_by": self.updated_by,
        }

    def __repr__(self):
        return f"<CloudflareAccount {self.account_name}>"
