from datetime import datetime

from sqlalchemy import and_
from sqlalchemy.ext.hybrid import hybrid_property

from database_init import db
from util.until import isoformat


class CloudflarePurgeLog(db.Model):
    """Append-only: mỗi lần purge (thành công hay lỗi) ghi đúng 1 dòng."""

    __tablename__ = "cloudflare_purge_logs"

    id = db.Column(db.Integer, primary_key=True, autoincrement=True)
    cloudflare_account_id = db.Column(
        db.Integer, db.ForeignKey("cloudflare_accounts.id"), nullable=True, index=True
    )
    mode = db.Column(db.String(20), nullable=False)
    payload = db.Column(db.JSON, nullable=False)
    exclusions = db.Column(db.JSON, nullable=True)
    status_code = db.Column(db.Integer, nullable=False)  # 0 = lỗi mạng, không có HTTP response
    result = db.Column(db.JSON, nullable=True)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    created_by = db.Column(db.Integer, db.ForeignKey("user.id"), nullable=True)

    cloudflare_account = db.relationship("CloudflareAccount", back_populates="purge_logs")

    @hybrid_property
    def is_success(self):
        return 200 <= self.status_code < 300

    @is_success.expression
    def is_success(cls):
        return and_(cls.status_code >= 200, cls.status_code < 300)

    def to_dict(self):
        account = self.cloudflare_account
        return {
            "id": self.id,
            "cloudflare_account_id": self.cloudflare_account_id,
            "account_name": account.account_name if account else None,
            "account_email": account.email if account else None,
            "mode": self.mode,
            "payload": self.payload,
            "exclusions": self.exclusions,
            "status_code": self.status_code,
            "result": self.result,
            "created_at": isoformat(self.created_at),
            "created_by": self.created_by,
        }

    def __repr__(self):
        return f"<CloudflarePurgeLog {self.mode} {self.status_code}>"
