from datetime import datetime

from database_init import db
from flask_login import UserMixin
from util.constant import ROLE


class User(UserMixin, db.Model):
    __tablename__ = "user"

    id = db.Column(db.Integer, primary_key=True)
    username = db.Column(db.String(80), unique=True, nullable=False)
    email = db.Column(db.String(120), unique=True, nullable=False)
    password = db.Column(db.String(255), nullable=False)
    is_active = db.Column(db.Boolean, default=True)
    # viewer < editor < admin
    role = db.Column(db.String(20), nullable=False, default=ROLE.viewer.value)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    def get_id(self):
        return str(self.id)

    @property
    def role_enum(self):
        return ROLE.parse(self.role)

    def to_dict(self):
        return {
            "id": self.id,
            "username": self.username,
            "email": self.email,
            "role": self.role_enum.value,
        }

    def __repr__(self):
        return f"<User {self.username} ({self.role})>"
