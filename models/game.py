from datetime import datetime

from database_init import db
from util.until import isoformat

DEFAULT_GAME_CONTROLS = {"keyboard": False, "mouse": False, "touch": False}


class Game(db.Model):
    __tablename__ = "games"

    id = db.Column(db.Integer, primary_key=True, autoincrement=True)
    url = db.Column(db.String(255), nullable=False, unique=True)  # slug
    title = db.Column(db.String(255), nullable=False)
    desc = db.Column(db.Text, nullable=True)
    category = db.Column(db.String(100), nullable=True, index=True)
    game_url = db.Column(db.String(500), nullable=True)
    game_icon = db.Column(db.JSON, nullable=True)  # list đường dẫn ảnh
    game_thumb = db.Column(db.JSON, nullable=True)
    game_developer = db.Column(db.String(255), nullable=True)
    game_publish_year = db.Column(db.Integer, nullable=True)
    game_controls = db.Column(db.JSON, nullable=True, default=lambda: dict(DEFAULT_GAME_CONTROLS))
    game = db.Column(db.Text, nullable=True)  # iframe HTML hoặc URL nhúng
    is_featured = db.Column(db.Boolean, nullable=False, default=False)

    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)
    created_by = db.Column(db.Integer, db.ForeignKey("user.id"), nullable=True)
    updated_by = db.Column(db.Integer, db.ForeignKey("user.id"), nullable=True)

    def to_dict(self):
        return {
            "id": self.id,
            "url": self.url,
            "title": self.title,
            "desc": self.desc,
            "category": self.category,
            "game_url": self.game_url,
            "game_icon": self.game_icon or [],
            "game_thumb": self.game_thumb or [],
            "game_developer": self.game_developer,
            "game_publish_year": self.game_publish_year,
            "game_controls": {**DEFAULT_GAME_CONTROLS, **(self.game_controls or {})},
            "game": self.game,
            "is_featured": self.is_featured,
            "created_at": isoformat(self.created_at),
            "updated_at": isoformat(self.updated_at),
            "created_by": self.created_by,
            "updated_by": self.updated_by,
        }

    def __repr__(self):
        return f"<Game {self.url}>"
