from datetime import datetime

from database_init import db
from util.until import isoformat


class Website(db.Model):
    __tablename__ = "websites"

    id = db.Column(db.Integer, primary_key=True, autoincrement=True)
    url = db.Column(db.String(500), nullable=False, unique=True)
    title = db.Column(db.String(200), nullable=False)
    desc = db.Column(db.Text, nullable=True)
    category = db.Column(db.String(50), nullable=True, index=True)

    is_index = db.Column(db.Boolean, nullable=False, default=True)
    is_featured = db.Column(db.Boolean, nullable=False, default=False)
    is_gsa = db.Column(db.Boolean, nullable=False, default=False)
    is_wp = db.Column(db.Boolean, nullable=False, default=False)

    traffic = db.Column(db.Integer, nullable=False, default=0)
    domain_rating = db.Column(db.Integer, nullable=False, default=0)  # 0-100
    backlinks = db.Column(db.Integer, nullable=False, default=0)
    referring_domains = db.Column(db.Integer, nullable=False, default=0)

    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)
    created_by = db.Column(db.Integer, db.ForeignKey("user.id"), nullable=True)
    updated_by = db.Column(db.Integer, db.ForeignKey("user.id"), nullable=True)

    textlinks = db.relationship("Textlink", back_populates="website", lazy=True)

    def to_dict(self):
        return {
            "id": self.id,
            "url": self.url,
            "title": self.title,
            "desc": self.desc,
            "category": self.category,
            "is_index": self.is_index,
            "is_featured": self.is_featured,
            "is_gsa": self.is_gsa,
            "is_wp": self.is_wp,
            "traffic": self.traffic,
            "domain_rating": self.domain_rating,
            "backlinks": self.backlinks,
            "referring_domains": self.referring_domains,
            "created_at": isoformat(self.created_at),
            "updated_at": isoformat(self.updated_at),
            "created_by": self.created_by,
            "updated_by": self.updated_by,
        }

    def __repr__(self):
        return f"<Website {self.url}>"
