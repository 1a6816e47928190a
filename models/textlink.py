from dataclasses import dataclass
from datetime import datetime

from database_init import db
from util.exceptions import ValidationError
from util.until import isoformat, split_lines


@dataclass(frozen=True)
class ManagedWebsite:
    website_id: int


@dataclass(frozen=True)
class CustomDomain:
    name: str


def resolve_placement(website_id=None, custom_domain=None):
    """
    Gộp 2 field kiểu cũ (website_id, custom_domain) thành 1 placement.
    Bắt buộc có đúng 1 trong 2.
    """
    custom_domain = (custom_domain or "").strip() or None
    if website_id and custom_domain:
        raise ValidationError(
            details={"website_id": ["Provide either website_id or custom_domain, not both"]}
        )
    if website_id:
        return ManagedWebsite(int(website_id))
    if custom_domain:
        return CustomDomain(custom_domain)
    raise ValidationError(
        details={"website_id": ["Either website_id or custom_domain is required"]}
    )


class Textlink(db.Model):
    __tablename__ = "textlinks"
    __table_args__ = (
        db.CheckConstraint(
            "(website_id IS NOT NULL AND custom_domain IS NULL) OR "
            "(website_id IS NULL AND custom_domain IS NOT NULL)",
            name="ck_textlinks_single_placement",
        ),
    )

    id = db.Column(db.Integer, primary_key=True, autoincrement=True)
    link = db.Column(db.String(500), nullable=False)
    anchor_text = db.Column(db.String(200), nullable=False)
    target = db.Column(db.String(20), nullable=True, default="_blank")
    rel = db.Column(db.String(50), nullable=True, default="")
    title = db.Column(db.String(200), nullable=True)

    # Placement: website được quản lý HOẶC custom domain tự do
    website_id = db.Column(db.Integer, db.ForeignKey("websites.id"), nullable=True, index=True)
    custom_domain = db.Column(db.String(100), nullable=True)

    show_on_all_pages = db.Column(db.Boolean, nullable=False, default=True)
    include_paths = db.Column(db.Text, nullable=True)  # mỗi dòng 1 path
    exclude_paths = db.Column(db.Text, nullable=True)

    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)
    created_by = db.Column(db.Integer, db.ForeignKey("user.id"), nullable=True)
    updated_by = db.Column(db.Integer, db.ForeignKey("user.id"), nullable=True)

    website = db.relationship("Website", back_populates="textlinks")

    @property
    def placement(self):
        if self.website_id is not None:
            return ManagedWebsite(self.website_id)
        return CustomDomain(self.custom_domain)

    @placement.setter
    def placement(self, value):
        if isinstance(value, ManagedWebsite):
            self.website_id = value.website_id
            self.custom_domain = None
        elif isinstance(value, CustomDomain):
            self.website_id = None
            self.custom_domain = value.name
        else:
            raise TypeError(f"Unknown placement: {value!r}")

    def set_page_rules(self, show_on_all_pages, include_paths=None, exclude_paths=None):
        """include/exclude chỉ có nghĩa khi không hiện trên mọi trang."""
        self.show_on_all_pages = bool(show_on_all_pages)
        if self.show_on_all_pages:
            self.include_paths = None
            self.exclude_paths = None
        else:
            self.include_paths = include_paths or None
            self.exclude_paths = exclude_paths or None

    def to_backlink(self):
        return {
            "url": self.link,
            "textlink": self.anchor_text,
            "title": self.title or self.anchor_text,
            "rel": self.rel or "",
            "target": self.target or "_blank",
        }

    def to_dict(self):
        website = None
        if self.website is not None:
            website = {
                "id": self.website.id,
                "url": self.website.url,
                "title": self.website.title,
            }
        return {
            "id": self.id,
            "link": self.link,
            "anchor_text": self.anchor_text,
            "target": self.target,
            "rel": self.rel,
            "title": self.title,
            "website_id": self.website_id,
            "custom_domain": self.custom_domain,
            "show_on_all_pages": self.show_on_all_pages,
            "include_paths": self.include_paths,
            "exclude_paths": self.exclude_paths,
            "include_path_list": split_lines(self.include_paths),
            "exclude_path_list": split_lines(self.exclude_paths),
            "websites": website,
            "created_at": isoformat(self.created_at),
            "updated_at": isoformat(self.updated_at),
            "created_by": self.created_by,
            "updated_by": self.updated_by,
        }

    def __repr__(self):
        return f"<Textlink {self.anchor_text} -> {self.link}>"
