from enum import Enum


class ROLE(Enum):
    viewer = "viewer"
    editor = "editor"
    admin = "admin"

    @property
    def rank(self):
        return ROLE_RANK[self]

    @classmethod
    def parse(cls, raw):
        """Role lạ hoặc rỗng thì coi như viewer."""
        try:
            return cls((raw or "").strip().lower())
        except ValueError:
            return cls.viewer

    def at_least(self, other):
        return self.rank >= other.rank


# viewer < editor < admin
ROLE_RANK = {ROLE.viewer: 1, ROLE.editor: 2, ROLE.admin: 3}


# Quyền tối thiểu cho từng loại thao tác
ACTION_MIN_ROLE = {
    "read": ROLE.viewer,
    "write": ROLE.editor,
    "delete": ROLE.admin,
}


class PURGE_MODE(Enum):
    url = "files"
    hostname = "hosts"
    tag = "tags"
    prefix = "prefixes"

    @property
    def body_key(self):
        return self._value_

    @classmethod
    def choices(cls):
        return [m.name for m in cls]


MASKED_TOKEN = "***hidden***"
NETWORK_ERROR_STATUS = 0
TAG_MAX_LENGTH = 50

DEFAULT_PAGE_SIZE = 25
MAX_PAGE_SIZE = 100
BACKLINK_PAGE_SIZE = 100
PUBLIC_GAMES_PAGE_SIZE = 10

BACKLINK_CACHE_SECONDS = 300
