from wtforms import Field
from wtforms.widgets import TextInput


class StringListField(Field):
    """
    Field nhận list chuỗi (JSON array) -> data là list[str].
    Giá trị không phải chuỗi sẽ bị báo lỗi thay vì ép kiểu.
    """

    widget = TextInput()

    def _value(self):
        return "\n".join(self.data or [])

    def process_data(self, value):
        self.data = list(value) if value else []

    def process_formdata(self, valuelist):
        if not valuelist:
            self.data = []
            return
        if any(not isinstance(item, str) for item in valuelist):
            self.data = []
            raise ValueError(self.gettext("Must be a list of strings"))
        self.data = list(valuelist)


class BooleanMapField(Field):
    """Object JSON gồm các cờ boolean cố định, ví dụ {"keyboard": true, "mouse": false}."""

    widget = TextInput()

    def __init__(self, label=None, validators=None, keys=(), **kwargs):
        super().__init__(label, validators, **kwargs)
        self.keys = tuple(keys)

    def process_data(self, value):
        self.data = self._normalize(value or {})

    def process_formdata(self, valuelist):
        if not valuelist:
            return
        value = valuelist[0]
        if not isinstance(value, dict):
            raise ValueError(self.gettext("Must be an object"))
        unknown = set(value) - set(self.keys)
        if unknown:
            raise ValueError(self.gettext("Unknown keys: ") + ", ".join(sorted(unknown)))
        if any(not isinstance(v, bool) for v in value.values()):
            raise ValueError(self.gettext("Values must be booleans"))
        # Chỉ giữ key client gửi lên để update từng phần không ghi đè key còn lại
        self.data = {key: value[key] for key in self.keys if key in value}

    def _normalize(self, value):
        return {key: bool(value.get(key, False)) for key in self.keys}
