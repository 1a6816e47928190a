from flask_wtf import FlaskForm
from werkzeug.datastructures import MultiDict
from wtforms import BooleanField, Form, IntegerField, PasswordField, SelectField, StringField
from wtforms.validators import InputRequired, Length, Optional

from Form.fields import BooleanMapField, StringListField
from util.constant import DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE
from util.exceptions import ValidationError


def json_formdata(payload):
    """
    Chuyển body JSON thành MultiDict cho WTForms:
    list -> nhiều giá trị cùng key, null -> bỏ qua.
    """
    formdata = MultiDict()
    for key, value in payload.items():
        if value is None:
            continue
        if isinstance(value, list):
            for item in value:
                formdata.add(key, item)
        else:
            formdata.add(key, value)
    return formdata


def json_type_error(field, value):
    """Kiểu JSON phải khớp field, tránh WTForms tự ép kiểu (1.7 -> 1, "a" -> ["a"])."""
    if isinstance(field, StringListField):
        if not isinstance(value, list):
            return "Must be a list of strings"
    elif isinstance(field, BooleanMapField):
        if not isinstance(value, dict):
            return "Must be an object"
    elif isinstance(field, BooleanField):
        if not isinstance(value, bool):
            return "Must be a boolean"
    elif isinstance(field, IntegerField):
        if isinstance(value, bool) or not isinstance(value, int):
            return "Must be an integer"
    elif isinstance(field, StringField):
        if not isinstance(value, str):
            return "Must be a string"
    return None


class ApiForm(FlaskForm):
    """FlaskForm dùng cho JSON API; CSRF đã được CSRFProtect kiểm tra ở tầng request."""

    class Meta:
        csrf = False

    # Field được phép gửi null để xoá giá trị
    nullable_fields = ()

    @classmethod
    def from_json(cls, payload, **kwargs):
        if not isinstance(payload, dict):
            raise ValidationError("Invalid input data", details={"body": ["Request body must be a JSON object"]})
        form = cls(formdata=json_formdata(payload), **kwargs)
        form.submitted = {
            name: value for name, value in payload.items() if name in form._fields
        }
        type_errors = {}
        for name, value in form.submitted.items():
            message = None if value is None else json_type_error(form._fields[name], value)
            if message:
                type_errors[name] = [message]
        if type_errors:
            raise ValidationError("Invalid input data", details=type_errors)
        return form

    def validate_or_raise(self, message="Invalid input data"):
        if not self.validate():
            raise ValidationError(message, details=self.errors)
        return self

    def submitted_data(self):
        """Chỉ lấy các field client thực sự gửi (phục vụ update từng phần)."""
        data = {}
        for name, raw in self.submitted.items():
            if raw is None:
                if name in self.nullable_fields:
                    data[name] = None
                continue
            data[name] = self._fields[name].data
        return data

    def is_submitted_field(self, name):
        return name in self.submitted


class LoginForm(ApiForm):
    username = StringField("Username", validators=[InputRequired(), Length(min=3, max=80)])
    password = PasswordField("Password", validators=[InputRequired(), Length(min=1)])


class ListQueryForm(Form):
    """Query string chung cho các trang list: page/limit/sort/order/search."""

    default_limit = DEFAULT_PAGE_SIZE

    search = StringField("Search", validators=[Optional()])
    page = IntegerField("Page", validators=[Optional()])
    limit = IntegerField("Limit", validators=[Optional()])
    order = SelectField("Order", choices=["asc", "desc"], default="desc")

    @classmethod
    def from_args(cls, args):
        form = cls(formdata=args)
        if not form.validate():
            raise ValidationError("Invalid query parameters", details=form.errors)
        return form

    @property
    def page_value(self):
        return max(self.page.data or 1, 1)

    @property
    def limit_value(self):
        if self.limit.data is None:
            return self.default_limit
        return min(max(self.limit.data, 1), MAX_PAGE_SIZE)

    @property
    def search_value(self):
        return (self.search.data or "").strip() or None
