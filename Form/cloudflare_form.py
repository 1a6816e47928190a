from wtforms import IntegerField, SelectField, StringField
from wtforms.validators import AnyOf, DataRequired, Email, Length, NumberRange, Optional

from Form.fields import StringListField
from Form.forms import ApiForm, ListQueryForm
from util.constant import PURGE_MODE


class CloudflareAccountForm(ApiForm):
    account_name = StringField("Account name", validators=[DataRequired(message="Account name is required"), Length(max=100)])
    email = StringField("Email", validators=[DataRequired(), Email(message="Valid email is required"), Length(max=255)])
    api_token = StringField("API Token", validators=[DataRequired(message="API token is required"), Length(max=255)])
    account_id = StringField("Account ID", validators=[DataRequired(message="Account ID is required"), Length(max=64)])


class CloudflareAccountUpdateForm(CloudflareAccountForm):
    def validate(self, extra_validators=None):
        for name in ("account_name", "email", "account_id"):
            if not self.is_submitted_field(name):
                self._fields[name].validators = [Optional()]
        # Token rỗng = giữ token cũ
        self.api_token.validators = [Optional(), Length(max=255)]
        return super().validate(extra_validators=extra_validators)


class PurgeForm(ApiForm):
    cloudflare_account_id = IntegerField(
        "Cloudflare account",
        validators=[DataRequired(message="Account ID is required"), NumberRange(min=1)],
    )
    zone_id = StringField("Zone ID", validators=[DataRequired(message="Zone ID is required")])
    mode = StringField("Mode", validators=[DataRequired(), AnyOf(PURGE_MODE.choices())])
    payload = StringListField("Payload")
    exclusions = StringListField("Exclusions")

    def validate_payload(self, field):
        if not field.data:
            raise ValueError("At least one item to purge is required")


class PurgeLogQueryForm(ListQueryForm):
    cloudflare_account_id = IntegerField("Cloudflare account", validators=[Optional()])
    mode = SelectField("Mode", choices=[("", "")] + [(m, m) for m in PURGE_MODE.choices()], default="")
    status_filter = SelectField("Status", choices=["", "success", "error"], default="")
    sort = SelectField("Sort", choices=["created_at", "mode", "status_code"], default="created_at")


class AccountQueryForm(ListQueryForm):
    pass
