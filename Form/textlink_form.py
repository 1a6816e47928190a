from wtforms import BooleanField, IntegerField, SelectField, StringField, TextAreaField
from wtforms.validators import URL, DataRequired, Length, NumberRange, Optional

from Form.forms import ApiForm, ListQueryForm

TEXTLINK_SORT_FIELDS = ["anchor_text", "link", "created_at", "updated_at"]


class TextlinkForm(ApiForm):
    nullable_fields = ("title", "website_id", "custom_domain", "include_paths", "exclude_paths")

    link = StringField("Link", validators=[DataRequired(), URL(message="Invalid URL format"), Length(max=500)])
    anchor_text = StringField("Anchor text", validators=[DataRequired(), Length(max=200)])
    target = StringField("Target", validators=[Optional(), Length(max=20)])
    rel = StringField("Rel", validators=[Optional(), Length(max=50)])
    title = StringField("Title", validators=[Optional(), Length(max=200)])
    website_id = IntegerField("Website", validators=[Optional(), NumberRange(min=1)])
    custom_domain = StringField("Custom domain", validators=[Optional(), Length(max=100)])
    show_on_all_pages = BooleanField("Show on all pages")
    include_paths = TextAreaField("Include paths", validators=[Optional(), Length(max=2000)])
    exclude_paths = TextAreaField("Exclude paths", validators=[Optional(), Length(max=2000)])


class TextlinkUpdateForm(TextlinkForm):
    def validate(self, extra_validators=None):
        for name in ("link", "anchor_text"):
            if not self.is_submitted_field(name):
                self._fields[name].validators = [Optional()]
        return super().validate(extra_validators=extra_validators)


class TextlinkQueryForm(ListQueryForm):
    website_id = IntegerField("Website", validators=[Optional()])
    custom_domain = StringField("Custom domain", validators=[Optional()])
    show_on_all_pages = StringField("Show on all pages", validators=[Optional()])
    sort = SelectField("Sort", choices=TEXTLINK_SORT_FIELDS, default="created_at")
