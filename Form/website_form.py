from wtforms import BooleanField, IntegerField, SelectField, StringField, TextAreaField
from wtforms.validators import URL, DataRequired, Length, NumberRange, Optional

from Form.forms import ApiForm, ListQueryForm

WEBSITE_SORT_FIELDS = [
    "traffic",
    "domain_rating",
    "backlinks",
    "referring_domains",
    "created_at",
    "title",
    "category",
]


class WebsiteForm(ApiForm):
    nullable_fields = ("desc", "category")

    url = StringField("URL", validators=[DataRequired(), URL(message="Invalid URL format"), Length(max=500)])
    title = StringField("Title", validators=[DataRequired(), Length(max=200)])
    desc = TextAreaField("Description", validators=[Optional(), Length(max=1000)])
    category = StringField("Category", validators=[Optional(), Length(max=50)])
    is_gsa = BooleanField("GSA")
    is_index = BooleanField("Indexed")
    is_featured = BooleanField("Featured")
    is_wp = BooleanField("WordPress")
    traffic = IntegerField("Traffic", validators=[Optional(), NumberRange(min=0)])
    domain_rating = IntegerField(
        "Domain rating",
        validators=[Optional(), NumberRange(min=0, max=100, message="Domain rating must be between 0 and 100")],
    )
    backlinks = IntegerField("Backlinks", validators=[Optional(), NumberRange(min=0)])
    referring_domains = IntegerField("Referring domains", validators=[Optional(), NumberRange(min=0)])


class WebsiteUpdateForm(WebsiteForm):
    """Update từng phần: field nào gửi lên mới bị kiểm tra bắt buộc."""

    def validate(self, extra_validators=None):
        for name in ("url", "title"):
            if not self.is_submitted_field(name):
                self._fields[name].validators = [Optional()]
        return super().validate(extra_validators=extra_validators)


class WebsiteQueryForm(ListQueryForm):
    category = StringField("Category", validators=[Optional()])
    isFeatured = StringField("Featured", validators=[Optional()])
    isIndex = StringField("Indexed", validators=[Optional()])
    isGSA = StringField("GSA", validators=[Optional()])
    isWP = StringField("WordPress", validators=[Optional()])
    minTraffic = IntegerField("Min traffic", validators=[Optional()])
    minDR = IntegerField("Min DR", validators=[Optional()])
    sort = SelectField("Sort", choices=WEBSITE_SORT_FIELDS, default="created_at")
