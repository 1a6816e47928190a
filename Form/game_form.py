from datetime import datetime

from wtforms import BooleanField, IntegerField, SelectField, StringField, TextAreaField
from wtforms.validators import URL, DataRequired, Length, NumberRange, Optional

from Form.fields import BooleanMapField, StringListField
from Form.forms import ApiForm, ListQueryForm
from util.constant import PUBLIC_GAMES_PAGE_SIZE

GAME_SORT_FIELDS = ["title", "game_publish_year", "publish_year", "created_at", "game_developer"]
PUBLIC_GAME_SORT_FIELDS = ["title", "game_publish_year", "publish_year", "created_at"]


def _publish_year_range():
    return NumberRange(
        min=1980,
        max=datetime.utcnow().year,
        message="Year must be between 1980 and the current year",
    )


class GameForm(ApiForm):
    nullable_fields = ("game_developer", "game_publish_year", "game", "game_icon", "game_thumb")

    url = StringField("URL slug", validators=[DataRequired(), Length(max=255)])
    title = StringField("Title", validators=[DataRequired(), Length(max=255)])
    desc = TextAreaField("Description", validators=[DataRequired()])
    category = StringField("Category", validators=[DataRequired(), Length(max=100)])
    game_url = StringField("Game URL", validators=[DataRequired(), URL(message="Must be a valid URL"), Length(max=500)])
    game_icon = StringListField("Icons")
    game_thumb = StringListField("Thumbnails")
    game_developer = StringField("Developer", validators=[Optional(), Length(max=255)])
    game_publish_year = IntegerField("Publish year", validators=[Optional()])
    game_controls = BooleanMapField("Controls", keys=("keyboard", "mouse", "touch"))
    game = TextAreaField("Embed", validators=[Optional()])
    is_featured = BooleanField("Featured")

    def validate_game_publish_year(self, field):
        if field.data is not None:
            _publish_year_range()(self, field)


class GameUpdateForm(GameForm):
    def validate(self, extra_validators=None):
        for name in ("url", "title", "desc", "category", "game_url"):
            if not self.is_submitted_field(name):
                self._fields[name].validators = [Optional()]
        return super().validate(extra_validators=extra_validators)


class GameQueryForm(ListQueryForm):
    default_limit = PUBLIC_GAMES_PAGE_SIZE

    category = StringField("Category", validators=[Optional()])
    isFeatured = StringField("Featured", validators=[Optional()])
    developer = StringField("Developer", validators=[Optional()])
    year = IntegerField("Year", validators=[Optional()])
    sort = SelectField("Sort", choices=GAME_SORT_FIELDS, default="created_at")


class PublicGameQueryForm(GameQueryForm):
    sort = SelectField("Sort", choices=PUBLIC_GAME_SORT_FIELDS, default="created_at")
