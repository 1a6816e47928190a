from flask_cors import CORS
from flask_login import LoginManager
from flask_migrate import Migrate
from flask_wtf.csrf import CSRFProtect

csrf = CSRFProtect()
cors = CORS()
migrate = Migrate()
login_manager = LoginManager()
