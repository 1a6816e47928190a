# seed.py
from app import create_app
from database_init import db
from seeder.seed_user import seed_admin_user
from seeder.seed_cloudflare_account import seed_cloudflare_account

app = create_app()
with app.app_context():
    db.create_all()
    seed_admin_user(app)
    seed_cloudflare_account(app)
