from app import create_app

app = create_app()

if __name__ == "__main__":
    from database_init import db
    from seeder.seed_user import seed_admin_user
    from seeder.seed_cloudflare_account import seed_cloudflare_account

    with app.app_context():
        db.create_all()
        seed_admin_user(app)
        seed_cloudflare_account(app)

    app.run(host="0.0.0.0", port=4000, debug=True)
