import click
from flask import Flask, jsonify

from inkwell.config import Config
from inkwell.errors import DomainError
from inkwell.extensions import db, migrate, jwt
from inkwell.utils.responses import json_error


def create_app(config_overrides=None):
    app = Flask(__name__)
    app.config.from_object(Config)
    if config_overrides:
        app.config.update(config_overrides)

    app.logger.setLevel(app.config.get("LOG_LEVEL", "INFO"))

    # 1) Extension'lar
    db.init_app(app)
    migrate.init_app(app, db)
    jwt.init_app(app)

    # 2) Modeller (metadata için import şart)
    from inkwell.models import user, book, bookmark  # noqa: F401

    if app.config.get("AUTO_CREATE_TABLES", True):
        with app.app_context():
            db.create_all()

    # 3) API blueprintleri
    from inkwell.controllers.auth_controller import auth_bp
    from inkwell.controllers.book_controller import book_bp
    from inkwell.controllers.bookmark_controller import bookmark_bp
    app.register_blueprint(auth_bp, url_prefix="/api/auth")
    app.register_blueprint(book_bp, url_prefix="/api/books")
    app.register_blueprint(bookmark_bp, url_prefix="/api/bookmarks")

    @app.get("/")
    def index():
        return "INKWELL API is running"

    @app.get("/health")
    def health():
        return jsonify({"ok": True})

    @app.errorhandler(DomainError)
    def _domain_error(e):
        return json_error(e)

    @app.errorhandler(500)
    def _server_error(e):
        return jsonify({"success": False, "error": "internal_error", "message": "Server error"}), 500

    # 4) Purge: CLI + scheduler (günlük + açılış)
    from inkwell.tasks.purge_deleted import run_purge_job

    @app.cli.command("purge-books")
    def purge_books():
        """Permanently delete books whose deletion grace period has passed."""
        purged = run_purge_job(app)
        click.echo(f"Purged {purged} books")

    # CLI komutlarında (purge-books, db upgrade) scheduler açılmaz; sadece `flask run` ve WSGI
    ctx = click.get_current_context(silent=True)
    if ctx is None or ctx.command.name == "run":
        from inkwell.tasks.scheduler import start_scheduler
        start_scheduler(app)

    return app
