import logging

from flask import Flask
from dotenv import load_dotenv
from werkzeug.exceptions import HTTPException
from sqlalchemy.orm.exc import StaleDataError

load_dotenv()

from config import Config  # noqa: E402  (load_dotenv needs to run first)
from extensions import cors, db, login_manager  # noqa: E402  (load_dotenv needs to run first)
from utils import json_error  # noqa: E402

logger = logging.getLogger(__name__)


def create_app(test_config: dict | None = None) -> Flask:
    """Application factory for the Ativix API."""

    app = Flask(__name__)
    app.config.from_object(Config)
    if test_config:
        app.config.update(test_config)

    logging.basicConfig(
        level=app.config.get("LOG_LEVEL", "INFO"),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    # init extensions
    db.init_app(app)
    login_manager.init_app(app)
    cors.init_app(app, resources={r"/*": {"origins": app.config["CORS_ORIGINS"]}})

    import security  # noqa: F401  registers the Flask-Login loaders

    # blueprints
    from modules.auth import bp as auth_bp
    from modules.users import bp as users_bp
    from modules.atividades import bp as atividades_bp
    from modules.relatorios import bp as relatorios_bp

    app.register_blueprint(auth_bp)
    app.register_blueprint(users_bp)
    app.register_blueprint(atividades_bp)
    app.register_blueprint(relatorios_bp)

    from ui_routes import ui
    app.register_blueprint(ui)

    register_error_handlers(app)

    # DB
    with app.app_context():
        # models must be imported before create_all()
        import models  # noqa: F401
        from modules.atividades import models as atividades_models  # noqa: F401

        db.create_all()

    @app.route("/health")
    def health():
        return {"status": "ok"}

    return app


def register_error_handlers(app: Flask) -> None:
    """Every error leaves as ``{"error": message}``."""

    @app.errorhandler(HTTPException)
    def handle_http_error(err: HTTPException):
        return json_error(err.description or err.name, err.code)

    @app.errorhandler(StaleDataError)
    def handle_stale(err: StaleDataError):
        db.session.rollback()
        logger.info("Concurrent update rejected: %s", err)
        return json_error("Atividade modificada por outro usuário. Recarregue e tente novamente.", 409)

    @app.errorhandler(Exception)
    def handle_unexpected(err: Exception):
        db.session.rollback()
        logger.exception("Unhandled error")
        return json_error("Erro interno do servidor", 500)


if __name__ == "__main__":
    app = create_app()
    app.run(debug=True)
