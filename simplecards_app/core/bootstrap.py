"""Bootstrap helpers for configuring the Flask application."""

from __future__ import annotations

import atexit
import logging
import time

from flask import Flask, g, request

from .error_handlers import error_response
from .extensions import db, login_manager
from .logging_config import LOGGER_NAME, setup_logging
from .module_registry import register_default_modules


def configure_logging(app: Flask) -> None:
    """Configure application logging if no handlers are present."""

    if app.logger.handlers:
        return

    app.logger.setLevel(app.config.get("LOG_LEVEL", "INFO").upper())
    handler = logging.StreamHandler()
    formatter = logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s")
    handler.setFormatter(formatter)
    app.logger.addHandler(handler)
    app.logger.propagate = False
    app.logger.info("Flask app logger configured successfully.")


def register_extensions(app: Flask) -> None:
    """Initialize shared extensions with the Flask app instance."""

    db.init_app(app)
    login_manager.init_app(app)

    @login_manager.user_loader
    def load_user(user_id: str):
        from ..models import User

        return db.session.get(User, user_id)

    @login_manager.unauthorized_handler
    def unauthorized():
        return error_response("Authentication required", "UNAUTHENTICATED", 401)


def configure_request_logging(app: Flask) -> None:
    """Log one line per handled request: method, path, status, size and duration."""

    request_logger = logging.getLogger(f"{LOGGER_NAME}.http")

    @app.before_request
    def _start_timer():
        g.request_started_at = time.perf_counter()

    @app.after_request
    def _log_request(response):
        started_at = g.pop("request_started_at", None)
        duration_ms = (time.perf_counter() - started_at) * 1000 if started_at else 0.0
        request_logger.info(
            "%s %s %s -> %s (%s bytes, %.1f ms)",
            request.remote_addr,
            request.method,
            request.path,
            response.status_code,
            response.calculate_content_length() or 0,
            duration_ms,
        )
        return response


def register_blueprints(app: Flask) -> None:
    """Register all default blueprints with the app."""

    register_default_modules(app)


def register_cli_commands(app: Flask) -> None:
    from ..modules.imports.cli import quizlet_parse_command

    app.cli.add_command(quizlet_parse_command)


def initialize_database(app: Flask) -> None:
    """Create database tables."""

    from .. import models  # noqa: F401

    db.create_all()
    app.logger.info("Database tables ready.")


def register_import_services(app: Flask) -> None:
    """Wire the Quizlet parser, import pools and use cases into ``app.extensions``."""

    from ..modules.card_modules.repository import ModulesRepository
    from ..modules.card_modules.services import ModulesUseCase
    from ..modules.cards.repository import CardsRepository
    from ..modules.cards.services import CardsUseCase
    from ..modules.imports.pools import build_import_pools
    from ..modules.imports.quizlet import QuizletParser

    logger = setup_logging(
        app,
        log_level=app.config.get("LOG_LEVEL", "INFO"),
        log_dir=app.config.get("LOG_DIR"),
        json_format=app.config.get("LOG_JSON", False),
        to_file=app.config.get("LOG_TO_FILE", True),
    )

    quizlet_parser = QuizletParser(
        base_url=app.config["QUIZLET_BASE_URL"],
        attempts=app.config["QUIZLET_FETCH_ATTEMPTS"],
        retry_delay=app.config["QUIZLET_RETRY_DELAY"],
        timeout=app.config["QUIZLET_REQUEST_TIMEOUT"],
        log=logger.getChild("quizlet"),
    )
    pools = build_import_pools(app.config, logger.getChild("imports"))

    modules_repo = ModulesRepository(app)
    cards_repo = CardsRepository()

    app.extensions["simplecards"] = {
        "quizlet_parser": quizlet_parser,
        "import_pools": pools,
        "modules_use_case": ModulesUseCase(
            modules_repo=modules_repo,
            cards_repo=cards_repo,
            quizlet_parser=quizlet_parser,
            quizlet_import_pool=pools.quizlet,
            csv_import_pool=pools.csv,
            log=logger.getChild("imports"),
        ),
        "cards_use_case": CardsUseCase(cards_repo),
    }

    if app.config.get("IMPORT_WORKERS_AUTOSTART", True):
        pools.start()
        atexit.register(pools.shutdown)
        app.logger.info("Import worker pools started.")
