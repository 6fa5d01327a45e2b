# File: simplecards_app/modules/health/routes.py
from flask import current_app
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from . import health_bp
from ...core.error_handlers import error_response, success_response
from ...core.extensions import db


@health_bp.route('/ping', methods=['GET'])
def ping():
    """Liveness check: the app is up and the database answers."""
    try:
        db.session.execute(text('SELECT 1'))
    except SQLAlchemyError as exc:
        current_app.logger.error(f"ping: database check failed: {exc}")
        return error_response('Database is unavailable', 'DATABASE_UNAVAILABLE', 500)
    return success_response(message='pong')
