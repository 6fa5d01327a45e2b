"""
Auth Service - registration and credential checks.

Keeps DB logic out of the routes.
"""
from flask import current_app
from sqlalchemy.exc import IntegrityError

from ...core.error_handlers import AuthenticationError, ConflictError
from ...models import User, db


class AuthService:
    """Service for Authentication related operations."""

    @staticmethod
    def register_user(login, password):
        """
        Create a new user.

        Raises:
            ConflictError if the login is already taken
        """
        if User.query.filter_by(login=login).first() is not None:
            raise ConflictError(f'user "{login}" already exists')

        user = User(login=login)
        user.set_password(password)
        db.session.add(user)
        try:
            db.session.commit()
        except IntegrityError:
            # Lost a race with a concurrent registration of the same login
            db.session.rollback()
            raise ConflictError(f'user "{login}" already exists')

        current_app.logger.info(f"User registered: {login} ({user.uuid})")
        return user

    @staticmethod
    def verify_user(login, password):
        """
        Verify credentials.

        Raises:
            AuthenticationError if the login is unknown or the password is wrong
        """
        user = User.query.filter_by(login=login).first()
        if user is None or not user.check_password(password):
            raise AuthenticationError('Invalid login or password')
        return user
