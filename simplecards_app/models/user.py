"""User database model."""

from __future__ import annotations

from uuid import uuid4

from flask_login import UserMixin
from sqlalchemy.sql import func
from werkzeug.security import check_password_hash, generate_password_hash

from ..core.extensions import db


class User(UserMixin, db.Model):
    """Application user model."""

    __tablename__ = 'users'

    uuid = db.Column(db.String(36), primary_key=True, default=lambda: str(uuid4()))
    login = db.Column(db.String(120), unique=True, nullable=False)
    password_hash = db.Column(db.String(256), nullable=False)
    created_at = db.Column(db.DateTime(timezone=True), server_default=func.now())

    modules = db.relationship(
        'Module',
        backref='owner',
        lazy=True,
        cascade='all, delete-orphan',
    )

    def get_id(self):
        return self.uuid

    def set_password(self, password: str) -> None:
        self.password_hash = generate_password_hash(password)

    def check_password(self, password: str) -> bool:
        return check_password_hash(self.password_hash, password)

    def to_dict(self) -> dict[str, object]:
        return {'uuid': self.uuid, 'login': self.login}
