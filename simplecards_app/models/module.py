"""Module (card deck) and card models."""

from __future__ import annotations

from uuid import uuid4

from sqlalchemy.sql import func

from ..core.extensions import db


def _new_uuid() -> str:
    return str(uuid4())


class Module(db.Model):
    """A named collection of cards owned by a user."""

    __tablename__ = 'modules'

    NAME_MAX_LENGTH = 100

    uuid = db.Column(db.String(36), primary_key=True, default=_new_uuid)
    name = db.Column(db.String(NAME_MAX_LENGTH), nullable=False)
    user_uuid = db.Column(
        db.String(36),
        db.ForeignKey('users.uuid', ondelete='CASCADE'),
        nullable=False,
        index=True,
    )
    created_at = db.Column(db.DateTime(timezone=True), server_default=func.now())

    cards = db.relationship(
        'Card',
        backref='module',
        lazy=True,
        order_by='Card.position',
        cascade='all, delete-orphan',
        passive_deletes=True,
    )

    def to_dict(self) -> dict[str, object]:
        return {
            'uuid': self.uuid,
            'name': self.name,
            'user_uuid': self.user_uuid,
        }


class Card(db.Model):
    """A term/meaning pair belonging to a module."""

    __tablename__ = 'cards'

    uuid = db.Column(db.String(36), primary_key=True, default=_new_uuid)
    module_uuid = db.Column(
        db.String(36),
        db.ForeignKey('modules.uuid', ondelete='CASCADE'),
        nullable=False,
        index=True,
    )
    term = db.Column(db.Text, nullable=False)
    meaning = db.Column(db.Text, nullable=False)
    # Keeps the order cards had in the imported source
    position = db.Column(db.Integer, nullable=False, default=0)
    created_at = db.Column(db.DateTime(timezone=True), server_default=func.now())

    def to_dict(self) -> dict[str, object]:
        return {
            'uuid': self.uuid,
            'module_uuid': self.module_uuid,
            'term': self.term,
            'meaning': self.meaning,
        }
