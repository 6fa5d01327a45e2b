"""Persistence for cards."""

from __future__ import annotations

from typing import List, Optional

from sqlalchemy import func

from ...core.error_handlers import NotFoundError
from ...models import Card, db


class CardsRepository:

    def get_module_cards(self, module_uuid: str) -> List[Card]:
        return (
            Card.query.filter_by(module_uuid=module_uuid)
            .order_by(Card.position, Card.created_at)
            .all()
        )

    def create_card(self, module_uuid: str, term: str, meaning: str) -> Card:
        last_position = (
            db.session.query(func.max(Card.position))
            .filter(Card.module_uuid == module_uuid)
            .scalar()
        )
        card = Card(
            module_uuid=module_uuid,
            term=term,
            meaning=meaning,
            position=0 if last_position is None else last_position + 1,
        )
        db.session.add(card)
        db.session.commit()
        return card

    def save_card(
        self,
        module_uuid: str,
        card_uuid: str,
        term: Optional[str] = None,
        meaning: Optional[str] = None,
    ) -> Card:
        """Update the given fields of a card; empty values keep the stored ones."""
        card = Card.query.filter_by(uuid=card_uuid, module_uuid=module_uuid).first()
        if card is None:
            raise NotFoundError(f'card with uuid="{card_uuid}" does not exist', resource='card')

        if term:
            card.term = term
        if meaning:
            card.meaning = meaning
        db.session.commit()
        return card

    def delete_card(self, module_uuid: str, card_uuid: str) -> None:
        Card.query.filter_by(uuid=card_uuid, module_uuid=module_uuid).delete()
        db.session.commit()
