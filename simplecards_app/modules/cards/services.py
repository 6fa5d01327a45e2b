"""Cards use case."""

from __future__ import annotations

from typing import List, Optional

from flask import current_app

from ...models import Card
from .repository import CardsRepository


class CardsUseCase:

    def __init__(self, repo: CardsRepository) -> None:
        self.repo = repo

    def get_module_cards(self, module_uuid: str) -> List[Card]:
        return self.repo.get_module_cards(module_uuid)

    def create_card(self, module_uuid: str, term: str, meaning: str) -> Card:
        return self.repo.create_card(module_uuid, term, meaning)

    def save_card(
        self,
        module_uuid: str,
        card_uuid: str,
        term: Optional[str] = None,
        meaning: Optional[str] = None,
    ) -> Card:
        return self.repo.save_card(module_uuid, card_uuid, term=term, meaning=meaning)

    def delete_card(self, module_uuid: str, card_uuid: str) -> None:
        self.repo.delete_card(module_uuid, card_uuid)


def get_cards_use_case() -> CardsUseCase:
    return current_app.extensions['simplecards']['cards_use_case']
