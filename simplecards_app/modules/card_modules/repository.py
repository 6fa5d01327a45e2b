"""Persistence for modules (card decks)."""

from __future__ import annotations

from contextlib import contextmanager
from typing import Iterator, List

from flask import Flask, has_app_context
from sqlalchemy.exc import SQLAlchemyError

from ...core.error_handlers import NotFoundError
from ...models import Card, Module, db
from ...schemas import ModuleWithCards


class ModulesRepository:
    """Database operations for modules, including the atomic import write."""

    def __init__(self, app: Flask) -> None:
        self._app = app

    @contextmanager
    def _app_scope(self) -> Iterator[None]:
        # Import workers run outside any request: give them their own context/session
        if has_app_context():
            yield
        else:
            with self._app.app_context():
                yield

    def get_all_modules(self, user_uuid: str) -> List[Module]:
        return (
            Module.query.filter_by(user_uuid=user_uuid)
            .order_by(Module.created_at, Module.name)
            .all()
        )

    def module_exists(self, user_uuid: str, module_uuid: str) -> bool:
        return db.session.query(
            Module.query.filter_by(uuid=module_uuid, user_uuid=user_uuid).exists()
        ).scalar()

    def get_module(self, user_uuid: str, module_uuid: str) -> Module:
        module = Module.query.filter_by(uuid=module_uuid, user_uuid=user_uuid).first()
        if module is None:
            raise NotFoundError(f'module with uuid="{module_uuid}" does not exist', resource='module')
        return module

    def create_new_module(self, user_uuid: str, name: str) -> Module:
        module = Module(name=name, user_uuid=user_uuid)
        db.session.add(module)
        db.session.commit()
        return module

    def update_module(self, user_uuid: str, module_uuid: str, name: str) -> Module:
        module = self.get_module(user_uuid, module_uuid)
        module.name = name
        db.session.commit()
        return module

    def delete_module(self, user_uuid: str, module_uuid: str) -> None:
        Module.query.filter_by(uuid=module_uuid, user_uuid=user_uuid).delete()
        db.session.commit()

    def create_new_module_with_cards(self, module_with_cards: ModuleWithCards) -> str:
        """
        Insert the module and all of its cards in one transaction.

        Either every row is committed or none is. Returns the new module uuid.
        """
        with self._app_scope():
            try:
                module = Module(
                    name=module_with_cards.module.name,
                    user_uuid=module_with_cards.module.user_uuid,
                )
                db.session.add(module)
                db.session.flush()
                module_uuid = module.uuid

                db.session.add_all([
                    Card(
                        module_uuid=module_uuid,
                        term=card.term,
                        meaning=card.meaning,
                        position=position,
                    )
                    for position, card in enumerate(module_with_cards.cards)
                ])
                db.session.commit()
            except SQLAlchemyError:
                db.session.rollback()
                raise

        return module_uuid
