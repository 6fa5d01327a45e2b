"""Modules use case: CRUD passthroughs and import queueing."""

from __future__ import annotations

import logging
from typing import BinaryIO, List

from flask import current_app

from ...core.worker_pool import WorkerPool
from ...models import Module
from ...schemas import ModuleDraft
from ..cards.repository import CardsRepository
from ..imports.jobs import CSVImportWork, QuizletImportWork, QuizletModuleParser
from .repository import ModulesRepository


class ModulesUseCase:
    """
    Entry point used by the HTTP layer for everything module related.

    Imports are only queued here: ``queue_*_import`` returns as soon as the
    job sits in its pool's queue. The only error they raise is
    ``WorkerPoolClosedError``. A full queue blocks the caller until a worker
    frees a slot.
    """

    def __init__(
        self,
        modules_repo: ModulesRepository,
        cards_repo: CardsRepository,
        quizlet_parser: QuizletModuleParser,
        quizlet_import_pool: WorkerPool[QuizletImportWork],
        csv_import_pool: WorkerPool[CSVImportWork],
        log: logging.Logger,
    ) -> None:
        self.modules_repo = modules_repo
        self.cards_repo = cards_repo
        self.quizlet_parser = quizlet_parser
        self.quizlet_import_pool = quizlet_import_pool
        self.csv_import_pool = csv_import_pool
        self.log = log

    def get_all_modules(self, user_uuid: str) -> List[Module]:
        return self.modules_repo.get_all_modules(user_uuid)

    def module_exists(self, user_uuid: str, module_uuid: str) -> bool:
        return self.modules_repo.module_exists(user_uuid, module_uuid)

    def create_new_module(self, user_uuid: str, name: str) -> Module:
        return self.modules_repo.create_new_module(user_uuid, name)

    def update_module(self, user_uuid: str, module_uuid: str, name: str) -> Module:
        return self.modules_repo.update_module(user_uuid, module_uuid, name)

    def delete_module(self, user_uuid: str, module_uuid: str) -> None:
        self.modules_repo.delete_module(user_uuid, module_uuid)

    def get_module_with_cards(self, user_uuid: str, module_uuid: str) -> dict:
        module = self.modules_repo.get_module(user_uuid, module_uuid)
        cards = self.cards_repo.get_module_cards(module_uuid)
        return {
            **module.to_dict(),
            'cards': [card.to_dict() for card in cards],
        }

    def queue_quizlet_module_import(self, module: ModuleDraft, quizlet_module_id: str) -> None:
        import_work = QuizletImportWork(
            repo=self.modules_repo,
            quizlet_parser=self.quizlet_parser,
            log=self.log,
            module=module,
            quizlet_module_id=quizlet_module_id,
        )
        self.quizlet_import_pool.queue_work(import_work)

    def queue_csv_module_import(self, module: ModuleDraft, stream: BinaryIO) -> None:
        import_work = CSVImportWork(
            repo=self.modules_repo,
            log=self.log,
            module=module,
            stream=stream,
        )
        self.csv_import_pool.queue_work(import_work)


def get_modules_use_case() -> ModulesUseCase:
    return current_app.extensions['simplecards']['modules_use_case']
