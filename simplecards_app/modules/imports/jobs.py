"""
Background import jobs.

Each job is run once by an import worker pool. The HTTP response for the
import request has already been sent when ``do`` runs, so a job never raises:
every outcome is logged and announced through the import signals.

Both jobs collect all cards in memory first and then write the module and its
cards with a single storage call, so readers never see a half-imported module.
"""

from __future__ import annotations

import csv
import io
import logging
import threading
from dataclasses import dataclass
from typing import BinaryIO, List, Optional, Protocol, Sequence

import requests
from sqlalchemy.exc import SQLAlchemyError

from ...core.signals import module_import_failed, module_imported
from ...schemas import CardDraft, ModuleDraft, ModuleWithCards
from .exceptions import ImportInterruptedError, ModuleImportError
from .quizlet.models import QuizletCard

CSV_RECORD_MIN_LENGTH = 2

SOURCE_QUIZLET = 'quizlet'
SOURCE_CSV = 'csv'


class ModulesStorage(Protocol):
    def create_new_module_with_cards(self, module_with_cards: ModuleWithCards) -> str:
        ...


class QuizletModuleParser(Protocol):
    def parse(
        self,
        module_id: str,
        stop_event: Optional[threading.Event] = None,
    ) -> List[QuizletCard]:
        ...


def _report_failure(work, source: str, error: Exception) -> None:
    module_import_failed.send(
        work,
        source=source,
        user_uuid=work.module.user_uuid,
        module_name=work.module.name,
        error=str(error),
    )


def _store_module(work, source: str, cards: Sequence[CardDraft]) -> Optional[str]:
    """Write module + cards atomically. Returns the new module uuid, None on failure."""
    try:
        module_uuid = work.repo.create_new_module_with_cards(
            ModuleWithCards(module=work.module, cards=tuple(cards))
        )
    except SQLAlchemyError as exc:
        work.log.error("module from %s storing failed: %s", source, exc)
        _report_failure(work, source, exc)
        return None
    except Exception as exc:
        work.log.exception("module from %s storing failed unexpectedly", source)
        _report_failure(work, source, exc)
        return None

    module_imported.send(
        work,
        source=source,
        module_uuid=module_uuid,
        user_uuid=work.module.user_uuid,
        module_name=work.module.name,
        cards_count=len(cards),
    )
    return module_uuid


@dataclass(frozen=True, eq=False)
class QuizletImportWork:
    repo: ModulesStorage
    quizlet_parser: QuizletModuleParser
    log: logging.Logger
    module: ModuleDraft
    quizlet_module_id: str

    def do(self, stop_event: threading.Event) -> None:
        try:
            quizlet_cards = self.quizlet_parser.parse(self.quizlet_module_id, stop_event)
        except ImportInterruptedError:
            self.log.warning('quizlet module "%s" import has been interrupted', self.quizlet_module_id)
            return
        except (ModuleImportError, requests.RequestException, ValueError) as exc:
            self.log.error("quizlet module parsing failed: %s", exc)
            _report_failure(self, SOURCE_QUIZLET, exc)
            return

        cards = [
            CardDraft(term=card.front, meaning=card.back)
            for card in quizlet_cards
            if card.front.strip() and card.back.strip()
        ]

        if not cards:
            # Nothing to import; no module is created for an empty set
            self.log.debug('quizlet module "%s" has no cards, skipping', self.quizlet_module_id)
            return

        self.log.info('quizlet module "%s" parsed (%d cards)', self.quizlet_module_id, len(cards))

        if _store_module(self, SOURCE_QUIZLET, cards) is not None:
            self.log.info('quizlet module "%s" imported', self.quizlet_module_id)


@dataclass(frozen=True, eq=False)
class CSVImportWork:
    repo: ModulesStorage
    log: logging.Logger
    module: ModuleDraft
    stream: BinaryIO
    encoding: str = 'utf-8-sig'

    def do(self, stop_event: threading.Event) -> None:
        try:
            cards = self._read_cards(stop_event)
        finally:
            self.stream.close()

        if cards is None:
            return

        if _store_module(self, SOURCE_CSV, cards) is not None:
            self.log.info('csv module "%s" imported (%d cards)', self.module.name, len(cards))

    def _read_cards(self, stop_event: threading.Event) -> Optional[List[CardDraft]]:
        """Collect valid rows. None means the import must be abandoned."""
        cards: List[CardDraft] = []
        reader = csv.reader(io.TextIOWrapper(self.stream, encoding=self.encoding, newline=''))

        while True:
            if stop_event.is_set():
                self.log.warning("import work has been interrupted")
                return None

            try:
                record = next(reader)
            except StopIteration:
                break
            except (csv.Error, UnicodeDecodeError) as exc:
                self.log.error("csv reading error: %s", exc)
                _report_failure(self, SOURCE_CSV, exc)
                return None

            if len(record) < CSV_RECORD_MIN_LENGTH:
                continue

            term = record[0].strip()
            meaning = record[1].strip()
            if term and meaning:
                cards.append(CardDraft(term=term, meaning=meaning))

        return cards
