"""Import worker pools: one pool per import source, sized independently."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Mapping, Optional

from ...core.worker_pool import WorkerPool
from .jobs import CSVImportWork, QuizletImportWork


@dataclass
class ImportPools:
    quizlet: WorkerPool[QuizletImportWork]
    csv: WorkerPool[CSVImportWork]

    def start(self) -> None:
        self.quizlet.process_queue()
        self.csv.process_queue()

    def shutdown(self, timeout: Optional[float] = None) -> None:
        """Close both pools, then wait for their workers. Safe to call twice."""
        self.quizlet.close()
        self.csv.close()
        self.quizlet.wait(timeout)
        self.csv.wait(timeout)


def build_import_pools(config: Mapping, logger: logging.Logger) -> ImportPools:
    queue_size = config.get('IMPORT_QUEUE_SIZE', 64)
    return ImportPools(
        quizlet=WorkerPool[QuizletImportWork](
            config.get('QUIZLET_IMPORT_WORKERS', 4),
            name='QuizletImportPool',
            queue_size=queue_size,
            logger=logger,
        ),
        csv=WorkerPool[CSVImportWork](
            config.get('CSV_IMPORT_WORKERS', 2),
            name='CSVImportPool',
            queue_size=queue_size,
            logger=logger,
        ),
    )
