"""
Quizlet public module scraper.

Quizlet has no public API for sets, but its web client reads every card of a
set from ``/webapi/3.4/studiable-item-documents``. The endpoint answers 403
to requests that do not look like a browser, and randomly to bursts of
requests from the same client, so a blocked call is simply retried a few
times. Cookies handed out on the first responses are kept in the
``requests.Session`` and make later calls less likely to be blocked.
"""

import logging
import threading
import time
from typing import List, Optional

import requests

from ..exceptions import (
    ImportInterruptedError,
    QuizletModuleFetchingError,
    QuizletModuleParsingError,
)
from .models import QuizletCard, StudiableItemsResponse

logger = logging.getLogger(__name__)


class QuizletParser:
    """Fetches a public Quizlet set and flattens it into front/back cards."""

    BASE_URL = "https://quizlet.com/webapi/3.4"
    USER_AGENT = (
        "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36 "
        "(KHTML, like Gecko) Chrome/131.0.0.0 Safari/537.36"
    )
    FETCH_ATTEMPTS = 10
    RETRY_DELAY_SECONDS = 0.2
    REQUEST_TIMEOUT_SECONDS = 30
    CONTAINER_TYPE_SET = 1
    PAGE_SIZE = 1000

    def __init__(
        self,
        session: Optional[requests.Session] = None,
        base_url: str = BASE_URL,
        attempts: int = FETCH_ATTEMPTS,
        retry_delay: float = RETRY_DELAY_SECONDS,
        timeout: float = REQUEST_TIMEOUT_SECONDS,
        log: Optional[logging.Logger] = None,
    ) -> None:
        if attempts < 1:
            raise ValueError("attempts must be at least 1")

        self._session = session if session is not None else requests.Session()
        self._base_url = base_url.rstrip("/")
        self._attempts = attempts
        self._retry_delay = retry_delay
        self._timeout = timeout
        self._log = log or logger

    @property
    def session(self) -> requests.Session:
        return self._session

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------
    def _studiable_items_url(self) -> str:
        return f"{self._base_url}/studiable-item-documents"

    def _query_params(self, module_id: str) -> dict:
        return {
            "filters[studiableContainerId]": module_id,
            "filters[studiableContainerType]": self.CONTAINER_TYPE_SET,
            "perPage": self.PAGE_SIZE,
            "page": 1,
        }

    def _fetch_studiable_items(
        self,
        module_id: str,
        stop_event: Optional[threading.Event] = None,
    ) -> StudiableItemsResponse:
        headers = {"User-Agent": self.USER_AGENT}

        for attempt in range(1, self._attempts + 1):
            if stop_event is not None and stop_event.is_set():
                raise ImportInterruptedError(f'fetching of module "{module_id}" interrupted')

            response = self._session.get(
                self._studiable_items_url(),
                params=self._query_params(module_id),
                headers=headers,
                timeout=self._timeout,
            )

            if response.status_code == requests.codes.forbidden:
                response.close()
                self._log.debug(
                    "Quizlet blocked module %s (attempt %d/%d)", module_id, attempt, self._attempts
                )
                if attempt < self._attempts:
                    time.sleep(self._retry_delay)
                continue

            try:
                return StudiableItemsResponse.model_validate(response.json())
            finally:
                response.close()

        raise QuizletModuleFetchingError(module_id)

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------
    def parse(
        self,
        module_id: str,
        stop_event: Optional[threading.Event] = None,
    ) -> List[QuizletCard]:
        """
        Return the cards of Quizlet set ``module_id`` in source order.

        Items that miss a word or a definition are left out.

        Raises:
            QuizletModuleFetchingError: every attempt was answered with 403
            QuizletModuleParsingError: the response holds no document
            ImportInterruptedError: ``stop_event`` was set between attempts
            requests.RequestException: network failure
            ValueError: the body is not the expected JSON document
        """
        document = self._fetch_studiable_items(module_id, stop_event)

        if not document.responses:
            raise QuizletModuleParsingError(module_id)

        cards: List[QuizletCard] = []
        for item in document.responses[0].models.studiable_item:
            card = item.to_card()
            if card.front and card.back:
                cards.append(card)

        return cards
