import threading

import pytest
import requests

from simplecards_app.modules.imports.exceptions import (
    ImportInterruptedError,
    QuizletModuleFetchingError,
    QuizletModuleParsingError,
)
from simplecards_app.modules.imports.quizlet import QuizletCard, QuizletParser


class _FakeResponse:
    def __init__(self, status_code, payload=None):
        self.status_code = status_code
        self._payload = payload
        self.closed = False

    def json(self):
        if isinstance(self._payload, Exception):
            raise self._payload
        return self._payload

    def close(self):
        self.closed = True


class _FakeSession:
    """Replays canned responses and records every GET."""

    def __init__(self, responses):
        self._responses = list(responses)
        self.calls = []

    def get(self, url, **kwargs):
        self.calls.append((url, kwargs))
        response = self._responses.pop(0)
        if isinstance(response, Exception):
            raise response
        return response


def _side(label, text):
    return {"label": label, "media": [{"type": 1, "plainText": text}]}


def _item(item_id, *sides):
    return {"id": item_id, "cardSides": list(sides)}


def _document(*items):
    return {"responses": [{"models": {"studiableItem": list(items)}}]}


def _parser(session, **kwargs):
    kwargs.setdefault("retry_delay", 0)
    return QuizletParser(session=session, **kwargs)


def test_parse_extracts_word_and_definition():
    session = _FakeSession([
        _FakeResponse(200, _document(
            _item(1, _side("word", "cat"), _side("definition", "gato")),
            _item(2, _side("word", "dog")),
        )),
    ])

    cards = _parser(session).parse("123")

    assert cards == [QuizletCard(front="cat", back="gato")]


def test_parse_keeps_source_order_and_uses_first_side_with_media():
    session = _FakeSession([
        _FakeResponse(200, _document(
            _item(
                1,
                {"label": "word", "media": []},
                _side("word", "one"),
                _side("word", "ignored"),
                _side("definition", "uno"),
            ),
            _item(2, _side("definition", "dos"), _side("word", "two")),
        )),
    ])

    cards = _parser(session).parse("123")

    assert cards == [QuizletCard("one", "uno"), QuizletCard("two", "dos")]


def test_parse_tolerates_nulls_in_payload():
    session = _FakeSession([
        _FakeResponse(200, _document(
            _item(1, {"label": "word", "media": None}, _side("definition", "gato")),
            _item(2, _side("word", "cat"), {"label": "definition", "media": [{"plainText": None}]}),
            {"id": 3, "cardSides": None},
            _item(4, _side("word", "sun"), _side("definition", "sol")),
        )),
    ])

    assert _parser(session).parse("123") == [QuizletCard("sun", "sol")]


def test_retries_forbidden_then_succeeds():
    blocked = [_FakeResponse(403), _FakeResponse(403)]
    session = _FakeSession(blocked + [
        _FakeResponse(200, _document(_item(1, _side("word", "cat"), _side("definition", "gato")))),
    ])

    cards = _parser(session).parse("123")

    assert len(session.calls) == 3
    assert cards == [QuizletCard("cat", "gato")]
    assert all(response.closed for response in blocked)


def test_always_forbidden_raises_fetching_error():
    session = _FakeSession([_FakeResponse(403) for _ in range(10)])

    with pytest.raises(QuizletModuleFetchingError, match='module "123" fetching failed'):
        _parser(session).parse("123")

    assert len(session.calls) == 10


def test_sleeps_between_attempts_only(monkeypatch):
    sleeps = []
    monkeypatch.setattr(
        "simplecards_app.modules.imports.quizlet.parser.time.sleep",
        lambda seconds: sleeps.append(seconds),
    )
    session = _FakeSession([_FakeResponse(403) for _ in range(3)])

    with pytest.raises(QuizletModuleFetchingError):
        QuizletParser(session=session, attempts=3, retry_delay=0.2).parse("123")

    assert sleeps == [0.2, 0.2]


def test_empty_responses_raise_parsing_error():
    session = _FakeSession([_FakeResponse(200, {"responses": []})])

    with pytest.raises(QuizletModuleParsingError, match='module "404" parsing failed'):
        _parser(session).parse("404")


def test_request_shape():
    session = _FakeSession([_FakeResponse(200, _document())])

    _parser(session, base_url="https://example.test/webapi/3.4/", timeout=7).parse("987")

    url, kwargs = session.calls[0]
    assert url == "https://example.test/webapi/3.4/studiable-item-documents"
    assert kwargs["params"] == {
        "filters[studiableContainerId]": "987",
        "filters[studiableContainerType]": 1,
        "perPage": 1000,
        "page": 1,
    }
    assert "Chrome/" in kwargs["headers"]["User-Agent"]
    assert kwargs["timeout"] == 7


def test_network_error_propagates_without_retry():
    session = _FakeSession([requests.ConnectionError("connection reset")])

    with pytest.raises(requests.ConnectionError):
        _parser(session).parse("123")

    assert len(session.calls) == 1


def test_invalid_json_propagates_as_value_error():
    session = _FakeSession([_FakeResponse(200, ValueError("not json"))])

    with pytest.raises(ValueError):
        _parser(session).parse("123")


def test_stop_event_interrupts_before_request():
    session = _FakeSession([_FakeResponse(403)])
    stop_event = threading.Event()
    stop_event.set()

    with pytest.raises(ImportInterruptedError):
        _parser(session).parse("123", stop_event)

    assert session.calls == []


def test_parser_reuses_its_session():
    parser = QuizletParser()

    assert isinstance(parser.session, requests.Session)
    assert parser.session is parser.session


def test_attempts_must_be_positive():
    with pytest.raises(ValueError):
        QuizletParser(session=_FakeSession([]), attempts=0)
