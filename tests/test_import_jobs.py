import io
import logging
import threading

import pytest
import requests
from sqlalchemy.exc import OperationalError, SQLAlchemyError

from simplecards_app import db
from simplecards_app.core.signals import module_import_failed, module_imported
from simplecards_app.models import Card, Module, User
from simplecards_app.modules.card_modules.repository import ModulesRepository
from simplecards_app.modules.imports.exceptions import (
    ImportInterruptedError,
    QuizletModuleFetchingError,
)
from simplecards_app.modules.imports.jobs import CSVImportWork, QuizletImportWork
from simplecards_app.modules.imports.quizlet import QuizletCard
from simplecards_app.schemas import CardDraft, ModuleDraft, ModuleWithCards

log = logging.getLogger("test.import_jobs")


class _FakeStorage:
    def __init__(self, error=None):
        self.saved = []
        self.error = error

    def create_new_module_with_cards(self, module_with_cards):
        if self.error is not None:
            raise self.error
        self.saved.append(module_with_cards)
        return "module-uuid"


class _FakeParser:
    def __init__(self, result):
        self.result = result
        self.calls = []

    def parse(self, module_id, stop_event=None):
        self.calls.append((module_id, stop_event))
        if isinstance(self.result, Exception):
            raise self.result
        return self.result


class _StopAfter:
    """Stop event that reports "set" from its ``calls``-th check on."""

    def __init__(self, calls):
        self.remaining = calls

    def is_set(self):
        self.remaining -= 1
        return self.remaining < 0


class _Signals:
    def __init__(self):
        self.imported = []
        self.failed = []

    def on_imported(self, sender, **kwargs):
        self.imported.append(kwargs)

    def on_failed(self, sender, **kwargs):
        self.failed.append(kwargs)


@pytest.fixture
def signals():
    recorder = _Signals()
    with module_imported.connected_to(recorder.on_imported), \
            module_import_failed.connected_to(recorder.on_failed):
        yield recorder


def _module(name="spanish"):
    return ModuleDraft(name=name, user_uuid="user-uuid")


def _csv_work(content, storage):
    return CSVImportWork(repo=storage, log=log, module=_module(), stream=io.BytesIO(content))


def _quizlet_work(parser, storage):
    return QuizletImportWork(
        repo=storage,
        quizlet_parser=parser,
        log=log,
        module=_module(),
        quizlet_module_id="123",
    )


# ---------------------------------------------------------------------------
# CSV
# ---------------------------------------------------------------------------

def test_csv_keeps_only_complete_rows(signals):
    storage = _FakeStorage()
    work = _csv_work(b"hello,hola\nbad\n,empty", storage)

    work.do(threading.Event())

    assert storage.saved == [
        ModuleWithCards(module=_module(), cards=(CardDraft(term="hello", meaning="hola"),))
    ]
    assert work.stream.closed
    assert signals.imported[0]["cards_count"] == 1
    assert signals.imported[0]["source"] == "csv"


def test_csv_strips_fields_and_tolerates_bom_and_extra_columns():
    storage = _FakeStorage()
    content = "\ufeff  one , uno ,extra\r\n\"two, three\",\"dos, tres\"\n   ,   \n".encode("utf-8")

    _csv_work(content, storage).do(threading.Event())

    assert storage.saved[0].cards == (
        CardDraft(term="one", meaning="uno"),
        CardDraft(term="two, three", meaning="dos, tres"),
    )


def test_csv_empty_file_stores_empty_module():
    storage = _FakeStorage()

    _csv_work(b"", storage).do(threading.Event())

    assert storage.saved == [ModuleWithCards(module=_module(), cards=())]


def test_csv_cancellation_stops_reading_and_skips_storage(signals):
    storage = _FakeStorage()
    work = _csv_work(b"a,b\nc,d\ne,f\n", storage)

    work.do(_StopAfter(calls=1))

    assert storage.saved == []
    assert signals.imported == []
    assert signals.failed == []
    assert work.stream.closed


def test_csv_undecodable_content_is_reported(signals):
    storage = _FakeStorage()
    work = _csv_work(b"term,meaning\n\xff\xfe\xfa,x\n", storage)

    work.do(threading.Event())

    assert storage.saved == []
    assert len(signals.failed) == 1
    assert signals.failed[0]["source"] == "csv"
    assert work.stream.closed


def test_csv_storage_failure_is_reported(signals):
    storage = _FakeStorage(error=OperationalError("INSERT", {}, Exception("database is locked")))

    _csv_work(b"a,b\n", storage).do(threading.Event())

    assert signals.imported == []
    assert signals.failed[0]["module_name"] == "spanish"


# ---------------------------------------------------------------------------
# Quizlet
# ---------------------------------------------------------------------------

def test_quizlet_stores_parsed_cards(signals):
    storage = _FakeStorage()
    parser = _FakeParser([QuizletCard("cat", "gato"), QuizletCard("dog", "perro")])
    stop_event = threading.Event()

    _quizlet_work(parser, storage).do(stop_event)

    assert parser.calls == [("123", stop_event)]
    assert storage.saved[0].cards == (
        CardDraft(term="cat", meaning="gato"),
        CardDraft(term="dog", meaning="perro"),
    )
    assert signals.imported == [{
        "source": "quizlet",
        "module_uuid": "module-uuid",
        "user_uuid": "user-uuid",
        "module_name": "spanish",
        "cards_count": 2,
    }]


def test_quizlet_skips_blank_cards():
    storage = _FakeStorage()
    parser = _FakeParser([QuizletCard("  ", "gato"), QuizletCard("dog", "perro")])

    _quizlet_work(parser, storage).do(threading.Event())

    assert storage.saved[0].cards == (CardDraft(term="dog", meaning="perro"),)


def test_quizlet_with_only_blank_cards_writes_nothing(signals):
    storage = _FakeStorage()
    parser = _FakeParser([QuizletCard("  ", "gato"), QuizletCard("dog", "\t")])

    _quizlet_work(parser, storage).do(threading.Event())

    assert storage.saved == []
    assert signals.imported == []
    assert signals.failed == []


def test_quizlet_without_cards_writes_nothing(signals):
    storage = _FakeStorage()

    _quizlet_work(_FakeParser([]), storage).do(threading.Event())

    assert storage.saved == []
    assert signals.imported == []
    assert signals.failed == []


@pytest.mark.parametrize("error", [
    QuizletModuleFetchingError("123"),
    requests.ConnectionError("connection reset"),
    ValueError("not json"),
])
def test_quizlet_parse_failures_are_reported(signals, error):
    storage = _FakeStorage()

    _quizlet_work(_FakeParser(error), storage).do(threading.Event())

    assert storage.saved == []
    assert signals.failed[0]["source"] == "quizlet"
    assert signals.failed[0]["error"] == str(error)


def test_quizlet_interruption_is_not_a_failure(signals):
    storage = _FakeStorage()

    _quizlet_work(_FakeParser(ImportInterruptedError("stop")), storage).do(threading.Event())

    assert storage.saved == []
    assert signals.failed == []


def test_quizlet_storage_failure_is_reported(signals):
    storage = _FakeStorage(error=SQLAlchemyError("disk I/O error"))

    _quizlet_work(_FakeParser([QuizletCard("cat", "gato")]), storage).do(threading.Event())

    assert signals.imported == []
    assert len(signals.failed) == 1


@pytest.mark.parametrize("make_work", [
    lambda storage: _csv_work(b"a,b\n", storage),
    lambda storage: _quizlet_work(_FakeParser([QuizletCard("cat", "gato")]), storage),
])
def test_unexpected_storage_error_is_reported_not_raised(signals, make_work):
    storage = _FakeStorage(error=RuntimeError("storage went away"))

    make_work(storage).do(threading.Event())

    assert signals.imported == []
    assert [failure["error"] for failure in signals.failed] == ["storage went away"]


# ---------------------------------------------------------------------------
# Storage
# ---------------------------------------------------------------------------

@pytest.fixture
def owner_uuid(app):
    with app.app_context():
        user = User(login="owner")
        user.set_password("secret")
        db.session.add(user)
        db.session.commit()
        return user.uuid


def _module_with_cards(owner_uuid, count):
    return ModuleWithCards(
        module=ModuleDraft(name="numbers", user_uuid=owner_uuid),
        cards=tuple(CardDraft(term=str(i), meaning=f"#{i}") for i in range(count)),
    )


def test_storage_failure_leaves_no_rows(app, owner_uuid, monkeypatch):
    def failing_commit(session):
        raise OperationalError("COMMIT", {}, Exception("disk full"))

    with app.app_context():
        monkeypatch.setattr(type(db.session()), "commit", failing_commit)
        repo = ModulesRepository(app)

        with pytest.raises(SQLAlchemyError):
            repo.create_new_module_with_cards(_module_with_cards(owner_uuid, 3))

        monkeypatch.undo()
        assert Module.query.count() == 0
        assert Card.query.count() == 0


def test_storage_from_worker_thread_keeps_card_order(app, owner_uuid):
    repo = ModulesRepository(app)
    result = {}

    worker = threading.Thread(
        target=lambda: result.update(uuid=repo.create_new_module_with_cards(_module_with_cards(owner_uuid, 5)))
    )
    worker.start()
    worker.join(5)

    with app.app_context():
        module = db.session.get(Module, result["uuid"])
        assert module.name == "numbers"
        assert [card.term for card in module.cards] == ["0", "1", "2", "3", "4"]
