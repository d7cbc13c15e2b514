"""Shared pytest fixtures."""

import copy
from types import SimpleNamespace
from typing import Any

import pytest
from pymongo.errors import DuplicateKeyError

from zerah.app import App
from zerah.config import Config
from zerah.core.core import Core
from zerah.core.modules.mailer.service import MailerService


class FakeCollection:
    """In-memory subset of the async collection API used by the services.

    Filters support top-level equality only; updates support ``$set`` only.
    """

    def __init__(self, name: str) -> None:
        self.name = name
        self.documents: list[dict[str, Any]] = []
        self.indexes: list[tuple[list[tuple[str, int]], dict[str, Any]]] = []

    @staticmethod
    def _matches(document: dict[str, Any], query: dict[str, Any]) -> bool:
        return all(document.get(key) == value for key, value in query.items())

    def _unique_keys(self) -> list[list[str]]:
        return [[field for field, _ in keys] for keys, options in self.indexes if options.get("unique")]

    def _check_unique(self, document: dict[str, Any], ignore: dict[str, Any] | None = None) -> None:
        for fields in self._unique_keys():
            for doc in self.documents:
                if doc is not ignore and all(doc.get(f) == document.get(f) for f in fields):
                    raise DuplicateKeyError(f"duplicate key on {fields}")

    async def create_index(self, keys: list[tuple[str, int]], **options: Any) -> str:
        self.indexes.append((keys, options))
        return "_".join(f"{field}_{direction}" for field, direction in keys)

    async def insert_one(self, document: dict[str, Any]) -> SimpleNamespace:
        self._check_unique(document)
        self.documents.append(copy.deepcopy(document))
        return SimpleNamespace(inserted_id=document["_id"])

    async def find_one(
        self, query: dict[str, Any], sort: list[tuple[str, int]] | None = None
    ) -> dict[str, Any] | None:
        found = [doc for doc in self.documents if self._matches(doc, query)]
        for field, direction in reversed(sort or []):
            found.sort(key=lambda doc: doc[field], reverse=direction < 0)
        return copy.deepcopy(found[0]) if found else None

    async def update_one(self, query: dict[str, Any], update: dict[str, Any]) -> SimpleNamespace:
        for doc in self.documents:
            if self._matches(doc, query):
                self._check_unique({**doc, **update["$set"]}, ignore=doc)
                doc.update(update["$set"])
                return SimpleNamespace(matched_count=1, modified_count=1)
        return SimpleNamespace(matched_count=0, modified_count=0)

    async def update_many(self, query: dict[str, Any], update: dict[str, Any]) -> SimpleNamespace:
        matched = [doc for doc in self.documents if self._matches(doc, query)]
        for doc in matched:
            doc.update(update["$set"])
        return SimpleNamespace(matched_count=len(matched), modified_count=len(matched))

    async def delete_many(self, query: dict[str, Any]) -> SimpleNamespace:
        kept = [doc for doc in self.documents if not self._matches(doc, query)]
        deleted = len(self.documents) - len(kept)
        self.documents = kept
        return SimpleNamespace(deleted_count=deleted)


class FakeDatabase:
    def __init__(self) -> None:
        self._collections: dict[str, FakeCollection] = {}

    def get_collection(self, name: str) -> FakeCollection:
        if name not in self._collections:
            self._collections[name] = FakeCollection(name)
        return self._collections[name]


@pytest.fixture
def config():
    """Configuration for tests (debug mode, no SMTP)."""
    return Config(
        _env_file=None,
        database_url="mongodb://localhost:27017/zerah_test",
        host="127.0.0.1",
        port=3100,
        debug=True,
        session_secret_key="test-session-secret",
    )


@pytest.fixture
def database():
    return FakeDatabase()


@pytest.fixture
def core(config, database):
    return Core(config, database)  # type: ignore[arg-type]


@pytest.fixture
def app(config, database):
    return App(config, database)  # type: ignore[arg-type]


@pytest.fixture
def outbox(monkeypatch):
    """Capture login codes instead of sending them: list of (email, code)."""
    sent: list[tuple[str, str]] = []

    async def record(self, email: str, code: str) -> None:
        sent.append((email, code))

    monkeypatch.setattr(MailerService, "send_otp_email", record)
    return sent
