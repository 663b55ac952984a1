"""Shared pytest fixtures."""

from copy import deepcopy
from io import BytesIO
from typing import Any

import pytest
from fastapi.testclient import TestClient
from PIL import Image
from pymongo.errors import DuplicateKeyError
from pymongo.results import DeleteResult

from photogallery.app import App
from photogallery.config import Config
from photogallery.core.modules.comment.service import CommentService
from photogallery.core.modules.counter.service import CounterService
from photogallery.core.modules.like.service import LikeService
from photogallery.core.modules.session.token import mint_session_token
from photogallery.web.server import create_fastapi_app

SECRET = "test-secret"
OWNER = "owner"


class InMemoryKeyValueStore:
    """Key-value store double that records the expiry requested for each key."""

    def __init__(self) -> None:
        self.data: dict[str, str] = {}
        self.expiries: dict[str, int | None] = {}

    async def get(self, key: str) -> str | None:
        return self.data.get(key)

    async def put(self, key: str, value: str, expire_after_seconds: int | None = None) -> None:
        self.data[key] = value
        self.expiries[key] = expire_after_seconds

    async def delete(self, key: str) -> None:
        self.data.pop(key, None)
        self.expiries.pop(key, None)


class FailingKeyValueStore:
    """Key-value store double whose backend is unreachable."""

    async def get(self, key: str) -> str | None:
        raise ConnectionError("store unavailable")

    async def put(self, key: str, value: str, expire_after_seconds: int | None = None) -> None:
        raise ConnectionError("store unavailable")

    async def delete(self, key: str) -> None:
        raise ConnectionError("store unavailable")


class ManualClock:
    """Epoch-millisecond clock advanced by hand."""

    def __init__(self, start: int = 1_700_000_000_000) -> None:
        self.now = start

    def __call__(self) -> int:
        return self.now

    def advance(self, ms: int) -> None:
        self.now += ms


class InMemoryCursor:
    def __init__(self, documents: list[dict[str, Any]]) -> None:
        self._documents = documents

    def sort(self, key: str, direction: int = 1) -> "InMemoryCursor":
        self._documents = sorted(self._documents, key=lambda doc: doc[key], reverse=direction < 0)
        return self

    def __aiter__(self) -> "InMemoryCursor":
        self._iterator = iter(self._documents)
        return self

    async def __anext__(self) -> dict[str, Any]:
        try:
            return next(self._iterator)
        except StopIteration:
            raise StopAsyncIteration from None


class InMemoryCollection:
    """The subset of a MongoDB collection used by the services, with equality filters and unique indexes."""

    def __init__(self) -> None:
        self.documents: list[dict[str, Any]] = []
        self.unique_fields: list[tuple[str, ...]] = [("_id",)]

    @staticmethod
    def _matches(document: dict[str, Any], query: dict[str, Any]) -> bool:
        return all(document.get(key) == value for key, value in query.items())

    async def create_index(self, keys: list[tuple[str, int]], unique: bool = False, **_: Any) -> str:
        if unique:
            self.unique_fields.append(tuple(field for field, _direction in keys))
        return "_".join(field for field, _direction in keys)

    async def insert_one(self, document: dict[str, Any]) -> None:
        for fields in self.unique_fields:
            key = {field: document.get(field) for field in fields}
            if any(self._matches(existing, key) for existing in self.documents):
                raise DuplicateKeyError(f"E11000 duplicate key: {key}")
        self.documents.append(deepcopy(document))

    async def find_one(self, query: dict[str, Any]) -> dict[str, Any] | None:
        return next((deepcopy(doc) for doc in self.documents if self._matches(doc, query)), None)

    def find(self, query: dict[str, Any]) -> InMemoryCursor:
        return InMemoryCursor([deepcopy(doc) for doc in self.documents if self._matches(doc, query)])

    async def count_documents(self, query: dict[str, Any]) -> int:
        return sum(1 for doc in self.documents if self._matches(doc, query))

    async def delete_one(self, query: dict[str, Any]) -> DeleteResult:
        for index, doc in enumerate(self.documents):
            if self._matches(doc, query):
                del self.documents[index]
                return DeleteResult({"n": 1}, acknowledged=True)
        return DeleteResult({"n": 0}, acknowledged=True)

    async def find_one_and_update(self, query: dict[str, Any], update: dict[str, Any], **_: Any) -> dict[str, Any]:
        """Supports `$inc` with upsert, returning the updated document."""
        document = next((doc for doc in self.documents if self._matches(doc, query)), None)
        if document is None:
            document = dict(query)
            self.documents.append(document)
        for field, amount in update["$inc"].items():
            document[field] = document.get(field, 0) + amount
        return deepcopy(document)


class InMemoryDatabase:
    def __init__(self) -> None:
        self.collections: dict[str, InMemoryCollection] = {}

    def get_collection(self, name: str) -> InMemoryCollection:
        return self.collections.setdefault(name, InMemoryCollection())


@pytest.fixture
def memory_store():
    return InMemoryKeyValueStore()


@pytest.fixture
def failing_store():
    return FailingKeyValueStore()


@pytest.fixture
def clock():
    return ManualClock()


@pytest.fixture
def config(tmp_path):
    """Configuration pointing blob storage at a temporary directory."""
    return Config(
        _env_file=None,
        database_url="mongodb://localhost:27017/photogallery_test",
        session_secret=SECRET,
        allowed_username=OWNER,
        site_url="https://gallery.example.com",
        gallery_url="https://gallery.example.com/gallery",
        github_client_id="client-id",
        github_client_secret="client-secret",
        photos_path=str(tmp_path / "photos"),
        secure_cookies=False,
    )


@pytest.fixture
def app_instance(config, memory_store):
    """Application whose key-value store lives in memory."""
    app = App(config)
    app.core.services.kv = memory_store
    return app


@pytest.fixture
def client(app_instance, config):
    """HTTP client for the FastAPI app (lifespan not started, MongoDB never touched by KV-only routes)."""
    return TestClient(create_fastapi_app(app_instance, config), follow_redirects=False)


@pytest.fixture
def owner_cookie():
    return {"Cookie": f"session={mint_session_token(OWNER, SECRET)}"}


@pytest.fixture
def stranger_cookie():
    return {"Cookie": f"session={mint_session_token('stranger', SECRET)}"}


@pytest.fixture
def png_bytes():
    """A small but real PNG image."""
    buffer = BytesIO()
    Image.new("RGB", (800, 600), color=(200, 120, 40)).save(buffer, format="PNG")
    return buffer.getvalue()


@pytest.fixture
def memory_db():
    return InMemoryDatabase()


@pytest.fixture
def mongo_services(app_instance, memory_db):
    """Counter, like and comment services backed by in-memory collections."""
    services = app_instance.core.services
    for name, service_class in (("counter", CounterService), ("like", LikeService), ("comment", CommentService)):
        service = service_class(memory_db)
        service.set_core(app_instance.core)
        setattr(services, name, service)
    return services
