# tests/conftest.py
import logging
import os
import uuid
from typing import Any, Dict, List, Optional

import pytest
from boto3.dynamodb.types import TypeSerializer
from botocore.exceptions import ClientError
from pydantic import BaseModel, Field

from async_dynamo_query import QueryCreator
from async_dynamo_query.base.compiler import QueryCompiler

# Silence verbose loggers
logging.getLogger("botocore").setLevel(logging.ERROR)
logging.getLogger("boto3").setLevel(logging.ERROR)

# --- Constants ---
DYNAMODB_ENDPOINT = os.getenv("TEST_DYNAMODB_ENDPOINT")
TEST_TABLE = "pytest_async_dynamo_query"


# --- Fake Clients ---
class FakeDynamoDBClient:
    """
    Stands in for a low-level boto3 DynamoDB client.

    Records every request and answers with a canned response, given in plain
    Python values and serialized the way DynamoDB would send it.
    """

    def __init__(self, response: Optional[Dict[str, Any]] = None, error: Optional[Exception] = None):
        self.calls: List[tuple] = []
        self._response = response or {}
        self._error = error
        self._serializer = TypeSerializer()

    def _answer(self, operation: str, request: Dict[str, Any]) -> Dict[str, Any]:
        self.calls.append((operation, request))
        if self._error is not None:
            raise self._error
        answer: Dict[str, Any] = {}
        for key, value in self._response.items():
            if key in ("Item", "Attributes"):
                answer[key] = {k: self._serializer.serialize(v) for k, v in value.items()}
            elif key == "Items":
                answer[key] = [
                    {k: self._serializer.serialize(v) for k, v in item.items()} for item in value
                ]
            else:
                answer[key] = value
        return answer

    def get_item(self, **request):
        return self._answer("get_item", request)

    def put_item(self, **request):
        return self._answer("put_item", request)

    def update_item(self, **request):
        return self._answer("update_item", request)

    def delete_item(self, **request):
        return self._answer("delete_item", request)

    def query(self, **request):
        return self._answer("query", request)


class AsyncFakeDynamoDBClient(FakeDynamoDBClient):
    """Same as FakeDynamoDBClient, with coroutine methods like aiobotocore."""

    async def get_item(self, **request):
        return self._answer("get_item", request)

    async def put_item(self, **request):
        return self._answer("put_item", request)

    async def update_item(self, **request):
        return self._answer("update_item", request)

    async def delete_item(self, **request):
        return self._answer("delete_item", request)

    async def query(self, **request):
        return self._answer("query", request)


def client_error(code: str, message: str = "error", operation: str = "PutItem") -> ClientError:
    return ClientError({"Error": {"Code": code, "Message": message}}, operation)


# --- Fixtures ---
@pytest.fixture
def compiler() -> QueryCompiler:
    return QueryCompiler()


@pytest.fixture
def creator() -> QueryCreator:
    """A creator without a client, for compile-only tests."""
    return QueryCreator()


@pytest.fixture(params=["sync", "async"])
def fake_client_factory(request):
    """Builds a fake client of both flavours, so execute() is checked against each."""
    client_cls = FakeDynamoDBClient if request.param == "sync" else AsyncFakeDynamoDBClient

    def _factory(response=None, error=None):
        return client_cls(response=response, error=error)

    return _factory


# --- Logger Fixture ---


@pytest.fixture(scope="session")
def logger():
    """Create a test logger."""
    _logger = logging.getLogger("test_dynamo_query_logger")
    if not _logger.handlers:
        handler = logging.StreamHandler()
        formatter = logging.Formatter(
            "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
        )
        handler.setFormatter(formatter)
        handler.setLevel(logging.DEBUG)
        _logger.addHandler(handler)
        _logger.setLevel(logging.DEBUG)
        _logger.propagate = False
    return logging.LoggerAdapter(_logger, {})


# --- Test Entity ---


class ProfileData(BaseModel):
    """Nested structure for Entity profile."""

    emails: List[str] = Field(default_factory=list)
    phone: Optional[str] = None


class Entity(BaseModel):
    """A simple item model for put tests."""

    id: str = Field(default_factory=lambda: f"test-{uuid.uuid4()}")
    name: str = "Test Entity"
    value: int = 100
    tags: List[str] = Field(default_factory=lambda: ["test", "sample"])
    active: bool = True
    profile: ProfileData = Field(default_factory=ProfileData)
    owner: Optional[str] = Field(default=None, alias="ownerId")

    model_config = {"populate_by_name": True}


@pytest.fixture
def test_entity() -> Entity:
    """Creates a test entity instance with default values."""
    return Entity()
