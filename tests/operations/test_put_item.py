# tests/operations/test_put_item.py

from decimal import Decimal

import pytest

from async_dynamo_query import (BuilderAwaitedError,
                                ConditionalCheckFailedException,
                                MalformedExpressionError, QueryCreator)
from tests.conftest import TEST_TABLE, client_error


def test_put_item_compiles(creator):
    command = (
        creator.put_item("users")
        .item({"userId": "333", "dataTimestamp": 222})
        .condition_expression("userId", "attribute_not_exists")
        .compile()
    )
    assert command == {
        "TableName": "users",
        "Item": {"userId": "333", "dataTimestamp": 222},
        "ConditionExpression": "attribute_not_exists(#n0)",
        "ExpressionAttributeNames": {"#n0": "userId"},
        "ReturnValues": "NONE",
    }


def test_put_item_accepts_models(creator, test_entity):
    command = creator.put_item(TEST_TABLE).item(test_entity).compile()
    assert command["Item"]["id"] == test_entity.id
    assert command["Item"]["profile"] == {"emails": [], "phone": None}
    assert "ownerId" in command["Item"]


def test_put_item_rejects_non_mappings(creator):
    with pytest.raises(MalformedExpressionError):
        creator.put_item(TEST_TABLE).item(["not", "an", "item"])


def test_or_condition_expression(creator):
    command = (
        creator.put_item("users")
        .item({"userId": "1"})
        .condition_expression("userId", "attribute_not_exists")
        .or_condition_expression("version", "<", 3)
        .compile()
    )
    assert command["ConditionExpression"] == "attribute_not_exists(#n0) OR #n1 < :v0"


@pytest.mark.parametrize("option", ["NONE", "ALL_OLD"])
def test_put_item_return_values(creator, option):
    command = creator.put_item("users").item({"id": 1}).return_values(option).compile()
    assert command["ReturnValues"] == option


@pytest.mark.parametrize("option", ["ALL_NEW", "UPDATED_OLD", "UPDATED_NEW", "EVERYTHING"])
def test_put_item_rejects_other_return_values(creator, option):
    with pytest.raises(MalformedExpressionError):
        creator.put_item("users").return_values(option)


def test_put_item_builder_is_immutable(creator):
    base = creator.put_item("users").item({"id": "1"})
    conditioned = base.condition_expression("id", "attribute_not_exists")
    assert "ConditionExpression" not in base.compile()
    assert "ConditionExpression" in conditioned.compile()


async def test_awaiting_builder_raises(creator):
    with pytest.raises(BuilderAwaitedError, match="Don't await PutItemQueryBuilder"):
        await creator.put_item("users").item({"id": "1"})


async def test_put_item_execute(fake_client_factory, logger):
    client = fake_client_factory(response={"Attributes": {"id": "1", "score": Decimal("1.5")}})
    creator = QueryCreator(client)

    old = await (
        creator.put_item("users")
        .item({"id": "1", "score": 2.25, "tags": {"a"}})
        .condition_expression("score", "<", 3.5)
        .return_values("ALL_OLD")
        .execute(logger)
    )

    assert old == {"id": "1", "score": 1.5}
    operation, request = client.calls[0]
    assert operation == "put_item"
    assert request["Item"] == {"id": {"S": "1"}, "score": {"N": "2.25"}, "tags": {"SS": ["a"]}}
    assert request["ExpressionAttributeValues"] == {":v0": {"N": "3.5"}}
    assert request["ConditionExpression"] == "#n0 < :v0"
    assert request["ReturnValues"] == "ALL_OLD"


async def test_put_item_execute_returns_none_without_attributes(fake_client_factory):
    creator = QueryCreator(fake_client_factory())
    assert await creator.put_item("users").item({"id": "1"}).execute() is None


async def test_put_item_condition_failure(fake_client_factory, logger):
    client = fake_client_factory(error=client_error("ConditionalCheckFailedException"))
    creator = QueryCreator(client)
    with pytest.raises(ConditionalCheckFailedException):
        await (
            creator.put_item("users")
            .item({"id": "1"})
            .condition_expression("id", "attribute_not_exists")
            .execute(logger)
        )
