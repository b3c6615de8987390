# tests/operations/test_query.py

import pytest

from async_dynamo_query import MalformedExpressionError, QueryCreator


def test_query_compiles(creator):
    command = (
        creator.query("events")
        .key_condition("userId", "=", "123")
        .key_condition("timestamp", "between", [100, 200])
        .filter_expression("status", "<>", "deleted")
        .or_filter_expression("pinned", "=", True)
        .scan_index_forward(False)
        .limit(25)
        .compile()
    )
    assert command == {
        "TableName": "events",
        "KeyConditionExpression": "#n0 = :v0 AND #n1 BETWEEN :v1 AND :v2",
        "FilterExpression": "#n2 <> :v3 OR #n3 = :v4",
        "ScanIndexForward": False,
        "Limit": 25,
        "ExpressionAttributeNames": {
            "#n0": "userId",
            "#n1": "timestamp",
            "#n2": "status",
            "#n3": "pinned",
        },
        "ExpressionAttributeValues": {
            ":v0": "123",
            ":v1": 100,
            ":v2": 200,
            ":v3": "deleted",
            ":v4": True,
        },
    }


@pytest.mark.parametrize(
    "args",
    [
        ("userId", "<>", "1"),
        ("tags", "contains", "a"),
        ("userId", "attribute_exists"),
        (lambda qb: qb.expression("a", "=", 1),),
    ],
)
def test_query_rejects_invalid_key_conditions(creator, args):
    with pytest.raises(MalformedExpressionError):
        creator.query("events").key_condition(*args)


@pytest.mark.parametrize("num", [0, -1, True, 2.5])
def test_query_rejects_invalid_limits(creator, num):
    with pytest.raises(MalformedExpressionError):
        creator.query("events").limit(num)


async def test_query_execute(fake_client_factory, logger):
    client = fake_client_factory(
        response={"Items": [{"userId": "1", "n": 1}, {"userId": "1", "n": 2}], "Count": 2}
    )
    creator = QueryCreator(client)

    items = await (
        creator.query("events")
        .key_condition("userId", "=", "1")
        .key_condition("sk", "begins_with", "evt#")
        .consistent_read(True)
        .attributes(["userId", "n"])
        .execute(logger)
    )

    assert items == [{"userId": "1", "n": 1}, {"userId": "1", "n": 2}]
    operation, request = client.calls[0]
    assert operation == "query"
    assert request["KeyConditionExpression"] == "#n0 = :v0 AND begins_with(#n1, :v1)"
    assert request["ExpressionAttributeValues"] == {":v0": {"S": "1"}, ":v1": {"S": "evt#"}}
    assert request["ProjectionExpression"] == "#n0, #n2"
    assert request["ConsistentRead"] is True


async def test_query_without_matches(fake_client_factory):
    creator = QueryCreator(fake_client_factory(response={"Items": []}))
    assert await creator.query("events").key_condition("userId", "=", "x").execute() == []
