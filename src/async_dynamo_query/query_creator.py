# src/async_dynamo_query/query_creator.py

import logging
from typing import Any, Optional

from async_dynamo_query.base.compiler import QueryCompiler
from async_dynamo_query.base.nodes import (DeleteNode, GetNode, PutNode,
                                           QueryNode, UpdateNode)
from async_dynamo_query.dynamodb.base import DynamoDBTransport
from async_dynamo_query.operations.delete_item import DeleteItemQueryBuilder
from async_dynamo_query.operations.get_item import GetItemQueryBuilder
from async_dynamo_query.operations.put_item import PutItemQueryBuilder
from async_dynamo_query.operations.query import QueryQueryBuilder
from async_dynamo_query.operations.update_item import UpdateItemQueryBuilder

base_logger = logging.getLogger(__name__)


class QueryCreator:
    """
    Entry point for building DynamoDB requests against one client.

        creator = QueryCreator(boto3.client("dynamodb"))
        item = await creator.get_item_from("users").keys({"userId": "1"}).execute()
    """

    def __init__(
        self,
        client: Any = None,
        compiler: Optional[QueryCompiler] = None,
        transport: Optional[Any] = None,
    ):
        """
        Args:
            client: A boto3 or aiobotocore DynamoDB client. Only needed for `execute()`.
            compiler: Compiler shared by every builder created here.
            transport: Overrides the DynamoDBTransport built around `client`.
        """
        if transport is None and client is not None:
            transport = DynamoDBTransport(client)
        self._transport = transport
        self._compiler = compiler if compiler is not None else QueryCompiler()
        base_logger.debug("Initialized QueryCreator with transport: %s", transport)

    def get_item_from(self, table: str) -> GetItemQueryBuilder:
        """
        See https://docs.aws.amazon.com/amazondynamodb/latest/APIReference/API_GetItem.html
        """
        return GetItemQueryBuilder(GetNode(table=table), self._transport, self._compiler)

    def put_item(self, table: str) -> PutItemQueryBuilder:
        return PutItemQueryBuilder(PutNode(table=table), self._transport, self._compiler)

    def update_item(self, table: str) -> UpdateItemQueryBuilder:
        return UpdateItemQueryBuilder(UpdateNode(table=table), self._transport, self._compiler)

    def delete_item_from(self, table: str) -> DeleteItemQueryBuilder:
        return DeleteItemQueryBuilder(DeleteNode(table=table), self._transport, self._compiler)

    def query(self, table: str) -> QueryQueryBuilder:
        return QueryQueryBuilder(QueryNode(table=table), self._transport, self._compiler)
