# src/async_dynamo_query/operations/query.py

from logging import LoggerAdapter
from typing import Any, Dict, List, Optional

from async_dynamo_query.base.exceptions import MalformedExpressionError
from async_dynamo_query.base.expression import (ExpressionBuilder,
                                                KeyConditionBuilder)
from async_dynamo_query.base.interfaces import (OperationBuilder,
                                                ProjectionMixin)
from async_dynamo_query.base.nodes import QueryNode


class QueryQueryBuilder(ProjectionMixin, OperationBuilder[QueryNode]):
    """
    Builds a Query request.

        items = await (
            creator.query("events")
            .key_condition("userId", "=", "123")
            .key_condition("timestamp", "between", [100, 200])
            .filter_expression("status", "<>", "deleted")
            .scan_index_forward(False)
            .limit(25)
            .execute()
        )
    """

    operation_name = "query"

    def key_condition(self, *args: Any) -> "QueryQueryBuilder":
        """
        A condition on the partition key (`=`) or the sort key (comparators,
        `begins_with`, `between`). Multiple key conditions are joined with AND.
        """
        builder = KeyConditionBuilder(self._node.key_condition_expression)
        return self._with(key_condition_expression=builder.expression(*args).build())

    def filter_expression(self, *args: Any) -> "QueryQueryBuilder":
        """Filters the matched items after they are read, joined with AND."""
        builder = ExpressionBuilder(self._node.filter_expression)
        return self._with(filter_expression=builder.expression(*args).build())

    def or_filter_expression(self, *args: Any) -> "QueryQueryBuilder":
        builder = ExpressionBuilder(self._node.filter_expression)
        return self._with(filter_expression=builder.or_expression(*args).build())

    def limit(self, num: int) -> "QueryQueryBuilder":
        if not isinstance(num, int) or isinstance(num, bool) or num <= 0:
            raise MalformedExpressionError("Limit must be a positive integer.")
        return self._with(limit=num)

    def scan_index_forward(self, enabled: bool) -> "QueryQueryBuilder":
        """False returns items in descending sort key order."""
        return self._with(scan_index_forward=bool(enabled))

    def consistent_read(self, enabled: bool) -> "QueryQueryBuilder":
        return self._with(consistent_read=bool(enabled))

    async def execute(self, logger: Optional[LoggerAdapter] = None) -> List[Dict[str, Any]]:
        response = await self._send(logger)
        return response.get("Items", [])
