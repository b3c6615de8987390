# src/async_dynamo_query/operations/delete_item.py

from logging import LoggerAdapter
from typing import Any, Dict, Optional

from async_dynamo_query.base.interfaces import (ConditionExpressionMixin,
                                                KeysMixin, OperationBuilder,
                                                ReturnValuesMixin)
from async_dynamo_query.base.nodes import DeleteNode, ReturnValues


class DeleteItemQueryBuilder(
    KeysMixin, ConditionExpressionMixin, ReturnValuesMixin, OperationBuilder[DeleteNode]
):
    operation_name = "delete_item"
    allowed_return_values = (ReturnValues.NONE, ReturnValues.ALL_OLD)

    async def execute(self, logger: Optional[LoggerAdapter] = None) -> Optional[Dict[str, Any]]:
        """Returns the deleted item when return values is ALL_OLD, else None."""
        response = await self._send(logger)
        return response.get("Attributes")
