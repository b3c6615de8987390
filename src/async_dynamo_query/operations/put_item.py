# src/async_dynamo_query/operations/put_item.py

from logging import LoggerAdapter
from typing import Any, Dict, Optional

from async_dynamo_query.base.exceptions import MalformedExpressionError
from async_dynamo_query.base.interfaces import (ConditionExpressionMixin,
                                                OperationBuilder,
                                                ReturnValuesMixin)
from async_dynamo_query.base.nodes import PutNode, ReturnValues
from async_dynamo_query.base.utils import prepare_for_storage


class PutItemQueryBuilder(
    ConditionExpressionMixin, ReturnValuesMixin, OperationBuilder[PutNode]
):
    """
    Builds a PutItem request.

        await (
            creator.put_item("users")
            .item({"userId": "333", "dataTimestamp": 222})
            .condition_expression("userId", "attribute_not_exists")
            .execute()
        )
    """

    operation_name = "put_item"
    allowed_return_values = (ReturnValues.NONE, ReturnValues.ALL_OLD)

    def item(self, item: Any) -> "PutItemQueryBuilder":
        """
        The item to write. Dictionaries, dataclasses and Pydantic models are
        accepted; all primary key attributes must be present.
        """
        prepared = prepare_for_storage(item)
        if not isinstance(prepared, dict):
            raise MalformedExpressionError(
                f"item requires a mapping, dataclass or model, got {type(item).__name__}"
            )
        return self._with(item=prepared)

    async def execute(self, logger: Optional[LoggerAdapter] = None) -> Optional[Dict[str, Any]]:
        """Returns the overwritten item when return values is ALL_OLD, else None."""
        response = await self._send(logger)
        return response.get("Attributes")
