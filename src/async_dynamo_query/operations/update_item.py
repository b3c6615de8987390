# src/async_dynamo_query/operations/update_item.py

from logging import LoggerAdapter
from typing import Any, Dict, Optional

from async_dynamo_query.base.interfaces import (ConditionExpressionMixin,
                                                KeysMixin, OperationBuilder,
                                                ReturnValuesMixin)
from async_dynamo_query.base.nodes import UpdateNode
from async_dynamo_query.base.update import Update


class UpdateItemQueryBuilder(
    KeysMixin, ConditionExpressionMixin, ReturnValuesMixin, OperationBuilder[UpdateNode]
):
    """
    Builds an UpdateItem request.

        await (
            creator.update_item("users")
            .keys({"userId": "123"})
            .set("visits", "+=", 1)
            .set("tags", "=", lambda v: v.list_append("tags", ["new"]))
            .remove("temporary")
            .add("badges", {"early-adopter"})
            .condition_expression("userId", "attribute_exists")
            .return_values("ALL_NEW")
            .execute()
        )

    See Update for the accepted `set` shapes. Targeting one path (or a parent
    and a child path) twice raises ConflictingUpdateError.
    """

    operation_name = "update_item"

    def set(self, path: str, *args: Any) -> "UpdateItemQueryBuilder":
        update = Update(self._node.update_expression).set(path, *args)
        return self._with(update_expression=update.build())

    def remove(self, path: str) -> "UpdateItemQueryBuilder":
        update = Update(self._node.update_expression).remove(path)
        return self._with(update_expression=update.build())

    def add(self, path: str, value: Any) -> "UpdateItemQueryBuilder":
        update = Update(self._node.update_expression).add(path, value)
        return self._with(update_expression=update.build())

    async def execute(self, logger: Optional[LoggerAdapter] = None) -> Optional[Dict[str, Any]]:
        """Returns the attributes selected by `return_values`, or None."""
        response = await self._send(logger)
        return response.get("Attributes")
