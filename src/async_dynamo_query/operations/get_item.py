# src/async_dynamo_query/operations/get_item.py

from logging import LoggerAdapter
from typing import Any, Dict, Optional

from async_dynamo_query.base.interfaces import (KeysMixin, OperationBuilder,
                                                ProjectionMixin)
from async_dynamo_query.base.nodes import GetNode


class GetItemQueryBuilder(KeysMixin, ProjectionMixin, OperationBuilder[GetNode]):
    """
    Builds a GetItem request.

        item = await (
            creator.get_item_from("users")
            .keys({"userId": "123"})
            .consistent_read(True)
            .attributes(["name", "address.city"])
            .execute()
        )
    """

    operation_name = "get_item"

    def consistent_read(self, enabled: bool) -> "GetItemQueryBuilder":
        """Use a strongly consistent read instead of an eventually consistent one."""
        return self._with(consistent_read=bool(enabled))

    async def execute(self, logger: Optional[LoggerAdapter] = None) -> Optional[Dict[str, Any]]:
        """Returns the item, or None if no item has the given key."""
        response = await self._send(logger)
        return response.get("Item")
