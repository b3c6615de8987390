# src/async_dynamo_query/base/interfaces.py

import logging
from abc import ABC, abstractmethod
from dataclasses import replace
from logging import LoggerAdapter
from typing import (Any, Dict, Generic, Iterable, Optional, Tuple, TypeVar,
                    Union)

from async_dynamo_query.base.compiler import Command, QueryCompiler
from async_dynamo_query.base.exceptions import (BuilderAwaitedError,
                                                MalformedExpressionError,
                                                TransportNotConfiguredError)
from async_dynamo_query.base.expression import ExpressionBuilder
from async_dynamo_query.base.nodes import OperationNode, ReturnValues
from async_dynamo_query.base.placeholders import parse_path
from async_dynamo_query.base.utils import prepare_for_storage

N = TypeVar("N", bound=OperationNode)
B = TypeVar("B", bound="OperationBuilder")

base_logger = logging.getLogger(__name__)


class OperationBuilder(Generic[N], ABC):
    """
    Base class for the per-operation builders.

    Holds an immutable operation node, the compiler that renders it and the
    transport that sends it. Builders are values: every modifying call
    returns a new builder around a new node.

    Awaiting a builder is a mistake (it is not a request, `execute()` is), so
    `__await__` raises BuilderAwaitedError instead of returning an iterator.
    """

    operation_name: str = ""

    def __init__(self, node: N, transport: Any, compiler: Optional[QueryCompiler] = None):
        """
        Args:
            node: The operation node this builder wraps.
            transport: Object with an async `send(operation_name, command)`,
                       normally a DynamoDBTransport.
            compiler: Compiler used by `compile()`. A new one is created if omitted.
        """
        self._node = node
        self._transport = transport
        self._compiler = compiler if compiler is not None else QueryCompiler()

    @property
    def node(self) -> N:
        return self._node

    def compile(self) -> Command:
        """Compiles the node into DynamoDB request parameters."""
        return self._compiler.compile(self._node)

    @abstractmethod
    async def execute(self, logger: Optional[LoggerAdapter] = None) -> Any:
        """Compiles and sends the request, returning the operation's output."""
        pass

    async def _send(self, logger: Optional[LoggerAdapter]) -> Dict[str, Any]:
        log = logger or base_logger
        if self._transport is None:
            raise TransportNotConfiguredError(type(self).__name__)
        command = self.compile()
        log.info(f"Executing {self.operation_name} on table '{command['TableName']}'")
        log.debug(f"{self.operation_name} request: {command!r}")
        return await self._transport.send(self.operation_name, command)

    def _with(self: B, **changes: Any) -> B:
        return type(self)(replace(self._node, **changes), self._transport, self._compiler)

    def __await__(self):
        raise BuilderAwaitedError(type(self).__name__)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._node!r})"


# --- Shared Builder Capabilities ---


class ConditionExpressionMixin:
    """`condition_expression` / `or_condition_expression` for write operations."""

    def condition_expression(self: B, *args: Any) -> B:
        """
        A condition that must hold for the write to happen.

        Multiple conditions are joined with AND; see `or_condition_expression`
        for OR. Accepts every argument shape ExpressionBuilder.expression does.
        """
        builder = ExpressionBuilder(self._node.condition_expression)
        return self._with(condition_expression=builder.expression(*args).build())

    def or_condition_expression(self: B, *args: Any) -> B:
        """A `condition_expression` joined to the previous ones with OR."""
        builder = ExpressionBuilder(self._node.condition_expression)
        return self._with(condition_expression=builder.or_expression(*args).build())


class KeysMixin:
    def keys(self: B, keys: Dict[str, Any]) -> B:
        """The primary key (partition key, plus sort key if any) of the item."""
        if not isinstance(keys, dict) or not keys:
            raise MalformedExpressionError("keys requires a non-empty mapping")
        return self._with(keys=prepare_for_storage(keys))


class ReturnValuesMixin:
    allowed_return_values: Tuple[ReturnValues, ...] = tuple(ReturnValues)

    def return_values(self: B, option: Union[str, ReturnValues]) -> B:
        try:
            selected = ReturnValues(option)
        except ValueError as e:
            raise MalformedExpressionError(f"Unknown return values option {option!r}") from e
        if selected not in self.allowed_return_values:
            allowed = ", ".join(o.value for o in self.allowed_return_values)
            raise MalformedExpressionError(
                f"{type(self).__name__} only accepts return values {allowed}, got {selected.value}"
            )
        return self._with(return_values=selected)


class ProjectionMixin:
    def attributes(self: B, attributes: Union[str, Iterable[str]]) -> B:
        """Only return the given attribute paths. A single string is one path."""
        if isinstance(attributes, str):
            paths: Tuple[str, ...] = (attributes,)
        else:
            paths = tuple(attributes)
        for path in paths:
            parse_path(path)
        return self._with(attributes=paths)
