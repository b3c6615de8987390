# src/async_dynamo_query/base/expression.py
import logging
from typing import Any, Callable, Optional, Tuple

from .exceptions import MalformedExpressionError
from .nodes import (
    ATTRIBUTE_FUNCTIONS,
    COMPARATORS,
    AttributeFunction,
    BeginsWith,
    Between,
    Comparator,
    ConditionEntry,
    ConditionNode,
    Connector,
    Contains,
    Group,
    Not,
)
from .placeholders import parse_path
from .utils import prepare_for_storage

# --- Setup Logging ---
log = logging.getLogger(__name__)

KEY_COMPARATORS = ("=", "<", "<=", ">", ">=")

ExpressionCallback = Callable[["ExpressionBuilder"], "ExpressionBuilder"]


def _is_negation(keyword: Any) -> bool:
    return isinstance(keyword, str) and keyword.upper() == "NOT"


def _function_name(name: Any) -> Optional[str]:
    return name.lower() if isinstance(name, str) else None


class ExpressionBuilder:
    """
    Builds a condition `Group` using a fluent, immutable API.

    Every call returns a new builder; the receiver is left untouched, so a
    partially built expression can be reused as a template. Accepted shapes:

        builder.expression("userId", "=", "abc")
        builder.expression("email", "attribute_not_exists")
        builder.expression("name", "begins_with", "Jo")
        builder.expression("tags", "contains", "admin")
        builder.expression("age", "between", [18, 65])
        builder.expression("NOT", lambda qb: qb.expression(...))
        builder.expression("status", "not", ("begins_with", "arch"))
        builder.expression(lambda qb: qb.expression(...).or_expression(...))

    A callback receives a fresh builder and its result is folded into the
    parent as one parenthesized sub-expression.
    """

    _node: Group

    def __init__(self, node: Optional[Group] = None):
        self._node = node if node is not None else Group()

    def expression(self, *args: Any) -> "ExpressionBuilder":
        """Appends a condition joined with AND."""
        return self._append(Connector.AND, args)

    def and_expression(self, *args: Any) -> "ExpressionBuilder":
        return self._append(Connector.AND, args)

    def or_expression(self, *args: Any) -> "ExpressionBuilder":
        """Appends a condition joined with OR."""
        return self._append(Connector.OR, args)

    def build(self) -> Group:
        return self._node

    def _new(self, node: Group) -> "ExpressionBuilder":
        return type(self)(node)

    def _append(self, connector: Connector, args: Tuple[Any, ...]) -> "ExpressionBuilder":
        node = self._parse(args)
        if node is None:
            log.debug("Nested expression callback produced no conditions, skipping.")
            return self
        entry = ConditionEntry(connector=connector, node=node)
        log.debug(f"Appending condition with {connector.value}: {node!r}")
        return self._new(Group(self._node.entries + (entry,)))

    # --- Argument Shape Dispatch ---

    def _parse(self, args: Tuple[Any, ...]) -> Optional[ConditionNode]:
        if len(args) == 1 and callable(args[0]):
            return self._parse_callback(args[0])

        if len(args) == 2:
            first, second = args
            if _function_name(second) in ATTRIBUTE_FUNCTIONS:
                parse_path(first)
                return AttributeFunction(path=first, function=_function_name(second))
            if _is_negation(first):
                return self._parse_negation(second)

        if len(args) == 3:
            path, operator, operand = args
            parse_path(path)
            if operator in COMPARATORS:
                return Comparator(
                    path=path, operator=operator, value=prepare_for_storage(operand)
                )
            function = _function_name(operator)
            if function == "begins_with":
                return BeginsWith(path=path, prefix=prepare_for_storage(operand))
            if function == "contains":
                return Contains(path=path, value=prepare_for_storage(operand))
            if function == "between":
                if isinstance(operand, (list, tuple)) and len(operand) == 2:
                    return self._between(path, operand[0], operand[1])
                raise MalformedExpressionError(
                    f"'between' on '{path}' requires a [lower, upper] pair, got {operand!r}"
                )
            if function == "not":
                if isinstance(operand, tuple):
                    return self._parse_negation((path,) + operand)
                raise MalformedExpressionError(
                    f"'not' on '{path}' requires a tuple of operator arguments, got {operand!r}"
                )

        if len(args) == 4 and _function_name(args[1]) == "between":
            parse_path(args[0])
            return self._between(args[0], args[2], args[3])

        raise MalformedExpressionError(f"Unrecognized condition arguments: {args!r}")

    def _between(self, path: str, lower: Any, upper: Any) -> Between:
        return Between(
            path=path,
            lower=prepare_for_storage(lower),
            upper=prepare_for_storage(upper),
        )

    def _parse_callback(self, callback: ExpressionCallback) -> Optional[Group]:
        result = callback(ExpressionBuilder())
        if not isinstance(result, ExpressionBuilder):
            raise MalformedExpressionError(
                f"Nested expression callback must return an ExpressionBuilder, "
                f"got {type(result).__name__}"
            )
        group = result.build()
        return group if group else None

    def _parse_negation(self, nested: Any) -> Not:
        if callable(nested):
            child = self._parse_callback(nested)
        elif isinstance(nested, tuple):
            child = ExpressionBuilder()._parse(nested)
        else:
            raise MalformedExpressionError(
                f"NOT requires a callback or a tuple of condition arguments, got {nested!r}"
            )
        if child is None:
            raise MalformedExpressionError("NOT requires at least one condition")
        return Not(child=child)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._node!r})"

    def __bool__(self) -> bool:
        return bool(self._node)

    def __len__(self) -> int:
        return len(self._node)


class KeyConditionBuilder(ExpressionBuilder):
    """
    ExpressionBuilder restricted to what a key condition accepts: AND-joined
    comparators (no `<>`), `begins_with` and `between`.
    """

    def or_expression(self, *args: Any) -> "ExpressionBuilder":
        raise MalformedExpressionError("Key conditions can only be joined with AND")

    def _parse(self, args: Tuple[Any, ...]) -> Optional[ConditionNode]:
        if len(args) == 1 and callable(args[0]):
            raise MalformedExpressionError("Key conditions do not support nested expressions")
        node = super()._parse(args)
        if isinstance(node, Comparator) and node.operator in KEY_COMPARATORS:
            return node
        if isinstance(node, (BeginsWith, Between)):
            return node
        raise MalformedExpressionError(f"Unsupported key condition: {args!r}")
