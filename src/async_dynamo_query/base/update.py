# src/async_dynamo_query/base/update.py

import logging
from decimal import Decimal
from typing import Any, Callable, Optional, Union

from .exceptions import ConflictingUpdateError, MalformedExpressionError
from .nodes import (
    AddEntry,
    Arithmetic,
    IfNotExists,
    ListAppend,
    PathOperand,
    RemoveEntry,
    SetEntry,
    SetValue,
    UpdateExpression,
    ValueOperand,
)
from .placeholders import parse_path, paths_overlap
from .utils import prepare_for_storage

log = logging.getLogger(__name__)

_SET_VALUE_TYPES = (ValueOperand, PathOperand, IfNotExists, ListAppend, Arithmetic)
_ARITHMETIC_OPERATORS = {"+=": "+", "+": "+", "-=": "-", "-": "-"}

SetValueCallback = Callable[["SetValueBuilder"], SetValue]


def _literal(value: Any) -> SetValue:
    if isinstance(value, _SET_VALUE_TYPES):
        return value
    return ValueOperand(value=prepare_for_storage(value))


class SetValueBuilder:
    """
    Builds right-hand sides of SET entries that refer to other paths.

        update.set("tags", "=", lambda v: v.list_append("tags", ["new"]))
        update.set("views", "=", lambda v: v.if_not_exists("views", 0))
        update.set("total", "=", lambda v: v.plus("subtotal", 5))

    Strings passed to `list_append` are paths, lists are literal values.
    """

    def list_append(
        self, left: Union[str, list, tuple, SetValue], right: Union[str, list, tuple, SetValue]
    ) -> ListAppend:
        return ListAppend(left=self._list_operand(left), right=self._list_operand(right))

    def if_not_exists(self, path: str, value: Any) -> IfNotExists:
        parse_path(path)
        return IfNotExists(path=path, value=_literal(value))

    def plus(self, path: str, value: Any) -> Arithmetic:
        parse_path(path)
        return Arithmetic(left=PathOperand(path=path), operator="+", right=_literal(value))

    def minus(self, path: str, value: Any) -> Arithmetic:
        parse_path(path)
        return Arithmetic(left=PathOperand(path=path), operator="-", right=_literal(value))

    def _list_operand(self, operand: Any) -> SetValue:
        if isinstance(operand, str):
            parse_path(operand)
            return PathOperand(path=operand)
        if isinstance(operand, (list, tuple)):
            return ValueOperand(value=prepare_for_storage(operand))
        if isinstance(operand, _SET_VALUE_TYPES):
            return operand
        raise MalformedExpressionError(
            f"list_append operands must be a path or a list, got {type(operand).__name__}"
        )


class Update:
    """
    Accumulates SET, REMOVE and ADD entries for one update operation.

    Like ExpressionBuilder, every call returns a new Update. A path (or a
    parent/child of it) may only be targeted once across all three kinds;
    DynamoDB rejects overlapping document paths in a single update.
    """

    _node: UpdateExpression

    def __init__(self, node: Optional[UpdateExpression] = None) -> None:
        self._node = node if node is not None else UpdateExpression()

    def _check_field_conflict(self, field_path: str) -> None:
        """
        Check if the path already has an entry or overlaps one.

        A path conflicts with another if:
        1. They are the exact same path
        2. One is a parent of the other (e.g., "metadata" and "metadata.key1")
        """
        node = self._node
        for entry in node.set_entries + node.remove_entries + node.add_entries:
            existing_path = entry.path
            if not paths_overlap(existing_path, field_path):
                continue

            log.warning(
                f"Update conflict detected: '{field_path}' overlaps existing "
                f"{type(entry).__name__} on '{existing_path}'."
            )
            if parse_path(existing_path) == parse_path(field_path):
                message = (
                    f"Path '{field_path}' already has an update. Multiple updates "
                    f"on the same path are not allowed in a single update expression."
                )
            else:
                message = (
                    f"Path '{field_path}' overlaps the existing update on '{existing_path}'. "
                    f"Parent-child path conflicts are not allowed in a single update expression."
                )
            raise ConflictingUpdateError(message)

    # --- Update Methods ---
    def set(self, path: str, *args: Any) -> "Update":
        """
        `set(path, value)`, `set(path, "=", value)`, `set(path, "+=", amount)`,
        `set(path, "-=", amount)` or `set(path, "=", lambda v: v.list_append(...))`.
        """
        if len(args) == 1:
            operator, value = "=", args[0]
        elif len(args) == 2:
            operator, value = args
        else:
            raise MalformedExpressionError(f"Unrecognized set arguments: {(path,) + args!r}")

        parse_path(path)
        self._check_field_conflict(path)

        right = self._set_operand(value)
        if operator == "=":
            set_value = right
        elif operator in _ARITHMETIC_OPERATORS:
            set_value = Arithmetic(
                left=PathOperand(path=path),
                operator=_ARITHMETIC_OPERATORS[operator],
                right=right,
            )
        else:
            raise MalformedExpressionError(f"Unsupported set operator '{operator}'")

        entry = SetEntry(path=path, value=set_value)
        log.debug(f"Adding set entry: {entry!r}")
        return Update(
            UpdateExpression(
                set_entries=self._node.set_entries + (entry,),
                remove_entries=self._node.remove_entries,
                add_entries=self._node.add_entries,
            )
        )

    def remove(self, path: str) -> "Update":
        parse_path(path)
        self._check_field_conflict(path)
        entry = RemoveEntry(path=path)
        log.debug(f"Adding remove entry: {entry!r}")
        return Update(
            UpdateExpression(
                set_entries=self._node.set_entries,
                remove_entries=self._node.remove_entries + (entry,),
                add_entries=self._node.add_entries,
            )
        )

    def add(self, path: str, value: Union[int, float, Decimal, set, frozenset]) -> "Update":
        """Adds a number to a numeric attribute, or elements to a set attribute."""
        parse_path(path)
        is_number = isinstance(value, (int, float, Decimal)) and not isinstance(value, bool)
        if not is_number and not isinstance(value, (set, frozenset)):
            raise MalformedExpressionError(
                f"add on '{path}' requires a number or a set, got {type(value).__name__}."
            )
        if isinstance(value, (set, frozenset)) and not value:
            raise MalformedExpressionError(f"add on '{path}' requires a non-empty set.")
        self._check_field_conflict(path)
        entry = AddEntry(path=path, value=prepare_for_storage(value))
        log.debug(f"Adding add entry: {entry!r}")
        return Update(
            UpdateExpression(
                set_entries=self._node.set_entries,
                remove_entries=self._node.remove_entries,
                add_entries=self._node.add_entries + (entry,),
            )
        )

    def _set_operand(self, value: Any) -> SetValue:
        if callable(value):
            result = value(SetValueBuilder())
            if not isinstance(result, _SET_VALUE_TYPES):
                raise MalformedExpressionError(
                    f"set callback must return a SetValueBuilder expression, "
                    f"got {type(result).__name__}"
                )
            return result
        return _literal(value)

    # --- Build and Utility Methods ---
    def build(self) -> UpdateExpression:
        return self._node

    def __repr__(self) -> str:
        return f"Update({self._node!r})"

    def __bool__(self) -> bool:
        return bool(self._node)
