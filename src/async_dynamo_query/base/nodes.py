# src/async_dynamo_query/base/nodes.py
"""
Expression node model.

Every node is a frozen dataclass compared by value. Builders create new nodes
on each call and never mutate existing ones; the compiler is the only code
that interprets them.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional, Tuple, Union


# --- Enums ---
class Connector(str, Enum):
    """Logical joiner relating a condition to its predecessor in a group."""

    AND = "AND"
    OR = "OR"


class ReturnValues(str, Enum):
    """Selector for the attributes a write operation returns."""

    NONE = "NONE"
    ALL_OLD = "ALL_OLD"
    UPDATED_OLD = "UPDATED_OLD"
    ALL_NEW = "ALL_NEW"
    UPDATED_NEW = "UPDATED_NEW"


COMPARATORS = ("=", "<>", "<", "<=", ">", ">=")
ATTRIBUTE_FUNCTIONS = ("attribute_exists", "attribute_not_exists")


# --- Condition Nodes ---
@dataclass(frozen=True)
class Comparator:
    """`path <operator> value`"""

    path: str
    operator: str
    value: Any


@dataclass(frozen=True)
class AttributeFunction:
    """`attribute_exists(path)` / `attribute_not_exists(path)`"""

    path: str
    function: str


@dataclass(frozen=True)
class BeginsWith:
    path: str
    prefix: Any


@dataclass(frozen=True)
class Contains:
    path: str
    value: Any


@dataclass(frozen=True)
class Between:
    path: str
    lower: Any
    upper: Any


@dataclass(frozen=True)
class Not:
    child: "ConditionNode"


@dataclass(frozen=True)
class ConditionEntry:
    """A condition node tagged with the connector to its previous sibling."""

    connector: Connector
    node: "ConditionNode"


@dataclass(frozen=True)
class Group:
    """
    Ordered sequence of connector-tagged conditions.

    The connector of the first entry has no preceding sibling and is ignored
    when rendering.
    """

    entries: Tuple[ConditionEntry, ...] = ()

    def __len__(self) -> int:
        return len(self.entries)

    def __bool__(self) -> bool:
        return bool(self.entries)


ConditionNode = Union[
    Comparator, AttributeFunction, BeginsWith, Contains, Between, Not, Group
]


# --- Set Value Nodes ---
@dataclass(frozen=True)
class ValueOperand:
    value: Any


@dataclass(frozen=True)
class PathOperand:
    path: str


@dataclass(frozen=True)
class IfNotExists:
    path: str
    value: "SetValue"


@dataclass(frozen=True)
class ListAppend:
    left: "SetValue"
    right: "SetValue"


@dataclass(frozen=True)
class Arithmetic:
    """`left + right` / `left - right` on the right-hand side of a SET."""

    left: "SetValue"
    operator: str
    right: "SetValue"


SetValue = Union[ValueOperand, PathOperand, IfNotExists, ListAppend, Arithmetic]


# --- Update Nodes ---
@dataclass(frozen=True)
class SetEntry:
    path: str
    value: SetValue


@dataclass(frozen=True)
class RemoveEntry:
    path: str


@dataclass(frozen=True)
class AddEntry:
    path: str
    value: Any


@dataclass(frozen=True)
class UpdateExpression:
    """SET, REMOVE and ADD entries, one clause per kind on the wire."""

    set_entries: Tuple[SetEntry, ...] = ()
    remove_entries: Tuple[RemoveEntry, ...] = ()
    add_entries: Tuple[AddEntry, ...] = ()

    def __bool__(self) -> bool:
        return bool(self.set_entries or self.remove_entries or self.add_entries)


# --- Operation Nodes ---
@dataclass(frozen=True)
class GetNode:
    table: str
    keys: Optional[Dict[str, Any]] = None
    consistent_read: Optional[bool] = None
    attributes: Tuple[str, ...] = ()


@dataclass(frozen=True)
class PutNode:
    table: str
    item: Optional[Dict[str, Any]] = None
    condition_expression: Group = field(default_factory=Group)
    return_values: Optional[ReturnValues] = None


@dataclass(frozen=True)
class UpdateNode:
    table: str
    keys: Optional[Dict[str, Any]] = None
    condition_expression: Group = field(default_factory=Group)
    update_expression: UpdateExpression = field(default_factory=UpdateExpression)
    return_values: Optional[ReturnValues] = None


@dataclass(frozen=True)
class DeleteNode:
    table: str
    keys: Optional[Dict[str, Any]] = None
    condition_expression: Group = field(default_factory=Group)
    return_values: Optional[ReturnValues] = None


@dataclass(frozen=True)
class QueryNode:
    table: str
    key_condition_expression: Group = field(default_factory=Group)
    filter_expression: Group = field(default_factory=Group)
    consistent_read: Optional[bool] = None
    scan_index_forward: Optional[bool] = None
    limit: Optional[int] = None
    attributes: Tuple[str, ...] = ()


OperationNode = Union[GetNode, PutNode, UpdateNode, DeleteNode, QueryNode]
