# src/async_dynamo_query/base/compiler.py
import logging
from typing import Any, Dict, List, Optional, Tuple

from .nodes import (
    AddEntry,
    Arithmetic,
    AttributeFunction,
    BeginsWith,
    Between,
    Comparator,
    ConditionNode,
    Contains,
    DeleteNode,
    GetNode,
    Group,
    IfNotExists,
    ListAppend,
    Not,
    OperationNode,
    PathOperand,
    PutNode,
    QueryNode,
    RemoveEntry,
    ReturnValues,
    SetEntry,
    SetValue,
    UpdateExpression,
    UpdateNode,
    ValueOperand,
)
from .placeholders import PlaceholderTable

log = logging.getLogger(__name__)

Command = Dict[str, Any]


class QueryCompiler:
    """
    Renders operation nodes into DynamoDB request parameters.

    Stateless: every `compile` call allocates its own PlaceholderTable, so the
    same node always compiles to the same command and a compiler instance can
    be shared freely.
    """

    def compile(self, node: OperationNode) -> Command:
        table = PlaceholderTable()
        if isinstance(node, GetNode):
            command = self._compile_get(node, table)
        elif isinstance(node, PutNode):
            command = self._compile_put(node, table)
        elif isinstance(node, UpdateNode):
            command = self._compile_update(node, table)
        elif isinstance(node, DeleteNode):
            command = self._compile_delete(node, table)
        elif isinstance(node, QueryNode):
            command = self._compile_query(node, table)
        else:
            raise TypeError(f"Unsupported operation node type: {type(node).__name__}")

        self._add_attribute_maps(command, table)
        log.debug(f"Compiled {type(node).__name__} into {command!r}")
        return command

    # --- Operations ---

    def _compile_get(self, node: GetNode, table: PlaceholderTable) -> Command:
        command = self._base_command(node.table, "Key", node.keys)
        if node.consistent_read is not None:
            command["ConsistentRead"] = node.consistent_read
        projection = self.compile_projection(node.attributes, table)
        if projection:
            command["ProjectionExpression"] = projection
        return command

    def _compile_put(self, node: PutNode, table: PlaceholderTable) -> Command:
        command = self._base_command(node.table, "Item", node.item)
        self._add_condition(command, "ConditionExpression", node.condition_expression, table)
        command["ReturnValues"] = self._return_values(node.return_values)
        return command

    def _compile_update(self, node: UpdateNode, table: PlaceholderTable) -> Command:
        command = self._base_command(node.table, "Key", node.keys)
        self._add_condition(command, "ConditionExpression", node.condition_expression, table)
        update_expression = self.compile_update_expression(node.update_expression, table)
        if update_expression:
            command["UpdateExpression"] = update_expression
        command["ReturnValues"] = self._return_values(node.return_values)
        return command

    def _compile_delete(self, node: DeleteNode, table: PlaceholderTable) -> Command:
        command = self._base_command(node.table, "Key", node.keys)
        self._add_condition(command, "ConditionExpression", node.condition_expression, table)
        command["ReturnValues"] = self._return_values(node.return_values)
        return command

    def _compile_query(self, node: QueryNode, table: PlaceholderTable) -> Command:
        command: Command = {"TableName": node.table}
        self._add_condition(
            command, "KeyConditionExpression", node.key_condition_expression, table
        )
        self._add_condition(command, "FilterExpression", node.filter_expression, table)
        projection = self.compile_projection(node.attributes, table)
        if projection:
            command["ProjectionExpression"] = projection
        if node.consistent_read is not None:
            command["ConsistentRead"] = node.consistent_read
        if node.scan_index_forward is not None:
            command["ScanIndexForward"] = node.scan_index_forward
        if node.limit is not None:
            command["Limit"] = node.limit
        return command

    def _add_condition(
        self, command: Command, key: str, group: Group, table: PlaceholderTable
    ) -> None:
        expression = self.compile_condition_expression(group, table)
        if expression:
            command[key] = expression

    @staticmethod
    def _base_command(table_name: str, key: str, payload: Optional[Dict[str, Any]]) -> Command:
        command: Command = {"TableName": table_name}
        if payload is not None:
            command[key] = payload
        return command

    @staticmethod
    def _add_attribute_maps(command: Command, table: PlaceholderTable) -> None:
        if table.names:
            command["ExpressionAttributeNames"] = table.names
        if table.values:
            command["ExpressionAttributeValues"] = table.values

    @staticmethod
    def _return_values(option: Optional[ReturnValues]) -> str:
        if option is None:
            return ReturnValues.NONE.value
        return option.value

    # --- Condition Expressions ---

    def compile_condition_expression(self, group: Group, table: PlaceholderTable) -> str:
        """
        Renders the top-level group without surrounding parentheses.

        AND binds tighter than OR in DynamoDB's grammar, so a flat chain needs
        no extra grouping. Nested groups are always parenthesized.
        """
        return self._render_group(group, table)

    def _render_group(self, group: Group, table: PlaceholderTable) -> str:
        rendered = ""
        for index, entry in enumerate(group.entries):
            fragment = self._render_condition(entry.node, table)
            if index == 0:
                rendered = fragment
            else:
                rendered += f" {entry.connector.value} {fragment}"
        return rendered

    def _render_condition(self, node: ConditionNode, table: PlaceholderTable) -> str:
        if isinstance(node, Comparator):
            path = table.path(node.path)
            return f"{path} {node.operator} {table.value(node.value)}"
        elif isinstance(node, AttributeFunction):
            return f"{node.function}({table.path(node.path)})"
        elif isinstance(node, BeginsWith):
            path = table.path(node.path)
            return f"begins_with({path}, {table.value(node.prefix)})"
        elif isinstance(node, Contains):
            path = table.path(node.path)
            return f"contains({path}, {table.value(node.value)})"
        elif isinstance(node, Between):
            path = table.path(node.path)
            lower = table.value(node.lower)
            upper = table.value(node.upper)
            return f"{path} BETWEEN {lower} AND {upper}"
        elif isinstance(node, Not):
            child = node.child
            if isinstance(child, Group):
                inner = self._render_group(child, table)
                return f"NOT ({inner})" if len(child) > 1 else f"NOT {inner}"
            return f"NOT {self._render_condition(child, table)}"
        elif isinstance(node, Group):
            return f"({self._render_group(node, table)})"
        else:
            raise TypeError(f"Unknown condition node type: {type(node).__name__}")

    # --- Update Expressions ---

    def compile_update_expression(
        self, update: UpdateExpression, table: PlaceholderTable
    ) -> str:
        """Renders SET, REMOVE and ADD clauses in that order, skipping empty kinds."""
        clauses: List[str] = []
        if update.set_entries:
            entries = ", ".join(self._render_set(e, table) for e in update.set_entries)
            clauses.append(f"SET {entries}")
        if update.remove_entries:
            entries = ", ".join(self._render_remove(e, table) for e in update.remove_entries)
            clauses.append(f"REMOVE {entries}")
        if update.add_entries:
            entries = ", ".join(self._render_add(e, table) for e in update.add_entries)
            clauses.append(f"ADD {entries}")
        return " ".join(clauses)

    def _render_set(self, entry: SetEntry, table: PlaceholderTable) -> str:
        path = table.path(entry.path)
        return f"{path} = {self._render_set_value(entry.value, table)}"

    @staticmethod
    def _render_remove(entry: RemoveEntry, table: PlaceholderTable) -> str:
        return table.path(entry.path)

    @staticmethod
    def _render_add(entry: AddEntry, table: PlaceholderTable) -> str:
        path = table.path(entry.path)
        return f"{path} {table.value(entry.value)}"

    def _render_set_value(self, value: SetValue, table: PlaceholderTable) -> str:
        if isinstance(value, ValueOperand):
            return table.value(value.value)
        elif isinstance(value, PathOperand):
            return table.path(value.path)
        elif isinstance(value, Arithmetic):
            left = self._render_set_value(value.left, table)
            right = self._render_set_value(value.right, table)
            return f"{left} {value.operator} {right}"
        elif isinstance(value, ListAppend):
            left = self._render_set_value(value.left, table)
            right = self._render_set_value(value.right, table)
            return f"list_append({left}, {right})"
        elif isinstance(value, IfNotExists):
            path = table.path(value.path)
            return f"if_not_exists({path}, {self._render_set_value(value.value, table)})"
        else:
            raise TypeError(f"Unknown set value node type: {type(value).__name__}")

    # --- Projections ---

    @staticmethod
    def compile_projection(attributes: Tuple[str, ...], table: PlaceholderTable) -> str:
        return ", ".join(table.path(attribute) for attribute in attributes)
