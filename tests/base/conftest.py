# tests/base/conftest.py
from typing import Any, Dict, Tuple

from async_dynamo_query.base.compiler import QueryCompiler
from async_dynamo_query.base.nodes import Group, UpdateExpression
from async_dynamo_query.base.placeholders import PlaceholderTable


def render_condition(group: Group) -> Tuple[str, Dict[str, str], Dict[str, Any]]:
    """Renders a condition group with a fresh placeholder table."""
    table = PlaceholderTable()
    expression = QueryCompiler().compile_condition_expression(group, table)
    return expression, table.names, table.values


def render_update(update: UpdateExpression) -> Tuple[str, Dict[str, str], Dict[str, Any]]:
    """Renders an update expression with a fresh placeholder table."""
    table = PlaceholderTable()
    expression = QueryCompiler().compile_update_expression(update, table)
    return expression, table.names, table.values
