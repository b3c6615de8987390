# src/async_dynamo_query/__init__.py

"""
Async DynamoDB Query Builder.

This package builds DynamoDB requests (condition, update, key condition and
projection expressions with their attribute name and value maps) from an
immutable, fluent builder API, and sends them through a boto3-style client.

It initializes a logger with a NullHandler and makes the builders, the
compiler and the exceptions available at the top level.
"""

import logging

# --------------------------------------------------------------------------
# Logging Setup
# --------------------------------------------------------------------------
# Library logs are discarded unless the consuming application configures
# logging.
logger = logging.getLogger(__name__)
logger.addHandler(logging.NullHandler())
logger.propagate = False

# --------------------------------------------------------------------------
# Exception Exports
# --------------------------------------------------------------------------
from .base.exceptions import (
    BuilderAwaitedError,
    ConditionalCheckFailedException,
    ConflictingUpdateError,
    ExpressionError,
    MalformedExpressionError,
    TableNotFoundException,
    TransportNotConfiguredError,
)

# --------------------------------------------------------------------------
# Expression Building Exports
# --------------------------------------------------------------------------
from .base.nodes import ReturnValues
from .base.expression import ExpressionBuilder, KeyConditionBuilder
from .base.update import Update, SetValueBuilder
from .base.compiler import QueryCompiler

# --------------------------------------------------------------------------
# Operation Exports
# --------------------------------------------------------------------------
from .operations.get_item import GetItemQueryBuilder
from .operations.put_item import PutItemQueryBuilder
from .operations.update_item import UpdateItemQueryBuilder
from .operations.delete_item import DeleteItemQueryBuilder
from .operations.query import QueryQueryBuilder
from .dynamodb.base import DynamoDBTransport
from .query_creator import QueryCreator

__all__ = [
    # Entry point
    "QueryCreator",
    # Exceptions
    "ExpressionError",
    "MalformedExpressionError",
    "ConflictingUpdateError",
    "BuilderAwaitedError",
    "ConditionalCheckFailedException",
    "TableNotFoundException",
    "TransportNotConfiguredError",
    # Expressions
    "ReturnValues",
    "ExpressionBuilder",
    "KeyConditionBuilder",
    "Update",
    "SetValueBuilder",
    "QueryCompiler",
    # Operations
    "GetItemQueryBuilder",
    "PutItemQueryBuilder",
    "UpdateItemQueryBuilder",
    "DeleteItemQueryBuilder",
    "QueryQueryBuilder",
    "DynamoDBTransport",
    # Logging
    "logger",
]
