# src/async_dynamo_query/base/exceptions.py


# --- Builder Exceptions ---
class ExpressionError(ValueError):
    """Base class for errors raised while building an expression."""

    pass


class MalformedExpressionError(ExpressionError, TypeError):
    """Error raised when a builder call receives arguments of no known shape."""

    pass


class ConflictingUpdateError(ExpressionError):
    """Error raised when an update touches the same (or an overlapping) path twice."""

    pass


class BuilderAwaitedError(TypeError):
    """Error raised when an operation builder is awaited instead of executed."""

    def __init__(self, builder_name: str = "QueryBuilder"):
        super().__init__(
            f"Don't await {builder_name} instances directly. "
            f"To execute the query you need to call the `execute` method"
        )


# --- Transport Exceptions ---
class ConditionalCheckFailedException(Exception):
    """Exception raised when the condition expression of a write evaluates to false."""

    def __init__(self, message: str = "The conditional request failed."):
        super().__init__(message)


class TableNotFoundException(Exception):
    """Exception raised when the requested table does not exist."""

    def __init__(self, message: str = "The requested table was not found."):
        super().__init__(message)


class TransportNotConfiguredError(RuntimeError):
    """Error raised when a builder without a client or transport is executed."""

    def __init__(self, builder_name: str = "QueryBuilder"):
        super().__init__(
            f"{builder_name} has no transport. Pass a DynamoDB client or a "
            f"transport to QueryCreator to call `execute`"
        )
