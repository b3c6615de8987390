import logging
from dataclasses import is_dataclass, asdict
from decimal import Decimal
from typing import Any

logger = logging.getLogger(__name__)


def prepare_for_storage(data: Any) -> Any:
    """
    Recursively convert Pydantic models, dataclasses, and special types to
    values DynamoDB can hold.

    It handles:
    - Pydantic BaseModel instances with field aliases
    - Python dataclasses
    - Dictionaries (processing values recursively)
    - Lists and tuples (processing each item, tuples become lists)
    - Sets and frozensets (kept as sets, DynamoDB stores them as SS/NS/BS)
    - Pydantic URL types (converting to strings)

    Args:
        data: The data to convert

    Returns:
        The converted data, ready to be placed in an item or a value placeholder
    """
    if data is None:
        return None

    # Handle dataclasses
    if is_dataclass(data) and not isinstance(data, type):
        return prepare_for_storage(asdict(data))

    # Handle Pydantic models
    if hasattr(data, "model_dump") and callable(getattr(data, "model_dump")):
        try:
            # Pydantic v2: json mode with aliases keeps the stored attribute names
            serialized = data.model_dump(mode="json", by_alias=True)
            return prepare_for_storage(serialized)
        except Exception as e:
            logger.debug(f"Error using model_dump(mode='json', by_alias=True): {e}")
            serialized = data.model_dump(by_alias=True)
            return prepare_for_storage(serialized)

    if isinstance(data, dict):
        return {k: prepare_for_storage(v) for k, v in data.items()}

    if isinstance(data, (list, tuple)):
        return [prepare_for_storage(item) for item in data]

    if isinstance(data, (set, frozenset)):
        return {prepare_for_storage(item) for item in data}

    # Handle Pydantic URL types and other special types
    if hasattr(data, "__class__") and data.__class__.__module__ == "pydantic.networks":
        return str(data)

    return data


def prepare_for_transport(data: Any) -> Any:
    """
    Recursively replace floats with Decimals.

    boto3's TypeSerializer refuses float values, so every number that leaves
    the process has to be a Decimal (or an int). The string round trip keeps
    the value the user typed instead of its binary expansion.
    """
    if isinstance(data, bool):
        return data
    if isinstance(data, float):
        return Decimal(str(data))
    if isinstance(data, dict):
        return {k: prepare_for_transport(v) for k, v in data.items()}
    if isinstance(data, list):
        return [prepare_for_transport(item) for item in data]
    if isinstance(data, (set, frozenset)):
        return {prepare_for_transport(item) for item in data}
    return data


def restore_from_transport(data: Any) -> Any:
    """Turn the Decimals produced by TypeDeserializer back into ints and floats."""
    if isinstance(data, Decimal):
        return int(data) if data == data.to_integral_value() else float(data)
    if isinstance(data, dict):
        return {k: restore_from_transport(v) for k, v in data.items()}
    if isinstance(data, list):
        return [restore_from_transport(item) for item in data]
    if isinstance(data, (set, frozenset)):
        return {restore_from_transport(item) for item in data}
    return data
