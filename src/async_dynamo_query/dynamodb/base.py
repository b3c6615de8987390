import asyncio
import inspect
import logging
from typing import Any, Dict, NoReturn

from boto3.dynamodb.types import TypeDeserializer, TypeSerializer
from botocore.exceptions import ClientError

from async_dynamo_query.base.compiler import Command
from async_dynamo_query.base.exceptions import (ConditionalCheckFailedException,
                                                TableNotFoundException)
from async_dynamo_query.base.utils import (prepare_for_transport,
                                           restore_from_transport)

base_logger = logging.getLogger(__name__)

_MARSHALLED_REQUEST_KEYS = ("Item", "Key", "ExpressionAttributeValues")
_MARSHALLED_RESPONSE_KEYS = ("Item", "Attributes")


class DynamoDBTransport:
    """
    Sends compiled commands through a low-level DynamoDB client.

    Works with both a blocking boto3 client (calls run in a worker thread)
    and an async aiobotocore-style client (calls are awaited). Native Python
    values in the command are marshalled into DynamoDB attribute values on the
    way out and unmarshalled on the way back.
    """

    def __init__(self, client: Any):
        self._client = client
        self._serializer = TypeSerializer()
        self._deserializer = TypeDeserializer()
        base_logger.debug("Initialized DynamoDB transport for client: %s", client)

    async def send(self, operation_name: str, command: Command) -> Dict[str, Any]:
        method = getattr(self._client, operation_name)
        request = self._marshal_request(command)
        try:
            if inspect.iscoroutinefunction(method):
                response = await method(**request)
            else:
                response = await asyncio.to_thread(method, **request)
        except ClientError as e:
            self._handle_client_error(e, f"{operation_name} on '{command.get('TableName')}'")
        return self._unmarshal_response(response)

    # --- Marshalling ---

    def _serialize_map(self, data: Dict[str, Any]) -> Dict[str, Any]:
        prepared = prepare_for_transport(data)
        return {k: self._serializer.serialize(v) for k, v in prepared.items()}

    def _deserialize_map(self, data: Dict[str, Any]) -> Dict[str, Any]:
        return restore_from_transport(
            {k: self._deserializer.deserialize(v) for k, v in data.items()}
        )

    def _marshal_request(self, command: Command) -> Dict[str, Any]:
        request = dict(command)
        for key in _MARSHALLED_REQUEST_KEYS:
            if key in request:
                request[key] = self._serialize_map(request[key])
        return request

    def _unmarshal_response(self, response: Dict[str, Any]) -> Dict[str, Any]:
        result = dict(response or {})
        for key in _MARSHALLED_RESPONSE_KEYS:
            if key in result:
                result[key] = self._deserialize_map(result[key])
        if "Items" in result:
            result["Items"] = [self._deserialize_map(item) for item in result["Items"]]
        return result

    # --- Error Mapping ---

    def _handle_client_error(self, error: ClientError, context: str = "") -> NoReturn:
        """Maps DynamoDB client errors to package exceptions and raises them."""
        code = error.response.get("Error", {}).get("Code", "")
        message = error.response.get("Error", {}).get("Message", str(error))

        if code == "ConditionalCheckFailedException":
            base_logger.info(f"Condition check failed during {context}")
            raise ConditionalCheckFailedException(
                f"Condition check failed during {context}: {message}"
            ) from error
        if code == "ResourceNotFoundException":
            base_logger.error(f"Table not found during {context}: {message}")
            raise TableNotFoundException(f"Table not found during {context}: {message}") from error

        base_logger.error(f"Error during {context}: {error}", exc_info=True)
        raise RuntimeError(f"DynamoDB error during {context}: {code} {message}") from error
