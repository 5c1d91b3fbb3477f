"""
Response envelope for RPC procedures.
"""
import json
from typing import Any, Dict, Generic, Type, TypeVar, Union

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from src.services.exceptions import ValidationError

T = TypeVar("T")
M = TypeVar("M", bound=BaseModel)


class RpcResult(BaseModel, Generic[T]):
    data: T


class RpcResponse(BaseModel, Generic[T]):
    """Successful procedure result: ``{"result": {"data": ...}}``."""
    result: RpcResult[T]


def rpc_result(data: Any) -> Dict[str, Any]:
    """Wrap a procedure's return value in the RPC envelope."""
    return {"result": {"data": data}}


def parse_input(model: Type[M], raw: Any) -> M:
    """
    Validate raw procedure input against ``model``.

    Raises:
        ValidationError: With pydantic's error list under ``details["errors"]``
    """
    if raw is None:
        raw = {}
    try:
        return model.model_validate(raw)
    except PydanticValidationError as e:
        errors = [
            {"loc": list(err["loc"]), "msg": err["msg"], "type": err["type"]}
            for err in e.errors()
        ]
        raise ValidationError("Invalid input data", details={"errors": errors}) from e


def decode_json_input(raw: Union[str, bytes, None]) -> Any:
    """
    Decode a JSON-encoded procedure input (query ``input`` param or body).

    Raises:
        ValidationError: If the payload is not valid JSON
    """
    if raw is None or raw in ("", b""):
        return None
    try:
        return json.loads(raw)
    except ValueError as e:
        raise ValidationError("Input is not valid JSON", details={"errors": [str(e)]}) from e
