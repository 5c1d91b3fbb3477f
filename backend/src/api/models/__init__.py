from .chat import (
    ExchangeResult,
    HistoryInput,
    Message,
    Model,
    SendMessageInput,
    User,
)
from .error import ErrorResponse
from .rpc import RpcResponse, RpcResult, decode_json_input, parse_input, rpc_result

__all__ = [
    "ErrorResponse",
    "ExchangeResult",
    "HistoryInput",
    "Message",
    "Model",
    "SendMessageInput",
    "User",
    "RpcResponse",
    "RpcResult",
    "decode_json_input",
    "parse_input",
    "rpc_result",
]
