"""
Chat procedures.

``chat.send`` runs one message exchange; ``chat.history`` returns stored
messages. Input is validated here, before the controller is reached.
"""
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, Request, status

from src.api.models import (
    ErrorResponse,
    ExchangeResult,
    HistoryInput,
    Message,
    RpcResponse,
    SendMessageInput,
    decode_json_input,
    parse_input,
    rpc_result,
)
from src.config.database import ChatStoreDep
from src.config.settings import Settings, get_settings
from src.controllers.chat_controller import ChatController
from src.services.providers import get_generation_provider

# ============================================================================
# Dependency Injection
# ============================================================================


def get_chat_controller(
    store: ChatStoreDep,
    settings: Settings = Depends(get_settings),
) -> ChatController:
    """Dependency injection for ChatController."""
    return ChatController(store=store, provider=get_generation_provider(settings))


# ============================================================================
# Router
# ============================================================================

router = APIRouter()


# ============================================================================
# Endpoints
# ============================================================================


@router.post(
    "/chat.send",
    status_code=status.HTTP_200_OK,
    response_model=RpcResponse[ExchangeResult],
    responses={
        400: {"model": ErrorResponse, "description": "Invalid input"},
        500: {"model": ErrorResponse, "description": "Message write failed"},
    },
)
async def send_message(
    request: Request,
    controller: ChatController = Depends(get_chat_controller),
):
    """
    Send a prompt to a model and persist the exchange.

    Body: ``{"modelTag": str, "prompt": str, "userId": str}``.

    Always returns both the user message and the assistant message once the
    user message is stored. A failed generation shows up as assistant content
    starting with ``Error: ``, not as an HTTP error.
    """
    payload = parse_input(SendMessageInput, decode_json_input(await request.body()))

    result = await controller.send_message(
        model_tag=payload.model_tag,
        prompt=payload.prompt,
        user_id=payload.user_id,
    )
    return rpc_result(result)


@router.get(
    "/chat.history",
    status_code=status.HTTP_200_OK,
    response_model=RpcResponse[List[Message]],
    responses={
        400: {"model": ErrorResponse, "description": "Invalid input"},
        500: {"model": ErrorResponse, "description": "Storage read failed"},
    },
)
def get_history(
    request: Request,
    input_: Optional[str] = Query(None, alias="input", description="JSON-encoded {userId, modelTag?}"),
    controller: ChatController = Depends(get_chat_controller),
):
    """
    Return a user's messages oldest first, optionally for one model tag.

    Input comes either as a JSON ``input`` query parameter or as plain
    ``userId`` / ``modelTag`` query parameters.
    """
    if input_ is not None:
        raw = decode_json_input(input_)
    else:
        raw = dict(request.query_params)
    payload = parse_input(HistoryInput, raw)

    return rpc_result(controller.get_history(payload.user_id, payload.model_tag))
