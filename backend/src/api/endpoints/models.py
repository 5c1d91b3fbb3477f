"""
Model catalog procedures.

Lists the language models a user can pick from.
"""
from typing import List

from fastapi import APIRouter, Depends, status

from src.api.endpoints.chat import get_chat_controller
from src.api.models import ErrorResponse, Model, RpcResponse, rpc_result
from src.controllers.chat_controller import ChatController

router = APIRouter()


@router.get(
    "/models.getAvailable",
    status_code=status.HTTP_200_OK,
    response_model=RpcResponse[List[Model]],
    responses={
        500: {"model": ErrorResponse, "description": "Storage read failed"},
    },
)
def get_available_models(
    controller: ChatController = Depends(get_chat_controller),
):
    """Return all models ordered by creation time, oldest first."""
    return rpc_result(controller.list_models())
