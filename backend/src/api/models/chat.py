"""
Records and procedure inputs for the chat endpoints.

Stored records keep the store's snake_case column names. Procedure inputs and
the exchange result use the camelCase names the web client sends and reads.
"""
from datetime import datetime
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, StrictStr, field_validator

MessageRole = Literal["user", "assistant"]


class User(BaseModel):
    """Authenticated principal, owned by the external auth provider."""
    id: str
    email: Optional[str] = None
    created_at: Optional[datetime] = None


class Model(BaseModel):
    """A selectable language model, as stored in the ``models`` table."""
    model_config = ConfigDict(protected_namespaces=())

    id: str
    tag: str = Field(..., description="Routing key used to pick a generation model")
    name: str = Field(..., description="Display name")
    description: Optional[str] = None
    created_at: datetime


class Message(BaseModel):
    """A single chat message, as stored in the ``messages`` table.

    Messages are append-only: they are never updated after insertion.
    """
    model_config = ConfigDict(protected_namespaces=())

    id: str
    user_id: str
    model_tag: str
    role: MessageRole
    content: str
    created_at: datetime


class SendMessageInput(BaseModel):
    """Input for ``chat.send``.

    - modelTag: tag of the model to answer with
    - prompt: the user's message text
    - userId: id of the authenticated user (trusted from the caller)
    """
    model_config = ConfigDict(populate_by_name=True, protected_namespaces=())

    model_tag: StrictStr = Field(..., alias="modelTag", min_length=1)
    prompt: StrictStr = Field(..., min_length=1)
    user_id: StrictStr = Field(..., alias="userId", min_length=1)


class HistoryInput(BaseModel):
    """Input for ``chat.history``.

    An empty ``modelTag`` means no tag filter.
    """
    model_config = ConfigDict(populate_by_name=True, protected_namespaces=())

    user_id: StrictStr = Field(..., alias="userId", min_length=1)
    model_tag: Optional[StrictStr] = Field(None, alias="modelTag")

    @field_validator("model_tag")
    @classmethod
    def _empty_tag_is_none(cls, value: Optional[str]) -> Optional[str]:
        return value or None


class ExchangeResult(BaseModel):
    """Both records persisted by one exchange."""
    model_config = ConfigDict(populate_by_name=True)

    user_message: Message = Field(..., alias="userMessage")
    ai_message: Message = Field(..., alias="aiMessage")
