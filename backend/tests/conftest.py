"""
Shared test fixtures: an in-memory chat store, stub providers and an app
wired to them. Nothing here touches the network.
"""
import sys
import uuid
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional

import pytest
from fastapi.testclient import TestClient

# Add backend to path
backend_dir = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(backend_dir))

from src.api.models.chat import Message, Model  # noqa: E402
from src.config.settings import Settings  # noqa: E402
from src.services.exceptions import StorageError  # noqa: E402
from src.services.providers import EchoProvider, GenerationProvider  # noqa: E402

BASE_TIME = datetime(2025, 1, 1, tzinfo=timezone.utc)


class InMemoryChatStore:
    """ChatStore fake with a strictly increasing clock and switchable faults."""

    def __init__(self):
        self.models: List[Model] = []
        self.messages: List[Message] = []
        self.insert_calls: List[Dict[str, Any]] = []
        self.read_calls = 0
        self.fail_insert_role: Optional[str] = None
        self.fail_reads = False
        self._tick = 0

    def _now(self) -> datetime:
        self._tick += 1
        return BASE_TIME + timedelta(seconds=self._tick)

    def add_model(self, tag: str, name: str, created_at: datetime) -> Model:
        """Store a model with an explicit timestamp (bypasses the clock)."""
        model = Model(id=str(uuid.uuid4()), tag=tag, name=name, created_at=created_at)
        self.models.append(model)
        return model

    def list_models(self) -> List[Model]:
        self.read_calls += 1
        if self.fail_reads:
            raise StorageError("simulated read fault")
        return sorted(self.models, key=lambda m: m.created_at)

    def insert_model(self, record: Dict[str, Any]) -> Model:
        model = Model(id=str(uuid.uuid4()), created_at=self._now(), **record)
        self.models.append(model)
        return model

    def insert_message(self, record: Dict[str, Any]) -> Message:
        self.insert_calls.append(record)
        if self.fail_insert_role == record["role"]:
            raise StorageError("simulated write fault")
        message = Message(id=str(uuid.uuid4()), created_at=self._now(), **record)
        self.messages.append(message)
        return message

    def list_messages(self, user_id: str, model_tag: Optional[str] = None) -> List[Message]:
        self.read_calls += 1
        if self.fail_reads:
            raise StorageError("simulated read fault")
        rows = [m for m in self.messages if m.user_id == user_id]
        if model_tag:
            rows = [m for m in rows if m.model_tag == model_tag]
        return sorted(rows, key=lambda m: m.created_at)


class StubProvider(GenerationProvider):
    """Provider returning a fixed reply and recording its calls."""

    name = "stub"

    def __init__(self, reply: Optional[str] = "stub reply"):
        self.reply = reply
        self.calls = []

    async def _complete(self, prompt: str, model_tag: str) -> Optional[str]:
        self.calls.append((prompt, model_tag))
        return self.reply


class ExplodingProvider(GenerationProvider):
    """Provider whose ``generate`` raises something unexpected."""

    name = "exploding"

    async def generate(self, prompt: str, model_tag: str) -> str:
        raise RuntimeError("provider crashed")

    async def _complete(self, prompt: str, model_tag: str) -> Optional[str]:
        raise AssertionError("not reached")


def make_settings(**overrides) -> Settings:
    """Settings isolated from the developer's environment and .env files."""
    values = {
        "environment": "test",
        "supabase_url": "",
        "supabase_service_role_key": "",
        "supabase_jwt_secret": "",
        "gemini_api_key": "",
        "openai_api_key": "",
    }
    values.update(overrides)
    return Settings(_env_file=None, **values)


@pytest.fixture
def store() -> InMemoryChatStore:
    return InMemoryChatStore()


@pytest.fixture
def echo_provider() -> EchoProvider:
    return EchoProvider()


@pytest.fixture
def controller(store, echo_provider):
    from src.controllers.chat_controller import ChatController

    return ChatController(store=store, provider=echo_provider)


@pytest.fixture
def settings() -> Settings:
    return make_settings()


@pytest.fixture
def client(store, controller, settings):
    """TestClient for an app whose controller uses the in-memory store in echo mode."""
    from main import create_app
    from src.api.endpoints.chat import get_chat_controller
    from src.config.settings import get_settings

    app = create_app(settings)
    app.dependency_overrides[get_chat_controller] = lambda: controller
    app.dependency_overrides[get_settings] = lambda: settings
    with TestClient(app) as test_client:
        yield test_client
