"""
Shared fixtures: fake settings and a stand-in for the OpenAI client.
"""

import logging
from types import SimpleNamespace
from unittest.mock import MagicMock

import pytest

from chat_backend.config import AdvisorSettings


def make_completion(content):
    """Shape of an OpenAI chat completion, reduced to what the handler reads."""
    return SimpleNamespace(
        choices=[SimpleNamespace(message=SimpleNamespace(role="assistant", content=content))]
    )


@pytest.fixture
def settings():
    return AdvisorSettings(openai_api_key="sk-test-key")


@pytest.fixture
def completion_client():
    client = MagicMock()
    client.chat.completions.create.return_value = make_completion("Hello from the advisor")
    return client


@pytest.fixture
def logger():
    return logging.getLogger("tests")
