"""Shared fixtures for dream analysis tests."""

import asyncio

import pytest
from fastapi.testclient import TestClient
from langchain_core.messages import AIMessage

from analysis import AnalysisClient
from main import app, get_analysis_client

ANALYSIS_REPLY = "整体来看，这个梦境反映了你内心的转变。\n\n蛇：象征潜意识的力量。\n\n启示：接纳变化。"


class StubChatModel:
    """Stand-in for a LangChain chat model that records every call."""

    def __init__(self, reply=ANALYSIS_REPLY, error=None, delay=0.0):
        self.reply = reply
        self.error = error
        self.delay = delay
        self.calls = []

    async def ainvoke(self, messages):
        self.calls.append(messages)
        if self.delay:
            await asyncio.sleep(self.delay)
        if self.error is not None:
            raise self.error
        return AIMessage(content=self.reply)


@pytest.fixture
def stub_model():
    return StubChatModel


@pytest.fixture
def stub_llm():
    return StubChatModel()


@pytest.fixture
def make_client():
    """Build a TestClient whose analysis calls go to the given stub model."""

    def _make(llm, timeout=5.0):
        app.dependency_overrides[get_analysis_client] = lambda: AnalysisClient(llm, timeout=timeout)
        return TestClient(app)

    yield _make
    app.dependency_overrides.clear()


@pytest.fixture
def client(make_client, stub_llm):
    return make_client(stub_llm)
