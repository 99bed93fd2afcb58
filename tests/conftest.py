"""Pytest configuration and fixtures."""

from __future__ import annotations

from typing import Any, Iterator

import pytest
from fastapi.testclient import TestClient

from mediadeck.api.dependencies import get_runner
from mediadeck.config import Settings, get_settings
from mediadeck.main import create_app
from mediadeck.tools.runner import ToolRun


class FakeRunner:
    """Stands in for ExternalToolRunner; records every invocation."""

    def __init__(self) -> None:
        self.probe_data: Any = {"format": {"format_name": "matroska"}, "streams": []}
        self.log = "frame=  100 fps=50\n"
        self.capture_error: Exception | None = None
        self.streamed_error: Exception | None = None
        self.capture_calls: list[tuple[str, list[str]]] = []
        self.streamed_calls: list[tuple[str, list[str]]] = []

    async def run_capture(self, tool: str, args: list[str]) -> Any:
        self.capture_calls.append((tool, list(args)))
        if self.capture_error is not None:
            raise self.capture_error
        return self.probe_data

    async def run_streamed(self, tool: str, args: list[str]) -> ToolRun:
        self.streamed_calls.append((tool, list(args)))
        if self.streamed_error is not None:
            raise self.streamed_error
        return ToolRun(log=self.log)

    @property
    def last_args(self) -> list[str]:
        return self.streamed_calls[-1][1]


@pytest.fixture
def media_root(tmp_path):
    root = tmp_path / "media"
    root.mkdir()
    return root


@pytest.fixture
def settings(media_root) -> Settings:
    return Settings(roots=str(media_root))


@pytest.fixture
def fake_runner() -> FakeRunner:
    return FakeRunner()


def _client_for(settings: Settings, runner: FakeRunner) -> TestClient:
    app = create_app(settings)
    app.dependency_overrides[get_settings] = lambda: settings
    app.dependency_overrides[get_runner] = lambda: runner
    return TestClient(app)


@pytest.fixture
def client(settings, fake_runner) -> Iterator[TestClient]:
    with _client_for(settings, fake_runner) as test_client:
        yield test_client


@pytest.fixture
def unconfigured_client(fake_runner) -> Iterator[TestClient]:
    with _client_for(Settings(roots=""), fake_runner) as test_client:
        yield test_client
