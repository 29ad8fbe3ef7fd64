from dataclasses import dataclass, field
from typing import Any

import pytest

from admintool.logging import configure_logging
from admintool.models import ResolvedConfig


@pytest.fixture(autouse=True)
def _quiet_logging() -> None:
    configure_logging(verbose=False)


@dataclass
class FakeAdminClient:
    """Records requests and answers from a canned response table."""

    responses: dict[tuple[str, str], Any] = field(default_factory=dict)
    requests: list[tuple[str, str, Any]] = field(default_factory=list)
    closed: bool = False

    def request(self, method: str, path: str, *, payload: Any = None, params: Any = None) -> Any:
        self.requests.append((method, path, payload))
        return self.responses.get((method, path))

    def close(self) -> None:
        self.closed = True


@dataclass
class RecordingClientBuilder:
    """Client builder double counting ``build`` calls."""

    client: FakeAdminClient = field(default_factory=FakeAdminClient)
    error: Exception | None = None
    configs: list[ResolvedConfig] = field(default_factory=list)

    @property
    def build_count(self) -> int:
        return len(self.configs)

    def build(self, config: ResolvedConfig) -> FakeAdminClient:
        self.configs.append(config)
        if self.error is not None:
            raise self.error
        return self.client


@pytest.fixture
def fake_client() -> FakeAdminClient:
    return FakeAdminClient()


@pytest.fixture
def client_builder(fake_client: FakeAdminClient) -> RecordingClientBuilder:
    return RecordingClientBuilder(client=fake_client)
