"""Shared fixtures: in-memory fakes for the rendering agent and ad blocker."""

import asyncio

import pytest
from fastapi.testclient import TestClient

from shields_up.api.app import app
from shields_up.api.dependencies import get_handler
from shields_up.entities import RequestInfoEntity
from shields_up.handlers import ProxyHandler
from shields_up.repositories import InMemoryCacheRepository
from shields_up.services import ProxyService

ORIGIN = "http://proxy.test"
PAGE_URL = "https://example.com/index.html"
PAGE_HTML = (
    "<!DOCTYPE html><html><head><title>Example</title></head>"
    '<body><img src="/logo.png"><a href="/about">About</a></body></html>'
)
PNG_BYTES = b"\x89PNG\r\n\x1a\nfake-image"


class FakeClock:
    """Manually advanced time source."""

    def __init__(self, now: float = 1000.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class FakeResponse:
    def __init__(self, body: bytes = PNG_BYTES, headers: dict | None = None, status: int = 200) -> None:
        self._body = body
        self.headers = {"content-type": "image/png"} if headers is None else headers
        self.status = status

    async def body(self) -> bytes:
        return self._body


class FakeSession:
    def __init__(
        self,
        html: str = PAGE_HTML,
        response: FakeResponse | None = None,
        error: Exception | None = None,
        delay: float = 0.0,
    ) -> None:
        self.html = html
        self.response = response
        self.error = error
        self.delay = delay
        self.predicates = []
        self.navigations = []
        self.document_url = ""
        self.closed = False

    async def intercept_requests(self, predicate) -> None:
        self.predicates.append(predicate)

    async def navigate(self, url, wait_until, timeout_ms):
        self.document_url = url
        self.navigations.append((url, wait_until, timeout_ms))
        # Always yield so concurrent requests interleave like real navigation
        await asyncio.sleep(self.delay)
        if self.error is not None:
            raise self.error
        return self.response

    async def content(self) -> str:
        return self.html

    async def close(self) -> None:
        self.closed = True

    def is_aborted(self, url: str, resource_type: str = "script") -> bool:
        """Mimic the browser: the last registered interceptor is asked first."""
        request = RequestInfoEntity(url=url, resource_type=resource_type, document_url=self.document_url)
        return any(predicate(request) for predicate in reversed(self.predicates))


class FakeAgent:
    def __init__(self) -> None:
        self.session_options: dict = {"response": FakeResponse()}
        self.sessions: list[FakeSession] = []
        self.shut_down = False

    @property
    def is_ready(self) -> bool:
        return bool(self.sessions)

    async def new_session(self) -> FakeSession:
        session = FakeSession(**self.session_options)
        self.sessions.append(session)
        return session

    async def shutdown(self) -> None:
        self.shut_down = True


class FakeBlocker:
    def __init__(self, blocked: tuple[str, ...] = ()) -> None:
        self.blocked = blocked
        self.attached: list[FakeSession] = []
        self.closed = False

    @property
    def rule_count(self) -> int:
        return len(self.blocked)

    async def attach(self, session) -> None:
        self.attached.append(session)
        await session.intercept_requests(lambda request: any(b in request.url for b in self.blocked))

    async def close(self) -> None:
        self.closed = True


def build_service(agent, blocker, clock, **kwargs) -> ProxyService:
    options = {
        "origin": ORIGIN,
        "hard_block_domains": ("doubleclick.net", "taboola.com"),
    }
    options.update(kwargs)
    return ProxyService(
        page_cache=InMemoryCacheRepository(max_entries=10, ttl=300, clock=clock, name="page_cache"),
        asset_cache=InMemoryCacheRepository(max_entries=10, ttl=600, clock=clock, name="asset_cache"),
        agent=agent,
        ad_blocker=blocker,
        **options,
    )


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def agent():
    return FakeAgent()


@pytest.fixture
def blocker():
    return FakeBlocker(blocked=("ads.example.net",))


@pytest.fixture
def proxy_service(agent, blocker, clock):
    return build_service(agent, blocker, clock)


@pytest.fixture
def client(proxy_service):
    """Create a test client wired to the fake collaborators."""
    handler = ProxyHandler(proxy_service=proxy_service, asset_max_age=600)
    app.dependency_overrides[get_handler] = lambda: handler
    yield TestClient(app)
    app.dependency_overrides.clear()
