"""
Pytest configuration and fixtures

External services are faked at the httpx transport layer: every outbound
request is recorded so tests can assert what was (or was not) sent.
"""
import json
import pytest
import httpx
from typing import Any, Dict, List, Optional

from kiosk_backend.config import Settings


class FakeCRM:
    """
    In-memory RepairShopr stand-in

    Responses are (status, body) tuples; a body that is an Exception is
    raised as a transport failure instead.
    """

    def __init__(
        self,
        search: Any = (200, {"customers": []}),
        create_customer: Any = (200, {"customer": {"id": 501}}),
        create_ticket: Any = (200, {"ticket": {"id": 9001, "number": 1042}}),
    ):
        self.responses = {
            ("GET", "customers"): search,
            ("POST", "customers"): create_customer,
            ("POST", "tickets"): create_ticket,
        }
        self.requests: List[httpx.Request] = []
        self.transport = httpx.MockTransport(self.handle)

    def handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        endpoint = request.url.path.rsplit("/", 1)[-1]
        response = self.responses[(request.method, endpoint)]
        if isinstance(response, Exception):
            raise response
        if callable(response):
            response = response(request)
        status, body = response
        if isinstance(body, str):
            return httpx.Response(status, text=body)
        return httpx.Response(status, json=body)

    def calls(self, method: str, endpoint: str) -> List[httpx.Request]:
        return [
            r for r in self.requests
            if r.method == method and r.url.path.endswith(f"/{endpoint}")
        ]

    @staticmethod
    def body(request: httpx.Request) -> Dict[str, Any]:
        return json.loads(request.content)


class FakeCompletionProvider:
    """Records chat-completion calls and replies with a fixed response"""

    def __init__(self, status: int = 200, body: Optional[Any] = None):
        self.status = status
        self.body = body if body is not None else {
            "choices": [{"message": {"role": "assistant", "content": '{"say": "Hi!"}'}}]
        }
        self.requests: List[httpx.Request] = []
        self.transport = httpx.MockTransport(self.handle)

    def handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if isinstance(self.body, Exception):
            raise self.body
        if isinstance(self.body, str):
            return httpx.Response(self.status, text=self.body)
        return httpx.Response(self.status, json=self.body)

    def sent(self, index: int = 0) -> Dict[str, Any]:
        return json.loads(self.requests[index].content)


@pytest.fixture
def settings() -> Settings:
    """Settings pointing at a fake account, isolated from any .env file"""
    return Settings(
        _env_file=None,
        repairshopr_subdomain="kiosk",
        repairshopr_api_key="rs-test-key",
        repairshopr_base_url="",
        openai_api_key="sk-test",
        openai_base_url="https://api.openai.com",
        llm_default_model="gpt-4o-mini",
        llm_default_temperature=0.2,
        http_timeout=5.0,
        http_max_retries=0,
    )


@pytest.fixture
def crm() -> FakeCRM:
    return FakeCRM()


@pytest.fixture
def provider() -> FakeCompletionProvider:
    return FakeCompletionProvider()


@pytest.fixture
def ann_submission() -> Dict[str, Any]:
    """Minimal kiosk check-in with a virus complaint"""
    return {
        "first_name": "Ann",
        "last_name": "Lee",
        "email": "a@x.com",
        "mobile": "5551234567",
        "issue": "my computer has a virus",
    }
