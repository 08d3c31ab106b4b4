"""
Pytest configuration and fixtures
"""
import logging
import sys
from pathlib import Path
from typing import Any, Callable, List, Optional

import httpx
import pytest
from pydantic import SecretStr

# Add backend directory to path for imports
backend_dir = Path(__file__).parent.parent
if str(backend_dir) not in sys.path:
    sys.path.insert(0, str(backend_dir))

from idm_terms.core.config import TermsNodeConfig
from idm_terms.services.idm_client import IdmClient

IDM_BASE_URL = "https://idm.example.com/openidm"
ADMIN_USER = "openidm-admin"
ADMIN_PASSWORD = "s3cret-admin"

TERMS_RESPONSE = {
    "requirements": {
        "terms": "T",
        "uiConfig": {
            "displayName": "D",
            "purpose": "P",
            "buttonText": "B",
        },
    }
}


class FakeIdm:
    """Handler for httpx.MockTransport that records every request"""

    def __init__(
        self,
        status_code: int = 200,
        json_body: Any = None,
        content: Optional[bytes] = None,
        error: Optional[Callable[[httpx.Request], Exception]] = None
    ):
        self.status_code = status_code
        self.json_body = json_body
        self.content = content
        self.error = error
        self.requests: List[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.error is not None:
            raise self.error(request)
        if self.content is not None:
            return httpx.Response(self.status_code, content=self.content)
        return httpx.Response(self.status_code, json=self.json_body if self.json_body is not None else {})


@pytest.fixture
def test_logger() -> logging.Logger:
    """Logger that propagates to the root logger so caplog sees it"""
    logger = logging.getLogger("tests.idm_terms")
    logger.setLevel(logging.DEBUG)
    return logger


@pytest.fixture
def node_config() -> TermsNodeConfig:
    """Node config pointing at a fake IDM"""
    return TermsNodeConfig(
        idm_base_url=IDM_BASE_URL,
        idm_admin_user=ADMIN_USER,
        idm_admin_password=SecretStr(ADMIN_PASSWORD),
    )


@pytest.fixture
def make_client(test_logger):
    """Factory for an IdmClient talking to a FakeIdm"""

    def _make(fake: FakeIdm, base_url: str = IDM_BASE_URL) -> IdmClient:
        return IdmClient(
            base_url=base_url,
            admin_user=ADMIN_USER,
            admin_password=SecretStr(ADMIN_PASSWORD),
            transport=httpx.MockTransport(fake),
            logger=test_logger,
        )

    return _make
