"""
Client for the IDM self-service terms and conditions endpoint
"""
import json
import logging
from typing import Any, Dict, Optional, Union

import httpx
from pydantic import BaseModel, ConfigDict, Field, SecretStr, ValidationError

from idm_terms.core.config import TermsNodeConfig
from idm_terms.core.logging_config import LoggingConfig

USER_AGENT = "ForgeRock TermsAndConditions Authentication Node"
TERMS_PATH = "/selfservice/termsAndConditions"
ACCEPT_PAYLOAD = {"input": {"accept": "true"}}


def encode_header_value(value: str) -> bytes:
    """
    Encode a header value for the wire

    IDM reads headers as ISO-8859-1; characters outside it are sent as UTF-8.
    """
    try:
        return value.encode("latin-1")
    except UnicodeEncodeError:
        return value.encode("utf-8")


class UiConfig(BaseModel):
    """How IDM wants the terms presented"""
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    display_name: Optional[str] = Field(default=None, alias="displayName")
    purpose: Optional[str] = None
    button_text: Optional[str] = Field(default=None, alias="buttonText")


class RequirementsDocument(BaseModel):
    """Pending self-service requirements for a user"""
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    terms: Optional[str] = None
    ui_config: Optional[UiConfig] = Field(default=None, alias="uiConfig")

    @property
    def has_terms(self) -> bool:
        return self.terms is not None


class IdmClient:
    """
    Synchronous client for IDM terms and conditions

    Authenticates with the IDM administrative account and acts on behalf of
    the user through the ``X-OpenIDM-RunAs`` header. Failures of any kind are
    logged and reported as "no result"; nothing is raised to the caller.
    """

    def __init__(
        self,
        base_url: str,
        admin_user: str,
        admin_password: SecretStr,
        timeout: Optional[float] = None,
        transport: Optional[httpx.BaseTransport] = None,
        logger: Optional[logging.Logger] = None
    ):
        self.base_url = base_url.rstrip("/")
        self.admin_user = admin_user
        self._admin_password = admin_password
        self.timeout = timeout
        self._transport = transport
        self.logger = logger or LoggingConfig.get_logger(__name__)

    @classmethod
    def from_config(
        cls,
        config: TermsNodeConfig,
        transport: Optional[httpx.BaseTransport] = None,
        logger: Optional[logging.Logger] = None
    ) -> "IdmClient":
        """Create client from node config"""
        return cls(
            base_url=config.idm_base_url,
            admin_user=config.idm_admin_user,
            admin_password=config.idm_admin_password,
            timeout=config.idm_timeout_seconds,
            transport=transport,
            logger=logger,
        )

    @property
    def requirements_url(self) -> str:
        return f"{self.base_url}{TERMS_PATH}?_prettyPrint=true"

    @property
    def submit_url(self) -> str:
        return f"{self.base_url}{TERMS_PATH}?_action=submitRequirements&_prettyPrint=true"

    def _headers(self, username: str) -> Dict[str, Union[str, bytes]]:
        return {
            "Accept": "*/*",
            "Content-Type": "application/json",
            "X-OpenIDM-Username": encode_header_value(self.admin_user),
            "X-OpenIDM-Password": encode_header_value(self._admin_password.get_secret_value()),
            "X-OpenIDM-RunAs": encode_header_value(username),
            "User-Agent": USER_AGENT,
        }

    def _client(self) -> httpx.Client:
        kwargs: Dict[str, Any] = {}
        if self.timeout is not None:
            kwargs["timeout"] = self.timeout
        if self._transport is not None:
            kwargs["transport"] = self._transport
        return httpx.Client(**kwargs)

    def _send(self, method: str, url: str, username: str, content: Optional[bytes] = None) -> Optional[httpx.Response]:
        """Send one request; None when it could not be completed"""
        self.logger.debug(f"{method} {url} as {username}")
        try:
            with self._client() as client:
                return client.request(method, url, headers=self._headers(username), content=content)
        except httpx.InvalidURL as e:
            self.logger.error(f"Malformed IDM URL {url}: {e}")
        except httpx.HTTPError as e:
            self.logger.error(f"{method} {url} failed: {e}", exc_info=True)
        return None

    def fetch_requirements(self, username: str) -> Optional[RequirementsDocument]:
        """
        Get the pending requirements of a user

        Args:
            username: User to act as

        Returns:
            RequirementsDocument, or None if IDM could not be reached, answered
            with anything but 200, or returned an unusable body
        """
        response = self._send("GET", self.requirements_url, username)
        if response is None:
            return None

        if response.status_code != 200:
            self.logger.warning(
                f"fetch_requirements: HTTP failed, response code: {response.status_code} - {response.reason_phrase}"
            )
            self.logger.debug(f"response: {response.text}")
            return None

        self.logger.debug(f"fetch_requirements: HTTP success, response: {response.text}")
        try:
            body = response.json()
        except ValueError as e:
            self.logger.error(f"fetch_requirements: response is not JSON: {e}")
            return None

        requirements = body.get("requirements") if isinstance(body, dict) else None
        if not isinstance(requirements, dict):
            self.logger.warning("fetch_requirements: response has no requirements object")
            return None

        try:
            return RequirementsDocument.model_validate(requirements)
        except ValidationError as e:
            self.logger.error(f"fetch_requirements: unexpected requirements document: {e}")
            return None

    def submit_acceptance(self, username: str) -> bool:
        """
        Record that a user accepted the terms

        Args:
            username: User to act as

        Returns:
            True if IDM answered 200
        """
        payload = json.dumps(ACCEPT_PAYLOAD, separators=(",", ":")).encode("utf-8")
        response = self._send("POST", self.submit_url, username, content=payload)
        if response is None:
            return False

        if response.status_code != 200:
            self.logger.warning(
                f"submit_acceptance: HTTP failed, response code: {response.status_code} - {response.reason_phrase}"
            )
            self.logger.debug(f"response: {response.text}")
            return False

        self.logger.debug("submit_acceptance: HTTP success, response 200")
        return True
