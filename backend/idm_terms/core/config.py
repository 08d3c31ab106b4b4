"""
Configuration management using Pydantic Settings
"""
from enum import Enum
from functools import lru_cache
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, Field, SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# Load .env from project root
# config.py is at: backend/idm_terms/core/config.py
_current_file = Path(__file__).resolve()
_backend_dir = _current_file.parent.parent.parent
_project_root = _backend_dir.parent
ENV_FILE = _project_root / ".env"
# Fallback: try in backend/ directory if not found in project root
if not ENV_FILE.exists():
    ENV_FILE = _backend_dir / ".env"
if ENV_FILE.exists():
    load_dotenv(ENV_FILE, override=False)

DEFAULT_IDM_ADMIN_USER = "openidm-admin"


class SubmitFailurePolicy(str, Enum):
    """What the node does when recording acceptance in IDM fails"""
    IGNORE = "ignore"  # Go to ACCEPTED anyway
    CANCEL = "cancel"  # Go to CANCELED
    ERROR = "error"  # Raise NodeProcessError to the tree engine


class TermsNodeConfig(BaseModel):
    """Setup values of a terms and conditions node"""

    model_config = ConfigDict(frozen=True)

    idm_base_url: str = Field(..., description="IDM base URL, e.g. https://idm.example.com/openidm")
    idm_admin_user: str = Field(default=DEFAULT_IDM_ADMIN_USER, description="IDM administrative user")
    idm_admin_password: SecretStr = Field(..., description="IDM administrative password")
    idm_timeout_seconds: Optional[float] = Field(
        default=None,
        gt=0,
        description="HTTP timeout for IDM calls (unset uses the HTTP client default)"
    )
    submit_failure_policy: SubmitFailurePolicy = Field(
        default=SubmitFailurePolicy.IGNORE,
        description="Outcome policy when submitting acceptance to IDM fails"
    )

    @field_validator("idm_base_url", "idm_admin_user")
    @classmethod
    def require_value(cls, v: str) -> str:
        """Reject blank required values"""
        v = v.strip()
        if not v:
            raise ValueError("value is required")
        return v

    @field_validator("idm_base_url")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        return v.rstrip("/")

    @field_validator("idm_admin_password")
    @classmethod
    def require_password(cls, v: SecretStr) -> SecretStr:
        if not v.get_secret_value():
            raise ValueError("value is required")
        return v


class Settings(BaseSettings):
    """Application settings"""

    # Application
    app_name: str = "idm-terms-node"
    log_level: str = Field(default="INFO", description="Logging level")

    # Logging
    log_module_levels: Optional[str] = Field(
        default=None,
        description='Module-specific log levels (JSON string, e.g., {"idm_terms.services": "DEBUG"})'
    )
    log_format: str = Field(
        default="text",
        description="Log format: 'json' for structured logging, 'text' for plain text"
    )
    log_file_enabled: bool = Field(default=False, description="Enable file logging")
    log_file_path: str = Field(
        default="logs/idm_terms.log",
        description="Path to log file (relative to project root)"
    )
    log_file_retention: int = Field(
        default=30,
        ge=1,
        description="Number of days to keep log files"
    )
    log_sensitive_data: bool = Field(
        default=False,
        description="Enable logging of sensitive data (passwords, tokens) - NOT RECOMMENDED"
    )
    log_propagate: bool = Field(
        default=True,
        description="Pass idm_terms records on to the host's root logger as well"
    )

    # IDM (defaults for TermsNodeConfig)
    idm_base_url: Optional[str] = Field(default=None, description="IDM base URL")
    idm_admin_user: str = Field(default=DEFAULT_IDM_ADMIN_USER, description="IDM administrative user")
    idm_admin_password: Optional[SecretStr] = Field(default=None, description="IDM administrative password")
    idm_timeout_seconds: Optional[float] = Field(default=None, gt=0, description="IDM HTTP timeout (seconds)")
    idm_submit_failure_policy: SubmitFailurePolicy = Field(
        default=SubmitFailurePolicy.IGNORE,
        description="Outcome policy when submitting acceptance fails: ignore, cancel or error"
    )

    @property
    def terms_node_config(self) -> TermsNodeConfig:
        """Build node config from environment defaults"""
        return TermsNodeConfig(
            idm_base_url=self.idm_base_url or "",
            idm_admin_user=self.idm_admin_user,
            idm_admin_password=self.idm_admin_password or SecretStr(""),
            idm_timeout_seconds=self.idm_timeout_seconds,
            submit_failure_policy=self.idm_submit_failure_policy,
        )

    model_config = SettingsConfigDict(
        env_file=str(ENV_FILE) if ENV_FILE.exists() else None,
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        env_ignore_empty=True
    )


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance"""
    return Settings()
