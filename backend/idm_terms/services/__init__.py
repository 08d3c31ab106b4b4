"""
Services module: remote IDM access
"""
from idm_terms.services.idm_client import IdmClient, RequirementsDocument, UiConfig

__all__ = ["IdmClient", "RequirementsDocument", "UiConfig"]
