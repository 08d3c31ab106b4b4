"""
Terms and conditions node

Checks IDM for terms the user still has to accept, shows them, and records
the user's acceptance back in IDM.
"""
import json
import logging
from enum import Enum
from functools import lru_cache
from pathlib import Path
from typing import Dict, List, Optional, Sequence

from idm_terms.core.callbacks import (
    ConfirmationCallback,
    MessageType,
    ScriptTextOutputCallback,
    TextOutputCallback,
)
from idm_terms.core.config import SubmitFailurePolicy, TermsNodeConfig
from idm_terms.core.logging_config import LoggingConfig
from idm_terms.core.templates import (
    create_client_side_script_executor_function,
    render_terms_display_script,
)
from idm_terms.core.tree import USERNAME, Action, NodeProcessError, Outcome, TreeContext
from idm_terms.services.idm_client import IdmClient, RequirementsDocument

OUTPUT_PARAMETER_ID = "TermsAndConditions"
CANCEL_OPTION = "Cancel"
ACCEPT_INDEX = 0

BUNDLE_FILE = Path(__file__).resolve().parent.parent / "resources" / "bundles" / "terms_and_conditions.json"
DEFAULT_LOCALE = "en"


class TermsAndConditionsOutcome(str, Enum):
    """The possible outcomes of the node"""
    CONTINUE = "CONTINUE"  # Nothing to accept
    ACCEPTED = "ACCEPTED"
    CANCELED = "CANCELED"


# Bundle key of the display name of each outcome
OUTCOME_LABEL_KEYS: Dict[TermsAndConditionsOutcome, str] = {
    TermsAndConditionsOutcome.CONTINUE: "okOutcome",
    TermsAndConditionsOutcome.ACCEPTED: "acceptOutcome",
    TermsAndConditionsOutcome.CANCELED: "cancelOutcome",
}


@lru_cache()
def _load_bundles() -> Dict[str, Dict[str, str]]:
    with open(BUNDLE_FILE, encoding="utf-8") as f:
        return json.load(f)


def _normalize_locale(locale: str) -> str:
    return locale.strip().replace("_", "-").lower()


def get_bundle(locales: Optional[Sequence[str]] = None) -> Dict[str, str]:
    """
    Pick the label bundle for the first supported preferred locale

    Tries an exact match, then the language alone, and falls back to English.
    """
    bundles = _load_bundles()
    for locale in locales or ():
        normalized = _normalize_locale(locale)
        if normalized in bundles:
            return bundles[normalized]
        language = normalized.split("-", 1)[0]
        if language in bundles:
            return bundles[language]
    return bundles[DEFAULT_LOCALE]


class TermsAndConditionsOutcomeProvider:
    """Defines the possible outcomes of the node for the tree designer"""

    def get_outcomes(self, locales: Optional[Sequence[str]] = None) -> List[Outcome]:
        bundle = get_bundle(locales)
        return [
            Outcome(outcome.value, bundle[OUTCOME_LABEL_KEYS[outcome]])
            for outcome in TermsAndConditionsOutcome
        ]


class TermsAndConditionsNode:
    """
    Authentication tree node for IDM terms and conditions

    First visit: fetch the user's pending requirements from IDM. With terms
    pending, send the terms and an accept/cancel choice to the client;
    otherwise go to CONTINUE.

    Second visit (the confirmation callback is back): index 0 submits the
    acceptance to IDM and goes to ACCEPTED, anything else goes to CANCELED.

    Shared and transient state are passed on untouched.
    """

    outcome_provider = TermsAndConditionsOutcomeProvider()

    def __init__(
        self,
        config: TermsNodeConfig,
        idm_client: Optional[IdmClient] = None,
        logger: Optional[logging.Logger] = None
    ):
        self.config = config
        self.logger = logger or LoggingConfig.get_logger(__name__)
        self.idm_client = idm_client or IdmClient.from_config(config, logger=self.logger)

    def evaluate(self, context: TreeContext) -> Action:
        """
        Run the node for one round trip

        Args:
            context: Tree context with session state and returned callbacks

        Returns:
            Action going to a TermsAndConditionsOutcome, or sending the terms prompt

        Raises:
            NodeProcessError: Only when submitting acceptance fails under
                SubmitFailurePolicy.ERROR
        """
        username = context.shared_state.get(USERNAME)
        if username is not None and not isinstance(username, str):
            self.logger.warning(f"Ignoring non-string username of type {type(username).__name__}")
            username = None

        confirmation = context.get_callback(ConfirmationCallback)
        if confirmation is not None:
            return self._handle_confirmation(context, confirmation, username)

        requirements = self._fetch_requirements(username)
        if requirements is not None and requirements.has_terms:
            self.logger.info(f"{username} needs to accept terms")
            prompt = self._build_prompt(requirements)
            if prompt is not None:
                return Action.send(prompt)

        self.logger.debug("Nothing to do")
        return self._goto(TermsAndConditionsOutcome.CONTINUE, context)

    def _goto(self, outcome: TermsAndConditionsOutcome, context: TreeContext) -> Action:
        return Action.goto(
            outcome.value,
            shared_state=context.shared_state,
            transient_state=context.transient_state,
        )

    def _handle_confirmation(
        self,
        context: TreeContext,
        confirmation: ConfirmationCallback,
        username: Optional[str]
    ) -> Action:
        if confirmation.selected_index != ACCEPT_INDEX:
            self.logger.info(f"{username} canceled the terms")
            return self._goto(TermsAndConditionsOutcome.CANCELED, context)

        self.logger.info(f"{username} accepted the terms")
        if self._submit_acceptance(username):
            return self._goto(TermsAndConditionsOutcome.ACCEPTED, context)

        policy = self.config.submit_failure_policy
        if policy == SubmitFailurePolicy.CANCEL:
            self.logger.warning(f"Could not record acceptance for {username}, canceling")
            return self._goto(TermsAndConditionsOutcome.CANCELED, context)
        if policy == SubmitFailurePolicy.ERROR:
            raise NodeProcessError(f"Could not record terms acceptance for {username} in IDM")

        self.logger.warning(f"Could not record acceptance for {username}, continuing as accepted")
        return self._goto(TermsAndConditionsOutcome.ACCEPTED, context)

    def _fetch_requirements(self, username: Optional[str]) -> Optional[RequirementsDocument]:
        if not username:
            self.logger.warning("No username in shared state, skipping terms check")
            return None
        return self.idm_client.fetch_requirements(username)

    def _submit_acceptance(self, username: Optional[str]) -> bool:
        if not username:
            self.logger.warning("No username in shared state, cannot record acceptance")
            return False
        return self.idm_client.submit_acceptance(username)

    def _build_prompt(self, requirements: RequirementsDocument) -> Optional[List]:
        """Callbacks showing the terms, or None if the UI config is incomplete"""
        ui_config = requirements.ui_config
        try:
            if ui_config is None:
                raise ValueError("uiConfig is missing")
            missing = [
                name for name, value in (
                    ("displayName", ui_config.display_name),
                    ("purpose", ui_config.purpose),
                    ("buttonText", ui_config.button_text),
                )
                if value is None
            ]
            if missing:
                raise ValueError(f"uiConfig is missing {', '.join(missing)}")

            script = create_client_side_script_executor_function(
                render_terms_display_script(),
                requirements.terms,
                OUTPUT_PARAMETER_ID,
            )
            return [
                ScriptTextOutputCallback(script=script),
                TextOutputCallback(message=ui_config.display_name, message_type=MessageType.INFORMATION),
                TextOutputCallback(message=ui_config.purpose, message_type=MessageType.INFORMATION),
                TextOutputCallback(message=requirements.terms, message_type=MessageType.INFORMATION),
                ConfirmationCallback(
                    options=[ui_config.button_text, CANCEL_OPTION],
                    default_option=ACCEPT_INDEX,
                    message_type=MessageType.INFORMATION,
                ),
            ]
        except ValueError as e:
            self.logger.error(f"Cannot present terms: {e}")
            return None
