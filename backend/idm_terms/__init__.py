"""
Terms and conditions authentication node backed by IDM self-service
"""
from idm_terms.nodes.terms_and_conditions import (
    TermsAndConditionsNode,
    TermsAndConditionsOutcome,
    TermsAndConditionsOutcomeProvider,
)

__version__ = "1.0.0"

__all__ = ["TermsAndConditionsNode", "TermsAndConditionsOutcome", "TermsAndConditionsOutcomeProvider"]
