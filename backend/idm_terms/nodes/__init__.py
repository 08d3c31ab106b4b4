"""
Authentication tree nodes
"""
from idm_terms.nodes.terms_and_conditions import (
    TermsAndConditionsNode,
    TermsAndConditionsOutcome,
    TermsAndConditionsOutcomeProvider,
)

__all__ = ["TermsAndConditionsNode", "TermsAndConditionsOutcome", "TermsAndConditionsOutcomeProvider"]
