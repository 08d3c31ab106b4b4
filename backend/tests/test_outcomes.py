"""
Tests for outcome labels
"""
import pytest

from idm_terms.core.tree import Outcome
from idm_terms.nodes.terms_and_conditions import (
    TermsAndConditionsNode,
    TermsAndConditionsOutcome,
    TermsAndConditionsOutcomeProvider,
    get_bundle,
)


def test_outcome_ids():
    """Test the outcome identifiers the tree is wired with"""
    assert [outcome.value for outcome in TermsAndConditionsOutcome] == ["CONTINUE", "ACCEPTED", "CANCELED"]


def test_default_labels_are_english():
    """Test outcomes without preferred locales"""
    outcomes = TermsAndConditionsOutcomeProvider().get_outcomes()

    assert outcomes == [
        Outcome("CONTINUE", "Continue"),
        Outcome("ACCEPTED", "Accepted"),
        Outcome("CANCELED", "Canceled"),
    ]


@pytest.mark.parametrize("locales,expected", [
    (["fr"], "Continuer"),
    (["fr-CA"], "Continuer"),
    (["de_DE"], "Weiter"),
    (["ES"], "Continuar"),
    (["ja", "de"], "Weiter"),
    (["ja"], "Continue"),
    ([], "Continue"),
])
def test_preferred_locale(locales, expected):
    """Test the first supported locale wins, falling back to English"""
    outcomes = TermsAndConditionsOutcomeProvider().get_outcomes(locales)

    assert outcomes[0].display_name == expected
    assert [outcome.id for outcome in outcomes] == ["CONTINUE", "ACCEPTED", "CANCELED"]


def test_every_bundle_has_every_label():
    """Test no locale is missing a label"""
    for locale in ["en", "de", "fr", "es"]:
        bundle = get_bundle([locale])
        assert {"okOutcome", "acceptOutcome", "cancelOutcome"} <= set(bundle)


def test_node_exposes_provider():
    """Test the provider is reachable from the node class"""
    assert isinstance(TermsAndConditionsNode.outcome_provider, TermsAndConditionsOutcomeProvider)


def test_outcome_to_dict():
    assert Outcome("ACCEPTED", "Accepted").to_dict() == {"id": "ACCEPTED", "displayName": "Accepted"}
