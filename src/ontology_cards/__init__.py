"""Ontology flash cards: filtering, navigation and history over ontology classes."""

from ontology_cards.api import ApiError, OntologyApi
from ontology_cards.core.session.state import ViewerState
from ontology_cards.core.session.viewer import ViewerSession
from ontology_cards.protocols import OntologyApiProtocol

__all__ = ["ApiError", "OntologyApi", "OntologyApiProtocol", "ViewerSession", "ViewerState"]
