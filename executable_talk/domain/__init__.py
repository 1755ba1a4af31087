"""
Domain Layer - Deck Value Objects

Defines the read-only presentation structure supplied by the parsing layer:
Decks, Slides, ActionDefinitions and authored SceneDefinitions.
"""

from executable_talk.domain.models import (
    ACTION_TYPES,
    ActionDefinition,
    ActionType,
    Deck,
    InteractiveElement,
    NavigationMethod,
    SceneDefinition,
    Slide,
)

__all__ = [
    "ACTION_TYPES",
    "ActionDefinition",
    "ActionType",
    "Deck",
    "InteractiveElement",
    "NavigationMethod",
    "SceneDefinition",
    "Slide",
]
