"""
Domain Layer - Deck Value Objects

This module defines the read-only structure of a presentation as handed over
by the parsing layer: Decks, Slides, the actions embedded in them, and the
authored scene anchors. The engine consumes these objects but never mutates
their structure.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Literal, Optional, get_args

"""
ActionType names the closed set of executable operations:
- file.open: Open a document in the editor
- editor.highlight: Decorate a line range
- terminal.run: Send a command to a session terminal
- debug.start: Launch a named debug configuration
- vscode.command: Invoke a host command by id
- sequence: Run an ordered list of other actions
- validate.command / validate.fileExists / validate.port: Environment checks
"""
ActionType = Literal[
    "file.open",
    "editor.highlight",
    "terminal.run",
    "debug.start",
    "vscode.command",
    "sequence",
    "validate.command",
    "validate.fileExists",
    "validate.port",
]

ACTION_TYPES = get_args(ActionType)

"""
NavigationMethod records how the presenter arrived at a slide.
"""
NavigationMethod = Literal[
    "sequential",
    "jump",
    "scene-restore",
    "history-click",
    "go-back",
]

DeckState = Literal["idle", "loading", "active", "error", "closed"]


@dataclass
class ActionDefinition:
    """
    An action as authored in the deck.

    Attributes:
        id: Identifier assigned by the parser (unique within the deck).
        type: Action type tag. Kept as a plain string so decks that name an
            unregistered type still load; the pipeline reports it.
        params: Type-specific parameter map, exactly as authored.
    """
    id: str
    type: str
    params: Dict[str, Any] = field(default_factory=dict)


@dataclass
class InteractiveElement:
    """
    A clickable action link rendered inside slide content.

    Attributes:
        id: Element identifier used by the UI layer.
        label: Link text.
        action: The action the link triggers.
    """
    id: str
    label: str
    action: ActionDefinition


@dataclass
class Slide:
    """
    One slide of the deck.

    Attributes:
        index: Zero-based position in the deck.
        title: Optional title from slide frontmatter.
        speaker_notes: Optional presenter notes.
        on_enter_actions: Actions executed automatically when the slide is entered.
        interactive_elements: Actions the presenter triggers by clicking.
    """
    index: int
    title: Optional[str] = None
    speaker_notes: Optional[str] = None
    on_enter_actions: List[ActionDefinition] = field(default_factory=list)
    interactive_elements: List[InteractiveElement] = field(default_factory=list)

    def find_action(self, action_id: str) -> Optional[ActionDefinition]:
        for action in self.on_enter_actions:
            if action.id == action_id:
                return action
        for element in self.interactive_elements:
            if element.action.id == action_id or element.id == action_id:
                return element.action
        return None


@dataclass
class SceneDefinition:
    """
    Scene anchor declared in deck frontmatter.

    Attributes:
        name: Unique scene name.
        slide: Zero-based slide index (the parser converts from 1-based).
    """
    name: str
    slide: int


@dataclass
class Deck:
    """
    A complete presentation.

    Attributes:
        file_path: Path of the deck file.
        slides: Ordered slides.
        title: Presentation title.
        author: Author name.
        scenes: Authored scene anchors.
        state: Lifecycle state, maintained by the Conductor.
    """
    file_path: str
    slides: List[Slide] = field(default_factory=list)
    title: Optional[str] = None
    author: Optional[str] = None
    scenes: List[SceneDefinition] = field(default_factory=list)
    state: DeckState = "idle"

    @property
    def has_executable_actions(self) -> bool:
        return any(s.on_enter_actions or s.interactive_elements for s in self.slides)
