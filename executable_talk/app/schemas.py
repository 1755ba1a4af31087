"""
API Layer - Request/Response Schemas

Pydantic models for API request and response validation.
"""

from datetime import datetime
from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, Field

from ..domain.models import ActionDefinition, Deck, InteractiveElement, SceneDefinition, Slide
from ..state.models import SceneEntry


class ActionPayload(BaseModel):
    id: str
    type: str
    params: Dict[str, Any] = Field(default_factory=dict)

    def to_domain(self) -> ActionDefinition:
        return ActionDefinition(id=self.id, type=self.type, params=dict(self.params))


class InteractiveElementPayload(BaseModel):
    id: str
    label: str
    action: ActionPayload


class SlidePayload(BaseModel):
    title: Optional[str] = None
    speaker_notes: Optional[str] = None
    on_enter_actions: List[ActionPayload] = Field(default_factory=list)
    interactive_elements: List[InteractiveElementPayload] = Field(default_factory=list)


class SceneDefinitionPayload(BaseModel):
    name: str
    slide: int = Field(..., ge=0, description="Zero-based slide index.")


class DeckPayload(BaseModel):
    """An already-parsed deck. Markdown parsing happens upstream."""
    file_path: str
    title: Optional[str] = None
    author: Optional[str] = None
    slides: List[SlidePayload] = Field(..., min_length=1)
    scenes: List[SceneDefinitionPayload] = Field(default_factory=list)

    def to_domain(self) -> Deck:
        slides = [
            Slide(
                index=index,
                title=slide.title,
                speaker_notes=slide.speaker_notes,
                on_enter_actions=[action.to_domain() for action in slide.on_enter_actions],
                interactive_elements=[
                    InteractiveElement(id=element.id, label=element.label, action=element.action.to_domain())
                    for element in slide.interactive_elements
                ],
            )
            for index, slide in enumerate(self.slides)
        ]
        return Deck(
            file_path=self.file_path,
            slides=slides,
            title=self.title,
            author=self.author,
            scenes=[SceneDefinition(name=scene.name, slide=scene.slide) for scene in self.scenes],
        )


class NavigateRequest(BaseModel):
    direction: Literal["next", "previous", "first", "last", "goto"]
    slide_index: Optional[int] = None
    method: Literal["jump", "history-click"] = "jump"


class SaveSceneRequest(BaseModel):
    name: str = Field(..., min_length=1)


class SceneSummary(BaseModel):
    name: str
    origin: str
    slide_index: int
    timestamp: Optional[datetime] = None
    has_snapshot: bool

    @classmethod
    def from_entry(cls, entry: SceneEntry) -> "SceneSummary":
        return cls(
            name=entry.name,
            origin=entry.origin,
            slide_index=entry.slide_index,
            timestamp=entry.timestamp,
            has_snapshot=entry.snapshot is not None,
        )
