import logging
from abc import ABC, abstractmethod
from itertools import count
from typing import Dict, Iterable, List, Optional

from ..config import settings
from ..domain.models import SceneDefinition
from ..services.exceptions import AuthoredSceneError, SceneLimitError
from ..state.models import SceneEntry, Snapshot, utcnow

logger = logging.getLogger(__name__)


class SceneRepository(ABC):
    """
    Defines how the session accesses named scene checkpoints.
    Two origins share one namespace: ``authored`` scenes come from the deck
    and are read-only, ``saved`` scenes are created by the presenter.
    """

    @abstractmethod
    def save(self, name: str, snapshot: Snapshot, slide_index: int) -> SceneEntry:
        """Creates or overwrites a saved scene."""
        pass

    @abstractmethod
    def get(self, name: str) -> Optional[SceneEntry]:
        pass

    @abstractmethod
    def delete(self, name: str) -> bool:
        """Deletes a saved scene. Returns True if found and deleted."""
        pass

    @abstractmethod
    def list(self) -> List[SceneEntry]:
        pass

    @abstractmethod
    def load_authored(self, definitions: Iterable[SceneDefinition]) -> None:
        pass


class SceneStore(SceneRepository):
    """
    In-memory scene store. Session-only.

    At most ``max_saved`` saved-origin scenes exist at once; overwriting an
    existing saved name is always allowed, even at the cap.
    """

    def __init__(self, max_saved: int = settings.MAX_SAVED_SCENES):
        self.max_saved = max_saved
        self._scenes: Dict[str, SceneEntry] = {}
        # Tie-breaker for saves that land on the same timestamp
        self._save_order: Dict[str, int] = {}
        self._counter = count()

    def save(self, name: str, snapshot: Snapshot, slide_index: int) -> SceneEntry:
        existing = self._scenes.get(name)

        if existing is not None and existing.is_authored:
            raise AuthoredSceneError(name)
        if existing is None and self.saved_count >= self.max_saved:
            raise SceneLimitError(self.max_saved)

        entry = SceneEntry(
            name=name,
            origin="saved",
            slide_index=slide_index,
            timestamp=utcnow(),
            snapshot=snapshot,
        )
        self._scenes[name] = entry
        self._save_order[name] = next(self._counter)
        logger.info(f"Saved scene '{name}' at slide {slide_index}")
        return entry

    def get(self, name: str) -> Optional[SceneEntry]:
        return self._scenes.get(name)

    def restore(self, name: str) -> Optional[SceneEntry]:
        """
        Lookup for a restore. An authored entry with no snapshot means
        "navigate to its anchor slide" rather than "re-apply state".
        """
        return self._scenes.get(name)

    def delete(self, name: str) -> bool:
        entry = self._scenes.get(name)
        if entry is None:
            return False
        if entry.is_authored:
            raise AuthoredSceneError(name, operation="delete")
        del self._scenes[name]
        self._save_order.pop(name, None)
        return True

    def list(self) -> List[SceneEntry]:
        """Authored scenes alphabetically, then saved scenes oldest first."""
        authored = sorted(
            (entry for entry in self._scenes.values() if entry.is_authored),
            key=lambda entry: entry.name,
        )
        saved = sorted(
            (entry for entry in self._scenes.values() if not entry.is_authored),
            key=lambda entry: (entry.timestamp, self._save_order[entry.name]),
        )
        return authored + saved

    def load_authored(self, definitions: Iterable[SceneDefinition]) -> None:
        """Replaces every authored scene. Saved scenes are left untouched."""
        for name in [name for name, entry in self._scenes.items() if entry.is_authored]:
            del self._scenes[name]

        for definition in definitions:
            if definition.name in self._scenes:
                logger.warning(f"Authored scene '{definition.name}' replaces a saved scene of the same name")
                self._save_order.pop(definition.name, None)
            self._scenes[definition.name] = SceneEntry(
                name=definition.name,
                origin="authored",
                slide_index=definition.slide,
            )

    @property
    def saved_count(self) -> int:
        return sum(1 for entry in self._scenes.values() if not entry.is_authored)

    def __len__(self) -> int:
        return len(self._scenes)

    def clear(self) -> None:
        self._scenes.clear()
        self._save_order.clear()
