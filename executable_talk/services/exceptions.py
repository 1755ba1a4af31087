"""
Service Layer Exceptions

Custom exceptions for the SceneStore and the Conductor. Unlike action
failures, these are raised to the caller; the API layer maps them to HTTP
status codes.
"""


class SceneError(Exception):
    """Base class for scene checkpoint errors."""
    pass


class AuthoredSceneError(SceneError):
    """Raised when saving over or deleting a scene authored in the deck."""

    def __init__(self, name: str, operation: str = "save over"):
        super().__init__(f'Cannot {operation} authored scene "{name}". Authored scenes are read-only.')
        self.name = name


class SceneLimitError(SceneError):
    """Raised when saving a new scene while the saved-scene cap is reached."""

    def __init__(self, limit: int):
        super().__init__(f"Scene limit reached ({limit}). Delete an existing scene to save a new one.")
        self.limit = limit


class SceneNotFoundError(SceneError):
    def __init__(self, name: str):
        super().__init__(f'Scene "{name}" not found')
        self.name = name


class NoActiveDeckError(Exception):
    """Raised when a deck-dependent operation runs before a deck is opened."""
    pass


class SlideOutOfRangeError(Exception):
    def __init__(self, index: int, slide_count: int):
        super().__init__(f"Slide index {index} is out of range (deck has {slide_count} slides)")
        self.index = index
        self.slide_count = slide_count


class NoHistoryError(Exception):
    """Raised when go-back, undo or redo has nothing to consume."""
    pass


class ActionNotFoundError(Exception):
    def __init__(self, action_id: str):
        super().__init__(f'Action "{action_id}" not found')
        self.action_id = action_id
