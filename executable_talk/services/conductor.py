"""
Conductor - the session orchestrator.

Owns the active deck and the current slide, and drives every session
operation through the same loop: capture a Snapshot of the session-owned
editing context, push it onto the StateStack, then navigate or run an
Action through the ExecutionPipeline. All collaborators are constructed
elsewhere and injected (see ``app.dependencies``).

Action failures come back as data (ActionOutcome + Notice). Misuse of the
session itself (no deck, unknown scene, out-of-range slide, nothing to
undo) raises the exceptions in ``services.exceptions``.
"""

import logging
from pathlib import Path
from typing import List, Optional

from ..config import settings
from ..domain.models import ActionDefinition, Deck, NavigationMethod, Slide
from ..execution.context import CancellationToken, ExecutionContext
from ..execution.pipeline import ExecutionPipeline
from ..host.interface import HostEnvironment
from ..reporting.summaries import failure_status, sequence_breakdown
from ..repositories.scenes import SceneStore
from ..schemas.results import ExecutionResult, RestoreResult
from ..schemas.session import ActionOutcome, Notice, SlideState
from ..state.history import NavigationHistory
from ..state.models import Action, SceneEntry
from ..state.stack import StateStack
from .exceptions import (
    ActionNotFoundError,
    NoActiveDeckError,
    NoHistoryError,
    SceneNotFoundError,
    SlideOutOfRangeError,
)
from .snapshots import SnapshotFactory

logger = logging.getLogger(__name__)


class Conductor:
    def __init__(
        self,
        host: HostEnvironment,
        pipeline: ExecutionPipeline,
        snapshots: SnapshotFactory,
        stack: StateStack,
        scenes: SceneStore,
        history: NavigationHistory,
        workspace_root: Path,
        recent_history_count: int = settings.RECENT_HISTORY_COUNT,
    ):
        self.host = host
        self.pipeline = pipeline
        self.snapshots = snapshots
        self.stack = stack
        self.scenes = scenes
        self.history = history
        self.workspace_root = Path(workspace_root)
        self.recent_history_count = recent_history_count

        self.deck: Optional[Deck] = None
        self.current_slide_index = 0
        self._cancellation = CancellationToken()
        self._executed_action_ids: List[str] = []

    # =========================================================================
    # DECK LIFECYCLE
    # =========================================================================

    @property
    def is_active(self) -> bool:
        return self.deck is not None and self.deck.state == "active"

    @property
    def executed_action_ids(self) -> List[str]:
        """Ids of the actions that succeeded since the deck was opened, undo aware."""
        return list(self._executed_action_ids)

    async def open_deck(self, deck: Deck) -> SlideState:
        """
        Makes ``deck`` the active deck and enters its first slide.
        Undo history and resource ownership start fresh; saved scenes survive
        so a reloaded deck keeps the presenter's checkpoints.
        """
        self.stack.clear()
        self.snapshots.clear_tracking()
        self._executed_action_ids = []
        self._cancellation = CancellationToken()

        deck.state = "loading"
        self.deck = deck
        self.current_slide_index = 0
        self.scenes.load_authored(deck.scenes)

        if not deck.slides:
            deck.state = "error"
            raise SlideOutOfRangeError(0, 0)

        deck.state = "active"
        logger.info(f"Opened deck {deck.file_path} ({len(deck.slides)} slides)")
        return await self._enter_slide(0)

    async def close(self) -> None:
        self.cancel()
        self.stack.clear()
        await self.snapshots.dispose_decorations()
        self.snapshots.clear_tracking()
        if self.deck is not None:
            self.deck.state = "closed"
            logger.info(f"Closed deck {self.deck.file_path}")

    async def reset(self) -> SlideState:
        """Clears undo, history, saved scenes and ownership, then returns to the first slide."""
        deck = self._require_deck()
        self.stack.clear()
        await self.snapshots.dispose_decorations()
        self.snapshots.clear_tracking()
        self.history.clear()
        self.scenes.clear()
        self.scenes.load_authored(deck.scenes)
        self._executed_action_ids = []
        return await self._enter_slide(0)

    def cancel(self) -> None:
        """Requests cancellation of whatever is running; later actions get a fresh token."""
        self._cancellation.cancel()
        self._cancellation = CancellationToken()

    # =========================================================================
    # NAVIGATION
    # =========================================================================

    async def go_to_slide(self, index: int) -> SlideState:
        """Captures the current context onto the undo stack and enters ``index`` (clamped)."""
        deck = self._require_deck()
        target = max(0, min(index, len(deck.slides) - 1))

        snapshot = self.snapshots.capture(
            self.current_slide_index,
            label=f"Before slide {target + 1}",
            target_slide_index=target,
            executed_action_ids=self._executed_action_ids,
        )
        self.stack.push(snapshot)
        return await self._enter_slide(target)

    async def next_slide(self) -> SlideState:
        deck = self._require_deck()
        if self.current_slide_index >= len(deck.slides) - 1:
            return self.state()
        self._record_departure("sequential")
        return await self.go_to_slide(self.current_slide_index + 1)

    async def previous_slide(self) -> SlideState:
        self._require_deck()
        if self.current_slide_index <= 0:
            return self.state()
        self._record_departure("sequential")
        return await self.go_to_slide(self.current_slide_index - 1)

    async def first_slide(self) -> SlideState:
        self._require_deck()
        self._record_departure("sequential")
        return await self.go_to_slide(0)

    async def last_slide(self) -> SlideState:
        deck = self._require_deck()
        self._record_departure("sequential")
        return await self.go_to_slide(len(deck.slides) - 1)

    async def jump_to(self, index: int, method: NavigationMethod = "jump") -> SlideState:
        deck = self._require_deck()
        if not 0 <= index < len(deck.slides):
            raise SlideOutOfRangeError(index, len(deck.slides))
        self._record_departure(method)
        return await self.go_to_slide(index)

    async def go_back(self) -> SlideState:
        self._require_deck()
        previous = self.history.go_back()
        if previous is None:
            raise NoHistoryError("No navigation history to go back to")
        return await self.go_to_slide(previous)

    # =========================================================================
    # UNDO / REDO
    # =========================================================================

    async def undo(self) -> SlideState:
        self._require_deck()
        snapshot = self.stack.undo()
        if snapshot is None:
            raise NoHistoryError("Nothing to undo")

        restored = await self.snapshots.restore(snapshot)
        self.current_slide_index = snapshot.slide_index
        self._executed_action_ids = list(snapshot.executed_action_ids)
        return self.state(notices=self._restore_notices(restored))

    async def redo(self) -> SlideState:
        """
        Replays the transition the undone snapshot recorded: the action it
        preceded, or else the slide navigation. No new snapshot is pushed, so
        the rest of the redo stack stays available.
        """
        self._require_deck()
        snapshot = self.stack.redo()
        if snapshot is None:
            raise NoHistoryError("Nothing to redo")

        if snapshot.action_id is not None:
            self.current_slide_index = snapshot.slide_index
            definition = self._current_slide().find_action(snapshot.action_id)
            if definition is None:
                raise ActionNotFoundError(snapshot.action_id)
            outcome = await self._run(definition)
            notices = [outcome.notice] if outcome.notice is not None else []
            return self.state(actions=[outcome], notices=notices)

        target = snapshot.target_slide_index
        return await self._enter_slide(snapshot.slide_index if target is None else target)

    # =========================================================================
    # ACTIONS
    # =========================================================================

    async def execute_action(self, action_id: str) -> ActionOutcome:
        """Runs an action of the current slide, by id, as one undoable step."""
        slide = self._current_slide()
        definition = slide.find_action(action_id)
        if definition is None:
            raise ActionNotFoundError(action_id)

        snapshot = self.snapshots.capture(
            self.current_slide_index,
            label=f"Before action {action_id}",
            executed_action_ids=self._executed_action_ids,
            action_id=action_id,
        )
        self.stack.push(snapshot)
        return await self._run(definition)

    async def _run(self, definition: ActionDefinition) -> ActionOutcome:
        action = Action.from_definition(definition, self.current_slide_index)
        result = await self.pipeline.execute(action, self._context())

        if result.success:
            self._executed_action_ids.append(definition.id)
            logger.info(f"Action {definition.id} ({definition.type}) succeeded")
        else:
            logger.warning(f"Action {definition.id} ({definition.type}) failed: {result.error}")

        return ActionOutcome(
            action_id=definition.id,
            status=action.status,
            result=result,
            notice=self._failure_notice(result),
        )

    def _context(self) -> ExecutionContext:
        return ExecutionContext(
            host=self.host,
            workspace_root=self.workspace_root,
            is_trusted=self.host.is_trusted(),
            current_slide_index=self.current_slide_index,
            deck_file_path=self.deck.file_path if self.deck else None,
            cancellation=self._cancellation,
            resources=self.snapshots,
        )

    # =========================================================================
    # SCENES
    # =========================================================================

    def save_scene(self, name: str) -> SceneEntry:
        self._require_deck()
        snapshot = self.snapshots.capture(
            self.current_slide_index,
            label=f"Scene: {name}",
            executed_action_ids=self._executed_action_ids,
        )
        return self.scenes.save(name, snapshot, self.current_slide_index)

    async def restore_scene(self, name: str) -> SlideState:
        """
        Restores a scene as one undoable step: the pre-restore context is
        pushed first, then the scene's snapshot (if any) is re-applied and
        its anchor slide entered.
        """
        self._require_deck()
        entry = self.scenes.restore(name)
        if entry is None:
            raise SceneNotFoundError(name)

        self.stack.push(self.snapshots.capture(
            self.current_slide_index,
            label=f"Before restore: {name}",
            target_slide_index=entry.slide_index,
            executed_action_ids=self._executed_action_ids,
        ))

        notices: List[Notice] = []
        if entry.snapshot is not None:
            notices = self._restore_notices(await self.snapshots.restore(entry.snapshot))
            self._executed_action_ids = list(entry.snapshot.executed_action_ids)

        self._record_departure("scene-restore")
        state = await self._enter_slide(entry.slide_index)
        state.notices = notices + state.notices
        logger.info(f'Scene "{name}" restored to slide {entry.slide_index + 1}')
        return state

    def delete_scene(self, name: str) -> None:
        if not self.scenes.delete(name):
            raise SceneNotFoundError(name)

    def list_scenes(self) -> List[SceneEntry]:
        return self.scenes.list()

    # =========================================================================
    # VIEWS
    # =========================================================================

    def state(
        self,
        actions: Optional[List[ActionOutcome]] = None,
        notices: Optional[List[Notice]] = None,
    ) -> SlideState:
        deck = self._require_deck()
        slide = deck.slides[self.current_slide_index]
        return SlideState(
            slide_index=self.current_slide_index,
            total_slides=len(deck.slides),
            title=slide.title,
            deck_state=deck.state,
            can_undo=self.stack.can_undo(),
            can_redo=self.stack.can_redo(),
            can_go_back=self.history.can_go_back(),
            navigation_history=self.history.get_recent(self.recent_history_count),
            total_history_entries=len(self.history),
            actions=actions or [],
            notices=notices or [],
        )

    # =========================================================================
    # INTERNALS
    # =========================================================================

    async def _enter_slide(self, index: int) -> SlideState:
        """Makes ``index`` current and runs its on-enter actions in order."""
        self.current_slide_index = index
        slide = self._current_slide()
        outcomes = [await self._run(definition) for definition in slide.on_enter_actions]
        notices = [outcome.notice for outcome in outcomes if outcome.notice is not None]
        return self.state(actions=outcomes, notices=notices)

    def _record_departure(self, method: NavigationMethod) -> None:
        """Records the slide being left, so go-back returns to it."""
        slide = self._current_slide()
        self.history.push(self.current_slide_index, method, slide.title)

    def _require_deck(self) -> Deck:
        if self.deck is None or self.deck.state != "active":
            raise NoActiveDeckError("No active deck")
        return self.deck

    def _current_slide(self) -> Slide:
        return self._require_deck().slides[self.current_slide_index]

    @staticmethod
    def _failure_notice(result: ExecutionResult) -> Optional[Notice]:
        if result.success:
            return None
        if result.timed_out:
            code = "ACTION_TIMEOUT"
        elif result.sequence_detail is not None:
            code = "SEQUENCE_FAILED"
        else:
            code = "ACTION_FAILED"
        return Notice(
            level="error",
            code=code,
            message=failure_status(result),
            detail=sequence_breakdown(result.sequence_detail) if result.sequence_detail else None,
            # Timeouts and sequence failures stay until dismissed
            persistent=code != "ACTION_FAILED",
        )

    @staticmethod
    def _restore_notices(restored: RestoreResult) -> List[Notice]:
        if restored.success:
            return []
        return [Notice(
            level="warning",
            code="PARTIAL_RESTORE",
            message=f"{len(restored.skipped)} resource(s) could not be restored",
            detail="\n".join(f"{s.type} {s.name}: {s.reason}" for s in restored.skipped),
        )]
