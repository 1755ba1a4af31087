"""
Snapshot Factory - captures and restores the session-owned editing context.

Only resources the session itself opened (editors from file.open, terminals
from terminal.run, highlights from editor.highlight) are ever closed,
reopened or re-applied. Anything else the user has open is recorded in a
snapshot but never touched on restore.
"""

import logging
from pathlib import Path
from typing import Dict, List, Optional, Set

from ..host.interface import HostEnvironment
from ..schemas.results import RestoreResult, SkippedResource
from ..state.models import (
    DecorationState,
    EditorState,
    Snapshot,
    TerminalState,
    VisibleRange,
)

logger = logging.getLogger(__name__)


class SnapshotFactory:
    def __init__(self, host: HostEnvironment, workspace_root: Path):
        self.host = host
        self.workspace_root = Path(workspace_root)
        self._opened_editors: Set[str] = set()
        self._created_terminals: Set[str] = set()
        self._decorations: Dict[str, DecorationState] = {}

    # ------------------------------------------------------------------
    # Resource tracking
    # ------------------------------------------------------------------

    def track_opened_editor(self, path: str) -> None:
        self._opened_editors.add(path)

    def track_created_terminal(self, name: str) -> None:
        self._created_terminals.add(name)

    def track_decoration(self, decoration: DecorationState) -> None:
        self._decorations[decoration.decoration_id] = decoration

    def forget_decoration(self, decoration_id: str) -> None:
        self._decorations.pop(decoration_id, None)

    def forget_terminal(self, name: str) -> None:
        self._created_terminals.discard(name)

    def clear_tracking(self) -> None:
        """Forgets ownership of everything. Nothing is closed."""
        self._opened_editors = set()
        self._created_terminals = set()
        self._decorations = {}

    @property
    def owned_editors(self) -> Set[str]:
        return set(self._opened_editors)

    @property
    def owned_terminals(self) -> Set[str]:
        return set(self._created_terminals)

    @property
    def tracked_decorations(self) -> List[DecorationState]:
        return list(self._decorations.values())

    async def dispose_decorations(self) -> None:
        """Removes every tracked highlight. Safe to call repeatedly."""
        decorations, self._decorations = self._decorations, {}
        for decoration_id in decorations:
            try:
                await self.host.dispose_decoration(decoration_id)
            except Exception as e:
                logger.warning(f"Could not dispose decoration {decoration_id}: {e}")

    # ------------------------------------------------------------------
    # Capture
    # ------------------------------------------------------------------

    def capture(
        self,
        slide_index: int,
        label: Optional[str] = None,
        target_slide_index: Optional[int] = None,
        executed_action_ids: Optional[List[str]] = None,
        action_id: Optional[str] = None,
    ) -> Snapshot:
        editors = []
        for document in self.host.list_open_documents():
            visible = None
            if document.visible_start is not None and document.visible_end is not None:
                visible = VisibleRange(start=document.visible_start, end=document.visible_end)
            editors.append(EditorState(
                path=document.path,
                view_column=document.view_column,
                visible_range=visible,
                opened_by_session=document.path in self._opened_editors,
            ))

        active = self.host.active_editor()
        terminals = [
            TerminalState(name=name, created_by_session=name in self._created_terminals)
            for name in self.host.list_terminals()
        ]

        return Snapshot(
            slide_index=slide_index,
            label=label,
            open_editors=editors,
            active_editor_path=active.path if active else None,
            active_line=active.line if active else None,
            terminals=terminals,
            decorations=list(self._decorations.values()),
            executed_action_ids=list(executed_action_ids or []),
            target_slide_index=target_slide_index,
            action_id=action_id,
        )

    # ------------------------------------------------------------------
    # Restore
    # ------------------------------------------------------------------

    async def restore(self, snapshot: Snapshot) -> RestoreResult:
        """
        Brings session-owned resources back to what the snapshot recorded.
        Every resource that cannot be restored is reported as skipped; the
        restore itself never raises for a single resource.
        """
        skipped: List[SkippedResource] = []
        await self._restore_editors(snapshot.open_editors, skipped)
        await self._restore_decorations(snapshot.decorations, skipped)
        await self._restore_terminals(snapshot.terminals, skipped)

        if skipped:
            logger.warning(f"Partial restore of {snapshot.id}: {len(skipped)} resource(s) skipped")
        return RestoreResult(success=not skipped, skipped=skipped)

    async def _restore_editors(self, editors: List[EditorState], skipped: List[SkippedResource]) -> None:
        wanted = {editor.path for editor in editors}

        # 1. Close session-owned editors the snapshot did not have
        for document in self.host.list_open_documents():
            if document.path not in wanted and document.path in self._opened_editors:
                try:
                    await self.host.close_document(document.path)
                except Exception as e:
                    skipped.append(SkippedResource(type="editor", name=document.path, reason=str(e)))

        # 2. Reopen session-owned editors that went away, re-reveal the rest
        open_paths = {document.path for document in self.host.list_open_documents()}
        for editor in editors:
            try:
                if editor.path not in open_paths:
                    if not editor.opened_by_session:
                        continue
                    selection = None
                    if editor.visible_range is not None:
                        selection = (editor.visible_range.start, editor.visible_range.end, 1)
                    await self.host.open_document(
                        Path(editor.path), view_column=editor.view_column, selection=selection
                    )
                    self._opened_editors.add(editor.path)
                elif editor.visible_range is not None:
                    await self.host.reveal_range(
                        editor.path, editor.visible_range.start, editor.visible_range.end
                    )
            except Exception as e:
                skipped.append(SkippedResource(type="editor", name=editor.path, reason=str(e)))

    async def _restore_decorations(
        self, decorations: List[DecorationState], skipped: List[SkippedResource]
    ) -> None:
        wanted = {decoration.decoration_id for decoration in decorations}

        for decoration_id in [d for d in self._decorations if d not in wanted]:
            try:
                await self.host.dispose_decoration(decoration_id)
            except Exception as e:
                logger.warning(f"Could not dispose decoration {decoration_id}: {e}")
            self._decorations.pop(decoration_id, None)

        for decoration in decorations:
            if decoration.decoration_id in self._decorations:
                continue
            name = f"{decoration.path}:{decoration.start_line}-{decoration.end_line}"
            try:
                if not await self.host.path_exists(Path(decoration.path)):
                    skipped.append(SkippedResource(type="decoration", name=name, reason="File not found"))
                    continue
                new_id = await self.host.create_decoration(
                    decoration.path,
                    decoration.start_line,
                    decoration.end_line,
                    style=decoration.style,
                    color=decoration.color,
                )
            except Exception as e:
                skipped.append(SkippedResource(type="decoration", name=name, reason=str(e)))
                continue
            self.track_decoration(decoration.model_copy(update={"decoration_id": new_id}))

    async def _restore_terminals(self, terminals: List[TerminalState], skipped: List[SkippedResource]) -> None:
        wanted = {terminal.name for terminal in terminals}

        for name in self.host.list_terminals():
            if name not in wanted and name in self._created_terminals:
                try:
                    await self.host.dispose_terminal(name)
                except Exception as e:
                    skipped.append(SkippedResource(type="terminal", name=name, reason=str(e)))
                    continue
                self._created_terminals.discard(name)

        for terminal in terminals:
            if not terminal.created_by_session or self.host.terminal_alive(terminal.name):
                continue
            try:
                await self.host.create_terminal(terminal.name, self.workspace_root)
            except Exception as e:
                skipped.append(SkippedResource(type="terminal", name=terminal.name, reason=str(e)))
                continue
            self._created_terminals.add(terminal.name)
