"""
Dependency Injection Wiring (Composition Root).

This module acts as the central "container" for the session's services.
It is responsible for:
1. Instantiating the session singletons (host binding, registry, stores).
2. Wiring them together (e.g., injecting the pipeline and stores into the Conductor).
3. Managing their lifecycle with @lru_cache so each is created once per process.

Tests override these with ``app.dependency_overrides``.
"""

from functools import lru_cache

from fastapi import Depends

from ..config import settings
from ..execution.pipeline import ExecutionPipeline
from ..execution.registry import ActionRegistry, create_default_registry
from ..host.adapters.headless import HeadlessHost
from ..host.interface import HostEnvironment
from ..repositories.scenes import SceneStore
from ..services.conductor import Conductor
from ..services.snapshots import SnapshotFactory
from ..state.history import NavigationHistory
from ..state.stack import StateStack


# Host binding (Singleton)
@lru_cache()
def get_host() -> HostEnvironment:
    return HeadlessHost(workspace_root=settings.WORKSPACE_ROOT, trusted=settings.WORKSPACE_TRUSTED)


# Action Registry (Singleton)
@lru_cache()
def get_registry() -> ActionRegistry:
    return create_default_registry()


@lru_cache()
def get_pipeline(registry: ActionRegistry = Depends(get_registry)) -> ExecutionPipeline:
    return ExecutionPipeline(registry=registry)


@lru_cache()
def get_snapshot_factory(host: HostEnvironment = Depends(get_host)) -> SnapshotFactory:
    return SnapshotFactory(host=host, workspace_root=settings.WORKSPACE_ROOT)


# Session stores (Singletons)
# Note: in-memory state must be a singleton so it persists across requests!
@lru_cache()
def get_state_stack() -> StateStack:
    return StateStack()


@lru_cache()
def get_scene_store() -> SceneStore:
    return SceneStore()


@lru_cache()
def get_navigation_history() -> NavigationHistory:
    return NavigationHistory()


# The Conductor (Singleton Service)
@lru_cache()
def get_conductor(
    host: HostEnvironment = Depends(get_host),
    pipeline: ExecutionPipeline = Depends(get_pipeline),
    snapshots: SnapshotFactory = Depends(get_snapshot_factory),
    stack: StateStack = Depends(get_state_stack),
    scenes: SceneStore = Depends(get_scene_store),
    history: NavigationHistory = Depends(get_navigation_history),
) -> Conductor:
    """
    Injects all session components into the Conductor.
    """
    return Conductor(
        host=host,
        pipeline=pipeline,
        snapshots=snapshots,
        stack=stack,
        scenes=scenes,
        history=history,
        workspace_root=settings.WORKSPACE_ROOT,
    )
