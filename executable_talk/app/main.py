import logging
from typing import List

from fastapi import Depends, FastAPI, Request, status
from fastapi.responses import JSONResponse, Response

from ..config import settings
from ..schemas.session import ActionOutcome, SlideState
from ..services.conductor import Conductor
from ..services.exceptions import (
    ActionNotFoundError,
    AuthoredSceneError,
    NoActiveDeckError,
    NoHistoryError,
    SceneLimitError,
    SceneNotFoundError,
    SlideOutOfRangeError,
)
from .dependencies import get_conductor
from .schemas import DeckPayload, NavigateRequest, SaveSceneRequest, SceneSummary

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

app = FastAPI(title="Executable Talk Control API")

# --- Error mapping ---

ERROR_STATUS = {
    SceneNotFoundError: status.HTTP_404_NOT_FOUND,
    ActionNotFoundError: status.HTTP_404_NOT_FOUND,
    AuthoredSceneError: status.HTTP_409_CONFLICT,
    SceneLimitError: status.HTTP_409_CONFLICT,
    SlideOutOfRangeError: 422,
    NoActiveDeckError: status.HTTP_400_BAD_REQUEST,
    NoHistoryError: status.HTTP_400_BAD_REQUEST,
}


def _error_response(request: Request, exc: Exception) -> JSONResponse:
    return JSONResponse(status_code=ERROR_STATUS[type(exc)], content={"detail": str(exc)})


for _exc_class in ERROR_STATUS:
    app.add_exception_handler(_exc_class, _error_response)


# --- Deck ---

@app.post("/deck", response_model=SlideState, status_code=status.HTTP_201_CREATED)
async def open_deck(payload: DeckPayload, conductor: Conductor = Depends(get_conductor)):
    """Opens an already-parsed deck and enters its first slide."""
    return await conductor.open_deck(payload.to_domain())


@app.get("/state", response_model=SlideState)
def get_state(conductor: Conductor = Depends(get_conductor)):
    return conductor.state()


@app.post("/close", status_code=status.HTTP_204_NO_CONTENT)
async def close_deck(conductor: Conductor = Depends(get_conductor)):
    await conductor.close()
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@app.post("/reset", response_model=SlideState)
async def reset_session(conductor: Conductor = Depends(get_conductor)):
    return await conductor.reset()


# --- Navigation ---

@app.post("/navigate", response_model=SlideState)
async def navigate(request: NavigateRequest, conductor: Conductor = Depends(get_conductor)):
    if request.direction == "next":
        return await conductor.next_slide()
    if request.direction == "previous":
        return await conductor.previous_slide()
    if request.direction == "first":
        return await conductor.first_slide()
    if request.direction == "last":
        return await conductor.last_slide()

    if request.slide_index is None:
        return JSONResponse(
            status_code=422,
            content={"detail": "slide_index is required for goto"},
        )
    return await conductor.jump_to(request.slide_index, method=request.method)


@app.post("/back", response_model=SlideState)
async def go_back(conductor: Conductor = Depends(get_conductor)):
    return await conductor.go_back()


@app.post("/undo", response_model=SlideState)
async def undo(conductor: Conductor = Depends(get_conductor)):
    return await conductor.undo()


@app.post("/redo", response_model=SlideState)
async def redo(conductor: Conductor = Depends(get_conductor)):
    return await conductor.redo()


# --- Actions ---

@app.post("/actions/{action_id}", response_model=ActionOutcome)
async def execute_action(action_id: str, conductor: Conductor = Depends(get_conductor)):
    """
    Runs an action of the current slide. Action failures are part of the
    response body (status 200); only an unknown action id is an HTTP error.
    """
    return await conductor.execute_action(action_id)


@app.post("/cancel", status_code=status.HTTP_204_NO_CONTENT)
async def cancel(conductor: Conductor = Depends(get_conductor)):
    conductor.cancel()
    return Response(status_code=status.HTTP_204_NO_CONTENT)


# --- Scenes ---

@app.get("/scenes", response_model=List[SceneSummary])
def list_scenes(conductor: Conductor = Depends(get_conductor)):
    # Snapshots stay server-side; the list only says whether one exists
    return [SceneSummary.from_entry(entry) for entry in conductor.list_scenes()]


@app.post("/scenes", response_model=SceneSummary, status_code=status.HTTP_201_CREATED)
def save_scene(request: SaveSceneRequest, conductor: Conductor = Depends(get_conductor)):
    return SceneSummary.from_entry(conductor.save_scene(request.name))


@app.post("/scenes/{name}/restore", response_model=SlideState)
async def restore_scene(name: str, conductor: Conductor = Depends(get_conductor)):
    return await conductor.restore_scene(name)


@app.delete("/scenes/{name}", status_code=status.HTTP_204_NO_CONTENT)
def delete_scene(name: str, conductor: Conductor = Depends(get_conductor)):
    conductor.delete_scene(name)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
