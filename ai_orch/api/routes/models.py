import logging
from typing import Optional

from fastapi import APIRouter, HTTPException, Request

from ai_orch.common.models import ModelEntry, ModelList, SetModelRequest
from ai_orch.engine.router import Router

logger = logging.getLogger("ai_orch")

router = APIRouter()


def _model_list(model_router: Router) -> ModelList:
    current = model_router.get_current_model_index()
    return ModelList(
        current_index=current,
        data=[
            ModelEntry(index=i, current=(i == current), **model.model_dump())
            for i, model in enumerate(model_router.get_models())
        ],
    )


@router.get("/v1/models", response_model=ModelList, summary="Priority-sorted model list")
async def handle_get_models(request: Request, session_id: Optional[str] = None):
    """Returns the sorted candidates; `current` marks the session's sticky model.

    Reading never registers a session.
    """
    chat_service = request.app.state.chat_service
    if not session_id:
        return _model_list(Router(chat_service.registry, chat_service.providers))
    try:
        model_router = chat_service.peek_router(session_id)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return _model_list(model_router)


@router.post("/v1/models/current", response_model=ModelList)
async def handle_set_model(req: SetModelRequest, request: Request):
    """Manually moves a session's cursor to the model at `index`."""
    try:
        model_router = request.app.state.chat_service.get_router(req.session_id)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    if not model_router.set_model(req.index):
        raise HTTPException(status_code=400, detail=f"Invalid model index: {req.index}")
    logger.info(f"Session {req.session_id} switched to model index {req.index}.")
    return _model_list(model_router)
