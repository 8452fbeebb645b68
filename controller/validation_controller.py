# controller/validation_controller.py
from fastapi import APIRouter, status
from fastapi.params import Depends
from controller.controller_dependencies import get_session_service
from model.api import ApiKeyRequest, SessionStateResponse
from service.session_service import SessionService
from util.constants import InternalURIs

validation_router = APIRouter()


@validation_router.post(
    InternalURIs.API_KEY,
    response_model=SessionStateResponse,
    status_code=status.HTTP_200_OK,
)
async def set_api_key(
    payload: ApiKeyRequest,
    service: SessionService = Depends(get_session_service),
) -> SessionStateResponse:
    await service.set_api_key(payload.apiKey, payload.remember)
    return service.state()


@validation_router.delete(InternalURIs.API_KEY, response_model=SessionStateResponse)
async def clear_api_key(
    service: SessionService = Depends(get_session_service),
) -> SessionStateResponse:
    await service.clear_api_key()
    return service.state()
