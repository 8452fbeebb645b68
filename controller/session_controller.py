# controller/session_controller.py
from fastapi import APIRouter, Depends, File, UploadFile, status
from controller.controller_dependencies import get_session_service
from model.api import SessionStateResponse, TrackRequest, UploadPaperResponse
from service.session_service import SessionService
from util.constants import InternalURIs

session_router = APIRouter()


@session_router.post(
    InternalURIs.UPLOAD,
    response_model=UploadPaperResponse,
    status_code=status.HTTP_201_CREATED,
)
async def upload_paper(
    file: UploadFile = File(...),
    service: SessionService = Depends(get_session_service),
) -> UploadPaperResponse:
    data = await file.read()
    job_id = await service.upload(file.filename or "paper.pdf", data)
    return UploadPaperResponse(jobId=job_id)


@session_router.post(InternalURIs.TRACK, response_model=SessionStateResponse)
async def track_job(
    payload: TrackRequest,
    service: SessionService = Depends(get_session_service),
) -> SessionStateResponse:
    await service.track(payload.jobId)
    return service.state()


@session_router.post(InternalURIs.STOP, response_model=SessionStateResponse)
async def stop_stream(
    service: SessionService = Depends(get_session_service),
) -> SessionStateResponse:
    service.stop()
    return service.state()


@session_router.get(InternalURIs.STATE, response_model=SessionStateResponse)
async def session_state(
    service: SessionService = Depends(get_session_service),
) -> SessionStateResponse:
    return service.state()
