# controller/claims_controller.py
from typing import List
from fastapi import APIRouter, Body, Depends, File, UploadFile
from controller.controller_dependencies import get_session_service
from model.api import ClaimSummaryResponse, SkipClaimRequest
from model.claim import Claim
from service.session_service import SessionService
from util.constants import InternalURIs

claims_router = APIRouter()


@claims_router.get(InternalURIs.CLAIMS, response_model=List[Claim])
async def list_claims(
    service: SessionService = Depends(get_session_service),
) -> List[Claim]:
    return service.claims()


@claims_router.put(InternalURIs.CLAIMS, response_model=List[Claim])
async def seed_claims(
    claims: List[Claim] = Body(...),
    service: SessionService = Depends(get_session_service),
) -> List[Claim]:
    """Hand back a previously exported or edited claim list."""
    return service.seed(claims)


@claims_router.get(InternalURIs.SUMMARY, response_model=ClaimSummaryResponse)
async def claims_summary(
    service: SessionService = Depends(get_session_service),
) -> ClaimSummaryResponse:
    return service.summary()


@claims_router.post(InternalURIs.VERIFY_CLAIM, response_model=Claim)
async def verify_claim(
    claim_id: str,
    file: UploadFile = File(...),
    service: SessionService = Depends(get_session_service),
) -> Claim:
    data = await file.read()
    return await service.verify(claim_id, file.filename or "source.pdf", data)


@claims_router.post(InternalURIs.SKIP_CLAIM, response_model=Claim)
async def skip_claim(
    claim_id: str,
    payload: SkipClaimRequest | None = None,
    service: SessionService = Depends(get_session_service),
) -> Claim:
    return service.skip(claim_id, payload.reason if payload else None)


@claims_router.post(InternalURIs.CLAIM_SUGGESTIONS, response_model=Claim)
async def fetch_suggestions(
    claim_id: str,
    service: SessionService = Depends(get_session_service),
) -> Claim:
    return await service.suggest(claim_id)
