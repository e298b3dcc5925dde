"""
Colis API endpoints.

Back the parcel detail view: load, change status, edit, delete, plus parcel
creation with a suggested id. Every route requires an authenticated session.
"""

from fastapi import APIRouter, Depends

from api.middleware.auth import require_session
from api.dependencies import get_colis_service
from modules.session.models import Session

from .models import (
    Colis,
    ColisDetail,
    CreateColisRequest,
    SuggestedIdResponse,
    UpdateColisRequest,
    UpdateStatusRequest,
)
from .service import ColisService

router = APIRouter()


@router.post("", response_model=Colis, status_code=201)
async def create_colis(
    request: CreateColisRequest,
    session: Session = Depends(require_session),
    service: ColisService = Depends(get_colis_service),
) -> Colis:
    """
    Create a parcel.

    When ``id`` is omitted a COL-<year>-<n> code is generated.
    """
    return await service.create_colis(request)


@router.get("/suggest-id", response_model=SuggestedIdResponse)
async def suggest_id(
    session: Session = Depends(require_session),
    service: ColisService = Depends(get_colis_service),
) -> SuggestedIdResponse:
    """Suggest an id for the creation form; the user may edit it."""
    return SuggestedIdResponse(id=service.suggest_id())


@router.get("/{colis_id}", response_model=ColisDetail)
async def get_colis(
    colis_id: str,
    session: Session = Depends(require_session),
    service: ColisService = Depends(get_colis_service),
) -> ColisDetail:
    """
    Parcel detail: the parcel, its 20 latest history entries (newest first)
    and the active status catalog.
    """
    tracker = await service.open(colis_id)
    return tracker.detail


@router.put("/{colis_id}/status", response_model=ColisDetail)
async def update_status(
    colis_id: str,
    request: UpdateStatusRequest,
    session: Session = Depends(require_session),
    service: ColisService = Depends(get_colis_service),
) -> ColisDetail:
    """
    Change the parcel status.

    Returns the updated detail including the new history entry. Sending the
    current status is a no-op.
    """
    tracker = await service.open(colis_id)
    return await tracker.update_status(request.status)


@router.patch("/{colis_id}", response_model=ColisDetail)
async def update_colis(
    colis_id: str,
    request: UpdateColisRequest,
    session: Session = Depends(require_session),
    service: ColisService = Depends(get_colis_service),
) -> ColisDetail:
    """Edit parcel fields. A status change is recorded in the history."""
    tracker = await service.open(colis_id)
    return await tracker.edit(request.model_dump(exclude_unset=True))


@router.delete("/{colis_id}", status_code=204)
async def delete_colis(
    colis_id: str,
    session: Session = Depends(require_session),
    service: ColisService = Depends(get_colis_service),
) -> None:
    """Delete a parcel and its whole history."""
    tracker = await service.open(colis_id)
    await tracker.delete()
