"""
Admin endpoints for the staff dashboard.

These endpoints require the admin or personnel role and are used for:
- The dashboard overview (metrics and recent activity)
- Assigning grantees to an MP and clearing that assignment
"""

import structlog
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from api.deps import StaffSession
from db.session import get_db
from repositories.user_repository import UserRepository
from schemas.admin import AdminOverview
from schemas.converters import user_model_to_grantee
from schemas.user import GranteeResponse, MPAssignmentRequest, MPUnassignRequest
from services.stats_service import StatsService

logger = structlog.get_logger(__name__)

router = APIRouter()


@router.get("/overview", response_model=AdminOverview)
async def get_overview(
    _staff: StaffSession,
    db: AsyncSession = Depends(get_db),
) -> AdminOverview:
    """User, submission and poll counts plus the newest users and submissions."""
    return await StatsService(db).get_overview()


@router.post("/mp-assignments", response_model=GranteeResponse)
async def assign_mp(
    assignment: MPAssignmentRequest,
    staff: StaffSession,
    db: AsyncSession = Depends(get_db),
) -> GranteeResponse:
    """Assign a grantee to an MP, replacing any previous assignment."""
    if assignment.grantee_id is None or assignment.mp_id is None:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Grantee ID and MP ID are required",
        )

    repo = UserRepository(db)

    grantee = await repo.get_by_id(str(assignment.grantee_id))
    if grantee is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Grantee not found")

    mp = await repo.get_mp(str(assignment.mp_id))
    if mp is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="MP not found")

    await repo.set_mp(grantee, mp)
    await db.commit()

    logger.info("mp_assigned", grantee_id=str(grantee.id), mp_id=str(mp.id), assigned_by=staff.id)
    return user_model_to_grantee(grantee)


@router.delete("/mp-assignments", response_model=GranteeResponse)
async def unassign_mp(
    request: MPUnassignRequest,
    staff: StaffSession,
    db: AsyncSession = Depends(get_db),
) -> GranteeResponse:
    """Clear a grantee's MP assignment."""
    if request.grantee_id is None:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Grantee ID is required",
        )

    repo = UserRepository(db)

    grantee = await repo.get_by_id(str(request.grantee_id))
    if grantee is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Grantee not found")

    await repo.set_mp(grantee, None)
    await db.commit()

    logger.info("mp_unassigned", grantee_id=str(grantee.id), unassigned_by=staff.id)
    return user_model_to_grantee(grantee)
