from typing import Any, Dict, List, Optional
from fastapi import APIRouter, Depends, Query, Request
from pydantic import BaseModel, ConfigDict, Field

from techfest.utils.security import require_admin
from techfest.utils.errors import NotFound
from techfest.admin import service as admin_service
from techfest.registrations.service import to_public

# module techfest.admin.views
router = APIRouter(prefix="/api/admin", tags=["Admin API"])


class WorkshopsUpdate(BaseModel):
    workshops: List[int] = Field(default_factory=list)


class AttendanceUpdate(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    event_id: int = Field(alias="eventId")
    attended: bool = True


class RegistrationPatch(BaseModel):
    notes: Optional[str] = Field(default=None, max_length=2000)
    flags: Optional[List[str]] = None
    status: Optional[str] = None


@router.get("/registrations")
def list_registrations(
    limit: int = Query(default=100, ge=1, le=500),
    offset: int = Query(default=0, ge=0),
    status: Optional[str] = Query(default=None),
    admin: Dict[str, Any] = Depends(require_admin),
):
    page = admin_service.list_registrations(limit=limit, offset=offset, status=status)
    page["items"] = [to_public(r) for r in page["items"]]
    return page

@router.get("/registrations/{registration_id}")
def get_registration(registration_id: str, admin: Dict[str, Any] = Depends(require_admin)):
    return to_public(admin_service.get_registration(registration_id))

@router.post("/registrations/{registration_id}/check-in")
def check_in(registration_id: str, admin: Dict[str, Any] = Depends(require_admin)):
    result = admin_service.check_in(registration_id, admin)
    return {"alreadyCheckedIn": result["alreadyCheckedIn"], "registration": to_public(result["registration"])}

@router.put("/registrations/{registration_id}/workshops")
def reassign_workshops(registration_id: str, body: WorkshopsUpdate, admin: Dict[str, Any] = Depends(require_admin)):
    return to_public(admin_service.reassign_workshops(registration_id, body.workshops, admin))

@router.post("/registrations/{registration_id}/attendance")
def mark_attendance(registration_id: str, body: AttendanceUpdate, admin: Dict[str, Any] = Depends(require_admin)):
    return to_public(admin_service.mark_attendance(registration_id, body.event_id, body.attended, admin))

@router.patch("/registrations/{registration_id}")
def update_registration(registration_id: str, body: RegistrationPatch, admin: Dict[str, Any] = Depends(require_admin)):
    return to_public(admin_service.update_details(registration_id, body.model_dump(), admin))

@router.get("/email-status")
def email_status(request: Request, admin: Dict[str, Any] = Depends(require_admin)):
    pool = getattr(request.app.state, "email_pool", None)
    if pool is None:
        raise NotFound("Email service is not initialised")
    return pool.status()

@router.post("/email-status/reset")
def reset_email_usage(request: Request, admin: Dict[str, Any] = Depends(require_admin)):
    pool = getattr(request.app.state, "email_pool", None)
    if pool is None:
        raise NotFound("Email service is not initialised")
    pool.reset_usage()
    return pool.status()
