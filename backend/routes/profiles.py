# backend/routes/profiles.py
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from container import Services, get_services
from database import get_db
from models.users import User, UserRole
from schemas import user as schemas
from schemas.common import ActionResponse, ok
from utils.tokenJWT import role_required

router = APIRouter(prefix="/profile", tags=["Profile"])


# --- Student ---

@router.get("/student", response_model=ActionResponse[schemas.StudentProfileOut])
def get_student_profile(
    current_user: User = Depends(role_required(UserRole.STUDENT)),
    db: Session = Depends(get_db),
    services: Services = Depends(get_services),
):
    return ok(services.students.get_profile(db, current_user, current_user.id))


@router.patch("/student", response_model=ActionResponse[schemas.StudentProfileOut])
def update_student_profile(
    payload: schemas.StudentProfileUpdate,
    current_user: User = Depends(role_required(UserRole.STUDENT)),
    db: Session = Depends(get_db),
    services: Services = Depends(get_services),
):
    profile = services.students.update_profile(db, current_user, current_user.id, payload.model_dump(exclude_unset=True))
    return ok(profile)


# --- Coordinator ---

@router.get("/coordinator", response_model=ActionResponse[schemas.CoordinatorProfileOut])
def get_coordinator_profile(
    current_user: User = Depends(role_required(UserRole.COORDINATOR)),
    db: Session = Depends(get_db),
    services: Services = Depends(get_services),
):
    return ok(services.coordinators.get_profile(db, current_user, current_user.id))


@router.patch("/coordinator", response_model=ActionResponse[schemas.CoordinatorProfileOut])
def update_coordinator_profile(
    payload: schemas.CoordinatorProfileUpdate,
    current_user: User = Depends(role_required(UserRole.COORDINATOR)),
    db: Session = Depends(get_db),
    services: Services = Depends(get_services),
):
    profile = services.coordinators.update_profile(
        db, current_user, current_user.id, payload.model_dump(exclude_unset=True)
    )
    return ok(profile)


# --- Organization ---

@router.get("/organization", response_model=ActionResponse[schemas.OrganizationProfileOut])
def get_organization_profile(
    current_user: User = Depends(role_required(UserRole.ORGANIZATION)),
    db: Session = Depends(get_db),
    services: Services = Depends(get_services),
):
    return ok(services.organizations.get_profile(db, current_user, current_user.id))


@router.patch("/organization", response_model=ActionResponse[schemas.OrganizationProfileOut])
def update_organization_profile(
    payload: schemas.OrganizationProfileUpdate,
    current_user: User = Depends(role_required(UserRole.ORGANIZATION)),
    db: Session = Depends(get_db),
    services: Services = Depends(get_services),
):
    profile = services.organizations.update_profile(
        db, current_user, current_user.id, payload.model_dump(exclude_unset=True)
    )
    return ok(profile)


# --- Administrator ---

@router.get("/administrator", response_model=ActionResponse[schemas.UserWithProfileResponse])
def get_administrator_profile(
    current_user: User = Depends(role_required(UserRole.ADMINISTRATOR)),
    db: Session = Depends(get_db),
    services: Services = Depends(get_services),
):
    resolved = services.users.get_user_profile(db, current_user.id)
    return ok(schemas.user_with_profile_response(resolved))


# The administrator profile carries no fields of its own, so this edits the account
@router.patch("/administrator", response_model=ActionResponse[schemas.UserWithProfileResponse])
def update_administrator_profile(
    payload: schemas.UserUpdate,
    current_user: User = Depends(role_required(UserRole.ADMINISTRATOR)),
    db: Session = Depends(get_db),
    services: Services = Depends(get_services),
):
    services.users.update_own_account(db, current_user, payload.model_dump(exclude_unset=True))
    resolved = services.users.get_user_profile(db, current_user.id)
    return ok(schemas.user_with_profile_response(resolved))
