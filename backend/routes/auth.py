# backend/routes/auth.py
from fastapi import APIRouter, Depends, Request
from sqlalchemy.orm import Session

from container import Services, get_services
from database import get_db
from models.users import User
from schemas import user as schemas
from schemas.common import ActionResponse, ok
from utils.audit import client_ip, write_log
from utils.errors import AppError
from utils.tokenJWT import get_current_user

router = APIRouter(tags=["Auth"])


# Register a new user together with the profile of the chosen role
@router.post("/register", response_model=ActionResponse[schemas.UserResponse])
def register(
    payload: schemas.UserCreate,
    request: Request,
    db: Session = Depends(get_db),
    services: Services = Depends(get_services),
):
    try:
        user = services.auth.sign_up(db, payload, ip=client_ip(request))
    except AppError as e:
        write_log(db, user_id=None, action="REGISTER", resource="auth", status="FAIL",
                  ip=client_ip(request), meta={"email": payload.email, "reason": e.message})
        raise

    # Log successful registration event
    write_log(db, user_id=user.id, action="REGISTER", resource="auth", status="SUCCESS",
              ip=client_ip(request), meta={"email": user.email, "role": user.role.value})
    return ok(user)


# Authenticate user and issue JWT token
@router.post("/login", response_model=ActionResponse[schemas.Token])
def login(
    payload: schemas.UserLogin,
    request: Request,
    db: Session = Depends(get_db),
    services: Services = Depends(get_services),
):
    try:
        user, access_token = services.auth.sign_in(db, payload.email, payload.password, ip=client_ip(request))
    except AppError as e:
        write_log(db, user_id=None, action="LOGIN", resource="auth", status="FAIL",
                  ip=client_ip(request), meta={"email": payload.email, "reason": e.message})
        raise

    write_log(db, user_id=user.id, action="LOGIN", resource="auth", status="SUCCESS",
              ip=client_ip(request), meta={"email": user.email})
    return ok({"access_token": access_token, "token_type": "bearer"})


# Retrieve current authenticated user details
@router.get("/me", response_model=ActionResponse[schemas.UserResponse])
def me(current_user: User = Depends(get_current_user)):
    return ok(current_user)


# Current user merged with the profile of its role
@router.get("/me/profile", response_model=ActionResponse[schemas.UserWithProfileResponse])
def me_profile(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
    services: Services = Depends(get_services),
):
    resolved = services.users.get_user_profile(db, current_user.id)
    return ok(schemas.user_with_profile_response(resolved))


# Update base account fields of the current user
@router.patch("/me", response_model=ActionResponse[schemas.UserResponse])
def update_me(
    payload: schemas.UserUpdate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
    services: Services = Depends(get_services),
):
    user = services.users.update_own_account(db, current_user, payload.model_dump(exclude_unset=True))
    return ok(user)


# Confirm the e-mail address with the token from the verification mail
@router.post("/verify-email", response_model=ActionResponse[schemas.UserResponse])
def verify_email(
    payload: schemas.TokenConfirm,
    request: Request,
    db: Session = Depends(get_db),
    services: Services = Depends(get_services),
):
    user = services.auth.verify_email(db, payload.token)
    write_log(db, user_id=user.id, action="VERIFY_EMAIL", resource="auth", status="SUCCESS",
              ip=client_ip(request), meta={"email": user.email})
    return ok(user)


# Issue a fresh verification token; the answer is the same whether or not one was issued
@router.post("/verify-email/resend", response_model=ActionResponse[None])
def resend_verification(
    payload: schemas.EmailRequest,
    db: Session = Depends(get_db),
    services: Services = Depends(get_services),
):
    services.auth.resend_verification(db, payload.email)
    return ok()


# Start a password reset; unknown addresses get the same answer
@router.post("/password-reset/request", response_model=ActionResponse[None])
def request_password_reset(
    payload: schemas.EmailRequest,
    request: Request,
    db: Session = Depends(get_db),
    services: Services = Depends(get_services),
):
    token = services.auth.request_password_reset(db, payload.email, ip=client_ip(request))
    if token is not None:
        write_log(db, user_id=token.user_id, action="PASSWORD_RESET_REQUEST", resource="auth", status="SUCCESS",
                  ip=client_ip(request))
    return ok()


# Set a new password with the token from the reset mail
@router.post("/password-reset/confirm", response_model=ActionResponse[None])
def confirm_password_reset(
    payload: schemas.PasswordResetConfirm,
    request: Request,
    db: Session = Depends(get_db),
    services: Services = Depends(get_services),
):
    user = services.auth.reset_password(db, payload.token, payload.password)
    write_log(db, user_id=user.id, action="PASSWORD_RESET", resource="auth", status="SUCCESS",
              ip=client_ip(request))
    return ok()
