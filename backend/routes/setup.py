# backend/routes/setup.py
from fastapi import APIRouter, Depends, Request
from sqlalchemy.orm import Session

from container import Services, get_services
from database import get_db
from schemas.common import ActionResponse, ok
from schemas.platform_config import PublicConfigResponse, SetupRequest, SetupResponse
from utils.audit import client_ip, write_log

router = APIRouter(tags=["Setup"])


# Public branding and registration policy
@router.get("/config", response_model=ActionResponse[PublicConfigResponse])
def get_public_config(db: Session = Depends(get_db), services: Services = Depends(get_services)):
    return ok(services.config.get_config(db))


# First-run setup, only accepted while the platform has no config
@router.post("/setup", response_model=ActionResponse[SetupResponse], status_code=201)
def run_setup(
    payload: SetupRequest,
    request: Request,
    db: Session = Depends(get_db),
    services: Services = Depends(get_services),
):
    config, admin = services.config.setup(db, payload)
    write_log(db, user_id=admin.id, action="SETUP", resource="config", ip=client_ip(request),
              meta={"admin_email": admin.email})
    return ok({"config": config, "admin_id": admin.id})
