# backend/main.py
import logging
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy import text
from sqlalchemy.orm import Session

from config import settings
from container import build_services
from database import get_db, init_db
from schemas.common import ok
from utils.errors import register_exception_handlers

# Import routers
from routes.auth import router as auth_router
from routes.profiles import router as profiles_router
from routes.admin import router as admin_router
from routes.organization import router as organization_router
from routes.coordinator import router as coordinator_router
from routes.projects import router as projects_router
from routes.student import router as student_router
from routes.stats import router as stats_router
from routes.logs import router as logs_router
from routes.setup import router as setup_router

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Initialization
    init_db()
    app.state.services = build_services()
    logger.info(f"{settings.APP_NAME} {settings.APP_VERSION} started")
    yield


app = FastAPI(title=settings.APP_NAME, version=settings.APP_VERSION, lifespan=lifespan)

# CORS Configuration
origins = [
    "http://localhost:3000",
    "http://127.0.0.1:3000",
]
if settings.FRONTEND_URL and settings.FRONTEND_URL not in origins:
    origins.append(settings.FRONTEND_URL)

app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_exception_handlers(app)

# Register routers
app.include_router(setup_router)
app.include_router(auth_router)
app.include_router(profiles_router)
app.include_router(admin_router)
app.include_router(organization_router)
app.include_router(coordinator_router)
app.include_router(projects_router)
app.include_router(student_router)
app.include_router(stats_router)
app.include_router(logs_router)


@app.get("/")
def read_root():
    return ok({"message": f"{settings.APP_NAME} is running"})


@app.get("/health")
def health(db: Session = Depends(get_db)):
    db.execute(text("SELECT 1"))
    return ok({"status": "ok", "database": "ok"})
