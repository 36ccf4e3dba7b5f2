from fastapi import APIRouter, Depends

from app.config import settings
from app.dependencies import get_email_service
from app.notifier import EmailService

router = APIRouter(tags=["health"])

API_VERSION = "v1"


@router.get("/health")
async def health_check():
    """Liveness probe."""
    return {"status": "ok"}


@router.get("/config")
async def get_config():
    """Public runtime configuration used by the frontends."""
    return {"env": settings.ENVIRONMENT, "version": API_VERSION, "basePath": settings.api_prefix}


@router.get("/email-status")
async def get_email_status(notifier: EmailService = Depends(get_email_service)):
    """Email transport configuration, without credentials."""
    return notifier.get_status()
