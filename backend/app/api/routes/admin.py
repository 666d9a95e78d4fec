"""Admin routes - hit counter and dev reset"""

from fastapi import APIRouter, Depends
from fastapi.responses import HTMLResponse, PlainTextResponse
from sqlalchemy.orm import Session
import logging

from app.config import settings
from app.core.database import get_db
from app.core.exceptions import AuthorizationError
from app.services.metrics import FileserverMetrics, render_admin_metrics
from app.services.user_service import user_service
from app.api.deps import get_fileserver_metrics

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/metrics", response_class=HTMLResponse)
def fileserver_metrics(metrics: FileserverMetrics = Depends(get_fileserver_metrics)):
    """Fileserver hit count as an HTML page"""
    return HTMLResponse(render_admin_metrics(metrics.hits))


@router.post("/reset", response_class=PlainTextResponse)
def reset(
    metrics: FileserverMetrics = Depends(get_fileserver_metrics),
    db: Session = Depends(get_db),
):
    """
    Reset the hit counter and delete every user

    The counter is cleared on every platform; deleting users is only
    allowed when PLATFORM is "dev".
    """
    metrics.reset()
    if not settings.is_dev_platform:
        raise AuthorizationError("Reset is only allowed in dev environment")

    deleted = user_service.delete_all_users(db)
    logger.warning(f"Admin reset: hit counter cleared, {deleted} users deleted")
    return PlainTextResponse("Hits reset to 0 and database reset to initial state.")
