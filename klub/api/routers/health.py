import logging
from datetime import datetime
from fastapi import APIRouter
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from klub.api.deps import SessionDep
from klub.core.config import settings

router = APIRouter(tags=["health"])

logger = logging.getLogger(__name__)


def check_database(db) -> dict:
    """Run a trivial query against the backing store."""
    try:
        db.execute(text("SELECT 1"))
        return {"success": True, "message": "Connected to database successfully"}
    except SQLAlchemyError as e:
        logger.error(f"[Health] Database connection error: {e}")
        return {"success": False, "message": "Failed to connect to database", "error": str(e)}


@router.get("/health")
def health_check(db: SessionDep):
    """Liveness and database connectivity probe."""
    db_status = check_database(db)
    return JSONResponse(
        status_code=200 if db_status["success"] else 500,
        content={
            "status": "ok" if db_status["success"] else "error",
            "timestamp": datetime.now(settings.APP_TIMEZONE).isoformat(),
            "database": db_status,
        },
    )
