import logging

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ticketing.dependencies.deps import get_db
from ticketing.utils.common import DateTimeUtils

logger = logging.getLogger(__name__)

health_check_routes = APIRouter()


@health_check_routes.get("/v1/health")
def health_check(db: Session = Depends(get_db)):
    try:
        db.execute(text("SELECT 1"))
    except SQLAlchemyError as e:
        logger.error(f"Health check failed, database unreachable: {str(e)}")
        raise HTTPException(status_code=503, detail={
            "status": "error",
            "database": "unreachable",
            "message": str(e),
        })

    return {
        "status": "ok",
        "database": "reachable",
        "checked_at": DateTimeUtils.utc_now().isoformat(),
    }
