"""
Healthcheck API Router
"""

from fastapi import APIRouter, Depends

from vidtube.api.schemas import respond
from vidtube.app.database import DatabaseManager, get_db_manager

router = APIRouter(prefix="/healthcheck", tags=["System"])


@router.get("")
async def healthcheck(db_manager: DatabaseManager = Depends(get_db_manager)):
    """Liveness plus a trivial database round trip"""
    database_ok = await db_manager.ping()
    return respond(
        {"status": "OK" if database_ok else "DEGRADED", "database": database_ok},
        "Health check passed" if database_ok else "Database unavailable",
    )
