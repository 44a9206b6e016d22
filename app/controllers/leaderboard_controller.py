"""
Controlador de leaderboard - Ranking de contribuidores

El ranking se calcula en cada request a partir de issues y PRs en
proyectos verificados; no hay cache.
"""

import logging
from typing import Optional

from fastapi import APIRouter, Query, status
from fastapi.responses import JSONResponse

from app.core.dependencies import Ranker
from app.models.leaderboard import LeaderboardEntry
from app.repositories.contribution_repository import DataSourceUnavailable, FetchFailed


logger = logging.getLogger(__name__)

router = APIRouter(prefix="/leaderboard", tags=["leaderboard"])


def _error(status_code: int, code: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": code})


@router.get(
    "",
    response_model=list[LeaderboardEntry],
    responses={
        status.HTTP_500_INTERNAL_SERVER_ERROR: {"description": "leaderboard_fetch_failed"},
        status.HTTP_503_SERVICE_UNAVAILABLE: {"description": "db_not_configured / db_unavailable"},
    },
)
async def get_leaderboard(
    ranker: Ranker,
    limit: Optional[str] = Query(None, description="Max entries (default 10, max 100)"),
):
    """
    Obtener el top de contribuidores.

    Valores de limit fuera de rango (o no numericos) se normalizan:
    < 1 pasa a 10 y > 100 pasa a 100. Siempre devuelve un array.
    """
    if ranker.store is None:
        return _error(status.HTTP_503_SERVICE_UNAVAILABLE, "db_not_configured")

    try:
        return await ranker.compute_leaderboard(limit)
    except DataSourceUnavailable as e:
        logger.error("Leaderboard data source unavailable: %s", e)
        return _error(status.HTTP_503_SERVICE_UNAVAILABLE, "db_unavailable")
    except FetchFailed as e:
        logger.error("Failed to fetch leaderboard: %s", e)
        return _error(status.HTTP_500_INTERNAL_SERVER_ERROR, "leaderboard_fetch_failed")
