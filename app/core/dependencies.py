"""
Dependencies de FastAPI para inyeccion del store de contribuciones
"""

from typing import Annotated, Optional

from fastapi import Depends

from app.database import get_contribution_store
from app.repositories.contribution_repository import ContributionStore
from app.services.leaderboard_service import ContributionRanker


async def get_contribution_ranker(
    store: Annotated[Optional[ContributionStore], Depends(get_contribution_store)]
) -> ContributionRanker:
    """
    Dependency que arma el ranker con el store de la request.

    El store puede ser None (base sin configurar); el ranker lo reporta
    al calcular, no aqui.
    """
    return ContributionRanker(store)


# Alias de tipos para que se vea mas limpio en los endpoints
Ranker = Annotated[ContributionRanker, Depends(get_contribution_ranker)]
