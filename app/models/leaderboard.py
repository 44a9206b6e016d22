from typing import Optional
from pydantic import BaseModel, ConfigDict, Field


class ContributorActivity(BaseModel):
    """Actividad agregada de una cuenta, tal como la devuelve el store"""

    login: str = Field(..., min_length=1)
    avatar_url: Optional[str] = None
    user_id: str
    contribution_count: int = Field(..., ge=0)


class LeaderboardEntry(BaseModel):
    """Entrada en el leaderboard de contribuidores (resultado derivado)"""

    model_config = ConfigDict(populate_by_name=True)

    rank: int
    username: str
    avatar: str = ""
    user_id: str

    contribution_count: int = Field(..., alias="contributions")
    ecosystems: list[str] = Field(default_factory=list)

    # Placeholders hasta que exista histórico: score = contribuciones, sin tendencia
    score: int
    trend: str = "same"
    trend_value: int = Field(0, alias="trendValue")
