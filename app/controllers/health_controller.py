"""
Controlador de salud - Endpoint de comprobación del servicio
"""

from fastapi import APIRouter
from pydantic import BaseModel

from app.database import Database


router = APIRouter(tags=["health"])


class HealthResponse(BaseModel):
    """Respuesta del chequeo de estado."""
    status: str
    database: str


@router.get("/health", response_model=HealthResponse)
async def health_check():
    """
    Endpoint de verificación de estado.

    Indica si la API tiene una base de datos configurada.
    """
    db_status = "configured" if Database.get_engine() is not None else "not_configured"

    return HealthResponse(
        status="ok",
        database=db_status
    )
