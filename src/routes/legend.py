from fastapi import APIRouter

from src.schemas.annotation import LegendEntry
from src.services.annotation import get_legend

router = APIRouter(prefix="/legend", tags=["legend"])


@router.get("", response_model=list[LegendEntry])
def read_legend() -> list[LegendEntry]:
    return get_legend()
