import logging

from fastapi import APIRouter, HTTPException

from models.country import Country
from models.view_state import GENERIC_ERROR_MESSAGE
from services import country_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/countries", tags=["countries"])


@router.get("", response_model=list[Country])
async def list_countries():
    try:
        return await country_service.fetch_countries()
    except country_service.CountryFetchError as e:
        logger.error("Error fetching data: %s", e)
        raise HTTPException(status_code=502, detail=GENERIC_ERROR_MESSAGE)
