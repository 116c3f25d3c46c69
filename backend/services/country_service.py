"""Country list fetched from the remote xcountries backend."""

import logging

import httpx
from pydantic import TypeAdapter, ValidationError

from config import settings
from models.country import Country
from utils.http_client import get_client

logger = logging.getLogger(__name__)

_country_list = TypeAdapter(list[Country])


class CountryFetchError(Exception):
    """The country list could not be fetched or parsed.

    ``status_code`` is set when the endpoint answered with a non-success
    status, and is ``None`` for transport and parse failures.
    """

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


async def fetch_countries(client: httpx.AsyncClient | None = None) -> list[Country]:
    """Issue one GET to the countries endpoint and parse the body.

    Raises CountryFetchError on any failure.
    """
    client = client or get_client()

    try:
        response = await client.get(settings.countries_url)
    except httpx.HTTPError as e:
        raise CountryFetchError(f"Request failed: {e!r}") from e

    if not response.is_success:
        raise CountryFetchError(
            f"HTTP error! status: {response.status_code}",
            status_code=response.status_code,
        )

    try:
        return _country_list.validate_python(response.json())
    except (ValueError, ValidationError) as e:
        raise CountryFetchError(f"Malformed response body: {e}") from e
