"""Address geocoding via OpenStreetMap Nominatim (free, no key; User-Agent required)."""

import logging
import re

import httpx

from windreport.config import settings
from windreport.models.storm import GeoTarget

logger = logging.getLogger(__name__)

# Nominatim reports "Suffolk County"; NOAA zone/county names omit the suffix
_COUNTY_SUFFIXES = re.compile(r"\s+(County|Parish|Borough|Census Area)$", re.IGNORECASE)


def clean_county(raw: str | None) -> str | None:
    if not raw:
        return None
    county = _COUNTY_SUFFIXES.sub("", raw).strip()
    return county or None


class NominatimGeocoder:
    def __init__(self, client: httpx.AsyncClient | None = None, url: str | None = None):
        self.client = client
        self.url = url or settings.geocoder_url
        self.headers = {"User-Agent": settings.geocoder_user_agent}

    async def _get(self, params: dict) -> list:
        if self.client is not None:
            resp = await self.client.get(self.url, params=params, headers=self.headers)
            resp.raise_for_status()
            return resp.json()

        async with httpx.AsyncClient(timeout=settings.http_timeout) as client:
            resp = await client.get(self.url, params=params, headers=self.headers)
            resp.raise_for_status()
            return resp.json()

    async def geocode(self, address: str) -> GeoTarget | None:
        """Geocode a US address. Returns None if Nominatim has no match or fails."""
        params = {
            "q": address,
            "format": "json",
            "limit": "1",
            "addressdetails": "1",
            "countrycodes": "us",
        }

        try:
            data = await self._get(params)
        except (httpx.HTTPError, ValueError) as e:
            logger.warning("Nominatim lookup failed for %r: %s", address, e)
            return None

        if not isinstance(data, list) or not data:
            return None

        result = data[0]
        details = result.get("address") or {}
        county = (
            details.get("county")
            or details.get("state_district")
            or details.get("region")
            or details.get("city")
        )

        try:
            latitude = float(result["lat"])
            longitude = float(result["lon"])
        except (KeyError, TypeError, ValueError):
            logger.warning("Nominatim result without usable coordinates for %r", address)
            return None

        return GeoTarget(
            display_name=result.get("display_name", address),
            latitude=latitude,
            longitude=longitude,
            county=clean_county(county),
            state=details.get("state") or None,
        )
