"""Wind storm lookup route."""

import logging
import math

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from windreport.api.deps import get_geocoder, get_storm_service
from windreport.api.schemas import ErrorResponse, WindReportResponse
from windreport.data.base import GeocodeSource
from windreport.data.storm_events import StormEventService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["windstorms"])


def parse_radius(value: str | None) -> float:
    """Miles from the query string; anything unusable or negative means county-wide (0)."""
    try:
        miles = float(value) if value is not None else 0.0
    except ValueError:
        return 0.0
    if not math.isfinite(miles):
        return 0.0
    return max(0.0, miles)


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=ErrorResponse(error=message).model_dump())


@router.get(
    "/windstorms",
    response_model=WindReportResponse,
    responses={400: {"model": ErrorResponse}, 404: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
async def get_windstorms(
    address: str = "",
    radius: str | None = None,
    geocoder: GeocodeSource = Depends(get_geocoder),
    service: StormEventService = Depends(get_storm_service),
):
    """List wind events near an address over the past decade.

    `radius` is in miles; omitted or zero means county-wide with no distance filter.
    """
    address = address.strip()
    if not address:
        return _error(400, "Address is required.")

    radius_miles = parse_radius(radius)
    logger.info("Searching for: %s (radius: %s)", address, radius_miles or "county-wide")

    try:
        target = await geocoder.geocode(address)
        if target is None:
            return _error(404, "Could not find that address. Try including city and state.")
        logger.info("Geocoded to: %s, %s (%s, %s)", target.county, target.state, target.latitude, target.longitude)

        report = await service.build_report(target, radius_miles)
    except Exception:
        logger.exception("Wind storm lookup failed for %r", address)
        return _error(500, "Server error. Please try again.")

    return WindReportResponse.from_report(report)
