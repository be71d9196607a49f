"""FastAPI dependency injection."""

from functools import lru_cache

from windreport.data.geocode import NominatimGeocoder
from windreport.data.storm_events import StormEventService


@lru_cache
def get_storm_service() -> StormEventService:
    # One instance per process so the directory listing cache is shared
    return StormEventService()


def get_geocoder() -> NominatimGeocoder:
    return NominatimGeocoder()
