"""Pydantic schemas for API responses.

Field names are snake_case in Python and camelCase on the wire.
"""

from pydantic import BaseModel, ConfigDict, Field

from windreport.models.storm import WindReport


class WindEventResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    date: str = Field(..., description="Event begin date, MM/DD/YYYY")
    wind_speed_mph: int = Field(..., alias="windSpeedMph")
    event_type: str = Field(..., alias="eventType")
    distance_miles: float | None = Field(None, alias="distanceMiles")


class WindReportResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    address: str
    county: str | None = None
    state: str | None = None
    radius_miles: float | None = Field(None, alias="radiusMiles")
    results: list[WindEventResponse]

    @classmethod
    def from_report(cls, report: WindReport) -> "WindReportResponse":
        return cls(
            address=report.address,
            county=report.county,
            state=report.state,
            radius_miles=report.radius_miles,
            results=[
                WindEventResponse(
                    date=r.date,
                    wind_speed_mph=r.wind_speed_mph,
                    event_type=r.event_type,
                    distance_miles=r.distance_miles,
                )
                for r in report.results
            ],
        )


class ErrorResponse(BaseModel):
    error: str
