"""OpenStreetMap Overpass API service for facilities near a land parcel.

Finds the places a farmer cares about within a radius of a point:
marketplaces, fuel stations, clinics, agricultural shops and rivers.

Architecture:
1. Build an Overpass QL ``around`` query for the fixed tag set
2. POST it as plain text to the public Overpass interpreter
3. Keep only elements with coordinates and map them to ``Facility``
"""

import logging
from typing import Any, Optional

import httpx

from agrigeo.models import FacilitiesResult, Facility, UpstreamError

logger = logging.getLogger(__name__)

# Overpass tag filters, queried as nodes
FACILITY_TAGS = [
    ("amenity", "marketplace"),
    ("amenity", "fuel"),
    ("amenity", "clinic"),
    ("shop", "agricultural"),
    ("waterway", "river"),
]

# Tag keys checked, in order, to label a facility
CATEGORY_TAG_KEYS = ("amenity", "shop", "waterway")

FACILITY_LIMIT = 50
DEFAULT_FACILITY_NAME = "Nearby Facility"
DEFAULT_FACILITY_TYPE = "facility"


def format_radius(radius_m: float) -> str:
    """Render meters the way Overpass expects: ``3000`` not ``3000.0``."""
    if radius_m == int(radius_m):
        return str(int(radius_m))
    return repr(radius_m)


def build_facilities_query(lat: str, lng: str, radius_m: float) -> str:
    """Build the Overpass QL query for facilities around (lat, lng)."""
    around = f"(around:{format_radius(radius_m)},{lat},{lng})"
    tag_queries = "\n".join(
        f'    node["{key}"="{value}"]{around};' for key, value in FACILITY_TAGS
    )
    return f"""
  [out:json];
  (
{tag_queries}
  );
  out center {FACILITY_LIMIT};
"""


def normalize_facilities_response(data: Any) -> FacilitiesResult:
    """Map Overpass elements onto ``FacilitiesResult``.

    Elements without a latitude or longitude are dropped; ways and
    relations carry their position under ``center`` and are not requested.
    """
    elements = data.get("elements") if isinstance(data, dict) else None
    if not isinstance(elements, list):
        elements = []

    facilities = []
    for element in elements:
        if not isinstance(element, dict):
            continue
        lat = element.get("lat")
        lon = element.get("lon")
        if not lat or not lon:
            continue

        tags = element.get("tags") or {}
        category = next(
            (tags[key] for key in CATEGORY_TAG_KEYS if tags.get(key)),
            DEFAULT_FACILITY_TYPE,
        )
        facilities.append(
            Facility(
                id=str(element.get("id")),
                name=tags.get("name") or DEFAULT_FACILITY_NAME,
                type=category,
                lat=lat,
                lng=lon,
            )
        )
        if len(facilities) >= FACILITY_LIMIT:
            break

    return FacilitiesResult(facilities=facilities)


class OverpassFacilitiesService:
    """Overpass API client for facility lookups."""

    OVERPASS_URL = "https://overpass-api.de/api/interpreter"

    HEADERS = {"User-Agent": "Agrigeo/1.0 (contact@agrigeo.app)"}

    def __init__(
        self,
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self._timeout = timeout
        self._transport = transport

    async def fetch_facilities(self, lat: str, lng: str, radius_km: float) -> FacilitiesResult:
        """Query facilities within ``radius_km`` of (lat, lng).

        Raises:
            UpstreamError: Overpass answered with a non-success status or did
                not answer within the timeout.
        """
        query = build_facilities_query(lat, lng, radius_km * 1000)

        try:
            async with httpx.AsyncClient(
                timeout=self._timeout,
                headers=self.HEADERS,
                transport=self._transport,
            ) as client:
                response = await client.post(
                    self.OVERPASS_URL,
                    content=query,
                    headers={"Content-Type": "text/plain"},
                )
        except httpx.TimeoutException as e:
            logger.warning(f"[FACILITIES] Overpass timed out for {lat},{lng} r={radius_km}km")
            raise UpstreamError("overpass", "request timed out") from e

        if not response.is_success:
            logger.warning(
                f"[FACILITIES] Overpass returned {response.status_code} for {lat},{lng}"
            )
            raise UpstreamError(
                "overpass",
                f"unexpected status {response.status_code}",
                upstream_status=response.status_code,
            )

        result = normalize_facilities_response(response.json())
        logger.info(f"[FACILITIES] Found {len(result.facilities)} facilities near {lat},{lng}")
        return result
