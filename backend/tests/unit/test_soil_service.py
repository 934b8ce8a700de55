"""Unit tests for the SoilGrids service."""

import httpx
import pytest

from agrigeo.models import SOIL_SOURCE, UpstreamError
from agrigeo.services.soil import SoilGridsService, normalize_soil_response, pick_mean
from tests.conftest import SOIL_PAYLOAD, SOILGRIDS_HOST, UpstreamStub


def _prop(values: dict) -> dict:
    return {"depths": [{"label": "0-5cm", "values": values}]}


class TestPickMean:
    """Tests for reducing a property to one scalar."""

    def test_prefers_mean(self) -> None:
        assert pick_mean(_prop({"mean": 65, "median": 60})) == 65

    def test_falls_back_to_median(self) -> None:
        assert pick_mean(_prop({"median": 60, "Q0.5": 61})) == 60

    def test_neither_is_none(self) -> None:
        assert pick_mean(_prop({"Q0.05": 50, "Q0.95": 70})) is None

    def test_zero_mean_is_kept(self) -> None:
        assert pick_mean(_prop({"mean": 0, "median": 12})) == 0

    def test_null_mean_uses_median(self) -> None:
        assert pick_mean(_prop({"mean": None, "median": 12})) == 12

    def test_uses_first_depth_only(self) -> None:
        prop = {
            "depths": [
                {"label": "0-5cm", "values": {"mean": 1}},
                {"label": "5-15cm", "values": {"mean": 2}},
            ]
        }
        assert pick_mean(prop) == 1

    @pytest.mark.parametrize(
        "prop",
        [
            None,
            "not-a-dict",
            {},
            {"depths": []},
            {"depths": "nope"},
            {"depths": [None]},
            {"depths": [{"values": None}]},
            {"depths": [{}]},
        ],
    )
    def test_malformed_structures(self, prop) -> None:
        assert pick_mean(prop) is None


class TestNormalizeSoilResponse:
    """Tests for mapping a SoilGrids response onto SoilProperties."""

    def test_keyed_properties(self) -> None:
        soil = normalize_soil_response(SOIL_PAYLOAD)
        assert soil.ph == 65
        assert soil.clay == 281
        assert soil.sand == 402
        assert soil.silt is None
        assert soil.source == SOIL_SOURCE

    def test_layers_list(self) -> None:
        data = {
            "properties": {
                "layers": [
                    {"name": "phh2o", **_prop({"mean": 71})},
                    {"name": "silt", **_prop({"median": 300})},
                ]
            }
        }
        soil = normalize_soil_response(data)
        assert soil.ph == 71
        assert soil.silt == 300
        assert soil.clay is None
        assert soil.sand is None

    @pytest.mark.parametrize("data", [None, [], {}, {"properties": None}, {"properties": []}])
    def test_missing_properties(self, data) -> None:
        soil = normalize_soil_response(data)
        assert soil.model_dump() == {
            "ph": None,
            "clay": None,
            "sand": None,
            "silt": None,
            "source": "SoilGrids 2.0",
        }


class TestSoilGridsServiceFetch:
    """Tests for the HTTP side of the SoilGrids client."""

    def setup_method(self) -> None:
        self.upstream = UpstreamStub()
        self.service = SoilGridsService(timeout=5.0, transport=self.upstream.transport)

    def test_default_initialization(self) -> None:
        service = SoilGridsService()
        assert service._timeout == 10.0

    def test_build_params(self) -> None:
        assert self.service.build_params("12.97", "77.59") == [
            ("lat", "12.97"),
            ("lon", "77.59"),
            ("property", "phh2o"),
            ("property", "clay"),
            ("property", "sand"),
            ("property", "silt"),
            ("depth", "0-5cm"),
        ]

    @pytest.mark.asyncio
    async def test_request_encoding(self) -> None:
        await self.service.fetch_properties("12.9700", "77.5900")
        request = self.upstream.last_request(SOILGRIDS_HOST)
        assert request.method == "GET"
        assert request.url.path == "/soilgrids/v2.0/properties/query"
        assert request.url.params["lat"] == "12.9700"
        assert request.url.params["lon"] == "77.5900"
        assert request.url.params.get_list("property") == ["phh2o", "clay", "sand", "silt"]
        assert request.url.params["depth"] == "0-5cm"

    @pytest.mark.asyncio
    async def test_success_is_normalized(self) -> None:
        soil = await self.service.fetch_properties("12.97", "77.59")
        assert soil.ph == 65
        assert soil.sand == 402

    @pytest.mark.asyncio
    async def test_non_success_status(self) -> None:
        self.upstream.respond(SOILGRIDS_HOST, 503, {"detail": "busy"})
        with pytest.raises(UpstreamError) as exc_info:
            await self.service.fetch_properties("12.97", "77.59")
        assert exc_info.value.upstream_status == 503
        assert exc_info.value.provider == "soilgrids"

    @pytest.mark.asyncio
    async def test_timeout_is_upstream_error(self) -> None:
        self.upstream.respond(SOILGRIDS_HOST, 200, httpx.ReadTimeout("timed out"))
        with pytest.raises(UpstreamError) as exc_info:
            await self.service.fetch_properties("12.97", "77.59")
        assert exc_info.value.upstream_status is None

    @pytest.mark.asyncio
    async def test_invalid_json_propagates(self) -> None:
        self.upstream.respond(SOILGRIDS_HOST, 200, b"<html>oops</html>")
        with pytest.raises(ValueError):
            await self.service.fetch_properties("12.97", "77.59")
