from agrigeo.services.crops import CROP_SUGGESTIONS, GENERAL_CROPS, suggest_crops


class TestSuggestCrops:
    def test_case_insensitive(self) -> None:
        assert suggest_crops("  Laterite ") == ["Cashews", "Rubber", "Tea", "Coffee"]

    def test_unknown_type(self) -> None:
        assert suggest_crops("peat") == GENERAL_CROPS

    def test_result_is_a_copy(self) -> None:
        suggest_crops("loamy").append("Kale")
        assert "Kale" not in CROP_SUGGESTIONS["loamy"]
