"""Crop suggestions by soil type."""

CROP_SUGGESTIONS: dict[str, list[str]] = {
    "loamy": ["Wheat", "Rice", "Maize", "Sugarcane"],
    "clay": ["Rice", "Sugarcane", "Cotton", "Soybean"],
    "sandy": ["Groundnut", "Millets", "Potatoes", "Carrots"],
    "alluvial": ["Rice", "Wheat", "Sugarcane", "Cotton"],
    "black": ["Cotton", "Soybean", "Wheat", "Chickpeas"],
    "red": ["Millets", "Groundnut", "Pulses", "Tobacco"],
    "laterite": ["Cashews", "Rubber", "Tea", "Coffee"],
    "saline": ["Rice", "Barley", "Cotton", "Sugarcane"],
    "acidic": ["Tea", "Coffee", "Pineapple", "Rubber"],
    "alkaline": ["Barley", "Wheat", "Sugarcane", "Cotton"],
}

GENERAL_CROPS = ["General crops: Rice, Wheat, Maize"]


def suggest_crops(soil_type: str) -> list[str]:
    """Crops suited to ``soil_type`` (case-insensitive)."""
    return list(CROP_SUGGESTIONS.get(soil_type.strip().lower(), GENERAL_CROPS))
