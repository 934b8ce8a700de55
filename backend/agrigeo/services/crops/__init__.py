from .service import CROP_SUGGESTIONS, GENERAL_CROPS, suggest_crops

__all__ = ["CROP_SUGGESTIONS", "GENERAL_CROPS", "suggest_crops"]
