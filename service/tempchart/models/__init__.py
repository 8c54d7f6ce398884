from .models import *

__all__ = [
    "CacheKey",
    "Circle",
    "Dataset",
    "DayRecord",
    "Frame",
    "Layout",
    "Line",
    "Primitive",
    "SelectedDay",
    "StationMeta",
    "Text",
    "Viewport",
]
