from .garden_overview import DateGroup, GardenBrowser, GardenOverview
from .widget_feed import WidgetFeed, WidgetSnapshot

__all__ = [
    "DateGroup",
    "GardenBrowser",
    "GardenOverview",
    "WidgetFeed",
    "WidgetSnapshot",
]
