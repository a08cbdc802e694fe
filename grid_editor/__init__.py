"""Interactive grid editor core: coordinate mapping, placement checks, tools and rendering."""

from .mapper import Camera, CoordinateMapper, cell_size, fit_zoom
from .collision import CollisionValidator, rects_intersect
from .tools import (
    ToolMode,
    Phase,
    DragSession,
    Interaction,
    ToolContext,
    ToolController,
    Transition,
    AddShelf,
    AddDropoff,
    AddRobotStation,
    EraseRegion,
    TogglePickup,
    apply_intent,
    erase_region,
)
from .renderer import (
    Clear,
    PushTranslate,
    PopTranslate,
    Line,
    FillRect,
    StrokeRect,
    FillCircle,
    FillPolygon,
    Text,
    DrawCommand,
    Scene,
    Renderer,
)
from .editor import Editor

__all__ = [
    "Camera",
    "CoordinateMapper",
    "cell_size",
    "fit_zoom",
    "CollisionValidator",
    "rects_intersect",
    "ToolMode",
    "Phase",
    "DragSession",
    "Interaction",
    "ToolContext",
    "ToolController",
    "Transition",
    "AddShelf",
    "AddDropoff",
    "AddRobotStation",
    "EraseRegion",
    "TogglePickup",
    "apply_intent",
    "erase_region",
    "Clear",
    "PushTranslate",
    "PopTranslate",
    "Line",
    "FillRect",
    "StrokeRect",
    "FillCircle",
    "FillPolygon",
    "Text",
    "DrawCommand",
    "Scene",
    "Renderer",
    "Editor",
]
