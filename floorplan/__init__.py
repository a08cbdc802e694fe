"""Floor-plan data model, editor settings and derived layout helpers."""

from .config import (  # noqa: F401
    GridDimensions,
    Shelf,
    Dropoff,
    RobotStation,
    PickupPoint,
    NavigationPoint,
    Robot,
    EnvironmentElements,
    GraphNode,
    GraphEdge,
    Graph,
    EditorConfig,
    EDITOR_THEME,
    load_editor_config,
    load_json,
    save_json,
)
from .layout import (  # noqa: F401
    generate_pickup_points,
    generate_navigation_points,
    generate_robots,
    build_graph,
    refresh_derived,
    segment_crosses_shelf,
    toggle_selection,
    normalize_selection,
    selected_pickups,
)
