"""Launch the floor-plan grid editor."""
from __future__ import annotations

import sys
from pathlib import Path

from apps.editor_app import EditorApp
from floorplan import GridDimensions

ASSET_PATH = Path(__file__).parent


def main():
    width, height = 20, 20
    if len(sys.argv) >= 3:
        width, height = int(sys.argv[1]), int(sys.argv[2])
    app = EditorApp(
        GridDimensions(width, height),
        settings_path=ASSET_PATH / "settings" / "editor.json",
        layout_path=ASSET_PATH / "layouts" / "floorplan.json",
    )
    app.run()


if __name__ == "__main__":
    main()
