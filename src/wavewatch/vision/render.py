"""Debug visualisation of the pipeline's intermediate buffers."""

from typing import Dict, List, NamedTuple, Optional, Sequence, Tuple

import cv2
import numpy as np

from wavewatch.vision.intensity_frame import IntensityFrame


# Transition counts 0..7 drawn as distinct colours
RAINBOW_LEVEL_MAP: Dict[int, Tuple[int, int, int]] = {
    0: (0, 0, 0),
    1: (0, 0, 255),
    2: (0, 255, 0),
    3: (0, 255, 255),
    4: (255, 0, 0),
    5: (255, 0, 255),
    6: (255, 255, 0),
    7: (255, 255, 255),
}

# Saturated pixels only; everything in between is drawn mid-grey
EXTREMES_LEVEL_MAP: Dict[int, Tuple[int, int, int]] = {
    0: (0, 0, 0),
    255: (255, 255, 255),
}


class DebugView(NamedTuple):
    """How to draw one pipeline buffer."""
    name: str
    buffer: str
    level_map: Optional[Dict[int, Tuple[int, int, int]]] = None
    default_color: Optional[Tuple[int, int, int]] = None


DEBUG_VIEWS: List[DebugView] = [
    DebugView("camera", "grey"),
    DebugView("diff", "diff"),
    DebugView("contrast-diff", "contrast"),
    DebugView("contrast-diff-annotated", "contrast", EXTREMES_LEVEL_MAP, (128, 128, 128)),
    DebugView("binary", "binary"),
    DebugView("state", "transitions", RAINBOW_LEVEL_MAP, (255, 255, 255)),
    DebugView("count-passes", "wave_map"),
    DebugView("filtered-wave-map", "filtered_wave_map"),
]


def render_views(
    buffers: Dict[str, IntensityFrame],
    views: Sequence[DebugView] = DEBUG_VIEWS,
) -> Dict[str, np.ndarray]:
    """Render the named buffers to RGBA images, one per view."""
    return {
        view.name: buffers[view.buffer].render_debug(view.level_map, view.default_color)
        for view in views
    }


def compose_debug_mosaic(
    views: Dict[str, np.ndarray],
    scale: int = 6,
    columns: int = 4,
    is_waving: Optional[bool] = None,
) -> np.ndarray:
    """Tile RGBA views into one labelled BGR image for ``cv2.imshow``.

    Args:
        views: View name to RGBA image, all of the same size.
        scale: Integer upscaling factor (nearest neighbour).
        columns: Tiles per row.
        is_waving: When given, a status bar is drawn on top.

    Returns:
        BGR uint8 image.
    """
    label_h = 18
    status_h = 30 if is_waving is not None else 0
    if not views:
        return np.zeros((max(status_h, 1), 1, 3), dtype=np.uint8)

    first = next(iter(views.values()))
    tile_h = max(first.shape[0] * scale, 1)
    tile_w = max(first.shape[1] * scale, 120)
    rows = (len(views) + columns - 1) // columns
    mosaic = np.zeros(
        (status_h + rows * (tile_h + label_h), columns * tile_w, 3), dtype=np.uint8
    )

    for idx, (name, rgba) in enumerate(views.items()):
        row, col = divmod(idx, columns)
        y = status_h + row * (tile_h + label_h)
        x = col * tile_w
        cv2.putText(mosaic, name, (x + 4, y + 13),
                    cv2.FONT_HERSHEY_SIMPLEX, 0.4, (200, 200, 200), 1)
        if rgba.size == 0:
            continue
        tile = cv2.cvtColor(rgba, cv2.COLOR_RGBA2BGR)
        tile = cv2.resize(tile, (rgba.shape[1] * scale, rgba.shape[0] * scale),
                          interpolation=cv2.INTER_NEAREST)
        mosaic[y + label_h:y + label_h + tile.shape[0], x:x + tile.shape[1]] = tile

    if is_waving is not None:
        color = (0, 255, 0) if is_waving else (0, 0, 255)
        status_text = "Waving: YES!" if is_waving else "Waving: Nope"
        cv2.putText(mosaic, status_text, (10, 21),
                    cv2.FONT_HERSHEY_SIMPLEX, 0.7, color, 2)

    return mosaic
