"""Text rendering of track timelines."""

from __future__ import annotations

from typing import Iterable


def render_ascii_timeline(track_id: int, frame_indices: Iterable[int], cell_width: int = 3) -> str:
    """Draw observed frame indices on a fixed-width timeline starting at frame 0.

    An object seen in frames 1, 2 and 4 renders as:
        Object #   3 [     1  2     4]
    """
    cells = []
    next_index = 0
    for frame_index in frame_indices:
        while next_index < frame_index:
            cells.append(" " * cell_width)
            next_index += 1
        cells.append(f"{frame_index:>{cell_width}d}")
        next_index += 1
    return f"Object #{track_id:>4d} [{''.join(cells)}]"
