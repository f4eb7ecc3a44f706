"""
Forensic Rendering — Render Sink Boundary
===========================================
Frames leave the core through a sink, one update call per logical layer.

The sink is an external collaborator (a map layer registry, a websocket
push, a test recorder). It receives data only and gives nothing back.
"""

from __future__ import annotations

import logging
from typing import Any, Protocol, Sequence

from forensics.policy.mode import LAYER_REPLAY_CELLS, LAYER_REPLAY_ENTITIES
from forensics.replay.frame import ReplayFrame

logger = logging.getLogger("forensics.rendering")

FRAME_LAYERS = (LAYER_REPLAY_CELLS, LAYER_REPLAY_ENTITIES)


class RenderSink(Protocol):
    def update_layer(self, layer_id: str, items: Sequence[Any]) -> None:
        ...  # pragma: no cover


def push_frame(sink: RenderSink, frame: ReplayFrame) -> None:
    """Send a frame's cell states and entity positions to their layers."""
    sink.update_layer(LAYER_REPLAY_CELLS, frame.cell_states)
    sink.update_layer(LAYER_REPLAY_ENTITIES, frame.entities)
    logger.debug(
        f"Frame {frame.key} pushed: {len(frame.cell_states)} cells, "
        f"{len(frame.entities)} entities"
    )


__all__ = ["FRAME_LAYERS", "RenderSink", "push_frame"]
