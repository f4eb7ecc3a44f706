"""
Forensic Replay — Session (Mode Activation Entrypoint)
========================================================
Switches a host into forensic mode and wires the pieces together.

Activation order:
1. Validate the time context (refuse with messages, never raise)
2. Check the requested layers against the mode policy
3. Build engine + controller bound to the same explicit ModeContext
4. Subscribe: every timeline change → frame at new time → render sink
5. Render the initial frame

The session does NOT implement replay logic. It only configures.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import timedelta
from typing import Iterable, Optional, Union

from forensics.playback.controller import TimelineController
from forensics.playback.models import PlaybackSpeed, TimelineChangeEvent
from forensics.playback.scheduler import Scheduler
from forensics.playback.surface import PlaybackSurface
from forensics.policy.mode import (
    FORENSIC_POLICY,
    InteractionState,
    ModeContext,
    ModePolicy,
    activate_mode,
)
from forensics.policy.result import ValidationResult
from forensics.policy.time_context import TimeContext
from forensics.rendering import FRAME_LAYERS, RenderSink, push_frame
from forensics.replay.engine import ReplayEngine
from forensics.replay.frame import ReplayFrame
from forensics.replay.source import ReplayDataSource

logger = logging.getLogger("forensics.session")


class ForensicSession:
    """An active forensic replay: one engine, one controller, one sink."""

    def __init__(
        self,
        context: ModeContext,
        engine: ReplayEngine,
        controller: TimelineController,
        sink: Optional[RenderSink] = None,
        layers: Iterable[str] = FRAME_LAYERS,
    ) -> None:
        self._context = context
        self._engine = engine
        self._controller = controller
        self._sink = sink
        self._layers = tuple(layers)
        self._last_frame: Optional[ReplayFrame] = None
        self._closed = False
        self._surface = PlaybackSurface(controller)
        self._subscription = controller.subscribe(self._on_time_change)

    @property
    def context(self) -> ModeContext:
        return self._context

    @property
    def engine(self) -> ReplayEngine:
        return self._engine

    @property
    def controller(self) -> TimelineController:
        return self._controller

    @property
    def surface(self) -> PlaybackSurface:
        return self._surface

    @property
    def layers(self) -> tuple[str, ...]:
        return self._layers

    @property
    def last_frame(self) -> Optional[ReplayFrame]:
        return self._last_frame

    @property
    def closed(self) -> bool:
        return self._closed

    # ══════════════════════════════════════════════════════════
    # DATA & RENDERING
    # ══════════════════════════════════════════════════════════

    def load_data(self, source: ReplayDataSource) -> None:
        """Swap the dataset and re-render at the current cursor."""
        self._engine.load_data(source)
        self.render_current()

    def render_current(self) -> Optional[ReplayFrame]:
        return self._render(self._controller.current_time)

    def _on_time_change(self, event: TimelineChangeEvent) -> None:
        self._render(event.current_time)

    def _render(self, at) -> Optional[ReplayFrame]:
        frame = self._engine.get_frame_at(at)
        if frame is None:
            return None
        self._last_frame = frame
        if self._sink is not None:
            push_frame(self._sink, frame)
        return frame

    # ══════════════════════════════════════════════════════════
    # POLICY GATES
    # ══════════════════════════════════════════════════════════

    def request_interaction(self, state: InteractionState) -> ValidationResult:
        result = self._context.request_state(state)
        if not result.valid:
            logger.info(f"Interaction refused: {'; '.join(result.messages)}")
        return result

    def request_action(self, action: str) -> ValidationResult:
        return self._context.policy.check_action(action)

    # ══════════════════════════════════════════════════════════
    # LIFECYCLE
    # ══════════════════════════════════════════════════════════

    def close(self) -> None:
        """Stop playback and release listeners. Idempotent."""
        if self._closed:
            return
        self._closed = True
        self._subscription.unsubscribe()
        self._controller.destroy()
        logger.info("Forensic session closed.")


@dataclass(frozen=True)
class SessionOpening:
    """Result of open_session(): a session, or the reasons it was refused."""

    allowed: bool
    messages: tuple[str, ...] = field(default_factory=tuple)
    session: Optional[ForensicSession] = None


def open_session(
    time_context: Optional[TimeContext],
    source: Optional[ReplayDataSource] = None,
    sink: Optional[RenderSink] = None,
    *,
    layers: Iterable[str] = FRAME_LAYERS,
    scheduler: Optional[Scheduler] = None,
    tick_interval: Optional[timedelta] = None,
    speed: Union[PlaybackSpeed, float, None] = None,
    cache_size: Optional[int] = None,
    policy: ModePolicy = FORENSIC_POLICY,
) -> SessionOpening:
    """
    Activate forensic mode. No frame can be queried through a session
    whose time context failed validation: none is created.
    """
    activation = activate_mode(time_context, policy)
    if not activation.allowed:
        return SessionOpening(allowed=False, messages=activation.messages)

    layers = tuple(layers)
    layer_check = policy.check_layers(layers)
    if not layer_check.valid:
        logger.warning(f"Forensic session refused: {'; '.join(layer_check.messages)}")
        return SessionOpening(allowed=False, messages=layer_check.messages)

    context = activation.context
    engine = ReplayEngine(cache_size=cache_size, mode=context)
    if source is not None:
        engine.load_data(source)

    controller = TimelineController(
        time_context.start,
        time_context.end,
        initial_time=time_context.current,
        tick_interval=tick_interval,
        speed=speed,
        scheduler=scheduler,
        mode=context,
    )
    session = ForensicSession(context, engine, controller, sink=sink, layers=layers)
    session.render_current()

    logger.info(
        f"Forensic session opened for "
        f"[{time_context.start.isoformat()}, {time_context.end.isoformat()}]."
    )
    return SessionOpening(allowed=True, session=session)
