"""
Layout instance for Dock-MCP — the holder of one current tree.

The engine itself is stateless; something has to own "the" tree between
edits.  ``DockLayout`` is that owner: it applies one operation at a time to
its current tree, swaps in the result and tells subscribers about it.

    layout = DockLayout(on_state_change=print)
    layout.add_best_fitting("editor")
    layout.add_best_fitting("terminal")
    measurement = layout.measure()

Edits are serialized by construction — there is one ``state`` and every
method replaces it wholesale.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Optional, TypeVar, Union

from .config import DockSettings
from .drop_zones import drop_zones, hit_test
from .measure import measure
from .models import Divider, DropRect, LayoutTree, Measurement, Side, Viewport
from .operations import add_best_fitting, apply_insert, delete_tile, update_growth_values
from .repair import verify_tree
from .resize import resize_divider
from .store import create_empty, deep_copy

logger = logging.getLogger(__name__)

T = TypeVar("T")

StateListener = Callable[[LayoutTree], None]
Updater = Union[LayoutTree, Callable[[LayoutTree], LayoutTree]]


class DockLayout:
    """Owns a current ``LayoutTree`` and applies edits to it.

    Args:
        initial_state:   Tree to start from (default: empty).
        settings:        Engine settings; defaults apply when omitted.
        on_state_change: Optional listener called with every new tree.
    """

    def __init__(
        self,
        initial_state: Optional[LayoutTree] = None,
        settings: Optional[DockSettings] = None,
        on_state_change: Optional[StateListener] = None,
    ):
        self.settings = settings or DockSettings()
        self.initial_state = initial_state if initial_state is not None else create_empty()
        self._state = self.initial_state
        self._listeners: list[StateListener] = []
        if on_state_change is not None:
            self._listeners.append(on_state_change)

        if self.settings.verify_invariants:
            verify_tree(self._state)

    # --- State ---

    @property
    def state(self) -> LayoutTree:
        return self._state

    def get_deep_copy(self) -> LayoutTree:
        """A copy of the current tree that shares nothing with it."""
        return deep_copy(self._state)

    def subscribe(self, listener: StateListener) -> Callable[[], None]:
        """Register ``listener``; returns a function that unregisters it."""
        self._listeners.append(listener)

        def unsubscribe():
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def set_state(self, updater: Updater) -> LayoutTree:
        """Replace the current tree.

        ``updater`` is either the new tree or a function from the current
        tree to the new one.
        """
        new_state = updater(self._state) if callable(updater) else updater
        if self.settings.verify_invariants:
            verify_tree(new_state)

        self._state = new_state
        for listener in list(self._listeners):
            listener(new_state)
        return new_state

    def apply_draft_action(self, action: Callable[..., LayoutTree], *args: Any) -> LayoutTree:
        """Apply ``action(state, *args)`` and adopt its result."""
        logger.debug(f"Applying {getattr(action, '__name__', action)}{args}")
        return self.set_state(lambda state: action(state, *args))

    # --- Edits ---

    def add_best_fitting(self, payload: T, viewport: Optional[Viewport] = None) -> LayoutTree:
        return self.apply_draft_action(add_best_fitting, payload, viewport or self.settings.viewport)

    def apply_insert(self, moving_id: str, target_id: str, side: Side) -> LayoutTree:
        return self.apply_draft_action(apply_insert, moving_id, target_id, side)

    def delete_tile(self, node_id: str) -> LayoutTree:
        return self.apply_draft_action(delete_tile, node_id)

    def update_growth_values(self, values: dict[str, float]) -> LayoutTree:
        return self.apply_draft_action(update_growth_values, values)

    def resize_divider(
        self,
        divider: Divider,
        position: float,
        viewport: Optional[Viewport] = None,
    ) -> LayoutTree:
        return self.apply_draft_action(
            resize_divider,
            divider,
            position,
            viewport or self.settings.viewport,
            self.settings.divider_min_px,
        )

    def drop(self, moving_id: str, zone: DropRect) -> LayoutTree:
        """Release ``moving_id`` on ``zone``."""
        return self.apply_insert(moving_id, zone.action.node_id, zone.action.side)

    # --- Reads ---

    def measure(self) -> Measurement:
        return measure(self._state)

    def drop_zones(self, dragged_id: str, viewport: Optional[Viewport] = None) -> list[DropRect]:
        """Drop zones for dragging ``dragged_id`` over the current tree."""
        return drop_zones(
            self._state,
            viewport or self.settings.viewport,
            dragged_id,
            margin=self.settings.drop_margin,
            max_depth=self.settings.drop_depth,
        )

    def zone_at(self, dragged_id: str, x: float, y: float, viewport: Optional[Viewport] = None) -> Optional[DropRect]:
        """The drop zone under ``(x, y)`` while dragging ``dragged_id``."""
        return hit_test(self.drop_zones(dragged_id, viewport), x, y)
