"""Layout engine facade tying the pipeline stages together."""
from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Mapping
from types import MappingProxyType
from typing import Optional

from ..data.policies import DEFAULT_POLICY_ID, POLICIES, get_policy
from .animation import derive_animation_speeds
from .cache import LayoutCache, fingerprint
from .config import LAYOUT_CFG, LayoutCfg, PolicyId, ViewPolicy
from .hierarchy import enforce_size_hierarchy
from .model import CelestialObject, LayoutEvent, LayoutResult, LayoutState
from .placement import place_orbits, resolve_global_collisions
from .sizing import resolve_visual_radii
from .tree import OrbitTree

LOG = logging.getLogger(__name__)

EventCallback = Callable[[LayoutEvent], None]


class LayoutEngine:
    """Computes and memoizes visual layouts for celestial object sets.

    Each engine owns its cache slot, so independent engines never see each
    other's results. ``on_event`` receives every adjustment a freshly computed
    layout made; cache hits emit nothing.
    """

    def __init__(
        self,
        policies: Optional[Mapping[str, ViewPolicy]] = None,
        cache: Optional[LayoutCache] = None,
        *,
        validate: bool = True,
        on_event: Optional[EventCallback] = None,
        cfg: LayoutCfg = LAYOUT_CFG,
    ) -> None:
        self.policies = POLICIES if policies is None else policies
        self.cache = LayoutCache() if cache is None else cache
        self.validate = validate
        self.on_event = on_event
        self.cfg = cfg

    def policy_for(self, policy: "PolicyId | str | ViewPolicy") -> ViewPolicy:
        if isinstance(policy, ViewPolicy):
            return policy
        return get_policy(policy, self.policies)

    def compute_layout(
        self,
        objects: Iterable[CelestialObject],
        policy: "PolicyId | str | ViewPolicy" = DEFAULT_POLICY_ID,
        paused: bool = False,
    ) -> Mapping[str, LayoutResult]:
        """Return the layout of *objects* under *policy*.

        Identical requests return the identical mapping until the cache is
        cleared or a different request replaces it.
        """

        items = tuple(objects)
        view = self.policy_for(policy)
        key = fingerprint(items, view, paused)
        cached = self.cache.get(key)
        if cached is not None:
            return cached
        result = self._compute(items, view)
        self.cache.put(key, result)
        return result

    def clear_layout_cache(self) -> None:
        self.cache.clear()

    def _lay_out(self, tree: OrbitTree, view: ViewPolicy, state: LayoutState) -> None:
        place_orbits(tree, view, state, self.cfg)
        if view.global_collision_pass:
            resolve_global_collisions(tree, view, state, self.cfg)

    def _compute(self, items: tuple[CelestialObject, ...], view: ViewPolicy) -> Mapping[str, LayoutResult]:
        tree = OrbitTree.build(items, validate=self.validate)
        state = LayoutState()
        resolve_visual_radii(tree, view, state, self.cfg)
        self._lay_out(tree, view, state)
        if enforce_size_hierarchy(tree, view, state, self.cfg):
            LOG.debug("Sizes changed under %s, placing orbits again", view.policy_id)
            self._lay_out(tree, view, state)
        speeds = derive_animation_speeds(tree.objects, self.cfg)

        results: dict[str, LayoutResult] = {}
        for obj in tree.objects:
            body = state.body(obj.id)
            results[obj.id] = LayoutResult(
                visual_radius=body.visual_radius,
                orbit_distance=body.orbit_distance,
                belt_geometry=body.belt,
                animation_speed=speeds[obj.id],
            )
        LOG.debug(
            "Computed layout for %d objects under %s with %d adjustments",
            len(results),
            view.policy_id,
            len(state.events),
        )
        if self.on_event is not None:
            for event in state.events:
                self.on_event(event)
        return MappingProxyType(results)


_DEFAULT_ENGINE = LayoutEngine()


def default_engine() -> LayoutEngine:
    return _DEFAULT_ENGINE


def compute_layout(
    objects: Iterable[CelestialObject],
    policy: "PolicyId | str | ViewPolicy" = DEFAULT_POLICY_ID,
    paused: bool = False,
) -> Mapping[str, LayoutResult]:
    """Module-level shortcut for :meth:`LayoutEngine.compute_layout` on the default engine."""

    return _DEFAULT_ENGINE.compute_layout(objects, policy, paused)


def clear_layout_cache() -> None:
    _DEFAULT_ENGINE.clear_layout_cache()


__all__ = [
    "EventCallback",
    "LayoutEngine",
    "clear_layout_cache",
    "compute_layout",
    "default_engine",
]
