"""Lay out an orbital system, record the run and draw diagnostic figures."""
from __future__ import annotations

import argparse
import logging
import math
from collections import Counter
from collections.abc import Mapping, Sequence
from datetime import datetime
from pathlib import Path
from typing import Dict, List, Optional

import numpy as np

import matplotlib

matplotlib.use("Agg")
import matplotlib.pyplot as plt
from matplotlib.patches import Circle, Wedge

from .core.checks import Violation, find_violations
from .core.config import ViewPolicy
from .core.engine import LayoutEngine
from .core.errors import LayoutError
from .core.logging_utils import LayoutRecorder
from .core.model import CelestialObject, Classification, LayoutEvent, LayoutResult
from .data.loader import load_system
from .data.policies import POLICY_DISPLAY_ORDER
from .data.systems import DEFAULT_SYSTEM_KEY, SYSTEMS

FIGS_SUBDIR = "figs"
GOLDEN_ANGLE = math.pi * (3.0 - math.sqrt(5.0))

CLASS_COLORS = {
    Classification.STAR: "#ffd43b",
    Classification.PLANET: "#4dabf7",
    Classification.MOON: "#adb5bd",
    Classification.BELT: "#a9743a",
    Classification.RING: "#e9c46a",
    Classification.OTHER: "#9775fa",
}


def ensure_fig_dir(run_dir: Path) -> Path:
    fig_dir = run_dir / FIGS_SUBDIR
    fig_dir.mkdir(parents=True, exist_ok=True)
    return fig_dir


def absolute_positions(
    objects: Sequence[CelestialObject], layout: Mapping[str, LayoutResult]
) -> Dict[str, np.ndarray]:
    """Top-down positions, spreading siblings around their primary by the golden angle."""

    by_id = {obj.id: obj for obj in objects}
    positions: Dict[str, np.ndarray] = {}
    sibling_index: Counter = Counter()
    root_offset = 0.0

    def place(obj: CelestialObject) -> np.ndarray:
        nonlocal root_offset
        if obj.id in positions:
            return positions[obj.id]
        parent_id = obj.parent_id
        if parent_id is None:
            pos = np.array([root_offset, 0.0])
            root_offset += 2.2 * max(_system_reach(obj.id, objects, layout), 1.0)
        else:
            parent = by_id.get(parent_id)
            origin = place(parent) if parent is not None else np.zeros(2)
            distance = layout[obj.id].orbit_distance or 0.0
            angle = sibling_index[parent_id] * GOLDEN_ANGLE
            sibling_index[parent_id] += 1
            pos = origin + distance * np.array([math.cos(angle), math.sin(angle)])
        positions[obj.id] = pos
        return pos

    for obj in objects:
        place(obj)
    return positions


def _system_reach(root_id: str, objects: Sequence[CelestialObject], layout: Mapping[str, LayoutResult]) -> float:
    reach = 0.0
    for obj in objects:
        if obj.parent_id != root_id:
            continue
        result = layout[obj.id]
        if result.belt_geometry is not None:
            reach = max(reach, result.belt_geometry.outer_radius)
        else:
            reach = max(reach, (result.orbit_distance or 0.0) + result.visual_radius)
    return reach


def plot_layout(
    fig_dir: Path,
    objects: Sequence[CelestialObject],
    layout: Mapping[str, LayoutResult],
    policy: ViewPolicy,
) -> Path:
    positions = absolute_positions(objects, layout)
    by_id = {obj.id: obj for obj in objects}
    fig, ax = plt.subplots(figsize=(8, 8))
    for obj in objects:
        result = layout[obj.id]
        color = CLASS_COLORS[obj.classification]
        parent = by_id.get(obj.parent_id) if obj.parent_id is not None else None
        center = positions[parent.id] if parent is not None else np.zeros(2)
        belt = result.belt_geometry
        if belt is not None:
            ax.add_patch(Wedge(tuple(center), belt.outer_radius, 0, 360, width=belt.width, color=color, alpha=0.35))
            continue
        if result.orbit_distance is not None:
            ax.add_patch(Circle(tuple(center), result.orbit_distance, fill=False, color="#868e96", lw=0.5, alpha=0.5))
        ax.add_patch(Circle(tuple(positions[obj.id]), result.visual_radius, color=color, label=obj.classification.value))

    handles, labels = ax.get_legend_handles_labels()
    if handles:
        # one entry per classification
        seen = {}
        for handle, label in zip(handles, labels):
            seen.setdefault(label, handle)
        ax.legend(list(seen.values()), list(seen.keys()), loc="upper right")
    ax.autoscale_view()
    ax.set_aspect("equal", "datalim")
    ax.set_xlabel("x [scene units]")
    ax.set_ylabel("y [scene units]")
    ax.set_title(f"Layout: {policy.name}")
    fig.tight_layout()
    out = fig_dir / f"layout_{policy.policy_id}.png"
    fig.savefig(out, dpi=150)
    plt.close(fig)
    return out


def plot_radii(
    fig_dir: Path,
    objects: Sequence[CelestialObject],
    layout: Mapping[str, LayoutResult],
    policy: ViewPolicy,
) -> Path:
    bodies = [obj for obj in objects if layout[obj.id].belt_geometry is None]
    radii = np.array([layout[obj.id].visual_radius for obj in bodies], dtype=float)
    fig, ax = plt.subplots(figsize=(max(6, 0.4 * len(bodies)), 4))
    ax.bar(range(len(bodies)), radii, color=[CLASS_COLORS[obj.classification] for obj in bodies])
    ax.axhline(policy.min_visual_size, color="#d9480f", linestyle="--", alpha=0.6, label="min visual")
    ax.axhline(policy.max_visual_size, color="#1864ab", linestyle=":", alpha=0.6, label="max visual")
    ax.set_xticks(range(len(bodies)))
    ax.set_xticklabels([obj.name for obj in bodies], rotation=60, ha="right", fontsize=7)
    ax.set_yscale("log")
    ax.set_ylabel("visual radius")
    ax.set_title(f"Visual radii: {policy.name}")
    ax.legend()
    ax.grid(True, alpha=0.3)
    fig.tight_layout()
    out = fig_dir / f"radii_{policy.policy_id}.png"
    fig.savefig(out, dpi=150)
    plt.close(fig)
    return out


def summarize_events(events: List[LayoutEvent]) -> Dict[str, int]:
    summary: Counter = Counter(f"{event.stage}/{event.kind}" for event in events)
    return dict(sorted(summary.items()))


def print_summary(
    system_name: str,
    policy: ViewPolicy,
    run_dir: Optional[Path],
    layout: Mapping[str, LayoutResult],
    violations: List[Violation],
    event_summary: Dict[str, int],
) -> None:
    placed = [result for result in layout.values() if result.orbit_distance is not None]
    belts = [result for result in layout.values() if result.belt_geometry is not None]
    print(f"System: {system_name}  policy: {policy.policy_id}")
    if run_dir is not None:
        print(f" Run folder: {run_dir}")
    print(f" Objects: {len(layout)}  orbiting: {len(placed)}  belts/rings: {len(belts)}")
    if placed:
        print(f" Outermost orbit: {max(result.orbit_distance for result in placed):.4g}")
    radii = [result.visual_radius for result in layout.values()]
    if radii:
        print(f" Visual radius range: {min(radii):.4g} .. {max(radii):.4g}")
    if event_summary:
        print(" Adjustments: " + ", ".join(f"{kind}: {count}" for kind, count in event_summary.items()))
    else:
        print(" Adjustments: none")
    if violations:
        print(f" Invariant violations: {len(violations)}")
        for violation in violations:
            print(f"  {violation}")
    else:
        print(" Invariants: ok")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="orbit-layout",
        description="Compute the visual layout of an orbital system and write diagnostics.",
    )
    parser.add_argument("system_json", nargs="?", help="Path to a system JSON document")
    parser.add_argument(
        "--system",
        default=DEFAULT_SYSTEM_KEY,
        choices=sorted(SYSTEMS),
        help="Bundled system to use when no JSON file is given",
    )
    parser.add_argument("--policy", default="all", help="Policy id or 'all'")
    parser.add_argument("--runs-dir", default=str(Path("data") / "runs"), help="Root folder for run output")
    parser.add_argument("--no-plot", action="store_true", help="Skip the matplotlib figures")
    parser.add_argument("--collision-pass", action="store_true", help="Enable the global collision pass")
    parser.add_argument("--verbose", action="store_true", help="Log engine debug output")
    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")

    if args.system_json:
        json_path = Path(args.system_json)
        if not json_path.is_file():
            parser.error(f"System file not found: {json_path}")
        try:
            objects = load_system(json_path)
        except LayoutError as exc:
            parser.error(str(exc))
        system_key = json_path.stem
        system_name = json_path.name
    else:
        system = SYSTEMS[args.system]
        objects = system.objects
        system_key = system.key
        system_name = system.name

    if args.policy == "all":
        policy_ids = list(POLICY_DISPLAY_ORDER)
    elif args.policy in POLICY_DISPLAY_ORDER:
        policy_ids = [args.policy]
    else:
        parser.error(f"Unknown policy {args.policy!r}, expected one of {', '.join(POLICY_DISPLAY_ORDER)} or 'all'")

    exit_code = 0
    for policy_id in policy_ids:
        events: List[LayoutEvent] = []
        engine = LayoutEngine(on_event=events.append)
        policy = engine.policy_for(policy_id)
        if args.collision_pass:
            policy = policy.with_overrides(global_collision_pass=True)
        try:
            layout = engine.compute_layout(objects, policy)
        except LayoutError as exc:
            print(f"{system_name} under {policy_id}: {exc}")
            return 2
        violations = find_violations(objects, layout, policy)

        with LayoutRecorder(args.runs_dir, run_id=f"{system_key}_{policy_id}") as recorder:
            recorder.write_meta(
                {
                    "system": system_name,
                    "policy": policy.policy_id,
                    "collision_pass": policy.global_collision_pass,
                    "objects": len(layout),
                    "events": len(events),
                    "violations": [str(violation) for violation in violations],
                    "created": datetime.now().isoformat(timespec="seconds"),
                }
            )
            recorder.record(objects, layout, events)
        run_dir = recorder.run_dir

        if not args.no_plot:
            fig_dir = ensure_fig_dir(run_dir)
            plot_layout(fig_dir, objects, layout, policy)
            plot_radii(fig_dir, objects, layout, policy)

        print_summary(system_name, policy, run_dir, layout, violations, summarize_events(events))
        if violations:
            exit_code = 1
    return exit_code


if __name__ == "__main__":
    raise SystemExit(main())
