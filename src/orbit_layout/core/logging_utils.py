"""Run-folder recorder for computed layouts."""
from __future__ import annotations

import json
from collections.abc import Iterable, Mapping
from datetime import datetime
from pathlib import Path
from typing import Optional, Sequence

from .model import CelestialObject, LayoutEvent, LayoutResult


class LayoutRecorder:
    """Buffered writer that stores one layout run as CSV files plus metadata."""

    LAYOUT_HEADER = [
        "id",
        "name",
        "classification",
        "parent",
        "visual_radius",
        "orbit_distance",
        "belt_inner",
        "belt_outer",
        "belt_center",
        "animation_speed",
    ]
    EVENTS_HEADER = ["stage", "kind", "object_id", "before", "after", "detail"]

    def __init__(
        self,
        root_dir: str | Path = "data/runs",
        run_id: Optional[str] = None,
        *,
        layout_flush_threshold: int = 200,
        events_flush_threshold: int = 50,
    ) -> None:
        self.root_dir = Path(root_dir)
        self.root_dir.mkdir(parents=True, exist_ok=True)

        timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")

        def make_candidate(suffix: Optional[int] = None) -> str:
            base = run_id or f"{timestamp}_layout"
            if suffix is None:
                return base
            return f"{base}_{suffix:02d}"

        candidate_id = make_candidate()
        suffix = 1
        while (self.root_dir / candidate_id).exists():
            candidate_id = make_candidate(suffix)
            suffix += 1

        self.run_id = candidate_id
        self.run_dir = self.root_dir / self.run_id
        self.run_dir.mkdir(parents=True, exist_ok=False)

        self.layout_path = self.run_dir / "layout.csv"
        self.events_path = self.run_dir / "events.csv"
        self.meta_path = self.run_dir / "meta.json"

        self._layout_file = self.layout_path.open("w", newline="", encoding="utf-8")
        self._layout_file.write(",".join(self.LAYOUT_HEADER) + "\n")
        self._ev_file = self.events_path.open("w", newline="", encoding="utf-8")
        self._ev_file.write(",".join(self.EVENTS_HEADER) + "\n")

        self._layout_buffer: list[str] = []
        self._ev_buffer: list[str] = []
        self._layout_threshold = max(1, layout_flush_threshold)
        self._ev_threshold = max(1, events_flush_threshold)
        self.rows_written = 0
        self.events_written = 0

        (self.root_dir / "last_run.txt").write_text(self.run_id, encoding="utf-8")

    def write_meta(self, meta: dict) -> None:
        with self.meta_path.open("w", encoding="utf-8") as fh:
            json.dump(meta, fh, indent=2, sort_keys=True)

    def log_result(self, obj: CelestialObject, result: LayoutResult) -> None:
        belt = result.belt_geometry
        values: Sequence[object] = (
            obj.id,
            obj.name,
            obj.classification.value,
            obj.parent_id,
            result.visual_radius,
            result.orbit_distance,
            belt.inner_radius if belt is not None else None,
            belt.outer_radius if belt is not None else None,
            belt.center_radius if belt is not None else None,
            result.animation_speed,
        )
        self._layout_buffer.append(",".join(self._format_value(v) for v in values))
        self.rows_written += 1
        if len(self._layout_buffer) >= self._layout_threshold:
            self._flush_layout()

    def log_event(self, event: LayoutEvent) -> None:
        values = (event.stage, event.kind, event.object_id, event.before, event.after, event.detail)
        self._ev_buffer.append(",".join(self._format_value(v) for v in values))
        self.events_written += 1
        if len(self._ev_buffer) >= self._ev_threshold:
            self._flush_events()

    def record(
        self,
        objects: Iterable[CelestialObject],
        layout: Mapping[str, LayoutResult],
        events: Iterable[LayoutEvent] = (),
    ) -> None:
        """Write every laid out object and the adjustments behind it."""

        for obj in objects:
            result = layout.get(obj.id)
            if result is not None:
                self.log_result(obj, result)
        for event in events:
            self.log_event(event)

    def close(self) -> None:
        self._flush_layout()
        self._flush_events()
        self._layout_file.close()
        self._ev_file.close()

    def _flush_layout(self) -> None:
        if self._layout_buffer:
            self._layout_file.write("\n".join(self._layout_buffer) + "\n")
            self._layout_file.flush()
            self._layout_buffer.clear()

    def _flush_events(self) -> None:
        if self._ev_buffer:
            self._ev_file.write("\n".join(self._ev_buffer) + "\n")
            self._ev_file.flush()
            self._ev_buffer.clear()

    @staticmethod
    def _format_value(value: object) -> str:
        if value is None:
            return ""
        if isinstance(value, float):
            return f"{value:.10g}"
        text = str(value)
        if any(ch in text for ch in ',"\n'):
            return '"' + text.replace('"', '""') + '"'
        return text

    def __enter__(self) -> "LayoutRecorder":
        return self

    def __exit__(self, exc_type, exc, tb) -> Optional[bool]:
        self.close()
        return None


__all__ = ["LayoutRecorder"]
