"""Persist and load pipeline configuration profiles."""

from __future__ import annotations

import json
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any, Dict

from rosterdepth.config import PipelineConfig

_TUPLE_SETTINGS = {"score_ladder", "season_total_markers"}


@dataclass
class ConfigProfile:
    settings: Dict[str, Any] = field(default_factory=dict)
    columns: Dict[str, Dict[str, str]] = field(default_factory=dict)

    @classmethod
    def load(cls, path: Path) -> "ConfigProfile":
        data = json.loads(path.read_text(encoding="utf-8"))
        return cls(
            settings=data.get("settings", {}),
            columns=data.get("columns", {}),
        )

    def save(self, path: Path) -> None:
        payload = {
            "settings": self.settings,
            "columns": self.columns,
        }
        path.write_text(json.dumps(payload, indent=2, sort_keys=True), encoding="utf-8")

    def columns_for(self, table: str) -> Dict[str, str]:
        return dict(self.columns.get(table, {}))

    def to_config(self, base: PipelineConfig | None = None) -> PipelineConfig:
        """Apply stored settings on top of ``base`` (defaults when omitted)."""

        base = base or PipelineConfig()
        known = {f.name for f in fields(PipelineConfig)}
        unknown = sorted(set(self.settings) - known)
        if unknown:
            raise ValueError(f"Unknown configuration settings: {', '.join(unknown)}")

        values: Dict[str, Any] = {}
        for key, value in self.settings.items():
            if key in _TUPLE_SETTINGS:
                value = tuple(value)
            elif key == "label_scores":
                # JSON object keys are strings; labels are ints.
                value = {
                    algorithm: {int(label): int(score) for label, score in mapping.items()}
                    for algorithm, mapping in value.items()
                }
            values[key] = value
        return base.with_overrides(**values)
