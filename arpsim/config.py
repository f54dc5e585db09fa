"""
Simulation settings.

Every timing constant of the scenario lives here so the HTTP layer and the
tests can build a simulator with different values.
"""
from __future__ import annotations

import json
import os
from typing import Literal, Optional

from pydantic import BaseModel, Field

CONFIG_ENV_VAR = "ARPSIM_CONFIG"


class SimulationSettings(BaseModel):
    # Animation
    duration_ms: float = Field(1200.0, gt=0)
    frame_interval_ms: float = Field(16.0, gt=0)
    unicast_split: float = Field(0.5, gt=0, lt=1)
    broadcast_split: float = Field(0.38, gt=0, lt=1)
    pause_fraction: float = Field(0.18, ge=0, lt=1)

    # Auto play / event log
    auto_play_interval_ms: float = Field(1350.0, gt=0)
    log_cap: int = Field(200, gt=0)

    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"

    @classmethod
    def load_from_file(cls, path: str) -> "SimulationSettings":
        """Reads a JSON file; keys that are missing keep their defaults."""
        with open(path, "r", encoding="utf-8") as fh:
            data = json.load(fh)
        return cls(**data)


def get_settings(path: Optional[str] = None) -> SimulationSettings:
    """
    Returns the active settings.
    Falls back to the file named by ARPSIM_CONFIG, then to the defaults.
    """
    path = path or os.environ.get(CONFIG_ENV_VAR)
    if path:
        return SimulationSettings.load_from_file(path)
    return SimulationSettings()
