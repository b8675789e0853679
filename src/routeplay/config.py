from dataclasses import dataclass
from typing import Optional


@dataclass
class ReplayConfig:
    """Configuration for the routeplay CLI."""

    speed: float = 1.0
    fps: float = 60.0
    synthetic_interval_ms: int = 5000
    timeout: float = 30.0
    map_buffer: float = 50.0
    readout_interval_ms: float = 1000.0
    log_level: str = "WARNING"
    open_browser: bool = True
    output: Optional[str] = None
