"""JSON file persistence for board configuration."""

from __future__ import annotations

import json
from pathlib import Path

from harvestboard.models import BoardConfig

DEFAULT_CONFIG_FILE = "harvestboard.json"


class ConfigStore:
    """Reads and writes the board config (JSON file). Tasks are never stored."""

    def __init__(self, path: str | Path = DEFAULT_CONFIG_FILE):
        self.path = Path(path)

    def load(self) -> BoardConfig | None:
        if not self.path.exists():
            return None
        return BoardConfig.from_dict(json.loads(self.path.read_text()))

    def save(self, config: BoardConfig) -> None:
        self.path.write_text(json.dumps(config.to_dict(), indent=4))
