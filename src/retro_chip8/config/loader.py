import logging

import yaml
from typing import Dict, Any, Optional
from .models import MachineConfig, DisplayConfig, DEFAULT_KEYMAP

logger = logging.getLogger(__name__)


class ConfigLoader:
    def load_from_file(self, path: str) -> MachineConfig:
        with open(path, 'r') as f:
            data = yaml.safe_load(f)
        config = self.parse(data or {})
        logger.info("Loaded machine config from %s", path)
        return config

    # @intent:responsibility YAMLから得た辞書を検証し、MachineConfigに変換します。
    def parse(self, data: Dict[str, Any]) -> MachineConfig:
        if not isinstance(data, dict):
            raise ValueError("Config root must be a mapping.")

        defaults = MachineConfig()
        cycles = self._parse_positive(data, "cycles_per_second", defaults.cycles_per_second)
        timer_hz = self._parse_positive(data, "timer_hz", defaults.timer_hz)

        max_stack_depth: Optional[int] = defaults.max_stack_depth
        if "max_stack_depth" in data:
            raw = data["max_stack_depth"]
            max_stack_depth = None if raw is None else self._parse_positive(data, "max_stack_depth", 0)

        seed = data.get("seed")
        if seed is not None:
            seed = self._parse_int(seed, "seed")

        display_data = data.get("display", {}) or {}
        display = DisplayConfig(
            scale=self._parse_positive(display_data, "scale", DisplayConfig.scale),
            foreground=str(display_data.get("foreground", DisplayConfig.foreground)),
            background=str(display_data.get("background", DisplayConfig.background)),
        )

        keymap = dict(DEFAULT_KEYMAP)
        if "keymap" in data:
            keymap = {}
            for key_name, value in (data["keymap"] or {}).items():
                key_value = self._parse_int(value, f"keymap.{key_name}")
                if not 0 <= key_value <= 0xF:
                    raise ValueError(f"Invalid keymap.{key_name}: {value} is not a hexadecimal key (0-F)")
                keymap[str(key_name).upper()] = key_value

        return MachineConfig(
            cycles_per_second=cycles,
            timer_hz=timer_hz,
            max_stack_depth=max_stack_depth,
            seed=seed,
            display=display,
            keymap=keymap,
        )

    def _parse_positive(self, data: Dict[str, Any], key: str, default: int) -> int:
        if key not in data:
            return default
        value = self._parse_int(data[key], key)
        if value <= 0:
            raise ValueError(f"Invalid {key}: must be positive, got {value}")
        return value

    def _parse_int(self, value: Any, key: str = "value") -> int:
        if isinstance(value, bool):
            raise ValueError(f"Invalid integer format for {key}: {value}")
        if isinstance(value, int):
            return value
        if isinstance(value, str):
            try:
                if value.lower().startswith("0x"):
                    return int(value, 16)
                return int(value)
            except ValueError:
                pass
        raise ValueError(f"Invalid integer format for {key}: {value}")
