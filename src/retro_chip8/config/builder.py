import random
from typing import Optional

from retro_chip8.arch.chip8.cpu import Chip8Cpu, build_memory_bus
from retro_chip8.arch.chip8.keypad import KeyInput, Keypad
from .models import MachineConfig

# @intent:responsibility 構成（Config）に基づいて、Bus、キーパッド、CPUを生成・接続します。
class SystemBuilder:
    def build_system(self, config: MachineConfig, keypad: Optional[KeyInput] = None) -> Chip8Cpu:
        bus = build_memory_bus()
        rng = random.Random(config.seed) if config.seed is not None else random.Random()
        return Chip8Cpu(
            bus,
            keypad=keypad if keypad is not None else Keypad(),
            rng=rng,
            max_stack_depth=config.max_stack_depth,
        )
