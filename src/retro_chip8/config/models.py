from dataclasses import dataclass, field
from typing import Dict, Optional

from retro_chip8.arch.chip8.state import DEFAULT_MAX_STACK_DEPTH

# @intent:constant 一般的なCOSMAC VIPキーパッド配置をQWERTYキーボードの左側4x4に割り当てます。
#   1 2 3 C        1 2 3 4
#   4 5 6 D   <-   Q W E R
#   7 8 9 E        A S D F
#   A 0 B F        Z X C V
DEFAULT_KEYMAP: Dict[str, int] = {
    "1": 0x1, "2": 0x2, "3": 0x3, "4": 0xC,
    "Q": 0x4, "W": 0x5, "E": 0x6, "R": 0xD,
    "A": 0x7, "S": 0x8, "D": 0x9, "F": 0xE,
    "Z": 0xA, "X": 0x0, "C": 0xB, "V": 0xF,
}

@dataclass
class DisplayConfig:
    scale: int = 10
    foreground: str = "#33FF66"
    background: str = "#101010"

@dataclass
class MachineConfig:
    cycles_per_second: int = 700  # 命令実行レート
    timer_hz: int = 60            # 遅延/サウンドタイマーの減算レート
    max_stack_depth: Optional[int] = DEFAULT_MAX_STACK_DEPTH  # None = 無制限
    seed: Optional[int] = None    # RND命令用の乱数シード
    display: DisplayConfig = field(default_factory=DisplayConfig)
    keymap: Dict[str, int] = field(default_factory=lambda: dict(DEFAULT_KEYMAP))
