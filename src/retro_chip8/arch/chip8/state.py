# src/retro_chip8/arch/chip8/state.py
"""
CHIP-8 CPU固有の状態定義。
"""
from dataclasses import dataclass, field
from typing import List

from retro_chip8.core.state import CpuState

# @intent:constant CHIP-8のメモリマップとレジスタ構成を定義します。
MEMORY_SIZE = 0x1000       # 4KB
RESERVED_END = 0x1FF       # 0x000-0x1FF: 組み込みフォント用の予約領域
PROGRAM_START = 0x200      # プログラムのロード先および実行開始アドレス
REGISTER_COUNT = 16
FLAG_REGISTER = 0xF        # VF: キャリー/ボロー/衝突フラグを兼ねる
INSTRUCTION_LENGTH = 2

# @intent:constant 呼び出しスタックの既定の深さ上限。Noneは無制限を意味します。
DEFAULT_MAX_STACK_DEPTH = 16

# @intent:responsibility CHIP-8 CPUの全てのレジスタ（V0-VF, I, PC）、呼び出しスタック、タイマーの状態を保持します。
@dataclass
class Chip8CpuState(CpuState):
    """
    CHIP-8 CPUのレジスタ状態を保持するデータクラス。
    VFは独立したフラグではなく、単にレジスタ15として扱います。
    """
    pc: int = PROGRAM_START
    v: List[int] = field(default_factory=lambda: [0x00] * REGISTER_COUNT)  # V0-VF
    i: int = 0x0000           # Index Register (12bitアドレスとして使用)
    stack: List[int] = field(default_factory=list)  # 戻りアドレス
    delay_timer: int = 0x00
    sound_timer: int = 0x00
    waiting_for_key: bool = False

    # @intent:accessor フラグレジスタ(VF)へのアクセスを提供します。
    @property
    def vf(self) -> int:
        return self.v[FLAG_REGISTER]

    @vf.setter
    def vf(self, value: int) -> None:
        self.v[FLAG_REGISTER] = value & 0xFF

    @property
    def sp(self) -> int:
        return len(self.stack)
