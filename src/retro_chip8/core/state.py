# retro_chip8/core/state.py
"""
Core Layer (CPU状態の基底)
"""
from dataclasses import dataclass


# @intent:responsibility 命令サイクルの駆動に必要な最小限の状態（プログラムカウンタ）を保持します。
# @intent:rationale レジスタファイルやスタックはアーキテクチャ側のサブクラスが追加します（arch/chip8/state.py）。
@dataclass
class CpuState:
    pc: int = 0x0000
