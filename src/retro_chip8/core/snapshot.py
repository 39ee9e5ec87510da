# retro_chip8/core/snapshot.py
"""
実行状態の不変スナップショット

このモジュールは、1命令サイクル実行後のCPUとバスの状態を記録した不変のデータ構造を定義します。
ホストループへの実行結果の通知と、トレースログの生成に用いる責務を負います。
"""
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional

from retro_chip8.core.state import CpuState
from retro_chip8.transport.bus import BusAccess


# @intent:responsibility 1ステップ実行後のCPUの実行状態を表します。
# @intent:rationale 致命的なフォールトは例外として伝播させるため、ここには含めません。
class StepStatus(Enum):
    RUNNING = "RUNNING"
    WAITING_FOR_KEY = "WAITING_FOR_KEY"


# @intent:responsibility 実行された命令の詳細を記録します。
@dataclass(frozen=True) # 不変データ構造
class Operation:
    """
    実行された命令の詳細（HEX、ニーモニック、オペランド）を記録するデータクラス。
    """
    opcode_hex: str # 例: "A2F0"
    mnemonic: str # 例: "LD"
    operands: List[str] = field(default_factory=list) # 例: ["I", "$2F0"]
    cycle_count: int = 1 # 命令実行に必要なサイクル数
    length: int = 2 # 命令のバイト長

    # @intent:responsibility ニーモニックとオペランドを結合した表示用文字列を返します。
    def text(self) -> str:
        if self.operands:
            return f"{self.mnemonic} " + ", ".join(self.operands)
        return self.mnemonic


# @intent:responsibility 実行に関するメタデータを記録します。
@dataclass(frozen=True) # 不変データ構造
class Metadata:
    """
    実行に関するメタデータ（累計サイクル数、トレース文字列など）を記録するデータクラス。
    """
    cycle_count: int
    trace: Optional[str] = None # 例: "$200: LD I, $2F0"


# @intent:responsibility ある一時点におけるCPUとバスの状態を不変に記録します。
@dataclass(frozen=True) # 不変データ構造
class Snapshot:
    """
    ある一時点における、CPUとバスの状態を記録した不変のデータ構造。
    `state` は命令実行後の状態のコピーであり、以降のCPU実行の影響を受けません。
    """
    state: CpuState
    operation: Operation
    metadata: Metadata
    status: StepStatus = StepStatus.RUNNING
    bus_activity: List[BusAccess] = field(default_factory=list)

    @property
    def waiting_for_key(self) -> bool:
        return self.status is StepStatus.WAITING_FOR_KEY
