# retro_chip8/core/cpu.py
"""
Core Layer (抽象CPU)

命令サイクル（step）の駆動とフォールト発生後の停止状態を管理します。
命令セットの知識は持たず、デコードと実行はarch層のサブクラスに委ねます。
"""
import copy
import logging
from abc import ABC, abstractmethod
from typing import Dict, Optional

from retro_chip8.common.errors import Chip8Fault
from retro_chip8.transport.bus import Bus
from retro_chip8.core.snapshot import Snapshot, Operation, Metadata, StepStatus
from retro_chip8.core.state import CpuState

logger = logging.getLogger(__name__)


# @intent:responsibility 命令サイクルの共通フローを定義します。
class AbstractCpu(ABC):
    """
    フェッチ・デコード・実行の命令サイクルとフォールト管理を実装する基底クラス。
    サブクラスは命令語の取得、デコード、実行の各段階だけを実装します。
    """
    def __init__(self, bus: Bus):
        self._bus = bus
        self._state: CpuState = self._create_initial_state()
        self._cycle_count: int = 0
        # 直前のstep()で発生し、reset()されるまで保持されるフォールト
        self._fault: Optional[Chip8Fault] = None

    # @intent:responsibility 電源投入直後の状態を生成します。reset()からも呼ばれます。
    @abstractmethod
    def _create_initial_state(self) -> CpuState:
        pass

    # @intent:responsibility CPUをリセットし、初期状態に戻します。
    def reset(self) -> None:
        """
        CPUの状態を初期値にリセットし、記録されたフォールトを解除します。
        """
        self._state = self._create_initial_state()
        self._cycle_count = 0
        self._fault = None

    # @intent:responsibility 現在のCPUの状態を返します。
    def get_state(self) -> CpuState:
        return self._state

    @property
    def bus(self) -> Bus:
        return self._bus

    # @intent:responsibility 直前の命令サイクルで発生したフォールトを返します。
    @property
    def fault(self) -> Optional[Chip8Fault]:
        return self._fault

    # @intent:responsibility PCの位置から命令語を読み出します。
    @abstractmethod
    def _fetch(self) -> int:
        """
        現在のPCから命令語をフェッチし、その値を返します。
        PCの更新は `_update_pc()` が行います。
        """
        pass

    # @intent:responsibility 命令語をOperationに変換します。変換できない場合はChip8Faultを送出します。
    @abstractmethod
    def _decode(self, opcode: int) -> Operation:
        pass

    # @intent:responsibility Operationを実行します。実行時点でPCは既に次の命令を指しています。
    @abstractmethod
    def _execute(self, operation: Operation) -> None:
        pass

    # @intent:responsibility 命令実行後のCPUの実行状態を返します。
    def _status(self) -> StepStatus:
        return StepStatus.RUNNING

    # @intent:responsibility CPUを1命令サイクル進め、その結果のスナップショットを返します。
    # @intent:rationale Template Methodパターンを採用し、共通の実行フロー（ログクリア→フェッチ→デコード→PC更新→実行→Snapshot生成）を定義します。
    #                  フォールト発生時はPCを命令先頭に戻し、例外を呼び出し元へ伝播させます。
    def step(self) -> Snapshot:
        """
        CPUを1命令サイクル進め、その時点でのCPUとバスの状態を含むSnapshotオブジェクトを返します。
        フォールト状態のCPUに対する呼び出しは、記録済みのフォールトを再送出します。
        """
        # 1. 前処理: 前サイクルまでの残存ログを破棄
        self._bus.get_and_clear_activity_log()
        initial_pc = self._state.pc

        # 2. フォールト判定 (Hook)
        self._handle_halt(initial_pc)

        opcode: Optional[int] = None
        try:
            # 3. フェッチ
            opcode = self._fetch()

            # 4. デコード
            operation = self._decode(opcode)

            # 5. PC更新 (Hook)
            self._update_pc(operation)

            # 6. 実行
            self._execute(operation)
        except Chip8Fault as fault:
            self._state.pc = initial_pc
            fault.locate(initial_pc, opcode)
            self._fault = fault
            logger.error("CPU fault: %s", fault)
            raise

        # 7. 後処理 & Snapshot生成
        return self._create_snapshot(initial_pc, operation)

    # @intent:responsibility フォールト状態の場合の処理を行います。
    def _handle_halt(self, current_pc: int) -> None:
        """
        フォールトで停止したCPUは reset() されるまで実行を再開しません。
        """
        if self._fault is not None:
            raise self._fault

    # @intent:responsibility 命令実行前にPCを更新します。
    def _update_pc(self, operation: Operation) -> None:
        """
        命令実行前のPC更新。デフォルトは命令長分進める。
        """
        self._state.pc = (self._state.pc + operation.length) & 0xFFFF

    # @intent:responsibility スナップショットを生成します。
    def _create_snapshot(self, initial_pc: int, operation: Operation) -> Snapshot:
        """
        実行結果からSnapshotオブジェクトを生成する共通ロジック。
        """
        bus_activity = self._bus.get_and_clear_activity_log()
        self._cycle_count += operation.cycle_count

        trace = f"${initial_pc:03X}: {operation.text()}"
        logger.debug(trace)

        # @intent:rationale Snapshotは不変であるべきため、可変なCpuState（スタック等）はコピーして保持します。
        return Snapshot(
            state=copy.deepcopy(self._state),
            operation=operation,
            metadata=Metadata(cycle_count=self._cycle_count, trace=trace),
            status=self._status(),
            bus_activity=bus_activity
        )

    @abstractmethod
    def get_register_map(self) -> Dict[str, int]:
        """
        現在のレジスタ値を辞書形式で返す。
        ホストがCPUの内部構造を知らなくても値を表示・記録できるようにするために使用される。
        """
        pass
