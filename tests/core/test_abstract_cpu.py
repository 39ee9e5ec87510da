# tests/core/test_abstract_cpu.py
"""
retro_chip8.core.cpuモジュールの単体テスト。
"""
import pytest
from typing import Dict

from retro_chip8.common.errors import Chip8Fault
from retro_chip8.core.state import CpuState
from retro_chip8.core.cpu import AbstractCpu
from retro_chip8.core.snapshot import Snapshot, Operation, StepStatus
from retro_chip8.transport.bus import Bus, RAM, BusAccessType

# @intent:test_suite 抽象CPUの命令サイクル（Template Method）とフォールト処理を検証します。

class StubCpu(AbstractCpu):
    """
    1バイト命令の最小CPU。0x00はNOP、0xFFはフォールト、それ以外は0x20に0xFFを書き込みます。
    """
    def _create_initial_state(self) -> CpuState:
        return CpuState(pc=0x0010)

    def _fetch(self) -> int:
        return self._bus.read(self._state.pc)

    def _decode(self, opcode: int) -> Operation:
        if opcode == 0xFF:
            raise Chip8Fault("bad opcode")
        return Operation(opcode_hex=f"{opcode:02X}", mnemonic="NOP" if opcode == 0 else "POKE", length=1)

    def _execute(self, operation: Operation) -> None:
        if operation.mnemonic == "POKE":
            self._bus.write(0x0020, 0xFF)

    def get_register_map(self) -> Dict[str, int]:
        return {"PC": self._state.pc}


class TestAbstractCpu:
    @pytest.fixture
    def setup_cpu(self):
        bus = Bus()
        bus.register_device(0x0000, 0x00FF, RAM(256))
        return StubCpu(bus), bus

    def test_step_runs_fetch_decode_execute(self, setup_cpu):
        cpu, bus = setup_cpu
        bus.write(0x0010, 0x12)
        bus.get_and_clear_activity_log()

        snapshot = cpu.step()

        assert cpu.get_state().pc == 0x0011
        assert isinstance(snapshot, Snapshot)
        assert snapshot.status is StepStatus.RUNNING
        assert snapshot.operation.mnemonic == "POKE"
        assert snapshot.metadata.cycle_count == 1
        assert snapshot.metadata.trace == "$010: POKE"
        assert [a.access_type for a in snapshot.bus_activity] == [BusAccessType.READ, BusAccessType.WRITE]
        assert snapshot.bus_activity[1].address == 0x0020

    # @intent:test_case_snapshot Snapshotの状態がその後の実行の影響を受けないことを検証します。
    def test_snapshot_state_is_a_copy(self, setup_cpu):
        cpu, _ = setup_cpu
        snapshot = cpu.step()
        cpu.step()
        assert snapshot.state.pc == 0x0011
        assert cpu.get_state().pc == 0x0012

    # @intent:test_case_fault フォールト時はPCが命令先頭に戻り、以降のstepも同じフォールトを送出することを検証します。
    def test_fault_restores_pc_and_halts(self, setup_cpu):
        cpu, bus = setup_cpu
        bus.write(0x0010, 0xFF)

        with pytest.raises(Chip8Fault) as excinfo:
            cpu.step()
        assert cpu.get_state().pc == 0x0010
        assert excinfo.value.address == 0x0010
        assert excinfo.value.opcode == 0xFF
        assert cpu.fault is excinfo.value

        bus.write(0x0010, 0x00)
        with pytest.raises(Chip8Fault):
            cpu.step()

    def test_reset_clears_fault(self, setup_cpu):
        cpu, bus = setup_cpu
        bus.write(0x0010, 0xFF)
        with pytest.raises(Chip8Fault):
            cpu.step()
        bus.write(0x0010, 0x00)
        cpu.reset()
        assert cpu.fault is None
        cpu.step()
        assert cpu.get_state().pc == 0x0011
