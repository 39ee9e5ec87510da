import unittest

import pytest

from retro_chip8.common.errors import Chip8Fault, DecodeError, LoadError
from retro_chip8.core.snapshot import StepStatus
from retro_chip8.arch.chip8 import Chip8Cpu, Chip8CpuState, build_memory_bus
from retro_chip8.arch.chip8.font import FONT_SET
from retro_chip8.transport.bus import ROM


class TestChip8CpuInitialState(unittest.TestCase):
    def setUp(self):
        self.cpu = Chip8Cpu()

    def test_initial_state(self):
        state = self.cpu.get_state()
        self.assertIsInstance(state, Chip8CpuState)
        self.assertEqual(state.pc, 0x200)
        self.assertEqual(state.v, [0] * 16)
        self.assertEqual(state.i, 0)
        self.assertEqual(state.stack, [])
        self.assertEqual((state.delay_timer, state.sound_timer), (0, 0))
        self.assertFalse(self.cpu.sound_active())
        self.assertIsNone(self.cpu.fault)

    def test_font_is_resident_and_program_area_is_zero(self):
        bus = self.cpu.bus
        self.assertEqual(bytes(bus.peek(k) for k in range(len(FONT_SET))), FONT_SET)
        self.assertTrue(all(bus.peek(addr) == 0 for addr in range(0x200, 0x1000)))

    def test_register_map(self):
        registers = self.cpu.get_register_map()
        self.assertEqual(registers["PC"], 0x200)
        self.assertEqual(registers["SP"], 0)
        for name in ["V0", "VF", "I", "DT", "ST"]:
            self.assertIn(name, registers)


class TestChip8CpuLoad(unittest.TestCase):
    def setUp(self):
        self.cpu = Chip8Cpu()

    def test_load_copies_program(self):
        self.cpu.load(bytes([0x60, 0x2A]))
        self.assertEqual(self.cpu.bus.peek(0x200), 0x60)
        self.assertEqual(self.cpu.bus.peek(0x201), 0x2A)

    def test_load_fills_address_space_exactly(self):
        data = bytes([0xAB]) * (0x1000 - 0x200)
        self.cpu.load(data)
        self.assertEqual(self.cpu.bus.peek(0xFFF), 0xAB)

    def test_load_too_large(self):
        data = bytes(0x1000 - 0x200 + 1)
        with self.assertRaises(LoadError) as cm:
            self.cpu.load(data)
        self.assertEqual(cm.exception.size, len(data))
        self.assertEqual(self.cpu.bus.peek(0x200), 0)

    def test_load_below_program_start(self):
        with self.assertRaises(LoadError):
            self.cpu.load(bytes([0x00]), 0x1FF)
        self.assertIsInstance(LoadError("x", 0, 0, 0), ValueError)


# @intent:test_suite 命令サイクルとフォールトの扱いを検証します。
class TestChip8CpuStep:
    def test_step_returns_snapshot(self):
        cpu = Chip8Cpu()
        cpu.load(bytes([0xA2, 0xF0]))
        snapshot = cpu.step()
        assert snapshot.status is StepStatus.RUNNING
        assert snapshot.state.i == 0x2F0
        assert snapshot.state.pc == 0x202
        assert snapshot.metadata.trace == "$200: LD I, $2F0"
        assert snapshot.metadata.cycle_count == 1

    def test_decode_error_halts_until_reset(self):
        cpu = Chip8Cpu()
        cpu.load(bytes([0xFF, 0xFF]))
        with pytest.raises(DecodeError) as excinfo:
            cpu.step()
        assert excinfo.value.address == 0x200
        assert "$200" in str(excinfo.value)
        assert cpu.get_state().pc == 0x200

        # 修正後も reset() までは停止したまま
        cpu.load(bytes([0x00, 0xE0]))
        with pytest.raises(Chip8Fault):
            cpu.step()

        cpu.reset()
        assert cpu.fault is None
        assert cpu.step().operation.mnemonic == "CLS"

    def test_access_beyond_memory_is_an_error(self):
        cpu = Chip8Cpu()
        cpu.get_state().i = 0xFFE
        cpu.get_state().v[0] = 123
        cpu.load(bytes([0xF0, 0x33]))
        with pytest.raises(IndexError):
            cpu.step()

    def test_reset_keeps_memory_and_clears_display(self):
        cpu = Chip8Cpu()
        cpu.load(bytes([0xF0, 0x29, 0xD0, 0x05]))
        cpu.step()
        cpu.step()
        assert cpu.pixel(0, 0) == 1

        cpu.reset()
        assert cpu.pixel(0, 0) == 0
        assert cpu.get_state().pc == 0x200
        assert cpu.bus.peek(0x200) == 0xF0

    # @intent:test_case_program 小さなループプログラムを実行し、最終状態を検証します。
    def test_runs_summation_loop(self):
        program = bytes([
            0x60, 0x00,  # $200: LD V0, #$00
            0x61, 0x05,  # $202: LD V1, #$05
            0x80, 0x14,  # $204: ADD V0, V1
            0x71, 0xFF,  # $206: ADD V1, #$FF
            0x31, 0x00,  # $208: SE V1, #$00
            0x12, 0x04,  # $20A: JP $204
            0x12, 0x0C,  # $20C: JP $20C
        ])
        cpu = Chip8Cpu()
        cpu.load(program)
        for _ in range(100):
            if cpu.get_state().pc == 0x20C:
                break
            cpu.step()
        state = cpu.get_state()
        assert state.pc == 0x20C
        assert state.v[0] == 15
        assert state.v[1] == 0


class TestChip8CpuTimers(unittest.TestCase):
    def test_tick_timers_stops_at_zero(self):
        cpu = Chip8Cpu()
        state = cpu.get_state()
        state.delay_timer = 2
        state.sound_timer = 1
        self.assertTrue(cpu.sound_active())

        cpu.tick_timers()
        self.assertEqual((state.delay_timer, state.sound_timer), (1, 0))
        self.assertFalse(cpu.sound_active())

        cpu.tick_timers()
        cpu.tick_timers()
        self.assertEqual((state.delay_timer, state.sound_timer), (0, 0))

    def test_step_does_not_touch_timers(self):
        cpu = Chip8Cpu()
        cpu.get_state().delay_timer = 5
        cpu.load(bytes([0x60, 0x01]))
        cpu.step()
        self.assertEqual(cpu.get_state().delay_timer, 5)


def test_build_memory_bus_maps_font_as_rom():
    bus = build_memory_bus()
    assert bus.peek(0x000) == 0xF0
    with pytest.warns(RuntimeWarning):
        bus.write(0x000, 0x00)
    assert bus.peek(0x000) == 0xF0
    bus.write(0x200, 0x12)
    assert bus.peek(0x200) == 0x12
    assert isinstance(bus.device_at(0x100)[0], ROM)

if __name__ == '__main__':
    unittest.main()
