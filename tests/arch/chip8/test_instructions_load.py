import unittest
import warnings

from retro_chip8.arch.chip8.cpu import Chip8Cpu
from retro_chip8.arch.chip8.font import FONT_SET


class TestChip8LoadInstructions(unittest.TestCase):
    def setUp(self):
        self.cpu = Chip8Cpu()
        self.state = self.cpu.get_state()
        self.bus = self.cpu.bus

    def _execute(self, word, pc=0x200):
        self.cpu.load(word.to_bytes(2, "big"), pc)
        self.state.pc = pc
        return self.cpu.step()

    def test_ld_vx_byte_and_vx_vy(self):
        self._execute(0x6A02)
        self.assertEqual(self.state.v[0xA], 0x02)
        self._execute(0x8BA0)
        self.assertEqual(self.state.v[0xB], 0x02)

    def test_ld_i_addr(self):
        self._execute(0xA2EA)
        self.assertEqual(self.state.i, 0x2EA)

    def test_add_i_vx_leaves_flag_untouched(self):
        self.state.i = 0x0FFF
        self.state.v[8] = 0x02
        self.state.vf = 0x33
        self._execute(0xF81E)
        self.assertEqual(self.state.i, 0x1001)
        self.assertEqual(self.state.vf, 0x33)

    def test_ld_f_vx(self):
        self.state.v[4] = 0x0A
        self._execute(0xF429)
        self.assertEqual(self.state.i, 0x0A * 5)
        glyph = [self.bus.read(self.state.i + k) for k in range(5)]
        self.assertEqual(glyph, list(FONT_SET[50:55]))
        self.assertEqual(glyph, [0xF0, 0x90, 0xF0, 0x90, 0x90])

    def test_ld_b_vx(self):
        self.state.v[0xA] = 234
        self.state.i = 0x300
        self._execute(0xFA33)
        self.assertEqual([self.bus.read(0x300 + k) for k in range(3)], [2, 3, 4])

        self.state.v[0xA] = 7
        self._execute(0xFA33)
        self.assertEqual([self.bus.read(0x300 + k) for k in range(3)], [0, 0, 7])

    def test_store_and_load_registers(self):
        self.state.i = 0x400
        self.state.v[:4] = [0x11, 0x22, 0x33, 0x44]
        self.state.v[4] = 0x55
        self._execute(0xF355)
        self.assertEqual([self.bus.read(0x400 + k) for k in range(5)], [0x11, 0x22, 0x33, 0x44, 0x00])
        self.assertEqual(self.state.i, 0x400)

        self.state.v = [0] * 16
        self._execute(0xF365)
        self.assertEqual(self.state.v[:5], [0x11, 0x22, 0x33, 0x44, 0x00])
        self.assertEqual(self.state.i, 0x400)

    def test_store_into_font_area_is_ignored(self):
        self.state.i = 0x000
        self.state.v[0] = 0x99
        with warnings.catch_warnings(record=True) as caught:
            warnings.simplefilter("always")
            self._execute(0xF055)
        self.assertEqual(self.bus.read(0x000), FONT_SET[0])
        self.assertEqual(len(caught), 1)
        self.assertTrue(issubclass(caught[0].category, RuntimeWarning))

    def test_timers(self):
        self.state.v[1] = 0x3C
        self._execute(0xF115)
        self._execute(0xF118)
        self.assertEqual(self.state.delay_timer, 0x3C)
        self.assertEqual(self.state.sound_timer, 0x3C)

        self.cpu.tick_timers()
        self._execute(0xF207)
        self.assertEqual(self.state.v[2], 0x3B)

if __name__ == '__main__':
    unittest.main()
