import pytest

from retro_chip8.arch.chip8.cpu import Chip8Cpu


@pytest.fixture
def cpu():
    cpu = Chip8Cpu()
    # $300: 1行 0xFF のスプライト
    cpu.load(bytes([0xFF]), 0x300)
    return cpu


def _run(cpu, *words):
    program = b"".join(word.to_bytes(2, "big") for word in words)
    cpu.load(program)
    for _ in words:
        cpu.step()


def test_draw_sets_pixels_without_collision(cpu):
    state = cpu.get_state()
    state.i = 0x300
    state.v[0] = 10
    state.v[1] = 5
    _run(cpu, 0xD011)
    assert cpu.display.row(5)[10:18] == [1] * 8
    assert cpu.pixel(9, 5) == 0
    assert cpu.pixel(18, 5) == 0
    assert state.vf == 0


# @intent:test_case_collision 同じスプライトを2回描画すると消去され、衝突フラグが立つことを検証します。
def test_draw_twice_erases_and_reports_collision(cpu):
    state = cpu.get_state()
    state.i = 0x300
    _run(cpu, 0xD011, 0xD011)
    assert cpu.display.row(0) == [0] * 64
    assert state.vf == 1


def test_draw_wraps_horizontally(cpu):
    state = cpu.get_state()
    state.i = 0x300
    state.v[0] = 63
    _run(cpu, 0xD011)
    row = cpu.display.row(0)
    assert row[63] == 1
    assert row[0:7] == [1] * 7
    assert sum(row) == 8


def test_draw_wraps_vertically():
    cpu = Chip8Cpu()
    cpu.load(bytes([0x80, 0x80, 0x80]), 0x300)
    state = cpu.get_state()
    state.i = 0x300
    state.v[1] = 31
    _run(cpu, 0xD013)
    assert cpu.pixel(0, 31) == 1
    assert cpu.pixel(0, 0) == 1
    assert cpu.pixel(0, 1) == 1


def test_draw_zero_rows_only_clears_flag(cpu):
    state = cpu.get_state()
    state.i = 0x300
    state.vf = 1
    _run(cpu, 0xD010)
    assert state.vf == 0
    assert sum(cpu.display.row(0)) == 0


def test_draw_hex_glyph_from_font(cpu):
    state = cpu.get_state()
    state.v[2] = 0x0
    # LD F, V2 ; DRW V0, V1, #5
    _run(cpu, 0xF229, 0xD015)
    assert cpu.display.row(0)[0:8] == [1, 1, 1, 1, 0, 0, 0, 0]
    assert cpu.display.row(1)[0:8] == [1, 0, 0, 1, 0, 0, 0, 0]


def test_cls(cpu):
    state = cpu.get_state()
    state.i = 0x300
    _run(cpu, 0xD011, 0x00E0)
    assert all(sum(cpu.display.row(y)) == 0 for y in range(32))


# @intent:test_case_flag_origin 座標レジスタにVFを指定しても、フラグのクリアより前の値で描画されることを検証します。
def test_draw_reads_origin_from_vf_before_clearing_flag(cpu):
    state = cpu.get_state()
    state.i = 0x300
    state.vf = 10
    state.v[1] = 3
    _run(cpu, 0xDF11)
    assert cpu.display.row(3)[10:18] == [1] * 8
    assert cpu.pixel(0, 3) == 0
    assert state.vf == 0
