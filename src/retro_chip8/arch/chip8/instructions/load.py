# src/retro_chip8/arch/chip8/instructions/load.py
"""
ロード/ストア命令（レジスタ、インデックスレジスタ、タイマー、メモリ間の転送）の実装。
"""
from retro_chip8.transport.bus import Bus
from retro_chip8.arch.chip8.state import Chip8CpuState
from retro_chip8.arch.chip8.font import glyph_address
from .base import Chip8Operation, ExecutionContext


# --- Registers ---
def execute_ld_vx_byte(state: Chip8CpuState, bus: Bus, op: Chip8Operation, ctx: ExecutionContext) -> None:
    state.v[op.x] = op.kk

def execute_ld_vx_vy(state: Chip8CpuState, bus: Bus, op: Chip8Operation, ctx: ExecutionContext) -> None:
    state.v[op.x] = state.v[op.y]


# --- Index register ---
def execute_ld_i_addr(state: Chip8CpuState, bus: Bus, op: Chip8Operation, ctx: ExecutionContext) -> None:
    state.i = op.nnn

# @intent:responsibility I += Vx。VFは変更しません。
def execute_add_i_vx(state: Chip8CpuState, bus: Bus, op: Chip8Operation, ctx: ExecutionContext) -> None:
    state.i = (state.i + state.v[op.x]) & 0xFFFF

# @intent:responsibility Iに数字Vxのフォントグリフのアドレスを設定します。
def execute_ld_f_vx(state: Chip8CpuState, bus: Bus, op: Chip8Operation, ctx: ExecutionContext) -> None:
    state.i = glyph_address(state.v[op.x])


# --- Timers ---
def execute_ld_vx_dt(state: Chip8CpuState, bus: Bus, op: Chip8Operation, ctx: ExecutionContext) -> None:
    state.v[op.x] = state.delay_timer

def execute_ld_dt_vx(state: Chip8CpuState, bus: Bus, op: Chip8Operation, ctx: ExecutionContext) -> None:
    state.delay_timer = state.v[op.x]

def execute_ld_st_vx(state: Chip8CpuState, bus: Bus, op: Chip8Operation, ctx: ExecutionContext) -> None:
    state.sound_timer = state.v[op.x]


# --- Memory ---
# @intent:responsibility Vxの10進表現（百の位、十の位、一の位）をI, I+1, I+2に格納します。
def execute_ld_b_vx(state: Chip8CpuState, bus: Bus, op: Chip8Operation, ctx: ExecutionContext) -> None:
    value = state.v[op.x]
    bus.write(state.i, value // 100)
    bus.write(state.i + 1, (value // 10) % 10)
    bus.write(state.i + 2, value % 10)

# @intent:responsibility V0..Vxを、Iから始まるメモリに格納します。Iは変更しません。
def execute_ld_mem_vx(state: Chip8CpuState, bus: Bus, op: Chip8Operation, ctx: ExecutionContext) -> None:
    for reg in range(op.x + 1):
        bus.write(state.i + reg, state.v[reg])

# @intent:responsibility Iから始まるメモリの内容をV0..Vxに読み込みます。Iは変更しません。
def execute_ld_vx_mem(state: Chip8CpuState, bus: Bus, op: Chip8Operation, ctx: ExecutionContext) -> None:
    for reg in range(op.x + 1):
        state.v[reg] = bus.read(state.i + reg)
