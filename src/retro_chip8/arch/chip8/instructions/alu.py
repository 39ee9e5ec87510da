# src/retro_chip8/arch/chip8/instructions/alu.py
"""
算術論理演算命令の実装。

8ビット演算は全て256を法としてラップします。
フラグを生成する命令はVFへの書き込みを最後に行うため、Vx自身がVFの場合もフラグ値が優先されます。
"""
from retro_chip8.transport.bus import Bus
from retro_chip8.arch.chip8.state import Chip8CpuState
from .base import Chip8Operation, ExecutionContext


# --- ADD Vx, byte ---
# @intent:responsibility Vxに即値を加算します。キャリーはVFに反映しません。
def execute_add_vx_byte(state: Chip8CpuState, bus: Bus, op: Chip8Operation, ctx: ExecutionContext) -> None:
    state.v[op.x] = (state.v[op.x] + op.kk) & 0xFF


# --- Bitwise ---
def execute_or(state: Chip8CpuState, bus: Bus, op: Chip8Operation, ctx: ExecutionContext) -> None:
    state.v[op.x] |= state.v[op.y]

def execute_and(state: Chip8CpuState, bus: Bus, op: Chip8Operation, ctx: ExecutionContext) -> None:
    state.v[op.x] &= state.v[op.y]

def execute_xor(state: Chip8CpuState, bus: Bus, op: Chip8Operation, ctx: ExecutionContext) -> None:
    state.v[op.x] ^= state.v[op.y]


# --- ADD Vx, Vy ---
# @intent:responsibility Vx += Vy。VF = 1 if 結果が255を超えた（キャリー）。
def execute_add_vx_vy(state: Chip8CpuState, bus: Bus, op: Chip8Operation, ctx: ExecutionContext) -> None:
    res = state.v[op.x] + state.v[op.y]
    state.v[op.x] = res & 0xFF
    state.vf = 1 if res > 0xFF else 0

# --- SUB Vx, Vy ---
# @intent:responsibility Vx -= Vy。VF = 1 if 減算前のVx > Vy（ボローなし）。
def execute_sub(state: Chip8CpuState, bus: Bus, op: Chip8Operation, ctx: ExecutionContext) -> None:
    v1 = state.v[op.x]
    v2 = state.v[op.y]
    state.v[op.x] = (v1 - v2) & 0xFF
    state.vf = 1 if v1 > v2 else 0

# --- SUBN Vx, Vy ---
# @intent:responsibility Vx = Vy - Vx。VF = 1 if 減算前のVy > Vx。
def execute_subn(state: Chip8CpuState, bus: Bus, op: Chip8Operation, ctx: ExecutionContext) -> None:
    v1 = state.v[op.x]
    v2 = state.v[op.y]
    state.v[op.x] = (v2 - v1) & 0xFF
    state.vf = 1 if v2 > v1 else 0


# --- Shifts ---
# @intent:rationale 標準命令セットに従い、シフト量とシフト元にVyは使用しません。
def execute_shr(state: Chip8CpuState, bus: Bus, op: Chip8Operation, ctx: ExecutionContext) -> None:
    v1 = state.v[op.x]
    state.v[op.x] = v1 >> 1
    state.vf = v1 & 0x01

def execute_shl(state: Chip8CpuState, bus: Bus, op: Chip8Operation, ctx: ExecutionContext) -> None:
    v1 = state.v[op.x]
    state.v[op.x] = (v1 << 1) & 0xFF
    state.vf = (v1 >> 7) & 0x01


# --- RND ---
# @intent:responsibility 乱数バイトと即値のANDをVxに格納します。
def execute_rnd(state: Chip8CpuState, bus: Bus, op: Chip8Operation, ctx: ExecutionContext) -> None:
    state.v[op.x] = ctx.rng.randrange(0x100) & op.kk
