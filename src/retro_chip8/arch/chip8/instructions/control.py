# src/retro_chip8/arch/chip8/instructions/control.py
"""
制御命令（ジャンプ、サブルーチン、条件スキップ、キー入力待ち）の実装。

実行関数が呼ばれる時点で、PCは既に次の命令を指しています。
"""
import logging

from retro_chip8.common.errors import StackOverflowError, StackUnderflowError
from retro_chip8.transport.bus import Bus
from retro_chip8.arch.chip8.state import Chip8CpuState, INSTRUCTION_LENGTH
from .base import Chip8Operation, ExecutionContext

logger = logging.getLogger(__name__)


# @intent:utility_function 次の命令を1つ読み飛ばします。
def skip_next(state: Chip8CpuState) -> None:
    state.pc = (state.pc + INSTRUCTION_LENGTH) & 0xFFFF


# --- SYS / JP / CALL / RET ---
# @intent:responsibility SYS命令を実行します（現代のインタプリタではNOP扱い）。
def execute_sys(state: Chip8CpuState, bus: Bus, op: Chip8Operation, ctx: ExecutionContext) -> None:
    # Intentional: 0nnn is a no-op
    pass

def execute_jp(state: Chip8CpuState, bus: Bus, op: Chip8Operation, ctx: ExecutionContext) -> None:
    state.pc = op.nnn

# @intent:responsibility CALL命令を実行し、戻りアドレスをスタックにプッシュしてからジャンプします。
# @intent:pre-condition スタック深さが設定された上限未満である必要があります。
def execute_call(state: Chip8CpuState, bus: Bus, op: Chip8Operation, ctx: ExecutionContext) -> None:
    if ctx.max_stack_depth is not None and len(state.stack) >= ctx.max_stack_depth:
        raise StackOverflowError(f"Call stack overflow (depth limit {ctx.max_stack_depth})")
    # state.pc is already pointing to the return address
    state.stack.append(state.pc)
    state.pc = op.nnn

# @intent:responsibility RET命令を実行し、スタックから戻りアドレスをポップしてPCに設定します。
# @intent:pre-condition スタックが空の場合はフォールトとなり、PCは変更されません。
def execute_ret(state: Chip8CpuState, bus: Bus, op: Chip8Operation, ctx: ExecutionContext) -> None:
    if not state.stack:
        raise StackUnderflowError("Return with empty call stack")
    state.pc = state.stack.pop()

# @intent:responsibility JP V0, addr命令を実行します。
def execute_jp_v0_addr(state: Chip8CpuState, bus: Bus, op: Chip8Operation, ctx: ExecutionContext) -> None:
    state.pc = (state.v[0] + op.nnn) & 0xFFFF


# --- Skips ---
def execute_se_vx_byte(state: Chip8CpuState, bus: Bus, op: Chip8Operation, ctx: ExecutionContext) -> None:
    if state.v[op.x] == op.kk:
        skip_next(state)

def execute_sne_vx_byte(state: Chip8CpuState, bus: Bus, op: Chip8Operation, ctx: ExecutionContext) -> None:
    if state.v[op.x] != op.kk:
        skip_next(state)

def execute_se_vx_vy(state: Chip8CpuState, bus: Bus, op: Chip8Operation, ctx: ExecutionContext) -> None:
    if state.v[op.x] == state.v[op.y]:
        skip_next(state)

def execute_sne_vx_vy(state: Chip8CpuState, bus: Bus, op: Chip8Operation, ctx: ExecutionContext) -> None:
    if state.v[op.x] != state.v[op.y]:
        skip_next(state)

# @intent:responsibility SKP命令を実行し、キーVxが押下中であれば次の命令をスキップします。
def execute_skp(state: Chip8CpuState, bus: Bus, op: Chip8Operation, ctx: ExecutionContext) -> None:
    if ctx.keypad.is_pressed(state.v[op.x]):
        skip_next(state)

# @intent:responsibility SKNP命令を実行し、キーVxが押下されていなければ次の命令をスキップします。
def execute_sknp(state: Chip8CpuState, bus: Bus, op: Chip8Operation, ctx: ExecutionContext) -> None:
    if not ctx.keypad.is_pressed(state.v[op.x]):
        skip_next(state)


# --- LD Vx, K ---
# @intent:responsibility キー押下を待ち、押されたキーの値をVxに格納します。
# @intent:rationale スレッドをブロックせず、PCをこの命令に戻して待機状態を立てます。
#                  ホストは描画を続けながら再度step()を呼び出し、キー押下があった時点で完了します。
# @intent:flow 待機開始より前の押下は破棄し、待機中に押されたキーだけを受け付けます。
def execute_ld_vx_k(state: Chip8CpuState, bus: Bus, op: Chip8Operation, ctx: ExecutionContext) -> None:
    if not state.waiting_for_key:
        ctx.keypad.discard_key_presses()
        logger.debug("Waiting for key press into V%X", op.x)
        state.waiting_for_key = True
        state.pc = (state.pc - op.length) & 0xFFFF
        return
    key = ctx.keypad.next_key_press()
    if key is None:
        state.pc = (state.pc - op.length) & 0xFFFF
        return
    state.waiting_for_key = False
    state.v[op.x] = key & 0xFF
