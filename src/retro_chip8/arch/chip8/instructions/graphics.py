# src/retro_chip8/arch/chip8/instructions/graphics.py
"""
画面命令（クリア、スプライト描画）の実装。
"""
from retro_chip8.transport.bus import Bus
from retro_chip8.arch.chip8.state import Chip8CpuState
from .base import Chip8Operation, ExecutionContext


def execute_cls(state: Chip8CpuState, bus: Bus, op: Chip8Operation, ctx: ExecutionContext) -> None:
    ctx.display.clear()

# @intent:responsibility I から n バイトのスプライトを (Vx, Vy) にXOR描画し、衝突をVFに反映します。
# @intent:flow VFを0にクリア -> スプライト読み込み -> 描画 -> 衝突があればVF=1 の順序で処理します。
def execute_drw(state: Chip8CpuState, bus: Bus, op: Chip8Operation, ctx: ExecutionContext) -> None:
    origin_x = state.v[op.x]
    origin_y = state.v[op.y]
    state.vf = 0
    rows = [bus.read(state.i + row) for row in range(op.n)]
    if ctx.display.draw_sprite(origin_x, origin_y, rows):
        state.vf = 1
