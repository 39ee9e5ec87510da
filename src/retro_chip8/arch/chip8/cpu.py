# src/retro_chip8/arch/chip8/cpu.py
"""
CHIP-8 CPUエミュレーションの中心モジュール。

ホストには以下の狭いインターフェースを公開します。
- load(): プログラムイメージのロード
- step(): 1命令のフェッチ・デコード・実行
- tick_timers(): 60Hzで呼ばれるタイマー減算（命令実行とは独立）
- pixel(), sound_active(), key_input: レンダラ、音声、キー入力との接点
"""
import logging
import random
from typing import Dict, Optional

from retro_chip8.common.errors import LoadError
from retro_chip8.core.cpu import AbstractCpu
from retro_chip8.core.snapshot import StepStatus
from retro_chip8.transport.bus import Bus, RAM, ROM
from retro_chip8.arch.chip8.display import Framebuffer
from retro_chip8.arch.chip8.font import FONT_BASE, FONT_SET
from retro_chip8.arch.chip8.keypad import KeyInput, Keypad
from retro_chip8.arch.chip8.state import (
    Chip8CpuState, MEMORY_SIZE, PROGRAM_START, RESERVED_END, REGISTER_COUNT,
    DEFAULT_MAX_STACK_DEPTH,
)
from retro_chip8.arch.chip8.instructions import decode_opcode, execute_instruction
from retro_chip8.arch.chip8.instructions.base import Chip8Operation, ExecutionContext, read_word

logger = logging.getLogger(__name__)


# @intent:responsibility CHIP-8のメモリマップ（フォントROM + プログラムRAM）を構築したBusを返します。
def build_memory_bus() -> Bus:
    """
    0x000-0x1FF にフォントをロードしたROM、0x200-0xFFF にゼロクリアされたRAMを配置します。
    """
    bus = Bus()
    bus.register_device(0x000, RESERVED_END, ROM(RESERVED_END + 1))
    bus.register_device(PROGRAM_START, MEMORY_SIZE - 1, RAM(MEMORY_SIZE - PROGRAM_START))
    for offset, data in enumerate(FONT_SET):
        bus.load(FONT_BASE + offset, data)
    return bus


# @intent:responsibility CHIP-8 CPUの具体的なエミュレーションロジック（フェッチ、デコード、実行）を提供します。
class Chip8Cpu(AbstractCpu):
    """
    CHIP-8 CPUをエミュレートするクラス。
    フレームバッファはCPUが所有し、キー入力は外部から注入された KeyInput に問い合わせます。
    """
    def __init__(self, bus: Optional[Bus] = None, keypad: Optional[KeyInput] = None,
                 rng: Optional[random.Random] = None,
                 max_stack_depth: Optional[int] = DEFAULT_MAX_STACK_DEPTH):
        if max_stack_depth is not None and max_stack_depth <= 0:
            raise ValueError("max_stack_depth must be a positive integer or None.")
        self._display = Framebuffer()
        self._keypad = keypad if keypad is not None else Keypad()
        self._context = ExecutionContext(
            display=self._display,
            keypad=self._keypad,
            rng=rng if rng is not None else random.Random(),
            max_stack_depth=max_stack_depth,
        )
        super().__init__(bus if bus is not None else build_memory_bus())

    def _create_initial_state(self) -> Chip8CpuState:
        return Chip8CpuState()

    # @intent:responsibility CPU状態とフレームバッファを初期状態に戻します。メモリ内容は保持されます。
    def reset(self) -> None:
        super().reset()
        self._display.clear()

    # @intent:responsibility プログラムイメージをメモリにコピーします。
    # @intent:pre-condition PROGRAM_START <= offset かつ offset + len(data) <= 4096 である必要があります。
    def load(self, data: bytes, offset: int = PROGRAM_START) -> None:
        """
        プログラムイメージを offset（既定は0x200）からメモリにコピーします。
        アドレス空間に収まらない場合は、メモリを変更せずに LoadError を送出します。
        """
        size = len(data)
        if offset < PROGRAM_START:
            raise LoadError(
                f"Cannot load program at ${offset:03X}: addresses below ${PROGRAM_START:03X} are reserved.",
                offset, size, MEMORY_SIZE)
        if offset + size > MEMORY_SIZE:
            raise LoadError(
                f"Program of {size} bytes at ${offset:03X} exceeds the {MEMORY_SIZE}-byte address space "
                f"by {offset + size - MEMORY_SIZE} bytes.",
                offset, size, MEMORY_SIZE)
        for index, byte in enumerate(data):
            self._bus.load(offset + index, byte)
        logger.debug("Loaded %d bytes at $%03X", size, offset)

    # @intent:responsibility PCが指す2バイトの命令語（ビッグエンディアン）をフェッチします。
    def _fetch(self) -> int:
        return read_word(self._bus, self._state.pc)

    def _decode(self, opcode: int) -> Chip8Operation:
        return decode_opcode(opcode)

    def _execute(self, operation: Chip8Operation) -> None:
        execute_instruction(operation, self._state, self._bus, self._context)

    def _status(self) -> StepStatus:
        if self._state.waiting_for_key:
            return StepStatus.WAITING_FOR_KEY
        return StepStatus.RUNNING

    # @intent:responsibility 遅延タイマーとサウンドタイマーを1ずつ減算します（0で下げ止まり）。
    # @intent:rationale 命令実行レートとは独立して、ホストが固定周期（60Hz）で呼び出します。
    def tick_timers(self) -> None:
        state = self._state
        if state.delay_timer > 0:
            state.delay_timer -= 1
        if state.sound_timer > 0:
            state.sound_timer -= 1

    def sound_active(self) -> bool:
        return self._state.sound_timer > 0

    @property
    def waiting_for_key(self) -> bool:
        return self._state.waiting_for_key

    # @intent:responsibility フレームバッファの読み取り専用問い合わせ。
    def pixel(self, x: int, y: int) -> int:
        return self._display.pixel(x, y)

    @property
    def display(self) -> Framebuffer:
        return self._display

    @property
    def key_input(self) -> KeyInput:
        return self._keypad

    # @intent:responsibility 現在のレジスタ値を辞書形式で提供します。
    def get_register_map(self) -> Dict[str, int]:
        s = self._state
        registers = {f"V{index:X}": s.v[index] for index in range(REGISTER_COUNT)}
        registers.update({
            "I": s.i, "PC": s.pc, "SP": s.sp, "DT": s.delay_timer, "ST": s.sound_timer
        })
        return registers
