# src/retro_chip8/arch/chip8/instructions/__init__.py
"""
CHIP-8命令セット実装パッケージ。
"""
from typing import Optional

from retro_chip8.common.errors import DecodeError
from retro_chip8.transport.bus import Bus
from retro_chip8.arch.chip8.state import Chip8CpuState, INSTRUCTION_LENGTH
from .base import (
    Chip8Operation, ExecutionContext, Instruction,
    field_op, field_x, field_y, field_n, field_kk, field_nnn,
)
from .maps import PRIMARY_MAP, NIBBLE_SELECTOR_MAP, BYTE_SELECTOR_MAP, SYSTEM_MAP, EXECUTE_MAP


# @intent:responsibility 命令語から命令種別を特定します。該当しない場合はNoneを返します。
def _lookup_instruction(word: int) -> Optional[Instruction]:
    op = field_op(word)
    if op == 0x0:
        return SYSTEM_MAP.get(word, Instruction.SYS)
    if op in PRIMARY_MAP:
        return PRIMARY_MAP[op]
    if op in NIBBLE_SELECTOR_MAP:
        return NIBBLE_SELECTOR_MAP[op].get(field_n(word))
    if op in BYTE_SELECTOR_MAP:
        return BYTE_SELECTOR_MAP[op].get(field_kk(word))
    return None


# @intent:responsibility 16ビットの命令語をデコードし、Chip8Operationを返します。
# @intent:rationale 純粋関数です。同じ命令語は常に同じ結果になり、CPUやメモリの状態に依存しません。
def decode_opcode(word: int) -> Chip8Operation:
    """
    CHIP-8の命令語をデコードし、Chip8Operationオブジェクトを返します。
    命令表に存在しない命令語はDecodeErrorとなります。
    """
    word &= 0xFFFF
    instruction = _lookup_instruction(word)
    if instruction is None:
        raise DecodeError(f"Unrecognized instruction ${word:04X}", opcode=word)

    fields = dict(
        x=field_x(word), y=field_y(word), n=field_n(word),
        kk=field_kk(word), nnn=field_nnn(word),
    )
    operand_text = instruction.operand_format.format(**fields)
    return Chip8Operation(
        opcode_hex=f"{word:04X}",
        mnemonic=instruction.mnemonic,
        operands=operand_text.split(", ") if operand_text else [],
        length=INSTRUCTION_LENGTH,
        instruction=instruction,
        opcode=word,
        **fields,
    )


# @intent:responsibility デコードされたCHIP-8命令を実行します。
def execute_instruction(operation: Chip8Operation, state: Chip8CpuState, bus: Bus, ctx: ExecutionContext) -> None:
    """
    デコードされたCHIP-8命令を実行し、CPUの状態（およびフレームバッファ）を変更します。
    """
    EXECUTE_MAP[operation.instruction](state, bus, operation, ctx)
