# src/retro_chip8/arch/chip8/instructions/base.py
"""
CHIP-8命令実装用の共通ユーティリティ。

命令語のビットフィールド抽出、命令種別の列挙、デコード結果の型、および
実行時にCPU外部の機能（フレームバッファ、キー入力、乱数）へアクセスするためのコンテキストを定義します。
"""
import random
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from retro_chip8.core.snapshot import Operation
from retro_chip8.transport.bus import Bus
from retro_chip8.arch.chip8.display import Framebuffer
from retro_chip8.arch.chip8.keypad import KeyInput
from retro_chip8.arch.chip8.state import DEFAULT_MAX_STACK_DEPTH


# @intent:utility_function バスから16ビットの命令語をビッグエンディアン形式で読み込みます。
def read_word(bus: Bus, addr: int) -> int:
    """Big-endian 16-bit read."""
    return (bus.read(addr) << 8) | bus.read(addr + 1)


# @intent:utility_function 命令語の各ビットフィールドを取り出します。
def field_op(word: int) -> int:
    return (word >> 12) & 0x0F

def field_x(word: int) -> int:
    return (word >> 8) & 0x0F

def field_y(word: int) -> int:
    return (word >> 4) & 0x0F

def field_n(word: int) -> int:
    return word & 0x0F

def field_kk(word: int) -> int:
    return word & 0xFF

def field_nnn(word: int) -> int:
    return word & 0x0FFF


# @intent:responsibility CHIP-8の35種類の命令を列挙します。
# @intent:rationale 値は (エンコーディング, ニーモニック, オペランド書式) です。エンコーディングが一意なので別名は生じません。
class Instruction(Enum):
    CLS = ("00E0", "CLS", "")
    RET = ("00EE", "RET", "")
    SYS = ("0nnn", "SYS", "${nnn:03X}")
    JP = ("1nnn", "JP", "${nnn:03X}")
    CALL = ("2nnn", "CALL", "${nnn:03X}")
    SE_VX_BYTE = ("3xkk", "SE", "V{x:X}, #${kk:02X}")
    SNE_VX_BYTE = ("4xkk", "SNE", "V{x:X}, #${kk:02X}")
    SE_VX_VY = ("5xy0", "SE", "V{x:X}, V{y:X}")
    LD_VX_BYTE = ("6xkk", "LD", "V{x:X}, #${kk:02X}")
    ADD_VX_BYTE = ("7xkk", "ADD", "V{x:X}, #${kk:02X}")
    LD_VX_VY = ("8xy0", "LD", "V{x:X}, V{y:X}")
    OR = ("8xy1", "OR", "V{x:X}, V{y:X}")
    AND = ("8xy2", "AND", "V{x:X}, V{y:X}")
    XOR = ("8xy3", "XOR", "V{x:X}, V{y:X}")
    ADD_VX_VY = ("8xy4", "ADD", "V{x:X}, V{y:X}")
    SUB = ("8xy5", "SUB", "V{x:X}, V{y:X}")
    SHR = ("8xy6", "SHR", "V{x:X}")
    SUBN = ("8xy7", "SUBN", "V{x:X}, V{y:X}")
    SHL = ("8xyE", "SHL", "V{x:X}")
    SNE_VX_VY = ("9xy0", "SNE", "V{x:X}, V{y:X}")
    LD_I_ADDR = ("Annn", "LD", "I, ${nnn:03X}")
    JP_V0_ADDR = ("Bnnn", "JP", "V0, ${nnn:03X}")
    RND = ("Cxkk", "RND", "V{x:X}, #${kk:02X}")
    DRW = ("Dxyn", "DRW", "V{x:X}, V{y:X}, #{n:X}")
    SKP = ("Ex9E", "SKP", "V{x:X}")
    SKNP = ("ExA1", "SKNP", "V{x:X}")
    LD_VX_DT = ("Fx07", "LD", "V{x:X}, DT")
    LD_VX_K = ("Fx0A", "LD", "V{x:X}, K")
    LD_DT_VX = ("Fx15", "LD", "DT, V{x:X}")
    LD_ST_VX = ("Fx18", "LD", "ST, V{x:X}")
    ADD_I_VX = ("Fx1E", "ADD", "I, V{x:X}")
    LD_F_VX = ("Fx29", "LD", "F, V{x:X}")
    LD_B_VX = ("Fx33", "LD", "B, V{x:X}")
    LD_MEM_VX = ("Fx55", "LD", "[I], V{x:X}")
    LD_VX_MEM = ("Fx65", "LD", "V{x:X}, [I]")

    @property
    def encoding(self) -> str:
        return self.value[0]

    @property
    def mnemonic(self) -> str:
        return self.value[1]

    @property
    def operand_format(self) -> str:
        return self.value[2]


# @intent:responsibility デコード済みのCHIP-8命令を表す、タグ付きの不変値です。
@dataclass(frozen=True)
class Chip8Operation(Operation):
    """
    命令種別と、命令語から抽出した全てのビットフィールドを保持します。
    同じ命令語からは常に等価なChip8Operationが生成されます。
    """
    instruction: Instruction = Instruction.SYS
    opcode: int = 0x0000
    x: int = 0
    y: int = 0
    n: int = 0
    kk: int = 0
    nnn: int = 0


# @intent:responsibility 命令の実行に必要なCPU外部の機能をまとめます。
@dataclass
class ExecutionContext:
    display: Framebuffer
    keypad: KeyInput
    rng: random.Random = field(default_factory=random.Random)
    max_stack_depth: Optional[int] = DEFAULT_MAX_STACK_DEPTH
