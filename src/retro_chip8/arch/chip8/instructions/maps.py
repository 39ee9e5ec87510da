# src/retro_chip8/arch/chip8/instructions/maps.py
"""
オペコードと命令実装のマッピング定義。
"""
from . import load
from . import alu
from . import control
from . import graphics
from .base import Instruction

# @intent:map 上位ニブルだけで命令が確定するオペコードの対応表。
PRIMARY_MAP = {
    0x1: Instruction.JP,
    0x2: Instruction.CALL,
    0x3: Instruction.SE_VX_BYTE,
    0x4: Instruction.SNE_VX_BYTE,
    0x6: Instruction.LD_VX_BYTE,
    0x7: Instruction.ADD_VX_BYTE,
    0xA: Instruction.LD_I_ADDR,
    0xB: Instruction.JP_V0_ADDR,
    0xC: Instruction.RND,
    0xD: Instruction.DRW,
}

# @intent:map 上位ニブルに加えて下位ニブル(n)で命令を選択するオペコードの対応表。
NIBBLE_SELECTOR_MAP = {
    0x5: {0x0: Instruction.SE_VX_VY},
    0x8: {
        0x0: Instruction.LD_VX_VY,
        0x1: Instruction.OR,
        0x2: Instruction.AND,
        0x3: Instruction.XOR,
        0x4: Instruction.ADD_VX_VY,
        0x5: Instruction.SUB,
        0x6: Instruction.SHR,
        0x7: Instruction.SUBN,
        0xE: Instruction.SHL,
    },
    0x9: {0x0: Instruction.SNE_VX_VY},
}

# @intent:map 上位ニブルに加えて下位バイト(kk)で命令を選択するオペコードの対応表。
BYTE_SELECTOR_MAP = {
    0xE: {
        0x9E: Instruction.SKP,
        0xA1: Instruction.SKNP,
    },
    0xF: {
        0x07: Instruction.LD_VX_DT,
        0x0A: Instruction.LD_VX_K,
        0x15: Instruction.LD_DT_VX,
        0x18: Instruction.LD_ST_VX,
        0x1E: Instruction.ADD_I_VX,
        0x29: Instruction.LD_F_VX,
        0x33: Instruction.LD_B_VX,
        0x55: Instruction.LD_MEM_VX,
        0x65: Instruction.LD_VX_MEM,
    },
}

# @intent:map 上位ニブル0の命令語のうち、完全一致で識別される命令。それ以外の0nnnはSYS(NOP)です。
SYSTEM_MAP = {
    0x00E0: Instruction.CLS,
    0x00EE: Instruction.RET,
}

# @intent:map 命令種別から実行関数へのマッピングテーブル。
EXECUTE_MAP = {
    # Control
    Instruction.RET: control.execute_ret,
    Instruction.SYS: control.execute_sys,
    Instruction.JP: control.execute_jp,
    Instruction.CALL: control.execute_call,
    Instruction.SE_VX_BYTE: control.execute_se_vx_byte,
    Instruction.SNE_VX_BYTE: control.execute_sne_vx_byte,
    Instruction.SE_VX_VY: control.execute_se_vx_vy,
    Instruction.SNE_VX_VY: control.execute_sne_vx_vy,
    Instruction.JP_V0_ADDR: control.execute_jp_v0_addr,
    Instruction.SKP: control.execute_skp,
    Instruction.SKNP: control.execute_sknp,
    Instruction.LD_VX_K: control.execute_ld_vx_k,

    # ALU
    Instruction.ADD_VX_BYTE: alu.execute_add_vx_byte,
    Instruction.OR: alu.execute_or,
    Instruction.AND: alu.execute_and,
    Instruction.XOR: alu.execute_xor,
    Instruction.ADD_VX_VY: alu.execute_add_vx_vy,
    Instruction.SUB: alu.execute_sub,
    Instruction.SHR: alu.execute_shr,
    Instruction.SUBN: alu.execute_subn,
    Instruction.SHL: alu.execute_shl,
    Instruction.RND: alu.execute_rnd,

    # Load/Store
    Instruction.LD_VX_BYTE: load.execute_ld_vx_byte,
    Instruction.LD_VX_VY: load.execute_ld_vx_vy,
    Instruction.LD_I_ADDR: load.execute_ld_i_addr,
    Instruction.LD_VX_DT: load.execute_ld_vx_dt,
    Instruction.LD_DT_VX: load.execute_ld_dt_vx,
    Instruction.LD_ST_VX: load.execute_ld_st_vx,
    Instruction.ADD_I_VX: load.execute_add_i_vx,
    Instruction.LD_F_VX: load.execute_ld_f_vx,
    Instruction.LD_B_VX: load.execute_ld_b_vx,
    Instruction.LD_MEM_VX: load.execute_ld_mem_vx,
    Instruction.LD_VX_MEM: load.execute_ld_vx_mem,

    # Graphics
    Instruction.CLS: graphics.execute_cls,
    Instruction.DRW: graphics.execute_drw,
}
