# src/retro_chip8/arch/chip8/__init__.py
"""
CHIP-8 Architecture Package
"""
from .cpu import Chip8Cpu, build_memory_bus
from .state import Chip8CpuState
from .keypad import KeyInput, Keypad
