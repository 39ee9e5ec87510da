# retro_chip8/loader/loader.py
"""
プログラムローダーモジュール。
生のバイナリイメージ（ROMファイル）を読み込み、CPUのメモリへロードします。
"""
import logging
from pathlib import Path
from typing import Union

from retro_chip8.arch.chip8.cpu import Chip8Cpu
from retro_chip8.arch.chip8.state import PROGRAM_START

logger = logging.getLogger(__name__)


class RomLoader:
    """
    ROMファイルの内容をそのまま 0x200 からメモリにコピーするローダー。
    """
    # @intent:responsibility ファイルを読み込み、ロードしたバイト数を返します。
    # @intent:post-condition サイズ超過時はLoadError、読み込み失敗時はOSErrorが伝播します。
    def load_rom(self, file_path: Union[str, Path], cpu: Chip8Cpu) -> int:
        data = Path(file_path).read_bytes()
        cpu.load(data, PROGRAM_START)
        logger.info("Loaded ROM %s (%d bytes)", file_path, len(data))
        return len(data)
