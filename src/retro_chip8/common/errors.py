"""
共通の例外定義を提供するモジュール。

ロード時の回復可能なエラーと、実行を停止させる致命的なCPUフォールトを区別します。
メモリ範囲外アクセスはここでは扱わず、Bus層の IndexError をそのまま伝播させます。
"""
from typing import Optional


# @intent:responsibility プロジェクト固有の全ての例外の基底クラスです。
class Chip8Error(Exception):
    pass


# @intent:responsibility プログラムイメージがアドレス空間に収まらない場合のエラーです。
# @intent:rationale 実行前に検出される回復可能なエラーのため、ValueErrorとしても捕捉できるようにします。
class LoadError(Chip8Error, ValueError):
    def __init__(self, message: str, offset: int, size: int, limit: int):
        super().__init__(message)
        self.offset = offset
        self.size = size
        self.limit = limit


# @intent:responsibility 実行を継続できない致命的なCPUフォールトを表します。
class Chip8Fault(Chip8Error):
    """
    デコード不能な命令やスタック異常など、プログラムの誤りを示すフォールト。
    発生アドレスとオペコードは、CPUの命令サイクルが `locate()` で補完します。
    """
    def __init__(self, message: str, address: Optional[int] = None, opcode: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.address = address
        self.opcode = opcode

    # @intent:responsibility フォールト発生位置（命令アドレスとオペコード）を記録します。
    def locate(self, address: int, opcode: Optional[int]) -> None:
        if self.address is None:
            self.address = address
        if self.opcode is None:
            self.opcode = opcode

    def __str__(self) -> str:
        text = self.message
        if self.address is not None:
            text += f" at ${self.address:03X}"
        if self.opcode is not None:
            text += f" (opcode ${self.opcode:04X})"
        return text


class DecodeError(Chip8Fault):
    pass


class StackUnderflowError(Chip8Fault):
    pass


class StackOverflowError(Chip8Fault):
    pass
