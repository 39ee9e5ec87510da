# src/retro_chip8/arch/chip8/keypad.py
"""
16キーの16進キーパッド。

CPUはキー入力状態を所有せず、`KeyInput` インターフェースを介して問い合わせます。
ホストはキーイベントを `Keypad` に通知します。
"""
from abc import ABC, abstractmethod
from collections import deque
from typing import Deque, Optional, Set

KEY_COUNT = 16


# @intent:responsibility CPUが利用するキー入力機能のインターフェースを定義します。
class KeyInput(ABC):
    # @intent:responsibility キーKが現在押下されているかを返します。
    @abstractmethod
    def is_pressed(self, key: int) -> bool:
        pass

    # @intent:responsibility 未処理のキー押下イベントがあれば取り出して返します。なければNone。
    # @intent:rationale ホストの描画ループをブロックしないよう、待機はCPU側のポーリングで実現します。
    @abstractmethod
    def next_key_press(self) -> Optional[int]:
        pass

    # @intent:responsibility 未処理のキー押下イベントを全て破棄します。キー入力待ちの開始時に呼ばれます。
    @abstractmethod
    def discard_key_presses(self) -> None:
        pass


def _check_key(key: int) -> int:
    if not 0 <= key < KEY_COUNT:
        raise ValueError(f"Key {key} is not a hexadecimal key (0-15).")
    return key


# @intent:responsibility 押下中のキー集合と押下イベントのキューを保持する標準のキーパッド実装です。
class Keypad(KeyInput):
    def __init__(self):
        self._held: Set[int] = set()
        # 取り出されない押下イベントが溜まり続けないよう、キュー長はキー数までに制限する
        self._presses: Deque[int] = deque(maxlen=KEY_COUNT)

    def press(self, key: int) -> None:
        key = _check_key(key)
        # キーリピートによる重複イベントは無視する
        if key not in self._held:
            self._held.add(key)
            self._presses.append(key)

    def release(self, key: int) -> None:
        self._held.discard(_check_key(key))

    def is_pressed(self, key: int) -> bool:
        return (key & 0x0F) in self._held

    def next_key_press(self) -> Optional[int]:
        if self._presses:
            return self._presses.popleft()
        return None

    def discard_key_presses(self) -> None:
        self._presses.clear()

    def reset(self) -> None:
        self._held.clear()
        self._presses.clear()
