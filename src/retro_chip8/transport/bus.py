# retro_chip8/transport/bus.py
"""
Transport Layer (メモリバス)

CHIP-8の4KBアドレス空間をメモリ領域（MemoryRegion）の列として表現し、
各アドレスへのアクセスを担当デバイスへ振り分けます。

- フォントを収める予約領域はROMデバイス、プログラム領域はRAMデバイスが担当します。
- 実行中の命令による読み書き(read/write)はアクセスログに記録され、Snapshotに含まれます。
- ローダー用のload()とインスペクタ用のpeek()はログに残りません。
"""
import warnings
from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import List, Tuple


class BusAccessType(Enum):
    READ = "READ"
    WRITE = "WRITE"


# @intent:responsibility 命令実行中に行われた1回のメモリアクセスを記録します。
@dataclass(frozen=True)
class BusAccess:
    address: int
    data: int
    access_type: BusAccessType


# @intent:responsibility バスに接続されるメモリデバイスのインターフェースを定義します。
# @intent:pre-condition read/writeに渡されるアドレスはデバイス先頭からのオフセットです。
class Device(ABC):
    @property
    @abstractmethod
    def size(self) -> int:
        pass

    @abstractmethod
    def read(self, offset: int) -> int:
        pass

    @abstractmethod
    def write(self, offset: int, data: int) -> None:
        pass


# @intent:responsibility ゼロクリアされたバイト列を保持する読み書き可能なメモリです。
class RAM(Device):
    def __init__(self, size: int):
        if not isinstance(size, int) or size <= 0:
            raise ValueError("RAM size must be a positive integer.")
        self._cells = bytearray(size)

    @property
    def size(self) -> int:
        return len(self._cells)

    def _check_offset(self, offset: int) -> None:
        if not 0 <= offset < len(self._cells):
            raise IndexError(f"Address {offset} out of bounds for {type(self).__name__} of size {len(self._cells)}.")

    def read(self, offset: int) -> int:
        self._check_offset(offset)
        return self._cells[offset]

    def write(self, offset: int, data: int) -> None:
        self._check_offset(offset)
        if not 0 <= data <= 0xFF:
            raise ValueError(f"Data {data} is not an 8-bit value.")
        self._cells[offset] = data


# @intent:responsibility 実行中は書き換えられないメモリです（組み込みフォント領域）。
class ROM(RAM):
    """
    write() による書き込みは RuntimeWarning を出して無視します。
    内容の設定には load_data() を使用します。
    """
    def write(self, offset: int, data: int) -> None:
        self._check_offset(offset)
        # stacklevel=3: 警告の発生元をBus.write()の呼び出し側（命令の実装）にする
        warnings.warn(f"Ignored write of ${data:02X} to read-only offset ${offset:03X}.", RuntimeWarning, stacklevel=3)

    def load_data(self, offset: int, data: int) -> None:
        super().write(offset, data)


# @intent:responsibility アドレス範囲 [start, end] とそれを担当するデバイスの対応です。
@dataclass(frozen=True)
class MemoryRegion:
    start: int
    end: int
    device: Device

    def contains(self, address: int) -> bool:
        return self.start <= address <= self.end


# @intent:responsibility アドレス空間を管理し、アクセスを担当デバイスへ振り分けます。
class Bus:
    def __init__(self):
        self._regions: List[MemoryRegion] = []
        self._activity: List[BusAccess] = []

    @property
    def regions(self) -> List[MemoryRegion]:
        return list(self._regions)

    # @intent:responsibility 記録されたアクセスログを返し、ログを空にします。
    def get_and_clear_activity_log(self) -> List[BusAccess]:
        activity, self._activity = self._activity, []
        return activity

    # @intent:responsibility アドレス範囲にデバイスを割り当てます。
    # @intent:pre-condition 範囲は非負で、既存の領域と重ならず、デバイスのサイズと一致する必要があります。
    def register_device(self, start_address: int, end_address: int, device: Device) -> None:
        if not 0 <= start_address <= end_address:
            raise ValueError("Invalid address range: start_address must be <= end_address and non-negative.")
        if not isinstance(device, Device):
            raise TypeError("Device must be an instance of a class derived from Device.")

        expected_size = end_address - start_address + 1
        if device.size != expected_size:
            raise ValueError(
                f"Registered {type(device).__name__} device size ({device.size} bytes) does not match "
                f"the specified address range size ({expected_size} bytes)."
            )
        for region in self._regions:
            if start_address <= region.end and region.start <= end_address:
                raise ValueError(
                    f"Address range ${start_address:03X}-${end_address:03X} overlaps "
                    f"${region.start:03X}-${region.end:03X}."
                )
        self._regions.append(MemoryRegion(start_address, end_address, device))

    # @intent:responsibility アドレスを担当するデバイスと、そのデバイス内のオフセットを返します。
    # @intent:post-condition どの領域にも属さないアドレスはIndexErrorとなります。
    def device_at(self, address: int) -> Tuple[Device, int]:
        for region in self._regions:
            if region.contains(address):
                return region.device, address - region.start
        raise IndexError(f"Address {address:#05x} not mapped to any device.")

    def read(self, address: int) -> int:
        device, offset = self.device_at(address)
        data = device.read(offset)
        self._activity.append(BusAccess(address, data, BusAccessType.READ))
        return data

    # @intent:responsibility ログを残さずに読み出します。レンダラやテストからの参照用です。
    def peek(self, address: int) -> int:
        device, offset = self.device_at(address)
        return device.read(offset)

    def write(self, address: int, data: int) -> None:
        device, offset = self.device_at(address)
        device.write(offset, data)
        self._activity.append(BusAccess(address, data, BusAccessType.WRITE))

    # @intent:responsibility ローダー専用の書き込みです。ROM領域にも書き込め、ログには残りません。
    def load(self, address: int, data: int) -> None:
        device, offset = self.device_at(address)
        if isinstance(device, ROM):
            device.load_data(offset, data)
        else:
            device.write(offset, data)
