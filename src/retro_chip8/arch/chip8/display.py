# src/retro_chip8/arch/chip8/display.py
"""
CHIP-8 フレームバッファ。

64x32のモノクロピクセルを行優先で保持し、スプライトのXOR描画（ラップアラウンド付き）と
衝突検出を提供します。書き込みは描画命令とクリア命令のみが行い、レンダラは読み取りのみ行います。
"""
from typing import Iterable, List

DISPLAY_WIDTH = 64
DISPLAY_HEIGHT = 32
SPRITE_WIDTH = 8


# @intent:responsibility 64x32の1bitピクセルグリッドを管理します。
class Framebuffer:
    def __init__(self, width: int = DISPLAY_WIDTH, height: int = DISPLAY_HEIGHT):
        self._width = width
        self._height = height
        self._pixels = bytearray(width * height)
        # @intent:rationale レンダラが再描画の要否を判断できるよう、変更のたびに増加する世代番号を持ちます。
        self._generation = 0

    @property
    def width(self) -> int:
        return self._width

    @property
    def height(self) -> int:
        return self._height

    @property
    def generation(self) -> int:
        return self._generation

    # @intent:responsibility 全ピクセルを0で埋めます。
    def clear(self) -> None:
        self._pixels[:] = bytes(len(self._pixels))
        self._generation += 1

    # @intent:responsibility 指定座標のピクセル値(0/1)を返します。
    # @intent:pre-condition 0 <= x < width, 0 <= y < height。範囲外はIndexErrorとなります。
    def pixel(self, x: int, y: int) -> int:
        if not (0 <= x < self._width and 0 <= y < self._height):
            raise IndexError(f"Pixel ({x}, {y}) out of range for {self._width}x{self._height} display.")
        return self._pixels[y * self._width + x]

    # @intent:responsibility 1行分のピクセル値をリストで返します。
    def row(self, y: int) -> List[int]:
        start = y * self._width
        return list(self._pixels[start:start + self._width])

    # @intent:responsibility スプライトをXOR描画し、点灯していたピクセルが消えたかどうかを返します。
    def draw_sprite(self, x: int, y: int, rows: Iterable[int]) -> bool:
        """
        各バイトを8ピクセルの1行（MSBが左端）として (x, y) を原点に描画します。
        座標は軸ごとに独立して画面幅・高さでラップします。
        """
        collision = False
        for row_offset, sprite_byte in enumerate(rows):
            py = (y + row_offset) % self._height
            for col in range(SPRITE_WIDTH):
                if not (sprite_byte >> (7 - col)) & 0x01:
                    continue
                px = (x + col) % self._width
                index = py * self._width + px
                if self._pixels[index]:
                    collision = True
                self._pixels[index] ^= 1
        self._generation += 1
        return collision
