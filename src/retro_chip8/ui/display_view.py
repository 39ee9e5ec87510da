"""
Display View モジュール。

CHIP-8のフレームバッファを整数倍に拡大して描画するウィジェットを提供します。
フレームバッファは読み取りのみ行います。
"""
from typing import Optional

from PySide6.QtWidgets import QWidget, QSizePolicy
from PySide6.QtCore import Qt, QSize
from PySide6.QtGui import QPainter, QColor, QImage, QPaintEvent

from retro_chip8.arch.chip8.display import Framebuffer, DISPLAY_WIDTH, DISPLAY_HEIGHT

# --- 色定義 ---
COLOR_PIXEL_ON = "#33FF66"
COLOR_PIXEL_OFF = "#101010"


# @intent:responsibility フレームバッファの内容を拡大表示します。
class DisplayView(QWidget):
    def __init__(self, scale: int = 10, foreground: str = COLOR_PIXEL_ON,
                 background: str = COLOR_PIXEL_OFF, parent=None):
        super().__init__(parent)
        self._framebuffer: Optional[Framebuffer] = None
        self._scale = scale
        self._foreground = QColor(foreground)
        self._background = QColor(background)
        self._rendered_generation = -1
        self.setSizePolicy(QSizePolicy.Expanding, QSizePolicy.Expanding)
        self.setMinimumSize(DISPLAY_WIDTH, DISPLAY_HEIGHT)

    def set_framebuffer(self, framebuffer: Framebuffer) -> None:
        self._framebuffer = framebuffer
        self._rendered_generation = -1
        self.update()

    @property
    def scale(self) -> int:
        return self._scale

    def sizeHint(self) -> QSize:
        return QSize(DISPLAY_WIDTH * self._scale, DISPLAY_HEIGHT * self._scale)

    # @intent:responsibility 前回の描画以降にフレームバッファが変更されていれば再描画を要求します。
    def refresh(self) -> bool:
        if self._framebuffer is None or self._framebuffer.generation == self._rendered_generation:
            return False
        self.update()
        return True

    # @intent:responsibility フレームバッファを等倍のQImageに変換します。
    def render_image(self) -> QImage:
        image = QImage(DISPLAY_WIDTH, DISPLAY_HEIGHT, QImage.Format_RGB32)
        image.fill(self._background)
        fb = self._framebuffer
        if fb is None:
            return image
        on = self._foreground.rgb()
        for y in range(fb.height):
            for x, value in enumerate(fb.row(y)):
                if value:
                    image.setPixel(x, y, on)
        self._rendered_generation = fb.generation
        return image

    def paintEvent(self, event: QPaintEvent) -> None:
        painter = QPainter(self)
        painter.fillRect(self.rect(), self._background)
        # アスペクト比を保ったまま中央に拡大表示する
        scale = max(1, min(self.width() // DISPLAY_WIDTH, self.height() // DISPLAY_HEIGHT))
        width = DISPLAY_WIDTH * scale
        height = DISPLAY_HEIGHT * scale
        left = (self.width() - width) // 2
        top = (self.height() - height) // 2
        painter.drawImage(left, top, self.render_image().scaled(width, height, Qt.IgnoreAspectRatio, Qt.FastTransformation))
        painter.end()
