import sys
import unittest

from PySide6.QtWidgets import QApplication
from PySide6.QtGui import QColor

from retro_chip8.arch.chip8.display import Framebuffer
from retro_chip8.ui.display_view import DisplayView


class TestDisplayView(unittest.TestCase):
    @classmethod
    def setUpClass(cls):
        if not QApplication.instance():
            cls.app = QApplication(sys.argv)
        else:
            cls.app = QApplication.instance()

    def setUp(self):
        self.fb = Framebuffer()
        self.view = DisplayView(scale=4, foreground="#FFFFFF", background="#000000")
        self.view.set_framebuffer(self.fb)

    def test_size_hint_uses_scale(self):
        hint = self.view.sizeHint()
        self.assertEqual((hint.width(), hint.height()), (256, 128))

    def test_render_image_reflects_framebuffer(self):
        self.fb.draw_sprite(62, 0, [0b11100000])
        image = self.view.render_image()
        self.assertEqual((image.width(), image.height()), (64, 32))
        on = QColor("#FFFFFF").rgb()
        off = QColor("#000000").rgb()
        self.assertEqual(image.pixel(62, 0), on)
        self.assertEqual(image.pixel(63, 0), on)
        self.assertEqual(image.pixel(0, 0), on)
        self.assertEqual(image.pixel(1, 0), off)
        self.assertEqual(image.pixel(5, 5), off)

    def test_refresh_only_when_changed(self):
        self.assertTrue(self.view.refresh())
        self.view.render_image()
        self.assertFalse(self.view.refresh())

        self.fb.clear()
        self.assertTrue(self.view.refresh())

    def test_refresh_without_framebuffer(self):
        view = DisplayView()
        self.assertFalse(view.refresh())
        self.assertEqual(view.render_image().pixel(0, 0), QColor("#101010").rgb())

if __name__ == '__main__':
    unittest.main()
