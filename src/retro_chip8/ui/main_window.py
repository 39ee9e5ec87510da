# src/retro_chip8/ui/main_window.py
"""
メインウィンドウの実装。
CPUとキーパッドを所有するホストループ（命令実行とタイマー減算の2系統のQTimer）と、
画面表示・キー入力・音声通知を管理します。
"""
import logging
from pathlib import Path
from typing import Dict, Optional, Tuple

from PySide6.QtWidgets import QMainWindow, QApplication, QLabel, QFileDialog, QMessageBox
from PySide6.QtGui import QAction, QCloseEvent, QKeyEvent, QKeySequence
from PySide6.QtCore import Qt, QTimer, Slot

from retro_chip8.common.errors import Chip8Fault, LoadError
from retro_chip8.config.builder import SystemBuilder
from retro_chip8.config.models import MachineConfig
from retro_chip8.loader.loader import RomLoader
from retro_chip8.arch.chip8.cpu import Chip8Cpu
from retro_chip8.arch.chip8.keypad import Keypad
from .display_view import DisplayView

logger = logging.getLogger(__name__)

FRAME_INTERVAL_MS = 16


# @intent:utility_function 命令実行レートから1フレームあたりの命令数を求めます。
def cycles_per_frame(cycles_per_second: int, interval_ms: int = FRAME_INTERVAL_MS) -> int:
    return max(1, round(cycles_per_second * interval_ms / 1000))


def _key_code(key) -> int:
    return int(getattr(key, "value", key))


# @intent:utility_function キー名（"Q", "1", "Space"など）で書かれたキーマップを、Qtのキーコードをキーとする辞書に変換します。
def build_key_codes(keymap: Dict[str, int]) -> Dict[int, int]:
    codes: Dict[int, int] = {}
    for name, key in keymap.items():
        sequence = QKeySequence(name)
        if sequence.isEmpty():
            logger.warning("Ignoring unknown key name %r in keymap", name)
            continue
        codes[_key_code(sequence[0].key())] = key
    return codes


# @intent:responsibility アプリケーションのメインウィンドウを定義し、ホストループを駆動します。
class MainWindow(QMainWindow):
    def __init__(self, config: Optional[MachineConfig] = None, parent=None):
        super(MainWindow, self).__init__(parent)
        self._config = config if config is not None else MachineConfig()
        self._keymap: Dict[int, int] = build_key_codes(self._config.keymap)
        self._rom_path: Optional[Path] = None
        self._running = False
        self._sound_on = False

        self.setWindowTitle("Retro CHIP-8 - ESC to exit")

        self._setup_backend()
        self._create_display()
        self._create_menus()
        self._create_status_bar()
        self._create_timers()
        self._update_status()

    # @intent:responsibility キーパッドとCPUを構築します。
    def _setup_backend(self):
        self.keypad, self.cpu = self._build_backend()

    def _build_backend(self) -> Tuple[Keypad, Chip8Cpu]:
        keypad = Keypad()
        return keypad, SystemBuilder().build_system(self._config, keypad)

    def _create_display(self):
        display = self._config.display
        self.display_view = DisplayView(display.scale, display.foreground, display.background)
        self.display_view.set_framebuffer(self.cpu.display)
        self.setCentralWidget(self.display_view)

    def _create_menus(self):
        file_menu = self.menuBar().addMenu("File")

        self.open_action = QAction("Open ROM...", self)
        self.open_action.setShortcut("Ctrl+O")
        self.open_action.triggered.connect(self._open_rom_dialog)
        file_menu.addAction(self.open_action)

        self.reset_action = QAction("Reset", self)
        self.reset_action.setShortcut("Ctrl+R")
        self.reset_action.triggered.connect(self.reset)
        file_menu.addAction(self.reset_action)

        quit_action = QAction("Quit", self)
        quit_action.setShortcut("Ctrl+Q")
        quit_action.triggered.connect(self.close)
        file_menu.addAction(quit_action)

    def _create_status_bar(self):
        self.status_label = QLabel(self)
        self.sound_label = QLabel(self)
        self.statusBar().addWidget(self.status_label, 1)
        self.statusBar().addPermanentWidget(self.sound_label)

    # @intent:responsibility 命令実行とタイマー減算を独立した周期で駆動するタイマーを作成します。
    def _create_timers(self):
        self._cycles_per_frame = cycles_per_frame(self._config.cycles_per_second)
        self._cpu_timer = QTimer(self)
        self._cpu_timer.setInterval(FRAME_INTERVAL_MS)
        self._cpu_timer.timeout.connect(self.run_frame)

        self._timer_timer = QTimer(self)
        self._timer_timer.setTimerType(Qt.PreciseTimer)
        self._timer_timer.setInterval(max(1, round(1000 / self._config.timer_hz)))
        self._timer_timer.timeout.connect(self.tick_timers)

    @property
    def running(self) -> bool:
        return self._running

    # @intent:responsibility ROMファイルをロードし、実行を開始します。
    # @intent:post-condition ロードに失敗した場合は例外が伝播し、実行中のマシンはそのまま残ります。
    def load_rom(self, path) -> None:
        keypad, cpu = self._build_backend()
        RomLoader().load_rom(path, cpu)
        self.stop()
        self.keypad, self.cpu = keypad, cpu
        self.display_view.set_framebuffer(cpu.display)
        self._rom_path = Path(path)
        self.setWindowTitle(f"Retro CHIP-8 - {self._rom_path.name}")
        self.start()

    @Slot()
    def reset(self):
        if self._rom_path is not None:
            self.load_rom(self._rom_path)

    def start(self) -> None:
        self._running = True
        self._cpu_timer.start()
        self._timer_timer.start()
        self._update_status()

    def stop(self) -> None:
        self._running = False
        self._cpu_timer.stop()
        self._timer_timer.stop()
        self._update_sound(False)
        self._update_status()

    # @intent:responsibility 1フレーム分の命令を実行し、画面を更新します。
    # @intent:flow キー入力待ちになった時点でそのフレームの実行を打ち切ります。
    @Slot()
    def run_frame(self):
        try:
            for _ in range(self._cycles_per_frame):
                snapshot = self.cpu.step()
                if snapshot.waiting_for_key:
                    break
        except Chip8Fault as fault:
            self.stop()
            self.display_view.refresh()
            QMessageBox.critical(self, "CPU Fault", str(fault))
            return
        except IndexError:
            self.stop()
            raise
        self.display_view.refresh()
        self._update_status()

    # @intent:responsibility 遅延/サウンドタイマーを1回減算し、音声状態を反映します。
    @Slot()
    def tick_timers(self):
        self.cpu.tick_timers()
        self._update_sound(self.cpu.sound_active())

    def _update_sound(self, active: bool) -> None:
        if active and not self._sound_on:
            QApplication.beep()
        self._sound_on = active
        self.sound_label.setText("♪" if active else "")

    def _update_status(self):
        if self._rom_path is None:
            text = "No ROM loaded"
        elif self.cpu.fault is not None:
            text = f"Halted: {self.cpu.fault}"
        elif not self._running:
            text = "Stopped"
        elif self.cpu.waiting_for_key:
            text = "Waiting for key..."
        else:
            text = "Running"
        self.status_label.setText(text)

    @Slot()
    def _open_rom_dialog(self):
        file_name, _ = QFileDialog.getOpenFileName(self, "Open CHIP-8 ROM", "", "CHIP-8 ROMs (*.ch8 *.c8);;All Files (*)")
        if file_name:
            try:
                self.load_rom(file_name)
            except (LoadError, OSError) as e:
                QMessageBox.critical(self, "Error", f"Failed to load ROM: {e}")

    # @intent:responsibility ホストのキーをCHIP-8の16進キーに変換します。対応がなければNone。
    def map_key(self, event: QKeyEvent) -> Optional[int]:
        return self._keymap.get(_key_code(event.key()))

    def keyPressEvent(self, event: QKeyEvent):
        if event.key() == Qt.Key_Escape:
            self.close()
            return
        key = self.map_key(event)
        if key is None or event.isAutoRepeat():
            super().keyPressEvent(event)
            return
        self.keypad.press(key)

    def keyReleaseEvent(self, event: QKeyEvent):
        key = self.map_key(event)
        if key is None or event.isAutoRepeat():
            super().keyReleaseEvent(event)
            return
        self.keypad.release(key)

    def closeEvent(self, event: QCloseEvent):
        self.stop()
        event.accept()
