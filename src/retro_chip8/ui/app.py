# src/retro_chip8/ui/app.py
"""
Qtアプリケーションのエントリポイント。
コマンドライン引数と構成ファイルを解釈し、メインウィンドウを起動します。
"""
import argparse
import logging
import sys
from typing import List, Optional

import yaml
from PySide6.QtWidgets import QApplication

from retro_chip8.common.errors import LoadError
from retro_chip8.config.loader import ConfigLoader
from retro_chip8.config.models import MachineConfig
from .main_window import MainWindow

LOG_FORMAT = "[%(levelname)s] %(name)s: %(message)s"


def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="retro-chip8", description="CHIP-8 virtual machine")
    parser.add_argument("rom", nargs="?", help="raw CHIP-8 program image to run")
    parser.add_argument("--config", help="YAML machine configuration file")
    parser.add_argument("--scale", type=int, help="display scale factor")
    parser.add_argument("--cycles", type=int, help="instructions executed per second")
    parser.add_argument("--log-level", default="WARNING",
                        choices=["DEBUG", "INFO", "WARNING", "ERROR"], help="logging level")
    return parser


# @intent:responsibility 構成ファイルとコマンドライン指定を合成したMachineConfigを返します。
# @intent:rationale コマンドライン指定は構成ファイルの値より優先します。
def load_config(args: argparse.Namespace) -> MachineConfig:
    config = ConfigLoader().load_from_file(args.config) if args.config else MachineConfig()
    if args.scale is not None:
        if args.scale <= 0:
            raise ValueError("--scale must be positive")
        config.display.scale = args.scale
    if args.cycles is not None:
        if args.cycles <= 0:
            raise ValueError("--cycles must be positive")
        config.cycles_per_second = args.cycles
    return config


# @intent:responsibility アプリケーションを起動し、メインウィンドウを表示します。
def main(argv: Optional[List[str]] = None):
    parser = build_arg_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(level=getattr(logging, args.log_level), format=LOG_FORMAT)

    try:
        config = load_config(args)
    except (OSError, ValueError, yaml.YAMLError) as e:
        parser.error(str(e))

    app = QApplication(sys.argv[:1])
    main_win = MainWindow(config)
    if args.rom:
        try:
            main_win.load_rom(args.rom)
        except (LoadError, OSError) as e:
            parser.error(f"cannot load ROM: {e}")
    main_win.show()
    sys.exit(app.exec())

if __name__ == '__main__':
    main()
