"""
Application Initialization
==========================
This module wires the controller and the main window together and starts the
Qt Event Loop.

Why is this file needed?
------------------------
It acts as the "Dependency Injection" root. It:
1. Parses the command line and configures logging.
2. Instantiates the Interaction Controller (Model + Controller state).
3. Instantiates the Main Window (View), passing the controller in.
"""
import argparse
import logging
import sys
from typing import List, Optional

from PySide6.QtWidgets import QApplication

from chartdigitizer.controller.interaction import InteractionController
from chartdigitizer.logging_config import setup_logging
from chartdigitizer.view.main_window import MainWindow, VISIBLE_APP_NAME


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="chartdigitizer", description=VISIBLE_APP_NAME)
    parser.add_argument("image", nargs="?", help="Chart image to open on start-up.")
    parser.add_argument("--debug", action="store_true", help="Draw quad-tree boundaries and point ids.")
    parser.add_argument("--log-level", default="INFO",
                        choices=["DEBUG", "INFO", "WARNING", "ERROR"], help="Console log level.")
    parser.add_argument("--log-file", default=None, help="Also write the log to this file.")
    return parser


def main(argv: Optional[List[str]] = None) -> None:
    args = build_parser().parse_args(argv)

    # 1. Setup Logging (Console + Optional File)
    setup_logging(level=getattr(logging, args.log_level), log_file=args.log_file)

    # 2. Create the Qt Application
    app = QApplication(sys.argv[:1])
    app.setApplicationName(VISIBLE_APP_NAME)

    # 3. Initialize the controller and the Main Window
    controller = InteractionController()
    window = MainWindow(controller, debug=args.debug)
    window.show()

    if args.image:
        window.load_image(args.image)

    # 4. Start Event Loop
    sys.exit(app.exec())


if __name__ == "__main__":
    main()
