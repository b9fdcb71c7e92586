"""
Development Runner
==================
Starts Chart Digitizer straight from a source checkout, without `pip install`.

Usage:
    $ python run.py [image] [--debug] [--log-level DEBUG] [--log-file PATH]

The arguments are the same as for the installed `chartdigitizer` command.
"""
import os
import sys

SRC_DIR: str = os.path.join(os.path.dirname(os.path.abspath(__file__)), 'src')
if SRC_DIR not in sys.path:
    sys.path.insert(0, SRC_DIR)


def set_windows_app_id(app_id: str = 'ChartDigitizer.Desktop') -> None:
    """Groups the windows under our own taskbar icon instead of python.exe's."""
    try:
        import ctypes
        ctypes.windll.shell32.SetCurrentProcessExplicitAppUserModelID(app_id)
    except (AttributeError, ImportError):
        # Not on Windows
        pass


if __name__ == "__main__":
    set_windows_app_id()

    from chartdigitizer.main import main
    main()
