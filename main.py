"""
Main entry point for GutterDiff.

This module handles:
- Command line argument parsing
- Logging configuration
- Exception handling
- The text report mode
- Launching the editor window
"""

from __future__ import annotations

import argparse
import logging
import sys
import traceback
from pathlib import Path
from typing import List, Optional, TextIO

from gutterdiff import __version__
from gutterdiff.core.baseline import BaselineSnapshot
from gutterdiff.core.buffer import TextBuffer
from gutterdiff.core.document import DiffDocumentState
from gutterdiff.core.markers.classifier import DiffAlgorithm
from gutterdiff.core.models import DiffSegment, MarkerFlags
from gutterdiff.services.file_io import FileIOService
from gutterdiff.services.settings import ApplicationSettings, SettingsManager


# =============================================================================
# Constants
# =============================================================================

APP_NAME = "GutterDiff"
APP_VERSION = __version__


# =============================================================================
# Logging Setup
# =============================================================================

class LogFormatter(logging.Formatter):
    """Custom log formatter with colors for console."""

    COLORS = {
        logging.INFO: '\033[32m',      # Green
        logging.WARNING: '\033[33m',   # Yellow
        logging.ERROR: '\033[31m',     # Red
        logging.CRITICAL: '\033[35m',  # Magenta
    }
    RESET = '\033[0m'

    def __init__(self, use_colors: bool = True, stream: Optional[TextIO] = None):
        super().__init__(
            fmt='%(asctime)s | %(levelname)-8s | %(name)s | %(message)s',
            datefmt='%Y-%m-%d %H:%M:%S'
        )
        stream = stream or sys.stderr
        self.use_colors = use_colors and hasattr(stream, 'isatty') and stream.isatty()

    def format(self, record: logging.LogRecord) -> str:
        formatted = super().format(record)

        if self.use_colors:
            color = self.COLORS.get(record.levelno, '')
            return f"{color}{formatted}{self.RESET}"

        return formatted


def setup_logging(level: str = "WARNING", log_file: Optional[Path] = None) -> logging.Logger:
    """
    Configure application logging.

    Console output goes to stderr so the report on stdout stays clean.

    Args:
        level: Log level string
        log_file: Optional file path for logging

    Returns:
        Root logger instance
    """
    numeric_level = getattr(logging, level.upper(), logging.WARNING)

    root_logger = logging.getLogger()
    root_logger.setLevel(numeric_level)
    root_logger.handlers.clear()

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(numeric_level)
    console_handler.setFormatter(LogFormatter(use_colors=True, stream=sys.stderr))
    root_logger.addHandler(console_handler)

    if log_file:
        log_file.parent.mkdir(parents=True, exist_ok=True)

        file_handler = logging.FileHandler(log_file, encoding='utf-8')
        file_handler.setLevel(numeric_level)
        file_handler.setFormatter(LogFormatter(use_colors=False))
        root_logger.addHandler(file_handler)

    return root_logger


# =============================================================================
# Exception Handling
# =============================================================================

class ExceptionHandler:
    """
    Global exception handler for unhandled exceptions.

    Logs the exception, and shows an error dialog when the window is up.
    """

    def __init__(self, logger: logging.Logger):
        self.logger = logger
        self.gui = False

    def handle_exception(self, exc_type: type, exc_value: BaseException, exc_tb) -> None:
        """Handle an unhandled exception."""
        if issubclass(exc_type, KeyboardInterrupt):
            sys.__excepthook__(exc_type, exc_value, exc_tb)
            return

        self.logger.critical("Unhandled exception", exc_info=(exc_type, exc_value, exc_tb))

        if self.gui:
            tb_text = ''.join(traceback.format_exception(exc_type, exc_value, exc_tb))
            self._show_error_dialog(exc_type, exc_value, tb_text)

    def _show_error_dialog(self, exc_type: type, exc_value: BaseException, traceback_text: str) -> None:
        """Show error dialog to user."""
        from PyQt6.QtWidgets import QApplication, QMessageBox

        if not QApplication.instance():
            return

        dialog = QMessageBox()
        dialog.setIcon(QMessageBox.Icon.Critical)
        dialog.setWindowTitle("Application Error")
        dialog.setText(f"An unexpected error occurred:\n\n{exc_type.__name__}: {exc_value}")
        dialog.setDetailedText(traceback_text)
        dialog.exec()


# =============================================================================
# Argument Parsing
# =============================================================================

def parse_arguments(args: Optional[List[str]] = None) -> argparse.Namespace:
    """
    Parse command line arguments.

    Args:
        args: Arguments to parse (defaults to sys.argv)

    Returns:
        Parsed arguments
    """
    parser = argparse.ArgumentParser(
        prog='gutterdiff',
        description='Show which lines of a file are added or modified relative to a baseline.',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s old.txt new.txt                  Print changed lines and segments
  %(prog)s old.txt new.txt --algorithm exact
  %(prog)s old.txt new.txt --gui            Edit new.txt with live markers
        """
    )

    parser.add_argument('baseline', help='Baseline file')
    parser.add_argument('current', help='Current file')

    parser.add_argument(
        '--gui',
        action='store_true',
        help='Open the current file in an editor window'
    )

    # Engine options
    parser.add_argument(
        '--algorithm',
        choices=[a.value for a in DiffAlgorithm],
        default=None,
        help='Alignment strategy'
    )
    parser.add_argument(
        '--max-lines',
        type=int,
        default=None,
        help='Largest side the exact alignment accepts'
    )
    parser.add_argument(
        '--max-cells',
        type=int,
        default=None,
        help='Largest table the exact alignment accepts'
    )

    # Configuration
    parser.add_argument(
        '-c', '--config',
        help='Configuration file path'
    )

    # Logging
    parser.add_argument(
        '--log-level',
        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL'],
        default='WARNING',
        help='Log level'
    )

    parser.add_argument(
        '--version',
        action='version',
        version=f'{APP_NAME} {APP_VERSION}'
    )

    return parser.parse_args(args)


def load_settings(args: argparse.Namespace) -> ApplicationSettings:
    """Load settings from the config file and apply command line overrides."""
    manager = SettingsManager(Path(args.config) if args.config else None)
    settings = manager.settings

    engine = settings.engine
    if args.algorithm:
        engine.algorithm = DiffAlgorithm(args.algorithm)
    if args.max_lines is not None:
        engine.max_lines = args.max_lines
    if args.max_cells is not None:
        engine.max_cells = args.max_cells

    return settings


# =============================================================================
# Report
# =============================================================================

def describe_flags(flags: MarkerFlags) -> str:
    if flags.trailing_eof_proxy_only:
        return 'trailing-newline'
    if flags.added:
        return 'added'
    return 'modified'


def describe_segment(segment: DiffSegment) -> str:
    if segment.added and not segment.modified:
        kind = 'added'
    else:
        kind = 'modified'
    return f"segment {segment.from_line}-{segment.to_line} {kind}"


def write_report(state: DiffDocumentState, out: TextIO) -> None:
    """Print flagged lines followed by their segments."""
    line_flags = state.line_flags
    if line_flags is None:
        print("no markers", file=out)
        return

    if not state.segments:
        print("no changes", file=out)
        return

    for line_no, flags in enumerate(line_flags, start=1):
        if flags is not None and (flags.is_changed or flags.trailing_eof_proxy_only):
            print(f"{line_no}\t{describe_flags(flags)}", file=out)

    for segment in state.segments:
        print(describe_segment(segment), file=out)


# =============================================================================
# Main Window Creation
# =============================================================================

def run_gui(settings: ApplicationSettings, baseline: BaselineSnapshot, text: str, title: str) -> int:
    """Show the editor window and run the event loop."""
    from PyQt6.QtWidgets import QApplication

    from gutterdiff.ui.baseline_view import BaselineCompareView

    app = QApplication.instance() or QApplication(sys.argv)
    app.setApplicationName(APP_NAME)
    app.setApplicationVersion(APP_VERSION)

    view = BaselineCompareView(settings)
    view.set_baseline(baseline)
    view.set_text(text)
    view.setWindowTitle(f"{title} - {APP_NAME}")
    view.resize(settings.ui.window_width, settings.ui.window_height)
    view.show()

    return app.exec()


# =============================================================================
# Main Function
# =============================================================================

def main(argv: Optional[List[str]] = None) -> int:
    """
    Application main entry point.

    Returns:
        Exit code (0 for success)
    """
    args = parse_arguments(argv)

    logger = setup_logging(args.log_level)
    logger.debug(f"Starting {APP_NAME} v{APP_VERSION}")

    exception_handler = ExceptionHandler(logger)
    sys.excepthook = exception_handler.handle_exception

    settings = load_settings(args)
    file_io = FileIOService(max_text_size=settings.engine.max_text_chars * 4)

    baseline_result = file_io.read_file(args.baseline)
    if not baseline_result.success:
        logger.error(f"Cannot read baseline {args.baseline}: {baseline_result.error}")
        return 1

    current_result = file_io.read_file(args.current)
    if not current_result.success:
        logger.error(f"Cannot read {args.current}: {current_result.error}")
        return 1

    baseline = BaselineSnapshot.from_text(baseline_result.text)

    if args.gui:
        exception_handler.gui = True
        return run_gui(settings, baseline, current_result.text, args.current)

    state = DiffDocumentState(
        options=settings.engine.to_marker_options(),
        baseline=baseline,
        buffer=TextBuffer(current_result.text),
    )
    write_report(state, sys.stdout)
    return 0


# =============================================================================
# Entry Point
# =============================================================================

if __name__ == '__main__':
    sys.exit(main())
