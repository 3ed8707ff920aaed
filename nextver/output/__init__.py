"""Terminal Output and CI Environment Package"""

import os
import sys
import threading
import uuid


class Colors:
    """ANSI escape codes for terminal colors."""
    RESET = '\033[0m'
    BOLD = '\033[1m'
    DIM = '\033[2m'
    RED = '\033[31m'
    GREEN = '\033[32m'
    YELLOW = '\033[33m'
    CYAN = '\033[36m'
    MAGENTA = '\033[35m'


def _supports_color() -> bool:
    if os.environ.get('NO_COLOR'):
        return False
    if os.environ.get('FORCE_COLOR'):
        return True
    if not hasattr(sys.stdout, 'isatty') or not sys.stdout.isatty():
        return False
    if sys.platform == 'win32':
        try:
            import ctypes
            kernel32 = ctypes.windll.kernel32
            kernel32.SetConsoleMode(kernel32.GetStdHandle(-11), 7)
            return True
        except Exception:
            return False
    return True


def _supports_unicode() -> bool:
    if sys.platform == 'win32':
        try:
            '✓'.encode(sys.stdout.encoding or 'utf-8')
            return True
        except (UnicodeEncodeError, LookupError):
            return False
    return True


COLORS_ENABLED = _supports_color()
UNICODE_ENABLED = _supports_unicode()

CROSS = '✗' if UNICODE_ENABLED else '[X]'
ARROW = '→' if UNICODE_ENABLED else '->'


def _colorize(text: str, *codes: str) -> str:
    if not COLORS_ENABLED:
        return text
    return f"{''.join(codes)}{text}{Colors.RESET}"


def error(text: str) -> str:
    return _colorize(text, Colors.RED)


def warning(text: str) -> str:
    return _colorize(text, Colors.YELLOW)


def info(text: str) -> str:
    return _colorize(text, Colors.CYAN)


def dim(text: str) -> str:
    return _colorize(text, Colors.DIM)


def bold(text: str) -> str:
    return _colorize(text, Colors.BOLD)


def highlight(text: str) -> str:
    return _colorize(text, Colors.MAGENTA)


LABEL_COLORS = {
    'MAJOR': Colors.RED,
    'MINOR': Colors.GREEN,
    'PATCH': Colors.CYAN,
    'SKIP': Colors.DIM,
    'INVALID': Colors.YELLOW,
}


def bump_label(label: str) -> str:
    """Format a narration label like [MINOR], colored by severity."""
    text = f"[{label}]"
    color = LABEL_COLORS.get(label)
    if color is None:
        return text
    return _colorize(text, Colors.BOLD, color)


def in_github_actions() -> bool:
    return os.environ.get('GITHUB_ACTIONS') == 'true'


def _escape_command(message: str) -> str:
    """Escape a workflow command value (%, CR and LF)."""
    return message.replace('%', '%25').replace('\r', '%0D').replace('\n', '%0A')


def log(message: str = "") -> None:
    print(message)


def print_error(message: str) -> None:
    print(f"{error(CROSS)} {error(message)}", file=sys.stderr)


def print_warning(message: str) -> None:
    print(f"{warning('⚠')} {warning(message)}" if UNICODE_ENABLED else f"[!] {message}")


def set_failed(message: str) -> int:
    """Report a terminal failure and return the exit code for it."""
    if in_github_actions():
        print(f"::error::{_escape_command(message)}")
    else:
        print_error(message)
    return 1


def _append_file_command(path: str, name: str, value: str) -> None:
    delimiter = f"ghadelimiter_{uuid.uuid4()}"
    with open(path, 'a', encoding='utf-8') as f:
        f.write(f"{name}<<{delimiter}\n{value}\n{delimiter}\n")


def export_variable(name: str, value: str) -> None:
    """Expose a variable to this process and, under GitHub Actions, to later steps."""
    os.environ[name] = value
    env_file = os.environ.get('GITHUB_ENV')
    if env_file:
        _append_file_command(env_file, name, value)
    else:
        print(f"{name}={value}")


def set_output(name: str, value: str) -> None:
    """Set a step output when running under GitHub Actions."""
    output_file = os.environ.get('GITHUB_OUTPUT')
    if output_file:
        _append_file_command(output_file, name, value)


class Spinner:
    """Animated spinner for long operations. Use as context manager."""
    FRAMES_UNICODE = ['⠋', '⠙', '⠹', '⠸', '⠼', '⠴', '⠦', '⠧', '⠇', '⠏']
    FRAMES_ASCII = ['-', '\\', '|', '/']

    def __init__(self):
        self._thread = None
        self._stop_event = threading.Event()
        self._frames = self.FRAMES_UNICODE if UNICODE_ENABLED else self.FRAMES_ASCII

    def _spin(self):
        idx = 0
        while not self._stop_event.is_set():
            frame = self._frames[idx % len(self._frames)]
            print(f'\r\033[K{frame} ', end='', flush=True)
            idx += 1
            self._stop_event.wait(0.08)

    def __enter__(self):
        if sys.stdout.isatty():
            self._stop_event.clear()
            self._thread = threading.Thread(target=self._spin, daemon=True)
            self._thread.start()
        return self

    def __exit__(self, *args):
        self._stop_event.set()
        if self._thread:
            self._thread.join()
        if sys.stdout.isatty():
            print('\r\033[K', end='', flush=True)


__all__ = [
    "Colors", "COLORS_ENABLED", "UNICODE_ENABLED",
    "CROSS", "ARROW",
    "error", "warning", "info", "dim", "bold", "highlight",
    "bump_label", "in_github_actions", "log",
    "print_error", "print_warning",
    "set_failed", "export_variable", "set_output",
    "Spinner", "LABEL_COLORS",
]
