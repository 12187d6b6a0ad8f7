"""
Console Logging
===============

Plain ``print`` output with optional ANSI colors.

The control subsystem itself never prints; only the DE consumer, the
loader and the command-line runner report through this module.

Verbosity levels of :class:`RunLogger`:

- 0: silent
- 1: header and summary
- 2: one line every ``log_interval`` generations
"""

from __future__ import annotations

import time
from typing import Any, Dict, Optional, TYPE_CHECKING

from .constants import DEFAULT_LOG_INTERVAL

if TYPE_CHECKING:
    from .evolution import DEGenerationLog, DEResult


# =============================================================================
# Console Colors
# =============================================================================

_CODES: Dict[str, str] = {
    'RESET': '\033[0m',
    'BOLD': '\033[1m',
    'DIM': '\033[2m',
    'RED': '\033[91m',
    'GREEN': '\033[92m',
    'YELLOW': '\033[93m',
    'BLUE': '\033[94m',
    'CYAN': '\033[96m',
}


class Colors:
    """ANSI color codes; empty strings while disabled."""

    ENABLED = True

    RESET = _CODES['RESET']
    BOLD = _CODES['BOLD']
    DIM = _CODES['DIM']
    RED = _CODES['RED']
    GREEN = _CODES['GREEN']
    YELLOW = _CODES['YELLOW']
    BLUE = _CODES['BLUE']
    CYAN = _CODES['CYAN']

    @classmethod
    def enable(cls):
        cls._set(True)

    @classmethod
    def disable(cls):
        cls._set(False)

    @classmethod
    def _set(cls, enabled: bool):
        cls.ENABLED = enabled
        for name, code in _CODES.items():
            setattr(cls, name, code if enabled else '')


# =============================================================================
# Formatting Helpers
# =============================================================================

def format_scientific(value: float, precision: int = 4) -> str:
    """Scientific notation, with |value| < 1e-10 shown as zero."""
    if abs(value) < 1e-10:
        return f"{0.0:.{precision}e}"
    return f"{value:.{precision}e}"


def format_time(seconds: float) -> str:
    if seconds < 60:
        return f"{seconds:.2f}s"
    if seconds < 3600:
        return f"{int(seconds // 60)}m {seconds % 60:.1f}s"
    return f"{int(seconds // 3600)}h {int((seconds % 3600) // 60)}m"


def progress_bar(current: int, total: int, width: int = 30) -> str:
    progress = current / max(1, total)
    filled = int(width * progress)
    return f"[{'█' * filled}{'░' * (width - filled)}] {progress * 100:5.1f}%"


def box_header(title: str, width: int = 80, char: str = '═') -> str:
    padding = (width - len(title) - 2) // 2
    return f"{char * padding} {title} {char * (width - padding - len(title) - 2)}"


# =============================================================================
# Message Functions
# =============================================================================

def print_error(message: str):
    C = Colors
    print(f"{C.RED}✗ Error: {message}{C.RESET}")


def print_warning(message: str):
    C = Colors
    print(f"{C.YELLOW}⚠ Warning: {message}{C.RESET}")


def print_info(message: str):
    C = Colors
    print(f"{C.CYAN}ℹ {message}{C.RESET}")


def print_success(message: str):
    C = Colors
    print(f"{C.GREEN}✓ {message}{C.RESET}")


# =============================================================================
# Run Logger
# =============================================================================

class RunLogger:
    """
    Progress output of one DE run.

    Parameters
    ----------
    verbosity : int
        0=silent, 1=header and summary, 2=generation lines
    log_interval : int
        Print every N generations (the first one is always printed).
    width : int
        Console width.
    use_colors : bool
        Colored output.
    """

    def __init__(
        self,
        verbosity: int = 2,
        log_interval: int = DEFAULT_LOG_INTERVAL,
        width: int = 80,
        use_colors: bool = True,
    ):
        self.verbosity = verbosity
        self.log_interval = max(1, log_interval)
        self.width = width
        if use_colors:
            Colors.enable()
        else:
            Colors.disable()
        self._start = 0.0
        self._max_generation = 0

    def print_header(self, config: Dict[str, Any]):
        self._start = time.time()
        self._max_generation = int(config.get('max_generation', 0))
        if self.verbosity < 1:
            return

        C = Colors
        print()
        print(f"{C.CYAN}{C.BOLD}{box_header('ADAPTIVE DE', self.width)}{C.RESET}")
        for label, value in config.items():
            print(f"  {C.BOLD}{label:<16}{C.RESET} {value}")
        print()

        if self.verbosity >= 2:
            cols = [('Gen', 6), ('Best', 12), ('Mean', 12), ('F', 13), ('CR', 13), ('Succ', 6)]
            print(f"{C.BOLD}{' │ '.join(f'{name:>{w}}' for name, w in cols)}{C.RESET}")
            print(f"{C.DIM}{'─┼─'.join('─' * w for _, w in cols)}{C.RESET}")

    def log_generation(self, log: "DEGenerationLog"):
        if self.verbosity < 2:
            return
        if log.generation != 1 and log.generation % self.log_interval != 0:
            return
        C = Colors
        f_str = f"{log.mean_F:.3f}±{log.std_F:.3f}"
        cr_str = f"{log.mean_CR:.3f}±{log.std_CR:.3f}"
        print(
            f"{log.generation:>6} │ {C.GREEN}{format_scientific(log.best_f, 4):>12}{C.RESET} │ "
            f"{format_scientific(log.mean_fitness, 4):>12} │ {f_str:>13} │ {cr_str:>13} │ "
            f"{log.success_rate * 100:5.1f}%"
        )

    def print_summary(self, result: Optional["DEResult"] = None):
        if self.verbosity < 1:
            return
        C = Colors
        runtime = time.time() - self._start
        print()
        print(f"{C.CYAN}{C.BOLD}{box_header('RUN COMPLETE', self.width)}{C.RESET}")
        if result is not None:
            print(f"  {C.BOLD}{'Best Fitness':<16}{C.RESET} {C.GREEN}{format_scientific(result.best_f)}{C.RESET}")
            print(f"  {C.BOLD}{'Generations':<16}{C.RESET} "
                  f"{result.generations} {progress_bar(result.generations, self._max_generation, 20)}")
            print(f"  {C.BOLD}{'NFEs':<16}{C.RESET} {result.nfes_used:,}")
        print(f"  {C.BOLD}{'Runtime':<16}{C.RESET} {format_time(runtime)}")
        print()
