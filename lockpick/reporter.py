"""Tree-shaped reporting of hierarchical test sessions.

A session is a tree of named tests. Leaf tests record passed cases or a
failure; inner tests aggregate the counts of everything below them. Each
test is reported when it is entered and when it is left, indented by depth.
"""

from __future__ import annotations

import sys
import time
from dataclasses import dataclass
from typing import Callable, List, Optional, TextIO

MAX_LEVELS = 64

_NAME_LIMIT = 63
_MESSAGE_LIMIT = 1023
_NANOS_PER_MILLI = 1_000_000

_RESET = "\x1b[0m"
_BOLD = "\x1b[1m"
_COLORS = {"red": "\x1b[31m", "green": "\x1b[32m", "yellow": "\x1b[33m", "blue": "\x1b[34m"}


def _styled(text: str, color: str) -> str:
    return f"{_COLORS[color]}{_BOLD}{text}{_RESET}"


PASSED = _styled("PASSED", "green")
RUNNING = _styled("RUNNING", "yellow")
FAILED = _styled("FAILED", "red")
EMPTY = _styled("EMPTY", "blue")


class SessionError(RuntimeError):
    """Raised when a session action is not allowed in the current state."""


def create_padding(level: int) -> str:
    """Return the tree indentation for a test at depth ``level``."""
    return "| " * level


def format_stats(tests_passed: int, cases_passed: int, duration_ns: int) -> str:
    """Render the statistics suffix printed for a finished test."""
    duration_ms = duration_ns // _NANOS_PER_MILLI
    per_case_ns = duration_ns // max(1, cases_passed)
    return (
        f" | TP: {tests_passed} | CP: {cases_passed}"
        f" | DT: {duration_ms} ms | DPC: {per_case_ns} ns"
    )


def _now(fmt: str) -> str:
    return time.strftime(fmt, time.localtime())


@dataclass
class _Level:
    max_print_depth: int
    tests_total: int = 1
    cases_passed: int = 0
    tests_failed: int = 0

    @property
    def is_leaf(self) -> bool:
        return self.tests_total == 1


class TestSession:
    """A quality-assurance session writing its report to ``out``."""

    __test__ = False

    def __init__(self, project_name: str, out: Optional[TextIO] = None) -> None:
        if project_name is None:
            raise SessionError("project name must not be None")
        self._out = out if out is not None else sys.stdout
        self.project_name = project_name[:_NAME_LIMIT]
        self._start_ns = time.monotonic_ns()
        self._levels: List[_Level] = [_Level(max_print_depth=MAX_LEVELS + 1)]
        self._last_test = ""
        self._last_failed_test = ""
        self._failed_message = ""
        self._write(
            f"*** Quality Assurance for '{self.project_name}' ({_now('%x %X')}) ***\n"
        )

    def _write(self, text: str) -> None:
        self._out.write(text)

    @property
    def level(self) -> int:
        """Depth of the test currently being run (0 outside any test)."""
        return len(self._levels) - 1

    @property
    def _current(self) -> _Level:
        return self._levels[-1]

    def enter(self, name: str, max_print_depth: int = MAX_LEVELS + 1) -> None:
        """Start the test ``name`` below the current one."""
        if self.level >= MAX_LEVELS - 1:
            raise SessionError(f"max number of test levels in tree exceeded ({MAX_LEVELS})")
        current = self._current
        if current.is_leaf and current.cases_passed > 0:
            raise SessionError("can't branch lower level test - current test node is a leaf")

        self._last_test = name[:_NAME_LIMIT]
        inherited = max(0, current.max_print_depth - 1)
        depth = min(inherited, max_print_depth)
        if depth > 0:
            self._write(
                f"{create_padding(self.level)}|-+-> [{_now('%X')}] {RUNNING} Test: {name}\n"
            )
        self._levels.append(_Level(max_print_depth=depth))

    def leave(self, name: str, duration_ns: int) -> bool:
        """Finish the current test; return True if nothing below it failed."""
        if self.level == 0:
            raise SessionError("can't leave a test before entering one")
        finished = self._levels.pop()
        parent = self._current
        parent.tests_failed += finished.tests_failed
        parent.tests_total += finished.tests_total
        parent.cases_passed += finished.cases_passed

        if finished.max_print_depth > 0:
            self._print_leave(name, finished, duration_ns)
            if finished.tests_failed > 0:
                self._failed_message = ""
                self._last_failed_test = ""
        return finished.tests_failed == 0

    def _print_leave(self, name: str, finished: _Level, duration_ns: int) -> None:
        print_stats = True
        print_details = False
        if finished.cases_passed == 0 and finished.tests_failed == 0:
            status = EMPTY
            print_stats = False
        elif finished.tests_failed > 0:
            status = FAILED
            print_details = self._last_failed_test != ""
        else:
            status = PASSED

        line = f"{create_padding(self.level)}|-+-> [{_now('%X')}] {status} Test: {name}"
        if print_stats:
            tests_passed = finished.tests_total - finished.tests_failed
            line += format_stats(tests_passed, finished.cases_passed, duration_ns)
        if print_details:
            line += f" | Details ('{self._last_failed_test}'): {self._failed_message}"
        self._write(line + "\n")

    def pass_case(self) -> None:
        """Record one passed case in the current leaf test."""
        if self.level == 0:
            raise SessionError("can't pass a case before entering a test")
        if not self._current.is_leaf:
            raise SessionError("can't assert on the current level - current test is not leaf")
        self._current.cases_passed += 1

    def fail(self, message: str) -> None:
        """Record a failure of the current leaf test with ``message``."""
        if not self._current.is_leaf:
            raise SessionError("can't assert on the current level - current test is not leaf")
        self._current.tests_failed += 1
        self._failed_message = message[:_MESSAGE_LIMIT]
        self._last_failed_test = self._last_test

    def step_out(self) -> bool:
        """True if the current leaf test has failed and should be left."""
        current = self._current
        return current.is_leaf and current.tests_failed > 0

    def run(
        self,
        name: str,
        func: Callable[[], object],
        max_print_depth: int = MAX_LEVELS + 1,
    ) -> bool:
        """Run ``func`` as test ``name``; an AssertionError counts as a failure.

        Returns True if the test and everything below it passed.
        """
        self.enter(name, max_print_depth)
        start = time.monotonic_ns()
        try:
            func()
        except AssertionError as exc:
            self.fail(str(exc) or "assertion failed")
        return self.leave(name, time.monotonic_ns() - start)

    def end(self) -> int:
        """Close the session, print its summary and return the failure count."""
        if self.level != 0:
            raise SessionError("session must be ended at zero level")
        duration_ms = (time.monotonic_ns() - self._start_ns) // _NANOS_PER_MILLI
        failures = self._current.tests_failed
        status = FAILED if failures > 0 else PASSED
        self._write(
            f"*** Quality Assurance for '{self.project_name}' {status} ({duration_ms} ms) ***\n"
        )
        return failures