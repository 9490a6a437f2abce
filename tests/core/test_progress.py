"""Tests for core/progress.py module.

Covers:
- _is_tty() function
- status() function
- progress() generator
- suppress_console_logs() context manager
"""

from __future__ import annotations

import sys
from io import StringIO
from unittest.mock import patch

from linkcheck.core.progress import (
    _PROGRESS_THRESHOLD,
    _is_tty,
    get_console,
    is_console_suppressed,
    progress,
    status,
    suppress_console_logs,
)


class TestIsTty:
    """Tests for _is_tty function."""

    def test_false_for_stringio(self) -> None:
        """Returns False for non-TTY stderr."""
        original = sys.stderr
        try:
            sys.stderr = StringIO()
            assert _is_tty() is False
        finally:
            sys.stderr = original


class TestStatus:
    """Tests for status function."""

    def test_prints_message_with_style_prefix(self) -> None:
        """Styled messages go to the shared console."""
        with patch.object(get_console(), "print") as mock_print:
            status("2 classes not found on the classpath", style="warning")

        printed = mock_print.call_args[0][0]
        assert "2 classes not found on the classpath" in printed
        assert "!" in printed

    def test_indent_prefixes_spaces(self) -> None:
        """Indent adds leading spaces."""
        with patch.object(get_console(), "print") as mock_print:
            status("nested", style="none", indent=4)

        assert mock_print.call_args[0][0] == "    nested"


class TestProgress:
    """Tests for progress generator."""

    def test_yields_all_items_without_tty(self) -> None:
        """Every item is yielded when no bar is shown."""
        with patch("linkcheck.core.progress._is_tty", return_value=False):
            items = list(progress(range(_PROGRESS_THRESHOLD + 5), desc="Reading"))

        assert items == list(range(_PROGRESS_THRESHOLD + 5))

    def test_yields_all_items_with_bar(self) -> None:
        """Every item is yielded when a bar is shown."""
        with patch("linkcheck.core.progress._is_tty", return_value=True):
            items = list(progress(list(range(_PROGRESS_THRESHOLD + 1)), desc="Reading"))

        assert len(items) == _PROGRESS_THRESHOLD + 1

    def test_generator_without_length_passes_through(self) -> None:
        """Unsized iterables are consumed without a bar."""
        gen = (i for i in range(3))
        assert list(progress(gen)) == [0, 1, 2]


class TestSuppressConsoleLogs:
    """Tests for suppress_console_logs context manager."""

    def test_sets_and_clears_flag(self) -> None:
        """Suppression is active only inside the block."""
        assert is_console_suppressed() is False
        with suppress_console_logs():
            assert is_console_suppressed() is True
        assert is_console_suppressed() is False
