#!/usr/bin/env python3
#****************************************************************************************************************************************************
#* BSD 3-Clause License
#*
#* Copyright (c) 2025, Mana Battery
#* All rights reserved.
#*
#* Redistribution and use in source and binary forms, with or without modification, are permitted provided that the following conditions are met:
#*
#* 1. Redistributions of source code must retain the above copyright notice, this list of conditions and the following disclaimer.
#* 2. Redistributions in binary form must reproduce the above copyright notice, this list of conditions and the following disclaimer in the
#*    documentation and/or other materials provided with the distribution.
#* 3. Neither the name of the copyright holder nor the names of its contributors may be used to endorse or promote products derived from this
#*    software without specific prior written permission.
#*
#* THIS SOFTWARE IS PROVIDED BY THE COPYRIGHT HOLDERS AND CONTRIBUTORS "AS IS" AND ANY EXPRESS OR IMPLIED WARRANTIES, INCLUDING, BUT NOT LIMITED TO,
#* THE IMPLIED WARRANTIES OF MERCHANTABILITY AND FITNESS FOR A PARTICULAR PURPOSE ARE DISCLAIMED. IN NO EVENT SHALL THE COPYRIGHT HOLDER OR
#* CONTRIBUTORS BE LIABLE FOR ANY DIRECT, INDIRECT, INCIDENTAL, SPECIAL, EXEMPLARY, OR CONSEQUENTIAL DAMAGES (INCLUDING, BUT NOT LIMITED TO,
#* PROCUREMENT OF SUBSTITUTE GOODS OR SERVICES; LOSS OF USE, DATA, OR PROFITS; OR BUSINESS INTERRUPTION) HOWEVER CAUSED AND ON ANY THEORY OF
#* LIABILITY, WHETHER IN CONTRACT, STRICT LIABILITY, OR TORT (INCLUDING NEGLIGENCE OR OTHERWISE) ARISING IN ANY WAY OUT OF THE USE OF THIS SOFTWARE,
#* EVEN IF ADVISED OF THE POSSIBILITY OF SUCH DAMAGE.
#****************************************************************************************************************************************************
"""Tests for diagnostic formatting and color selection."""

import sys
from pathlib import Path

import pytest

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from mkdeplib import color_utils
from mkdeplib.color_utils import format_diagnostic, print_warning, should_use_color


@pytest.mark.unit
class TestDiagnostics:
    """Test the prog: file: message layout."""

    def test_with_path(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test that the invocation name and the file prefix the message."""
        monkeypatch.setattr(sys, "argv", ["/usr/local/bin/mkdep", "Makefile.in"])
        assert format_diagnostic("src/Makefile.in", "foo.o should be foo.lo") == "mkdep: src/Makefile.in: foo.o should be foo.lo"

    def test_without_path(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Test that an empty path is left out."""
        monkeypatch.setattr(sys, "argv", ["mkdep.py"])
        assert format_diagnostic("", "unable to open MANIFEST") == "mkdep.py: unable to open MANIFEST"

    def test_warning_goes_to_stderr(self, capsys: pytest.CaptureFixture) -> None:
        """Test that warnings are written to stderr only."""
        print_warning("mkdep: x: careful")
        captured = capsys.readouterr()
        assert captured.out == ""
        assert "mkdep: x: careful" in captured.err


@pytest.mark.unit
class TestColors:
    """Test the color palette."""

    def test_palette_matches_diagnostics(self) -> None:
        """Test that only the codes used by warnings and errors are defined."""
        assert {name for name in vars(color_utils.Colors) if name.isupper()} == {"RED", "YELLOW", "RESET", "BRIGHT"}


@pytest.mark.unit
class TestShouldUseColor:
    """Test color selection."""

    def test_no_color_flag(self) -> None:
        assert should_use_color(no_color=True) is False

    def test_not_a_terminal(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr(color_utils.sys.stderr, "isatty", lambda: False)
        assert should_use_color() is False

    def test_no_color_environment(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr(color_utils.sys.stderr, "isatty", lambda: True)
        monkeypatch.setenv("NO_COLOR", "1")
        assert should_use_color() is False
