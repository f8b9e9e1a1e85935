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
"""Pytest configuration and shared fixtures for mkdep tests.

Most tests build a small source tree under a temporary directory and change
into it, the same way mkdep itself runs from the top of the source tree.
"""

import sys
from pathlib import Path
from typing import Callable, Dict

import pytest

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from mkdeplib.color_utils import Colors  # noqa: E402

# Plain output makes captured diagnostics easy to compare
Colors.disable()

WriteFile = Callable[[str, str], Path]


@pytest.fixture
def source_tree(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Empty source tree that is also the current directory.

    Scope: function (default)
    Use for: anything that resolves relative paths like mkdep does
    """
    monkeypatch.chdir(tmp_path)
    return tmp_path


@pytest.fixture
def write_file(source_tree: Path) -> WriteFile:
    """Write a file relative to the source tree, creating directories."""

    def _write(relative_path: str, content: str) -> Path:
        path = source_tree / relative_path
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content)
        return path

    return _write


@pytest.fixture
def sudoers_tree(write_file: WriteFile) -> Dict[str, Path]:
    """A plugins/sudoers directory with one library object and a local header.

    Scope: function
    Dependencies: write_file
    Use for: end-to-end rewriting of a realistic descriptor
    """
    return {
        "manifest": write_file("MANIFEST", "MANIFEST\nplugins/sudoers/Makefile.in\nplugins/sudoers/foo.c\nplugins/sudoers/bar.h\n"),
        "makefile": write_file(
            "plugins/sudoers/Makefile.in",
            "# Makefile for the sudoers plugin\n\nOBJS = foo.lo\n\n.c.lo:\n\tcompile $<\n\nall: $(OBJS)\n",
        ),
        "source": write_file("plugins/sudoers/foo.c", '#include "bar.h"\n\nint foo(void) { return 0; }\n'),
        "header": write_file("plugins/sudoers/bar.h", "int foo(void);\n"),
    }
