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
"""Unit tests for the MANIFEST index."""

import sys
from pathlib import Path

import pytest

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from mkdeplib.constants import EXIT_RUNTIME_ERROR, ManifestError
from mkdeplib.manifest import ManifestIndex


@pytest.mark.unit
class TestManifestIndex:
    """Test building and querying the index."""

    def test_indexes_sources_by_basename(self) -> None:
        """Test that C, lex and yacc sources are indexed."""
        index = ManifestIndex.from_lines(["lib/util/strlcpy.c\n", "plugins/sudoers/toke.l\n", "plugins/sudoers/gram.y\n"])

        assert index.lookup("strlcpy.c") == "lib/util/strlcpy.c"
        assert index.lookup("toke.l") == "plugins/sudoers/toke.l"
        assert index.lookup("gram.y") == "plugins/sudoers/gram.y"
        assert len(index) == 3

    def test_ignores_other_files(self) -> None:
        """Test that headers, makefiles and docs are not indexed."""
        index = ManifestIndex.from_lines(["include/sudo_compat.h", "lib/util/Makefile.in", "README.md", "doc/sudo.man.in"])
        assert len(index) == 0

    def test_last_duplicate_wins(self) -> None:
        """Test that a later line with the same basename takes precedence."""
        index = ManifestIndex.from_lines(["lib/util/regress/main.c", "src/main.c"])
        assert index.lookup("main.c") == "src/main.c"

    def test_top_level_source(self) -> None:
        """Test that a source without a directory is indexed as-is."""
        index = ManifestIndex.from_lines(["config.c"])
        assert index.lookup("config.c") == "config.c"

    def test_missing_lookup(self) -> None:
        """Test that unknown names return None."""
        assert ManifestIndex.from_lines([]).lookup("foo.c") is None

    def test_load_from_file(self, tmp_path: Path) -> None:
        """Test reading a MANIFEST from disk."""
        manifest = tmp_path / "MANIFEST"
        manifest.write_text("MANIFEST\nsrc/sudo.c\nsrc/sudo.h\n")

        index = ManifestIndex.load(str(manifest))

        assert index.lookup("sudo.c") == "src/sudo.c"
        assert index.lookup("sudo.h") is None

    def test_load_missing_file_is_fatal(self, tmp_path: Path) -> None:
        """Test that a missing MANIFEST raises ManifestError."""
        with pytest.raises(ManifestError, match="unable to open") as exc_info:
            ManifestIndex.load(str(tmp_path / "MANIFEST"))
        assert exc_info.value.exit_code == EXIT_RUNTIME_ERROR
