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
"""Tests for runtime package verification."""

import sys
from pathlib import Path

import pytest

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from mkdeplib import package_verification
from mkdeplib.constants import EXIT_RUNTIME_ERROR
from mkdeplib.package_verification import PACKAGE_REQUIREMENTS, check_package_version, verify_requirements


@pytest.mark.unit
class TestCheckPackageVersion:
    """Test check_package_version function."""

    def test_check_installed_package(self) -> None:
        """Test checking a package that is installed and meets version."""
        is_installed, meets_version, installed_ver = check_package_version("networkx", "1.0", raise_on_error=False)

        assert is_installed is True
        assert meets_version is True
        assert installed_ver is not None

    def test_check_installed_below_version(self) -> None:
        """Test checking an installed package below required version."""
        is_installed, meets_version, _ = check_package_version("networkx", "999.0.0", raise_on_error=False)

        assert is_installed is True
        assert meets_version is False

    def test_check_not_installed(self) -> None:
        """Test checking a package that is not installed."""
        assert check_package_version("nonexistent_package_xyz123", "1.0.0", raise_on_error=False) == (False, False, None)

    def test_raise_on_missing_package(self) -> None:
        """Test that ImportError is raised when package is missing."""
        with pytest.raises(ImportError, match="is not installed"):
            check_package_version("nonexistent_package_xyz123", "1.0.0")

    def test_raise_on_old_version(self) -> None:
        """Test that ImportError is raised when version is too old."""
        with pytest.raises(ImportError, match="is too old"):
            check_package_version("colorama", "999.0.0")

    def test_unknown_package_without_version(self) -> None:
        """Test that ValueError is raised without a registry entry."""
        with pytest.raises(ValueError, match="No version requirement specified"):
            check_package_version("unknown_pkg_xyz", min_version=None, raise_on_error=False)

    def test_registry_covers_runtime_dependencies(self) -> None:
        """Test that every runtime dependency has a minimum version."""
        assert set(PACKAGE_REQUIREMENTS) == {"networkx", "colorama", "packaging"}


@pytest.mark.unit
class TestVerifyRequirements:
    """Test verify_requirements function."""

    def test_all_available(self) -> None:
        """Test that an installed environment passes."""
        verify_requirements()

    def test_exits_when_requirement_unmet(self, monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture) -> None:
        """Test that an unmet requirement exits with EXIT_RUNTIME_ERROR."""
        monkeypatch.setitem(package_verification.PACKAGE_REQUIREMENTS, "networkx", "999.0.0")

        with pytest.raises(SystemExit) as exc_info:
            verify_requirements()

        assert exc_info.value.code == EXIT_RUNTIME_ERROR
        assert "networkx" in capsys.readouterr().err
