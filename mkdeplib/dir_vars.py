#!/usr/bin/env python3
# -*- coding: utf-8 -*-
# ****************************************************************************************************************************************************
# * BSD 3-Clause License
# *
# * Copyright (c) 2025, Mana Battery
# * All rights reserved.
# *
# * Redistribution and use in source and binary forms, with or without modification, are permitted provided that the following conditions are met:
# *
# * 1. Redistributions of source code must retain the above copyright notice, this list of conditions and the following disclaimer.
# * 2. Redistributions in binary form must reproduce the above copyright notice, this list of conditions and the following disclaimer in the
# *    documentation and/or other materials provided with the distribution.
# * 3. Neither the name of the copyright holder nor the names of its contributors may be used to endorse or promote products derived from this
# *    software without specific prior written permission.
# *
# * THIS SOFTWARE IS PROVIDED BY THE COPYRIGHT HOLDERS AND CONTRIBUTORS "AS IS" AND ANY EXPRESS OR IMPLIED WARRANTIES, INCLUDING, BUT NOT LIMITED TO,
# * THE IMPLIED WARRANTIES OF MERCHANTABILITY AND FITNESS FOR A PARTICULAR PURPOSE ARE DISCLAIMED. IN NO EVENT SHALL THE COPYRIGHT HOLDER OR
# * CONTRIBUTORS BE LIABLE FOR ANY DIRECT, INDIRECT, INCIDENTAL, SPECIAL, EXEMPLARY, OR CONSEQUENTIAL DAMAGES (INCLUDING, BUT NOT LIMITED TO,
# * PROCUREMENT OF SUBSTITUTE GOODS OR SERVICES; LOSS OF USE, DATA, OR PROFITS; OR BUSINESS INTERRUPTION) HOWEVER CAUSED AND ON ANY THEORY OF
# * LIABILITY, WHETHER IN CONTRACT, STRICT LIABILITY, OR TORT (INCLUDING NEGLIGENCE OR OTHERWISE) ARISING IN ANY WAY OUT OF THE USE OF THIS SOFTWARE,
# * EVEN IF ADVISED OF THE POSSIBILITY OF SUCH DAMAGE.
# ****************************************************************************************************************************************************
"""Directory variables of a Makefile.in and the mapping between paths and $(var) form.

Dependency rules are written with make variables ("$(srcdir)/foo.h") rather
than concrete paths so the generated Makefile works from any build tree.
DirVars holds the variable values for one descriptor and converts in both
directions:

    expand("$(srcdir)/foo.h")            -> "plugins/sudoers/foo.h"
    prettify("plugins/sudoers/foo.h")    -> "$(srcdir)/foo.h"
"""

import os
import re
import logging
from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Tuple

logger = logging.getLogger(__name__)

# $(name) or ${name}
RE_VARIABLE = re.compile(r"\$[({](\w+)[)}]")

# devdir always has the same value as srcdir, srcdir must win when prettifying
DEVDIR = "devdir"


@dataclass(frozen=True)
class DirVars:
    """Ordered (name, path) pairs for one descriptor.

    Attributes:
        entries: Variable name and concrete path pairs in declaration order
    """

    entries: Tuple[Tuple[str, str], ...]

    @classmethod
    def for_descriptor(cls, descriptor: str, top_srcdir: str = ".", top_builddir: str = ".") -> "DirVars":
        """Compute the directory variables for a Makefile.in.

        Args:
            descriptor: Path of the Makefile.in, relative to the top source directory
            top_srcdir: Top of the source tree (--srcdir)
            top_builddir: Top of the build tree (--builddir)

        Returns:
            Fresh DirVars for this descriptor
        """
        srcdir = descriptor_dir(descriptor)
        return cls(
            (
                ("srcdir", srcdir),
                (DEVDIR, srcdir),
                ("authdir", f"{srcdir}/auth"),
                ("builddir", f"{top_builddir}/{srcdir}"),
                ("top_srcdir", top_srcdir),
                ("sudoers_srcdir", f"{top_srcdir}/plugins/sudoers"),
                ("incdir", "include"),
            )
        )

    def get(self, name: str) -> Optional[str]:
        for var_name, value in self.entries:
            if var_name == name:
                return value
        return None

    def as_dict(self) -> Dict[str, str]:
        return dict(self.entries)

    def by_length(self, exclude: Iterable[str] = (DEVDIR,)) -> List[Tuple[str, str]]:
        """Entries sorted longest value first, ties broken by name.

        Args:
            exclude: Variable names to leave out (devdir by default)

        Returns:
            List of (name, value) pairs
        """
        skipped = set(exclude)
        candidates = [(name, value) for name, value in self.entries if name not in skipped and value]
        return sorted(candidates, key=lambda item: (-len(item[1]), item[0]))

    def expand(self, text: str, exclude: Iterable[str] = ()) -> str:
        """Substitute $(name) and ${name} with their concrete paths.

        Unknown and excluded variables are left in place.

        Args:
            text: Path or other text containing variable references
            exclude: Variable names not to substitute

        Returns:
            Text with known variables expanded
        """
        values = self.as_dict()
        for name in exclude:
            values.pop(name, None)

        def _substitute(match: "re.Match[str]") -> str:
            return values.get(match.group(1), match.group(0))

        return RE_VARIABLE.sub(_substitute, text)

    def prettify(self, path: str) -> str:
        """Rewrite the longest matching directory prefix of path as $(name).

        Args:
            path: Concrete path

        Returns:
            Path in variable form, or the path unchanged if no variable matches
        """
        for name, value in self.by_length():
            if path == value or path.startswith(value + "/"):
                pretty = f"$({name})" + path[len(value) :]
                logger.debug("Prettified %s -> %s", path, pretty)
                return pretty
        return path


def descriptor_dir(descriptor: str) -> str:
    """Directory of a Makefile.in with any leading ./ removed, "." if none."""
    path = re.sub(r"^\./+", "", descriptor)
    parent = os.path.dirname(path).rstrip("/")
    return parent or "."
