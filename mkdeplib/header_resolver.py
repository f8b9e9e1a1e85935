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
"""Map an #include name to a header file on disk.

Candidates are tried in a fixed order; the first readable one wins. Earlier
candidates are build-local overrides of later ones:

    1. <name>.in template in the top build directory   -> $(top_builddir)/<name>
    2. <name>.in template in the descriptor directory   -> ./<name>
    3. generated header in $(devdir)                     -> $(devdir)/<name>
    4. each -I directory of the descriptor, in order     -> <dir>/<name>
    5. directory of the including file                   -> prettified path
"""

import os
import re
import logging
from dataclasses import dataclass, field
from typing import List, NamedTuple, Optional, Set

from mkdeplib.dir_vars import DEVDIR, DirVars

logger = logging.getLogger(__name__)

# One pass of "/dir/.." removal
RE_PARENT_SEGMENT = re.compile(r"/[^/]+/\.\.")


class ResolvedHeader(NamedTuple):
    """A header found on disk.

    Attributes:
        pretty: Path as written in the dependency rule ($(var) form)
        path: Concrete path to read for nested includes
    """

    pretty: str
    path: str


@dataclass(frozen=True)
class ScanContext:
    """Per-descriptor inputs of header resolution.

    Attributes:
        dir_vars: Directory variables of the descriptor
        include_paths: -I directories, unexpanded, in declared order
        generated: Header names the build generates into $(devdir)
    """

    dir_vars: DirVars
    include_paths: List[str] = field(default_factory=list)
    generated: Set[str] = field(default_factory=set)

    @property
    def srcdir(self) -> str:
        return self.dir_vars.get("srcdir") or "."

    @property
    def devdir(self) -> str:
        return self.dir_vars.get(DEVDIR) or self.srcdir


def is_readable(path: str) -> bool:
    """Check that path is a regular file we are allowed to read."""
    return os.path.isfile(path) and os.access(path, os.R_OK)


def resolve_parent_segments(path: str) -> str:
    """Collapse "dir/.." segments (single left-to-right pass)."""
    return RE_PARENT_SEGMENT.sub("", path)


def resolve_header(context: ScanContext, including_path: str, header: str) -> Optional[ResolvedHeader]:
    """Find the file an #include refers to.

    Args:
        context: Scan context of the descriptor being processed
        including_path: Concrete path of the file containing the #include
        header: Name between the quotes or angle brackets

    Returns:
        ResolvedHeader, or None if no candidate exists
    """
    # Headers generated by configure from a template
    template = f"./{header}.in"
    if is_readable(template):
        return ResolvedHeader(f"$(top_builddir)/{header}", template)

    template = f"{context.srcdir}/{header}.in"
    if is_readable(template):
        return ResolvedHeader(f"./{header}", template)

    if header in context.generated:
        path = f"{context.devdir}/{header}"
        if is_readable(path):
            return ResolvedHeader(f"$(devdir)/{header}", path)

    for include_dir in context.include_paths:
        pretty = f"{include_dir}/{header}"
        path = context.dir_vars.expand(pretty, exclude=(DEVDIR,))
        if is_readable(path):
            return ResolvedHeader(pretty, path)

    # Relative to the including file
    if "/" in including_path:
        parent = including_path.rsplit("/", 1)[0]
        candidate = f"{parent}/{header}"
        if is_readable(candidate):
            path = resolve_parent_segments(candidate)
            return ResolvedHeader(context.dir_vars.prettify(path), path)

    logger.debug("No candidate for %s included from %s", header, including_path)
    return None
