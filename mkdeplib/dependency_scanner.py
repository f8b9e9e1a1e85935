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
"""Transitive header dependencies of C sources.

Each file is read once and its #include lines are resolved to headers on
disk. Files become nodes of a directed include graph (concrete paths) and
every include edge carries the pretty name it is written as in the Makefile.
The dependencies of a source are the pretty names of all edges reachable
from it, which handles include cycles and diamonds without special casing.
"""

import re
import logging
from typing import Callable, List, Optional, Set, Tuple

import networkx as nx

from mkdeplib.header_resolver import ResolvedHeader, ScanContext, resolve_header

logger = logging.getLogger(__name__)


# #include "foo.h" or #include <foo.h>
RE_INCLUDE = re.compile(r"^\s*#\s*include\s+([\"<])(\S+)[\">]", re.MULTILINE)

# Edge attribute holding the pretty names of an include
PRETTY = "pretty"

WarningHandler = Callable[[str, str], None]


def parse_includes_from_content(content: str) -> List[Tuple[str, bool]]:
    """Extract include directives from file content.

    Args:
        content: C source or header text

    Returns:
        (header name, quoted) pairs in order of first appearance, without
        duplicates. quoted is False for <angle> includes.
    """
    includes: List[Tuple[str, bool]] = []
    seen: Set[str] = set()
    for match in RE_INCLUDE.finditer(content):
        name = match.group(2)
        if name in seen:
            continue
        seen.add(name)
        includes.append((name, match.group(1) == '"'))
    return includes


def _log_warning(path: str, message: str) -> None:
    logger.warning("%s: %s", path, message)


class DependencyScanner:
    """Scans sources of one descriptor for their transitive headers.

    Files already scanned are remembered, so objects sharing headers only
    read them once.
    """

    def __init__(self, context: ScanContext, warn: Optional[WarningHandler] = None) -> None:
        self.context = context
        self.graph: "nx.DiGraph[str]" = nx.DiGraph()
        self._scanned: Set[str] = set()
        self._missing_system: Set[str] = set()
        self._warn = warn or _log_warning

    def source_path(self, source: str) -> str:
        """Concrete path of a source as written in a rule."""
        if "/" not in source:
            # generated file, local to build dir
            source = f"$(builddir)/{source}"
        return self.context.dir_vars.expand(source)

    def scan(self, source: str) -> List[str]:
        """Return the sorted headers source depends on, directly or indirectly.

        Args:
            source: Source file as written in the rule, e.g. "$(srcdir)/foo.c"

        Returns:
            Sorted list of unique header paths in $(var) form
        """
        root = self.source_path(source)
        self._walk(root)

        reachable = nx.descendants(self.graph, root) | {root}
        headers: Set[str] = set()
        for _, _, pretty in self.graph.out_edges(reachable, data=PRETTY):
            headers.update(pretty)
        return sorted(headers)

    def _walk(self, root: str) -> None:
        # Iterative depth-first walk, every concrete path is read at most once
        stack = [root]
        while stack:
            path = stack.pop()
            if path in self._scanned:
                continue
            self._scanned.add(path)
            self.graph.add_node(path)

            for header in self._direct_includes(path):
                if self.graph.has_edge(path, header.path):
                    self.graph.edges[path, header.path][PRETTY].add(header.pretty)
                else:
                    self.graph.add_edge(path, header.path, **{PRETTY: {header.pretty}})
                if header.path not in self._scanned:
                    stack.append(header.path)

    def _direct_includes(self, path: str) -> List[ResolvedHeader]:
        try:
            with open(path, "r", encoding="utf-8", errors="surrogateescape") as f:
                content = f.read()
        except OSError as e:
            self._warn(path, f"unable to open: {e.strerror or e}")
            return []

        resolved: List[ResolvedHeader] = []
        for name, quoted in parse_includes_from_content(content):
            header = resolve_header(self.context, path, name)
            if header is not None:
                resolved.append(header)
            elif quoted:
                self._warn(path, f"unable to find header {name}")
            elif name not in self._missing_system:
                # <name> is usually a system header, report it once per descriptor
                self._missing_system.add(name)
                self._warn(path, f"unable to find header {name}")
        return resolved


