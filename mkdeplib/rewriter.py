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
"""Regenerate the dependency section of Makefile.in files.

For every object of a descriptor the source is located, its headers are
scanned and a rule with the build command is appended after the separator:

    foo.lo: $(srcdir)/foo.c $(srcdir)/foo.h $(incdir)/compat.h
    	$(LIBTOOL) $(LTFLAGS) --mode=compile $(CC) -c -o $@ $(srcdir)/foo.c

When the descriptor has PVS-Studio suffix rules (.c.i and .i.plog) each
source additionally gets a .i and a .plog rule.
"""

import os
import re
import logging
from dataclasses import dataclass, field
from typing import List, Optional, Sequence, Tuple

from mkdeplib.color_utils import format_diagnostic, print_warning
from mkdeplib.constants import CONFIGURE_SUBSTITUTIONS, DEFAULT_SOURCE_EXTENSION, DescriptorError
from mkdeplib.dependency_scanner import DependencyScanner
from mkdeplib.dir_vars import DirVars, descriptor_dir
from mkdeplib.header_resolver import ScanContext
from mkdeplib.makefile_parser import DescriptorInfo, detect_newline, parse_descriptor, strip_generated
from mkdeplib.manifest import ManifestIndex
from mkdeplib.rule_formatter import format_command, format_dependency

logger = logging.getLogger(__name__)

RE_OBJECT = re.compile(r"^(\S+)\.(l?o)$")
RE_SOURCE_VAR = re.compile(r"\$<")
RE_PLOG_IFILE = re.compile(r"ifile=\$<; *")

# Source name as the .i.plog rule derives it from the .i file
PLOG_SOURCE_EXPR = "$${ifile%i}c"

TEMP_SUFFIX = ".new"


@dataclass
class RewriteResult:
    """Outcome of processing one descriptor.

    Attributes:
        descriptor: Path of the Makefile.in
        written: True if the descriptor was replaced
        rules: Number of object rules generated
        warnings: Diagnostics emitted while processing
    """

    descriptor: str
    written: bool = False
    rules: int = 0
    warnings: List[str] = field(default_factory=list)


class MakefileRewriter:
    """Rewrites the generated dependencies of Makefile.in files.

    Args:
        manifest: Index of the MANIFEST, shared by all descriptors
        top_srcdir: Top of the source tree
        top_builddir: Top of the build tree
        substitutions: Configure placeholder expansions
        quiet: Collect warnings without printing them
    """

    def __init__(
        self,
        manifest: ManifestIndex,
        top_srcdir: str = ".",
        top_builddir: str = ".",
        substitutions: Sequence[Tuple[str, str]] = CONFIGURE_SUBSTITUTIONS,
        quiet: bool = False,
    ) -> None:
        self.manifest = manifest
        self.top_srcdir = top_srcdir
        self.top_builddir = top_builddir
        self.substitutions = substitutions
        self.quiet = quiet

    def process(self, descriptor: str) -> RewriteResult:
        """Regenerate the dependencies of one Makefile.in and write it back.

        Args:
            descriptor: Path of the Makefile.in

        Returns:
            RewriteResult describing what happened

        Raises:
            DescriptorError: If the descriptor cannot be read
        """
        result = RewriteResult(descriptor)
        try:
            with open(descriptor, "r", encoding="utf-8", errors="surrogateescape", newline="") as f:
                text = f.read()
        except OSError as e:
            raise DescriptorError(format_diagnostic(descriptor, e.strerror or str(e))) from e

        new_text = self.render(descriptor, text, result)
        result.written = self._write(descriptor, new_text, result)
        if result.written:
            logger.debug("Updated %s (%d rules)", descriptor, result.rules)
        return result

    def render(self, descriptor: str, text: str, result: Optional[RewriteResult] = None) -> str:
        """Compute the new contents of a descriptor without touching the disk.

        Args:
            descriptor: Path of the Makefile.in, used for directory variables
            text: Current contents
            result: Collects warnings and the rule count

        Returns:
            The descriptor text with a regenerated dependency section
        """
        if result is None:
            result = RewriteResult(descriptor)
        # strip off leading ./
        descriptor = re.sub(r"^\./+", "", descriptor)

        newline = detect_newline(text)
        rules: List[str] = []
        info = parse_descriptor(text, self.substitutions)
        dir_vars = DirVars.for_descriptor(descriptor, self.top_srcdir, self.top_builddir)
        context = ScanContext(dir_vars, list(info.include_paths), set(info.generated))
        scanner = DependencyScanner(context, warn=lambda path, message: self._warn(result, path, message))
        static_disabled = info.static_disabled

        for obj in sorted(info.objects):
            match = RE_OBJECT.match(obj)
            if not match:
                continue
            base, ext = match.group(1), match.group(2)
            has_lo = f"{base}.lo" in info.objects

            if ext == "o" and has_lo and not static_disabled:
                # We have both .lo and .o files, only the .lo should be used
                self._warn(result, descriptor, f"{obj} should be {base}.lo")
                continue

            source = self._find_source(descriptor, obj, base, info, dir_vars, result)
            headers = scanner.scan(source)
            deps = format_dependency(obj, source, headers)
            rules.append(deps)

            command = info.implicit_rules.get(ext)
            if command is None:
                self._warn(result, descriptor, f"no .c.{ext} rule to build {obj}")
            else:
                rules.append(format_command(RE_SOURCE_VAR.sub(lambda _: source, command)))
            result.rules += 1

            # PVS Studio files (.i and .plog) but only do them once.
            if (ext != "o" or not has_lo) and info.has_analysis_rules():
                rules.append(self._analysis_rules(obj, base, source, deps, info))

        return strip_generated(text, newline) + "".join(rules).replace("\n", newline)

    def _find_source(self, descriptor: str, obj: str, base: str, info: DescriptorInfo, dir_vars: DirVars, result: RewriteResult) -> str:
        """Locate the source of an object.

        Rules already in the descriptor win, then the MANIFEST, then a guess
        next to the descriptor.
        """
        declared = info.declared_sources.get(obj)
        if declared is not None:
            return declared

        source = base + DEFAULT_SOURCE_EXTENSION
        manifest_path = self.manifest.lookup(source)
        if manifest_path is not None:
            return dir_vars.prettify(manifest_path)

        self._warn(result, descriptor, f"unable to find source for {obj} ({source}) in MANIFEST")
        if os.path.isfile(os.path.join(descriptor_dir(descriptor), source)):
            return f"$(srcdir)/{source}"
        return source

    @staticmethod
    def _analysis_rules(obj: str, base: str, source: str, deps: str, info: DescriptorInfo) -> str:
        """Preprocess (.i) and analyzer (.plog) rules sharing the object's dependencies."""
        preprocess = f"{base}.i" + deps[len(obj) :]
        plog = RE_PLOG_IFILE.sub("", info.implicit_rules["plog"], count=1)
        plog = plog.replace(PLOG_SOURCE_EXPR, source, 1)
        return "".join(
            [
                preprocess,
                format_command(info.implicit_rules["i"]),
                f"{base}.plog: {base}.i\n",
                format_command(plog),
            ]
        )

    def _warn(self, result: RewriteResult, path: str, message: str) -> None:
        diagnostic = format_diagnostic(path, message)
        result.warnings.append(diagnostic)
        logger.debug(diagnostic)
        if not self.quiet:
            print_warning(diagnostic)

    def _write(self, descriptor: str, text: str, result: RewriteResult) -> bool:
        """Write text next to the descriptor and move it into place."""
        new_file = descriptor + TEMP_SUFFIX
        try:
            with open(new_file, "w", encoding="utf-8", errors="surrogateescape", newline="") as f:
                f.write(text)
            os.replace(new_file, descriptor)
        except OSError as e:
            self._warn(result, new_file, f"cannot write: {e.strerror or e}")
            try:
                os.unlink(new_file)
            except FileNotFoundError:
                pass
            except OSError as cleanup_error:
                logger.debug("Could not remove %s: %s", new_file, cleanup_error)
            return False
        return True
