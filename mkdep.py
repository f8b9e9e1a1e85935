#!/usr/bin/env python3
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
"""Regenerate the header dependencies of Makefile.in files.

PURPOSE:
    Keeps the explicit object -> header rules at the bottom of every
    Makefile.in in sync with the #include directives of the sources, so make
    rebuilds an object whenever a header it uses changes.

WHAT IT DOES:
    - Reads MANIFEST to learn where each source file lives
    - Finds the objects of each Makefile.in (*OBJS assignments)
    - Follows #include directives through generated headers, -I paths and
      the including file's directory, transitively
    - Replaces everything after "# Autogenerated dependencies, do not modify"
      with one rule (plus build command) per object

METHOD:
    Headers are found by looking at the file system, not by running the
    preprocessor. Conditional compilation is ignored, so a header included
    under any #ifdef is a dependency.

OUTPUT:
    The Makefile.in files are rewritten in place. Warnings (objects without
    a source, headers that cannot be found) go to stderr.

REQUIREMENTS:
    - Python 3.8+
    - networkx, colorama, packaging

EXAMPLES:
    # From the top of the source tree
    ./mkdep.py lib/util/Makefile.in plugins/sudoers/Makefile.in

    # From a separate build directory
    ./mkdep.py --builddir=$PWD --srcdir=../sudo src/Makefile.in
"""
import os
import sys
import argparse
import logging
from typing import List, Optional, Sequence

from mkdeplib.color_utils import Colors, format_diagnostic, print_error, print_warning, should_use_color
from mkdeplib.constants import (
    EXIT_KEYBOARD_INTERRUPT,
    EXIT_RUNTIME_ERROR,
    EXIT_SUCCESS,
    MANIFEST_FILE,
    ArgumentError,
    DescriptorError,
    MkDepError,
)
from mkdeplib.manifest import ManifestIndex
from mkdeplib.package_verification import verify_requirements
from mkdeplib.rewriter import MakefileRewriter

logger = logging.getLogger(__name__)


def parse_arguments(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    """Parse the command line.

    Options are only recognized before the first descriptor, everything from
    there on is taken as a descriptor path.
    """
    parser = argparse.ArgumentParser(
        description="Regenerate the header dependencies at the end of Makefile.in files.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    parser.add_argument("--builddir", default=".", metavar="DIR", help="Top of the build tree (default: .)")

    parser.add_argument("--srcdir", default=None, metavar="DIR", help="Top of the source tree, descriptors and MANIFEST are relative to it")

    parser.add_argument("--verbose", "-v", action="store_true", help="Enable verbose logging output")

    parser.add_argument("--no-color", action="store_true", help="Disable colored output")

    parser.add_argument("descriptors", nargs=argparse.REMAINDER, metavar="Makefile.in", help="Descriptors to update")

    args = parser.parse_args(argv)
    if not args.descriptors:
        parser.error("at least one Makefile.in is required")
    return args


def update_descriptors(descriptors: List[str], top_srcdir: str, top_builddir: str) -> int:
    """Update every descriptor, relative to the current directory.

    Returns:
        EXIT_SUCCESS, or EXIT_RUNTIME_ERROR if a descriptor could not be read

    Raises:
        ManifestError: If MANIFEST cannot be read
    """
    manifest = ManifestIndex.load(MANIFEST_FILE)
    rewriter = MakefileRewriter(manifest, top_srcdir=top_srcdir, top_builddir=top_builddir)

    unreadable = 0
    warnings = 0
    for descriptor in descriptors:
        try:
            result = rewriter.process(descriptor)
        except DescriptorError as e:
            print_warning(str(e))
            unreadable += 1
            continue
        warnings += len(result.warnings)

    logger.debug("Processed %d descriptors, %d warnings", len(descriptors) - unreadable, warnings)
    return EXIT_RUNTIME_ERROR if unreadable else EXIT_SUCCESS


def run(argv: Optional[Sequence[str]] = None) -> int:
    args = parse_arguments(argv)

    log_level = logging.DEBUG if args.verbose else logging.INFO
    logging.basicConfig(level=log_level, format="%(levelname)s: %(message)s")

    if not should_use_color(args.no_color):
        Colors.disable()

    verify_requirements()

    top_srcdir = args.srcdir if args.srcdir is not None else "."
    original_dir = os.getcwd()
    if args.srcdir is not None:
        try:
            os.chdir(args.srcdir)
        except OSError as e:
            raise ArgumentError(f"cannot change to source directory '{args.srcdir}': {e.strerror or e}") from e

    try:
        return update_descriptors(args.descriptors, top_srcdir, args.builddir)
    finally:
        os.chdir(original_dir)


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Main entry point.

    Returns:
        Exit code (0 for success, non-zero for errors)
    """
    try:
        return run(argv)
    except KeyboardInterrupt:
        print_warning("\nOperation cancelled by user")
        return EXIT_KEYBOARD_INTERRUPT
    except MkDepError as e:
        print_error(format_diagnostic("", str(e)))
        return e.exit_code


if __name__ == "__main__":
    sys.exit(main())
