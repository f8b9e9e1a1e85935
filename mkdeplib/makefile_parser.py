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
"""Parser for the parts of a Makefile.in that mkdep needs.

The descriptor is never fully parsed as make syntax. After joining
continuation lines and expanding configure placeholders a handful of
line-anchored patterns pick out objects, include paths, generated headers,
suffix rules and rules that already name a source.
"""

import re
import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence, Set, Tuple

from mkdeplib.constants import CONFIGURE_SUBSTITUTIONS, DEPENDENCY_SEPARATOR, DISABLE_STATIC_MARKER

logger = logging.getLogger(__name__)

# Regex patterns for descriptor constructs
RE_OBJS = re.compile(r"^[A-Z0-9_]*OBJS\s*=\s*(.*)", re.MULTILINE)
RE_VARIABLE_TOKEN = re.compile(r"^\$[({].*[)}]$")
RE_INCLUDE_PATH = re.compile(r"-I(\S+)")
RE_GENERATED = re.compile(r"GENERATED\s*=\s*(.+)$", re.MULTILINE)
RE_IMPLICIT_RULE = re.compile(r"^\.[ci]\.(l?o|i|plog):\s*\n\t+(.*)$", re.MULTILINE)
RE_DECLARED_SOURCE = re.compile(r"^(\w+\.l?o):\s*(\S+\.c)", re.MULTILINE)
RE_LTFLAGS = re.compile(r"LTFLAGS\s*=\s*(.+)$", re.MULTILINE)
RE_LTFLAGS_REF = re.compile(r"\$[({]LTFLAGS[)}]")


@dataclass
class DescriptorInfo:
    """What mkdep knows about one Makefile.in.

    Attributes:
        objects: Object names from *OBJS assignments
        include_paths: -I arguments in declaration order, "." excluded
        generated: Headers listed in GENERATED
        implicit_rules: Suffix ("o", "lo", "i", "plog") -> command of the suffix rule
        declared_sources: Object -> source for rules already in the descriptor
        ltflags: Value of LTFLAGS if declared
    """

    objects: Set[str] = field(default_factory=set)
    include_paths: List[str] = field(default_factory=list)
    generated: Set[str] = field(default_factory=set)
    implicit_rules: Dict[str, str] = field(default_factory=dict)
    declared_sources: Dict[str, str] = field(default_factory=dict)
    ltflags: Optional[str] = None

    @property
    def static_disabled(self) -> bool:
        """True if libtool objects are built with --tag=disable-static.

        In that case a .o and a .lo of the same name are distinct objects.
        """
        if self.ltflags is None:
            return False
        rule = self.implicit_rules.get("lo")
        if rule is None:
            return False
        rule = RE_LTFLAGS_REF.sub(lambda _: self.ltflags or "", rule, count=1)
        return DISABLE_STATIC_MARKER in rule

    def has_analysis_rules(self) -> bool:
        """True if both the preprocess (.i) and analyzer (.plog) suffix rules exist."""
        return "i" in self.implicit_rules and "plog" in self.implicit_rules


def detect_newline(text: str) -> str:
    """Line ending used by a descriptor, "\\r\\n" or "\\n"."""
    return "\r\n" if "\r\n" in text else "\n"


def strip_generated(text: str, newline: str = "\n") -> str:
    """Return the descriptor up to and including the separator line.

    Anything after the separator is the previous run's output. A descriptor
    without a separator gets one appended.
    """
    index = text.find(DEPENDENCY_SEPARATOR)
    if index >= 0:
        text = text[:index]
    return text + DEPENDENCY_SEPARATOR + newline


def join_continuations(text: str) -> str:
    """Join lines ending in a backslash with the following line.

    CRLF line endings are converted to LF first.
    """
    return text.replace("\r\n", "\n").replace("\\\n", "")


def expand_configure_placeholders(text: str, substitutions: Sequence[Tuple[str, str]] = CONFIGURE_SUBSTITUTIONS) -> str:
    """Replace @PLACEHOLDER@ object lists with every object configure could select."""
    for placeholder, replacement in substitutions:
        text = text.replace(placeholder, replacement)
    return text


def parse_objects(text: str) -> Set[str]:
    objects: Set[str] = set()
    for match in RE_OBJS.finditer(text):
        for token in match.group(1).split():
            # skip included vars for now
            if RE_VARIABLE_TOKEN.match(token):
                continue
            objects.add(token)
    return objects


def parse_include_paths(text: str) -> List[str]:
    return [path for path in RE_INCLUDE_PATH.findall(text) if path != "."]


def parse_generated(text: str) -> Set[str]:
    match = RE_GENERATED.search(text)
    if not match:
        return set()
    return set(match.group(1).split())


def parse_implicit_rules(text: str) -> Dict[str, str]:
    """Map suffix to the first command of its .c.X / .i.X suffix rule. Later rules win."""
    return {suffix: command for suffix, command in RE_IMPLICIT_RULE.findall(text)}


def parse_declared_sources(text: str) -> Dict[str, str]:
    return {obj: src for obj, src in RE_DECLARED_SOURCE.findall(text)}


def parse_descriptor(text: str, substitutions: Sequence[Tuple[str, str]] = CONFIGURE_SUBSTITUTIONS) -> DescriptorInfo:
    """Parse a Makefile.in.

    Args:
        text: Raw descriptor contents, continuation lines and all
        substitutions: Configure placeholder expansions to apply first

    Returns:
        DescriptorInfo for the descriptor
    """
    text = expand_configure_placeholders(join_continuations(text), substitutions)

    ltflags_match = RE_LTFLAGS.search(text)
    info = DescriptorInfo(
        objects=parse_objects(text),
        include_paths=parse_include_paths(text),
        generated=parse_generated(text),
        implicit_rules=parse_implicit_rules(text),
        declared_sources=parse_declared_sources(text),
        ltflags=ltflags_match.group(1) if ltflags_match else None,
    )

    logger.debug(
        "Parsed %d objects, %d include paths, %d generated headers, implicit rules for %s",
        len(info.objects),
        len(info.include_paths),
        len(info.generated),
        ", ".join(sorted(info.implicit_rules)) or "nothing",
    )
    return info
