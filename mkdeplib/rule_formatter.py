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
"""Formatting of generated make rules."""

from typing import Iterable, List

from mkdeplib.constants import CONTINUATION, FIRST_LINE_BREAK, LINE_WIDTH


def wrap_dependency_line(obj: str, line: str, width: int = LINE_WIDTH) -> str:
    """Wrap a "obj: src headers..." line at spaces.

    The first line breaks at the last space at or before column
    FIRST_LINE_BREAK. Continuation lines are indented by len(obj) + 2 and
    filled up to width including the trailing backslash. Words are never
    split, so a single word longer than the budget overflows it.

    Args:
        obj: Target of the rule, determines the continuation indent
        line: The unwrapped rule line
        width: Column budget

    Returns:
        Wrapped text ending in a newline
    """
    if len(line) <= width:
        return line + "\n"

    indent = len(obj) + 2
    first_break = width - (LINE_WIDTH - FIRST_LINE_BREAK)
    parts: List[str] = []
    offset = 0
    while len(line) - offset > width - indent:
        if offset == 0:
            limit = first_break
        else:
            limit = offset + width - indent - 2
        pos = line.rfind(" ", offset, limit + 1)
        if pos <= offset:
            # Nothing to break at within the budget, break after the long word
            pos = line.find(" ", offset + 1)
            if pos < 0:
                break
        prefix = " " * indent if offset else ""
        parts.append(prefix + line[offset:pos] + CONTINUATION)
        offset = pos + 1

    prefix = " " * indent if offset else ""
    parts.append(prefix + line[offset:])
    return "\n".join(parts) + "\n"


def format_dependency(obj: str, source: str, headers: Iterable[str], width: int = LINE_WIDTH) -> str:
    """Format the dependency rule of an object on its source and headers."""
    line = " ".join([f"{obj}: {source}", *headers])
    return wrap_dependency_line(obj, line, width)


def format_command(command: str) -> str:
    return f"\t{command}\n"
