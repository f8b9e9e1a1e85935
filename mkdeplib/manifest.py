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
"""Index of the MANIFEST file: source basename -> repository path.

Objects only carry a basename (foo.lo), the MANIFEST tells which directory
foo.c really lives in.
"""

import logging
from dataclasses import dataclass, field
from typing import Dict, Iterable, Optional

from mkdeplib.constants import MANIFEST_FILE, MANIFEST_SOURCE_EXTENSIONS, ManifestError

logger = logging.getLogger(__name__)


@dataclass
class ManifestIndex:
    """Source basename to canonical path mapping.

    Attributes:
        entries: basename -> path as listed in the MANIFEST
    """

    entries: Dict[str, str] = field(default_factory=dict)

    @classmethod
    def from_lines(cls, lines: Iterable[str]) -> "ManifestIndex":
        """Build an index from manifest lines. Later duplicates replace earlier ones."""
        entries: Dict[str, str] = {}
        for line in lines:
            path = line.rstrip("\r\n")
            basename = path.rsplit("/", 1)[-1]
            if basename.endswith(MANIFEST_SOURCE_EXTENSIONS) and len(basename) > 2:
                entries[basename] = path
        return cls(entries)

    @classmethod
    def load(cls, manifest_path: str = MANIFEST_FILE) -> "ManifestIndex":
        """Read and index a MANIFEST file.

        Args:
            manifest_path: Path of the MANIFEST

        Returns:
            The populated index

        Raises:
            ManifestError: If the file cannot be read
        """
        try:
            with open(manifest_path, "r", encoding="utf-8", errors="surrogateescape") as f:
                index = cls.from_lines(f)
        except OSError as e:
            raise ManifestError(f"unable to open {manifest_path}: {e.strerror or e}") from e

        logger.debug("Indexed %d sources from %s", len(index.entries), manifest_path)
        return index

    def lookup(self, basename: str) -> Optional[str]:
        return self.entries.get(basename)

    def __len__(self) -> int:
        return len(self.entries)
