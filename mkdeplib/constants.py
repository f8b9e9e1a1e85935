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
"""Shared constants for the mkdep tool.

This module provides centralized constants used across the mkdep modules:
exit codes, descriptor markers, source suffixes and the configure-time object
list expansions applied before a descriptor is parsed.
"""

from typing import Tuple

# =============================================================================
# Exit Codes
# =============================================================================

EXIT_SUCCESS = 0
EXIT_INVALID_ARGS = 1
EXIT_RUNTIME_ERROR = 2
EXIT_KEYBOARD_INTERRUPT = 130

# =============================================================================
# Descriptor Constants
# =============================================================================

# Everything after this line in a Makefile.in is regenerated on every run
DEPENDENCY_SEPARATOR = "# Autogenerated dependencies, do not modify"

MANIFEST_FILE = "MANIFEST"

# Manifest lines ending in one of these are indexed by basename
MANIFEST_SOURCE_EXTENSIONS = (".c", ".l", ".y")

# Suffix used when guessing the source of an object
DEFAULT_SOURCE_EXTENSION = ".c"

DISABLE_STATIC_MARKER = "--tag=disable-static"

# =============================================================================
# Rule Formatting
# =============================================================================

LINE_WIDTH = 80  # Column budget for dependency lines
FIRST_LINE_BREAK = 78  # Rightmost break position on the first line
CONTINUATION = " \\"

# =============================================================================
# Configure Substitutions
# =============================================================================

# Object lists that configure fills in. All possible objects are listed so
# every source gets a dependency rule regardless of the configuration.
CONFIGURE_SUBSTITUTIONS: Tuple[Tuple[str, str], ...] = (
    ("@DEV@", ""),
    ("@COMMON_OBJS@", "aix.lo event_poll.lo event_select.lo"),
    ("@SUDO_OBJS@", "intercept.pb-c.o openbsd.o preload.o selinux.o sesh.o solaris.o"),
    ("@SUDOERS_OBJS@", "bsm_audit.lo linux_audit.lo ldap.lo ldap_util.lo ldap_conf.lo solaris_audit.lo sssd.lo"),
    (
        "@AUTH_OBJS@",
        "afs.lo aix_auth.lo bsdauth.lo dce.lo fwtk.lo getspwuid.lo kerb5.lo pam.lo passwd.lo rfc1938.lo secureware.lo securid5.lo sia.lo",
    ),
    ("@DIGEST@", "digest.lo digest_openssl.lo digest_gcrypt.lo"),
    (
        "@LTLIBOBJS@",
        "arc4random.lo arc4random_buf.lo arc4random_uniform.lo cfmakeraw.lo closefrom.lo dup3.lo explicit_bzero.lo "
        "fchmodat.lo freezero.lo fstatat.lo fnmatch.lo getaddrinfo.lo getcwd.lo getentropy.lo getgrouplist.lo "
        "getdelim.lo getopt_long.lo getusershell.lo glob.lo gmtime_r.lo inet_ntop.lo inet_pton.lo isblank.lo "
        "localtime_r.lo memrchr.lo mksiglist.lo mksigname.lo mktemp.lo nanosleep.lo openat.lo pipe2.lo pread.lo "
        "pwrite.lo pw_dup.lo reallocarray.lo sha2.lo sig2str.lo siglist.lo signame.lo snprintf.lo str2sig.lo "
        "strlcat.lo strlcpy.lo strndup.lo strnlen.lo strsignal.lo unlinkat.lo utimens.lo",
    ),
)

# =============================================================================
# Exception Classes
# =============================================================================


class MkDepError(Exception):
    """Base exception for all mkdep errors.

    All mkdep exceptions carry an exit_code attribute that indicates
    what exit code the program should use when this error is caught at the
    main entry point.
    """

    def __init__(self, message: str, exit_code: int = EXIT_RUNTIME_ERROR):
        super().__init__(message)
        self.exit_code = exit_code


# Validation errors (EXIT_INVALID_ARGS)
class ValidationError(MkDepError):
    """Raised when input validation fails (arguments, paths, etc)."""

    def __init__(self, message: str):
        super().__init__(message, EXIT_INVALID_ARGS)


class ArgumentError(ValidationError):
    """Raised when command-line arguments are invalid."""


class ManifestError(MkDepError):
    """Raised when the MANIFEST cannot be read. Fatal for the whole run."""


class DescriptorError(MkDepError):
    """Raised when a single Makefile.in cannot be read.

    Only fatal for that descriptor; the remaining descriptors are still processed.
    """
