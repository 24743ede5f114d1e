"""Shared constants for Vellum.

File extensions, cache naming, and the code-island markers that separate
literal markup from executable code inside a compiled fragment.
"""

from __future__ import annotations

import re

# Views with this extension are already fragments and are executed as-is.
NATIVE_EXTENSION = ".pyhtml"

# Views with this extension go through the directive compiler first.
MARKUP_EXTENSION = ".html"

# Probe order when resolving a view name against the source tree.
SOURCE_EXTENSIONS: tuple[str, ...] = (NATIVE_EXTENSION, MARKUP_EXTENSION)

# Cache entries are named "<view name>.compiled.pyhtml"
COMPILED_SUFFIX = ".compiled" + NATIVE_EXTENSION

# Code island delimiters: <?py ... ?>
ISLAND_OPEN = "<?py"
ISLAND_CLOSE = "?>"

# Matches one complete island; group 1 is the code between the markers.
ISLAND_RE: re.Pattern[str] = re.compile(r"<\?py(.*?)\?>", re.DOTALL)

# One segment per path component: "layouts.header" -> layouts/header
VIEW_NAME_RE: re.Pattern[str] = re.compile(r"[A-Za-z0-9_-]+(?:\.[A-Za-z0-9_-]+)*")

# Deep enough for any real layout hierarchy while still catching
# self-inclusion (outer -> outer) early.
DEFAULT_MAX_INCLUDE_DEPTH = 50

# Python block keywords that continue the previous suite (dedent, then indent)
CONTINUATION_KEYWORDS: frozenset[str] = frozenset({"elif", "else", "except", "finally"})

# Island body that closes the innermost open block
BLOCK_END = "end"
