"""Default rules loader.

Loads the optional ``~/.config/codeswitch/defaults`` file, which settles
ambiguous lookups without user interaction::

    # exact name → relative path
    proj = work/proj

    # glob patterns over the full relative path, tried in file order
    work/*
    */upstream/*

Safety guards:

* Size limit (default 64 KB) — rejects oversized files.
* Read as bytes — rules may name paths that are not valid UTF-8.
* Typed exceptions (:class:`DefaultsInvalid`, :class:`DefaultsTooLarge`).
"""

from __future__ import annotations

from fnmatch import fnmatchcase
from pathlib import Path

from pydantic import BaseModel, ConfigDict

from codeswitch.core.errors import DefaultsInvalid, DefaultsTooLarge

_DEFAULT_MAX_SIZE_BYTES = 64 * 1024


# ── Pydantic v2 model ───────────────────────────────────────
class DefaultRules(BaseModel):
    """Parsed default rules.  Read-only to the resolver."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    literals: dict[bytes, bytes] = {}
    patterns: tuple[bytes, ...] = ()

    def literal_for(self, name: bytes) -> bytes | None:
        return self.literals.get(name)

    def first_pattern_match(self, candidates: tuple[bytes, ...]) -> bytes | None:
        """Return the first candidate hit by the earliest matching pattern.

        Every candidate is checked against a pattern before the next
        pattern is tried, so pattern order decides, not candidate order.
        """
        for pattern in self.patterns:
            for candidate in candidates:
                if fnmatchcase(candidate, pattern):
                    return candidate
        return None


# ── Loader ──────────────────────────────────────────────────
def parse_default_rules(text: bytes) -> DefaultRules:
    """Parse the rules file contents.

    Raises
    ------
    DefaultsInvalid
        A ``name = path`` line with an empty side.
    """
    literals: dict[bytes, bytes] = {}
    patterns: list[bytes] = []

    for lineno, raw in enumerate(text.splitlines(), start=1):
        line = raw.strip()
        if not line or line.startswith(b"#"):
            continue

        if b"=" in line:
            name, _, path = line.partition(b"=")
            name, path = name.strip(), path.strip()
            if not name or not path:
                raise DefaultsInvalid(f"line {lineno}: expected 'name = relative/path'")
            literals[name] = path
        else:
            patterns.append(line)

    return DefaultRules(literals=literals, patterns=tuple(patterns))


def load_default_rules(
    path: Path,
    *,
    max_size_bytes: int = _DEFAULT_MAX_SIZE_BYTES,
) -> DefaultRules:
    """Load the default rules file at *path*.

    A missing file is not an error: it yields empty rules.

    Raises
    ------
    DefaultsTooLarge
        File exceeds *max_size_bytes*.
    DefaultsInvalid
        A malformed line.
    """
    if not path.exists():
        return DefaultRules()

    size = path.stat().st_size
    if size > max_size_bytes:
        raise DefaultsTooLarge(
            f"defaults file {path.name} is {size:,} bytes (limit {max_size_bytes:,})"
        )

    try:
        return parse_default_rules(path.read_bytes())
    except DefaultsInvalid as exc:
        raise DefaultsInvalid(f"{path}: {exc}") from exc
