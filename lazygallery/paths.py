"""Canonical path strings and comparisons across separator/case conventions.

Paths stay plain strings here so that Windows-style paths (``C:\\Photos``)
and POSIX paths (``/home/me/Photos``) normalize the same way on every host.
Nothing in this module touches the filesystem.
"""

from __future__ import annotations

import re
import sys

CASE_INSENSITIVE_FS = sys.platform in ("win32", "cygwin", "darwin")

WINDOWS_SEP = "\\"
POSIX_SEP = "/"
UNC_PREFIX = "\\\\"

_DRIVE_PREFIX_RE = re.compile(r"^[A-Za-z]:")
_DRIVE_ONLY_RE = re.compile(r"^[A-Za-z]:$")
_BACKSLASH_RUN_RE = re.compile(r"\\+")
_SLASH_RUN_RE = re.compile(r"/+")
_SLASH_UNC_RE = re.compile(r"^//[^/]")


def is_windows_style(path: str) -> bool:
    """Return whether ``path`` uses drive/UNC/backslash conventions.

    ``//server/share`` counts as UNC; three or more leading slashes do not.
    """
    if _DRIVE_PREFIX_RE.match(path) or path.startswith(UNC_PREFIX) or _SLASH_UNC_RE.match(path):
        return True
    return WINDOWS_SEP in path and not path.startswith(POSIX_SEP)


def separator_for(path: str) -> str:
    """Return the separator used by the normalized form of ``path``."""
    return WINDOWS_SEP if is_windows_style(path) else POSIX_SEP


def _normalize_windows(text: str) -> str:
    folded = text.replace(POSIX_SEP, WINDOWS_SEP)
    if folded.startswith(UNC_PREFIX):
        rest = _BACKSLASH_RUN_RE.sub(r"\\", folded[2:]).strip(WINDOWS_SEP)
        return UNC_PREFIX + rest

    collapsed = _BACKSLASH_RUN_RE.sub(r"\\", folded)
    stripped = collapsed.rstrip(WINDOWS_SEP)
    if _DRIVE_ONLY_RE.match(stripped):
        return stripped + WINDOWS_SEP
    if not stripped:
        return WINDOWS_SEP
    return stripped


def _normalize_posix(text: str) -> str:
    collapsed = _SLASH_RUN_RE.sub(POSIX_SEP, text)
    if len(collapsed) > 1:
        collapsed = collapsed.rstrip(POSIX_SEP)
    return collapsed


def normalize(raw: object) -> str:
    """Return the canonical form of ``raw``.

    Separators are folded to one convention, repeated separators collapse,
    and trailing separators are dropped except on a bare volume root
    (``C:`` becomes ``C:\\``, ``/`` stays ``/``). Non-string or blank input
    yields ``""``. ``normalize(normalize(p)) == normalize(p)`` for every ``p``.
    """
    if not isinstance(raw, str):
        return ""
    text = raw.strip()
    if not text:
        return ""
    if is_windows_style(text):
        return _normalize_windows(text)
    return _normalize_posix(text)


def comparison_key(path: object, case_insensitive: bool | None = None) -> str:
    """Return a hashable key under which equivalent paths collide."""
    normalized = normalize(path)
    fold_case = CASE_INSENSITIVE_FS if case_insensitive is None else case_insensitive
    return normalized.casefold() if fold_case else normalized


def equals(a: object, b: object, case_insensitive: bool | None = None) -> bool:
    """Compare two paths for equivalence under normalization.

    ``case_insensitive=None`` follows the host filesystem convention.
    """
    na = normalize(a)
    nb = normalize(b)
    if na == nb:
        return True
    if not na or not nb:
        return False
    return comparison_key(na, case_insensitive) == comparison_key(nb, case_insensitive)


def split_root(path: object) -> tuple[str, list[str]]:
    """Split a path into ``(volume_root, components)``.

    The root is ``""`` for relative paths.
    """
    normalized = normalize(path)
    if not normalized:
        return "", []
    if not is_windows_style(normalized):
        parts = [part for part in normalized.split(POSIX_SEP) if part]
        return (POSIX_SEP if normalized.startswith(POSIX_SEP) else ""), parts

    if normalized.startswith(UNC_PREFIX):
        parts = [part for part in normalized[2:].split(WINDOWS_SEP) if part]
        share = parts[:2]
        return UNC_PREFIX + WINDOWS_SEP.join(share), parts[2:]

    parts = [part for part in normalized.split(WINDOWS_SEP) if part]
    if parts and _DRIVE_ONLY_RE.match(parts[0]):
        return parts[0] + WINDOWS_SEP, parts[1:]
    if normalized.startswith(WINDOWS_SEP):
        return WINDOWS_SEP, parts
    return "", parts


def segments(full_path: object) -> list[str]:
    """Return ancestor paths from the volume root down to ``full_path``.

    ``C:\\Users\\foo`` yields ``["C:\\", "C:\\Users", "C:\\Users\\foo"]``;
    a bare root yields itself as the only segment.
    """
    root, parts = split_root(full_path)
    if not root and not parts:
        return []
    sep = separator_for(normalize(full_path))
    out: list[str] = []
    acc = root
    if root:
        out.append(root)
    for part in parts:
        if not acc:
            acc = part
        elif acc.endswith(sep):
            acc = acc + part
        else:
            acc = acc + sep + part
        out.append(acc)
    return out


def parent(path: object) -> str:
    """Return the containing folder of ``path``, or ``""`` at a root."""
    chain = segments(path)
    if len(chain) < 2:
        return ""
    return chain[-2]


def basename(path: object) -> str:
    """Return the last component of ``path`` (the root itself for a root)."""
    root, parts = split_root(path)
    if parts:
        return parts[-1]
    return root


__all__ = [
    "CASE_INSENSITIVE_FS",
    "is_windows_style",
    "separator_for",
    "normalize",
    "comparison_key",
    "equals",
    "split_root",
    "segments",
    "parent",
    "basename",
]
