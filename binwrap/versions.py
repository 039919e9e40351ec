"""Semver-style version ranges on top of ``packaging``."""

from __future__ import annotations

import re

from packaging.specifiers import SpecifierSet
from packaging.version import Version

VERSION_PATTERN = re.compile(r"v?(\d+\.\d+(?:\.\d+)?(?:-[0-9A-Za-z.]+)?)")

_WILDCARDS = ("x", "X", "*")
_OPERATOR_SPACE = re.compile(r"(<=|>=|<|>|==|=|\^|~>|~)\s+")
_HYPHEN = re.compile(r"^\s*(\S+)\s+-\s+(\S+)\s*$")
_COMPARATOR = re.compile(r"^(<=|>=|<|>|==|=|\^|~>|~)?v?(.*)$")


def find_version(output: str) -> str | None:
    """Return the first version number that appears in ``output``."""
    for match in VERSION_PATTERN.finditer(output):
        candidate = match.group(1)
        for option in (candidate, candidate.split("-", 1)[0]):
            try:
                Version(option)
            except ValueError:
                continue
            return option
    return None


def _split(version: str) -> list[str]:
    """Split a version into its parts, dropping everything from a wildcard on."""
    parts = []
    for part in version.split("."):
        if part in _WILDCARDS or part == "":
            break
        parts.append(part)
    return parts


def _number(part: str) -> int:
    match = re.match(r"\d+", part)
    if not match:
        msg = f"Invalid version component: {part!r}"
        raise ValueError(msg)
    return int(match.group())


def _bump(parts: list[str], index: int) -> str:
    numbers = [_number(p) for p in parts[: index + 1]]
    numbers[index] += 1
    return ".".join(str(n) for n in numbers)


def _caret(parts: list[str]) -> list[str]:
    if not parts:
        return []
    lower = f">={'.'.join(parts)}"
    if _number(parts[0]) > 0 or len(parts) == 1:
        return [lower, f"<{_bump(parts, 0)}"]
    if len(parts) == 2 or _number(parts[1]) > 0:
        return [lower, f"<{_bump(parts, 1)}"]
    return [lower, f"<{_bump(parts, 2)}"]


def _tilde(parts: list[str]) -> list[str]:
    if not parts:
        return []
    lower = f">={'.'.join(parts)}"
    return [lower, f"<{_bump(parts, 0 if len(parts) == 1 else 1)}"]


def _comparator(token: str) -> list[str]:
    match = _COMPARATOR.match(token)
    if not match:
        msg = f"Invalid version comparator: {token!r}"
        raise ValueError(msg)
    op, version = match.group(1) or "", match.group(2)
    parts = _split(version)
    partial = len(parts) < 3
    joined = ".".join(parts)

    if op == "^":
        return _caret(parts)
    if op in ("~", "~>"):
        return _tilde(parts)
    if not parts:
        if op in ("<", ">"):
            # "<*" and ">*" can never be satisfied
            return ["<0"]
        return []
    if op in ("", "=", "=="):
        return [f"=={joined}.*"] if partial else [f"=={joined}"]
    if op == ">" and partial:
        return [f">={_bump(parts, len(parts) - 1)}"]
    if op == "<=" and partial:
        return [f"<{_bump(parts, len(parts) - 1)}"]
    return [f"{op}{joined}"]


def _hyphen(lower: str, upper: str) -> list[str]:
    specs = [f">={'.'.join(_split(lower.lstrip('v')))}"] if _split(lower.lstrip("v")) else []
    upper_parts = _split(upper.lstrip("v"))
    if not upper_parts:
        return specs
    if len(upper_parts) < 3:
        specs.append(f"<{_bump(upper_parts, len(upper_parts) - 1)}")
    else:
        specs.append(f"<={'.'.join(upper_parts)}")
    return specs


def parse_range(version_range: str) -> list[SpecifierSet]:
    """Translate a semver range into alternative ``SpecifierSet`` objects.

    A version satisfies the range if any of the returned sets contains it.

    Raises:
        ValueError: If the range can't be parsed

    """
    alternatives = []
    for alternative in version_range.split("||"):
        hyphen = _HYPHEN.match(alternative)
        if hyphen:
            specs = _hyphen(hyphen.group(1), hyphen.group(2))
        else:
            normalized = _OPERATOR_SPACE.sub(r"\1", alternative.strip())
            specs = []
            for token in normalized.split():
                specs.extend(_comparator(token))
        alternatives.append(SpecifierSet(",".join(specs)))
    return alternatives


def satisfies(version: str, version_range: str) -> bool:
    """Return True if ``version`` is inside ``version_range``.

    Raises:
        ValueError: If the version or the range can't be parsed

    """
    parsed = Version(version)
    return any(s.contains(parsed, prereleases=True) for s in parse_range(version_range))
