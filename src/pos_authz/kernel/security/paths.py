"""Kernel security – request path matching and permission resolution.

Three matchers live here:

* :class:`AntPattern` – Ant-style globs used for the public, admin-only and
  static path lists (``**`` spans any number of segments, ``*`` and ``?``
  stay inside one segment).
* :class:`EndpointTemplate` – ``METHOD /api/outlets/{id}`` entries of the
  endpoint permission table; placeholders match one non-empty segment of
  any value.
* :class:`PathResolver` – the exact → category → default resolution chain.
"""
from __future__ import annotations

import dataclasses
import re
from enum import Enum
from typing import TYPE_CHECKING

from pos_authz.kernel.errors import ConfigurationError
from pos_authz.kernel.security.principal import Permission

if TYPE_CHECKING:
    from pos_authz.kernel.security.registry import PermissionRegistry

_PLACEHOLDER_RE = re.compile(r"^\{[^/{}]+\}$")
_METHOD_RE = re.compile(r"^[A-Z]+$")


def split_path(path: str) -> tuple[str, ...]:
    """Return the non-empty segments of *path*."""
    return tuple(segment for segment in path.split("/") if segment)


def request_segments(path: str) -> tuple[str, ...]:
    """Segments of a request path; the query string is dropped."""
    return split_path(path.split("?", 1)[0])


def normalize_method(method: str) -> str:
    upper = method.strip().upper()
    if not _METHOD_RE.match(upper):
        raise ConfigurationError(f"Malformed HTTP method {method!r}")
    return upper


# ---------------------------------------------------------------------------
# Ant-style glob
# ---------------------------------------------------------------------------


def _segment_regex(segment: str) -> re.Pattern[str]:
    parts: list[str] = []
    for char in segment:
        if char == "*":
            parts.append("[^/]*")
        elif char == "?":
            parts.append("[^/]")
        else:
            parts.append(re.escape(char))
    return re.compile("".join(parts))


class AntPattern:
    """Compiled Ant-style path pattern.

    ``/api/system/**`` matches ``/api/system`` as well as every path below
    it; ``/docs/*.json`` matches a single segment only.
    """

    __slots__ = ("pattern", "_segments")

    def __init__(self, pattern: str) -> None:
        if not pattern.startswith("/"):
            raise ConfigurationError(f"Path pattern must start with '/': {pattern!r}")
        self.pattern = pattern
        self._segments: tuple[str | re.Pattern[str], ...] = tuple(
            "**" if seg == "**" else _segment_regex(seg) for seg in split_path(pattern)
        )

    def matches(self, path: str) -> bool:
        return self._match(0, request_segments(path), 0)

    def _match(self, p_idx: int, segments: tuple[str, ...], s_idx: int) -> bool:
        if p_idx == len(self._segments):
            return s_idx == len(segments)
        current = self._segments[p_idx]
        if current == "**":
            return any(
                self._match(p_idx + 1, segments, nxt)
                for nxt in range(s_idx, len(segments) + 1)
            )
        if s_idx == len(segments):
            return False
        assert isinstance(current, re.Pattern)
        if current.fullmatch(segments[s_idx]) is None:
            return False
        return self._match(p_idx + 1, segments, s_idx + 1)

    def __repr__(self) -> str:
        return f"AntPattern({self.pattern!r})"


def matches_any(patterns: tuple[AntPattern, ...], path: str) -> bool:
    return any(p.matches(path) for p in patterns)


# ---------------------------------------------------------------------------
# Endpoint templates
# ---------------------------------------------------------------------------


@dataclasses.dataclass(frozen=True)
class EndpointTemplate:
    """One ``(method, template) -> permission`` entry."""

    method: str
    template: str
    permission: Permission
    segments: tuple[str, ...] = dataclasses.field(init=False, compare=False, repr=False)
    placeholders: int = dataclasses.field(init=False, compare=False, repr=False)

    def __post_init__(self) -> None:
        if not self.template.startswith("/"):
            raise ConfigurationError(
                f"Endpoint template must start with '/': {self.template!r}"
            )
        segments = split_path(self.template)
        for seg in segments:
            if ("{" in seg or "}" in seg) and not _PLACEHOLDER_RE.match(seg):
                raise ConfigurationError(
                    f"Malformed placeholder {seg!r} in {self.template!r}"
                )
        object.__setattr__(self, "segments", segments)
        object.__setattr__(
            self, "placeholders", sum(1 for s in segments if _PLACEHOLDER_RE.match(s))
        )

    @property
    def key(self) -> str:
        return f"{self.method} {self.template}"

    def matches(self, segments: tuple[str, ...]) -> bool:
        if len(segments) != len(self.segments):
            return False
        for expected, actual in zip(self.segments, segments):
            if _PLACEHOLDER_RE.match(expected):
                continue
            if expected != actual:
                return False
        return True


# ---------------------------------------------------------------------------
# Resolution
# ---------------------------------------------------------------------------


class ResolutionSource(str, Enum):
    EXACT = "exact"
    CATEGORY = "category"
    DEFAULT = "default"


@dataclasses.dataclass(frozen=True)
class PathResolution:
    """Outcome of :meth:`PathResolver.resolve`."""

    permission: Permission
    source: ResolutionSource
    admin_only: bool = False
    template: str | None = None


class PathResolver:
    """Find the permission an HTTP call requires.

    Order: exact template match (fewest placeholders, then declaration
    order), then the known resource segments in their configured precedence
    order (not their position in the path), then the registry's fallback
    permission.  Admin-only membership is reported alongside but never
    replaces the permission; the gatekeeper enforces it as a separate role
    gate.
    """

    def __init__(self, registry: "PermissionRegistry") -> None:
        self._registry = registry

    def resolve(self, method: str, path: str) -> PathResolution:
        admin_only = self._registry.is_admin_only(path)
        segments = request_segments(path)

        template = self._match_template(method.strip().upper(), segments)
        if template is not None:
            return PathResolution(
                permission=template.permission,
                source=ResolutionSource.EXACT,
                admin_only=admin_only,
                template=template.template,
            )

        present = {segment.lower() for segment in segments}
        for segment, resource in self._registry.category_segments.items():
            if segment in present:
                return PathResolution(
                    permission=Permission.of(resource, "READ"),
                    source=ResolutionSource.CATEGORY,
                    admin_only=admin_only,
                )

        return PathResolution(
            permission=self._registry.default_permission,
            source=ResolutionSource.DEFAULT,
            admin_only=admin_only,
        )

    def _match_template(
        self, method: str, segments: tuple[str, ...]
    ) -> EndpointTemplate | None:
        best: EndpointTemplate | None = None
        for candidate in self._registry.templates_for(method):
            if not candidate.matches(segments):
                continue
            if best is None or candidate.placeholders < best.placeholders:
                best = candidate
                if best.placeholders == 0:
                    break
        return best


__all__ = [
    "AntPattern",
    "EndpointTemplate",
    "PathResolution",
    "PathResolver",
    "ResolutionSource",
    "matches_any",
    "normalize_method",
    "request_segments",
    "split_path",
]
