"""Data model shared by the classifier, resolvers and loader."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class Scheme(str, Enum):
    """Resolution strategy derived from a specifier's prefix or shape."""

    LOCAL = "local"
    CDN = "cdn"
    NPM = "npm"
    JSR = "jsr"
    UNKNOWN = "unknown"


@dataclass(frozen=True)
class PackageRef:
    """A registry package reference parsed from ``npm:``/``jsr:`` specifiers."""

    name: str
    version: str = "latest"

    def __str__(self) -> str:
        return f"{self.name}@{self.version}"


@dataclass(frozen=True)
class ClassificationResult:
    """Outcome of classifying a specifier. Never persisted."""

    valid: bool
    scheme: Scheme
    error: str | None = None
    package: PackageRef | None = None


@dataclass(frozen=True)
class Module:
    """A loaded module body. Immutable once constructed."""

    specifier: str
    content: str
    scheme: Scheme
