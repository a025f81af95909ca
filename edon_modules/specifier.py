"""Specifier classification.

Rules, first match wins:
1. ``npm:<name>[@version]``  -> NPM
2. ``jsr:<name>[@version]``  -> JSR
3. ``http://`` / ``https://`` -> CDN
4. anything else             -> LOCAL (assumed to be a file path)

Only schemes that are recognized but structurally broken are invalid.
"""

from urllib.parse import urlsplit

from .models import ClassificationResult
from .models import PackageRef
from .models import Scheme

NPM_PREFIX = "npm:"
JSR_PREFIX = "jsr:"
CDN_PREFIXES = ("http://", "https://")

DEFAULT_VERSION = "latest"


def parse_package_ref(reference: str) -> PackageRef:
    """Parse ``name[@version]`` into a PackageRef.

    Scoped names keep their leading ``@``: the version separator is the first
    ``@`` after it, so ``@scope/name@1.0.0`` splits into ``@scope/name`` and
    ``1.0.0``.

    Args:
        reference: Package reference with the scheme prefix already removed

    Returns:
        PackageRef with version defaulting to "latest"

    Raises:
        ValueError: Empty name, scope without a package, or empty version
    """
    if not reference:
        raise ValueError("package name is empty")

    if reference.startswith("@"):
        separator = reference.find("@", 1)
    else:
        separator = reference.find("@")

    if separator == -1:
        name, version = reference, DEFAULT_VERSION
    else:
        name, version = reference[:separator], reference[separator + 1 :]
        if not version:
            raise ValueError(f"version is empty in '{reference}'")

    if not name:
        raise ValueError(f"package name is empty in '{reference}'")

    if name.startswith("@"):
        scope, _, package = name[1:].partition("/")
        if not scope or not package:
            raise ValueError(f"scoped package name must look like @scope/name, got '{name}'")

    return PackageRef(name=name, version=version)


def classify(specifier: str) -> ClassificationResult:
    """Classify a raw specifier. Pure function, never raises."""
    if not specifier:
        return ClassificationResult(valid=False, scheme=Scheme.UNKNOWN, error="specifier is empty")

    for prefix, scheme in ((NPM_PREFIX, Scheme.NPM), (JSR_PREFIX, Scheme.JSR)):
        if specifier.startswith(prefix):
            try:
                package = parse_package_ref(specifier[len(prefix) :])
            except ValueError as e:
                return ClassificationResult(valid=False, scheme=scheme, error=f"invalid {prefix} specifier: {e}")
            return ClassificationResult(valid=True, scheme=scheme, package=package)

    if specifier.startswith(CDN_PREFIXES):
        try:
            host = urlsplit(specifier).hostname
        except ValueError as e:
            return ClassificationResult(valid=False, scheme=Scheme.CDN, error=f"invalid URL '{specifier}': {e}")
        if not host:
            return ClassificationResult(valid=False, scheme=Scheme.CDN, error=f"URL has no host: '{specifier}'")
        return ClassificationResult(valid=True, scheme=Scheme.CDN)

    return ClassificationResult(valid=True, scheme=Scheme.LOCAL)
