"""Package name and version extraction from release tags."""

import re

from releasestats.models import PackageKey

# "@scope/name@1.2.3" or "@name@1.2.3"; the version is everything after the last "@".
TAG_PATTERN = re.compile(r"^(?P<package>@[^@/\s]+(?:/[^@/\s]+)?)@(?P<version>[^@\s]+)$")


def parse_tag(tag: str) -> PackageKey | None:
    """Extract the package name and version from a release tag.

    Args:
        tag: Raw release tag, e.g. "@daangn/seed-design@2.1.0".

    Returns:
        PackageKey, or None when the tag doesn't follow the package
        convention (e.g. "v1.0.0"). Callers skip such releases.
    """
    match = TAG_PATTERN.match(tag)
    if not match:
        return None
    return PackageKey(package_name=match["package"], version=match["version"])


def format_tag(key: PackageKey) -> str:
    """Render a PackageKey back into tag form."""
    return f"{key.package_name}@{key.version}"
