"""Compatibility gate shared by install, use and uninstall.

A release may declare the range of shelf versions allowed to operate on it.
Ranges follow npm semver: ``^1.2.0``, ``~1.2.0``, ``1.x``, ``1.2.0 - 2.0.0``,
space separated comparators and ``||`` alternatives. Prerelease tool versions
only match ranges that name a prerelease of the same version.
"""

from __future__ import annotations

from nodesemver import satisfies as semver_satisfies
from nodesemver import valid_range

from shelf.core.errors import DescriptorInvalid, IncompatibleVersion
from shelf.core.result import Err, Ok, Result

from .descriptor import DESCRIPTOR_FILE
from .model import Release

__all__ = ["satisfies", "check_compatibility"]


def satisfies(version: str, expression: str) -> bool:
    """True if ``version`` falls in the npm semver range ``expression``.

    Raises:
        ValueError: ``expression`` or ``version`` is malformed.
    """
    if valid_range(expression, loose=False) is None:
        raise ValueError(f"not a semver range: {expression}")
    return semver_satisfies(version, expression, loose=False)


def check_compatibility(
    release: Release,
    tool_version: str,
) -> Result[None, IncompatibleVersion | DescriptorInvalid]:
    """Fail if ``release`` declares a range excluding ``tool_version``."""
    required = release.descriptor.compatibility
    if required is None:
        return Ok(None)

    try:
        ok = satisfies(tool_version, required)
    except ValueError as e:
        return Err(
            DescriptorInvalid(
                path=release.path / DESCRIPTOR_FILE,
                reason=f'invalid compatibility range "{required}": {e}',
            )
        )

    if not ok:
        return Err(IncompatibleVersion(tool_version=tool_version, required=required))
    return Ok(None)
