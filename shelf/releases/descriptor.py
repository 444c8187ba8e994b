"""Descriptor reader.

A release describes itself in ``package.json``:

    {
      "name": "my-app",
      "version": "1.4.0",
      "shelf": {
        "compatibility": "^1.0.0",
        "hooks": {"preuse": "./scripts/stop.sh", "postuse": "./scripts/start.sh"}
      }
    }

``name`` and ``version`` form the dependency identity. The ``shelf`` section
is optional, as is the file itself.
"""

from __future__ import annotations

import json
from pathlib import Path

from shelf.core.errors import DescriptorInvalid
from shelf.core.options import HOOK_NAMES, HookName
from shelf.core.result import Err, Ok, Result
from shelf.core.structured import StrDict, as_str_dict, get_str, get_table

from .model import DependencyIdentity, Descriptor

__all__ = ["DESCRIPTOR_FILE", "SECTION", "read_descriptor"]

DESCRIPTOR_FILE = "package.json"
SECTION = "shelf"


def _hooks(section: StrDict) -> dict[HookName, str]:
    table = get_table(section, "hooks") or {}
    hooks: dict[HookName, str] = {}
    for name in HOOK_NAMES:
        script = get_str(table, name)
        if script:
            hooks[name] = script  # type: ignore[index]
    return hooks


def read_descriptor(release_dir: Path) -> Result[Descriptor, DescriptorInvalid]:
    """Load the descriptor of the release at ``release_dir``.

    Returns:
        Ok(Descriptor), empty when ``package.json`` is absent, or
        Err(DescriptorInvalid) for unreadable or malformed JSON
    """
    path = release_dir / DESCRIPTOR_FILE
    if not path.is_file():
        return Ok(Descriptor())

    try:
        data_obj: object = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        return Err(DescriptorInvalid(path=path, reason=f"invalid JSON: {e}"))
    except (OSError, UnicodeDecodeError) as e:
        return Err(DescriptorInvalid(path=path, reason=str(e)))

    data = as_str_dict(data_obj)
    if data is None:
        return Err(DescriptorInvalid(path=path, reason="root must be a JSON object"))

    name = get_str(data, "name")
    version = get_str(data, "version")
    identity = DependencyIdentity(name, version) if name and version else None

    section = get_table(data, SECTION) or {}
    return Ok(
        Descriptor(
            hooks=_hooks(section),
            compatibility=get_str(section, "compatibility"),
            identity=identity,
        )
    )
