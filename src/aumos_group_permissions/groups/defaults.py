"""Built-in group definitions written on first start.

The bundled set gives every unassigned principal an empty ``user`` group,
an ``owner`` group holding the universal wildcard, and a small
``admin`` -> ``moderator`` chain.  Parents are declared after the groups
that inherit from them so the default single-pass flattening resolves the
whole chain.
"""
from __future__ import annotations

from pathlib import Path

DEFAULT_PERMISSIONS_YAML = """\
# Group permissions
# -----------------
# Each top-level key is a group name.  Groups listed under ``inheritance``
# should be declared further down the file than the groups inheriting them.
#
# Permission strings are dot separated, e.g. ``round.restart``.  A trailing
# ``.*`` grants every permission below that prefix; ``.*`` alone grants all.

user:
  is_default: true
  inheritance: []
  permissions: []

owner:
  is_default: false
  inheritance: []
  permissions:
  - .*

admin:
  is_default: false
  inheritance:
  - moderator
  permissions:
  - round.*
  - server.restart

moderator:
  is_default: false
  inheritance: []
  permissions:
  - player.kick
  - player.mute
  - chat.*
"""


def write_defaults(output_path: Path) -> Path:
    """Write the built-in definitions to ``output_path``.

    Parameters
    ----------
    output_path:
        Destination file.  Its parent directory must exist.

    Returns
    -------
    Path
        The path written.
    """
    output_path.write_text(DEFAULT_PERMISSIONS_YAML, encoding="utf-8")
    return output_path
