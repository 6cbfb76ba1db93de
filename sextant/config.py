"""
Sextant runtime settings.

Settings is a small immutable record consumed by every layer (registry,
compiler, dispatcher, parser, fault rendering). It replaces the build-time
switches of classic C option parsers with per-instance values.

Fields
- gnu: allow GNU extensions (optional arguments on short options, "x::").
- hard_exit: render configuration/internal faults and terminate the process
  with status 0xDEAD instead of raising them.
- shell: render user-input faults and exit with status 1 instead of raising them.
- short_max: maximum length of the compiled short-option string.
- long_max: maximum number of entries in the compiled long-option table.
- capacity: maximum number of descriptors a registry accepts.
- debug: log compiled tables and classified events to the stderr console.
- colorful / fancy: rich rendering style for faults and help.

Host hooks
- A host application may expose a __settings__ mapping in __main__; its values
  sit between the defaults and the explicit overrides given to settings().
"""
from typing import NamedTuple


HARD_EXIT_STATUS = 0xDEAD


class Settings(NamedTuple):
    gnu: bool = False
    hard_exit: bool = False
    shell: bool = False
    short_max: int = 256
    long_max: int = 128
    capacity: int = 128
    debug: bool = False
    colorful: bool = True
    fancy: bool = False


def settings(base=None, /, **overrides):
    """
    Build a Settings record.

    precedence (lowest to highest)
    - Settings defaults, or `base` when given
    - __main__.__settings__ (host application hook, ignored when `base` is given)
    - keyword overrides

    Raises
    - TypeError: on unknown setting names or a non-Settings base.
    """
    if base is None:
        merged = dict(getattr(__import__("__main__"), "__settings__", {}))
        base = Settings()
    elif isinstance(base, Settings):
        merged = {}
    else:
        raise TypeError("settings() argument must be a Settings instance")

    merged |= overrides

    if unknown := set(merged) - set(Settings._fields):
        raise TypeError("unknown setting(s): %s" % ", ".join(sorted(unknown)))

    for name in ("short_max", "long_max", "capacity"):
        if name in merged and (not isinstance(merged[name], int) or merged[name] < 1):
            raise ValueError(f"setting {name!r} must be a positive integer")

    return base._replace(**merged)


__all__ = (
    "Settings",
    "settings",
    "HARD_EXIT_STATUS",
)
