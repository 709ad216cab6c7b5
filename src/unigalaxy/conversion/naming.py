"""Component identifier formatting."""

from __future__ import annotations

import re

NAMESPACE = "Galaxy"

_DISALLOWED = re.compile(r"[^a-zA-Z0-9-]")
_UPPER = re.compile(r"([A-Z])")


def _segments(name: str) -> list[str]:
    # Disallowed characters separate segments: "cool_button" → ["cool", "button"]
    return [part for part in _DISALLOWED.sub("-", name).split("-") if part]


def kebab_name(name: str) -> str:
    """``"Cool_Button 2"`` → ``"cool-button-2"``."""
    return "-".join(_segments(name)).lower()


def pascal_name(name: str) -> str:
    """``"cool_button"`` → ``"GalaxyCoolButton"``."""
    return NAMESPACE + "".join(part[:1].upper() + part[1:].lower() for part in _segments(name))


def format_component_name(name: str, pascal: bool = False) -> str:
    return pascal_name(name) if pascal else kebab_name(name)


def pascal_to_kebab(name: str) -> str:
    """``"GalaxyCoolButton"`` → ``"galaxy-cool-button"``."""
    return _UPPER.sub(r"-\1", name).lower().removeprefix("-")
