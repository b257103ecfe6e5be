"""Tmux layout names and the layout directive plan for a pane count."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from panefan.errors import InvalidLayout


class LayoutName(str, Enum):
    TILED = "tiled"
    EVEN_HORIZONTAL = "even-horizontal"
    EVEN_VERTICAL = "even-vertical"
    MAIN_HORIZONTAL = "main-horizontal"
    MAIN_VERTICAL = "main-vertical"


LAYOUT_ALIASES: dict[str, LayoutName] = {
    "t": LayoutName.TILED,
    "eh": LayoutName.EVEN_HORIZONTAL,
    "ev": LayoutName.EVEN_VERTICAL,
    "mh": LayoutName.MAIN_HORIZONTAL,
    "mv": LayoutName.MAIN_VERTICAL,
}
DEFAULT_LAYOUT = LayoutName.TILED


@dataclass(frozen=True)
class LayoutPlan:
    pane_count: int
    directives: tuple[LayoutName, ...]

    @property
    def final(self) -> LayoutName:
        return self.directives[-1]


def normalize_layout(value: str) -> LayoutName:
    """Resolve a short alias or a full tmux layout name."""
    alias = LAYOUT_ALIASES.get(value)
    if alias is not None:
        return alias
    try:
        return LayoutName(value)
    except ValueError as exc:
        raise InvalidLayout(
            f"invalid layout '{value}'",
            hint="Use one of: " + ", ".join(item.value for item in LayoutName) + ".",
        ) from exc


def plan_layout(pane_count: int, override: LayoutName | None = None) -> LayoutPlan:
    if pane_count < 1:
        raise ValueError(f"Invalid pane count: {pane_count}")

    # even-horizontal has to come first; tiled is only stable once a third pane exists.
    directives = [LayoutName.EVEN_HORIZONTAL]
    if pane_count > 2:
        directives.append(LayoutName.TILED)

    if override is not None and override is not DEFAULT_LAYOUT:
        directives.append(override)
    return LayoutPlan(pane_count=pane_count, directives=tuple(directives))
