"""Read-only projections of timer and run state for front-ends."""

from .title import NO_ICON_VERSION, TitleComponent, TitleState, icon_version, title_state

__all__ = ["NO_ICON_VERSION", "TitleComponent", "TitleState", "icon_version", "title_state"]
