"""Title projection: game, category, attempt count and icon changes.

Icon data is only transmitted when it changed. Every state carries an
``icon_version`` id derived from the icon contents; callers pass back the
last version they saw and receive the icon again only when it differs.
"""

import base64
import hashlib

from pydantic import BaseModel, Field

from ..models import Run

NO_ICON_VERSION = ""


def icon_version(data: bytes | None) -> str:
    """Version id for icon data ("" when there is no icon)."""
    if not data:
        return NO_ICON_VERSION
    return hashlib.sha256(data).hexdigest()[:16]


class TitleState(BaseModel):
    """Renderable title information.

    Attributes:
        icon_change: None if the icon is unchanged since the caller's last
            seen version; otherwise the new icon as base64 ("" if removed).
        icon_version: Version id of the current icon.
        game: Game name.
        category: Category name including variable annotations.
        attempts: Number of committed attempts.
    """

    icon_change: str | None = Field(default=None, description="New icon data if changed")
    icon_version: str = Field(default=NO_ICON_VERSION, description="Current icon version id")
    game: str = Field(description="Game name")
    category: str = Field(description="Extended category name")
    attempts: int = Field(description="Attempt count")


def title_state(
    run: Run,
    last_icon_version: str = NO_ICON_VERSION,
    *,
    show_region: bool = False,
    show_platform: bool = False,
) -> TitleState:
    """Project a run into a TitleState.

    Args:
        run: Run to read
        last_icon_version: Icon version id the caller saw last
        show_region: Include the region in the category annotation
        show_platform: Include the platform in the category annotation
    """
    version = icon_version(run.game_icon)
    icon_change = None
    if version != last_icon_version:
        icon_change = base64.b64encode(run.game_icon).decode("ascii") if run.game_icon else ""

    return TitleState(
        icon_change=icon_change,
        icon_version=version,
        game=run.game_name,
        category=run.extended_category_name(show_region, show_platform, True),
        attempts=run.attempt_count,
    )


class TitleComponent:
    """Stateful convenience wrapper remembering the last icon version sent."""

    def __init__(self) -> None:
        self._icon_version = NO_ICON_VERSION

    def state(self, run: Run) -> TitleState:
        state = title_state(run, self._icon_version)
        self._icon_version = state.icon_version
        return state

    def remount(self) -> None:
        """Forget the last sent icon so the next state includes it again."""
        self._icon_version = NO_ICON_VERSION
