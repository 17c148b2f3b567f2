"""Display themes, selected by id and cycled in a fixed order."""

from enum import Enum

from pydantic import BaseModel, ConfigDict

from dirot.session import THEME_ID, LocalSessionState


class ThemeId(str, Enum):
    CATS = "cats"
    MODERN = "modern"
    CAPYBARA = "capybara"
    DOGS = "dogs"
    SPACE = "space"


class ThemeConfig(BaseModel):
    """Presentation settings for one theme."""

    model_config = ConfigDict(frozen=True)

    id: ThemeId
    name: str
    emojis: tuple[str, ...]
    style: str


THEMES: dict[ThemeId, ThemeConfig] = {
    ThemeId.CATS: ThemeConfig(
        id=ThemeId.CATS,
        name="חתולים",
        emojis=("🐱", "😸", "🐈", "😻", "🐾", "🙀", "😺"),
        style="bold yellow",
    ),
    ThemeId.MODERN: ThemeConfig(
        id=ThemeId.MODERN,
        name="בתים מודרניים",
        emojis=("🏠", "🏡", "🏢", "🏬", "🏘️", "🏙️"),
        style="bold blue",
    ),
    ThemeId.CAPYBARA: ThemeConfig(
        id=ThemeId.CAPYBARA,
        name="קפיברה",
        emojis=("🦫", "🦦", "🥔", "🌿"),
        style="bold dark_orange3",
    ),
    ThemeId.DOGS: ThemeConfig(
        id=ThemeId.DOGS,
        name="כלבים",
        emojis=("🐶", "🐕", "🦴", "🐾", "🐩", "🦮"),
        style="bold orange1",
    ),
    ThemeId.SPACE: ThemeConfig(
        id=ThemeId.SPACE,
        name="חלל/כוכבים",
        emojis=("🌟", "🌌", "🚀", "🛸", "🪐"),
        style="bold medium_purple1",
    ),
}

DEFAULT_THEME = ThemeId.CATS


def get_theme(theme_id: ThemeId | str | None) -> ThemeConfig:
    """Look up a theme, falling back to the default for unknown ids."""
    try:
        return THEMES[ThemeId(theme_id)] if theme_id else THEMES[DEFAULT_THEME]
    except ValueError:
        return THEMES[DEFAULT_THEME]


def next_theme(theme_id: ThemeId | str | None) -> ThemeConfig:
    """The theme after `theme_id`, wrapping around."""
    order = list(THEMES)
    current = get_theme(theme_id).id
    return THEMES[order[(order.index(current) + 1) % len(order)]]


def current_theme(state: LocalSessionState) -> ThemeConfig:
    """Theme stored in the session."""
    return get_theme(state.get(THEME_ID))


def set_theme(state: LocalSessionState, theme_id: ThemeId | str) -> ThemeConfig:
    """Store a theme choice."""
    theme = THEMES[ThemeId(theme_id)]
    state.set(THEME_ID, theme.id.value)
    return theme


def cycle_theme(state: LocalSessionState) -> ThemeConfig:
    """Advance the stored theme to the next one."""
    return set_theme(state, next_theme(state.get(THEME_ID)).id)


__all__ = [
    "DEFAULT_THEME",
    "THEMES",
    "ThemeConfig",
    "ThemeId",
    "current_theme",
    "cycle_theme",
    "get_theme",
    "next_theme",
    "set_theme",
]
