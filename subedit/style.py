"""Caption presentation style and its resolution into render attributes."""

import re
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Dict, Tuple

from .exceptions import InvalidStyleError

FONT_OPTIONS = ("Arial", "Helvetica", "Georgia", "Verdana", "Tahoma", "Trebuchet MS")

COLOR_PATTERN = re.compile(r"^#[0-9A-Fa-f]{6}$")
ALPHA_PATTERN = re.compile(r"^[0-9A-Fa-f]{2}$")
COLOR_WITH_ALPHA_PATTERN = re.compile(r"^#[0-9A-Fa-f]{8}$")


class CaptionSize(str, Enum):
    SMALL = "small"
    MEDIUM = "medium"
    LARGE = "large"


class CaptionPosition(str, Enum):
    TOP = "top"
    MIDDLE = "middle"
    BOTTOM = "bottom"


FONT_SIZE_PX = {
    CaptionSize.SMALL: 16,
    CaptionSize.MEDIUM: 24,
    CaptionSize.LARGE: 32,
}

# Horizontal anchor is always centred; vertical anchor depends on position.
ANCHOR_CSS = {
    CaptionPosition.TOP: {"left": "50%", "top": "10%", "bottom": "auto", "transform": "translateX(-50%)"},
    CaptionPosition.MIDDLE: {"left": "50%", "top": "50%", "transform": "translate(-50%, -50%)"},
    CaptionPosition.BOTTOM: {"left": "50%", "bottom": "10%", "top": "auto", "transform": "translateX(-50%)"},
}

BOX_CSS = {
    "position": "absolute",
    "padding": "8px 16px",
    "border-radius": "4px",
    "max-width": "80%",
    "text-align": "center",
}


def _enum_value(enum_cls, value, label):
    try:
        return enum_cls(value)
    except ValueError:
        choices = ", ".join(member.value for member in enum_cls)
        raise InvalidStyleError(f"Unsupported caption {label} {value!r}. Choose one of: {choices}") from None


@dataclass(frozen=True)
class Style:
    """One presentation style shared by every caption of a video."""
    font: str = "Arial"
    size: CaptionSize = CaptionSize.MEDIUM
    color: str = "#FFFFFF"
    background_color: str = "#000000AA"
    position: CaptionPosition = CaptionPosition.BOTTOM

    def __post_init__(self):
        if self.font not in FONT_OPTIONS:
            raise InvalidStyleError(f"Unsupported font {self.font!r}. Choose one of: {', '.join(FONT_OPTIONS)}")
        object.__setattr__(self, "size", _enum_value(CaptionSize, self.size, "size"))
        object.__setattr__(self, "position", _enum_value(CaptionPosition, self.position, "position"))
        if not isinstance(self.color, str) or not COLOR_PATTERN.match(self.color):
            raise InvalidStyleError(f"Text color must be #RRGGBB, got {self.color!r}")
        if not isinstance(self.background_color, str) or not COLOR_WITH_ALPHA_PATTERN.match(self.background_color):
            raise InvalidStyleError(f"Background color must be #RRGGBBAA, got {self.background_color!r}")
        object.__setattr__(self, "color", self.color.upper())
        object.__setattr__(self, "background_color", self.background_color.upper())

    @classmethod
    def from_dict(cls, data: dict) -> "Style":
        """Builds a Style from a config mapping; missing keys take the defaults."""
        if not data:
            return cls()
        known = {"font", "size", "color", "background_color", "position"}
        unknown = set(data) - known
        if unknown:
            raise InvalidStyleError(f"Unknown style setting(s): {', '.join(sorted(unknown))}")
        return cls(**data)

    def to_dict(self) -> dict:
        return {
            "font": self.font,
            "size": self.size.value,
            "color": self.color,
            "background_color": self.background_color,
            "position": self.position.value,
        }

    def split_background_color(self) -> Tuple[str, str]:
        """Splits the background into its #RRGGBB base and two-digit alpha suffix."""
        return self.background_color[:7], self.background_color[7:]

    def with_text_color(self, color: str) -> "Style":
        return replace(self, color=color)

    def with_background_color(self, base: str) -> "Style":
        """Replaces the background base color, keeping the current alpha suffix."""
        if not isinstance(base, str) or not COLOR_PATTERN.match(base):
            raise InvalidStyleError(f"Background base color must be #RRGGBB, got {base!r}")
        _, alpha = self.split_background_color()
        return replace(self, background_color=f"{base}{alpha}")

    def with_background_alpha(self, alpha: str) -> "Style":
        if not isinstance(alpha, str) or not ALPHA_PATTERN.match(alpha):
            raise InvalidStyleError(f"Background alpha must be two hex digits, got {alpha!r}")
        base, _ = self.split_background_color()
        return replace(self, background_color=f"{base}{alpha}")


@dataclass(frozen=True)
class RenderAttributes:
    """Everything a renderer needs to draw the active caption."""
    font_family: str
    font_size_px: int
    color: str
    background_color: str
    anchor_css: Dict[str, str] = field(default_factory=dict)

    def to_css(self) -> Dict[str, str]:
        """Flattens the attributes into CSS properties for an overlay element."""
        css = dict(BOX_CSS)
        css.update({
            "font-family": self.font_family,
            "font-size": f"{self.font_size_px}px",
            "color": self.color,
            "background-color": self.background_color,
        })
        css.update(self.anchor_css)
        return css


def resolve_render_attributes(style: Style) -> RenderAttributes:
    return RenderAttributes(
        font_family=style.font,
        font_size_px=FONT_SIZE_PX[style.size],
        color=style.color,
        background_color=style.background_color,
        anchor_css=dict(ANCHOR_CSS[style.position]),
    )
