# tests/test_style.py
import pytest

from subedit.style import (
    CaptionPosition,
    CaptionSize,
    Style,
    resolve_render_attributes,
)
from subedit.exceptions import InvalidStyleError


def test_default_style():
    style = Style()
    assert style.to_dict() == {
        "font": "Arial",
        "size": "medium",
        "color": "#FFFFFF",
        "background_color": "#000000AA",
        "position": "bottom",
    }


@pytest.mark.parametrize("size, px", [("small", 16), ("medium", 24), ("large", 32)])
def test_font_size_constants(size, px):
    assert resolve_render_attributes(Style(size=size)).font_size_px == px


@pytest.mark.parametrize("font", ["Georgia", "Trebuchet MS"])
@pytest.mark.parametrize("position", ["top", "middle", "bottom"])
def test_large_is_always_32(font, position):
    style = Style(font=font, size="large", position=position, color="#123456", background_color="#65432100")
    assert resolve_render_attributes(style).font_size_px == 32


def test_string_values_become_enums():
    style = Style(size="small", position="top")
    assert style.size is CaptionSize.SMALL
    assert style.position is CaptionPosition.TOP


def test_background_split_and_alpha_survives_text_color_edit():
    style = Style(background_color="#000000AA")
    assert style.split_background_color() == ("#000000", "AA")
    edited = style.with_text_color("#FF0000")
    assert edited.color == "#FF0000"
    assert edited.split_background_color() == ("#000000", "AA")
    attributes = resolve_render_attributes(edited)
    assert attributes.background_color == "#000000AA"


def test_background_base_edit_keeps_alpha():
    style = Style(background_color="#00000080")
    assert style.with_background_color("#336699").background_color == "#33669980"


def test_background_alpha_edit_keeps_base():
    style = Style(background_color="#112233AA")
    assert style.with_background_alpha("40").background_color == "#11223340"


def test_colors_are_uppercased():
    style = Style(color="#abcdef", background_color="#000000aa")
    assert style.color == "#ABCDEF"
    assert style.split_background_color() == ("#000000", "AA")


@pytest.mark.parametrize("kwargs", [
    {"font": "Comic Sans MS"},
    {"size": "huge"},
    {"position": "left"},
    {"color": "#FFF"},
    {"color": "#FFFFFFAA"},
    {"background_color": "#000000"},
    {"background_color": "black"},
])
def test_invalid_style_values(kwargs):
    with pytest.raises(InvalidStyleError):
        Style(**kwargs)


def test_invalid_background_edits():
    with pytest.raises(InvalidStyleError):
        Style().with_background_color("#000000AA")
    with pytest.raises(InvalidStyleError):
        Style().with_background_alpha("A")


def test_anchor_rules():
    top = resolve_render_attributes(Style(position="top")).anchor_css
    middle = resolve_render_attributes(Style(position="middle")).anchor_css
    bottom = resolve_render_attributes(Style(position="bottom")).anchor_css
    assert top["top"] == "10%" and top["bottom"] == "auto"
    assert middle["top"] == "50%" and middle["transform"] == "translate(-50%, -50%)"
    assert bottom["bottom"] == "10%" and bottom["top"] == "auto"
    for anchor in (top, middle, bottom):
        assert anchor["left"] == "50%"


def test_to_css_combines_box_font_and_anchor():
    css = resolve_render_attributes(Style(font="Verdana", size="small")).to_css()
    assert css["font-family"] == "Verdana"
    assert css["font-size"] == "16px"
    assert css["background-color"] == "#000000AA"
    assert css["padding"] == "8px 16px"
    assert css["bottom"] == "10%"


def test_from_dict_partial_and_unknown_keys():
    assert Style.from_dict({"size": "large"}).size is CaptionSize.LARGE
    assert Style.from_dict(None) == Style()
    with pytest.raises(InvalidStyleError):
        Style.from_dict({"weight": "bold"})
