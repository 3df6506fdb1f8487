from pathlib import Path

import pytest
from pydantic import ValidationError

from idcard.config import CardState, CardStyle, Config, load_config, parse_color


def test_parse_color():
    assert parse_color("#2563eb") == (37, 99, 235)
    assert parse_color("#fff") == (255, 255, 255)
    assert parse_color("white") == (255, 255, 255)
    with pytest.raises(ValueError):
        parse_color("nope")


def test_card_state_validates_on_assignment():
    state = CardState()
    state.header_color = "#123456"
    with pytest.raises(ValidationError):
        state.card_background = "transparent-ish"
    with pytest.raises(ValidationError):
        state.preview_scale = 0.4


@pytest.mark.parametrize("scale", [0.5, 0.75, 1.2])
def test_preview_scale_bounds_inclusive(scale):
    assert CardState(preview_scale=scale).preview_scale == scale


def test_style_rejects_bad_colors():
    with pytest.raises(ValidationError):
        CardStyle(footer_color="#zzzzzz")


def test_load_config_from_toml(tmp_path):
    path = tmp_path / "card.toml"
    path.write_text(
        '[card]\nname = "Ada Lovelace"\nheader_color = "#111111"\n\n'
        '[style]\nfooter = "Printed at the venue"\ngoogle_font = "Inter"\n'
    )
    config = load_config(path)
    assert config.card.name == "Ada Lovelace"
    assert config.card.header_color == "#111111"
    assert config.card.card_background == "#ffffff"
    assert config.style.footer == "Printed at the venue"
    assert config.style.google_font == "Inter"


def test_load_config_missing_explicit_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_config(tmp_path / "missing.toml")


def test_load_config_defaults_without_file(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    assert load_config() == Config()


def test_load_config_reads_cwd_file(tmp_path, monkeypatch):
    (tmp_path / "idcard.toml").write_text('[card]\nevent_title = "PyCon"\n')
    monkeypatch.chdir(tmp_path)
    assert load_config().card.event_title == "PyCon"


@pytest.mark.parametrize(
    "content",
    ["[card\nname = 1", '[card]\nheader_color = "not a color"\n', "[card]\npreview_scale = 9\n"],
)
def test_load_config_invalid(tmp_path, content):
    path = tmp_path / "bad.toml"
    path.write_text(content)
    with pytest.raises(ValueError):
        load_config(path)


def test_font_paths_parse_as_paths(tmp_path):
    style = CardStyle(font_path=str(tmp_path / "Inter.ttf"))
    assert isinstance(style.font_path, Path)
