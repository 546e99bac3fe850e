import json

from spiral_models import SpiralConfig
from spiral_config import config_from_dict, get_defaults, load_config, save_config
from spiral_validation import validate_config


def test_defaults_match_config_defaults():
    defaults = get_defaults()
    assert defaults["paper_width_mm"] == 1000.0
    assert defaults["turns"] == 7.0
    assert defaults["dpi"] == 300
    assert config_from_dict(defaults) == SpiralConfig()


def test_save_and_load_round_trip(tmp_path):
    path = tmp_path / "spiral.json"
    config = SpiralConfig(turns=4.5, line_width_mm=1.2, show_grid=True, dpi=600)
    save_config(config, str(path))
    assert load_config(str(path)) == config


def test_missing_file_gives_defaults(tmp_path):
    assert load_config(str(tmp_path / "nope.json")) == SpiralConfig()


def test_corrupt_file_gives_defaults(tmp_path, capsys):
    path = tmp_path / "spiral.json"
    path.write_text("{not json")
    assert load_config(str(path)) == SpiralConfig()
    assert "using defaults" in capsys.readouterr().out


def test_non_object_json_gives_defaults(tmp_path):
    path = tmp_path / "spiral.json"
    path.write_text(json.dumps([1, 2, 3]))
    assert load_config(str(path)) == SpiralConfig()


def test_unsupported_dpi_is_reset():
    assert config_from_dict({"dpi": 72}).dpi == 300
    assert config_from_dict({"dpi": "600"}).dpi == 300
    assert config_from_dict({"dpi": 150}).dpi == 150


def test_unknown_keys_are_ignored():
    config = config_from_dict({"turns": 3, "isConfigCollapsed": True})
    assert config.turns == 3


def test_preset_copies_dimensions():
    config = config_from_dict({"paper_size": "A3_portrait"})
    assert (config.paper_width_mm, config.paper_height_mm) == (297, 420)


def test_non_string_paper_size_is_reset(tmp_path):
    path = tmp_path / "spiral.json"
    path.write_text(json.dumps({"paper_size": ["A4"], "turns": 4}))
    config = load_config(str(path))
    assert config.paper_size == "custom"
    assert config.turns == 4
    assert validate_config(config) == []
