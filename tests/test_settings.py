import json

from snake_engine.settings import (
    DIFFICULTIES,
    FOOD_TYPES,
    GameConfig,
    load_config,
    load_config_file,
    normalize_food_types,
)


def test_defaults():
    config = load_config()
    assert config == GameConfig()
    assert config.speed == DIFFICULTIES["medium"]["speed"]
    assert config.obstacle_count == DIFFICULTIES["medium"]["obstacles"]


def test_valid_overrides_apply():
    config = load_config({"movement": "continuous", "boundary": "wall", "difficulty": "hard"})
    assert config.movement == "continuous"
    assert config.boundary == "wall"
    assert config.speed == 16


def test_invalid_values_fall_back_to_defaults(caplog):
    config = load_config(
        {
            "difficulty": "nightmare",
            "boundary": "bouncy",
            "width": -3,
            "obstacle_probability": 2,
            "obstacles_enabled": "yes",
            "mystery": 1,
        }
    )
    assert config == GameConfig()
    assert "nightmare" in caplog.text
    assert "mystery" in caplog.text


def test_non_mapping_config_uses_defaults():
    assert load_config(["width", 5]) == GameConfig()


def test_min_length_is_clamped_to_start_length():
    config = load_config({"start_length": 2, "min_length": 4})
    assert config.min_length == 2


def test_disabled_obstacles_mean_zero_count():
    assert load_config({"obstacles_enabled": False}).obstacle_count == 0


def test_with_difficulty():
    config = GameConfig()
    assert config.with_difficulty("easy").speed == 6
    assert config.with_difficulty("impossible") is config


def test_food_table_normalization():
    assert normalize_food_types([]) == FOOD_TYPES
    assert normalize_food_types("apples") == FOOD_TYPES
    assert normalize_food_types([{"points": 0}]) == FOOD_TYPES

    table = normalize_food_types([{"points": 2, "weight": -1, "color": [1, 2, 3]}])
    assert table == ({"name": "food", "color": (1, 2, 3), "points": 2, "weight": 1},)


def test_food_table_from_overrides():
    config = load_config({"food_types": [{"name": "plum", "points": 7, "weight": 2}]})
    assert config.food_types[0]["name"] == "plum"
    assert config.food_types[0]["points"] == 7


def test_config_file(tmp_path):
    path = tmp_path / "snake.json"
    path.write_text(json.dumps({"width": 12, "countdown_seconds": 0}), encoding="utf-8")
    config = load_config_file(path)
    assert config.width == 12
    assert config.countdown_seconds == 0


def test_unreadable_config_file_uses_defaults(tmp_path):
    assert load_config_file(tmp_path / "missing.json") == GameConfig()
    bad = tmp_path / "bad.json"
    bad.write_text("{{", encoding="utf-8")
    assert load_config_file(bad) == GameConfig()
