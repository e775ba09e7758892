import json

from snake_engine.storage import LEADERBOARD_SIZE, ScoreStore, clean_name


def test_missing_file_reads_as_zero(tmp_path):
    store = ScoreStore(tmp_path / "nope" / "scores.json")
    assert store.load_high_score() == 0
    assert store.load_leaderboard() == []


def test_high_score_round_trip(tmp_path):
    path = tmp_path / "scores.json"
    store = ScoreStore(path)
    assert store.save_high_score(42)
    store.save_high_score(store.load_high_score())
    assert ScoreStore(path).load_high_score() == 42


def test_corrupt_data_reads_as_zero(tmp_path):
    path = tmp_path / "scores.json"
    path.write_text("{not json", encoding="utf-8")
    assert ScoreStore(path).load_high_score() == 0

    path.write_text(json.dumps({"high_score": "lots"}), encoding="utf-8")
    assert ScoreStore(path).load_high_score() == 0

    path.write_text(json.dumps({"high_score": -4}), encoding="utf-8")
    assert ScoreStore(path).load_high_score() == 0

    path.write_text(json.dumps([1, 2, 3]), encoding="utf-8")
    assert ScoreStore(path).load_high_score() == 0


def test_numeric_string_is_accepted(tmp_path):
    path = tmp_path / "scores.json"
    path.write_text(json.dumps({"high_score": "17"}), encoding="utf-8")
    assert ScoreStore(path).load_high_score() == 17


def test_failed_write_is_swallowed(tmp_path):
    blocker = tmp_path / "blocker"
    blocker.write_text("", encoding="utf-8")
    store = ScoreStore(blocker / "scores.json")
    assert store.save_high_score(10) is False
    assert store.load_high_score() == 0


def test_high_score_and_leaderboard_share_the_file(tmp_path):
    store = ScoreStore(tmp_path / "scores.json")
    store.save_high_score(9)
    store.add_to_leaderboard("ana", 9)
    assert store.load_high_score() == 9
    assert store.load_leaderboard() == [{"name": "ana", "score": 9}]


def test_leaderboard_keeps_top_five(tmp_path):
    store = ScoreStore(tmp_path / "scores.json")
    for i, score in enumerate([5, 50, 20, 1, 35, 10, 40]):
        board = store.add_to_leaderboard(f"p{i}", score)
    assert len(board) == LEADERBOARD_SIZE
    assert [e["score"] for e in store.load_leaderboard()] == [50, 40, 35, 20, 10]


def test_leaderboard_skips_bad_entries(tmp_path):
    path = tmp_path / "scores.json"
    path.write_text(
        json.dumps(
            {
                "leaderboard": [
                    {"name": "  bo  ", "score": 3},
                    {"name": "x", "score": "high"},
                    "garbage",
                    {"score": 8},
                ]
            }
        ),
        encoding="utf-8",
    )
    assert ScoreStore(path).load_leaderboard() == [
        {"name": "Anonymous", "score": 8},
        {"name": "bo", "score": 3},
    ]


def test_clear_leaderboard(tmp_path):
    store = ScoreStore(tmp_path / "scores.json")
    store.save_high_score(12)
    store.add_to_leaderboard("cy", 12)
    store.clear_leaderboard()
    assert store.load_leaderboard() == []
    assert store.load_high_score() == 12


def test_clean_name():
    assert clean_name("  dee ") == "dee"
    assert clean_name("   ") == "Anonymous"
    assert clean_name(None) == "Anonymous"


def test_non_finite_numbers_read_as_absent(tmp_path):
    path = tmp_path / "scores.json"
    path.write_text(
        '{"high_score": Infinity, "leaderboard": ['
        '{"name": "inf", "score": Infinity}, {"name": "nan", "score": NaN}, '
        '{"name": "ok", "score": 4}]}',
        encoding="utf-8",
    )
    store = ScoreStore(path)
    assert store.load_high_score() == 0
    assert store.load_leaderboard() == [{"name": "ok", "score": 4}]
    board = store.add_to_leaderboard("new", 6)
    assert [e["name"] for e in board] == ["new", "ok"]
