"""Tests for best-score persistence."""

import json

import pytest

from glider_rush.persistence import (
    BEST_SCORE_KEY,
    BestScoreStore,
    JsonBestScoreStore,
    MemoryBestScoreStore,
    open_store,
)
from glider_rush.session import GameSession


class TestMemoryStore:
    def test_initial(self):
        assert MemoryBestScoreStore().load() == 0
        assert MemoryBestScoreStore(initial=7).load() == 7

    def test_records_saves(self):
        store = MemoryBestScoreStore()
        store.save(3)
        store.save(9)
        assert store.load() == 9
        assert store.saves == [3, 9]


class TestJsonStore:
    def test_missing_file_is_zero(self, tmp_path):
        store = JsonBestScoreStore(str(tmp_path / "best.json"))
        assert store.load() == 0

    def test_save_then_load(self, tmp_path):
        path = tmp_path / "nested" / "best.json"
        store = JsonBestScoreStore(str(path))
        store.save(42)
        assert path.exists()
        assert JsonBestScoreStore(str(path)).load() == 42

    def test_file_layout(self, tmp_path):
        path = tmp_path / "best.json"
        JsonBestScoreStore(str(path)).save(5)
        with open(path) as f:
            assert json.load(f) == {BEST_SCORE_KEY: 5}

    def test_save_keeps_other_keys(self, tmp_path):
        path = tmp_path / "best.json"
        path.write_text(json.dumps({"volume": 3}))
        JsonBestScoreStore(str(path)).save(11)
        with open(path) as f:
            assert json.load(f) == {"volume": 3, BEST_SCORE_KEY: 11}

    def test_string_value_accepted(self, tmp_path):
        path = tmp_path / "best.json"
        path.write_text(json.dumps({BEST_SCORE_KEY: "17"}))
        assert JsonBestScoreStore(str(path)).load() == 17

    @pytest.mark.parametrize("content", [
        "not json at all",
        json.dumps({BEST_SCORE_KEY: "abc"}),
        json.dumps({BEST_SCORE_KEY: -4}),
        json.dumps({BEST_SCORE_KEY: 2.5}),
        json.dumps({BEST_SCORE_KEY: None}),
        json.dumps([1, 2, 3]),
        '{"advanced-flappy-best": Infinity}',
        '{"advanced-flappy-best": -Infinity}',
        '{"advanced-flappy-best": NaN}',
        pytest.param("[" * 100000 + "]" * 100000, id="deeply-nested"),
    ])
    def test_corrupt_degrades_to_zero(self, tmp_path, content):
        path = tmp_path / "best.json"
        path.write_text(content)
        assert JsonBestScoreStore(str(path)).load() == 0

    def test_session_starts_with_infinite_best(self, tmp_path):
        path = tmp_path / "best.json"
        path.write_text('{"advanced-flappy-best": Infinity}')
        session = GameSession(store=JsonBestScoreStore(str(path)))
        assert session.best_score == 0

    def test_deeply_nested_file_overwritten_on_save(self, tmp_path):
        path = tmp_path / "best.json"
        path.write_text("[" * 100000 + "]" * 100000)
        store = JsonBestScoreStore(str(path))
        store.save(4)
        assert store.load() == 4

    def test_corrupt_file_overwritten_on_save(self, tmp_path):
        path = tmp_path / "best.json"
        path.write_text("{{{")
        store = JsonBestScoreStore(str(path))
        store.save(8)
        assert store.load() == 8


class TestOpenStore:
    def test_none_is_memory(self):
        assert isinstance(open_store(None), MemoryBestScoreStore)

    def test_path_is_json(self, tmp_path):
        assert isinstance(open_store(str(tmp_path / "b.json")), JsonBestScoreStore)

    def test_base_is_abstract(self):
        with pytest.raises(NotImplementedError):
            BestScoreStore().load()
