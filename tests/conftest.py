import pytest
import yaml

from tierdeck.domain.cards.models import Flashcard


@pytest.fixture(autouse=True)
def mock_home(tmp_path, monkeypatch):
    """Points HOME at a temp dir so user config never leaks into tests."""
    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.setenv("HOME", str(home))
    for var in ("TIERDECK_DECK_PATH", "TIERDECK_DAY", "TIERDECK_VERBOSE"):
        monkeypatch.delenv(var, raising=False)
    return home


@pytest.fixture
def hola():
    return Flashcard(front="hola", back="hello", hint="A greeting")


@pytest.fixture
def adios():
    return Flashcard(front="adios", back="goodbye")


@pytest.fixture
def gracias():
    return Flashcard(front="gracias", back="thank you", hint="Said after receiving something")


@pytest.fixture
def deck_data():
    return {
        "version": 1,
        "day": 4,
        "cards": [
            {"front": "hola", "back": "hello", "hint": "A greeting"},
            {"front": "adios", "back": "goodbye"},
            {"front": "gracias", "back": "thank you", "tags": ["manners"]},
        ],
        "buckets": {0: ["hola"], 1: ["adios"], 3: ["gracias"]},
        "history": [
            {"front": "adios", "back": "goodbye", "difficulty": "easy", "day": 0},
            {"front": "gracias", "back": "thank you", "difficulty": "hard", "day": 0},
            {"front": "hola", "back": "hello", "difficulty": "wrong", "day": 1},
        ],
    }


@pytest.fixture
def deck_file(tmp_path, deck_data):
    path = tmp_path / "deck.yaml"
    path.write_text(yaml.safe_dump(deck_data, sort_keys=False), encoding="utf-8")
    return path
