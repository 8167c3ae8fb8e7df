"""Game configuration: title tiers, default questions, bonus NPCs, SMS texts."""

import copy
import json
from pathlib import Path
from typing import Any

from .core import data_dir

_CONFIG_DEFAULTS: dict[str, Any] = {
    "good_answer_threshold": 65,
    "base_title": "Humble Shopkeeper",
    "title_tiers": [
        {"min_good_answers": 10, "title": "Village Sage"},
        {"min_good_answers": 25, "title": "Royal Counselor"},
    ],
    "default_questions": {
        "gatherer": "How fixeth a frozen crystal ball?",
        "graveDigger": "What dark arts revive a dead battery?",
        "hunter": "How doth one track the elusive wireless signal?",
        "king": "Wherefore doth mine royal email refuse to send?",
        "knight": "How might one vanquish the dreaded blue screen of death?",
        "knightHorse": "What sorcery makes mine steed's GPS falter?",
        "lumberjack": "How sharpeneth one the edges of pixelated images?",
        "merchant": "Wherefore do mine online transactions fail?",
        "miner": "What pickaxe best mines cryptocurrency?",
        "nun": "How doth one purify a virus-infected device?",
        "wanderer": "Which path leads through the maze of pop-up windows?",
    },
    "generic_question": "What counsel hast thou for a weary traveller's glowing slate?",
    "browser_bonus": {
        "firefox": {
            "actor_type": "foxMage",
            "question": "Why doth mine fiery fox devour all the memory of mine machine?",
        },
        "safari": {
            "actor_type": "explorer",
            "question": "Wherefore will mine compass-browser not open this enchanted page?",
        },
        "edge": {
            "actor_type": "herald",
            "question": "How shall I banish the herald that beggeth me to change mine browser?",
        },
    },
    "visit_tiers": [
        {
            "min_visits": 3,
            "actor_type": "bard",
            "questions": [
                "How might a bard stream his ballads without the dreaded buffering?",
                "Wherefore doth mine lute-app demand a subscription most dear?",
            ],
        },
        {
            "min_visits": 7,
            "actor_type": "alchemist",
            "questions": [
                "What elixir restoreth a phone dropped in the well?",
                "How doth one transmute a spreadsheet into a chart of gold?",
            ],
        },
    ],
    "tips": [
        "Speak as the Bard would: thee, thou, and a dash of flourish.",
        "Name the true remedy: restart, update, or check the cable.",
        "Brevity is the soul of wit; two sentences oft suffice.",
    ],
    "help_text": "Send WISDOM for counsel on thy answers, or SCROLL to read thy progress.",
}

_REPLACED = ("good_answer_threshold", "base_title", "title_tiers", "generic_question",
             "visit_tiers", "tips", "help_text")
_MERGED = ("default_questions", "browser_bonus")


def _config_path() -> Path:
    return data_dir() / "config.json"


def _apply(config: dict[str, Any], fields: dict[str, Any]) -> None:
    for key in _REPLACED:
        if key in fields:
            config[key] = fields[key]
    for key in _MERGED:
        if key in fields and isinstance(fields[key], dict):
            config[key].update(fields[key])


def get_config() -> dict[str, Any]:
    """Read config, returning defaults merged with stored values."""
    config = copy.deepcopy(_CONFIG_DEFAULTS)
    path = _config_path()
    if path.is_file():
        _apply(config, json.loads(path.read_text()))
    return config


def update_config(fields: dict[str, Any]) -> dict[str, Any]:
    """Merge fields into config and persist. Returns full config."""
    config = get_config()
    _apply(config, fields)
    _config_path().write_text(json.dumps(config, indent=2))
    return config
