"""Static configuration: leveling curve, quest tables, deck limits, slot keys."""
import json
import os
from dataclasses import dataclass, field
from functools import lru_cache
from pathlib import Path

CONTENT_DIR = Path(__file__).parent / "content"
APP_DATA_FILE = CONTENT_DIR / "app_data.json"

DEFAULT_DB_PATH = os.environ.get(
    "SCHOLAR_CHRONICLE_DB",
    str(Path.home() / ".scholar_chronicle" / "store.db"),
)


@dataclass(frozen=True)
class LevelingSystem:
    base_xp: int
    multiplier: float
    max_level: int


@dataclass(frozen=True)
class TimerPreset:
    name: str
    duration: int  # minutes


@dataclass(frozen=True)
class ExamInfo:
    subject: str
    date: str
    time: str
    paper: str
    code: str


@dataclass(frozen=True)
class AppConfig:
    name: str
    default_stats: dict
    leveling: LevelingSystem
    quest_types: tuple
    quest_difficulties: tuple
    default_xp_rewards: dict
    max_cards_per_deck: int
    review_intervals: tuple
    timer_presets: tuple
    short_break: int
    long_break: int
    subjects: dict = field(default_factory=dict)
    exams: tuple = ()
    storage_keys: dict = field(default_factory=dict)

    def slot(self, name: str) -> str:
        """Return the store key for a named slot, e.g. ``slot("quests")``."""
        return self.storage_keys[name]

    def subject_name(self, subject_id: str) -> str:
        subject = self.subjects.get(subject_id)
        if subject:
            return subject["name"]
        return subject_id[:1].upper() + subject_id[1:]

    def topics_for(self, subject_id: str) -> list[str]:
        """All topics of a subject, flattened across its units."""
        subject = self.subjects.get(subject_id)
        if not subject:
            return []
        return [t for unit in subject["units"].values() for t in unit["topics"]]


def parse_config(data: dict) -> AppConfig:
    character = data["character"]
    curve = character["levelingSystem"]
    quests = data["quests"]
    tools = data["studyTools"]
    exams = tuple(
        ExamInfo(subject=subject, **exam)
        for subject, entries in data.get("examSchedule", {}).items()
        for exam in entries
    )
    return AppConfig(
        name=data.get("app", {}).get("name", "Scholar's Chronicle"),
        default_stats=dict(character["defaultStats"]),
        leveling=LevelingSystem(
            base_xp=int(curve["baseXP"]),
            multiplier=float(curve["multiplier"]),
            max_level=int(curve["maxLevel"]),
        ),
        quest_types=tuple(quests["types"]),
        quest_difficulties=tuple(quests["difficulties"]),
        default_xp_rewards=dict(quests["defaultXPRewards"]),
        max_cards_per_deck=int(tools["flashcards"].get("maxCardsPerDeck", 100)),
        review_intervals=tuple(tools["flashcards"].get("reviewIntervals", [])),
        timer_presets=tuple(TimerPreset(**p) for p in tools["timer"]["presets"]),
        short_break=int(tools["timer"]["breakDurations"]["short"]),
        long_break=int(tools["timer"]["breakDurations"]["long"]),
        subjects=data.get("subjects", {}),
        exams=exams,
        storage_keys=dict(data["storage"]["localStorageKeys"]),
    )


def load_config(path: str | None = None) -> AppConfig:
    """Load configuration from a JSON file shaped like content/app_data.json."""
    source = Path(path) if path else APP_DATA_FILE
    return parse_config(json.loads(source.read_text()))


@lru_cache(maxsize=1)
def get_config() -> AppConfig:
    return load_config()
