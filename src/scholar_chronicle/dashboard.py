"""Dashboard statistics, exam countdowns and the study checklists."""
from datetime import date

from scholar_chronicle.config import AppConfig, ExamInfo, get_config
from scholar_chronicle.db import read_slot, write_slot
from scholar_chronicle.models import Character, FlashcardDeck, Quest, TimerSession


def days_until(date_str: str, today: date | None = None) -> int:
    today = today or date.today()
    return (date.fromisoformat(date_str[:10]) - today).days


def get_upcoming_exams(config: AppConfig | None = None, today: date | None = None) -> list[tuple[ExamInfo, int]]:
    """Exams that haven't happened yet, soonest first, with days remaining."""
    config = config or get_config()
    upcoming = [(exam, days_until(exam.date, today)) for exam in config.exams]
    upcoming = [(exam, days) for exam, days in upcoming if days >= 0]
    return sorted(upcoming, key=lambda pair: (pair[1], pair[0].time))


def get_study_stats(
    character: Character | None,
    quests: list[Quest],
    decks: list[FlashcardDeck],
    timer_sessions: list[TimerSession] | None = None,
) -> dict:
    completed = sum(1 for q in quests if q.completed)
    cards = [c for d in decks for c in d.cards]
    return {
        "level": character.level if character else 0,
        "xp": character.xp if character else 0,
        "quests_total": len(quests),
        "quests_completed": completed,
        "quests_active": len(quests) - completed,
        "decks": len(decks),
        "cards": len(cards),
        "cards_reviewed": sum(c.review_count for c in cards),
        "study_minutes": sum(s.minutes for s in timer_sessions or []),
    }


def get_quest_completion(quests: list[Quest]) -> float:
    if not quests:
        return 0.0
    return round(sum(1 for q in quests if q.completed) / len(quests) * 100, 1)


def _toggle_flag(db_path: str, key: str, item: str) -> bool:
    flags = read_slot(db_path, key)
    if not isinstance(flags, dict):
        flags = {}
    flags[item] = not flags.get(item, False)
    write_slot(db_path, key, flags)
    return flags[item]


def get_planned_quests_completed(db_path: str, config: AppConfig | None = None) -> dict:
    config = config or get_config()
    flags = read_slot(db_path, config.slot("plannedQuestsCompleted"))
    return flags if isinstance(flags, dict) else {}


def toggle_planned_quest(db_path: str, day: str, config: AppConfig | None = None) -> bool:
    """Flip the completion flag of a planned day. Returns the new value."""
    config = config or get_config()
    return _toggle_flag(db_path, config.slot("plannedQuestsCompleted"), day)


def get_past_papers_completed(db_path: str, config: AppConfig | None = None) -> dict:
    config = config or get_config()
    flags = read_slot(db_path, config.slot("pastPapers"))
    return flags if isinstance(flags, dict) else {}


def toggle_past_paper(db_path: str, code: str, config: AppConfig | None = None) -> bool:
    config = config or get_config()
    return _toggle_flag(db_path, config.slot("pastPapers"), code)
