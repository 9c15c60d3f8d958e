"""Quest creation, completion and the XP award that goes with it."""
import logging
import uuid

from scholar_chronicle.character import add_xp
from scholar_chronicle.config import AppConfig, get_config
from scholar_chronicle.db import read_records, write_records
from scholar_chronicle.models import Quest

logger = logging.getLogger(__name__)

REQUIRED_FIELDS = ("title", "description", "subject", "unit", "topic")


def new_id() -> str:
    return uuid.uuid4().hex


def get_quests(db_path: str, config: AppConfig | None = None) -> list[Quest]:
    config = config or get_config()
    return read_records(db_path, config.slot("quests"), Quest.from_dict)


def get_quest(db_path: str, quest_id: str, config: AppConfig | None = None) -> Quest | None:
    for quest in get_quests(db_path, config):
        if quest.id == quest_id:
            return quest
    return None


def default_xp_reward(difficulty: str, config: AppConfig | None = None) -> int:
    config = config or get_config()
    return int(config.default_xp_rewards[difficulty])


def validate_quest_data(quest_data: dict, config: AppConfig) -> str | None:
    """Return a reason the quest can't be created, or None if it is valid."""
    for name in REQUIRED_FIELDS:
        value = quest_data.get(name)
        if not isinstance(value, str) or not value.strip():
            return f"missing {name}"
    if quest_data.get("type") not in config.quest_types:
        return f"unknown quest type {quest_data.get('type')!r}"
    if quest_data.get("difficulty") not in config.quest_difficulties:
        return f"unknown difficulty {quest_data.get('difficulty')!r}"
    reward = quest_data.get("xp_reward")
    if reward is not None and (isinstance(reward, bool) or not isinstance(reward, int) or reward <= 0):
        return f"invalid xp_reward {reward!r}"
    return None


def create_quest(db_path: str, quest_data: dict, config: AppConfig | None = None) -> Quest | None:
    """Append a new, uncompleted quest. Returns None if ``quest_data`` is invalid.

    ``xp_reward`` falls back to the difficulty's default reward when omitted.
    """
    config = config or get_config()
    problem = validate_quest_data(quest_data, config)
    if problem:
        logger.warning("Rejected quest: %s", problem)
        return None

    reward = quest_data.get("xp_reward")
    quest = Quest(
        id=new_id(),
        title=quest_data["title"].strip(),
        description=quest_data["description"].strip(),
        subject=quest_data["subject"],
        unit=quest_data["unit"],
        topic=quest_data["topic"],
        type=quest_data["type"],
        difficulty=quest_data["difficulty"],
        xp_reward=reward if reward is not None else default_xp_reward(quest_data["difficulty"], config),
        completed=False,
    )
    quests = get_quests(db_path, config)
    quests.append(quest)
    if not write_records(db_path, config.slot("quests"), quests, Quest.from_dict):
        return None
    return quest


def complete_quest(db_path: str, quest_id: str, config: AppConfig | None = None) -> Quest | None:
    """Mark a quest completed and award its XP, at most once.

    The completed flag is written before the XP award. Unknown or already
    completed quests are a no-op returning None, as is a failed flag write,
    which awards no XP.
    """
    config = config or get_config()
    quests = get_quests(db_path, config)
    quest = next((q for q in quests if q.id == quest_id), None)
    if quest is None or quest.completed:
        return None

    quest.completed = True
    if not write_records(db_path, config.slot("quests"), quests, Quest.from_dict):
        logger.error("Quest %s not completed: the completed flag could not be saved", quest.id)
        return None
    logger.info("Quest %s completed (+%d XP)", quest.id, quest.xp_reward)
    add_xp(db_path, quest.xp_reward, config)
    return quest


def delete_quest(db_path: str, quest_id: str, config: AppConfig | None = None) -> bool:
    """Remove a quest from the list. No XP is taken back."""
    config = config or get_config()
    quests = get_quests(db_path, config)
    remaining = [q for q in quests if q.id != quest_id]
    if len(remaining) == len(quests):
        return False
    return write_records(db_path, config.slot("quests"), remaining, Quest.from_dict)


def get_quests_by_subject(quests: list[Quest], subject: str) -> list[Quest]:
    wanted = subject.lower()
    return [q for q in quests if q.subject.lower() == wanted]
