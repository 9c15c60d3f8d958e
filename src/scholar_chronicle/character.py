"""Character progression: stats, XP accumulation and level-ups."""
import logging
import math

from scholar_chronicle.config import AppConfig, LevelingSystem, get_config
from scholar_chronicle.db import read_slot, write_slot
from scholar_chronicle.models import Character, CharacterStats

logger = logging.getLogger(__name__)


def level_threshold(level: int, leveling: LevelingSystem) -> int:
    """Total XP needed to leave ``level``: floor(base_xp * multiplier^(level-1))."""
    return math.floor(leveling.base_xp * leveling.multiplier ** (level - 1))


def default_character(config: AppConfig) -> Character:
    return Character(
        stats=CharacterStats.from_dict(config.default_stats),
        xp=0,
        level=1,
        next_level_xp=config.leveling.base_xp,
    )


def load_character(db_path: str, config: AppConfig | None = None) -> Character | None:
    """Read the stored character without creating one."""
    config = config or get_config()
    data = read_slot(db_path, config.slot("character"))
    if data is None:
        return None
    try:
        return Character.from_dict(data)
    except (KeyError, TypeError, ValueError, AttributeError) as e:
        logger.error("Malformed character record: %s", e)
        return None


def save_character(db_path: str, character: Character, config: AppConfig | None = None) -> bool:
    config = config or get_config()
    return write_slot(db_path, config.slot("character"), character.to_dict())


def get_or_init_character(db_path: str, config: AppConfig | None = None) -> Character | None:
    """Return the stored character, creating and persisting a level 1 one if absent.

    A stored record that can't be parsed is left untouched and None is returned.
    """
    config = config or get_config()
    if read_slot(db_path, config.slot("character")) is not None:
        return load_character(db_path, config)
    character = default_character(config)
    save_character(db_path, character, config)
    logger.info("Created new character")
    return character


def update_stats(db_path: str, stats: CharacterStats, config: AppConfig | None = None) -> Character | None:
    """Overwrite the stats block wholesale and persist. None if the stored record is unreadable."""
    config = config or get_config()
    character = get_or_init_character(db_path, config)
    if character is None:
        return None
    character.stats = CharacterStats(**stats.to_dict())
    save_character(db_path, character, config)
    return character


def add_xp(db_path: str, amount: int, config: AppConfig | None = None) -> Character | None:
    """Add XP to the stored character, levelling up as many times as it covers.

    Returns None without touching the store when there is no character yet
    or when ``amount`` is not a positive integer.
    """
    config = config or get_config()
    if isinstance(amount, bool) or not isinstance(amount, int) or amount <= 0:
        logger.warning("Rejected XP award of %r", amount)
        return None
    character = load_character(db_path, config)
    if character is None:
        return None

    leveling = config.leveling
    character.xp += amount
    while character.xp >= character.next_level_xp and character.level < leveling.max_level:
        character.level += 1
        character.next_level_xp = level_threshold(character.level, leveling)
        logger.info("Level up: now level %d (next at %d XP)", character.level, character.next_level_xp)

    save_character(db_path, character, config)
    return character


def level_progress(character: Character, config: AppConfig | None = None) -> float:
    """Fraction (0.0-1.0) of the way from the current level's floor to the next threshold."""
    config = config or get_config()
    if character.level >= config.leveling.max_level:
        return 1.0
    floor_xp = level_threshold(character.level - 1, config.leveling) if character.level > 1 else 0
    span = character.next_level_xp - floor_xp
    if span <= 0:
        return 1.0
    return max(0.0, min(1.0, (character.xp - floor_xp) / span))
