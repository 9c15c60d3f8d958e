"""Data classes for the tracker domain model.

``to_dict``/``from_dict`` use the camelCase keys of the persisted JSON.
"""
from dataclasses import dataclass, field
from typing import Optional


@dataclass
class CharacterStats:
    wisdom: int = 1
    focus: int = 1
    memory: int = 1
    discipline: int = 1

    def to_dict(self) -> dict:
        return {
            "wisdom": self.wisdom,
            "focus": self.focus,
            "memory": self.memory,
            "discipline": self.discipline,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "CharacterStats":
        return cls(
            wisdom=int(data["wisdom"]),
            focus=int(data["focus"]),
            memory=int(data["memory"]),
            discipline=int(data["discipline"]),
        )


@dataclass
class Character:
    stats: CharacterStats
    xp: int = 0
    level: int = 1
    next_level_xp: int = 100

    def to_dict(self) -> dict:
        return {
            "stats": self.stats.to_dict(),
            "xp": self.xp,
            "level": self.level,
            "nextLevelXP": self.next_level_xp,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Character":
        return cls(
            stats=CharacterStats.from_dict(data["stats"]),
            xp=int(data["xp"]),
            level=int(data["level"]),
            next_level_xp=int(data["nextLevelXP"]),
        )


@dataclass
class Quest:
    id: str
    title: str
    description: str
    subject: str
    unit: str
    topic: str
    type: str
    difficulty: str
    xp_reward: int
    completed: bool = False

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "subject": self.subject,
            "unit": self.unit,
            "topic": self.topic,
            "type": self.type,
            "difficulty": self.difficulty,
            "completed": self.completed,
            "xpReward": self.xp_reward,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Quest":
        return cls(
            id=str(data["id"]),
            title=data["title"],
            description=data.get("description", ""),
            subject=data["subject"],
            unit=data.get("unit", ""),
            topic=data.get("topic", ""),
            type=data["type"],
            difficulty=data["difficulty"],
            xp_reward=int(data["xpReward"]),
            completed=bool(data.get("completed", False)),
        )


@dataclass
class Flashcard:
    id: str
    front: str
    back: str
    deck_id: str
    last_reviewed: Optional[str] = None
    next_review_date: Optional[str] = None  # reserved, nothing schedules it yet
    review_count: int = 0

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "front": self.front,
            "back": self.back,
            "deckId": self.deck_id,
            "lastReviewed": self.last_reviewed,
            "nextReviewDate": self.next_review_date,
            "reviewCount": self.review_count,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Flashcard":
        return cls(
            id=str(data["id"]),
            front=data["front"],
            back=data["back"],
            deck_id=str(data["deckId"]),
            last_reviewed=data.get("lastReviewed"),
            next_review_date=data.get("nextReviewDate"),
            review_count=int(data.get("reviewCount") or 0),
        )


@dataclass
class FlashcardDeck:
    id: str
    name: str
    subject: str
    unit: str = ""
    topic: str = ""
    cards: list[Flashcard] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "subject": self.subject,
            "unit": self.unit,
            "topic": self.topic,
            "cards": [c.to_dict() for c in self.cards],
        }

    @classmethod
    def from_dict(cls, data: dict) -> "FlashcardDeck":
        return cls(
            id=str(data["id"]),
            name=data["name"],
            subject=data.get("subject", ""),
            unit=data.get("unit", ""),
            topic=data.get("topic", ""),
            cards=[Flashcard.from_dict(c) for c in data.get("cards", [])],
        )


@dataclass
class Note:
    id: str
    title: str
    subject: str
    topic: str
    url: str
    date_added: str

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "title": self.title,
            "subject": self.subject,
            "topic": self.topic,
            "url": self.url,
            "dateAdded": self.date_added,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Note":
        return cls(
            id=str(data["id"]),
            title=data["title"],
            subject=data["subject"],
            topic=data.get("topic", ""),
            url=data["url"],
            date_added=data["dateAdded"],
        )


@dataclass
class TimerSession:
    minutes: int
    xp_awarded: int
    completed_at: str

    def to_dict(self) -> dict:
        return {
            "minutes": self.minutes,
            "xpAwarded": self.xp_awarded,
            "completedAt": self.completed_at,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "TimerSession":
        return cls(
            minutes=int(data["minutes"]),
            xp_awarded=int(data["xpAwarded"]),
            completed_at=data["completedAt"],
        )
