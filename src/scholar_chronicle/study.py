"""Study session state and the study timer."""
import logging
import math
from datetime import datetime, timezone
from enum import Enum

from scholar_chronicle.character import add_xp
from scholar_chronicle.config import AppConfig, get_config
from scholar_chronicle.db import read_records, write_records
from scholar_chronicle.models import Flashcard, FlashcardDeck, TimerSession

logger = logging.getLogger(__name__)


class SessionState(Enum):
    NOT_STARTED = "not_started"
    FLIPPED = "flipped"
    COMPLETE = "complete"


class StudySession:
    """Walks through a deck one card at a time.

    Each card is shown front first (NOT_STARTED), flipped to its back
    (FLIPPED), then advanced. Advancing past the last card moves the session
    to COMPLETE and leaves one study pass pending until ``mark_recorded``.
    """

    def __init__(self, deck: FlashcardDeck):
        if not deck.cards:
            raise ValueError(f"Deck {deck.id} has no cards to study")
        self.deck = deck
        self.position = 0
        self.state = SessionState.NOT_STARTED
        self.pass_pending = False

    @property
    def total(self) -> int:
        return len(self.deck.cards)

    @property
    def current_card(self) -> Flashcard | None:
        if self.state is SessionState.COMPLETE:
            return None
        return self.deck.cards[self.position]

    def flip(self) -> SessionState:
        if self.state is SessionState.NOT_STARTED:
            self.state = SessionState.FLIPPED
        elif self.state is SessionState.FLIPPED:
            self.state = SessionState.NOT_STARTED
        return self.state

    def advance(self) -> SessionState:
        if self.state is SessionState.COMPLETE:
            return self.state
        if self.position < self.total - 1:
            self.position += 1
            self.state = SessionState.NOT_STARTED
        else:
            self.state = SessionState.COMPLETE
            self.pass_pending = True
        return self.state

    def previous(self) -> SessionState:
        if self.state is not SessionState.COMPLETE and self.position > 0:
            self.position -= 1
            self.state = SessionState.NOT_STARTED
        return self.state

    def restart(self) -> SessionState:
        """Go back to the first card. A pass already recorded is not recorded again."""
        self.position = 0
        self.state = SessionState.NOT_STARTED
        self.pass_pending = False
        return self.state

    def mark_recorded(self) -> None:
        self.pass_pending = False


def timer_xp(minutes: int) -> int:
    """One XP per started five minutes of focused study."""
    return math.ceil(minutes / 5)


def get_timer_sessions(db_path: str, config: AppConfig | None = None) -> list[TimerSession]:
    config = config or get_config()
    return read_records(db_path, config.slot("timerSessions"), TimerSession.from_dict)


def record_timer_session(db_path: str, minutes: int, config: AppConfig | None = None) -> TimerSession | None:
    """Log a finished timer run and award its XP.

    Returns None, awarding nothing, for a non-positive duration or a failed write.
    """
    config = config or get_config()
    if isinstance(minutes, bool) or not isinstance(minutes, int) or minutes <= 0:
        logger.warning("Rejected timer session of %r minutes", minutes)
        return None
    session = TimerSession(
        minutes=minutes,
        xp_awarded=timer_xp(minutes),
        completed_at=datetime.now(timezone.utc).isoformat(),
    )
    sessions = get_timer_sessions(db_path, config)
    sessions.append(session)
    if not write_records(db_path, config.slot("timerSessions"), sessions, TimerSession.from_dict):
        return None
    add_xp(db_path, session.xp_awarded, config)
    return session
