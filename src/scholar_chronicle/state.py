"""Application state shared by every screen.

``AppState`` loads the character, quests and decks once, routes every
mutation to the engine that owns it, and keeps its in-memory copies in step
with what was persisted. Screens read from it and never touch the store.
"""
import logging
import threading

from scholar_chronicle import character as character_engine
from scholar_chronicle import flashcards as flashcard_engine
from scholar_chronicle import quests as quest_engine
from scholar_chronicle import study
from scholar_chronicle.config import DEFAULT_DB_PATH, AppConfig, get_config
from scholar_chronicle.db import init_db
from scholar_chronicle.models import Character, CharacterStats, Flashcard, FlashcardDeck, Quest, TimerSession
from scholar_chronicle.study import StudySession

logger = logging.getLogger(__name__)


class AppState:
    def __init__(self, db_path: str = DEFAULT_DB_PATH, config: AppConfig | None = None):
        self.db_path = db_path
        self.config = config or get_config()
        self.character: Character | None = None
        self.quests: list[Quest] = []
        self.decks: list[FlashcardDeck] = []
        self.loaded = False
        self._lock = threading.RLock()

    def load(self) -> "AppState":
        with self._lock:
            init_db(self.db_path)
            self.character = character_engine.get_or_init_character(self.db_path, self.config)
            self.quests = quest_engine.get_quests(self.db_path, self.config)
            self.decks = flashcard_engine.get_decks(self.db_path, self.config)
            self.loaded = True
        logger.info("Loaded %d quests and %d decks", len(self.quests), len(self.decks))
        return self

    # Queries

    def get_quests_by_subject(self, subject: str) -> list[Quest]:
        return quest_engine.get_quests_by_subject(self.quests, subject)

    def active_quests(self) -> list[Quest]:
        return [q for q in self.quests if not q.completed]

    def get_quest(self, quest_id: str) -> Quest | None:
        return next((q for q in self.quests if q.id == quest_id), None)

    def get_deck(self, deck_id: str) -> FlashcardDeck | None:
        return next((d for d in self.decks if d.id == deck_id), None)

    # Merging helpers

    def _replace_deck(self, deck: FlashcardDeck) -> None:
        for i, existing in enumerate(self.decks):
            if existing.id == deck.id:
                self.decks[i] = deck
                return
        self.decks.append(deck)

    def _refresh_character(self) -> None:
        stored = character_engine.load_character(self.db_path, self.config)
        if stored is not None:
            self.character = stored

    # Character

    def update_character_stats(self, stats: CharacterStats) -> Character | None:
        with self._lock:
            updated = character_engine.update_stats(self.db_path, stats, self.config)
            if updated is not None:
                self.character = updated
            return updated

    def add_character_xp(self, amount: int) -> Character | None:
        with self._lock:
            updated = character_engine.add_xp(self.db_path, amount, self.config)
            if updated is not None:
                self.character = updated
            return updated

    # Quests

    def add_quest(self, quest_data: dict) -> Quest | None:
        with self._lock:
            quest = quest_engine.create_quest(self.db_path, quest_data, self.config)
            if quest is not None:
                self.quests.append(quest)
            return quest

    def mark_quest_complete(self, quest_id: str) -> Quest | None:
        with self._lock:
            quest = quest_engine.complete_quest(self.db_path, quest_id, self.config)
            if quest is None:
                return None
            self.quests = [quest if q.id == quest_id else q for q in self.quests]
            self._refresh_character()
            return quest

    def delete_quest(self, quest_id: str) -> bool:
        with self._lock:
            removed = quest_engine.delete_quest(self.db_path, quest_id, self.config)
            if removed:
                self.quests = [q for q in self.quests if q.id != quest_id]
            return removed

    # Flashcard decks

    def add_flashcard_deck(self, name: str, subject: str, unit: str = "", topic: str = "") -> FlashcardDeck | None:
        with self._lock:
            deck = flashcard_engine.create_deck(self.db_path, name, subject, unit, topic, self.config)
            if deck is not None:
                self.decks.append(deck)
            return deck

    def update_flashcard_deck(self, deck: FlashcardDeck) -> FlashcardDeck | None:
        with self._lock:
            saved = flashcard_engine.save_deck(self.db_path, deck, self.config)
            if saved is not None:
                self._replace_deck(saved)
            return saved

    def delete_flashcard_deck(self, deck_id: str) -> bool:
        with self._lock:
            removed = flashcard_engine.delete_deck(self.db_path, deck_id, self.config)
            if removed:
                self.decks = [d for d in self.decks if d.id != deck_id]
            return removed

    def add_card(self, deck_id: str, front: str, back: str) -> Flashcard | None:
        with self._lock:
            card = flashcard_engine.add_card(self.db_path, deck_id, front, back, self.config)
            if card is not None:
                deck = flashcard_engine.get_deck(self.db_path, deck_id, self.config)
                if deck is not None:
                    self._replace_deck(deck)
            return card

    def delete_card(self, deck_id: str, card_id: str) -> FlashcardDeck | None:
        with self._lock:
            deck = flashcard_engine.delete_card(self.db_path, deck_id, card_id, self.config)
            if deck is not None:
                self._replace_deck(deck)
            return deck

    def import_cards(self, deck_id: str, rows: list) -> FlashcardDeck | None:
        with self._lock:
            deck = flashcard_engine.import_cards(self.db_path, deck_id, rows, self.config)
            if deck is not None:
                self._replace_deck(deck)
            return deck

    # Studying

    def start_study_session(self, deck_id: str) -> StudySession | None:
        deck = self.get_deck(deck_id)
        if deck is None or not deck.cards:
            return None
        return StudySession(deck)

    def finish_study_session(self, session: StudySession) -> FlashcardDeck | None:
        """Record the pending pass of a completed session, once."""
        with self._lock:
            if not session.pass_pending:
                return None
            deck = flashcard_engine.complete_study_pass(self.db_path, session.deck.id, self.config)
            session.mark_recorded()
            if deck is None:
                return None
            self._replace_deck(deck)
            session.deck = deck
            self._refresh_character()
            return deck

    def record_timer_session(self, minutes: int) -> TimerSession | None:
        with self._lock:
            session = study.record_timer_session(self.db_path, minutes, self.config)
            if session is not None:
                self._refresh_character()
            return session
