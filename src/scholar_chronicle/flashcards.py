"""Flashcard decks: deck and card CRUD plus study-pass bookkeeping."""
import logging
import uuid
from datetime import datetime, timezone

from scholar_chronicle.character import add_xp
from scholar_chronicle.config import AppConfig, get_config
from scholar_chronicle.db import read_records, write_records
from scholar_chronicle.models import Flashcard, FlashcardDeck

logger = logging.getLogger(__name__)

STUDY_PASS_XP = 10


def new_id() -> str:
    return uuid.uuid4().hex


def now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def is_blank(text) -> bool:
    return not isinstance(text, str) or not text.strip()


def get_decks(db_path: str, config: AppConfig | None = None) -> list[FlashcardDeck]:
    config = config or get_config()
    return read_records(db_path, config.slot("flashcards"), FlashcardDeck.from_dict)


def get_deck(db_path: str, deck_id: str, config: AppConfig | None = None) -> FlashcardDeck | None:
    for deck in get_decks(db_path, config):
        if deck.id == deck_id:
            return deck
    return None


def save_deck(db_path: str, deck: FlashcardDeck, config: AppConfig | None = None) -> FlashcardDeck | None:
    """Insert or replace ``deck`` by id and persist the whole deck list.

    Cards pointing at another deck are re-pointed at this one. Returns None,
    writing nothing, if the deck holds more cards than the limit or the
    write fails.
    """
    config = config or get_config()
    if len(deck.cards) > config.max_cards_per_deck:
        logger.warning(
            "Rejected deck %s: %d cards exceeds the %d card limit",
            deck.id, len(deck.cards), config.max_cards_per_deck,
        )
        return None
    for card in deck.cards:
        if card.deck_id != deck.id:
            logger.warning("Card %s pointed at deck %s, re-pointing at %s", card.id, card.deck_id, deck.id)
            card.deck_id = deck.id

    decks = get_decks(db_path, config)
    for i, existing in enumerate(decks):
        if existing.id == deck.id:
            decks[i] = deck
            break
    else:
        decks.append(deck)
    if not write_records(db_path, config.slot("flashcards"), decks, FlashcardDeck.from_dict):
        return None
    return deck


def delete_deck(db_path: str, deck_id: str, config: AppConfig | None = None) -> bool:
    config = config or get_config()
    decks = get_decks(db_path, config)
    remaining = [d for d in decks if d.id != deck_id]
    if len(remaining) == len(decks):
        return False
    return write_records(db_path, config.slot("flashcards"), remaining, FlashcardDeck.from_dict)


def create_deck(
    db_path: str,
    name: str,
    subject: str,
    unit: str = "",
    topic: str = "",
    config: AppConfig | None = None,
) -> FlashcardDeck | None:
    if is_blank(name) or not subject:
        logger.warning("Rejected deck: name and subject are required")
        return None
    deck = FlashcardDeck(id=new_id(), name=name.strip(), subject=subject, unit=unit, topic=topic, cards=[])
    return save_deck(db_path, deck, config)


def new_card(deck_id: str, front: str, back: str) -> Flashcard:
    return Flashcard(
        id=new_id(),
        front=front,
        back=back,
        deck_id=deck_id,
        last_reviewed=None,
        next_review_date=None,
        review_count=0,
    )


def add_card(
    db_path: str, deck_id: str, front: str, back: str, config: AppConfig | None = None
) -> Flashcard | None:
    """Append a card to a deck. Returns None if the deck is missing, full, or a side is blank."""
    config = config or get_config()
    if is_blank(front) or is_blank(back):
        logger.warning("Rejected card for deck %s: front and back are required", deck_id)
        return None
    deck = get_deck(db_path, deck_id, config)
    if deck is None:
        logger.warning("Rejected card: no deck %s", deck_id)
        return None
    if len(deck.cards) >= config.max_cards_per_deck:
        logger.warning("Rejected card: deck %s is at its %d card limit", deck_id, config.max_cards_per_deck)
        return None
    card = new_card(deck.id, front.strip(), back.strip())
    deck.cards.append(card)
    if save_deck(db_path, deck, config) is None:
        return None
    return card


def delete_card(
    db_path: str, deck_id: str, card_id: str, config: AppConfig | None = None
) -> FlashcardDeck | None:
    config = config or get_config()
    deck = get_deck(db_path, deck_id, config)
    if deck is None:
        return None
    deck.cards = [c for c in deck.cards if c.id != card_id]
    return save_deck(db_path, deck, config)


def import_cards(
    db_path: str, deck_id: str, rows: list, config: AppConfig | None = None
) -> FlashcardDeck | None:
    """Append one card per (front, back) row and persist once.

    The whole batch is rejected if any row has a blank side or if it would
    take the deck past the card limit.
    """
    config = config or get_config()
    deck = get_deck(db_path, deck_id, config)
    if deck is None:
        logger.warning("Rejected import: no deck %s", deck_id)
        return None
    rows = [(front, back) for front, back in rows]
    if any(is_blank(front) or is_blank(back) for front, back in rows):
        logger.warning("Rejected import into deck %s: every row needs a front and a back", deck_id)
        return None
    if len(deck.cards) + len(rows) > config.max_cards_per_deck:
        logger.warning(
            "Rejected import of %d cards: deck %s holds %d of %d",
            len(rows), deck_id, len(deck.cards), config.max_cards_per_deck,
        )
        return None
    deck.cards.extend(new_card(deck.id, front.strip(), back.strip()) for front, back in rows)
    return save_deck(db_path, deck, config)


def complete_study_pass(
    db_path: str, deck_id: str, config: AppConfig | None = None, reviewed_at: str | None = None
) -> FlashcardDeck | None:
    """Record one full pass over a deck and award the study-pass XP.

    Every card gets the same ``lastReviewed`` timestamp and one more review.
    Missing or empty decks, and a failed deck write, are a no-op returning
    None with no XP awarded.
    """
    config = config or get_config()
    deck = get_deck(db_path, deck_id, config)
    if deck is None or not deck.cards:
        return None
    reviewed_at = reviewed_at or now_iso()
    for card in deck.cards:
        card.last_reviewed = reviewed_at
        card.review_count += 1
    if save_deck(db_path, deck, config) is None:
        logger.error("Study pass over deck %s not recorded: the deck could not be saved", deck.id)
        return None
    logger.info("Study pass over deck %s (%d cards)", deck.id, len(deck.cards))
    add_xp(db_path, STUDY_PASS_XP, config)
    return deck
