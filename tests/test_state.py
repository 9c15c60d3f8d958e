"""Tests for the application state facade."""
import threading

from scholar_chronicle.character import load_character
from scholar_chronicle.db import read_slot, write_slot
from scholar_chronicle.flashcards import get_deck
from scholar_chronicle.models import CharacterStats, Flashcard, FlashcardDeck
from scholar_chronicle.quests import get_quests
from scholar_chronicle.study import SessionState


def quest_data(**overrides):
    data = {
        "title": "Revise capacitors",
        "description": "Make summary notes",
        "subject": "physics",
        "unit": "Unit 5",
        "topic": "Capacitance and energy storage",
        "type": "revision",
        "difficulty": "intermediate",
    }
    data.update(overrides)
    return data


def test_load_initializes_character(app_state):
    assert app_state.loaded is True
    assert app_state.character.level == 1
    assert app_state.quests == []
    assert app_state.decks == []
    assert load_character(app_state.db_path) == app_state.character


def test_load_reads_existing_state(app_state, make_state):
    app_state.add_quest(quest_data())
    app_state.add_flashcard_deck("Fields", "physics")
    app_state.add_character_xp(20)
    reloaded = make_state()
    assert len(reloaded.quests) == 1
    assert len(reloaded.decks) == 1
    assert reloaded.character.xp == 20


def test_add_quest_appends_in_memory_and_store(app_state):
    quest = app_state.add_quest(quest_data())
    assert app_state.quests == [quest]
    assert get_quests(app_state.db_path) == [quest]


def test_rejected_quest_leaves_state_untouched(app_state):
    assert app_state.add_quest(quest_data(title="")) is None
    assert app_state.quests == []


def test_mark_quest_complete_updates_quest_and_character(app_state):
    quest = app_state.add_quest(quest_data(xp_reward=75))
    app_state.mark_quest_complete(quest.id)
    assert app_state.get_quest(quest.id).completed is True
    assert app_state.character.xp == 75
    assert app_state.active_quests() == []


def test_mark_quest_complete_twice_awards_once(app_state):
    quest = app_state.add_quest(quest_data(xp_reward=75))
    app_state.mark_quest_complete(quest.id)
    assert app_state.mark_quest_complete(quest.id) is None
    assert app_state.character.xp == 75
    assert load_character(app_state.db_path).xp == 75


def test_delete_quest(app_state):
    quest = app_state.add_quest(quest_data())
    assert app_state.delete_quest(quest.id) is True
    assert app_state.quests == []


def test_update_character_stats(app_state):
    stats = CharacterStats(wisdom=2, focus=3, memory=4, discipline=5)
    app_state.update_character_stats(stats)
    assert app_state.character.stats == stats
    assert load_character(app_state.db_path).stats == stats


def test_add_character_xp_replaces_character(app_state):
    updated = app_state.add_character_xp(100)
    assert app_state.character is updated
    assert updated.level == 2
    assert updated.next_level_xp == 150


def test_rejected_xp_award_keeps_character(app_state):
    before = app_state.character
    assert app_state.add_character_xp(0) is None
    assert app_state.character is before


def test_get_quests_by_subject(app_state):
    app_state.add_quest(quest_data(subject="physics"))
    app_state.add_quest(quest_data(subject="mathematics", topic="Proof techniques"))
    assert [q.subject for q in app_state.get_quests_by_subject("PHYSICS")] == ["physics"]


def test_deck_mutations_stay_in_sync(app_state):
    deck = app_state.add_flashcard_deck("Fields", "physics", "Unit 5", "Electric, magnetic and gravitational fields")
    card = app_state.add_card(deck.id, "Unit of field strength", "N/C")
    assert app_state.get_deck(deck.id).cards == [card]
    app_state.import_cards(deck.id, [("a", "1"), ("b", "2")])
    assert len(app_state.get_deck(deck.id).cards) == 3
    app_state.delete_card(deck.id, card.id)
    assert len(app_state.get_deck(deck.id).cards) == 2
    assert app_state.get_deck(deck.id) == get_deck(app_state.db_path, deck.id)


def test_update_flashcard_deck_replaces_by_id(app_state):
    deck = app_state.add_flashcard_deck("Fields", "physics")
    other = app_state.add_flashcard_deck("Matrices", "mathematics")
    deck.name = "Fields and forces"
    app_state.update_flashcard_deck(deck)
    assert [d.name for d in app_state.decks] == ["Fields and forces", "Matrices"]
    assert app_state.get_deck(other.id) == other


def test_update_flashcard_deck_rejects_oversized_deck(app_state):
    deck = app_state.add_flashcard_deck("Fields", "physics")
    app_state.add_card(deck.id, "Unit of field strength", "N/C")
    before = app_state.get_deck(deck.id)
    limit = app_state.config.max_cards_per_deck
    oversized = FlashcardDeck(
        id=deck.id, name=deck.name, subject=deck.subject,
        cards=[Flashcard(id=f"c{i}", front="Q", back="A", deck_id="OTHER") for i in range(limit + 50)],
    )
    assert app_state.update_flashcard_deck(oversized) is None
    assert app_state.get_deck(deck.id) == before
    assert get_deck(app_state.db_path, deck.id) == before


def test_update_flashcard_deck_repoints_foreign_cards(app_state):
    deck = app_state.add_flashcard_deck("Fields", "physics")
    deck.cards.append(Flashcard(id="stray", front="Q", back="A", deck_id="OTHER"))
    saved = app_state.update_flashcard_deck(deck)
    assert saved.cards[0].deck_id == deck.id
    assert app_state.get_deck(deck.id).cards[0].deck_id == deck.id
    assert get_deck(app_state.db_path, deck.id).cards[0].deck_id == deck.id


def test_unreadable_character_survives_stat_update(app_state, make_state):
    key = app_state.config.slot("character")
    app_state.add_character_xp(500)
    raw = read_slot(app_state.db_path, key)
    del raw["stats"]["discipline"]
    write_slot(app_state.db_path, key, raw)

    state = make_state()
    assert state.character is None
    assert state.update_character_stats(CharacterStats(2, 2, 2, 2)) is None
    assert state.character is None
    assert read_slot(app_state.db_path, key)["xp"] == 500


def test_study_session_records_pass_once(app_state):
    deck = app_state.add_flashcard_deck("Fields", "physics")
    app_state.import_cards(deck.id, [("a", "1"), ("b", "2")])
    session = app_state.start_study_session(deck.id)
    session.flip()
    session.advance()
    session.flip()
    assert session.advance() is SessionState.COMPLETE

    recorded = app_state.finish_study_session(session)
    assert all(c.review_count == 1 for c in recorded.cards)
    assert app_state.character.xp == 10
    # finishing the same completed session again awards nothing
    assert app_state.finish_study_session(session) is None
    assert app_state.character.xp == 10

    # restarting without completing awards nothing either
    session.restart()
    assert app_state.finish_study_session(session) is None

    session.advance()
    session.advance()
    app_state.finish_study_session(session)
    assert app_state.character.xp == 20
    assert all(c.review_count == 2 for c in app_state.get_deck(deck.id).cards)


def test_start_study_session_needs_cards(app_state):
    deck = app_state.add_flashcard_deck("Empty", "physics")
    assert app_state.start_study_session(deck.id) is None
    assert app_state.start_study_session("missing") is None


def test_record_timer_session_refreshes_character(app_state):
    app_state.record_timer_session(25)
    assert app_state.character.xp == 5


def test_concurrent_xp_awards_are_serialized(app_state):
    threads = [threading.Thread(target=app_state.add_character_xp, args=(1,)) for _ in range(20)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()
    assert load_character(app_state.db_path).xp == 20
    assert app_state.character.xp == 20


def test_delete_flashcard_deck(app_state):
    deck = app_state.add_flashcard_deck("Fields", "physics")
    assert app_state.delete_flashcard_deck(deck.id) is True
    assert app_state.decks == []
    assert app_state.delete_flashcard_deck(deck.id) is False
