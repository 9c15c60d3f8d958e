from unittest.mock import patch

import pytest

from scholar_chronicle.app import (
    SessionExitRequested, cmd_character, cmd_complete, cmd_dashboard, cmd_import, cmd_new_deck,
    cmd_study, cmd_timer, main, run_study_session,
)
from scholar_chronicle.study import SessionState


def deck_with_cards(app_state, n=2):
    deck = app_state.add_flashcard_deck("Waves", "physics")
    app_state.import_cards(deck.id, [(f"Q{i}", f"A{i}") for i in range(n)])
    return app_state.get_deck(deck.id)


def test_run_study_session_full_pass_awards_xp(app_state):
    deck = deck_with_cards(app_state)
    session = app_state.start_study_session(deck.id)
    # reveal + next for each of the two cards
    with patch("scholar_chronicle.app.Prompt.ask", side_effect=["", "", "", ""]):
        run_study_session(app_state, session)
    assert app_state.character.xp == 10
    assert all(c.review_count == 1 for c in app_state.get_deck(deck.id).cards)


@pytest.mark.parametrize("exit_word", ["q", "quit", "menu", " Menu "])
def test_run_study_session_exit_midway_awards_nothing(app_state, exit_word):
    deck = deck_with_cards(app_state)
    session = app_state.start_study_session(deck.id)
    with patch("scholar_chronicle.app.Prompt.ask", side_effect=["", "", exit_word]):
        with pytest.raises(SessionExitRequested):
            run_study_session(app_state, session)
    assert app_state.character.xp == 0
    assert all(c.review_count == 0 for c in app_state.get_deck(deck.id).cards)


def test_answers_other_than_exit_words_keep_the_session_going(app_state):
    deck = deck_with_cards(app_state, n=1)
    session = app_state.start_study_session(deck.id)
    with patch("scholar_chronicle.app.Prompt.ask", side_effect=["quiz", "menus"]):
        run_study_session(app_state, session)
    assert session.state is SessionState.COMPLETE
    assert app_state.character.xp == 10


def test_cmd_study_exit_word_stops_without_xp(app_state):
    deck_with_cards(app_state, n=1)
    with patch("scholar_chronicle.app.IntPrompt.ask", return_value=1), \
            patch("scholar_chronicle.app.Prompt.ask", side_effect=["", "quit"]):
        cmd_study(app_state)
    assert app_state.character.xp == 0


def test_cmd_study_again_records_second_pass(app_state):
    deck = deck_with_cards(app_state, n=1)
    answers = ["", "", "y", "", "", "n"]
    with patch("scholar_chronicle.app.IntPrompt.ask", return_value=1), \
            patch("scholar_chronicle.app.Prompt.ask", side_effect=answers):
        cmd_study(app_state)
    assert app_state.character.xp == 20
    assert app_state.get_deck(deck.id).cards[0].review_count == 2


def test_cmd_complete_awards_quest_xp(app_state):
    app_state.add_quest({
        "title": "Matrices drill", "description": "Exercise 4B", "subject": "mathematics",
        "unit": "Unit 4", "topic": "Matrices (operations, transformations)",
        "type": "practice", "difficulty": "advanced",
    })
    with patch("scholar_chronicle.app.IntPrompt.ask", return_value=1):
        cmd_complete(app_state)
    assert app_state.character.xp == 100
    assert app_state.character.level == 2
    assert app_state.active_quests() == []


def test_commands_refuse_an_unreadable_character(app_state):
    app_state.character = None
    with patch("scholar_chronicle.app.IntPrompt.ask") as ask:
        cmd_dashboard(app_state)
        cmd_character(app_state)
        cmd_complete(app_state)
    ask.assert_not_called()


def test_cmd_new_deck(app_state):
    with patch("scholar_chronicle.app.Prompt.ask", side_effect=["Circuits", "physics", "Unit 4", ""]):
        cmd_new_deck(app_state)
    assert [d.name for d in app_state.decks] == ["Circuits"]


def test_cmd_import_csv(app_state, tmp_path):
    deck = app_state.add_flashcard_deck("Units", "physics")
    f = tmp_path / "cards.csv"
    f.write_text("Question,Answer\nForce,Newton\nEnergy,Joule\nPower,Watt\n")
    with patch("scholar_chronicle.app.IntPrompt.ask", return_value=1), \
            patch("scholar_chronicle.app.Prompt.ask", return_value=str(f)):
        cmd_import(app_state)
    cards = app_state.get_deck(deck.id).cards
    assert [c.front for c in cards] == ["Force", "Energy", "Power"]


def test_cmd_timer(app_state):
    with patch("scholar_chronicle.app.IntPrompt.ask", return_value=25):
        cmd_timer(app_state)
    assert app_state.character.xp == 5


def test_main_runs_and_quits(tmp_db):
    with patch("scholar_chronicle.app.DEFAULT_DB_PATH", tmp_db), \
            patch("scholar_chronicle.app.Prompt.ask", side_effect=["dashboard", "exams", "bogus", "quit"]):
        main()
