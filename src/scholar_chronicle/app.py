"""Interactive CLI application."""
import logging
import os
from pathlib import Path

from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel
from rich.prompt import Prompt, IntPrompt
from rich.table import Table

from scholar_chronicle.character import level_progress
from scholar_chronicle.config import DEFAULT_DB_PATH
from scholar_chronicle.dashboard import get_study_stats, get_upcoming_exams
from scholar_chronicle.importer import read_card_rows
from scholar_chronicle.models import CharacterStats
from scholar_chronicle.notes import add_note, get_notes
from scholar_chronicle.state import AppState
from scholar_chronicle.study import SessionState, get_timer_sessions, timer_xp

console = Console()
logger = logging.getLogger(__name__)


class SessionExitRequested(Exception):
    """Raised when the user types q/menu in the middle of a study session."""


EXIT_WORDS = ("q", "quit", "menu")


def session_prompt(prompt: str, **kwargs) -> str:
    answer = Prompt.ask(prompt, **kwargs)
    if answer.strip().lower() in EXIT_WORDS:
        raise SessionExitRequested()
    return answer


def setup_logging() -> None:
    level = os.environ.get("SCHOLAR_CHRONICLE_LOG_LEVEL", "WARNING").upper()
    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, show_path=False)],
    )


def show_welcome(state: AppState):
    console.print(Panel(
        f"[bold]{state.config.name}[/bold]\n[dim]Study quests, flashcards and progress[/dim]",
        title="Welcome", border_style="blue",
    ))


def show_menu():
    console.print("\n[bold]Commands:[/bold]")
    commands = [
        ("dashboard", "Character and progress overview"),
        ("character", "Edit character stats"),
        ("quests", "List quests"),
        ("new-quest", "Create a quest"),
        ("complete", "Complete a quest"),
        ("decks", "List flashcard decks"),
        ("new-deck", "Create a deck"),
        ("add-card", "Add a card to a deck"),
        ("import", "Import cards from a CSV/JSON/YAML file"),
        ("study", "Study a deck"),
        ("timer", "Log a timed study session"),
        ("notes", "Study notes"),
        ("exams", "Upcoming exams"),
        ("quit", "Exit"),
    ]
    for cmd, desc in commands:
        console.print(f"  [cyan]{cmd:<14}[/cyan] {desc}")


def pick(items: list, label, title: str):
    """Let the user choose one item by its 1-based position."""
    if not items:
        return None
    for i, item in enumerate(items, 1):
        console.print(f"  [cyan]{i}[/cyan]) {label(item)}")
    choice = IntPrompt.ask(title, choices=[str(i) for i in range(1, len(items) + 1)])
    return items[choice - 1]


def character_unreadable(state: AppState) -> bool:
    if state.character is None:
        console.print("[red]The stored character record could not be read.[/red]")
        return True
    return False


def cmd_dashboard(state: AppState):
    if character_unreadable(state):
        return
    character = state.character
    stats = get_study_stats(character, state.quests, state.decks, get_timer_sessions(state.db_path, state.config))
    progress = level_progress(character, state.config)
    filled = int(progress * 20)
    bar = f"[green]{'█' * filled}{'░' * (20 - filled)}[/green]"
    console.print(Panel(
        f"Level [bold]{character.level}[/bold]  {bar}  {character.xp}/{character.next_level_xp} XP",
        title="Character", border_style="blue",
    ))
    s = character.stats
    console.print(f"  Wisdom {s.wisdom}  |  Focus {s.focus}  |  Memory {s.memory}  |  Discipline {s.discipline}")
    console.print(f"\n  Quests: [bold]{stats['quests_completed']}[/bold]/{stats['quests_total']} done  |  "
                  f"Decks: [bold]{stats['decks']}[/bold] ({stats['cards']} cards)  |  "
                  f"Reviews: [bold]{stats['cards_reviewed']}[/bold]  |  "
                  f"Timer: [bold]{stats['study_minutes']}[/bold] min")
    active = state.active_quests()
    if active:
        console.print("\n[bold]Active quests:[/bold]")
        for q in active[:5]:
            console.print(f"  • {q.title} [dim]({state.config.subject_name(q.subject)}, +{q.xp_reward} XP)[/dim]")


def cmd_character(state: AppState):
    if character_unreadable(state):
        return
    current = state.character.stats
    values = {}
    for name in ("wisdom", "focus", "memory", "discipline"):
        values[name] = max(1, IntPrompt.ask(name.capitalize(), default=getattr(current, name)))
    state.update_character_stats(CharacterStats(**values))
    console.print("[green]Stats updated.[/green]")


def cmd_quests(state: AppState):
    subject = Prompt.ask("Subject filter (blank for all)", default="")
    quests = state.get_quests_by_subject(subject) if subject else state.quests
    if not quests:
        console.print("[yellow]No quests yet. Use 'new-quest' to add one.[/yellow]")
        return
    table = Table(title="Quests")
    table.add_column("Title", style="cyan")
    table.add_column("Subject")
    table.add_column("Type")
    table.add_column("Difficulty")
    table.add_column("XP", justify="right")
    table.add_column("Status")
    for q in quests:
        table.add_row(
            q.title, state.config.subject_name(q.subject), q.type, q.difficulty, str(q.xp_reward),
            "[green]Done[/green]" if q.completed else "",
        )
    console.print(table)


def cmd_new_quest(state: AppState):
    config = state.config
    subject = Prompt.ask("Subject", choices=list(config.subjects))
    units = config.subjects[subject]["units"]
    unit_id = Prompt.ask("Unit", choices=list(units))
    topic = pick(units[unit_id]["topics"], str, "Topic")
    quest_data = {
        "title": Prompt.ask("Title"),
        "description": Prompt.ask("Description"),
        "subject": subject,
        "unit": units[unit_id]["name"],
        "topic": topic,
        "type": Prompt.ask("Type", choices=list(config.quest_types)),
        "difficulty": Prompt.ask("Difficulty", choices=list(config.quest_difficulties)),
    }
    quest = state.add_quest(quest_data)
    if quest is None:
        console.print("[red]Please fill out all fields to create a quest.[/red]")
        return
    console.print(f"[green]Quest created: {quest.title} (+{quest.xp_reward} XP)[/green]")


def cmd_complete(state: AppState):
    if character_unreadable(state):
        return
    active = state.active_quests()
    if not active:
        console.print("[yellow]No active quests.[/yellow]")
        return
    quest = pick(active, lambda q: f"{q.title} (+{q.xp_reward} XP)", "Complete which quest")
    level_before = state.character.level
    if state.mark_quest_complete(quest.id) is None:
        console.print("[yellow]That quest was already completed.[/yellow]")
        return
    console.print(f"[green]Quest complete! +{quest.xp_reward} XP[/green]")
    if state.character.level > level_before:
        console.print(f"[bold magenta]Level up! You are now level {state.character.level}.[/bold magenta]")


def cmd_decks(state: AppState):
    if not state.decks:
        console.print("[yellow]No decks yet. Use 'new-deck' to create one.[/yellow]")
        return
    table = Table(title="Flashcard Decks")
    table.add_column("Name", style="cyan")
    table.add_column("Subject")
    table.add_column("Topic")
    table.add_column("Cards", justify="right")
    for d in state.decks:
        table.add_row(d.name, state.config.subject_name(d.subject), d.topic,
                      f"{len(d.cards)}/{state.config.max_cards_per_deck}")
    console.print(table)


def cmd_new_deck(state: AppState):
    name = Prompt.ask("Deck name")
    subject = Prompt.ask("Subject", choices=list(state.config.subjects))
    unit = Prompt.ask("Unit", default="")
    topic = Prompt.ask("Topic", default="")
    deck = state.add_flashcard_deck(name, subject, unit, topic)
    if deck is None:
        console.print("[red]A deck needs a name and a subject.[/red]")
        return
    console.print(f"[green]Created deck {deck.name}.[/green]")


def choose_deck(state: AppState):
    if not state.decks:
        console.print("[yellow]No decks yet. Use 'new-deck' to create one.[/yellow]")
        return None
    return pick(state.decks, lambda d: f"{d.name} ({len(d.cards)} cards)", "Deck")


def cmd_add_card(state: AppState):
    deck = choose_deck(state)
    if deck is None:
        return
    front = Prompt.ask("Front")
    back = Prompt.ask("Back")
    if state.add_card(deck.id, front, back) is None:
        console.print(f"[red]Card not added. Decks hold at most {state.config.max_cards_per_deck} cards "
                      f"and both sides are required.[/red]")
        return
    console.print("[green]Card added.[/green]")


def cmd_import(state: AppState):
    deck = choose_deck(state)
    if deck is None:
        return
    file_path = Prompt.ask("File path")
    if not Path(file_path).exists():
        console.print(f"[red]File not found: {file_path}[/red]")
        return
    rows = read_card_rows(file_path)
    if not rows:
        console.print("[red]No valid cards found. Each line needs a front and back separated by a comma.[/red]")
        return
    if state.import_cards(deck.id, rows) is None:
        console.print(f"[red]Import would exceed {state.config.max_cards_per_deck} cards in this deck.[/red]")
        return
    console.print(f"[green]Imported {len(rows)} cards into {deck.name}.[/green]")


def run_study_session(state: AppState, session) -> None:
    while session.state is not SessionState.COMPLETE:
        card = session.current_card
        console.print(Panel(card.front, title=f"Card {session.position + 1}/{session.total}", border_style="cyan"))
        session_prompt("[dim]Press Enter to reveal answer (q to stop)[/dim]", default="")
        session.flip()
        console.print(Panel(card.back, border_style="green"))
        session_prompt("[dim]Press Enter for the next card (q to stop)[/dim]", default="")
        session.advance()
    state.finish_study_session(session)
    console.print(f"[green]Study session complete! You reviewed all {session.total} cards.[/green]")


def cmd_study(state: AppState):
    deck = choose_deck(state)
    if deck is None:
        return
    session = state.start_study_session(deck.id)
    if session is None:
        console.print("[yellow]This deck has no flashcards yet. Add some cards to start studying![/yellow]")
        return
    while True:
        try:
            run_study_session(state, session)
        except SessionExitRequested:
            console.print("[dim]Session stopped. No XP awarded for a partial pass.[/dim]")
            return
        if Prompt.ask("Study again?", choices=["y", "n"], default="n") != "y":
            return
        session.restart()


def cmd_timer(state: AppState):
    presets = state.config.timer_presets
    for p in presets:
        console.print(f"  [cyan]{p.name:<16}[/cyan] {p.duration} min (+{timer_xp(p.duration)} XP)")
    minutes = IntPrompt.ask("Minutes studied", default=presets[0].duration if presets else 25)
    session = state.record_timer_session(minutes)
    if session is None:
        console.print("[red]Study time must be at least one minute.[/red]")
        return
    console.print(f"[green]Great work! You've earned {session.xp_awarded} XP. "
                  f"Take a {state.config.short_break} minute break.[/green]")


def cmd_notes(state: AppState):
    notes = get_notes(state.db_path, state.config)
    if notes:
        table = Table(title="Notes")
        table.add_column("Title", style="cyan")
        table.add_column("Subject")
        table.add_column("Topic")
        table.add_column("Link")
        for n in notes:
            table.add_row(n.title, state.config.subject_name(n.subject), n.topic, n.url)
        console.print(table)
    if Prompt.ask("Add a note?", choices=["y", "n"], default="n") != "y":
        return
    subject = Prompt.ask("Subject", choices=list(state.config.subjects))
    topic = pick(state.config.topics_for(subject), str, "Topic")
    note = add_note(state.db_path, Prompt.ask("Title"), subject, topic, Prompt.ask("Google Drive URL"), state.config)
    if note is None:
        console.print("[red]Notes need every field and a Google Drive URL.[/red]")
        return
    console.print(f"[green]{note.title} has been added to your notes.[/green]")


def cmd_exams(state: AppState):
    upcoming = get_upcoming_exams(state.config)
    if not upcoming:
        console.print("[green]No upcoming exams.[/green]")
        return
    table = Table(title="Upcoming Exams")
    table.add_column("Date")
    table.add_column("Time")
    table.add_column("Paper", style="cyan")
    table.add_column("Code")
    table.add_column("Days", justify="right")
    for exam, days in upcoming:
        table.add_row(exam.date, exam.time, exam.paper, exam.code, str(days))
    console.print(table)


COMMANDS = {
    "dashboard": cmd_dashboard,
    "character": cmd_character,
    "quests": cmd_quests,
    "new-quest": cmd_new_quest,
    "complete": cmd_complete,
    "decks": cmd_decks,
    "new-deck": cmd_new_deck,
    "add-card": cmd_add_card,
    "import": cmd_import,
    "study": cmd_study,
    "timer": cmd_timer,
    "notes": cmd_notes,
    "exams": cmd_exams,
}


def main():
    setup_logging()
    state = AppState(DEFAULT_DB_PATH).load()
    show_welcome(state)

    while True:
        show_menu()
        choice = Prompt.ask("\n[bold]>[/bold]", default="dashboard").strip().lower()
        if choice in ("quit", "exit", "q"):
            console.print("[dim]Keep up the streak![/dim]")
            break
        command = COMMANDS.get(choice)
        if command is None:
            console.print("[red]Unknown command. Try again.[/red]")
            continue
        try:
            command(state)
        except KeyboardInterrupt:
            console.print("\n[dim]Use 'quit' to exit.[/dim]")
        except Exception as e:
            logger.exception("Command %s failed", choice)
            console.print(f"[red]Error: {e}[/red]")


if __name__ == "__main__":
    main()
