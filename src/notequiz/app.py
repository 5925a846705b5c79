"""Interactive CLI application."""
import asyncio
import logging
import os
import sys
from datetime import datetime
from pathlib import Path

from rich.console import Console
from rich.panel import Panel
from rich.prompt import Prompt
from rich.table import Table

from notequiz.config import QuizConfig, load_config
from notequiz.dashboard import (
    due_ratio, get_accuracy_color, get_accuracy_label, get_achievements,
    get_mastery_label, streak_dots,
)
from notequiz.errors import NoteQuizError
from notequiz.generate import build_quiz
from notequiz.importer import load_notes
from notequiz.kvstore import SqliteKeyValueStore
from notequiz.models import CLOZE, MCQ, TRUEFALSE, Question
from notequiz.quiz import QuizSession
from notequiz.review_store import ReviewStore

console = Console()
logger = logging.getLogger(__name__)

MODE_TITLES = {
    "day": "Daily review",
    "week": "Weekly test",
    "month": "Monthly test",
}


def show_welcome():
    console.print(Panel(
        "[bold]Note Quiz[/bold]\n[dim]Spaced repetition from your notes[/dim]",
        title="Welcome", border_style="blue",
    ))


def show_menu():
    console.print("\n[bold]Commands:[/bold]")
    commands = [
        ("day", "Quiz on notes edited today"),
        ("week", "Weekly test over all notes"),
        ("month", "Monthly test over all notes"),
        ("stats", "Review statistics"),
        ("load", "Load notes from a file or folder"),
        ("quit", "Exit"),
    ]
    for cmd, desc in commands:
        console.print(f"  [cyan]{cmd:<14}[/cyan] {desc}")


def ask_answer(question: Question):
    """Prompt for an answer in the form the question kind expects."""
    if question.kind == MCQ:
        letters = [chr(ord("a") + i) for i in range(len(question.choices))]
        for letter, choice in zip(letters, question.choices):
            console.print(f"  [cyan]{letter})[/cyan] {choice}")
        answer = Prompt.ask("\nYour answer", choices=letters)
        return letters.index(answer)
    if question.kind == TRUEFALSE:
        answer = Prompt.ask("\nVrai or Faux", choices=["v", "f"])
        return answer == "v"
    return Prompt.ask("\nFill in the blank")


def run_quiz_session(store: ReviewStore, questions: list, config: QuizConfig) -> int:
    """Run a quiz in the terminal; Ctrl-C abandons it.

    Each step runs on its own pass of the event loop, so prompts read input
    with the interpreter's own SIGINT handling in place.
    """
    if not questions:
        console.print("[yellow]No questions could be built from these notes.[/yellow]")
        return 0
    session = QuizSession(questions, store, config)
    console.print(f"\n[bold]Quiz[/bold] — {len(questions)} questions\n")
    with asyncio.Runner() as runner:
        while not session.is_finished:
            index = session.state.index
            question = session.current_question
            console.print(f"[dim]{index + 1}/{len(questions)}  Score: {session.score}[/dim]")
            console.print(f"[bold]Q{index + 1}.[/bold] {question.prompt}")
            try:
                answer = ask_answer(question)
                result = runner.run(session.submit(answer))
                if result.correct:
                    console.print("[green]Correct![/green]")
                else:
                    console.print("[red]Incorrect.[/red]")
                if question.answer_text and question.kind in (CLOZE, TRUEFALSE):
                    console.print(f"[dim]Answer: {question.answer_text}[/dim]")
                console.print()
                runner.run(session.wait_for_advance())
            except KeyboardInterrupt:
                session.abandon()
                console.print("\n[dim]Quiz abandoned. Answers so far are saved.[/dim]")
                return session.score
    console.print(f"[bold]Score: {session.score}/{len(questions)} ({session.score/len(questions)*100:.0f}%)[/bold]\n")
    return session.score


def cmd_quiz(store: ReviewStore, notes: list, mode: str, config: QuizConfig):
    console.print(f"\n[bold]{MODE_TITLES[mode]}[/bold]")
    questions = build_quiz(notes, mode, config)
    run_quiz_session(store, questions, config)


def cmd_stats(store: ReviewStore):
    stats = asyncio.run(store.get_stats())
    accuracy = stats.accuracy
    color = get_accuracy_color(accuracy)

    table = Table(title="Review Statistics")
    table.add_column("Metric", style="cyan")
    table.add_column("Value", justify="right")
    table.add_row("Questions reviewed", str(stats.total_questions))
    table.add_row("Correct", str(stats.correct_answers))
    table.add_row("Accuracy", f"[{color}]{accuracy:.0f}% ({get_accuracy_label(accuracy)})[/{color}]")
    table.add_row("Level", f"{get_mastery_label(stats.average_ease)} (ease {stats.average_ease:.0f})")
    table.add_row("Due now", f"{stats.due_today} ({due_ratio(stats):.0f}%)")
    table.add_row("Streak", f"{stats.streak_days} day(s)")
    console.print(table)

    dots = "".join("[green]●[/green]" if filled else "[dim]○[/dim]" for filled in streak_dots(stats.streak_days))
    console.print(f"\n  Week: {dots}")
    badges = [
        f"[yellow]{label}[/yellow]" if unlocked else f"[dim]{label}[/dim]"
        for label, unlocked in get_achievements(stats)
    ]
    console.print("  Achievements: " + "  ".join(badges))
    if stats.last_session:
        last = datetime.fromtimestamp(stats.last_session / 1000)
        console.print(f"  [dim]Last session: {last:%d %b %H:%M}[/dim]")


def cmd_load(path: str = None) -> list:
    path = path or Prompt.ask("Notes file or folder")
    if not Path(path).exists():
        console.print(f"[red]File not found: {path}[/red]")
        return []
    notes = load_notes(path)
    console.print(f"[green]Loaded {len(notes)} note(s) from {path}[/green]")
    return notes


def main():
    logging.basicConfig(
        level=os.environ.get("NOTEQUIZ_LOG", "WARNING").upper(),
        format="%(levelname)s:%(name)s:%(message)s",
        stream=sys.stderr,
    )
    config = load_config()
    store = ReviewStore(SqliteKeyValueStore(config.db_path))
    notes = cmd_load(sys.argv[1]) if len(sys.argv) > 1 else []

    show_welcome()

    while True:
        show_menu()
        choice = Prompt.ask("\n[bold]>[/bold]", default="day").strip().lower()
        try:
            if choice in MODE_TITLES:
                cmd_quiz(store, notes, choice, config)
            elif choice == "stats":
                cmd_stats(store)
            elif choice == "load":
                notes = cmd_load() or notes
            elif choice in ("quit", "exit", "q"):
                console.print("[dim]See you at the next review![/dim]")
                break
            else:
                console.print("[red]Unknown command. Try again.[/red]")
        except KeyboardInterrupt:
            console.print("\n[dim]Use 'quit' to exit.[/dim]")
        except (NoteQuizError, ValueError, OSError) as e:
            logger.debug("Command %s failed", choice, exc_info=True)
            console.print(f"[red]Error: {e}[/red]")


if __name__ == "__main__":
    main()
