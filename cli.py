#!/usr/bin/env python3
"""
Cardwise - study flashcards from exam questions.
CLI interface for importing question sets and studying them.
"""

import logging
import re
import time
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from config import Config
from core.answer_grader import AnswerGrader, format_letters
from core.bulk_extractor import BulkExtractor
from core.choice_parser import ParsedQuestion, parse_choices, question_stem
from core.drill_engine import DrillEngine, DrillPhase
from core.dto import QuestionRecord, StudySet
from core.match_game import MatchBoard, PickOutcome
from core.mini_games import SpeedRound, TrueFalseRound
from core.quiz_session import QuizProgress, QuizSession
from core.study_config import clamp_range, default_range, generate_presets, select_range
from storage.database import Database

console = Console()
grader = AnswerGrader()

LETTERS = re.compile(r'[A-Ja-j]')
QUIT_WORDS = ("q", "quit")

# Prompt commands
QUIT = "q"
PREVIOUS = "p"
CLEAR = "-"


def _configure_logging(verbose: bool):
    level = logging.DEBUG if verbose else getattr(logging, Config.LOG_LEVEL, logging.WARNING)
    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="%H:%M:%S",
        handlers=[RichHandler(show_path=False, rich_tracebacks=True)],
    )


def _open_db() -> Database:
    Config.ensure_dirs()
    return Database()


def _resolve_set(db: Database, ref: str) -> StudySet:
    """Find a set by id or by its number in `cardwise sets`."""
    if ref.isdigit():
        summaries = db.get_all_sets()
        number = int(ref)
        if 1 <= number <= len(summaries):
            return db.get_set(summaries[number - 1]['id'])
    return db.get_set(ref)


def _print_question(parsed: ParsedQuestion, header: str):
    body = escape(parsed.stem) or "[dim](no question text)[/dim]"
    if parsed.choices:
        body += "\n\n" + "\n".join(f"[cyan]{c.letter}.[/cyan] {escape(c.text)}" for c in parsed.choices)
    console.print(Panel(body, title=header, title_align="left"))


def _correct_text(parsed: ParsedQuestion, correct_answer: str) -> str:
    """Correct answer as shown after a question."""
    if parsed.is_free_response:
        return escape(correct_answer)
    lines = []
    for letter in sorted(grader.correct_letters(correct_answer)):
        choice = parsed.choice(letter)
        lines.append(f"{letter}. {escape(choice.text)}" if choice else letter)
    return "; ".join(lines)


def _prompt_letters(parsed: ParsedQuestion, multi: bool, allow_blank: bool = False,
                    allow_previous: bool = False) -> Union[str, List[str]]:
    """Ask for answer letters.

    Returns:
        Upper-case letters, an empty list for a blank answer (when allowed),
        or one of QUIT, PREVIOUS, CLEAR
    """
    if multi:
        prompt = "Select all that apply (e.g. A,C)"
    else:
        prompt = "Your answer"
    if allow_previous:
        prompt += " [p: previous, -: clear, q: quit]"
    else:
        prompt += " [q: quit]"

    while True:
        raw = click.prompt(prompt, default="", show_default=False).strip()
        if raw.lower() in QUIT_WORDS:
            return QUIT
        if allow_previous and raw.lower() == PREVIOUS:
            return PREVIOUS
        if allow_blank and raw == CLEAR:
            return CLEAR
        if not raw and allow_blank:
            return []

        letters = []
        for letter in LETTERS.findall(raw):
            if letter.upper() not in letters:
                letters.append(letter.upper())

        unknown = [letter for letter in letters if parsed.choice(letter) is None]
        if not letters or unknown:
            console.print(f"[yellow]Choose from: {', '.join(parsed.letters)}[/yellow]")
            continue
        if not multi and len(letters) > 1:
            console.print("[yellow]Pick a single letter.[/yellow]")
            continue
        return letters


def _prepare_session(db: Database, study_set: StudySet, start: Optional[int],
                     end: Optional[int], mode: str) -> StudySet:
    """Pick the question range for a study mode and remember it."""
    total = len(study_set.questions)
    if total == 0:
        raise click.ClickException(f"Set '{study_set.title}' has no questions")

    settings = db.get_settings()
    range_start, range_end = default_range(total, settings, db.get_last_range(study_set.id))

    if start is None and end is None and settings.show_config_before_study:
        console.print(f"\n[bold cyan]Configure {mode}[/bold cyan] - {escape(study_set.title)}")
        presets = generate_presets(total)
        console.print("Presets: " + ", ".join(p.label for p in presets))
        range_start = click.prompt("From question", default=range_start, type=int)
        range_end = click.prompt("To question", default=range_end, type=int)
    else:
        range_start = start if start is not None else range_start
        range_end = end if end is not None else range_end

    range_start, range_end = clamp_range(range_start, range_end, total)
    db.save_last_range(study_set.id, range_start, range_end)
    db.conn.commit()
    return select_range(study_set, range_start, range_end)


def _save_progress(db: Database, set_id: str, mode: str, payload: Dict[str, Any]):
    """Store a session snapshot right away so an interrupted session can resume."""
    db.save_progress(set_id, mode, payload)
    db.conn.commit()


def range_options(func):
    func = click.option('--end', '-e', type=int, help='Last question number (inclusive)')(func)
    func = click.option('--start', '-s', type=int, help='First question number')(func)
    return func


@click.group()
@click.version_option(version="0.1.0", prog_name="Cardwise")
@click.option('--verbose', '-v', is_flag=True, help='Enable debug logging')
def cli(verbose):
    """Cardwise - turn exam questions into flashcards, drills and quizzes."""
    _configure_logging(verbose)


@cli.command()
def init():
    """Initialize the Cardwise database."""
    console.print("\n[bold cyan]Initializing Cardwise...[/bold cyan]\n")

    try:
        Config.ensure_dirs()
        with Database() as db:
            db.initialize()

        console.print("[bold green]Cardwise initialized successfully![/bold green]\n")
        console.print(f"Database: {Config.DB_PATH}")
        console.print(f"Data directory: {Config.DATA_DIR}\n")
        console.print("Next steps:")
        console.print("  • cardwise import <FILE> --title <TITLE> - Import questions")
        console.print("  • cardwise --help - See all commands\n")

    except Exception as e:
        console.print(f"\n[bold red]Error:[/bold red] {e}\n")
        raise click.Abort()


@cli.command(name="import")
@click.argument('source', type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option('--title', '-t', help='Set title (defaults to the file name)')
@click.option('--yes', '-y', is_flag=True, help='Save without asking')
def import_set(source, title, yes):
    """Import questions from a text file or PDF."""
    try:
        extractor = BulkExtractor()
        if source.suffix.lower() == ".pdf":
            console.print(f"\n[bold cyan]Reading {source.name}...[/bold cyan]")
            text, result = extractor.extract_pdf(source)
        else:
            text = source.read_text(encoding="utf-8")
            result = extractor.extract(text)

        if not result.found:
            console.print(f"\n[yellow]{result.message}[/yellow]\n")
            if source.suffix.lower() == ".pdf":
                text_path = source.with_suffix(".txt")
                text_path.write_text(text, encoding="utf-8")
                console.print(f"Extracted text saved to {text_path} - edit it and import that file.\n")
            return

        table = Table(title=f"\nFound {len(result.questions)} questions")
        table.add_column("#", style="cyan", no_wrap=True)
        table.add_column("Question", style="white")
        table.add_column("Choices", style="magenta")
        table.add_column("Answer", style="green")
        for number, question in enumerate(result.questions, 1):
            parsed = parse_choices(question.question_text)
            table.add_row(
                str(number),
                escape(question_stem(question.question_text, max_length=70)),
                str(len(parsed.choices)),
                escape(question.correct_answer),
            )
        console.print(table)
        if result.skipped:
            console.print(f"[dim]{result.skipped} fragments skipped[/dim]")

        title = (title or source.stem).strip()
        if not title:
            raise click.ClickException("Please enter a title for your set")
        if not yes and not click.confirm(f"Save {len(result.questions)} questions as '{title}'?", default=True):
            console.print("Import cancelled.\n")
            return

        study_set = StudySet.from_records(title, result.questions)
        with _open_db() as db:
            db.add_set(study_set)
        console.print(f"\n[bold green]Saved[/bold green] {escape(study_set.title)} ({study_set.id})\n")

    except (click.ClickException, click.Abort):
        raise
    except Exception as e:
        console.print(f"\n[bold red]Error:[/bold red] {e}\n")
        raise click.Abort()


@cli.command()
def sets():
    """List all study sets."""
    try:
        with _open_db() as db:
            summaries = db.get_all_sets()

        if not summaries:
            console.print("\n[yellow]No sets yet. Use 'cardwise import' to add one.[/yellow]\n")
            return

        table = Table(title="\nStudy Sets")
        table.add_column("#", style="cyan", no_wrap=True)
        table.add_column("ID", style="dim")
        table.add_column("Title", style="white")
        table.add_column("Questions", style="green", justify="right")
        table.add_column("Updated", style="magenta")
        for number, summary in enumerate(summaries, 1):
            updated = time.strftime("%Y-%m-%d %H:%M", time.localtime(summary['updated_at'] / 1000))
            table.add_row(
                str(number), summary["id"], escape(summary["title"]),
                str(summary['question_count']), updated,
            )
        console.print(table)
        console.print(f"\nTotal: {len(summaries)} sets\n")

    except Exception as e:
        console.print(f"\n[bold red]Error:[/bold red] {e}\n")
        raise click.Abort()


@cli.command()
@click.argument('set_ref')
def show(set_ref):
    """Show every question of a set."""
    try:
        with _open_db() as db:
            study_set = _resolve_set(db, set_ref)

        console.print(f"\n[bold cyan]{escape(study_set.title)}[/bold cyan] ({len(study_set.questions)} questions)\n")
        for number, question in enumerate(study_set.questions, 1):
            parsed = parse_choices(question.question_text)
            _print_question(parsed, f"Question {number}")
            console.print(f"  [green]Answer:[/green] {_correct_text(parsed, question.correct_answer)}\n")

    except Exception as e:
        console.print(f"\n[bold red]Error:[/bold red] {e}\n")
        raise click.Abort()


@cli.command()
@click.argument('set_ref')
@click.option('--yes', '-y', is_flag=True, help='Delete without asking')
def delete(set_ref, yes):
    """Delete a study set."""
    try:
        with _open_db() as db:
            study_set = _resolve_set(db, set_ref)
            if not yes and not click.confirm(f"Delete '{study_set.title}'?", default=False):
                return
            db.delete_set(study_set.id)
        console.print(f"\nDeleted {escape(study_set.title)}\n")

    except click.Abort:
        raise
    except Exception as e:
        console.print(f"\n[bold red]Error:[/bold red] {e}\n")
        raise click.Abort()


def _edit_questions(questions: List[QuestionRecord]) -> List[QuestionRecord]:
    """Walk through existing questions, then collect new ones.

    Enter keeps a value, "-" as question text deletes the question and a
    blank new question ends the list.
    """
    drafts: List[QuestionRecord] = []
    for number, question in enumerate(questions, 1):
        console.print(Panel(escape(question.question_text), title=f"Question {number}", title_align="left"))
        text = click.prompt("Question text (Enter keeps, - deletes)", default="", show_default=False).strip()
        if text == CLEAR:
            continue
        answer = click.prompt("Correct answer", default=question.correct_answer)
        drafts.append(QuestionRecord(
            id=question.id,
            question_text=text or question.question_text,
            correct_answer=answer,
        ))

    while True:
        text = click.prompt("New question text (Enter to finish)", default="", show_default=False)
        if not text.strip():
            return drafts
        answer = click.prompt("Correct answer (e.g. B or A,C)", default="", show_default=False)
        drafts.append(QuestionRecord(id="", question_text=text, correct_answer=answer))


@cli.command()
@click.option('--title', '-t', prompt='Title', help='Set title')
def create(title):
    """Create a set by typing its questions."""
    try:
        new_set = StudySet.from_records(title, [])
        new_set = new_set.revise(title, _edit_questions([]), timestamp=new_set.created_at)
        with _open_db() as db:
            db.add_set(new_set)
        console.print(f"\n[bold green]Saved[/bold green] {escape(new_set.title)} "
                      f"({len(new_set.questions)} questions)\n")

    except (click.ClickException, click.Abort):
        raise
    except ValueError as e:
        raise click.ClickException(str(e))
    except Exception as e:
        console.print(f"\n[bold red]Error:[/bold red] {e}\n")
        raise click.Abort()


@cli.command()
@click.argument('set_ref')
@click.option('--title', '-t', help='New title (asked for if not given)')
@click.option('--title-only', is_flag=True, help='Rename without editing questions')
def edit(set_ref, title, title_only):
    """Edit a set's title and questions."""
    try:
        with _open_db() as db:
            study_set = _resolve_set(db, set_ref)
            if title is None:
                title = click.prompt("Title", default=study_set.title)
            drafts = study_set.questions if title_only else _edit_questions(study_set.questions)

            revised = db.update_set(study_set.revise(title, drafts))
            db.clear_progress(revised.id)
        console.print(f"\n[bold green]Saved[/bold green] {escape(revised.title)} "
                      f"({len(revised.questions)} questions)\n")

    except (click.ClickException, click.Abort):
        raise
    except ValueError as e:
        raise click.ClickException(str(e))
    except Exception as e:
        console.print(f"\n[bold red]Error:[/bold red] {e}\n")
        raise click.Abort()


@cli.command()
@click.argument('set_ref')
@range_options
def flashcards(set_ref, start, end):
    """Flip through flashcards."""
    try:
        with _open_db() as db:
            study_set = _prepare_session(db, _resolve_set(db, set_ref), start, end, "Flashcards")

        questions = study_set.questions
        index = 0
        while 0 <= index < len(questions):
            question = questions[index]
            parsed = parse_choices(question.question_text)
            console.print(Panel(escape(parsed.stem), title=f"Card {index + 1} / {len(questions)}", title_align="left"))
            click.prompt("Press Enter to flip", default="", show_default=False)
            console.print(Panel(_correct_text(parsed, question.correct_answer), title="Answer",
                                title_align="left", style="green"))

            action = click.prompt("[n]ext, [p]revious, [q]uit", default="n", show_default=False).strip().lower()
            if action in QUIT_WORDS:
                break
            index = max(index - 1, 0) if action == "p" else index + 1

        console.print("\nDone.\n")

    except (click.ClickException, click.Abort):
        raise
    except Exception as e:
        console.print(f"\n[bold red]Error:[/bold red] {e}\n")
        raise click.Abort()


@cli.command()
@click.argument('set_ref')
@range_options
def learn(set_ref, start, end):
    """Drill questions until every one is answered correctly."""
    try:
        with _open_db() as db:
            study_set = _prepare_session(db, _resolve_set(db, set_ref), start, end, "Learn")
            settings = db.get_settings()
            question_ids = [q.id for q in study_set.questions]

            engine = DrillEngine(study_set.questions)
            saved = db.get_progress(study_set.id, "learn")
            if saved and saved.get("questionIds") == question_ids and \
                    click.confirm("Resume your last learn session?", default=True):
                engine = DrillEngine.restore(study_set.questions, saved["state"])

            def snapshot():
                return {"questionIds": question_ids, "state": engine.state.to_dict()}

            announced_review = engine.phase == DrillPhase.REVIEW
            while not engine.is_complete:
                if engine.phase == DrillPhase.REVIEW and not announced_review:
                    console.print("\n[bold magenta]Let's review the ones you missed[/bold magenta]")
                    announced_review = True

                question = engine.current_question
                parsed = parse_choices(question.question_text)
                _print_question(parsed, engine.progress_label())

                if parsed.is_free_response:
                    raw = click.prompt("Think of the answer, then press Enter [q: quit]",
                                       default="", show_default=False)
                    if raw.strip().lower() in QUIT_WORDS:
                        _save_progress(db, study_set.id, "learn", snapshot())
                        console.print("\nProgress saved.\n")
                        return
                    console.print(f"[green]Answer:[/green] {escape(question.correct_answer)}")
                    verdict = click.prompt("Did you get it right?", type=click.Choice(["y", "n", "q"]),
                                           default="y")
                    if verdict == QUIT:
                        _save_progress(db, study_set.id, "learn", snapshot())
                        console.print("\nProgress saved.\n")
                        return
                    was_correct = verdict == "y"
                    engine.record_answer(was_correct)
                else:
                    letters = _prompt_letters(parsed, grader.is_multi_answer(question.correct_answer))
                    if letters == QUIT:
                        _save_progress(db, study_set.id, "learn", snapshot())
                        console.print("\nProgress saved.\n")
                        return
                    was_correct = engine.submit(letters).is_correct
                    if was_correct:
                        console.print("[bold green]Correct![/bold green]")
                    else:
                        console.print(f"[bold red]Incorrect.[/bold red] Correct: "
                                      f"{_correct_text(parsed, question.correct_answer)}")

                if not (was_correct and settings.auto_advance_on_correct):
                    click.pause()
                engine.advance()
                _save_progress(db, study_set.id, "learn", snapshot())

            db.clear_progress(study_set.id, "learn")
            console.print(f"\n[bold green]Great job![/bold green] "
                          f"You've mastered all {engine.total} terms\n")

    except (click.ClickException, click.Abort):
        raise
    except Exception as e:
        console.print(f"\n[bold red]Error:[/bold red] {e}\n")
        raise click.Abort()


@cli.command()
@click.argument('set_ref')
@range_options
def quiz(set_ref, start, end):
    """Take a test graded at the end."""
    try:
        with _open_db() as db:
            study_set = _prepare_session(db, _resolve_set(db, set_ref), start, end, "Test")
            session = QuizSession(study_set.questions)

            saved = db.get_progress(study_set.id, "quiz")
            if saved:
                progress = QuizProgress.from_dict(saved)
                if progress.is_resumable(len(session.questions)):
                    percent = round(progress.answered_count / len(session.questions) * 100)
                    if click.confirm(f"Resume your quiz ({percent}% answered)?", default=True):
                        session.resume(progress)
                else:
                    db.clear_progress(study_set.id, "quiz")

            while True:
                question = session.current_question
                parsed = parse_choices(question.question_text)
                multi = grader.is_multi_answer(question.correct_answer)
                header = f"Question {session.current_index + 1} / {len(session.questions)}"
                if multi:
                    header += f" - select all that apply ({len(grader.correct_letters(question.correct_answer))} answers)"
                _print_question(parsed, header)
                current = session.selected_answers[session.current_index]
                if current:
                    console.print(f"[dim]Current answer: {format_letters(current)} "
                                  f"(Enter keeps it)[/dim]")

                if parsed.is_free_response:
                    raw = click.prompt("Your answer (letters, blank to skip) [p: previous, -: clear, q: quit]",
                                       default="", show_default=False).strip()
                    if raw.lower() in QUIT_WORDS:
                        letters = QUIT
                    elif raw.lower() == PREVIOUS or raw == CLEAR:
                        letters = raw.lower()
                    else:
                        letters = [letter.upper() for letter in LETTERS.findall(raw)]
                else:
                    letters = _prompt_letters(parsed, multi, allow_blank=True, allow_previous=True)

                if letters == QUIT:
                    _save_progress(db, study_set.id, "quiz", session.progress().to_dict())
                    console.print("\nProgress saved.\n")
                    return
                if letters == PREVIOUS:
                    if not session.previous():
                        console.print("[yellow]Already at the first question.[/yellow]")
                    continue
                if letters == CLEAR:
                    session.select([])
                elif letters:
                    session.select(letters)
                _save_progress(db, study_set.id, "quiz", session.progress().to_dict())

                if not session.next():
                    break

            report = session.submit()
            db.clear_progress(study_set.id, "quiz")

        table = Table(title=f"\n{report.percentage}% - {report.score} of {report.total} correct")
        table.add_column("#", style="cyan", no_wrap=True)
        table.add_column("Question", style="white")
        table.add_column("Yours", style="magenta")
        table.add_column("Correct", style="green")
        table.add_column("", no_wrap=True)
        for number, (question, result) in enumerate(zip(session.questions, report.results), 1):
            table.add_row(
                str(number),
                escape(question_stem(question.question_text, max_length=60)),
                format_letters(result.selected) or "-",
                format_letters(result.correct),
                "[green]✓[/green]" if result.is_correct else "[red]✗[/red]",
            )
        console.print(table)
        console.print()

    except (click.ClickException, click.Abort):
        raise
    except Exception as e:
        console.print(f"\n[bold red]Error:[/bold red] {e}\n")
        raise click.Abort()


@cli.command()
@click.argument('set_ref')
@range_options
def match(set_ref, start, end):
    """Match questions with their answers."""
    try:
        with _open_db() as db:
            study_set = _prepare_session(db, _resolve_set(db, set_ref), start, end, "Match")

        board = MatchBoard(study_set.questions)
        started = time.monotonic()

        while not board.is_complete:
            table = Table(title=f"\n{board.matched_pairs} / {board.pair_count} matched")
            table.add_column("#", style="cyan", no_wrap=True)
            table.add_column("Card", style="white")
            for number, card in enumerate(board.cards, 1):
                content = escape(card.content)
                if card.id in board.matched:
                    content = f"[dim strike]{content}[/dim strike]"
                table.add_row(str(number), content)
            console.print(table)

            raw = click.prompt("Pick two cards (e.g. 3 7)", default="", show_default=False).strip()
            if raw.lower() in QUIT_WORDS:
                return
            numbers = [int(n) for n in re.findall(r'\d+', raw)]
            if len(numbers) != 2 or not all(1 <= n <= len(board.cards) for n in numbers):
                console.print(f"[yellow]Enter two card numbers between 1 and {len(board.cards)}.[/yellow]")
                continue

            picked = [board.cards[n - 1].id for n in numbers]
            if picked[0] == picked[1] or any(card_id in board.matched for card_id in picked):
                console.print("[yellow]Pick two different unmatched cards.[/yellow]")
                continue

            board.pick(picked[0])
            outcome = board.pick(picked[1])
            if outcome == PickOutcome.MATCHED:
                console.print("[bold green]Match![/bold green]")
            else:
                console.print("[bold red]Not a match.[/bold red]")

        elapsed = int(time.monotonic() - started)
        console.print(f"\n[bold green]Matched all {board.pair_count} pairs[/bold green] "
                      f"in {elapsed // 60}:{elapsed % 60:02d} with {board.mistakes} mistakes\n")

    except (click.ClickException, click.Abort):
        raise
    except Exception as e:
        console.print(f"\n[bold red]Error:[/bold red] {e}\n")
        raise click.Abort()


def _play_true_false(questions: List[QuestionRecord]):
    game = TrueFalseRound(questions)
    while not game.is_complete:
        card = game.current_card
        body = (f"{escape(question_stem(card.question.question_text))}\n\n"
                f"[bold]{escape(card.shown_answer)}[/bold]")
        console.print(Panel(body, title=f"{game.current_index + 1} / {game.total}  Streak: {game.streak}",
                            title_align="left"))

        verdict = click.prompt("Is this the correct answer? [t/f, q: quit]",
                               type=click.Choice(["t", "f", "q"]), show_choices=False)
        if verdict == QUIT:
            return
        if game.answer(verdict == "t"):
            console.print("[bold green]Correct![/bold green]")
        else:
            console.print("[bold red]Wrong.[/bold red]")

    console.print(f"\n[bold green]{game.percentage}%[/bold green] - {game.score} of {game.total} correct. "
                  f"Best streak: {game.best_streak}\n")


def _play_speed_round(questions: List[QuestionRecord]):
    game = SpeedRound(questions)
    started = time.monotonic()
    while not game.is_complete:
        question = game.current_question
        _print_question(parse_choices(question.question_text),
                        f"Speed Round {game.current_index + 1} / {game.total}  Score: {game.score}")

        raw = click.prompt("Your answer [q: quit]", default="", show_default=False).strip()
        if raw.lower() in QUIT_WORDS:
            return
        letters = LETTERS.findall(raw)
        if game.answer(letters[0] if letters else ""):
            console.print("[bold green]Correct![/bold green]")
        else:
            console.print("[bold red]Wrong.[/bold red]")

    elapsed = int(time.monotonic() - started)
    console.print(f"\n[bold green]Score: {game.score} / {game.total}[/bold green] "
                  f"in {elapsed // 60}:{elapsed % 60:02d}\n")


@cli.command()
@click.argument('set_ref')
@click.option('--game', '-g', type=click.Choice(['truefalse', 'speed']), default='truefalse',
              show_default=True, help='Which game to play')
@range_options
def games(set_ref, game, start, end):
    """Play a true/false or speed round."""
    try:
        with _open_db() as db:
            study_set = _prepare_session(db, _resolve_set(db, set_ref), start, end, "Games")

        if game == 'speed':
            _play_speed_round(study_set.questions)
        else:
            _play_true_false(study_set.questions)

    except (click.ClickException, click.Abort):
        raise
    except Exception as e:
        console.print(f"\n[bold red]Error:[/bold red] {e}\n")
        raise click.Abort()


@cli.command()
@click.option('--set', 'assignments', multiple=True, metavar='KEY=VALUE', help='Change a setting')
@click.option('--reset', is_flag=True, help='Restore default settings')
@click.option('--clear-progress', is_flag=True, help='Forget saved sessions and ranges')
def settings(assignments, reset, clear_progress):
    """View or change study settings."""
    try:
        with _open_db() as db:
            if reset:
                db.reset_settings()
                console.print("Settings reset to defaults.")

            current = db.get_settings()
            if assignments:
                for assignment in assignments:
                    key, sep, value = assignment.partition("=")
                    if not sep:
                        raise click.BadParameter(f"Expected KEY=VALUE, got '{assignment}'")
                    current.update(key.strip(), value)
                db.save_settings(current)
                console.print("[green]Saved![/green]")

            if clear_progress and click.confirm("Clear all saved progress? This cannot be undone.", default=False):
                cleared = db.clear_progress() + db.clear_last_ranges()
                console.print(f"All progress cleared ({cleared} entries).")

        table = Table(title="\nStudy Settings")
        table.add_column("Setting", style="cyan")
        table.add_column("Value", style="white")
        for key, value in current.to_dict().items():
            table.add_row(key, str(value).lower() if isinstance(value, bool) else str(value))
        console.print(table)
        console.print()

    except (click.ClickException, click.Abort):
        raise
    except ValueError as e:
        raise click.BadParameter(str(e))
    except Exception as e:
        console.print(f"\n[bold red]Error:[/bold red] {e}\n")
        raise click.Abort()


if __name__ == '__main__':
    cli()
