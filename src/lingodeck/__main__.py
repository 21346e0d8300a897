"""Command line entry point for LingoDeck."""
import argparse
import asyncio
import sys
from pathlib import Path
from typing import Callable, List, Optional

from lingodeck.app import LingoDeck
from lingodeck.config import ensure_directories, settings
from lingodeck.exceptions import LingoDeckError
from lingodeck.logging_config import get_logger, setup_logging
from lingodeck.models.progress_models import LearningSession, WordStat, summarize_progress

logger = get_logger(__name__)


def format_session(session: LearningSession) -> str:
    mark = "+" if session.correct else "-"
    return f"{mark} {session.word} -> {session.translation}  ({session.timestamp:%Y-%m-%d %H:%M:%S})"


def format_stat(stat: WordStat) -> str:
    return (
        f"{stat.word}: {stat.correct_attempts}/{stat.total_attempts} correct, "
        f"{stat.accuracy}% accuracy, last practiced {stat.last_practiced:%Y-%m-%d %H:%M:%S}"
    )


async def cmd_translate(app: LingoDeck, args: argparse.Namespace) -> int:
    print(await app.client.translate(args.text, args.source, args.target))
    return 0


async def cmd_speak(app: LingoDeck, args: argparse.Namespace) -> int:
    audio = await app.client.synthesize_speech(args.text, args.language)
    if not audio:
        return 0
    output = Path(args.output) if args.output else settings.paths.audio_dir / "speech.mp3"
    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_bytes(audio)
    print(output)
    return 0


async def cmd_transcribe(app: LingoDeck, args: argparse.Namespace) -> int:
    audio = Path(args.audio).read_bytes()
    print(await app.client.transcribe(audio, args.language))
    return 0


async def cmd_record(app: LingoDeck, args: argparse.Namespace) -> int:
    session = await app.store.record_attempt(args.word, args.translation, args.correct)
    print(format_session(session))
    return 0


async def cmd_recent(app: LingoDeck, args: argparse.Namespace) -> int:
    sessions = await app.store.list_recent(args.limit)
    if not sessions:
        print("No learning sessions yet.")
    for session in sessions:
        print(format_session(session))
    return 0


async def cmd_stats(app: LingoDeck, args: argparse.Namespace) -> int:
    stats = await app.store.list_word_stats()
    if not stats:
        print("No word statistics yet.")
        return 0
    summary = summarize_progress(stats)
    print(
        f"Total sessions: {summary.total_sessions}, words practiced: {summary.words_practiced}, "
        f"average accuracy: {summary.average_accuracy}%"
    )
    for stat in stats:
        print(format_stat(stat))
    return 0


async def cmd_clear(app: LingoDeck, args: argparse.Namespace) -> int:
    if not args.yes:
        reply = input("Are you sure you want to delete all learning progress? [y/N] ")
        if reply.strip().lower() not in ("y", "yes"):
            print("Cancelled.")
            return 0
    await app.store.clear_all()
    print("All learning progress has been cleared.")
    return 0


async def cmd_sample(app: LingoDeck, args: argparse.Namespace) -> int:
    sessions = await app.add_sample_data()
    print(f"Added {len(sessions)} sample sessions.")
    return 0


async def cmd_translate_words(app: LingoDeck, args: argparse.Namespace) -> int:
    summary = await app.word_list.translate_missing(
        app.client,
        count=args.count,
        from_lang=settings.flashcards.source_language,
        to_lang=settings.flashcards.target_language,
        delay=settings.flashcards.translate_delay,
    )
    print(f"Successful: {summary.successful}")
    print(f"Failed: {summary.failed}")
    print(f"Perfect matches: {summary.perfect_matches}")
    print(f"Success rate: {summary.success_rate}%")
    if summary.remaining > 0:
        print(f"Remaining words: {summary.remaining} (run again to translate more)")
    return 0


async def cmd_practice(app: LingoDeck, args: argparse.Namespace) -> int:
    cards = app.word_list.build_flashcards(app.word_list.load())
    session = app.flashcards.start_session(cards, args.cards, args.repetitions)
    while session.current_card is not None:
        card = session.current_card
        answer = input(f"[{session.current_repetition}/{session.repetitions}] {card.word}: ")
        result = await app.flashcards.check_translation(session, answer)
        print(result.feedback)
        session.next_card()
    print(app.flashcards.summary(session))
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="lingodeck", description="Language learning companion")
    parser.add_argument("--log-level", default=None, help="Override LOG_LEVEL")
    sub = parser.add_subparsers(dest="command", required=True)

    p = sub.add_parser("translate", help="Translate text")
    p.add_argument("text")
    p.add_argument("--from", dest="source", default=settings.flashcards.source_language)
    p.add_argument("--to", dest="target", default=settings.flashcards.target_language)
    p.set_defaults(handler=cmd_translate)

    p = sub.add_parser("speak", help="Synthesize speech to an MP3 file")
    p.add_argument("text")
    p.add_argument("--language", default=settings.flashcards.source_language)
    p.add_argument("--output", default=None)
    p.set_defaults(handler=cmd_speak)

    p = sub.add_parser("transcribe", help="Transcribe an audio file")
    p.add_argument("audio")
    p.add_argument("--language", default=settings.flashcards.source_language)
    p.set_defaults(handler=cmd_transcribe)

    p = sub.add_parser("record", help="Record a practice attempt")
    p.add_argument("word")
    p.add_argument("translation")
    outcome = p.add_mutually_exclusive_group(required=True)
    outcome.add_argument("--correct", dest="correct", action="store_true")
    outcome.add_argument("--incorrect", dest="correct", action="store_false")
    p.set_defaults(handler=cmd_record)

    p = sub.add_parser("recent", help="Show recent sessions")
    p.add_argument("--limit", type=int, default=settings.storage.recent_limit)
    p.set_defaults(handler=cmd_recent)

    p = sub.add_parser("stats", help="Show per-word statistics")
    p.set_defaults(handler=cmd_stats)

    p = sub.add_parser("clear", help="Delete all learning progress")
    p.add_argument("--yes", action="store_true", help="Do not ask for confirmation")
    p.set_defaults(handler=cmd_clear)

    p = sub.add_parser("sample", help="Add sample sessions")
    p.set_defaults(handler=cmd_sample)

    p = sub.add_parser("translate-words", help="Fill in API translations in the word list")
    p.add_argument("count", nargs="?", type=int, default=None)
    p.set_defaults(handler=cmd_translate_words)

    p = sub.add_parser("practice", help="Practice flashcards in the terminal")
    p.add_argument("--cards", type=int, default=settings.flashcards.number_of_cards)
    p.add_argument("--repetitions", type=int, default=settings.flashcards.repetitions)
    p.set_defaults(handler=cmd_practice)

    return parser


async def run(args: argparse.Namespace, app_factory: Callable[[], LingoDeck] = LingoDeck) -> int:
    """Start the application, run one command and shut down."""
    async with app_factory() as app:
        return await args.handler(app, args)


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    ensure_directories()
    setup_logging(level=args.log_level)

    try:
        return asyncio.run(run(args))
    except LingoDeckError as e:
        logger.error(str(e))
        return 1
    except ValueError as e:
        logger.error(str(e))
        return 1
    except KeyboardInterrupt:
        logger.info("Received keyboard interrupt, shutting down...")
        return 130


if __name__ == "__main__":
    sys.exit(main())
