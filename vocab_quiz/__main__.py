"""CLI entry point for vocab-quiz.

Usage:
  python -m vocab_quiz serve [--host HOST] [--port PORT]
  python -m vocab_quiz chapters
  python -m vocab_quiz browse [CHAPTER]
  python -m vocab_quiz quiz [--count N|all] [--chapters A,B] [--question FIELD] [--answer FIELD]
"""
from __future__ import annotations

import asyncio
import sys

from vocab_quiz.config import Settings, load_settings
from vocab_quiz.errors import EmptySelectionError, LoadError
from vocab_quiz.store import ChapterIndex


def main():
    args = sys.argv[1:]
    command = args[0] if args else "serve"

    if command == "serve":
        _serve(args[1:])
    elif command == "chapters":
        _chapters()
    elif command == "browse":
        _browse(args[1:])
    elif command == "quiz":
        _quiz(args[1:])
    else:
        print(f"Unknown command: {command}")
        print("Commands: serve, chapters, browse, quiz")
        sys.exit(1)


def _parse_flag(args: list[str], name: str, default: str) -> str:
    for i, a in enumerate(args):
        if a == name and i + 1 < len(args):
            return args[i + 1]
    return default


def _load(settings: Settings) -> ChapterIndex:
    from vocab_quiz.loader import load_vocabulary

    try:
        return asyncio.run(
            load_vocabulary(settings.resolved_data_source(), timeout=settings.fetch_timeout)
        )
    except LoadError as e:
        print(f"Failed to load quiz data: {e}")
        sys.exit(1)


def _serve(args: list[str]):
    import uvicorn

    port = int(_parse_flag(args, "--port", "8765"))
    host = _parse_flag(args, "--host", "127.0.0.1")
    print(f"Starting Vocab Quiz on http://{host}:{port}")
    print("Press Ctrl+C to stop\n")
    uvicorn.run(
        "vocab_quiz.app:app",
        host=host,
        port=port,
        reload=False,
        timeout_graceful_shutdown=5,
    )


def _chapters():
    index = _load(load_settings())
    print(f"{len(index.entries)} entries in {len(index)} chapters\n")
    for key in index.chapters:
        print(f"  {key:<20} {len(index[key]):>4}")


def _browse(args: list[str]):
    from vocab_quiz.browser import ChapterBrowser, display_script

    index = _load(load_settings())
    browser = ChapterBrowser(index)
    if browser.current_chapter is None:
        print("No vocabulary found.")
        return
    if args:
        try:
            browser.select_key(args[0])
        except KeyError:
            print(f"Unknown chapter: {args[0]}")
            print(f"Chapters: {', '.join(browser.chapters)}")
            sys.exit(1)

    while True:
        entries = browser.current_entries
        print(f"\nChapter: {browser.current_chapter} ({len(entries)} items)")
        print("-" * 60)
        for e in entries:
            print(f"  {display_script(e):<20} {e.meaning:<20} {e.romanization:<14} {e.ideographic or '(-)'}")
        try:
            cmd = input("\n[p]rev  [n]ext  [q]uit > ").strip().lower()
        except EOFError:
            return
        if cmd.startswith("p"):
            browser.previous()
        elif cmd.startswith("n"):
            browser.next()
        elif cmd.startswith("q"):
            return


def _quiz(args: list[str]):
    from vocab_quiz.models import QuizConfiguration
    from vocab_quiz.sampler import make_rng
    from vocab_quiz.session import QuizSession

    s = load_settings()
    error = s.validate()
    if error:
        print(f"Invalid settings in config.json: {error}")
        sys.exit(1)
    index = _load(s)

    chapters_arg = _parse_flag(args, "--chapters", "")
    chapters = [c.strip() for c in chapters_arg.split(",") if c.strip()] or index.chapters
    try:
        config = QuizConfiguration.from_dict(
            {
                "question_count": _parse_flag(args, "--count", str(s.default_question_count)),
                "chapters": chapters,
                "question_field": _parse_flag(args, "--question", s.default_question_field),
                "answer_field": _parse_flag(args, "--answer", s.default_answer_field),
            },
            total_entries=len(index.entries),
        )
    except ValueError as e:
        print(f"Invalid quiz options: {e}")
        sys.exit(1)

    rng = make_rng(s.random_seed) if s.random_seed is not None else None
    session = QuizSession(rng=rng, choice_count=s.choice_count)
    try:
        session.start(config, index.entries)
    except EmptySelectionError as e:
        print(e)
        sys.exit(1)

    while not session.is_finished:
        q = session.current_question()
        p = session.progress()
        labels = [chr(65 + i) for i in range(len(q.choices))]
        print(f"\nQuestion {p['current']} / {p['total']}")
        print(f"  {q.prompt_value}\n")
        for i, choice in enumerate(q.choices):
            print(f"  {labels[i]}. {choice}")

        while not q.is_answered:
            try:
                raw = input("> ").strip().upper()
            except EOFError:
                return
            if raw in labels:
                outcome = session.submit_answer(q.choices[labels.index(raw)])
                if outcome.is_correct:
                    print("Correct! (+1 Point)")
                else:
                    print(f"Incorrect. The correct answer is: {outcome.correct_value}")
                e = outcome.entry
                print(f"  {e.script_primary or '-'} / {e.script_secondary or '-'} / "
                      f"{e.romanization} / {e.ideographic or '-'} / {e.meaning}  [{e.chapter}]")
        session.advance()

    result = session.result()
    print(f"\nQuiz Finished! {result.score} / {result.total} ({result.percentage:.1f}%)")


if __name__ == "__main__":
    main()
