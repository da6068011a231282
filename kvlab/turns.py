"""Threads that take turns writing their character, coordinated by a condition variable."""

from __future__ import annotations

import argparse
import threading
from typing import Iterable, Optional, Sequence


def take_turns(chars: Iterable[str] = "ABC", rounds: int = 3) -> str:
    """Start one thread per character; they write in strict rotation ``rounds`` times each."""
    if rounds < 0:
        raise ValueError(f"rounds must not be negative, got {rounds}")
    chars = list(chars)
    output: list[str] = []
    condition = threading.Condition()
    current = 0

    def worker(turn: int, char: str) -> None:
        nonlocal current
        for _ in range(rounds):
            with condition:
                condition.wait_for(lambda: current == turn)
                output.append(char)
                current = (current + 1) % len(chars)
                condition.notify_all()

    threads = [threading.Thread(target=worker, args=(i, c)) for i, c in enumerate(chars)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()
    return "".join(output)


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Print characters from threads in turn.")
    parser.add_argument("--chars", default="ABC")
    parser.add_argument("--rounds", type=int, default=3)
    args = parser.parse_args(argv)
    print(take_turns(args.chars, args.rounds))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())