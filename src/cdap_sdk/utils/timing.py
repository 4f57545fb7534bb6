import time
from contextlib import contextmanager
from typing import Iterator


class Timer:
    def __init__(self) -> None:
        self.start = time.time()
        self.end = None

    @property
    def elapsed(self) -> float:
        return (self.end or time.time()) - self.start


@contextmanager
def time_block() -> Iterator[Timer]:
    timer = Timer()
    try:
        yield timer
    finally:
        timer.end = time.time()
