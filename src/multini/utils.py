import threading
from contextlib import contextmanager
from typing import Callable, Iterator, ParamSpec, TypeVar

P = ParamSpec("P")
T = TypeVar("T")


def copy_doc(doc_source: Callable[..., T], annotations: bool = False) -> Callable[
    [Callable[P, T]], Callable[P, T]
]:
    """Decorator to copy the docstring of doc_source to another.
    Inspired by Trevor (stackoverflow.com/users/13905088/trevor)
    from: stackoverflow.com/questions/68901049/
        copying-the-docstring-of-function-onto-another-function-by-name

    Args:
        doc_source (Callable): The source function to copy the docstring from.
        annotations (bool, optional): Whether to also copy annotations. Defaults to False.

    Returns:
        Callable: The decorated function.

    """

    def wrapped(doc_target: Callable[P, T]) -> Callable[P, T]:
        doc_target.__doc__ = doc_source.__doc__
        if annotations:
            doc_target.__annotations__ = doc_source.__annotations__
        return doc_target

    return wrapped


class ReadWriteLock:
    """Reader/writer lock. Any number of readers or a single writer may hold it.

    Waiting writers block new readers, so a steady stream of readers can't starve
    a writer. The lock is not reentrant: a thread holding it must not acquire it
    again in either mode.
    """

    def __init__(self) -> None:
        self._condition = threading.Condition(threading.Lock())
        self._readers = 0
        self._writer = False
        self._waiting_writers = 0

    def acquire_read(self) -> None:
        with self._condition:
            while self._writer or self._waiting_writers:
                self._condition.wait()
            self._readers += 1

    def release_read(self) -> None:
        with self._condition:
            if self._readers <= 0:
                raise RuntimeError("Can't release a read lock that isn't held.")
            self._readers -= 1
            if not self._readers:
                self._condition.notify_all()

    def acquire_write(self) -> None:
        with self._condition:
            self._waiting_writers += 1
            try:
                while self._writer or self._readers:
                    self._condition.wait()
            except BaseException:
                self._waiting_writers -= 1
                # readers may be waiting on us only
                self._condition.notify_all()
                raise
            self._waiting_writers -= 1
            self._writer = True

    def release_write(self) -> None:
        with self._condition:
            if not self._writer:
                raise RuntimeError("Can't release a write lock that isn't held.")
            self._writer = False
            self._condition.notify_all()

    @contextmanager
    def read(self) -> Iterator[None]:
        """Hold the lock shared for the duration of the with block."""
        self.acquire_read()
        try:
            yield
        finally:
            self.release_read()

    @contextmanager
    def write(self) -> Iterator[None]:
        """Hold the lock exclusively for the duration of the with block."""
        self.acquire_write()
        try:
            yield
        finally:
            self.release_write()

    def __repr__(self) -> str:
        return (
            f"<{self.__class__.__name__} readers={self._readers}"
            f" writer={self._writer} waiting_writers={self._waiting_writers}>"
        )
