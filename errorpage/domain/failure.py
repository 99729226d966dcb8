"""
Failure chain model.

A Failure is a read-only snapshot of an error and the error it wraps.
Renderers only ever see Failures, so they never touch live exception
objects or tracebacks. No framework imports allowed.
"""

import traceback
from dataclasses import dataclass
from typing import Iterator, Optional, Union

Code = Union[int, str, None]


@dataclass(frozen=True)
class Failure:
    """A single entry of a failure chain.

    Attributes:
        kind: Type name of the failure (fully qualified class name).
        code: Optional numeric or string code carried by the failure.
        message: Human readable message.
        file: File the failure originated in, empty if unknown.
        line: Line the failure originated at, 0 if unknown.
        trace: Stack trace text, one frame description per line.
        previous: The failure this one was caused by, if any.
    """

    kind: str
    message: str = ""
    code: Code = None
    file: str = ""
    line: int = 0
    trace: str = ""
    previous: Optional["Failure"] = None

    def __post_init__(self) -> None:
        # Lone surrogates (os.fsdecode, surrogateescape) cannot be encoded.
        for name in ("kind", "message", "file", "trace"):
            object.__setattr__(self, name, _utf8_safe(getattr(self, name)))
        if isinstance(self.code, str):
            object.__setattr__(self, "code", _utf8_safe(self.code))

    @classmethod
    def from_exception(cls, exc: BaseException) -> "Failure":
        """Snapshot a Python exception and its causes as a Failure chain."""
        chain = list(_exception_chain(exc))
        failure = cls._from_single(chain[-1], previous=None)
        for item in reversed(chain[:-1]):
            failure = cls._from_single(item, previous=failure)
        return failure

    @classmethod
    def _from_single(
        cls, exc: BaseException, previous: Optional["Failure"]
    ) -> "Failure":
        frames = traceback.extract_tb(exc.__traceback__)
        file, line = "", 0
        if frames:
            file, line = frames[-1].filename, frames[-1].lineno or 0
        return cls(
            kind=_type_name(type(exc)),
            message=str(exc),
            code=_exception_code(exc),
            file=file,
            line=line,
            trace="".join(traceback.format_list(frames)).rstrip("\n"),
            previous=previous,
        )


def iter_chain(root: Failure) -> Iterator[Failure]:
    """Yield the root failure, then each previous failure, oldest last.

    Walks iteratively. A failure already yielded ends the walk, so a
    cyclic chain built by a caller still terminates.
    """
    seen: set[int] = set()
    current: Optional[Failure] = root
    while current is not None and id(current) not in seen:
        seen.add(id(current))
        yield current
        current = current.previous


def _exception_chain(exc: BaseException) -> Iterator[BaseException]:
    # Same precedence the interpreter uses when printing chained exceptions.
    seen: set[int] = set()
    current: Optional[BaseException] = exc
    while current is not None and id(current) not in seen:
        seen.add(id(current))
        yield current
        if current.__cause__ is not None:
            current = current.__cause__
        elif not current.__suppress_context__:
            current = current.__context__
        else:
            current = None


def _type_name(exc_type: type) -> str:
    if exc_type.__module__ == "builtins":
        return exc_type.__qualname__
    return f"{exc_type.__module__}.{exc_type.__qualname__}"


def _exception_code(exc: BaseException) -> Code:
    code = getattr(exc, "code", None)
    if isinstance(code, (int, str)) and not isinstance(code, bool):
        return code
    errno = getattr(exc, "errno", None)
    if isinstance(errno, int):
        return errno
    return 0


def _utf8_safe(text: str) -> str:
    return text.encode("utf-8", "backslashreplace").decode("utf-8")
