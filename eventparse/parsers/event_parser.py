"""
Event parser - turns a stream of log lines into a lazy sequence of events.

Lines are pulled one at a time. Since a log event may span several lines,
each matched event is held back ("pending") until the next matching line or
the end of the stream proves it complete. Lines that do not match are handled
according to the profile's failure policy:
    - CONCAT: appended to the pending event (dropped if there is none yet)
    - IGNORE: dropped
    - ABORT:  parsing stops with a ParsingAbortedError
"""

import io
from enum import Enum
from typing import TYPE_CHECKING, BinaryIO, Callable, Iterator, Optional, Union

from ..core.config import settings
from ..core.logging import get_logger
from .event import ParsedEvent
from .profile import FailurePolicy

if TYPE_CHECKING:
    from .event_format import EventFormat

logger = get_logger(__name__)


# Progress callback type: receives the updated character count
ProgressCallback = Callable[[int], None]


class ParserState(Enum):
    NOT_STARTED = "NOT_STARTED"
    RUNNING = "RUNNING"
    EXHAUSTED = "EXHAUSTED"


class ParsingAbortedError(Exception):
    """A line did not match a profile whose failure policy is ABORT."""

    def __init__(self, line_number: int, excerpt: str):
        self.line_number = line_number
        self.excerpt = excerpt
        super().__init__(f"Failed to parse line {line_number}: {excerpt}")


def sanitize_excerpt(text: str, max_length: int) -> str:
    """
    Make a line safe to show in an error message.

    Non-printable characters become spaces and the result is cut to
    `max_length` characters, with a trailing "..." when truncated.
    """
    cleaned = "".join(ch if ch.isprintable() else " " for ch in text)
    if max_length > 0 and len(cleaned) > max_length:
        return cleaned[:max_length] + "..."
    return cleaned


class EventParser:
    """
    Single-pass iterator of ParsedEvent over one input stream.

    The parser owns the stream: it is closed once the events are exhausted,
    when parsing fails, or when `close()` is called, whichever comes first.
    Use it as a context manager to guarantee release on early termination.

    Example:
        with event_format.parse(stream) as parser:
            for event in parser:
                ...
    """

    def __init__(
        self,
        event_format: "EventFormat",
        stream: Union[BinaryIO, io.TextIOBase],
        progress_callback: Optional[ProgressCallback] = None,
    ):
        """
        Args:
            event_format: Profile, encoding, zone and anchor to parse with
            stream: Binary stream (decoded with the format's encoding) or text stream
            progress_callback: Called each time the progress counter advances

        Raises:
            MalformedProfileError: if the profile does not compile
        """
        # The anchor is resolved once so every event of the stream shares it
        self._matcher = event_format.matcher()
        self._policy = event_format.profile.on_failure
        self._profile_name = event_format.profile.name

        if isinstance(stream, io.TextIOBase):
            self._reader = stream
        else:
            self._reader = io.TextIOWrapper(
                stream,
                encoding=event_format.encoding,
                errors=settings.decode_errors,
                newline=None,
            )

        self._progress_callback = progress_callback
        self._progress_step = max(1, settings.progress_step_chars)
        self._progress = 0
        self._unreported_chars = 0
        self._line_count = 0
        self._state = ParserState.NOT_STARTED
        self._closed = False
        self._events = self._generate()

    @property
    def state(self) -> ParserState:
        return self._state

    @property
    def line_count(self) -> int:
        """Number of lines read so far."""
        return self._line_count

    @property
    def progress(self) -> int:
        """
        Characters consumed, published in steps of `progress_step_chars`.

        Lags behind the true count by less than one step until the end of
        the stream. Safe to read from another thread.
        """
        return self._progress

    @property
    def closed(self) -> bool:
        return self._closed

    def __iter__(self) -> Iterator[ParsedEvent]:
        return self

    def __next__(self) -> ParsedEvent:
        return next(self._events)

    def __enter__(self) -> "EventParser":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    def close(self) -> None:
        """Stop parsing and release the stream. Safe to call more than once."""
        if self._closed:
            return
        self._events.close()
        self._release()

    def _release(self) -> None:
        self._state = ParserState.EXHAUSTED
        if self._closed:
            return
        self._closed = True
        try:
            self._reader.close()
        except OSError as e:
            logger.debug(f"Error closing input of {self._profile_name!r} parser: {e}")

    def _generate(self) -> Iterator[ParsedEvent]:
        self._state = ParserState.RUNNING
        pending: Optional[ParsedEvent] = None
        try:
            for raw in self._reader:
                self._line_count += 1
                self._track_progress(len(raw))
                line = raw[:-1] if raw.endswith("\n") else raw
                if line.endswith("\r"):
                    line = line[:-1]

                event = self._matcher.match(line, self._line_count)
                if event is not None:
                    if pending is not None:
                        yield pending
                    pending = event
                elif self._policy is FailurePolicy.CONCAT:
                    if pending is not None:
                        pending = pending.with_continuation(line)
                    else:
                        logger.debug(f"Dropped line {self._line_count}: no event to attach it to")
                elif self._policy is FailurePolicy.IGNORE:
                    logger.debug(f"Ignored unmatched line {self._line_count}")
                else:
                    excerpt = sanitize_excerpt(line, settings.abort_excerpt_max_length)
                    logger.warning(
                        f"Aborting {self._profile_name!r} parser at line {self._line_count}: {excerpt}"
                    )
                    raise ParsingAbortedError(self._line_count, excerpt)

            self._state = ParserState.EXHAUSTED
            self._flush_progress()
            logger.debug(f"End of stream after {self._line_count} lines ({self._progress} chars)")
            if pending is not None:
                yield pending
        finally:
            self._release()

    def _track_progress(self, chars: int) -> None:
        self._unreported_chars += chars
        if self._unreported_chars >= self._progress_step:
            self._flush_progress()

    def _flush_progress(self) -> None:
        if not self._unreported_chars:
            return
        self._progress += self._unreported_chars
        self._unreported_chars = 0
        if self._progress_callback is not None:
            self._progress_callback(self._progress)
