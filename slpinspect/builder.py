from __future__ import annotations

from typing import TYPE_CHECKING

from .event import Event, EventType, Frame
from .log import log
from .metadata import Metadata, MetadataError
from .parse import ParseError, TruncatedStream, UnknownEventCode
from .util import Port

if TYPE_CHECKING:
    from .game import Game


class FrameOrderViolation(ParseError):
    """Frame events arrived out of order: a rollback, a repeated event, or a gap in frame indices."""


class ReplayBuilder:
    """Accumulates decoded events into a `Game`.

    Frames are stored contiguously, starting from the first frame index observed. Events for a frame index that has
    already been stored (netplay rollbacks) replace the stored frame; the violation is recorded on the game rather
    than silently overwriting it.
    """

    def __init__(self, game: Game):
        self.game = game
        self.frames: list[Frame] = []
        self.current: Frame | None = None
        self.active_ports: frozenset[int] = frozenset()

        # This essentially acts as a jump table, saving a long chain of conditionals on a very hot path.
        self._handlers = {
            EventType.GAME_START: self._game_start,
            EventType.FRAME_START: self._frame_start,
            EventType.FRAME_PRE: self._pre_frame,
            EventType.FRAME_POST: self._post_frame,
            EventType.ITEM: self._item,
            EventType.FRAME_END: self._frame_end,
            EventType.GAME_END: self._game_end,
        }

    # -------------------------------------------------------------------- handler interface for parse()

    def add(self, event: Event):
        self._handlers[event.type](event)

    def error(self, error: ParseError):
        self.game.errors.append(error)

    def metadata(self, raw: dict):
        self.game.metadata_raw = raw

    def payload_sizes(self, sizes: dict[int, int]):
        self.game.payload_sizes = sizes

    def hash(self, digest: str):
        self.game.hash = digest

    def finish(self) -> Game:
        for frame in self.frames:
            frame._finalize()

        game = self.game
        game.frames = tuple(self.frames)
        game.partial = game.end is None or any(
            isinstance(error, (TruncatedStream, UnknownEventCode)) for error in game.errors
        )
        game.metadata = Metadata._build(game.start, game.frames, game.metadata_raw)
        try:
            game.metadata.check(game.frames)
        except MetadataError as exc:
            log.warning(str(exc))
            game.errors.append(exc)
        return game

    # -------------------------------------------------------------------- events

    def _violation(self, message: str, frame: int):
        log.debug(message)
        self.error(FrameOrderViolation(f"frame {frame}: {message}"))

    def _frame(self, index: int, starting: bool = False) -> Frame | None:
        """Returns the frame that events for `index` should be written to, creating it if need be.

        `starting` is set for frame start events, which can only come once per pass over a frame."""
        current = self.current
        resent = current is not None and current.index == index
        if resent and current.end is None and not (starting and current.start is not None):
            return current

        first = self.frames[0].index if self.frames else index
        offset = index - first

        if offset < 0:
            self._violation(f"frame precedes the first stored frame ({first}), dropping its events", index)
            return None

        count = len(self.frames)
        frame = Frame(index, ports=[], items=[])
        if offset < count:
            # rollback: the game re-simulated frames it had already sent, later data wins
            if resent or (current is not None and index < current.index):
                self._violation(f"rollback: {current.index} -> {index}", index)
            self.frames[offset] = frame
        else:
            if offset > count:
                self._violation(f"missing frames: {first + count - 1} -> {index}", index)
                self.frames.extend(Frame(i, ports=[], items=[]) for i in range(first + count, index))
            self.frames.append(frame)

        self.current = frame
        return frame

    def _port_data(self, event: Event) -> Frame.Port.Data | None:
        if event.port not in self.active_ports:
            log.warning(f"dropping frame data for empty port {event.port} (frame {event.frame})")
            return None

        frame = self._frame(event.frame)
        if frame is None:
            return None

        port = frame.port(event.port)
        if port is None:
            port = Frame.Port(port=Port(event.port), leader=Frame.Port.Data())
            frame.ports.append(port)
        if not event.is_follower:
            return port.leader
        if port.follower is None:
            port.follower = Frame.Port.Data()
        return port.follower

    def _game_start(self, event: Event):
        self.game.start = event.data
        self.active_ports = frozenset(player.port for player in event.data.players)

    def _game_end(self, event: Event):
        self.game.end = event.data

    def _frame_start(self, event: Event):
        frame = self._frame(event.frame, starting=True)
        if frame is not None:
            frame.start = event.data

    def _frame_end(self, event: Event):
        frame = self._frame(event.frame)
        if frame is not None:
            frame.end = event.data

    def _item(self, event: Event):
        frame = self._frame(event.frame)
        if frame is not None:
            frame.items.append(event.data)

    def _pre_frame(self, event: Event):
        data = self._port_data(event)
        if data is None:
            return
        if data.pre is not None:
            self._violation(f"repeated pre-frame event for port {event.port}", event.frame)
        data.pre = event.data

    def _post_frame(self, event: Event):
        data = self._port_data(event)
        if data is None:
            return
        if data.post is not None:
            self._violation(f"repeated post-frame event for port {event.port}", event.frame)
        data.post = event.data
