from __future__ import annotations

import struct
from collections.abc import Sequence

from .controller import Buttons, Triggers
from .layout import (
    Array,
    BigInt,
    Field,
    Group,
    OptionalPort,
    Prim,
    Record,
    Str,
    VersionTuple,
    names,
    pad,
)
from .util import Base, Cursor, Enum, IntEnum, Port

# The first frame of the game is indexed -123, counting up to zero (which is when the word "GO" appears).
FIRST_FRAME_INDEX = -123


class EventType(IntEnum):
    """Slippi events that can appear in a game's `raw` data."""

    EVENT_PAYLOADS = 0x35
    GAME_START = 0x36
    FRAME_PRE = 0x37
    FRAME_POST = 0x38
    GAME_END = 0x39
    FRAME_START = 0x3A
    ITEM = 0x3B
    FRAME_END = 0x3C
    GECKO_LIST = 0x3D
    MESSAGE_SPLITTER = 0x10


class MatchType(Enum):
    OFFLINE = -1
    RANKED = 0
    UNRANKED = 1
    DIRECT = 2
    OTHER = 3

    @classmethod
    def from_match_id(cls, match_id: str | None) -> MatchType:
        # match ids look like "mode.ranked-2023-01-12T00:43:55.96-0"
        if not match_id or len(match_id) < 6:
            return cls.OFFLINE
        match match_id[5]:
            case "r":
                return cls.RANKED
            case "u":
                return cls.UNRANKED
            case "d":
                return cls.DIRECT
            case _:
                return cls.OTHER


class Position(Record):
    """X, Y coordinates"""

    _fields = (Field("x", Prim("f")), Field("y", Prim("f")))
    __slots__ = names(_fields)

    def __repr__(self):
        return f"({self.x:.2f}, {self.y:.2f})"


class Velocity(Record):
    """X, Y speeds"""

    _fields = (Field("x", Prim("f")), Field("y", Prim("f")))
    __slots__ = names(_fields)

    def __repr__(self):
        return f"({self.x:.2f}, {self.y:.2f})"


class Version(Record):
    """Version of the recorder that generated a replay, which also governs the replay's layout.

    Can be compared to tuples (0, 1, 0), strings '0.1.0', or other Version objects.
    """

    _fields = (
        Field("major", Prim("B")),
        Field("minor", Prim("B")),
        Field("revision", Prim("B")),
        pad(1),  # build, obsoleted in 2.0.0 and never held a nonzero value
    )
    __slots__ = names(_fields)

    def __iter__(self):
        yield self.major
        yield self.minor
        yield self.revision

    def __repr__(self):
        return f"{self.major}.{self.minor}.{self.revision}"

    @staticmethod
    def _coerce(other) -> VersionTuple:
        if isinstance(other, Version):
            return tuple(other)
        if isinstance(other, str):
            other = [int(n) for n in other.split(".", 2)]
        if isinstance(other, Sequence):
            if len(other) != 3:
                raise ValueError(f"Incorrect Sequence {other} for Version. Must have 3 elements (major, minor, revision)")
            return tuple(other)
        raise TypeError(f"cannot compare Version to {type(other).__name__}")

    def __eq__(self, other):
        try:
            return tuple(self) == self._coerce(other)
        except TypeError:
            return NotImplemented

    def __hash__(self):
        return hash(tuple(self))

    def __lt__(self, other):
        return tuple(self) < self._coerce(other)

    def __le__(self, other):
        return tuple(self) <= self._coerce(other)

    def __gt__(self, other):
        return tuple(self) > self._coerce(other)

    def __ge__(self, other):
        return tuple(self) >= self._coerce(other)


# ---------------------------------------------------------------------------- #
#                                  Game Start                                  #
# ---------------------------------------------------------------------------- #


class Start(Record):
    """Information used to initialize the game such as the game mode, settings, characters & stage.

    Fields that the replay's version predates are None.

    Attributes:
        slippi_version : Version
            Version of the recorder that generated the replay. Major releases:

            v0.1.0 Initial Release

            v1.0.0 Dolphin Slippi Release

            v2.0.0 Slippi Rollback Release

            v3.0.0 Slippi Ranked Pre-release
        bitfields : tuple[int]
            The 4 game rule bitfields (timer mode, friendly fire, etc.)
        is_teams : bool
            True for doubles
        item_spawn_behavior : int
            Item frequency, -1 if items are off
        stage : int
            Which stage the game was played on
        timer : int
            Starting timer, in seconds
        damage_ratio : float
            Damage multiplier
        players : tuple[Start.Player]
            One entry per occupied port, in port order
        random_seed : int
            Random seed upon initializing the game
    `Minimum Replay Version: 1.5.0`:
        is_pal : bool
            True if recorded on the PAL version of Melee
    `Minimum Replay Version: 2.0.0`:
        is_frozen_ps : bool
            True if Pokemon Stadium transformations were disabled
    `Minimum Replay Version: 3.7.0`:
        scene_minor, scene_major : int
    `Minimum Replay Version: 3.12.0`:
        language : int
    `Minimum Replay Version: 3.14.0`:
        match_id : str
            In format mode.[mode]-[ISO 8601 timestamp]. For slippi matchmaking, Match IDs correspond to one instance of
            queuing into another player. Each game before disconnecting will have the same Match ID, but a different
            `game_number`.
        game_number : int
            Which game number this replay is for the current `match_id`
        tiebreak_number : int
            If `MatchType.RANKED` and a tiebreak is necessary, acts as `game_number` for tiebreaks.
    """

    class Player(Record):
        """Contains metadata about the player from the console's perspective.

        Attributes:
            port : Port
                Which controller port the player occupies
            character : int
                The character chosen on the character select screen
            type : int
                Classification of the player. See `Start.Player.Type`
            stocks : int
                How many stocks the player starts the game with
            costume : int
                Index of the selected costume
            team : int
                Team color. If not a Teams game, this field corresponds to the player's shield color.
        `Minimum Replay Version: 1.0.0`:
            ucf : UCF
                Information on which UCF toggles were enabled, if any
        `Minimum Replay Version: 1.3.0`:
            tag : str
                The in-game tag that hovers over the player, if any
        `Minimum Replay Version: 3.9.0`:
            display_name : str
            connect_code : str
        `Minimum Replay Version: 3.11.0`:
            uid : str
        """

        class Type(IntEnum):
            """The game's classification of the type of player: Human, CPU, Demo, or Empty"""

            HUMAN = 0
            CPU = 1
            DEMO = 2
            EMPTY = 3

        class Team(IntEnum):
            """Doubles team colors"""

            RED = 0
            BLUE = 1
            GREEN = 2

        class UCF(Record):
            """UCF Dashback and shield drop. Can be off, on, or arduino"""

            class DashBack(IntEnum):
                OFF = 0
                UCF = 1
                ARDUINO = 2

            class ShieldDrop(IntEnum):
                OFF = 0
                UCF = 1
                ARDUINO = 2

            _fields = (
                Field("dash_back", Prim("I"), label="dash_back"),
                Field("shield_drop", Prim("I"), label="shield_drop"),
            )
            __slots__ = names(_fields)

        _fields = (
            Field("port", label="port"),
            Field("character", Prim("B"), label="css_character"),
            Field("type", Prim("B"), label="player_type"),
            Field("stocks", Prim("B")),
            Field("costume", Prim("B")),
            pad(3),
            Field("team_shade", Prim("B")),
            Field("handicap", Prim("B")),
            Field("team", Prim("B"), label="team"),
            pad(2),
            Field("bitfield", Prim("B")),
            pad(2),
            Field("cpu_level", Prim("B")),
            pad(8),
            Field("offense_ratio", Prim("f")),
            Field("defense_ratio", Prim("f")),
            Field("model_scale", Prim("f")),
            # laid out per-port further along the Start payload
            Field("ucf", Group(UCF), since=(1, 0, 0), wire=False),
            Field("tag", Str(16, "shift_jis"), since=(1, 3, 0), wire=False),
            Field("display_name", Str(31, "shift_jis"), since=(3, 9, 0), wire=False),
            Field("connect_code", Str(10, "shift_jis"), since=(3, 9, 0), wire=False),
            Field("uid", Str(29), since=(3, 11, 0), wire=False),
        )
        __slots__ = names(_fields)

        @property
        def is_active(self) -> bool:
            return self.type != self.Type.EMPTY

        @classmethod
        def empty(cls, port: int) -> Start.Player:
            return cls(
                port=Port(port),
                character=0,
                type=cls.Type.EMPTY,
                stocks=0,
                costume=0,
                team_shade=0,
                handicap=0,
                team=0,
                bitfield=0,
                cpu_level=0,
                offense_ratio=0.0,
                defense_ratio=0.0,
                model_scale=0.0,
                ucf=cls.UCF(0, 0),
                tag="",
                display_name="",
                connect_code="",
                uid="",
            )

    _fields = (
        Field("slippi_version", Group(Version)),
        Field("bitfields", Array(Prim("B"), 4)),
        pad(2),
        Field("bomb_rain", Prim("B")),
        pad(1),
        Field("is_teams", Prim("?")),
        pad(2),
        Field("item_spawn_behavior", Prim("b")),
        Field("self_destruct_score", Prim("b")),
        pad(1),
        Field("stage", Prim("H"), label="stage"),
        Field("timer", Prim("I")),
        pad(15),
        Field("item_spawn_bitfields", Array(Prim("B"), 5)),
        pad(8),
        Field("damage_ratio", Prim("f")),
        pad(44),
        Field("players", Array(Group(Player), 4)),
        pad(72),
        Field("random_seed", Prim("I")),
        Field("ucf", Array(Group(Player.UCF), 4), since=(1, 0, 0), per_port=True),
        Field("tag", Array(Str(16, "shift_jis"), 4), since=(1, 3, 0), per_port=True),
        Field("is_pal", Prim("?"), since=(1, 5, 0)),
        Field("is_frozen_ps", Prim("?"), since=(2, 0, 0)),
        Field("scene_minor", Prim("B"), since=(3, 7, 0)),
        Field("scene_major", Prim("B"), since=(3, 7, 0)),
        Field("display_name", Array(Str(31, "shift_jis"), 4), since=(3, 9, 0), per_port=True),
        Field("connect_code", Array(Str(10, "shift_jis"), 4), since=(3, 9, 0), per_port=True),
        Field("uid", Array(Str(29), 4), since=(3, 11, 0), per_port=True),
        Field("language", Prim("B"), since=(3, 12, 0)),
        Field("match_id", Str(51), since=(3, 14, 0)),
        Field("game_number", Prim("I"), since=(3, 14, 0)),
        Field("tiebreak_number", Prim("I"), since=(3, 14, 0)),
        Field("match_type"),
    )
    __slots__ = (*names(_fields), "raw")

    _per_port = tuple(f.name for f in _fields if f.per_port)

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.match_type = MatchType.from_match_id(self.match_id)
        self.raw = None

    @property
    def version(self) -> VersionTuple:
        return tuple(self.slippi_version)

    def player(self, port: int) -> Start.Player | None:
        for player in self.players:
            if player.port == port:
                return player
        return None

    @classmethod
    def _from_wire(cls, values):
        players = values.pop("players")
        for port, player in enumerate(players):
            player.port = Port(port)
        for name in cls._per_port:
            per_port = values.pop(name)
            if per_port is not None:
                for player, value in zip(players, per_port):
                    setattr(player, name, value)
        values["players"] = tuple(player for player in players if player.is_active)
        return cls(**values)

    def _to_wire(self):
        values = super()._to_wire()
        players = [self.player(port) or self.Player.empty(port) for port in range(4)]
        values["players"] = players
        for name in self._per_port:
            values[name] = tuple(getattr(player, name) for player in players)
        return values

    @classmethod
    def _from_json(cls, values):
        values.pop("match_type", None)
        for player in values.get("players") or ():
            player.port = Port(player.port)
        return cls(**values)


# ---------------------------------------------------------------------------- #
#                                   Game End                                   #
# ---------------------------------------------------------------------------- #


class End(Record):
    """Information about the end of the game.

    Attributes:
        method : int
            How the game ended. See `End.Method`
    `Minimum Replay Version: 2.0.0`:
        lras_initiator : Port | None
            Port of the player that LRAS'd. None if not applicable
    `Minimum Replay Version: 3.13.0`:
        player_placements : tuple[int]
            Placements in port order, lower is better. Placement is -1 for empty ports
    """

    class Method(IntEnum):
        INCONCLUSIVE = 0
        TIME = 1
        GAME = 2
        CONCLUSIVE = 3
        NO_CONTEST = 7

    _fields = (
        Field("method", Prim("B"), label="end_method"),
        Field("lras_initiator", OptionalPort(), since=(2, 0, 0), label="port"),
        Field("player_placements", Array(Prim("b"), 4), since=(3, 13, 0)),
    )
    __slots__ = (*names(_fields), "raw")

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.raw = None


# ---------------------------------------------------------------------------- #
#                                    Frames                                    #
# ---------------------------------------------------------------------------- #


class Frame(Record):
    """A single frame of the game. Includes data for all active bodies (characters, items, etc.)

    Attributes:
        index : int
            -123 indexed Frame counter
        ports : tuple[Frame.Port]
            Data for each occupied port on this frame, in port order
    `Minimum Replay Version: 2.2.0`:
        start : Frame.Start
            Information given at the start of the frame to help keep netplay clients in sync
    `Minimum Replay Version: 3.0.0`:
        items : tuple[Frame.Item]
            Data for up to 15 items on a single frame
        end : Frame.End
            Information given at the end of a frame to mark that there is no further information for that frame.
    """

    def _finalize(self):
        self.ports = tuple(sorted(self.ports, key=lambda p: p.port))
        self.items = tuple(self.items)

    @property
    def is_complete(self) -> bool:
        """True once the frame's bookend event has been seen."""
        return self.end is not None

    def port(self, port: int) -> Frame.Port | None:
        for data in self.ports:
            if data.port == port:
                return data
        return None

    class Port(Record):
        """Frame data for a given port.

        Attributes:
            port:
                Which port this data belongs to
            leader:
                Main active character
            follower:
                Secondary active character if applicable (ic's). None on frames where it wasn't recorded
        """

        class Data(Record):
            """Frame data for a given character

            Attributes:
                pre : Data.Pre
                    Data about the given player, used by the engine to update the player's state for the frame
                post : Data.Post
                    Data about the given player, after the game engine has updated for the frame
            """

            class Pre(Record):
                """Pre-frame update data, required to reconstruct a replay. Information is collected right before
                controller inputs are used to figure out the character's next action.

                `state` is the action state the character enters the frame in, i.e. the previous frame's result.

                Attributes:
                    random_seed : int
                    state : int
                    position : Position
                    facing_direction : float
                        -1.0 for left, 1.0 for right
                    joystick : Position
                    cstick : Position
                    triggers_logical : float
                    buttons : Buttons
                    triggers_physical : Triggers
                `Minimum Replay Version: 1.2.0`:
                    raw_analog_x : int
                        Raw X axis analog controller input. Used by UCF dashback code
                `Minimum Replay Version: 1.4.0`:
                    percent : float
                `Minimum Replay Version: 3.15.0`:
                    raw_analog_y : int
                """

                _fields = (
                    Field("random_seed", Prim("I")),
                    Field("state", Prim("H"), label="state"),
                    Field("position", Group(Position)),
                    Field("facing_direction", Prim("f")),
                    Field("joystick", Group(Position)),
                    Field("cstick", Group(Position)),
                    Field("triggers_logical", Prim("f")),
                    Field("buttons", Group(Buttons)),
                    Field("triggers_physical", Group(Triggers)),
                    Field("raw_analog_x", Prim("B"), since=(1, 2, 0)),
                    Field("percent", Prim("f"), since=(1, 4, 0)),
                    Field("raw_analog_y", Prim("b"), since=(3, 15, 0)),
                )
                __slots__ = names(_fields)

            class Post(Record):
                """Post-frame update data, for making decisions about game states (such as computing stats).
                Information is collected at the end of collision detection, which is the last consideration of the game
                engine.

                Attributes:
                    character : int
                        Which character is active on the current frame (should only change for zelda/shiek)
                    state : int
                        The characters current Action State
                    position : Position
                    facing_direction : float
                    percent : float
                    shield_health : float
                        The remaining health of the player's shield (Max 60.0)
                    last_attack_landed : int
                    combo_count : int
                    last_hit_by : int
                    stocks_remaining : int
                        Will be 0 for 1 frame if player loses all stocks in 1v1
                `Minimum Replay Version: 0.2.0`:
                    state_age : float
                        Number of frames the current action state has been active. Can be fractional
                `Minimum Replay Version: 2.0.0`:
                    flags : int
                        The 5 state bitfields as one 40-bit integer
                    misc_timer : float
                        If the hitstun flag is active, this timer is the number of hitstun frames remaining
                    is_airborne : bool
                    last_ground_id : int
                    jumps_remaining : int
                    l_cancel : int
                `Minimum Replay Version: 2.1.0`:
                    hurtbox_status : int
                `Minimum Replay Version: 3.5.0`:
                    self_air_speed : Velocity
                    knockback_speed : Velocity
                    self_ground_speed_x : float
                `Minimum Replay Version: 3.8.0`:
                    hitlag_remaining : float
                `Minimum Replay Version: 3.11.0`:
                    animation_index : int
                `Minimum Replay Version: 3.16.0`:
                    instance_hit_by : int
                    instance_id : int
                """

                _fields = (
                    Field("character", Prim("B"), label="character"),
                    Field("state", Prim("H"), label="state"),
                    Field("position", Group(Position)),
                    Field("facing_direction", Prim("f")),
                    Field("percent", Prim("f")),
                    Field("shield_health", Prim("f")),
                    Field("last_attack_landed", Prim("B")),
                    Field("combo_count", Prim("B")),
                    Field("last_hit_by", Prim("B")),
                    Field("stocks_remaining", Prim("B")),
                    Field("state_age", Prim("f"), since=(0, 2, 0)),
                    Field("flags", BigInt(5), since=(2, 0, 0)),
                    Field("misc_timer", Prim("f"), since=(2, 0, 0)),
                    Field("is_airborne", Prim("?"), since=(2, 0, 0)),
                    Field("last_ground_id", Prim("H"), since=(2, 0, 0)),
                    Field("jumps_remaining", Prim("B"), since=(2, 0, 0)),
                    Field("l_cancel", Prim("B"), since=(2, 0, 0), label="l_cancel"),
                    Field("hurtbox_status", Prim("B"), since=(2, 1, 0), label="hurtbox"),
                    Field("self_air_speed", Group(Velocity), since=(3, 5, 0)),
                    Field("knockback_speed", Group(Velocity), since=(3, 5, 0)),
                    Field("self_ground_speed_x", Prim("f"), since=(3, 5, 0)),
                    Field("hitlag_remaining", Prim("f"), since=(3, 8, 0)),
                    Field("animation_index", Prim("I"), since=(3, 11, 0)),
                    Field("instance_hit_by", Prim("H"), since=(3, 16, 0)),
                    Field("instance_id", Prim("H"), since=(3, 16, 0)),
                )
                __slots__ = names(_fields)

            _fields = (Field("pre", record=Pre), Field("post", record=Post))
            __slots__ = names(_fields)

        _fields = (
            Field("port", label="port"),
            Field("leader", record=Data),
            Field("follower", record=Data),
        )
        __slots__ = names(_fields)

    class Item(Record):
        """An active item (includes projectiles).

        Attributes:
            type : int
                What type of item this data is for (turnip, missile, pokeball, etc.)
            state : int
                Item's action state
            facing_direction : float
            velocity : Velocity
            position : Position
            damage_taken : int
            timer : float
                Frames remaining until item expires
            spawn_id : int
                Unique ID per item spawned (0, 1, 2, ...)
        `Minimum Replay Version: 3.2.0`:
            missile_type : int
                Used for Samus side B missiles
            turnip_type : int
                Used for Peach's down B turnips
            is_shot_launched : int
                Differentiates between charge shots that are on-screen but held, and charge shots have been launched
            charge_power : int
        `Minimum Replay Version: 3.6.0`:
            owner : int
                Item owner by port, -1 for none
        `Minimum Replay Version: 3.16.0`:
            instance_id : int
        """

        _fields = (
            Field("type", Prim("H")),
            Field("state", Prim("B")),
            Field("facing_direction", Prim("f")),
            Field("velocity", Group(Velocity)),
            Field("position", Group(Position)),
            Field("damage_taken", Prim("H")),
            Field("timer", Prim("f")),
            Field("spawn_id", Prim("I")),
            Field("missile_type", Prim("B"), since=(3, 2, 0)),
            Field("turnip_type", Prim("B"), since=(3, 2, 0)),
            Field("is_shot_launched", Prim("B"), since=(3, 2, 0)),
            Field("charge_power", Prim("B"), since=(3, 2, 0)),
            Field("owner", Prim("b"), since=(3, 6, 0), label="port"),
            Field("instance_id", Prim("H"), since=(3, 16, 0)),
        )
        __slots__ = names(_fields)

    class Start(Record):
        """Information used to initialize the frame

        Attributes:
            random_seed : int
                random seed value at the beginning of the frame
        `Minimum Replay Version: 3.10.0`:
            scene_frame_counter : int
        """

        _fields = (
            Field("random_seed", Prim("I")),
            Field("scene_frame_counter", Prim("I"), since=(3, 10, 0)),
        )
        __slots__ = names(_fields)

    class End(Record):
        """Frame bookend, marking that there is no further information for the frame.

        Attributes:
        `Minimum Replay Version: 3.7.0`:
            latest_finalized_frame : int
                Highest frame index that can no longer be rolled back
        """

        _fields = (Field("latest_finalized_frame", Prim("i"), since=(3, 7, 0)),)
        __slots__ = names(_fields)

    _fields = (
        Field("index"),
        Field("start", record=Start),
        Field("end", record=End),
        Field("ports", record=Port),
        Field("items", record=Item),
    )
    __slots__ = names(_fields)


# ---------------------------------------------------------------------------- #
#                                    Decoding                                  #
# ---------------------------------------------------------------------------- #


class Event(Base):
    """A single decoded event. `frame`, `port` and `is_follower` are None where the event kind has no such header."""

    __slots__ = "type", "frame", "port", "is_follower", "data"

    def __init__(self, type: EventType, data, frame=None, port=None, is_follower=None):
        self.type = type
        self.data = data
        self.frame = frame
        self.port = port
        self.is_follower = is_follower


PORT_HEADER = struct.Struct(">iB?")
FRAME_HEADER = struct.Struct(">i")


def _frame_event(event_type: EventType, record: type[Record]):
    def decode(cursor: Cursor, version: VersionTuple) -> Event:
        (frame,) = cursor.unpack(FRAME_HEADER)
        return Event(event_type, record._decode(cursor, version), frame)

    return decode


def _port_event(event_type: EventType, record: type[Record]):
    def decode(cursor: Cursor, version: VersionTuple) -> Event:
        frame, port, is_follower = cursor.unpack(PORT_HEADER)
        return Event(event_type, record._decode(cursor, version), frame, port, is_follower)

    return decode


def _game_start(cursor: Cursor, version: VersionTuple | None) -> Event:
    # Game Start declares the version that every later event, including itself, is laid out with.
    version = tuple(cursor.unpack(_VERSION_PREFIX))
    cursor.pos -= _VERSION_PREFIX.size
    start = Start._decode(cursor, version)
    start.raw = bytes(cursor.buf[: cursor.end])
    return Event(EventType.GAME_START, start)


def _game_end(cursor: Cursor, version: VersionTuple) -> Event:
    end = End._decode(cursor, version)
    end.raw = bytes(cursor.buf[: cursor.end])
    return Event(EventType.GAME_END, end)


_VERSION_PREFIX = struct.Struct(">BBB")

# This essentially acts as a jump table, saving a long chain of conditionals on a very hot path.
EVENT_DECODERS = {
    EventType.GAME_START: _game_start,
    EventType.FRAME_PRE: _port_event(EventType.FRAME_PRE, Frame.Port.Data.Pre),
    EventType.FRAME_POST: _port_event(EventType.FRAME_POST, Frame.Port.Data.Post),
    EventType.GAME_END: _game_end,
    EventType.FRAME_START: _frame_event(EventType.FRAME_START, Frame.Start),
    EventType.ITEM: _frame_event(EventType.ITEM, Frame.Item),
    EventType.FRAME_END: _frame_event(EventType.FRAME_END, Frame.End),
}

# Recognized, but carry nothing the replay model keeps.
IGNORED_EVENTS = frozenset((EventType.GECKO_LIST, EventType.MESSAGE_SPLITTER))


def decode_event(code: int, payload: bytes, version: VersionTuple | None) -> Event | None:
    """Decodes one event payload (without its code byte).

    Returns None for recognized events that carry no modelled data. Raises `util.EOFError` if the payload is too
    short for the layout `version` requires, and `KeyError` for codes that aren't recognized at all.
    """
    if code in IGNORED_EVENTS:
        return None
    return EVENT_DECODERS[code](Cursor(payload), version)
