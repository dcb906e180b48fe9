from __future__ import annotations

import re
from collections import Counter
from datetime import datetime, timedelta, timezone

import tzlocal

from .event import FIRST_FRAME_INDEX, Frame, Start
from .layout import Field, Record, fields, names
from .log import log
from .util import Enum, Port, try_enum


class MetadataError(ValueError):
    pass


class Metadata(Record):
    """
    Miscellaneous data not directly provided by Melee. Derived after the whole replay has been read.

    date : datetime | None
        Game start date & time, in the local timezone
    first_frame : int | None
        Index of the first frame observed
    last_frame : int | None
        Index of the last frame observed
    duration : int | None
        Total duration of game in frames. Counts pre-go frames, so it will not match the in-game timer.
    platform : Metadata.Platform | str | None
        Platform the game was played on (console/dolphin)
    console_name: str | None
        Name of the console the game was played on, if any
    players : tuple[Metadata.Player]
        Player metadata for each occupied port, in port order
    """

    class Platform(Enum):
        CONSOLE = "console"
        DOLPHIN = "dolphin"
        NETWORK = "network"
        NINTENDONT = "nintendont"

    class Player(Record):
        """Contains metadata from the perspective of slippi.

        Attributes:
        port : Port
        characters : dict[int, int]
            In-game character id(s) used, with usage duration in frames. Contains multiple characters for Shiek/Zelda
        connect_code : str | None
            Connect code in the traditional slippi format "CODE#123"
        display_name : str | None
            Slippi.gg display name, max of 15 characters
        """

        _fields = fields("port", "characters", "connect_code", "display_name", port="port", characters="character")
        __slots__ = names(_fields)

    _fields = (
        *fields("date", "first_frame", "last_frame", "duration", "platform", "console_name"),
        Field("players", record=Player),
    )
    __slots__ = names(_fields)

    @classmethod
    def _build(cls, start: Start | None, frames: tuple[Frame, ...], json: dict | None) -> Metadata:
        json = json or {}

        if frames:
            first_frame = frames[0].index
            last_frame = frames[-1].index
        elif "lastFrame" in json:
            # frames were skipped, but the recorder tells us where the game ended
            first_frame = FIRST_FRAME_INDEX
            last_frame = json["lastFrame"]
        else:
            first_frame = last_frame = None
        duration = None if last_frame is None else last_frame - first_frame + 1

        platform = json.get("playedOn")
        if platform is not None:
            platform = try_enum(cls.Platform, platform)

        players = []
        json_players = json.get("players") or {}
        for player in start.players if start else ():
            histogram = Counter()
            for frame in frames:
                data = frame.port(player.port)
                if data is not None and data.leader.post is not None:
                    histogram[data.leader.post.character] += 1

            names_json = (json_players.get(str(int(player.port))) or {}).get("names") or {}
            players.append(
                cls.Player(
                    port=player.port,
                    characters=dict(sorted(histogram.items())),
                    connect_code=names_json.get("code") or player.connect_code or None,
                    display_name=names_json.get("netplay") or player.display_name or None,
                )
            )

        return cls(
            date=cls._parse_date(json.get("startAt")),
            first_frame=first_frame,
            last_frame=last_frame,
            duration=duration,
            platform=platform,
            console_name=json.get("consoleNick"),
            players=tuple(players),
        )

    @staticmethod
    def _parse_date(raw_date: str | None) -> datetime | None:
        if not raw_date:
            return None
        raw_date = raw_date.rstrip("\x00")  # workaround for Nintendont/Slippi<1.5 bug
        # timezone & fractional seconds aren't always provided, so parse the date manually
        # (strptime lacks support for optional components)
        match = re.search(
            r"(\d{4})-(\d{2})-(\d{2})T(\d{2}):(\d{2}):(\d{2})(?:\.(\d+))?(?:Z|([+-])(\d{2}):?(\d{2}))?$", raw_date
        )
        if match is None:
            log.warning(f"unrecognized start date: {raw_date!r}")
            return None
        year, month, day, hour, minute, second, fraction, sign, tz_hours, tz_minutes = match.groups()
        microsecond = int((fraction or "0")[:6].ljust(6, "0"))
        offset = timedelta(hours=int(tz_hours or 0), minutes=int(tz_minutes or 0))
        if sign == "-":
            offset = -offset
        date = datetime(
            int(year), int(month), int(day), int(hour), int(minute), int(second), microsecond, timezone(offset)
        )
        # File name and MatchID already contains UTC time
        # so timezone will be the timezone of the device that parsed the replay.
        return date.astimezone(tzlocal.get_localzone())

    def check(self, frames: tuple[Frame, ...]):
        """Verifies that every port's character histogram accounts for exactly the frames that port was observed on.

        Raises `MetadataError` on the first port that doesn't add up."""
        for player in self.players:
            observed = sum(
                1
                for frame in frames
                if (data := frame.port(player.port)) is not None and data.leader.post is not None
            )
            counted = sum(player.characters.values())
            if counted != observed:
                raise MetadataError(
                    f"{Port(player.port).name}: character histogram counts {counted} frames, but {observed} were observed"
                )
        if self.duration is not None and frames and self.duration != len(frames):
            raise MetadataError(f"duration is {self.duration}, but {len(frames)} frames were stored")
