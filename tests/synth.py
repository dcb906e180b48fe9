"""Writes small replays in the .slp wire format, for tests."""
from __future__ import annotations

import struct

import ubjson

from slpinspect.enums import CSSCharacter, InGameCharacter
from slpinspect.event import (
    FIRST_FRAME_INDEX,
    FRAME_HEADER,
    PORT_HEADER,
    End,
    EventType,
    Frame,
    Position,
    Start,
    Velocity,
    Version,
)
from slpinspect.controller import Buttons, Triggers
from slpinspect.writer import payload_sizes

VERSION = (3, 16, 0)

Pre = Frame.Port.Data.Pre
Post = Frame.Port.Data.Post


def make_start(version=VERSION, characters=(CSSCharacter.FOX, CSSCharacter.MARTH), stage=31) -> Start:
    players = []
    for port, character in enumerate(characters):
        if character is None:
            continue
        player = Start.Player.empty(port)
        player.character = character
        player.type = Start.Player.Type.HUMAN
        player.stocks = 4
        player.team_shade = 0
        player.handicap = 9
        player.offense_ratio = 1.0
        player.defense_ratio = 1.0
        player.model_scale = 1.0
        player.ucf = Start.Player.UCF(1, 1)
        player.tag = ""
        player.display_name = f"Player {port + 1}"
        player.connect_code = f"PLYR#{port + 1}"
        player.uid = f"uid{port + 1}"
        players.append(player)

    return Start(
        slippi_version=Version(*version),
        bitfields=(50, 1, 134, 76),
        bomb_rain=0,
        is_teams=False,
        item_spawn_behavior=-1,
        self_destruct_score=-1,
        stage=stage,
        timer=480,
        item_spawn_bitfields=(255, 255, 255, 255, 255),
        damage_ratio=1.0,
        players=tuple(players),
        random_seed=12345,
        is_pal=False,
        is_frozen_ps=False,
        scene_minor=2,
        scene_major=8,
        language=1,
        match_id="mode.unranked-2023-01-12T00:43:55.96-0",
        game_number=1,
        tiebreak_number=0,
    )


def make_pre(state=14, x=0.0, y=0.0) -> Pre:
    return Pre(
        random_seed=1,
        state=state,
        position=Position(x, y),
        facing_direction=1.0,
        joystick=Position(0.0, 0.0),
        cstick=Position(0.0, 0.0),
        triggers_logical=0.0,
        buttons=Buttons(0, 0),
        triggers_physical=Triggers(0.0, 0.0),
        raw_analog_x=0,
        percent=0.0,
        raw_analog_y=0,
    )


def make_post(state=14, character=InGameCharacter.FOX, x=0.0, y=0.0, percent=0.0, stocks=4) -> Post:
    return Post(
        character=character,
        state=state,
        position=Position(x, y),
        facing_direction=1.0,
        percent=percent,
        shield_health=60.0,
        last_attack_landed=0,
        combo_count=0,
        last_hit_by=6,
        stocks_remaining=stocks,
        state_age=1.0,
        flags=0,
        misc_timer=0.0,
        is_airborne=False,
        last_ground_id=1,
        jumps_remaining=2,
        l_cancel=0,
        hurtbox_status=0,
        self_air_speed=Velocity(0.0, 0.0),
        knockback_speed=Velocity(0.0, 0.0),
        self_ground_speed_x=0.0,
        hitlag_remaining=0.0,
        animation_index=0,
        instance_hit_by=0,
        instance_id=0,
    )


def make_item(spawn_id=0, owner=0) -> Frame.Item:
    return Frame.Item(
        type=99,
        state=1,
        facing_direction=1.0,
        velocity=Velocity(1.5, 0.0),
        position=Position(10.0, 20.0),
        damage_taken=0,
        timer=60.0,
        spawn_id=spawn_id,
        missile_type=0,
        turnip_type=0,
        is_shot_launched=0,
        charge_power=0,
        owner=owner,
        instance_id=spawn_id + 10,
    )


class ReplayWriter:
    """Accumulates events, then lays them out as a complete replay file."""

    def __init__(self, version=VERSION, sizes: dict[int, int] | None = None):
        self.version = version
        self.sizes = payload_sizes(self.version) if sizes is None else sizes
        self.events: list[bytes] = []
        self.size = 0
        self.frame_offsets: dict[int, int] = {}  # frame index -> offset of its first event in the event stream

    def event(self, code: int, payload: bytes):
        self.events.append(bytes([code]) + payload)
        self.size += 1 + len(payload)

    def start(self, start: Start | None = None):
        start = make_start(self.version) if start is None else start
        self.event(EventType.GAME_START, start._encode(self.version))
        return start

    def end(self, method=End.Method.GAME, lras_initiator=None, placements=(0, 1, -1, -1)):
        end = End(method=method, lras_initiator=lras_initiator, player_placements=placements)
        self.event(EventType.GAME_END, end._encode(self.version))

    def pre(self, index: int, port: int, pre: Pre, is_follower=False):
        self.event(EventType.FRAME_PRE, PORT_HEADER.pack(index, port, is_follower) + pre._encode(self.version))

    def post(self, index: int, port: int, post: Post, is_follower=False):
        self.event(EventType.FRAME_POST, PORT_HEADER.pack(index, port, is_follower) + post._encode(self.version))

    def item(self, index: int, item: Frame.Item):
        self.event(EventType.ITEM, FRAME_HEADER.pack(index) + item._encode(self.version))

    def frame_start(self, index: int):
        self.frame_offsets.setdefault(index, self.size)
        frame_start = Frame.Start(random_seed=index + 1000, scene_frame_counter=index - FIRST_FRAME_INDEX)
        self.event(EventType.FRAME_START, FRAME_HEADER.pack(index) + frame_start._encode(self.version))

    def frame_end(self, index: int):
        self.event(EventType.FRAME_END, FRAME_HEADER.pack(index) + Frame.End(index)._encode(self.version))

    def frame(self, index: int, states: dict, items=(), followers: dict | None = None):
        """One full frame. `states` maps port -> (pre state, post state, post character)."""
        followers = followers or {}
        self.frame_start(index)
        for port, (pre_state, _, _) in states.items():
            self.pre(index, port, make_pre(pre_state))
            if port in followers:
                self.pre(index, port, make_pre(followers[port][0]), is_follower=True)
        for port, (_, post_state, character) in states.items():
            self.post(index, port, make_post(post_state, character))
            if port in followers:
                _, post_state, character = followers[port]
                self.post(index, port, make_post(post_state, character), is_follower=True)
        for item in items:
            self.item(index, item)
        self.frame_end(index)

    def frames(self, count: int, first=FIRST_FRAME_INDEX, characters=(InGameCharacter.FOX, InGameCharacter.MARTH)):
        for index in range(first, first + count):
            self.frame(index, {port: (14, 14, character) for port, character in enumerate(characters)})

    def raw(self) -> bytes:
        table = b"".join(struct.pack(">BH", code, size) for code, size in self.sizes.items())
        return bytes([EventType.EVENT_PAYLOADS, len(table) + 1]) + table + b"".join(self.events)

    def header_size(self) -> int:
        """Bytes before the first event, i.e. the container prefix, length and payload size table."""
        return 15 + 2 + 3 * len(self.sizes)

    def build(self, metadata: dict | None = None, declare_length=True, closed=True) -> bytes:
        """The replay file. Without `closed`, the file ends right after the last event, like one still being recorded."""
        raw = self.raw()
        out = b"{U\x03raw[$U#l" + struct.pack(">i", len(raw) if declare_length else 0) + raw
        if metadata is not None:
            out += b"U\x08metadata" + ubjson.dumpb(metadata)
        return out + b"}" if closed else out


def metadata(last_frame: int, ports=(0, 1)) -> dict:
    return {
        "startAt": "2023-01-12T00:43:55Z",
        "lastFrame": last_frame,
        "playedOn": "dolphin",
        "consoleNick": "Test Console",
        "players": {
            str(port): {"names": {"netplay": f"Netplay {port + 1}", "code": f"TEST#{port + 1}"}} for port in ports
        },
    }


def simple_game(count=100, version=VERSION, end=True) -> bytes:
    """A two player game of `count` frames, all standing still."""
    writer = ReplayWriter(version)
    writer.start()
    writer.frames(count)
    if end:
        writer.end()
    return writer.build(metadata(FIRST_FRAME_INDEX + count - 1))
