from .builder import FrameOrderViolation
from .event import End, Frame, Start, Version
from .game import Game
from .metadata import Metadata, MetadataError
from .parse import MalformedEvent, MalformedHeader, ParseError, TruncatedStream, UnknownEventCode, parse
from .query import IndexOutOfRange, NoSuchField, NotASequence, QueryError, QuerySyntaxError, query, select
from .util import Port
from .writer import RoundTripError, write_replay
from .enums import *
