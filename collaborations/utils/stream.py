"""
Binary stream contract used to ship documents and requests between nodes.

Big-endian fixed-width integers, variable-length ints in 7-bit groups (low bits
first), length-prefixed UTF-8 strings and one-byte booleans.
"""
import io
import struct
from datetime import datetime, timedelta, timezone
from enum import Enum
from typing import Callable, List, Optional, Protocol, Sequence, Type, TypeVar

EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)

E = TypeVar("E", bound=Enum)
T = TypeVar("T")


class Writeable(Protocol):
    def write_to(self, output: "StreamOutput") -> None:
        ...


class StreamOutput:
    """Append-only binary writer."""

    def __init__(self):
        self._buffer = io.BytesIO()

    def getvalue(self) -> bytes:
        return self._buffer.getvalue()

    def write_bytes(self, data: bytes) -> None:
        self._buffer.write(data)

    def write_byte(self, value: int) -> None:
        self._buffer.write(bytes([value & 0xFF]))

    def write_boolean(self, value: bool) -> None:
        self.write_byte(1 if value else 0)

    def write_int(self, value: int) -> None:
        self._buffer.write(struct.pack(">i", value))

    def write_long(self, value: int) -> None:
        self._buffer.write(struct.pack(">q", value))

    def write_vint(self, value: int) -> None:
        if value < 0:
            raise ValueError(f"Negative vInt not supported: {value}")
        while value & ~0x7F:
            self.write_byte((value & 0x7F) | 0x80)
            value >>= 7
        self.write_byte(value)

    def write_string(self, value: str) -> None:
        encoded = value.encode("utf-8")
        self.write_vint(len(encoded))
        self.write_bytes(encoded)

    def write_optional_string(self, value: Optional[str]) -> None:
        if value is None:
            self.write_boolean(False)
        else:
            self.write_boolean(True)
            self.write_string(value)

    def write_string_collection(self, values: Sequence[str]) -> None:
        self.write_vint(len(values))
        for value in values:
            self.write_string(value)

    def write_enum(self, value: Enum) -> None:
        self.write_vint(list(type(value)).index(value))

    def write_instant(self, value: datetime) -> None:
        delta = value - EPOCH
        seconds = delta.days * 86400 + delta.seconds
        self.write_long(seconds)
        self.write_int(delta.microseconds * 1000)

    def write_optional_writeable(self, value: Optional[Writeable]) -> None:
        if value is None:
            self.write_boolean(False)
        else:
            self.write_boolean(True)
            value.write_to(self)


class StreamInput:
    """Sequential reader over bytes produced by StreamOutput."""

    def __init__(self, data: bytes):
        self._buffer = io.BytesIO(data)

    def read_bytes(self, length: int) -> bytes:
        data = self._buffer.read(length)
        if len(data) != length:
            raise EOFError(f"Expected {length} bytes, got {len(data)}")
        return data

    def read_byte(self) -> int:
        return self.read_bytes(1)[0]

    def read_boolean(self) -> bool:
        value = self.read_byte()
        if value not in (0, 1):
            raise ValueError(f"Invalid boolean byte: {value}")
        return value == 1

    def read_int(self) -> int:
        return struct.unpack(">i", self.read_bytes(4))[0]

    def read_long(self) -> int:
        return struct.unpack(">q", self.read_bytes(8))[0]

    def read_vint(self) -> int:
        result = 0
        shift = 0
        while True:
            byte = self.read_byte()
            result |= (byte & 0x7F) << shift
            if not byte & 0x80:
                return result
            shift += 7
            if shift > 35:
                raise ValueError("vInt is too long")

    def read_string(self) -> str:
        length = self.read_vint()
        return self.read_bytes(length).decode("utf-8")

    def read_optional_string(self) -> Optional[str]:
        if self.read_boolean():
            return self.read_string()
        return None

    def read_string_list(self) -> List[str]:
        return [self.read_string() for _ in range(self.read_vint())]

    def read_enum(self, enum_class: Type[E]) -> E:
        ordinal = self.read_vint()
        members = list(enum_class)
        if ordinal >= len(members):
            raise ValueError(f"Unknown {enum_class.__name__} ordinal: {ordinal}")
        return members[ordinal]

    def read_instant(self) -> datetime:
        seconds = self.read_long()
        nanos = self.read_int()
        return EPOCH + timedelta(seconds=seconds, microseconds=nanos // 1000)

    def read_optional_writeable(self, reader: Callable[["StreamInput"], T]) -> Optional[T]:
        if self.read_boolean():
            return reader(self)
        return None

    def at_end(self) -> bool:
        position = self._buffer.tell()
        end = len(self._buffer.getbuffer())
        return position >= end
