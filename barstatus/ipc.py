"""Client for the window manager's IPC socket: framing, requests and a command line."""

from __future__ import annotations

import enum
import json
import math
import os
import socket
import struct
import sys
from typing import Optional, Sequence

DEFAULT_SOCKET_PATH = "/tmp/dwm.sock"

IPC_MAGIC = b"DWM-IPC"

IPC_EVENT_TAG_CHANGE = "tag_change_event"
IPC_EVENT_CLIENT_FOCUS_CHANGE = "client_focus_change_event"
IPC_EVENT_LAYOUT_CHANGE = "layout_change_event"
IPC_EVENT_MONITOR_FOCUS_CHANGE = "monitor_focus_change_event"
IPC_EVENT_FOCUSED_TITLE_CHANGE = "focused_title_change_event"
IPC_EVENT_FOCUSED_STATE_CHANGE = "focused_state_change_event"

# magic, payload size, message type; packed, native byte order
_HEADER = struct.Struct("=7sIB")
HEADER_SIZE = _HEADER.size

_DIGITS = "0123456789"
_INT64_MIN = -(1 << 63)
_INT64_MAX = (1 << 63) - 1


class IPCMessageType(enum.IntEnum):
    """Kinds of message exchanged over the socket."""

    RUN_COMMAND = 0
    GET_MONITORS = 1
    GET_TAGS = 2
    GET_LAYOUTS = 3
    GET_DWM_CLIENT = 4
    SUBSCRIBE = 5
    EVENT = 6


class IPCError(Exception):
    """A message could not be read from the socket."""


def pack_message(msg_type: int, payload: bytes) -> bytes:
    """Frame ``payload`` with the IPC header."""
    return _HEADER.pack(IPC_MAGIC, len(payload), int(msg_type)) + payload


def unpack_header(data: bytes) -> tuple[int, int]:
    """Return ``(message type, payload size)`` from the start of ``data``."""
    if len(data) < HEADER_SIZE:
        raise IPCError(
            f"Header too short: got {len(data)} bytes, expected {HEADER_SIZE}"
        )
    magic, size, msg_type = _HEADER.unpack_from(data)
    if magic != IPC_MAGIC:
        shown = magic.decode("ascii", errors="replace")
        raise IPCError(
            f"Invalid magic string. Got '{shown}', expected '{IPC_MAGIC.decode()}'"
        )
    return msg_type, size


def is_float(s: str) -> bool:
    """Digits with at most one inner decimal point and an optional leading minus."""
    dot_used = minus_used = False
    last = len(s) - 1
    for index, char in enumerate(s):
        if char in _DIGITS:
            continue
        if not dot_used and char == "." and index not in (0, last):
            dot_used = True
        elif not minus_used and char == "-" and index == 0:
            minus_used = True
        else:
            return False
    return True


def is_unsigned_int(s: str) -> bool:
    """Only digits."""
    return all(char in _DIGITS for char in s)


def is_signed_int(s: str) -> bool:
    """Digits with an optional leading minus."""
    return all(
        char in _DIGITS or (index == 0 and char == "-")
        for index, char in enumerate(s)
    )


def _to_int(s: str) -> int:
    """Leading integer of ``s``, 0 when there is none, clamped to 64 bits."""
    sign = -1 if s.startswith("-") else 1
    digits = s[1:] if s.startswith("-") else s
    number = 0
    for char in digits:
        if char not in _DIGITS:
            break
        number = number * 10 + int(char)
    return max(_INT64_MIN, min(_INT64_MAX, sign * number))


def _to_single(s: str) -> float:
    """``s`` as a double rounded through single precision."""
    value = float(s)
    try:
        return struct.unpack("=f", struct.pack("=f", value))[0]
    except OverflowError:
        return math.copysign(math.inf, value)


def _dump_double(value: float) -> str:
    text = format(value, ".17g")
    if all(char in "0123456789-" for char in text):
        text += ".0"
    return text


def _dump_string(value: str) -> str:
    return json.dumps(value, ensure_ascii=False)


def _dump_argument(arg: str) -> str:
    if is_signed_int(arg):
        return str(_to_int(arg))
    if is_float(arg):
        return _dump_double(_to_single(arg))
    return _dump_string(arg)


def build_run_command(name: str, args: Sequence[str]) -> bytes:
    """JSON payload that runs command ``name`` with typed ``args``."""
    arguments = ",".join(_dump_argument(arg) for arg in args)
    text = f'{{"command":{_dump_string(name)},"args":[{arguments}]}}'
    return text.encode("utf-8")


def _build_get_client(window: int) -> bytes:
    return f'{{"client_window_id":{window}}}'.encode("utf-8")


def _build_subscribe(event: str) -> bytes:
    return f'{{"event":{_dump_string(event)},"action":"subscribe"}}'.encode("utf-8")


class IPCConnection:
    """A stream connection to the IPC socket."""

    def __init__(self, path: str = DEFAULT_SOCKET_PATH) -> None:
        self.path = path
        self._sock = socket.socket(socket.AF_UNIX, socket.SOCK_STREAM)
        try:
            self._sock.connect(path)
        except OSError:
            self._sock.close()
            raise

    def __enter__(self) -> "IPCConnection":
        return self

    def __exit__(self, *exc: object) -> None:
        self.close()

    def send(self, msg_type: int, payload: bytes) -> None:
        """Send one framed message."""
        self._sock.sendall(pack_message(msg_type, payload))

    def _read_exact(self, count: int, what: str) -> bytes:
        chunks = bytearray()
        while len(chunks) < count:
            chunk = self._sock.recv(count - len(chunks))
            if not chunk:
                raise IPCError(
                    f"Unexpectedly reached EOF while reading {what}. "
                    f"Read {len(chunks)} bytes, expected {count} total bytes."
                )
            chunks.extend(chunk)
        return bytes(chunks)

    def receive(self) -> tuple[int, bytes]:
        """Read one message and return ``(message type, payload)``."""
        msg_type, size = unpack_header(self._read_exact(HEADER_SIZE, "header"))
        return msg_type, self._read_exact(size, "payload")

    def close(self) -> None:
        """Close the connection."""
        self._sock.close()


def _usage(prog: str) -> str:
    pad = " " * 34
    lines = [
        f"usage: {prog} [options] <command> [...]",
        "",
        "Commands:",
        "  run_command <name> [args...]    Run an IPC command",
        "",
        "  get_monitors                    Get monitor properties",
        "",
        "  get_tags                        Get list of tags",
        "",
        "  get_layouts                     Get list of layouts",
        "",
        "  get_dwm_client <window_id>      Get dwm client proprties",
        "",
        "  subscribe [events...]           Subscribe to specified events",
        f"{pad}Options: {IPC_EVENT_TAG_CHANGE},",
        f"{pad}{IPC_EVENT_LAYOUT_CHANGE},",
        f"{pad}{IPC_EVENT_CLIENT_FOCUS_CHANGE},",
        f"{pad}{IPC_EVENT_MONITOR_FOCUS_CHANGE},",
        f"{pad}{IPC_EVENT_FOCUSED_TITLE_CHANGE},",
        f"{pad}{IPC_EVENT_FOCUSED_STATE_CHANGE}",
        "",
        "  help                            Display this message",
        "",
        "Options:",
        "  --ignore-reply                  Don't print reply messages from",
        "                                  run_command and subscribe.",
        "",
    ]
    return "\n".join(lines)


def _usage_error(prog: str, message: str) -> int:
    sys.stderr.write(
        f"Error: {message}\nusage: {prog} <command> [...]\nTry '{prog} help'\n"
    )
    return 1


def _print_reply(reply: bytes) -> None:
    text = reply.split(b"\0", 1)[0].decode("utf-8", errors="replace")
    sys.stdout.write(text + "\n")
    sys.stdout.flush()


_SIMPLE_REQUESTS = {
    "get_monitors": IPCMessageType.GET_MONITORS,
    "get_tags": IPCMessageType.GET_TAGS,
    "get_layouts": IPCMessageType.GET_LAYOUTS,
}


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Send a request to the IPC socket and print the reply; returns the exit status."""
    if argv is None:
        argv = sys.argv[1:]
    prog = os.path.basename(sys.argv[0]) if sys.argv and sys.argv[0] else "msg"
    args = list(argv)

    ignore_reply = False
    if args and args[0] == "--ignore-reply":
        ignore_reply = True
        args = args[1:]
    if not args:
        return _usage_error(prog, "Expected an argument, got none")

    command, rest = args[0], args[1:]
    if command == "help":
        sys.stdout.write(_usage(prog) + "\n")
        return 0

    requests: list[tuple[IPCMessageType, bytes, bool]]
    if command == "run_command":
        if not rest:
            return _usage_error(prog, "No command specified")
        payload = build_run_command(rest[0], rest[1:])
        requests = [(IPCMessageType.RUN_COMMAND, payload, not ignore_reply)]
    elif command in _SIMPLE_REQUESTS:
        requests = [(_SIMPLE_REQUESTS[command], b"\0", True)]
    elif command == "get_dwm_client":
        if not rest:
            return _usage_error(prog, "Expected the window id")
        if not is_unsigned_int(rest[0]):
            return _usage_error(prog, "Expected unsigned integer argument")
        payload = _build_get_client(_to_int(rest[0]))
        requests = [(IPCMessageType.GET_DWM_CLIENT, payload, True)]
    elif command == "subscribe":
        if not rest:
            return _usage_error(prog, "Expected event name")
        requests = [
            (IPCMessageType.SUBSCRIBE, _build_subscribe(event), not ignore_reply)
            for event in rest
        ]
    else:
        return _usage_error(prog, f"Invalid argument '{command}'")

    try:
        connection = IPCConnection(DEFAULT_SOCKET_PATH)
    except OSError:
        sys.stderr.write("Failed to connect to socket\n")
        return 1

    with connection:
        try:
            for msg_type, payload, show in requests:
                connection.send(msg_type, payload)
                _, reply = connection.receive()
                if show:
                    _print_reply(reply)
            if command == "subscribe":
                while True:
                    _, reply = connection.receive()
                    _print_reply(reply)
        except (IPCError, OSError) as exc:
            sys.stderr.write(
                f"{exc}\nError receiving response from socket. "
                "The connection might have been lost.\n"
            )
            return 2
    return 0


if __name__ == "__main__":
    sys.exit(main())