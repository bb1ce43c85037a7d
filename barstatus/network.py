"""Network components: addresses, link state, traffic rates and Wi-Fi."""

from __future__ import annotations

import os
import re
import socket
import struct

import psutil

from .util import fmt_human, read_file, warn

NET_CLASS = "/sys/class/net"
DEFAULT_INTERVAL = 1000
"""Update interval in milliseconds that traffic rates are scaled by."""

# netlink framing
NLMSG_HDRLEN = 16
GENL_HDRLEN = 4
NLA_HDRLEN = 4
NLM_F_REQUEST = 0x1
NLM_F_DUMP = 0x300
NLMSG_DONE = 3
NETLINK_GENERIC = 16

# generic netlink controller
GENL_ID_CTRL = 0x10
CTRL_CMD_GETFAMILY = 3
CTRL_ATTR_FAMILY_ID = 1
CTRL_ATTR_FAMILY_NAME = 2

# nl80211
NL80211_CMD_GET_INTERFACE = 5
NL80211_CMD_GET_STATION = 17
NL80211_ATTR_IFINDEX = 3
NL80211_ATTR_STA_INFO = 21
NL80211_ATTR_SSID = 52
NL80211_STA_INFO_SIGNAL_AVG = 13

_RESPONSE_SIZE = 4096
_NLMSG_HEADER = struct.Struct("=IHHII")
_GENL_HEADER = struct.Struct("=BBH")
_NLA_HEADER = struct.Struct("=HH")
_UINT = re.compile(r"\s*(\d+)")
_UINTMAX = 1 << 64


def _align(length: int) -> int:
    return (length + 3) & ~3


def _ip(interface: str, family: int) -> str | None:
    try:
        addresses = psutil.net_if_addrs()
    except OSError as exc:
        warn(f"getifaddrs: {exc.strerror}")
        return None
    for addr in addresses.get(interface, ()):
        if addr.family == family and addr.address:
            return addr.address
    return None


def ipv4(interface: str) -> str | None:
    """First IPv4 address of ``interface``."""
    return _ip(interface, socket.AF_INET)


def ipv6(interface: str) -> str | None:
    """First IPv6 address of ``interface``."""
    return _ip(interface, socket.AF_INET6)


def up(interface: str) -> str | None:
    """``"up"`` or ``"down"`` for an interface that has an address."""
    try:
        addresses = psutil.net_if_addrs()
        stats = psutil.net_if_stats()
    except OSError as exc:
        warn(f"getifaddrs: {exc.strerror}")
        return None
    if not addresses.get(interface):
        return None
    state = stats.get(interface)
    if state is None:
        return None
    return "up" if state.isup else "down"


class NetSpeedMeter:
    """Byte rate of an interface between successive readings of its counter."""

    def __init__(
        self,
        interface: str,
        direction: str = "rx",
        interval: int = DEFAULT_INTERVAL,
        stats_root: str = NET_CLASS,
    ) -> None:
        if direction not in ("rx", "tx"):
            raise ValueError(f"direction must be 'rx' or 'tx', not {direction!r}")
        if interval <= 0:
            raise ValueError("interval must be positive")
        self.interface = interface
        self.direction = direction
        self.interval = interval
        self.path = os.path.join(
            stats_root, interface, "statistics", f"{direction}_bytes"
        )
        self._bytes = 0

    def read(self) -> str | None:
        """Rate per second since the previous reading; ``None`` on the first."""
        previous = self._bytes
        text = read_file(self.path)
        if text is None:
            return None
        match = _UINT.match(text)
        if match is None:
            return None
        self._bytes = int(match.group(1))
        if previous == 0:
            return None
        delta = (self._bytes - previous) % _UINTMAX
        return fmt_human(delta * 1000 // self.interval, 1024)


_meters: dict[tuple[str, str], NetSpeedMeter] = {}


def _meter(interface: str, direction: str) -> NetSpeedMeter:
    key = (interface, direction)
    if key not in _meters:
        _meters[key] = NetSpeedMeter(interface, direction)
    return _meters[key]


def netspeed_rx(interface: str) -> str | None:
    """Receive rate of ``interface``."""
    return _meter(interface, "rx").read()


def netspeed_tx(interface: str) -> str | None:
    """Transmit rate of ``interface``."""
    return _meter(interface, "tx").read()


def rssi_to_perc(rssi: int) -> int:
    """Map a signal strength in dBm to a percentage."""
    if rssi >= -50:
        return 100
    if rssi <= -100:
        return 0
    return 2 * (rssi + 100)


def find_attr(attr: int, data: bytes) -> bytes | None:
    """Payload of the first netlink attribute of type ``attr`` in ``data``."""
    offset = 0
    while offset + NLA_HDRLEN <= len(data):
        length, kind = _NLA_HEADER.unpack_from(data, offset)
        if kind == attr:
            return bytes(data[offset + NLA_HDRLEN : offset + max(length, NLA_HDRLEN)])
        if length < NLA_HDRLEN:
            return None
        offset += _align(length)
    return None


def _message(msg_type: int, flags: int, seq: int, cmd: int, attr: int, value: bytes) -> bytes:
    padded = value + b"\0" * (_align(len(value)) - len(value))
    total = NLMSG_HDRLEN + GENL_HDRLEN + NLA_HDRLEN + len(padded)
    return (
        _NLMSG_HEADER.pack(total, msg_type, flags, seq, 0)
        + _GENL_HEADER.pack(cmd, 1, 0)
        + _NLA_HEADER.pack(NLA_HDRLEN + len(value), attr)
        + padded
    )


def _ifindex(interface: str) -> int | None:
    try:
        return socket.if_nametoindex(interface)
    except OSError as exc:
        warn(f"ioctl 'SIOCGIFINDEX': {exc.strerror or exc}")
        return None


class _Nl80211:
    """A generic netlink connection to the nl80211 family."""

    def __init__(self) -> None:
        self._sock: socket.socket | None = None
        self._seq = 1
        self._family = 0

    def _next_seq(self) -> int:
        seq = self._seq
        self._seq += 1
        return seq

    def _socket(self) -> socket.socket | None:
        if self._sock is None:
            family = getattr(socket, "AF_NETLINK", None)
            if family is None:
                warn("socket 'AF_NETLINK': not supported")
                return None
            try:
                self._sock = socket.socket(family, socket.SOCK_RAW, NETLINK_GENERIC)
            except OSError as exc:
                warn(f"socket 'AF_NETLINK': {exc.strerror}")
                return None
        return self._sock

    def send(self, message: bytes) -> bool:
        sock = self._socket()
        if sock is None:
            return False
        try:
            sent = sock.send(message)
        except OSError as exc:
            warn(f"send 'AF_NETLINK': {exc.strerror}")
            return False
        if sent != len(message):
            warn("send 'AF_NETLINK': short write")
            return False
        return True

    def recv(self) -> bytes | None:
        sock = self._socket()
        if sock is None:
            return None
        try:
            return sock.recv(_RESPONSE_SIZE)
        except OSError as exc:
            warn(f"recv 'AF_NETLINK': {exc.strerror}")
            return None

    def family(self) -> int:
        if self._family:
            return self._family
        request = _message(
            GENL_ID_CTRL,
            NLM_F_REQUEST,
            self._next_seq(),
            CTRL_CMD_GETFAMILY,
            CTRL_ATTR_FAMILY_NAME,
            b"nl80211\0",
        )
        if not self.send(request):
            return 0
        response = self.recv()
        if response is None or len(response) <= len(request):
            return 0
        payload = find_attr(CTRL_ATTR_FAMILY_ID, response[len(request) :])
        if payload is not None and len(payload) == 2:
            (self._family,) = struct.unpack("=H", payload)
        return self._family

    def essid(self, interface: str) -> str | None:
        idx = _ifindex(interface)
        if idx is None:
            warn(f"interface {interface} not found")
            return None
        family = self.family()
        if not family:
            warn("nl80211 family not found")
            return None
        request = _message(
            family,
            NLM_F_REQUEST,
            self._next_seq(),
            NL80211_CMD_GET_INTERFACE,
            NL80211_ATTR_IFINDEX,
            struct.pack("=I", idx),
        )
        if not self.send(request):
            return None
        response = self.recv()
        if response is None or len(response) <= NLMSG_HDRLEN + GENL_HDRLEN:
            return None
        ssid = find_attr(NL80211_ATTR_SSID, response[NLMSG_HDRLEN + GENL_HDRLEN :])
        if ssid is None:
            return None
        return ssid.split(b"\0", 1)[0].decode("utf-8", errors="replace")

    def signal(self, interface: str) -> str | None:
        idx = _ifindex(interface)
        if idx is None:
            warn(f"interface {interface} not found")
            return None
        family = self.family()
        if not family:
            warn("nl80211 family not found")
            return None
        request = _message(
            family,
            NLM_F_REQUEST | NLM_F_DUMP,
            self._next_seq(),
            NL80211_CMD_GET_STATION,
            NL80211_ATTR_IFINDEX,
            struct.pack("=i", idx),
        )
        if not self.send(request):
            return None

        strength = ""
        while True:
            response = self.recv()
            if response is None or len(response) < NLMSG_HDRLEN:
                return None
            end = len(response)
            offset = 0
            while offset < end and end - offset >= NLMSG_HDRLEN:
                length, msg_type, _, _, _ = _NLMSG_HEADER.unpack_from(response, offset)
                if length < NLMSG_HDRLEN:
                    return strength or None
                stop = end if end - offset < length else offset + length
                if not strength and length > NLMSG_HDRLEN + GENL_HDRLEN:
                    body = response[offset + NLMSG_HDRLEN + GENL_HDRLEN : stop]
                    info = find_attr(NL80211_ATTR_STA_INFO, body)
                    if info is not None:
                        avg = find_attr(NL80211_STA_INFO_SIGNAL_AVG, info)
                        if avg is not None and len(avg) == 1:
                            (rssi,) = struct.unpack("=b", avg)
                            strength = str(rssi_to_perc(rssi))
                if msg_type == NLMSG_DONE:
                    return strength or None
                offset = stop


_nl80211 = _Nl80211()


def wifi_essid(interface: str) -> str | None:
    """ESSID of the network that ``interface`` is associated with."""
    return _nl80211.essid(interface)


def wifi_perc(interface: str) -> str | None:
    """Average signal strength of the associated station in percent."""
    return _nl80211.signal(interface)