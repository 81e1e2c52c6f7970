"""
Data models for ntpping
"""

import ipaddress
import struct
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Union

from .errors import NtpPingError


NTP_PORT = 123
NTP_VERSION = 4

# Limits used when validating a reply
MAX_STRATUM = 16
MAX_DISPERSION = 16.0  # seconds
MAX_POLL_INTERVAL = float(1 << 17)  # seconds, ~36h
LEAP_NOT_IN_SYNC = 3


@dataclass
class Target:
    """Server to query: host (name or literal IP) and UDP port"""
    host: str
    port: int = NTP_PORT

    @property
    def address(self) -> str:
        """Display form, bare host on the standard port"""
        if self.port == NTP_PORT:
            return self.host
        if ':' in self.host:
            return f"[{self.host}]:{self.port}"
        return f"{self.host}:{self.port}"

    def __str__(self) -> str:
        return self.address


@dataclass(frozen=True)
class ProbeReply:
    """A single NTP reply, durations in seconds and timestamps in Unix time"""
    stratum: int
    clock_offset: float
    rtt: float
    root_delay: float = 0.0
    root_dispersion: float = 0.0
    reference_id: int = 0
    leap: int = 0
    version: int = NTP_VERSION
    precision: int = 0
    poll: int = 0
    time: float = 0.0
    reference_time: float = 0.0

    @property
    def root_distance(self) -> float:
        """Half the total delay plus the root dispersion"""
        return (self.rtt + self.root_delay) / 2 + self.root_dispersion

    def reference_string(self) -> str:
        """
        Human form of the reference identifier.

        Stratum 0 and 1 servers carry a four character ASCII label
        (a kiss code or a clock source such as ``GPS``). Higher strata
        carry the IPv4 address of their upstream server.
        """
        if self.stratum in (0, 1):
            raw = struct.pack('!I', self.reference_id & 0xFFFFFFFF).rstrip(b'\x00')
            if not all(0x20 <= b < 0x7F for b in raw):
                return ""
            return raw.decode('ascii')
        return str(ipaddress.IPv4Address(self.reference_id & 0xFFFFFFFF))

    def validate(self) -> Optional[str]:
        """Return a warning if the reply is not usable for synchronization"""
        if self.stratum == 0:
            return "kiss of death received"
        if self.stratum >= MAX_STRATUM:
            return "invalid stratum in response"
        if self.time - self.reference_time > MAX_POLL_INTERVAL:
            return "server clock not fresh"
        if self.root_delay / 2 + self.root_dispersion > MAX_DISPERSION:
            return "invalid dispersion in response"
        if self.time < self.reference_time:
            return "invalid time reported"
        if self.leap == LEAP_NOT_IN_SYNC:
            return "invalid leap second"
        return None


@dataclass(frozen=True)
class ProbeRecord:
    """A reply tagged with its sequence number and the address it came from"""
    reply: ProbeReply
    seq: int
    address: str


@dataclass(frozen=True)
class RunConfig:
    """Options captured once at startup"""
    address: str
    timeout: float = 3.0
    port: int = NTP_PORT
    count: int = 16
    ipv6: bool = False
    template: Optional[str] = None


class StopReason(Enum):
    """Why a run ended"""
    ROOT_REACHED = "root_reached"
    COUNT_EXHAUSTED = "count_exhausted"
    QUERY_FAILED = "query_failed"
    FORMAT_FAILED = "format_failed"
    INVALID_CHAIN_ADDRESS = "invalid_chain_address"

    @property
    def failed(self) -> bool:
        return self not in (StopReason.ROOT_REACHED, StopReason.COUNT_EXHAUSTED)


@dataclass(frozen=True)
class Continue:
    """Keep probing, next request goes to ``target``"""
    target: Target


@dataclass(frozen=True)
class Stop:
    """End the run"""
    reason: StopReason
    error: Optional[NtpPingError] = None


Decision = Union[Continue, Stop]


@dataclass
class RunResult:
    """Complete outcome of a probe run"""
    config: RunConfig
    records: list[ProbeRecord] = field(default_factory=list)
    reason: Optional[StopReason] = None
    error: Optional[NtpPingError] = None

    @property
    def failed(self) -> bool:
        return self.reason is not None and self.reason.failed
