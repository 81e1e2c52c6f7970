# tests/conftest.py
import ipaddress
import struct

from ntpping.errors import QueryError
from ntpping.models import ProbeReply
from ntpping.probe.base import BaseQuery


def ref_ip(ip: str) -> int:
    """Reference id of a stratum > 1 server syncing from ip"""
    return int(ipaddress.IPv4Address(ip))


def ref_label(label: str) -> int:
    """Reference id of a stratum 1 server with the given clock label"""
    return struct.unpack('!I', label.encode('ascii').ljust(4, b'\x00'))[0]


def make_reply(stratum=2, ref="10.0.0.1", **kwargs) -> ProbeReply:
    values = dict(
        stratum=stratum,
        clock_offset=0.001,
        rtt=0.005,
        root_delay=0.002,
        root_dispersion=0.0005,
        time=1_700_000_000.0,
        reference_time=1_699_999_900.0,
    )
    values.update(kwargs)
    if "reference_id" not in values:
        values["reference_id"] = ref_label(ref) if stratum in (0, 1) else ref_ip(ref)
    return ProbeReply(**values)


class FakeQuery(BaseQuery):
    """Replays a script of replies or errors, recording every target"""

    def __init__(self, script):
        self.script = list(script)
        self.targets = []
        self.timeouts = []
        self.closed = False

    def query(self, target, timeout):
        self.targets.append(target)
        self.timeouts.append(timeout)
        if not self.script:
            raise QueryError(target.address, "no more responses")
        step = self.script.pop(0)
        if isinstance(step, Exception):
            raise step
        return step

    def close(self):
        self.closed = True
