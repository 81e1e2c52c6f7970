"""
Template rendering for probe records
"""

from datetime import datetime, timezone
from typing import Optional

from ..errors import FormatError
from ..models import ProbeRecord


DEFAULT_TEMPLATE = (
    "{validate} from {address}:"
    "seq={seq} stratum={stratum} "
    "offset={offset} distance={distance} RTT={rtt} ref={ref}\n"
)

# (suffix, nanoseconds per unit, decimals shown)
_DURATION_UNITS = (
    ('ns', 1, 0),
    ('µs', 1_000, 3),
    ('ms', 1_000_000, 6),
    ('s', 1_000_000_000, 9),
)

_NS_PER_MINUTE = 60 * 1_000_000_000
_NS_PER_HOUR = 60 * _NS_PER_MINUTE


def format_duration(seconds: float) -> str:
    """
    Render a duration the way Go prints time.Duration.

    Examples: ``0s``, ``850ns``, ``12.5µs``, ``-1.234567ms``, ``2.25s``,
    ``1m30s``, ``-1h2m5.5s``
    """
    ns = round(seconds * 1e9)
    if ns == 0:
        return "0s"

    sign = "-" if ns < 0 else ""
    ns = abs(ns)

    if ns >= _NS_PER_MINUTE:
        hours, rest = divmod(ns, _NS_PER_HOUR)
        minutes, rest = divmod(rest, _NS_PER_MINUTE)
        secs = f"{rest / 1_000_000_000:.9f}".rstrip("0").rstrip(".") or "0"
        prefix = f"{hours}h" if hours else ""
        return f"{sign}{prefix}{minutes}m{secs}s"

    for suffix, scale, decimals in _DURATION_UNITS:
        if ns < scale * 1000 or suffix == 's':
            if decimals == 0:
                return f"{sign}{ns}{suffix}"
            value = f"{ns / scale:.{decimals}f}".rstrip('0').rstrip('.')
            return f"{sign}{value}{suffix}"


def _format_timestamp(ts: float) -> str:
    if not ts:
        return "-"
    try:
        return datetime.fromtimestamp(ts, tz=timezone.utc).isoformat()
    except (OverflowError, OSError, ValueError):
        return "-"


def unescape_template(template: str) -> str:
    """Turn the ``\\n`` and ``\\t`` typed on a command line into real characters"""
    return template.replace('\\n', '\n').replace('\\t', '\t')


class Formatter:
    """
    Render ProbeRecords through a ``str.format`` template.

    Available fields: validate, address, seq, stratum, offset, distance,
    rtt, ref, root_delay, root_dispersion, leap, version, precision,
    poll, time, reference_time.
    """

    def __init__(self, template: Optional[str] = None):
        self.template = DEFAULT_TEMPLATE if template is None else template

    @staticmethod
    def fields(record: ProbeRecord) -> dict:
        """Template fields for a record"""
        reply = record.reply
        return {
            'validate': reply.validate() or "OK",
            'address': record.address,
            'seq': record.seq,
            'stratum': reply.stratum,
            'offset': format_duration(reply.clock_offset),
            'distance': format_duration(reply.root_distance),
            'rtt': format_duration(reply.rtt),
            'ref': reply.reference_string(),
            'root_delay': format_duration(reply.root_delay),
            'root_dispersion': format_duration(reply.root_dispersion),
            'leap': reply.leap,
            'version': reply.version,
            'precision': reply.precision,
            'poll': reply.poll,
            'time': _format_timestamp(reply.time),
            'reference_time': _format_timestamp(reply.reference_time),
        }

    def render(self, record: ProbeRecord) -> str:
        """
        Render one record.

        Raises:
            FormatError: unknown field or invalid format spec in the template
        """
        try:
            return self.template.format_map(self.fields(record))
        except KeyError as e:
            raise FormatError(record.address, f"unknown template field {e}") from e
        except (IndexError, ValueError, AttributeError, TypeError) as e:
            raise FormatError(record.address, f"template: {e}") from e
