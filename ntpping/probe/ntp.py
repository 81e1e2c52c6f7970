"""
NTP query over ntplib
"""

import logging

import ntplib

from ..errors import QueryError
from ..models import NTP_VERSION, ProbeReply, Target
from .base import BaseQuery


logger = logging.getLogger(__name__)


def reply_from_stats(stats: ntplib.NTPStats) -> ProbeReply:
    """Convert ntplib statistics into a ProbeReply"""
    return ProbeReply(
        stratum=stats.stratum,
        clock_offset=stats.offset,
        rtt=stats.delay,
        root_delay=stats.root_delay,
        root_dispersion=stats.root_dispersion,
        reference_id=stats.ref_id,
        leap=stats.leap,
        version=stats.version,
        precision=stats.precision,
        poll=stats.poll,
        time=stats.tx_time,
        reference_time=stats.ref_time,
    )


class NTPQuery(BaseQuery):
    """
    Single-packet NTP client query.
    
    Every failure (name lookup inside the client, socket errors,
    timeouts, malformed packets) is reported as QueryError.
    """
    
    def __init__(self, version: int = NTP_VERSION):
        self.version = version
        self._client = ntplib.NTPClient()
    
    def query(self, target: Target, timeout: float) -> ProbeReply:
        logger.debug("NTPv%d request to %s (timeout %.3fs)",
                     self.version, target.address, timeout)
        try:
            stats = self._client.request(
                target.host,
                version=self.version,
                port=target.port,
                timeout=timeout
            )
        except ntplib.NTPException as e:
            raise QueryError(target.address, str(e)) from e
        except OSError as e:
            raise QueryError(target.address, str(e) or e.__class__.__name__) from e
        
        return reply_from_stats(stats)
