"""
Probe loop: query, print, then follow the reference chain
"""

import logging
from typing import Callable, Optional

from ..errors import FormatError, InvalidChainAddress, NtpPingError, QueryError
from ..models import (
    Continue, Decision, ProbeRecord, ProbeReply, RunConfig, RunResult,
    Stop, StopReason, Target,
)
from ..output.formatter import Formatter
from .base import BaseQuery
from .resolver import initial_target, is_ip_literal, resolve_to_ip


logger = logging.getLogger(__name__)


def decide(reply: ProbeReply, seq: int, count: int) -> Decision:
    """
    Pick the next step after a successful, already emitted reply.

    A stratum 1 server ends the chain. Otherwise the next request goes
    to the reference address the server reported, which must be a
    literal IP. No name lookup is done for chained addresses.
    """
    if reply.stratum == 1:
        return Stop(StopReason.ROOT_REACHED)

    if seq >= count:
        return Stop(StopReason.COUNT_EXHAUSTED)

    ref = reply.reference_string()
    if not is_ip_literal(ref):
        return Stop(StopReason.INVALID_CHAIN_ADDRESS, InvalidChainAddress(ref))

    return Continue(Target(host=ref))


class ProbeLoop:
    """
    Sequential NTP prober.

    Sends up to ``count`` requests, one at a time. Each successful
    reply is rendered and handed to ``on_line``. Any failure ends the
    run; there is no retry.
    """

    def __init__(
        self,
        config: RunConfig,
        query: BaseQuery,
        formatter: Optional[Formatter] = None
    ):
        self.config = config
        self.query = query
        self.formatter = formatter or Formatter(config.template)
        self.target: Optional[Target] = None

    def resolve_target(self) -> Target:
        """
        Resolve the configured address into the first target.

        Raises:
            ResolutionError: the address cannot be resolved
        """
        ip = resolve_to_ip(self.config.address, self.config.ipv6)
        self.target = initial_target(self.config.address, ip, self.config.port)
        return self.target

    def run(
        self,
        on_line: Optional[Callable[[str], None]] = None,
        on_error: Optional[Callable[[NtpPingError], None]] = None
    ) -> RunResult:
        """
        Execute the probe loop.

        Args:
            on_line: Callback receiving each rendered record
            on_error: Callback receiving the error that ended the run

        Returns:
            RunResult with the emitted records and the stop reason
        """
        if self.target is None:
            self.resolve_target()

        result = RunResult(config=self.config)
        target = self.target

        for seq in range(1, self.config.count + 1):
            try:
                reply = self.query.query(target, self.config.timeout)
            except QueryError as e:
                return self._stop(result, Stop(StopReason.QUERY_FAILED, e), on_error)

            record = ProbeRecord(reply=reply, seq=seq, address=target.address)
            try:
                line = self.formatter.render(record)
            except FormatError as e:
                return self._stop(result, Stop(StopReason.FORMAT_FAILED, e), on_error)

            result.records.append(record)
            if on_line:
                on_line(line)

            decision = decide(reply, seq, self.config.count)
            if isinstance(decision, Stop):
                return self._stop(result, decision, on_error)

            logger.info("%s (stratum %d) syncs from %s",
                        target.address, reply.stratum, decision.target.address)
            target = decision.target

        result.reason = StopReason.COUNT_EXHAUSTED
        return result

    def _stop(
        self,
        result: RunResult,
        stop: Stop,
        on_error: Optional[Callable[[NtpPingError], None]]
    ) -> RunResult:
        result.reason = stop.reason
        result.error = stop.error
        logger.info("stopped after %d record(s): %s",
                    len(result.records), stop.reason.value)
        if stop.error is not None and on_error:
            on_error(stop.error)
        return result
