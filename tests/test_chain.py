# tests/test_chain.py
import pytest

from ntpping.errors import FormatError, InvalidChainAddress, QueryError
from ntpping.models import Continue, RunConfig, Stop, StopReason, Target
from ntpping.output.formatter import Formatter
from ntpping.probe.chain import ProbeLoop, decide

from tests.conftest import FakeQuery, make_reply


def run_loop(script, count=16, target=Target("192.0.2.1"), template=None):
    fake = FakeQuery(script)
    loop = ProbeLoop(RunConfig(address=target.host, count=count, template=template), fake)
    loop.target = target
    lines, errors = [], []
    result = loop.run(on_line=lines.append, on_error=errors.append)
    return result, fake, lines, errors


def test_decide_stratum_one_stops():
    decision = decide(make_reply(stratum=1, ref="GPS"), seq=1, count=16)
    assert decision == Stop(StopReason.ROOT_REACHED)


def test_decide_follows_literal_reference():
    decision = decide(make_reply(stratum=3, ref="10.1.2.3"), seq=1, count=16)
    assert isinstance(decision, Continue)
    assert decision.target == Target("10.1.2.3")
    assert decision.target.address == "10.1.2.3"


def test_decide_budget_exhausted():
    decision = decide(make_reply(stratum=2), seq=4, count=4)
    assert decision == Stop(StopReason.COUNT_EXHAUSTED)


def test_decide_invalid_reference():
    # unprintable kiss code renders as an empty reference
    reply = make_reply(stratum=0, reference_id=0x00000001)
    decision = decide(reply, seq=1, count=16)
    assert isinstance(decision, Stop)
    assert decision.reason is StopReason.INVALID_CHAIN_ADDRESS
    assert isinstance(decision.error, InvalidChainAddress)
    assert decision.error.message == "invalid ip address"


def test_full_budget_without_root():
    script = [make_reply(stratum=2, ref="10.0.0.%d" % i) for i in range(1, 6)]
    result, fake, lines, errors = run_loop(script, count=5)

    assert [r.seq for r in result.records] == [1, 2, 3, 4, 5]
    assert len(lines) == 5
    assert errors == []
    assert result.reason is StopReason.COUNT_EXHAUSTED
    assert not result.failed


def test_stratum_one_is_last_record():
    script = [
        make_reply(stratum=3, ref="10.0.0.2"),
        make_reply(stratum=2, ref="10.0.0.3"),
        make_reply(stratum=1, ref="GPS"),
        make_reply(stratum=2, ref="10.0.0.9"),
    ]
    result, fake, lines, errors = run_loop(script, count=16)

    assert len(result.records) == 3
    assert result.records[-1].reply.stratum == 1
    assert result.reason is StopReason.ROOT_REACHED
    assert len(fake.targets) == 3


def test_redirect_uses_reference_without_port():
    script = [
        make_reply(stratum=3, ref="10.0.0.2"),
        make_reply(stratum=2, ref="10.0.0.3"),
        make_reply(stratum=1, ref="PPS"),
    ]
    result, fake, lines, errors = run_loop(script, target=Target("time.nist.gov", 456))

    assert [t.address for t in fake.targets] == ["time.nist.gov:456", "10.0.0.2", "10.0.0.3"]
    assert fake.targets[1] == Target("10.0.0.2", 123)
    assert [r.address for r in result.records] == ["time.nist.gov:456", "10.0.0.2", "10.0.0.3"]


def test_invalid_reference_stops_after_record():
    script = [
        make_reply(stratum=2, ref="10.0.0.2"),
        make_reply(stratum=0, reference_id=0),
        make_reply(stratum=1, ref="GPS"),
    ]
    result, fake, lines, errors = run_loop(script, count=16)

    assert len(result.records) == 2
    assert len(lines) == 2
    assert result.reason is StopReason.INVALID_CHAIN_ADDRESS
    assert len(errors) == 1
    assert errors[0].diagnostic() == "error from : invalid ip address"
    assert result.failed


def test_single_probe_mode_does_not_redirect():
    script = [make_reply(stratum=2, reference_id=0)]
    result, fake, lines, errors = run_loop(script, count=1)

    assert len(result.records) == 1
    assert len(fake.targets) == 1
    assert errors == []
    assert result.reason is StopReason.COUNT_EXHAUSTED


def test_query_failure_on_third_iteration():
    script = [
        make_reply(stratum=4, ref="10.0.0.2"),
        make_reply(stratum=3, ref="10.0.0.3"),
        QueryError("10.0.0.3", "No response received from 10.0.0.3."),
        make_reply(stratum=2, ref="10.0.0.4"),
    ]
    result, fake, lines, errors = run_loop(script, count=5)

    assert len(result.records) == 2
    assert len(lines) == 2
    assert len(fake.targets) == 3
    assert len(errors) == 1
    assert errors[0].diagnostic() == "error from 10.0.0.3: No response received from 10.0.0.3."
    assert result.reason is StopReason.QUERY_FAILED


def test_format_failure_stops_loop():
    script = [make_reply(stratum=2), make_reply(stratum=1, ref="GPS")]
    result, fake, lines, errors = run_loop(script, template="{nope}\n")

    assert result.records == []
    assert lines == []
    assert len(fake.targets) == 1
    assert isinstance(errors[0], FormatError)
    assert result.reason is StopReason.FORMAT_FAILED


@pytest.mark.parametrize("count", [0, -3])
def test_non_positive_count_is_noop(count):
    result, fake, lines, errors = run_loop([make_reply()], count=count)

    assert result.records == []
    assert fake.targets == []
    assert result.reason is StopReason.COUNT_EXHAUSTED


def test_run_resolves_target_when_unset():
    fake = FakeQuery([make_reply(stratum=1, ref="GPS")])
    loop = ProbeLoop(RunConfig(address="192.0.2.10", count=3), fake, Formatter())

    result = loop.run()

    assert fake.targets == [Target("192.0.2.10")]
    assert len(result.records) == 1
