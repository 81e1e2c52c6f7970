import re
import sys
from pathlib import Path
from typing import Optional

import click
from rich.console import Console

from . import __version__
from .errors import ResolutionError
from .log import setup_logging
from .models import NTP_PORT, RunConfig
from .probe import NTPQuery, ProbeLoop
from .output import ConsoleOutput, Formatter, JsonExporter
from .output.formatter import unescape_template


console = Console(highlight=False)

EXIT_RESOLUTION_FAILED = 1
EXIT_RUN_FAILED = 2

_DURATION_PART = re.compile(r'(\d+(?:\.\d*)?|\.\d+)(ns|us|µs|ms|s|m|h)')
_DURATION_SCALE = {
    'ns': 1e-9,
    'us': 1e-6,
    'µs': 1e-6,
    'ms': 1e-3,
    's': 1.0,
    'm': 60.0,
    'h': 3600.0,
}


class Duration(click.ParamType):
    """
    Duration option such as ``3s``, ``250ms`` or ``1m30s``.

    A bare number is taken as seconds. The value is a float in seconds.
    """

    name = 'duration'

    def convert(self, value, param, ctx):
        if isinstance(value, (int, float)):
            seconds = float(value)
        else:
            seconds = self._parse(value.strip())
            if seconds is None:
                self.fail(f"{value!r} is not a valid duration", param, ctx)
        if seconds <= 0:
            self.fail(f"{value!r} must be positive", param, ctx)
        return seconds

    @staticmethod
    def _parse(text: str) -> Optional[float]:
        try:
            return float(text)
        except ValueError:
            pass

        pos = 0
        total = 0.0
        for match in _DURATION_PART.finditer(text):
            if match.start() != pos:
                return None
            total += float(match.group(1)) * _DURATION_SCALE[match.group(2)]
            pos = match.end()

        if pos == 0 or pos != len(text):
            return None
        return total


@click.command(context_settings={'auto_envvar_prefix': 'NTPPING'})
@click.argument('address')
@click.option('-t', '--timeout', default='3s', type=Duration(),
              help='Timeout per query, e.g. 3s or 500ms (default: 3s)')
@click.option('-p', '--port', default=NTP_PORT, type=int,
              help=f'NTP server port (default: {NTP_PORT})')
@click.option('-c', '--count', default=16, type=int,
              help='Stop after COUNT replies; 1 acts like ping (default: 16)')
@click.option('-6', '--ipv6', is_flag=True,
              help='Prefer IPv6 when resolving a host name')
@click.option('-f', '--format', 'template', default=None,
              help='Output template using {field} names; \\n and \\t are unescaped')
@click.option('--json', 'json_path', type=click.Path(dir_okay=False),
              help='Export results to JSON file')
@click.option('--strict', is_flag=True,
              help='Exit with status 2 when the run ends on an error')
@click.option('-v', '--verbose', count=True,
              help='Log redirects (-v) and every query (-vv) to stderr')
@click.version_option(version=__version__)
def main(address: str, timeout: float, port: int, count: int, ipv6: bool,
         template: Optional[str], json_path: Optional[str], strict: bool,
         verbose: int):
    """
    ntpping - query an NTP server and follow its reference chain.

    Query ADDRESS (host name or IP address) up to COUNT times. After each
    reply from a server above stratum 1, the next query goes to the
    server it reports as its own reference, until a stratum 1 server
    answers.

    Examples:

        ntpping pool.ntp.org

        ntpping time.google.com -c 1

        ntpping 192.168.1.1 -p 1123 --json chain.json
    """
    logger = setup_logging(verbose)
    output = ConsoleOutput(console)

    config = RunConfig(
        address=address,
        timeout=timeout,
        port=port,
        count=count,
        ipv6=ipv6,
        template=unescape_template(template) if template is not None else None,
    )

    try:
        with NTPQuery() as query:
            loop = ProbeLoop(config, query, Formatter(config.template))

            try:
                target = loop.resolve_target()
            except ResolutionError as e:
                output.print_diagnostic(e)
                sys.exit(EXIT_RESOLUTION_FAILED)

            if verbose:
                output.print_header(address, target, count)

            result = loop.run(on_line=output.print_line,
                              on_error=output.print_diagnostic)

        if verbose:
            output.print_summary(result)

        if json_path:
            json_file = Path(json_path)
            JsonExporter().export(result, json_file)
            logger.info("results exported to %s", json_file.absolute())

        if strict and result.failed:
            sys.exit(EXIT_RUN_FAILED)

    except KeyboardInterrupt:
        console.print("\n[yellow]Interrupted[/]")
        sys.exit(130)
    except OSError as e:
        output.print_error(str(e))
        sys.exit(1)


if __name__ == '__main__':
    main()
