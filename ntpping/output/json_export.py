"""
JSON export for ntpping
"""

import json
from datetime import datetime
from pathlib import Path
from typing import Optional

from ..models import ProbeRecord, RunResult
from .. import __version__


class JsonExporter:
    """
    Export a probe run to JSON.

    Durations are kept in seconds so the file is easy to post-process.
    """

    def export(self, result: RunResult, output_path: Optional[Path] = None) -> dict:
        """
        Export a run result to JSON.

        Args:
            result: Probe run result
            output_path: Optional file path to write

        Returns:
            JSON-serializable dict
        """
        config = result.config
        data = {
            "meta": {
                "version": __version__,
                "generator": "ntpping",
                "generated_at": datetime.now().isoformat()
            },
            "address": config.address,
            "port": config.port,
            "count": config.count,
            "timeout": config.timeout,
            "ipv6": config.ipv6,
            "records": [self._serialize_record(r) for r in result.records],
            "stop_reason": result.reason.value if result.reason else None,
            "error": result.error.diagnostic() if result.error else None,
        }

        if output_path:
            self._write_file(data, output_path)

        return data

    def _serialize_record(self, record: ProbeRecord) -> dict:
        """Serialize a single record"""
        reply = record.reply
        return {
            "seq": record.seq,
            "address": record.address,
            "stratum": reply.stratum,
            "offset": reply.clock_offset,
            "rtt": reply.rtt,
            "root_delay": reply.root_delay,
            "root_dispersion": reply.root_dispersion,
            "root_distance": reply.root_distance,
            "ref": reply.reference_string(),
            "leap": reply.leap,
            "version": reply.version,
            "validate": reply.validate(),
        }

    def _write_file(self, data: dict, path: Path):
        """Write JSON to file"""
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)

        with open(path, 'w', encoding='utf-8') as f:
            json.dump(data, f, indent=2, ensure_ascii=False)
