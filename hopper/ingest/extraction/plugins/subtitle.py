# hopper/ingest/extraction/plugins/subtitle.py
"""
Subtitle extractors (WebVTT and SubRip).

With strip_subtitle_timestamps enabled only the spoken text is kept: cue
numbers, timing lines and the WEBVTT header are dropped. Otherwise every
non-empty line is preserved verbatim (minus the WEBVTT header).
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field

from hopper.exceptions import ExtractionError
from hopper.ingest.extraction.base import ExtractOptions, decode_text

_CUE_NUMBER = re.compile(r"^\d+$")
_VTT_TIMESTAMP = re.compile(r"^\d{2}:\d{2}:\d{2}\.\d{3}")
_SRT_TIMESTAMP = re.compile(r"^\d{2}:\d{2}:\d{2},\d{3}")


def _is_timing_line(line: str, timestamp: re.Pattern) -> bool:
    return "-->" in line or bool(_CUE_NUMBER.match(line)) or bool(timestamp.match(line))


@dataclass
class VttExtractor:
    plugin_name: str = field(default="vtt", repr=False)
    file_types: tuple[str, ...] = ("vtt",)
    timestamp_pattern: re.Pattern = field(default=_VTT_TIMESTAMP, repr=False)
    has_header: bool = field(default=True, repr=False)

    def extract(self, data: bytes, options: ExtractOptions) -> str:
        kept = []
        for raw in decode_text(data).splitlines():
            line = raw.strip()
            if not line:
                continue
            if self.has_header and line.startswith("WEBVTT"):
                continue
            if options.strip_subtitle_timestamps and _is_timing_line(line, self.timestamp_pattern):
                continue
            kept.append(line)

        if not kept:
            raise ExtractionError(f"No subtitle text in {self.plugin_name} payload")
        return "\n".join(kept)


@dataclass
class SrtExtractor(VttExtractor):
    plugin_name: str = field(default="srt", repr=False)
    file_types: tuple[str, ...] = ("srt",)
    timestamp_pattern: re.Pattern = field(default=_SRT_TIMESTAMP, repr=False)
    has_header: bool = field(default=False, repr=False)
