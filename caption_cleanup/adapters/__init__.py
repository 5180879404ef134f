"""Boundary adapters between external payloads and Caption records.

WHY: The pipeline speaks Caption / CutMapEntry / Page. The outside world
speaks whisper.cpp JSON and the camelCase caption files the editor reads.

HOW: json_io.py validates and (de)serializes the wire payloads;
whisper_cpp.py turns whisper.cpp output into Captions.

RULES:
- Adapters never modify caption text beyond what is documented
"""

from caption_cleanup.adapters.json_io import (
    PayloadValidationError,
    captions_from_json,
    captions_to_json,
    cleanup_log_to_json,
    cut_map_from_json,
    pages_to_json,
)
from caption_cleanup.adapters.whisper_cpp import to_captions_dtw

__all__ = [
    "PayloadValidationError",
    "captions_from_json",
    "captions_to_json",
    "cleanup_log_to_json",
    "cut_map_from_json",
    "pages_to_json",
    "to_captions_dtw",
]
