"""Core pipeline modules.

WHY: The core package holds the pure transformation stages — value
records, text normalization, silence segmentation, timing repair, the
cleanup stages, pagination, and cut remapping. Nothing here does I/O.

HOW: ir.py defines the records, text.py the shared comparison rules,
silence.py / timing.py / cleanup.py / pages.py / cut.py the stages, and
validation.py the optional precondition checks.

RULES:
- Stages are pure functions over caption lists
- Removal stages return CleanupResult(captions, log)
- No module here configures logging handlers
"""
