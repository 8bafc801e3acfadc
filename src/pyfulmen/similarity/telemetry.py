"""Similarity telemetry emission points.

Each helper returns before building tag dictionaries when telemetry is disabled.
"""

from pyfulmen import telemetry


def length_bucket(length: int) -> str:
    """Map a code point count onto its reporting bucket."""
    if length == 0:
        return "empty"
    if length <= 10:
        return "tiny"
    if length <= 50:
        return "short"
    if length <= 200:
        return "medium"
    if length <= 1000:
        return "long"
    return "very_long"


def emit_call(api: str, algorithm: str, a: str, b: str) -> None:
    """Emit the per-call counter and the length-bucket counter for one API call."""
    if not telemetry.is_enabled():
        return
    telemetry.emit_counter(f"foundry.similarity.{api}.calls", 1, {"algorithm": algorithm})
    telemetry.emit_counter(
        "foundry.similarity.string_length",
        1,
        {"bucket": length_bucket(max(len(a), len(b))), "algorithm": algorithm},
    )


def emit_fast_path(reason: str) -> None:
    if not telemetry.is_enabled():
        return
    telemetry.emit_counter("foundry.similarity.fast_path", 1, {"reason": reason})


def emit_edge_case(case: str) -> None:
    if not telemetry.is_enabled():
        return
    telemetry.emit_counter("foundry.similarity.edge_case", 1, {"case": case})


def emit_error(error_type: str, algorithm: str, correct_api: str) -> None:
    if not telemetry.is_enabled():
        return
    telemetry.emit_counter(
        "foundry.similarity.error",
        1,
        {"type": error_type, "algorithm": algorithm, "correct_api": correct_api},
    )
