# --- Project imports ---
from .models import RouteInfo, Status


def classify(info: RouteInfo, threshold: int) -> Status:
    """
    Map one route lookup onto a stability status.

    Rules:
      - absent route                → MISSING
      - present, age <  threshold   → FLAPPING
      - present, age >= threshold   → STABLE

    Invariants:
      - age == threshold is STABLE (strict `<` for FLAPPING)
      - never returns UNKNOWN
      - no I/O, same inputs always give the same status
    """
    if threshold < 0:
        raise ValueError(f"threshold must be >= 0, got {threshold}")

    if not info.exists:
        return Status.MISSING

    if info.age_seconds < 0:
        raise ValueError(f"age_seconds must be >= 0, got {info.age_seconds}")

    if info.age_seconds < threshold:
        return Status.FLAPPING

    return Status.STABLE
