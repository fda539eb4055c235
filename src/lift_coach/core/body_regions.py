"""
Body-region classification for filler conflict checks.

A filler exercise should not pre-fatigue the muscles of the next main lift,
so both sides are reduced to a coarse region (upper / lower / core) and
compared.  Exercise names are classified by keyword substring, muscle lists
by membership in the muscle tables below.

These tables are a heuristic starting point, not a taxonomy: a name that
matches no keyword falls back to "core", which never clashes.  Extend the
tables rather than special-casing names at call sites.
"""

from typing import Final, Literal, Sequence

Region = Literal["upper", "lower", "core"]

# Checked in this order: core keywords win over lower, lower over upper
# ("single-leg glute bridge" is lower, "dead bug" is core).
CORE_NAME_KEYWORDS: Final[tuple[str, ...]] = (
    "dead bug",
    "bird dog",
    "pallof",
    "plank",
    "cat-cow",
    "child's pose",
    "nerve flossing",
    "chin tuck",
    "mckenzie",
)

LOWER_NAME_KEYWORDS: Final[tuple[str, ...]] = (
    "squat",
    "leg extension",
    "short foot",
    "towel curl",
    "ankle",
    "glute bridge",
    "piriformis",
    "calf",
    "heel drop",
    "step-down",
    "clam shell",
    "knee extension",
    "single-leg balance",
    "quadriceps",
)

UPPER_NAME_KEYWORDS: Final[tuple[str, ...]] = (
    "tyler",
    "wrist curl",
    "wrist flexor",
    "wrist extensor",
    "wall angel",
    "band pull",
    "face pull",
    "external rotation",
    "pectoral",
    "doorway",
    "scaption",
    "sleeper",
    "supination",
    "nerve glide",
    "grip",
)

UPPER_BODY_MUSCLES: Final[tuple[str, ...]] = (
    "chest",
    "pectoral",
    "deltoid",
    "shoulder",
    "lats",
    "latissimus",
    "rhomboid",
    "trapezius",
    "traps",
    "biceps",
    "triceps",
    "brachialis",
    "brachioradialis",
    "forearm",
    "wrist flexors",
    "wrist extensors",
    "infraspinatus",
    "teres minor",
    "teres major",
    "rotator cuff",
    "external rotators",
)

LOWER_BODY_MUSCLES: Final[tuple[str, ...]] = (
    "quadriceps",
    "hamstrings",
    "glutes",
    "gluteus",
    "gastrocnemius",
    "soleus",
    "calves",
    "foot intrinsics",
    "toe flexors",
    "tibialis",
    "piriformis",
    "adductors",
    "abductors",
    "hip flexors",
)

CORE_MUSCLES: Final[tuple[str, ...]] = (
    "transverse abdominis",
    "rectus abdominis",
    "obliques",
    "quadratus lumborum",
    "erector spinae",
    "deep neck flexors",
    "suboccipitals",
    "core",
    "sciatic nerve",
)


def classify_exercise_name(name: str) -> Region:
    """Region of an exercise inferred from its name; unknown names are core."""
    lowered = name.lower()
    if any(k in lowered for k in CORE_NAME_KEYWORDS):
        return "core"
    if any(k in lowered for k in LOWER_NAME_KEYWORDS):
        return "lower"
    if any(k in lowered for k in UPPER_NAME_KEYWORDS):
        return "upper"
    return "core"


def classify_muscles(muscles: Sequence[str]) -> Region:
    """
    Dominant region of a muscle list.

    Each muscle counts once, upper taking precedence over lower over core.
    Upper wins a tie with lower; an empty or unrecognised list is core.
    """
    upper = lower = core = 0
    for muscle in muscles:
        m = muscle.lower()
        if any(u in m for u in UPPER_BODY_MUSCLES):
            upper += 1
        elif any(lo in m for lo in LOWER_BODY_MUSCLES):
            lower += 1
        elif any(c in m for c in CORE_MUSCLES):
            core += 1

    if core > 0 and upper == 0 and lower == 0:
        return "core"
    if upper >= lower:
        return "upper" if upper > 0 else "core"
    return "lower"


def regions_clash(candidate: Region, next_region: Region) -> bool:
    """Core never clashes; otherwise same region clashes."""
    if candidate == "core":
        return False
    return candidate == next_region
