"""
Muscle taxonomy: group normalization, per-set contributions and body-map regions.
"""

import re
from functools import lru_cache
from typing import Final, Literal

from .config import FULL_BODY_SETS, PRIMARY_MUSCLE_SETS, SECONDARY_MUSCLE_SETS
from .models import ExerciseCatalogEntry

MuscleGroup = Literal[
    "Chest", "Back", "Shoulders", "Arms", "Legs", "Core", "Cardio", "Full Body", "Other"
]

# Groups that receive a full set from a full-body exercise
FULL_BODY_TARGETS: Final[tuple[str, ...]] = ("Chest", "Back", "Legs", "Shoulders", "Arms", "Core")

# Ordered: the first group with a matching keyword wins, so specific
# patterns ("rear delt" -> Back) sit before generic ones ("delt" -> Shoulders).
MUSCLE_GROUP_PATTERNS: Final[tuple[tuple[MuscleGroup, tuple[str, ...]], ...]] = (
    ("Chest", (
        "chest", "pec", "pectoralis", "pectoralis_major", "pectoralis_minor",
        "chest_clavicular", "chest_sternal", "clavicular_head", "sternal_head",
    )),
    ("Back", (
        "lat", "lats", "latissimus", "latissimus_dorsi",
        "upper back", "back", "lower back", "lower_back", "lowerback",
        "trap", "trapezius", "traps",
        "rhomboid", "rhomboids", "rhomboid_major", "rhomboid_minor",
        "erector", "erector_spinae", "spinal_erector",
        "teres", "teres_major", "teres_minor",
        "infraspinatus", "supraspinatus",
        "rear delt", "rear_delt", "posterior_deltoid",
    )),
    ("Shoulders", (
        "shoulder", "shoulders",
        "delt", "delts", "deltoid", "deltoids",
        "deltoid_anterior", "deltoid_lateral", "deltoid_posterior",
        "anterior_deltoid", "lateral_deltoid",
        "front_delt", "side_delt",
        "rotator", "rotator_cuff",
    )),
    ("Arms", (
        "bicep", "biceps", "biceps_brachii",
        "tricep", "triceps", "triceps_brachii",
        "forearm", "forearms",
        "brachialis", "brachioradialis",
        "arms", "arm",
        "wrist", "wrist_flexor", "wrist_extensor",
        "pronator", "supinator",
        "extensor", "flexor",
    )),
    ("Legs", (
        "quad", "quads", "quadriceps", "quadricep",
        "rectus_femoris", "vastus_lateralis", "vastus_medialis", "vastus_intermedius",
        "hamstring", "hamstrings", "biceps_femoris", "semitendinosus", "semimembranosus",
        "glute", "glutes", "gluteus", "gluteus_maximus", "gluteus_medius", "gluteus_minimus",
        "calf", "calves", "gastrocnemius", "soleus", "tibialis", "tibialis_anterior",
        "thigh", "thighs",
        "hip", "hips", "hip_flexor", "hip_flexors", "iliopsoas", "psoas",
        "adductor", "adductors", "abductor", "abductors",
        "leg", "legs",
        "sartorius", "gracilis", "tensor", "tensor_fasciae_latae",
        "piriformis", "popliteus",
    )),
    ("Core", (
        "abdom", "abs", "abdominal", "abdominals",
        "rectus_abdominis", "transverse_abdominis", "transversus_abdominis",
        "core", "waist",
        "oblique", "obliques", "internal_oblique", "external_oblique",
        "serratus", "serratus_anterior",
        "transverse",
    )),
    ("Cardio", ("cardio", "cardiovascular", "aerobic")),
    ("Full Body", ("full body", "full-body", "fullbody", "compound", "total body", "whole body")),
)

# Individual catalog muscle -> body-map region ids
MUSCLE_TO_REGION_IDS: Final[dict[str, tuple[str, ...]]] = {
    "Abdominals": ("lower-abdominals", "upper-abdominals"),
    "Abductors": ("gluteus-medius",),
    "Adductors": ("inner-thigh",),
    "Biceps": ("long-head-bicep", "short-head-bicep"),
    "Calves": ("gastrocnemius", "soleus", "tibialis"),
    "Chest": ("mid-lower-pectoralis", "upper-pectoralis"),
    "Forearms": ("wrist-extensors", "wrist-flexors"),
    "Glutes": ("gluteus-maximus", "gluteus-medius"),
    "Hamstrings": ("medial-hamstrings", "lateral-hamstrings"),
    "Lats": ("lats",),
    "Lower Back": ("lowerback",),
    "Neck": ("neck",),
    "Quadriceps": ("outer-quadricep", "rectus-femoris", "inner-quadricep"),
    "Shoulders": ("anterior-deltoid", "lateral-deltoid", "posterior-deltoid"),
    "Traps": ("upper-trapezius", "lower-trapezius", "traps-middle"),
    "Triceps": ("medial-head-triceps", "long-head-triceps", "lateral-head-triceps"),
    "Upper Back": ("lats", "upper-trapezius", "lower-trapezius", "traps-middle", "posterior-deltoid"),
    "Obliques": ("obliques",),
}

# Muscle group -> body-map region ids, fallback for unmapped muscles
GROUP_TO_REGION_IDS: Final[dict[str, tuple[str, ...]]] = {
    "Chest": ("mid-lower-pectoralis", "upper-pectoralis", "chest"),
    "Back": ("lats", "lowerback", "upper-trapezius", "lower-trapezius", "traps-middle", "traps", "back"),
    "Shoulders": (
        "anterior-deltoid", "lateral-deltoid", "posterior-deltoid",
        "front-shoulders", "rear-shoulders",
    ),
    "Arms": (
        "long-head-bicep", "short-head-bicep",
        "medial-head-triceps", "long-head-triceps", "lateral-head-triceps",
        "wrist-extensors", "wrist-flexors",
        "biceps", "triceps", "forearms", "hands",
    ),
    "Legs": (
        "outer-quadricep", "rectus-femoris", "inner-quadricep",
        "medial-hamstrings", "lateral-hamstrings",
        "gluteus-maximus", "gluteus-medius",
        "gastrocnemius", "soleus", "tibialis",
        "inner-thigh", "calves", "quads", "hamstrings", "glutes",
    ),
    "Core": ("lower-abdominals", "upper-abdominals", "obliques", "abdominals"),
    "Cardio": (),
    "Full Body": (),
    "Other": ("neck",),
}

_FULL_BODY_RE = re.compile(r"full\s*body", re.IGNORECASE)


@lru_cache(maxsize=1024)
def normalize_muscle_group(muscle: str | None) -> MuscleGroup:
    """
    Map a muscle name, or a comma list of them, to a muscle group.

    The first part of the list that matches a group decides. Blank, "none"
    and unknown names map to "Other".

    >>> normalize_muscle_group("biceps, brachialis")
    'Arms'
    """
    if not muscle:
        return "Other"
    raw = muscle.strip()
    if not raw or raw.lower() == "none":
        return "Other"

    for part in raw.split(","):
        key = part.strip().lower()
        if not key or key in ("none", "other"):
            continue
        for group, patterns in MUSCLE_GROUP_PATTERNS:
            if any(p in key for p in patterns):
                return group
    return "Other"


def _is_cardio(muscle: str) -> bool:
    return "cardio" in muscle.lower()


def _is_full_body(muscle: str) -> bool:
    return normalize_muscle_group(muscle) == "Full Body" or bool(_FULL_BODY_RE.search(muscle))


def muscle_contributions(entry: ExerciseCatalogEntry, use_groups: bool = True) -> list[tuple[str, float]]:
    """
    Set-equivalents one working set of ``entry`` contributes, per muscle key.

    Keys are muscle groups when ``use_groups`` is set, otherwise the catalog's
    own muscle names. The same key may appear more than once; callers sum.

    Rules:
        - cardio primaries contribute nothing
        - a full-body primary gives 1.0 to each of the six main groups in
          group mode and nothing in detailed mode
        - otherwise the primary gives 1.0 and each secondary 0.5, skipping
          cardio and full-body secondaries
    """
    primary = entry.primary_muscle or ""
    if not primary or _is_cardio(primary):
        return []

    if _is_full_body(primary):
        if use_groups:
            return [(group, FULL_BODY_SETS) for group in FULL_BODY_TARGETS]
        return []

    key = normalize_muscle_group(primary) if use_groups else primary
    contributions: list[tuple[str, float]] = [(key, PRIMARY_MUSCLE_SETS)]

    for secondary in entry.secondary_muscles():
        if _is_cardio(secondary) or _is_full_body(secondary):
            continue
        group = normalize_muscle_group(secondary)
        if group == "Cardio":
            continue
        contributions.append((group if use_groups else secondary, SECONDARY_MUSCLE_SETS))

    return contributions


def region_ids_for_muscle(muscle: str) -> tuple[str, ...]:
    """Body-map regions for a catalog muscle, falling back to its group's regions."""
    regions = MUSCLE_TO_REGION_IDS.get(muscle)
    if regions:
        return regions
    return GROUP_TO_REGION_IDS.get(normalize_muscle_group(muscle), ())
