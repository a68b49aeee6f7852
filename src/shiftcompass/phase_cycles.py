from typing import Sequence, Tuple
from .models import Phase

M, E, N, OFF = Phase.MORNING, Phase.EVENING, Phase.NIGHT, Phase.OFF

# Feste Zyklusfolgen je Rotation. Bei 24h-Systemen steht MORNING für den ganzen Diensttag.
THREE_SHIFT_TWO_OFF: Tuple[Phase, ...] = (M, E, N, OFF, OFF)
TWENTY_FOUR_FORTY_EIGHT: Tuple[Phase, ...] = (M, OFF, OFF)
TWO_WORK_FOUR_OFF: Tuple[Phase, ...] = (M, M, OFF, OFF, OFF, OFF)
EIGHT_HOUR_SHIFT: Tuple[Phase, ...] = (M, M, E, E, N, N, OFF, OFF)


def validate_cycle(cycle: Sequence[Phase]) -> Tuple[Phase, ...]:
    """Prüft eine Zyklusdefinition: mindestens ein Eintrag, nur Werte aus Phase."""
    if len(cycle) < 1:
        raise ValueError("Zyklus muss mindestens eine Phase enthalten")
    out = []
    for p in cycle:
        if not isinstance(p, Phase):
            raise ValueError(f"Ungültige Phase im Zyklus: {p!r}")
        out.append(p)
    return tuple(out)
