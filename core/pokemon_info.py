"""
Pokemon Info — Derived stats for hatched pokemon.
Level comes from the combined CP multiplier, max CP is evaluated at level 40,
perfection is the IV sum as a percentage of 45.
"""

from __future__ import annotations
import math
from game.models import Pokemon

# Combined CP multiplier per level (half levels included)
CP_MULTIPLIERS = {
    1.0: 0.094, 1.5: 0.1351374318, 2.0: 0.16639787, 2.5: 0.192650919,
    3.0: 0.21573247, 3.5: 0.2365726613, 4.0: 0.25572005, 4.5: 0.2735303812,
    5.0: 0.29024988, 5.5: 0.3060573775, 6.0: 0.3210876, 6.5: 0.3354450362,
    7.0: 0.34921268, 7.5: 0.3624577511, 8.0: 0.37523559, 8.5: 0.3875924064,
    9.0: 0.39956728, 9.5: 0.4111935514, 10.0: 0.42250001, 10.5: 0.4329264091,
    11.0: 0.44310755, 11.5: 0.4530599591, 12.0: 0.46279839, 12.5: 0.4723360832,
    13.0: 0.48168495, 13.5: 0.4908558003, 14.0: 0.49985844, 14.5: 0.508701765,
    15.0: 0.51739395, 15.5: 0.5259425113, 16.0: 0.53435433, 16.5: 0.5426357375,
    17.0: 0.55079269, 17.5: 0.5588305862, 18.0: 0.56675452, 18.5: 0.5745691333,
    19.0: 0.58227891, 19.5: 0.5898879072, 20.0: 0.59740001, 20.5: 0.6048236651,
    21.0: 0.61215729, 21.5: 0.6194041216, 22.0: 0.62656713, 22.5: 0.6336491432,
    23.0: 0.64065295, 23.5: 0.6475809666, 24.0: 0.65443563, 24.5: 0.6612192524,
    25.0: 0.667934, 25.5: 0.6745818959, 26.0: 0.68116492, 26.5: 0.6876849038,
    27.0: 0.69414365, 27.5: 0.70054287, 28.0: 0.70688421, 28.5: 0.7131691091,
    29.0: 0.71939909, 29.5: 0.7255756136, 30.0: 0.7317, 30.5: 0.7347410093,
    31.0: 0.73776948, 31.5: 0.7407855938, 32.0: 0.74378943, 32.5: 0.7467812109,
    33.0: 0.74976104, 33.5: 0.7527290867, 34.0: 0.75568551, 34.5: 0.7586303683,
    35.0: 0.76156384, 35.5: 0.7644860647, 36.0: 0.76739717, 36.5: 0.7702972656,
    37.0: 0.7731865, 37.5: 0.7760649616, 38.0: 0.77893275, 38.5: 0.7817900548,
    39.0: 0.78463697, 39.5: 0.7874736075, 40.0: 0.79030001,
}

MAX_LEVEL = 40.0
MAX_IV = 15


def get_level(pokemon: Pokemon) -> float:
    """Level whose CP multiplier is closest to the pokemon's combined multiplier."""
    cpm = pokemon.cp_multiplier + pokemon.additional_cp_multiplier
    return min(CP_MULTIPLIERS, key=lambda level: abs(CP_MULTIPLIERS[level] - cpm))


def calculate_max_cp(pokemon: Pokemon) -> int:
    """CP at max level with perfect IVs."""
    cpm = CP_MULTIPLIERS[MAX_LEVEL]
    cp = (
        (pokemon.base_attack + MAX_IV)
        * math.sqrt(pokemon.base_defense + MAX_IV)
        * math.sqrt(pokemon.base_stamina + MAX_IV)
        * cpm ** 2
        / 10
    )
    return max(10, int(cp))


def calculate_perfection(pokemon: Pokemon) -> float:
    """IV perfection in percent (0-100)."""
    total = pokemon.individual_attack + pokemon.individual_defense + pokemon.individual_stamina
    return total / (MAX_IV * 3) * 100.0
