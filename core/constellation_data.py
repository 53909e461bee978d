"""
Bright-star background for the sky view: J2000 RA/Dec (degrees) and V magnitude.
Every star referenced by a constellation figure is in BRIGHT_STARS.
"""
from __future__ import annotations

from core.types import CelestialCatalogEntry, ConstellationLine

# fmt: off
_S = {
    # Orion
    "Betelgeuse": ( 88.7930,  7.4070, 0.50), "Rigel":      ( 78.6340, -8.2020, 0.13),
    "Bellatrix":  ( 81.2830,  6.3500, 1.64), "Saiph":      ( 86.9390, -9.6700, 2.06),
    "Alnitak":    ( 85.1900, -1.9430, 1.77), "Alnilam":    ( 84.0530, -1.2020, 1.69),
    "Mintaka":    ( 83.0020, -0.2990, 2.23),
    # Taurus
    "Aldebaran":  ( 68.9800, 16.5090, 0.86), "Elnath":     ( 81.5730, 28.6080, 1.65),
    "Alcyone":    ( 56.8710, 24.1050, 2.87),
    # Gemini
    "Castor":     (113.6490, 31.8880, 1.58), "Pollux":     (116.3290, 28.0260, 1.14),
    "Alhena":     ( 99.4280, 16.3990, 1.93),
    # Auriga / Canis Major / Canis Minor
    "Capella":    ( 79.1720, 45.9980, 0.08), "Menkalinan": ( 89.8820, 44.9470, 1.90),
    "Sirius":     (101.2870,-16.7160,-1.46), "Procyon":    (114.8250,  5.2250, 0.34),
    # Cassiopeia
    "Schedar":    ( 10.1270, 56.5370, 2.24), "Caph":       (  2.2950, 59.1500, 2.28),
    "Gamma Cas":  ( 14.1770, 60.7170, 2.47), "Ruchbah":    ( 21.4540, 60.2350, 2.68),
    "Segin":      ( 28.5990, 63.6700, 3.37),
    # Ursa Major
    "Dubhe":      (165.9320, 61.7510, 1.79), "Merak":      (165.4600, 56.3830, 2.37),
    "Phecda":     (178.4580, 53.6950, 2.44), "Megrez":     (183.8570, 57.0330, 3.31),
    "Alioth":     (193.5070, 55.9600, 1.77), "Mizar":      (200.9810, 54.9260, 2.23),
    "Alkaid":     (206.8860, 49.3130, 1.86),
    # Ursa Minor
    "Polaris":    ( 37.9550, 89.2640, 1.98), "Kochab":     (222.6760, 74.1560, 2.08),
    "Pherkad":    (230.1820, 71.8340, 3.05),
    # Leo
    "Regulus":    (152.0930, 11.9670, 1.36), "Algieba":    (154.9930, 19.8420, 2.08),
    "Denebola":   (177.2650, 14.5720, 2.14), "Zosma":      (168.5270, 20.5240, 2.56),
    "Chertan":    (168.5600, 15.4300, 3.33),
    # Virgo / Bootes
    "Spica":      (201.2980,-11.1610, 0.97), "Arcturus":   (213.9150, 19.1820,-0.05),
    "Izar":       (221.2470, 27.0740, 2.37),
    # Summer triangle
    "Vega":       (279.2350, 38.7840, 0.03), "Sheliak":    (282.5200, 33.3630, 3.52),
    "Sulafat":    (284.7360, 32.6900, 3.25), "Deneb":      (310.3580, 45.2800, 1.25),
    "Sadr":       (305.5570, 40.2570, 2.23), "Gienah":     (311.5530, 33.9700, 2.48),
    "Albireo":    (292.6800, 27.9600, 3.05), "Fawaris":    (296.2440, 45.1310, 2.87),
    "Altair":     (297.6960,  8.8680, 0.77), "Tarazed":    (296.5650, 10.6130, 2.72),
    "Alshain":    (298.8280,  6.4070, 3.71),
    # Scorpius
    "Antares":    (247.3520,-26.4320, 1.06), "Graffias":   (241.3590,-19.8060, 2.62),
    "Dschubba":   (240.0830,-22.6220, 2.29), "Shaula":     (263.4020,-37.1030, 1.62),
    # Southern anchors
    "Fomalhaut":  (344.4130,-29.6220, 1.16), "Achernar":   ( 24.4290,-57.2370, 0.46),
    "Canopus":    ( 95.9880,-52.6960,-0.74), "Acrux":      (186.6500,-63.0990, 0.77),
}
# fmt: on


def _chain(*names: str) -> list[tuple[str, str]]:
    return [(names[i], names[i + 1]) for i in range(len(names) - 1)]


def _loop(*names: str) -> list[tuple[str, str]]:
    return _chain(*names, names[0])


_FIGURES: dict[str, list[tuple[str, str]]] = {
    "Orion": _loop("Betelgeuse", "Bellatrix", "Rigel", "Saiph")
    + _chain("Alnitak", "Alnilam", "Mintaka"),
    "Taurus": _chain("Alcyone", "Aldebaran", "Elnath"),
    "Gemini": _chain("Castor", "Pollux", "Alhena"),
    "Auriga": _chain("Capella", "Menkalinan", "Elnath"),
    "Cassiopeia": _chain("Caph", "Schedar", "Gamma Cas", "Ruchbah", "Segin"),
    "Ursa Major": _chain("Alkaid", "Mizar", "Alioth", "Megrez", "Dubhe", "Merak", "Phecda", "Megrez"),
    "Ursa Minor": _chain("Polaris", "Kochab", "Pherkad"),
    "Leo": _chain("Regulus", "Algieba", "Zosma", "Denebola", "Chertan", "Regulus"),
    "Bootes": _chain("Arcturus", "Izar"),
    "Lyra": _loop("Vega", "Sheliak", "Sulafat"),
    "Cygnus": _chain("Deneb", "Sadr", "Albireo") + _chain("Gienah", "Sadr", "Fawaris"),
    "Aquila": _chain("Tarazed", "Altair", "Alshain"),
    "Scorpius": _chain("Graffias", "Dschubba", "Antares", "Shaula"),
}

BRIGHT_STARS: tuple[CelestialCatalogEntry, ...] = tuple(
    CelestialCatalogEntry(ra=ra, dec=dec, mag=mag, name=name)
    for name, (ra, dec, mag) in _S.items()
)


def constellation_lines() -> list[ConstellationLine]:
    """One line per figure segment, endpoints as (ra, dec)."""
    out = []
    for figure, pairs in _FIGURES.items():
        for a, b in pairs:
            pa, pb = _S[a], _S[b]
            out.append(ConstellationLine(figure, ((pa[0], pa[1]), (pb[0], pb[1]))))
    return out
