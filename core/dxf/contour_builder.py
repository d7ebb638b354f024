"""
DXF Contour Builder - Budowanie konturów z entities
===================================================
Łączy luźne LINE, ARC, SPLINE, otwarte polilinie w uporządkowane kontury.

Algorytm:
1. Entities zamknięte same w sobie (CIRCLE, ELLIPSE, zamknięta polilinia)
   stają się osobnymi konturami (single=True)
2. Pozostałe entities łączone są zachłannie: do końca łańcucha dołączana jest
   entity, której początek lub koniec leży w tolerancji (koniec = odwrócenie)
3. Zamknięcie: pierwszy start vs ostatni koniec; przy auto_close przerwa
   do 10 x tolerancja jest akceptowana jako zamknięta

Wyszukiwanie kandydatów przez indeks przestrzenny punktów końcowych
(komórki o boku = tolerancja, przeszukiwane sąsiedztwo 3x3).
"""

import math
import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple
from collections import defaultdict

from .entities import (
    DXFEntity, Contour, PointTuple,
    get_start_point, get_end_point, is_closed_entity, reverse_entity,
)
from .converters import entities_bounding_box

logger = logging.getLogger(__name__)

TIE_BREAK_FIRST = "first"
TIE_BREAK_NEAREST = "nearest"
TIE_BREAK_MODES = (TIE_BREAK_FIRST, TIE_BREAK_NEAREST)

AUTO_CLOSE_FACTOR = 10.0

WARNING_AUTO_CLOSED = "Open contour auto-closed"
WARNING_OPEN = "Open contour detected"

# Końce entity w indeksie
START = 0
END = 1


class EndpointIndex:
    """
    Indeks przestrzenny punktów końcowych entities.

    Klucz komórki to skwantowane współrzędne (floor(x / cell), floor(y / cell)).
    Przy boku komórki równym tolerancji wszystkie punkty w tolerancji
    od zapytania leżą w sąsiedztwie 3x3.
    """

    def __init__(self, cell_size: float):
        self.cell_size = cell_size
        self._cells: Dict[Tuple[int, int], List[Tuple[int, int, PointTuple]]] = defaultdict(list)

    def _key(self, point: PointTuple) -> Tuple[int, int]:
        return (
            math.floor(point[0] / self.cell_size),
            math.floor(point[1] / self.cell_size),
        )

    def add(self, index: int, which: int, point: PointTuple):
        self._cells[self._key(point)].append((index, which, point))

    def query(self, point: PointTuple, radius: float) -> List[Tuple[int, int, float]]:
        """
        Zwraca (index, which, distance) dla punktów bliższych niż radius.

        radius nie może przekraczać boku komórki - dalsze punkty leżą poza
        sąsiedztwem 3x3.
        """
        if radius > self.cell_size:
            raise ValueError(
                f"Query radius {radius} exceeds cell size {self.cell_size}"
            )
        kx, ky = self._key(point)
        found = []
        for dx in (-1, 0, 1):
            for dy in (-1, 0, 1):
                for index, which, candidate in self._cells.get((kx + dx, ky + dy), ()):
                    d = math.dist(point, candidate)
                    if d < radius:
                        found.append((index, which, d))
        return found


@dataclass
class ContourValidationResult:
    """Wynik walidacji listy konturów"""
    valid: bool
    errors: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)


class ContourBuilder:
    """
    Buduje kontury z luźnych entities DXF.

    Wynik jest deterministyczny: przy tie_break="first" wygrywa kandydat
    o najniższym indeksie na liście wejściowej (dla niego start przed końcem),
    przy tie_break="nearest" najbliższy punkt końcowy, a przy remisie
    najniższy indeks.
    """

    def __init__(
        self,
        tolerance: float = 0.1,
        auto_close: bool = True,
        min_contour_length: int = 1,
        separate_closed_entities: bool = True,
        tie_break: str = TIE_BREAK_FIRST
    ):
        """
        Args:
            tolerance: Tolerancja łączenia punktów końcowych (mm)
            auto_close: Akceptuj przerwę < 10 x tolerancja jako zamknięcie
            min_contour_length: Minimalna liczba entities w łańcuchu
            separate_closed_entities: Entities zamknięte jako osobne kontury
            tie_break: "first" lub "nearest"
        """
        if tolerance <= 0:
            raise ValueError(f"Tolerance must be positive, got {tolerance}")
        if tie_break not in TIE_BREAK_MODES:
            raise ValueError(f"Unknown tie_break mode: {tie_break}")

        self.tolerance = tolerance
        self.auto_close = auto_close
        self.min_contour_length = min_contour_length
        self.separate_closed_entities = separate_closed_entities
        self.tie_break = tie_break

    def build_contours(self, entities: List[DXFEntity]) -> List[Contour]:
        """
        Zbuduj kontury z listy entities.

        Args:
            entities: Lista entities (nie są modyfikowane)

        Returns:
            Kontury zamknięte same w sobie, a po nich łańcuchy
        """
        if not entities:
            return []

        contours: List[Contour] = []
        open_entities: List[DXFEntity] = []

        for entity in entities:
            if self.separate_closed_entities and is_closed_entity(entity):
                contours.append(Contour(
                    entities=[entity],
                    closed=True,
                    single=True,
                    bounding_box=entities_bounding_box([entity]),
                ))
            else:
                open_entities.append(entity)

        if open_entities:
            contours.extend(self._chain(open_entities))

        logger.debug(
            f"Built {len(contours)} contour(s) from {len(entities)} entities "
            f"({len(entities) - len(open_entities)} closed, {len(open_entities)} to chain)"
        )
        return contours

    def _chain(self, entities: List[DXFEntity]) -> List[Contour]:
        """Łącz otwarte entities w łańcuchy"""
        index = EndpointIndex(self.tolerance)
        for i, entity in enumerate(entities):
            index.add(i, START, get_start_point(entity).as_tuple())
            index.add(i, END, get_end_point(entity).as_tuple())

        used = [False] * len(entities)
        contours = []

        for seed in range(len(entities)):
            if used[seed]:
                continue

            used[seed] = True
            chain = [entities[seed]]

            while True:
                current_end = get_end_point(chain[-1]).as_tuple()
                match = self._find_next(index, current_end, used)
                if match is None:
                    break

                candidate, which = match
                used[candidate] = True
                if which == START:
                    chain.append(entities[candidate])
                else:
                    chain.append(reverse_entity(entities[candidate]))

            if len(chain) < self.min_contour_length:
                logger.warning(
                    f"Discarding chain of {len(chain)} entities "
                    f"(minimum {self.min_contour_length})"
                )
                continue

            contours.append(self._make_contour(chain))

        return contours

    def _find_next(
        self,
        index: EndpointIndex,
        point: PointTuple,
        used: List[bool]
    ) -> Optional[Tuple[int, int]]:
        """Wybierz następną entity łańcucha: (indeks, START|END) lub None"""
        candidates = [
            (i, which, d) for i, which, d in index.query(point, self.tolerance)
            if not used[i]
        ]
        if not candidates:
            return None

        if self.tie_break == TIE_BREAK_NEAREST:
            i, which, _ = min(candidates, key=lambda c: (c[2], c[0], c[1]))
        else:
            i, which, _ = min(candidates, key=lambda c: (c[0], c[1]))
        return i, which

    def _make_contour(self, chain: List[DXFEntity]) -> Contour:
        """Utwórz kontur z łańcucha i ustal jego zamknięcie"""
        start = get_start_point(chain[0])
        end = get_end_point(chain[-1])
        gap = start.distance_to(end)

        closed = gap < self.tolerance
        warning = None

        if not closed:
            if self.auto_close and gap < AUTO_CLOSE_FACTOR * self.tolerance:
                closed = True
                warning = WARNING_AUTO_CLOSED
                logger.debug(f"Auto-closing contour, gap {gap:.4f}mm")
            else:
                warning = WARNING_OPEN
                logger.debug(f"Open contour, gap {gap:.4f}mm")

        return Contour(
            entities=chain,
            closed=closed,
            single=False,
            bounding_box=entities_bounding_box(chain),
            warning=warning,
        )


def build_contours(
    entities: List[DXFEntity],
    tolerance: float = 0.1,
    auto_close: bool = True,
    min_contour_length: int = 1,
    separate_closed_entities: bool = True,
    tie_break: str = TIE_BREAK_FIRST
) -> List[Contour]:
    """Funkcja pomocnicza - ContourBuilder(...).build_contours(entities)"""
    builder = ContourBuilder(
        tolerance=tolerance,
        auto_close=auto_close,
        min_contour_length=min_contour_length,
        separate_closed_entities=separate_closed_entities,
        tie_break=tie_break,
    )
    return builder.build_contours(entities)


def validate_contours(contours: List[Contour]) -> ContourValidationResult:
    """
    Sprawdź listę konturów.

    Błędy: brak konturów, kontur bez entities.
    Ostrzeżenia: kontur otwarty, kontur łańcuchowy z mniej niż 3 entities.
    """
    errors = []
    warnings = []

    if not contours:
        errors.append("No contours found")
        return ContourValidationResult(valid=False, errors=errors, warnings=warnings)

    for i, contour in enumerate(contours):
        if not contour.entities:
            errors.append(f"Contour {i} has no entities")
            continue

        if not contour.closed:
            warnings.append(f"Contour {i} is not closed")

        if not contour.single and len(contour.entities) < 3:
            warnings.append(
                f"Contour {i} has only {len(contour.entities)} entities (may be incomplete)"
            )

    return ContourValidationResult(valid=not errors, errors=errors, warnings=warnings)


# Eksporty
__all__ = [
    'ContourBuilder',
    'ContourValidationResult',
    'EndpointIndex',
    'build_contours',
    'validate_contours',
    'TIE_BREAK_FIRST',
    'TIE_BREAK_NEAREST',
    'TIE_BREAK_MODES',
    'WARNING_AUTO_CLOSED',
    'WARNING_OPEN',
]
