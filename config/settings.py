#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Konfiguracja konwertera DXF -> nesting
Przygotowanie wielokątów dla zewnętrznego solvera (sparrow)

UWAGA: Wartości domyślne można nadpisać w pliku .env!
"""

import os
from dotenv import load_dotenv

# Wczytaj zmienne środowiskowe z .env
load_dotenv()


def _env_bool(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


# ============================================================
# ARKUSZ / STRIP
# ============================================================

# Wysokość pasa materiału (mm) - szerokość liczy solver
DEFAULT_STRIP_HEIGHT = float(os.getenv("NESTING_STRIP_HEIGHT", "6000"))

# Odstęp między detalami (mm) - przekazywany do warstwy wywołującej solver
DEFAULT_SPACING = float(os.getenv("NESTING_SPACING", "5"))

# Nazwa problemu w wyjściowym JSON
DEFAULT_PROBLEM_NAME = os.getenv("NESTING_PROBLEM_NAME", "dxf_conversion")

# Obroty 0/90/180/270 (False = tylko 0)
DEFAULT_ALLOW_ROTATIONS = _env_bool("NESTING_ALLOW_ROTATIONS", True)

ROTATIONS_ALL = (0, 90, 180, 270)
ROTATIONS_NONE = (0,)

# ============================================================
# GEOMETRIA - DYSKRETYZACJA I TOLERANCJE
# ============================================================

# Liczba segmentów łuku / okręgu
DEFAULT_ARC_SEGMENTS = int(os.getenv("NESTING_ARC_SEGMENTS", "32"))

# Liczba segmentów splajnu
DEFAULT_SPLINE_SEGMENTS = int(os.getenv("NESTING_SPLINE_SEGMENTS", "100"))

# Tolerancja łączenia końców entities (mm)
DEFAULT_TOLERANCE = float(os.getenv("NESTING_TOLERANCE", "0.1"))

# Automatyczne domykanie prawie zamkniętych konturów
DEFAULT_AUTO_CLOSE = _env_bool("NESTING_AUTO_CLOSE", True)

# Maksymalna długość krawędzi wielokąta (mm) - dłuższe są dzielone
DEFAULT_MAX_EDGE_LENGTH = float(os.getenv("NESTING_MAX_EDGE_LENGTH", "20"))

# Maksymalna odległość bbox konturów jednego detalu (mm) przy podziale pliku
DEFAULT_PART_DISTANCE = float(os.getenv("NESTING_PART_DISTANCE", "100"))

# Wykrywanie otworów: "containment" (bbox) lub "winding" (znak pola)
DEFAULT_HOLE_DETECTION = os.getenv("NESTING_HOLE_DETECTION", "containment")

HOLE_DETECTION_MODES = ("containment", "winding")

# ============================================================
# LOGOWANIE
# ============================================================

LOG_LEVEL = os.getenv("NESTING_LOG_LEVEL", "INFO").upper()

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


# ============================================================
# WALIDACJA KONFIGURACJI
# ============================================================

def validate_config():
    """
    Sprawdź czy konfiguracja jest poprawna.
    Wywołaj przy starcie aplikacji.
    """
    errors = []

    if DEFAULT_STRIP_HEIGHT <= 0:
        errors.append("NESTING_STRIP_HEIGHT must be positive")

    if DEFAULT_SPACING < 0:
        errors.append("NESTING_SPACING must not be negative")

    if DEFAULT_ARC_SEGMENTS < 3:
        errors.append("NESTING_ARC_SEGMENTS must be at least 3")

    if DEFAULT_SPLINE_SEGMENTS < 1:
        errors.append("NESTING_SPLINE_SEGMENTS must be at least 1")

    if DEFAULT_TOLERANCE <= 0:
        errors.append("NESTING_TOLERANCE must be positive")

    if DEFAULT_MAX_EDGE_LENGTH <= 0:
        errors.append("NESTING_MAX_EDGE_LENGTH must be positive")

    if DEFAULT_HOLE_DETECTION not in HOLE_DETECTION_MODES:
        errors.append(
            f"NESTING_HOLE_DETECTION must be one of {', '.join(HOLE_DETECTION_MODES)}"
        )

    if errors:
        raise ValueError(f"Configuration errors: {', '.join(errors)}")

    return True


if __name__ == "__main__":
    print("=" * 60)
    print("KONFIGURACJA DXF -> NESTING")
    print("=" * 60)
    print(f"Strip height: {DEFAULT_STRIP_HEIGHT} mm")
    print(f"Spacing: {DEFAULT_SPACING} mm")
    print(f"Arc segments: {DEFAULT_ARC_SEGMENTS}")
    print(f"Spline segments: {DEFAULT_SPLINE_SEGMENTS}")
    print(f"Tolerance: {DEFAULT_TOLERANCE} mm")
    print()

    try:
        validate_config()
        print("[OK] Konfiguracja poprawna")
    except ValueError as e:
        print(f"[FAIL] {e}")
