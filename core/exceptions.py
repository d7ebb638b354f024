"""
DXF Converter - Własne wyjątki
==============================
Hierarchia wyjątków dla całego potoku DXF -> nesting.

Każdy wyjątek ma `stage` - etap potoku, na którym plik został odrzucony.
"""


class ConverterError(Exception):
    """Bazowy wyjątek dla wszystkich błędów konwertera"""

    stage: str = "conversion"

    def __init__(self, message: str, code: str = None, details: dict = None, stage: str = None):
        super().__init__(message)
        self.message = message
        self.code = code or self.__class__.__name__
        self.details = details or {}
        if stage:
            self.stage = stage

    def __str__(self):
        if self.details:
            return f"[{self.code}] {self.message} | Details: {self.details}"
        return f"[{self.code}] {self.message}"


# ============================================================
# Błędy pojedynczego pliku (plik wypada z partii)
# ============================================================

class ParsingError(ConverterError):
    """Niepoprawna składnia DXF"""

    stage = "parsing"

    def __init__(self, reason: str, filename: str = None):
        msg = f"Failed to parse DXF: {reason}"
        if filename:
            msg = f"{filename}: {msg}"
        super().__init__(
            msg,
            code="PARSE_ERROR",
            details={"filename": filename, "reason": reason} if filename else {}
        )
        self.reason = reason


ParseError = ParsingError


class ValidationError(ConverterError):
    """Brak entities lub brak obsługiwanych entities"""

    stage = "validation"


class ContourError(ConverterError):
    """Nie znaleziono poprawnych konturów"""

    stage = "contour building"


class PolygonError(ConverterError):
    """Zdegenerowany wielokąt końcowy"""

    stage = "polygon validation"

    def __init__(self, errors: list):
        super().__init__(
            "; ".join(errors),
            code="INVALID_POLYGON",
            details={"errors": list(errors)}
        )
        self.errors = list(errors)


# ============================================================
# Błędy całej partii
# ============================================================

class SchemaError(ConverterError):
    """Wynikowy JSON nie przechodzi walidacji struktury"""

    stage = "json validation"

    def __init__(self, errors: list):
        super().__init__(
            f"Generated JSON is invalid ({len(errors)} error(s))",
            code="SCHEMA_ERROR",
            details={"errors": list(errors)}
        )
        self.errors = list(errors)
