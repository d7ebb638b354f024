"""
Conversion result records.

Each file produces an immutable FileOutcome; the batch folds the outcomes
into a single ConversionResult.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple, Any

from core.exceptions import ConverterError, SchemaError
from .job import ConvertedPart, NestingInputItem

OUTPUT_FILE = "output"
STAGE_JSON_VALIDATION = "json validation"


@dataclass(frozen=True)
class FileError:
    """A file excluded from the job, with the stage it failed at."""
    file: str
    stage: str
    message: str

    def to_dict(self) -> Dict:
        return {'file': self.file, 'stage': self.stage, 'message': self.message}

    def __str__(self):
        return f"[{self.file}] {self.stage}: {self.message}"


@dataclass(frozen=True)
class FileWarning:
    """A non-fatal problem found while converting a file."""
    file: str
    message: str

    def to_dict(self) -> Dict:
        return {'file': self.file, 'message': self.message}

    def __str__(self):
        return f"[{self.file}] {self.message}"


@dataclass(frozen=True)
class FileOutcome:
    """Result of converting one file: parts or an error, plus warnings."""
    file: str
    quantity: int = 1
    parts: Tuple[ConvertedPart, ...] = ()
    error: Optional[FileError] = None
    warnings: Tuple[FileWarning, ...] = ()

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass(frozen=True)
class ConversionStats:
    """Batch counters."""
    total_files: int = 0
    successful_files: int = 0
    failed_files: int = 0
    total_items: int = 0

    def to_dict(self) -> Dict:
        return {
            'total_files': self.total_files,
            'successful_files': self.successful_files,
            'failed_files': self.failed_files,
            'total_items': self.total_items
        }


@dataclass
class ConversionResult:
    """
    Result of converting a batch of files.

    A failed batch never carries JSON: `json` and `json_string` are None
    whenever `success` is False.
    """
    success: bool
    json: Optional[Dict[str, Any]] = None
    json_string: Optional[str] = None
    items: List[NestingInputItem] = field(default_factory=list)
    errors: List[FileError] = field(default_factory=list)
    warnings: List[FileWarning] = field(default_factory=list)
    stats: ConversionStats = field(default_factory=ConversionStats)
    message: str = ""

    def to_dict(self) -> Dict:
        result = {
            'success': self.success,
            'errors': [e.to_dict() for e in self.errors],
            'warnings': [w.to_dict() for w in self.warnings],
            'stats': self.stats.to_dict(),
            'message': self.message
        }
        if self.success:
            result['json'] = self.json
        return result

    def raise_for_errors(self) -> 'ConversionResult':
        """Raise if the batch failed; return self otherwise."""
        if self.success:
            return self

        schema_errors = [e.message for e in self.errors if e.stage == STAGE_JSON_VALIDATION]
        if schema_errors:
            raise SchemaError(schema_errors)

        raise ConverterError(
            self.message,
            code="BATCH_FAILED",
            details={'errors': [str(e) for e in self.errors]}
        )


@dataclass
class ContentConversionResult:
    """Flattened result for callers that want plain strings."""
    success: bool
    json: Optional[Dict[str, Any]] = None
    json_string: Optional[str] = None
    errors: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)
    stats: Optional[Dict[str, int]] = None

    @classmethod
    def from_result(cls, result: ConversionResult) -> 'ContentConversionResult':
        errors = [str(e) for e in result.errors]
        warnings = [str(w) for w in result.warnings]

        if not result.success:
            return cls(success=False, errors=errors, warnings=warnings)

        total_points = sum(len(item['shape']['data']) for item in result.json['items'])
        return cls(
            success=True,
            json=result.json,
            json_string=result.json_string,
            errors=errors,
            warnings=warnings,
            stats={
                'total_points': total_points,
                'total_items': len(result.json['items']),
                'json_size': len(result.json_string)
            }
        )
