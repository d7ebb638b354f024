"""
Data Models for the nesting job.

Defines the contract between the DXF converter and the external strip-packing
solver: per-file input, converted items, and the solver's JSON document.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple, Any

from core.dxf.entities import BoundingBox, PointTuple

SIMPLE_POLYGON = "simple_polygon"

Ring = Tuple[PointTuple, ...]


@dataclass(frozen=True)
class DxfFileInput:
    """One input file: name, raw DXF text and required quantity."""
    name: str
    content: str
    quantity: int = 1

    @classmethod
    def from_dict(cls, data: Dict) -> 'DxfFileInput':
        return cls(
            name=data['name'],
            content=data['content'],
            quantity=data.get('quantity', 1)
        )


@dataclass(frozen=True)
class ItemShape:
    """Exterior ring plus hole rings, all closed and counter-clockwise."""
    exterior: Ring
    interiors: Tuple[Ring, ...] = ()

    def to_dict(self) -> Dict:
        return {
            'exterior': [list(p) for p in self.exterior],
            'interiors': [[list(p) for p in ring] for ring in self.interiors]
        }


@dataclass(frozen=True)
class ItemMetadata:
    """Where an item came from."""
    filename: str
    original_entity_count: int = 0
    contour_count: int = 0
    bounding_box: BoundingBox = field(default_factory=BoundingBox.empty)
    part_index: int = 0

    def to_dict(self) -> Dict:
        return {
            'filename': self.filename,
            'original_entity_count': self.original_entity_count,
            'contour_count': self.contour_count,
            'bounding_box': self.bounding_box.to_dict(),
            'part_index': self.part_index
        }


@dataclass(frozen=True)
class ConvertedPart:
    """A part converted from a file, before an id is assigned."""
    shape: ItemShape
    metadata: ItemMetadata


@dataclass(frozen=True)
class NestingInputItem:
    """
    A converted part with its batch-wide id.

    Ids are dense and zero-based across the whole batch; items are
    created once and never changed afterwards.
    """
    id: int
    quantity: int
    shape: ItemShape
    allowed_rotations: Tuple[int, ...]
    metadata: ItemMetadata

    def to_dict(self) -> Dict:
        return {
            'id': self.id,
            'quantity': self.quantity,
            'shape': self.shape.to_dict(),
            'allowed_rotations': list(self.allowed_rotations),
            'metadata': self.metadata.to_dict()
        }


@dataclass
class SparrowItem:
    """Single item of the solver's job document."""
    id: int
    demand: int
    dxf: str
    allowed_orientations: List[float]
    data: List[List[float]]
    shape_type: str = SIMPLE_POLYGON

    def to_dict(self) -> Dict:
        return {
            'id': self.id,
            'demand': self.demand,
            'dxf': self.dxf,
            'allowed_orientations': list(self.allowed_orientations),
            'shape': {
                'type': self.shape_type,
                'data': [list(p) for p in self.data]
            }
        }

    @classmethod
    def from_dict(cls, data: Dict) -> 'SparrowItem':
        shape = data.get('shape', {})
        return cls(
            id=data['id'],
            demand=data['demand'],
            dxf=data.get('dxf', ''),
            allowed_orientations=list(data.get('allowed_orientations', [])),
            data=[list(p) for p in shape.get('data', [])],
            shape_type=shape.get('type', SIMPLE_POLYGON)
        )


@dataclass
class SparrowJson:
    """The solver's job document: problem name, items, strip height."""
    name: str
    items: List[SparrowItem] = field(default_factory=list)
    strip_height: float = 0.0
    metadata: Optional[Dict[str, Any]] = None

    def to_dict(self) -> Dict:
        result = {
            'name': self.name,
            'items': [item.to_dict() for item in self.items],
            'strip_height': self.strip_height
        }
        if self.metadata:
            result['_metadata'] = dict(self.metadata)
        return result

    @classmethod
    def from_dict(cls, data: Dict) -> 'SparrowJson':
        return cls(
            name=data['name'],
            items=[SparrowItem.from_dict(item) for item in data.get('items', [])],
            strip_height=data.get('strip_height', 0.0),
            metadata=data.get('_metadata')
        )
