"""Serializable records handed to rendering and persistence collaborators."""

from typing import Dict, List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field


class NeighborRecord(BaseModel):
    """One side's neighbor descriptor."""

    model_config = ConfigDict(populate_by_name=True)

    neighbor_id: str = Field(..., alias="neighborId")
    is_tab: bool = Field(..., alias="isTab", description="True if this side sticks out, False if indented")


class NeighborsRecord(BaseModel):
    """Neighbor descriptors of a piece; missing sides are grid borders."""

    top: Optional[NeighborRecord] = None
    right: Optional[NeighborRecord] = None
    bottom: Optional[NeighborRecord] = None
    left: Optional[NeighborRecord] = None


class BoundsRecord(BaseModel):
    """Local bounding rectangle of a piece."""

    model_config = ConfigDict(populate_by_name=True)

    min_x: float = Field(..., alias="minX")
    max_x: float = Field(..., alias="maxX")
    min_y: float = Field(..., alias="minY")
    max_y: float = Field(..., alias="maxY")


class PieceRecord(BaseModel):
    """Everything a renderer needs to draw one piece."""

    id: str
    row: int = Field(..., ge=0)
    col: int = Field(..., ge=0)
    neighbors: NeighborsRecord
    path: str = Field(..., description="Closed outline as SVG path data in local coordinates")
    bounds: BoundsRecord
    frame: BoundsRecord = Field(..., description="Drawable region: bounds grown by the fill bleed")
    transform: Tuple[Tuple[float, float, float], Tuple[float, float, float]] = Field(
        ..., description="2x3 affine transform sampling the piece texture from the source image"
    )
    x: float = Field(..., description="Nominal x position of the piece in the assembled puzzle")
    y: float = Field(..., description="Nominal y position of the piece in the assembled puzzle")


class PuzzleRecord(BaseModel):
    """A generated puzzle: grid, stud shape and all pieces."""

    rows: int = Field(..., gt=0)
    cols: int = Field(..., gt=0)
    image_width: float = Field(..., gt=0)
    image_height: float = Field(..., gt=0)
    piece_width: float
    piece_height: float
    seed: Optional[int] = None
    stud: Dict[str, float]
    pieces: List[PieceRecord]
