"""
얼굴 영역 / 장식 선택 / 파이프라인 결과 스키마
"""
from pydantic import BaseModel
from typing import List, Literal, Optional, Tuple, Union


# ========== 탐지 ==========

class FaceRegion(BaseModel):
    """탐지된 얼굴 (리사이즈된 이미지 좌표계)"""
    x: int
    y: int
    width: int
    height: int

    @property
    def center(self) -> Tuple[int, int]:
        return self.x + self.width // 2, self.y + self.height // 2


# ========== 장식 ==========

class PlacementRect(BaseModel):
    """마스크를 합성할 사각형 (캔버스 밖으로 나갈 수 있음)"""
    x: int
    y: int
    width: int
    height: int


class MaskDecoration(BaseModel):
    """마스크 이미지 장식"""
    kind: Literal["mask"] = "mask"
    mask_index: int
    asset_name: str
    rect: PlacementRect


class ColorDotDecoration(BaseModel):
    """단색 원 장식"""
    kind: Literal["color_dot"] = "color_dot"
    color_index: int
    color: Tuple[int, int, int]  # RGB
    center: Tuple[int, int]
    diameter: int


DecorationChoice = Union[MaskDecoration, ColorDotDecoration]


# ========== 결과 ==========

class PipelineResult(BaseModel):
    """이미지 한 장의 처리 결과"""
    source_path: str
    sequence: int
    status: Literal["saved", "skipped", "failed"]
    output_path: Optional[str] = None
    face_count: int = 0
    decorations: List[DecorationChoice] = []
    quality: Optional[int] = None
    error: Optional[str] = None


class BatchReport(BaseModel):
    """배치 전체 처리 결과"""
    results: List[PipelineResult] = []

    @property
    def saved(self) -> int:
        return sum(1 for r in self.results if r.status == "saved")

    @property
    def skipped(self) -> int:
        return sum(1 for r in self.results if r.status == "skipped")

    @property
    def failed(self) -> int:
        return sum(1 for r in self.results if r.status == "failed")
