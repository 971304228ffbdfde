"""
얼굴 장식 배치 엔진
탐지된 얼굴마다 마스크 또는 컬러 원을 골라 이미지 위에 합성
"""
import random
from typing import Callable, List, Optional, Sequence, Tuple
import numpy as np
from picassofier.core.constants import (
    COLOR_DOT_SHRINK,
    COLOR_PALETTE,
    DEBUG_BOX_COLOR,
    MASK_OFFSET_X,
    MASK_OFFSET_Y,
)
from picassofier.core.logging import logger
from picassofier.schemas.image import (
    ColorDotDecoration,
    DecorationChoice,
    FaceRegion,
    MaskDecoration,
    PlacementRect,
)
from picassofier.services.image.decoration_catalog import DecorationCatalog
from picassofier.services.image.index_allocator import make_allocator
from picassofier.utils.image_utils import composite_resized, draw_filled_ellipse, draw_rectangle


def mask_rect(face: FaceRegion, offset_x: int = MASK_OFFSET_X, offset_y: int = MASK_OFFSET_Y) -> PlacementRect:
    """얼굴 영역을 좌우 offset_x, 상하 offset_y만큼 넓힌 사각형"""
    return PlacementRect(
        x=face.x - offset_x,
        y=face.y - offset_y,
        width=face.width + offset_x * 2,
        height=face.height + offset_y * 2,
    )


def color_dot_diameter(face: FaceRegion, shrink: int = COLOR_DOT_SHRINK) -> int:
    return face.width - shrink


class DecorationPlacer:
    """얼굴 장식 선택 및 합성"""

    def __init__(self, catalog: DecorationCatalog,
                 palette: Sequence[Tuple[int, int, int]] = COLOR_PALETTE,
                 debug_draw_faces: bool = False):
        if not palette:
            raise ValueError("palette must not be empty")
        self.catalog = catalog
        self.palette = list(palette)
        self.debug_draw_faces = debug_draw_faces

    def choose(self, face: FaceRegion, rng: random.Random,
               next_mask: Callable[[], int], next_color: Callable[[], int]) -> DecorationChoice:
        """동전 던지기로 장식 종류를 정하고 배치 기하 계산"""
        if rng.random() < 0.5:
            color_index = next_color()
            return ColorDotDecoration(
                color_index=color_index,
                color=self.palette[color_index],
                center=face.center,
                diameter=color_dot_diameter(face),
            )

        mask_index = next_mask()
        return MaskDecoration(
            mask_index=mask_index,
            asset_name=self.catalog[mask_index].name,
            rect=mask_rect(face),
        )

    def apply(self, image: np.ndarray, choice: DecorationChoice) -> np.ndarray:
        """선택된 장식을 이미지에 합성 (image를 직접 수정)"""
        if isinstance(choice, ColorDotDecoration):
            cx, cy = choice.center
            draw_filled_ellipse(image, cx, cy, choice.diameter, choice.diameter, choice.color)
        else:
            asset = self.catalog[choice.mask_index]
            rect = choice.rect
            composite_resized(
                image, asset.image,
                rect.x, rect.y, rect.width, rect.height,
                0, 0, asset.width, asset.height,
            )
        return image

    def decorate(self, image: np.ndarray, faces: List[FaceRegion],
                 rng: Optional[random.Random] = None) -> List[DecorationChoice]:
        """
        이미지의 모든 얼굴에 장식 적용

        Args:
            image: 리사이즈된 원본 이미지 (직접 수정됨)
            faces: 탐지된 얼굴 리스트 (탐지기 반환 순서대로 처리)
            rng: 이미지 전용 난수 생성기

        Returns:
            얼굴별 적용된 장식 리스트
        """
        rng = rng or random.Random()
        # 이미지마다, 장식 종류마다 별도 할당기
        next_mask = make_allocator(len(self.catalog), rng)
        next_color = make_allocator(len(self.palette), rng)

        choices: List[DecorationChoice] = []
        for face in faces:
            choice = self.choose(face, rng, next_mask, next_color)
            self.apply(image, choice)
            if self.debug_draw_faces:
                draw_rectangle(image, face.x, face.y, face.width, face.height, DEBUG_BOX_COLOR)
            choices.append(choice)

        if faces:
            masks = sum(1 for c in choices if c.kind == "mask")
            logger.debug(f"장식 적용: 얼굴 {len(faces)}개 (마스크 {masks}, 컬러 {len(faces) - masks})")
        return choices
