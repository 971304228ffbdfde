"""
Haar cascade 얼굴 탐지 모델
"""
import threading
import cv2
import numpy as np
from typing import List, Optional, Tuple
from picassofier.core.constants import (
    DETECTION_SCALE_FACTOR,
    DETECTION_MIN_NEIGHBORS,
    DETECTION_MIN_SIZE,
)
from picassofier.core.exceptions import DetectionError
from picassofier.core.logging import logger
from picassofier.schemas.image import FaceRegion


class HaarFaceDetector:
    """OpenCV Haar cascade 기반 정면 얼굴 탐지"""

    DEFAULT_CASCADE = "haarcascade_frontalface_default.xml"

    def __init__(self, cascade_path: Optional[str] = None,
                 scale_factor: float = DETECTION_SCALE_FACTOR,
                 min_neighbors: int = DETECTION_MIN_NEIGHBORS,
                 min_size: Tuple[int, int] = DETECTION_MIN_SIZE):
        """
        Args:
            cascade_path: cascade XML 경로 (None이면 OpenCV 기본 정면 얼굴 모델)
            scale_factor: 이미지 피라미드 스케일 비율
            min_neighbors: 후보 유지에 필요한 이웃 수 (클수록 엄격)
            min_size: 탐지할 최소 얼굴 크기 (w, h)
        """
        if cascade_path is None:
            cascade_path = cv2.data.haarcascades + self.DEFAULT_CASCADE
        self.cascade_path = cascade_path
        self.scale_factor = scale_factor
        self.min_neighbors = min_neighbors
        self.min_size = min_size

        # cascade 객체는 워커 스레드마다 따로 생성 (스레드 간 공유 안 함)
        self._local = threading.local()
        self._get_cascade()
        logger.info(f"HaarFaceDetector 초기화 완료: {cascade_path}")

    def _get_cascade(self) -> cv2.CascadeClassifier:
        cascade = getattr(self._local, "cascade", None)
        if cascade is None:
            cascade = cv2.CascadeClassifier(self.cascade_path)
            if cascade.empty():
                raise DetectionError(f"Haar cascade를 로드할 수 없습니다: {self.cascade_path}")
            self._local.cascade = cascade
        return cascade

    def detect(self, gray: np.ndarray, scale_factor: Optional[float] = None,
               min_neighbors: Optional[int] = None,
               min_size: Optional[Tuple[int, int]] = None) -> List[FaceRegion]:
        """
        얼굴 감지

        Args:
            gray: 흑백 입력 이미지 (to_detector_input 결과)
            scale_factor, min_neighbors, min_size: None이면 기본값 사용

        Returns:
            FaceRegion 리스트 (얼굴이 없으면 빈 리스트)

        Raises:
            DetectionError: 입력 행렬이 잘못되었거나 OpenCV 처리 실패
        """
        if gray is None or not isinstance(gray, np.ndarray) or gray.size == 0:
            raise DetectionError("탐지 입력 이미지가 비어 있습니다.")

        scale = scale_factor if scale_factor is not None else self.scale_factor
        neighbors = min_neighbors if min_neighbors is not None else self.min_neighbors
        size = min_size if min_size is not None else self.min_size

        try:
            boxes = self._get_cascade().detectMultiScale(
                gray,
                scaleFactor=scale,
                minNeighbors=neighbors,
                minSize=tuple(size),
            )
        except cv2.error as e:
            raise DetectionError(f"얼굴 탐지 중 OpenCV 오류: {e}") from e

        faces = [
            FaceRegion(x=int(x), y=int(y), width=int(w), height=int(h))
            for (x, y, w, h) in boxes
        ]
        logger.debug(f"얼굴 탐지 결과: {len(faces)}개")
        return faces
