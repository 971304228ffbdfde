"""
공통 테스트 픽스처: 합성 이미지, 설정, 가짜 탐지기
"""
import threading
import time
from pathlib import Path
from typing import List, Optional

import cv2
import numpy as np
import pytest

from picassofier.core.config import Settings
from picassofier.core.exceptions import DetectionError
from picassofier.schemas.image import FaceRegion

RED_BGR = (0, 0, 255)


def write_mask(path: Path, color_bgr=RED_BGR, size=(64, 64), alpha: Optional[int] = None) -> Path:
    w, h = size
    if alpha is None:
        img = np.full((h, w, 3), color_bgr, dtype=np.uint8)
    else:
        img = np.zeros((h, w, 4), dtype=np.uint8)
        img[:, :, :3] = color_bgr
        img[:, :, 3] = alpha
    path.parent.mkdir(parents=True, exist_ok=True)
    assert cv2.imwrite(str(path), img)
    return path


def write_photo(path: Path, size=(1024, 768), value: int = 128) -> Path:
    w, h = size
    img = np.full((h, w, 3), value, dtype=np.uint8)
    # 단색이 아닌 이미지가 되도록 그라디언트 추가
    img[:, :, 0] = np.linspace(0, 255, w, dtype=np.uint8)[None, :]
    path.parent.mkdir(parents=True, exist_ok=True)
    assert cv2.imwrite(str(path), img)
    return path


class StubDetector:
    """항상 같은 얼굴 목록을 돌려주는 탐지기"""

    def __init__(self, faces: List[FaceRegion], delay: float = 0.0):
        self.faces = faces
        self.calls = 0
        self.delay = delay
        self.in_flight = 0
        self.max_in_flight = 0
        self._lock = threading.Lock()

    def detect(self, gray):
        with self._lock:
            self.calls += 1
            self.in_flight += 1
            self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            assert gray.ndim == 2
            if self.delay:
                time.sleep(self.delay)
            return list(self.faces)
        finally:
            with self._lock:
                self.in_flight -= 1


class FailingDetector:
    def detect(self, gray):
        raise DetectionError("matrix unreadable")


@pytest.fixture
def workspace(tmp_path):
    masks = tmp_path / "masks"
    inputs = tmp_path / "input"
    masks.mkdir()
    inputs.mkdir()
    return tmp_path


@pytest.fixture
def make_settings(workspace):
    def _make(**overrides) -> Settings:
        values = dict(
            MASKS_DIR=str(workspace / "masks"),
            INPUT_DIR=str(workspace / "input"),
            OUTPUT_DIR=str(workspace / "output"),
            MAX_CONCURRENCY=2,
        )
        values.update(overrides)
        return Settings(**values)
    return _make


@pytest.fixture
def two_faces():
    return [
        FaceRegion(x=100, y=100, width=80, height=80),
        FaceRegion(x=300, y=300, width=90, height=90),
    ]
