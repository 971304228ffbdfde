import numpy as np
import pytest

from picassofier.core.exceptions import DetectionError
from picassofier.ml.face_detector import HaarFaceDetector


def test_default_parameters():
    detector = HaarFaceDetector()
    assert detector.scale_factor == 1.3
    assert detector.min_neighbors == 3
    assert detector.min_size == (80, 80)


def test_blank_image_has_no_faces():
    detector = HaarFaceDetector()
    gray = np.full((480, 640), 127, dtype=np.uint8)
    assert detector.detect(gray) == []


def test_empty_input_raises():
    detector = HaarFaceDetector()
    with pytest.raises(DetectionError):
        detector.detect(np.zeros((0, 0), dtype=np.uint8))
    with pytest.raises(DetectionError):
        detector.detect(None)


def test_unloadable_cascade_raises(tmp_path):
    with pytest.raises(DetectionError):
        HaarFaceDetector(cascade_path=str(tmp_path / "missing.xml"))
