import cv2
import numpy as np
import pytest

from picassofier.core.exceptions import DecodeError, SaveError
from picassofier.utils.image_utils import (
    composite_resized,
    draw_filled_ellipse,
    load_image,
    load_mask,
    proportional_height,
    resize_proportional,
    save_jpeg,
    to_detector_input,
)


@pytest.mark.parametrize("in_size", [(640, 480), (1000, 333), (333, 1000), (7, 3), (4000, 1)])
@pytest.mark.parametrize("target", [1, 17, 512, 1024, 2048])
def test_resize_keeps_aspect_ratio(in_size, target):
    w, h = in_size
    img = np.zeros((h, w, 3), dtype=np.uint8)
    out = resize_proportional(img, target)
    out_h, out_w = out.shape[:2]
    assert out_w == target
    assert abs(out_h / out_w - h / w) <= 1 / out_w


def test_proportional_height_rounds_half_up():
    assert proportional_height(4, 2, 3) == 2  # 1.5 -> 2
    assert proportional_height(1000, 750, 1024) == 768


def test_resize_rejects_non_positive_width():
    with pytest.raises(ValueError):
        resize_proportional(np.zeros((10, 10, 3), dtype=np.uint8), 0)


def test_composite_overwrites_target_rect():
    dst = np.zeros((100, 100, 3), dtype=np.uint8)
    src = np.full((10, 10, 3), 200, dtype=np.uint8)
    composite_resized(dst, src, 20, 30, 40, 50)
    assert np.abs(dst[30:80, 20:60].astype(int) - 200).max() <= 1
    assert dst[:30].sum() == 0
    assert dst[80:].sum() == 0
    assert dst[:, :20].sum() == 0


def test_composite_clips_negative_offsets():
    dst = np.zeros((50, 50, 3), dtype=np.uint8)
    # 왼쪽 절반은 파랑, 오른쪽 절반은 초록
    src = np.zeros((20, 20, 3), dtype=np.uint8)
    src[:, :10] = (255, 0, 0)
    src[:, 10:] = (0, 255, 0)
    composite_resized(dst, src, -20, -10, 40, 30)

    # 캔버스 안에는 오른쪽(초록) 절반만 남음, 크기나 위치는 밀리지 않음
    green = dst[0:20, 6:20].astype(int)
    assert np.abs(green - (0, 255, 0)).max() <= 2
    assert dst[20:].sum() == 0
    assert dst[:, 20:].sum() == 0


def test_composite_fully_outside_is_noop():
    dst = np.zeros((50, 50, 3), dtype=np.uint8)
    src = np.full((10, 10, 3), 255, dtype=np.uint8)
    composite_resized(dst, src, 60, 60, 20, 20)
    composite_resized(dst, src, -30, 0, 20, 20)
    assert dst.sum() == 0


def test_composite_alpha_blends():
    dst = np.zeros((20, 20, 3), dtype=np.uint8)
    src = np.zeros((10, 10, 4), dtype=np.uint8)
    src[:, :, 2] = 255
    src[:5, :, 3] = 255  # 위쪽 절반만 불투명
    composite_resized(dst, src, 0, 0, 10, 10)
    assert (dst[:5, :10] == (0, 0, 255)).all()
    assert dst[5:10, :10].sum() == 0


def test_composite_source_subrect():
    dst = np.zeros((10, 10, 3), dtype=np.uint8)
    src = np.zeros((4, 4, 3), dtype=np.uint8)
    src[2:, 2:] = 90
    composite_resized(dst, src, 0, 0, 10, 10, src_x=2, src_y=2, src_w=2, src_h=2)
    assert np.abs(dst.astype(int) - 90).max() <= 1


def test_draw_filled_ellipse_centered():
    img = np.zeros((200, 200, 3), dtype=np.uint8)
    draw_filled_ellipse(img, 100, 100, 62, 62, (255, 0, 0))
    assert tuple(img[100, 100]) == (0, 0, 255)
    assert tuple(img[100, 80]) == (0, 0, 255)
    assert img[100, 140].sum() == 0
    assert img[0, 0].sum() == 0


def test_draw_filled_ellipse_non_positive_size_is_noop():
    img = np.zeros((20, 20, 3), dtype=np.uint8)
    draw_filled_ellipse(img, 10, 10, 0, -4, (255, 255, 255))
    assert img.sum() == 0


def test_load_image_missing_and_corrupt(tmp_path):
    with pytest.raises(DecodeError):
        load_image(str(tmp_path / "nope.jpg"))

    corrupt = tmp_path / "corrupt.jpg"
    corrupt.write_bytes(b"definitely not a jpeg")
    with pytest.raises(DecodeError):
        load_image(str(corrupt))


def test_load_mask_keeps_alpha_and_promotes_gray(tmp_path):
    rgba = np.zeros((8, 8, 4), dtype=np.uint8)
    rgba[:, :, 3] = 128
    cv2.imwrite(str(tmp_path / "mask_a.png"), rgba)
    assert load_mask(str(tmp_path / "mask_a.png")).shape == (8, 8, 4)

    cv2.imwrite(str(tmp_path / "mask_g.png"), np.full((8, 8), 77, dtype=np.uint8))
    gray = load_mask(str(tmp_path / "mask_g.png"))
    assert gray.shape == (8, 8, 3)
    assert (gray == 77).all()


def test_save_jpeg_writes_decodable_file(tmp_path):
    img = np.full((30, 40, 3), 100, dtype=np.uint8)
    path = save_jpeg(img, str(tmp_path / "out.jpg"), 0)
    decoded = cv2.imread(path)
    assert decoded.shape == (30, 40, 3)


def test_save_jpeg_missing_dir_raises(tmp_path):
    img = np.zeros((10, 10, 3), dtype=np.uint8)
    with pytest.raises(SaveError):
        save_jpeg(img, str(tmp_path / "missing" / "out.jpg"), 5)


def test_to_detector_input_is_single_channel():
    img = np.zeros((10, 12, 3), dtype=np.uint8)
    gray = to_detector_input(img)
    assert gray.shape == (10, 12)
