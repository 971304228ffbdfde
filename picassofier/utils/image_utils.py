"""
이미지 변환 유틸리티 (공통)
디코딩, 비율 유지 리사이즈, 합성, 도형 그리기, JPEG 저장
"""
import os
import cv2
import numpy as np
from typing import Optional, Tuple
from picassofier.core.exceptions import DecodeError, SaveError


def load_image(image_path: str) -> np.ndarray:
    """
    이미지 로드 (BGR)

    Args:
        image_path: 이미지 파일 경로

    Returns:
        OpenCV 이미지 배열

    Raises:
        DecodeError: 파일이 없거나 디코딩 실패
    """
    if not os.path.exists(image_path):
        raise DecodeError(f"이미지 파일을 찾을 수 없습니다: {image_path}")
    img = cv2.imread(image_path, cv2.IMREAD_COLOR)
    if img is None:
        raise DecodeError(f"이미지를 로드할 수 없습니다: {image_path}")
    return img


def load_mask(mask_path: str) -> np.ndarray:
    """마스크 로드 (알파 채널 유지, 흑백은 BGR로 변환)"""
    if not os.path.exists(mask_path):
        raise DecodeError(f"마스크 파일을 찾을 수 없습니다: {mask_path}")
    mask = cv2.imread(mask_path, cv2.IMREAD_UNCHANGED)
    if mask is None:
        raise DecodeError(f"마스크를 로드할 수 없습니다: {mask_path}")
    if mask.ndim == 2:
        mask = cv2.cvtColor(mask, cv2.COLOR_GRAY2BGR)
    if mask.dtype != np.uint8:
        # 16비트 PNG → 8비트
        mask = (mask / 257).astype(np.uint8)
    return mask


def proportional_height(width: int, height: int, target_width: int) -> int:
    """round(height * target_width / width), 0.5는 올림"""
    return max(1, int(np.floor(height * target_width / width + 0.5)))


def resize_proportional(image: np.ndarray, target_width: int) -> np.ndarray:
    """
    가로 폭 기준 비율 유지 리사이즈

    축소는 INTER_AREA, 확대는 INTER_CUBIC (nearest 사용 안 함)
    """
    if target_width <= 0:
        raise ValueError(f"target_width must be positive: {target_width}")
    h, w = image.shape[:2]
    new_h = proportional_height(w, h, target_width)
    interpolation = cv2.INTER_AREA if target_width < w else cv2.INTER_CUBIC
    return cv2.resize(image, (target_width, new_h), interpolation=interpolation)


def clip_rect(x: int, y: int, w: int, h: int, canvas_w: int, canvas_h: int) -> Optional[Tuple[int, int, int, int]]:
    """사각형을 캔버스와 교차시킨 (x1, y1, x2, y2) 반환, 겹치지 않으면 None"""
    x1 = max(0, x)
    y1 = max(0, y)
    x2 = min(canvas_w, x + w)
    y2 = min(canvas_h, y + h)
    if x2 <= x1 or y2 <= y1:
        return None
    return x1, y1, x2, y2


def composite_resized(dst: np.ndarray, src: np.ndarray,
                      dst_x: int, dst_y: int, dst_w: int, dst_h: int,
                      src_x: int = 0, src_y: int = 0,
                      src_w: Optional[int] = None, src_h: Optional[int] = None) -> np.ndarray:
    """
    src의 (src_x, src_y, src_w, src_h) 영역을 (dst_w, dst_h)로 스케일하여
    dst의 (dst_x, dst_y) 위치에 복사 (dst를 직접 수정)

    - 알파 채널이 없으면 대상 픽셀을 덮어씀, 있으면 알파 블렌딩
    - 캔버스 밖 영역은 잘라냄: 전체 크기로 스케일한 뒤 겹치는 부분만 기록
    """
    if dst_w <= 0 or dst_h <= 0:
        return dst

    src_h_total, src_w_total = src.shape[:2]
    src_w = src_w_total - src_x if src_w is None else src_w
    src_h = src_h_total - src_y if src_h is None else src_h
    if src_w <= 0 or src_h <= 0:
        return dst

    canvas_h, canvas_w = dst.shape[:2]
    clipped = clip_rect(dst_x, dst_y, dst_w, dst_h, canvas_w, canvas_h)
    if clipped is None:
        return dst
    x1, y1, x2, y2 = clipped

    region = src[src_y:src_y + src_h, src_x:src_x + src_w]
    interpolation = cv2.INTER_AREA if dst_w < src_w else cv2.INTER_CUBIC
    scaled = cv2.resize(region, (dst_w, dst_h), interpolation=interpolation)

    # 캔버스 밖으로 나간 만큼 소스도 잘라냄
    crop = scaled[y1 - dst_y:y2 - dst_y, x1 - dst_x:x2 - dst_x]
    roi = dst[y1:y2, x1:x2]

    if crop.shape[2] == 4:
        alpha = crop[:, :, 3:4].astype(np.float32) / 255.0
        blended = crop[:, :, :3].astype(np.float32) * alpha + roi.astype(np.float32) * (1.0 - alpha)
        dst[y1:y2, x1:x2] = np.clip(np.rint(blended), 0, 255).astype(np.uint8)
    else:
        dst[y1:y2, x1:x2] = crop[:, :, :3]
    return dst


def rgb_to_bgr(color_rgb: Tuple[int, int, int]) -> Tuple[int, int, int]:
    r, g, b = color_rgb
    return int(b), int(g), int(r)


def draw_filled_ellipse(image: np.ndarray, center_x: int, center_y: int,
                        width: int, height: int, color_rgb: Tuple[int, int, int]) -> np.ndarray:
    """중심 (center_x, center_y), 지름 (width, height)인 채워진 타원"""
    if width <= 0 or height <= 0:
        return image
    cv2.ellipse(
        image,
        (int(center_x), int(center_y)),
        (int(width) // 2, int(height) // 2),
        0, 0, 360,
        rgb_to_bgr(color_rgb),
        thickness=-1,
        lineType=cv2.LINE_AA,
    )
    return image


def draw_rectangle(image: np.ndarray, x: int, y: int, width: int, height: int,
                   color_rgb: Tuple[int, int, int], thickness: int = 2) -> np.ndarray:
    """테두리 사각형 (디버그용)"""
    cv2.rectangle(image, (x, y), (x + width, y + height), rgb_to_bgr(color_rgb), thickness)
    return image


def to_detector_input(image: np.ndarray) -> np.ndarray:
    """Haar cascade 입력용 흑백 이미지 (cascade는 단일 채널에서 동작)"""
    if image.ndim == 2:
        return image.copy()
    return cv2.cvtColor(image, cv2.COLOR_BGR2GRAY)


def save_jpeg(image: np.ndarray, output_path: str, quality: int) -> str:
    """
    JPEG 저장 (quality 0~100 중 호출자가 지정)

    Raises:
        SaveError: 인코딩 또는 파일 쓰기 실패
    """
    try:
        ok, encoded = cv2.imencode(".jpg", image, [cv2.IMWRITE_JPEG_QUALITY, int(quality)])
    except cv2.error as e:
        raise SaveError(f"JPEG 인코딩 실패: {output_path} - {e}") from e
    if not ok:
        raise SaveError(f"JPEG 인코딩 실패: {output_path}")

    try:
        with open(output_path, "wb") as f:
            f.write(encoded.tobytes())
    except OSError as e:
        raise SaveError(f"파일 저장 실패: {output_path} - {e}") from e
    return output_path
