"""
이미지 한 장 전용 난수 생성기
동전 던지기, 할당기, JPEG 품질 선택을 재현 가능하게 만듦
"""
import random
from typing import Optional


def make_rng(seed: Optional[int], *keys) -> random.Random:
    """
    이미지 한 장 전용 난수 생성기

    seed가 있으면 (seed, *keys)로부터 파생하므로 이미지 처리 순서와 무관하게
    같은 결과가 나옴. seed가 없으면 OS 엔트로피 사용

    Usage:
        rng = make_rng(42, "photo.jpg", 3)
    """
    if seed is None:
        return random.Random()
    # str 시드는 sha512로 해시되어 프로세스가 달라도 동일
    return random.Random(":".join([str(seed)] + [str(k) for k in keys]))
