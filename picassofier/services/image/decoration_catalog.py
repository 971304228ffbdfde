"""
장식(마스크) 카탈로그
배치 실행마다 한 번 로드하고, 모든 이미지 파이프라인이 읽기 전용으로 공유
"""
from dataclasses import dataclass
from pathlib import Path
from collections.abc import Sequence
from typing import Iterator, List, Union
import numpy as np
from picassofier.core.exceptions import CatalogEmptyError, DecodeError, SetupError
from picassofier.core.logging import logger
from picassofier.utils.file_scan import scan_masks_dir
from picassofier.utils.image_utils import load_mask


@dataclass(frozen=True)
class DecorationAsset:
    """디코딩된 마스크 이미지 (읽기 전용)"""
    name: str
    image: np.ndarray

    @property
    def width(self) -> int:
        return self.image.shape[1]

    @property
    def height(self) -> int:
        return self.image.shape[0]


class DecorationCatalog(Sequence):
    """인덱스로 접근하는 마스크 풀"""

    def __init__(self, assets: List[DecorationAsset]):
        if not assets:
            raise CatalogEmptyError("마스크 카탈로그가 비어 있습니다.")
        self._assets = tuple(assets)

    def __getitem__(self, index):
        return self._assets[index]

    def __len__(self) -> int:
        return len(self._assets)

    def __iter__(self) -> Iterator[DecorationAsset]:
        return iter(self._assets)

    @property
    def names(self) -> List[str]:
        return [asset.name for asset in self._assets]


def load_asset(path: Union[str, Path]) -> DecorationAsset:
    """마스크 한 장 로드 후 배열을 읽기 전용으로 고정"""
    image = load_mask(str(path))
    image.setflags(write=False)
    return DecorationAsset(name=Path(path).name, image=image)


def load_catalog(directory: str, pattern: str = "mask*.png") -> DecorationCatalog:
    """
    마스크 디렉토리를 읽어 카탈로그 생성

    Raises:
        CatalogEmptyError: 일치하는 마스크 파일이 없을 때
        SetupError: 마스크 디코딩 실패
    """
    paths = scan_masks_dir(directory, pattern)
    try:
        assets = [load_asset(path) for path in paths]
    except DecodeError as e:
        raise SetupError(f"마스크 로드 실패: {e}") from e
    logger.info(f"마스크 카탈로그 로드 완료: {len(assets)}개 ({', '.join(a.name for a in assets)})")
    return DecorationCatalog(assets)
