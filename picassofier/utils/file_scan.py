"""
입력 디렉토리 스캔 유틸리티
"""
from pathlib import Path
from typing import List, Type
from picassofier.core.exceptions import SetupError, CatalogEmptyError, SourceEmptyError
from picassofier.core.logging import logger


def scan_files(directory: str, pattern: str, error_cls: Type[SetupError] = SetupError) -> List[Path]:
    """
    디렉토리에서 패턴에 맞는 파일 목록 반환 (이름순 정렬)

    Raises:
        error_cls: 디렉토리가 없거나 일치하는 파일이 없을 때
    """
    root = Path(directory)
    if not root.is_dir():
        raise error_cls(f"디렉토리를 찾을 수 없습니다: {root}")

    files = sorted(p for p in root.glob(pattern) if p.is_file())
    if not files:
        raise error_cls(f"{root}에서 {pattern} 파일을 찾을 수 없습니다.")

    logger.info(f"파일 스캔 완료: {root}/{pattern} ({len(files)}개)")
    return files


def scan_masks_dir(directory: str, pattern: str = "mask*.png") -> List[Path]:
    """마스크 PNG 목록"""
    return scan_files(directory, pattern, CatalogEmptyError)


def scan_source_dir(directory: str, pattern: str = "*.jpg") -> List[Path]:
    """원본 JPEG 목록"""
    return scan_files(directory, pattern, SourceEmptyError)
