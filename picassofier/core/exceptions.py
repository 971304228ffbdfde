"""
커스텀 예외 및 이미지 단위 에러 로깅
"""
import traceback
from picassofier.core.logging import logger


class PicassofierException(Exception):
    """기본 예외 클래스"""
    pass


class SetupError(PicassofierException):
    """실행 준비 오류 (배치 전체 중단)"""
    pass


class CatalogEmptyError(SetupError):
    """마스크 디렉토리에 마스크 파일이 없음"""
    pass


class SourceEmptyError(SetupError):
    """입력 디렉토리에 원본 이미지가 없음"""
    pass


class ImageProcessingError(PicassofierException):
    """이미지 한 장의 파이프라인에만 영향을 주는 오류"""
    pass


class DecodeError(ImageProcessingError):
    """이미지 디코딩 오류"""
    pass


class DetectionError(ImageProcessingError):
    """얼굴 탐지 오류"""
    pass


class SaveError(ImageProcessingError):
    """이미지 저장 오류"""
    pass


def log_image_error(source: str, exc: Exception) -> None:
    """
    이미지 단위 예외 로깅 - 배치는 계속 진행
    예외를 다시 던지지 않고 원인과 스택 트레이스만 남김
    """
    if isinstance(exc, ImageProcessingError):
        logger.error(f"이미지 처리 실패 ({type(exc).__name__}): {source} - {exc}")
        logger.debug(''.join(traceback.format_exception(type(exc), exc, exc.__traceback__)))
    else:
        logger.error(f"처리되지 않은 예외: {source} - {exc}", exc_info=exc)
