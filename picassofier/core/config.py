"""
애플리케이션 설정 관리
"""
import os
from pathlib import Path
from pydantic_settings import BaseSettings
from typing import Optional


class Settings(BaseSettings):
    # Application
    APP_NAME: str = "picassofier"
    LOG_LEVEL: str = "INFO"

    # Input / Output (실행 디렉토리 기준 상대 경로 허용)
    MASKS_DIR: str = "./masks"
    MASK_PATTERN: str = "mask*.png"
    INPUT_DIR: str = "./input"
    INPUT_PATTERN: str = "*.jpg"
    OUTPUT_DIR: str = "./output"

    # Resize
    FIRST_PASS_WIDTH: int = 1024  # 얼굴 탐지용 1차 리사이즈 폭
    OUTPUT_WIDTH: int = 512  # 최종 출력 폭 (스타일 다운스케일)

    # JPEG 품질 (0~10, 저화질 인쇄 느낌을 위해 매 저장마다 랜덤)
    MIN_JPEG_QUALITY: int = 0
    MAX_JPEG_QUALITY: int = 10

    # Batch
    MAX_CONCURRENCY: int = 4  # 동시에 처리하는 이미지 수 상한
    RANDOM_SEED: Optional[int] = None  # None이면 실행마다 다른 결과
    SAVE_RETRIES: int = 1  # 저장 실패 시 추가 시도 횟수

    # Debug
    DEBUG_DRAW_FACES: bool = False  # 탐지된 얼굴에 빨간 사각형 표시

    class Config:
        env_file = ".env"
        case_sensitive = True


def resolve_path(relative_path: str) -> Path:
    """상대 경로를 현재 작업 디렉토리 기준 절대 경로로 변환"""
    if os.path.isabs(relative_path):
        return Path(relative_path)
    return (Path.cwd() / relative_path).resolve()


settings = Settings()
