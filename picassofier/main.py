"""
picassofier 배치 실행 진입점
masks/mask*.png 와 input/*.jpg 를 읽어 output/ 에 스타일화된 JPEG 저장
"""
import asyncio
import sys
from typing import Optional

from picassofier.core.async_utils import shutdown_executor
from picassofier.core.config import Settings, settings as default_settings, resolve_path
from picassofier.core.exceptions import SetupError
from picassofier.core.logging import logger
from picassofier.schemas.image import BatchReport
from picassofier.services.image.decoration_catalog import load_catalog
from picassofier.services.image.pipeline_service import PipelineDriver
from picassofier.utils.file_scan import scan_source_dir


def run(config: Optional[Settings] = None, detector=None, seed: Optional[int] = None) -> BatchReport:
    """
    배치 한 번 실행

    Raises:
        SetupError: 마스크 또는 입력 디렉토리가 비어 있음 (이미지 처리 전에 중단)
    """
    config = config or default_settings
    catalog = load_catalog(str(resolve_path(config.MASKS_DIR)), config.MASK_PATTERN)
    sources = scan_source_dir(str(resolve_path(config.INPUT_DIR)), config.INPUT_PATTERN)

    driver = PipelineDriver(catalog, detector=detector, config=config, seed=seed)
    try:
        return asyncio.run(driver.run_batch(sources))
    finally:
        shutdown_executor()


def main() -> int:
    logger.info(f"{default_settings.APP_NAME} 시작")
    try:
        report = run()
    except SetupError as e:
        logger.error(f"실행 준비 실패: {e}")
        return 1
    logger.info(f"{default_settings.APP_NAME} 종료 (저장 {report.saved}/{len(report.results)})")
    return 0


if __name__ == "__main__":
    sys.exit(main())
