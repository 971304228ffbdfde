"""
이미지 스타일화 파이프라인 오케스트레이션
리사이즈 → 얼굴 탐지 → 장식 합성 → 최종 리사이즈 → 저장
"""
import asyncio
import os
from pathlib import Path
from typing import List, Optional, Sequence, Union
import numpy as np
from picassofier.core.async_utils import configure_executor, run_in_thread
from picassofier.core.config import Settings, settings as default_settings, resolve_path
from picassofier.core.exceptions import (
    DetectionError,
    SaveError,
    log_image_error,
)
from picassofier.core.logging import logger
from picassofier.ml.face_detector import HaarFaceDetector
from picassofier.schemas.image import BatchReport, FaceRegion, PipelineResult
from picassofier.services.image.decoration_catalog import DecorationCatalog
from picassofier.services.image.decoration_placer import DecorationPlacer
from picassofier.utils.image_utils import load_image, resize_proportional, save_jpeg, to_detector_input
from picassofier.utils.random_source import make_rng


def output_name(source_path: Union[str, Path], sequence: int) -> str:
    """입력 파일명 + 순번 (동시 처리 중에도 충돌 없음)"""
    return f"{Path(source_path).stem}-{sequence:04d}.jpg"


class PipelineDriver:
    """원본 이미지 한 장씩 처리하고, 전체 배치를 제한된 동시성으로 실행"""

    def __init__(self, catalog: DecorationCatalog, detector=None,
                 config: Optional[Settings] = None, seed: Optional[int] = None,
                 placer: Optional[DecorationPlacer] = None):
        """
        Args:
            catalog: 읽기 전용 마스크 카탈로그
            detector: detect(gray) -> List[FaceRegion] 를 제공하는 탐지기 (None이면 Haar cascade)
            config: 설정 (None이면 전역 settings)
            seed: 난수 시드 (None이면 config.RANDOM_SEED)
            placer: 장식 배치 엔진 (None이면 catalog로 생성)
        """
        self.config = config or default_settings
        self.catalog = catalog
        self.detector = detector or HaarFaceDetector()
        self.seed = seed if seed is not None else self.config.RANDOM_SEED
        self.placer = placer or DecorationPlacer(catalog, debug_draw_faces=self.config.DEBUG_DRAW_FACES)
        self.output_dir = resolve_path(self.config.OUTPUT_DIR)
        logger.info(
            f"PipelineDriver 초기화: 마스크 {len(catalog)}개, 출력={self.output_dir}, "
            f"동시성={self.config.MAX_CONCURRENCY}, seed={self.seed}"
        )

    # ----- 동기 단계 (스레드 풀에서 실행) -----

    def load_resized(self, source_path: str) -> np.ndarray:
        """디코딩 후 탐지용 폭으로 리사이즈"""
        image = load_image(source_path)
        resized = resize_proportional(image, self.config.FIRST_PASS_WIDTH)
        del image
        return resized

    def detect_faces(self, image: np.ndarray) -> List[FaceRegion]:
        """탐지기 입력으로 변환 후 얼굴 탐지"""
        try:
            gray = to_detector_input(image)
            return list(self.detector.detect(gray))
        except DetectionError:
            raise
        except Exception as e:
            raise DetectionError(f"얼굴 탐지 실패: {e}") from e

    def save(self, image: np.ndarray, output_path: str, quality: int) -> str:
        """JPEG 저장, 실패 시 SAVE_RETRIES 만큼 재시도"""
        attempts = max(0, self.config.SAVE_RETRIES) + 1
        for attempt in range(1, attempts + 1):
            try:
                return save_jpeg(image, output_path, quality)
            except SaveError as e:
                if attempt == attempts:
                    raise
                logger.warning(f"저장 실패, 재시도 ({attempt}/{attempts - 1}): {output_path} - {e}")
        raise SaveError(f"저장 실패: {output_path}")

    # ----- 이미지 단위 파이프라인 -----

    async def process_image(self, source_path: Union[str, Path], sequence: int) -> PipelineResult:
        """
        원본 이미지 한 장 처리

        Loaded → Resized → Detected → Decorated → FinalResized → Saved
        탐지 실패 시 Skipped (출력 없음), 디코딩/저장 실패 시 failed

        Returns:
            PipelineResult (예외를 밖으로 던지지 않음)
        """
        source = str(source_path)
        rng = make_rng(self.seed, Path(source).name, sequence)
        result = PipelineResult(source_path=source, sequence=sequence, status="failed")
        resized = None
        final = None

        try:
            resized = await run_in_thread(self.load_resized, source)

            try:
                faces = await run_in_thread(self.detect_faces, resized)
            except DetectionError as e:
                log_image_error(source, e)
                logger.info(f"이미지 건너뜀 (탐지 실패): {source}")
                result.status = "skipped"
                result.error = str(e)
                return result

            result.face_count = len(faces)
            if faces:
                result.decorations = self.placer.decorate(resized, faces, rng)
            else:
                logger.info(f"얼굴 없음, 장식 없이 저장: {source}")

            final = resize_proportional(resized, self.config.OUTPUT_WIDTH)
            resized = None

            quality = rng.randint(self.config.MIN_JPEG_QUALITY, self.config.MAX_JPEG_QUALITY)
            output_path = str(self.output_dir / output_name(source, sequence))
            await run_in_thread(self.save, final, output_path, quality)

            result.status = "saved"
            result.output_path = output_path
            result.quality = quality
            logger.info(f"저장 완료: {output_path} (얼굴 {len(faces)}개, quality={quality})")
        except Exception as e:
            # DecodeError / SaveError 및 예상치 못한 오류 모두 이 이미지에서만 종료
            log_image_error(source, e)
            result.error = str(e)
        finally:
            # 이미지 버퍼 해제
            del resized, final

        return result

    # ----- 배치 -----

    async def run_batch(self, sources: Sequence[Union[str, Path]]) -> BatchReport:
        """
        모든 원본 이미지를 MAX_CONCURRENCY 이하로 동시에 처리하고 전부 끝날 때까지 대기

        Returns:
            BatchReport (입력 순서와 같은 순서)
        """
        os.makedirs(self.output_dir, exist_ok=True)
        configure_executor(self.config.MAX_CONCURRENCY)
        semaphore = asyncio.Semaphore(max(1, self.config.MAX_CONCURRENCY))

        async def _bounded(path, sequence):
            async with semaphore:
                return await self.process_image(path, sequence)

        logger.info(f"배치 시작: 이미지 {len(sources)}개")
        results = await asyncio.gather(
            *(_bounded(path, i) for i, path in enumerate(sources, start=1))
        )
        report = BatchReport(results=list(results))
        logger.info(
            f"배치 완료: 저장 {report.saved}, 건너뜀 {report.skipped}, 실패 {report.failed} "
            f"(총 {len(report.results)})"
        )
        return report
