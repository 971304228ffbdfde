"""
비동기 처리 유틸리티
이미지 파이프라인의 블로킹 단계(디코딩, 탐지, 저장)를 워커 풀에서 실행
풀 크기는 MAX_CONCURRENCY 설정을 따름
"""
import asyncio
from concurrent.futures import ThreadPoolExecutor
from typing import Callable, Any, Optional
from picassofier.core.config import settings
from picassofier.core.logging import logger

# 배치 전체가 공유하는 워커 풀
_executor: Optional[ThreadPoolExecutor] = None


def _pool_size(max_workers: Optional[int]) -> int:
    return max(1, max_workers if max_workers is not None else settings.MAX_CONCURRENCY)


def get_executor() -> ThreadPoolExecutor:
    """워커 풀 반환 (없으면 MAX_CONCURRENCY 크기로 생성)"""
    global _executor
    if _executor is None:
        _executor = configure_executor()
    return _executor


def configure_executor(max_workers: Optional[int] = None) -> ThreadPoolExecutor:
    """
    워커 풀을 지정 크기로 준비

    크기가 다른 풀이 이미 있으면 남은 작업을 마친 뒤 교체 (배치 시작 전에만 호출)

    Args:
        max_workers: 워커 수 (None이면 settings.MAX_CONCURRENCY)
    """
    global _executor
    size = _pool_size(max_workers)
    if _executor is not None and _executor._max_workers == size:
        return _executor
    if _executor is not None:
        _executor.shutdown(wait=True)
    _executor = ThreadPoolExecutor(max_workers=size, thread_name_prefix="image_worker")
    logger.info(f"워커 풀 준비 완료 (max_workers={size})")
    return _executor


def shutdown_executor():
    """워커 풀 종료"""
    global _executor
    if _executor is not None:
        _executor.shutdown(wait=True)
        _executor = None
        logger.info("워커 풀 종료 완료")


async def run_in_thread(func: Callable, *args, **kwargs) -> Any:
    """
    블로킹 함수를 워커 풀에서 실행하고 결과를 기다림

    Args:
        func: 실행할 동기 함수
        *args, **kwargs: 함수에 전달할 인자
    """
    loop = asyncio.get_running_loop()
    return await loop.run_in_executor(get_executor(), lambda: func(*args, **kwargs))
