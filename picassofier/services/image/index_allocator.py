"""
풀 인덱스 할당기 (가능한 한 중복 없이)
이미지 한 장, 장식 종류 하나마다 새로 생성
"""
import random
from typing import Callable, Optional, Set


class UniqueIndexAllocator:
    """[0, pool_size) 범위 인덱스를 랜덤으로 발급, 풀이 소진된 뒤에는 중복 허용"""

    def __init__(self, pool_size: int, rng: Optional[random.Random] = None):
        if pool_size < 1:
            raise ValueError(f"pool_size must be >= 1: {pool_size}")
        self.pool_size = pool_size
        self.issued: Set[int] = set()
        self._rng = rng or random.Random()

    @property
    def exhausted(self) -> bool:
        return len(self.issued) >= self.pool_size

    def __call__(self) -> int:
        index = self._rng.randrange(self.pool_size)

        if not self.exhausted:
            retries = self.pool_size - 1
            while index in self.issued and retries > 0:
                index = self._rng.randrange(self.pool_size)
                retries -= 1
            if index in self.issued:
                # 재시도로도 못 찾으면 아직 안 쓴 가장 작은 인덱스
                index = min(set(range(self.pool_size)) - self.issued)

        self.issued.add(index)
        return index


def make_allocator(pool_size: int, rng: Optional[random.Random] = None) -> Callable[[], int]:
    """호출할 때마다 다음 인덱스를 돌려주는 할당기 생성"""
    return UniqueIndexAllocator(pool_size, rng)
