from contextlib import contextmanager
from threading import Lock
from typing import Dict, Iterator, List


class KeyedLock:
    """키(사용자 ID)별 뮤텍스 레지스트리

    같은 사용자의 구매 요청을 프로세스 안에서 직렬화한다.
    더 이상 대기자가 없는 키의 락은 레지스트리에서 제거된다.
    """

    def __init__(self) -> None:
        self._guard = Lock()
        self._locks: Dict[str, List] = {}  # key -> [Lock, holders]

    @contextmanager
    def hold(self, key: str) -> Iterator[None]:
        with self._guard:
            entry = self._locks.setdefault(key, [Lock(), 0])
            entry[1] += 1

        entry[0].acquire()
        try:
            yield
        finally:
            entry[0].release()
            with self._guard:
                entry[1] -= 1
                if entry[1] == 0:
                    self._locks.pop(key, None)

    def active_keys(self) -> int:
        with self._guard:
            return len(self._locks)
