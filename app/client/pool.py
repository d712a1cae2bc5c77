# app/client/pool.py
import asyncio
from typing import Any, Awaitable, Callable, Sequence, TypeVar

T = TypeVar("T")
R = TypeVar("R")


async def bounded_map(
    items: Sequence[T],
    worker: Callable[[int, T], Awaitable[R]],
    max_in_flight: int,
    stop_on_error: bool = True
) -> list[R | None]:
    """
    최대 max_in_flight 개까지만 동시에 worker 실행 (세마포어)
    - 결과는 입력 순서대로
    - 에러가 나면 실행 중인 작업은 끝까지 기다린 뒤 가장 먼저 발생한 에러를 raise
    - stop_on_error 면 아직 시작 안 한 항목은 건너뜀 (결과 None)
    """
    if max_in_flight < 1:
        raise ValueError("max_in_flight must be at least 1")

    sem = asyncio.Semaphore(max_in_flight)
    first_error: list[BaseException] = []

    async def _bound(index: int, item: T) -> Any:
        async with sem:
            if stop_on_error and first_error:
                return None
            try:
                return await worker(index, item)
            except Exception as e:
                if not first_error:
                    first_error.append(e)
                raise

    results = await asyncio.gather(
        *[_bound(i, item) for i, item in enumerate(items)],
        return_exceptions=True
    )

    if first_error:
        raise first_error[0]
    return list(results)
