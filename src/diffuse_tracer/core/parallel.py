"""Parallel multi-pass averaging.

Each render pass seeded differently is an independent Monte Carlo estimate of
the same image. average_render() forks one pass per seed, joins them and
averages the results with equal weight, which lowers variance the same way
running samples_per_pixel * len(seeds) samples through independent streams
would.

Scheduling goes through a small executor abstraction:
    - ThreadPerTaskExecutor: fork-join with one worker thread per pass
    - SerialExecutor: runs passes in order on the calling thread (tests)

Workers only read the scene and camera and each owns its own Image, so no
locking is needed until the join. Combination is a fixed-weight sum in
seed-list order, so the result does not depend on completion order. An
exception in any worker propagates out of average_render().

Example:
    >>> from diffuse_tracer.core.parallel import average_render, SerialExecutor
    >>> image = average_render(renderer, seeds=[1, 2, 3, 4])
    >>> same = average_render(renderer, [1, 2, 3, 4], executor=SerialExecutor())
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable, Iterable, Sequence
from concurrent.futures import ThreadPoolExecutor
from typing import Protocol, TypeVar

from diffuse_tracer.core.image import Image

logger = logging.getLogger(__name__)

T = TypeVar("T")
R = TypeVar("R")

# Type alias for progress callback
# Callback receives (completed_passes, total_passes)
ProgressCallback = Callable[[int, int], None]


class PassRenderer(Protocol):
    """Anything that renders one complete, self-contained pass per seed."""

    def render(self, seed: int) -> Image: ...


class Executor(Protocol):
    """Runs a function over items and returns the results in item order."""

    def map(self, fn: Callable[[T], R], items: Sequence[T]) -> list[R]: ...


class SerialExecutor:
    """Run every task on the calling thread, in order."""

    def map(self, fn: Callable[[T], R], items: Sequence[T]) -> list[R]:
        return [fn(item) for item in items]


class ThreadPerTaskExecutor:
    """Fork-join executor with one worker thread per task.

    There is no work queue or cancellation: all tasks start immediately and
    map() returns once every task has finished. If a task raised, the first
    failure in item order is re-raised after the join.
    """

    def __init__(self, thread_name_prefix: str = "render-pass") -> None:
        self._thread_name_prefix = thread_name_prefix

    def map(self, fn: Callable[[T], R], items: Sequence[T]) -> list[R]:
        items = list(items)
        if not items:
            return []
        with ThreadPoolExecutor(
            max_workers=len(items), thread_name_prefix=self._thread_name_prefix
        ) as pool:
            futures = [pool.submit(fn, item) for item in items]
            return [future.result() for future in futures]


def average_images(images: Sequence[Image]) -> Image:
    """Average images of identical size with equal weight.

    Args:
        images: The images to combine, summed in the given order.

    Returns:
        A new image whose pixels are the mean of the inputs.

    Raises:
        ValueError: If no images are given or their sizes differ.
    """
    if not images:
        raise ValueError("Cannot average an empty list of images")

    width, height = images[0].width, images[0].height
    weight = 1.0 / len(images)
    result = Image(width, height)

    for image in images:
        if (image.width, image.height) != (width, height):
            raise ValueError(
                f"Image size mismatch: {image.width}x{image.height} vs {width}x{height}"
            )
        result.pixels += image.pixels * weight

    return result


def average_render(
    renderer: PassRenderer,
    seeds: Iterable[int],
    executor: Executor | None = None,
    callback: ProgressCallback | None = None,
) -> Image:
    """Render one pass per seed concurrently and average the passes.

    Args:
        renderer: Renders a full pass for a given seed.
        seeds: One seed per pass. Passes are combined in this order.
        executor: Scheduling strategy; defaults to one thread per seed.
        callback: Optional callback called after each pass completes.
            Receives (completed_passes, total_passes).

    Returns:
        The equally weighted average of all passes.

    Raises:
        ValueError: If seeds is empty.
        Exception: Whatever a failing pass raised; no partial image is
            returned.
    """
    seeds = list(seeds)
    if not seeds:
        raise ValueError("average_render needs at least one seed")

    if executor is None:
        executor = ThreadPerTaskExecutor()

    total = len(seeds)
    completed = 0
    lock = threading.Lock()

    def run_pass(seed: int) -> Image:
        nonlocal completed
        image = renderer.render(seed)
        if callback is not None:
            with lock:
                completed += 1
                callback(completed, total)
        return image

    logger.debug("Rendering %d passes with %s", total, type(executor).__name__)
    images = executor.map(run_pass, seeds)
    logger.debug("Joined %d passes", total)

    return average_images(images)
