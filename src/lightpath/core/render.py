"""Top-level render entry point.

``render`` wires a RenderConfig into concrete objects: the sampler
(subdivided into one region per worker when rendering in parallel), the
integrator, the film and, for more than one worker, a ThreadPoolExecutor.

Example:
    >>> from src.lightpath.core.config import RenderConfig
    >>> from src.lightpath.core.render import render
    >>> config = RenderConfig(width=64, height=48, samples_per_pixel=4, seed=7)
    >>> film = render(world, camera, config)
    >>> film.get_image_uint8().shape
    (48, 64, 3)
"""

from __future__ import annotations

import logging
import math
import threading
from concurrent.futures import Executor, ThreadPoolExecutor
from typing import TYPE_CHECKING

from src.lightpath.film.film import ImageFilm
from src.lightpath.integrators.importance import ImportanceIntegrator
from src.lightpath.integrators.path_tracing import PathTracingIntegrator
from src.lightpath.integrators.whitted import WhittedIntegrator
from src.lightpath.sampling.best_candidate import BestCandidateSampler
from src.lightpath.sampling.pseudorandom import PseudorandomSampler
from src.lightpath.sampling.stratified import StratifiedSampler

if TYPE_CHECKING:
    from src.lightpath.camera.pinhole import PinholeCamera
    from src.lightpath.core.config import RenderConfig
    from src.lightpath.integrators.base import Integrator
    from src.lightpath.sampling.sampler import Sampler
    from src.lightpath.scene.world import World

logger = logging.getLogger(__name__)

SAMPLER_TYPES: dict[str, type[Sampler]] = {
    "pseudorandom": PseudorandomSampler,
    "stratified": StratifiedSampler,
    "best-candidate": BestCandidateSampler,
}


def create_samplers(config: RenderConfig) -> list[Sampler]:
    """Build the sampler for the whole image, split once per worker.

    Splitting is recursive and stops at single pixels, so a small image may
    produce fewer regions than workers.
    """
    sampler = SAMPLER_TYPES[config.sampler](
        0,
        0,
        config.width - 1,
        config.height - 1,
        config.samples_per_pixel,
        seed=config.seed,
        buffer_capacity=config.buffer_capacity,
    )
    if config.workers == 1:
        return [sampler]
    levels = math.ceil(math.log2(config.workers))
    samplers = sampler.recursively_subdivide(levels)
    logger.debug("Split the image into %d sampler regions", len(samplers))
    return samplers


def create_integrator(
    config: RenderConfig,
    camera: PinholeCamera,
    film: ImageFilm,
    samplers: list[Sampler],
    *,
    executor: Executor | None = None,
    cancel_event: threading.Event | None = None,
) -> Integrator:
    """Build the integrator named by ``config.integrator``."""
    options = {
        "executor": executor,
        "cancel_event": cancel_event,
        "pregenerate": config.pregenerate,
    }
    if config.integrator == "whitted":
        return WhittedIntegrator(camera, film, samplers, config.max_depth, **options)
    if config.integrator == "path":
        return PathTracingIntegrator(camera, film, samplers, config.max_depth, **options)
    return ImportanceIntegrator(
        camera, film, samplers, config.max_depth, config.samples_per_interaction, **options
    )


def render(
    world: World,
    camera: PinholeCamera,
    config: RenderConfig,
    *,
    cancel_event: threading.Event | None = None,
) -> ImageFilm:
    """Render ``world`` as seen by ``camera``.

    Args:
        world: Scene to render.
        camera: Camera producing primary rays; its image size must match
            the configuration.
        config: Render settings.
        cancel_event: Optional token; setting it stops the render early.

    Returns:
        The film holding the rendered image.

    Raises:
        ValueError: If the camera's image size differs from the config's.
    """
    if (camera.image_width, camera.image_height) != (config.width, config.height):
        raise ValueError(
            f"Camera image size {camera.image_width}x{camera.image_height} does not match "
            f"render size {config.width}x{config.height}"
        )

    film = ImageFilm(config.width, config.height)
    samplers = create_samplers(config)
    logger.info(
        "Render %dx%d at %d spp: %s integrator, %s sampler, %d worker(s)",
        config.width,
        config.height,
        config.samples_per_pixel,
        config.integrator,
        config.sampler,
        config.workers,
    )

    if config.workers == 1:
        integrator = create_integrator(config, camera, film, samplers, cancel_event=cancel_event)
        return integrator.render(world)

    with ThreadPoolExecutor(max_workers=config.workers, thread_name_prefix="lightpath") as executor:
        integrator = create_integrator(
            config, camera, film, samplers, executor=executor, cancel_event=cancel_event
        )
        return integrator.render(world)
