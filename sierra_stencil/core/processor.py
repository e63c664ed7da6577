"""Image processing pipeline.

Decode → RGBA pixel buffer → Sierra stencil → RGBA image → data URL.
"""

from __future__ import annotations

import hashlib
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Iterable

from PIL import Image

from sierra_stencil.core.dither import THRESHOLD, SierraDither
from sierra_stencil.core.pixels import PixelBuffer
from sierra_stencil.core.reader import open_image
from sierra_stencil.core.writer import to_data_url
from sierra_stencil.utils.registry import CrossfadePair, ProcessedRegistry

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Settings:
    """Processing settings that affect output."""

    threshold: float = THRESHOLD  # 0 to 255
    format: str = "png"

    def __post_init__(self) -> None:
        if not 0.0 <= self.threshold <= 255.0:
            raise ValueError(f"Threshold must be within 0-255, got {self.threshold}")

    def hash(self) -> str:
        """Deterministic hash for registry keying."""
        data = f"{self.threshold!r}:{self.format}"
        return hashlib.md5(data.encode()).hexdigest()[:12]


@dataclass
class StencilResult:
    """Result of dithering a single image."""

    source: str
    image: Image.Image  # RGBA stencil
    data_url: str
    width: int = 0
    height: int = 0


@dataclass
class BatchReport:
    """Outcome of a batch run."""

    results: list[StencilResult] = field(default_factory=list)
    failures: list[tuple[str, str]] = field(default_factory=list)  # (source, reason)
    skipped: list[str] = field(default_factory=list)


def process_image(
    image: Image.Image, settings: Settings, source: str = "<image>"
) -> StencilResult:
    """Dither a single decoded image."""
    buffer = PixelBuffer.from_image(image)
    SierraDither(settings.threshold).process(buffer)
    stencil = buffer.to_image()
    return StencilResult(
        source=source,
        image=stencil,
        data_url=to_data_url(stencil, settings.format),
        width=buffer.width,
        height=buffer.height,
    )


def process_all(
    sources: Iterable[str | Path],
    settings: Settings,
    registry: ProcessedRegistry | None = None,
    on_progress: Callable[[int, int], None] | None = None,
) -> BatchReport:
    """Dither every source, continuing past sources that fail.

    Each success is recorded in ``registry`` as an original/dithered pair.
    Sources already registered under the same settings are skipped.
    """
    sources = [str(s) for s in sources]
    total = len(sources)
    settings_hash = settings.hash()
    report = BatchReport()
    logger.info("Found %d images", total)

    for i, source in enumerate(sources):
        if registry is not None and (source, settings_hash) in registry:
            logger.info("Skipping %s: already processed", source)
            report.skipped.append(source)
        else:
            try:
                src = open_image(source)
                result = process_image(src.image, settings, source=source)
            except (ValueError, OSError, Image.DecompressionBombError) as e:
                logger.warning("Could not process %s: %s", source, e)
                report.failures.append((source, str(e)))
            else:
                report.results.append(result)
                if registry is not None:
                    registry.put(
                        source,
                        settings_hash,
                        CrossfadePair(
                            original_src=source,
                            dithered_src=result.data_url,
                            alt=Path(source).stem,
                        ),
                    )
                logger.info("Processed %s (%dx%d)", source, result.width, result.height)

        if on_progress:
            on_progress(i + 1, total)

    return report
