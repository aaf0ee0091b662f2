"""AudioSegmenter - cuts a recording into provider-sized segment files."""

import os
import logging
import shutil
import tempfile
from typing import Optional

from domain.errors import ExportFailedError
from domain.models import AudioAsset, Segment
from domain.split_planner import segment_bounds
from ports.audio import AudioProcessingPort

logger = logging.getLogger(__name__)


class AudioSegmenter:
    def __init__(self, audio: AudioProcessingPort, work_dir: Optional[str] = None):
        self._audio = audio
        self._work_dir = work_dir

    def segment(self, asset: AudioAsset, effective_max_duration: float) -> list[Segment]:
        """Export contiguous segments of at most effective_max_duration seconds.

        All-or-nothing: if any export fails the segments produced so far are
        deleted and ExportFailedError is raised.
        """
        bounds = segment_bounds(asset.duration, effective_max_duration)
        total = len(bounds)
        logger.info(
            f"Splitting {os.path.basename(asset.path)} ({asset.duration:.0f}s) into "
            f"{total} segments of at most {effective_max_duration:.1f}s"
        )

        if self._work_dir:
            os.makedirs(self._work_dir, exist_ok=True)
        out_dir = tempfile.mkdtemp(prefix="segments_", dir=self._work_dir)
        stem = os.path.splitext(os.path.basename(asset.path))[0]
        segments: list[Segment] = []

        try:
            for i, (start, end) in enumerate(bounds):
                output_path = os.path.join(out_dir, f"{stem}_part{i + 1}of{total}.m4a")
                try:
                    part = self._audio.export_segment(asset, start, end, output_path)
                except ExportFailedError:
                    raise
                except Exception as e:
                    raise ExportFailedError(e, detail=f"segment {i + 1}/{total}") from e
                segments.append(Segment(i + 1, total, start, end, part))
                logger.info(f"Segment {i + 1}/{total} exported: {end - start:.0f}s")
        except ExportFailedError:
            logger.error(f"Segmentation aborted after {len(segments)}/{total} segments")
            self.cleanup(segments)
            shutil.rmtree(out_dir, ignore_errors=True)
            raise

        return segments

    def cleanup(self, segments: list[Segment]) -> None:
        """Delete segment files and their working directory. Never raises."""
        dirs = set()
        for seg in segments:
            path = seg.asset.path
            dirs.add(os.path.dirname(path))
            try:
                if os.path.exists(path):
                    os.unlink(path)
                logger.debug(f"Deleted segment file {os.path.basename(path)}")
            except OSError as e:
                logger.warning(f"Could not delete segment file {path}: {e}")
        for d in dirs:
            try:
                os.rmdir(d)
            except OSError as e:
                logger.debug(f"Segment directory {d} not removed: {e}")
