"""FFmpegAudioAdapter - audio probing, segment export and conversion via ffmpeg."""

import os
import logging
import tempfile
import subprocess

from domain.errors import AudioProcessingError, ExportFailedError
from domain.models import AudioAsset
from ports.audio import AudioProcessingPort

logger = logging.getLogger(__name__)


class FFmpegAudioAdapter(AudioProcessingPort):
    def __init__(self, ffmpeg: str = "ffmpeg", ffprobe: str = "ffprobe"):
        self._ffmpeg = ffmpeg
        self._ffprobe = ffprobe

    def probe(self, audio_path: str) -> AudioAsset:
        if not os.path.isfile(audio_path):
            raise AudioProcessingError(f"Audio file not found: {audio_path}")

        cmd = [
            self._ffprobe,
            "-v", "error",
            "-show_entries", "format=duration",
            "-of", "default=noprint_wrappers=1:nokey=1",
            audio_path,
        ]
        try:
            result = subprocess.run(cmd, capture_output=True, text=True)
        except OSError as e:
            raise AudioProcessingError(f"Failed to run ffprobe: {e}") from e
        if result.returncode != 0:
            logger.error(f"Error probing audio: {result.stderr}")
            raise AudioProcessingError(f"Failed to probe audio: {result.stderr.strip()}")

        try:
            duration = float(result.stdout.strip())
        except ValueError:
            raise AudioProcessingError(
                f"ffprobe returned no duration for {audio_path}: {result.stdout!r}"
            ) from None

        byte_size = os.path.getsize(audio_path)
        logger.info(
            f"Audio {os.path.basename(audio_path)}: {duration:.2f}s, "
            f"{byte_size / 1024 / 1024:.1f}MB ({byte_size} bytes)"
        )
        return AudioAsset(path=audio_path, duration=duration, byte_size=byte_size)

    def export_segment(
        self, source: AudioAsset, start: float, end: float, output_path: str
    ) -> AudioAsset:
        if os.path.exists(output_path):
            os.unlink(output_path)

        cmd = [
            self._ffmpeg, "-y",
            "-ss", f"{start:.3f}",
            "-i", source.path,
            "-t", f"{end - start:.3f}",
            "-vn",
            "-c:a", "aac",
            output_path,
        ]
        try:
            result = subprocess.run(cmd, capture_output=True, text=True)
        except OSError as e:
            raise ExportFailedError(e) from e
        if result.returncode != 0:
            logger.error(f"Error exporting segment {start:.1f}-{end:.1f}s: {result.stderr}")
            if os.path.exists(output_path):
                os.unlink(output_path)
            raise ExportFailedError(detail=result.stderr.strip())

        return AudioAsset(
            path=output_path,
            duration=end - start,
            byte_size=os.path.getsize(output_path),
        )

    def convert_to_wav(self, input_path: str, sample_rate: int = 16000) -> str:
        temp_file = tempfile.NamedTemporaryFile(suffix=".wav", delete=False)
        temp_file.close()
        output_path = temp_file.name

        try:
            cmd = [
                self._ffmpeg, "-y",
                "-i", input_path,
                "-c:a", "pcm_s16le",
                "-ar", str(sample_rate),
                "-ac", "1",
                output_path,
            ]
            result = subprocess.run(cmd, capture_output=True, text=True)
            if result.returncode != 0:
                logger.error(f"Error converting audio: {result.stderr}")
                raise AudioProcessingError(f"Failed to convert audio: {result.stderr.strip()}")
            return output_path

        except Exception:
            if os.path.exists(output_path):
                os.unlink(output_path)
            raise
