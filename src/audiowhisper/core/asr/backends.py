"""
On-device engines behind the local transcription backends.

- SherpaWhisperEngine: Whisper models exported for sherpa-onnx
- SubprocessParakeetEngine: parakeet-mlx run inside the provisioned runtime
"""

import asyncio
import json
import os
from pathlib import Path
from typing import Dict, Optional

import numpy as np
import scipy.io.wavfile as wav

from ...utils.logger import get_logger
from ..errors import ParakeetModelNotReadyError
from ..interfaces import LocalParakeetEngine, LocalWhisperEngine, ProgressCallback
from .file_utils import find_file_by_suffix, resolve_model_dir

logger = get_logger(__name__)

DEFAULT_PARAKEET_MODEL = "mlx-community/parakeet-tdt-0.6b-v3"

# Exit code the helper script uses when the model is not in the local cache
MODEL_NOT_READY_EXIT_CODE = 3

PARAKEET_SCRIPT = """
import json
import sys

from parakeet_mlx import from_pretrained

repo, audio_path = sys.argv[1], sys.argv[2]
try:
    model = from_pretrained(repo)
except Exception as exc:
    if type(exc).__name__ in ("LocalEntryNotFoundError", "OfflineModeIsEnabled", "FileNotFoundError"):
        print(str(exc), file=sys.stderr)
        sys.exit(3)
    raise
result = model.transcribe(audio_path)
print(json.dumps({"text": result.text}))
"""


def load_wav_mono(path: Path) -> tuple[np.ndarray, int]:
    sample_rate, audio_data = wav.read(str(path))

    if audio_data.dtype == np.int16:
        audio_float = audio_data.astype(np.float32) / 32768.0
    elif audio_data.dtype == np.int32:
        audio_float = audio_data.astype(np.float32) / 2147483648.0
    else:
        audio_float = audio_data.astype(np.float32)

    if audio_float.ndim > 1:
        audio_float = audio_float[:, 0]

    return audio_float, sample_rate


class SherpaWhisperEngine(LocalWhisperEngine):
    # Decoded with scipy.io.wavfile
    supported_extensions = frozenset({".wav"})

    def __init__(self, num_threads: int = 4):
        self._num_threads = num_threads
        self._recognizers: Dict[str, object] = {}

    def _load(self, model: str):
        if model in self._recognizers:
            return self._recognizers[model]

        model_path = resolve_model_dir(model)
        if not os.path.isdir(model_path):
            raise RuntimeError(
                f"Model directory not found: {model_path}. "
                f"Please download the model first."
            )

        encoder = find_file_by_suffix(model_path, "-encoder.onnx", "-encoder.int8.onnx")
        decoder = find_file_by_suffix(model_path, "-decoder.onnx", "-decoder.int8.onnx")
        tokens = find_file_by_suffix(model_path, "-tokens.txt", "tokens.txt")

        if not encoder or not decoder or not tokens:
            missing = []
            if not encoder:
                missing.append("encoder (*-encoder.onnx)")
            if not decoder:
                missing.append("decoder (*-decoder.onnx)")
            if not tokens:
                missing.append("tokens (*-tokens.txt)")
            raise RuntimeError(
                f"Missing Whisper model files in {model_path}: {', '.join(missing)}"
            )

        import sherpa_onnx

        logger.info(
            f"Loading Whisper model: encoder={encoder}, decoder={decoder}, tokens={tokens}"
        )

        recognizer = sherpa_onnx.OfflineRecognizer.from_whisper(
            encoder=encoder,
            decoder=decoder,
            tokens=tokens,
            num_threads=self._num_threads,
            provider="cpu",
            debug=False,
            decoding_method="greedy_search",
        )
        self._recognizers[model] = recognizer
        return recognizer

    def _transcribe_sync(self, path: Path, model: str) -> str:
        recognizer = self._load(model)
        audio, sample_rate = load_wav_mono(path)

        stream = recognizer.create_stream()
        stream.accept_waveform(sample_rate, audio)
        recognizer.decode_stream(stream)
        return stream.result.text

    async def transcribe(
        self,
        path: Path,
        model: str,
        on_progress: Optional[ProgressCallback] = None,
    ) -> str:
        # sherpa-onnx decodes offline in one call, so only start/end are reported
        if on_progress:
            on_progress(0.0)
        text = await asyncio.to_thread(self._transcribe_sync, path, model)
        if on_progress:
            on_progress(1.0)
        return text


class SubprocessParakeetEngine(LocalParakeetEngine):
    def __init__(self, model_repo: str = DEFAULT_PARAKEET_MODEL):
        self.model_repo = model_repo

    async def transcribe(self, path: Path, python_path: str) -> str:
        env = os.environ.copy()
        # Never download from inside a transcription; a missing model is reported instead
        env["HF_HUB_OFFLINE"] = "1"

        process = await asyncio.create_subprocess_exec(
            python_path,
            "-c",
            PARAKEET_SCRIPT,
            self.model_repo,
            str(path),
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
            env=env,
        )
        stdout, stderr = await process.communicate()
        error_output = stderr.decode("utf-8", errors="replace").strip()

        if process.returncode == MODEL_NOT_READY_EXIT_CODE:
            logger.warning(f"Parakeet model {self.model_repo} not ready: {error_output}")
            raise ParakeetModelNotReadyError()

        if process.returncode != 0:
            last_line = error_output.splitlines()[-1] if error_output else "no output"
            raise RuntimeError(
                f"Parakeet process exited with code {process.returncode}: {last_line}"
            )

        lines = stdout.decode("utf-8", errors="replace").strip().splitlines()
        if not lines:
            raise RuntimeError("Parakeet process produced no output")
        return json.loads(lines[-1])["text"]
