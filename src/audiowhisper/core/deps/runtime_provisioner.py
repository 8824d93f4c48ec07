import asyncio
import json
import os
import shutil
import subprocess
import sys
import threading
from pathlib import Path
from typing import Callable, List, Optional

import platformdirs

from ...utils.logger import get_logger
from ..interfaces import LogCallback, RuntimeProvisioner
from ..settings.config import PARAKEET_PACKAGES

logger = get_logger(__name__)

READY_MARKER = ".audiowhisper-ready"


class RuntimeProvisioningError(RuntimeError):
    """Raised when the local Python runtime cannot be created."""


class UvRuntimeProvisioner(RuntimeProvisioner):
    """
    Creates and maintains the virtualenv that local engines run in.

    Uses ``uv`` when it is on PATH and falls back to ``venv`` + ``pip``.
    A marker file records the installed package set, so repeated calls are
    cheap once the runtime exists.
    """

    def __init__(
        self,
        packages: Optional[List[str]] = None,
        runtime_dir: Optional[Path] = None,
    ):
        self._packages = list(packages or PARAKEET_PACKAGES)
        self._runtime_dir = runtime_dir or (
            Path(platformdirs.user_data_dir("AudioWhisper")) / "python_project"
        )
        self._lock = threading.Lock()

    @property
    def runtime_dir(self) -> Path:
        return self._runtime_dir

    @property
    def venv_dir(self) -> Path:
        return self._runtime_dir / ".venv"

    @property
    def python_path(self) -> Path:
        if sys.platform == "win32":
            return self.venv_dir / "Scripts" / "python.exe"
        return self.venv_dir / "bin" / "python"

    def is_ready(self) -> bool:
        marker = self.venv_dir / READY_MARKER
        if not self.python_path.exists() or not marker.exists():
            return False
        try:
            installed = json.loads(marker.read_text())
        except (OSError, ValueError):
            return False
        return sorted(installed) == sorted(self._packages)

    async def ensure_ready(
        self,
        python_override: Optional[str] = None,
        on_log: Optional[LogCallback] = None,
    ) -> Path:
        return await asyncio.to_thread(self._ensure_ready_sync, python_override, on_log)

    def _ensure_ready_sync(
        self,
        python_override: Optional[str],
        on_log: Optional[LogCallback],
    ) -> Path:
        with self._lock:
            if self.is_ready():
                return self.python_path

            logger.info(f"Provisioning local runtime in {self.venv_dir}")

            try:
                self._runtime_dir.mkdir(parents=True, exist_ok=True)
                for cmd in self._build_commands(python_override):
                    self._run(cmd, on_log)
                (self.venv_dir / READY_MARKER).write_text(json.dumps(self._packages))
            except OSError as e:
                raise RuntimeProvisioningError(f"Failed to provision runtime: {e}") from e

            logger.info("Local runtime ready")
            return self.python_path

    def _build_commands(self, python_override: Optional[str]) -> List[List[str]]:
        uv = shutil.which("uv")
        if uv:
            venv_cmd = [uv, "venv", str(self.venv_dir)]
            if python_override:
                venv_cmd.extend(["--python", python_override])
            install_cmd = [
                uv,
                "pip",
                "install",
                "--python",
                str(self.python_path),
                *self._packages,
            ]
            return [venv_cmd, install_cmd]

        base_python = python_override or sys.executable
        return [
            [base_python, "-m", "venv", str(self.venv_dir)],
            [str(self.python_path), "-m", "pip", "install", "--no-input", *self._packages],
        ]

    def _run(self, cmd: List[str], on_log: Optional[Callable[[str], None]]) -> None:
        logger.debug(f"Running: {' '.join(cmd)}")

        env = os.environ.copy()
        env.pop("PYTHONPATH", None)

        process = subprocess.Popen(
            cmd,
            stdout=subprocess.PIPE,
            stderr=subprocess.STDOUT,
            env=env,
            text=True,
            bufsize=1,  # Line buffered
        )

        last_line = ""
        while True:
            output_line = process.stdout.readline()
            if output_line == "" and process.poll() is not None:
                break

            if output_line:
                line = output_line.strip()
                if not line:
                    continue
                last_line = line
                if on_log:
                    on_log(line)

        return_code = process.poll()
        if return_code != 0:
            raise RuntimeProvisioningError(
                f"'{os.path.basename(cmd[0])} {cmd[1]}' failed ({return_code}): {last_line}"
            )
