"""Running the ``gcloud`` binary."""

import shutil
import subprocess

from absl import logging


def gcloud_path() -> str:
  """Return the path of the ``gcloud`` binary on ``PATH``."""
  path = shutil.which("gcloud")
  if not path:
    raise RuntimeError(
      "gcloud CLI not found. "
      "Install it by leaving \"skip_install\" unset, or see "
      "https://cloud.google.com/sdk/docs/install"
    )
  return path


def run_gcloud(args: list[str]) -> subprocess.CompletedProcess:
  """Run ``gcloud`` with ``args`` and return the completed process.

  Raises:
      RuntimeError: If gcloud is missing or exits non-zero. The message
          carries gcloud's stderr.
  """
  cmd = [gcloud_path(), *args]
  logging.info("Running: gcloud %s", " ".join(args))
  try:
    return subprocess.run(cmd, check=True, capture_output=True, text=True)
  except subprocess.CalledProcessError as e:
    stderr = (e.stderr or "").strip()
    raise RuntimeError(
      f"failed to execute command `gcloud {' '.join(args)}`: "
      f"{stderr or f'exit code {e.returncode}'}"
    ) from e
