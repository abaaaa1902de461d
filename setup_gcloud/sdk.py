"""Resolving, downloading and installing Google Cloud SDK releases.

Releases are read from the public ``cloud-sdk-release`` bucket, which holds
one archive per release and platform, e.g.
``google-cloud-sdk-450.0.0-linux-x86_64.tar.gz``.
"""

import os
import platform
import re
import tarfile
import tempfile
import zipfile
from typing import Optional

from absl import logging
from google.cloud import storage
from google.cloud.exceptions import NotFound

from setup_gcloud import actions, tool_cache, versions
from setup_gcloud.constants import (
  RELEASE_BUCKET,
  RELEASE_PREFIX,
  RUNNER_TEMP_ENV_VAR,
  TOOL_NAME,
)
from setup_gcloud.gcloud import run_gcloud

# Every release ships a linux x86_64 archive, so it is used as the index.
_RELEASE_RE = re.compile(
  rf"^{re.escape(RELEASE_PREFIX)}(\d+\.\d+\.\d+)-linux-x86_64\.tar\.gz$"
)

_SYSTEMS = {"linux": "linux", "darwin": "darwin", "windows": "windows"}
_MACHINES = {
  "x86_64": "x86_64",
  "amd64": "x86_64",
  "aarch64": "arm",
  "arm64": "arm",
  "i386": "x86",
  "i686": "x86",
  "x86": "x86",
}


def _client():
  return storage.Client.create_anonymous_client()


def list_releases() -> list[str]:
  """Return every published release number."""
  blobs = _client().list_blobs(RELEASE_BUCKET, prefix=RELEASE_PREFIX)
  releases = []
  for blob in blobs:
    match = _RELEASE_RE.match(blob.name)
    if match:
      releases.append(match.group(1))
  logging.info("Found %d gcloud releases", len(releases))
  return releases


def best_version(constraint: str) -> str:
  """Return the newest published release that satisfies ``constraint``.

  Raises:
      RuntimeError: If no release satisfies the constraint.
      ValueError: If the constraint is malformed.
  """
  version = versions.max_satisfying(list_releases(), constraint)
  if version is None:
    raise RuntimeError(f'No gcloud versions matching "{constraint}"')
  return version


def release_archive_name(
  version: str, system: Optional[str] = None, machine: Optional[str] = None
) -> str:
  """Name of the release archive for a platform.

  Args:
      version: Exact release number.
      system: ``platform.system()`` value; defaults to the current one.
      machine: ``platform.machine()`` value; defaults to the current one.
  """
  system = (system or platform.system()).lower()
  machine = (machine or platform.machine()).lower()
  if system not in _SYSTEMS:
    raise RuntimeError(f"Unsupported operating system: {system}")
  if machine not in _MACHINES:
    raise RuntimeError(f"Unsupported architecture: {machine}")
  ext = "zip" if system == "windows" else "tar.gz"
  platform_name = f"{_SYSTEMS[system]}-{_MACHINES[machine]}"
  return f"{RELEASE_PREFIX}{version}-{platform_name}.{ext}"


def install_gcloud_sdk(version: str, use_tool_cache: bool = False) -> str:
  """Download and install a gcloud release and put it on ``PATH``.

  Args:
      version: Exact version or version constraint; constraints resolve to
          the newest matching release.
      use_tool_cache: Also store the install in the runner tool cache so
          later jobs on the same machine can reuse it.

  Returns:
      The installed release number.
  """
  if isinstance(versions.parse_version_spec(version), versions.Exact):
    resolved = version
  else:
    resolved = best_version(version)
  logging.info("Installing gcloud %s", resolved)

  work_dir = tempfile.mkdtemp(
    prefix="setup-gcloud-", dir=os.environ.get(RUNNER_TEMP_ENV_VAR) or None
  )
  archive = _download_release(resolved, work_dir)
  extract_dir = os.path.join(work_dir, "extract")
  _extract(archive, extract_dir)

  tool_root = os.path.join(extract_dir, "google-cloud-sdk")
  if use_tool_cache:
    tool_root = tool_cache.cache_dir(tool_root, TOOL_NAME, resolved)

  actions.add_path(os.path.join(tool_root, "bin"))
  return resolved


def install_components(components: list[str]) -> None:
  """Install extra gcloud components in a single invocation."""
  run_gcloud(["--quiet", "components", "install", *components])
  logging.info("Installed gcloud components: %s", ", ".join(components))


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _download_release(version: str, dest_dir: str) -> str:
  name = release_archive_name(version)
  path = os.path.join(dest_dir, name)
  blob = _client().bucket(RELEASE_BUCKET).blob(name)
  try:
    blob.download_to_filename(path)
  except NotFound as e:
    raise RuntimeError(
      f"gcloud release {version} is not available ({name})"
    ) from e
  logging.info("Downloaded gs://%s/%s", RELEASE_BUCKET, name)
  return path


def _extract(archive: str, dest_dir: str) -> None:
  os.makedirs(dest_dir, exist_ok=True)
  if archive.endswith(".zip"):
    with zipfile.ZipFile(archive) as zf:
      zf.extractall(dest_dir)
  else:
    with tarfile.open(archive, "r:gz") as tf:
      tf.extractall(dest_dir, filter="data")
