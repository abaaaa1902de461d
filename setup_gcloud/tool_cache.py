"""Machine-local cache of installed tools.

Layout matches the hosted runner tool cache so that versions cached by other
actions on a warm runner are found too::

    $RUNNER_TOOL_CACHE/<tool>/<version>/<arch>/
    $RUNNER_TOOL_CACHE/<tool>/<version>/<arch>.complete

A version only counts as cached once its ``.complete`` marker exists.
Concurrent writers are not coordinated here.
"""

import os
import platform
import shutil
from typing import NamedTuple, Optional

from absl import logging

from setup_gcloud import versions
from setup_gcloud.constants import TOOL_CACHE_ENV_VAR

_ARCH_ALIASES = {
  "x86_64": "x64",
  "amd64": "x64",
  "aarch64": "arm64",
  "arm64": "arm64",
  "i386": "x86",
  "i686": "x86",
  "x86": "x86",
}


class CachedTool(NamedTuple):
  version: str
  path: str


def default_arch() -> str:
  """Architecture name in the runner's convention (``x64``, ``arm64``...)."""
  machine = platform.machine().lower()
  return _ARCH_ALIASES.get(machine, machine)


def cache_root() -> str:
  root = os.environ.get(TOOL_CACHE_ENV_VAR)
  if not root:
    raise RuntimeError(f"Expected {TOOL_CACHE_ENV_VAR} to be defined")
  return root


def find(
  tool: str, version_spec: str, arch: Optional[str] = None
) -> Optional[CachedTool]:
  """Find a cached version of ``tool`` matching ``version_spec``.

  Args:
      tool: Tool name, e.g. ``gcloud``.
      version_spec: An exact version or a version constraint.
      arch: Architecture; defaults to the current machine.

  Returns:
      The matching ``CachedTool``, or ``None`` on a cache miss.
  """
  if not tool:
    raise ValueError("tool parameter is required")
  if not version_spec:
    raise ValueError("version_spec parameter is required")
  arch = arch or default_arch()

  if isinstance(versions.parse_version_spec(version_spec), versions.Exact):
    version = version_spec
  else:
    version = versions.max_satisfying(list_versions(tool, arch), version_spec)
    if version is None:
      logging.info("No cached %s matches %s", tool, version_spec)
      return None

  path = os.path.join(cache_root(), tool, version, arch)
  if os.path.isdir(path) and os.path.isfile(f"{path}.complete"):
    logging.info("Found %s %s in the tool cache: %s", tool, version, path)
    return CachedTool(version=version, path=path)
  logging.info("Not found in the tool cache: %s %s %s", tool, version, arch)
  return None


def list_versions(tool: str, arch: Optional[str] = None) -> list[str]:
  """Return every fully cached version of ``tool`` for ``arch``."""
  arch = arch or default_arch()
  tool_dir = os.path.join(cache_root(), tool)
  if not os.path.isdir(tool_dir):
    return []
  return sorted(
    version
    for version in os.listdir(tool_dir)
    if os.path.isfile(os.path.join(tool_dir, version, f"{arch}.complete"))
  )


def cache_dir(
  source_dir: str, tool: str, version: str, arch: Optional[str] = None
) -> str:
  """Copy ``source_dir`` into the cache and mark it complete.

  Returns:
      The cached directory path.
  """
  if not os.path.isdir(source_dir):
    raise RuntimeError(f"sourceDir is not a directory: {source_dir}")
  arch = arch or default_arch()

  dest = os.path.join(cache_root(), tool, version, arch)
  logging.info("Caching %s %s from %s to %s", tool, version, source_dir, dest)
  if os.path.exists(dest):
    shutil.rmtree(dest)
  marker = f"{dest}.complete"
  if os.path.exists(marker):
    os.remove(marker)

  shutil.copytree(source_dir, dest, symlinks=True)
  with open(marker, "w"):
    pass
  return dest
