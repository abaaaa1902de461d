"""Shared fixtures for colocated unit tests."""

import pytest

_RUNNER_ENV_VARS = (
  "GITHUB_ENV",
  "GITHUB_PATH",
  "GITHUB_OUTPUT",
  "GITHUB_ACTION_REF",
  "GITHUB_ACTION_REPOSITORY",
  "GITHUB_REPOSITORY",
  "GOOGLE_GHA_CREDS_PATH",
  "RUNNER_TOOL_CACHE",
  "RUNNER_TEMP",
  "INPUT_SKIP_INSTALL",
  "INPUT_VERSION",
  "INPUT_INSTALL_COMPONENTS",
  "INPUT_PROJECT_ID",
  "INPUT_CACHE",
  "CLOUDSDK_METRICS_ENVIRONMENT",
  "CLOUDSDK_METRICS_ENVIRONMENT_VERSION",
  "CLOUDSDK_CORE_DISABLE_PROMPTS",
)


@pytest.fixture(autouse=True)
def clean_runner_env(monkeypatch):
  """Keep the host runner's environment out of every test.

  Code under test writes to os.environ, so each variable is registered with
  monkeypatch before being removed; that way it is restored (or removed
  again) on teardown.
  """
  for name in _RUNNER_ENV_VARS:
    monkeypatch.setenv(name, "")
    monkeypatch.delenv(name)
  monkeypatch.setenv("PATH", "/usr/bin")
