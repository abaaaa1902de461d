"""Bridge to the GitHub Actions runner.

Inputs arrive as ``INPUT_*`` environment variables. Everything this action
hands back to the runner (exported variables, path entries, step outputs and
annotations) goes either to the runner's command files (``GITHUB_ENV``,
``GITHUB_PATH``, ``GITHUB_OUTPUT``) or to stdout as workflow commands.

Values written here are never read back by the action itself.
"""

import os
import uuid
from typing import Optional

from rich.console import Console

from setup_gcloud.constants import ACTION_REF_ENV_VAR, ACTION_REPOSITORY_ENV_VAR

# Workflow commands must reach stdout verbatim.
console = Console(highlight=False, soft_wrap=True, emoji=False)

_TRUE_VALUES = ("true", "t", "yes", "y", "1")
_FALSE_VALUES = ("false", "f", "no", "n", "0")


# ---------------------------------------------------------------------------
# Inputs
# ---------------------------------------------------------------------------


def get_input(name: str) -> str:
  """Return the trimmed value of an action input, or ``""`` when unset."""
  env_name = f"INPUT_{name.replace(' ', '_').upper()}"
  return os.environ.get(env_name, "").strip()


def parse_boolean(value: Optional[str], default: bool = False) -> bool:
  """Parse a boolean-like input.

  Raises:
      ValueError: If the value is neither empty nor a recognized boolean.
  """
  normalized = (value or "").strip().lower()
  if not normalized:
    return default
  if normalized in _TRUE_VALUES:
    return True
  if normalized in _FALSE_VALUES:
    return False
  raise ValueError(f'invalid boolean value "{normalized}"')


def presence(value: Optional[str]) -> Optional[str]:
  """Return the trimmed value, or ``None`` if it is empty."""
  value = (value or "").strip()
  return value or None


# ---------------------------------------------------------------------------
# Outputs
# ---------------------------------------------------------------------------


def export_variable(name: str, value: str) -> None:
  """Set an environment variable for this process and all later steps."""
  value = str(value)
  os.environ[name] = value
  if not _append_file_command("GITHUB_ENV", _key_value_message(name, value)):
    _issue_command("set-env", value, name=name)


def add_path(path: str) -> None:
  """Prepend a directory to ``PATH`` for this process and all later steps."""
  if not _append_file_command("GITHUB_PATH", path):
    _issue_command("add-path", path)
  os.environ["PATH"] = os.pathsep.join([path, os.environ.get("PATH", "")])


def set_output(name: str, value: str) -> None:
  """Record a step output."""
  value = str(value)
  if not _append_file_command("GITHUB_OUTPUT", _key_value_message(name, value)):
    console.print()
    _issue_command("set-output", value, name=name)


# ---------------------------------------------------------------------------
# Annotations
# ---------------------------------------------------------------------------


def debug(msg: str) -> None:
  _issue_command("debug", msg)


def info(msg: str) -> None:
  console.print(msg, markup=False)


def warning(msg: str) -> None:
  _issue_command("warning", msg)


def error(msg: str) -> None:
  _issue_command("error", msg)


def set_failed(msg: str) -> None:
  """Report the step as failed.

  The caller is responsible for exiting with a non-zero status.
  """
  error(msg)


def is_pinned_to_head() -> bool:
  """Whether the workflow references this action by a moving branch."""
  return os.environ.get(ACTION_REF_ENV_VAR) in ("main", "master")


def pinned_to_head_warning(latest: str) -> str:
  action_ref = os.environ.get(ACTION_REF_ENV_VAR, "")
  action_repo = os.environ.get(ACTION_REPOSITORY_ENV_VAR, "")
  return (
    f'{action_repo} is pinned at "{action_ref}". We strongly advise against '
    f'pinning to "@{action_ref}" as it may be unstable. Please update your '
    f"GitHub Action YAML from:\n\n"
    f"    uses: '{action_repo}@{action_ref}'\n\n"
    f"to:\n\n"
    f"    uses: '{action_repo}@{latest}'\n\n"
    f"Alternatively, you can pin to any git tag or git SHA in the repository."
  )


def error_message(err: BaseException) -> str:
  """Render an exception as a short human-readable message."""
  msg = str(err).strip()
  if msg.startswith("Error: "):
    msg = msg[len("Error: ") :].strip()
  if not msg:
    return type(err).__name__
  # Lower-case sentence starts, but leave acronyms like "API" alone.
  if len(msg) > 1 and msg[0].isupper() and not msg[1].isupper():
    msg = msg[0].lower() + msg[1:]
  return msg


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _append_file_command(env_name: str, message: str) -> bool:
  """Append to a runner command file. Returns False if there is none."""
  path = os.environ.get(env_name)
  if not path:
    return False
  if not os.path.exists(path):
    raise RuntimeError(f"Missing file at path: {path}")
  with open(path, "a", encoding="utf-8") as f:
    f.write(f"{message}{os.linesep}")
  return True


def _key_value_message(name: str, value: str) -> str:
  delimiter = f"ghadelimiter_{uuid.uuid4()}"
  if delimiter in name or delimiter in value:
    raise ValueError(
      f"Unexpected input: name or value contains the delimiter {delimiter!r}"
    )
  return f"{name}<<{delimiter}{os.linesep}{value}{os.linesep}{delimiter}"


def _issue_command(command: str, message: str, **properties: str) -> None:
  line = f"::{command}"
  if properties:
    line += " " + ",".join(
      f"{key}={_escape_property(value)}" for key, value in properties.items()
    )
  line += f"::{_escape_data(message)}"
  console.print(line, markup=False)


def _escape_data(value: str) -> str:
  return value.replace("%", "%25").replace("\r", "%0D").replace("\n", "%0A")


def _escape_property(value: str) -> str:
  return _escape_data(value).replace(":", "%3A").replace(",", "%2C")
