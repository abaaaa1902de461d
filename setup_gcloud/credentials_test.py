"""Tests for setup_gcloud.credentials — gcloud authentication and project."""

import subprocess
from unittest import mock

from absl.testing import absltest, parameterized

from setup_gcloud import credentials

_MODULE = "setup_gcloud.credentials"


def _completed(stdout):
  return subprocess.CompletedProcess(args=[], returncode=0, stdout=stdout)


class TestAuthenticate(absltest.TestCase):
  def test_logs_in_with_cred_file(self):
    with mock.patch(f"{_MODULE}.run_gcloud") as mock_run:
      credentials.authenticate("/tmp/creds.json")
      mock_run.assert_called_once_with(
        ["--quiet", "auth", "login", "--cred-file", "/tmp/creds.json"]
      )

  def test_failure_propagates(self):
    with (
      mock.patch(
        f"{_MODULE}.run_gcloud", side_effect=RuntimeError("bad credentials")
      ),
      self.assertRaisesRegex(RuntimeError, "bad credentials"),
    ):
      credentials.authenticate("/tmp/creds.json")


class TestCheckAuthentication(parameterized.TestCase):
  def test_active_account(self):
    accounts = (
      '[{"account": "ci@proj.iam.gserviceaccount.com", "status": "ACTIVE"}]'
    )
    with mock.patch(f"{_MODULE}.run_gcloud", return_value=_completed(accounts)):
      status = credentials.check_authentication()
    self.assertEqual(status.state, credentials.AuthState.AUTHENTICATED)
    self.assertTrue(status.authenticated)

  @parameterized.parameters("[]", "")
  def test_no_active_account(self, stdout):
    with mock.patch(f"{_MODULE}.run_gcloud", return_value=_completed(stdout)):
      status = credentials.check_authentication()
    self.assertEqual(status.state, credentials.AuthState.UNAUTHENTICATED)
    self.assertFalse(status.authenticated)

  @parameterized.named_parameters(
    dict(
      testcase_name="missing_gcloud",
      error=RuntimeError("gcloud CLI not found"),
    ),
    dict(testcase_name="os_error", error=PermissionError("denied")),
  )
  def test_check_failure_is_reported_not_raised(self, error):
    with mock.patch(f"{_MODULE}.run_gcloud", side_effect=error):
      status = credentials.check_authentication()
    self.assertEqual(status.state, credentials.AuthState.CHECK_FAILED)
    self.assertEqual(status.reason, str(error))
    self.assertFalse(status.authenticated)

  def test_unparseable_output_is_a_failed_check(self):
    with mock.patch(f"{_MODULE}.run_gcloud", return_value=_completed("{oops")):
      status = credentials.check_authentication()
    self.assertEqual(status.state, credentials.AuthState.CHECK_FAILED)

  def test_is_authenticated_maps_failed_check_to_false(self):
    with mock.patch(
      f"{_MODULE}.run_gcloud", side_effect=RuntimeError("gcloud CLI not found")
    ):
      self.assertFalse(credentials.is_authenticated())


class TestSetProject(absltest.TestCase):
  def test_sets_project(self):
    with mock.patch(f"{_MODULE}.run_gcloud") as mock_run:
      credentials.set_project("my-proj")
      mock_run.assert_called_once_with(
        ["--quiet", "config", "set", "project", "my-proj"]
      )

  def test_failure_propagates(self):
    with (
      mock.patch(f"{_MODULE}.run_gcloud", side_effect=RuntimeError("denied")),
      self.assertRaises(RuntimeError),
    ):
      credentials.set_project("my-proj")


if __name__ == "__main__":
  absltest.main()
