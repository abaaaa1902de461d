"""Tests for setup_gcloud.versions — version input parsing and matching."""

from absl.testing import absltest, parameterized

from setup_gcloud import versions

_RELEASES = ["449.0.0", "450.0.0", "450.1.0", "461.0.0"]


class TestParseVersionSpec(parameterized.TestCase):
  @parameterized.named_parameters(
    dict(testcase_name="none", value=None, expected=versions.Unspecified()),
    dict(testcase_name="empty", value="", expected=versions.Unspecified()),
    dict(testcase_name="blank", value="   ", expected=versions.Unspecified()),
    dict(testcase_name="latest", value="latest", expected=versions.Latest()),
    dict(
      testcase_name="exact",
      value="450.0.0",
      expected=versions.Exact("450.0.0"),
    ),
    dict(
      testcase_name="range",
      value="> 400.0.0",
      expected=versions.Range("> 400.0.0"),
    ),
    dict(
      testcase_name="caret",
      value="^400.0.0",
      expected=versions.Range("^400.0.0"),
    ),
    dict(
      testcase_name="major_only",
      value="450",
      expected=versions.Range("450"),
    ),
    dict(
      testcase_name="major_minor",
      value="450.0",
      expected=versions.Range("450.0"),
    ),
    dict(
      testcase_name="leading_v",
      value="v450.0.0",
      expected=versions.Range("v450.0.0"),
    ),
  )
  def test_parse(self, value, expected):
    self.assertEqual(versions.parse_version_spec(value), expected)

  def test_malformed_values_are_kept_verbatim(self):
    # Validation happens when the constraint is used, not when it is read.
    self.assertEqual(
      versions.parse_version_spec("not-a-version"),
      versions.Range("not-a-version"),
    )


class TestToSpecifierSets(parameterized.TestCase):
  @parameterized.named_parameters(
    dict(testcase_name="any", constraint="> 0.0.0", expected=">0.0.0"),
    dict(testcase_name="star", constraint="*", expected=">=0.0.0"),
    dict(testcase_name="bare", constraint="4.0.0", expected="==4.0.0"),
    dict(testcase_name="equals", constraint="=4.0.0", expected="==4.0.0"),
    dict(testcase_name="leading_v", constraint="v4.0.0", expected="==4.0.0"),
    dict(
      testcase_name="space_separated",
      constraint=">= 400.0.0 < 500.0.0",
      expected="<500.0.0,>=400.0.0",
    ),
    dict(
      testcase_name="comma_separated",
      constraint=">=400.0.0, <500.0.0",
      expected="<500.0.0,>=400.0.0",
    ),
    dict(
      testcase_name="caret",
      constraint="^450.0.0",
      expected="<451.0.0,>=450.0.0",
    ),
    dict(
      testcase_name="caret_zero_major",
      constraint="^0.2.3",
      expected="<0.3.0,>=0.2.3",
    ),
    dict(
      testcase_name="caret_zero_minor",
      constraint="^0.0.3",
      expected="<0.0.4,>=0.0.3",
    ),
    dict(
      testcase_name="tilde",
      constraint="~450.1.2",
      expected="<450.2.0,>=450.1.2",
    ),
    dict(
      testcase_name="tilde_major",
      constraint="~450",
      expected="<451.0.0,>=450.0.0",
    ),
    dict(
      testcase_name="x_range",
      constraint="450.x",
      expected="<451.0.0,>=450.0.0",
    ),
    dict(
      testcase_name="major_only",
      constraint="450",
      expected="<451.0.0,>=450.0.0",
    ),
    dict(
      testcase_name="hyphen",
      constraint="400.0.0 - 460.0.0",
      expected="<=460.0.0,>=400.0.0",
    ),
    dict(
      testcase_name="hyphen_partial_upper",
      constraint="400.0.0 - 460",
      expected="<461.0.0,>=400.0.0",
    ),
    dict(
      testcase_name="greater_than_partial",
      constraint=">450",
      expected=">=451.0.0",
    ),
    dict(
      testcase_name="at_most_partial",
      constraint="<=450.1",
      expected="<450.2.0",
    ),
  )
  def test_conversion(self, constraint, expected):
    sets = versions.to_specifier_sets(constraint)
    self.assertLen(sets, 1)
    self.assertEqual(str(sets[0]), expected)

  def test_union(self):
    sets = versions.to_specifier_sets(">=400.0.0 <450.0.0 || >=460.0.0")
    self.assertEqual(
      [str(s) for s in sets], ["<450.0.0,>=400.0.0", ">=460.0.0"]
    )

  @parameterized.parameters(
    "", "latest", ">", ">= abc", "not-a-version", "!=4.x"
  )
  def test_malformed(self, constraint):
    with self.assertRaises(ValueError):
      versions.to_specifier_sets(constraint)


class TestMatching(parameterized.TestCase):
  def test_satisfies(self):
    self.assertTrue(versions.satisfies("450.0.0", "> 0.0.0"))
    self.assertTrue(versions.satisfies("4.0.0", "4.0.0"))
    self.assertFalse(versions.satisfies("4.0.1", "4.0.0"))
    self.assertFalse(versions.satisfies("garbage", "> 0.0.0"))

  def test_satisfies_checks_each_alternative(self):
    union = "< 450.0.0 || >= 461.0.0"
    self.assertTrue(versions.satisfies("449.0.0", union))
    self.assertTrue(versions.satisfies("461.0.0", union))
    self.assertFalse(versions.satisfies("450.1.0", union))

  @parameterized.named_parameters(
    dict(testcase_name="caret", constraint="^450.0.0", expected="450.1.0"),
    dict(testcase_name="tilde", constraint="~450.0.0", expected="450.0.0"),
    dict(testcase_name="x_range", constraint="450.x", expected="450.1.0"),
    dict(
      testcase_name="union",
      constraint=">=400.0.0 <450.0.0 || >=460.0.0",
      expected="461.0.0",
    ),
    dict(
      testcase_name="hyphen",
      constraint="400.0.0 - 460.0.0",
      expected="450.1.0",
    ),
    dict(testcase_name="leading_v", constraint="v450.0.0", expected="450.0.0"),
    dict(testcase_name="major_only", constraint="450", expected="450.1.0"),
  )
  def test_max_satisfying_npm_ranges(self, constraint, expected):
    self.assertEqual(versions.max_satisfying(_RELEASES, constraint), expected)

  def test_max_satisfying_picks_highest_numerically(self):
    available = ["9.0.0", "450.0.0", "99.0.0", "451.0.0"]
    self.assertEqual(versions.max_satisfying(available, "> 0.0.0"), "451.0.0")
    self.assertEqual(
      versions.max_satisfying(available, ">= 10.0.0 < 451.0.0"), "450.0.0"
    )

  def test_max_satisfying_no_match(self):
    self.assertIsNone(versions.max_satisfying(["1.0.0"], "> 2.0.0"))
    self.assertIsNone(versions.max_satisfying([], "> 0.0.0"))

  def test_max_satisfying_skips_unparseable(self):
    self.assertEqual(
      versions.max_satisfying(["x", "2.0.0"], "> 0.0.0"), "2.0.0"
    )


if __name__ == "__main__":
  absltest.main()
