"""Tests for documentation policy enforcement."""

import unittest

import pytest

from docgen.comments import parse_comment
from docgen.domain import Doc
from docgen.policy import Policy, Source, resolve_comment_text, resolve_doc
from docgen.validation import ValidationError


def _source(**policy) -> Source:
    return Source(path=("test",), policy=Policy(**policy))


class TestResolveDoc(unittest.TestCase):
    def test_description_and_since(self) -> None:
        doc = resolve_doc(
            "x",
            parse_comment("/** a description...\n * @since 1.0.0\n */"),
            _source(),
        )
        self.assertEqual(doc, Doc(description="a description...", since="1.0.0"))

    def test_missing_since(self) -> None:
        with self.assertRaises(ValidationError) as ctx:
            resolve_doc("A", parse_comment("/** description */"), _source())
        self.assertEqual(
            ctx.exception.messages, ["Missing @since tag in test#A documentation"]
        )

    def test_since_optional_when_version_not_enforced(self) -> None:
        doc = resolve_doc("A", parse_comment("/** description */"), _source(enforce_version=False))
        self.assertIsNone(doc.since)
        self.assertEqual(doc.description, "description")

    def test_empty_since_tag_always_fails(self) -> None:
        with self.assertRaises(ValidationError) as ctx:
            resolve_doc("A", parse_comment("/** @since */"), _source(enforce_version=False))
        self.assertEqual(
            ctx.exception.messages, ["Missing @since tag in test#A documentation"]
        )

    def test_empty_category_tag(self) -> None:
        with self.assertRaises(ValidationError) as ctx:
            resolve_doc("A", parse_comment("/**\n * @since 1.0.0\n * @category\n */"), _source())
        self.assertEqual(
            ctx.exception.messages, ["Missing @category tag in test#A documentation"]
        )

    def test_category(self) -> None:
        doc = resolve_doc(
            "A", parse_comment("/**\n * @since 1.0.0\n * @category constructors\n */"), _source()
        )
        self.assertEqual(doc.category, "constructors")

    def test_enforced_description(self) -> None:
        with self.assertRaises(ValidationError) as ctx:
            resolve_doc("A", parse_comment("/** @since 1.0.0 */"), _source(enforce_descriptions=True))
        self.assertEqual(
            ctx.exception.messages, ["Missing description in test#A documentation"]
        )

    def test_enforced_examples(self) -> None:
        with self.assertRaises(ValidationError) as ctx:
            resolve_doc("A", parse_comment("/** @since 1.0.0 */"), _source(enforce_examples=True))
        self.assertEqual(
            ctx.exception.messages, ["Missing @example tag in test#A documentation"]
        )

    def test_module_documentation_exempt_from_examples(self) -> None:
        doc = resolve_doc(
            "test",
            parse_comment("/** @since 1.0.0 */"),
            _source(enforce_examples=True),
            is_module=True,
        )
        self.assertEqual(doc.examples, ())

    def test_every_violation_reported_in_order(self) -> None:
        with self.assertRaises(ValidationError) as ctx:
            resolve_doc(
                "A",
                parse_comment("/** @category */"),
                _source(enforce_descriptions=True, enforce_examples=True),
            )
        self.assertEqual(
            ctx.exception.messages,
            [
                "Missing @since tag in test#A documentation",
                "Missing @category tag in test#A documentation",
                "Missing description in test#A documentation",
                "Missing @example tag in test#A documentation",
            ],
        )

    def test_deprecated_and_examples(self) -> None:
        doc = resolve_comment_text(
            "A",
            "/**\n * @example\n * f(1)\n * @since 1.0.0\n * @deprecated\n */",
            _source(enforce_examples=True),
        )
        self.assertTrue(doc.deprecated)
        self.assertEqual(doc.examples, ("f(1)",))


class TestPolicy(unittest.TestCase):
    def test_requires_documentation(self) -> None:
        self.assertTrue(Policy().requires_documentation)
        self.assertTrue(Policy(enforce_version=False, enforce_descriptions=True).requires_documentation)
        self.assertFalse(Policy(enforce_version=False).requires_documentation)

    def test_with_policy(self) -> None:
        source = Source(path=("src", "index.ts")).with_policy(enforce_examples=True)
        self.assertEqual(source.joined_path, "src/index.ts")
        self.assertTrue(source.policy.enforce_examples)
        self.assertTrue(source.policy.enforce_version)


@pytest.mark.parametrize("text", [None, ""])
def test_missing_comment_fails_only_when_version_enforced(text) -> None:
    with pytest.raises(ValidationError):
        resolve_comment_text("A", text, _source())
    assert resolve_comment_text("A", text, _source(enforce_version=False)) == Doc()


if __name__ == "__main__":
    unittest.main()
