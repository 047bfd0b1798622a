"""
Pizzeria unit tests for the resolver of conditional headers and ETags
"""

import unittest as _unittest

from pizzeria_core.api import conditional
from pizzeria_core.api.base import InvalidConditionalHeader
from pizzeria_core.api.etag import ETag
from pizzeria_core.schemas import ApiErrorCode


class ETagTests(_unittest.TestCase):
    def test_quoting(self):
        self.assertEqual(ETag("abc"), ETag.from_header('"abc"'))
        self.assertEqual(ETag("abc"), ETag.from_header("abc"))
        self.assertEqual(ETag("abc"), ETag.from_header('  "abc" '))
        self.assertEqual('"abc"', ETag("abc").to_header())
        self.assertEqual("abc", str(ETag.from_header(ETag("abc").to_header())))

    def test_empty_etags(self):
        for value in ["", " ", '""', '" "']:
            with self.assertRaises(ValueError):
                ETag.from_header(value)
        with self.assertRaises(ValueError):
            ETag("")

    def test_generated_etags_differ(self):
        tags = {ETag.generate() for _ in range(256)}
        self.assertEqual(256, len(tags))


class ConditionalHeaderTests(_unittest.TestCase):
    def assertRejected(self, if_match, if_none_match, status_code: int, message: str):
        with self.assertRaises(InvalidConditionalHeader) as context:
            conditional.resolve(if_match, if_none_match)
        self.assertEqual(status_code, context.exception.status_code)
        self.assertEqual(ApiErrorCode.INVALID_CONDITIONAL_HEADER, context.exception.code)
        self.assertIn(message, context.exception.message)

    def test_create(self):
        self.assertEqual(conditional.Create(), conditional.resolve([], ["*"]))
        self.assertEqual(conditional.Create(), conditional.resolve([], [" * "]))

    def test_update(self):
        self.assertEqual(conditional.Update(ETag("foo")), conditional.resolve(["foo"], []))
        self.assertEqual(conditional.Update(ETag("foo")), conditional.resolve(['"foo"'], []))
        self.assertIsInstance(conditional.resolve(["*"], []), conditional.Update)

    def test_both_headers(self):
        self.assertRejected(["foo"], ["*"], 400, "Cannot specify both")
        self.assertRejected([""], [""], 400, "Cannot specify both")
        self.assertRejected(["a", "b"], ["*", "*"], 400, "Cannot specify both")

    def test_invalid_if_match(self):
        self.assertRejected([""], [], 400, "must not be empty")
        self.assertRejected(['""'], [], 400, "must not be empty")
        self.assertRejected(["foo", "bar"], [], 400, "only specify one If-Match")
        self.assertRejected(["foo", "foo"], [], 400, "only specify one If-Match")

    def test_invalid_if_none_match(self):
        self.assertRejected([], ["foo"], 400, "must be '*'")
        self.assertRejected([], [""], 400, "must be '*'")
        self.assertRejected([], ['"*"'], 400, "must be '*'")
        self.assertRejected([], ["*", "*"], 400, "only specify one If-None-Match")
        self.assertRejected([], ["*", "foo"], 400, "only specify one If-None-Match")

    def test_missing_headers(self):
        self.assertRejected([], [], 428, "One of If-Match or If-None-Match must be specified")


if __name__ == '__main__':
    _unittest.main()
