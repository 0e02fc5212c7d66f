import unittest

from parabatch.metadata import (
    docblock_groups,
    has_annotation,
    method_data_provider,
    method_dependency,
    resolve_metadata,
)


DOC = """Adds numbers.

@group math
@group slow
@depends test_setup
@depends test_other
@dataProvider additions
"""


class TestMetadata(unittest.TestCase):
    def test_groups_repeat_in_order(self) -> None:
        self.assertEqual(("math", "slow"), docblock_groups(DOC))

    def test_depends_and_data_provider_take_first_match(self) -> None:
        self.assertEqual("test_setup", method_dependency(DOC))
        self.assertEqual("additions", method_data_provider(DOC))

    def test_absent_tags_yield_nothing(self) -> None:
        self.assertEqual((), docblock_groups("no tags here"))
        self.assertIsNone(method_dependency(""))
        self.assertIsNone(method_data_provider(None))

    def test_tags_are_case_sensitive_keywords(self) -> None:
        self.assertEqual((), docblock_groups("@Group slow\n@groups fast"))
        self.assertIsNone(method_dependency("@Depends test_a"))

    def test_label_stops_at_last_word_boundary(self) -> None:
        self.assertEqual(("slow",), docblock_groups("@group slow   \n"))
        self.assertEqual("test_a", method_dependency("@depends test_a."))

    def test_resolve_metadata_builds_typed_record(self) -> None:
        meta = resolve_metadata(DOC)
        self.assertEqual(("math", "slow"), meta.groups)
        self.assertEqual("test_setup", meta.depends_on)
        self.assertEqual("additions", meta.data_provider)

    def test_has_annotation(self) -> None:
        doc = "@ticket   1234\n@owner qa"
        self.assertTrue(has_annotation(doc, "ticket", "1234"))
        self.assertTrue(has_annotation(doc, "owner", "qa"))
        self.assertFalse(has_annotation(doc, "owner", "dev"))
        self.assertFalse(has_annotation(None, "ticket", "1234"))


if __name__ == "__main__":
    unittest.main()
