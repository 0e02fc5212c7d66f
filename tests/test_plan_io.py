import re
import tempfile
import unittest
from pathlib import Path

from parabatch.io import read_json, read_plan, write_json_atomic, write_plan
from parabatch.models import Batch, Suite, plan_to_dict


def _suites():
    return [
        Suite(
            path="tests/FooTest.py",
            class_name="Foo",
            batches=(
                Batch(path="tests/FooTest.py", tests=("testA", "testB")),
                Batch(path="tests/FooTest.py", tests=("testC with data set #0",)),
            ),
        )
    ]


class TestPlanIO(unittest.TestCase):
    def test_write_plan_is_atomic_and_cleans_temp(self) -> None:
        with tempfile.TemporaryDirectory() as td:
            out_dir = Path(td) / "out"
            out_path = out_dir / "plan.json"

            written = write_plan(out_path, _suites())

            self.assertEqual(out_path, written)
            self.assertEqual(plan_to_dict(_suites()), read_plan(out_path))
            self.assertEqual([], list(out_dir.glob("*.tmp")))

    def test_output_is_byte_stable(self) -> None:
        with tempfile.TemporaryDirectory() as td:
            a = Path(td) / "a.json"
            b = Path(td) / "b.json"
            write_plan(a, _suites())
            write_plan(b, _suites())

            self.assertEqual(a.read_bytes(), b.read_bytes())
            self.assertTrue(a.read_text(encoding="utf-8").endswith("}\n"))

    def test_failed_write_keeps_previous_file(self) -> None:
        with tempfile.TemporaryDirectory() as td:
            out_path = Path(td) / "plan.json"
            write_plan(out_path, _suites())
            before = out_path.read_bytes()

            with self.assertRaises(TypeError):
                write_json_atomic(out_path, {"not": object()})

            self.assertEqual(before, out_path.read_bytes())
            self.assertEqual([], list(Path(td).glob("*.tmp")))

    def test_read_plan_rejects_other_json(self) -> None:
        with tempfile.TemporaryDirectory() as td:
            other = Path(td) / "other.json"
            write_json_atomic(other, {"rows": []})

            self.assertEqual({"rows": []}, read_json(other))
            with self.assertRaises(ValueError):
                read_plan(other)


class TestBatchFilterExpression(unittest.TestCase):
    def test_plain_names_stop_at_word_boundary(self) -> None:
        expr = Batch(path="x", tests=("testA",)).filter_expression()
        self.assertEqual(r"::(?:testA\b)", expr)

    def test_names_start_after_the_class_separator(self) -> None:
        pattern = re.compile(Batch(path="x", tests=("test_a",)).filter_expression())

        self.assertTrue(pattern.search("Foo::test_a"))
        self.assertFalse(pattern.search("Foo::test_test_a"))
        self.assertFalse(pattern.search("Foo::my_test_a"))

    def test_data_set_names_are_escaped_and_anchored(self) -> None:
        batch = Batch(path="x", tests=('test_add with data set "a.b"', "test_sub"))
        pattern = re.compile(batch.filter_expression())

        self.assertTrue(pattern.search('Foo::test_add with data set "a.b"'))
        self.assertFalse(pattern.search('Foo::test_add with data set "aXb"'))
        self.assertTrue(pattern.search("Foo::test_sub"))
        self.assertFalse(pattern.search("Foo::test_subtract"))

    def test_suite_counts_tests(self) -> None:
        suite = Suite(path="p", class_name="C", batches=(Batch("p", ("a", "b")), Batch("p", ("c",))))
        self.assertEqual(3, suite.test_count)
        self.assertEqual({"path": "p", "class_name": "C", "batches": [["a", "b"], ["c"]]}, suite.to_dict())


if __name__ == "__main__":
    unittest.main()
