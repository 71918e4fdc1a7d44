import io
import unittest
from contextlib import redirect_stderr, redirect_stdout
from unittest.mock import patch

from knightpad.core.exceptions import InvalidArgumentError, InvalidLengthError, MissingLengthError, SolverError
from main import main, parse_length


class ParseLengthTests(unittest.TestCase):
    def test_valid_lengths(self) -> None:
        self.assertEqual(parse_length("10"), 10)
        self.assertEqual(parse_length(" 7 "), 7)
        self.assertEqual(parse_length("-3"), -3)

    def test_missing_and_invalid_are_distinct(self) -> None:
        with self.assertRaises(MissingLengthError):
            parse_length(None)
        with self.assertRaises(InvalidLengthError):
            parse_length("ten")
        with self.assertRaises(InvalidLengthError):
            parse_length("2.5")
        self.assertFalse(issubclass(MissingLengthError, InvalidLengthError))
        self.assertTrue(issubclass(InvalidLengthError, InvalidArgumentError))


class MainTests(unittest.TestCase):
    def run_main(self, *argv: str) -> str:
        out = io.StringIO()
        with redirect_stdout(out):
            main(list(argv))
        return out.getvalue()

    def run_failing(self, *argv: str) -> tuple:
        err = io.StringIO()
        with redirect_stderr(err), self.assertRaises(SystemExit) as ctx:
            main(list(argv))
        return ctx.exception.code, err.getvalue()

    def test_prints_sequence_count(self) -> None:
        self.assertEqual(self.run_main("5").strip(), "#sequences = 2486")
        self.assertEqual(self.run_main("0", "--workers", "1").strip(), "#sequences = 1")

    def test_missing_length(self) -> None:
        code, message = self.run_failing()
        self.assertEqual(code, 2)
        self.assertIn("missing required argument LENGTH", message)

    def test_invalid_length(self) -> None:
        code, message = self.run_failing("abc")
        self.assertEqual(code, 2)
        self.assertIn("must be an integer", message)
        self.assertNotIn("missing", message)

    def test_invalid_workers(self) -> None:
        code, _ = self.run_failing("5", "--workers", "0")
        self.assertEqual(code, 2)

    def test_verify_and_stats(self) -> None:
        output = self.run_main("4", "--verify", "--stats", "--workers", "2")
        self.assertIn("#sequences = 732", output)
        self.assertIn("CP-SAT count:  732 (match)", output)
        self.assertIn("--- Cache ---", output)

    def test_verify_without_stats(self) -> None:
        output = self.run_main("3", "--verify")
        self.assertIn("CP-SAT count = 214 (match)", output)

    def test_show_keypad(self) -> None:
        output = self.run_main("1", "--show-keypad")
        self.assertIn("--- Knight moves ---", output)
        self.assertIn("  H (6): A,E,K,O,1,3", output)
        self.assertTrue(output.rstrip().endswith("#sequences = 18"))

    def test_u64_guard_exits_with_error(self) -> None:
        with redirect_stdout(io.StringIO()):
            code, message = self.run_failing("100", "--u64", "--workers", "1")
        self.assertEqual(code, 1)
        self.assertIn("64-bit", message)

    def test_solver_failure_exits_with_error(self) -> None:
        with patch("main.count_with_solver", side_effect=SolverError("stopped early with status FEASIBLE")):
            with redirect_stdout(io.StringIO()) as out:
                code, message = self.run_failing("6", "--verify", "--workers", "1")
        self.assertEqual(code, 1)
        self.assertIn("stopped early", message)
        self.assertIn("#sequences = ", out.getvalue())


if __name__ == "__main__":  # pragma: no cover
    unittest.main()
