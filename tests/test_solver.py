import unittest

from knightpad.core.models import Key
from knightpad.engine.counter import count_sequences
from knightpad.engine.keypad import Keypad, default_keypad
from knightpad.engine.solver import build_sequence_model, count_with_solver


class SolverCrossCheckTests(unittest.TestCase):
    def test_matches_memoized_counter(self) -> None:
        for length in range(1, 6):
            with self.subTest(length=length):
                self.assertEqual(count_with_solver(length), count_sequences(length, workers=1))

    def test_matches_with_tighter_budgets(self) -> None:
        for budget in (0, 1):
            for length in (2, 4):
                with self.subTest(budget=budget, length=length):
                    self.assertEqual(
                        count_with_solver(length, vowel_budget=budget),
                        count_sequences(length, vowel_budget=budget, workers=1),
                    )

    def test_empty_sequence(self) -> None:
        self.assertEqual(count_with_solver(0), 1)
        self.assertEqual(count_with_solver(-4), 1)

    def test_infeasible_model_counts_zero(self) -> None:
        keypad = Keypad([Key("S", 1, 1), Key("V", 2, 3, vowel=True), Key("T", 3, 1)])
        self.assertEqual(count_with_solver(2, keypad=keypad, vowel_budget=0), 0)
        self.assertEqual(count_with_solver(3, keypad=keypad, vowel_budget=1), 4)

    def test_model_has_one_variable_per_press(self) -> None:
        _, presses = build_sequence_model(4, default_keypad())
        self.assertEqual(len(presses), 4)


if __name__ == "__main__":  # pragma: no cover
    unittest.main()
