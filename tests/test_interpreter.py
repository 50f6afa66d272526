import unittest

from bfcc import (
    BrainfuckInterpreter,
    InputExhausted,
    StepLimitExceeded,
    Token,
    TokenType,
    UnbalancedLoopError,
)


class BrainfuckInterpreterTests(unittest.TestCase):
    def setUp(self) -> None:
        self.interpreter = BrainfuckInterpreter(memsize=100)

    def test_simple_output(self) -> None:
        output = self.interpreter.run("+" * 65 + ".", max_steps=1000)
        self.assertEqual(output, b"A")

    def test_multiplication_loop_prints_space(self) -> None:
        output = self.interpreter.run("++++++++[>++++<-]>.")
        self.assertEqual(output, b" ")

    def test_hello_world(self) -> None:
        program = (
            "++++++++[>++++[>++>+++>+++>+<<<<-]>+>+>->>+[<]<-]>>."
            ">---.+++++++..+++.>>.<-.<.+++.------.--------.>>+.>++."
        )
        self.assertEqual(self.interpreter.run(program), b"Hello World!\n")

    def test_output_uses_low_eight_bits(self) -> None:
        output = self.interpreter.run("+" * 321 + ".-" + "-" * 65 + ".")
        self.assertEqual(output, bytes([321 & 0xFF, (321 - 66) & 0xFF]))

    def test_cells_are_not_wrapped(self) -> None:
        self.interpreter.run("-")
        self.assertEqual(self.interpreter.tape[0], -1)

    def test_reads_input_bytes(self) -> None:
        output = self.interpreter.run(",+.,+.", input_data=b"ab")
        self.assertEqual(output, b"bc")

    def test_input_exhausted(self) -> None:
        with self.assertRaises(InputExhausted):
            self.interpreter.run(",.", input_data=b"")

    def test_clear_idiom(self) -> None:
        output = self.interpreter.run("+++++[-]+.")
        self.assertEqual(output, b"\x01")

    def test_pointer_beyond_tape(self) -> None:
        with self.assertRaises(IndexError):
            self.interpreter.run(">" * 100 + "+")

    def test_pointer_before_tape(self) -> None:
        with self.assertRaises(IndexError):
            self.interpreter.run("<.")

    def test_step_limit_exceeded(self) -> None:
        with self.assertRaises(StepLimitExceeded):
            self.interpreter.run("+[]", max_steps=10)

    def test_unbalanced_loops(self) -> None:
        with self.assertRaises(UnbalancedLoopError):
            self.interpreter.run("[")
        with self.assertRaises(UnbalancedLoopError):
            self.interpreter.run("]")

    def test_step_snapshots(self) -> None:
        states = list(self.interpreter.step("++>."))
        self.assertEqual([state.step for state in states], [1, 2, 3, 3])
        self.assertEqual(states[0].token, Token(TokenType.INC_CELL, 2))
        self.assertEqual(states[1].pointer, 1)
        self.assertEqual(states[2].output, b"\x00")
        self.assertIsNone(states[-1].token)
        self.assertEqual(states[-1].index, states[-1].token_count)

    def test_run_resets_between_programs(self) -> None:
        self.interpreter.run("+++.")
        self.assertEqual(self.interpreter.run("."), b"\x00")

    def test_rejects_non_positive_memsize(self) -> None:
        with self.assertRaises(ValueError):
            BrainfuckInterpreter(memsize=0)


if __name__ == "__main__":
    unittest.main()
