"""
Evaluation — Build the accumulated program and query it

The pure query path of the session. Nothing here mutates the Program:
build() reads it, eval_expression() builds it and evaluates one
standalone expression in its scope.
"""

from ..errors import EvalError
from ..lang.evaluator import Instance, build, evaluate_in_context
from ..lang.parser import parse_expression
from ..lang.values import Bottom, Value
from .accumulator import ProgramAccumulator


EXPRESSION_FILENAME = "<expr>"


class ExpressionEvaluator:
    """Adapter between the session and the language evaluator."""

    def __init__(self, accumulator: ProgramAccumulator):
        self.accumulator = accumulator

    def build(self) -> Instance:
        """Build the current Program. Raises EvalError."""
        return build(self.accumulator.program.files)

    def value(self) -> Value:
        return self.build().value

    def eval_expression(self, text: str) -> Value:
        """
        Evaluate text as an expression against the current Program.

        Raises:
            ParseError: text is not an expression
            EvalError: the Program does not build, a reference does not
                resolve, or the expression evaluates to an error
        """
        expr = parse_expression(EXPRESSION_FILENAME, text)
        instance = self.build()
        result = evaluate_in_context(instance, expr)
        if isinstance(result, Bottom):
            raise EvalError(result.message)
        return result
