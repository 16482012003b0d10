"""Example capability provider doing arithmetic.

Used by the default configuration so the server and CLI work out of the box.
"""

import math

from assistant_bridge.capabilities import CapabilityProvider, Param, capability


class Calculator(CapabilityProvider):
    description = (
        "You help users with arithmetic. Use the tools for every calculation "
        "instead of computing results yourself, and explain tool errors to the user."
    )

    @capability(
        "Adds two numbers.",
        Param("a", int, "The first number"),
        Param("b", int, "The second number"),
    )
    def sum(self, a: int, b: int) -> int:
        return a + b

    @capability(
        "Subtracts the second number from the first.",
        Param("a", float, "The number to subtract from"),
        Param("b", float, "The number to subtract"),
    )
    def subtract(self, a: float, b: float) -> float:
        return a - b

    @capability(
        "Multiplies two numbers.",
        Param("a", float, "The first factor"),
        Param("b", float, "The second factor"),
    )
    def multiply(self, a: float, b: float) -> float:
        return a * b

    @capability(
        "Divides the first number by the second. Fails when dividing by zero.",
        Param("dividend", float, "The number to divide"),
        Param("divisor", float, "The number to divide by"),
    )
    def divide(self, dividend: float, divisor: float) -> float:
        if divisor == 0:
            raise ZeroDivisionError("division by zero")
        return dividend / divisor

    @capability(
        "Tells whether a whole number is a prime number.",
        Param("n", int, "The number to test"),
    )
    def is_prime(self, n: int) -> bool:
        if n < 2:
            return False
        return all(n % k for k in range(2, math.isqrt(n) + 1))

    @capability(
        "Returns the square root of a number, or null when the number is negative.",
        Param("x", float, "The number to take the square root of"),
    )
    def square_root(self, x: float) -> float | None:
        if x < 0:
            return None
        return math.sqrt(x)
