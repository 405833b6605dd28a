"""gradient_descent_example – worked example of a full algorithm on a quadratic.

Minimizes f(x) = 0.5 * x^T A x - b^T x with a fixed step size and stops on
whichever comes first: small iterate change, iteration cap or time budget.

Run directly:  python examples/gradient_descent_example.py --step-size 0.1
"""

import argparse
import logging
from dataclasses import dataclass

import numpy as np

from iterative_algorithms import (
    AfterDuration,
    AfterIteration,
    Algorithm,
    AlgorithmLogger,
    CallbackAction,
    ChangeBelow,
    Criterion,
    CriterionState,
    Event,
    IfAction,
    Problem,
    RecordAction,
    Solver,
    State,
)


@dataclass(frozen=True)
class QuadraticProblem(Problem):
    A: np.ndarray
    b: np.ndarray

    def gradient(self, x: np.ndarray) -> np.ndarray:
        return self.A @ x - self.b

    def cost(self, x: np.ndarray) -> float:
        return float(0.5 * x @ self.A @ x - self.b @ x)


@dataclass
class GradientDescentState(State):
    gradient: np.ndarray = None


@dataclass
class GradientDescent(Algorithm):
    stopping_criterion: Criterion
    step_size: float = 0.1

    def init_state(self, problem: QuadraticProblem, criterion_state: CriterionState,
                   **kwargs) -> GradientDescentState:
        x0 = np.asarray(kwargs.get("x0", np.zeros_like(problem.b)), dtype=float)
        return GradientDescentState(iterate=x0.copy(), criterion_state=criterion_state,
                                    gradient=problem.gradient(x0))

    def reset_state(self, problem: QuadraticProblem, state: GradientDescentState,
                    **kwargs) -> GradientDescentState:
        state.iteration = 0
        if "x0" in kwargs:
            state.iterate = np.asarray(kwargs["x0"], dtype=float).copy()
        state.gradient = problem.gradient(state.iterate)
        return state

    def step(self, problem: QuadraticProblem, state: GradientDescentState) -> GradientDescentState:
        state.iterate = state.iterate - self.step_size * state.gradient
        state.gradient = problem.gradient(state.iterate)
        return state


def main():
    parser = argparse.ArgumentParser(description="Gradient descent on a random SPD quadratic")
    parser.add_argument("--dim", type=int, default=5)
    parser.add_argument("--step-size", type=float, default=0.1)
    parser.add_argument("--tol", type=float, default=1e-8)
    parser.add_argument("--max-iter", type=int, default=5000)
    parser.add_argument("--seed", type=int, default=42)
    args = parser.parse_args()

    logging.basicConfig(level=logging.INFO, format="%(name)s %(levelname)s %(message)s")

    rng = np.random.default_rng(args.seed)
    M = rng.standard_normal((args.dim, args.dim))
    A = M @ M.T + args.dim * np.eye(args.dim)
    b = rng.standard_normal(args.dim)
    problem = QuadraticProblem(A=A, b=b)

    # Largest stable step for this A
    step = min(args.step_size, 1.0 / np.linalg.eigvalsh(A).max())

    criterion = ChangeBelow(args.tol) | AfterIteration(args.max_iter) | AfterDuration(5.0)
    algorithm = GradientDescent(stopping_criterion=criterion, step_size=step)

    history = RecordAction({
        "iteration": lambda p, a, s: s.iteration,
        "cost": lambda p, a, s: p.cost(s.iterate),
        "grad_norm": lambda p, a, s: float(np.linalg.norm(s.gradient)),
    })
    progress = IfAction(
        lambda p, a, s: s.iteration % 50 == 0,
        CallbackAction(lambda p, a, s: f"iter {s.iteration:5d} cost {p.cost(s.iterate):.6e}"),
    )
    logger = AlgorithmLogger({Event.POST_STEP: history, Event.PRE_STEP: progress})

    solver = Solver(problem, algorithm, logger=logger)
    state = solver.run(verbose=True)

    exact = np.linalg.solve(A, b)
    print(f"Distance to exact minimizer: {np.linalg.norm(state.iterate - exact):.3e}")
    print(history.to_dataframe().tail())


if __name__ == "__main__":
    main()
