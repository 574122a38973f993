"""Position evaluation and ply selection."""

from expectigammon.evaluation.search import (
    EvaluationWeights,
    SearchConfig,
    SearchResult,
    PlyEvaluation,
    evaluate_player,
    evaluate_position,
    expectimax,
    select_ply,
)

from expectigammon.evaluation.agents import (
    Agent,
    random_agent,
    greedy_agent,
    expectimax_agent,
)

__all__ = [
    # Search
    "EvaluationWeights",
    "SearchConfig",
    "SearchResult",
    "PlyEvaluation",
    "evaluate_player",
    "evaluate_position",
    "expectimax",
    "select_ply",
    # Agents
    "Agent",
    "random_agent",
    "greedy_agent",
    "expectimax_agent",
]
