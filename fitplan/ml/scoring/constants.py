"""Constants for exercise scoring and candidate retrieval.

Single source of truth for the weights, thresholds and neutral defaults
used by the scorer, the similarity search and the plan assembler.

Constants are organized by functional area:
- Score weights: contribution of each sub-score to the composite
- Thresholds: cut-offs applied to composites, similarities and compatibility
- Defaults: neutral values used when catalog data is missing
"""

from __future__ import annotations

# =============================================================================
# Score Weights
# =============================================================================

class ScoreWeights:
    """Weights of the six sub-scores. They sum to 1.0."""

    GOAL = 0.25
    DIFFICULTY = 0.20
    EQUIPMENT = 0.20
    LOCATION = 0.15
    EXPERIENCE = 0.10
    SEMANTIC = 0.10

    @staticmethod
    def total() -> float:
        return (
            ScoreWeights.GOAL
            + ScoreWeights.DIFFICULTY
            + ScoreWeights.EQUIPMENT
            + ScoreWeights.LOCATION
            + ScoreWeights.EXPERIENCE
            + ScoreWeights.SEMANTIC
        )


# =============================================================================
# Thresholds
# =============================================================================

class Thresholds:
    """Cut-offs applied during retrieval and ranking."""

    MIN_COMPOSITE_SCORE = 0.3  # Composites at or below this are discarded
    SEARCH_SIMILARITY = 0.6  # Single-query semantic search
    DAY_PLAN_SIMILARITY = 0.4  # Broader net when filling a plan day
    LOCATION_COMPATIBILITY_MIN = 0.6  # Location filter in catalog queries

    LEXICAL_FALLBACK_SIMILARITY = 0.5  # Tag for keyword matches without embeddings
    RELATED_EXERCISE_FALLBACK_SIMILARITY = 0.6  # Same pattern / shared muscle without embeddings


# =============================================================================
# Neutral Defaults
# =============================================================================

class Defaults:
    """Values used when an exercise or profile lacks the data to score on."""

    NEUTRAL_SCORE = 0.5  # Missing goal effectiveness or location compatibility
    EXPERIENCE_SUITABILITY = 3  # Missing suitability rating, on the 1-5 scale
    MAX_SUITABILITY = 5
    TARGET_DIFFICULTY = 3  # Unknown experience level
    EQUIPMENT_PARTIAL_MATCH = 0.3  # User lacks some required equipment

    # Difficulty penalty per level
    EASIER_PENALTY = 0.2
    HARDER_PENALTY = 0.3


EQUIPMENT_FULL_GYM = "full_gym"
EQUIPMENT_NONE = "none"
