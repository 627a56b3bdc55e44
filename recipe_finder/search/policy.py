"""Tunable scoring policy for the recipe ranker.

Every weight, threshold and label the scorer uses lives here so that ranking
can be tuned through configuration without touching the algorithm. The
defaults reproduce the production ranking exactly.
"""

from typing import FrozenSet, Optional, Tuple, Annotated

from pydantic import BaseModel, ConfigDict, Field, model_validator

from recipe_finder.search.tokenizer import STOP_WORDS
from recipe_finder.utils.config import Config, DEFAULT_AFFINITY_TERMS, config


class ScoringPolicy(BaseModel):
    """Weights, thresholds and labels applied by the scorer."""

    model_config = ConfigDict(frozen=True)

    # Substring signals
    exact_title_weight: Annotated[int, Field(ge=0, description="Full query found in the title")] = 100
    title_keyword_weight: Annotated[int, Field(ge=0)] = 50
    description_keyword_weight: Annotated[int, Field(ge=0)] = 20
    ingredient_keyword_weight: Annotated[int, Field(ge=0)] = 40
    tag_keyword_weight: Annotated[int, Field(ge=0)] = 30

    # Fuzzy word signals: a word scores floor(similarity * weight) above the threshold
    fuzzy_title_threshold: Annotated[float, Field(ge=0.0, le=1.0)] = 0.70
    fuzzy_title_weight: Annotated[int, Field(ge=0)] = 30
    fuzzy_ingredient_threshold: Annotated[float, Field(ge=0.0, le=1.0)] = 0.75
    fuzzy_ingredient_weight: Annotated[int, Field(ge=0)] = 25

    # Bonuses
    community_bonus: Annotated[int, Field(ge=0)] = 5
    affinity_bonus: Annotated[int, Field(ge=0)] = 15
    multi_keyword_weight: Annotated[int, Field(ge=0, description="Per distinct matched keyword, when more than one")] = 10

    community_source: Annotated[str, Field(min_length=1)] = "Community"
    affinity_source: Annotated[str, Field(min_length=1)] = "Nepali Collection"
    affinity_terms: Tuple[str, ...] = tuple(DEFAULT_AFFINITY_TERMS.split(","))
    stop_words: FrozenSet[str] = STOP_WORDS

    # Ranking and suggestions
    min_score: Annotated[int, Field(ge=0)] = 10
    suggestion_min_similarity: Annotated[float, Field(ge=0.0, le=1.0)] = 0.60
    suggestion_max_similarity: Annotated[float, Field(ge=0.0, le=1.0)] = 0.95
    max_suggestions: Annotated[int, Field(ge=1)] = 3

    @model_validator(mode="after")
    def validate_suggestion_window(self) -> "ScoringPolicy":
        """Ensure the suggestion similarity window is not inverted."""
        if self.suggestion_min_similarity >= self.suggestion_max_similarity:
            raise ValueError(
                "suggestion_min_similarity must be below suggestion_max_similarity, got "
                f"{self.suggestion_min_similarity} >= {self.suggestion_max_similarity}"
            )
        return self

    @classmethod
    def from_config(cls, cfg: Config) -> "ScoringPolicy":
        """Build a policy from environment configuration.

        Args:
            cfg: Loaded configuration.

        Returns:
            Policy with the configured labels, terms, stop words and limits,
            and default weights.
        """
        return cls(
            community_source=cfg.COMMUNITY_SOURCE,
            affinity_source=cfg.AFFINITY_SOURCE,
            affinity_terms=tuple(cfg.AFFINITY_TERMS),
            stop_words=STOP_WORDS | frozenset(cfg.EXTRA_STOP_WORDS),
            min_score=cfg.MIN_MATCH_SCORE,
            max_suggestions=cfg.MAX_SUGGESTIONS,
        )


def default_policy() -> ScoringPolicy:
    """Return the policy built from the module-level configuration."""
    return ScoringPolicy.from_config(config)


def resolve_policy(policy: Optional[ScoringPolicy]) -> ScoringPolicy:
    return default_policy() if policy is None else policy
