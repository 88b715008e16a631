"""
Configuration for the latent substitution engine.

Immutable config object shared by the orchestrator and the HTTP layer.
There is no config file: callers pass strategy parameters on every call and
these values only fill in what a caller leaves out.
"""

from dataclasses import dataclass

# Allowlist of distance metrics understood by neighbour search.
VALID_METRICS: frozenset[str] = frozenset({"euclidean"})


@dataclass(frozen=True)
class SubstitutionConfig:
    """
    Defaults and limits for substitution requests.

    Attributes:
        default_k: Neighbour count used when a request omits ``k``.
            Defaults to 5.
        max_k: Upper bound on ``k`` accepted from untrusted callers
            (the HTTP layer). Defaults to 50.
        metric: Distance metric for neighbour search. Only "euclidean".

    Example:
        >>> config = SubstitutionConfig(default_k=8)
        >>> session = ChordSession(config=config)
    """

    default_k: int = 5
    max_k: int = 50
    metric: str = "euclidean"

    def __post_init__(self) -> None:
        """Validate configuration parameters."""
        if self.default_k < 0:
            raise ValueError(f"default_k must be non-negative, got {self.default_k}")
        if self.max_k < self.default_k:
            raise ValueError(
                f"max_k ({self.max_k}) must be >= default_k ({self.default_k})"
            )
        if self.metric not in VALID_METRICS:
            raise ValueError(
                f"Unknown metric {self.metric!r}, valid options: {sorted(VALID_METRICS)}"
            )


DEFAULT_CONFIG = SubstitutionConfig()
"""Default configuration: k=5, max k=50, euclidean metric."""
