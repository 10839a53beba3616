"""Essay list sources."""

from hnessays.providers.essays.paulgraham_provider import PaulGrahamEssaySource

__all__ = ["PaulGrahamEssaySource"]
