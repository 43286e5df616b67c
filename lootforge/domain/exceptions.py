"""Errors produced by LootForge domain services.

Economy errors describe expected, user-facing conditions. Services return them
inside :class:`~lootforge.domain.results.Failure` instead of raising them;
``Failure.unwrap()`` raises the carried error for callers that want exceptions.
"""


class LootForgeError(RuntimeError):
    """Base class for domain exceptions."""


class EconomyError(LootForgeError):
    """A draw or craft request that was refused without changing any state."""

    kind = "economy_error"


class InsufficientBalance(EconomyError):
    kind = "insufficient_balance"

    def __init__(self, balance: float, cost: float) -> None:
        super().__init__(f"Balance {balance:g} is lower than cost {cost:g}")
        self.balance = balance
        self.cost = cost


class NoRewardsConfigured(EconomyError):
    kind = "no_rewards_configured"

    def __init__(self) -> None:
        super().__init__("Reward pool is empty")


class NoPoolForTargetTier(EconomyError):
    kind = "no_pool_for_target_tier"

    def __init__(self, tier: int) -> None:
        super().__init__(f"No rewards available for tier {tier}")
        self.tier = tier


class InsufficientSourceItems(EconomyError):
    kind = "insufficient_source_items"

    def __init__(self, source_tier: int, required: int, available: int) -> None:
        super().__init__(
            f"Trade-up needs {required} tier {source_tier} items, have {available}"
        )
        self.source_tier = source_tier
        self.required = required
        self.available = available


class RevealInProgress(EconomyError):
    """Raised when the actor asks for a new draw while a reveal is running."""

    kind = "reveal_in_progress"

    def __init__(self, state: str) -> None:
        super().__init__(f"Another draw is still {state}")
        self.state = state
