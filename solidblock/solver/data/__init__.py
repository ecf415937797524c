from .replay import ReplayBuffer, Transition

__all__ = ["ReplayBuffer", "Transition"]
