from app.decorators.metrics import timed

__all__ = ["timed"]
