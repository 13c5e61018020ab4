from .DeferredBinding import DeferredBinding

# SimpleTree depends on the Model module and is imported from
# storm.Database.Traits.SimpleTree directly.
__all__ = [
    'DeferredBinding',
]
