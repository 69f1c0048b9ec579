# Import all models here to ensure they're registered with Base
from db.models.generation_state import GenerationStateModel

__all__ = ["GenerationStateModel"]
