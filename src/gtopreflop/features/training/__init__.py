"""Training feature: push/fold drills, daily challenges and range tables over HTTP."""

from .router import create_training_routers
from .service import TrainingService

__all__ = ["TrainingService", "create_training_routers"]
