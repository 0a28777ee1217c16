from abc import ABC, abstractmethod
import numpy as np


class ColoringStrategy(ABC):
    @abstractmethod
    def channels(self, intensity: np.ndarray) -> np.ndarray:
        """Unclamped float RGBA, shape (n, 4), for normalised intensities."""
        ...

    def apply(self, intensity: np.ndarray) -> np.ndarray:
        rgba = self.channels(np.asarray(intensity, dtype=np.float64).reshape(-1))
        return np.clip(np.rint(rgba), 0, 255).astype(np.uint8)
