"""
Squared-exponential covariance function over eye images.

    k(a, b) = sigma^2 * exp(-d(a, b) / (2 * l^2))

where d(a, b) is the squared L2 distance between the two pixel arrays.
Identical images give k(a, a) = sigma^2, so the Gram matrix always has a
strictly positive diagonal before regularization.
"""

from typing import Optional, Sequence

import numpy as np
from scipy.spatial.distance import cdist

from gpgaze.config import KernelConfig
from gpgaze.models.errors import DimensionMismatchError


def image_distance(image1: np.ndarray, image2: np.ndarray) -> float:
    """Squared L2 norm of the per-pixel difference of two images."""
    image1 = np.asarray(image1, dtype=np.float64)
    image2 = np.asarray(image2, dtype=np.float64)
    if image1.shape != image2.shape:
        raise DimensionMismatchError(
            f"Cannot compare images of shape {image1.shape} and {image2.shape}"
        )
    diff = image1 - image2
    return float(np.sum(diff * diff))


class SquaredExponentialKernel:
    """
    Covariance function used by the Gaussian Process regressors.

    Hyperparameters are fixed for the lifetime of the instance. The same
    kernel object is shared by all four regressors of an estimator.

    Example:
        kernel = SquaredExponentialKernel(KernelConfig(sigma=2.0, length_scale=2000.0))
        similarity = kernel(right_eye, other_right_eye)
    """

    def __init__(self, kernel_config: Optional[KernelConfig] = None):
        kernel_config = kernel_config or KernelConfig()
        if kernel_config.sigma <= 0 or kernel_config.length_scale <= 0:
            raise ValueError(
                f"Kernel hyperparameters must be positive "
                f"(sigma={kernel_config.sigma}, length_scale={kernel_config.length_scale})"
            )
        self.sigma = float(kernel_config.sigma)
        self.length_scale = float(kernel_config.length_scale)

    def __repr__(self) -> str:
        return f"SquaredExponentialKernel(sigma={self.sigma}, length_scale={self.length_scale})"

    def __call__(self, image1: np.ndarray, image2: np.ndarray) -> float:
        """Similarity of two images of identical dimensions."""
        return float(self._from_distance(image_distance(image1, image2)))

    def gram(self, images: Sequence[np.ndarray]) -> np.ndarray:
        """
        Kernel matrix between all pairs of training images.

        Args:
            images: N images of identical shape

        Returns:
            Symmetric (N, N) float64 matrix with sigma^2 on the diagonal
        """
        flat = self._flatten(images)
        distances = cdist(flat, flat, metric="sqeuclidean")
        np.fill_diagonal(distances, 0.0)
        return self._from_distance(distances)

    def cross(self, query: np.ndarray, images: Sequence[np.ndarray]) -> np.ndarray:
        """Kernel vector between one query image and each training image."""
        flat = self._flatten(images)
        query = np.asarray(query, dtype=np.float64)
        if query.shape != np.shape(images[0]):
            raise DimensionMismatchError(
                f"Query image shape {query.shape} does not match "
                f"training image shape {np.shape(images[0])}"
            )
        distances = cdist(query.reshape(1, -1), flat, metric="sqeuclidean")
        return self._from_distance(distances[0])

    def _from_distance(self, distance):
        return self.sigma ** 2 * np.exp(-distance / (2.0 * self.length_scale ** 2))

    @staticmethod
    def _flatten(images: Sequence[np.ndarray]) -> np.ndarray:
        shapes = {np.shape(image) for image in images}
        if len(shapes) > 1:
            raise DimensionMismatchError(f"Training images have mixed shapes: {sorted(shapes)}")
        return np.stack([np.asarray(image, dtype=np.float64).ravel() for image in images])
