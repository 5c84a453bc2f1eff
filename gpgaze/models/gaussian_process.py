"""
Gaussian Process regression over eye images.

Each regressor maps an eye image to one screen coordinate. Training builds
the Gram matrix K of the exemplar images, adds a noise term to its diagonal
and factorizes K + noise * I with a Cholesky decomposition. Prediction
returns the posterior mean

    k*^T (K + noise * I)^-1 y

for the kernel vector k* between the query and the training images. No
variance is computed; the estimator only needs point predictions.

The model is always rebuilt from scratch. With N calibration targets (small
and operator-driven) fit costs O(N^2 * pixels + N^3) and predict costs
O(N * pixels + N^2).
"""

import logging
from typing import Optional, Sequence

import numpy as np
from scipy.linalg import LinAlgError, cho_factor, cho_solve
from sklearn.base import BaseEstimator
from sklearn.utils.validation import check_is_fitted

from gpgaze.models.errors import DegenerateModelError, DimensionMismatchError
from gpgaze.models.kernel import SquaredExponentialKernel

logger = logging.getLogger(__name__)


class ImageGaussianProcess(BaseEstimator):
    """
    Kernel ridge / GP posterior-mean regressor for a single output axis.

    Attributes (after fit):
        images_: Training images the model was fit on
        labels_: Training labels, float64
        alpha_: (K + noise * I)^-1 @ labels_
        factor_: Cholesky factor of the regularized Gram matrix
        noise_: Noise term used for this fit

    Example:
        gp = ImageGaussianProcess(kernel=kernel, noise=0.01)
        gp.fit(right_images, x_labels)
        x = gp.predict(right_eye)
    """

    def __init__(self, kernel: Optional[SquaredExponentialKernel] = None, noise: float = 0.01):
        self.kernel = kernel
        self.noise = noise

    def fit(
        self,
        images: Sequence[np.ndarray],
        labels: Sequence[float],
        noise: Optional[float] = None,
    ) -> "ImageGaussianProcess":
        """
        Fit the regressor on a set of exemplar images.

        Args:
            images: N training images of identical shape
            labels: N target values, positionally aligned with images
            noise: Diagonal regularization; defaults to the constructor value

        Returns:
            self

        Raises:
            DegenerateModelError: If there are no exemplars, the label count
                does not match, or K + noise * I is numerically singular
            DimensionMismatchError: If the training images differ in shape
        """
        noise = self.noise if noise is None else noise
        kernel = self.kernel if self.kernel is not None else SquaredExponentialKernel()

        images = [np.asarray(image, dtype=np.float64) for image in images]
        labels = np.asarray(labels, dtype=np.float64).ravel()

        if len(images) == 0:
            raise DegenerateModelError("Cannot fit a Gaussian Process without exemplars")
        if len(images) != labels.shape[0]:
            raise DegenerateModelError(
                f"Got {len(images)} images but {labels.shape[0]} labels"
            )
        if not np.isfinite(noise) or noise < 0:
            raise DegenerateModelError(f"Noise must be a non-negative number, got {noise}")

        gram = kernel.gram(images)
        gram[np.diag_indices_from(gram)] += noise

        try:
            factor = cho_factor(gram, lower=True, check_finite=True)
        except (LinAlgError, ValueError) as e:
            raise DegenerateModelError(
                f"Regularized kernel matrix is singular (N={len(images)}, noise={noise})"
            ) from e

        alpha = cho_solve(factor, labels)
        if not np.all(np.isfinite(alpha)):
            raise DegenerateModelError(
                f"Regularized kernel matrix is ill-conditioned (N={len(images)}, noise={noise})"
            )

        self.kernel_ = kernel
        self.images_ = images
        self.labels_ = labels
        self.noise_ = float(noise)
        self.factor_ = factor
        self.alpha_ = alpha

        logger.debug("Fitted Gaussian Process on %d exemplars (noise=%s)", len(images), noise)
        return self

    def predict(self, query: np.ndarray) -> float:
        """
        Posterior mean for a novel image.

        Args:
            query: Image with the same shape as the training images

        Returns:
            Predicted coordinate

        Raises:
            NotFittedError: If called before fit
            DimensionMismatchError: If the query shape differs from the training set
        """
        check_is_fitted(self, "alpha_")
        query = np.asarray(query, dtype=np.float64)
        if query.shape != self.images_[0].shape:
            raise DimensionMismatchError(
                f"Query image shape {query.shape} does not match "
                f"training image shape {self.images_[0].shape}"
            )
        k_star = self.kernel_.cross(query, self.images_)
        return float(k_star @ self.alpha_)

    @property
    def n_exemplars(self) -> int:
        """Number of exemplars in the fitted model (0 if unfitted)."""
        return len(getattr(self, "images_", ()))
