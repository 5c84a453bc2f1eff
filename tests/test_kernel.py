"""
Unit tests for the squared-exponential image kernel.

Run with: pytest tests/ -v
"""

import numpy as np
import pytest

from gpgaze.config import KernelConfig
from gpgaze.models.errors import DimensionMismatchError
from gpgaze.models.kernel import SquaredExponentialKernel, image_distance


class TestImageDistance:
    """Tests for the squared L2 image distance."""

    def test_identical_images(self, make_image):
        """Test distance of an image to itself is zero."""
        image = make_image(42)

        assert image_distance(image, image) == 0.0

    def test_sum_of_squared_differences(self):
        """Test distance is the sum of squared per-pixel differences."""
        a = np.array([[0.0, 1.0], [2.0, 3.0]])
        b = np.array([[1.0, 1.0], [0.0, 0.0]])

        assert image_distance(a, b) == pytest.approx(1.0 + 0.0 + 4.0 + 9.0)

    def test_shape_mismatch(self):
        """Test comparing images of different sizes fails."""
        with pytest.raises(DimensionMismatchError):
            image_distance(np.zeros((4, 4)), np.zeros((4, 5)))


class TestSquaredExponentialKernel:
    """Tests for SquaredExponentialKernel."""

    @pytest.fixture
    def kernel(self):
        """Kernel with default hyperparameters."""
        return SquaredExponentialKernel(KernelConfig())

    def test_defaults(self):
        """Test default hyperparameters."""
        kernel = SquaredExponentialKernel()

        assert kernel.sigma == 2.0
        assert kernel.length_scale == 2000.0

    def test_self_similarity_is_signal_variance(self, kernel, random_images):
        """Test k(a, a) == sigma^2."""
        for image in random_images:
            assert kernel(image, image) == pytest.approx(4.0)

    def test_known_value(self):
        """Test the formula against a hand-computed value."""
        kernel = SquaredExponentialKernel(KernelConfig(sigma=1.0, length_scale=1.0))

        # d = 4, so k = exp(-4 / 2)
        assert kernel(np.zeros((2, 2)), np.ones((2, 2))) == pytest.approx(np.exp(-2.0))

    def test_symmetry(self, kernel, random_images):
        """Test k(a, b) == k(b, a)."""
        for a in random_images:
            for b in random_images:
                assert kernel(a, b) == kernel(b, a)

    def test_self_similarity_is_maximal(self, kernel, random_images):
        """Test k(a, a) >= k(a, b) for any b."""
        for a in random_images:
            for b in random_images:
                assert kernel(a, a) >= kernel(a, b)
                assert kernel(a, b) >= 0.0

    def test_gram_matrix(self, kernel, random_images):
        """Test Gram matrix entries match pairwise kernel values."""
        gram = kernel.gram(random_images)

        assert gram.shape == (5, 5)
        np.testing.assert_allclose(gram, gram.T)
        np.testing.assert_allclose(np.diag(gram), 4.0)
        assert gram[1, 3] == pytest.approx(kernel(random_images[1], random_images[3]))

    def test_cross_vector(self, kernel, random_images):
        """Test kernel vector between a query and the training images."""
        vector = kernel.cross(random_images[2], random_images)

        assert vector.shape == (5,)
        assert vector[2] == pytest.approx(4.0)
        assert vector[0] == pytest.approx(kernel(random_images[2], random_images[0]))

    def test_cross_shape_mismatch(self, kernel, random_images):
        """Test a query of the wrong size is rejected."""
        with pytest.raises(DimensionMismatchError):
            kernel.cross(np.zeros((8, 8)), random_images)

    def test_gram_mixed_shapes(self, kernel):
        """Test training images of mixed sizes are rejected."""
        with pytest.raises(DimensionMismatchError):
            kernel.gram([np.zeros((4, 4)), np.zeros((5, 5))])

    @pytest.mark.parametrize("sigma,length_scale", [(0.0, 2000.0), (2.0, -1.0)])
    def test_invalid_hyperparameters(self, sigma, length_scale):
        """Test non-positive hyperparameters are rejected."""
        with pytest.raises(ValueError):
            SquaredExponentialKernel(KernelConfig(sigma=sigma, length_scale=length_scale))


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
