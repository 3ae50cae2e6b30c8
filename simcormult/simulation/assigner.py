"""
Utility Maximization Assigner
=============================

Random utility maximization (McFadden, 1974): for subject i at occasion t

    U_itj = eta_itj + e_itj,    Y_it = argmax_j U_itj

With independent maximum-extreme-value e_itj, P(Y_it = j) is the softmax of
eta_it, i.e. the baseline-category logit probability. Ties (possible only
for supplied latent values) go to the smallest category index.
"""

import numpy as np

from simcormult.exceptions import LatentMatrixDimensionMismatch


def assign_responses(lin_pred: np.ndarray, latent: np.ndarray,
                     clsize: int, ncategories: int) -> np.ndarray:
    """
    Convert systematic utilities and latent noise into nominal responses.

    Args:
        lin_pred: (R, clsize * ncategories) utility baselines
        latent: (R, clsize * ncategories) latent noise
        clsize: Number of occasions T
        ncategories: Number of categories J

    Returns:
        (R, clsize) integer array with values in 1..ncategories
    """
    if latent.shape != lin_pred.shape:
        raise LatentMatrixDimensionMismatch(lin_pred.shape, latent.shape)

    n_subjects = lin_pred.shape[0]
    utilities = (lin_pred + latent).reshape(n_subjects, clsize, ncategories)

    # np.argmax returns the first maximal index
    return np.argmax(utilities, axis=2).astype(int) + 1
