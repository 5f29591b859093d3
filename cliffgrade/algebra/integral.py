"""
Integer coercion for coefficients entering the algebra.

Every coefficient is an element of Z, so a floating point or complex input is
rejected rather than truncated.
"""

import torch


def as_integer_tensor(value, device=None) -> torch.Tensor:
    """
    Convert ``value`` to a long tensor without losing information.

    Args:
        value: Tensor, python int or nested sequence of ints
        device: Target device, or None to keep the input's device

    Returns:
        Long tensor with the shape of ``value``

    Raises:
        ValueError: if ``value`` holds floating point or complex entries
    """
    tensor = torch.as_tensor(value)
    # torch.as_tensor([]) is float32; an empty input has nothing to truncate
    if tensor.numel() and (tensor.is_floating_point() or tensor.is_complex()):
        raise ValueError(f"Coefficients must be integers, got dtype {tensor.dtype}")
    return tensor.to(device=device, dtype=torch.long)


def as_integer_scalar(value) -> int:
    """A single integer coefficient, e.g. the scalar of a scalar action."""
    tensor = as_integer_tensor(value)
    if tensor.dim() != 0:
        raise ValueError(f"Expected a scalar, got shape {tuple(tensor.shape)}")
    return int(tensor)
