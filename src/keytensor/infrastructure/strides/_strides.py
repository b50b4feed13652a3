"""
Stride computation for tensor allocation, reshape and copy.

A stride is the memory step (in elements) taken when an index advances by one
along an axis. Every stride pattern produced here obeys two rules:

- an axis of size 1 has stride 0, so broadcasting is just a zero-stride axis;
- freshly computed strides are non-negative (only `COPY_STRIDES` passes
  through caller-provided negative strides, e.g. from a reversed view).

The size-1 rule is applied as a final pass shared by all policies.
"""

from __future__ import annotations

from typing import Optional, Sequence, Tuple

import numpy as np
from typing_extensions import TypeAlias

from ...domain._dtype import ElementType, element_size
from ...domain._errors import InvalidArgumentError
from ...domain._policies import MAX_AXES, StridePolicy

Shape: TypeAlias = Tuple[int, ...]
Strides: TypeAlias = Tuple[int, ...]


def _is_int(value: object) -> bool:
    return isinstance(value, (int, np.integer)) and not isinstance(
        value, (bool, np.bool_)
    )


def validate_shape(shape: Sequence[int]) -> Shape:
    """
    Check a shape and return it as a tuple of Python ints.

    Raises
    ------
    InvalidArgumentError
        If the shape has more than `MAX_AXES` axes, or any size is not a
        positive integer.
    """
    dims = tuple(shape)
    if len(dims) > MAX_AXES:
        raise InvalidArgumentError(
            "shape", dims, f"has {len(dims)} axes; at most {MAX_AXES} are supported"
        )
    for axis, size in enumerate(dims):
        if not _is_int(size) or size <= 0:
            raise InvalidArgumentError(
                "shape", dims, f"axis {axis} size must be a positive integer"
            )
    return tuple(int(d) for d in dims)


def _validate_source_strides(
    shape: Shape, source_strides: Optional[Sequence[int]], policy: StridePolicy
) -> Strides:
    if source_strides is None:
        raise InvalidArgumentError(
            "source_strides", None, f"{policy.name} requires source strides"
        )
    strides = tuple(source_strides)
    if len(strides) != len(shape):
        raise InvalidArgumentError(
            "source_strides",
            strides,
            f"expected {len(shape)} entries to match shape {shape}",
        )
    for axis, s in enumerate(strides):
        if not _is_int(s):
            raise InvalidArgumentError(
                "source_strides", strides, f"axis {axis} stride must be an integer"
            )
    return tuple(int(s) for s in strides)


def _normalized(shape: Shape) -> list[int]:
    strides = [0] * len(shape)
    step = 1
    for axis in range(len(shape) - 1, -1, -1):
        strides[axis] = step
        step *= shape[axis]
    return strides


def _keep_stride_order(shape: Shape, source: Strides) -> list[int]:
    # Most contiguous (smallest |stride|) first; ties go to the later axis.
    # Plain ints: source strides are unbounded.
    order = sorted(range(len(shape)), key=lambda a: (abs(source[a]), -a))

    strides = [0] * len(shape)
    step = 1
    for axis in order:
        if shape[axis] == 1:
            continue
        strides[axis] = step
        step *= shape[axis]
    return strides


def compute_strides(
    shape: Sequence[int],
    policy: StridePolicy = StridePolicy.NORMALIZED,
    source_strides: Optional[Sequence[int]] = None,
) -> Strides:
    """
    Compute the stride pattern for a tensor of `shape` under `policy`.

    Parameters
    ----------
    shape : Sequence[int]
        Axis sizes; each must be positive. `()` denotes a scalar.
    policy : StridePolicy, optional
        - NORMALIZED: row-major strides, last non-unit axis contiguous.
        - KEEP_STRIDE_ORDER: compact non-negative strides ranked like
          `source_strides` by magnitude.
        - COPY_STRIDES: `source_strides` verbatim.
    source_strides : Sequence[int], optional
        Required for KEEP_STRIDE_ORDER and COPY_STRIDES; ignored otherwise.

    Returns
    -------
    tuple[int, ...]
        One stride per axis; every size-1 axis has stride 0.

    Raises
    ------
    InvalidArgumentError
        On an invalid shape, missing or mismatched `source_strides`, or an
        unknown policy.

    Examples
    --------
    >>> compute_strides((2, 3, 4))
    (12, 4, 1)
    >>> compute_strides((5, 1))
    (1, 0)
    """
    dims = validate_shape(shape)

    if policy is StridePolicy.NORMALIZED:
        strides = _normalized(dims)
    elif policy is StridePolicy.KEEP_STRIDE_ORDER:
        strides = _keep_stride_order(
            dims, _validate_source_strides(dims, source_strides, policy)
        )
    elif policy is StridePolicy.COPY_STRIDES:
        strides = list(_validate_source_strides(dims, source_strides, policy))
    else:
        raise InvalidArgumentError("policy", policy, "unknown stride policy")

    for axis, size in enumerate(dims):
        if size == 1:
            strides[axis] = 0
    return tuple(strides)


def num_elements(shape: Sequence[int]) -> int:
    """Number of elements in a tensor of `shape` (1 for a scalar)."""
    return int(np.prod(validate_shape(shape), dtype=np.int64))


def storage_span(shape: Sequence[int], strides: Sequence[int]) -> int:
    """
    Number of elements between the lowest and highest addressed element,
    inclusive, for a layout with the given strides.

    This is the storage size an allocator must provide for `COPY_STRIDES`
    layouts with non-negative strides.
    """
    dims = validate_shape(shape)
    steps = _validate_source_strides(dims, strides, StridePolicy.COPY_STRIDES)
    return 1 + sum((size - 1) * abs(step) for size, step in zip(dims, steps))


def storage_nbytes(
    shape: Sequence[int], strides: Sequence[int], dtype: ElementType
) -> int:
    """Bytes spanned by the layout; `dtype` must be concrete."""
    return storage_span(shape, strides) * element_size(dtype)


def is_contiguous(shape: Sequence[int], strides: Sequence[int]) -> bool:
    """
    True if `strides` describe a compact row-major layout of `shape`.

    Strides of size-1 axes are ignored.
    """
    dims = validate_shape(shape)
    steps = _validate_source_strides(dims, strides, StridePolicy.COPY_STRIDES)
    normalized = compute_strides(dims, StridePolicy.NORMALIZED)
    return all(
        size == 1 or step == expected
        for size, step, expected in zip(dims, steps, normalized)
    )
