from ._strides import (
    compute_strides,
    is_contiguous,
    num_elements,
    storage_nbytes,
    storage_span,
    validate_shape,
)

__all__ = [
    compute_strides.__name__,
    is_contiguous.__name__,
    num_elements.__name__,
    storage_nbytes.__name__,
    storage_span.__name__,
    validate_shape.__name__,
]
