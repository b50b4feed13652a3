from ._options import ResolvedOptions, TensorOptions, resolve_options, with_options

__all__ = [
    ResolvedOptions.__name__,
    TensorOptions.__name__,
    resolve_options.__name__,
    with_options.__name__,
]
