import warnings
from functools import wraps

from . import compat_typing as t

# From python 3.10 this could be more succinct
# https://docs.python.org/3/library/typing.html#typing.ParamSpec
GenericFunc = t.TypeVar('GenericFunc', bound=t.Callable[..., t.Any])


def deprecated(reason: str = '') -> t.Callable[[GenericFunc], GenericFunc]:
    """Emit a DeprecationWarning with the given reason each time the method is called"""

    def decorator(func: GenericFunc) -> GenericFunc:
        @wraps(func)
        def wrapper(*args: t.Any, **kwargs: t.Any) -> t.Any:
            warnings.warn(reason or f'{func.__name__} is deprecated', category=DeprecationWarning, stacklevel=2)
            return func(*args, **kwargs)

        return t.cast(GenericFunc, wrapper)

    return decorator
