from __future__ import annotations
from typing import Any, Dict, Iterator, Literal, Mapping, MutableMapping, Optional, Type, TypeVar, Union

import numpy as np
from pydantic import BaseModel, ConfigDict, Field, model_validator

from .errors import MissingParameter, TypeMismatch

T = TypeVar("T")

CORES = "cores"
EPS = "eps"

_NO_DEFAULT: Any = object()


class ParameterDict(MutableMapping[str, Any]):
    """String-keyed store of algorithm parameters.

    Values are stored as given; :meth:`get_as` checks the stored type
    against the requested one instead of coercing.
    """

    def __init__(self, *args: Any, **kwargs: Any) -> None:
        self._items: Dict[str, Any] = {}
        self.update(*args, **kwargs)

    def __getitem__(self, name: str) -> Any:
        return self._items[name]

    def __setitem__(self, name: str, value: Any) -> None:
        if not isinstance(name, str):
            raise TypeError(f"Parameter names must be strings, got {type(name).__name__}.")
        self._items[name] = value

    def __delitem__(self, name: str) -> None:
        del self._items[name]

    def __iter__(self) -> Iterator[str]:
        return iter(sorted(self._items))

    def __len__(self) -> int:
        return len(self._items)

    def __repr__(self) -> str:
        body = ", ".join(f"{k!r}: {self._items[k]!r}" for k in self)
        return f"ParameterDict({{{body}}})"

    def has(self, name: str) -> bool:
        return has_param(self, name)

    def get_as(self, name: str, type_: Type[T], default: Any = _NO_DEFAULT) -> T:
        return get_param(self, name, type_, default)


def _matches(value: Any, type_: type) -> bool:
    # bool is an int subclass in Python; keep the two apart
    if isinstance(value, (bool, np.bool_)) != (type_ is bool or type_ is np.bool_):
        return False
    return isinstance(value, type_)


def has_param(params: Mapping[str, Any], name: str) -> bool:
    return name in params


def get_param(params: Mapping[str, Any], name: str, type_: Type[T], default: Any = _NO_DEFAULT) -> T:
    """Return ``params[name]`` checked against ``type_``.

    Raises :class:`MissingParameter` if the key is absent and no default is
    given, and :class:`TypeMismatch` if the stored value is not an instance
    of ``type_``. The default itself is returned unchecked.
    """
    if name not in params:
        if default is _NO_DEFAULT:
            raise MissingParameter(f"Parameter '{name}' is not set and no default was given.")
        return default
    value = params[name]
    if not _matches(value, type_):
        raise TypeMismatch(
            f"Parameter '{name}' holds {type(value).__name__}, requested {type_.__name__}."
        )
    return value


ElementName = Literal["float32", "float64"]


def machine_epsilon(dtype: Union[str, np.dtype, type] = "float32") -> float:
    return float(np.finfo(np.dtype(dtype)).eps)


class SimpParams(BaseModel):
    """Shared settings for simplification algorithms.

    ``eps`` defaults to the machine epsilon of ``dtype``.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    cores: int = Field(default=1, gt=0)
    eps: Optional[float] = None
    dtype: ElementName = "float32"

    @model_validator(mode="before")
    @classmethod
    def _default_eps(cls, data: Any) -> Any:
        if isinstance(data, dict) and data.get("eps") is None:
            dtype = data.get("dtype", "float32")
            if dtype in ("float32", "float64"):
                data = dict(data)
                data["eps"] = machine_epsilon(dtype)
        return data

    @model_validator(mode="after")
    def _check_eps(self) -> "SimpParams":
        if self.eps is None or not self.eps > 0.0:
            raise ValueError("eps must be positive.")
        return self

    @classmethod
    def from_params(cls, params: Mapping[str, Any], dtype: ElementName = "float32") -> "SimpParams":
        cores = get_param(params, CORES, int, 1)
        eps = get_param(params, EPS, float, None)
        return cls(cores=cores, eps=eps, dtype=dtype)

    def to_params(self) -> ParameterDict:
        return ParameterDict({CORES: self.cores, EPS: self.eps})
