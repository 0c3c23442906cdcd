import numpy as np
import pytest
from pydantic import ValidationError

from pcsimp.core.errors import MissingParameter, TypeMismatch
from pcsimp.core.params import CORES, EPS, ParameterDict, SimpParams, get_param, has_param


def test_has_param_and_last_write_wins() -> None:
    params = ParameterDict()
    assert not has_param(params, "cores")
    params["cores"] = 2
    params["cores"] = 8
    assert params.has("cores")
    assert len(params) == 1
    assert get_param(params, "cores", int) == 8


def test_get_without_default_requires_key() -> None:
    params = ParameterDict()
    with pytest.raises(MissingParameter):
        get_param(params, "eps", float)
    with pytest.raises(KeyError):
        params.get_as("eps", float)


def test_get_with_default() -> None:
    params = ParameterDict(eps=0.5)
    assert get_param(params, "cores", int, 3) == 3
    assert get_param(params, "eps", float, 1.0) == 0.5
    with pytest.raises(TypeMismatch):
        get_param(params, "eps", int, 1)


def test_type_mismatch_is_detected() -> None:
    params = ParameterDict({"cores": "4", "flag": True, "count": 1})
    with pytest.raises(TypeMismatch):
        get_param(params, "cores", int)
    with pytest.raises(TypeMismatch):
        get_param(params, "flag", int)
    with pytest.raises(TypeMismatch):
        get_param(params, "count", bool)
    with pytest.raises(TypeError):
        params.get_as("count", str)
    assert get_param(params, "flag", bool) is True


def test_plain_dict_is_accepted() -> None:
    assert get_param({"name": "mls"}, "name", str) == "mls"
    with pytest.raises(TypeError):
        ParameterDict()[3] = 1  # type: ignore[index]


def test_iteration_is_by_name() -> None:
    params = ParameterDict(b=1, a=2)
    assert list(params) == ["a", "b"]


def test_simp_params_defaults() -> None:
    p = SimpParams()
    assert p.cores == 1
    assert p.eps == float(np.finfo(np.float32).eps)
    assert SimpParams(dtype="float64").eps == float(np.finfo(np.float64).eps)


def test_simp_params_are_immutable() -> None:
    p = SimpParams(cores=4)
    assert p.cores == 4
    with pytest.raises(ValidationError):
        p.cores = 2  # type: ignore[misc]
    assert p.cores == 4


def test_simp_params_validation() -> None:
    with pytest.raises(ValidationError):
        SimpParams(cores=0)
    with pytest.raises(ValidationError):
        SimpParams(eps=-1.0)
    with pytest.raises(ValidationError):
        SimpParams(dtype="int8")  # type: ignore[arg-type]


def test_simp_params_round_trip_through_dictionary() -> None:
    p = SimpParams.from_params(ParameterDict({CORES: 6, EPS: 1e-6}))
    assert (p.cores, p.eps) == (6, 1e-6)
    assert SimpParams.from_params({}) == SimpParams()
    assert p.to_params()[CORES] == 6
    with pytest.raises(TypeMismatch):
        SimpParams.from_params({CORES: 2.0})
