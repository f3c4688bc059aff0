import pytest

from threshold_logic.lp import pulp_available


@pytest.fixture(params=[
    pytest.param("pulp", marks=pytest.mark.skipif(not pulp_available(), reason="no MILP solver for PuLP")),
    "sat",
])
def backend(request):
    return request.param
