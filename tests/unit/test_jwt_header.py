from __future__ import annotations

import pytest

from golf_course_admin.auth.resolver import _bearer_token
from golf_course_admin.errors import MissingToken


def test_bearer_token_ok() -> None:
    assert _bearer_token("Bearer abc.def.ghi") == "abc.def.ghi"


@pytest.mark.parametrize("value", [None, "", "Basic xxx", "Bearer", "Bearer ", "bearer abc.def.ghi", "abc.def.ghi"])
def test_bearer_token_invalid(value) -> None:
    with pytest.raises(MissingToken):
        _bearer_token(value)
