"""
Test Cursor Paginator - accumulation order, termination and page caps
"""

import json
import os
import sys
from unittest.mock import Mock

import pytest

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from adsdump.coreutils.errors import APIError, ParseError
from adsdump.extract.paginator import Paginator


def page(items, after=""):
    return json.dumps(
        {"data": items, "paging": {"cursors": {"before": "b", "after": after}}}
    ).encode()


def make_paginator(bodies, max_pages=0):
    executor = Mock()
    executor.execute.side_effect = bodies
    return Paginator(executor, max_pages=max_pages), executor


def sent_cursors(executor):
    return [c.args[1].get("after") for c in executor.execute.call_args_list]


def test_concatenates_pages_in_order():
    paginator, executor = make_paginator(
        [page([{"id": 1}, {"id": 2}], "c1"), page([{"id": 3}], "c2"), page([{"id": 4}])]
    )

    items = paginator.fetch_all("act_1/campaigns", "campaigns", params={"limit": "100"})

    assert items == [{"id": 1}, {"id": 2}, {"id": 3}, {"id": 4}]
    # one request per non-empty cursor plus the first
    assert executor.execute.call_count == 3
    assert sent_cursors(executor) == [None, "c1", "c2"]


def test_base_params_sent_with_every_page_and_not_mutated():
    paginator, executor = make_paginator([page([1], "c1"), page([2])])
    params = {"fields": "id,name", "limit": "100"}

    paginator.fetch_all("act_1/ads", "ads", params=params)

    first, second = executor.execute.call_args_list
    assert first.args == ("act_1/ads", {"fields": "id,name", "limit": "100"})
    assert second.args == ("act_1/ads", {"fields": "id,name", "limit": "100", "after": "c1"})
    assert params == {"fields": "id,name", "limit": "100"}


def test_short_page_with_cursor_keeps_going():
    paginator, executor = make_paginator([page([1], "c1"), page([2, 3])])

    assert paginator.fetch_all("act_1/ads", "ads") == [1, 2, 3]
    assert executor.execute.call_count == 2


def test_empty_page_cursor_is_still_followed():
    paginator, executor = make_paginator([page([], "c1"), page([7])])

    assert paginator.fetch_all("act_1/ads", "ads") == [7]
    assert executor.execute.call_count == 2


def test_null_cursor_and_missing_paging_terminate():
    null_cursor = json.dumps({"data": [1], "paging": {"cursors": {"after": None}}}).encode()
    paginator, executor = make_paginator([null_cursor])
    assert paginator.fetch_all("act_1/ads", "ads") == [1]

    paginator, executor = make_paginator([b'{"data": [2]}'])
    assert paginator.fetch_all("act_1/ads", "ads") == [2]
    assert executor.execute.call_count == 1


@pytest.mark.parametrize("cap", [1, 2, 3])
def test_page_cap_limits_requests(cap):
    bodies = [page([n], f"c{n}") for n in range(10)]
    paginator, executor = make_paginator(bodies, max_pages=cap)

    items = paginator.fetch_all("act_1/adsets", "adsets")

    assert executor.execute.call_count == cap
    assert items == list(range(cap))


def test_per_call_cap_overrides_default():
    bodies = [page([n], f"c{n}") for n in range(7)] + [page([7])]
    paginator, executor = make_paginator(bodies, max_pages=5)

    assert paginator.fetch_all("me/adaccounts", "accounts", max_pages=0) == list(range(8))
    assert executor.execute.call_count == 8


def test_error_propagates_with_partial_items():
    error = APIError(500, "boom")
    paginator, executor = make_paginator([page([1, 2], "c1"), error])

    with pytest.raises(APIError) as exc_info:
        paginator.fetch_all("act_1/campaigns", "campaigns")

    assert exc_info.value.partial_items == [1, 2]
    assert executor.execute.call_count == 2


def test_malformed_page_raises_parse_error():
    paginator, _ = make_paginator([page([1], "c1"), b"not json at all"])

    with pytest.raises(ParseError) as exc_info:
        paginator.fetch_all("act_1/campaigns", "campaigns")

    assert "campaigns" in str(exc_info.value)
    assert exc_info.value.partial_items == [1]


def test_wrong_shape_raises_parse_error():
    paginator, _ = make_paginator([b'{"data": {"not": "a list"}}'])

    with pytest.raises(ParseError):
        paginator.fetch_all("act_1/campaigns", "campaigns")
