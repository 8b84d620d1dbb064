"""Property tests for response normalization.

Whatever shape the server uses for a list of records (bare array, envelope,
paginated), callers see the same ``data``, and an object ``data`` is never
displaced by a sibling list. Every normalized response satisfies
the envelope invariant, and any status >= 400 yields a failure.
"""

from __future__ import annotations

import json

from hypothesis import given, settings, strategies as st

from becky_api.models.normalizer import ResponseNormalizer
from becky_api.models.responses import ApiResponse

# --- Strategies ---

resource_ids = st.from_regex(r"[a-z0-9]{1,12}", fullmatch=True)
json_scalars = st.one_of(
    st.none(),
    st.booleans(),
    st.integers(min_value=-10_000, max_value=10_000),
    st.text(max_size=20),
)
records = st.fixed_dictionaries(
    {"id": resource_ids},
    optional={"name": st.text(max_size=20), "status": json_scalars},
)
record_lists = st.lists(records, max_size=10)
list_keys = st.sampled_from(["clients", "conversations", "goals", "testimonials", "receipts"])
sibling_list_keys = st.sampled_from(
    ["clients", "conversations", "messages", "events", "goals", "milestones", "testimonials"]
)
error_statuses = st.integers(min_value=400, max_value=599)
json_values = st.recursive(
    json_scalars,
    lambda children: st.one_of(
        st.lists(children, max_size=4),
        st.dictionaries(st.text(max_size=10), children, max_size=4),
    ),
    max_leaves=20,
)

_normalizer = ResponseNormalizer()


def _parse(body: object, status: int = 200) -> ApiResponse:
    return _normalizer.parse(json.dumps(body).encode(), status)


def _assert_envelope(response: ApiResponse) -> None:
    if response.success:
        assert response.data is not None
        assert response.error is None
    else:
        assert response.error
        assert response.data is None


@settings(max_examples=100)
@given(items=record_lists, key=list_keys, total=st.integers(min_value=0, max_value=1000))
def test_list_shapes_normalize_to_same_data(items: list, key: str, total: int) -> None:
    bare = _parse(items)
    envelope = _parse({"success": True, "data": items})
    paginated = _parse({key: items, "total": total, "page": 1, "limit": 20})
    paginated_envelope = _parse({"success": True, "data": items, "total": total})

    assert bare.data == envelope.data == paginated.data == paginated_envelope.data == items
    assert paginated.total == total
    assert paginated_envelope.total == total


@settings(max_examples=100)
@given(
    record=records,
    sibling=sibling_list_keys,
    items=record_lists,
    total=st.one_of(st.none(), st.integers(min_value=0, max_value=1000)),
)
def test_object_data_wins_over_sibling_lists(
    record: dict, sibling: str, items: list, total: int | None
) -> None:
    body = {"success": True, "data": record, sibling: items}
    if total is not None:
        body["total"] = total

    response = _parse(body)

    assert response.success is True
    assert response.data == record
    assert response.total == total


@settings(max_examples=100)
@given(body=json_values, status=st.integers(min_value=200, max_value=599))
def test_envelope_invariant_holds_for_any_body(body: object, status: int) -> None:
    _assert_envelope(_parse(body, status))


@settings(max_examples=100)
@given(raw=st.binary(max_size=64), status=st.integers(min_value=200, max_value=599))
def test_envelope_invariant_holds_for_raw_bytes(raw: bytes, status: int) -> None:
    _assert_envelope(_normalizer.parse(raw, status))


@settings(max_examples=100)
@given(body=json_values, status=error_statuses)
def test_error_status_always_fails(body: object, status: int) -> None:
    response = _parse(body, status)
    assert response.success is False
