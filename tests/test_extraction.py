import logging
from typing import Any, override

import pytest
from hypothesis import given
from hypothesis import strategies as st

from form_paths.codecs import DEFAULT_REGISTRY, Codec
from form_paths.errors import DecodeError, DuplicateCodecTagError, MalformedPathError, UnknownCodecError
from form_paths.extraction import UNSET, Accumulator, extract, is_empty_value


class _UpperCodec(Codec):
    tag = "upper"

    @override
    def decode_value(self, raw: Any) -> str:
        return raw.upper()


class _Upload:
    def __init__(self, filename: str, payload: bytes) -> None:
        self.filename = filename
        self.size = len(payload)
        self.payload = payload


SURVEY_BAG = [
    ("settings.mode", "dark"),
    ("settings.theme", "blue"),
    ("favouriteFrameworks[0].name", "Go"),
    ("favouriteFrameworks[0].satisfaction:number", "9"),
    ("profile.firstname", ""),
]


def test_extract_survey_scenario() -> None:
    result = extract(SURVEY_BAG)

    expected = {
        "settings": {"mode": "dark", "theme": "blue"},
        "favouriteFrameworks": [{"name": "Go", "satisfaction": 9.0}],
        "profile": {},
    }
    assert result.combined == expected
    assert result.fields == expected
    assert result.files == {}
    assert result.issues == ()
    assert result.ok


def test_extract_accepts_mapping_input() -> None:
    result = extract({"user.name": "Ada", "user.age:number": "36"})
    assert result.combined == {"user": {"name": "Ada", "age": 36.0}}


def test_extract_typed_scalars() -> None:
    result = extract([("newsletter:boolean", "on"), ("birthday:date", "1990-02-03")])
    assert result.combined["newsletter"] is True
    assert result.combined["birthday"].isoformat() == "1990-02-03"


def test_extract_empty_values_do_not_clear_accumulated_values() -> None:
    accumulator = Accumulator()
    _ = extract([("profile.firstname", "Ada")], accumulator=accumulator)
    result = extract([("profile.firstname", ""), ("profile.avatar", b"")], accumulator=accumulator)

    assert result.combined == {"profile": {"firstname": "Ada"}}
    assert result.files == {}


def test_extract_empty_values_are_absent_from_every_view() -> None:
    result = extract([("a", ""), ("b", None), ("c", b""), ("d", _Upload("", b""))])
    assert result.combined == {}
    assert result.fields == {}
    assert result.files == {}
    assert result.ok


def test_extract_empty_append_entry_does_not_claim_a_slot() -> None:
    result = extract([("tags[]", ""), ("tags[]", "a"), ("items[].name", "")])
    assert result.combined == {"tags": ["a"], "items": []}


def test_extract_accumulates_disjoint_steps() -> None:
    accumulator = Accumulator()
    _ = extract([("step1.name", "Ada")], accumulator=accumulator)
    result = extract([("step2.age:number", "36")], accumulator=accumulator)

    assert result.combined == {"step1": {"name": "Ada"}, "step2": {"age": 36.0}}
    assert accumulator.data == result.combined


def test_extract_overlapping_keys_take_latest_value() -> None:
    accumulator = Accumulator()
    _ = extract([("user.name", "Ada"), ("user.city", "London")], accumulator=accumulator)
    result = extract([("user.name", "Grace")], accumulator=accumulator)

    assert result.combined == {"user": {"name": "Grace", "city": "London"}}


def test_extract_views_are_detached_from_accumulator() -> None:
    accumulator = Accumulator()
    result = extract([("user.name", "Ada")], accumulator=accumulator)
    result.combined["user"]["name"] = "changed"
    assert accumulator.data == {"user": {"name": "Ada"}}


def test_extract_append_numbering_resets_per_call() -> None:
    bag = [("items[]", "a"), ("items[]", "b")]
    assert extract(bag).combined == {"items": ["a", "b"]}
    assert extract(bag).combined == {"items": ["a", "b"]}

    accumulator = Accumulator()
    _ = extract(bag, accumulator=accumulator)
    assert extract(bag, accumulator=accumulator).combined == {"items": ["a", "b"]}


def test_extract_append_numbering_is_scoped_per_prefix() -> None:
    result = extract(
        [
            ("a[]", "x"),
            ("b[]", "y"),
            ("a[]", "z"),
            ("grid[0][]", "g00"),
            ("grid[1][]", "g10"),
            ("grid[0][]", "g01"),
        ]
    )
    assert result.combined == {"a": ["x", "z"], "b": ["y"], "grid": [["g00", "g01"], ["g10"]]}


def test_extract_append_with_chained_fields_uses_one_counter_per_prefix() -> None:
    result = extract([("people[].name", "Ada"), ("people[].name", "Grace")])
    assert result.combined == {"people": [{"name": "Ada"}, {"name": "Grace"}]}


def test_extract_index_gaps_are_unset() -> None:
    result = extract([("items[2]", "c"), ("items[0]", "a")])
    assert result.combined == {"items": ["a", UNSET, "c"]}
    assert result.combined["items"][1] is UNSET


def test_extract_malformed_key_is_reported_without_mutation() -> None:
    accumulator = Accumulator()
    result = extract([("[0].x", "value")], accumulator=accumulator)

    assert accumulator.data == {}
    assert result.combined == {}
    assert len(result.issues) == 1
    issue = result.issues[0]
    assert issue.key == "[0].x"
    assert isinstance(issue.error, MalformedPathError)
    assert issue.kind == "MalformedPathError"
    assert not result.ok


def test_extract_bad_entries_do_not_abort_the_pass() -> None:
    result = extract(
        [
            ("before", "1"),
            ("nickname:upper", "ada"),
            ("age:number", "old"),
            ("a[x]", "2"),
            ("after", "3"),
        ]
    )

    assert result.combined == {"before": "1", "after": "3"}
    assert [type(issue.error) for issue in result.issues] == [UnknownCodecError, DecodeError, MalformedPathError]


def test_extract_non_string_key_is_reported() -> None:
    result = extract([(3, "x"), ("ok", "y")])  # type: ignore[list-item]
    assert result.combined == {"ok": "y"}
    assert result.issues[0].key == "3"


def test_extract_logs_skipped_entries(caplog: pytest.LogCaptureFixture) -> None:
    with caplog.at_level(logging.WARNING, logger="form_paths.extraction.engine"):
        _ = extract([("age:number", "old")])
    assert "skipping form entry 'age:number'" in caplog.text


def test_extract_custom_codecs_apply_to_one_call() -> None:
    result = extract([("nickname:upper", "ada")], codecs=[_UpperCodec()])
    assert result.combined == {"nickname": "ADA"}
    assert "upper" not in DEFAULT_REGISTRY

    result = extract([("nickname:upper", "ada")])
    assert result.combined == {}
    assert isinstance(result.issues[0].error, UnknownCodecError)


def test_extract_duplicate_codecs_fail_before_any_entry() -> None:
    accumulator = Accumulator()
    with pytest.raises(DuplicateCodecTagError, match="duplicate codec tag 'upper'"):
        _ = extract([("name", "Ada")], codecs=[_UpperCodec(), _UpperCodec()], accumulator=accumulator)
    assert accumulator.data == {}


def test_extract_splits_fields_and_files() -> None:
    upload = _Upload("cv.pdf", b"%PDF")
    result = extract(
        [
            ("name", "Ada"),
            ("documents.cv", upload),
            ("documents.note", "see attached"),
            ("avatar:file", b"\x89PNG"),
        ]
    )

    assert result.combined == {
        "name": "Ada",
        "documents": {"cv": upload, "note": "see attached"},
        "avatar": b"\x89PNG",
    }
    assert result.fields == {"name": "Ada", "documents": {"note": "see attached"}}
    assert result.files == {"documents": {"cv": upload}, "avatar": b"\x89PNG"}


def test_extract_filtered_arrays_keep_positions() -> None:
    result = extract([("attachments[]", b"one"), ("attachments[]", "link"), ("attachments[]", b"two")])

    assert result.combined == {"attachments": [b"one", "link", b"two"]}
    assert result.fields == {"attachments": [UNSET, "link", UNSET]}
    assert result.files == {"attachments": [b"one", UNSET, b"two"]}


def test_extract_text_overwriting_file_moves_slot_to_fields() -> None:
    accumulator = Accumulator()
    _ = extract([("doc", b"blob")], accumulator=accumulator)
    result = extract([("doc", "text")], accumulator=accumulator)

    assert result.fields == {"doc": "text"}
    assert result.files == {}
    assert accumulator.binary_paths == frozenset()


def test_extract_type_mismatch_between_tag_and_value_is_reported() -> None:
    result = extract([("age:number", b"9"), ("avatar:file", "me.png")])
    assert result.combined == {}
    assert [type(issue.error) for issue in result.issues] == [DecodeError, DecodeError]


def test_extract_replaces_scalar_with_container() -> None:
    result = extract([("a", "1"), ("a.b", "2"), ("c.d", "3"), ("c", "4")])
    assert result.combined == {"a": {"b": "2"}, "c": "4"}


def test_is_empty_value() -> None:
    assert is_empty_value("")
    assert is_empty_value(None)
    assert is_empty_value(b"")
    assert is_empty_value(_Upload("x.txt", b""))
    assert not is_empty_value(" ")
    assert not is_empty_value("0")
    assert not is_empty_value(_Upload("x.txt", b"x"))
    assert not is_empty_value(object())


@given(values=st.lists(st.text(min_size=1, max_size=10), min_size=1, max_size=8))
def test_extract_append_preserves_order(values: list[str]) -> None:
    bag = [("items[]", value) for value in values]
    assert extract(bag).combined == {"items": values}


@given(
    first=st.dictionaries(st.sampled_from(["a", "b", "c", "d"]), st.text(min_size=1, max_size=5), min_size=1),
    second=st.dictionaries(st.sampled_from(["c", "d", "e", "f"]), st.text(min_size=1, max_size=5), min_size=1),
)
def test_extract_accumulation_is_a_merge(first: dict[str, str], second: dict[str, str]) -> None:
    accumulator = Accumulator()
    _ = extract({f"form.{key}": value for key, value in first.items()}, accumulator=accumulator)
    result = extract({f"form.{key}": value for key, value in second.items()}, accumulator=accumulator)

    assert result.combined == {"form": first | second}


class _SizeCodec(Codec):
    tag = "size"

    SIZES = {"s": 1, "m": 2, "l": 3}

    @override
    def decode_value(self, raw: Any) -> int:
        return self.SIZES[raw]


def test_extract_custom_codec_lookup_failure_skips_only_that_entry() -> None:
    result = extract([("shirt:size", "xl"), ("hat:size", "m"), ("name", "Ada")], codecs=[_SizeCodec()])

    assert result.combined == {"hat": 2, "name": "Ada"}
    assert len(result.issues) == 1
    assert result.issues[0].key == "shirt:size"
    assert isinstance(result.issues[0].error, DecodeError)
    assert isinstance(result.issues[0].error.__cause__, KeyError)
