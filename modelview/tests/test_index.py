import pytest

from common.errors import ModelValidationError
from modelview.index import (CATEGORY_TABLE, CategoryRange, categorize, category_for, extract_descriptor,
                             search_descriptors)
from modelview.models import ModelDescriptor


def _descriptor(model_id, name=None, label=None, desc=None):
    name = name or f"model_{model_id}"
    return ModelDescriptor(id=model_id, name=name, label=label, desc=desc, source_name=f"{name}.json")


# extract_descriptor

def test_extract_uses_group_label():
    d = extract_descriptor("model_103.json", {"group": {"label": "Meter"}})
    assert d.id == 103
    assert d.name == "model_103"
    assert d.label == "Meter"
    assert d.desc is None
    assert d.source_name == "model_103.json"


def test_extract_prefers_top_level_label_and_desc():
    d = extract_descriptor("model_1.json", {
        "id": 1, "label": "Top", "desc": "Top desc",
        "group": {"label": "Group", "desc": "Group desc"},
    })
    assert (d.label, d.desc) == ("Top", "Top desc")


def test_extract_falls_back_to_group_desc():
    d = extract_descriptor("model_1.json", {"group": {"desc": "Group desc"}})
    assert d.desc == "Group desc"


def test_filename_id_wins_over_payload():
    assert extract_descriptor("model_12.json", {"id": 99, "group": {}}).id == 12


def test_payload_id_when_filename_has_none():
    assert extract_descriptor("custom.json", {"id": 64001, "group": {}}).id == 64001


def test_id_defaults_to_zero():
    assert extract_descriptor("custom.json", {"group": {}}).id == 0
    assert extract_descriptor("custom.json", {"id": "abc", "group": {}}).id == 0


def test_only_trailing_json_suffix_is_stripped():
    assert extract_descriptor("model_5.json", {"group": {}}).name == "model_5"
    assert extract_descriptor("model_5.json.bak", {"group": {}}).name == "model_5.json.bak"
    assert extract_descriptor("notes.yaml", {"group": {}}).name == "notes.yaml"


@pytest.mark.parametrize("document", [None, [], "text", {"id": 1}, {"id": 1, "group": None}])
def test_extract_rejects_malformed_documents(document):
    with pytest.raises(ModelValidationError):
        extract_descriptor("model_1.json", document)


# categorize

@pytest.mark.parametrize("model_id, key", [
    (0, "1-99"),
    (99, "1-99"),
    (100, "100-199"),
    (250, "200-299"),
    (799, "700-799"),
    (899, "800-899"),
    (900, "900+"),
    (64001, "900+"),
])
def test_category_boundaries(model_id, key):
    assert category_for(model_id).key == key
    assert list(categorize([_descriptor(model_id)])) == [key]


def test_categories_partition_the_input():
    descriptors = [_descriptor(i) for i in (1, 2, 101, 305, 710, 711, 65000)]
    categories = categorize(descriptors)
    members = [d for category in categories.values() for d in category.members]
    assert members == descriptors


def test_empty_categories_are_dropped_and_order_kept():
    categories = categorize([_descriptor(1), _descriptor(802), _descriptor(201)])
    assert list(categories) == ["1-99", "200-299", "800-899"]
    storage = categories["800-899"]
    assert storage.description == "Storage Models"
    assert storage.range_label == "Models 800-899"


def test_members_keep_input_order():
    first, second = _descriptor(2, name="model_2"), _descriptor(2, name="model_2_copy")
    assert categorize([first, second])["1-99"].members == [first, second]


def test_empty_input():
    assert categorize([]) == {}


def test_range_checks_both_bounds():
    meters = CategoryRange("200-299", 200, 300, "Meter Models")
    assert meters.contains(200)
    assert meters.contains(299)
    assert not meters.contains(199)
    assert not meters.contains(300)
    assert CategoryRange("900+", 900, None, "Extended").contains(10**6)


def test_negative_ids_fall_into_first_range():
    assert category_for(-1).key == "1-99"
    assert list(categorize([_descriptor(-5)])) == ["1-99"]


def test_category_table_is_contiguous():
    for previous, current in zip(CATEGORY_TABLE, CATEGORY_TABLE[1:]):
        assert previous.upper == current.lower
    assert CATEGORY_TABLE[0].lower == 0
    assert CATEGORY_TABLE[-1].upper is None


# search_descriptors

def test_search_matches_name_label_desc_and_id():
    descriptors = [
        _descriptor(1, label="Common", desc="All SunSpec compliant devices"),
        _descriptor(103, label="Inverter (Three Phase)"),
        _descriptor(201, label="Meter", desc="single phase meter"),
    ]
    assert [d.id for d in search_descriptors(descriptors, "inverter")] == [103]
    assert [d.id for d in search_descriptors(descriptors, "PHASE")] == [103, 201]
    assert [d.id for d in search_descriptors(descriptors, "sunspec")] == [1]
    assert [d.id for d in search_descriptors(descriptors, "20")] == [201]
    assert [d.id for d in search_descriptors(descriptors, "model_1")] == [1, 103]
    assert search_descriptors(descriptors, "") == descriptors
