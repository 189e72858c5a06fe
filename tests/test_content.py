import pytest

from promptdoc.content import (
    SECTION_KEYS,
    default_content,
    deserialize_content,
    merge_content,
    serialize_content,
)
from promptdoc.errors import MalformedContent


@pytest.fixture
def current() -> dict:
    return {
        "sections": {
            "context": "Billing service",
            "objective": "Add invoices",
            "constraints": "No downtime",
        },
        "metadata": {
            "version": "1.0",
            "lastModified": "2026-01-01T00:00:00+00:00",
            "completeness": 40,
            "qualityScore": 55,
        },
    }


class TestMergeContent:
    def test_preserves_sections_missing_from_update(self, current):
        merged = merge_content(current, {"sections": {"objective": "Add refunds"}})
        assert merged["sections"]["context"] == "Billing service"
        assert merged["sections"]["constraints"] == "No downtime"

    def test_overwrites_sections_present_in_update(self, current):
        merged = merge_content(
            current,
            {"sections": {"objective": "Add refunds", "examples": "POST /refunds"}},
        )
        assert merged["sections"]["objective"] == "Add refunds"
        assert merged["sections"]["examples"] == "POST /refunds"

    def test_absent_update_returns_current_unchanged(self, current):
        assert merge_content(current, None) is current

    def test_empty_string_clears_section(self, current):
        merged = merge_content(current, {"sections": {"constraints": ""}})
        assert merged["sections"]["constraints"] == ""

    def test_none_value_leaves_section_alone(self, current):
        merged = merge_content(current, {"sections": {"context": None, "objective": "X"}})
        assert merged["sections"]["context"] == "Billing service"
        assert merged["sections"]["objective"] == "X"

    def test_metadata_merged_one_level_deep(self, current):
        merged = merge_content(current, {"metadata": {"completeness": 80}})
        assert merged["metadata"] == {**current["metadata"], "completeness": 80}
        assert merged["sections"] == current["sections"]

    def test_unknown_section_keys_are_accepted(self, current):
        merged = merge_content(current, {"sections": {"glossary": "SLA: service level"}})
        assert merged["sections"]["glossary"] == "SLA: service level"
        assert set(SECTION_KEYS) >= {"context", "objective"}

    def test_other_top_level_keys_are_replaced(self, current):
        current = {**current, "tags": ["a"]}
        merged = merge_content(current, {"tags": ["b", "c"]})
        assert merged["tags"] == ["b", "c"]

    def test_inputs_are_not_mutated(self, current):
        update = {"sections": {"context": "Changed"}, "metadata": {"qualityScore": 90}}
        before_sections = dict(current["sections"])
        before_metadata = dict(current["metadata"])

        merged = merge_content(current, update)
        merged["sections"]["objective"] = "mutated later"

        assert current["sections"] == before_sections
        assert current["metadata"] == before_metadata
        assert update == {"sections": {"context": "Changed"}, "metadata": {"qualityScore": 90}}

    def test_current_without_sections(self):
        merged = merge_content({}, {"sections": {"context": "A"}})
        assert merged == {"sections": {"context": "A"}}

    def test_empty_update_keeps_everything(self, current):
        assert merge_content(current, {}) == current

    @pytest.mark.parametrize(
        "current_value, update",
        [
            ("not an object", {"sections": {}}),
            ({"sections": {}}, ["not", "an", "object"]),
            ({"sections": {}}, {"sections": "context=A"}),
            ({"sections": "context=A"}, {"sections": {"context": "B"}}),
            ({"metadata": {}}, {"metadata": 3}),
        ],
    )
    def test_non_mapping_input_fails_closed(self, current_value, update):
        with pytest.raises(MalformedContent):
            merge_content(current_value, update)


class TestSerialization:
    def test_round_trip_keeps_unknown_keys(self):
        content = {
            "sections": {"context": "Café ☕", "acceptance_criteria": "All green"},
            "metadata": {"version": "1.0", "reviewer": "ops"},
            "attachments": [],
        }
        assert deserialize_content(serialize_content(content)) == content

    def test_deserialize_rejects_non_object(self):
        with pytest.raises(MalformedContent):
            deserialize_content("[1, 2, 3]")

    def test_deserialize_rejects_invalid_json(self):
        with pytest.raises(MalformedContent):
            deserialize_content("{sections:")

    def test_serialize_rejects_non_mapping(self):
        with pytest.raises(MalformedContent):
            serialize_content(["sections"])


def test_default_content_shape():
    content = default_content()
    assert content["sections"] == {}
    assert content["metadata"]["version"] == "1.0"
    assert content["metadata"]["completeness"] == 0
    assert content["metadata"]["qualityScore"] == 0
    assert "lastModified" in content["metadata"]
