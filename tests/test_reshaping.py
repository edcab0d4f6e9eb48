"""
Reshaping utilities — Tests.

Covers:
1. Column relabelling, identifier fusion and forward fill.
2. Sentinel normalization and literal replacement (idempotence).
3. Unpivot order and absent-row dropping.
4. Packed-field splitting, including malformed values.
5. Union-by-schema stacking and declared-key left joins.
"""

import numpy as np
import pandas as pd
import pytest

from amphibian_merge.reshaping import (
    drop_absent,
    filter_equals,
    forward_fill,
    left_join,
    lowercase_columns,
    null_sentinel,
    replace_literal,
    shared_columns,
    split_packed,
    stack_tables,
    unite_columns,
    unpivot,
)
from amphibian_merge.schemas import StructuralError


# ═══════════════════════════════════════════════════════════════════════════
# 1. Column-level transforms
# ═══════════════════════════════════════════════════════════════════════════

class TestLowercaseColumns:
    def test_labels_lowered(self):
        df = pd.DataFrame({"Park_Code": ["ACAD"], "ID": ["1"]})
        assert list(lowercase_columns(df).columns) == ["park_code", "id"]

    def test_values_untouched(self):
        df = pd.DataFrame({"Category": ["Amphibian"]})
        assert lowercase_columns(df)["category"].tolist() == ["Amphibian"]


class TestUniteColumns:
    def test_concatenates_with_separator(self):
        df = pd.DataFrame({"record": ["ACAD", "ACAD"], "id": ["1", "2"]})
        out = unite_columns(df, "record_id", ["record", "id"], sep="-")
        assert out["record_id"].tolist() == ["ACAD-1", "ACAD-2"]

    def test_source_columns_replaced_in_place(self):
        df = pd.DataFrame({
            "park": ["ACAD"], "record": ["ACAD"], "id": ["1"], "other": ["x"],
        })
        out = unite_columns(df, "record_id", ["record", "id"])
        assert list(out.columns) == ["park", "record_id", "other"]

    def test_absent_component_written_as_na(self):
        df = pd.DataFrame({"record": ["ACAD"], "id": [np.nan]})
        out = unite_columns(df, "record_id", ["record", "id"])
        assert out["record_id"].tolist() == ["ACAD-NA"]

    def test_existing_target_rejected(self):
        df = pd.DataFrame({"record": ["A"], "id": ["1"], "record_id": ["x"]})
        with pytest.raises(StructuralError):
            unite_columns(df, "record_id", ["record", "id"])

    def test_missing_source_column(self):
        df = pd.DataFrame({"record": ["A"]})
        with pytest.raises(StructuralError) as exc_info:
            unite_columns(df, "record_id", ["record", "id"], source="ACAD.txt")
        assert exc_info.value.column == "id"
        assert "ACAD.txt" in str(exc_info.value)


class TestForwardFill:
    @pytest.fixture
    def taxonomy(self):
        return pd.DataFrame({
            "order": ["Anura", np.nan, np.nan, "Caudata", np.nan],
            "family": [np.nan, np.nan, "Ranidae", np.nan, "Plethodontidae"],
        })

    def test_fills_from_previous_row(self, taxonomy):
        out = forward_fill(taxonomy, ["order"])
        assert out["order"].tolist() == ["Anura", "Anura", "Anura", "Caudata", "Caudata"]

    def test_leading_absent_run_stays_absent(self, taxonomy):
        out = forward_fill(taxonomy, ["family"])
        assert out["family"].isna().tolist()[:2] == [True, True]
        assert out["family"].tolist()[2:] == ["Ranidae", "Ranidae", "Plethodontidae"]

    def test_present_values_never_overwritten(self, taxonomy):
        out = forward_fill(taxonomy, ["order", "family"])
        for col in ("order", "family"):
            present = taxonomy[col].notna()
            assert out.loc[present, col].tolist() == taxonomy.loc[present, col].tolist()

    def test_input_not_modified(self, taxonomy):
        before = taxonomy.copy()
        forward_fill(taxonomy, ["order", "family"])
        pd.testing.assert_frame_equal(taxonomy, before)

    def test_follows_row_order_not_index_labels(self):
        df = pd.DataFrame({"order": ["Anura", np.nan]}, index=[5, 2])
        out = forward_fill(df, ["order"])
        assert out["order"].tolist() == ["Anura", "Anura"]
        assert list(out.index) == [0, 1]


# ═══════════════════════════════════════════════════════════════════════════
# 2. Sentinels and literal replacement
# ═══════════════════════════════════════════════════════════════════════════

class TestNullSentinel:
    def test_listed_columns_only(self):
        df = pd.DataFrame({
            "occurrence": ["NA", "Present"],
            "seasonality": ["NA", "Breeder"],
        })
        out = null_sentinel(df, ["occurrence"], "NA")
        assert out["occurrence"].isna().tolist() == [True, False]
        assert out["seasonality"].tolist() == ["NA", "Breeder"]

    def test_exact_match_only(self):
        df = pd.DataFrame({"abundance": ["NAN", "na", "NA ", "NA"]})
        out = null_sentinel(df, ["abundance"], "NA")
        assert out["abundance"].tolist()[:3] == ["NAN", "na", "NA "]
        assert pd.isna(out["abundance"].iloc[3])

    def test_existing_absent_kept(self):
        df = pd.DataFrame({"abundance": [np.nan, "Rare"]})
        out = null_sentinel(df, ["abundance"], "NA")
        assert out["abundance"].isna().tolist() == [True, False]


class TestReplaceLiteral:
    @pytest.fixture
    def names(self):
        return pd.DataFrame({"scientific_name": ["Rana.aurora", "A.b.c", "Plain name", np.nan]})

    def test_dot_becomes_space(self, names):
        out = replace_literal(names, "scientific_name", ".", " ")
        assert out["scientific_name"].tolist()[:3] == ["Rana aurora", "A b c", "Plain name"]
        assert pd.isna(out["scientific_name"].iloc[3])

    def test_dot_is_literal_not_pattern(self):
        df = pd.DataFrame({"scientific_name": ["abc"]})
        out = replace_literal(df, "scientific_name", ".", " ")
        assert out["scientific_name"].tolist() == ["abc"]

    def test_idempotent(self, names):
        once = replace_literal(names, "scientific_name", ".", " ")
        twice = replace_literal(once, "scientific_name", ".", " ")
        pd.testing.assert_frame_equal(once, twice)
        assert not once["scientific_name"].dropna().str.contains(".", regex=False).any()


class TestFilterEquals:
    def test_case_sensitive(self):
        df = pd.DataFrame({"category": ["Amphibian", "amphibian", np.nan]})
        out = filter_equals(df, {"category": "Amphibian"})
        assert out["category"].tolist() == ["Amphibian"]


# ═══════════════════════════════════════════════════════════════════════════
# 3. Unpivot
# ═══════════════════════════════════════════════════════════════════════════

class TestUnpivot:
    def test_row_count(self, wide_records):
        long = unpivot(wide_records, ["record_id"], "scientific_name", "oasr")
        assert len(long) == 2 * 3
        assert list(long.columns) == ["record_id", "scientific_name", "oasr"]

    def test_row_major_order(self, wide_records):
        long = unpivot(wide_records, ["record_id"], "scientific_name", "oasr")
        assert long["record_id"].tolist() == ["REDW-1"] * 3 + ["REDW-2"] * 3
        assert long["scientific_name"].tolist()[:3] == [
            "Rana.aurora", "Taricha.granulosa", "Dicamptodon.tenebrosus",
        ]

    def test_values_follow_labels(self, wide_records):
        long = unpivot(wide_records, ["record_id"], "scientific_name", "oasr")
        row = long[(long["record_id"] == "REDW-2")
                   & (long["scientific_name"] == "Taricha.granulosa")]
        assert row["oasr"].tolist() == ["Present-NA-Resident-Approved"]

    def test_missing_id_column(self, wide_records):
        with pytest.raises(StructuralError):
            unpivot(wide_records.drop(columns="record_id"), ["record_id"], "n", "v")


class TestDropAbsent:
    def test_only_target_column_matters(self):
        df = pd.DataFrame({
            "record_id": ["R1", "R2", np.nan],
            "oasr": ["a-b-c-d", np.nan, "e-f-g-h"],
        })
        out = drop_absent(df, "oasr")
        assert out["oasr"].tolist() == ["a-b-c-d", "e-f-g-h"]
        assert list(out.index) == [0, 1]


# ═══════════════════════════════════════════════════════════════════════════
# 4. Packed-field splitting
# ═══════════════════════════════════════════════════════════════════════════

FIELDS = ("occurrence", "abundance", "seasonality", "record_status")


class TestSplitPacked:
    def test_four_fields_in_place(self):
        df = pd.DataFrame({
            "record_id": ["R1"],
            "oasr": ["Present-Common-Breeder-Approved"],
            "scientific_name": ["Rana aurora"],
        })
        out = split_packed(df, "oasr", FIELDS, sep="-")
        assert list(out.columns) == ["record_id", *FIELDS, "scientific_name"]
        assert out.iloc[0][list(FIELDS)].tolist() == [
            "Present", "Common", "Breeder", "Approved",
        ]

    def test_na_parts_kept_as_text(self):
        df = pd.DataFrame({"oasr": ["NA-Rare-NA-NA"]})
        out = split_packed(df, "oasr", FIELDS)
        assert out.iloc[0].tolist() == ["NA", "Rare", "NA", "NA"]

    @pytest.mark.parametrize("value", [
        "Present-Common-Breeder",
        "Present-Common-Breeder-Approved-Extra",
        "Present",
    ])
    def test_wrong_field_count_is_fatal(self, value):
        df = pd.DataFrame({"record_id": ["R9"], "oasr": [value]})
        with pytest.raises(StructuralError) as exc_info:
            split_packed(df, "oasr", FIELDS, source="REDW_records.txt", id_column="record_id")
        err = exc_info.value
        assert err.value == value
        assert err.column == "oasr"
        assert "R9" in str(err)
        assert "REDW_records.txt" in str(err)

    def test_absent_value_is_fatal(self):
        df = pd.DataFrame({"oasr": ["a-b-c-d", np.nan]})
        with pytest.raises(StructuralError):
            split_packed(df, "oasr", FIELDS)

    def test_empty_table(self):
        df = pd.DataFrame({"record_id": pd.Series([], dtype=object),
                           "oasr": pd.Series([], dtype=object)})
        out = split_packed(df, "oasr", FIELDS)
        assert len(out) == 0
        assert list(out.columns) == ["record_id", *FIELDS]


# ═══════════════════════════════════════════════════════════════════════════
# 5. Stacking and joins
# ═══════════════════════════════════════════════════════════════════════════

class TestStackTables:
    def test_union_of_schemas(self):
        a = pd.DataFrame({"x": ["1"], "y": ["2"]})
        b = pd.DataFrame({"y": ["3"], "z": ["4"]})
        out = stack_tables([a, b])
        assert list(out.columns) == ["x", "y", "z"]
        assert out["y"].tolist() == ["2", "3"]
        assert pd.isna(out.loc[0, "z"])
        assert pd.isna(out.loc[1, "x"])

    def test_order_preserved(self):
        a = pd.DataFrame({"k": ["a1", "a2"]})
        b = pd.DataFrame({"k": ["b1"]})
        assert stack_tables([b, a])["k"].tolist() == ["b1", "a1", "a2"]

    def test_empty_list_rejected(self):
        with pytest.raises(ValueError):
            stack_tables([])


class TestLeftJoin:
    @pytest.fixture
    def left(self):
        return pd.DataFrame({"k": ["a", "b", "c"], "l": ["1", "2", "3"]})

    def test_unmatched_row_kept_with_absent_columns(self, left):
        right = pd.DataFrame({"k": ["a", "b"], "v": ["A", "B"]})
        out = left_join(left, right, on=["k"])
        assert len(out) == 3
        assert out["v"].tolist()[:2] == ["A", "B"]
        assert pd.isna(out.loc[2, "v"])

    def test_one_to_one_preserves_count(self, left):
        right = pd.DataFrame({"k": ["c", "a", "b"], "v": ["C", "A", "B"]})
        out = left_join(left, right, on=["k"])
        assert out["k"].tolist() == ["a", "b", "c"]
        assert out["v"].tolist() == ["A", "B", "C"]

    def test_one_to_many_repeats_left_row(self, left):
        right = pd.DataFrame({"k": ["b", "b"], "v": ["B1", "B2"]})
        out = left_join(left, right, on=["k"])
        assert len(out) == 4
        assert out["k"].tolist() == ["a", "b", "b", "c"]
        assert set(out.loc[out["k"] == "b", "v"]) == {"B1", "B2"}

    def test_only_declared_keys_used(self, left):
        right = pd.DataFrame({"k": ["a"], "l": ["999"], "v": ["A"]})
        out = left_join(left, right, on=["k"])
        assert list(out.columns) == ["k", "l", "v"]
        assert out["l"].tolist() == ["1", "2", "3"]
        assert out.loc[0, "v"] == "A"

    def test_missing_key_is_fatal(self, left):
        right = pd.DataFrame({"other": ["a"]})
        with pytest.raises(StructuralError) as exc_info:
            left_join(left, right, on=["k"], right_name="parks_updated.txt")
        assert "parks_updated.txt" in str(exc_info.value)

    def test_multi_column_keys(self):
        left = pd.DataFrame({"p": ["X", "X"], "s": ["a", "b"]})
        right = pd.DataFrame({"p": ["X", "Y"], "s": ["b", "a"], "v": ["1", "2"]})
        out = left_join(left, right, on=["p", "s"])
        assert pd.isna(out.loc[0, "v"])
        assert out.loc[1, "v"] == "1"

    def test_shared_columns(self, left):
        right = pd.DataFrame({"v": [], "l": [], "k": []})
        assert shared_columns(left, right) == ["k", "l"]
