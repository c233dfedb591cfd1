"""Tests for type mapping and precision resolution"""

import pytest

from fieldgen.config import DEFAULT_DATA_TYPE_MAP
from fieldgen.database.type_mapping import DECIMAL_TYPES, TypeMapper, resolve_precision
from fieldgen.errors import UnmappedTypeError
from fieldgen.policies import PrecisionFallback


class TestTypeMapper:
    """Tests for TypeMapper"""

    def test_maps_every_configured_type(self) -> None:
        """Test that no configured type raises"""
        mapper = TypeMapper(DEFAULT_DATA_TYPE_MAP)
        for native_type, method in DEFAULT_DATA_TYPE_MAP.items():
            assert mapper.map(native_type) == method

    def test_lookup_is_case_insensitive(self) -> None:
        mapper = TypeMapper({"varchar": "string", "Double Precision": "double"})
        assert mapper.map("VARCHAR") == "string"
        assert mapper.map(" varchar ") == "string"
        assert mapper.map("double precision") == "double"

    def test_unmapped_type_carries_exact_string(self) -> None:
        """Test that unmapped types raise with the original type string"""
        mapper = TypeMapper({"int": "integer"})

        with pytest.raises(UnmappedTypeError) as exc_info:
            mapper.map("GEOMETRY")

        assert exc_info.value.native_type == "GEOMETRY"
        assert "GEOMETRY" in str(exc_info.value)

    def test_unmapped_type_is_catchable_as_base_error(self) -> None:
        from fieldgen.errors import FieldGenError

        with pytest.raises(FieldGenError):
            TypeMapper({}).map("int")

    def test_find_unmapped_keeps_order_and_drops_duplicates(self) -> None:
        mapper = TypeMapper({"int": "integer", "text": "text"})
        unmapped = mapper.find_unmapped(["int", "point", "text", "cidr", "point"])
        assert unmapped == ["point", "cidr"]

    def test_find_unmapped_empty_when_all_mapped(self) -> None:
        mapper = TypeMapper({"int": "integer"})
        assert mapper.find_unmapped(["int", "INT"]) == []


class TestResolvePrecision:
    """Tests for resolve_precision"""

    def test_decimal_with_precision_and_scale(self) -> None:
        assert resolve_precision(None, "numeric", "numeric(10,2)") == [10, 2]
        assert resolve_precision(None, "decimal", "decimal(30, 10) unsigned") == [30, 10]

    @pytest.mark.parametrize("data_type", sorted(DECIMAL_TYPES))
    def test_decimal_family_without_params_default_pair(self, data_type: str) -> None:
        """Test the [30, 10] fallback for every decimal-family type"""
        result = resolve_precision(None, data_type, data_type, fallback=PrecisionFallback.DEFAULT_PAIR)
        assert result == [30, 10]

    def test_decimal_family_without_params_none(self) -> None:
        assert resolve_precision(None, "float", "float", fallback=PrecisionFallback.NONE) == []

    def test_decimal_ignores_declared_length(self) -> None:
        assert resolve_precision(255, "double", "double") == []

    def test_positive_length(self) -> None:
        assert resolve_precision(255, "varchar", "varchar(255)") == [255]
        assert resolve_precision("64", "char", "char(64)") == [64]

    def test_zero_or_missing_length(self) -> None:
        assert resolve_precision(0, "text", "text") == []
        assert resolve_precision(None, "integer", "integer") == []
        assert resolve_precision("not-a-number", "varchar", "varchar") == []

    def test_fallback_result_is_a_copy(self) -> None:
        first = resolve_precision(None, "real", "real", fallback=PrecisionFallback.DEFAULT_PAIR)
        first.append(99)
        assert resolve_precision(None, "real", "real", fallback=PrecisionFallback.DEFAULT_PAIR) == [30, 10]

    def test_deterministic(self) -> None:
        """Test that the same inputs always give the same parameters"""
        cases = [
            (None, "numeric", "numeric(12,4)"),
            (120, "varchar", "varchar(120)"),
            (None, "decimal", "decimal"),
            (0, "blob", "blob"),
        ]
        for case in cases:
            assert resolve_precision(*case) == resolve_precision(*case)
