"""
Tests for the shape catalog.
"""
import pytest
import numpy as np
import sys
from pathlib import Path

sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from blockfall.pieces import (
    TEMPLATES, KIND_NAMES, KIND_IDS, NUM_KINDS,
    template, create_shape, kind_by_name, random_kind, cell_count, visualize_shape,
    T, O, S, Z, L, J, I,
)


class TestCatalog:
    """Test the template library."""

    def test_seven_kinds(self):
        """There is exactly one template per kind id 1-7."""
        assert NUM_KINDS == 7
        assert KIND_IDS == [1, 2, 3, 4, 5, 6, 7]
        assert set(KIND_NAMES.values()) == {"T", "O", "S", "Z", "L", "J", "I"}

    def test_templates_tagged_with_kind_id(self):
        """Every occupied cell holds the template's own kind id."""
        for kind_id, shape in TEMPLATES.items():
            values = {int(v) for v in np.unique(shape)} - {0}
            assert values == {kind_id}

    def test_every_kind_has_four_cells(self):
        for kind_id in KIND_IDS:
            assert cell_count(kind_id) == 4

    def test_template_sizes(self):
        """Templates are square: 2x2 for O, 4x4 for I, 3x3 otherwise."""
        assert O.shape == (2, 2)
        assert I.shape == (4, 4)
        for shape in (T, S, Z, L, J):
            assert shape.shape == (3, 3)

    def test_i_occupies_second_row(self):
        assert np.array_equal(I[1], [7, 7, 7, 7])
        assert np.count_nonzero(I[[0, 2, 3]]) == 0

    def test_template_lookup(self):
        assert template(2) is O
        assert template(7) is I

    def test_unknown_kind_raises(self):
        with pytest.raises(ValueError):
            template(0)
        with pytest.raises(ValueError):
            template(8)

    def test_kind_by_name(self):
        assert kind_by_name("T") == 1
        assert kind_by_name("i") == 7
        with pytest.raises(ValueError):
            kind_by_name("X")


class TestImmutability:
    """Templates are never shared with in-play pieces."""

    def test_templates_read_only(self):
        with pytest.raises(ValueError):
            T[0, 0] = 9

    def test_create_shape_is_deep_copy(self):
        shape = create_shape(1)
        assert np.array_equal(shape, T)
        shape[0, 0] = 9
        assert T[0, 0] == 0
        assert shape.flags.writeable

    def test_create_shape_returns_new_object(self):
        assert create_shape(3) is not create_shape(3)


class TestRandomKind:
    """Test uniform piece selection."""

    def test_always_valid(self):
        rng = np.random.default_rng(0)
        for _ in range(200):
            assert random_kind(rng) in KIND_IDS

    def test_covers_all_kinds(self):
        rng = np.random.default_rng(1)
        seen = {random_kind(rng) for _ in range(500)}
        assert seen == set(KIND_IDS)

    def test_seeded_is_deterministic(self):
        a = np.random.default_rng(42)
        b = np.random.default_rng(42)
        assert [random_kind(a) for _ in range(20)] == [random_kind(b) for _ in range(20)]


class TestVisualize:
    def test_visualize_o(self):
        assert visualize_shape(O) == "□□\n□□"

    def test_visualize_t_trims_trailing(self):
        assert visualize_shape(T).split("\n") == [" □", "□□□", ""]
