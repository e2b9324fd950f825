"""
Test suite for OrbitalElementSet.

Tests include:
1. Construction (array, named, from_mu) and angle normalization
2. Validation and the STRICT_VALIDATION policy
3. Immutability and snapshot substitution
4. Tolerance-aware comparison with angle wraparound
5. Batch and pandas helpers
"""

import pytest
import numpy as np
import pandas as pd

from dromos import OrbitalElementSet, OES, InvalidElements, temp_config


MU_EARTH = 398600.4418  # km³/s²


@pytest.fixture
def leo():
    """ISS-like orbit."""
    return OES(e=0.000167, a=6771.0, i=51.64, omega=0.1, w=0.1, L0=0.1)


# =============================================================================
# Construction
# =============================================================================

class TestConstruction:

    def test_array_and_named_agree(self):
        a = OES([0.1, 7000.0, 30.0, 40.0, 50.0, 60.0])
        b = OES(e=0.1, a=7000.0, i=30.0, omega=40.0, w=50.0, L0=60.0)
        assert a == b
        assert np.array_equal(a.elements, b.elements)

    def test_properties(self, leo):
        assert leo.e == 0.000167
        assert leo.a == 6771.0
        assert leo.i == 51.64
        assert leo.omega == pytest.approx(0.1)
        assert leo.w == pytest.approx(0.1)
        assert leo.L0 == pytest.approx(0.1)
        assert leo.period is None
        assert leo.degenerate is False

    def test_negative_angles_normalized(self):
        oe = OES(e=0.0167086, a=149597870.7, i=0.00005,
                 omega=-11.26064, w=102.94719, L0=100.46435)
        assert oe.omega == pytest.approx(348.73936)
        assert 0 <= oe.omega < 360

    def test_large_angles_normalized(self):
        oe = OES(e=0.1, a=7000.0, i=10.0, omega=725.0, w=360.0, L0=-0.0)
        assert oe.omega == pytest.approx(5.0)
        assert oe.w == 0.0
        assert oe.L0 == 0.0

    def test_from_mu_sets_period(self):
        oe = OrbitalElementSet.from_mu(MU_EARTH, e=0.01, a=7000.0, i=0.0,
                                       omega=0.0, w=0.0, L0=0.0)
        assert oe.period == pytest.approx(2*np.pi*np.sqrt(7000.0**3 / MU_EARTH))

    def test_missing_named_parameter(self):
        with pytest.raises(ValueError):
            OES(e=0.1, a=7000.0, i=0.0, omega=0.0, w=0.0)

    def test_unknown_named_parameter(self):
        with pytest.raises(ValueError):
            OES(e=0.1, a=7000.0, i=0.0, omega=0.0, w=0.0, L0=0.0, nu=0.0)

    def test_array_and_named_together(self):
        with pytest.raises(ValueError):
            OES([0.1, 7000.0, 0, 0, 0, 0], e=0.1)

    def test_nothing_given(self):
        with pytest.raises(ValueError):
            OES()

    def test_wrong_length(self):
        with pytest.raises(ValueError):
            OES([0.1, 7000.0, 0.0])


# =============================================================================
# Validation
# =============================================================================

class TestValidation:

    @pytest.mark.parametrize("e", [1.0, 1.2, -0.01])
    def test_eccentricity_out_of_range(self, e):
        with pytest.raises(InvalidElements):
            OES(e=e, a=7000.0, i=0.0, omega=0.0, w=0.0, L0=0.0)

    @pytest.mark.parametrize("a", [0.0, -7000.0])
    def test_non_positive_semi_major_axis(self, a):
        with pytest.raises(InvalidElements):
            OES(e=0.1, a=a, i=0.0, omega=0.0, w=0.0, L0=0.0)

    @pytest.mark.parametrize("i", [-1.0, 180.5, 270.0])
    def test_inclination_out_of_range(self, i):
        with pytest.raises(InvalidElements):
            OES(e=0.1, a=7000.0, i=i, omega=0.0, w=0.0, L0=0.0)

    def test_retrograde_equatorial_allowed(self):
        assert OES(e=0.1, a=7000.0, i=180.0, omega=0.0, w=0.0, L0=0.0).i == 180.0

    def test_bad_period(self):
        with pytest.raises(InvalidElements):
            OES(e=0.1, a=7000.0, i=0.0, omega=0.0, w=0.0, L0=0.0, period=-1.0)

    def test_nan_always_raises(self):
        with temp_config(STRICT_VALIDATION=False):
            with pytest.raises(InvalidElements):
                OES(e=np.nan, a=7000.0, i=0.0, omega=0.0, w=0.0, L0=0.0)

    def test_lenient_validation_warns(self):
        with temp_config(STRICT_VALIDATION=False):
            with pytest.warns(UserWarning, match="Eccentricity"):
                oe = OES(e=1.2, a=7000.0, i=0.0, omega=0.0, w=0.0, L0=0.0)
        assert oe.e == 1.2

    def test_validate_false_skips_checks(self):
        oe = OES([1.5, -7000.0, 0.0, 0.0, 0.0, 0.0], validate=False)
        assert oe.e == 1.5

    def test_from_mu_validate_false_skips_checks(self):
        oe = OrbitalElementSet.from_mu(398600.4418, e=1.5, a=7000.0, i=10.0,
                                       omega=0.0, w=0.0, L0=0.0, validate=False)
        assert oe.e == 1.5
        assert oe.period == pytest.approx(2 * np.pi * np.sqrt(7000.0**3 / 398600.4418))

    def test_from_mu_validate_false_without_real_period(self):
        oe = OrbitalElementSet.from_mu(398600.4418, e=0.1, a=-7000.0, i=10.0,
                                       omega=0.0, w=0.0, L0=0.0, validate=False)
        assert oe.a == -7000.0
        assert oe.period is None

    def test_from_mu_validates_by_default(self):
        with pytest.raises(InvalidElements):
            OrbitalElementSet.from_mu(398600.4418, e=1.5, a=7000.0, i=10.0,
                                      omega=0.0, w=0.0, L0=0.0)


# =============================================================================
# Immutability and substitution
# =============================================================================

class TestImmutability:

    def test_elements_read_only(self, leo):
        with pytest.raises(ValueError):
            leo.elements[0] = 0.5

    def test_input_array_not_aliased(self):
        raw = np.array([0.1, 7000.0, 10.0, 20.0, 30.0, 40.0])
        oe = OES(raw)
        raw[1] = 1.0
        assert oe.a == 7000.0

    def test_replace_returns_new_snapshot(self, leo):
        new = leo.replace(a=7000.0)
        assert new is not leo
        assert new.a == 7000.0
        assert leo.a == 6771.0
        assert new.i == leo.i

    def test_replace_period_and_flag(self, leo):
        new = leo.replace(period=5500.0, degenerate=True)
        assert new.period == 5500.0
        assert new.degenerate is True
        assert leo.period is None

    def test_replace_validates(self, leo):
        with pytest.raises(InvalidElements):
            leo.replace(e=1.0)

    def test_replace_unknown_field(self, leo):
        with pytest.raises(ValueError):
            leo.replace(nu=10.0)

    def test_copy(self, leo):
        c = leo.copy()
        assert c == leo
        assert c.elements is not leo.elements


# =============================================================================
# Derived quantities
# =============================================================================

class TestDerivedQuantities:

    def test_mean_anomaly_at_epoch(self):
        oe = OES(e=0.1, a=7000.0, i=10.0, omega=30.0, w=50.0, L0=100.0)
        assert oe.mean_anomaly_at_epoch == pytest.approx(20.0)

    def test_mean_anomaly_at_epoch_wraps(self):
        oe = OES(e=0.1, a=7000.0, i=10.0, omega=30.0, w=50.0, L0=10.0)
        assert oe.mean_anomaly_at_epoch == pytest.approx(290.0)

    def test_apsides(self):
        oe = OES(e=0.2, a=10000.0, i=10.0, omega=0.0, w=0.0, L0=0.0)
        assert oe.periapsis == pytest.approx(8000.0)
        assert oe.apoapsis == pytest.approx(12000.0)

    def test_mean_motion_and_period(self, leo):
        n = leo.mean_motion(MU_EARTH)
        assert n == pytest.approx(np.sqrt(MU_EARTH / 6771.0**3))
        assert leo.orbital_period(MU_EARTH) == pytest.approx(2*np.pi / n)

    def test_energy_and_momentum(self):
        oe = OES(e=0.5, a=20000.0, i=10.0, omega=0.0, w=0.0, L0=0.0)
        assert oe.specific_energy(MU_EARTH) == pytest.approx(-MU_EARTH / 40000.0)
        assert oe.specific_angular_momentum(MU_EARTH) == pytest.approx(
            np.sqrt(MU_EARTH * 20000.0 * 0.75))


# =============================================================================
# Comparison
# =============================================================================

class TestComparison:

    def test_wraparound_equality(self):
        a = OES(e=0.1, a=7000.0, i=10.0, omega=0.0, w=359.99999999999, L0=0.0)
        b = OES(e=0.1, a=7000.0, i=10.0, omega=0.0, w=0.0, L0=0.0)
        assert a == b
        assert a.isclose(b)

    def test_isclose_tolerances(self):
        a = OES(e=0.1, a=7000.0, i=10.0, omega=20.0, w=30.0, L0=40.0)
        b = OES(e=0.1, a=7000.001, i=10.0, omega=20.00001, w=30.0, L0=40.0)
        assert not a.isclose(b)
        assert a.isclose(b, rtol=1e-6, angle_atol=1e-4)

    def test_inequality(self, leo):
        assert leo != leo.replace(i=51.0)
        assert leo != leo.replace(degenerate=True)
        assert leo != "not elements"

    def test_hash_consistent(self, leo):
        assert hash(leo) == hash(leo.copy())
        assert len({leo, leo.copy()}) == 1

    def test_hash_matches_equality_across_wrap(self):
        a = OES(e=0.1, a=7000.0, i=10.0, omega=0.0, w=30.0, L0=40.0)
        b = OES(e=0.1, a=7000.0, i=10.0, omega=360.0 - 1e-12, w=30.0, L0=40.0)
        assert a == b
        assert hash(a) == hash(b)
        assert len({a, b}) == 1

    def test_hash_matches_equality_within_tolerance(self):
        a = OES(e=0.1, a=7000.0, i=10.0, omega=20.0, w=30.0, L0=40.0)
        b = a.replace(a=7000.0 * (1 + 1e-13), e=0.1 + 1e-15)
        assert a == b
        assert hash(a) == hash(b)


# =============================================================================
# Batch and pandas helpers
# =============================================================================

class TestBatch:

    @pytest.fixture
    def orbits(self):
        return [
            OES(e=0.1, a=7000.0, i=10.0, omega=20.0, w=30.0, L0=40.0, period=5800.0),
            OES(e=0.2, a=8000.0, i=20.0, omega=30.0, w=40.0, L0=50.0),
        ]

    def test_to_numpy(self, orbits):
        arr = OrbitalElementSet.Batch.to_numpy(orbits)
        assert arr.shape == (2, 6)
        assert arr[1, 1] == 8000.0

    def test_to_numpy_empty(self):
        assert OrbitalElementSet.Batch.to_numpy([]).shape == (0, 6)

    def test_from_numpy(self, orbits):
        arr = OrbitalElementSet.Batch.to_numpy(orbits)
        rebuilt = OrbitalElementSet.from_numpy(arr, periods=[5800.0, None])
        assert rebuilt == orbits

    def test_from_numpy_bad_shape(self):
        with pytest.raises(ValueError):
            OrbitalElementSet.from_numpy(np.zeros((3, 5)))

    def test_from_numpy_period_length(self):
        with pytest.raises(ValueError):
            OrbitalElementSet.from_numpy(np.array([[0.1, 7000.0, 0, 0, 0, 0]]),
                                         periods=[1.0, 2.0])

    def test_to_dataframe(self, orbits):
        df = OrbitalElementSet.Batch.to_dataframe(orbits, index=['sat1', 'sat2'])
        assert list(df.columns) == ['e', 'a', 'i', 'omega', 'w', 'L0',
                                    'period', 'degenerate']
        assert df.loc['sat1', 'period'] == 5800.0
        assert np.isnan(df.loc['sat2', 'period'])

    def test_to_dataframe_empty(self):
        df = OrbitalElementSet.Batch.to_dataframe([])
        assert isinstance(df, pd.DataFrame)
        assert len(df) == 0

    def test_to_dataframe_index_length(self, orbits):
        with pytest.raises(ValueError):
            OrbitalElementSet.Batch.to_dataframe(orbits, index=['only_one'])

    def test_dataframe_roundtrip(self, orbits):
        df = OrbitalElementSet.Batch.to_dataframe(orbits)
        rebuilt = OrbitalElementSet.from_dataframe(df)
        assert rebuilt == orbits
        assert rebuilt[1].period is None

    def test_from_dataframe_object_period_column(self):
        df = pd.DataFrame({
            'e': [0.1, 0.2], 'a': [7000.0, 8000.0], 'i': [10.0, 20.0],
            'omega': [20.0, 30.0], 'w': [30.0, 40.0], 'L0': [40.0, 50.0],
            'period': pd.Series([5800.0, None], dtype=object),
        })
        rebuilt = OrbitalElementSet.from_dataframe(df)
        assert rebuilt[0].period == 5800.0
        assert rebuilt[1].period is None

    def test_from_dataframe_missing_column(self):
        df = pd.DataFrame({'e': [0.1], 'a': [7000.0]})
        with pytest.raises(ValueError):
            OrbitalElementSet.from_dataframe(df)


# =============================================================================
# Special methods
# =============================================================================

class TestSpecialMethods:

    def test_sequence_protocol(self, leo):
        assert len(leo) == 6
        assert leo[1] == 6771.0
        assert list(leo)[0] == pytest.approx(0.000167)

    def test_str(self, leo):
        text = str(leo)
        assert "Orbital Elements" in text
        assert "unknown" in text

    def test_str_degenerate(self, leo):
        assert "degenerate" in str(leo.replace(degenerate=True))

    def test_repr(self, leo):
        assert repr(leo).startswith("OrbitalElementSet(")
