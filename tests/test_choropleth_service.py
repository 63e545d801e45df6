import math

import pytest

from energy_dashboard.data_models.dataset_row import DatasetRow
from energy_dashboard.data_models.geo_feature import GeoFeature
from energy_dashboard.services.choropleth_service import (
    ChoroplethVariable,
    EntityValueLookup,
    entity_display_name,
    join_choropleth,
)


def _make_feature(entity_id: int, name: str = None) -> GeoFeature:
    return GeoFeature(
        entity_id=entity_id,
        name=name or f"Area {entity_id}",
        properties={"IDSISDAT": entity_id},
        geometry={"type": "Polygon", "coordinates": [[[0, 0], [1, 0], [1, 1], [0, 0]]]},
    )


def _make_row(entity_id: int, energy: float, temperature=None) -> DatasetRow:
    return DatasetRow(entity_id=entity_id, year=2023, month=1, energy_mwh=energy, temperature=temperature)


def test_join_example_absent_entity_gets_zero():
    features = [_make_feature(1), _make_feature(2)]
    rows = [_make_row(1, 100.0)]

    result = join_choropleth(rows, features, ChoroplethVariable.CONSUMPTION)
    values = {f.entity_id: f.value for f in result.features}

    assert values == {1: 100.0, 2: 0.0}
    assert result.domain is not None
    # domain covers entity averages only, so the zero-filled feature 2 does not
    # pull min down to 0 (DESIGN.md, "Choropleth domain vs. the worked join example")
    assert result.domain.min_value == pytest.approx(100.0)
    assert result.domain.max_value == pytest.approx(100.0)


def test_domain_spans_entity_averages():
    features = [_make_feature(1), _make_feature(2), _make_feature(3)]
    rows = [_make_row(1, 10.0), _make_row(1, 30.0), _make_row(2, 5.0)]

    result = join_choropleth(rows, features)
    assert result.domain.min_value == pytest.approx(5.0)
    assert result.domain.max_value == pytest.approx(20.0)
    assert [f.value for f in result.features] == [pytest.approx(20.0), pytest.approx(5.0), 0.0]


def test_no_rows_gives_no_domain():
    features = [_make_feature(1), _make_feature(2)]
    result = join_choropleth([], features)

    assert result.domain is None
    assert not result.has_domain
    assert all(f.value == 0.0 for f in result.features)
    assert all(math.isfinite(f.value) for f in result.features)


def test_missing_values_count_as_zero_in_average():
    features = [_make_feature(1)]
    rows = [_make_row(1, 1.0, temperature=20.0), _make_row(1, 1.0, temperature=None)]

    result = join_choropleth(rows, features, ChoroplethVariable.TEMPERATURE)
    assert result.features[0].value == pytest.approx(10.0)


def test_accepts_string_variable_and_callable():
    features = [_make_feature(1)]
    rows = [_make_row(1, 50.0, temperature=15.0)]

    by_name = join_choropleth(rows, features, "temperature")
    by_callable = join_choropleth(rows, features, lambda r: r.energy_mwh * 2)

    assert by_name.features[0].value == pytest.approx(15.0)
    assert by_callable.features[0].value == pytest.approx(100.0)


def test_geometry_and_properties_passed_through():
    feature = _make_feature(4)
    result = join_choropleth([_make_row(4, 1.0)], [feature])

    joined = result.features[0]
    assert joined.geometry is feature.geometry
    assert joined.properties == feature.properties
    assert joined.name == feature.name


def test_rows_for_entities_not_on_map_still_shape_domain():
    result = join_choropleth([_make_row(1, 10.0), _make_row(9, 90.0)], [_make_feature(1)])
    assert [f.value for f in result.features] == [pytest.approx(10.0)]
    assert result.domain.max_value == pytest.approx(90.0)


def test_entity_value_lookup_not_found_is_none():
    lookup = EntityValueLookup({1: 2.5})
    assert lookup.lookup(1) == 2.5
    assert lookup.lookup(2) is None
    assert len(lookup) == 1


def test_entity_display_name_first_match_or_fallback():
    features = [_make_feature(1, "North"), _make_feature(1, "North duplicate"), _make_feature(2, "South")]
    assert entity_display_name(features, 1) == "North"
    assert entity_display_name(features, 3) == "Entity 3"


def test_join_is_deterministic():
    features = [_make_feature(i) for i in range(5)]
    rows = [_make_row(i % 4, float(i)) for i in range(20)]
    assert join_choropleth(rows, features) == join_choropleth(rows, features)
