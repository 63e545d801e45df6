import json
from datetime import date
from pathlib import Path

import pytest

from energy_dashboard.errors import DashboardLoadError
from energy_dashboard.services.ingestion_service import (
    detect_entity_metrics_version,
    detect_prediction_results_version,
    load_dashboard_data,
    load_dataset_from_csv,
    load_entity_metrics_from_csv,
    load_geo_features_from_json,
    load_prediction_results_from_csv,
    load_train_test_from_json,
)
from energy_dashboard.settings import Settings


DATASET_HEADER = (
    "IdEmpresa,Año,IdMes,Energía Facturada (MWh),temperatura,precipitacion,"
    "PIB_mensual_interpolado,COSTO_CANASTA,INGRESO_FAMILIAR_MENSUAL"
)


def _write(path: Path, header: str, rows: list[str]) -> Path:
    path.write_text("\n".join([header] + rows), encoding="utf-8")
    return path


def _write_assets(root: Path) -> None:
    _write(root / "df_dataset_unidos5.csv", DATASET_HEADER, [
        "11,2023,1,1500.5,16.2,120.0,20000000,520.1,450.0",
        "12,2023,2,900.0,,80.0,19000000,510.0,440.0",
    ])
    (root / "metricas_modelo.json").write_text(json.dumps({
        "train": {"mse": 4.0, "rmse": 2.0, "mae": 1.5, "r2": 0.95},
        "test": {"mse": 9.0, "rmse": 3.0, "mae": 2.5, "r2": 0.9},
    }), encoding="utf-8")
    _write(root / "resultado_modelo.csv", "fecha,IdEmpresa,y_true,y_pred", [
        "2023-02-01,11,100.0,90.0",
        "2023-01-01,11,110.0,105.0",
    ])
    _write(root / "metrics_by_company.csv",
           "IdEmpresa,NombreEmpresa,N_Puntos,Consumo_Promedio,RMSE,MAE,R2,Error_Relativo_Porcentual", [
               "11,Empresa Norte,24,1500.0,50.0,40.0,0.91,3.2",
               "12,Empresa Sur,24,900.0,30.0,20.0,0.85,4.1",
           ])
    (root / "data_train_test_20250601_175314.json").write_text(json.dumps({
        "X_train_original": {"IdEmpresa": [11]},
        "y_train_original": [1.0, 2.0],
        "y_test_original": [3.0],
        "y_pred_train": [1.1, 1.9],
        "y_pred_test": [2.8],
    }), encoding="utf-8")
    (root / "mapa.json").write_text(json.dumps({
        "type": "FeatureCollection",
        "name": "mapa",
        "features": [
            {"type": "Feature", "properties": {"IDSISDAT": 11, "Arco_Nombr": "Norte", "Regional": "R1"},
             "geometry": {"type": "Point", "coordinates": [-78.5, -0.2]}},
            {"type": "Feature", "properties": {"IDSISDAT": 12, "Arco_Nombr": "Sur"}, "geometry": None},
        ],
    }), encoding="utf-8")


def test_load_dataset_maps_columns_and_blank_cells(tmp_path):
    _write_assets(tmp_path)
    rows = load_dataset_from_csv(tmp_path / "df_dataset_unidos5.csv")

    assert len(rows) == 2
    assert rows[0].entity_id == 11
    assert rows[0].energy_mwh == pytest.approx(1500.5)
    assert rows[0].household_income == pytest.approx(450.0)
    assert rows[1].temperature is None


def test_load_dataset_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_dataset_from_csv(tmp_path / "missing.csv")


def test_load_dataset_missing_required_column(tmp_path):
    p = _write(tmp_path / "bad.csv", "IdEmpresa,Año,IdMes", ["1,2023,1"])
    with pytest.raises(ValueError):
        load_dataset_from_csv(p)


def test_load_dataset_rejects_invalid_month(tmp_path):
    p = _write(tmp_path / "bad_month.csv", DATASET_HEADER, ["1,2023,13,10.0,1,1,1,1,1"])
    with pytest.raises(ValueError):
        load_dataset_from_csv(p)


def test_entity_metrics_v1_layout(tmp_path):
    _write_assets(tmp_path)
    metrics, version = load_entity_metrics_from_csv(tmp_path / "metrics_by_company.csv")

    assert version == "v1"
    assert metrics[0].entity_name == "Empresa Norte"
    assert metrics[0].relative_error_pct == pytest.approx(3.2)
    assert metrics[0].schema_version == "v1"


def test_entity_metrics_v2_layout(tmp_path):
    p = _write(tmp_path / "m2.csv", "IdEmpresa,NombreEmpresa,N_Puntos,Consumo_Promedio,RMSE,MAE,MAPE", [
        "11,Empresa Norte,24,1500.0,50.0,40.0,2.7",
    ])
    metrics, version = load_entity_metrics_from_csv(p)

    assert version == "v2"
    assert metrics[0].r2 is None
    assert metrics[0].relative_error_pct == pytest.approx(2.7)


def test_prediction_results_v2_layout(tmp_path):
    _write_assets(tmp_path)
    results, version = load_prediction_results_from_csv(tmp_path / "resultado_modelo.csv")

    assert version == "v2"
    assert results[0].date == date(2023, 2, 1)
    assert results[0].actual == pytest.approx(100.0)
    assert results[0].predicted == pytest.approx(90.0)
    assert results[0].error == pytest.approx(10.0)


def test_prediction_results_v1_layout(tmp_path):
    p = _write(tmp_path / "r1.csv",
               "fecha,año,mes,IdEmpresa,valor_real,prediccion,error,error_abs,error_porcentual", [
                   "2023-01-01,2023,1,11,100.0,95.0,5.0,5.0,5.0",
               ])
    results, version = load_prediction_results_from_csv(p)

    assert version == "v1"
    assert results[0].error_pct == pytest.approx(5.0)


def test_unknown_layouts_rejected():
    with pytest.raises(ValueError):
        detect_entity_metrics_version(["IdEmpresa", "RMSE"])
    with pytest.raises(ValueError):
        detect_prediction_results_version(["fecha", "IdEmpresa"])


def test_train_test_arrays(tmp_path):
    _write_assets(tmp_path)
    data = load_train_test_from_json(tmp_path / "data_train_test_20250601_175314.json")
    assert data.y_pred_train == [1.1, 1.9]
    assert data.y_test == [3.0]


def test_train_test_length_mismatch(tmp_path):
    p = tmp_path / "tt.json"
    p.write_text(json.dumps({
        "y_train_original": [1.0], "y_test_original": [], "y_pred_train": [], "y_pred_test": [],
    }), encoding="utf-8")
    with pytest.raises(ValueError):
        load_train_test_from_json(p)


def test_geo_features_keep_geometry_and_properties(tmp_path):
    _write_assets(tmp_path)
    features = load_geo_features_from_json(tmp_path / "mapa.json")

    assert [f.entity_id for f in features] == [11, 12]
    assert features[0].name == "Norte"
    assert features[0].properties["Regional"] == "R1"
    assert features[0].geometry == {"type": "Point", "coordinates": [-78.5, -0.2]}
    assert features[1].geometry is None


def test_load_dashboard_data(tmp_path):
    _write_assets(tmp_path)
    data = load_dashboard_data(Settings(data_dir=tmp_path))

    assert len(data.dataset) == 2
    assert data.model_metrics.test.r2 == pytest.approx(0.9)
    assert data.prediction_results_version == "v2"
    assert data.entity_metrics_version == "v1"
    assert len(data.features) == 2


def test_load_dashboard_data_fails_as_a_whole(tmp_path):
    _write_assets(tmp_path)
    (tmp_path / "mapa.json").unlink()

    with pytest.raises(DashboardLoadError):
        load_dashboard_data(Settings(data_dir=tmp_path))


def test_load_dashboard_data_bad_json(tmp_path):
    _write_assets(tmp_path)
    (tmp_path / "metricas_modelo.json").write_text("{not json", encoding="utf-8")

    with pytest.raises(DashboardLoadError):
        load_dashboard_data(Settings(data_dir=tmp_path))


def test_train_test_must_be_an_object(tmp_path):
    p = tmp_path / "tt.json"
    p.write_text(json.dumps([1, 2]), encoding="utf-8")
    with pytest.raises(ValueError):
        load_train_test_from_json(p)


@pytest.mark.parametrize(
    "feature",
    [
        {"type": "Feature", "properties": {"IDSISDAT": None, "Arco_Nombr": "Norte"}, "geometry": None},
        {"type": "Feature", "properties": {"IDSISDAT": "abc"}, "geometry": None},
        ["not", "a", "feature"],
    ],
)
def test_geo_features_reject_malformed_feature(tmp_path, feature):
    p = tmp_path / "mapa.json"
    p.write_text(json.dumps({"type": "FeatureCollection", "features": [feature]}), encoding="utf-8")
    with pytest.raises(ValueError):
        load_geo_features_from_json(p)


def test_load_dashboard_data_malformed_shapes(tmp_path):
    _write_assets(tmp_path)
    (tmp_path / "data_train_test_20250601_175314.json").write_text("[1, 2]", encoding="utf-8")
    with pytest.raises(DashboardLoadError):
        load_dashboard_data(Settings(data_dir=tmp_path))

    _write_assets(tmp_path)
    (tmp_path / "mapa.json").write_text(json.dumps({
        "type": "FeatureCollection",
        "features": [{"type": "Feature", "properties": {"IDSISDAT": None}, "geometry": None}],
    }), encoding="utf-8")
    with pytest.raises(DashboardLoadError):
        load_dashboard_data(Settings(data_dir=tmp_path))
