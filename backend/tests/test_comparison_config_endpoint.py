from fastapi.testclient import TestClient

from maskdiff_api.main import app


def test_comparison_config_endpoint_returns_defaults_when_yaml_missing(monkeypatch, tmp_path):
    # 指到不存在的 yaml，應回退到模型預設值
    monkeypatch.setenv("COMPARISON_CONFIG_PATH", str(tmp_path / "missing.yml"))

    client = TestClient(app)
    r = client.get("/api/v1/config/comparison")
    assert r.status_code == 200, r.text
    data = r.json()

    assert data["threshold_default"] == 0.95
    assert data["max_candidates_default"] == 20


def test_comparison_config_endpoint_reflects_yaml_override(monkeypatch, tmp_path):
    yml = tmp_path / "comparison.yml"
    yml.write_text("threshold_default: 0.8\nmax_candidates_default: 5\n", encoding="utf-8")
    monkeypatch.setenv("COMPARISON_CONFIG_PATH", str(yml))

    client = TestClient(app)
    data = client.get("/api/v1/config/comparison").json()

    assert data["threshold_default"] == 0.8
    assert data["max_candidates_default"] == 5


def test_comparison_config_broken_yaml_falls_back(monkeypatch, tmp_path):
    yml = tmp_path / "comparison.yml"
    yml.write_text("threshold_default: [unclosed\n", encoding="utf-8")
    monkeypatch.setenv("COMPARISON_CONFIG_PATH", str(yml))

    client = TestClient(app)
    data = client.get("/api/v1/config/comparison").json()

    assert data["threshold_default"] == 0.95


def test_comparison_config_non_utf8_yaml_falls_back(monkeypatch, tmp_path):
    yml = tmp_path / "comparison.yml"
    yml.write_bytes(b"threshold_default: 0.8\n\xff\xfe\xfa\n")
    monkeypatch.setenv("COMPARISON_CONFIG_PATH", str(yml))

    client = TestClient(app)
    r = client.get("/api/v1/config/comparison")
    assert r.status_code == 200, r.text
    assert r.json()["threshold_default"] == 0.95


def test_comparison_config_out_of_range_yaml_falls_back(monkeypatch, tmp_path):
    yml = tmp_path / "comparison.yml"
    yml.write_text("threshold_default: 1.5\nmax_candidates_default: 5\n", encoding="utf-8")
    monkeypatch.setenv("COMPARISON_CONFIG_PATH", str(yml))

    client = TestClient(app)
    r = client.get("/api/v1/config/comparison")
    assert r.status_code == 200, r.text
    data = r.json()
    assert data["threshold_default"] == 0.95
    assert data["max_candidates_default"] == 20


def test_comparison_still_served_with_bad_yaml(monkeypatch, tmp_path):
    # 設定檔壞掉不應讓比對端點失敗
    import cv2
    import numpy as np

    yml = tmp_path / "comparison.yml"
    yml.write_text("threshold_default: -3\n", encoding="utf-8")
    monkeypatch.setenv("COMPARISON_CONFIG_PATH", str(yml))
    ok, buf = cv2.imencode(".png", np.zeros((2, 2, 3), dtype=np.uint8))
    assert ok

    client = TestClient(app)
    r = client.post(
        "/api/v1/comparisons/",
        files={
            "image1": ("a.png", buf.tobytes(), "image/png"),
            "image2": ("b.png", buf.tobytes(), "image/png"),
        },
    )
    assert r.status_code == 200, r.text
    assert r.json()["threshold"] == 0.95
