from fieldmask.service.app import create_app

CONFIG = """
seed: 5
masking:
  - selector:
      jsonpath: "user.name"
    mask:
      constant: "anonymous"
  - selector:
      jsonpath: "mail"
    mask:
      template: "{{user.name}}@example.com"
"""


def _app(tmp_path, name="masking.yml"):
    cfg = tmp_path / name
    cfg.write_text(CONFIG)
    return create_app(str(cfg))


def test_health(tmp_path):
    app = _app(tmp_path)
    paths = {route.path for route in app.routes}
    assert "/health" in paths
    assert "/mask/json" in paths


def test_mask_single_record(tmp_path):
    app = _app(tmp_path, "single.yml")
    req = app.state.JsonReq(payload={"user": {"name": "Jean", "age": 3}, "mail": "j@x.org"})
    res = app.state.mask_json(req)
    assert res["errors"] == []
    assert res["masked_json"] == {
        "user": {"name": "anonymous", "age": 3},
        "mail": "anonymous@example.com",
    }


def test_mask_batch_reports_errors(tmp_path):
    app = _app(tmp_path, "batch.yml")
    req = app.state.JsonReq(payload=[{"mail": "a@b.c"}, {"user": {"name": "x"}, "mail": "m"}])
    res = app.state.mask_json(req)
    assert res["masked_json"][0] == {}
    assert res["masked_json"][1] == {"user": {"name": "anonymous"}, "mail": "anonymous@example.com"}
    assert [e.index for e in res["errors"]] == [0]


def test_apps_on_same_config_share_engine_and_lock(tmp_path):
    cfg = tmp_path / "shared.yml"
    cfg.write_text(CONFIG)
    first = create_app(str(cfg))
    second = create_app(str(cfg))
    assert first.state.engine is second.state.engine
    assert first.state.lock is second.state.lock
