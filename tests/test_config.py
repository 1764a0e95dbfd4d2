from shopsvc.config import ConfigCenter, resolve_config_center


def test_defaults_kept_without_environment():
    resolved = resolve_config_center(ConfigCenter(), {})
    assert resolved.addr == "localhost:8500"
    assert resolved.path == "ecommerce/product/dev.yaml"


def test_environment_overrides_both_fields():
    config = ConfigCenter(addr="a:1", path="p.yaml")
    resolved = resolve_config_center(
        config, {"config_center": "consul.example.com:8500", "config_path": "x/y.yaml"}
    )
    assert resolved == ConfigCenter(addr="consul.example.com:8500", path="x/y.yaml")


def test_empty_environment_values_do_not_override():
    config = ConfigCenter(addr="a:1", path="p.yaml")
    resolved = resolve_config_center(config, {"config_center": "", "config_path": ""})
    assert resolved == config


def test_only_one_override():
    config = ConfigCenter(addr="a:1", path="p.yaml")
    resolved = resolve_config_center(config, {"config_path": "other.yaml"})
    assert resolved.addr == "a:1"
    assert resolved.path == "other.yaml"


def test_original_is_unchanged():
    config = ConfigCenter(addr="a:1", path="p.yaml")
    resolve_config_center(config, {"config_center": "b:2"})
    assert config.addr == "a:1"