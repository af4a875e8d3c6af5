from settings import IngestSettings, load_settings


def test_defaults_when_no_file(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    assert load_settings() == IngestSettings()


def test_missing_explicit_file_uses_defaults(tmp_path):
    assert load_settings(tmp_path / "absent.yaml") == IngestSettings()


def test_load_values(tmp_path):
    path = tmp_path / "ingest.yaml"
    path.write_text(
        "store_path: data/inv.json\n"
        "max_workers: 8\n"
        "file_patterns: '*.pdf'\n"
        "save_parsed_json: false\n",
        encoding="utf-8",
    )
    settings = load_settings(path)

    assert settings.store_path == "data/inv.json"
    assert settings.max_workers == 8
    assert settings.file_patterns == ["*.pdf"]
    assert settings.save_parsed_json is False
    assert settings.output_dir == "output"


def test_unknown_keys_are_ignored(tmp_path):
    path = tmp_path / "ingest.yaml"
    path.write_text("colour: blue\nlog_level: DEBUG\n", encoding="utf-8")
    settings = load_settings(path)

    assert settings.log_level == "DEBUG"
    assert not hasattr(settings, "colour")


def test_invalid_yaml_uses_defaults(tmp_path):
    path = tmp_path / "ingest.yaml"
    path.write_text("store_path: [unclosed\n", encoding="utf-8")
    assert load_settings(path) == IngestSettings()


def test_non_mapping_uses_defaults(tmp_path):
    path = tmp_path / "ingest.yaml"
    path.write_text("- a\n- b\n", encoding="utf-8")
    assert load_settings(path) == IngestSettings()


def test_invalid_worker_count(tmp_path):
    path = tmp_path / "ingest.yaml"
    path.write_text("max_workers: lots\n", encoding="utf-8")
    assert load_settings(path).max_workers == 4


def test_example_config_loads():
    from pathlib import Path

    settings = load_settings(Path(__file__).parent / "config" / "ingest.yaml")
    assert settings == IngestSettings()
