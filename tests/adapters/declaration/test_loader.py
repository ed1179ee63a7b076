from __future__ import annotations

import logging
from pathlib import Path

import pytest

from apiman_cli.adapters.declaration import load_declaration
from apiman_cli.domain.reconciliation import DeclarationLoadError

DATA_DIR = Path(__file__).resolve().parents[2] / "data" / "declarations"


def test_load_yaml_declaration() -> None:
    declaration = load_declaration(
        DATA_DIR / "simple.yml", properties={"gatewayEndpoint": "http://gw:8080/api"}
    )

    gateway = declaration.system.gateways[0]
    assert gateway.name == "TheGateway"
    assert gateway.config is not None
    assert gateway.config.endpoint == "http://gw:8080/api"
    assert declaration.system.plugins[0].key == (
        "io.apiman.plugins",
        "apiman-plugins-test-policy",
        "1.2.1",
        None,
    )

    assert declaration.org is not None
    api = declaration.org.apis[0]
    assert api.initial_version == "1.0"
    assert api.published is True
    assert api.config is not None
    assert api.config["gateways"] == [{"gatewayId": "TheGateway"}]
    assert api.policies[0].name == "CachingPolicy"
    assert api.policies[0].config == {"ttl": 60}


def test_load_json_declaration() -> None:
    declaration = load_declaration(DATA_DIR / "simple.json", properties={"apiVersion": "2.1"})

    assert declaration.system.gateways == []
    assert declaration.org is not None
    api = declaration.org.apis[0]
    assert api.initial_version == "2.1"
    assert api.published is False
    assert api.config is None


def test_unknown_placeholder_is_left_verbatim() -> None:
    declaration = load_declaration(DATA_DIR / "simple.yml")

    gateway_config = declaration.system.gateways[0].config
    assert gateway_config is not None
    assert gateway_config.endpoint == "${gatewayEndpoint}"


def test_json_suffix_is_case_insensitive(tmp_path: Path) -> None:
    path = tmp_path / "declaration.JSON"
    path.write_text('{"org": {"name": "acme"}}', encoding="utf-8")

    declaration = load_declaration(path)

    assert declaration.org is not None
    assert declaration.org.name == "acme"


def test_other_suffixes_are_read_as_yaml(tmp_path: Path) -> None:
    path = tmp_path / "declaration.txt"
    path.write_text("org:\n  name: acme\n", encoding="utf-8")

    declaration = load_declaration(path)

    assert declaration.org is not None
    assert declaration.org.name == "acme"


def test_empty_file_is_an_empty_declaration(tmp_path: Path) -> None:
    path = tmp_path / "empty.yml"
    path.write_text("", encoding="utf-8")

    declaration = load_declaration(path)

    assert declaration.org is None
    assert declaration.system.gateways == []
    assert declaration.system.plugins == []


def test_unknown_keys_are_ignored(tmp_path: Path) -> None:
    path = tmp_path / "extra.yml"
    path.write_text("org:\n  name: acme\n  owner: someone\nnotes: ignored\n", encoding="utf-8")

    declaration = load_declaration(path)

    assert declaration.org is not None
    assert declaration.org.name == "acme"


def test_missing_file_raises_load_error(tmp_path: Path) -> None:
    path = tmp_path / "missing.yml"

    with pytest.raises(DeclarationLoadError, match="Unable to read declaration") as excinfo:
        load_declaration(path)

    assert excinfo.value.path == path
    assert isinstance(excinfo.value.__cause__, OSError)


def test_malformed_yaml_raises_load_error(tmp_path: Path) -> None:
    path = tmp_path / "broken.yml"
    path.write_text("org: [unclosed\n", encoding="utf-8")

    with pytest.raises(DeclarationLoadError, match="Unable to parse declaration"):
        load_declaration(path)


def test_malformed_json_raises_load_error(tmp_path: Path) -> None:
    path = tmp_path / "broken.json"
    path.write_text("{org: acme}", encoding="utf-8")

    with pytest.raises(DeclarationLoadError, match="Unable to parse declaration"):
        load_declaration(path)


def test_invalid_structure_raises_load_error(tmp_path: Path) -> None:
    path = tmp_path / "invalid.yml"
    path.write_text("org:\n  apis:\n    - name: widgets\n", encoding="utf-8")

    with pytest.raises(DeclarationLoadError, match=r"Invalid declaration \(\d+ errors\)"):
        load_declaration(path)


def test_debug_logging_shows_resolved_text(
    tmp_path: Path, caplog: pytest.LogCaptureFixture
) -> None:
    path = tmp_path / "declaration.yml"
    path.write_text("org:\n  name: ${orgName}\n", encoding="utf-8")

    with caplog.at_level(logging.DEBUG, logger="apiman_cli.adapters.declaration.loader"):
        load_declaration(path, properties={"orgName": "acme"})

    messages = [record.getMessage() for record in caplog.records]
    assert any(
        "after resolving placeholders" in message and "acme" in message for message in messages
    )


def test_empty_list_keys_mean_nothing_declared(tmp_path: Path) -> None:
    path = tmp_path / "empty-keys.yml"
    path.write_text(
        "system:\n"
        "  gateways:\n"
        "  plugins:\n"
        "org:\n"
        "  name: acme\n"
        "  apis:\n"
        "    - name: widgets\n"
        "      initialVersion: '1.0'\n"
        "      policies:\n"
        "        - name: cors-policy\n"
        "          config:\n",
        encoding="utf-8",
    )

    declaration = load_declaration(path)

    assert declaration.system.gateways == []
    assert declaration.system.plugins == []
    assert declaration.org is not None
    policy = declaration.org.apis[0].policies[0]
    assert policy.name == "cors-policy"
    assert policy.config == {}


def test_empty_apis_key_loads_org_without_apis(tmp_path: Path) -> None:
    path = tmp_path / "no-apis.yml"
    path.write_text("org:\n  name: acme\n  apis:\n", encoding="utf-8")

    declaration = load_declaration(path)

    assert declaration.org is not None
    assert declaration.org.apis == []


def test_empty_policies_key_loads_api_without_policies(tmp_path: Path) -> None:
    path = tmp_path / "no-policies.yml"
    path.write_text(
        "org:\n  name: acme\n  apis:\n    - name: widgets\n      initialVersion: '1.0'\n"
        "      policies:\n",
        encoding="utf-8",
    )

    declaration = load_declaration(path)

    assert declaration.org is not None
    assert declaration.org.apis[0].policies == []


def test_unquoted_numeric_versions_are_read_as_text(tmp_path: Path) -> None:
    path = tmp_path / "numeric.yml"
    path.write_text(
        "system:\n"
        "  plugins:\n"
        "    - groupId: io.apiman.plugins\n"
        "      artifactId: apiman-plugins-test-policy\n"
        "      version: 1.2\n"
        "org:\n"
        "  name: acme\n"
        "  apis:\n"
        "    - name: widgets\n"
        "      initialVersion: 1.0\n"
        "    - name: gadgets\n"
        "      initialVersion: 2\n",
        encoding="utf-8",
    )

    declaration = load_declaration(path)

    assert declaration.system.plugins[0].version == "1.2"
    assert declaration.org is not None
    assert [api.initial_version for api in declaration.org.apis] == ["1.0", "2"]
