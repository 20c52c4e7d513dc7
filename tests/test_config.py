import json

from conftest import pubkey
from damm_fee_tracker.config import apply_env_overrides, load_config, update_config_with_defaults, validate_config
from damm_fee_tracker.constants import DEFAULT_CONFIG


def test_missing_config_file_creates_default(tmp_path) -> None:
    path = tmp_path / "config.json"

    assert load_config(str(path)) is None
    saved = json.loads(path.read_text())
    assert saved["program_id"] == DEFAULT_CONFIG["program_id"]
    assert [pair["name"] for pair in saved["pairs"]] == [
        "USDC/SCARCE", "SOL/SCARCE", "ETH/SCARCE", "BTC/SCARCE",
    ]


def test_load_config_fills_defaults_and_applies_env(tmp_path) -> None:
    path = tmp_path / "config.json"
    path.write_text(json.dumps({"rpc_url": "http://localhost:8899", "google_sheets": {"sheet_id": "from-file"}}))

    config = load_config(str(path), environ={"GSHEET_ID": "from-env", "GOOGLE_APPLICATION_CREDENTIALS": "/tmp/sa.json"})

    assert config["rpc_url"] == "http://localhost:8899"
    assert config["token_side"] == "b"
    assert config["google_sheets"]["sheet_id"] == "from-env"
    assert config["google_sheets"]["credentials_path"] == "/tmp/sa.json"
    assert config["google_sheets"]["worksheet"] == ""

    # Defaults are persisted, env values are not
    saved = json.loads(path.read_text())
    assert saved["google_sheets"]["sheet_id"] == "from-file"
    assert saved["token_decimals"] == 6


def test_load_config_rejects_invalid_json(tmp_path) -> None:
    path = tmp_path / "config.json"
    path.write_text("{oops")
    assert load_config(str(path)) is None


def test_update_config_with_defaults_does_not_share_nested_dicts() -> None:
    config = {}
    assert update_config_with_defaults(config) is True
    config["rpc"]["max_workers"] = 1
    assert DEFAULT_CONFIG["rpc"]["max_workers"] == 4
    assert update_config_with_defaults(config) is False


def test_env_overrides_report_applied_names() -> None:
    config = {"google_sheets": {}}
    applied = apply_env_overrides(config, {"RPC_URL": "http://rpc", "DAMM_IDL_PATH": "", "UNRELATED": "x"})
    assert applied == ["RPC_URL"]
    assert config["rpc_url"] == "http://rpc"


def test_validate_config_accepts_defaults(config) -> None:
    assert validate_config(config) is True
    assert len(config["pairs"]) == 2


def test_validate_config_drops_bad_pairs(config) -> None:
    config["pairs"].append({"name": "BAD/SCARCE", "pool": "not-base58!", "position": pubkey(30)})
    config["pairs"].append({"name": "HALF/SCARCE", "pool": pubkey(31)})

    assert validate_config(config) is True
    assert [pair["name"] for pair in config["pairs"]] == ["USDC/SCARCE", "SOL/SCARCE"]


def test_validate_config_rejects_invalid_settings(config) -> None:
    assert validate_config(dict(config, rpc_url="")) is False
    assert validate_config(dict(config, program_id="nope")) is False
    assert validate_config(dict(config, token_side="c")) is False
    assert validate_config(dict(config, token_decimals=-1)) is False
    assert validate_config(dict(config, token_decimals=True)) is False
    assert validate_config(dict(config, pairs=[])) is False
    assert validate_config(dict(config, pairs=[{"name": "X", "pool": "bad", "position": "bad"}])) is False
