import json
import logging
import logging.handlers

import pytest

from utils import load_config, setup_logging, should_log_step


@pytest.mark.parametrize(
    "step, every, expected",
    [(500, 500, True), (499, 500, False), (10, 0, False), (10, -1, False), (3, 1, True)],
)
def test_should_log_step(step, every, expected):
    assert should_log_step(step, every) is expected


@pytest.fixture
def restore_root_logger():
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    numba_level = logging.getLogger("numba").level
    yield
    for handler in root.handlers:
        handler.close()
    root.handlers[:] = handlers
    root.setLevel(level)
    logging.getLogger("numba").setLevel(numba_level)


def test_setup_logging_writes_rotating_file(tmp_path, restore_root_logger):
    log_file = tmp_path / "logs" / "walk.log"
    setup_logging({"logging": {"level": "debug", "log_file": str(log_file), "backup_count": 2}})

    root = logging.getLogger()
    assert root.level == logging.DEBUG
    rotating = [h for h in root.handlers if isinstance(h, logging.handlers.RotatingFileHandler)]
    assert len(rotating) == 1
    assert rotating[0].backupCount == 2
    assert rotating[0].maxBytes == 1024 * 1024
    assert logging.getLogger("numba").level == logging.WARNING

    logging.info("hello from the walk")
    rotating[0].flush()
    assert "hello from the walk" in log_file.read_text()


def test_setup_logging_twice_does_not_duplicate_handlers(tmp_path, restore_root_logger):
    config = {"logging": {"log_file": str(tmp_path / "walk.log")}}
    setup_logging(config)
    setup_logging(config)
    assert len(logging.getLogger().handlers) == 2


def test_load_config_round_trip(tmp_path):
    path = tmp_path / "config.json"
    path.write_text(json.dumps({"simulation_parameters": {"particle_count": 5}}))
    assert load_config(str(path))["simulation_parameters"]["particle_count"] == 5


def test_load_config_errors(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_config(str(tmp_path / "missing.json"))
    bad = tmp_path / "bad.json"
    bad.write_text("{not json")
    with pytest.raises(json.JSONDecodeError):
        load_config(str(bad))
    listing = tmp_path / "list.json"
    listing.write_text("[1, 2]")
    with pytest.raises(ValueError):
        load_config(str(listing))
