import io

from petverse.core.logging import Logger


def test_threshold_filters_events():
    stream = io.StringIO()
    log = Logger("WARN", stream=stream)
    log.info("Hidden")
    log.warn("Shown", turn=3)
    out = stream.getvalue()
    assert "Hidden" not in out
    assert "[WARN] Shown turn=3" in out


def test_bound_logger_stamps_context_and_shares_level():
    stream = io.StringIO()
    root = Logger("INFO", stream=stream)
    child = root.bind(battle_id="demo")
    child.info("BattleStart", player=1)
    assert "BattleStart battle_id=demo player=1" in stream.getvalue()
    root.set_level("ERROR")
    assert not child.is_enabled("WARN")
