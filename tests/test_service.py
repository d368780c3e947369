import pytest

from petverse.battle.service import BattleService, demo_ids
from petverse.system.settings import Settings, SettingsData


@pytest.fixture
def service(tmp_path):
    return BattleService(Settings(SettingsData(max_turns=80), tmp_path / "settings.json"))


def _doc(name, type_, **extra):
    return {"name": name, "type": type_, "level": 5, "stats": {"hp": 150, "dmg": 30, "moneyBonus": 0.5}, **extra}


def test_demo_ids_registered():
    assert demo_ids() == ["overlord_solo", "overlord_team", "team_clash", "tutorial_duel"]


def test_unknown_demo_raises(service):
    with pytest.raises(KeyError):
        service.start("nope")


def test_one_placement_demo_is_rejected(service):
    result = service.start("overlord_team", seed=1)
    assert result["outcome"] == "INVALID_TEAM"
    assert "ONE PLACEMENT" in result["error"]
    assert result["turns"] == 0
    assert service.last_session is None


def test_solo_overlord_battles(service):
    result = service.start("overlord_solo", seed=1)
    assert result["error"] is None
    assert result["outcome"] in {"PLAYER_WIN", "PLAYER_LOSS", "STALEMATE"}
    assert result["turns"] > 0
    assert len(result["player_team"]) == 1


def test_demo_runs_to_an_outcome(service):
    result = service.start("tutorial_duel", seed=3)
    assert result["outcome"] in {"PLAYER_WIN", "PLAYER_LOSS", "STALEMATE"}
    assert 0 < result["turns"] <= 80
    assert len(result["player_team"]) == 1
    assert service.last_session is not None


def test_seeded_runs_repeat(service):
    first = service.start("team_clash", seed=9)
    second = service.start("team_clash", seed=9)
    assert first["turns"] == second["turns"]
    assert first["player_team"] == second["player_team"]


def test_settings_seed_used_when_none_given(tmp_path):
    settings = Settings(SettingsData(seed=4), tmp_path / "settings.json")
    a = BattleService(settings).start("tutorial_duel")
    b = BattleService(settings).start("tutorial_duel")
    assert a["opponent_team"] == b["opponent_team"]


def test_run_pays_rewards_to_winner(service):
    result = service.run(
        [_doc("Cinder", "FIRE")],
        [_doc("Ghost", "DARK", currentHP=0)],
        base_reward={"coins": 100, "experience": 40},
    )
    assert result["outcome"] == "PLAYER_WIN"
    assert result["turns"] == 0
    assert result["rewards"] == {"coins": 150, "experience": 40, "bonusMultiplier": 1.5}
    assert result["opponent_team"][0]["currentHP"] == 0


def test_run_without_base_reward(service):
    result = service.run([_doc("Cinder", "FIRE")], [_doc("Ghost", "DARK", currentHP=0)])
    assert result["rewards"] is None
    assert result["error"] is None
