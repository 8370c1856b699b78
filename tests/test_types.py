from daogame.types import ArtifactBundle, Brief, HatRole, RunLogEntry, RunResult


def _run_result_dict():
    return {
        "quality_score": 64,
        "cost": 118,
        "events": ["Clean execution window (+3 quality)", "Critical role coverage gap triggered client rejection"],
        "cid": "bafyaaaaaaaaaaaaaaaaaaaaaaaa",
        "passed": False,
        "diagnostics": {
            "seed": 424242,
            "variance": 4,
            "pass_threshold": 72,
            "runway_after_run": 422,
            "assigned_role_count": 1,
            "total_role_count": 1,
            "cost_breakdown": {"base": 38, "agents": 80, "events": 0, "total": 118},
            "score_breakdown": {
                "base": 58,
                "creativity_influence": 6,
                "speed_influence": 2,
                "reliability_penalty": 0,
                "role_coverage_bonus": 14,
                "event_modifier": 3,
                "budget_penalty": 0,
                "total": 64,
            },
        },
    }


def test_run_result_roundtrip_dict():
    data = _run_result_dict()
    result = RunResult.from_dict(data)

    assert result.events[-1].endswith("client rejection")
    assert result.diagnostics.cost_breakdown.total == result.cost
    assert result.diagnostics.score_breakdown.total == result.quality_score
    assert result.to_dict() == data


def test_hat_role_treats_empty_assignment_as_unset():
    assert HatRole.from_dict({"id": "hat-01", "name": "Builder Agent", "assigned_agent_id": ""}).assigned_agent_id is None
    assert HatRole.from_dict({"id": "hat-01", "name": "Builder Agent"}).to_dict()["assigned_agent_id"] is None


def test_brief_requirements_are_immutable_tuple():
    brief = Brief.from_dict({"id": "b", "client_name": "C", "mission": "M", "requirements": ["a", "b"]})
    assert brief.requirements == ("a", "b")
    assert brief.to_dict()["requirements"] == ["a", "b"]


def test_run_log_entry_roundtrip_with_and_without_artifacts():
    result = RunResult.from_dict(_run_result_dict())
    bundle = ArtifactBundle(
        site_title="X Recovery Console",
        public_url="https://x-autonomous.sim",
        ens_name="x.dao.eth",
        cid=result.cid,
        notes=("one", "two", "three"),
    )
    entry = RunLogEntry(run_index=0, seed=1, treasury_before=540, treasury_after=422, result=result, artifacts=bundle)
    assert RunLogEntry.from_dict(entry.to_dict()) == entry

    bare = RunLogEntry(run_index=1, seed=1, treasury_before=422, treasury_after=300, result=result)
    assert RunLogEntry.from_dict(bare.to_dict()).artifacts is None
