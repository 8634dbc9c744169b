from linear_app.core.classifiers import (
    assignee_label,
    creator_label,
    cycle_label,
    infer_issue_type,
    priority_label,
    severity_label,
    state_type_label,
    team_label,
)
from linear_app.core.models import CycleRef, IssueModel, PersonRef, StateRef


def _issue(**kwargs):
    return IssueModel(id="i1", title="t", created=None, updated=None, **kwargs)


def test_infer_type_priority_order():
    assert infer_issue_type(_issue(labels=["Feature", "Bug report"])) == "bug"
    assert infer_issue_type(_issue(labels=["chore", "new-feature"])) == "feature"
    assert infer_issue_type(_issue(labels=["Chores"])) == "chore"
    assert infer_issue_type(_issue(labels=["docs"])) == "other"
    assert infer_issue_type(_issue()) == "other"


def test_severity_exact_match_wins():
    assert severity_label(_issue(labels=["severity: low", "MAJOR"])) == "Major"


def test_severity_marker_with_embedded_level():
    assert severity_label(_issue(labels=["Severity-Critical"])) == "Critical"
    assert severity_label(_issue(labels=["sev:minor"])) == "Minor"


def test_severity_colon_tail_and_raw_fallback():
    assert severity_label(_issue(labels=["severity: S2"])) == "S2"
    assert severity_label(_issue(labels=["sev1"])) == "sev1"
    assert severity_label(_issue(labels=["sev:"])) == "sev:"


def test_severity_unknown_without_marker():
    assert severity_label(_issue(labels=["bug"])) == "Unknown"
    assert severity_label(_issue()) == "Unknown"


def test_priority_mapping():
    assert priority_label(_issue(priority=0)) == "Urgent"
    assert priority_label(_issue(priority=1)) == "High"
    assert priority_label(_issue(priority=4)) == "No Priority"
    assert priority_label(_issue(priority=None)) == "No Priority"
    assert priority_label(_issue(priority=7)) == "P7"
    assert priority_label(_issue(priority=2.0)) == "Medium"
    assert priority_label(_issue(priority=float("nan"))) == "No Priority"


def test_bucket_labels_have_placeholders():
    bare = _issue()
    assert state_type_label(bare) == "unknown"
    assert assignee_label(bare) == "Unassigned"
    assert creator_label(bare) == "Unknown"
    assert team_label(bare) == "Unknown"
    assert cycle_label(bare) == "No cycle"


def test_bucket_labels_from_fields():
    issue = _issue(
        state=StateRef(id="s", name="In Progress", type="started"),
        assignee=PersonRef("u1", "Alice"),
        creator=PersonRef("u2", "Bob"),
        team="Core",
        cycle=CycleRef("c1", number=4, name=None),
    )
    assert state_type_label(issue) == "started"
    assert assignee_label(issue) == "Alice"
    assert creator_label(issue) == "Bob"
    assert team_label(issue) == "Core"
    assert cycle_label(issue) == "Cycle 4"
    issue.cycle = CycleRef("c1", number=4, name="Sprint 4")
    assert cycle_label(issue) == "Sprint 4"
