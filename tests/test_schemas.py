from datetime import date, timezone

from app.schemas.appraisal import AppraisalRecord, EvaluationFormData, score_text
from app.schemas.assignment import Assignment
from app.schemas.common import PersonRef, split_lines
from app.schemas.cycle import Cycle
from app.schemas.dispute import Dispute
from tests.helpers import assignment, cycle, person, template


def test_entity_accepts_populated_or_bare_references():
    populated = Assignment.model_validate(assignment("a1"))
    assert populated.cycle.id == "cyc-1"
    assert populated.cycle.name == "2025 Annual"

    bare = Assignment.model_validate({"_id": "a2", "cycleId": "cyc-2", "templateId": "tpl-2"})
    assert bare.cycle.id == "cyc-2"
    assert bare.cycle.name is None
    assert bare.template.id == "tpl-2"


def test_nulls_fall_back_to_defaults():
    a = Assignment.model_validate({"_id": "a3", "status": None, "employeeProfileId": None})
    assert a.status == "NOT_STARTED"
    assert a.employee is None


def test_person_full_name():
    assert PersonRef.model_validate(person("p", "Jane", "Doe")).full_name == "Jane Doe"
    assert PersonRef.model_validate({"_id": "p"}).full_name == "Unknown"


def test_cycle_dates_and_unlinked_templates():
    c = Cycle.model_validate(
        cycle(
            templateAssignments=[
                {"templateId": None, "departmentIds": ["d1"]},
                {"templateId": {"_id": "tpl-1", "name": "Annual Review"},
                 "departmentIds": [{"_id": "d2", "name": "Ops"}, "d3"]},
            ]
        )
    )
    assert c.start_date == date(2025, 1, 1)
    assert len(c.template_assignments) == 1
    assert c.template_assignments[0].template.id == "tpl-1"
    assert c.template_assignments[0].department_ids == ["d2", "d3"]


def test_record_accepts_both_rating_shapes_and_timestamps():
    rec = AppraisalRecord.model_validate(
        {
            "_id": "r1",
            "ratings": [
                {"key": "quality", "ratingValue": 4, "comments": "Solid"},
                {"criterionKey": "teamwork", "score": 3, "comment": "OK"},
            ],
            "overallComment": "Summary",
            "strengths": "A\n\n  B  ",
            "hrPublishedAt": "2025-06-01T12:00:00Z",
        }
    )
    assert [(r.key, r.score, r.comment) for r in rec.ratings] == [
        ("quality", 4, "Solid"),
        ("teamwork", 3, "OK"),
    ]
    assert rec.manager_summary == "Summary"
    assert rec.strengths == ["A", "B"]
    assert rec.published_at.tzinfo == timezone.utc


def test_evaluation_form_data_prefers_explicit_template():
    data = EvaluationFormData.model_validate(
        {"assignment": assignment("a1"), "template": template("tpl-9", "Explicit")}
    )
    assert data.effective_template.name == "Explicit"

    fallback = EvaluationFormData.model_validate({"assignment": assignment("a1", templateId=template())})
    assert fallback.effective_template.name == "Annual Review"
    assert len(fallback.effective_template.criteria) == 2


def test_dispute_employee_name_falls_back_through_references():
    direct = Dispute.model_validate({"_id": "d1", "raisedByEmployeeId": person("p", "Ann", "Lee")})
    assert direct.employee_name == "Ann Lee"

    via_assignment = Dispute.model_validate({"_id": "d2", "assignmentId": assignment("a1")})
    assert via_assignment.employee_name == "Jane Doe"

    assert Dispute.model_validate({"_id": "d3"}).employee_name == "Unknown"


def test_split_lines_and_score_text():
    assert split_lines(None) == []
    assert split_lines(" x \n\ny") == ["x", "y"]
    assert score_text(None) == "-"
    assert score_text(4) == "4.0"


def test_rating_comment_falls_back_to_filled_key():
    rec = AppraisalRecord.model_validate(
        {"_id": "r1", "ratings": [{"key": "quality", "comment": "", "comments": "Consistent"}]}
    )
    assert rec.ratings[0].comment == "Consistent"
