from sqlalchemy import func, select

from intake.db.models import Profile, Project, WorkExperience
from intake.services.extraction import apply_records, classify_payload, union_skills
from intake.services.extraction import merge


async def _profile(db, user_id):
    return (await db.execute(select(Profile).where(Profile.user_id == user_id))).scalar_one_or_none()


async def _count(db, model, user_id):
    return (
        await db.execute(select(func.count()).select_from(model).where(model.user_id == user_id))
    ).scalar_one()


def test_union_skills_keeps_existing_first():
    assert union_skills(["Go", "Rust"], ["Rust", "SQL", "Go"]) == ["Go", "Rust", "SQL"]
    assert union_skills(None, ["a", "a"]) == ["a"]
    assert union_skills(["Go"], []) == ["Go"]


async def test_profile_is_created_on_first_write(db, user_id):
    assert await _profile(db, user_id) is None

    applied = await apply_records(db, user_id, [classify_payload({"bio": "Builder"})])

    assert applied == 1
    profile = await _profile(db, user_id)
    assert profile.bio == "Builder"
    assert profile.skills == []


async def test_profile_merge_only_touches_present_fields(db, user_id):
    await apply_records(db, user_id, [classify_payload({"bio": "A", "current_job_role": "Engineer"})])
    await apply_records(db, user_id, [classify_payload({"bio": "B"})])

    profile = await _profile(db, user_id)
    assert profile.bio == "B"
    assert profile.current_job_role == "Engineer"
    assert profile.career_summary is None


async def test_skills_are_unioned_in_either_order(session_factory):
    first = classify_payload({"skills": ["Go", "Rust"]})
    second = classify_payload({"skills": ["Rust", "SQL"]})

    async with session_factory() as db:
        await apply_records(db, "user-a", [first, second])
        await apply_records(db, "user-b", [second, first])
        await db.commit()

    async with session_factory() as db:
        a = await _profile(db, "user-a")
        b = await _profile(db, "user-b")
    assert set(a.skills) == set(b.skills) == {"Go", "Rust", "SQL"}
    assert len(a.skills) == len(b.skills) == 3


async def test_empty_skills_do_not_clear_stored_skills(db, user_id):
    await apply_records(db, user_id, [classify_payload({"skills": ["Go"]})])
    await apply_records(db, user_id, [classify_payload({"skills": [], "bio": "x"})])

    profile = await _profile(db, user_id)
    assert profile.skills == ["Go"]
    assert profile.bio == "x"


async def test_work_experience_and_projects_are_append_only(db, user_id):
    job = classify_payload({"company": "Acme", "role": "Engineer", "achievements": ["Shipped v2"]})
    project = classify_payload({"title": "Widget"})

    await apply_records(db, user_id, [job, project])
    await apply_records(db, user_id, [job, project])

    assert await _count(db, WorkExperience, user_id) == 2
    assert await _count(db, Project, user_id) == 2
    row = (await db.execute(select(Project).where(Project.user_id == user_id))).scalars().first()
    assert row.title == "Widget"
    assert row.description is None
    assert row.technologies == []


async def test_failing_record_does_not_block_the_rest(db, user_id, monkeypatch):
    async def broken_insert_project(*args, **kwargs):
        raise RuntimeError("boom")

    monkeypatch.setattr(merge, "insert_project", broken_insert_project)
    records = [
        classify_payload({"company": "Acme", "role": "Engineer"}),
        classify_payload({"title": "Widget"}),
        classify_payload({"company": "Globex", "role": "Lead"}),
    ]

    applied = await apply_records(db, user_id, records)

    assert applied == 2
    companies = (
        await db.execute(select(WorkExperience.company).where(WorkExperience.user_id == user_id))
    ).scalars().all()
    assert sorted(companies) == ["Acme", "Globex"]
    assert await _count(db, Project, user_id) == 0


async def test_writes_are_scoped_to_the_user(db):
    await apply_records(db, "owner", [classify_payload({"bio": "mine", "skills": ["Go"]})])
    await apply_records(db, "other", [classify_payload({"bio": "theirs"})])

    owner = await _profile(db, "owner")
    assert owner.bio == "mine"
    assert owner.skills == ["Go"]
    assert await _count(db, Profile, "other") == 1
