from intake.services.extraction import (
    PROFILE,
    PROJECT,
    WORK_EXPERIENCE,
    classify_payload,
    dedupe_records,
    extract_records,
)


def test_project_block_in_prose():
    text = 'Nice! ```resume-json\n{"title":"Widget","technologies":["TS"]}\n``` Let\'s continue.'
    records = extract_records(text)
    assert len(records) == 1
    assert records[0].kind == PROJECT
    assert records[0].data.title == "Widget"
    assert records[0].data.technologies == ["TS"]
    assert records[0].data.description is None
    assert records[0].data.impact is None


def test_invalid_json_produces_no_records():
    assert extract_records("```resume-json\n{not valid json\n```") == []


def test_plain_text_produces_no_records():
    assert extract_records("Tell me about your last role.") == []


def test_records_follow_document_order():
    text = (
        '```json\n{"bio": "Builder"}\n```\n'
        '```resume-json\n{"company": "Acme", "role": "Engineer"}\n```\n'
        '```resume-json\n{"title": "Widget"}\n```'
    )
    assert [r.kind for r in extract_records(text)] == [PROFILE, WORK_EXPERIENCE, PROJECT]


def test_repeated_block_is_saved_once():
    block = '```resume-json\n{"company": "Acme", "role": "Engineer"}\n```'
    records = extract_records(f"{block}\nTo confirm:\n{block}")
    assert len(records) == 1


def test_dedupe_ignores_key_order_and_whitespace():
    text = (
        '```json\n{"company": "Acme", "role": "Engineer"}\n```'
        '```json\n{ "role":"Engineer","company":"Acme" }\n```'
    )
    assert len(extract_records(text)) == 1


def test_dedupe_is_case_sensitive():
    text = '```json\n{"title": "Widget"}\n``` ```json\n{"title": "widget"}\n```'
    assert [r.data.title for r in extract_records(text)] == ["Widget", "widget"]


def test_dedupe_keeps_first_seen_order():
    a = classify_payload({"title": "A"})
    b = classify_payload({"title": "B"})
    c = classify_payload({"bio": "C"})
    deduped = list(dedupe_records([a, b, classify_payload({"title": "A"}), c, b]))
    assert deduped == [a, b, c]


def test_same_data_under_different_kinds_is_kept():
    profile = classify_payload({"bio": "x"})
    project = classify_payload({"title": "x", "bio": "x"})
    assert len(list(dedupe_records([profile, project]))) == 2
